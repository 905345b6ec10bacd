"""LSP transport for the IntelliJ language server.

The server runs inside the IDE and listens on a TCP port; this client only
connects to it. Besides request/response correlation it dispatches
server-pushed notifications to registered handlers, and answers the few
server-to-client requests the IDE sends with an empty result.
"""

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from idea_lsp.locations import path_to_uri
from idea_lsp.lsp.protocol import BINARY, JSONRPCProtocol
from idea_lsp.utils.logging_utils import Logger

NotificationHandler = Callable[[Any], None]

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_REQUEST_TIMEOUT = 30.0


class LSPClient:
    """Connection to a running IntelliJ LSP server.

    Lifecycle:
    1. connect() opens the TCP stream and starts the reader task
    2. the caller configures the channel (handlers, coding mode)
    3. initialize() runs the LSP handshake
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        project_dir: Optional[str] = None,
        request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
    ):
        """Initialize LSP client.

        Args:
            host: Host the IDE's LSP server listens on
            port: TCP port of the LSP server
            project_dir: Project root sent as rootUri during initialize
            request_timeout: Seconds to wait for a response, None waits forever
        """
        self.host = host
        self.port = port
        self.project_dir = Path(project_dir) if project_dir else None
        self.request_timeout = request_timeout
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.request_id = 0
        self.pending_requests: Dict[int, asyncio.Future] = {}
        self.notification_handlers: Dict[str, NotificationHandler] = {}
        self.open_files: set = set()
        self.protocol = JSONRPCProtocol()
        self.server_capabilities: Dict[str, Any] = {}
        self._reader_task: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        """True while the stream is open and the reader is still running."""
        return (
            self.writer is not None
            and not self.writer.is_closing()
            and self._reader_task is not None
            and not self._reader_task.done()
        )

    async def connect(self):
        """Open the connection to the server."""
        if self.writer is not None:
            return  # Already connected

        self.reader, self.writer = await asyncio.open_connection(self.host, self.port)
        self._reader_task = asyncio.create_task(self._read_stream())
        Logger.instance().info(f"connected to LSP server at {self.host}:{self.port}")

    async def initialize(self):
        """Run the initialize/initialized handshake."""
        root_uri = path_to_uri(str(self.project_dir)) if self.project_dir else None

        result = await self.send_request(
            "initialize",
            {
                "processId": None,
                "rootUri": root_uri,
                "capabilities": {
                    "textDocument": {
                        "hover": {"contentFormat": ["markdown", "plaintext"]},
                        "definition": {"linkSupport": False},
                        "implementation": {"linkSupport": False},
                        "references": {},
                    },
                    "workspace": {},
                },
            },
        )
        self.server_capabilities = (result or {}).get("capabilities", {})

        await self.send_notification("initialized", {})

    async def stop(self, graceful: bool = True):
        """Shut the session down and close the connection.

        The server process keeps running; it belongs to the IDE. With
        graceful=False the shutdown/exit exchange is skipped.
        """
        if self.writer is None:
            return

        if graceful and self.is_connected:
            try:
                await self.send_request("shutdown", None)
                await self.send_notification("exit", None)
            except (RuntimeError, TimeoutError, ConnectionError) as e:
                Logger.instance().warning(f"LSP shutdown failed: {e}")

        if self._reader_task:
            self._reader_task.cancel()
            try:
                await self._reader_task
            except asyncio.CancelledError:
                pass
            self._reader_task = None

        self.writer.close()
        try:
            await self.writer.wait_closed()
        except ConnectionError:
            pass

        self.reader = None
        self.writer = None
        self.open_files.clear()
        self.protocol.clear()
        for future in self.pending_requests.values():
            if not future.done():
                future.cancel()
        self.pending_requests.clear()

    # ═══════════════════════════════════════════════════════════════════
    # Channel configuration
    # ═══════════════════════════════════════════════════════════════════

    def register_notification_handler(self, method: str, handler: NotificationHandler):
        """Route server notifications for ``method`` to ``handler``.

        Handlers run inline in the reader task, so they must not block or
        send requests. Each method takes a single handler.
        """
        if method in self.notification_handlers:
            raise ValueError(f"Notification handler already registered: {method}")
        self.notification_handlers[method] = handler

    def set_binary_mode(self):
        """Pass bytes through unchanged in both directions."""
        self.protocol.set_coding(BINARY, BINARY)

    async def ensure_file_open(self, file_path: str) -> bool:
        """Send didOpen for ``file_path`` unless already sent.

        Returns:
            True if file was newly opened, False if already open
        """
        uri = path_to_uri(file_path)

        if uri in self.open_files:
            return False

        try:
            with open(file_path, "r", encoding="utf-8", errors="replace") as f:
                content = f.read()
        except OSError as e:
            raise RuntimeError(f"Failed to read file {file_path}: {e}")

        await self.send_notification(
            "textDocument/didOpen",
            {
                "textDocument": {
                    "uri": uri,
                    "languageId": self._get_language_id(file_path),
                    "version": 1,
                    "text": content,
                }
            },
        )

        self.open_files.add(uri)
        return True

    # ═══════════════════════════════════════════════════════════════════
    # Communication
    # ═══════════════════════════════════════════════════════════════════

    async def send_request(self, method: str, params: Any) -> Any:
        """Send JSON-RPC request and wait for response."""
        self.request_id += 1
        request_id = self.request_id

        request = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params,
        }

        future = asyncio.get_running_loop().create_future()
        self.pending_requests[request_id] = future

        try:
            await self._write_message(request)
            return await asyncio.wait_for(future, timeout=self.request_timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(f"LSP request timed out: {method}")
        finally:
            self.pending_requests.pop(request_id, None)

    async def send_notification(self, method: str, params: Any):
        """Send JSON-RPC notification (no response expected)."""
        notification = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
        }
        await self._write_message(notification)

    async def _write_message(self, message: dict):
        """Write a JSON-RPC message to the connection."""
        if self.writer is None:
            raise RuntimeError("LSP server not connected")

        self.writer.write(self.protocol.encode(message))
        await self.writer.drain()

    async def _read_stream(self):
        """Background task: read the connection and dispatch messages."""
        try:
            while self.reader is not None:
                data = await self.reader.read(4096)
                if not data:
                    break

                for msg in self.protocol.feed(data):
                    self._handle_message(msg)

        except asyncio.CancelledError:
            pass
        except (ConnectionError, ValueError) as e:
            Logger.instance().error(f"LSP reader error: {e}")
        finally:
            for future in self.pending_requests.values():
                if not future.done():
                    future.set_exception(RuntimeError("LSP connection closed"))

    def _handle_message(self, message: Dict[str, Any]):
        """Handle incoming JSON-RPC message."""
        if "method" not in message:
            self._handle_response(message)
        elif "id" in message:
            self._handle_server_request(message)
        else:
            self._handle_notification(message)

    def _handle_response(self, message: Dict[str, Any]):
        future = self.pending_requests.pop(message.get("id"), None)
        if future is None or future.done():
            return
        if "error" in message:
            error = message["error"]
            future.set_exception(
                RuntimeError(f"LSP error: {error.get('message', 'Unknown error')}")
            )
        else:
            future.set_result(message.get("result"))

    def _handle_notification(self, message: Dict[str, Any]):
        method = message["method"]
        handler = self.notification_handlers.get(method)
        if handler is None:
            return
        try:
            handler(message.get("params"))
        except Exception as e:
            # a faulty handler must not stop the reader loop
            Logger.instance().error(f"notification handler for {method} failed: {e}")

    def _handle_server_request(self, message: Dict[str, Any]):
        """Answer server-to-client requests (progress, configuration) with null."""
        Logger.instance().debug(f"server request {message['method']} answered with null")
        reply = {"jsonrpc": "2.0", "id": message["id"], "result": None}
        if self.writer is not None:
            self.writer.write(self.protocol.encode(reply))

    # ═══════════════════════════════════════════════════════════════════
    # Utilities
    # ═══════════════════════════════════════════════════════════════════

    def _get_language_id(self, file_path: str) -> str:
        """Determine language ID from file extension."""
        ext = Path(file_path).suffix.lower()
        return {
            ".java": "java",
            ".kt": "kotlin",
            ".kts": "kotlin",
            ".groovy": "groovy",
            ".scala": "scala",
            ".xml": "xml",
        }.get(ext, "java")

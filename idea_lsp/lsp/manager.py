"""LSP Manager - shared connection to the IDE's language server.

One connection serves every tool call. Each (re)connection gets a fresh
LSPClient and a fresh Session, because notification handlers and channel
coding are configured once per connection.
"""

import asyncio
from pathlib import Path
from typing import Optional, List

from idea_lsp.jdk import SdkKind, require_jdk_root
from idea_lsp.locations import Location, path_to_uri
from idea_lsp.lsp.client import LSPClient, DEFAULT_HOST, DEFAULT_PORT
from idea_lsp.requests import ProjectJdkResult
from idea_lsp.session import Session, bootstrap_session
from idea_lsp.utils.config_utils import get_config_float, get_config_int, get_config_value
from idea_lsp.utils.logging_utils import Logger
from idea_lsp.utils.singleton_utils import SingletonInstance


class LSPManager(SingletonInstance):
    """Singleton owner of the IDE connection.

    this manager ensures:
    1. only one connection to the IDE exists
    2. all LSP requests are serialized via asyncio.Lock
    3. file open state is shared across all callers
    4. setup is idempotent (safe to call multiple times)
    """

    def __init__(self):
        self._client: Optional[LSPClient] = None
        self._session: Optional[Session] = None
        self._request_lock = asyncio.Lock()
        self._setup_error: Optional[str] = None
        self._host: Optional[str] = None
        self._port: Optional[int] = None
        self._project_dir: Optional[str] = None

    @property
    def is_setup(self) -> bool:
        """check if LSP has been setup"""
        return self._host is not None

    @property
    def is_running(self) -> bool:
        """check if the connection is open"""
        return self._client is not None and self._client.is_connected

    @property
    def setup_error(self) -> Optional[str]:
        return self._setup_error

    @property
    def project_dir(self) -> Optional[str]:
        return self._project_dir

    @property
    def address(self) -> Optional[str]:
        if self._host is None:
            return None
        return f"{self._host}:{self._port}"

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def open_files_count(self) -> int:
        if self._client is None:
            return 0
        return len(self._client.open_files)

    async def setup(
        self,
        project_dir: str,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> str:
        """Connect to the IDE's LSP server (idempotent).

        Args:
            project_dir: Project root opened in the IDE
            host: Server host ([lsp] host, default 127.0.0.1)
            port: Server port ([lsp] port, default 8080)

        Returns:
            Status message
        """
        host = host or get_config_value("lsp", "host", DEFAULT_HOST)
        port = port or get_config_int("lsp", "port", DEFAULT_PORT)

        async with self._request_lock:
            if self.is_running:
                if (self._host, self._port, self._project_dir) == (host, port, project_dir):
                    return (
                        f"✅ LSP already connected (shared instance)\n"
                        f"  Server: {self.address}\n"
                        f"  Project: {project_dir}"
                    )
                await self._stop_client()

            if not Path(project_dir).is_dir():
                self._setup_error = f"Project directory not found: {project_dir}"
                return f"❌ {self._setup_error}"

            self._host, self._port, self._project_dir = host, port, project_dir
            error = await self._connect()
            if error:
                return f"❌ {error}"

            return (
                f"✅ LSP connected (shared instance)\n"
                f"  Server: {self.address}\n"
                f"  Project: {project_dir}"
            )

    async def ensure_running(self) -> Optional[str]:
        """Ensure the connection is open. Returns error message if failed."""
        if not self.is_setup:
            return (
                "⚠️ LSP not initialized!\n"
                "Please call 'setup_lsp' tool first.\n"
                'Example: setup_lsp(project_dir="/home/me/projects/app")'
            )

        if self.is_running:
            return None

        async with self._request_lock:
            await self._stop_client()
            error = await self._connect()
        if error:
            return f"⚠️ {error}"
        return None

    async def stop(self):
        """Close the connection (the IDE keeps running)."""
        async with self._request_lock:
            await self._stop_client()

    async def _connect(self) -> Optional[str]:
        """Open a new connection and bootstrap its session."""
        client = LSPClient(
            host=self._host,
            port=self._port,
            project_dir=self._project_dir,
            request_timeout=get_config_float("lsp", "request_timeout", 30.0),
        )
        try:
            await client.connect()
            session = bootstrap_session(client)
            await client.initialize()
        except (OSError, RuntimeError, TimeoutError) as e:
            self._setup_error = f"Failed to connect to LSP server at {self.address}: {e}"
            Logger.instance().error(self._setup_error)
            await client.stop(graceful=False)
            return self._setup_error

        self._client = client
        self._session = session
        self._setup_error = None
        return None

    async def _stop_client(self):
        if self._client is not None:
            try:
                await self._client.stop()
            except (OSError, RuntimeError) as e:
                Logger.instance().warning(f"error while closing LSP connection: {e}")
            self._client = None
            self._session = None

    # ═══════════════════════════════════════════════════════════════════
    # idea/* operations (all serialized via _request_lock)
    # ═══════════════════════════════════════════════════════════════════

    async def find_implementations(
        self,
        file_path: str,
        line: int,
        character: int,
    ) -> List[Location]:
        """Implementations of the symbol at a 1-based position."""
        async with self._request_lock:
            await self._client.ensure_file_open(file_path)
            return await self._session.requests.find_implementations(
                path_to_uri(file_path), line - 1, character - 1
            )

    async def set_project_jdk(
        self,
        file_path: str,
        jdk_root: str,
        kind: SdkKind = SdkKind.JDK,
    ) -> ProjectJdkResult:
        """Set the project SDK; raises ConfigurationError for a non-JDK path.

        The root is checked before didOpen so nothing reaches the server.
        """
        require_jdk_root(jdk_root)
        async with self._request_lock:
            await self._client.ensure_file_open(file_path)
            return await self._session.requests.set_project_sdk(
                path_to_uri(file_path), jdk_root, kind
            )

    async def get_hover(
        self,
        file_path: str,
        line: int,
        character: int,
    ) -> Optional[str]:
        """Hover text, with java snippets rendered by the session renderers."""
        async with self._request_lock:
            await self._client.ensure_file_open(file_path)
            result = await self._client.send_request(
                "textDocument/hover",
                {
                    "textDocument": {"uri": path_to_uri(file_path)},
                    "position": {"line": line - 1, "character": character - 1},
                },
            )

        if result and "contents" in result:
            return self._session.render_marked_string(result["contents"])
        return None


def get_lsp_manager() -> LSPManager:
    """Get the global LSPManager singleton.

    This is the primary entry point for all LSP operations.
    """
    return LSPManager.instance()

"""JSON-RPC protocol handling for LSP communication.

LSP uses JSON-RPC 2.0 with Content-Length headers:
  Content-Length: <length>\r\n
  \r\n
  <JSON payload>

The channel has a coding mode per direction. In "text" mode it behaves like
a Python text stream with universal newlines: CRLF is folded to LF on read
and LF is written as the platform line separator. That breaks the CRLF
header terminator and the byte counts, so a live connection must be switched
to "binary" mode, where bytes pass through unchanged.
"""

import json
import os
from typing import Dict, Any, List

TEXT = "text"
BINARY = "binary"
CODING_MODES = (TEXT, BINARY)

# a malformed frame was dropped from the buffer; keep parsing
_SKIPPED = object()


class JSONRPCProtocol:
    """Handles JSON-RPC message parsing and formatting for LSP."""

    def __init__(self, read_mode: str = TEXT, write_mode: str = TEXT):
        self.buffer = b""
        self.read_mode = read_mode
        self.write_mode = write_mode

    def set_coding(self, read_mode: str, write_mode: str):
        """Set the coding mode of both directions."""
        for mode in (read_mode, write_mode):
            if mode not in CODING_MODES:
                raise ValueError(f"Unknown channel coding mode: {mode}")
        self.read_mode = read_mode
        self.write_mode = write_mode

    @property
    def is_binary(self) -> bool:
        return self.read_mode == BINARY and self.write_mode == BINARY

    def feed(self, data: bytes) -> List[Dict[str, Any]]:
        """Feed data and return complete messages.

        Args:
            data: Raw bytes read from the server connection

        Returns:
            List of parsed JSON-RPC messages (may be empty if incomplete)
        """
        if self.read_mode == TEXT:
            data = data.replace(b"\r\n", b"\n")
        self.buffer += data
        messages = []

        while True:
            message = self._try_parse_message()
            if message is None:
                break
            if message is _SKIPPED:
                continue
            messages.append(message)

        return messages

    def _try_parse_message(self) -> Any:
        """Try to parse a complete JSON-RPC message from buffer.

        Returns:
            Parsed message dict, None if incomplete, or _SKIPPED after
            dropping a malformed frame
        """
        # Find header end (double CRLF)
        header_end = self.buffer.find(b"\r\n\r\n")
        if header_end == -1:
            return None

        header = self.buffer[:header_end].decode("ascii", errors="replace")
        content_length = None

        for line in header.split("\r\n"):
            if line.lower().startswith("content-length:"):
                try:
                    content_length = int(line.split(":")[1].strip())
                except ValueError:
                    pass
                break

        if content_length is None:
            # Malformed message, skip this header
            self.buffer = self.buffer[header_end + 4 :]
            return _SKIPPED

        content_start = header_end + 4
        content_end = content_start + content_length

        if len(self.buffer) < content_end:
            return None

        content = self.buffer[content_start:content_end]
        self.buffer = self.buffer[content_end:]

        try:
            return json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            # Invalid JSON, skip
            return _SKIPPED

    def encode(self, message: Dict[str, Any]) -> bytes:
        """Encode a JSON-RPC message with Content-Length header.

        Args:
            message: JSON-RPC message dict

        Returns:
            Bytes ready to be written to the server connection
        """
        content_bytes = json.dumps(message).encode("utf-8")
        header = f"Content-Length: {len(content_bytes)}\r\n\r\n"
        data = header.encode("ascii") + content_bytes
        if self.write_mode == TEXT:
            data = data.replace(b"\r\n", b"\n").replace(b"\n", os.linesep.encode("ascii"))
        return data

    def clear(self):
        """Clear the internal buffer."""
        self.buffer = b""

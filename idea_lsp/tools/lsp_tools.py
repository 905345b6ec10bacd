"""MCP tools exposing the IntelliJ LSP extension.

All tools use the shared LSPManager singleton, so one connection to the IDE
serves every agent.

Tools:
- Setup: setup_lsp, lsp_status
- idea/*: goToImplementation, setProjectJdk
- hover
"""

import re
from pathlib import Path
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from idea_lsp.errors import ConfigurationError
from idea_lsp.jdk import SdkKind, detect_runtime_layout, require_jdk_root
from idea_lsp.locations import LocationGroup, count_non_local, group_by_file
from idea_lsp.lsp.manager import get_lsp_manager
from idea_lsp.requests import format_project_jdk_result
from idea_lsp.utils.config_utils import get_config_value, get_default_jdk_root
from idea_lsp.utils.logging_utils import Logger, logging_func

_WORD = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def symbol_at(file_path: str, line: int, character: int) -> str:
    """Identifier under a 1-based position, or "" if there is none."""
    try:
        lines = Path(file_path).read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return ""
    if not 1 <= line <= len(lines):
        return ""
    text = lines[line - 1]
    column = character - 1
    for match in _WORD.finditer(text):
        if match.start() <= column <= match.end():
            return match.group(0)
    return ""


def format_location_groups(groups: List[LocationGroup]) -> List[str]:
    """One header line per file, then one 1-based line:column per location."""
    lines = []
    for group in groups:
        lines.append(f"  {group.file_path}")
        for location in group.locations:
            start = location.range.start
            lines.append(f"    {start.line + 1}:{start.character + 1}")
    return lines


def register_lsp_tools(mcp: FastMCP):
    """Register the idea-lsp MCP tools."""

    # ═══════════════════════════════════════════════════════════════════
    # Setup Tools
    # ═══════════════════════════════════════════════════════════════════

    @mcp.tool()
    @logging_func("connect to the IDE")
    async def setup_lsp(
        project_dir: str,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> str:
        """Connect to the LSP server of a running IntelliJ IDE.

        MUST be called before using any other LSP tools.

        Args:
            project_dir: Absolute path to the project opened in the IDE
            host: Server host (defaults to [lsp] host in config.ini, then 127.0.0.1)
            port: Server port (defaults to [lsp] port in config.ini, then 8080)

        Returns:
            Setup status message
        """
        manager = get_lsp_manager()
        return await manager.setup(project_dir, host, port)

    @mcp.tool()
    async def lsp_status() -> str:
        """Check connection and indexing status.

        Returns:
            Current LSP configuration and status
        """
        manager = get_lsp_manager()

        if not manager.is_setup:
            return (
                "📊 LSP Status: NOT INITIALIZED\n\n"
                "Call 'setup_lsp' first to initialize."
            )

        session = manager.session
        status_lines = [
            "📊 LSP Status: INITIALIZED (shared instance)",
            f"  Server: {manager.address}",
            f"  Project: {manager.project_dir}",
            f"  Connected: {'Yes' if manager.is_running else 'No'}",
            f"  Indexing: {'Yes' if session and session.status.is_indexing else 'No'}",
            f"  Open files: {manager.open_files_count}",
        ]
        if session:
            status_lines.append(f"  Status line: {session.status_line}")

        if manager.setup_error:
            status_lines.append(f"  ⚠️ Last error: {manager.setup_error}")

        return "\n".join(status_lines)

    # ═══════════════════════════════════════════════════════════════════
    # idea/* extension requests
    # ═══════════════════════════════════════════════════════════════════

    @mcp.tool()
    @logging_func("idea/implementations")
    async def goToImplementation(
        file_path: str,
        line: int,
        character: int,
    ) -> str:
        """Find implementations of the symbol at a position, grouped by file.

        Locations inside library archives cannot be opened and are left out.

        Args:
            file_path: Absolute path to the source file
            line: Line number (1-based)
            character: Character offset (1-based)

        Returns:
            Implementation locations per file
        """
        manager = get_lsp_manager()
        error = await manager.ensure_running()
        if error:
            return error

        try:
            locations = await manager.find_implementations(file_path, line, character)
        except (RuntimeError, TimeoutError) as e:
            return f"⚠️ idea/implementations failed: {e}"

        groups = group_by_file(locations)
        hidden = count_non_local(locations)

        if not groups:
            symbol = symbol_at(file_path, line, character) or f"{file_path}:{line}:{character}"
            message = f"No implementations found for symbol: {symbol}"
        else:
            found = sum(len(group.locations) for group in groups)
            result_lines = [f"Implementations ({found} found in {len(groups)} files):"]
            result_lines.extend(format_location_groups(groups))
            message = "\n".join(result_lines)

        if hidden:
            message += f"\n{hidden} results hidden (in archives)"
        return message

    @mcp.tool()
    @logging_func("idea/setProjectJdk")
    async def setProjectJdk(
        file_path: str,
        jdk_root: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> str:
        """Set the SDK of the project containing a file.

        Args:
            file_path: Absolute path to any source file of the project
            jdk_root: JDK home directory (defaults to JAVA_HOME, then
                      [jdk] default_root in config.ini)
            kind: "JDK" or "IntelliJ Platform Plugin SDK" (default "JDK")

        Returns:
            The JDK version reported by the IDE, or why it was not set
        """
        manager = get_lsp_manager()

        jdk_root = jdk_root or get_default_jdk_root()
        if not jdk_root:
            return "❌ No JDK root given and neither JAVA_HOME nor [jdk] default_root is set"

        try:
            sdk_kind = SdkKind.from_label(kind or get_config_value("jdk", "default_kind", "JDK"))
            require_jdk_root(jdk_root)
        except ConfigurationError as e:
            return f"❌ {e}"

        error = await manager.ensure_running()
        if error:
            return error

        try:
            result = await manager.set_project_jdk(file_path, jdk_root, sdk_kind)
        except ConfigurationError as e:
            return f"❌ {e}"
        except (RuntimeError, TimeoutError) as e:
            return f"⚠️ idea/setProjectJdk failed: {e}"

        if result.success:
            Logger.instance().info(
                f"project JDK set: {jdk_root} ({detect_runtime_layout(jdk_root)}, {result.version})"
            )
        return format_project_jdk_result(result, jdk_root)

    # ═══════════════════════════════════════════════════════════════════
    # Standard requests
    # ═══════════════════════════════════════════════════════════════════

    @mcp.tool()
    async def hover(
        file_path: str,
        line: int,
        character: int,
    ) -> str:
        """Get hover information (documentation, type info) for a symbol.

        Java snippets in the reply are syntax highlighted.

        Args:
            file_path: Absolute path to the source file
            line: Line number (1-based)
            character: Character offset (1-based)

        Returns:
            Symbol type and documentation information
        """
        manager = get_lsp_manager()
        error = await manager.ensure_running()
        if error:
            return error

        try:
            hover_info = await manager.get_hover(file_path, line, character)
        except (RuntimeError, TimeoutError) as e:
            return f"⚠️ textDocument/hover failed: {e}"

        if hover_info is None:
            return f"No hover information at {file_path}:{line}:{character}"

        return f"Hover information:\n{hover_info}"

"""Per-connection setup of the idea/* extension.

``bootstrap_session`` runs once, right after the transport connects and
before the initialize handshake, and returns the Session object that the
rest of the code uses instead of module-level state.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from idea_lsp.notifications import IndexingStatusHandler, NotificationRouter, SessionStatus
from idea_lsp.rendering import RendererTable, render_java
from idea_lsp.requests import IdeaRequestClient
from idea_lsp.utils.logging_utils import Logger


@dataclass
class Session:
    transport: Any
    status: SessionStatus = field(default_factory=SessionStatus)
    renderers: RendererTable = field(default_factory=RendererTable)
    router: Optional[NotificationRouter] = None
    requests: Optional[IdeaRequestClient] = None

    @property
    def status_line(self) -> str:
        """Status text for display, e.g. "idea-lsp (indexing)"."""
        label = self.status.label
        return f"idea-lsp {label}" if label else "idea-lsp"

    def render_marked_string(self, content: Any) -> str:
        """Render hover contents; ``{language, value}`` parts go through the renderers."""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return "\n".join(self.render_marked_string(c) for c in content)
        if isinstance(content, dict):
            value = content.get("value", "")
            language = content.get("language")
            if language:
                return self.renderers.render(language, value)
            return value
        return str(content)


def bootstrap_session(transport) -> Session:
    """Wire a freshly connected transport for the idea/* extension.

    1. route indexing notifications into the session status
    2. switch the channel to binary mode (CRLF framing must survive)
    3. register the java renderer
    """
    session = Session(transport=transport)

    session.router = NotificationRouter(IndexingStatusHandler(session.status))
    session.router.install(transport)

    transport.set_binary_mode()

    session.renderers.register("java", render_java)

    session.requests = IdeaRequestClient(transport)
    Logger.instance().debug("idea/* session bootstrapped")
    return session

"""Renderers for code snippets embedded in server content (hover, etc.)."""

from typing import Callable, Dict

from rich.console import Console
from rich.syntax import Syntax

from idea_lsp.utils.logging_utils import Logger

Renderer = Callable[[str], str]

SYNTAX_THEME = "monokai"


def render_java(text: str) -> str:
    """Syntax-highlight Java source as ANSI text.

    Never raises: on any failure the input comes back unchanged.
    """
    try:
        console = Console(force_terminal=True, color_system="truecolor", width=120)
        with console.capture() as capture:
            console.print(Syntax(text, "java", theme=SYNTAX_THEME, background_color="default"))
        return capture.get().rstrip("\n")
    except Exception as e:
        Logger.instance().debug(f"java rendering failed, showing raw text: {e}")
        return text


class RendererTable:
    """Content type -> renderer. Unknown types render as the raw text."""

    def __init__(self):
        self._renderers: Dict[str, Renderer] = {}

    def register(self, content_type: str, renderer: Renderer):
        self._renderers[content_type] = renderer

    def __contains__(self, content_type: str) -> bool:
        return content_type in self._renderers

    def render(self, content_type: str, text: str) -> str:
        renderer = self._renderers.get(content_type)
        if renderer is None:
            return text
        try:
            return renderer(text)
        except Exception as e:
            Logger.instance().debug(f"{content_type} renderer failed: {e}")
            return text

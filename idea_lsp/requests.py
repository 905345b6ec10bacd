"""Client side of the idea/* extension requests."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from idea_lsp.errors import ConfigurationError
from idea_lsp.jdk import SdkKind, require_jdk_root
from idea_lsp.locations import Location, path_to_uri
from idea_lsp.utils.logging_utils import Logger

IMPLEMENTATIONS = "idea/implementations"
SET_PROJECT_JDK = "idea/setProjectJdk"


@dataclass(frozen=True)
class ProjectJdkResult:
    success: bool
    version: Optional[str] = None

    @classmethod
    def from_lsp(cls, data: Optional[dict]) -> "ProjectJdkResult":
        data = data or {}
        return cls(success=bool(data.get("success", False)), version=data.get("version"))


class IdeaRequestClient:
    """Issues idea/* requests over a transport and decodes the replies.

    ``transport`` is anything with an awaitable ``send_request(method, params)``.
    """

    def __init__(self, transport):
        self.transport = transport

    async def find_implementations(
        self,
        document_uri: str,
        line: int,
        character: int,
    ) -> List[Location]:
        """Implementations of the symbol at a 0-based position.

        An empty list means nothing was found; it is not an error.
        """
        result = await self.transport.send_request(
            IMPLEMENTATIONS,
            {
                "textDocument": {"uri": document_uri},
                "position": {"line": line, "character": character},
            },
        )
        return self._decode_locations(result)

    async def set_project_sdk(
        self,
        document_uri: str,
        jdk_root: Union[str, Path],
        kind: SdkKind = SdkKind.JDK,
    ) -> ProjectJdkResult:
        """Ask the IDE to use ``jdk_root`` as the project SDK.

        Raises:
            ConfigurationError: ``jdk_root`` is not a JDK; nothing is sent
        """
        try:
            jdk_root = require_jdk_root(jdk_root)
        except ConfigurationError as e:
            Logger.instance().warning(str(e))
            raise

        result = await self.transport.send_request(
            SET_PROJECT_JDK,
            {
                "textDocument": {"uri": document_uri},
                "jdkRootUri": path_to_uri(str(jdk_root.resolve())),
                "kind": kind.to_wire(),
            },
        )
        return ProjectJdkResult.from_lsp(result)

    def _decode_locations(self, result: Any) -> List[Location]:
        if not result:
            return []
        if isinstance(result, dict):
            result = [result]
        return [Location.from_lsp(item) for item in result if isinstance(item, dict)]


def format_project_jdk_result(result: ProjectJdkResult, jdk_root: Union[str, Path]) -> str:
    """User-facing message for a setProjectJdk reply."""
    if result.success:
        return f"✅ Project JDK set to {result.version or 'unknown version'}"
    return f"❌ Failed to set project JDK to {jdk_root}"

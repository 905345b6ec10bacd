"""Location results from the server, grouped per file for display.

Only ``file:`` locations can be opened by the presentation layer, so
anything else (typically ``jar:`` URIs pointing inside library archives) is
dropped before grouping.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote, unquote, urlparse

LOCAL_SCHEME = "file"


@dataclass(frozen=True)
class Position:
    line: int
    character: int

    @classmethod
    def from_lsp(cls, data: Optional[Dict[str, Any]]) -> "Position":
        data = data or {}
        return cls(line=data.get("line", 0), character=data.get("character", 0))


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def from_lsp(cls, data: Optional[Dict[str, Any]]) -> "Range":
        data = data or {}
        start = Position.from_lsp(data.get("start"))
        end = Position.from_lsp(data.get("end")) if "end" in data else start
        return cls(start=start, end=end)


@dataclass(frozen=True)
class Location:
    uri: str
    range: Range

    @classmethod
    def from_lsp(cls, data: Dict[str, Any]) -> "Location":
        """Build from a wire Location (or LocationLink) dict."""
        uri = data.get("uri", data.get("targetUri", ""))
        range_data = data.get("range", data.get("targetSelectionRange", data.get("targetRange")))
        return cls(uri=uri, range=Range.from_lsp(range_data))

    @property
    def scheme(self) -> str:
        return urlparse(self.uri).scheme.lower()

    @property
    def is_local(self) -> bool:
        return self.scheme == LOCAL_SCHEME


@dataclass
class LocationGroup:
    file_path: str
    locations: List[Location] = field(default_factory=list)


def uri_to_path(uri: str) -> str:
    """Convert a ``file:`` URI to a filesystem path.

    Percent-escapes are decoded; ``file:///D:/x`` becomes ``D:/x``.
    """
    path = unquote(urlparse(uri).path)
    if len(path) >= 3 and path[0] == "/" and path[2] == ":":
        path = path[1:]
    return path


def path_to_uri(file_path: str) -> str:
    """Convert a filesystem path to a ``file:`` URI.

    Reserved characters are percent-encoded, so ``uri_to_path`` gives the
    path back unchanged.
    """
    path = str(file_path).replace("\\", "/")
    if len(path) >= 2 and path[1] == ":":
        path = "/" + path
    return "file://" + quote(path, safe="/:")


def split_local(locations: Iterable[Location]) -> Tuple[List[Location], int]:
    """Keep local locations, and count how many were dropped."""
    local = []
    dropped = 0
    for location in locations:
        if location.is_local:
            local.append(location)
        else:
            dropped += 1
    return local, dropped


def count_non_local(locations: Iterable[Location]) -> int:
    """Number of locations ``group_by_file`` would hide."""
    return split_local(locations)[1]


def group_by_file(locations: Iterable[Location]) -> List[LocationGroup]:
    """Group local locations by file, in first-seen order.

    Groups are not sorted; locations keep their order inside each group.
    Returns an empty list when nothing local is left.
    """
    local, _ = split_local(locations)
    groups: Dict[str, LocationGroup] = {}
    for location in local:
        file_path = uri_to_path(location.uri)
        group = groups.get(file_path)
        if group is None:
            group = groups[file_path] = LocationGroup(file_path=file_path)
        group.locations.append(location)
    return list(groups.values())

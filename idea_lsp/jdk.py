"""JDK root detection by directory layout.

A directory is accepted as a JDK root when it carries both a Java runtime
(one of several historical layouts) and a javac binary. Nothing is cached:
every call looks at the filesystem again.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from idea_lsp.errors import ConfigurationError

# relative path -> layout it identifies
RUNTIME_MARKERS = {
    "jre/lib/rt.jar": "JDK with bundled JRE",
    "lib/rt.jar": "standalone JRE",
    "lib/jrt-fs.jar": "modular JDK (9+)",
    "modules/java.base": "exploded modular build",
    "../Classes/classes.jar": "Apple JDK",
    "jre/lib/vm.jar": "IBM JDK",
    "classes": "custom build",
}

COMPILER_MARKERS = ("bin/javac", "bin/javac.exe")


class SdkKind(Enum):
    """SDK kinds accepted by idea/setProjectJdk, valued by their wire ordinal."""

    JDK = 1
    PLATFORM_PLUGIN_SDK = 2

    @property
    def label(self) -> str:
        return _SDK_LABELS[self]

    def to_wire(self) -> int:
        """Integer sent in the ``kind`` field of idea/setProjectJdk."""
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "SdkKind":
        """Look up a kind by its human-readable label (case-insensitive)."""
        wanted = label.strip().lower()
        for kind, kind_label in _SDK_LABELS.items():
            if kind_label.lower() == wanted:
                return kind
        choices = ", ".join(f'"{name}"' for name in _SDK_LABELS.values())
        raise ConfigurationError(f"Unknown SDK kind {label!r}, expected one of {choices}")


_SDK_LABELS = {
    SdkKind.JDK: "JDK",
    SdkKind.PLATFORM_PLUGIN_SDK: "IntelliJ Platform Plugin SDK",
}


def _has_any(root: Path, markers) -> bool:
    return any((root / marker).exists() for marker in markers)


def is_valid_jdk_root(root: Union[str, Path, None]) -> bool:
    """Check whether ``root`` looks like a JDK installation directory."""
    if not root:
        return False
    root = Path(root)
    if not root.is_dir():
        return False
    return _has_any(root, RUNTIME_MARKERS) and _has_any(root, COMPILER_MARKERS)


def find_missing_markers(root: Union[str, Path, None]) -> List[str]:
    """Describe which parts of a JDK layout are absent under ``root``.

    Returns an empty list for a valid root.
    """
    if not root or not Path(root).is_dir():
        return ["directory"]
    root = Path(root)
    missing = []
    if not _has_any(root, RUNTIME_MARKERS):
        missing.append("runtime")
    if not _has_any(root, COMPILER_MARKERS):
        missing.append("javac")
    return missing


def detect_runtime_layout(root: Union[str, Path]) -> Optional[str]:
    """Name of the first runtime layout found under ``root``, or None."""
    root = Path(root)
    for marker, layout in RUNTIME_MARKERS.items():
        if (root / marker).exists():
            return layout
    return None


def require_jdk_root(root: Union[str, Path, None]) -> Path:
    """Return ``root`` as a Path, or raise ConfigurationError if it is not a JDK."""
    if not is_valid_jdk_root(root):
        missing = ", ".join(find_missing_markers(root))
        raise ConfigurationError(f"Path does not lead to a valid JDK: {root} (missing: {missing})")
    return Path(root)

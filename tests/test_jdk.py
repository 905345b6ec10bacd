"""Tests for JDK root detection and SDK kinds."""

import pytest

from idea_lsp.errors import ConfigurationError
from idea_lsp.jdk import (
    COMPILER_MARKERS,
    RUNTIME_MARKERS,
    SdkKind,
    detect_runtime_layout,
    find_missing_markers,
    is_valid_jdk_root,
    require_jdk_root,
)


class TestIsValidJdkRoot:
    """Tests for the layout signature check."""

    def test_nonexistent_directory(self, tmp_path):
        """A missing directory is never a JDK."""
        assert is_valid_jdk_root(tmp_path / "missing") is False

    def test_empty_and_none(self):
        assert is_valid_jdk_root(None) is False
        assert is_valid_jdk_root("") is False

    def test_file_instead_of_directory(self, tmp_path):
        path = tmp_path / "jdk.tar.gz"
        path.write_bytes(b"")
        assert is_valid_jdk_root(path) is False

    @pytest.mark.parametrize("runtime", list(RUNTIME_MARKERS))
    @pytest.mark.parametrize("compiler", COMPILER_MARKERS)
    def test_every_marker_combination(self, make_jdk, runtime, compiler):
        """Any runtime marker plus any javac marker is accepted."""
        root = make_jdk("jdk", runtime, compiler)
        assert is_valid_jdk_root(root) is True
        assert is_valid_jdk_root(str(root)) is True

    def test_runtime_without_compiler(self, make_jdk):
        """A JRE (runtime but no javac) is rejected."""
        root = make_jdk("jre", "lib/rt.jar")
        assert is_valid_jdk_root(root) is False

    def test_compiler_without_runtime(self, make_jdk):
        """javac alone, e.g. a plugin SDK stub, is rejected."""
        root = make_jdk("stub", "bin/javac")
        assert is_valid_jdk_root(root) is False

    def test_removing_compiler_flips_result(self, make_jdk):
        root = make_jdk("jdk", "lib/jrt-fs.jar", "bin/javac")
        assert is_valid_jdk_root(root) is True

        (root / "bin" / "javac").unlink()
        assert is_valid_jdk_root(root) is False

    def test_removing_runtime_flips_result(self, make_jdk):
        root = make_jdk("jdk", "jre/lib/rt.jar", "bin/javac.exe")
        assert is_valid_jdk_root(root) is True

        (root / "jre" / "lib" / "rt.jar").unlink()
        assert is_valid_jdk_root(root) is False

    def test_markers_outside_root_do_not_count(self, make_jdk, tmp_path):
        """Markers in a sibling directory do not make an empty root valid."""
        make_jdk("other", "lib/jrt-fs.jar", "bin/javac")
        empty = make_jdk("empty")
        assert is_valid_jdk_root(empty) is False

    def test_apple_layout_looks_outside_home(self, make_jdk):
        """Apple JDK 6 keeps classes.jar next to Home, not inside it."""
        root = make_jdk("Home", "../Classes/classes.jar", "bin/javac")
        assert is_valid_jdk_root(root) is True


class TestMarkerReporting:
    """Tests for the diagnostic helpers."""

    def test_missing_directory(self, tmp_path):
        assert find_missing_markers(tmp_path / "nope") == ["directory"]

    def test_missing_families(self, make_jdk):
        assert find_missing_markers(make_jdk("a")) == ["runtime", "javac"]
        assert find_missing_markers(make_jdk("b", "lib/rt.jar")) == ["javac"]
        assert find_missing_markers(make_jdk("c", "bin/javac")) == ["runtime"]
        assert find_missing_markers(make_jdk("d", "lib/rt.jar", "bin/javac")) == []

    def test_detect_runtime_layout(self, make_jdk):
        assert detect_runtime_layout(make_jdk("a", "lib/jrt-fs.jar")) == "modular JDK (9+)"
        assert detect_runtime_layout(make_jdk("b", "jre/lib/vm.jar")) == "IBM JDK"
        assert detect_runtime_layout(make_jdk("c")) is None

    def test_require_jdk_root(self, make_jdk):
        root = make_jdk("jdk", "lib/jrt-fs.jar", "bin/javac")
        assert require_jdk_root(str(root)) == root

        with pytest.raises(ConfigurationError, match="does not lead to a valid JDK"):
            require_jdk_root(make_jdk("jre", "lib/rt.jar"))


class TestSdkKind:
    """Tests for the SDK kind table."""

    def test_wire_values(self):
        assert SdkKind.JDK.to_wire() == 1
        assert SdkKind.PLATFORM_PLUGIN_SDK.to_wire() == 2

    def test_from_label(self):
        assert SdkKind.from_label("JDK") is SdkKind.JDK
        assert SdkKind.from_label("IntelliJ Platform Plugin SDK") is SdkKind.PLATFORM_PLUGIN_SDK
        assert SdkKind.from_label("  jdk ") is SdkKind.JDK

    def test_labels(self):
        assert SdkKind.JDK.label == "JDK"
        assert SdkKind.PLATFORM_PLUGIN_SDK.label == "IntelliJ Platform Plugin SDK"

    def test_unknown_label(self):
        """Labels are looked up, never parsed for a number."""
        with pytest.raises(ConfigurationError):
            SdkKind.from_label("2")
        with pytest.raises(ConfigurationError):
            SdkKind.from_label("Android SDK")

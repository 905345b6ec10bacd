"""Tests for the idea/* request client."""

import pytest

from idea_lsp.errors import ConfigurationError
from idea_lsp.jdk import SdkKind
from idea_lsp.locations import Location, uri_to_path
from idea_lsp.requests import (
    IMPLEMENTATIONS,
    SET_PROJECT_JDK,
    IdeaRequestClient,
    ProjectJdkResult,
    format_project_jdk_result,
)

DOC = "file:///project/src/Main.java"


@pytest.fixture
def jdk(make_jdk):
    return make_jdk("jdk-17", "lib/jrt-fs.jar", "bin/javac")


class TestFindImplementations:
    """Tests for idea/implementations."""

    async def test_request_shape(self, transport):
        client = IdeaRequestClient(transport)

        await client.find_implementations(DOC, 4, 11)

        assert transport.requests == [
            (IMPLEMENTATIONS, {"textDocument": {"uri": DOC}, "position": {"line": 4, "character": 11}}),
        ]

    async def test_decodes_locations(self, transport):
        transport.responses[IMPLEMENTATIONS] = [
            {"uri": "file:///a.java", "range": {"start": {"line": 1, "character": 2}, "end": {"line": 1, "character": 8}}},
            {"uri": "jar:///lib.jar!/B.java", "range": {"start": {"line": 0, "character": 0}, "end": {"line": 0, "character": 1}}},
        ]
        client = IdeaRequestClient(transport)

        locations = await client.find_implementations(DOC, 0, 0)

        assert all(isinstance(l, Location) for l in locations)
        assert [l.uri for l in locations] == ["file:///a.java", "jar:///lib.jar!/B.java"]
        assert locations[0].range.start.character == 2

    async def test_none_result_is_empty(self, transport):
        client = IdeaRequestClient(transport)
        assert await client.find_implementations(DOC, 0, 0) == []

    async def test_single_location_result(self, transport):
        transport.responses[IMPLEMENTATIONS] = {
            "uri": "file:///a.java",
            "range": {"start": {"line": 1, "character": 2}, "end": {"line": 1, "character": 8}},
        }
        client = IdeaRequestClient(transport)

        locations = await client.find_implementations(DOC, 0, 0)

        assert len(locations) == 1

    async def test_null_entries_are_skipped(self, transport):
        transport.responses[IMPLEMENTATIONS] = [
            None,
            {"uri": "file:///a.java", "range": {"start": {"line": 1, "character": 2}, "end": {"line": 1, "character": 8}}},
            "garbage",
        ]
        client = IdeaRequestClient(transport)

        locations = await client.find_implementations(DOC, 0, 0)

        assert [l.uri for l in locations] == ["file:///a.java"]


class TestSetProjectSdk:
    """Tests for idea/setProjectJdk."""

    async def test_request_shape(self, transport, jdk):
        transport.responses[SET_PROJECT_JDK] = {"success": True, "version": "17.0.2"}
        client = IdeaRequestClient(transport)

        result = await client.set_project_sdk(DOC, str(jdk), SdkKind.PLATFORM_PLUGIN_SDK)

        method, params = transport.requests[0]
        assert method == SET_PROJECT_JDK
        assert params["textDocument"] == {"uri": DOC}
        assert params["jdkRootUri"] == f"file://{jdk.resolve().as_posix()}"
        assert params["kind"] == 2
        assert result == ProjectJdkResult(success=True, version="17.0.2")

    async def test_root_with_space_is_escaped(self, transport, make_jdk):
        jdk = make_jdk("Program Files/jdk 17", "lib/jrt-fs.jar", "bin/javac")
        client = IdeaRequestClient(transport)

        await client.set_project_sdk(DOC, jdk)

        uri = transport.requests[0][1]["jdkRootUri"]
        assert " " not in uri
        assert uri.endswith("/Program%20Files/jdk%2017")
        assert uri_to_path(uri) == jdk.resolve().as_posix()

    async def test_default_kind_is_jdk(self, transport, jdk):
        client = IdeaRequestClient(transport)

        await client.set_project_sdk(DOC, jdk)

        assert transport.requests[0][1]["kind"] == 1

    async def test_invalid_root_sends_nothing(self, transport, make_jdk):
        client = IdeaRequestClient(transport)
        jre = make_jdk("jre", "lib/rt.jar")

        with pytest.raises(ConfigurationError, match="valid JDK"):
            await client.set_project_sdk(DOC, jre)

        assert transport.requests == []

    async def test_missing_root_sends_nothing(self, transport, tmp_path):
        client = IdeaRequestClient(transport)

        with pytest.raises(ConfigurationError):
            await client.set_project_sdk(DOC, tmp_path / "nope")

        assert transport.requests == []

    async def test_server_rejection_is_a_result(self, transport, jdk):
        transport.responses[SET_PROJECT_JDK] = {"success": False}
        client = IdeaRequestClient(transport)

        result = await client.set_project_sdk(DOC, jdk)

        assert result.success is False
        assert result.version is None


class TestFormatting:
    """Tests for user-facing setProjectJdk messages."""

    def test_success(self):
        message = format_project_jdk_result(ProjectJdkResult(True, "17.0.2"), "/opt/jdk")
        assert "17.0.2" in message
        assert "✅" in message

    def test_success_without_version(self):
        message = format_project_jdk_result(ProjectJdkResult(True), "/opt/jdk")
        assert "unknown version" in message

    def test_rejection_names_root(self):
        message = format_project_jdk_result(ProjectJdkResult(False), "/opt/jdk")
        assert "/opt/jdk" in message
        assert "❌" in message

    def test_from_lsp_defaults(self):
        assert ProjectJdkResult.from_lsp(None) == ProjectJdkResult(success=False)

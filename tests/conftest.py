"""shared fixtures for idea-lsp tests"""

import pytest

from idea_lsp.lsp.manager import LSPManager
from idea_lsp.utils.logging_utils import Logger


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """keep log files out of the working directory"""
    Logger.reset_instance()
    Logger.instance(log_dir=str(tmp_path / "logs"))
    yield
    Logger.instance().close()
    Logger.reset_instance()


@pytest.fixture
def reset_manager():
    """reset LSPManager before and after test"""
    LSPManager.reset_instance()
    yield
    LSPManager.reset_instance()


class FakeTransport:
    """in-memory stand-in for LSPClient: records requests, returns canned results"""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.requests = []
        self.notification_handlers = {}
        self.binary = False

    async def send_request(self, method, params):
        self.requests.append((method, params))
        return self.responses.get(method)

    def register_notification_handler(self, method, handler):
        if method in self.notification_handlers:
            raise ValueError(f"Notification handler already registered: {method}")
        self.notification_handlers[method] = handler

    def set_binary_mode(self):
        self.binary = True

    def notify(self, method, params=None):
        self.notification_handlers[method](params)


@pytest.fixture
def make_transport():
    """factory for additional fake transports in one test"""
    return FakeTransport


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def make_jdk(tmp_path):
    """build a fake JDK tree: make_jdk("name", "lib/jrt-fs.jar", "bin/javac")

    markers ending in a file extension become files, the rest directories.
    """
    def factory(name, *markers):
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for marker in markers:
            path = root / marker
            if path.suffix or marker.startswith("bin/"):
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(b"")
            else:
                path.mkdir(parents=True, exist_ok=True)
        return root
    return factory

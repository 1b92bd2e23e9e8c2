"""
Pytest configuration and fixtures for all tests.
"""

import os
import pytest

# Set up test environment variables before importing any modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("KEY", "test-key")

from fastapi.testclient import TestClient  # noqa: E402

from inbox_api.api.dependencies import get_domain_allow_list, get_inbox_service  # noqa: E402
from inbox_api.core.config import Settings, get_settings  # noqa: E402
from inbox_api.main import app  # noqa: E402
from inbox_api.services.domains import DomainAllowList  # noqa: E402
from inbox_api.services.email import InboxService  # noqa: E402
from tests.helpers import TEST_KEY, FakeIMAP  # noqa: E402


@pytest.fixture
def domain_file(tmp_path):
    """Allow-list file with a trailing newline and a blank line."""
    path = tmp_path / "domainlist.txt"
    path.write_text("example.com\nmail.test\n\nallowed.org\n", encoding="utf-8")
    return path


@pytest.fixture
def test_settings(domain_file) -> Settings:
    return Settings(
        _env_file=None,
        key=TEST_KEY,
        email="shared@example.net",
        password="secret",
        host="imap.example.net",
        port=993,
        tls=True,
        domain_list_file=str(domain_file),
    )


@pytest.fixture
def fake_imap() -> FakeIMAP:
    return FakeIMAP()


@pytest.fixture
def client(test_settings, fake_imap):
    """TestClient wired to the test settings and the fake IMAP server."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_inbox_service] = lambda: InboxService(
        test_settings, imap_factory=lambda: fake_imap
    )
    app.dependency_overrides[get_domain_allow_list] = lambda: DomainAllowList(
        test_settings.domain_list_file
    )
    yield TestClient(app)
    app.dependency_overrides.clear()

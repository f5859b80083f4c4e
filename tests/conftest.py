"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from compatbot.config.settings import Settings
from compatbot.main import app

# Example from GitHub's review comment docs: line 11 is position 2
SINGLE_HUNK_PATCH = "@@ -10,3 +10,4 @@\n context line 10\n+added line 11\n context line 12"

TWO_HUNK_PATCH = "\n".join(
    [
        "@@ -1,3 +1,3 @@",
        " .a {",
        "-  display: block;",
        "+  display: flex;",
        " }",
        "@@ -20,2 +20,3 @@",
        " .b {",
        "+  user-select: none;",
        " }",
    ]
)


@pytest.fixture
def client() -> TestClient:
    """Return a FastAPI TestClient."""
    return TestClient(app)


@pytest.fixture
def webhook_url() -> str:
    """Return the webhook URL for testing."""
    return "/webhook/github"


@pytest.fixture
def test_settings(monkeypatch) -> Settings:
    """Settings isolated from the developer's environment."""
    monkeypatch.delenv("GH_TOKEN", raising=False)
    monkeypatch.delenv("WEBHOOK_SECRET", raising=False)
    return Settings(_env_file=None)


@pytest.fixture
def single_hunk_patch() -> str:
    return SINGLE_HUNK_PATCH


@pytest.fixture
def two_hunk_patch() -> str:
    return TWO_HUNK_PATCH

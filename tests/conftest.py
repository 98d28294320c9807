"""
Shared pytest fixtures for postmark-mcp tests.

The template library fixture is built fresh in tmp_path for every test, so
tests may mutate it (delete files, swap directories for files) freely.

The Postmark client is an AsyncMock with the real client's spec: calling a
method that doesn't exist fails the test.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from adapters.postmark import PostmarkClient
from config import Settings
from tools import ToolContext, ToolRegistry
from tests.helpers import build_template_tree

DEFAULT_SENDER = "from@example.com"
DEFAULT_STREAM = "outbound"

# category → template → {file name: content}
LIBRARY_LAYOUT: dict[str, dict[str, dict[str, str]]] = {
    "basic": {
        "welcome": {"content.html": "<h1>Welcome</h1>", "content.txt": "Welcome"},
        "password-reset": {"content.html": "<p>Reset your password</p>"},
        "blank": {},
    },
    "onboarding": {
        "Welcome-Back": {"content.txt": "Good to see you again"},
        "trial-ending": {"content.html": "<p>Your trial ends soon</p>"},
    },
}


# ============================================================================
# Template library
# ============================================================================

@pytest.fixture
def template_base(tmp_path: Path) -> Path:
    """Template library with two categories and a stray file at the root."""
    base = build_template_tree(tmp_path / "templates-inlined", LIBRARY_LAYOUT)
    (base / "README.md").write_text("not a category", encoding="utf-8")
    return base


# ============================================================================
# Settings / client / registry
# ============================================================================

@pytest.fixture
def settings(template_base: Path) -> Settings:
    return Settings(
        server_token="server-token",
        default_sender=DEFAULT_SENDER,
        default_message_stream=DEFAULT_STREAM,
        templates_base_path=template_base,
        account_token="account-token",
    )


@pytest.fixture
def mock_client() -> AsyncMock:
    return AsyncMock(spec=PostmarkClient)


@pytest.fixture
def registry(settings: Settings, mock_client: AsyncMock) -> ToolRegistry:
    return ToolRegistry(ToolContext(settings=settings, client=mock_client))

"""
Shared test helpers for postmark-mcp.

Centralizes fixture-tree building and HTTP mocking patterns that repeat
across test files.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from adapters.postmark import PostmarkClient


def build_template_tree(base: Path, layout: dict[str, dict[str, dict[str, str]]]) -> Path:
    """Create <base>/<category>/<template>/<file> from a nested dict.

    A template mapped to {} gets an empty directory (enumerable, no content).

    Example:
        build_template_tree(tmp_path, {"basic": {"welcome": {"content.html": "<h1>Hi</h1>"}}})
    """
    base.mkdir(parents=True, exist_ok=True)
    for category, templates in layout.items():
        (base / category).mkdir(exist_ok=True)
        for template, files in templates.items():
            template_dir = base / category / template
            template_dir.mkdir(exist_ok=True)
            for name, content in files.items():
                (template_dir / name).write_text(content, encoding="utf-8")
    return base


@dataclass
class RecordedRequests:
    """Requests seen by a mock transport, in order."""
    requests: list[httpx.Request] = field(default_factory=list)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    account_token: str | None = "account-token",
) -> tuple[PostmarkClient, RecordedRequests]:
    """Build a PostmarkClient whose HTTP traffic goes to handler.

    Returns the client and a recorder of every request it sent.

    Example:
        client, seen = make_client(lambda r: httpx.Response(200, json={"MessageID": "m1"}))
        await client.send_email({...})
        assert seen.last.url.path == "/email"
    """
    seen = RecordedRequests()

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.requests.append(request)
        return handler(request)

    client = PostmarkClient(
        server_token="server-token",
        account_token=account_token,
        base_url="https://api.postmarkapp.com",
        transport=httpx.MockTransport(recording_handler),
    )
    return client, seen

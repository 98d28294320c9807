"""
Collaborators shared by every tool handler.

Built once at startup and passed by reference; handlers never read
os.environ or module globals.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from config import Settings


@dataclass(frozen=True)
class ToolContext:
    """What a handler may touch: settings and the Postmark client."""
    settings: Settings
    # PostmarkClient in production; any object with the same coroutines in tests
    client: Any

    @property
    def templates_base_path(self) -> Path:
        return self.settings.templates_base_path

"""
Configuration - Single Source of Truth

Settings are read from the environment once, at startup, into an immutable
Settings object. Handlers receive it by reference and never read os.environ.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from models import ErrorKind, PostmarkMcpError

# Postmark REST API
DEFAULT_API_BASE_URL = "https://api.postmarkapp.com"

# Template library fallback, relative to the working directory
DEFAULT_TEMPLATES_SUBPATH = Path("postmark-templates") / "templates-inlined"

# Override variables, checked in this order
TEMPLATES_PATH_VARS = ("POSTMARK_TEMPLATES_PATH", "TEMPLATES_BASE_PATH")


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, fixed at startup."""
    server_token: str
    default_sender: str
    default_message_stream: str
    templates_base_path: Path
    account_token: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL
    log_level: str = "INFO"

    def __repr__(self) -> str:
        # Tokens must never reach logs
        return (
            f"Settings(default_sender={self.default_sender!r}, "
            f"default_message_stream={self.default_message_stream!r}, "
            f"templates_base_path={str(self.templates_base_path)!r}, "
            f"account_token={'set' if self.account_token else 'unset'}, "
            f"api_base_url={self.api_base_url!r})"
        )


def _get_env(environ: Mapping[str, str], name: str) -> str | None:
    """Return a non-blank variable, or None if absent or blank."""
    value = environ.get(name)
    if value and value.strip():
        return value.strip()
    return None


def _require_env(environ: Mapping[str, str], name: str) -> str:
    """Return a non-blank variable or raise CONFIG_ERROR naming it."""
    value = _get_env(environ, name)
    if value is None:
        raise PostmarkMcpError(
            ErrorKind.CONFIG_ERROR,
            f"Missing required environment variable: {name}",
        )
    return value


def resolve_templates_base_path(
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> Path:
    """
    Resolve the local template library root.

    Order: POSTMARK_TEMPLATES_PATH, TEMPLATES_BASE_PATH, then
    <cwd>/postmark-templates/templates-inlined.
    """
    env = os.environ if environ is None else environ
    for name in TEMPLATES_PATH_VARS:
        override = _get_env(env, name)
        if override:
            return Path(override).expanduser()
    return (cwd or Path.cwd()) / DEFAULT_TEMPLATES_SUBPATH


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        PostmarkMcpError(CONFIG_ERROR): a required variable is missing or blank
    """
    env = os.environ if environ is None else environ

    server_token = _require_env(env, "POSTMARK_SERVER_TOKEN")
    default_sender = _require_env(env, "DEFAULT_SENDER_EMAIL")
    default_message_stream = _require_env(env, "DEFAULT_MESSAGE_STREAM")

    log_level = _get_env(env, "LOG_LEVEL") or "INFO"
    if _get_env(env, "DEBUG"):
        log_level = "DEBUG"

    return Settings(
        server_token=server_token,
        default_sender=default_sender,
        default_message_stream=default_message_stream,
        templates_base_path=resolve_templates_base_path(env),
        account_token=_get_env(env, "POSTMARK_ACCOUNT_TOKEN"),
        api_base_url=_get_env(env, "POSTMARK_API_URL") or DEFAULT_API_BASE_URL,
        log_level=log_level.upper(),
    )

"""
Logging configuration for postmark-mcp.

Simple setup that adapters and tools can import.
template_library should NOT log tool-level events; it reports through envelopes.

Everything goes to stderr: stdout is the MCP stdio channel.
"""

import logging
import sys
from typing import Any

# Create logger for the package
logger = logging.getLogger("postmark_mcp")


class MetadataFormatter(logging.Formatter):
    """Append `extra={"meta": {...}}` to the message as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        meta = getattr(record, "meta", None)
        if meta:
            pairs = " ".join(f"{k}={v!r}" for k, v in meta.items())
            line = f"{line} {pairs}"
        return line


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for postmark-mcp.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Only add handler if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)

        # Concise format for MCP context
        formatter = MetadataFormatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


# NOTE: Call configure_logging() explicitly in server.main() or cli.main().
# We don't auto-configure to avoid side effects on import.


def _meta(params: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


# Convenience functions for common patterns
def log_tool_call(tool: str, **params: object) -> None:
    """Log the start of a tool invocation with its key parameters."""
    logger.info(f"Tool {tool} called", extra={"meta": _meta(params)})


def log_tool_result(tool: str, **details: object) -> None:
    """Log a successful tool invocation."""
    logger.info(f"Tool {tool} succeeded", extra={"meta": _meta(details)})


def log_api_call(method: str, path: str, **params: object) -> None:
    """Log an outbound Postmark API call."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logger.debug(f"API: {method} {path}({param_str})")


def log_api_result(method: str, path: str, status: int) -> None:
    """Log API result status."""
    logger.debug(f"API: {method} {path} returned {status}")

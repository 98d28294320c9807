"""
Type definitions for postmark-mcp.

Dataclasses defining the contracts between layers:
- template_library produces Result Envelopes (never raises)
- adapters raise PostmarkMcpError on remote failures
- tools wire everything together and render text

Two error tiers:
- Expected absence (missing directory/file) is a value: StoreFailure
- Everything else is raised: PostmarkMcpError
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ============================================================================
# ERROR TYPES
# ============================================================================

class ErrorKind(Enum):
    """Categories of raised errors for consistent handling."""
    INVALID_INPUT = "invalid_input"            # Schema or cross-field rule failed
    CONFIG_ERROR = "config_error"              # Required setting missing at startup
    MISSING_CREDENTIAL = "missing_credential"  # Account token absent for push
    PROVIDER_ERROR = "provider_error"          # Postmark answered non-2xx
    NETWORK_ERROR = "network_error"            # Connection failed
    UNKNOWN_TOOL = "unknown_tool"              # Dispatch to unregistered name
    UNEXPECTED_ERROR = "unexpected_error"      # Anything else


class PostmarkMcpError(Exception):
    """
    Structured error for consistent handling across layers.

    Adapters raise these on API failures.
    The registry lets them propagate to the MCP server, which reports a failed call.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status: int | None = None,
        error_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for logging and CLI output."""
        result: dict[str, Any] = {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.status is not None:
            result["status"] = self.status
        if self.error_code is not None:
            result["error_code"] = self.error_code
        result.update(self.details)
        return result


# ============================================================================
# TEMPLATE STORE RESULT ENVELOPES
# ============================================================================

class StoreErrorCode(Enum):
    """Failure codes carried by template store envelopes."""
    NOT_FOUND = "NOT_FOUND"
    NOT_DIR = "NOT_DIR"
    IO_ERROR = "IO_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


@dataclass(frozen=True)
class StoreFailure:
    """
    Failure envelope: {ok: false, code, message}.

    message is safe to show to the caller (no stack traces, no secrets).
    """
    code: StoreErrorCode
    message: str
    ok: bool = field(default=False, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": False, "code": self.code.value, "message": self.message}


@dataclass(frozen=True)
class TemplateIdea:
    """A search hit: template name matching a topic, with its category."""
    category: str
    template: str

    def to_dict(self) -> dict[str, str]:
        return {"category": self.category, "template": self.template}


@dataclass(frozen=True)
class CategoriesResult:
    """Success envelope for list_categories."""
    categories: list[str]
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "categories": list(self.categories)}


@dataclass(frozen=True)
class TemplatesResult:
    """Success envelope for list_templates_in_category."""
    templates: list[str]
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "templates": list(self.templates)}


@dataclass(frozen=True)
class ContentResult:
    """Success envelope for get_template_content."""
    content: str
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "content": self.content}


@dataclass(frozen=True)
class IdeasResult:
    """Success envelope for get_template_ideas."""
    ideas: list[TemplateIdea]
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "ideas": [i.to_dict() for i in self.ideas]}


# ============================================================================
# POSTMARK TYPES
# ============================================================================

@dataclass
class TemplateSummary:
    """One entry of GET /templates."""
    template_id: int
    name: str
    alias: str | None = None
    subject: str | None = None
    active: bool = True
    template_type: str = "Standard"

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "TemplateSummary":
        return cls(
            template_id=raw.get("TemplateId", 0),
            name=raw.get("Name", ""),
            alias=raw.get("Alias"),
            subject=raw.get("Subject"),
            active=raw.get("Active", True),
            template_type=raw.get("TemplateType", "Standard"),
        )


@dataclass
class PushedTemplate:
    """One entry of the Templates list returned by PUT /templates/push."""
    name: str
    action: str
    alias: str | None = None
    template_id: int | None = None
    template_type: str = "Standard"

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "PushedTemplate":
        return cls(
            name=raw.get("Name", ""),
            action=raw.get("Action", ""),
            alias=raw.get("Alias"),
            template_id=raw.get("TemplateId"),
            template_type=raw.get("TemplateType", "Standard"),
        )


@dataclass
class PushResult:
    """Response of PUT /templates/push."""
    total_count: int
    templates: list[PushedTemplate] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "PushResult":
        return cls(
            total_count=raw.get("TotalCount", 0),
            templates=[PushedTemplate.from_api(t) for t in raw.get("Templates") or []],
        )


@dataclass
class OutboundStats:
    """
    Subset of GET /stats/outbound used for the summary.

    Missing counters default to zero, matching Postmark omitting empty fields.
    """
    sent: int = 0
    tracked: int = 0
    unique_opens: int = 0
    total_tracked_links_sent: int = 0
    unique_links_clicked: int = 0

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "OutboundStats":
        return cls(
            sent=raw.get("Sent") or 0,
            tracked=raw.get("Tracked") or 0,
            unique_opens=raw.get("UniqueOpens") or 0,
            total_tracked_links_sent=raw.get("TotalTrackedLinksSent") or 0,
            unique_links_clicked=raw.get("UniqueLinksClicked") or 0,
        )

    @property
    def open_rate(self) -> str:
        """Unique opens over tracked emails, one decimal place."""
        if self.tracked <= 0:
            return "0.0"
        return f"{self.unique_opens / self.tracked * 100:.1f}"

    @property
    def click_rate(self) -> str:
        """Unique link clicks over tracked links sent, one decimal place."""
        if self.total_tracked_links_sent <= 0:
            return "0.0"
        return f"{self.unique_links_clicked / self.total_tracked_links_sent * 100:.1f}"

"""
Argument schemas — one pydantic model per tool.

Each model is the full input contract of one tool: field names are the
camelCase names callers send, unknown fields are rejected, and cross-field
rules (id OR alias, html OR text body, at least one change) run before any
handler does.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from validation import validate_date, validate_email


class ToolArgs(BaseModel):
    """Base for all tool argument models."""
    model_config = ConfigDict(extra="forbid", frozen=True, alias_generator=to_camel)


class NoArgs(ToolArgs):
    """Tools that take no input."""


# ============================================================================
# EMAIL
# ============================================================================

class SendEmailArgs(ToolArgs):
    to: str = Field(description="Recipient email address")
    subject: str = Field(description="Email subject")
    text_body: str = Field(description="Plain text body of the email")
    html_body: str | None = Field(default=None, description="HTML body of the email (optional)")
    sender: str | None = Field(
        default=None, alias="from",
        description="Sender email address (optional, uses default if not provided)",
    )
    tag: str | None = Field(default=None, description="Optional tag for categorization")

    @field_validator("to")
    @classmethod
    def check_recipient(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("sender")
    @classmethod
    def check_sender(cls, v: str | None) -> str | None:
        return validate_email(v) if v is not None else v


class SendEmailWithTemplateArgs(ToolArgs):
    to: str = Field(description="Recipient email address")
    template_model: dict[str, Any] = Field(description="Data model for template variables")
    template_id: int | None = Field(
        default=None, gt=0, description="Template ID (use either this or templateAlias)",
    )
    template_alias: str | None = Field(
        default=None, description="Template alias (use either this or templateId)",
    )
    sender: str | None = Field(default=None, alias="from", description="Sender email address (optional)")
    tag: str | None = Field(default=None, description="Optional tag for categorization")

    @field_validator("to")
    @classmethod
    def check_recipient(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("sender")
    @classmethod
    def check_sender(cls, v: str | None) -> str | None:
        return validate_email(v) if v is not None else v

    @model_validator(mode="after")
    def require_template_ref(self) -> "SendEmailWithTemplateArgs":
        if self.template_id is None and not self.template_alias:
            raise ValueError("Either templateId or templateAlias must be provided")
        return self

    @property
    def template_ref(self) -> str:
        """The reference actually used: id wins over alias."""
        return str(self.template_id) if self.template_id is not None else str(self.template_alias)


# ============================================================================
# POSTMARK TEMPLATES
# ============================================================================

class CreateTemplateArgs(ToolArgs):
    name: str = Field(description="Template name (required)")
    subject: str = Field(description="Email subject (required)")
    html_body: str | None = Field(
        default=None, description="HTML body of the template (optional if textBody is provided)",
    )
    text_body: str | None = Field(
        default=None, description="Plain text body of the template (optional if htmlBody is provided)",
    )
    alias: str | None = Field(default=None, description="Template alias for easy reference (optional)")

    @model_validator(mode="after")
    def require_body(self) -> "CreateTemplateArgs":
        if not self.html_body and not self.text_body:
            raise ValueError("Either htmlBody or textBody must be provided")
        return self


class UpdateTemplateArgs(ToolArgs):
    template_id_or_alias: str = Field(description="Template ID or alias to update")
    name: str | None = Field(default=None, description="New template name (optional)")
    subject: str | None = Field(default=None, description="New email subject (optional)")
    html_body: str | None = Field(default=None, description="New HTML body of the template (optional)")
    text_body: str | None = Field(default=None, description="New plain text body of the template (optional)")
    alias: str | None = Field(default=None, description="New template alias (optional)")

    @model_validator(mode="after")
    def require_change(self) -> "UpdateTemplateArgs":
        if not self.changes():
            raise ValueError("At least one field must be provided to update")
        return self

    def changes(self) -> dict[str, str]:
        """Supplied fields as a Postmark edit payload. Empty strings count as supplied."""
        fields = {
            "Name": self.name,
            "Subject": self.subject,
            "HtmlBody": self.html_body,
            "TextBody": self.text_body,
            "Alias": self.alias,
        }
        return {k: v for k, v in fields.items() if v is not None}


class DeleteTemplateArgs(ToolArgs):
    template_id_or_alias: str = Field(description="Template ID or alias to delete")


class TemplatePushArgs(ToolArgs):
    source_server_id: str = Field(
        alias="sourceServerID",
        description="Server ID of the source server containing the templates",
    )
    destination_server_id: str = Field(
        alias="destinationServerID",
        description="Server ID of the destination server receiving the templates",
    )


# ============================================================================
# STATS
# ============================================================================

class DeliveryStatsArgs(ToolArgs):
    tag: str | None = Field(default=None, description="Filter by tag (optional)")
    from_date: str | None = Field(default=None, description="Start date in YYYY-MM-DD format (optional)")
    to_date: str | None = Field(default=None, description="End date in YYYY-MM-DD format (optional)")

    @field_validator("from_date", "to_date")
    @classmethod
    def check_date(cls, v: str | None) -> str | None:
        return validate_date(v) if v is not None else v


# ============================================================================
# TEMPLATE LIBRARY
# ============================================================================

class CategoryArgs(ToolArgs):
    category_name: str = Field(description="The name of the template category to list templates from")


class TemplateContentArgs(ToolArgs):
    category_name: str = Field(description="The name of the template category")
    template_name: str = Field(description="The name of the template")
    # Loose string: unknown formats are answered by the handler, not rejected here
    format: str | None = Field(
        default=None, description="The format to retrieve: 'html' or 'text' (default: 'html')",
    )


class TemplateIdeasArgs(ToolArgs):
    topic: str = Field(description="The topic to search for in template names")


# ============================================================================
# ERROR FORMATTING
# ============================================================================

def format_validation_error(error: ValidationError) -> str:
    """
    Collapse a pydantic ValidationError into one readable line per problem.

    Example:
        "to: Invalid email address: 'nope'; subject: Field required"
    """
    problems = []
    for item in error.errors():
        message = str(item.get("msg", "invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        location = ".".join(str(part) for part in item.get("loc", ()))
        problems.append(f"{location}: {message}" if location else message)
    return "; ".join(problems)

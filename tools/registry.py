"""
Tool Registry — the single invocation surface for all tools.

Each ToolDefinition binds a camelCase tool name to its argument model and
handler. dispatch() is the only way in:

    text = await registry.dispatch("sendEmail", {"to": ..., "subject": ..., "textBody": ...})

Boundary behaviour:
- Unknown tool name → PostmarkMcpError(UNKNOWN_TOOL)
- Arguments failing the schema (missing, unknown, cross-field) → PostmarkMcpError(INVALID_INPUT),
  before the handler runs
- PostmarkMcpError from a handler propagates unchanged
- Any other exception is logged with its traceback and rendered as an
  UNEXPECTED_ERROR message instead of crashing the server
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from logging_config import logger
from models import ErrorKind, PostmarkMcpError
from schemas import (
    CategoryArgs,
    CreateTemplateArgs,
    DeleteTemplateArgs,
    DeliveryStatsArgs,
    NoArgs,
    SendEmailArgs,
    SendEmailWithTemplateArgs,
    TemplateContentArgs,
    TemplateIdeasArgs,
    TemplatePushArgs,
    ToolArgs,
    UpdateTemplateArgs,
    format_validation_error,
)

from . import email, library, push, stats, templates
from .context import ToolContext

Handler = Callable[[Any, ToolContext], Awaitable[str]]


@dataclass(frozen=True)
class ToolDefinition:
    """A named tool: input contract, handler and one-line description."""
    name: str
    args_model: type[ToolArgs]
    handler: Handler
    description: str

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the arguments, using the caller-facing field names."""
        return self.args_model.model_json_schema(by_alias=True)


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        "sendEmail", SendEmailArgs, email.send_email,
        "Send a single email using Postmark",
    ),
    ToolDefinition(
        "sendEmailWithTemplate", SendEmailWithTemplateArgs, email.send_email_with_template,
        "Send an email using a Postmark template (by ID or alias)",
    ),
    ToolDefinition(
        "listTemplates", NoArgs, templates.list_templates,
        "List all templates on the Postmark server",
    ),
    ToolDefinition(
        "getDeliveryStats", DeliveryStatsArgs, stats.get_delivery_stats,
        "Get outbound delivery statistics: sent count, open rate, click rate",
    ),
    ToolDefinition(
        "listTemplateCategories", NoArgs, library.list_template_categories,
        "List the categories of the local template library",
    ),
    ToolDefinition(
        "listTemplatesInCategory", CategoryArgs, library.list_templates_in_category,
        "List the templates in one category of the local template library",
    ),
    ToolDefinition(
        "getTemplateContent", TemplateContentArgs, library.get_template_content,
        "Read the HTML or text content of a local library template",
    ),
    ToolDefinition(
        "getTemplateIdeas", TemplateIdeasArgs, library.get_template_ideas,
        "Search local library template names for a topic",
    ),
    ToolDefinition(
        "createTemplate", CreateTemplateArgs, templates.create_template,
        "Create a new template on the Postmark server",
    ),
    ToolDefinition(
        "updateTemplate", UpdateTemplateArgs, templates.update_template,
        "Update an existing Postmark template by ID or alias",
    ),
    ToolDefinition(
        "deleteTemplate", DeleteTemplateArgs, templates.delete_template,
        "Delete a Postmark template by ID or alias",
    ),
    ToolDefinition(
        "simulateTemplatePush", TemplatePushArgs, push.simulate_template_push,
        "Preview which templates a push between servers would change",
    ),
    ToolDefinition(
        "executeTemplatePush", TemplatePushArgs, push.execute_template_push,
        "Push templates from one server to another",
    ),
)

# Single source of truth for valid tool names.
TOOL_NAMES = frozenset(d.name for d in TOOL_DEFINITIONS)


def unexpected_error_message(tool: str) -> str:
    return f"Error [UNEXPECTED_ERROR]: Unexpected error while running '{tool}'."


class ToolRegistry:
    """
    Name → ToolDefinition mapping, fixed at construction.

    Holds the ToolContext every handler receives. Nothing is registered or
    removed after __init__.
    """

    def __init__(
        self,
        context: ToolContext,
        definitions: tuple[ToolDefinition, ...] = TOOL_DEFINITIONS,
    ):
        self._context = context
        self._definitions: dict[str, ToolDefinition] = {d.name: d for d in definitions}

    @property
    def context(self) -> ToolContext:
        return self._context

    def names(self) -> list[str]:
        return list(self._definitions)

    def get(self, name: str) -> ToolDefinition:
        definition = self._definitions.get(name)
        if definition is None:
            raise PostmarkMcpError(
                ErrorKind.UNKNOWN_TOOL,
                f"Unknown tool: {name}. Supported: {sorted(self._definitions)}",
            )
        return definition

    def parse_arguments(self, name: str, arguments: Mapping[str, Any] | None) -> ToolArgs:
        """Validate raw arguments against the tool's model."""
        definition = self.get(name)
        try:
            return definition.args_model.model_validate(dict(arguments or {}))
        except ValidationError as e:
            raise PostmarkMcpError(
                ErrorKind.INVALID_INPUT,
                f"Invalid arguments for {name}: {format_validation_error(e)}",
            ) from e

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> str:
        """Validate, run and render one tool invocation."""
        definition = self.get(name)
        args = self.parse_arguments(name, arguments)
        try:
            return await definition.handler(args, self._context)
        except PostmarkMcpError as e:
            logger.warning(f"{name} failed: {e.message}", extra={"meta": {"kind": e.kind.value}})
            raise
        except Exception:
            logger.exception(f"Unexpected error in {name}")
            return unexpected_error_message(name)

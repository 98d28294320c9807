"""
Tool Documentation Resources

Generates postmark://tools/* resources from the tool registry.
Single source of truth — the argument models ARE the documentation.
"""

from typing import Any, Iterable

from logging_config import logger
from tools.registry import ToolDefinition

RESOURCE_PREFIX = "postmark://tools/"


def _type_label(prop: dict[str, Any]) -> str:
    """Readable type for one JSON schema property (handles Optional[...] unions)."""
    if "type" in prop:
        return str(prop["type"])
    variants = [v.get("type", "any") for v in prop.get("anyOf", [])]
    variants = [v for v in variants if v != "null"]
    return " | ".join(variants) if variants else "any"


def schema_to_markdown(definition: ToolDefinition) -> str:
    """
    Render one tool's description and argument table as markdown.

    Example output:
        # sendEmail()

        Send a single email using Postmark

        | Argument | Type | Required | Description |
        |----------|------|----------|-------------|
        | `to` | string | yes | Recipient email address |
    """
    schema = definition.input_schema()
    properties: dict[str, Any] = schema.get("properties", {})
    required = set(schema.get("required", []))

    lines = [f"# {definition.name}()", "", definition.description, ""]
    if not properties:
        lines.append("Takes no arguments.")
        return "\n".join(lines)

    lines.append("| Argument | Type | Required | Description |")
    lines.append("|----------|------|----------|-------------|")
    for name, prop in properties.items():
        lines.append(
            f"| `{name}` | {_type_label(prop)} | {'yes' if name in required else 'no'} "
            f"| {prop.get('description', '')} |"
        )
    return "\n".join(lines)


class ToolResourceRegistry:
    """
    Registry for auto-generated tool documentation resources.

    Renders lazily and caches per URI; tool definitions never change after startup.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._cache: dict[str, dict[str, str]] = {}

    def register_definitions(self, definitions: Iterable[ToolDefinition]) -> int:
        """Register tool definitions. Returns how many were added."""
        count = 0
        for definition in definitions:
            self._tools[definition.name] = definition
            self._cache.pop(f"{RESOURCE_PREFIX}{definition.name}", None)
            count += 1
        logger.debug(f"Tool resource registry: {count} tools registered for {RESOURCE_PREFIX}* documentation")
        return count

    def get_tool_names(self) -> set[str]:
        """Get set of all registered tool names."""
        return set(self._tools.keys())

    def get_resource(self, uri: str) -> dict[str, str]:
        """
        Get resource by URI.

        Args:
            uri: Resource URI (e.g., "postmark://tools/sendEmail")

        Returns:
            Resource dict with uri, mimeType, text

        Raises:
            KeyError: If the URI doesn't name a registered tool
        """
        if uri in self._cache:
            return self._cache[uri]

        if not uri.startswith(RESOURCE_PREFIX):
            raise KeyError(uri)
        name = uri[len(RESOURCE_PREFIX):]
        if name not in self._tools:
            raise KeyError(uri)

        resource = {
            "uri": uri,
            "mimeType": "text/markdown",
            "text": schema_to_markdown(self._tools[name]),
        }
        self._cache[uri] = resource
        return resource


# Module-level registry shared by server.py
_registry: ToolResourceRegistry | None = None


def get_tool_registry() -> ToolResourceRegistry:
    """Get the shared tool documentation registry."""
    global _registry
    if _registry is None:
        _registry = ToolResourceRegistry()
    return _registry

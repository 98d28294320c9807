"""
Tools — MCP tool implementations.

Each concern has its own module with handlers and renderers.
registry.py binds them to tool names; server.py exposes them over MCP.

Tools (13):
- Sending: sendEmail, sendEmailWithTemplate
- Postmark templates: listTemplates, createTemplate, updateTemplate, deleteTemplate
- Stats: getDeliveryStats
- Template push: simulateTemplatePush, executeTemplatePush
- Local library: listTemplateCategories, listTemplatesInCategory, getTemplateContent, getTemplateIdeas
"""

from .context import ToolContext
from .registry import TOOL_DEFINITIONS, TOOL_NAMES, ToolDefinition, ToolRegistry

__all__ = [
    "ToolContext", "ToolDefinition", "ToolRegistry", "TOOL_DEFINITIONS", "TOOL_NAMES",
]

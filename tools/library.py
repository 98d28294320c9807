"""
Local template library tools — categories, templates, content, ideas.

Backed by template_library. Store failures are rendered as plain messages,
never raised: a missing directory is an answer, not an error.
"""

from logging_config import log_tool_call, log_tool_result
from models import StoreFailure
from schemas import CategoryArgs, NoArgs, TemplateContentArgs, TemplateIdeasArgs
from template_library import (
    get_template_content as read_template_content,
    get_template_ideas as find_template_ideas,
    list_categories,
    list_templates_in_category as list_category_templates,
)
from validation import normalize_content_format

from .context import ToolContext


def _bullets(items: list[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


async def list_template_categories(args: NoArgs, ctx: ToolContext) -> str:
    log_tool_call("listTemplateCategories", base_path=str(ctx.templates_base_path))
    res = await list_categories(ctx.templates_base_path)
    if isinstance(res, StoreFailure):
        return res.message

    log_tool_result("listTemplateCategories", count=len(res.categories))
    if not res.categories:
        return (
            "No template categories found. The postmark-templates/templates-inlined "
            "directory may not exist or may be empty."
        )
    return f"Found {len(res.categories)} template categories:\n\n{_bullets(res.categories)}"


async def list_templates_in_category(args: CategoryArgs, ctx: ToolContext) -> str:
    category = args.category_name
    log_tool_call("listTemplatesInCategory", category=category)
    res = await list_category_templates(ctx.templates_base_path, category)
    if isinstance(res, StoreFailure):
        return res.message

    log_tool_result("listTemplatesInCategory", category=category, count=len(res.templates))
    if not res.templates:
        return (
            f"No templates found in category '{category}'. "
            "The category may not exist or may be empty."
        )
    return f"Found {len(res.templates)} templates in category '{category}':\n\n{_bullets(res.templates)}"


async def get_template_content(args: TemplateContentArgs, ctx: ToolContext) -> str:
    category, template = args.category_name, args.template_name
    log_tool_call("getTemplateContent", category=category, template=template, format=args.format)

    fmt = normalize_content_format(args.format)
    if fmt is None:
        return f"Invalid format '{args.format}'. Please use 'html' or 'text'."

    res = await read_template_content(ctx.templates_base_path, category, template, fmt)
    if isinstance(res, StoreFailure):
        return f"Template {fmt} content for '{template}' in category '{category}' not found."

    log_tool_result("getTemplateContent", template=template, format=fmt)
    return (
        f"Template content for '{template}' in category '{category}' ({fmt} format):\n\n"
        f"```{fmt}\n{res.content}\n```"
    )


async def get_template_ideas(args: TemplateIdeasArgs, ctx: ToolContext) -> str:
    topic = args.topic
    log_tool_call("getTemplateIdeas", topic=topic)
    res = await find_template_ideas(ctx.templates_base_path, topic)
    if isinstance(res, StoreFailure):
        return res.message

    log_tool_result("getTemplateIdeas", topic=topic, count=len(res.ideas))
    if not res.ideas:
        return f"No templates found matching the topic '{topic}'. Try a different search term."

    listing = "\n".join(f"• **{idea.template}** (in category: {idea.category})" for idea in res.ideas)
    return f"Found {len(res.ideas)} template ideas for topic '{topic}':\n\n{listing}"

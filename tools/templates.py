"""
Postmark template management — listTemplates, createTemplate, updateTemplate, deleteTemplate.

These act on templates stored at Postmark, not on the local template library
(see tools/library.py for that).
"""

from typing import Any

from logging_config import log_tool_call, log_tool_result
from models import TemplateSummary
from schemas import CreateTemplateArgs, DeleteTemplateArgs, NoArgs, UpdateTemplateArgs

from .context import ToolContext


def _format_summary(template: TemplateSummary) -> str:
    return (
        f"• **{template.name}**\n"
        f"  - ID: {template.template_id}\n"
        f"  - Alias: {template.alias or 'none'}\n"
        f"  - Subject: {template.subject or 'none'}"
    )


def _format_template_fields(result: dict[str, Any]) -> str:
    """Fields Postmark echoes back after a create or edit."""
    return (
        f"Template ID: {result.get('TemplateId')}\n"
        f"Name: {result.get('Name')}\n"
        f"Subject: {result.get('Subject')}\n"
        f"Alias: {result.get('Alias') or 'none'}\n"
        f"Active: {'Yes' if result.get('Active') else 'No'}"
    )


async def list_templates(args: NoArgs, ctx: ToolContext) -> str:
    log_tool_call("listTemplates")
    templates = await ctx.client.get_templates()
    log_tool_result("listTemplates", count=len(templates))

    listing = "\n\n".join(_format_summary(t) for t in templates)
    return f"Found {len(templates)} templates:\n\n{listing}"


async def create_template(args: CreateTemplateArgs, ctx: ToolContext) -> str:
    log_tool_call("createTemplate", name=args.name, subject=args.subject, alias=args.alias)

    data: dict[str, Any] = {"Name": args.name, "Subject": args.subject}
    if args.html_body:
        data["HtmlBody"] = args.html_body
    if args.text_body:
        data["TextBody"] = args.text_body
    if args.alias:
        data["Alias"] = args.alias

    result = await ctx.client.create_template(data)
    log_tool_result("createTemplate", template_id=result.get("TemplateId"))
    return f"Template created successfully!\n\n{_format_template_fields(result)}"


async def update_template(args: UpdateTemplateArgs, ctx: ToolContext) -> str:
    log_tool_call(
        "updateTemplate",
        template=args.template_id_or_alias, name=args.name, subject=args.subject, alias=args.alias,
    )
    result = await ctx.client.edit_template(args.template_id_or_alias, args.changes())
    log_tool_result("updateTemplate", template_id=result.get("TemplateId"))
    return f"Template updated successfully!\n\n{_format_template_fields(result)}"


async def delete_template(args: DeleteTemplateArgs, ctx: ToolContext) -> str:
    log_tool_call("deleteTemplate", template=args.template_id_or_alias)
    result = await ctx.client.delete_template(args.template_id_or_alias)
    log_tool_result("deleteTemplate", template=args.template_id_or_alias)

    return (
        "Template deleted successfully!\n\n"
        f"Template ID/Alias: {args.template_id_or_alias}\n"
        f"Status: {result.get('Message') or 'Deleted'}\n\n"
        "Note: This action has been logged for auditing purposes."
    )

"""
Template push — simulateTemplatePush and executeTemplatePush.

Both call PUT /templates/push with the account token; only PerformChanges
and the framing text differ.
"""

from logging_config import log_tool_call, log_tool_result
from models import ErrorKind, PostmarkMcpError, PushedTemplate, PushResult
from schemas import TemplatePushArgs

from .context import ToolContext

# Framing text: (title, count label, list heading, empty message, closing note)
_SIMULATION = (
    "Template Push Simulation Results",
    "Total Templates Affected",
    "Templates that would be affected:",
    "No templates would be affected.",
    "Note: This was a simulation only. No changes were made.",
)
_EXECUTION = (
    "Template Push Execution Results",
    "Total Templates Processed",
    "Templates that were processed:",
    "No templates were processed.",
    "Note: Changes have been applied to the destination server.",
)


def _format_pushed(template: PushedTemplate) -> str:
    return (
        f"• **{template.name}** ({template.alias or 'no alias'})\n"
        f"  - Action: {template.action}\n"
        f"  - Type: {template.template_type}\n"
        f"  - Template ID: {template.template_id or 'N/A'}"
    )


def render_push(result: PushResult, args: TemplatePushArgs, perform_changes: bool) -> str:
    title, count_label, heading, empty, note = _EXECUTION if perform_changes else _SIMULATION

    if result.total_count > 0:
        listing = "\n\n".join(_format_pushed(t) for t in result.templates)
        body = f"{heading}\n\n{listing}"
    else:
        body = empty

    return (
        f"{title}\n\n"
        f"Source Server ID: {args.source_server_id}\n"
        f"Destination Server ID: {args.destination_server_id}\n"
        f"{count_label}: {result.total_count}\n\n"
        f"{body}\n\n"
        f"{note}"
    )


async def _push(args: TemplatePushArgs, ctx: ToolContext, perform_changes: bool) -> str:
    tool = "executeTemplatePush" if perform_changes else "simulateTemplatePush"
    if not ctx.settings.account_token:
        raise PostmarkMcpError(
            ErrorKind.MISSING_CREDENTIAL,
            "POSTMARK_ACCOUNT_TOKEN environment variable is required for template push operations",
        )

    log_tool_call(tool, source=args.source_server_id, destination=args.destination_server_id)
    result = await ctx.client.push_templates(
        args.source_server_id, args.destination_server_id, perform_changes=perform_changes,
    )
    log_tool_result(tool, total=result.total_count)
    return render_push(result, args, perform_changes)


async def simulate_template_push(args: TemplatePushArgs, ctx: ToolContext) -> str:
    return await _push(args, ctx, perform_changes=False)


async def execute_template_push(args: TemplatePushArgs, ctx: ToolContext) -> str:
    return await _push(args, ctx, perform_changes=True)

"""
Send operations — sendEmail and sendEmailWithTemplate.

Sender defaults to the configured address; the message stream is always the
configured stream. Open tracking and link tracking (HTML and text) are always on.
"""

from typing import Any

from logging_config import log_tool_call, log_tool_result
from schemas import SendEmailArgs, SendEmailWithTemplateArgs

from .context import ToolContext

# Link tracking mode applied to every outgoing message
TRACK_LINKS = "HtmlAndText"


def _envelope(ctx: ToolContext, to: str, sender: str | None, tag: str | None) -> dict[str, Any]:
    """Fields common to every outgoing message."""
    payload: dict[str, Any] = {
        "From": sender or ctx.settings.default_sender,
        "To": to,
        "MessageStream": ctx.settings.default_message_stream,
        "TrackOpens": True,
        "TrackLinks": TRACK_LINKS,
    }
    if tag:
        payload["Tag"] = tag
    return payload


def build_email_payload(args: SendEmailArgs, ctx: ToolContext) -> dict[str, Any]:
    """Postmark /email payload for a plain send."""
    payload = _envelope(ctx, args.to, args.sender, args.tag)
    payload["Subject"] = args.subject
    payload["TextBody"] = args.text_body
    if args.html_body:
        payload["HtmlBody"] = args.html_body
    return payload


def build_template_email_payload(args: SendEmailWithTemplateArgs, ctx: ToolContext) -> dict[str, Any]:
    """Postmark /email/withTemplate payload. Template id wins over alias."""
    payload = _envelope(ctx, args.to, args.sender, args.tag)
    payload["TemplateModel"] = args.template_model
    if args.template_id is not None:
        payload["TemplateId"] = args.template_id
    else:
        payload["TemplateAlias"] = args.template_alias
    return payload


async def send_email(args: SendEmailArgs, ctx: ToolContext) -> str:
    """Send a plain email and report the message id."""
    log_tool_call("sendEmail", to=args.to, subject=args.subject)
    result = await ctx.client.send_email(build_email_payload(args, ctx))
    log_tool_result("sendEmail", message_id=result.get("MessageID"))

    return (
        "Email sent successfully!\n"
        f"MessageID: {result.get('MessageID')}\n"
        f"To: {args.to}\n"
        f"Subject: {args.subject}"
    )


async def send_email_with_template(args: SendEmailWithTemplateArgs, ctx: ToolContext) -> str:
    """Send an email rendered from a server-side Postmark template."""
    log_tool_call("sendEmailWithTemplate", to=args.to, template=args.template_ref)
    result = await ctx.client.send_email_with_template(build_template_email_payload(args, ctx))
    log_tool_result("sendEmailWithTemplate", message_id=result.get("MessageID"))

    return (
        "Template email sent successfully!\n"
        f"MessageID: {result.get('MessageID')}\n"
        f"To: {args.to}\n"
        f"Template: {args.template_ref}"
    )

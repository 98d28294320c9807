"""
Delivery statistics — getDeliveryStats.

Rates are computed locally from the outbound overview counters and render
as 0.0% when nothing was tracked.
"""

from logging_config import log_tool_call, log_tool_result
from models import OutboundStats
from schemas import DeliveryStatsArgs

from .context import ToolContext


def render_stats(stats: OutboundStats, args: DeliveryStatsArgs) -> str:
    lines = [
        "Email Statistics Summary",
        "",
        f"Sent: {stats.sent} emails",
        f"Open Rate: {stats.open_rate}% ({stats.unique_opens}/{stats.tracked} tracked emails)",
        f"Click Rate: {stats.click_rate}% "
        f"({stats.unique_links_clicked}/{stats.total_tracked_links_sent} tracked links)",
        "",
    ]
    if args.from_date or args.to_date:
        lines.append(f"Period: {args.from_date or 'start'} to {args.to_date or 'now'}")
    if args.tag:
        lines.append(f"Tag: {args.tag}")
    return "\n".join(lines) + "\n"


async def get_delivery_stats(args: DeliveryStatsArgs, ctx: ToolContext) -> str:
    log_tool_call("getDeliveryStats", tag=args.tag, from_date=args.from_date, to_date=args.to_date)
    stats = await ctx.client.get_outbound_stats(
        tag=args.tag, from_date=args.from_date, to_date=args.to_date,
    )
    log_tool_result("getDeliveryStats", sent=stats.sent)
    return render_stats(stats, args)

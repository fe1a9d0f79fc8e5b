from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Tuple
import math

from outbound.funnel.inputs import BusinessInputs


class FunnelError(ValueError):
    """A conversion rate left the funnel stage undefined."""


@dataclass(frozen=True)
class FunnelResult:
    revenue_gap: float
    total_clients_needed: int
    clients_to_close_gap: int
    current_clients: int
    churned_per_month: int
    clients_per_month: int
    calls_shown_needed: int
    meetings_booked_needed: int
    interested_needed: int
    total_replies: int
    emails_per_month: int
    emails_per_day: int
    total_emails_over_period: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _ceil(x: float, stage: str) -> int:
    if not math.isfinite(x):
        raise FunnelError(f"{stage} is unbounded for these inputs")
    return int(math.ceil(x))


def _round_half_up(x: float, stage: str) -> int:
    if not math.isfinite(x):
        raise FunnelError(f"{stage} is unbounded for these inputs")
    return int(math.floor(x + 0.5))


def backward(downstream: int, pct: float, field: str) -> int:
    """Count needed one stage up the funnel: ceil(downstream / (pct/100))."""
    if pct <= 0:
        raise FunnelError(f"{field} must be greater than 0% to size the funnel")
    return _ceil(downstream / (pct / 100), field)


def derive_funnel(i: BusinessInputs) -> FunnelResult:
    """Work backwards from the revenue target to daily email volume.

    Stages are discrete events, so every step rounds up except the current
    client headcount, which is an estimate and rounds to nearest. Zero deal
    size, timeframe or working days fall back to a divisor of 1. The input is
    never modified.
    """
    deal = i.avg_deal_size or 1
    months = i.timeframe_months or 1
    days = i.working_days or 1

    revenue_gap = max(i.revenue_target - i.current_revenue, 0)
    total_clients_needed = _ceil(revenue_gap / deal, "total_clients_needed")
    clients_to_close_gap = _ceil(total_clients_needed / months, "clients_to_close_gap")

    # Existing base churning each month must be replaced on top of growth
    current_clients = _round_half_up(i.current_revenue / deal, "current_clients")
    churned_per_month = _ceil(current_clients * (i.churn_rate / 100), "churned_per_month")
    clients_per_month = clients_to_close_gap + churned_per_month

    calls_shown_needed = backward(clients_per_month, i.close_rate, "close_rate")
    meetings_booked_needed = backward(calls_shown_needed, i.show_rate, "show_rate")
    interested_needed = backward(meetings_booked_needed, i.interested_to_booked, "interested_to_booked")
    total_replies = backward(interested_needed, i.positive_reply_rate, "positive_reply_rate")
    emails_per_month = backward(total_replies, i.reply_rate, "reply_rate")
    emails_per_day = _ceil(emails_per_month / days, "emails_per_day")

    return FunnelResult(
        revenue_gap=revenue_gap,
        total_clients_needed=total_clients_needed,
        clients_to_close_gap=clients_to_close_gap,
        current_clients=current_clients,
        churned_per_month=churned_per_month,
        clients_per_month=clients_per_month,
        calls_shown_needed=calls_shown_needed,
        meetings_booked_needed=meetings_booked_needed,
        interested_needed=interested_needed,
        total_replies=total_replies,
        emails_per_month=emails_per_month,
        emails_per_day=emails_per_day,
        total_emails_over_period=emails_per_month * i.timeframe_months,
    )


STAGE_LABELS: List[Tuple[str, str]] = [
    ("Emails Sent", "emails_per_month"),
    ("Total Replies", "total_replies"),
    ("Interested", "interested_needed"),
    ("Meetings Booked", "meetings_booked_needed"),
    ("Meetings Shown", "calls_shown_needed"),
    ("Clients Won", "clients_per_month"),
]


def funnel_stages(r: FunnelResult) -> List[Dict[str, Any]]:
    """Monthly funnel, top to bottom, each stage as a share of emails sent."""
    out: List[Dict[str, Any]] = []
    for label, attr in STAGE_LABELS:
        value = getattr(r, attr)
        pct = (value / r.emails_per_month) * 100 if r.emails_per_month else 0.0
        out.append({"label": label, "value": value, "pct": min(max(pct, 0.0), 100.0)})
    return out

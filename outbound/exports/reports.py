from __future__ import annotations
from typing import Dict, Any
import math

from outbound.currency.convert import SYMBOLS
from outbound.funnel.engine import FunnelResult
from outbound.funnel.inputs import BusinessInputs
from outbound.infrastructure.estimator import InfrastructureResult


def _round(n: float) -> int:
    return int(math.floor(n + 0.5))


def fmt(n: float) -> str:
    """Whole number with thousands separators, e.g. 28,600."""
    return f"{_round(n):,}"


def fmt_currency(n: float, currency: str) -> str:
    sign = "-" if n < 0 else ""
    return f"{sign}{SYMBOLS[currency]}{_round(abs(n)):,}"


def _pct(p: float) -> str:
    return f"{p:g}%"


def _months(n: int) -> str:
    return f"{n} month{'s' if n > 1 else ''}"


def summary_md(i: BusinessInputs, f: FunnelResult, infra: InfrastructureResult, currency: str) -> str:
    fc = lambda n: fmt_currency(n, currency)  # noqa: E731
    lines = ["# Outbound Plan", ""]
    lines.append(
        f"You currently generate {fc(i.current_revenue)}/month. "
        f"To reach {fc(i.revenue_target)}/month within {_months(i.timeframe_months)}, "
        f"you need {fmt(f.clients_per_month)} new clients/month: "
        f"{fmt(f.clients_to_close_gap)} to close the gap and {fmt(f.churned_per_month)} "
        f"to replace {_pct(i.churn_rate)} monthly churn "
        f"({fmt(f.current_clients)} current clients x {_pct(i.churn_rate)})."
    )
    lines.append("")
    lines.append(
        f"At a {_pct(i.reply_rate)} reply rate, {_pct(i.positive_reply_rate)} positive "
        f"and {_pct(i.interested_to_booked)} booking rate, send {fmt(f.emails_per_day)} emails/day "
        f"({fmt(f.emails_per_month)}/month, {fmt(f.total_emails_over_period)} total over "
        f"{_months(i.timeframe_months)})."
    )
    lines.append("")
    lines.append("## Infrastructure")
    lines.append(f"- inboxes: {fmt(infra.inboxes_needed)} ({infra.emails_per_inbox} emails/inbox/day)")
    lines.append(f"- domains: {fmt(infra.domains_needed)}")
    lines.append(f"- inbox cost / month: {fc(infra.inbox_cost_monthly)}")
    lines.append(f"- domain cost / year: {fc(infra.domain_cost_annual)}")
    return "\n".join(lines) + "\n"


def results_row(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a session snapshot into one row for writers.write_results."""
    return {
        "currency": snapshot["currency"],
        "provider": snapshot["provider"],
        **snapshot["funnel"],
        **snapshot["infrastructure"],
    }

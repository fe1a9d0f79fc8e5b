from __future__ import annotations
from typing import List, Dict, Any, Iterable
import csv
import io

SCHEMAS = {
    "funnel": ["label", "value", "pct"],
    "results": [
        "currency", "provider", "revenue_gap", "total_clients_needed", "clients_to_close_gap",
        "current_clients", "churned_per_month", "clients_per_month", "calls_shown_needed",
        "meetings_booked_needed", "interested_needed", "total_replies", "emails_per_month",
        "emails_per_day", "total_emails_over_period", "inboxes_needed", "domains_needed",
        "inbox_cost_monthly", "domain_cost_annual",
    ],
}


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def write_funnel(stages: Iterable[Dict[str, Any]]) -> str:
    return write_csv(stages, SCHEMAS["funnel"])


def write_results(rows: Iterable[Dict[str, Any]]) -> str:
    return write_csv(rows, SCHEMAS["results"])


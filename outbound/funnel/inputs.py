from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Tuple
import math

MONEY_FIELDS: Tuple[str, ...] = ("revenue_target", "current_revenue", "avg_deal_size")
CONVERSION_RATE_FIELDS: Tuple[str, ...] = (
    "reply_rate",
    "positive_reply_rate",
    "interested_to_booked",
    "show_rate",
    "close_rate",
)
PERCENT_FIELDS: Tuple[str, ...] = CONVERSION_RATE_FIELDS + ("churn_rate",)
TIMEFRAME_OPTIONS: Tuple[int, ...] = (1, 2, 3, 6, 12)


@dataclass
class BusinessInputs:
    # Money, expressed in the session's active currency
    revenue_target: float = 100000.0   # monthly revenue goal
    current_revenue: float = 30000.0   # monthly revenue today
    avg_deal_size: float = 3000.0      # monthly value of one client

    # Funnel conversion rates, percent 0..100
    reply_rate: float = 2.5            # emails -> replies
    positive_reply_rate: float = 20.0  # replies -> interested
    interested_to_booked: float = 40.0
    show_rate: float = 80.0            # booked -> shown
    close_rate: float = 20.0           # shown -> closed
    churn_rate: float = 10.0           # monthly share of clients lost

    working_days: int = 20
    timeframe_months: int = 3

    def copy(self) -> "BusinessInputs":
        return BusinessInputs(**asdict(self))

    def key(self) -> Tuple[Any, ...]:
        """Hashable snapshot used to memoize derived results."""
        return tuple(getattr(self, f.name) for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


FIELD_NAMES: Tuple[str, ...] = tuple(f.name for f in fields(BusinessInputs))


def default_inputs() -> BusinessInputs:
    """Defaults in USD."""
    return BusinessInputs()


def inputs_from_dict(data: Dict[str, Any], base: BusinessInputs | None = None) -> BusinessInputs:
    """Overlay data onto base (or the defaults) and validate the result."""
    out = (base or default_inputs()).copy()
    for k, v in data.items():
        if k not in FIELD_NAMES:
            raise ValueError(f"unknown input field: {k}")
        setattr(out, k, _coerce(k, v))
    validate_inputs(out)
    return out


def _coerce(name: str, value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number") from None
    if not math.isfinite(num):
        raise ValueError(f"{name} must be a finite number")
    if name in ("working_days", "timeframe_months"):
        if not num.is_integer():
            raise ValueError(f"{name} must be a whole number")
        return int(num)
    return num


def validate_inputs(i: BusinessInputs) -> None:
    for name in FIELD_NAMES:
        if not math.isfinite(getattr(i, name)):
            raise ValueError(f"{name} must be a finite number")
    for name in MONEY_FIELDS:
        if getattr(i, name) < 0:
            raise ValueError(f"{name} must not be negative")
    if i.avg_deal_size <= 0:
        raise ValueError("avg_deal_size must be greater than 0")
    for name in PERCENT_FIELDS:
        if not (0.0 <= getattr(i, name) <= 100.0):
            raise ValueError(f"{name} must be between 0 and 100%")
    for name in CONVERSION_RATE_FIELDS:
        if getattr(i, name) <= 0:
            raise ValueError(f"{name} must be greater than 0%")
    if not isinstance(i.working_days, int) or i.working_days <= 0:
        raise ValueError("working_days must be a positive whole number")
    if i.timeframe_months not in TIMEFRAME_OPTIONS:
        raise ValueError(f"timeframe_months must be one of {list(TIMEFRAME_OPTIONS)}")

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union
import math

from outbound.config.env import get_infra_config
from outbound.currency.convert import USD, convert
from outbound.infrastructure.providers import ProviderProfile, get_provider

_INFRA = get_infra_config()
INBOXES_PER_DOMAIN = _INFRA.inboxes_per_domain
DOMAIN_ANNUAL_COST_USD = _INFRA.domain_annual_cost_usd


@dataclass(frozen=True)
class InfrastructureResult:
    inboxes_needed: int
    domains_needed: int
    inbox_cost_monthly: float  # in `currency`
    domain_cost_annual: float  # in `currency`
    emails_per_inbox: int
    currency: str

    @property
    def total_monthly(self) -> float:
        return self.inbox_cost_monthly

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["total_monthly"] = self.total_monthly
        return d


def estimate_infrastructure(
    emails_per_day: int,
    provider: Union[ProviderProfile, str],
    inboxes_per_domain: Optional[int] = None,
    currency: str = USD,
    domain_annual_cost: Optional[float] = None,
) -> InfrastructureResult:
    """Inboxes, sending domains and their cost for a daily email volume.

    Provider and domain prices are in USD and converted to `currency`.
    """
    p = get_provider(provider) if isinstance(provider, str) else provider
    per_domain = inboxes_per_domain or INBOXES_PER_DOMAIN
    domain_cost = DOMAIN_ANNUAL_COST_USD if domain_annual_cost is None else domain_annual_cost

    inboxes = int(math.ceil(emails_per_day / p.emails_per_inbox_per_day))
    domains = int(math.ceil(inboxes / per_domain))
    return InfrastructureResult(
        inboxes_needed=inboxes,
        domains_needed=domains,
        inbox_cost_monthly=convert(inboxes * p.inbox_monthly_cost, USD, currency),
        domain_cost_annual=convert(domains * domain_cost, USD, currency),
        emails_per_inbox=p.emails_per_inbox_per_day,
        currency=currency,
    )

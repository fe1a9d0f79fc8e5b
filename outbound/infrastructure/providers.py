from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

@dataclass(frozen=True)
class ProviderProfile:
    key: str
    label: str
    emails_per_inbox_per_day: int
    inbox_monthly_cost: float  # USD per inbox per month


@dataclass(frozen=True)
class Partner:
    name: str
    description: str
    url: str


PROVIDERS: Mapping[str, ProviderProfile] = MappingProxyType({
    "Google": ProviderProfile("Google", "Google Workspace", 30, 3.50),
    "Microsoft": ProviderProfile("Microsoft", "Microsoft 365", 25, 3.50),
    "SMTP": ProviderProfile("SMTP", "SMTP", 30, 5.00),
})

DEFAULT_PROVIDER = "Google"

# Recommended inbox vendors for the webmail providers; SMTP has none
_PARTNERS: Mapping[str, Partner] = MappingProxyType({
    "Google": Partner(
        name="Premium Inboxes",
        description="Google Workspace inboxes set up and optimised for cold email deliverability.",
        url="https://premiuminboxes.com",
    ),
    "Microsoft": Partner(
        name="Inbox Kit",
        description="Microsoft 365 and Azure inboxes, fast setup, cold-email ready.",
        url="https://www.inboxkit.com",
    ),
})


def get_provider(key: str) -> ProviderProfile:
    """Look up a provider profile. Unknown keys raise KeyError."""
    try:
        return PROVIDERS[key]
    except KeyError:
        raise KeyError(f"unknown provider: {key!r}") from None


def recommended_partner(key: str) -> Optional[Partner]:
    get_provider(key)
    return _PARTNERS.get(key)

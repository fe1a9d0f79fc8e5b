from __future__ import annotations
import os
from dataclasses import dataclass

@dataclass(frozen=True)
class FXConfig:
    usd_to_cad: float = 1.3567


def get_fx_config() -> FXConfig:
    raw = os.getenv("OUTBOUND_USD_TO_CAD")
    if raw:
        return FXConfig(usd_to_cad=float(raw))
    return FXConfig()


@dataclass(frozen=True)
class InfraConfig:
    inboxes_per_domain: int = 3
    domain_annual_cost_usd: float = 11.0


def get_infra_config() -> InfraConfig:
    return InfraConfig()


@dataclass(frozen=True)
class SuggestConfig:
    api_key: str | None = None
    base_url: str = "https://api.anthropic.com"
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 1000
    timeout_sec: float = 30.0


def get_suggest_config() -> SuggestConfig:
    return SuggestConfig(
        api_key=os.getenv("ANTHROPIC_API_KEY"),
        base_url=os.getenv("ANTHROPIC_BASE_URL", "https://api.anthropic.com"),
        model=os.getenv("OUTBOUND_SUGGEST_MODEL", "claude-sonnet-4-5-20250929"),
    )


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"
    json: bool = False


def get_log_config() -> LogConfig:
    return LogConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        json=os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes"),
    )

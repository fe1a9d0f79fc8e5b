from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from outbound.currency.convert import USD, CURRENCIES, convert_inputs
from outbound.funnel.inputs import BusinessInputs, default_inputs, inputs_from_dict
from outbound.funnel.engine import FunnelResult, derive_funnel, funnel_stages
from outbound.infrastructure.estimator import InfrastructureResult, estimate_infrastructure
from outbound.infrastructure.providers import DEFAULT_PROVIDER, get_provider
from outbound.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CalculatorSession:
    """Mutable calculator state; derived results are recomputed from it.

    Money inputs are always stored in the active currency. Results are
    memoized on an equality snapshot of (inputs, provider, currency).
    """
    inputs: BusinessInputs = field(default_factory=default_inputs)
    currency: str = USD
    provider: str = DEFAULT_PROVIDER
    _cache_key: Optional[Tuple[Any, ...]] = field(default=None, init=False, repr=False, compare=False)
    _cache: Optional[Tuple[FunnelResult, InfrastructureResult]] = field(default=None, init=False, repr=False, compare=False)

    def update(self, **values: Any) -> None:
        self.inputs = inputs_from_dict(values, base=self.inputs)

    def switch_currency(self, new_currency: str) -> None:
        if new_currency not in CURRENCIES:
            raise ValueError(f"unsupported currency: {new_currency!r}")
        if new_currency == self.currency:
            return
        convert_inputs(self.inputs, self.currency, new_currency)
        logger.info("currency_switched", from_currency=self.currency, to_currency=new_currency)
        self.currency = new_currency

    def select_provider(self, key: str) -> None:
        get_provider(key)
        self.provider = key
        logger.info("provider_selected", provider=key)

    def reset(self) -> None:
        self.inputs = default_inputs()
        self.currency = USD

    def results(self) -> Tuple[FunnelResult, InfrastructureResult]:
        key = (self.inputs.key(), self.provider, self.currency)
        if self._cache is None or self._cache_key != key:
            funnel = derive_funnel(self.inputs)
            infra = estimate_infrastructure(funnel.emails_per_day, self.provider, currency=self.currency)
            self._cache_key, self._cache = key, (funnel, infra)
        return self._cache

    @property
    def domains_needed(self) -> int:
        return self.results()[1].domains_needed

    def to_dict(self) -> Dict[str, Any]:
        funnel, infra = self.results()
        return {
            "inputs": self.inputs.to_dict(),
            "currency": self.currency,
            "provider": self.provider,
            "funnel": funnel.to_dict(),
            "funnel_stages": funnel_stages(funnel),
            "infrastructure": infra.to_dict(),
        }

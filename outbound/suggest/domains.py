from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import json
import re

import requests

from outbound.config.env import SuggestConfig, get_suggest_config
from outbound.logging import get_logger

"""
Sending-domain suggestions from the Anthropic Messages API.

The request is built and the reply parsed by separate functions so both can
be tested offline; `suggest_domains` is the only call that touches the
network. One attempt, no retry.
"""

logger = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
ERROR_MESSAGE = "Something went wrong generating suggestions. Please try again."
PREFIXES = ("try", "go", "get", "use", "hello", "meet", "hi", "with", "by", "team", "mail", "outreach", "hq")

_FENCE = re.compile(r"```json|```")


@dataclass(frozen=True)
class SuggestionResult:
    primary_domain: str
    domains: List[str] = field(default_factory=list)
    error: Optional[str] = None


def build_prompt(primary_domain: str, count: int) -> str:
    return (
        "You are a cold email deliverability expert. "
        f'Given the primary business domain "{primary_domain}", '
        f"suggest exactly {count} alternative sending domains. Rules:\n"
        f"- Use common prefixes/suffixes like: {', '.join(PREFIXES)}\n"
        "- Keep the core brand name recognisable\n"
        "- Return ONLY a JSON array of domain strings, nothing else"
    )


def build_request(primary_domain: str, count: int, cfg: Optional[SuggestConfig] = None) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    cfg = cfg or get_suggest_config()
    if not cfg.api_key:
        raise ValueError("ANTHROPIC_API_KEY environment variable is not set")
    url = f"{cfg.base_url.rstrip('/')}/v1/messages"
    headers = {
        "Content-Type": "application/json",
        "x-api-key": cfg.api_key,
        "anthropic-version": ANTHROPIC_VERSION,
    }
    body = {
        "model": cfg.model,
        "max_tokens": cfg.max_tokens,
        "messages": [{"role": "user", "content": build_prompt(primary_domain, count)}],
    }
    return url, headers, body


def extract_text(payload: Dict[str, Any]) -> str:
    """Text of the first content block of a Messages API reply."""
    try:
        return payload["content"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise ValueError("unexpected response shape from suggestion API") from None


def parse_suggestions(text: str) -> List[str]:
    """Parse the model's JSON array, tolerating markdown code fences.

    A well-formed reply that is not a list gives []. Malformed JSON raises
    ValueError.
    """
    cleaned = _FENCE.sub("", text or "").strip()
    parsed = json.loads(cleaned)
    if not isinstance(parsed, list):
        return []
    return [str(d).strip() for d in parsed if str(d).strip()]


def suggest_domains(
    primary_domain: str,
    count: int,
    cfg: Optional[SuggestConfig] = None,
    session: Optional[requests.Session] = None,
) -> SuggestionResult:
    domain = (primary_domain or "").strip()
    if not domain or count <= 0:
        return SuggestionResult(primary_domain=domain)
    cfg = cfg or get_suggest_config()
    http = session or requests
    log = logger.bind(primary_domain=domain, count=count)
    log.info("domain_suggestions_requested")
    try:
        url, headers, body = build_request(domain, count, cfg)
        resp = http.post(url, headers=headers, json=body, timeout=cfg.timeout_sec)
        resp.raise_for_status()
        domains = parse_suggestions(extract_text(resp.json()))
    except (requests.RequestException, ValueError) as e:
        log.error("domain_suggestions_failed", error=str(e))
        return SuggestionResult(primary_domain=domain, error=ERROR_MESSAGE)
    log.info("domain_suggestions_received", received=len(domains))
    return SuggestionResult(primary_domain=domain, domains=domains)

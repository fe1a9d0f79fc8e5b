from __future__ import annotations
from dataclasses import asdict
from typing import Any
from flask import Flask, request, jsonify, Response

import os
import time
from collections import deque, defaultdict

from outbound.currency.convert import convert
from outbound.funnel.inputs import default_inputs
from outbound.infrastructure.providers import PROVIDERS, recommended_partner
from outbound.exports.reports import results_row, summary_md
from outbound.exports.writers import write_funnel, write_results
from outbound.funnel.engine import funnel_stages
from outbound.logging import configure_logging, get_logger
from outbound.session import CalculatorSession
from outbound.suggest.domains import suggest_domains

app = Flask(__name__)
logger = get_logger(__name__)

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return os.environ.get('API_KEY')


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None:
        n = int(os.environ.get('RATE_LIMIT_N', '5'))
    if w is None:
        w = float(os.environ.get('RATE_LIMIT_WINDOW_SEC', '60.0'))
    return int(n), float(w)

_recent: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=100))


def _client_ip() -> str:
    xff = request.headers.get('X-Forwarded-For')
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None


def _check_rate_limit(ip: str):
    # Allow if rate limiting disabled or N <= 0
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    dq = _recent[ip]
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp = jsonify({'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None

@app.before_request
def _auth_and_rate_limit():
    # Only the suggestion proxy spends money upstream; guard that route
    if request.path == '/api/suggest-domains':
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        if request.method == 'POST':
            rl = _check_rate_limit(_client_ip())
            if rl is not None:
                return rl
    return None


def _session_from_payload(payload: dict[str, Any]) -> CalculatorSession:
    """Build a session whose money inputs are already in payload['currency']."""
    s = CalculatorSession()
    currency = payload.get('currency') or s.currency
    s.switch_currency(currency)
    s.update(**(payload.get('inputs') or {}))
    if payload.get('provider'):
        s.select_provider(payload['provider'])
    return s


@app.get('/defaults')
def get_defaults():
    return jsonify({'currency': 'USD', 'inputs': default_inputs().to_dict()})

@app.get('/providers')
def get_providers():
    out = {}
    for key, p in PROVIDERS.items():
        partner = recommended_partner(key)
        out[key] = {
            'label': p.label,
            'emails_per_inbox_per_day': p.emails_per_inbox_per_day,
            'inbox_monthly_cost_usd': p.inbox_monthly_cost,
            'partner': asdict(partner) if partner else None,
        }
    return jsonify({'providers': out})

@app.post('/calculate')
def post_calculate():
    payload = request.get_json(force=True, silent=True) or {}
    try:
        s = _session_from_payload(payload)
        body = s.to_dict()
    except KeyError as e:
        return jsonify({'error': str(e.args[0]) if e.args else 'unknown provider'}), 400
    except ValueError as e:
        logger.warning('calculate_rejected', error=str(e))
        return jsonify({'error': str(e)}), 400
    return jsonify(body)

@app.post('/summary.md')
def post_summary():
    payload = request.get_json(force=True, silent=True) or {}
    try:
        s = _session_from_payload(payload)
        funnel, infra = s.results()
    except KeyError as e:
        return jsonify({'error': str(e.args[0]) if e.args else 'unknown provider'}), 400
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return Response(summary_md(s.inputs, funnel, infra, s.currency), mimetype='text/markdown')

@app.post('/calculate.csv')
def post_calculate_csv():
    payload = request.get_json(force=True, silent=True) or {}
    try:
        s = _session_from_payload(payload)
        body = write_results([results_row(s.to_dict())])
    except KeyError as e:
        return jsonify({'error': str(e.args[0]) if e.args else 'unknown provider'}), 400
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return Response(body, mimetype='text/csv')

@app.post('/funnel.csv')
def post_funnel_csv():
    payload = request.get_json(force=True, silent=True) or {}
    try:
        s = _session_from_payload(payload)
        funnel, _ = s.results()
    except KeyError as e:
        return jsonify({'error': str(e.args[0]) if e.args else 'unknown provider'}), 400
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return Response(write_funnel(funnel_stages(funnel)), mimetype='text/csv')

@app.post('/convert')
def post_convert():
    payload = request.get_json(force=True, silent=True) or {}
    try:
        amount = float(payload.get('amount'))
        value = convert(amount, payload.get('from') or 'USD', payload.get('to') or 'USD')
    except (TypeError, ValueError) as e:
        return jsonify({'error': str(e)}), 400
    return jsonify({'amount': value})

@app.post('/api/suggest-domains')
def post_suggest_domains():
    payload = request.get_json(force=True, silent=True) or {}
    primary = (payload.get('primaryDomain') or '').strip()
    if not primary:
        return jsonify({'error': 'primaryDomain is required'}), 400
    try:
        count = int(payload.get('numDomains', 1))
    except (TypeError, ValueError, OverflowError):
        return jsonify({'error': 'numDomains must be a whole number'}), 400
    if count < 1:
        return jsonify({'error': 'numDomains must be at least 1'}), 400
    result = suggest_domains(primary, count)
    if result.error:
        return jsonify({'error': result.error, 'domains': []}), 502
    return jsonify(result.domains)


if __name__ == '__main__':
    configure_logging()
    app.run(host='0.0.0.0', port=8000)

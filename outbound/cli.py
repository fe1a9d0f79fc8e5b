import json
import sys
from outbound.exports.reports import results_row, summary_md
from outbound.exports.writers import write_results
from outbound.funnel.inputs import FIELD_NAMES
from outbound.logging import configure_logging
from outbound.session import CalculatorSession

USAGE = (
    "Usage: python -m outbound.cli [--md | --csv] [key=value ...]\n"
    f"  keys: currency, provider, {', '.join(FIELD_NAMES)}"
)


def parse_args(argv):
    opts = {}
    for arg in argv:
        if "=" not in arg:
            raise ValueError(f"expected key=value, got {arg!r}")
        k, v = arg.split("=", 1)
        opts[k.strip().replace("-", "_")] = v.strip()
    return opts


def build_session(opts) -> CalculatorSession:
    """Values for money fields are read in the requested currency."""
    opts = dict(opts)
    s = CalculatorSession()
    s.switch_currency(opts.pop("currency", "USD").upper())
    provider = opts.pop("provider", None)
    if provider:
        s.select_provider(provider)
    s.update(**opts)
    return s


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    configure_logging(level="WARNING", stream=sys.stderr)
    markdown = "--md" in argv
    as_csv = "--csv" in argv
    argv = [a for a in argv if a not in ("--md", "--csv")]
    try:
        s = build_session(parse_args(argv))
        funnel, infra = s.results()
    except (KeyError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(2)
    if markdown:
        print(summary_md(s.inputs, funnel, infra, s.currency), end="")
    elif as_csv:
        print(write_results([results_row(s.to_dict())]), end="")
    else:
        print(json.dumps(s.to_dict(), indent=2))


if __name__ == "__main__":
    main()

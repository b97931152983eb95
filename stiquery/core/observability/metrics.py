from __future__ import annotations

from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter

# Named counters (custom)
_NAMED = Counter()

_PROM_UNITS = PromCounter(
    "stiquery_units_generated_total",
    "Generated subtype query units",
    ["language"],
)


def reset_metrics() -> None:
    """
    Test helper: clears the in-process counters to avoid cross-test leakage.
    The prometheus counters are process-global and are left untouched.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def inc_generated(language: str) -> None:
    lang = (language or "unknown").lower()
    inc_named("units_generated")
    inc_named(f"units_generated_{lang}")
    _PROM_UNITS.labels(language=lang).inc()


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)

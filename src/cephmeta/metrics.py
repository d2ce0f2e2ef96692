"""Prometheus metrics definitions for cephmeta.

All metrics use the ``cephmeta_`` prefix.  They are only registered when
``init_metrics()`` is called, so library users who never enable metrics do
not get collectors in the global registry.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# Flag indicating whether metrics have been initialised via init_metrics().
_initialized: bool = False

# ---------------------------------------------------------------------------
# Lookup counter  (labels: outcome)
# ---------------------------------------------------------------------------
lookups_total: Counter | None = None

# ---------------------------------------------------------------------------
# Lookup latency
# ---------------------------------------------------------------------------
lookup_duration_seconds: Histogram | None = None


def init_metrics() -> None:
    """Create and register all Prometheus metrics.

    Safe to call more than once; only the first call registers collectors.
    """
    global _initialized
    global lookups_total, lookup_duration_seconds

    if _initialized:
        return

    lookups_total = Counter(
        "cephmeta_lookups_total",
        "Total object metadata lookups by outcome",
        ["outcome"],
    )

    lookup_duration_seconds = Histogram(
        "cephmeta_lookup_duration_seconds",
        "Duration of object metadata lookups, ACL fetch included",
    )

    _initialized = True


def record_lookup(outcome: str, duration: float) -> None:
    """Record one lookup. A no-op until init_metrics() has run.

    Args:
        outcome: "ok" or the error code of the failure.
        duration: Elapsed wall time in seconds.
    """
    if lookups_total is None or lookup_duration_seconds is None:
        return
    lookups_total.labels(outcome=outcome).inc()
    lookup_duration_seconds.observe(duration)

from __future__ import annotations

"""
Prometheus metrics for the reflection token core and treasury planner.

We expose counters and histograms covering:
- transfers: count by variant and whether tax was applied
- tax: distribution of withheld amounts
- throttle: liquify trigger decisions (fired / suppressed)
- liquify: plan outcomes and emitted instructions by kind
- rollbacks: requests aborted and restored by the session layer

This module is dependency-light and can be mounted into any ASGI app via
`metrics_app()` or scraped with `render()`.
"""


import time
from contextlib import contextmanager
from typing import Iterator, Tuple

from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Histogram, generate_latest)

# Use a dedicated registry so embedding apps can choose to merge or expose it directly.
REGISTRY = CollectorRegistry()

# ────────────────────────────────────────────────────────────────────────────────
# Label conventions
#   variant: "transfer" | "send" | "transfer_from" | "send_from"
#   taxed: "true" | "false"
#   outcome: "planned" | "below_min" | "empty"
#   decision: "fired" | "suppressed"
# ────────────────────────────────────────────────────────────────────────────────

TRANSFERS = Counter(
    "reflection_transfers_total",
    "Total transfers applied by variant and taxation.",
    labelnames=("variant", "taxed"),
    registry=REGISTRY,
)

TAX_COLLECTED = Histogram(
    "reflection_tax_collected_amount",
    "Distribution of tax amounts credited to the treasury per taxed transfer.",
    buckets=(1, 10, 100, 1_000, 10_000, 100_000, 1_000_000, 10_000_000, 100_000_000),
    registry=REGISTRY,
)

THROTTLE_DECISIONS = Counter(
    "reflection_liquify_throttle_total",
    "Liquify trigger requests by throttle decision.",
    labelnames=("decision",),
    registry=REGISTRY,
)

LIQUIFY_RUNS = Counter(
    "reflection_liquify_runs_total",
    "Liquify plan computations by outcome.",
    labelnames=("outcome",),
    registry=REGISTRY,
)

INSTRUCTIONS_EMITTED = Counter(
    "reflection_instructions_emitted_total",
    "Planned external instructions by kind.",
    labelnames=("kind",),
    registry=REGISTRY,
)

ROLLBACKS = Counter(
    "reflection_session_rollbacks_total",
    "Requests rolled back by the session layer, by error code.",
    labelnames=("code",),
    registry=REGISTRY,
)

LIQUIFY_SECONDS = Histogram(
    "reflection_liquify_seconds",
    "Wall time spent planning a liquify.",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5),
    registry=REGISTRY,
)


# ────────────────────────────────────────────────────────────────────────────────
# Recording helpers
# ────────────────────────────────────────────────────────────────────────────────


def record_transfer(variant: str, taxed: bool, taxed_amount: int = 0) -> None:
    TRANSFERS.labels(variant=variant, taxed="true" if taxed else "false").inc()
    if taxed:
        TAX_COLLECTED.observe(max(0, int(taxed_amount)))


def record_throttle(fired: bool) -> None:
    THROTTLE_DECISIONS.labels(decision="fired" if fired else "suppressed").inc()


def record_liquify(outcome: str, instructions=()) -> None:
    LIQUIFY_RUNS.labels(outcome=outcome).inc()
    for ins in instructions:
        INSTRUCTIONS_EMITTED.labels(kind=ins.kind).inc()


def record_rollback(code: str) -> None:
    ROLLBACKS.labels(code=code).inc()


@contextmanager
def timed(hist: Histogram) -> Iterator[None]:
    """Observe the wall time of the enclosed block into `hist`."""
    t0 = time.perf_counter()
    try:
        yield
    finally:
        hist.observe(time.perf_counter() - t0)


def render() -> Tuple[bytes, str]:
    """Return (payload, content_type) for a scrape response."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


def metrics_app():
    """A bare ASGI app exposing REGISTRY (for mounting under /metrics)."""
    from prometheus_client import make_asgi_app

    return make_asgi_app(registry=REGISTRY)


__all__ = [
    "REGISTRY",
    "TRANSFERS",
    "TAX_COLLECTED",
    "THROTTLE_DECISIONS",
    "LIQUIFY_RUNS",
    "INSTRUCTIONS_EMITTED",
    "ROLLBACKS",
    "LIQUIFY_SECONDS",
    "record_transfer",
    "record_throttle",
    "record_liquify",
    "record_rollback",
    "timed",
    "render",
    "metrics_app",
]

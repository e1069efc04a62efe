from __future__ import annotations

from reflection import metrics
from reflection.token import ReflectionToken


def _sample(name: str, **labels: str) -> float:
    v = metrics.REGISTRY.get_sample_value(name, labels)
    return v or 0.0


def test_transfers_counted_by_taxation(token: ReflectionToken) -> None:
    taxed = _sample("reflection_transfers_total", variant="transfer", taxed="true")
    untaxed = _sample("reflection_transfers_total", variant="transfer", taxed="false")

    token.transfer("alice", "pair", 1_000)
    token.transfer("alice", "bob", 1_000)

    assert _sample("reflection_transfers_total", variant="transfer", taxed="true") == taxed + 1
    assert _sample("reflection_transfers_total", variant="transfer", taxed="false") == untaxed + 1


def test_render_exposes_registry() -> None:
    metrics.record_throttle(True)
    payload, content_type = metrics.render()
    assert b"reflection_liquify_throttle_total" in payload
    assert content_type.startswith("text/plain")

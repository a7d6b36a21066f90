"""In-process counters and histograms for attack resolution.

Attack code reports through the ``record_*`` helpers below so metric names
stay in one place. Histograms are flattened into counters by
``get_counters`` so the whole state dumps as one mapping.
"""

from __future__ import annotations

from collections import defaultdict

from Hookline.rules.types import OutcomeRecord

MARGIN_BUCKETS = [-5, -1, 0, 1, 4, 5, 10]
DURATION_BUCKETS_MS = [1, 2, 5, 10, 20, 50, 100]

_counters: dict[str, int] = defaultdict(int)
_histograms: dict[str, dict[str, int]] = {}
_hist_sums: dict[str, float] = defaultdict(int)
_hist_counts: dict[str, int] = defaultdict(int)


def inc_counter(name: str, value: int = 1) -> None:
    _counters[name] += int(value)


def get_counter(name: str) -> int:
    return _counters.get(name, 0)


def reset_counters() -> None:
    _counters.clear()
    _histograms.clear()
    _hist_sums.clear()
    _hist_counts.clear()


def get_counters() -> dict[str, float]:
    out: dict[str, float] = dict(_counters)
    for name, buckets in _histograms.items():
        for label, cnt in buckets.items():
            out[f"histo.{name}.{label}"] = cnt
        out[f"histo.{name}.sum"] = _hist_sums.get(name, 0)
        out[f"histo.{name}.count"] = _hist_counts.get(name, 0)
    return out


def observe_histogram(name: str, value: float, *, buckets: list[int] | None = None) -> None:
    """Count ``value`` in the first bucket whose upper bound is >= it.

    Values above the last bound land in ``gt_{last}``. Defaults to
    ``MARGIN_BUCKETS``.
    """
    bounds = MARGIN_BUCKETS if buckets is None else buckets
    label = next((f"le_{ub}" for ub in bounds if value <= ub), f"gt_{bounds[-1]}")
    h = _histograms.setdefault(name, {})
    h[label] = h.get(label, 0) + 1
    # Sum kept as given: fractional margins must not be truncated
    _hist_sums[name] += value
    _hist_counts[name] += 1


def record_attack_outcome(outcome: OutcomeRecord) -> None:
    inc_counter(f"attack.outcome.{outcome.original.value}")
    if outcome.is_upgraded:
        inc_counter("attack.upgraded")
        inc_counter(f"attack.upgraded.{outcome.upgraded.value}")
    observe_histogram("attack.margin", outcome.margin)


def record_location_resolved(zone: str) -> None:
    inc_counter("attack.location.resolved")
    inc_counter(f"attack.location.zone.{zone}")


def record_attack_error(exc: BaseException) -> None:
    inc_counter(f"attack.error.{type(exc).__name__}")


def record_attack_duration(duration_ms: int) -> None:
    observe_histogram("attack.duration_ms", duration_ms, buckets=DURATION_BUCKETS_MS)

from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Dict, Iterator, Optional


class TimingStats:
    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._totals: Dict[str, float] = {}
        self._counts: Dict[str, int] = {}

    def add(self, name: str, dt: float) -> None:
        if not self.enabled:
            return
        self._totals[name] = self._totals.get(name, 0.0) + dt
        self._counts[name] = self._counts.get(name, 0) + 1

    def count(self, name: str) -> int:
        return self._counts.get(name, 0)

    def as_dict(self) -> Dict[str, Dict[str, float] | Dict[str, int]]:
        return {"totals": dict(self._totals), "counts": dict(self._counts)}

    def log_summary(self, log: logging.Logger) -> None:
        if not self.enabled or not self._totals:
            return
        items = sorted(self._totals.items(), key=lambda kv: kv[1], reverse=True)
        log.info("Timing summary (total seconds, calls, avg per call):")
        for name, total_secs in items:
            cnt = self._counts.get(name, 0) or 1
            log.info(
                " - %s: %.3fs total over %d calls (%.3fs avg)",
                name,
                total_secs,
                cnt,
                total_secs / cnt,
            )


@contextmanager
def record(ts: Optional[TimingStats], name: str) -> Iterator[None]:
    if ts is None or not ts.enabled:
        yield
        return
    t0 = perf_counter()
    try:
        yield
    finally:
        ts.add(name, perf_counter() - t0)

import math
import threading
from collections import deque
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional

WINDOW_SIZE = 1000


@dataclass(frozen=True)
class ProbeResult:
    success: bool
    rtt_ms: int = 0

    @classmethod
    def failed(cls):
        return cls(False, 0)


@dataclass(frozen=True)
class TargetSnapshot:
    target: str
    sent: int
    lost: int
    loss_pct: float
    min_ms: Optional[int]
    avg_ms: Optional[int]
    p95_ms: Optional[int]
    last_ms: Optional[int]

    def to_dict(self):
        return asdict(self)


def _successful(window: Iterable[ProbeResult]) -> List[int]:
    return [r.rtt_ms for r in window if r.success]


def _min(rtts):
    return min(rtts) if rtts else None


def _avg(rtts):
    return sum(rtts) // len(rtts) if rtts else None


def _p95(rtts):
    # nearest-rank, no interpolation
    if not rtts:
        return None
    ordered = sorted(rtts)
    n = len(ordered)
    idx = min(max(math.ceil(0.95 * n) - 1, 0), n - 1)
    return ordered[idx]


def _last(window):
    for r in reversed(window):
        if r.success:
            return r.rtt_ms
    return None


class TargetStatistics:
    """
    Lifetime counters plus a bounded window of the most recent results.

    Counters cover every result ever recorded; min/avg/p95/last only look at
    the successful entries still inside the window.
    """

    def __init__(self, window=WINDOW_SIZE):
        if window < 1:
            raise ValueError("window must hold at least one result")
        self.capacity = window
        self._window = deque(maxlen=window)
        self._sent = 0
        self._lost = 0
        self._lock = threading.Lock()

    def record(self, result: ProbeResult) -> None:
        with self._lock:
            self._sent += 1
            if not result.success:
                self._lost += 1
            self._window.append(result)  # deque drops the oldest when full

    @property
    def total_sent(self) -> int:
        return self._sent

    @property
    def lost_count(self) -> int:
        return self._lost

    @property
    def loss_pct(self) -> float:
        with self._lock:
            sent, lost = self._sent, self._lost
        return lost / sent * 100 if sent else 0.0

    def window_len(self) -> int:
        with self._lock:
            return len(self._window)

    def _rtts(self):
        with self._lock:
            return _successful(self._window)

    def last_rtt(self) -> Optional[int]:
        with self._lock:
            return _last(self._window)

    def min_rtt(self) -> Optional[int]:
        return _min(self._rtts())

    def avg_rtt(self) -> Optional[int]:
        return _avg(self._rtts())

    def p95_rtt(self) -> Optional[int]:
        return _p95(self._rtts())

    def window_rtts(self) -> List[int]:
        return self._rtts()

    def snapshot(self, target="") -> TargetSnapshot:
        with self._lock:
            sent, lost = self._sent, self._lost
            window = list(self._window)
        rtts = _successful(window)
        return TargetSnapshot(
            target=target,
            sent=sent,
            lost=lost,
            loss_pct=lost / sent * 100 if sent else 0.0,
            min_ms=_min(rtts),
            avg_ms=_avg(rtts),
            p95_ms=_p95(rtts),
            last_ms=_last(window),
        )


class StatisticsStore:
    """One TargetStatistics per monitored endpoint, in configured order."""

    def __init__(self, targets, window=WINDOW_SIZE):
        targets = list(targets)
        if not targets:
            raise ValueError("at least one target is required")
        self.targets = targets
        self._stats: Dict[str, TargetStatistics] = {
            t: TargetStatistics(window) for t in targets
        }

    def __getitem__(self, target) -> TargetStatistics:
        return self._stats[target]

    def __contains__(self, target):
        return target in self._stats

    def record(self, target, result: ProbeResult) -> TargetSnapshot:
        stats = self._stats[target]
        stats.record(result)
        return stats.snapshot(target)

    def snapshot(self) -> Dict[str, TargetSnapshot]:
        return {t: self._stats[t].snapshot(t) for t in self.targets}

    def total_sent(self) -> int:
        return sum(s.total_sent for s in self._stats.values())

    def window_rtts(self, target) -> List[int]:
        return self._stats[target].window_rtts()

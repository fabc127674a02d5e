import random
import threading
import time
from dataclasses import dataclass
from typing import Optional

from netmon.config import CFG
from netmon.logs import log_json
from netmon.probes import ProbeError
from netmon.stats import ProbeResult, StatisticsStore


class Unbounded:
    """Run until cancelled."""

    def exhausted(self, iterations, elapsed_s):
        return False

    def __repr__(self):
        return "Unbounded()"


@dataclass(frozen=True)
class IterationBound:
    count: int

    def __post_init__(self):
        if self.count < 1:
            raise ValueError("iteration bound must be positive")

    def exhausted(self, iterations, elapsed_s):
        return iterations >= self.count


@dataclass(frozen=True)
class TimeBound:
    seconds: float

    def __post_init__(self):
        if not self.seconds > 0:
            raise ValueError("time bound must be positive")

    def exhausted(self, iterations, elapsed_s):
        return elapsed_s >= self.seconds


@dataclass
class RunReport:
    iterations: int
    elapsed_s: float
    stop_reason: str  # "cancelled" | "iteration_limit" | "time_limit"


class Scheduler:
    """
    Sequential probe loop: pick a target, probe, record, render, sleep.

    Cancellation is checked at the top of each iteration and during the
    jitter sleep. A probe already in flight runs to its own timeout.
    """

    def __init__(self, prober, sink, targets=None, policy=None, store=None,
                 cancel: Optional[threading.Event] = None, rng=None,
                 probe_timeout_ms=None, jitter_ms=None, live=None,
                 metrics=None, log_path=None, clock=time.monotonic):
        self.prober = prober
        self.sink = sink
        self.targets = list(targets or CFG["TARGETS"])
        if not self.targets:
            raise ValueError("no targets to probe")
        self.policy = policy or Unbounded()
        self.store = store or StatisticsStore(self.targets, CFG["WINDOW_SIZE"])
        self.cancel = cancel or threading.Event()
        self.rng = rng or random.Random()
        self.probe_timeout_ms = CFG["PROBE_TIMEOUT_MS"] if probe_timeout_ms is None else probe_timeout_ms
        lo, hi = jitter_ms or (CFG["JITTER_MIN_MS"], CFG["JITTER_MAX_MS"])
        if lo < 0 or hi < lo:
            raise ValueError(f"bad jitter range {lo}..{hi}")
        self.jitter_ms = (lo, hi)
        self.live = isinstance(self.policy, Unbounded) if live is None else live
        self.metrics = metrics
        self.log_path = CFG["LOG_PATH"] if log_path is None else log_path
        self.clock = clock
        self.expired = False

    def probe(self, target) -> ProbeResult:
        try:
            return self.prober.send(target, self.probe_timeout_ms)
        except (ProbeError, OSError):
            return ProbeResult.failed()

    def _expire(self):
        self.expired = True
        self.cancel.set()

    def _stop_reason(self, iterations, elapsed):
        if self.cancel.is_set():
            if self.expired or (isinstance(self.policy, TimeBound)
                                and self.policy.exhausted(iterations, elapsed)):
                return "time_limit"
            return "cancelled"
        if self.policy.exhausted(iterations, elapsed):
            if isinstance(self.policy, TimeBound):
                return "time_limit"
            return "iteration_limit"
        return None

    def step(self):
        target = self.rng.choice(self.targets)
        result = self.probe(target)
        snap = self.store.record(target, result)
        if self.metrics is not None:
            self.metrics.observe(target, result, snap)
        log_json({"event": "probe", "target": target, "success": result.success,
                  "rtt_ms": result.rtt_ms if result.success else None,
                  "sent": snap.sent, "lost": snap.lost}, self.log_path)
        return target, result

    def sleep(self):
        """Jittered pause; True if cancellation cut it short."""
        lo, hi = self.jitter_ms
        delay_ms = self.rng.randint(lo, hi)
        return self.cancel.wait(delay_ms / 1000.0)

    def run(self) -> RunReport:
        start = self.clock()
        iterations = 0
        timer = None
        if isinstance(self.policy, TimeBound):
            timer = threading.Timer(self.policy.seconds, self._expire)
            timer.daemon = True
            timer.start()
        log_json({"event": "start", "targets": self.targets,
                  "policy": repr(self.policy)}, self.log_path)
        try:
            while True:
                reason = self._stop_reason(iterations, self.clock() - start)
                if reason:
                    break
                self.step()
                iterations += 1
                if self.live:
                    self.sink.render(self.store.snapshot())
                if self.policy.exhausted(iterations, self.clock() - start):
                    continue
                self.sleep()
        finally:
            if timer is not None:
                timer.cancel()

        report = RunReport(iterations, self.clock() - start, reason)
        log_json({"event": "stop", "iterations": iterations,
                  "reason": reason, "total_sent": self.store.total_sent()}, self.log_path)
        if self.live:
            self.sink.stopped(report)
        else:
            self.sink.summarize(self.store.snapshot(), report)
        return report

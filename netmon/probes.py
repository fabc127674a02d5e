import math
import re
import subprocess
from abc import ABC, abstractmethod
from collections import deque

from netmon.stats import ProbeResult

_RTT = re.compile(r"time[=<]\s*(\d+(?:\.\d+)?)\s*ms")


class ProbeError(Exception):
    """The probe could not be sent at all (missing binary, bad permissions...)."""


class Prober(ABC):
    @abstractmethod
    def send(self, target: str, timeout_ms: int) -> ProbeResult:
        """Send exactly one echo request to target and wait up to timeout_ms."""
        raise NotImplementedError


def parse_ping_output(text: str):
    """Return the RTT in whole milliseconds from ping output, or None."""
    m = _RTT.search(text or "")
    if not m:
        return None
    return int(round(float(m.group(1))))


class PingProber(Prober):
    """
    One-shot ICMP echo through the system ping binary, so no raw socket
    privileges are needed.
    """

    def __init__(self, ping_bin="ping"):
        self.ping_bin = ping_bin

    def _build_cmd(self, target, timeout_ms):
        wait_s = max(1, math.ceil(timeout_ms / 1000))
        return [self.ping_bin, "-n", "-c", "1", "-W", str(wait_s), target]

    def send(self, target: str, timeout_ms: int) -> ProbeResult:
        cmd = self._build_cmd(target, timeout_ms)
        try:
            out = subprocess.run(cmd, capture_output=True, text=True,
                                 timeout=timeout_ms / 1000 + 1)
        except subprocess.TimeoutExpired:
            return ProbeResult.failed()
        except OSError as e:
            raise ProbeError(f"cannot run {self.ping_bin}: {e}") from e
        if out.returncode != 0:
            # 1 = no reply, 2 = unknown host / network unreachable
            return ProbeResult.failed()
        rtt = parse_ping_output(out.stdout)
        if rtt is None:
            return ProbeResult.failed()
        return ProbeResult(True, rtt)


class FakeProber(Prober):
    """
    script: dict[target] -> list of outcomes returned in order for that target.
    An outcome is a ProbeResult, an int RTT (success), None (timeout) or an
    Exception instance, which is raised. Exhausted targets time out.
    """

    def __init__(self, script=None):
        self.script = {}
        self.calls = []
        if script:
            for k, v in script.items():
                self.script[k] = deque(v)

    def send(self, target: str, timeout_ms: int) -> ProbeResult:
        self.calls.append((target, timeout_ms))
        dq = self.script.get(target)
        if not dq:
            return ProbeResult.failed()
        outcome = dq.popleft()
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, ProbeResult):
            return outcome
        if outcome is None:
            return ProbeResult.failed()
        return ProbeResult(True, int(outcome))

import subprocess

import pytest

from netmon.probes import FakeProber, PingProber, ProbeError, parse_ping_output
from netmon.stats import ProbeResult

LINUX_REPLY = """PING 1.1.1.1 (1.1.1.1) 56(84) bytes of data.
64 bytes from 1.1.1.1: icmp_seq=1 ttl=57 time=12.6 ms

--- 1.1.1.1 ping statistics ---
1 packets transmitted, 1 received, 0% packet loss, time 0ms
rtt min/avg/max/mdev = 12.614/12.614/12.614/0.000 ms
"""


def test_parse_ping_output():
    assert parse_ping_output(LINUX_REPLY) == 13
    assert parse_ping_output("64 bytes from 8.8.8.8: icmp_seq=0 ttl=117 time=9 ms") == 9
    assert parse_ping_output("Reply from 127.0.0.1: bytes=32 time<1ms TTL=128") == 1
    assert parse_ping_output("Request timeout for icmp_seq 0") is None
    assert parse_ping_output("") is None


def _fake_run(returncode, stdout):
    def run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="")
    return run


def test_ping_prober_success(monkeypatch):
    monkeypatch.setattr(subprocess, "run", _fake_run(0, LINUX_REPLY))
    assert PingProber().send("1.1.1.1", 3000) == ProbeResult(True, 13)


def test_ping_prober_no_reply_is_failure(monkeypatch):
    monkeypatch.setattr(subprocess, "run", _fake_run(1, "1 packets transmitted, 0 received"))
    assert PingProber().send("1.1.1.1", 3000) == ProbeResult(False, 0)


def test_ping_prober_timeout_is_failure(monkeypatch):
    def run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))
    monkeypatch.setattr(subprocess, "run", run)
    assert PingProber().send("1.1.1.1", 3000).success is False


def test_ping_prober_missing_binary_raises(monkeypatch):
    def run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])
    monkeypatch.setattr(subprocess, "run", run)
    with pytest.raises(ProbeError):
        PingProber(ping_bin="no-such-ping").send("1.1.1.1", 3000)


def test_ping_prober_command_uses_whole_seconds():
    cmd = PingProber()._build_cmd("8.8.8.8", 3000)
    assert cmd[-1] == "8.8.8.8"
    assert cmd[cmd.index("-W") + 1] == "3"
    assert PingProber()._build_cmd("8.8.8.8", 200)[cmd.index("-W") + 1] == "1"


def test_fake_prober_script():
    p = FakeProber(script={"a": [10, None, ProbeResult(True, 7)]})
    assert p.send("a", 100) == ProbeResult(True, 10)
    assert p.send("a", 100) == ProbeResult(False, 0)
    assert p.send("a", 100) == ProbeResult(True, 7)
    assert p.send("a", 100) == ProbeResult(False, 0)
    assert p.send("b", 100) == ProbeResult(False, 0)
    assert p.calls[0] == ("a", 100)

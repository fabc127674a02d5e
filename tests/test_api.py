from fastapi.testclient import TestClient

from netmon.main import create_app
from netmon.metrics import ProbeMetrics
from netmon.stats import ProbeResult, StatisticsStore


def make_client():
    store = StatisticsStore(["1.1.1.1", "8.8.8.8"])
    metrics = ProbeMetrics()
    for r in (ProbeResult(True, 10), ProbeResult(False, 0)):
        snap = store.record("1.1.1.1", r)
        metrics.observe("1.1.1.1", r, snap)
    return TestClient(create_app(store, metrics.registry))


def test_healthz():
    assert make_client().get("/healthz").json() == {"ok": True}


def test_stats():
    body = make_client().get("/stats").json()
    assert body["total_sent"] == 2
    a = body["targets"]["1.1.1.1"]
    assert a["sent"] == 2 and a["lost"] == 1
    assert a["loss_pct"] == 50.0
    assert a["last_ms"] == 10
    assert body["targets"]["8.8.8.8"]["min_ms"] is None


def test_metrics_exposition():
    r = make_client().get("/metrics")
    assert r.status_code == 200
    assert 'netmon_probes_total{target="1.1.1.1"} 2.0' in r.text
    assert "netmon_loss_pct" in r.text

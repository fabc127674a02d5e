from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

RTT_BUCKETS = (0.005, 0.01, 0.02, 0.05, 0.1, 0.2, 0.5, 1.0, 3.0)


class ProbeMetrics:
    """Prometheus view of the probe loop, one label set per target."""

    def __init__(self, registry=None):
        self.registry = registry or CollectorRegistry()
        reg = self.registry
        self.probes = Counter("netmon_probes_total", "probes sent", ["target"], registry=reg)
        self.lost = Counter("netmon_probes_lost_total", "probes lost", ["target"], registry=reg)
        self.rtt = Histogram("netmon_rtt_seconds", "round trip time", ["target"],
                             buckets=RTT_BUCKETS, registry=reg)
        self.loss = Gauge("netmon_loss_pct", "lifetime loss", ["target"], registry=reg)
        self.p95 = Gauge("netmon_p95_ms", "window p95 rtt", ["target"], registry=reg)
        self.last = Gauge("netmon_last_rtt_ms", "last successful rtt", ["target"], registry=reg)

    def observe(self, target, result, snap):
        self.probes.labels(target).inc()
        if result.success:
            self.rtt.labels(target).observe(result.rtt_ms / 1000.0)
        else:
            self.lost.labels(target).inc()
        self.loss.labels(target).set(snap.loss_pct)
        if snap.p95_ms is not None:
            self.p95.labels(target).set(snap.p95_ms)
        if snap.last_ms is not None:
            self.last.labels(target).set(snap.last_ms)

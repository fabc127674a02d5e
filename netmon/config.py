import os


def _targets(raw):
    return tuple(t.strip() for t in raw.split(",") if t.strip())


CFG = {
    "TARGETS": _targets(os.getenv("TARGETS", "1.1.1.1,8.8.8.8")),
    "PROBE_TIMEOUT_MS": int(os.getenv("PROBE_TIMEOUT_MS", 3000)),
    "JITTER_MIN_MS": int(os.getenv("JITTER_MIN_MS", 200)),
    "JITTER_MAX_MS": int(os.getenv("JITTER_MAX_MS", 500)),
    "WINDOW_SIZE": int(os.getenv("WINDOW_SIZE", 1000)),
    "LOG_PATH": os.getenv("LOG_PATH", ""),
    "REPORTS_DIR": os.getenv("REPORTS_DIR", "reports"),
    "METRICS_PORT": int(os.getenv("METRICS_PORT", 0)),
}


class ConfigError(ValueError):
    """Raised for unusable command line or environment settings."""

# Usage examples:
#   netmon                 live table until Ctrl+C
#   netmon -n 50           50 probes, then a summary
#   netmon -t 1m30s        probe for 90 seconds, then a summary
#   netmon -t 10m --serve 8000 --plot reports

import argparse
import random
import signal
import sys
import threading

from netmon.config import CFG, ConfigError
from netmon.durations import parse_duration
from netmon.scheduler import IterationBound, Scheduler, TimeBound, Unbounded
from netmon.stats import StatisticsStore


def parse_iterations(raw):
    try:
        n = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"-n expects a positive integer, got {raw!r}")
    if n < 1:
        raise ConfigError(f"-n expects a positive integer, got {raw!r}")
    return n


def parse_time_bound(raw):
    d = parse_duration(raw)
    if d is None or d.total_seconds() <= 0:
        raise ConfigError(f"-t expects a duration like 30s, 5m or 1h30m, got {raw!r}")
    if d.total_seconds() > threading.TIMEOUT_MAX:
        raise ConfigError(f"-t is too long, got {raw!r}")
    return d.total_seconds()


def build_policy(args):
    if args.count is not None and args.time is not None:
        raise ConfigError("-n and -t cannot be used together")
    if args.count is not None:
        return IterationBound(parse_iterations(args.count))
    if args.time is not None:
        return TimeBound(parse_time_bound(args.time))
    return Unbounded()


def build_argparser():
    ap = argparse.ArgumentParser(prog="netmon", description="Round-trip latency monitor")
    ap.add_argument("-n", dest="count", metavar="COUNT", help="Stop after COUNT probes in total")
    ap.add_argument("-t", dest="time", metavar="DURATION", help="Stop after DURATION (30s, 5m, 1h30m)")
    ap.add_argument("--target", action="append", dest="targets", metavar="HOST",
                    help="Endpoint to probe (repeatable, default: %s)" % ", ".join(CFG["TARGETS"]))
    ap.add_argument("--seed", type=int, help="Seed for target selection and jitter")
    ap.add_argument("--serve", type=int, default=CFG["METRICS_PORT"], metavar="PORT",
                    help="Expose /healthz, /metrics and /stats on PORT")
    ap.add_argument("--plot", nargs="?", const=CFG["REPORTS_DIR"], metavar="DIR",
                    help="Write RTT plots to DIR (default: %s) at exit" % CFG["REPORTS_DIR"])
    ap.add_argument("--log", default=CFG["LOG_PATH"], metavar="PATH", help="JSON-lines event log")
    return ap


def install_signal_handlers(cancel):
    def handler(signum, frame):
        cancel.set()
    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, handler)
    return previous


def restore_signal_handlers(previous):
    for sig, h in previous.items():
        signal.signal(sig, h)


def main(argv=None, prober=None, sink=None, cancel=None):
    args = build_argparser().parse_args(argv)
    try:
        policy = build_policy(args)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    targets = args.targets or list(CFG["TARGETS"])
    store = StatisticsStore(targets, CFG["WINDOW_SIZE"])
    live = isinstance(policy, Unbounded)

    if prober is None:
        from netmon.probes import PingProber
        prober = PingProber()
    if sink is None:
        from netmon.render import ConsoleSink, SummarySink
        sink = ConsoleSink() if live else SummarySink()

    metrics = None
    if args.serve:
        from netmon.main import create_app, serve_in_background
        from netmon.metrics import ProbeMetrics
        metrics = ProbeMetrics()
        serve_in_background(create_app(store, metrics.registry), args.serve)

    cancel = cancel or threading.Event()
    sched = Scheduler(prober, sink, targets=targets, policy=policy, store=store,
                      cancel=cancel, rng=random.Random(args.seed), live=live,
                      metrics=metrics, log_path=args.log)

    previous = {}
    if threading.current_thread() is threading.main_thread():
        previous = install_signal_handlers(cancel)
    try:
        sched.run()
    finally:
        restore_signal_handlers(previous)

    if args.plot:
        from netmon.plotting import save_store_plots
        for path in save_store_plots(store, args.plot):
            print(f"Plot written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

import sys
from abc import ABC, abstractmethod

HOME = "\x1b[H"
CLEAR = "\x1b[2J"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"

WIDTH = 64
HEADER = "Target        │ Sent  │    Loss    │  Min │  Avg │  P95 │ Last"
RULE = "───────────────┼───────┼────────────┼──────┼──────┼──────┼──────"


def fmt_ms(value):
    return f"{value}ms" if value is not None else "-"


def format_row(snap):
    loss = f"{snap.loss_pct:4.1f}% ({snap.lost})"
    return (f"{snap.target:<13} │ {snap.sent:>5} │ {loss:<10} │ "
            f"{fmt_ms(snap.min_ms):>4} │ {fmt_ms(snap.avg_ms):>4} │ "
            f"{fmt_ms(snap.p95_ms):>4} │ {fmt_ms(snap.last_ms):>4}")


def boxed(lines):
    out = ["╔" + "═" * WIDTH + "╗"]
    for line in lines:
        if line is None:
            out.append("╠" + "═" * WIDTH + "╣")
        else:
            out.append("║ " + line.ljust(WIDTH - 2) + " ║")
    out.append("╚" + "═" * WIDTH + "╝")
    return out


def table_lines(snapshot, title):
    lines = [title.center(WIDTH - 2), None, HEADER, RULE]
    lines.extend(format_row(s) for s in snapshot.values())
    return boxed(lines)


class ResultSink(ABC):
    @abstractmethod
    def render(self, snapshot):
        """Live update after each probe."""

    @abstractmethod
    def summarize(self, snapshot, report):
        """Final report for batch runs."""

    @abstractmethod
    def stopped(self, report):
        """Termination notice after a live run."""


class ConsoleSink(ResultSink):
    """Redraws the stats table in place at the top of the terminal."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.started = False

    def render(self, snapshot):
        if not self.started:
            self.stream.write(HIDE_CURSOR + CLEAR)
            self.started = True
        lines = table_lines(snapshot, "Network Monitor - Live Stats")
        lines.append("Press Ctrl+C to exit".center(WIDTH + 2))
        self.stream.write(HOME + "\n".join(lines) + "\n")
        self.stream.flush()

    def summarize(self, snapshot, report):
        SummarySink(self.stream).summarize(snapshot, report)

    def stopped(self, report):
        if self.started:
            self.stream.write(SHOW_CURSOR)
        self.stream.write("\nMonitoring stopped.\n")
        self.stream.flush()


class SummarySink(ResultSink):
    """Prints nothing while probing and one table at the end."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def render(self, snapshot):
        pass

    def summarize(self, snapshot, report):
        total = sum(s.sent for s in snapshot.values())
        lines = table_lines(snapshot, "Network Monitor - Summary")
        lines.append(f"Total probes sent: {total}")
        lines.append(f"Elapsed: {report.elapsed_s:.1f}s  Stopped: {report.stop_reason}")
        self.stream.write("\n".join(lines) + "\n")
        self.stream.flush()

    def stopped(self, report):
        self.stream.write("\nMonitoring stopped.\n")
        self.stream.flush()

import re
from datetime import timedelta

UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600}

_SIMPLE = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)([smh])$")
_SEGMENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)([a-z]?)")


def parse_duration(text: str):
    """
    Parse "30s", "5m", "1.5h" or a compound like "1h30m15s" into a timedelta.
    Returns None when nothing usable is found.

    Compound segments with an unknown unit ("10x") add nothing and are skipped
    rather than rejecting the whole expression.
    """
    if text is None:
        return None
    s = text.strip().lower()
    if not s:
        return None

    m = _SIMPLE.match(s)
    try:
        if m:
            return timedelta(seconds=float(m.group(1)) * UNIT_SECONDS[m.group(2)])

        total = 0.0
        for seg in _SEGMENT.finditer(s):
            total += float(seg.group(1)) * UNIT_SECONDS.get(seg.group(2), 0)
        if total <= 0:
            return None
        return timedelta(seconds=total)
    except OverflowError:
        # beyond timedelta.max
        return None

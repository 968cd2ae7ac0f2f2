# src/devdesk/core/timeutil.py

from __future__ import annotations

import datetime as dt
import math
import re

_DUE_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S")
_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def round_half_up(x: float) -> int:
    """Round like JavaScript's Math.round (x.5 goes up, also for negatives)."""
    return int(math.floor(x + 0.5))


def parse_due(raw: str | None) -> float | None:
    """
    Parse a due date typed by the user into epoch seconds (local time).

    Accepts "YYYY-MM-DD HH:MM" (seconds optional, "T" separator allowed) and a
    bare "YYYY-MM-DD" (meaning 09:00). Empty input means "no due date".
    """
    s = (raw or "").strip()
    if not s or s.lower() in ("none", "-"):
        return None

    if _DATE_ONLY_RE.match(s):
        s = f"{s} 09:00"

    for fmt in _DUE_FORMATS:
        try:
            return dt.datetime.strptime(s, fmt).timestamp()
        except ValueError:
            continue

    try:
        parsed = dt.datetime.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Invalid due date: {raw!r} (expected YYYY-MM-DD HH:MM)") from None
    return parsed.timestamp()


def format_due(ts: float | None) -> str:
    if ts is None:
        return "-"
    return dt.datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M")


def format_clock(seconds: int) -> str:
    """Seconds -> HH:MM:SS."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"

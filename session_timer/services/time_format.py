"""Elapsed-time and start-time labels shown on the workout surfaces."""

from __future__ import annotations

from datetime import datetime


def format_elapsed(seconds: int) -> str:
    """
    Format elapsed seconds as M:SS, or H:MM:SS from one hour up.
    Hours and minutes in the leading position are not padded: 0 -> "0:00", 3661 -> "1:01:01".
    """
    if seconds < 0:
        raise ValueError("elapsed seconds must be >= 0")
    hours, rem = divmod(int(seconds), 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_elapsed(text: str) -> int:
    """Inverse of format_elapsed: "M:SS" or "H:MM:SS" -> total seconds."""
    parts = text.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"not an elapsed time: {text!r}")
    values = [int(p) for p in parts]
    if any(v >= 60 for v in values[1:]):
        raise ValueError(f"minutes/seconds out of range: {text!r}")
    total = 0
    for v in values:
        total = total * 60 + v
    return total


def format_start_time_label(start: datetime | None) -> str:
    """12-hour clock label for the workout start, e.g. "9:05 AM". Empty when unknown."""
    if start is None:
        return ""
    local = start.astimezone() if start.tzinfo is not None else start
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"

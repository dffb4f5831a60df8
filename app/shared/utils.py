"""Shared utility functions."""

from __future__ import annotations

from datetime import datetime, time, timezone

from app.core.constants import DAY_ALIASES


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_time(value: str | time | None) -> str:
    """Trim "HH:MM:SS" to "HH:MM"; empty for missing values."""
    if value is None:
        return ""
    if isinstance(value, time):
        return value.strftime("%H:%M")
    parts = value.split(":")
    if len(parts) >= 2:
        return f"{parts[0]}:{parts[1]}"
    return value


def normalize_day(day: str | None) -> str:
    if not day:
        return ""
    return DAY_ALIASES.get(day.strip().lower(), day.strip())


def format_schedule(day: str | None, start: str | time | None, end: str | time | None) -> str:
    """Render a course schedule like "月曜 16:40〜18:00"."""
    day_label = normalize_day(day)
    start_label = format_time(start)
    end_label = format_time(end)
    if start_label and end_label:
        time_label = f"{start_label}〜{end_label}"
    else:
        time_label = start_label or end_label

    if day_label and time_label:
        return f"{day_label}曜 {time_label}"
    if day_label:
        return f"{day_label}曜"
    if time_label:
        return time_label
    return "未定"


def is_safe_redirect_path(path: str | None) -> bool:
    """Accept only local absolute paths ("/x"), never "//host" or schemes."""
    if not path or not path.startswith("/"):
        return False
    if path.startswith("//") or path.startswith("/\\"):
        return False
    return "\n" not in path and "\r" not in path

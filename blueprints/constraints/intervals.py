# blueprints/constraints/intervals.py
from __future__ import annotations
from datetime import time

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def to_minutes(value: str | time) -> int:
    """'HH:MM' / 'HH:MM:SS' / time -> минуты от полуночи."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"bad clock time: {value!r}")
    h, m = int(parts[0]), int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"bad clock time: {value!r}")
    return h * 60 + m


def normalize_hhmm(value) -> str | None:
    if value is None or value == "":
        return None
    m = to_minutes(value)
    return f"{m // 60:02d}:{m % 60:02d}"


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    # полуинтервалы: 08:00-10:00 и 10:00-12:00 не пересекаются
    return to_minutes(start_a) < to_minutes(end_b) and to_minutes(end_a) > to_minutes(start_b)


def ranges_overlap(start_a, end_a, start_b, end_b) -> bool:
    """То же, но существующее занятие без времени ни с чем не пересекается."""
    if not start_b or not end_b:
        return False
    return overlaps(start_a, end_a, start_b, end_b)


def duration_minutes(start, end) -> int:
    return to_minutes(end) - to_minutes(start)


def duration_hours(start, end) -> float:
    return duration_minutes(start, end) / 60


def format_hours(hours: float) -> str:
    return f"{round(hours, 2):g}"


def format_time_for_display(value) -> str:
    if not value:
        return ""
    m = to_minutes(value)
    hours, minutes = divmod(m, 60)
    period = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{minutes:02d} {period}"

# src/sysadmin_gtd/dates.py

from __future__ import annotations

from datetime import date, datetime, timedelta

from .errors import ValidationError

ISO_FORMAT = "%Y-%m-%d"
USER_FORMAT = "%d/%m/%Y"


def today_iso() -> str:
    return date.today().isoformat()


def parse_iso(value: str) -> date:
    return datetime.strptime(value, ISO_FORMAT).date()


def parse_user_date(text: str) -> str:
    """Parse a dd/mm/yyyy string typed by the user into an ISO date string."""
    raw = (text or "").strip()
    if not raw:
        raise ValidationError("Date is required", field="date")
    try:
        return datetime.strptime(raw, USER_FORMAT).date().isoformat()
    except ValueError:
        raise ValidationError(f"expected dd/mm/yyyy, got {raw!r}", field="date") from None


def to_user_date(iso: str) -> str:
    d = parse_iso(iso)
    # strftime does not zero-pad years below 1000 on every platform
    return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"


def shift_days(iso: str, days: int) -> str:
    try:
        return (parse_iso(iso) + timedelta(days=days)).isoformat()
    except OverflowError:
        where = "after" if days > 0 else "before"
        raise ValidationError(f"No day {where} {to_user_date(iso)}.", field="date") from None


def next_day(iso: str) -> str:
    return shift_days(iso, 1)


def previous_day(iso: str) -> str:
    return shift_days(iso, -1)


def format_heading(iso: str) -> str:
    # e.g. "Sunday 01 June 2025"
    return parse_iso(iso).strftime("%A %d %B %Y")

"""
Completion records — the normalized input unit of every calculator.

A record is one observation for one scheduled day of one habit. The
engine never loads records itself; callers hand over an already
materialized sequence.

Completion precedence
---------------------
Records arrive in two historical shapes: newer ones carry an explicit
`is_completed` flag, older ones only a `status` string. The rule:

  1. `is_completed` present  → use it.
  2. otherwise               → completed when `status` is missing, empty
                               or "done"; any other status is not completed.

`is_record_completed` is the only place that rule lives. Calculators
never inspect `is_completed` / `status` directly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Iterable, Iterator, Optional, Union

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]

_DONE_STATUSES = (None, "", "done")


@dataclass(frozen=True)
class CompletionRecord:
    date_key: DateLike
    completed_at: Optional[Union[datetime, str]] = None
    is_completed: Optional[bool] = None
    status: Optional[str] = None
    progress_value: Optional[float] = None
    habit_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def is_record_completed(record: CompletionRecord) -> bool:
    """Did this record's day count as done?"""
    if record.is_completed is not None:
        return bool(record.is_completed)
    return record.status in _DONE_STATUSES


def parse_date_key(value: object) -> Optional[date]:
    """Return the calendar date for `value`, or None when it cannot be parsed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            return date.fromisoformat(raw)
        except ValueError:
            pass
        parsed = _parse_iso_datetime(raw)
        return parsed.date() if parsed is not None else None
    return None


def _parse_iso_datetime(raw: str) -> Optional[datetime]:
    # fromisoformat on older interpreters rejects the "Z" suffix
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def record_date(record: CompletionRecord) -> Optional[date]:
    """Parsed date of a record; logs and returns None for a malformed key."""
    day = parse_date_key(record.date_key)
    if day is None:
        logger.warning("Skipping completion record with invalid date_key %r", record.date_key)
    return day


def iter_dated(records: Iterable[CompletionRecord]) -> Iterator[tuple[date, CompletionRecord]]:
    """Yield (date, record) pairs, skipping records whose key does not parse."""
    for record in records:
        day = record_date(record)
        if day is not None:
            yield day, record


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def parse_timestamp(value: object) -> Optional[datetime]:
    """A datetime for `value`, or None when it is absent or cannot be parsed."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        return _parse_iso_datetime(value.strip())
    return None


def completion_timestamp(record: CompletionRecord) -> Optional[datetime]:
    """The record's completion time as a datetime, or None if absent/unparseable."""
    return parse_timestamp(record.completed_at)


def completion_hour(record: CompletionRecord, tz: Optional[tzinfo] = None) -> Optional[int]:
    """
    Local hour (0-23) at which the record was completed.

    Aware timestamps are converted to `tz` when one is given; naive
    timestamps are taken as already expressed in local time.
    """
    ts = completion_timestamp(record)
    if ts is None:
        return None
    if tz is not None and ts.tzinfo is not None:
        ts = ts.astimezone(tz)
    return ts.hour


def completed_with_timestamp(
    records: Iterable[CompletionRecord],
    tz: Optional[tzinfo] = None,
) -> list[int]:
    """Local completion hours of every completed record with a resolvable timestamp."""
    hours = []
    for record in records:
        if not is_record_completed(record):
            continue
        hour = completion_hour(record, tz)
        if hour is not None:
            hours.append(hour)
    return hours

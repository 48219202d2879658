from __future__ import annotations

import logging
from typing import List

from .config import TimezoneProfile
from .errors import MalformedRecordError
from .models import DEFAULT_LAYOUT, Event, RecordLayout

logger = logging.getLogger(__name__)


def _two_digits(text: str, what: str) -> int:
    if len(text) != 2 or not text.isdigit():
        raise MalformedRecordError(f"{what} is not a 2-digit number: {text!r}")
    return int(text)


def seasonal_offset(timestamp: str, profile: TimezoneProfile, layout: RecordLayout = DEFAULT_LAYOUT) -> int:
    """Hours behind UTC for an event, chosen by the month its DTSTAMP was written.

    This is a calendar-month approximation, not the real DST transition rule.
    """
    col = layout.stamp_month_column
    month = _two_digits(timestamp[col:col + 2], f"month in {timestamp!r}")
    if month in profile.standard_months:
        return profile.standard_offset_hours
    return profile.daylight_offset_hours


def shift_hour(token: str, offset_hours: int, layout: RecordLayout = DEFAULT_LAYOUT) -> str:
    """Move the HH of a YYYYMMDDTHHMMSS token back by offset_hours.

    The hour wraps at midnight but the date part is left as it was.
    """
    if len(token) != layout.token_width:
        raise MalformedRecordError(f"date-time {token!r} is not {layout.token_width} characters")
    h = layout.hour_offset
    hour = _two_digits(token[h:h + 2], f"hour in {token!r}")
    if hour > 23:
        raise MalformedRecordError(f"hour in {token!r} is out of range: {hour:02d}")
    local = (hour - offset_hours) % 24
    return f"{token[:h]}{local:02d}{token[h + 2:]}"


def convert_start(event: Event, profile: TimezoneProfile, layout: RecordLayout = DEFAULT_LAYOUT) -> None:
    col = layout.start_value_column
    token = event.start[col:col + layout.token_width]
    offset = seasonal_offset(event.timestamp, profile, layout)
    event.start = profile.start_prefix + shift_hour(token, offset, layout)


def convert_rule(event: Event, profile: TimezoneProfile, layout: RecordLayout = DEFAULT_LAYOUT) -> None:
    pos = event.rule.find(layout.until_marker)
    if pos < 0:
        logger.debug("no %s in rule %r; left unchanged", layout.until_marker, event.rule)
        return
    begin = pos + len(layout.until_marker)
    end = begin + layout.token_width
    token = shift_hour(event.rule[begin:end], profile.until_offset_hours, layout)
    event.rule = event.rule[:begin] + token + event.rule[end:]


def convert_event(event: Event, profile: TimezoneProfile, layout: RecordLayout = DEFAULT_LAYOUT) -> None:
    convert_start(event, profile, layout)
    convert_rule(event, profile, layout)


def convert_events(events: List[Event], profile: TimezoneProfile, layout: RecordLayout = DEFAULT_LAYOUT) -> None:
    """Rewrite start and UNTIL times of every event in place."""
    for number, event in enumerate(events, start=1):
        try:
            convert_event(event, profile, layout)
        except MalformedRecordError as exc:
            raise MalformedRecordError(f"event {number} ({event.id}): {exc}") from exc
    logger.debug("converted %d events to %s", len(events), profile.tzid)

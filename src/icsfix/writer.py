from __future__ import annotations

from typing import Iterable, TextIO

from .config import TimezoneProfile
from .models import BEGIN_EVENT, END_CALENDAR, END_EVENT, Calendar

CRLF = "\r\n"


def _write_lines(stream: TextIO, lines: Iterable[str]) -> None:
    for line in lines:
        stream.write(line + CRLF)


def write_calendar(stream: TextIO, calendar: Calendar, profile: TimezoneProfile) -> None:
    """Serialize header, VTIMEZONE block and events with CRLF line endings.

    Open file streams with newline="" so CRLF is written unchanged.
    """
    _write_lines(stream, calendar.header)
    _write_lines(stream, profile.vtimezone)
    for event in calendar.events:
        _write_lines(stream, [BEGIN_EVENT, *event.lines(), END_EVENT])
    _write_lines(stream, [END_CALENDAR])

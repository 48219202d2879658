from __future__ import annotations

import logging
from typing import List, Optional, TextIO

from .errors import MalformedRecordError
from .models import BEGIN_EVENT, END_CALENDAR, END_EVENT, FIELD_NAMES, Calendar, Event

logger = logging.getLogger(__name__)


def _strip_terminator(line: str) -> str:
    # Streams are opened with newline="" so the CR of a CRLF pair is still
    # present once the LF is removed; drop exactly one of it.
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def read_header(stream: TextIO) -> List[str]:
    """Collect whitespace-delimited tokens up to the first BEGIN:VEVENT token.

    Anything after the marker on its line is discarded; the stream is left at
    the start of the first event record.
    """
    header: List[str] = []
    for line in iter(stream.readline, ""):
        for token in line.split():
            if token == BEGIN_EVENT:
                return header
            header.append(token)
    raise MalformedRecordError(f"no {BEGIN_EVENT} marker found; input has no events")


def _read_record(stream: TextIO, number: int) -> Event:
    values = []
    for name in FIELD_NAMES:
        line = stream.readline()
        if line == "":
            raise MalformedRecordError(f"event {number}: input ended before its {name} line")
        values.append(_strip_terminator(line))
    return Event(*values)


def _next_marker(stream: TextIO) -> Optional[str]:
    line = stream.readline()
    if line == "":
        return None
    return line.strip()


def read_events(stream: TextIO) -> List[Event]:
    """Read 8-line event records until END:VCALENDAR or end of input.

    The stream must be positioned just past the first BEGIN:VEVENT line.
    """
    events: List[Event] = []
    while True:
        events.append(_read_record(stream, len(events) + 1))

        marker = _next_marker(stream)
        if marker != END_EVENT:
            raise MalformedRecordError(f"event {len(events)}: expected {END_EVENT}, got {marker!r}")

        marker = _next_marker(stream)
        if marker == BEGIN_EVENT:
            continue
        if marker is None or marker == END_CALENDAR:
            break
        raise MalformedRecordError(
            f"event {len(events)}: expected {BEGIN_EVENT} or {END_CALENDAR} after {END_EVENT}, got {marker!r}"
        )

    logger.debug("read %d events", len(events))
    return events


def read_calendar(stream: TextIO) -> Calendar:
    header = read_header(stream)
    return Calendar(header=header, events=read_events(stream))

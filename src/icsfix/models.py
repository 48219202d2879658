from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import List

BEGIN_EVENT = "BEGIN:VEVENT"
END_EVENT = "END:VEVENT"
END_CALENDAR = "END:VCALENDAR"


@dataclass
class Event:
    id: str
    summary: str
    timestamp: str      # DTSTAMP line; only the month is read
    start: str          # DTSTART line; rewritten by the converter
    description: str
    location: str
    rule: str           # RRULE line; its UNTIL= value is rewritten
    duration: str

    def lines(self) -> List[str]:
        return [getattr(self, f.name) for f in fields(self)]


FIELD_NAMES = tuple(f.name for f in fields(Event))


@dataclass(frozen=True)
class RecordLayout:
    """Fixed columns and widths of the event record schema."""

    start_value_column: int = 8     # len("DTSTART:")
    stamp_month_column: int = 12    # len("DTSTAMP:") + 4-digit year
    token_width: int = 15           # YYYYMMDDTHHMMSS
    hour_offset: int = 9            # HH inside the token
    until_marker: str = "UNTIL="


DEFAULT_LAYOUT = RecordLayout()


@dataclass
class Calendar:
    header: List[str] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)

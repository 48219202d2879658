from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import yaml

from .errors import ConfigError

NEW_YORK_VTIMEZONE: Tuple[str, ...] = (
    "BEGIN:VTIMEZONE",
    "TZID:America/New_York",
    "X-LIC-LOCATION:America/New_York",
    "BEGIN:DAYLIGHT",
    "TZOFFSETFROM:-0500",
    "TZOFFSETTO:-0400",
    "TZNAME:EDT",
    "DTSTART:19700308T020000",
    "RRULE:FREQ=YEARLY;BYMONTH=3;BYDAY=2SU",
    "END:DAYLIGHT",
    "BEGIN:STANDARD",
    "TZOFFSETFROM:-0400",
    "TZOFFSETTO:-0500",
    "TZNAME:EST",
    "DTSTART:19701101T020000",
    "RRULE:FREQ=YEARLY;BYMONTH=11;BYDAY=1SU",
    "END:STANDARD",
    "END:VTIMEZONE",
)


@dataclass(frozen=True)
class TimezoneProfile:
    tzid: str
    standard_offset_hours: int
    daylight_offset_hours: int
    until_offset_hours: int
    # Months (by DTSTAMP) treated as standard time.
    standard_months: Tuple[int, ...]
    vtimezone: Tuple[str, ...]

    @property
    def start_prefix(self) -> str:
        return f"DTSTART;TZID={self.tzid}:"


PROFILES: Dict[str, TimezoneProfile] = {
    "America/New_York": TimezoneProfile(
        tzid="America/New_York",
        standard_offset_hours=5,
        daylight_offset_hours=4,
        until_offset_hours=4,
        standard_months=(1, 2, 3, 4, 5),
        vtimezone=NEW_YORK_VTIMEZONE,
    ),
}

DEFAULT_TIMEZONE = "America/New_York"


@dataclass
class AppConfig:
    timezone: str
    profile: TimezoneProfile


def _offset(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"offsets.{name} must be an integer, got {value!r}")
    try:
        hours = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"offsets.{name} must be an integer, got {value!r}") from exc
    if not 0 <= hours <= 23:
        raise ConfigError(f"offsets.{name} must be between 0 and 23, got {hours}")
    return hours


def _months(value: Any) -> Tuple[int, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigError("offsets.standard_months must be a list of month numbers")
    months = []
    for m in value:
        if isinstance(m, bool):
            raise ConfigError(f"offsets.standard_months entries must be integers, got {m!r}")
        try:
            month = int(m)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"offsets.standard_months entries must be integers, got {m!r}") from exc
        if not 1 <= month <= 12:
            raise ConfigError(f"offsets.standard_months entries must be 1-12, got {month}")
        months.append(month)
    return tuple(months)


def load_config(path: Optional[str] = None) -> AppConfig:
    data: Dict[str, Any] = {}
    if path:
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f'cannot read config "{path}": {exc.strerror}') from exc
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f'invalid YAML in "{path}": {exc}') from exc
        if not isinstance(data, dict):
            raise ConfigError("config must be a mapping.")

    timezone = str(data.get("timezone", DEFAULT_TIMEZONE))
    profile = PROFILES.get(timezone)
    if profile is None:
        known = ", ".join(sorted(PROFILES))
        raise ConfigError(f"unsupported timezone {timezone!r} (known: {known})")

    offsets = data.get("offsets") or {}
    if not isinstance(offsets, dict):
        raise ConfigError("offsets must be a mapping.")

    profile = replace(
        profile,
        standard_offset_hours=_offset(offsets.get("standard_hours", profile.standard_offset_hours), "standard_hours"),
        daylight_offset_hours=_offset(offsets.get("daylight_hours", profile.daylight_offset_hours), "daylight_hours"),
        until_offset_hours=_offset(offsets.get("until_hours", profile.until_offset_hours), "until_hours"),
        standard_months=_months(offsets.get("standard_months", profile.standard_months)),
    )
    return AppConfig(timezone=timezone, profile=profile)

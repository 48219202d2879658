from __future__ import annotations


class CalendarFixError(Exception):
    exit_code = 1


class InvalidOutputExtensionError(CalendarFixError):
    exit_code = 3

    def __init__(self, path: str) -> None:
        super().__init__('output file must end in ".ics".')
        self.path = path


class InputNotFoundError(CalendarFixError):
    exit_code = 4

    def __init__(self, path: str) -> None:
        super().__init__(f'"{path}" does not exist.')
        self.path = path


class OutputUnwritableError(CalendarFixError):
    exit_code = 5

    def __init__(self, path: str) -> None:
        super().__init__(f'"{path}" is an invalid file/filetype.')
        self.path = path


class MalformedRecordError(CalendarFixError):
    """Input ended mid-record or a BEGIN/END marker was not where expected."""

    exit_code = 6


class ConfigError(CalendarFixError, ValueError):
    exit_code = 7

from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .config import load_config
from .converter import convert_events
from .errors import (
    CalendarFixError,
    InputNotFoundError,
    InvalidOutputExtensionError,
    OutputUnwritableError,
)
from .reader import read_calendar
from .writer import write_calendar

OUTPUT_EXTENSION = ".ics"
CONFIG_ENV_VAR = "ICSFIX_CONFIG"

logger = logging.getLogger(__name__)


def convert_file(input_path: str, output_path: str, config_path: Optional[str] = None) -> int:
    """Convert input_path into output_path and return the number of events.

    Nothing is written unless the whole input parses and converts.
    """
    if not output_path.endswith(OUTPUT_EXTENSION):
        raise InvalidOutputExtensionError(output_path)

    cfg = load_config(config_path)

    # Opaque fields may carry non-UTF-8 bytes; surrogateescape writes them back unchanged.
    try:
        src = open(input_path, "r", encoding="utf-8", errors="surrogateescape", newline="")
    except OSError as exc:
        raise InputNotFoundError(input_path) from exc

    with src:
        calendar = read_calendar(src)
    convert_events(calendar.events, cfg.profile)

    try:
        dst = open(output_path, "w", encoding="utf-8", errors="surrogateescape", newline="")
    except OSError as exc:
        raise OutputUnwritableError(output_path) from exc

    with dst:
        write_calendar(dst, calendar, cfg.profile)

    logger.info("wrote %d events to %s (%s)", len(calendar.events), output_path, cfg.timezone)
    return len(calendar.events)


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    load_dotenv()

    ap = argparse.ArgumentParser(
        prog="icsfix",
        description="Rewrite UTC event start/UNTIL times in a calendar export as America/New_York local times",
    )
    ap.add_argument("input_file")
    ap.add_argument("output_file", help="must end in .ics")
    ap.add_argument("--config", default=os.environ.get(CONFIG_ENV_VAR) or None, help="YAML config file")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        count = convert_file(args.input_file, args.output_file, config_path=args.config)
    except CalendarFixError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return exc.exit_code

    print(f'Converted {count} events; wrote "{args.output_file}".')
    return 0


if __name__ == "__main__":
    sys.exit(main())

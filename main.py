#!/usr/bin/env python3
"""Thin entrypoint for datepad."""

from __future__ import annotations

import asyncio
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional, Sequence

from app import (
    CalendarApp,
    CreateEvent,
    DatePicked,
    OpenDatePicker,
    Runtime,
    SubmitDate,
    TitleInputChanged,
)
from config import Config, load_config
from date_math import MONTH_NAMES, WEEKDAY_ABBR, CalendarDate
from grid import GRID_COLUMNS, IsInMonth, month_cells
from models import ValidationError
from persistence import PersistenceGateway
from state import CalendarStore

try:
    __version__ = version("datepad")
except PackageNotFoundError:  # pragma: no cover - fallback for source runs
    __version__ = "0.0.0"


def _print_help() -> None:
    print(
        "datepad - calendar engine with debounced JSON persistence\n\n"
        "Usage:\n"
        "  datepad -h                        Show this help\n"
        "  datepad -v                        Show installed version\n"
        "  datepad -l                        List saved events\n"
        "  datepad -g <YYYY-MM>              Print the month grid\n"
        '  datepad -a "<title>" [-t <YYYY-MM-DD>]  Create an event (default: today)\n'
        "  add -d to any command for debug logging\n"
    )


def parse_month(value: str) -> CalendarDate:
    parts = value.strip().split("-")
    if len(parts) != 2:
        raise ValidationError(f"Invalid month '{value}'. Expected YYYY-MM")
    try:
        year, month = int(parts[0]), int(parts[1])
        return CalendarDate(year, month, 1)
    except ValueError as exc:
        raise ValidationError(f"Invalid month '{value}'. Expected YYYY-MM") from exc


def parse_args(argv: Sequence[str]) -> dict[str, str | bool]:
    flags: dict[str, str | bool] = {}

    idx = 0
    while idx < len(argv):
        arg = argv[idx]
        if arg in ("-h", "-v", "-d", "-l"):
            flags[arg[1]] = True
            idx += 1
            continue
        if arg in ("-g", "-a", "-t"):
            idx += 1
            if idx >= len(argv):
                raise ValidationError(f"{arg} requires an argument")
            flags[arg[1]] = argv[idx]
            idx += 1
            continue
        raise ValidationError(f"Unknown flag '{arg}'")

    if "t" in flags and "a" not in flags:
        raise ValidationError("-t only applies together with -a")
    return flags


def format_event_list(store: CalendarStore) -> str:
    if not store.events:
        return "No events."
    ordered = sorted(store.events, key=lambda ev: ev.date)
    return "\n".join(f"{ev.date.isoformat()}  {ev.title}" for ev in ordered)


def format_month_grid(store: CalendarStore, shown: CalendarDate) -> str:
    """Plain-text grid; days of the neighbouring months are bracketed, '*' marks events."""
    lines: List[str] = [f"{MONTH_NAMES[shown.month - 1]} {shown.year}"]
    lines.append(" ".join(f"{abbr:>5}" for abbr in WEEKDAY_ABBR))
    row: List[str] = []
    for cell in month_cells(shown.year, shown.month):
        mark = "*" if store.events_on(cell.to_date(shown.year, shown.month)) else " "
        if cell.is_in_month is IsInMonth.SAME:
            label = f"{cell.day}{mark}"
        else:
            label = f"({cell.day}){mark}"
        row.append(f"{label:>5}")
        if len(row) == GRID_COLUMNS:
            lines.append(" ".join(row))
            row = []
    return "\n".join(lines)


async def _run_session(config: Config, flags: dict[str, str | bool]) -> int:
    gateway = PersistenceGateway(config.data_path, save_interval=config.save_interval)
    runtime = Runtime(CalendarApp(), gateway)
    runtime.start()
    try:
        store = await runtime.wait_loaded()

        title = flags.get("a")
        if isinstance(title, str):
            if not title:
                print("Event title cannot be empty")
                return 1
            target = flags.get("t")
            if isinstance(target, str):
                try:
                    picked = CalendarDate.fromisoformat(target)
                except ValueError as exc:
                    print(str(exc))
                    return 1
                runtime.send(OpenDatePicker())
                runtime.send(DatePicked(picked))
                runtime.send(SubmitDate())
            runtime.send(TitleInputChanged(title))
            runtime.send(CreateEvent())
            await runtime.flush()
            print(f"{store.events[-1].date.isoformat()}  {store.events[-1].title}")

        if flags.get("l"):
            print(format_event_list(store))

        month = flags.get("g")
        if isinstance(month, str):
            print(format_month_grid(store, parse_month(month)))
        return 0
    finally:
        await runtime.stop()


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    try:
        flags = parse_args(argv)
        if isinstance(flags.get("g"), str):
            parse_month(str(flags["g"]))
    except ValidationError as exc:
        print(str(exc))
        return 1

    if flags.get("v"):
        print(__version__)
        return 0

    if flags.get("h") or not any(key in flags for key in ("a", "l", "g")):
        _print_help()
        return 0

    config = load_config()
    logging.basicConfig(
        level=logging.DEBUG if flags.get("d") else config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run_session(config, flags))


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)

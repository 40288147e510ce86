#!/usr/bin/env python3
"""JSON snapshot storage for datepad events.

Rows are checked against a pyarrow schema in both directions so a file that
drifts from ``{"events": [{"title": ..., "date": ...}]}`` is rejected as a
format error instead of being half-loaded.
"""
from __future__ import annotations

import enum
import json
import os
import tempfile
from pathlib import Path
from typing import List

import pyarrow as pa

from date_math import CalendarDate
from models import (
    PersistedSnapshot,
    SnapshotEntry,
    ValidationError,
    normalize_event_payload,
)


_SCHEMA = pa.schema(
    [
        ("title", pa.string()),
        ("date", pa.string()),
    ]
)

SNAPSHOT_KEYS = frozenset({"events"})


class StorageError(Exception):
    pass


class LoadErrorKind(enum.Enum):
    FILE = "file"
    FORMAT = "format"


class SaveErrorKind(enum.Enum):
    FILE = "file"
    WRITE = "write"
    FORMAT = "format"


class LoadError(StorageError):
    def __init__(self, kind: LoadErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class SaveError(StorageError):
    def __init__(self, kind: SaveErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


def _rows_to_table(rows: list) -> pa.Table:
    for row in rows:
        normalize_event_payload(row)
    try:
        return pa.Table.from_pylist(rows, schema=_SCHEMA)
    except (pa.ArrowInvalid, pa.ArrowTypeError) as exc:
        raise ValidationError(f"Event rows do not match the snapshot schema: {exc}") from exc


def _table_to_snapshot(table: pa.Table) -> PersistedSnapshot:
    # Validate schema shape explicitly
    if table.schema != _SCHEMA:
        raise ValidationError("Schema mismatch for calendar events")
    titles = table.column("title").to_pylist()
    dates = table.column("date").to_pylist()
    entries: List[SnapshotEntry] = []
    for title, day in zip(titles, dates):
        if title is None or day is None:
            raise ValidationError("Event entry has an empty title or date")
        try:
            CalendarDate.fromisoformat(day)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        entries.append(SnapshotEntry(title=title, date=day))
    return PersistedSnapshot(tuple(entries))


def _snapshot_to_table(snapshot: PersistedSnapshot) -> pa.Table:
    return pa.Table.from_pydict(
        {
            "title": [e.title for e in snapshot.events],
            "date": [e.date for e in snapshot.events],
        },
        schema=_SCHEMA,
    )


def decode_snapshot(text: str) -> PersistedSnapshot:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ValidationError("JSON nesting is too deep") from exc
    if not isinstance(payload, dict) or set(payload) != SNAPSHOT_KEYS:
        raise ValidationError("Snapshot must be an object with a single 'events' list")
    rows = payload["events"]
    if not isinstance(rows, list):
        raise ValidationError("'events' must be a list")
    return _table_to_snapshot(_rows_to_table(rows))


def encode_snapshot(snapshot: PersistedSnapshot) -> str:
    table = _snapshot_to_table(snapshot)
    return json.dumps({"events": table.to_pylist()}, ensure_ascii=False, indent=2)


def load_snapshot(path: Path) -> PersistedSnapshot:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise LoadError(LoadErrorKind.FILE, f"No calendar file at {path}") from exc
    except UnicodeDecodeError as exc:
        raise LoadError(LoadErrorKind.FORMAT, f"{path} is not UTF-8 text") from exc
    except OSError as exc:
        raise LoadError(LoadErrorKind.FILE, f"Failed to read {path}: {exc}") from exc
    try:
        return decode_snapshot(text)
    except ValidationError as exc:
        raise LoadError(LoadErrorKind.FORMAT, f"Malformed calendar file {path}: {exc}") from exc


def _write_atomic(path: Path, payload: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.stem}-", suffix=path.suffix, dir=str(path.parent)
        )
    except OSError as exc:
        raise SaveError(SaveErrorKind.FILE, f"Cannot prepare {path.parent}: {exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        raise SaveError(SaveErrorKind.WRITE, f"Failed to write {path}: {exc}") from exc
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError:
                pass


def save_snapshot(path: Path, snapshot: PersistedSnapshot) -> None:
    try:
        payload = encode_snapshot(snapshot)
    except (pa.ArrowInvalid, pa.ArrowTypeError, TypeError, ValueError) as exc:
        raise SaveError(SaveErrorKind.FORMAT, f"Cannot serialize calendar: {exc}") from exc
    _write_atomic(path, payload)


__all__ = [
    "StorageError",
    "LoadError",
    "LoadErrorKind",
    "SaveError",
    "SaveErrorKind",
    "decode_snapshot",
    "encode_snapshot",
    "load_snapshot",
    "save_snapshot",
]

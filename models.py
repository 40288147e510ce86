#!/usr/bin/env python3
"""Core models and validation helpers for datepad."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Tuple, Union

from date_math import CalendarDate

EVENT_FIELDS = frozenset({"title", "date"})


class ValidationError(Exception):
    pass


class EditState(enum.Enum):
    IDLE = "idle"
    EDITING = "editing"


@dataclass(frozen=True)
class Edit:
    pass


@dataclass(frozen=True)
class TitleEdited:
    text: str


@dataclass(frozen=True)
class FinishEdition:
    pass


@dataclass(frozen=True)
class Delete:
    pass


EventMessage = Union[Edit, TitleEdited, FinishEdition, Delete]


@dataclass
class EventRecord:
    title: str
    date: CalendarDate
    edit_state: EditState = EditState.IDLE

    @property
    def is_editing(self) -> bool:
        return self.edit_state is EditState.EDITING

    def update(self, message: EventMessage) -> bool:
        """Apply an edit message and report whether the record changed.

        ``Delete`` is not handled here: removal belongs to the collection
        that owns the record.
        """
        if isinstance(message, Edit):
            if self.edit_state is EditState.EDITING:
                return False
            self.edit_state = EditState.EDITING
            return True
        if isinstance(message, TitleEdited):
            if self.edit_state is not EditState.EDITING:
                return False
            if message.text == self.title:
                return False
            self.title = message.text
            return True
        if isinstance(message, FinishEdition):
            # An empty title keeps the record in edit mode so it is never persisted.
            if self.edit_state is not EditState.EDITING or not self.title:
                return False
            self.edit_state = EditState.IDLE
            return True
        if isinstance(message, Delete):
            raise ValueError("Delete must be handled by the owning collection")
        raise TypeError(f"Unsupported event message: {message!r}")


@dataclass(frozen=True)
class SnapshotEntry:
    title: str
    date: str


@dataclass(frozen=True)
class PersistedSnapshot:
    events: Tuple[SnapshotEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_records(cls, records: "list[EventRecord]") -> "PersistedSnapshot":
        return cls(tuple(SnapshotEntry(**event_to_jsonable(r)) for r in records))

    def to_records(self) -> "list[EventRecord]":
        return [
            normalize_event_payload({"title": e.title, "date": e.date})
            for e in self.events
        ]


def normalize_event_payload(data: dict) -> EventRecord:
    if not isinstance(data, dict):
        raise ValidationError("Event entry must be an object")

    keys = set(data)
    missing = EVENT_FIELDS - keys
    if missing:
        raise ValidationError(f"Event entry missing field(s): {', '.join(sorted(missing))}")
    unknown = keys - EVENT_FIELDS
    if unknown:
        raise ValidationError(f"Event entry has unknown field(s): {', '.join(sorted(unknown))}")

    title = data["title"]
    if not isinstance(title, str):
        raise ValidationError("'title' must be a string")

    raw_date = data["date"]
    if not isinstance(raw_date, str):
        raise ValidationError("'date' must be a YYYY-MM-DD string")
    try:
        when = CalendarDate.fromisoformat(raw_date)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    return EventRecord(title=title, date=when)


def event_to_jsonable(event: EventRecord) -> dict:
    return {
        "title": event.title,
        "date": event.date.isoformat(),
    }


__all__ = [
    "EditState",
    "Edit",
    "TitleEdited",
    "FinishEdition",
    "Delete",
    "EventMessage",
    "EventRecord",
    "SnapshotEntry",
    "PersistedSnapshot",
    "ValidationError",
    "normalize_event_payload",
    "event_to_jsonable",
    "EVENT_FIELDS",
]

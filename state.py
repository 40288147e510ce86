#!/usr/bin/env python3
"""In-memory calendar state for datepad."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from date_math import (
    CalendarDate,
    pred_month,
    pred_year,
    succ_month,
    succ_year,
)
from models import Delete, EventMessage, EventRecord, PersistedSnapshot

logger = logging.getLogger(__name__)


class SaveState(enum.Enum):
    IDLE = "idle"
    DIRTY = "dirty"
    SAVING = "saving"
    DIRTY_SAVING = "dirty_saving"

    @property
    def dirty(self) -> bool:
        return self in (SaveState.DIRTY, SaveState.DIRTY_SAVING)

    @property
    def saving(self) -> bool:
        return self in (SaveState.SAVING, SaveState.DIRTY_SAVING)

    def mark_dirty(self) -> "SaveState":
        if self.saving:
            return SaveState.DIRTY_SAVING
        return SaveState.DIRTY

    def begin_save(self) -> "SaveState":
        assert self is SaveState.DIRTY, f"cannot start a save from {self.name}"
        return SaveState.SAVING

    def finish_save(self) -> "SaveState":
        assert self.saving, f"no save in flight in {self.name}"
        if self is SaveState.DIRTY_SAVING:
            return SaveState.DIRTY
        return SaveState.IDLE


@dataclass
class CalendarStore:
    displayed: CalendarDate = field(default_factory=CalendarDate.today)
    events: List[EventRecord] = field(default_factory=list)
    save_state: SaveState = SaveState.IDLE

    # Date picker collaborator
    selected_date: CalendarDate = field(default_factory=CalendarDate.today)
    pending_date: Optional[CalendarDate] = None

    # "New event" input
    draft_title: str = ""

    # Pinned "today"; None follows the system clock.
    today: Optional[CalendarDate] = None

    @classmethod
    def from_snapshot(
        cls, snapshot: PersistedSnapshot, *, today: Optional[CalendarDate] = None
    ) -> "CalendarStore":
        start = today or CalendarDate.today()
        return cls(
            displayed=start,
            events=snapshot.to_records(),
            selected_date=start,
            today=today,
        )

    @classmethod
    def empty(cls, *, today: Optional[CalendarDate] = None) -> "CalendarStore":
        start = today or CalendarDate.today()
        return cls(displayed=start, selected_date=start, today=today)

    @property
    def displayed_year(self) -> int:
        return self.displayed.year

    @property
    def displayed_month(self) -> int:
        return self.displayed.month

    @property
    def dirty(self) -> bool:
        return self.save_state.dirty

    @property
    def saving(self) -> bool:
        return self.save_state.saving

    @property
    def picking_date(self) -> bool:
        return self.pending_date is not None

    @property
    def needs_save(self) -> bool:
        return self.save_state is SaveState.DIRTY

    def mark_dirty(self) -> None:
        self.save_state = self.save_state.mark_dirty()

    def begin_save(self) -> PersistedSnapshot:
        """Flag a save as in flight and return the snapshot it must write."""
        self.save_state = self.save_state.begin_save()
        return self.snapshot()

    def finish_save(self) -> None:
        self.save_state = self.save_state.finish_save()

    def snapshot(self) -> PersistedSnapshot:
        return PersistedSnapshot.from_records(self.events)

    def events_on(self, day: CalendarDate) -> List[EventRecord]:
        return [ev for ev in self.events if ev.date == day]

    # Mutations

    def set_draft_title(self, text: str) -> None:
        self.draft_title = text
        self.mark_dirty()

    def create_event(self) -> Optional[EventRecord]:
        if not self.draft_title:
            logger.debug("Ignoring create with an empty title")
            return None
        record = EventRecord(title=self.draft_title, date=self.selected_date)
        self.events.append(record)
        self.draft_title = ""
        self.mark_dirty()
        return record

    def update_event(self, index: int, message: EventMessage) -> None:
        if not 0 <= index < len(self.events):
            logger.debug("Ignoring message for missing event #%d", index)
            return
        if isinstance(message, Delete):
            self.delete_event(index)
            return
        if self.events[index].update(message):
            self.mark_dirty()

    def delete_event(self, index: int) -> None:
        if not 0 <= index < len(self.events):
            return
        del self.events[index]
        self.mark_dirty()

    def delete_many(self, indices: Iterable[int]) -> None:
        # Highest first so the remaining positions stay valid.
        for index in sorted(set(indices), reverse=True):
            self.delete_event(index)

    def show_month(self, target: CalendarDate) -> None:
        self.displayed = target
        self.mark_dirty()

    def next_month(self) -> None:
        self.show_month(succ_month(self.displayed))

    def prev_month(self) -> None:
        self.show_month(pred_month(self.displayed))

    def next_year(self) -> None:
        self.show_month(succ_year(self.displayed))

    def prev_year(self) -> None:
        self.show_month(pred_year(self.displayed))

    def current_date(self) -> CalendarDate:
        return self.today or CalendarDate.today()

    def show_today(self) -> None:
        self.show_month(self.current_date())

    def open_date_picker(self) -> None:
        self.pending_date = self.selected_date
        self.mark_dirty()

    def pick_date(self, value: CalendarDate) -> None:
        if self.pending_date is None:
            return
        self.pending_date = value
        self.mark_dirty()

    def submit_date(self) -> None:
        if self.pending_date is None:
            return
        self.selected_date = self.pending_date
        self.pending_date = None
        self.show_month(self.selected_date)

    def cancel_date(self) -> None:
        if self.pending_date is None:
            return
        self.pending_date = None
        self.mark_dirty()


__all__ = ["SaveState", "CalendarStore"]

#!/usr/bin/env python3
"""Application actor and asyncio runtime for datepad.

The actor handles one message at a time. Loading and saving are the only
operations that suspend; they run as separate tasks and report back by
posting ``Loaded``/``Saved`` messages to the same queue as user actions.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Optional, Set, Union

from date_math import CalendarDate
from models import EventMessage, PersistedSnapshot
from persistence import PersistenceGateway
from state import CalendarStore
from store import LoadError, LoadErrorKind, SaveError

logger = logging.getLogger(__name__)


# Messages


@dataclass(frozen=True)
class Loaded:
    result: Union[PersistedSnapshot, LoadError]


@dataclass(frozen=True)
class Saved:
    error: Optional[SaveError] = None


@dataclass(frozen=True)
class TitleInputChanged:
    text: str


@dataclass(frozen=True)
class CreateEvent:
    pass


@dataclass(frozen=True)
class EventAction:
    index: int
    message: EventMessage


@dataclass(frozen=True)
class DeleteEvents:
    indices: tuple


@dataclass(frozen=True)
class NextMonth:
    pass


@dataclass(frozen=True)
class PrevMonth:
    pass


@dataclass(frozen=True)
class NextYear:
    pass


@dataclass(frozen=True)
class PrevYear:
    pass


@dataclass(frozen=True)
class ShowToday:
    pass


@dataclass(frozen=True)
class OpenDatePicker:
    pass


@dataclass(frozen=True)
class DatePicked:
    date: CalendarDate


@dataclass(frozen=True)
class SubmitDate:
    pass


@dataclass(frozen=True)
class CancelDate:
    pass


Message = Union[
    Loaded,
    Saved,
    TitleInputChanged,
    CreateEvent,
    EventAction,
    DeleteEvents,
    NextMonth,
    PrevMonth,
    NextYear,
    PrevYear,
    ShowToday,
    OpenDatePicker,
    DatePicked,
    SubmitDate,
    CancelDate,
]

_USER_MESSAGES = (
    TitleInputChanged,
    CreateEvent,
    EventAction,
    DeleteEvents,
    NextMonth,
    PrevMonth,
    NextYear,
    PrevYear,
    ShowToday,
    OpenDatePicker,
    DatePicked,
    SubmitDate,
    CancelDate,
)


# Commands the runtime performs on the actor's behalf


@dataclass(frozen=True)
class LoadCommand:
    pass


@dataclass(frozen=True)
class SaveCommand:
    snapshot: PersistedSnapshot


Command = Union[LoadCommand, SaveCommand]


# Application lifecycle


@dataclass
class AppLoading:
    pass


@dataclass
class AppLoaded:
    store: CalendarStore


Lifecycle = Union[AppLoading, AppLoaded]


@dataclass
class CalendarApp:
    today: Optional[CalendarDate] = None
    lifecycle: Lifecycle = field(default_factory=AppLoading)

    @property
    def store(self) -> Optional[CalendarStore]:
        if isinstance(self.lifecycle, AppLoaded):
            return self.lifecycle.store
        return None

    @property
    def is_loaded(self) -> bool:
        return isinstance(self.lifecycle, AppLoaded)

    def start(self) -> Command:
        return LoadCommand()

    def update(self, message: Message) -> Optional[Command]:
        lifecycle = self.lifecycle
        if isinstance(lifecycle, AppLoading):
            return self._update_loading(message)
        if isinstance(lifecycle, AppLoaded):
            return self._update_loaded(lifecycle.store, message)
        raise TypeError(f"Unknown lifecycle state: {lifecycle!r}")

    def _update_loading(self, message: Message) -> Optional[Command]:
        if isinstance(message, Loaded):
            self.lifecycle = AppLoaded(self._store_from(message.result))
            return None
        if isinstance(message, (Saved,) + _USER_MESSAGES):
            logger.debug("Dropping %s while loading", type(message).__name__)
            return None
        raise TypeError(f"Unsupported message: {message!r}")

    def _store_from(self, result: Union[PersistedSnapshot, LoadError]) -> CalendarStore:
        if isinstance(result, LoadError):
            if result.kind is LoadErrorKind.FILE:
                logger.info("Starting with an empty calendar: %s", result)
            else:
                logger.warning("Starting with an empty calendar: %s", result)
            return CalendarStore.empty(today=self.today)
        logger.debug("Loaded %d event(s)", len(result.events))
        return CalendarStore.from_snapshot(result, today=self.today)

    def _update_loaded(self, store: CalendarStore, message: Message) -> Optional[Command]:
        if isinstance(message, Loaded):
            logger.debug("Ignoring a second load result")
        elif isinstance(message, Saved):
            if message.error is not None:
                logger.error("Saving the calendar failed: %s", message.error)
            store.finish_save()
        elif isinstance(message, TitleInputChanged):
            store.set_draft_title(message.text)
        elif isinstance(message, CreateEvent):
            store.create_event()
        elif isinstance(message, EventAction):
            store.update_event(message.index, message.message)
        elif isinstance(message, DeleteEvents):
            store.delete_many(message.indices)
        elif isinstance(message, NextMonth):
            store.next_month()
        elif isinstance(message, PrevMonth):
            store.prev_month()
        elif isinstance(message, NextYear):
            store.next_year()
        elif isinstance(message, PrevYear):
            store.prev_year()
        elif isinstance(message, ShowToday):
            store.show_today()
        elif isinstance(message, OpenDatePicker):
            store.open_date_picker()
        elif isinstance(message, DatePicked):
            store.pick_date(message.date)
        elif isinstance(message, SubmitDate):
            store.submit_date()
        elif isinstance(message, CancelDate):
            store.cancel_date()
        else:
            raise TypeError(f"Unsupported message: {message!r}")

        if store.needs_save:
            return SaveCommand(store.begin_save())
        return None


class Runtime:
    """Feeds messages to a CalendarApp and runs its commands as tasks."""

    def __init__(self, app: CalendarApp, gateway: PersistenceGateway) -> None:
        self.app = app
        self.gateway = gateway
        self._queue: "asyncio.Queue[Message]" = asyncio.Queue()
        self._tasks: Set["asyncio.Task[None]"] = set()
        self._loop_task: Optional["asyncio.Task[None]"] = None
        self._loaded = asyncio.Event()

    def start(self) -> None:
        if self._loop_task is not None:
            return
        self._loop_task = asyncio.create_task(self._run())
        self._loop_task.add_done_callback(self._on_loop_done)
        self._execute(self.app.start())

    def send(self, message: Message) -> None:
        self._queue.put_nowait(message)

    async def wait_loaded(self) -> CalendarStore:
        await self._unless_stopped(self._loaded.wait())
        store = self.app.store
        assert store is not None
        return store

    async def drain(self) -> None:
        """Wait until every message queued so far is handled."""
        await self._unless_stopped(self._queue.join())

    async def flush(self) -> None:
        """Wait until every queued message is handled and no save is pending."""
        while True:
            await self.drain()
            if not self._tasks:
                break
            await asyncio.gather(*list(self._tasks))

    async def stop(self) -> None:
        task, self._loop_task = self._loop_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _unless_stopped(self, awaitable: Awaitable[object]) -> None:
        """Await ``awaitable``, failing instead of hanging if the message loop has died."""
        loop_task = self._loop_task
        assert loop_task is not None, "runtime is not started"
        waiter = asyncio.ensure_future(awaitable)
        await asyncio.wait({waiter, loop_task}, return_when=asyncio.FIRST_COMPLETED)
        if not loop_task.done():
            waiter.result()
            return
        waiter.cancel()
        cause = None if loop_task.cancelled() else loop_task.exception()
        raise RuntimeError("calendar runtime is no longer running") from cause

    def _on_loop_done(self, task: "asyncio.Task[None]") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Calendar message loop crashed", exc_info=exc)

    async def _run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                self._execute(self.app.update(message))
                if self.app.is_loaded:
                    self._loaded.set()
            finally:
                self._queue.task_done()

    def _execute(self, command: Optional[Command]) -> None:
        if command is None:
            return
        task = asyncio.create_task(self._perform(command))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _perform(self, command: Command) -> None:
        if isinstance(command, LoadCommand):
            try:
                result: Union[PersistedSnapshot, LoadError] = await self.gateway.load()
            except LoadError as exc:
                result = exc
            self.send(Loaded(result))
        elif isinstance(command, SaveCommand):
            try:
                await self.gateway.save(command.snapshot)
            except SaveError as exc:
                self.send(Saved(exc))
            else:
                self.send(Saved())
        else:
            raise TypeError(f"Unsupported command: {command!r}")


__all__ = [
    "CalendarApp",
    "Runtime",
    "AppLoading",
    "AppLoaded",
    "Lifecycle",
    "LoadCommand",
    "SaveCommand",
    "Command",
    "Message",
    "Loaded",
    "Saved",
    "TitleInputChanged",
    "CreateEvent",
    "EventAction",
    "DeleteEvents",
    "NextMonth",
    "PrevMonth",
    "NextYear",
    "PrevYear",
    "ShowToday",
    "OpenDatePicker",
    "DatePicked",
    "SubmitDate",
    "CancelDate",
]

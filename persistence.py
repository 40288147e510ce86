#!/usr/bin/env python3
"""Asynchronous load/save gateway over the snapshot store."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable

from models import PersistedSnapshot
from store import (
    LoadError,
    LoadErrorKind,
    SaveError,
    SaveErrorKind,
    StorageError,
    load_snapshot,
    save_snapshot,
)

DEFAULT_SAVE_INTERVAL = 2.0

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """Runs blocking file I/O off the event loop and paces saves.

    After every save, successful or not, ``save`` keeps its caller waiting
    for ``save_interval`` seconds. The application keeps its store flagged as
    saving until then, which is what coalesces bursts of mutations.
    """

    def __init__(
        self,
        data_path: Path,
        *,
        save_interval: float = DEFAULT_SAVE_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._data_path = data_path
        self._save_interval = save_interval
        self._sleep = sleep

    @property
    def data_path(self) -> Path:
        return self._data_path

    @property
    def save_interval(self) -> float:
        return self._save_interval

    async def load(self) -> PersistedSnapshot:
        try:
            return await asyncio.to_thread(load_snapshot, self._data_path)
        except StorageError:
            raise
        except Exception as exc:
            raise LoadError(LoadErrorKind.FILE, f"Failed to load {self._data_path}: {exc}") from exc

    async def save(self, snapshot: PersistedSnapshot) -> None:
        try:
            await asyncio.to_thread(save_snapshot, self._data_path, snapshot)
            logger.debug("Saved %d event(s) to %s", len(snapshot.events), self._data_path)
        except StorageError:
            raise
        except Exception as exc:
            raise SaveError(SaveErrorKind.WRITE, f"Failed to save {self._data_path}: {exc}") from exc
        finally:
            await self._sleep(self._save_interval)


__all__ = ["PersistenceGateway", "DEFAULT_SAVE_INTERVAL"]

# movment/services/scheduler.py
"""
Background jobs owned by the application lifespan.

Each PeriodicJob is one asyncio task: open a session, run the (synchronous)
job body in a worker thread, close the session, sleep. A tick never starts
before the previous one of the same job finished, and a failing tick is
logged without stopping the job.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from movment.core.config import settings
from movment.db.types import utcnow
from movment.services.auto_assign import run_auto_assign_once
from movment.services.reminders import run_reminders_once

logger = logging.getLogger(__name__)

JobFunc = Callable[[Session, datetime], int]


class PeriodicJob:
    def __init__(
        self,
        name: str,
        interval: float,
        func: JobFunc,
        session_factory: Callable[[], Session],
        clock: Callable[[], datetime] = utcnow,
    ):
        self.name = name
        self.interval = interval
        self.func = func
        self.session_factory = session_factory
        self.clock = clock
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _tick_sync(self) -> int:
        db = self.session_factory()
        try:
            return self.func(db, self.clock())
        finally:
            db.close()

    async def run_once(self) -> Optional[int]:
        try:
            result = await asyncio.to_thread(self._tick_sync)
        except Exception:
            logger.exception("Job %s: tick failed", self.name)
            return None
        finally:
            self.ticks += 1
        return result

    async def _loop(self) -> None:
        logger.info("Job %s started (every %ss)", self.name, self.interval)
        while not self._stopping.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Job %s stopped", self.name)

    def start(self) -> None:
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._loop(), name=f"job:{self.name}")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stopping.set()
        try:
            # lets an in-flight tick finish its transaction
            await self._task
        finally:
            self._task = None


class SchedulerManager:
    """The two application jobs: auto-assign and reminders."""

    def __init__(self, session_factory: Callable[[], Session], clock: Callable[[], datetime] = utcnow):
        self.jobs: List[PeriodicJob] = [
            PeriodicJob("auto-assign", settings.AUTO_ASSIGN_INTERVAL_SECONDS, run_auto_assign_once, session_factory, clock),
            PeriodicJob("reminders", settings.REMINDER_INTERVAL_SECONDS, run_reminders_once, session_factory, clock),
        ]

    def start(self) -> None:
        for job in self.jobs:
            job.start()

    async def stop(self) -> None:
        for job in self.jobs:
            await job.stop()

"""Asyncio-based periodic task runner."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Iterable

from loguru import logger

from caretrek.core.services.scheduler.registry import ScheduledJob, registered_jobs


class SchedulerService:
    """Run registered jobs on the current event loop.

    One task per job. Coroutine functions run on the loop; plain
    functions run in a worker thread. A failing run is logged and the job
    keeps its schedule; only ``shutdown`` stops it.
    """

    def __init__(self, jobs: Iterable[ScheduledJob] | None = None):
        self._jobs = list(jobs) if jobs is not None else registered_jobs()
        self._tasks: dict[str, asyncio.Task] = {}
        self._stop_event: asyncio.Event | None = None

    @property
    def running(self) -> bool:
        return self._stop_event is not None and not self._stop_event.is_set()

    @property
    def job_names(self) -> list[str]:
        return [job.name for job in self._jobs]

    async def _run_once(self, job: ScheduledJob) -> None:
        try:
            if inspect.iscoroutinefunction(job.func):
                await job.func()
            else:
                # blocking sync jobs must not stall the shared event loop
                result = await asyncio.to_thread(job.func)
                if inspect.isawaitable(result):
                    await result
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.bind(job=job.name).exception("Scheduled job {} failed", job.name)

    async def _loop(self, job: ScheduledJob, stop_event: asyncio.Event) -> None:
        if job.run_on_start:
            await self._run_once(job)
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=job.interval_seconds)
            except TimeoutError:
                await self._run_once(job)

    async def start(self) -> None:
        """Start one task per job. Starting with no jobs is valid."""
        if self.running:
            logger.warning("Scheduler already running")
            return

        self._stop_event = asyncio.Event()
        for job in self._jobs:
            self._tasks[job.name] = asyncio.create_task(
                self._loop(job, self._stop_event), name=f"job:{job.name}"
            )
        logger.info("Scheduler started with {} job(s): {}", len(self._jobs), self.job_names)

    async def shutdown(self, drain_timeout: float = 10.0) -> None:
        """Signal every job loop to stop and wait up to ``drain_timeout`` seconds."""
        if self._stop_event is None:
            return

        self._stop_event.set()
        tasks = list(self._tasks.values())
        if tasks:
            _, pending = await asyncio.wait(tasks, timeout=drain_timeout)
            if pending:
                logger.warning(
                    "Drain timed out after {}s; cancelling {} job(s)", drain_timeout, len(pending)
                )
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)

        self._tasks.clear()
        self._stop_event = None
        logger.info("Scheduler stopped")

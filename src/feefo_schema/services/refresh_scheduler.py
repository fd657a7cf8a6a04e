# src/feefo_schema/services/refresh_scheduler.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

RefreshAction = Callable[[], Awaitable[Any]]


class SchedulerState(StrEnum):
    UNSCHEDULED = "unscheduled"
    SCHEDULED = "scheduled"


class _Job:
    def __init__(
        self, job_id: str, interval_seconds: float, actions: Sequence[RefreshAction]
    ) -> None:
        self.job_id = job_id
        self.interval_seconds = interval_seconds
        self.actions = tuple(actions)
        # A job never overlaps itself, whether triggered by the timer or manually
        self.lock = asyncio.Lock()
        self.task: asyncio.Task[None] | None = None


class RefreshScheduler:
    """
    Recurring in-process job runner.

    Registration is idempotent per job id: scheduling an id that is already
    registered is a no-op. Each cycle runs all actions of a job concurrently.
    """

    def __init__(self, run_on_start: bool = True) -> None:
        self._run_on_start = run_on_start
        self._jobs: dict[str, _Job] = {}

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.SCHEDULED if self._jobs else SchedulerState.UNSCHEDULED

    @property
    def job_ids(self) -> list[str]:
        return list(self._jobs)

    @property
    def running_job_ids(self) -> list[str]:
        return [job_id for job_id, job in self._jobs.items() if job.lock.locked()]

    def is_scheduled(self, job_id: str) -> bool:
        return job_id in self._jobs

    def schedule(
        self, job_id: str, interval_seconds: float, actions: Sequence[RefreshAction]
    ) -> bool:
        """
        Registers a recurring job. Must be called from within a running event loop.

        Returns False (and changes nothing) if the job id is already scheduled.
        """
        if job_id in self._jobs:
            logger.info("Job '%s' is already scheduled", job_id)
            return False

        job = _Job(job_id, interval_seconds, actions)
        job.task = asyncio.get_running_loop().create_task(self._loop(job), name=job_id)
        self._jobs[job_id] = job
        logger.info("Scheduled job '%s' every %s seconds", job_id, interval_seconds)
        return True

    async def run_job(self, job_id: str) -> bool:
        """
        Runs one cycle of a job now.

        Returns False if the job is already running.

        Raises:
            KeyError: If no job with this id is scheduled.
        """
        return await self._run(self._jobs[job_id])

    async def shutdown(self) -> None:
        jobs = list(self._jobs.values())
        self._jobs.clear()
        for job in jobs:
            if job.task is not None:
                job.task.cancel()
        for job in jobs:
            if job.task is not None:
                try:
                    await job.task
                except asyncio.CancelledError:
                    pass
        logger.info("Scheduler stopped, %d job(s) cancelled", len(jobs))

    async def _loop(self, job: _Job) -> None:
        if self._run_on_start:
            await self._run(job)
        while True:
            await asyncio.sleep(job.interval_seconds)
            await self._run(job)

    async def _run(self, job: _Job) -> bool:
        if job.lock.locked():
            logger.warning("Job '%s' is still running, skipping this trigger", job.job_id)
            return False

        async with job.lock:
            results = await asyncio.gather(
                *(action() for action in job.actions), return_exceptions=True
            )
        for result in results:
            if isinstance(result, Exception):
                logger.error("Action of job '%s' failed", job.job_id, exc_info=result)
        return True

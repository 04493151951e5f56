"""
Periodic job registry.

Jobs register themselves with a decorator at import time; the scheduler
reads the registry when it starts.

Usage:
    @scheduled_job(interval_seconds=300)
    async def purge_something() -> None:
        ...
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, ParamSpec, TypeVar

JobFunc = Callable[[], Awaitable[Any] | Any]


@dataclass(frozen=True)
class ScheduledJob:
    name: str
    func: JobFunc
    interval_seconds: float
    run_on_start: bool = False


# central registry: name -> job
_JOBS: dict[str, ScheduledJob] = {}


P = ParamSpec("P")
R = TypeVar("R")


def register_job(job: ScheduledJob) -> ScheduledJob:
    if job.interval_seconds <= 0:
        raise ValueError(f"Job {job.name!r} needs a positive interval")
    existing = _JOBS.get(job.name)
    if existing is not None and existing.func is not job.func:
        raise ValueError(f"Job {job.name!r} is already registered")
    _JOBS[job.name] = job
    return job


def scheduled_job(
    *, interval_seconds: float, name: str | None = None, run_on_start: bool = False
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Register a sync or async callable to run every ``interval_seconds``.

    Keeps the original function's signature for type checkers.

    Args:
        interval_seconds: Delay between the end of one run and the start of the next
        name: Registry key; defaults to the function's qualified name
        run_on_start: Run once immediately when the scheduler starts
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        register_job(
            ScheduledJob(
                name=name or f"{func.__module__}.{func.__qualname__}",
                func=func,
                interval_seconds=interval_seconds,
                run_on_start=run_on_start,
            )
        )
        setattr(func, "__scheduled_job__", True)  # noqa: B010
        return func

    return decorator


def registered_jobs() -> list[ScheduledJob]:
    return list(_JOBS.values())


def unregister_job(name: str) -> None:
    _JOBS.pop(name, None)

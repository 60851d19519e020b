"""A small worker-thread job system with parent/child job tracking."""
from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable
from typing import Optional

from snakecore.tsqueue import ThreadSafeQueue

JobFunc = Callable[["Job"], None]


class _Counter:
    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def add(self, amount: int) -> None:
        with self._lock:
            self._value += amount

    def load(self) -> int:
        with self._lock:
            return self._value


class Job:
    """A unit of work. A job finishes only after every job it spawned has."""

    def __init__(self, func: Optional[JobFunc] = None, waited_on: bool = False) -> None:
        self.func = func
        self.is_waited_on = waited_on
        self.parent: Optional[Job] = None
        self._unfinished = _Counter(1)

    @property
    def unfinished_jobs(self) -> int:
        return self._unfinished.load()

    @property
    def done(self) -> bool:
        return self._unfinished.load() == 0


class JobSystem:
    """Runs jobs on a pool of worker threads.

    A job started from inside another job becomes its child; the parent is
    not finished until all its children are.
    """

    def __init__(self, num_threads: Optional[int] = None) -> None:
        if num_threads is None:
            num_threads = max((os.cpu_count() or 1) - 1, 0)
        if num_threads < 0:
            raise ValueError(f"num_threads must not be negative: {num_threads}")
        self._queue: ThreadSafeQueue[Job] = ThreadSafeQueue()
        self._running = True
        self._finished = _Counter()
        self._assigned = _Counter()
        self._wake = threading.Condition()
        self._local = threading.local()
        self._threads = [
            threading.Thread(target=self._worker, daemon=True) for _ in range(num_threads)
        ]
        for thread in self._threads:
            thread.start()

    def __enter__(self) -> "JobSystem":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    @staticmethod
    def create_job(func: JobFunc) -> Job:
        return Job(func, waited_on=False)

    @staticmethod
    def create_waited_on_job(func: JobFunc) -> Job:
        """A job that must be completed with wait_on()."""
        return Job(func, waited_on=True)

    def execute(self, job: Job) -> None:
        """Queue a job; it becomes a child of the job running on this thread."""
        if job.func is None:
            raise ValueError("job has no function")
        self._assigned.add(1)
        job.parent = getattr(self._local, "current_job", None)
        if job.parent is not None:
            job.parent._unfinished.add(1)
        self._queue.push_back(job)
        with self._wake:
            self._wake.notify()

    def is_busy(self) -> bool:
        return self._finished.load() < self._assigned.load()

    def wait_all(self) -> None:
        """Help process queued jobs until every assigned job has finished."""
        while self.is_busy():
            if not self._help():
                time.sleep(0)

    def wait_on(self, job: Job) -> None:
        """Block until a waited-on job and all its children have finished."""
        if not job.is_waited_on:
            raise ValueError("wait_on requires a job created with create_waited_on_job")
        while not job.done:
            if not self._help():
                time.sleep(0)
        if job.parent is not None:
            job.parent._unfinished.add(-1)
        self._finished.add(1)

    def thread_ids(self) -> list[int]:
        """Identifier of the calling thread followed by those of the workers."""
        return [threading.get_ident(), *(t.ident for t in self._threads)]

    def shutdown(self) -> None:
        self._running = False
        with self._wake:
            self._wake.notify_all()
        for thread in self._threads:
            thread.join()

    def _help(self) -> bool:
        job = self._queue.pop_front()
        if job is None:
            return False
        self._process(job)
        return True

    def _process(self, job: Job) -> None:
        previous = getattr(self._local, "current_job", None)
        self._local.current_job = job
        try:
            job.func(job)
            while job.unfinished_jobs != 1:
                if not self._help():
                    time.sleep(0)
        finally:
            job._unfinished.add(-1)
            self._local.current_job = previous

        if not job.is_waited_on:
            if job.parent is not None:
                job.parent._unfinished.add(-1)
            self._finished.add(1)

    def _worker(self) -> None:
        while self._running:
            job = self._queue.pop_front()
            if job is not None:
                self._process(job)
                continue
            with self._wake:
                self._wake.wait_for(
                    lambda: not self._running or not self._queue.empty(), timeout=0.05
                )
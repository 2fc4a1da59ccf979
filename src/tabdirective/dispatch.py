"""Marshal work from notification threads onto a document's owning thread.

Filesystem watch callbacks arrive on the watcher's thread. They never
touch settings directly; they post a callback into the session's
single-consumer queue and the owning thread runs it.
"""

from __future__ import annotations

import asyncio
import logging
import queue
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

type Task = Callable[[], None]


class TaskQueue(Protocol):
    """Thread-safe inbox whose tasks run on one consumer thread."""

    def post(self, task: Task) -> None: ...


class AsyncioTaskQueue:
    """Runs posted tasks on an asyncio event loop's thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def post(self, task: Task) -> None:
        if self._loop.is_closed():
            logger.debug("event=task_dropped reason=loop_closed")
            return
        self._loop.call_soon_threadsafe(task)


class SerialTaskQueue:
    """Inbox drained explicitly by the owning thread.

    Hosts without an event loop call :meth:`drain` from their UI or
    main loop; tests call it to step the session deterministically.
    """

    def __init__(self) -> None:
        self._inbox: queue.SimpleQueue[Task] = queue.SimpleQueue()

    def post(self, task: Task) -> None:
        self._inbox.put(task)

    def drain(self, timeout: float | None = None) -> int:
        """Run queued tasks in order; return how many ran.

        With *timeout*, block up to that long for the first task.
        """
        ran = 0
        if timeout is not None:
            try:
                task = self._inbox.get(timeout=timeout)
            except queue.Empty:
                return 0
            self._run(task)
            ran += 1
        while True:
            try:
                task = self._inbox.get_nowait()
            except queue.Empty:
                return ran
            self._run(task)
            ran += 1

    @property
    def pending(self) -> int:
        return self._inbox.qsize()

    @staticmethod
    def _run(task: Task) -> None:
        try:
            task()
        except Exception:
            logger.exception("event=task_failed")

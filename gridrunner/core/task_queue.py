"""Bounded-concurrency work queue backed by worker threads."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import Any

from gridrunner.utils import call_once

logger = logging.getLogger(__name__)

Worker = Callable[[Any, Callable[..., None]], None]
ItemCallback = Callable[[BaseException | None], None]


class TaskQueue:
    """Run a worker over pushed items with at most ``concurrency`` in flight.

    The worker receives each item together with a ``done(error=None)``
    completion callback. It may call ``done`` before returning or later from
    another thread; the slot stays occupied until it does. An exception raised
    by the worker is treated as ``done(exc)``.

    Per-item errors reach only the callback given to :meth:`push`. The drain
    callback takes no arguments.

    Parameters
    ----------
    worker : Worker
        Callable invoked as ``worker(item, done)``
    concurrency : int
        Maximum number of simultaneous worker invocations
    on_drain : Callable[[], None] | None
        Invoked each time the queue runs out of pending and active items
    name : str
        Prefix for worker thread names

    Raises
    ------
    ValueError
        If concurrency is lower than 1
    """

    def __init__(
        self,
        worker: Worker,
        concurrency: int,
        on_drain: Callable[[], None] | None = None,
        name: str = "tasks",
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")

        self._worker = worker
        self.concurrency = concurrency
        self.on_drain = on_drain
        self.name = name
        self._pending: deque[tuple[Any, ItemCallback | None]] = deque()
        self._running = 0
        self._thread_count = 0
        self._lock = threading.Lock()
        self._idle = threading.Event()
        self._idle.set()

    @property
    def running(self) -> int:
        """Number of worker threads currently processing items."""
        with self._lock:
            return self._running

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def idle(self) -> bool:
        """Return True when nothing is pending or running."""
        return self._idle.is_set()

    def push(self, item: Any, callback: ItemCallback | None = None) -> None:
        """Enqueue an item, starting a worker thread if a slot is free.

        Parameters
        ----------
        item : Any
            Item passed to the worker
        callback : ItemCallback | None
            Invoked with the item's error (or None) once it completes
        """
        with self._lock:
            self._pending.append((item, callback))
            self._idle.clear()

            if self._running >= self.concurrency:
                return

            self._running += 1
            self._thread_count += 1
            thread = threading.Thread(
                target=self._work,
                name=f"{self.name}-{self._thread_count}",
                daemon=True,
            )

        thread.start()

    def join(self, timeout: float | None = None) -> bool:
        """Block until the queue drains.

        Parameters
        ----------
        timeout : float | None
            Maximum seconds to wait, or None to wait indefinitely

        Returns
        -------
        bool
            True if the queue drained, False on timeout
        """
        return self._idle.wait(timeout)

    def _work(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._running -= 1
                    drained = self._running == 0
                    break
                item, callback = self._pending.popleft()

            error = self._process(item)

            if callback is not None:
                try:
                    callback(error)
                except Exception:
                    logger.exception("Item callback failed in %s queue", self.name)

        if drained:
            if self.on_drain is not None:
                try:
                    self.on_drain()
                except Exception:
                    logger.exception("Drain callback failed in %s queue", self.name)

            with self._lock:
                if self._running == 0 and not self._pending:
                    self._idle.set()

    def _process(self, item: Any) -> BaseException | None:
        finished = threading.Event()
        outcome: dict[str, BaseException | None] = {"error": None}

        def complete(error: BaseException | None = None) -> None:
            outcome["error"] = error
            finished.set()

        done = call_once(complete, f"{self.name} item {item!r}")

        try:
            self._worker(item, done)
        except Exception as e:
            logger.debug("Worker raised for %r in %s queue: %s", item, self.name, e)
            done(e)

        finished.wait()
        return outcome["error"]

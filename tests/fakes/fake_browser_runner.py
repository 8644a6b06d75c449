"""Fake browser runner for testing grid scheduling and aggregation."""

import threading
import time
from collections.abc import Callable
from typing import Any

from gridrunner.core.events import EventEmitter, Phase


class FakeBrowserRunner(EventEmitter):
    """Browser runner stand-in with a scripted outcome.

    Parameters
    ----------
    name : str
        Browser name used as ``browserName`` of its descriptor
    error : BaseException | None
        Error passed to ``done``
    raise_error : bool
        Raise the error from ``run`` instead of passing it to ``done``
    wait_until : Callable[[], bool] | None
        Predicate polled before completing, used to force completion order
    """

    event_type = Phase

    def __init__(
        self,
        name: str,
        error: BaseException | None = None,
        raise_error: bool = False,
        wait_until: Callable[[], bool] | None = None,
    ) -> None:
        super().__init__()
        self.name = name
        self.browser_config = {"browserName": name}
        self.error = error
        self.raise_error = raise_error
        self.wait_until = wait_until
        self.run_count = 0
        self.finished = threading.Event()

    def run(self, done: Any) -> None:
        self.run_count += 1
        self.emit(Phase.BEFORE, self, self.browser_config)

        if self.wait_until is not None:
            while not self.wait_until():
                time.sleep(0.005)

        self.finished.set()

        if self.raise_error:
            raise self.error

        self.emit(Phase.AFTER, self.error, self, self.browser_config)
        done(self.error)

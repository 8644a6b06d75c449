"""Runner executing the shared scenario set on one browser target."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any

from gridrunner.core.events import EventEmitter, Phase
from gridrunner.core.scenario import ScenarioRunner
from gridrunner.core.task_queue import TaskQueue
from gridrunner.errors import BrowserError
from gridrunner.utils import describe_browser, replace_with_observer_error

logger = logging.getLogger(__name__)


class BrowserRunner(EventEmitter):
    """Run every scenario on one browser with bounded concurrency.

    Parameters
    ----------
    browser_config : dict[str, Any]
        Capability descriptor of the browser
    scenarios : Sequence[ScenarioRunner]
        Scenario runners shared with the other browsers of the grid
    concurrency : int
        Maximum number of scenarios running at once on this browser
    """

    event_type = Phase

    def __init__(
        self,
        browser_config: dict[str, Any],
        scenarios: Sequence[ScenarioRunner],
        concurrency: int,
    ) -> None:
        super().__init__()
        self.browser_config = browser_config
        self.scenarios = scenarios
        self.concurrency = concurrency

    @property
    def name(self) -> str:
        return describe_browser(self.browser_config)

    def __repr__(self) -> str:
        return f"BrowserRunner({self.name!r})"

    def run(self, done: Callable[[BaseException | None], None]) -> None:
        """Run all scenarios and report the browser outcome through ``done``.

        Emits ``Phase.BEFORE`` with ``(self, browser_config)`` first and
        ``Phase.AFTER`` with ``(error, self, browser_config)`` after the last
        scenario finished. Scenario failures do not stop the others.

        Once ``Phase.BEFORE`` has been emitted, ``Phase.AFTER`` and ``done``
        always follow. A scheduling failure becomes the browser error, and an
        exception raised by an after observer replaces it.

        Parameters
        ----------
        done : Callable[[BaseException | None], None]
            Completion callback receiving a ``BrowserError`` when at least one
            scenario failed, otherwise None
        """
        self.emit(Phase.BEFORE, self, self.browser_config)

        errors: list[BaseException] = []
        errors_lock = threading.Lock()

        def record(error: BaseException | None) -> None:
            if error is not None:
                with errors_lock:
                    errors.append(error)

        error: BaseException | None = None

        try:
            self._run_scenarios(record)
        except Exception as e:
            logger.error("Scheduling scenarios on %s failed: %s", self.name, e)
            error = e

        if error is None and errors:
            with errors_lock:
                error = BrowserError(
                    f"{len(errors)} of {len(self.scenarios)} scenarios failed on {self.name}",
                    list(errors),
                    self.browser_config,
                )

        try:
            self.emit(Phase.AFTER, error, self, self.browser_config)
        except Exception as e:
            error = replace_with_observer_error(e, error, f"browser {self.name}")
        finally:
            done(error)

    def _run_scenarios(self, record: Callable[[BaseException | None], None]) -> None:
        if not self.scenarios:
            return

        logger.debug(
            "Running %s scenarios on %s (concurrency %s)",
            len(self.scenarios),
            self.name,
            self.concurrency,
        )
        queue = TaskQueue(
            self._run_scenario, self.concurrency, name=f"browser-{self.name}"
        )
        for scenario in self.scenarios:
            queue.push(scenario, record)
        queue.join()

    def _run_scenario(
        self, scenario: ScenarioRunner, done: Callable[..., None]
    ) -> None:
        scenario.run(self.browser_config, done)

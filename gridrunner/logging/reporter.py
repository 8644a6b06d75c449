"""Grid observer that reports lifecycle events through logging."""

from __future__ import annotations

import logging
import threading
from typing import Any

from gridrunner.core.events import GridEvent
from gridrunner.core.grid import GridRunner
from gridrunner.errors import GridError
from gridrunner.utils import describe_browser

logger = logging.getLogger(__name__)


class LoggingReporter:
    """Log grid progress and keep pass/fail counters.

    Listeners may be invoked from several browser threads at once; counter
    updates are serialized with a lock.

    Parameters
    ----------
    log : logging.Logger | None
        Logger to write to; defaults to this module's logger

    Attributes
    ----------
    browsers_passed : int
        Browsers whose scenarios all passed
    browsers_failed : int
        Browsers reporting an error
    scenarios_passed : int
        Scenario executions that passed, across all browsers
    scenarios_failed : int
        Scenario executions that failed, across all browsers
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger
        self.browsers_passed = 0
        self.browsers_failed = 0
        self.scenarios_passed = 0
        self.scenarios_failed = 0
        self._lock = threading.Lock()
        self._unsubscribers: list[Any] = []

    def attach(self, grid: GridRunner) -> None:
        """Subscribe to every lifecycle event of a grid."""
        handlers = {
            GridEvent.BEFORE: self.on_before,
            GridEvent.AFTER: self.on_after,
            GridEvent.BROWSER_BEFORE: self.on_browser_before,
            GridEvent.BROWSER_AFTER: self.on_browser_after,
            GridEvent.SCENARIO_BEFORE: self.on_scenario_before,
            GridEvent.SCENARIO_AFTER: self.on_scenario_after,
        }
        for event, handler in handlers.items():
            self._unsubscribers.append(grid.on(event, handler))

    def detach(self) -> None:
        """Remove every subscription made by :meth:`attach`."""
        while self._unsubscribers:
            self._unsubscribers.pop()()

    def on_before(self, grid: GridRunner) -> None:
        """Log the size of the scenario matrix when a run starts.

        Parameters
        ----------
        grid : GridRunner
            Grid about to schedule its browsers
        """
        self.log.info(
            "Running %s scenarios on %s browsers",
            len(grid.scenarios),
            len(grid.browsers),
        )

    def on_browser_before(self, browser_runner: Any, browser_config: dict[str, Any]) -> None:
        """Log that a browser started, at debug level."""
        self.log.debug("Browser started", extra={"browser": describe_browser(browser_config)})

    def on_browser_after(
        self, error: BaseException | None, browser_runner: Any, browser_config: dict[str, Any]
    ) -> None:
        """Count and log the outcome of one browser.

        Parameters
        ----------
        error : BaseException | None
            Browser error, usually a ``BrowserError``, or None when it passed
        browser_runner : Any
            Runner that finished
        browser_config : dict[str, Any]
            Capability descriptor used for the ``[browser]`` log prefix
        """
        label = describe_browser(browser_config)

        with self._lock:
            if error is None:
                self.browsers_passed += 1
            else:
                self.browsers_failed += 1

        if error is None:
            self.log.info("Browser passed", extra={"browser": label})
        else:
            self.log.error("Browser failed: %s", error, extra={"browser": label})

    def on_scenario_before(self, scenario_runner: Any, browser_config: dict[str, Any]) -> None:
        """Log that a scenario started on a browser, at debug level."""
        self.log.debug(
            "Scenario %s started",
            scenario_runner.name,
            extra={"browser": describe_browser(browser_config)},
        )

    def on_scenario_after(
        self, error: BaseException | None, scenario_runner: Any, browser_config: dict[str, Any]
    ) -> None:
        """Count and log the outcome of one scenario on one browser.

        Parameters
        ----------
        error : BaseException | None
            Scenario error, or None when it passed
        scenario_runner : Any
            Runner of the finished scenario
        browser_config : dict[str, Any]
            Capability descriptor used for the ``[browser]`` log prefix
        """
        label = describe_browser(browser_config)

        with self._lock:
            if error is None:
                self.scenarios_passed += 1
            else:
                self.scenarios_failed += 1

        if error is None:
            self.log.info("Scenario %s passed", scenario_runner.name, extra={"browser": label})
        else:
            self.log.error(
                "Scenario %s failed: %s", scenario_runner.name, error, extra={"browser": label}
            )

    def on_after(self, error: BaseException | None, grid: GridRunner) -> None:
        """Log the run summary.

        Parameters
        ----------
        error : BaseException | None
            Final grid error; a ``GridError`` for browser failures, any other
            exception when the run aborted, or None on success
        grid : GridRunner
            Grid that finished
        """
        total = len(grid.browsers)

        if error is None:
            self.log.info(
                "Grid passed: %s/%s browsers, %s scenario runs",
                self.browsers_passed,
                total,
                self.scenarios_passed,
            )
        elif isinstance(error, GridError):
            self.log.error(
                "Grid failed: %s of %s browsers failed, %s of %s scenario runs failed",
                len(error.errors),
                total,
                self.scenarios_failed,
                self.scenarios_passed + self.scenarios_failed,
            )
        else:
            self.log.error("Grid aborted: %s", error)

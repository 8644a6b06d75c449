from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from gridrunner.constants import GRID_ERROR_MESSAGE
from gridrunner.core.browser import BrowserRunner
from gridrunner.core.config import GridConfig
from gridrunner.core.events import EventEmitter, GridEvent, Phase
from gridrunner.core.scenario import ScenarioRunner
from gridrunner.core.task_queue import TaskQueue
from gridrunner.errors import GridAlreadyRunError, GridError
from gridrunner.utils import replace_with_observer_error

logger = logging.getLogger(__name__)


class GridRunner(EventEmitter):
    """Orchestrates a scenario matrix across every configured browser.

    Scenario runners are built once and shared by all browser runners. All
    browsers run simultaneously; concurrency is bounded only within each
    browser. Browser failures are collected without stopping the other
    browsers and reported together as a ``GridError``.

    Scenario and browser signals are re-emitted on the grid under
    ``GridEvent.SCENARIO_*`` and ``GridEvent.BROWSER_*`` with their original
    argument lists, so observers subscribe in one place.

    A GridRunner is single-use: a second call to :meth:`run` reports
    ``GridAlreadyRunError`` and does nothing else.

    Parameters
    ----------
    config : GridConfig | Mapping[str, Any] | None
        Grid settings; mappings are validated through ``GridConfig.from_mapping``
    scenarios : Sequence[Any]
        Ordered scenario definitions shared by every browser

    Raises
    ------
    TypeError
        If scenarios is not an ordered sequence
    ConfigurationError
        If the configuration mapping is invalid
    """

    event_type = GridEvent

    def __init__(
        self,
        config: GridConfig | Mapping[str, Any] | None,
        scenarios: Sequence[Any],
    ) -> None:
        super().__init__()

        if isinstance(config, GridConfig):
            self.config = config
        else:
            self.config = GridConfig.from_mapping(config)

        self.errors: list[BaseException] = []
        self._errors_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._started = False

        self.scenarios = self._init_scenarios(scenarios)
        self.browsers = self._init_browsers()

    def _init_scenarios(self, scenarios: Sequence[Any]) -> list[ScenarioRunner]:
        if isinstance(scenarios, (str, bytes)) or not isinstance(scenarios, Sequence):
            raise TypeError(
                f"scenarios must be an ordered sequence, got {type(scenarios).__name__}"
            )

        return [self._create_scenario_runner(scenario) for scenario in scenarios]

    def _create_scenario_runner(self, scenario: Any) -> ScenarioRunner:
        runner = ScenarioRunner(scenario, self.config.remote)
        runner.on(Phase.BEFORE, self.before_scenario)
        runner.on(Phase.AFTER, self.after_scenario)
        return runner

    def _init_browsers(self) -> list[BrowserRunner]:
        return [
            self._create_browser_runner(browser_config)
            for browser_config in self.config.browsers
        ]

    def _create_browser_runner(self, browser_config: dict[str, Any]) -> BrowserRunner:
        runner = BrowserRunner(browser_config, self.scenarios, self.config.concurrency)
        runner.on(Phase.BEFORE, self.before_browser)
        runner.on(Phase.AFTER, self.after_browser)
        return runner

    def before_scenario(self, *args: Any) -> None:
        """Relay a scenario runner's before signal as ``scenario.before``."""
        self.emit(GridEvent.for_scenario(Phase.BEFORE), *args)

    def after_scenario(self, *args: Any) -> None:
        """Relay a scenario runner's after signal as ``scenario.after``."""
        self.emit(GridEvent.for_scenario(Phase.AFTER), *args)

    def before_browser(self, *args: Any) -> None:
        """Relay a browser runner's before signal as ``browser.before``."""
        self.emit(GridEvent.for_browser(Phase.BEFORE), *args)

    def after_browser(self, *args: Any) -> None:
        """Relay a browser runner's after signal as ``browser.after``."""
        self.emit(GridEvent.for_browser(Phase.AFTER), *args)

    def run(self, callback: Callable[[BaseException | None], None]) -> None:
        """Run every browser and report the outcome once through ``callback``.

        Blocks until all browsers have completed. The callback receives None
        on success, a ``GridError`` wrapping the per-browser errors when any
        browser failed, or the exception raised by a ``before`` or ``after``
        observer.

        Parameters
        ----------
        callback : Callable[[BaseException | None], None]
            Terminal callback, invoked exactly once
        """
        with self._run_lock:
            already_started = self._started
            self._started = True

        if already_started:
            logger.warning("GridRunner.run called more than once; ignoring")
            callback(
                GridAlreadyRunError(
                    "GridRunner is single-use; create a new runner for another run"
                )
            )
            return

        error: BaseException | None = None

        try:
            self._preprocess()
            self._do_run()
        except Exception as e:
            logger.error("Grid run aborted: %s", e)
            error = e

        self._postprocess(callback, error)

    def _preprocess(self) -> None:
        self.emit(GridEvent.BEFORE, self)

    def _do_run(self) -> None:
        if not self.browsers:
            logger.debug("No browsers configured, skipping scheduling")
            return

        logger.debug(
            "Starting %s browsers with %s scenarios each",
            len(self.browsers),
            len(self.scenarios),
        )

        queue = TaskQueue(self._run_browser, len(self.browsers), name="grid")

        for browser in self.browsers:
            queue.push(browser, self._record_error)

        queue.join()

    def _run_browser(
        self, browser: BrowserRunner, done: Callable[..., None]
    ) -> None:
        try:
            browser.run(done)
        except Exception as e:
            logger.debug("Browser %s raised: %s", browser.name, e)
            done(e)

    def _record_error(self, error: BaseException | None) -> None:
        if error is None:
            return

        with self._errors_lock:
            self.errors.append(error)

    def _postprocess(
        self,
        callback: Callable[[BaseException | None], None],
        error: BaseException | None,
    ) -> None:
        # the drain does not carry per-browser errors; they live in self.errors
        if error is None and self.errors:
            with self._errors_lock:
                error = GridError(GRID_ERROR_MESSAGE, list(self.errors))

        try:
            self.emit(GridEvent.AFTER, error, self)
        except Exception as e:
            error = replace_with_observer_error(e, error, "grid")

        callback(error)

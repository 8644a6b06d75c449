"""Runner binding one scenario definition to the remote session settings."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from gridrunner.core.events import EventEmitter, Phase
from gridrunner.utils import (
    call_once,
    describe_browser,
    describe_scenario,
    replace_with_observer_error,
)

logger = logging.getLogger(__name__)


class ScenarioRunner(EventEmitter):
    """Run a single scenario definition against a browser.

    One instance is shared by every browser of a grid and keeps no per-run
    state, so it may run concurrently for different browsers.

    Parameters
    ----------
    scenario : Any
        Scenario definition exposing ``run(remote, desired, done)``
    remote_config : dict[str, Any]
        Remote session settings forwarded unchanged to the scenario
    """

    event_type = Phase

    def __init__(self, scenario: Any, remote_config: dict[str, Any]) -> None:
        super().__init__()
        self.scenario = scenario
        self.remote_config = remote_config

    @property
    def name(self) -> str:
        return describe_scenario(self.scenario)

    def __repr__(self) -> str:
        return f"ScenarioRunner({self.name!r})"

    def run(
        self,
        browser_config: dict[str, Any],
        done: Callable[[BaseException | None], None],
    ) -> None:
        """Run the scenario and report completion through ``done``.

        Emits ``Phase.BEFORE`` with ``(self, browser_config)`` and, once the
        scenario finishes, ``Phase.AFTER`` with
        ``(error, self, browser_config)`` before calling ``done(error)``.
        ``done`` is always called; an exception raised by an after observer
        is reported as the scenario error.

        Parameters
        ----------
        browser_config : dict[str, Any]
            Capability descriptor of the target browser
        done : Callable[[BaseException | None], None]
            Completion callback receiving the scenario error, if any
        """
        self.emit(Phase.BEFORE, self, browser_config)

        def finish(error: BaseException | None = None) -> None:
            if error is not None:
                logger.debug(
                    "Scenario %s failed on %s: %s",
                    self.name,
                    describe_browser(browser_config),
                    error,
                )
            try:
                self.emit(Phase.AFTER, error, self, browser_config)
            except Exception as e:
                error = replace_with_observer_error(e, error, f"scenario {self.name}")
            finally:
                done(error)

        callback = call_once(finish, f"scenario {self.name}")

        try:
            self.scenario.run(self.remote_config, browser_config, callback)
        except Exception as e:
            callback(e)

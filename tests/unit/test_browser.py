"""Unit tests for BrowserRunner."""

from typing import Any

import pytest

from gridrunner.core.browser import BrowserRunner
from gridrunner.core.events import Phase
from gridrunner.core.scenario import ScenarioRunner
from gridrunner.errors import BrowserError
from tests.fakes import ConcurrencyProbe, FakeScenario

FIREFOX = {"browserName": "firefox", "version": "115", "platform": "linux"}


def scenario_runners(*scenarios: FakeScenario) -> list[ScenarioRunner]:
    return [ScenarioRunner(scenario, {}) for scenario in scenarios]


def run_browser(runner: BrowserRunner) -> list[BaseException | None]:
    results: list[BaseException | None] = []
    runner.run(results.append)
    return results


class TestBrowserRunnerConcurrency:
    """Validate scenario scheduling within one browser."""

    def test_concurrency_bound_per_browser(self) -> None:
        """Test no more than two of five scenarios run simultaneously."""
        probe = ConcurrencyProbe()
        scenarios = [FakeScenario(f"s{i}", delay=0.05, probe=probe) for i in range(5)]
        runner = BrowserRunner(FIREFOX, scenario_runners(*scenarios), 2)

        results = run_browser(runner)

        assert results == [None]
        assert probe.max_active <= 2
        assert all(s.call_count == 1 for s in scenarios)

    def test_scenarios_receive_browser_descriptor(self) -> None:
        """Test each scenario runs against this browser's descriptor."""
        scenario = FakeScenario("login")
        runner = BrowserRunner(FIREFOX, scenario_runners(scenario), 2)

        run_browser(runner)

        assert scenario.calls == [({}, FIREFOX)]


class TestBrowserRunnerOutcome:
    """Validate lifecycle signals and error aggregation."""

    def test_scenario_failures_become_browser_error(self) -> None:
        """Test failing scenarios are wrapped without stopping the others."""
        first = RuntimeError("first")
        second = RuntimeError("second")
        scenarios = [
            FakeScenario("a", error=first),
            FakeScenario("b"),
            FakeScenario("c", error=second, raise_error=True),
        ]
        runner = BrowserRunner(FIREFOX, scenario_runners(*scenarios), 1)
        after: list[tuple] = []
        runner.on(Phase.AFTER, lambda *args: after.append(args))

        results = run_browser(runner)

        assert len(results) == 1
        error = results[0]
        assert isinstance(error, BrowserError)
        assert error.errors == [first, second]
        assert error.browser_config == FIREFOX
        assert "2 of 3" in str(error)
        assert after == [(error, runner, FIREFOX)]
        assert all(s.call_count == 1 for s in scenarios)

    def test_before_and_after_wrap_scenario_events(self) -> None:
        """Test browser signals nest around its scenarios' signals."""
        runners = scenario_runners(FakeScenario("a"), FakeScenario("b"))
        browser = BrowserRunner(FIREFOX, runners, 2)
        order: list[str] = []
        browser.on(Phase.BEFORE, lambda *args: order.append("browser.before"))
        browser.on(Phase.AFTER, lambda *args: order.append("browser.after"))
        for scenario in runners:
            scenario.on(Phase.BEFORE, lambda *args: order.append("scenario.before"))
            scenario.on(Phase.AFTER, lambda *args: order.append("scenario.after"))

        run_browser(browser)

        assert order[0] == "browser.before"
        assert order[-1] == "browser.after"
        assert order.count("scenario.before") == 2
        assert order.count("scenario.after") == 2

    def test_no_scenarios_completes_cleanly(self) -> None:
        """Test a browser with no scenarios still reports before/after."""
        runner = BrowserRunner(FIREFOX, [], 2)
        signals: list[Phase] = []
        runner.on(Phase.BEFORE, lambda *args: signals.append(Phase.BEFORE))
        runner.on(Phase.AFTER, lambda *args: signals.append(Phase.AFTER))

        assert run_browser(runner) == [None]
        assert signals == [Phase.BEFORE, Phase.AFTER]

    def test_before_observer_failure_propagates(self) -> None:
        """Test an exception from a before listener escapes run()."""
        scenario = FakeScenario("a")
        runner = BrowserRunner(FIREFOX, scenario_runners(scenario), 2)

        def fail(*args: Any) -> None:
            raise RuntimeError("observer")

        runner.on(Phase.BEFORE, fail)

        with pytest.raises(RuntimeError, match="observer"):
            runner.run(lambda error: None)

        assert scenario.call_count == 0

    def test_name_describes_browser(self) -> None:
        """Test the display name includes version and platform."""
        runner = BrowserRunner(FIREFOX, [], 2)

        assert runner.name == "firefox 115 (linux)"


class TestBrowserRunnerObservers:
    """Validate completion when an after observer raises."""

    def test_after_observer_error_chains_browser_error(self) -> None:
        """Test done receives the observer error with the BrowserError as context."""
        failure = RuntimeError("element missing")
        runner = BrowserRunner(FIREFOX, scenario_runners(FakeScenario("a", error=failure)), 2)
        observer_error = ValueError("report write failed")

        def fail(*args: Any) -> None:
            raise observer_error

        runner.on(Phase.AFTER, fail)

        results = run_browser(runner)

        assert results == [observer_error]
        assert isinstance(observer_error.__context__, BrowserError)
        assert observer_error.__context__.errors == [failure]

    def test_after_observer_error_fails_passing_browser(self) -> None:
        """Test an observer exception is reported even when every scenario passed."""
        runner = BrowserRunner(FIREFOX, scenario_runners(FakeScenario("a")), 2)
        observer_error = ValueError("report write failed")

        def fail(*args: Any) -> None:
            raise observer_error

        runner.on(Phase.AFTER, fail)

        assert run_browser(runner) == [observer_error]
        assert observer_error.__context__ is None

    def test_scheduling_failure_still_emits_after(self) -> None:
        """Test a scheduler failure is reported through after and done."""
        scenario = FakeScenario("a")
        runner = BrowserRunner(FIREFOX, scenario_runners(scenario), 0)
        after: list[tuple] = []
        runner.on(Phase.AFTER, lambda *args: after.append(args))

        results = run_browser(runner)

        assert len(results) == 1
        assert isinstance(results[0], ValueError)
        assert after == [(results[0], runner, FIREFOX)]
        assert scenario.call_count == 0

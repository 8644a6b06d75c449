"""Test fake implementations for dependency injection testing."""

from tests.fakes.fake_browser_runner import FakeBrowserRunner
from tests.fakes.fake_scenario import ConcurrencyProbe, FakeScenario

__all__ = ["ConcurrencyProbe", "FakeBrowserRunner", "FakeScenario"]

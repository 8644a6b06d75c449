"""Run a matrix of test scenarios against a set of browsers."""

from __future__ import annotations

from gridrunner.core import (
    BrowserRunner,
    ConfigLoader,
    EventEmitter,
    GridConfig,
    GridEvent,
    GridRunner,
    Phase,
    ScenarioRunner,
    TaskQueue,
)
from gridrunner.errors import (
    BrowserError,
    ConfigurationError,
    GridAlreadyRunError,
    GridError,
    GridRunnerError,
    ScenarioLoadError,
)
from gridrunner.testcase import TestCase

__version__ = "0.1.0"

__all__ = [
    "BrowserError",
    "BrowserRunner",
    "ConfigLoader",
    "ConfigurationError",
    "EventEmitter",
    "GridAlreadyRunError",
    "GridConfig",
    "GridError",
    "GridEvent",
    "GridRunner",
    "GridRunnerError",
    "Phase",
    "ScenarioLoadError",
    "ScenarioRunner",
    "TaskQueue",
    "TestCase",
]

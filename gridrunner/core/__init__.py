"""Core gridrunner functionality."""

from __future__ import annotations

from gridrunner.core.browser import BrowserRunner
from gridrunner.core.config import ConfigLoader, GridConfig
from gridrunner.core.events import EventEmitter, GridEvent, Phase
from gridrunner.core.grid import GridRunner
from gridrunner.core.scenario import ScenarioRunner
from gridrunner.core.task_queue import TaskQueue

__all__ = [
    "BrowserRunner",
    "ConfigLoader",
    "EventEmitter",
    "GridConfig",
    "GridEvent",
    "GridRunner",
    "Phase",
    "ScenarioRunner",
    "TaskQueue",
]

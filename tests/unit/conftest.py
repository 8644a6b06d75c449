"""Fixtures for gridrunner unit tests."""

from collections import defaultdict
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from gridrunner.core.events import GridEvent, Phase
from gridrunner.core.grid import GridRunner
from tests.fakes import FakeBrowserRunner


class EventRecorder:
    """Record every grid event with its argument list, in emission order."""

    def __init__(self) -> None:
        self.events: list[tuple[GridEvent, tuple[Any, ...]]] = []
        self.by_type: dict[GridEvent, list[tuple[Any, ...]]] = defaultdict(list)

    def attach(self, grid: GridRunner) -> "EventRecorder":
        for event in GridEvent:
            grid.on(event, self._recorder(event))
        return self

    def _recorder(self, event: GridEvent) -> Callable[..., None]:
        def record(*args: Any) -> None:
            self.events.append((event, args))
            self.by_type[event].append(args)

        return record

    def count(self, event: GridEvent) -> int:
        return len(self.by_type[event])


class CallbackRecorder:
    """Terminal callback capturing every invocation."""

    def __init__(self) -> None:
        self.calls: list[BaseException | None] = []

    def __call__(self, error: BaseException | None) -> None:
        self.calls.append(error)

    @property
    def error(self) -> BaseException | None:
        assert len(self.calls) == 1, f"callback invoked {len(self.calls)} times"
        return self.calls[0]


@pytest.fixture
def recorder() -> EventRecorder:
    """Create an event recorder.

    Returns
    -------
    EventRecorder
        Recorder to attach to a grid
    """
    return EventRecorder()


@pytest.fixture
def callback() -> CallbackRecorder:
    """Create a terminal callback recorder.

    Returns
    -------
    CallbackRecorder
        Callable recording the errors it receives
    """
    return CallbackRecorder()


@pytest.fixture
def use_fake_browsers() -> Callable[[GridRunner, list[FakeBrowserRunner]], None]:
    """Replace a grid's browser runners with fakes wired to its relays.

    Returns
    -------
    Callable[[GridRunner, list[FakeBrowserRunner]], None]
        Function installing the fakes on a grid
    """

    def install(grid: GridRunner, fakes: list[FakeBrowserRunner]) -> None:
        for fake in fakes:
            fake.on(Phase.BEFORE, grid.before_browser)
            fake.on(Phase.AFTER, grid.after_browser)
        grid.browsers = list(fakes)

    return install


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write YAML text to a temporary gridrunner.yaml.

    Returns
    -------
    Callable[[str], Path]
        Function writing the config and returning its path
    """

    def write(content: str) -> Path:
        path = tmp_path / "gridrunner.yaml"
        path.write_text(content)
        return path

    return write

"""Lifecycle events and the synchronous emitter shared by every runner tier."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Lifecycle signal emitted by scenario and browser runners."""

    BEFORE = "before"
    AFTER = "after"


class GridEvent(Enum):
    """Events observable on a grid runner.

    Attributes
    ----------
    BEFORE
        ``(grid)``, fired before any browser starts
    AFTER
        ``(error, grid)``, fired after every browser has completed
    BROWSER_BEFORE
        ``(browser_runner, browser_config)``
    BROWSER_AFTER
        ``(error, browser_runner, browser_config)``
    SCENARIO_BEFORE
        ``(scenario_runner, browser_config)``
    SCENARIO_AFTER
        ``(error, scenario_runner, browser_config)``
    """

    BEFORE = "before"
    AFTER = "after"
    BROWSER_BEFORE = "browser.before"
    BROWSER_AFTER = "browser.after"
    SCENARIO_BEFORE = "scenario.before"
    SCENARIO_AFTER = "scenario.after"

    @classmethod
    def for_browser(cls, phase: Phase) -> GridEvent:
        """Map a browser runner phase to its grid-level event."""
        return _BROWSER_EVENTS[phase]

    @classmethod
    def for_scenario(cls, phase: Phase) -> GridEvent:
        """Map a scenario runner phase to its grid-level event."""
        return _SCENARIO_EVENTS[phase]


_BROWSER_EVENTS = {
    Phase.BEFORE: GridEvent.BROWSER_BEFORE,
    Phase.AFTER: GridEvent.BROWSER_AFTER,
}

_SCENARIO_EVENTS = {
    Phase.BEFORE: GridEvent.SCENARIO_BEFORE,
    Phase.AFTER: GridEvent.SCENARIO_AFTER,
}


Listener = Callable[..., Any]


class EventEmitter:
    """Synchronous event emitter over a closed set of event kinds.

    Listeners run on the emitting thread, in registration order. An exception
    raised by a listener propagates out of :meth:`emit` and the remaining
    listeners are not invoked.

    Subclasses set ``event_type`` to the enum their events belong to.
    """

    event_type: type[Enum] = Phase

    def __init__(self) -> None:
        self._listeners: dict[Enum, list[Listener]] = {}
        self._listeners_lock = threading.RLock()

    def _check_event(self, event: Enum) -> None:
        if not isinstance(event, self.event_type):
            raise ValueError(
                f"{type(self).__name__} does not emit {event!r}; "
                f"expected a {self.event_type.__name__} member"
            )

    def on(self, event: Enum, listener: Listener) -> Callable[[], None]:
        """Register a listener for an event.

        Parameters
        ----------
        event : Enum
            Event kind, a member of ``event_type``
        listener : Listener
            Callable invoked with the event's argument list

        Returns
        -------
        Callable[[], None]
            Unsubscribe callable

        Raises
        ------
        ValueError
            If the event does not belong to this emitter's event type
        """
        self._check_event(event)

        with self._listeners_lock:
            self._listeners.setdefault(event, []).append(listener)

        def unsubscribe() -> None:
            self.off(event, listener)

        return unsubscribe

    def off(self, event: Enum, listener: Listener) -> None:
        """Remove the first registration of a listener, if present."""
        with self._listeners_lock:
            registered = self._listeners.get(event, [])
            if listener in registered:
                registered.remove(listener)

    def listeners(self, event: Enum) -> list[Listener]:
        """Return a snapshot of the listeners registered for an event."""
        self._check_event(event)

        with self._listeners_lock:
            return list(self._listeners.get(event, []))

    def emit(self, event: Enum, *args: Any) -> bool:
        """Invoke every listener registered for an event.

        Parameters
        ----------
        event : Enum
            Event kind, a member of ``event_type``
        *args : Any
            Argument list passed to each listener

        Returns
        -------
        bool
            True if at least one listener was invoked
        """
        callbacks = self.listeners(event)

        for callback in callbacks:
            callback(*args)

        return bool(callbacks)

"""Utility functions for gridrunner."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)


def describe_browser(browser_config: Mapping[str, Any] | None) -> str:
    """Build a short display label for a browser capability descriptor.

    Parameters
    ----------
    browser_config : Mapping[str, Any] | None
        Capability descriptor (``browserName``, ``version``, ``platform``)

    Returns
    -------
    str
        Label such as ``"firefox 115 (linux)"``, or ``"unknown"``
    """
    if not browser_config:
        return "unknown"

    name = browser_config.get("browserName") or browser_config.get("name") or "unknown"
    label = str(name)

    version = browser_config.get("version") or browser_config.get("browserVersion")
    if version:
        label = f"{label} {version}"

    platform = browser_config.get("platform") or browser_config.get("platformName")
    if platform:
        label = f"{label} ({platform})"

    return label


def describe_scenario(scenario: Any) -> str:
    """Return the display name of a scenario definition.

    Parameters
    ----------
    scenario : Any
        Scenario definition, usually a ``TestCase`` instance

    Returns
    -------
    str
        The scenario's ``name`` attribute, or its class name
    """
    name = getattr(scenario, "name", None)
    if name:
        return str(name)
    return type(scenario).__name__


def call_once(
    func: Callable[[BaseException | None], None], label: str
) -> Callable[..., None]:
    """Wrap a completion callback so only its first invocation goes through.

    Later invocations are logged and ignored.

    Parameters
    ----------
    func : Callable[[BaseException | None], None]
        Completion callback receiving an optional error
    label : str
        Description of the owner, used in the warning

    Returns
    -------
    Callable[..., None]
        Thread-safe wrapper accepting an optional error argument
    """
    lock = threading.Lock()
    called = False

    def wrapper(error: BaseException | None = None) -> None:
        nonlocal called
        with lock:
            if called:
                logger.warning("Completion callback for %s invoked more than once", label)
                return
            called = True
        func(error)

    return wrapper


def replace_with_observer_error(
    observer_error: BaseException, error: BaseException | None, label: str
) -> BaseException:
    """Make an after-observer exception the reported error of a unit.

    The error the unit would otherwise have reported is kept as the
    observer exception's ``__context__`` when that is unset, and logged.

    Parameters
    ----------
    observer_error : BaseException
        Exception raised by an after observer
    error : BaseException | None
        Error the unit was about to report
    label : str
        Name of the unit used in log messages

    Returns
    -------
    BaseException
        The observer exception, which becomes the reported error
    """
    if error is not None:
        logger.warning(
            "After observer of %s raised %r; it replaces error %r",
            label,
            observer_error,
            error,
        )
        if observer_error.__context__ is None:
            observer_error.__context__ = error
    else:
        logger.error("After observer of %s raised: %s", label, observer_error)

    return observer_error

"""CLI argument parsing and scenario loading utilities."""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Any

from gridrunner.constants import SCENARIOS_ATTRIBUTE
from gridrunner.errors import ConfigurationError, ScenarioLoadError
from gridrunner.testcase import TestCase
from gridrunner.utils import describe_browser

logger = logging.getLogger(__name__)


def parse_concurrency(concurrency: str | int) -> int:
    """Parse concurrency parameter into a positive integer.

    Parameters
    ----------
    concurrency : str | int
        Concurrency value from the command line

    Returns
    -------
    int
        Positive concurrency bound

    Raises
    ------
    ConfigurationError
        If the value is not numeric or lower than 1
    """
    if isinstance(concurrency, bool):
        raise ConfigurationError(f"Invalid concurrency value: {concurrency!r}")

    try:
        value = int(str(concurrency).strip())
    except ValueError:
        raise ConfigurationError(
            f"Invalid concurrency value: '{concurrency}' is not numeric"
        ) from None

    if value < 1:
        raise ConfigurationError(
            f"Invalid concurrency value: {value}. Concurrency must be at least 1"
        )

    return value


def parse_browser_filter(browser: str | list[str] | tuple[str, ...]) -> list[str]:
    """Parse browser selection into a list of lowercase browser names.

    Parameters
    ----------
    browser : str | list[str] | tuple[str, ...]
        Comma-separated names, or a list/tuple as produced by Fire

    Returns
    -------
    list[str]
        Browser names to keep
    """
    if isinstance(browser, (list, tuple)):
        names = [str(b) for b in browser]
    else:
        names = str(browser).split(",")

    return [name.strip().lower() for name in names if name.strip()]


def apply_cli_overrides(
    config: dict[str, Any],
    concurrency: str | int | None,
    browser: str | list[str] | tuple[str, ...] | None,
) -> None:
    """Apply CLI option overrides to merged configuration.

    Parameters
    ----------
    config : dict[str, Any]
        Configuration dictionary to modify in-place
    concurrency : str | int | None
        Per-browser concurrency override
    browser : str | list[str] | tuple[str, ...] | None
        Browser names to keep; other configured browsers are dropped

    Raises
    ------
    ConfigurationError
        If an override is invalid or the browser filter matches nothing
    """
    if concurrency is not None:
        config["concurrency"] = parse_concurrency(concurrency)

    if browser is not None:
        wanted = parse_browser_filter(browser)
        browsers = config.get("browsers") or []
        selected = [
            b
            for b in browsers
            if str(b.get("browserName", b.get("name", ""))).lower() in wanted
        ]

        if not selected:
            available = [describe_browser(b) for b in browsers]
            raise ConfigurationError(
                f"No configured browser matches {', '.join(wanted)}. "
                f"Available browsers: {available}"
            )

        config["browsers"] = selected


def load_scenarios(target: str) -> list[Any]:
    """Resolve scenario definitions from an import path.

    ``package.module:attribute`` selects an attribute, called first when it is
    callable. A bare ``package.module`` uses its ``SCENARIOS`` list, or else
    one instance of every ``TestCase`` subclass defined in the module, in
    definition order.

    Parameters
    ----------
    target : str
        Import path of the scenarios

    Returns
    -------
    list[Any]
        Scenario definitions

    Raises
    ------
    ScenarioLoadError
        If the module cannot be imported or yields no scenario list
    """
    module_name, _, attribute = str(target).partition(":")

    if not module_name:
        raise ScenarioLoadError(f"Invalid scenario path: '{target}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ScenarioLoadError(f"Cannot import scenario module '{module_name}': {e}") from e

    if attribute:
        if not hasattr(module, attribute):
            raise ScenarioLoadError(f"Module '{module_name}' has no attribute '{attribute}'")

        value = getattr(module, attribute)
        if callable(value) and not isinstance(value, type):
            value = value()
        elif isinstance(value, type):
            value = [value()]
    elif hasattr(module, SCENARIOS_ATTRIBUTE):
        value = getattr(module, SCENARIOS_ATTRIBUTE)
    else:
        value = [cls() for cls in _testcase_classes(module)]

    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ScenarioLoadError(
            f"Scenarios from '{target}' must be a list, got {type(value).__name__}"
        )

    logger.debug("Loaded %s scenarios from %s", len(value), target)
    return list(value)


def _testcase_classes(module: Any) -> list[type[TestCase]]:
    # module namespace preserves definition order
    return [
        obj
        for obj in vars(module).values()
        if inspect.isclass(obj)
        and issubclass(obj, TestCase)
        and obj is not TestCase
        and obj.__module__ == module.__name__
    ]

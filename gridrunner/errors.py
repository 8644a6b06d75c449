"""Exception hierarchy for gridrunner."""

from __future__ import annotations

from typing import Any

from gridrunner.constants import GRID_ERROR_MESSAGE


class GridRunnerError(Exception):
    """Base exception for gridrunner failures."""

    pass


class ConfigurationError(GridRunnerError, ValueError):
    """Raised when grid configuration is missing or malformed."""

    pass


class ScenarioLoadError(GridRunnerError):
    """Raised when scenario definitions cannot be imported or resolved."""

    pass


class GridAlreadyRunError(GridRunnerError):
    """Raised when a single-use grid runner is asked to run a second time."""

    pass


class GridError(GridRunnerError):
    """Aggregated failure of a grid run.

    Wraps every per-browser error in the order browsers completed. The list is
    never reordered or deduplicated, even when the same error object appears
    twice.

    Parameters
    ----------
    message : str
        Human-readable error description
    errors : list[BaseException]
        Per-browser errors in completion order

    Attributes
    ----------
    errors : list[BaseException]
        Per-browser errors in completion order
    """

    def __init__(
        self, message: str = GRID_ERROR_MESSAGE, errors: list[BaseException] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message} ({len(self.errors)} failed)"


class BrowserError(GridRunnerError):
    """Terminal failure of one browser target.

    Parameters
    ----------
    message : str
        Human-readable error description
    errors : list[BaseException]
        Scenario errors in completion order
    browser_config : dict[str, Any]
        Capability descriptor of the failing browser

    Attributes
    ----------
    errors : list[BaseException]
        Scenario errors in completion order
    browser_config : dict[str, Any]
        Capability descriptor of the failing browser
    """

    def __init__(
        self,
        message: str,
        errors: list[BaseException],
        browser_config: dict[str, Any],
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = list(errors)
        self.browser_config = browser_config

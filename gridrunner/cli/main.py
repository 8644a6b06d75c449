"""CLI entry point for gridrunner."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import fire

from gridrunner.app import GridRunnerApp
from gridrunner.constants import (
    DEBUG_ENV_VAR,
    EXIT_CONFIG_ERROR,
    EXIT_RUN_FAILED,
    EXIT_SUCCESS,
)
from gridrunner.errors import GridError, ScenarioLoadError
from gridrunner.logging import BrowserFormatter, StreamRoutingFilter


class GridRunnerCLI(GridRunnerApp):
    """CLI wrapper that turns run outcomes into process exit codes."""

    def run(
        self,
        scenarios: str,
        config: str | None = None,
        profile: str | None = None,
        concurrency: str | int | None = None,
        browser: str | list[str] | tuple[str, ...] | None = None,
        verbose: bool = False,
    ) -> Any:
        """Run scenarios and exit with a status reflecting the outcome.

        Parameters
        ----------
        scenarios : str
            Import path of the scenarios (``package.module[:attribute]``)
        config : str | None
            Path to YAML configuration file
        profile : str | None
            Named profile from the configuration file
        concurrency : str | int | None
            Per-browser concurrency override
        browser : str | list[str] | tuple[str, ...] | None
            Comma-separated browser names to run
        verbose : bool
            Enable verbose logging
        """
        error = super().run(
            scenarios=scenarios,
            config=config,
            profile=profile,
            concurrency=concurrency,
            browser=browser,
            verbose=verbose,
        )

        if error is None:
            sys.exit(EXIT_SUCCESS)

        print_run_error(error)
        sys.exit(EXIT_RUN_FAILED)


def print_run_error(error: BaseException) -> None:
    """Print a run failure, listing each browser error of an aggregated error.

    Parameters
    ----------
    error : BaseException
        Error reported by the grid
    """
    print(f"Run failed: {error}", file=sys.stderr)

    if isinstance(error, GridError):
        for browser_error in error.errors:
            print(f"  - {browser_error}", file=sys.stderr)
            for scenario_error in getattr(browser_error, "errors", []):
                print(f"      {scenario_error!r}", file=sys.stderr)


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Handle configuration errors.

    Parameters
    ----------
    error : ValueError
        The value error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_scenario_load_error(error: ScenarioLoadError, debug_mode: bool) -> None:
    """Handle scenario import failures.

    Parameters
    ----------
    error : ScenarioLoadError
        The load error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ScenarioLoadError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"Scenario error: {error}\n", file=sys.stderr)
    print("Scenarios are given as an import path, for example:", file=sys.stderr)
    print("  gridrunner run tests.e2e.login", file=sys.stderr)
    print("  gridrunner run tests.e2e.login:SCENARIOS", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_runtime_error(error: RuntimeError, debug_mode: bool) -> None:
    """Handle unexpected runtime error.

    Parameters
    ----------
    error : RuntimeError
        The runtime error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    RuntimeError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"Unexpected error: {error}", file=sys.stderr)
    sys.exit(EXIT_RUN_FAILED)


def configure_logging(level: int = logging.INFO) -> None:
    """Route log records to stdout and stderr with browser prefixes."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(BrowserFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(BrowserFormatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=level,
        handlers=[stdout_handler, stderr_handler],
        force=True,
    )


def main() -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps the public methods of ``GridRunnerCLI`` to subcommands
    (``run`` and ``browsers``) and handles argument parsing and help text.
    """
    configure_logging()

    debug_mode = os.environ.get(DEBUG_ENV_VAR) == "1"

    try:
        fire.Fire(GridRunnerCLI())
    except ScenarioLoadError as e:
        handle_scenario_load_error(e, debug_mode)
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except RuntimeError as e:
        handle_runtime_error(e, debug_mode)

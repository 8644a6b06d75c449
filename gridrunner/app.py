"""Application facade behind the gridrunner command line."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from gridrunner.cli.parsing import apply_cli_overrides, load_scenarios
from gridrunner.core.config import ConfigLoader, GridConfig
from gridrunner.core.grid import GridRunner
from gridrunner.logging.reporter import LoggingReporter
from gridrunner.utils import describe_browser


class GridRunnerApp:
    """Commands exposed by the gridrunner CLI.

    Parameters
    ----------
    config_loader : ConfigLoader | None
        Configuration loader; a default one is created when omitted
    scenario_loader : Callable[[str], list[Any]] | None
        Resolves a scenario import path into scenario definitions
    """

    def __init__(
        self,
        config_loader: ConfigLoader | None = None,
        scenario_loader: Callable[[str], list[Any]] | None = None,
    ) -> None:
        self._config_loader = config_loader or ConfigLoader()
        self._scenario_loader = scenario_loader or load_scenarios

    def _grid_config(
        self,
        config: str | None,
        profile: str | None,
        concurrency: str | int | None = None,
        browser: str | list[str] | tuple[str, ...] | None = None,
    ) -> GridConfig:
        full_config = self._config_loader.load_config(config)
        merged_config = self._config_loader.get_grid_config(full_config, profile)
        apply_cli_overrides(merged_config, concurrency, browser)
        self._config_loader.validate_config(merged_config)
        return GridConfig.from_mapping(merged_config)

    def run(
        self,
        scenarios: str,
        config: str | None = None,
        profile: str | None = None,
        concurrency: str | int | None = None,
        browser: str | list[str] | tuple[str, ...] | None = None,
        verbose: bool = False,
    ) -> BaseException | None:
        """Run scenarios against every configured browser.

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

        Returns
        -------
        BaseException | None
            Error reported by the grid, or None when every browser passed
        """
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)
            logging.debug("Verbose mode enabled")

        grid_config = self._grid_config(config, profile, concurrency, browser)
        definitions = self._scenario_loader(scenarios)

        grid = GridRunner(grid_config, definitions)
        reporter = LoggingReporter()
        reporter.attach(grid)

        outcome: dict[str, BaseException | None] = {"error": None}

        def finished(error: BaseException | None) -> None:
            outcome["error"] = error

        try:
            grid.run(finished)
        finally:
            reporter.detach()

        return outcome["error"]

    def browsers(self, config: str | None = None, profile: str | None = None) -> list[str]:
        """List the browsers a run would target.

        Parameters
        ----------
        config : str | None
            Path to YAML configuration file
        profile : str | None
            Named profile from the configuration file

        Returns
        -------
        list[str]
            Display labels of the configured browsers
        """
        grid_config = self._grid_config(config, profile)
        return [describe_browser(b) for b in grid_config.browsers]

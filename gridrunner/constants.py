"""Global constants for gridrunner.

This module contains values shared by the orchestrator, the configuration
loader and the CLI.
"""

DEFAULT_CONCURRENCY = 2
"""Default number of scenarios run simultaneously inside one browser.

Every browser receives the same bound; there is no throttling across browsers.
"""

GRID_ERROR_MESSAGE = "Errors were caught for this run."
"""Message carried by the aggregated error reported at the end of a run."""

DEFAULT_CONFIG_FILE = "gridrunner.yaml"
"""Configuration file looked up in the working directory when no path is given."""

CONFIG_ENV_VAR = "GRIDRUNNER_CONFIG"
"""Environment variable overriding the configuration file path."""

DEBUG_ENV_VAR = "GRIDRUNNER_DEBUG"
"""Environment variable that makes the CLI re-raise errors with tracebacks."""

SCENARIOS_ATTRIBUTE = "SCENARIOS"
"""Module attribute consulted when loading scenarios from a module path."""

EXIT_SUCCESS = 0
EXIT_RUN_FAILED = 1
EXIT_CONFIG_ERROR = 2

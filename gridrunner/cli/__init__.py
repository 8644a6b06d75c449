"""CLI argument parsing and handling."""

from __future__ import annotations

from gridrunner.cli.parsing import (
    apply_cli_overrides,
    load_scenarios,
    parse_browser_filter,
    parse_concurrency,
)

__all__ = [
    "apply_cli_overrides",
    "load_scenarios",
    "parse_browser_filter",
    "parse_concurrency",
]

"""Logging helpers for gridrunner."""

from gridrunner.logging.formatters import BrowserFormatter, StreamRoutingFilter
from gridrunner.logging.reporter import LoggingReporter

__all__ = ["BrowserFormatter", "LoggingReporter", "StreamRoutingFilter"]

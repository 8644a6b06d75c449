"""Unit tests for the TestCase base class."""

import logging
from typing import Any

import pytest

from gridrunner.testcase import TestCase


class Login(TestCase):
    name = "login"

    def __init__(self, error: BaseException | None = None) -> None:
        super().__init__()
        self.error = error
        self.seen: list[tuple[dict[str, Any], dict[str, Any]]] = []

    def steps(self, remote: dict[str, Any], desired: dict[str, Any]) -> None:
        self.seen.append((remote, desired))
        if self.error is not None:
            raise self.error


class TestTestCaseNaming:
    """Validate scenario naming."""

    def test_explicit_name_wins(self) -> None:
        """Test a constructor name overrides the class attribute."""
        assert Login().name == "login"
        assert TestCase("checkout").name == "checkout"

    def test_class_name_fallback(self) -> None:
        """Test the class name is used when no name is defined."""

        class Search(TestCase):
            pass

        assert Search().name == "Search"


class TestTestCaseRun:
    """Validate running steps and reporting completion."""

    def test_successful_steps_report_none(self) -> None:
        """Test done receives None when steps pass."""
        case = Login()
        results: list = []

        case.run({"host": "hub"}, {"browserName": "chrome"}, results.append)

        assert results == [None]

    def test_name_capability_overrides_descriptor(self) -> None:
        """Test the scenario name replaces the descriptor's name."""
        case = Login()
        desired = {"browserName": "chrome", "name": "generic"}

        case.run({}, desired, lambda error: None)

        assert case.seen == [({}, {"browserName": "chrome", "name": "login"})]
        assert desired["name"] == "generic"

    def test_step_exception_is_reported(self) -> None:
        """Test a failing step is passed to done instead of raised."""
        error = AssertionError("missing button")
        case = Login(error=error)
        results: list = []

        case.run({}, {}, results.append)

        assert results == [error]

    def test_default_steps_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a scenario without steps logs a warning and passes."""
        results: list = []

        with caplog.at_level(logging.WARNING):
            TestCase("empty").run({}, {}, results.append)

        assert results == [None]
        assert "defines no steps" in caplog.text

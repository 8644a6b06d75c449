"""Base class for scenario definitions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class TestCase:
    """A scenario whose steps run against one remote browser session.

    Subclasses override :meth:`steps`. Driving the browser itself is left to
    the automation client of choice, configured from ``remote`` and
    ``desired``.

    Parameters
    ----------
    name : str | None
        Display name; defaults to the ``name`` class attribute, then the
        class name
    """

    __test__ = False

    name: str | None = None

    def __init__(self, name: str | None = None) -> None:
        self.name = name or type(self).name or type(self).__name__

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def run(
        self,
        remote: dict[str, Any],
        desired: dict[str, Any],
        done: Callable[[BaseException | None], None],
    ) -> None:
        """Run the scenario steps and report the outcome through ``done``.

        The scenario name is set as the ``name`` capability, overriding any
        name in the browser descriptor.

        Parameters
        ----------
        remote : dict[str, Any]
            Remote session settings
        desired : dict[str, Any]
            Browser capability descriptor
        done : Callable[[BaseException | None], None]
            Completion callback
        """
        desired = {**desired, "name": self.name}

        try:
            self.steps(remote, desired)
        except Exception as e:
            done(e)
            return

        done(None)

    def steps(self, remote: dict[str, Any], desired: dict[str, Any]) -> None:
        """Scenario body, executed once per browser."""
        logger.warning("Scenario %s defines no steps", self.name)

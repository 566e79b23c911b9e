"""Exception types raised by pruneglob."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pruneglob.rules import Violation

INVALID_PATTERNS_MESSAGE = "One or more glob patterns you have entered are invalid.  Cannot continue."


class PruneGlobError(Exception):
    """Base class for all pruneglob errors."""


class InvalidPatternError(PruneGlobError, ValueError):
    """
    One or more include or exclude patterns broke a validation rule.

    Raised before any filesystem access. `violations` lists every problem
    found across both pattern lists, not just the first.
    """

    def __init__(self, violations: list[Violation]) -> None:
        super().__init__(INVALID_PATTERNS_MESSAGE)
        self.violations: list[Violation] = violations


class RootResolutionError(PruneGlobError, ValueError):
    """A `%package` root specifier names a package that can't be imported."""

"""
Rules describing patterns we refuse to scan with.

Each rule is a named predicate over the positive form of a pattern. The
default set rejects patterns that would force a scan of the whole tree,
escape the root, or rely on regular-expression style globbing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from pruneglob.patterns import positive_pattern

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """A named invalid-pattern detector. `test` returns True when the pattern is invalid."""

    name: str
    message: str
    test: Callable[[str], bool]


@dataclass(frozen=True)
class Violation:
    """A pattern (in positive form) and the rule it broke."""

    pattern: str
    message: str
    rule: str

    def __str__(self) -> str:
        return f"Pattern '{self.pattern}' {self.message}."


def regex_rule(name: str, message: str, regex: str | re.Pattern[str]) -> Rule:
    """Build a rule that rejects any pattern in which `regex` finds a match."""
    compiled = re.compile(regex)
    return Rule(name=name, message=message, test=lambda pattern: compiled.search(pattern) is not None)


DEFAULT_RULES: tuple[Rule, ...] = (
    regex_rule("no-leading-wildcard", "contains a leading wildcard", r"^(\./)?\*\*"),
    regex_rule("no-windows-separator", "contains a windows separator", r"\\"),
    regex_rule("no-parent-dir", "contains a reference to a parent directory", r"^\.\."),
    regex_rule(
        "no-regexp",
        "contains a character used to define a regular expression",
        r"[\[\](){}|]",
    ),
    regex_rule(
        "no-whole-root",
        "contains a reference to the whole of the root directory",
        r"^\./$",
    ),
)


def merge_rules(
    base: Sequence[Rule] = DEFAULT_RULES,
    extra: Iterable[Rule] = (),
    remove: Iterable[str] = (),
) -> tuple[Rule, ...]:
    """
    Combine rule sets. Rules in `extra` replace same-named rules in `base`
    (keeping their position) or are appended; names in `remove` are dropped.
    """
    merged: dict[str, Rule] = {rule.name: rule for rule in base}
    for rule in extra:
        merged[rule.name] = rule
    for name in remove:
        merged.pop(name, None)
    return tuple(merged.values())


def validate_pattern(pattern: str, rules: Sequence[Rule] | None = None) -> list[Violation]:
    """
    Check one pattern against every rule and return a violation per rule it
    breaks. Negation is ignored. `rules=None` means `DEFAULT_RULES`; an
    empty sequence disables validation.
    """
    active = DEFAULT_RULES if rules is None else rules
    positive = positive_pattern(pattern)
    return [
        Violation(pattern=positive, message=rule.message, rule=rule.name)
        for rule in active
        if rule.test(positive)
    ]


def validate_pattern_array(
    patterns: Iterable[str], rules: Sequence[Rule] | None = None
) -> list[Violation]:
    """Validate each pattern in turn and concatenate the violations."""
    violations: list[Violation] = []
    for pattern in patterns:
        violations.extend(validate_pattern(pattern, rules))
    return violations


def is_valid_pattern(pattern: str, rules: Sequence[Rule] | None = None) -> bool:
    return not validate_pattern(pattern, rules)


def is_invalid_pattern(pattern: str, rules: Sequence[Rule] | None = None) -> bool:
    return not is_valid_pattern(pattern, rules)


def make_pattern_filter(
    rules: Sequence[Rule] | None = None, show_invalid: bool = False
) -> Callable[[str], bool]:
    """
    Return a predicate for use with `filter()` that keeps valid patterns, or
    only the invalid ones when `show_invalid` is set.
    """

    def pattern_filter(pattern: str) -> bool:
        return is_invalid_pattern(pattern, rules) if show_invalid else is_valid_pattern(pattern, rules)

    return pattern_filter


def log_violations(violations: Iterable[Violation]) -> None:
    """Log one error line per violation."""
    for violation in violations:
        log.error("Pattern '%s' %s.", violation.pattern, violation.message)

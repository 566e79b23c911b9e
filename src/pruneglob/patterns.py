"""
Pattern polarity, rooting, and root path handling.

A pattern with a leading `!` is negated. Patterns spanning more than one path
segment are rooted against the absolute scan root before matching; bare
single-segment patterns like `*.js` or `README.md` are left alone so they
match a name at any depth.
"""

from __future__ import annotations

import importlib.util
import os
import posixpath
import re
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from wcmatch import glob

from pruneglob.errors import RootResolutionError

NEGATION = "!"

# Anything that looks like a Windows path: a drive colon or a backslash.
_WINDOWS_MARKERS = re.compile(r"[:\\]")
_SEPARATORS = re.compile(r"[/\\]+")
_DRIVE = re.compile(r"^[a-zA-Z]:$")


def is_negated(pattern: str) -> bool:
    return pattern.startswith(NEGATION)


def positive_pattern(pattern: str) -> str:
    """Return `pattern` without its leading `!`, if it has one."""
    return pattern[len(NEGATION) :] if is_negated(pattern) else pattern


def positive_patterns(patterns: Iterable[str]) -> list[str]:
    """The patterns with no leading `!`, in their original order."""
    return [pattern for pattern in patterns if not is_negated(pattern)]


def negative_patterns(patterns: Iterable[str]) -> list[str]:
    """The negated patterns, in their original order, with the `!` removed."""
    return [positive_pattern(pattern) for pattern in patterns if is_negated(pattern)]


class PatternSets(NamedTuple):
    """
    The four polarity subsets of an include list and an exclude list.

    Every input pattern lands in exactly one subset; negated ones are stored
    without their `!`.
    """

    includes: list[str]
    negated_includes: list[str]
    excludes: list[str]
    negated_excludes: list[str]

    @classmethod
    def split(cls, includes: Sequence[str], excludes: Sequence[str]) -> PatternSets:
        return cls(
            includes=positive_patterns(includes),
            negated_includes=negative_patterns(includes),
            excludes=positive_patterns(excludes),
            negated_excludes=negative_patterns(excludes),
        )


def sanitise_path(raw_path: str) -> str:
    """
    Convert a Windows-style path such as `c:\\path\\to\\file.js` into a
    glob-friendly `/path/to/file.js`. Paths with no drive letter or
    backslash are returned unchanged.
    """
    if not _WINDOWS_MARKERS.search(raw_path):
        return raw_path
    segments = _SEPARATORS.split(raw_path)
    first = "" if _DRIVE.match(segments[0]) else segments[0]
    return "/".join([first, *segments[1:]])


def add_path_to_patterns(root_path: str, patterns: Sequence[str]) -> list[str]:
    """
    Return a copy of `patterns` with every multi-segment pattern rooted at
    `root_path`.

    - `./src/*.js` and `src/*.js` become `<root>/src/*.js`.
    - `/other/file.js` is already rooted and only normalised.
    - `README.md` and `*.js` are single segments and stay as they are.

    Negation is preserved. The root is escaped, so a directory named `[id]`
    or `(group)` is matched literally. Paths are joined with POSIX rules on
    every platform, so `..` segments inside a pattern are collapsed.
    """
    root = glob.escape(sanitise_path(root_path), unix=True)
    rooted: list[str] = []
    for pattern in patterns:
        positive = positive_pattern(pattern)
        if "/" not in positive:
            rooted.append(pattern)
            continue
        prefix = NEGATION if positive != pattern else ""
        rooted.append(prefix + posixpath.normpath(posixpath.join(root, positive)))
    return rooted


def resolve_root(root: str | os.PathLike[str]) -> str:
    """
    Resolve a root specifier to an absolute, sanitised POSIX path.

    A specifier starting with `%` names an importable package, optionally
    followed by a subpath: `%mypackage/tests/fixtures` resolves under the
    directory `mypackage` was loaded from. Anything else is expanded and
    made absolute against the current directory. Symlinks are not resolved.
    """
    raw = os.fspath(root)
    if raw.startswith("%"):
        package, _, subpath = raw[1:].partition("/")
        raw = os.path.join(_package_dir(package), subpath) if subpath else _package_dir(package)
    absolute = os.path.abspath(os.path.expanduser(raw))
    return sanitise_path(absolute)


def _package_dir(name: str) -> str:
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError) as e:
        raise RootResolutionError(f"Cannot resolve package root: %{name}") from e
    if spec is None:
        raise RootResolutionError(f"Cannot resolve package root: %{name}")
    if spec.submodule_search_locations:
        return next(iter(spec.submodule_search_locations))
    if spec.origin:
        return os.path.dirname(spec.origin)
    raise RootResolutionError(f"Package has no location on disk: %{name}")

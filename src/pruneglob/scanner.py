"""
Recursive, pruning file search driven by include and exclude patterns.

`find_files` is the main entry point. It validates the patterns, roots them
at the scan root, and walks the tree one directory level at a time, only
descending into directories that some include pattern could still match.
"""

from __future__ import annotations

import logging
import os
import posixpath
import stat
from collections.abc import Iterable, Sequence

from pruneglob.errors import InvalidPatternError
from pruneglob.matching import matches_single_pattern
from pruneglob.patterns import PatternSets, add_path_to_patterns, resolve_root
from pruneglob.rules import Rule, log_violations, validate_pattern_array
from pruneglob.types import DEFAULT_MATCH_OPTIONS, MatchOptions, ScanEntry

log = logging.getLogger(__name__)


def find_files(
    root_path: str | os.PathLike[str],
    includes: Sequence[str],
    excludes: Sequence[str] = (),
    options: MatchOptions | None = None,
    rules: Sequence[Rule] | None = None,
) -> list[str]:
    """
    Find all files beneath `root_path` that match the includes and are not
    removed by the excludes.

    Relative and absolute multi-segment patterns are rooted at `root_path`;
    bare names like `*.js` match at any depth. A leading `!` negates a
    pattern. Negated includes act as excludes, and negated excludes re-admit
    included paths that an exclude (or negated include) would drop.

    All patterns are validated against `rules` (default: `DEFAULT_RULES`)
    first. If any is invalid, every violation is logged and
    `InvalidPatternError` is raised before the filesystem is touched.

    Returns absolute POSIX paths, sorted by directory walk order. Errors
    reading the filesystem propagate as `OSError`.
    """
    violations = validate_pattern_array(includes, rules) + validate_pattern_array(excludes, rules)
    if violations:
        log_violations(violations)
        raise InvalidPatternError(violations)

    root = resolve_root(root_path)
    return scan_directory(
        root,
        add_path_to_patterns(root, includes),
        add_path_to_patterns(root, excludes),
        options,
    )


def scan_directory(
    dir_path: str,
    includes: Sequence[str],
    excludes: Sequence[str],
    options: MatchOptions | None = None,
) -> list[str]:
    """
    Scan one directory level with already-rooted patterns, recursing into
    subdirectories that survive `filter_paths`. Only files are returned.
    """
    log.debug("Scanning %s", dir_path)
    matching: list[str] = []
    for entry in filter_paths(list_directory(dir_path), includes, excludes, options):
        if entry.is_dir:
            matching.extend(scan_directory(entry.path, includes, excludes, options))
        elif entry.is_file:
            matching.append(entry.path)
    return matching


def list_directory(dir_path: str) -> list[ScanEntry]:
    """List the entries of `dir_path`, sorted by path. Symlinks are followed."""
    entries: list[ScanEntry] = []
    for name in sorted(os.listdir(dir_path)):
        path = posixpath.join(dir_path, name)
        mode = os.stat(path).st_mode
        entries.append(ScanEntry(path=path, is_dir=stat.S_ISDIR(mode), is_file=stat.S_ISREG(mode)))
    return entries


def filter_paths(
    entries: Iterable[ScanEntry],
    includes: Sequence[str],
    excludes: Sequence[str],
    options: MatchOptions | None = None,
) -> list[ScanEntry]:
    """
    Keep the entries that:

    1. Match at least one include. Directories only need to be able to
       contain a match.
    2. Match a negated exclude, which overrides everything below, or
    3. Match neither a negated include nor an exclude.

    Negated includes and excludes are matched exactly, even for directories,
    so they never prune a directory just because its path is a prefix.
    """
    options = options or DEFAULT_MATCH_OPTIONS
    sets = PatternSets.split(includes, excludes)
    soft_excludes = sets.negated_includes + sets.excludes

    allowed: list[ScanEntry] = []
    for entry in entries:
        if not _matches_any(entry.path, sets.includes, options, entry.is_dir):
            continue
        if _matches_any(entry.path, sets.negated_excludes, options, entry.is_dir):
            allowed.append(entry)
        elif not _matches_any(entry.path, soft_excludes, options):
            allowed.append(entry)
    return allowed


def _matches_any(
    path: str, patterns: Iterable[str], options: MatchOptions, is_dir: bool = False
) -> bool:
    return any(matches_single_pattern(path, pattern, options, is_dir) for pattern in patterns)

"""
Fast include/exclude file search that prunes directories early.

Rather than listing a whole tree and filtering afterwards, the scanner only
descends into directories that an include pattern could still match.

Usage::

    from pruneglob import MatchOptions, find_files

    files = find_files(
        "path/to/project",
        includes=["./src/**/*.js", "!./src/**/vendor/*.js"],
        excludes=["./src/generated/**/*.js"],
        options=MatchOptions(dot=True),
    )
"""

from pruneglob.errors import InvalidPatternError, PruneGlobError, RootResolutionError
from pruneglob.matching import dir_might_match, matches_single_pattern
from pruneglob.patterns import (
    add_path_to_patterns,
    negative_patterns,
    positive_pattern,
    positive_patterns,
    resolve_root,
    sanitise_path,
)
from pruneglob.rules import (
    DEFAULT_RULES,
    Rule,
    Violation,
    is_invalid_pattern,
    is_valid_pattern,
    make_pattern_filter,
    merge_rules,
    regex_rule,
    validate_pattern,
    validate_pattern_array,
)
from pruneglob.scanner import filter_paths, find_files, scan_directory
from pruneglob.types import MatchOptions, ScanEntry

__all__ = [
    "DEFAULT_RULES",
    "InvalidPatternError",
    "MatchOptions",
    "PruneGlobError",
    "RootResolutionError",
    "Rule",
    "ScanEntry",
    "Violation",
    "add_path_to_patterns",
    "dir_might_match",
    "filter_paths",
    "find_files",
    "is_invalid_pattern",
    "is_valid_pattern",
    "make_pattern_filter",
    "matches_single_pattern",
    "merge_rules",
    "negative_patterns",
    "positive_pattern",
    "positive_patterns",
    "regex_rule",
    "resolve_root",
    "sanitise_path",
    "scan_directory",
    "validate_pattern",
    "validate_pattern_array",
]

"""
Matching a single path against a single pattern.

Files are matched exactly with `wcmatch`. Directories get a looser test: we
only need to know whether something beneath the directory could match, so
that the scanner knows whether it is worth descending.
"""

from __future__ import annotations

import re

import bracex
from wcmatch import fnmatch, glob

from pruneglob.types import DEFAULT_MATCH_OPTIONS, MatchOptions

GLOBSTAR = "**"

_ESCAPED_CHAR = re.compile(r"\\.")


def matches_single_pattern(
    path: str,
    pattern: str,
    options: MatchOptions | None = None,
    is_dir: bool = False,
) -> bool:
    """
    Check `path` against one positive `pattern`.

    With `is_dir` set, returns whether the directory might contain a match
    (see `dir_might_match`) rather than whether it matches itself.
    """
    options = options or DEFAULT_MATCH_OPTIONS
    if is_dir:
        return dir_might_match(path, pattern, options)
    return glob.globmatch(path, pattern, flags=options.flags)


def dir_might_match(
    dir_path: str, pattern: str, options: MatchOptions | None = None
) -> bool:
    """
    Return True if the directory at `dir_path` could contain something that
    matches `pattern`.

    Braces are expanded first, and the directory qualifies if any expansion
    might match. A pattern with no slash can match a name at any depth, so
    every directory qualifies. Otherwise the directory's segments are
    compared with the pattern's from the root down: reaching a `**` segment
    means anything below could match, a segment that can't match rules the
    directory out, and running out of directory segments first means it is
    an ancestor of a possible match.

    This errs towards True. It never rejects a directory that holds a match.
    """
    options = options or DEFAULT_MATCH_OPTIONS
    if options.nobrace:
        expansions = [pattern]
    else:
        expansions = bracex.expand(pattern, keep_escapes=True)
    return any(_segments_might_match(dir_path, expanded, options) for expanded in expansions)


def _segments_might_match(dir_path: str, pattern: str, options: MatchOptions) -> bool:
    if "/" not in pattern:
        return True

    # Leading dots are always allowed here: the exact file match applies `dot` later.
    segment_flags = fnmatch.DOTMATCH
    if options.nocase:
        segment_flags |= fnmatch.IGNORECASE
    if not options.noext:
        segment_flags |= fnmatch.EXTMATCH

    pattern_segments = pattern.split("/")
    path_segments = dir_path.split("/")

    for index, path_segment in enumerate(path_segments):
        if index >= len(pattern_segments):
            return False
        pattern_segment = pattern_segments[index]
        if pattern_segment == GLOBSTAR and not options.noglobstar:
            return True
        if _has_open_group(pattern_segment):
            # A group split across a separator; this segment can't be judged alone.
            return True
        if pattern_segment == path_segment:
            continue
        if not fnmatch.fnmatch(path_segment, pattern_segment, flags=segment_flags):
            return False

    return True


def _has_open_group(segment: str) -> bool:
    unescaped = _ESCAPED_CHAR.sub("", segment)
    return any(unescaped.count(open_) != unescaped.count(close) for open_, close in ("()", "{}"))

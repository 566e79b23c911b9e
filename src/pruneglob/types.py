"""Option and entry types shared across the matcher and scanner."""

from __future__ import annotations

from dataclasses import dataclass

from wcmatch import glob


@dataclass(frozen=True)
class MatchOptions:
    """
    Toggles for the underlying glob matcher.

    The defaults match conventional shell globbing with `**` enabled:
    wildcards skip dotfiles, patterns without a slash only match the whole
    path, and matching is case-sensitive.
    """

    dot: bool = False
    match_base: bool = False
    nocase: bool = False
    noglobstar: bool = False
    nobrace: bool = False
    noext: bool = False

    @property
    def flags(self) -> int:
        """The `wcmatch.glob` flags equivalent to these options."""
        flags = 0
        if not self.noglobstar:
            flags |= glob.GLOBSTAR
        if not self.nobrace:
            flags |= glob.BRACE
        if not self.noext:
            flags |= glob.EXTGLOB
        if self.dot:
            flags |= glob.DOTGLOB
        if self.match_base:
            flags |= glob.MATCHBASE
        if self.nocase:
            flags |= glob.IGNORECASE
        return flags


DEFAULT_MATCH_OPTIONS = MatchOptions()


@dataclass(frozen=True)
class ScanEntry:
    """One directory listing entry: an absolute POSIX path and whether it is a directory."""

    path: str
    is_dir: bool
    is_file: bool

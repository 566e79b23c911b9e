"""
TOML-based config file loading for pruneglob.

Searches for `.pruneglob.toml`, `pruneglob.toml`, or `pyproject.toml [tool.pruneglob]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.

Named pattern groups live under `[sources.<name>]` (or
`[tool.pruneglob.sources.<name>]`), each with `include` and `exclude` lists.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from pruneglob.rules import DEFAULT_RULES, Rule, merge_rules, regex_rule
from pruneglob.types import MatchOptions

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


class ConfigError(ValueError):
    """A config file has a value of the wrong shape."""


@dataclass
class SourceGroup:
    """A named set of include and exclude patterns."""

    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)


@dataclass
class PruneGlobConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    root: str | None = None
    include: list[str] | None = None
    exclude: list[str] | None = None
    # Matching
    dot: bool | None = None
    match_base: bool | None = None
    nocase: bool | None = None
    noglobstar: bool | None = None
    nobrace: bool | None = None
    noext: bool | None = None
    # Validation
    disable_rules: list[str] | None = None
    extra_rules: dict[str, dict[str, str]] | None = None
    sources: dict[str, SourceGroup] = field(default_factory=dict)

    def match_options(self) -> MatchOptions:
        """`MatchOptions` with every unset toggle left at its default."""
        values = {
            name: getattr(self, name)
            for name in _MATCH_FIELDS
            if getattr(self, name) is not None
        }
        return MatchOptions(**values)

    def rules(self) -> tuple[Rule, ...]:
        """The default rules with `extra_rules` merged in and `disable_rules` removed."""
        extra = [
            regex_rule(name, spec["message"], spec["pattern"])
            for name, spec in (self.extra_rules or {}).items()
        ]
        return merge_rules(DEFAULT_RULES, extra=extra, remove=self.disable_rules or ())

    def source(self, name: str) -> SourceGroup:
        try:
            return self.sources[name]
        except KeyError:
            known = ", ".join(sorted(self.sources)) or "none"
            raise ConfigError(f"Unknown source group: {name} (configured: {known})") from None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".pruneglob.toml", "pruneglob.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "match-base": "match_base",
    "disable-rules": "disable_rules",
    "extra-rules": "extra_rules",
}

_MATCH_FIELDS = ("dot", "match_base", "nocase", "noglobstar", "nobrace", "noext")
_LIST_FIELDS = ("include", "exclude", "disable_rules")

_VALID_FIELDS = {f.name for f in fields(PruneGlobConfig)} - {"sources"}


def _read_section(path: Path) -> dict[str, Any] | None:
    """
    The pruneglob settings in `path`: the whole file for our own config files,
    `[tool.pruneglob]` for `pyproject.toml`, or `None` if pyproject has no such table.
    """
    data = tomllib.loads(path.read_text())
    if path.name != "pyproject.toml":
        return data
    return data.get("tool", {}).get("pruneglob")


def find_config_file(start_dir: Path) -> Path | None:
    """
    Return the nearest config file at or above `start_dir`, or `None`.

    Within one directory `.pruneglob.toml` beats `pruneglob.toml`, which beats a
    `pyproject.toml` with a `[tool.pruneglob]` table. Unreadable pyproject files
    are skipped.
    """
    start = start_dir.resolve()
    for directory in [start, *start.parents]:
        for filename in _CONFIG_FILENAMES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if filename != "pyproject.toml":
                return candidate
            try:
                if _read_section(candidate) is not None:
                    return candidate
            except (tomllib.TOMLDecodeError, OSError):
                pass
    return None


def load_config(config_path: Path) -> PruneGlobConfig:
    """Load and check the pruneglob settings in `config_path`."""
    return _parse_config_data(_read_section(config_path) or {})


def _string_list(key: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must be a list of strings, got {value!r}")
    return cast(list[str], value)


def _parse_config_data(data: dict[str, Any]) -> PruneGlobConfig:
    """Parse a TOML dict into PruneGlobConfig. Unknown keys are ignored."""
    mapped: dict[str, Any] = {}
    for key, value in data.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key in _LIST_FIELDS:
            value = _string_list(key, value)
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value

    if not isinstance(mapped.get("extra_rules", {}), dict):
        raise ConfigError("'extra-rules' must be a table")
    for name, spec in cast(dict[str, Any], mapped.get("extra_rules") or {}).items():
        if not isinstance(spec, dict) or "message" not in spec or "pattern" not in spec:
            raise ConfigError(f"Rule '{name}' needs both a message and a pattern")

    sources: dict[str, SourceGroup] = {}
    for name, group in cast(dict[str, Any], data.get("sources", {})).items():
        if not isinstance(group, dict):
            raise ConfigError(f"Source group '{name}' must be a table")
        group = cast(dict[str, Any], group)
        sources[name] = SourceGroup(
            include=_string_list(f"sources.{name}.include", group.get("include", [])),
            exclude=_string_list(f"sources.{name}.exclude", group.get("exclude", [])),
        )

    return PruneGlobConfig(**mapped, sources=sources)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: PruneGlobConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Copy config values onto the dataclass `cli_opts` for every shared field
    the user didn't pass on the command line and the config actually sets.
    """
    if config is None:
        return cli_opts

    shared = {f.name for f in fields(cast(Any, cli_opts))} & _VALID_FIELDS
    for name in shared - explicit_flags:
        value = getattr(config, name)
        if value is not None:
            setattr(cli_opts, name, value)

    return cli_opts

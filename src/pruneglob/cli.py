#!/usr/bin/env python3
"""
pruneglob: Find files by include and exclude glob patterns, pruning early

Common usage:
  pruneglob . -i './src/**/*.py'
  pruneglob . -i './src/**/*.js' -e './src/vendor/**/*.js'
  pruneglob . -i './**/*.md' --no-validate
  pruneglob --source js

Patterns with a leading `!` are negated. Patterns containing a `/` are rooted
at ROOT; bare names like `*.md` match at any depth.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import os
import posixpath
import re
import sys
from dataclasses import dataclass
from pathlib import Path

from pruneglob.config import (
    ConfigError,
    PruneGlobConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
)
from pruneglob.errors import PruneGlobError
from pruneglob.patterns import resolve_root
from pruneglob.rules import Rule, validate_pattern_array
from pruneglob.scanner import find_files
from pruneglob.types import MatchOptions


@dataclass
class Options:
    """Command-line options for the pruneglob tool."""

    root: str | None
    include: list[str] | None
    exclude: list[str] | None
    source: list[str]
    dot: bool | None
    match_base: bool | None
    nocase: bool | None
    no_validate: bool
    relative: bool
    check: bool
    verbose: bool
    version: bool


# Options whose presence on the command line overrides the config file.
_TRACKED_FLAGS = ("root", "include", "exclude", "dot", "match_base", "nocase")


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns the options and the set of option names the user explicitly
    passed (for config merge precedence). Tracked options default to `None`
    so that presence can be told apart from a value equal to the default.
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="pruneglob",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Directory to search, or %%package/subdir for a path inside an installed "
        "Python package (default: config file root, else '.')",
    )
    parser.add_argument(
        "-i",
        "--include",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Pattern of files to include. Can be repeated",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Pattern of files to exclude. Can be repeated",
    )
    parser.add_argument(
        "-s",
        "--source",
        action="append",
        default=[],
        metavar="NAME",
        help="Add the include and exclude patterns of a named source group from the "
        "config file. Can be repeated",
    )
    parser.add_argument(
        "--dot",
        action="store_true",
        default=None,
        help="Let wildcards match names that start with a dot",
    )
    parser.add_argument(
        "--match-base",
        action="store_true",
        default=None,
        dest="match_base",
        help="Match slash-free patterns against the file's basename",
    )
    parser.add_argument(
        "--nocase",
        action="store_true",
        default=None,
        help="Match case-insensitively",
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        dest="no_validate",
        help="Skip the invalid-pattern checks (allows leading '**', '..', and so on)",
    )
    parser.add_argument(
        "--relative",
        action="store_true",
        help="Print paths relative to the root",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate the patterns and report any problems",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each directory as it is scanned",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    explicit_flags = {name for name in _TRACKED_FLAGS if getattr(opts, name) is not None}

    return (
        Options(
            root=opts.root,
            include=opts.include,
            exclude=opts.exclude,
            source=opts.source,
            dot=opts.dot,
            match_base=opts.match_base,
            nocase=opts.nocase,
            no_validate=opts.no_validate,
            relative=opts.relative,
            check=opts.check,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _collect_patterns(
    options: Options, config: PruneGlobConfig | None
) -> tuple[list[str], list[str]]:
    """Combine the direct patterns with those of any named source groups."""
    includes = list(options.include or [])
    excludes = list(options.exclude or [])
    for name in options.source:
        if config is None:
            raise ConfigError(f"Source group '{name}' requested but no config file was found")
        group = config.source(name)
        includes.extend(group.include)
        excludes.extend(group.exclude)
    return includes, excludes


def _match_options(options: Options, config: PruneGlobConfig | None) -> MatchOptions:
    base = config.match_options() if config else MatchOptions()
    return MatchOptions(
        dot=bool(options.dot) if options.dot is not None else base.dot,
        match_base=bool(options.match_base) if options.match_base is not None else base.match_base,
        nocase=bool(options.nocase) if options.nocase is not None else base.nocase,
        noglobstar=base.noglobstar,
        nobrace=base.nobrace,
        noext=base.noext,
    )


def _rules(options: Options, config: PruneGlobConfig | None) -> tuple[Rule, ...] | None:
    if options.no_validate:
        return ()
    return config.rules() if config else None


def _root(options: Options, config_path: Path | None, explicit_flags: set[str]) -> str:
    """The root to scan. A root from the config file is relative to that file."""
    if options.root is None:
        return "."
    if "root" in explicit_flags or config_path is None or options.root.startswith("%"):
        return options.root
    return os.path.join(config_path.parent, os.path.expanduser(options.root))


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the pruneglob CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for invalid input, 2 for filesystem errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("pruneglob")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config_path = find_config_file(Path.cwd())
        config = load_config(config_path) if config_path else None
        merge_cli_with_config(options, config, explicit_flags)
        includes, excludes = _collect_patterns(options, config)
        rules = _rules(options, config)
    except (ValueError, re.error, OSError) as e:
        # Covers ConfigError and TOML syntax errors.
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if options.check:
        violations = validate_pattern_array(includes, rules) + validate_pattern_array(
            excludes, rules
        )
        for violation in violations:
            print(violation)
        return 1 if violations else 0

    if not includes:
        print(
            "Error: No include patterns. Pass --include, --source, or set `include` in"
            " the config file. Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    root_spec = _root(options, config_path, explicit_flags)
    try:
        found = find_files(
            root_spec,
            includes,
            excludes,
            options=_match_options(options, config),
            rules=rules,
        )
    except PruneGlobError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    root = resolve_root(root_spec)
    for path in found:
        print(posixpath.relpath(path, root) if options.relative else path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

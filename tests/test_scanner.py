"""Tests for path filtering, directory scanning, and `find_files`."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from pruneglob import InvalidPatternError, MatchOptions, find_files, regex_rule
from pruneglob.scanner import filter_paths, list_directory, scan_directory
from pruneglob.types import ScanEntry


def _file(path: str) -> ScanEntry:
    return ScanEntry(path=path, is_dir=False, is_file=True)


def _dir(path: str) -> ScanEntry:
    return ScanEntry(path=path, is_dir=True, is_file=False)


def _paths(entries: list[ScanEntry]) -> list[str]:
    return [entry.path for entry in entries]


def _expected(root: Path, *rel_paths: str) -> list[str]:
    return [os.path.join(str(root), rel) for rel in rel_paths]


# filter_paths


def test_filter_requires_an_include():
    entries = [_file("/r/a.js"), _dir("/r/src")]
    assert filter_paths(entries, [], []) == []
    assert filter_paths(entries, [], ["!/r/**/*.js"]) == []


def test_filter_files_match_exactly_and_dirs_loosely():
    entries = [_file("/r/a.js"), _file("/r/b.md"), _dir("/r/src"), _dir("/r/lib")]
    assert _paths(filter_paths(entries, ["/r/src/**/*.js", "/r/*.js"], [])) == [
        "/r/a.js",
        "/r/src",
    ]


def test_filter_any_include_is_enough():
    entries = [_file("/r/src/a.js"), _file("/r/src/b.py"), _file("/r/src/c.md")]
    kept = filter_paths(entries, ["/r/src/*.js", "/r/src/*.py"], [])
    assert _paths(kept) == ["/r/src/a.js", "/r/src/b.py"]


def test_filter_exclude_and_negated_include_reject():
    entries = [_file("/r/a.js"), _file("/r/b.js"), _file("/r/c.js")]
    kept = filter_paths(entries, ["/r/*.js", "!/r/b.js"], ["/r/c.js"])
    assert _paths(kept) == ["/r/a.js"]


def test_filter_negated_exclude_wins_over_everything():
    entry = _file("/r/keep.js")
    includes = ["/r/*.js", "!/r/keep.js"]
    excludes = ["/r/*.js", "!/r/keep.js"]
    assert filter_paths([entry], includes, excludes) == [entry]


def test_filter_negated_exclude_only_rescues_included_paths():
    entry = _file("/r/keep.md")
    assert filter_paths([entry], ["/r/*.js"], ["!/r/keep.md"]) == []


def test_filter_excludes_do_not_prune_directories_by_prefix():
    entry = _dir("/r/src/deep")
    assert filter_paths([entry], ["/r/src/**/*.js"], ["/r/src/deep/**/*.js"]) == [entry]


def test_filter_exclude_matching_a_directory_exactly_prunes_it():
    entry = _dir("/r/src/deep")
    assert filter_paths([entry], ["/r/src/**/*.js"], ["/r/src/deep"]) == []


def test_filter_negated_exclude_keeps_excluded_directory_reachable():
    entry = _dir("/r/src/deep")
    kept = filter_paths([entry], ["/r/src/**/*.js"], ["/r/src/deep", "!/r/src/deep/keep.js"])
    assert kept == [entry]


# list_directory / scan_directory


def test_list_directory_sorted_with_kinds(find_fixture: Path):
    entries = list_directory(str(find_fixture / "src"))
    assert entries == [
        ScanEntry(str(find_fixture / "src" / "deep"), is_dir=True, is_file=False),
        ScanEntry(str(find_fixture / "src" / "src-file.js"), is_dir=False, is_file=True),
    ]


def test_scan_directory_with_rooted_patterns(find_fixture: Path):
    root = str(find_fixture)
    result = scan_directory(root, [f"{root}/tests/**/*.js"], [])
    assert result == _expected(find_fixture, "tests/deep/deep-file.js")


def test_scan_missing_directory_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        scan_directory(str(tmp_path / "missing"), ["*.js"], [])


def test_scan_does_not_descend_into_pruned_directories(
    find_fixture: Path, monkeypatch: pytest.MonkeyPatch
):
    import pruneglob.scanner as scanner

    listed: list[str] = []
    original = scanner.list_directory

    def recording_list_directory(dir_path: str) -> list[ScanEntry]:
        listed.append(dir_path)
        return original(dir_path)

    monkeypatch.setattr(scanner, "list_directory", recording_list_directory)
    find_files(find_fixture, ["./src/**/deeper/*.js"], [])
    assert listed == [str(find_fixture)] + _expected(
        find_fixture, "src", "src/deep", "src/deep/deeper"
    )


def test_excluded_directories_are_still_traversed(
    find_fixture: Path, monkeypatch: pytest.MonkeyPatch
):
    import pruneglob.scanner as scanner

    listed: list[str] = []
    original = scanner.list_directory

    def recording_list_directory(dir_path: str) -> list[ScanEntry]:
        listed.append(dir_path)
        return original(dir_path)

    monkeypatch.setattr(scanner, "list_directory", recording_list_directory)
    result = find_files(find_fixture, ["./src/**/*.js"], ["./src/deep/**/*.js"])
    assert result == _expected(find_fixture, "src/src-file.js")
    assert os.path.join(str(find_fixture), "src/deep/deeper") in listed


# find_files end to end


@pytest.mark.parametrize(
    ("includes", "excludes", "options", "expected"),
    [
        (
            ["./src/**/*.js"],
            [],
            None,
            ["src/deep/deep-file.js", "src/deep/deeper/deeper-file.js", "src/src-file.js"],
        ),
        (["./src/**/deeper/*.js"], [], None, ["src/deep/deeper/deeper-file.js"]),
        (
            ["./src/**/*.js"],
            ["./src/**/deeper/*.js"],
            None,
            ["src/deep/deep-file.js", "src/src-file.js"],
        ),
        (
            ["./src/*.js", "./src/**/deeper/*.js"],
            [],
            None,
            ["src/deep/deeper/deeper-file.js", "src/src-file.js"],
        ),
        (
            ["./src/**/deeper/*.js", "./src/*.js"],
            [],
            None,
            ["src/deep/deeper/deeper-file.js", "src/src-file.js"],
        ),
        (
            ["./src/*.js", "./tests/**/*.js", "root-file.js"],
            [],
            None,
            ["src/src-file.js", "tests/deep/deep-file.js"],
        ),
        (
            ["./src/*.js", "./tests/**/*.js", "./*.json"],
            [],
            None,
            ["package.json", "src/src-file.js", "tests/deep/deep-file.js"],
        ),
        (
            ["./src/**/*.js", "./src/deep/*.js"],
            [],
            None,
            ["src/deep/deep-file.js", "src/deep/deeper/deeper-file.js", "src/src-file.js"],
        ),
        (
            ["./src/**/*.js", "!./src/**/deeper/*.js"],
            [],
            None,
            ["src/deep/deep-file.js", "src/src-file.js"],
        ),
        (
            ["./src/**/*.js"],
            ["./src/deep/**/*.js", "!./src/**/deeper/*.js"],
            None,
            ["src/deep/deeper/deeper-file.js", "src/src-file.js"],
        ),
        ([], ["!./src/**/deeper/*.js"], None, []),
        (
            ["deep-file.js"],
            ["./node_modules/**/*.js"],
            MatchOptions(match_base=True),
            ["src/deep/deep-file.js", "tests/deep/deep-file.js"],
        ),
        (["./*.js"], [], MatchOptions(dot=True), [".dot-file.js", "root-file.js"]),
        (["./*.js"], [], None, ["root-file.js"]),
    ],
)
def test_find_files(
    find_fixture: Path,
    includes: list[str],
    excludes: list[str],
    options: MatchOptions | None,
    expected: list[str],
):
    assert find_files(find_fixture, includes, excludes, options) == _expected(
        find_fixture, *expected
    )


def test_find_files_accepts_string_root(find_fixture: Path):
    assert find_files(str(find_fixture), ["./*.json"]) == _expected(find_fixture, "package.json")


def test_find_files_relative_root(find_fixture: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(find_fixture)
    assert find_files("src", ["./*.js"], []) == _expected(find_fixture, "src/src-file.js")


def test_find_files_without_default_rules(find_fixture: Path):
    result = find_files(find_fixture, ["./**/deep-file.js"], [], rules=())
    assert result == _expected(
        find_fixture,
        "node_modules/deep/deep-file.js",
        "src/deep/deep-file.js",
        "tests/deep/deep-file.js",
    )


@pytest.mark.parametrize(
    ("includes", "excludes"),
    [
        (["./**"], []),
        ([], ["c:\\"]),
        (["**"], ["./**"]),
        (["./"], []),
        (["../outside/*.js"], []),
    ],
)
def test_find_files_invalid_patterns(find_fixture: Path, includes: list[str], excludes: list[str]):
    with pytest.raises(InvalidPatternError) as exc:
        find_files(find_fixture, includes, excludes)
    assert str(exc.value) == (
        "One or more glob patterns you have entered are invalid.  Cannot continue."
    )


def test_find_files_custom_rule(find_fixture: Path):
    reject_all = regex_rule("reject-all", "contains one or more characters", r".+")
    with pytest.raises(InvalidPatternError):
        find_files(find_fixture, ["./package.json"], [], rules=[reject_all])


def test_find_files_reports_every_violation(
    find_fixture: Path, caplog: pytest.LogCaptureFixture
):
    with caplog.at_level(logging.ERROR, logger="pruneglob"):
        with pytest.raises(InvalidPatternError) as exc:
            find_files(find_fixture, ["**", "./ok/*.js"], ["./**", "../up.js"])
    assert [v.pattern for v in exc.value.violations] == ["**", "./**", "../up.js"]
    assert caplog.messages == [
        "Pattern '**' contains a leading wildcard.",
        "Pattern './**' contains a leading wildcard.",
        "Pattern '../up.js' contains a reference to a parent directory.",
    ]


def test_find_files_validates_before_touching_the_filesystem(tmp_path: Path):
    with pytest.raises(InvalidPatternError):
        find_files(tmp_path / "does-not-exist", ["./**"], [])


def test_find_files_missing_root(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        find_files(tmp_path / "does-not-exist", ["./*.js"], [])


def test_find_files_follows_directory_symlinks(find_fixture: Path):
    (find_fixture / "linked").symlink_to(find_fixture / "src" / "deep", target_is_directory=True)
    result = find_files(find_fixture, ["./linked/*.js"], [])
    assert result == _expected(find_fixture, "linked/deep-file.js")


def test_find_files_package_root():
    import pruneglob

    result = find_files("%pruneglob", ["./scanner.py"], [])
    assert result == [os.path.join(os.path.dirname(pruneglob.__file__), "scanner.py")]


def test_repeated_scans_see_filesystem_changes(find_fixture: Path):
    assert find_files(find_fixture, ["./src/*.js"]) == _expected(find_fixture, "src/src-file.js")
    (find_fixture / "src" / "new-file.js").write_text("// new\n")
    assert find_files(find_fixture, ["./src/*.js"]) == _expected(
        find_fixture, "src/new-file.js", "src/src-file.js"
    )


@pytest.mark.parametrize("dirname", ["[id]", "(group)", "{a,b}", "@(x)"])
def test_find_files_root_with_glob_characters(tmp_path: Path, dirname: str):
    root = tmp_path / "app" / dirname
    (root / "src").mkdir(parents=True)
    (root / "src" / "page.js").write_text("// page\n")
    (root / "other.js").write_text("// other\n")
    assert find_files(root, ["./src/*.js"], []) == _expected(root, "src/page.js")
    assert find_files(root, ["./**/*.js"], ["./other.js"], rules=()) == _expected(
        root, "src/page.js"
    )


def test_find_files_brace_group_spanning_directories(find_fixture: Path):
    result = find_files(find_fixture, ["./{src/deep,tests/deep}/*.js"], [], rules=())
    assert result == _expected(find_fixture, "src/deep/deep-file.js", "tests/deep/deep-file.js")
    result = find_files(find_fixture, ["./{src/deep,tests}/*.js"], [], rules=())
    assert result == _expected(find_fixture, "src/deep/deep-file.js")

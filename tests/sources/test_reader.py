"""Tests for glob resolution and concurrent file reading."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from patternkit.exceptions import ParseError, ResourceCollisionError
from patternkit.markdown.parsers import DEFAULT_PARSERS, ParserRule
from patternkit.sources.reader import (
    get_dirs,
    get_files,
    match_parser,
    read_file_tree,
    read_files,
    read_files_keyed,
)
from patternkit.utils.paths import keyname


def _upper(text: str, filepath: str) -> str:
    return text.upper()


def _lower(text: str, filepath: str) -> str:
    return text.lower()


def _fallback(text: str, filepath: str) -> dict:
    return {"contents": text, "fallback": True}


@pytest.fixture
def files(tmp_path: Path) -> Path:
    (tmp_path / "one").mkdir()
    (tmp_path / "two").mkdir()
    (tmp_path / "one" / "a.html").write_text("Alpha", encoding="utf-8")
    (tmp_path / "one" / "01-b.txt").write_text("Beta", encoding="utf-8")
    (tmp_path / "two" / "b.html").write_text("Other Beta", encoding="utf-8")
    return tmp_path


def test_match_parser_first_matching_rule_wins() -> None:
    parsers = [
        ParserRule("upper", _upper, r"\.html$"),
        ParserRule("lower", _lower, r"\.(html|txt)$"),
    ]

    assert match_parser("x/a.html", parsers) is _upper
    assert match_parser("x/a.txt", parsers) is _lower


def test_match_parser_falls_back_to_default_rule() -> None:
    parsers = [ParserRule("upper", _upper, r"\.html$"), ParserRule("default", _fallback)]

    assert match_parser("x/a.json", parsers) is _fallback


def test_match_parser_identity_without_default() -> None:
    parse_fn = match_parser("x/a.json", [ParserRule("upper", _upper, r"\.html$")])

    assert parse_fn("raw", "x/a.json") == {"contents": "raw"}


def test_get_files_and_dirs(files: Path) -> None:
    found = get_files([str(files / "**" / "*.html"), str(files / "one" / "*.html")])
    dirs = get_dirs(str(files / "*.html"))

    assert sorted(Path(path).name for path in found) == ["a.html", "b.html"]
    assert sorted(Path(path).name for path in dirs) == ["one", "two"]


def test_read_files_wraps_strings_and_adds_path(files: Path) -> None:
    parsers = [ParserRule("upper", _upper, r"\.html$")]

    records = asyncio.run(read_files(str(files / "one" / "*"), parsers=parsers))

    by_name = {Path(record["path"]).name: record for record in records}
    assert by_name["a.html"] == {"contents": "ALPHA", "path": str(files / "one" / "a.html")}
    assert by_name["01-b.txt"]["contents"] == "Beta"


def test_read_files_parses_front_matter_by_default(tmp_path: Path) -> None:
    (tmp_path / "p.html").write_text("---\ntitle: Hi\n---\n<p>Body</p>\n", encoding="utf-8")

    [record] = asyncio.run(read_files(str(tmp_path / "*.html")))

    assert record["data"] == {"title": "Hi"}
    assert record["contents"].strip() == "<p>Body</p>"


def test_read_files_raises_parse_error(tmp_path: Path) -> None:
    (tmp_path / "broken.yaml").write_text("key: [unclosed\n", encoding="utf-8")

    with pytest.raises(ParseError) as excinfo:
        asyncio.run(read_files(str(tmp_path / "*.yaml"), parsers=DEFAULT_PARSERS))

    assert "broken.yaml" in str(excinfo.value)


def test_read_files_keyed_later_file_wins(files: Path) -> None:
    globs = [str(files / "one" / "*"), str(files / "two" / "*")]

    keyed = asyncio.run(read_files_keyed(globs, parsers=[]))

    assert set(keyed) == {"a", "b"}
    assert keyed["b"]["contents"] == "Other Beta"


def test_read_file_tree_nests_by_directory_and_assigns_ids(files: Path) -> None:
    tree = asyncio.run(read_file_tree(str(files / "**" / "*.html"), files, "templates", parsers=[]))

    assert set(tree) == {"one", "two"}
    assert tree["one"]["a"]["id"] == "templates.one.a"
    assert tree["two"]["b"]["contents"] == "Other Beta"


def test_read_files_keyed_forwards_key_options(files: Path) -> None:
    keyed = asyncio.run(
        read_files_keyed(str(files / "one" / "*"), parsers=[], key_opts={"strip_numbers": False})
    )

    assert set(keyed) == {"a", "01-b"}


def test_glob_options_are_passed_to_glob(files: Path) -> None:
    (files / "one" / ".secret.html").write_text("Hidden", encoding="utf-8")

    default = get_files(str(files / "one" / "*.html"))
    with_hidden = get_files(str(files / "one" / "*.html"), {"include_hidden": True})
    rooted = get_files("*.html", {"root_dir": files / "one"})

    assert sorted(Path(path).name for path in default) == ["a.html"]
    assert sorted(Path(path).name for path in with_hidden) == [".secret.html", "a.html"]
    assert rooted == [str(files / "one" / "a.html")]


def test_shared_semaphore_bounds_concurrent_reads(files: Path) -> None:
    class CountingSemaphore(asyncio.Semaphore):
        acquired = 0

        async def acquire(self):
            type(self).acquired += 1
            return await super().acquire()

    async def read_both():
        semaphore = CountingSemaphore(1)
        return await asyncio.gather(
            read_files(str(files / "one" / "*"), parsers=[], semaphore=semaphore),
            read_files(str(files / "two" / "*"), parsers=[], semaphore=semaphore),
        )

    one, two = asyncio.run(read_both())

    assert len(one) + len(two) == 3
    assert CountingSemaphore.acquired == 3


def test_read_file_tree_rejects_file_next_to_same_named_directory(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs.html").write_text("Docs", encoding="utf-8")
    (tmp_path / "docs" / "intro.html").write_text("Intro", encoding="utf-8")

    with pytest.raises(ResourceCollisionError) as excinfo:
        asyncio.run(read_file_tree(str(tmp_path / "**" / "*.html"), tmp_path, "pages", parsers=[]))

    assert excinfo.value.resource_id == "pages.docs"
    assert excinfo.value.first.endswith("docs.html")
    assert excinfo.value.second.endswith("intro.html")


def test_read_file_tree_rejects_directory_placed_before_same_named_file(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "intro.html").write_text("Intro", encoding="utf-8")
    (tmp_path / "zdocs.html").write_text("Docs", encoding="utf-8")

    def strip_z(path: str) -> str:
        return keyname(path).removeprefix("z")

    with pytest.raises(ResourceCollisionError) as excinfo:
        asyncio.run(
            read_file_tree(str(tmp_path / "**" / "*.html"), tmp_path, "pages", key_fn=strip_z, parsers=[])
        )

    assert excinfo.value.resource_id == "pages.docs"
    assert excinfo.value.first.endswith("intro.html")
    assert excinfo.value.second.endswith("zdocs.html")

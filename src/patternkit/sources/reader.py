"""Glob resolution and concurrent file reading.

Files matched by a glob are read concurrently and each one is run through
the first matching content parser. The order of returned records follows
glob resolution and carries no meaning: identity and ordering are always
re-derived from each record's own path downstream.
"""

from __future__ import annotations

import asyncio
import glob as globlib
import logging
import os
import re
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from patternkit.exceptions import ParseError, ResourceCollisionError
from patternkit.markdown.parsers import DEFAULT_PARSERS, ParseFn, ParserRule
from patternkit.utils.objects import deep_get, deep_obj, iter_leaves
from patternkit.utils.paths import keyname, relative_path_array

logger = logging.getLogger(__name__)

Glob = str | Sequence[str]
KeyFn = Callable[..., str]
GlobOpts = Mapping[str, Any]

DEFAULT_MAX_CONCURRENCY = 32


def _as_list(glob: Glob) -> list[str]:
    return [glob] if isinstance(glob, str) else list(glob)


def _resolve(
    patterns: Sequence[str],
    accept: Callable[[str], bool],
    glob_opts: GlobOpts | None = None,
) -> list[str]:
    options = {"recursive": True, **(glob_opts or {})}
    root_dir = options.get("root_dir")
    seen: set[str] = set()
    matches: list[str] = []
    for pattern in patterns:
        for match in globlib.glob(pattern, **options):
            # Results are relative to root_dir when one is given.
            path = os.path.join(os.fspath(root_dir), match) if root_dir else match
            if path not in seen and accept(path):
                seen.add(path)
                matches.append(path)
    return matches


def get_files(glob: Glob, glob_opts: GlobOpts | None = None) -> list[str]:
    """Return the files (not directories) matching a glob or list of globs.

    ``glob_opts`` are passed to :func:`glob.glob` (``include_hidden``,
    ``root_dir``...). ``recursive`` defaults to True.
    """
    return _resolve(_as_list(glob), os.path.isfile, glob_opts)


def get_dirs(glob: Glob, glob_opts: GlobOpts | None = None) -> list[str]:
    """Return the directories next to whatever ``glob`` would match.

    Each glob is rewritten to ``<its parent>/*/`` before resolution, so
    ``src/patterns/*.html`` yields the subdirectories of ``src/patterns``.
    """
    dir_globs = [os.path.join(os.path.dirname(pattern), "*", "") for pattern in _as_list(glob)]
    return [os.path.normpath(match) for match in _resolve(dir_globs, os.path.isdir, glob_opts)]


def _identity_parser(text: str, filepath: str) -> dict[str, Any]:
    return {"contents": text}


def match_parser(filepath: str, parsers: Sequence[ParserRule] = ()) -> ParseFn:
    """Return the parse function for ``filepath``.

    Rules with a pattern are tested top to bottom and the first match wins.
    Failing that, the rule named ``default`` is used if present, otherwise
    a parser that keeps the raw text as ``contents``.
    """
    default: ParseFn | None = None
    for rule in parsers:
        if rule.pattern is None:
            if rule.name == "default" and default is None:
                default = rule.parse_fn
            continue
        if re.search(rule.pattern, filepath):
            return rule.parse_fn
    return default or _identity_parser


async def _read_record(
    filepath: str,
    parsers: Sequence[ParserRule],
    encoding: str,
    semaphore: asyncio.Semaphore,
) -> dict[str, Any]:
    async with semaphore:
        try:
            text = await asyncio.to_thread(Path(filepath).read_text, encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseError(filepath, str(exc)) from exc

    parse_fn = match_parser(filepath, parsers)
    try:
        parsed = parse_fn(text, filepath)
    except Exception as exc:
        raise ParseError(filepath, f"{type(exc).__name__}: {exc}") from exc

    record = {"contents": parsed} if isinstance(parsed, str) else dict(parsed)
    record["path"] = filepath
    return record


async def read_files(
    glob: Glob,
    *,
    parsers: Sequence[ParserRule] = DEFAULT_PARSERS,
    encoding: str = "utf-8",
    glob_opts: GlobOpts | None = None,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    semaphore: asyncio.Semaphore | None = None,
) -> list[dict[str, Any]]:
    """Read every file matching ``glob`` and parse it.

    Args:
        glob: A glob or list of globs.
        parsers: Ordered parser rules, see :func:`match_parser`.
        encoding: Text encoding of the source files.
        glob_opts: Keyword arguments for :func:`glob.glob`.
        max_concurrency: Upper bound on files being read at the same time.
        semaphore: Shared limit to use instead of ``max_concurrency``, so
            several concurrent reads stay under one bound.

    Returns:
        One record per file: the parser's fields plus ``path``.

    Raises:
        ParseError: If any file cannot be read or parsed. The whole batch fails.

    """
    paths = get_files(glob, glob_opts)
    logger.debug("Reading %d file(s) for %s", len(paths), glob)
    if semaphore is None:
        semaphore = asyncio.Semaphore(max_concurrency)
    records = await asyncio.gather(
        *(_read_record(filepath, parsers, encoding, semaphore) for filepath in paths)
    )
    return list(records)


async def read_files_keyed(
    glob: Glob,
    *,
    key_fn: KeyFn = keyname,
    key_opts: Mapping[str, Any] | None = None,
    parsers: Sequence[ParserRule] = DEFAULT_PARSERS,
    encoding: str = "utf-8",
    glob_opts: GlobOpts | None = None,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    semaphore: asyncio.Semaphore | None = None,
) -> dict[str, dict[str, Any]]:
    """Like :func:`read_files`, but keyed by ``key_fn(path, **key_opts)``.

    When two files produce the same key the one resolved later wins.
    """
    records = await read_files(
        glob,
        parsers=parsers,
        encoding=encoding,
        glob_opts=glob_opts,
        max_concurrency=max_concurrency,
        semaphore=semaphore,
    )
    keyed: dict[str, dict[str, Any]] = {}
    for record in records:
        key = key_fn(record["path"], **(key_opts or {}))
        if key in keyed:
            logger.debug("Key '%s' from %s replaces %s", key, record["path"], keyed[key]["path"])
        keyed[key] = record
    return keyed


def is_record(value: Any) -> bool:
    """Return True if ``value`` is a file record produced by the reader."""
    return isinstance(value, Mapping) and "path" in value and "contents" in value


def _first_path(subtree: Mapping[str, Any]) -> str:
    for _, record in iter_leaves(subtree, is_record):
        return record["path"]
    return "<empty directory>"


def _place_record(
    tree: dict[str, Any], root_key: str, directories: list[str], key: str, record: dict[str, Any]
) -> None:
    """Store ``record`` at ``directories + [key]``; files and directories never share a key."""
    for depth in range(1, len(directories) + 1):
        node = deep_get(directories[:depth], tree)
        if is_record(node):
            resource_id = ".".join([root_key, *directories[:depth]])
            raise ResourceCollisionError(resource_id, node["path"], record["path"])

    parent = deep_obj(directories, tree)
    existing = parent.get(key)
    if isinstance(existing, Mapping) and not is_record(existing):
        raise ResourceCollisionError(record["id"], _first_path(existing), record["path"])
    if existing is not None:
        logger.debug("Key '%s' from %s replaces %s", record["id"], record["path"], existing["path"])
    parent[key] = record


async def read_file_tree(
    glob: Glob,
    basedir: str | Path,
    root_key: str,
    *,
    key_fn: KeyFn = keyname,
    key_opts: Mapping[str, Any] | None = None,
    parsers: Sequence[ParserRule] = DEFAULT_PARSERS,
    encoding: str = "utf-8",
    glob_opts: GlobOpts | None = None,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    semaphore: asyncio.Semaphore | None = None,
) -> dict[str, Any]:
    """Read files into a nested dict mirroring the directories below ``basedir``.

    Each record gains an ``id``: ``root_key``, the directories below
    ``basedir`` and the file's key, joined with dots.

    Raises:
        ResourceCollisionError: If a file's key equals the name of a sibling
            directory (``docs.html`` next to ``docs/``).

    """
    records = await read_files(
        glob,
        parsers=parsers,
        encoding=encoding,
        glob_opts=glob_opts,
        max_concurrency=max_concurrency,
        semaphore=semaphore,
    )
    tree: dict[str, Any] = {}
    for record in sorted(records, key=lambda r: r["path"]):
        directories = relative_path_array(record["path"], basedir)[1:]
        key = key_fn(record["path"], **(key_opts or {}))
        record["id"] = ".".join([root_key, *directories, key])
        _place_record(tree, root_key, directories, key, record)
    return tree

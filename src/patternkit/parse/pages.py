"""Parse page files into a tree of :class:`~patternkit.model.Page` nodes."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from patternkit.exceptions import ReservedPropertyError
from patternkit.model import Page
from patternkit.sources.reader import is_record, read_file_tree
from patternkit.utils.paths import title_case

if TYPE_CHECKING:
    from patternkit.config.settings import PatternkitConfig

RESERVED_PAGE_KEYS = ("id",)


def _to_page(key: str, record: Mapping[str, Any]) -> Page:
    data = dict(record.get("data") or {})
    for reserved in RESERVED_PAGE_KEYS:
        if reserved in data:
            raise ReservedPropertyError(reserved, record["path"])
    contents = record.get("contents")
    return Page(
        id=record["id"],
        name=data.get("name") or title_case(key),
        data=data,
        contents=contents if isinstance(contents, str) else "",
        path=record["path"],
    )


def build_page_tree(records: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a tree of file records (from ``read_file_tree``) into pages."""
    return {
        key: _to_page(key, value) if is_record(value) else build_page_tree(value)
        for key, value in records.items()
    }


def iter_pages(tree: Mapping[str, Any]) -> Iterator[Page]:
    for value in tree.values():
        if isinstance(value, Page):
            yield value
        else:
            yield from iter_pages(value)


async def parse_pages(
    config: PatternkitConfig, *, semaphore: asyncio.Semaphore | None = None
) -> dict[str, Any]:
    """Read the configured page sources into a page tree."""
    source = config.src.pages
    records = await read_file_tree(
        config.resolve_globs(source.glob),
        config.resolve_path(source.basedir),
        config.keys.pages,
        max_concurrency=config.max_concurrency,
        semaphore=semaphore,
    )
    return build_page_tree(records)

"""Template and data trees."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from patternkit.sources.reader import is_record, read_file_tree

if TYPE_CHECKING:
    from patternkit.config.settings import PatternkitConfig

logger = logging.getLogger(__name__)


async def parse_templates(
    config: PatternkitConfig, *, semaphore: asyncio.Semaphore | None = None
) -> dict[str, Any]:
    """Read layouts and partials into a tree of file records keyed by directory."""
    source = config.src.templates
    templates = await read_file_tree(
        config.resolve_globs(source.glob),
        config.resolve_path(source.basedir),
        config.keys.templates,
        max_concurrency=config.max_concurrency,
        semaphore=semaphore,
    )
    logger.debug("Loaded templates: %s", sorted(templates))
    return templates


def _contents_only(tree: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: value["contents"] if is_record(value) else _contents_only(value)
        for key, value in tree.items()
    }


async def parse_data(
    config: PatternkitConfig, *, semaphore: asyncio.Semaphore | None = None
) -> dict[str, Any]:
    """Read data files into a tree of their parsed contents."""
    source = config.src.data
    tree = await read_file_tree(
        config.resolve_globs(source.glob),
        config.resolve_path(source.basedir),
        config.keys.data,
        max_concurrency=config.max_concurrency,
        semaphore=semaphore,
    )
    return _contents_only(tree)

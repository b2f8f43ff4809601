"""Build orchestration.

Phases run strictly in order: every source file is read, then the pattern
tree is built, then collections and pages are rendered, then the results
are written. Each phase hands its output to the next and keeps no
reference to it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from patternkit.config.settings import PatternkitConfig
from patternkit.model import Namespace
from patternkit.output.writer import write_collections, write_pages
from patternkit.parse.pages import parse_pages
from patternkit.parse.patterns import build_pattern_tree, read_pattern_records
from patternkit.parse.resources import parse_data, parse_templates
from patternkit.render.collections import render_tree
from patternkit.render.pages import render_pages
from patternkit.render.templates import TemplateRenderer
from patternkit.utils.async_utils import run_sync

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Everything a build produced."""

    patterns: Namespace
    pages: dict[str, Any]
    templates: dict[str, Any]
    data: dict[str, Any]
    written: list[Path] = field(default_factory=list)


async def _read_sources(config: PatternkitConfig):
    # One limit across all sources: max_concurrency bounds the whole build.
    semaphore = asyncio.Semaphore(config.max_concurrency)
    return await asyncio.gather(
        read_pattern_records(config, semaphore=semaphore),
        parse_pages(config, semaphore=semaphore),
        parse_templates(config, semaphore=semaphore),
        parse_data(config, semaphore=semaphore),
    )


def build(config: PatternkitConfig, *, write: bool = True) -> BuildResult:
    """Run a full build for ``config``.

    Args:
        config: Build configuration.
        write: If False, render everything but write nothing.

    Raises:
        PatternkitError: Any fatal error aborts the whole build.

    """
    started = time.perf_counter()
    pattern_records, pages, templates, data = run_sync(_read_sources(config))
    logger.info("Read %d pattern file(s)", len(pattern_records))

    patterns = build_pattern_tree(config, pattern_records)

    renderer = TemplateRenderer(templates)
    options = config.model_dump(mode="json")
    site: dict[str, Any] = {"data": data, "pages": pages, "options": options}
    patterns = render_tree(
        patterns,
        templates,
        layout_key=config.layouts.collection,
        renderer=renderer,
        site=site,
        options=options,
    )
    site["patterns"] = patterns
    pages = render_pages(
        pages,
        templates,
        layout_key=config.layouts.page,
        renderer=renderer,
        site=site,
        options=options,
    )

    result = BuildResult(patterns=patterns, pages=pages, templates=templates, data=data)
    if write:
        result.written.extend(write_collections(patterns, config.patterns_dest))
        result.written.extend(write_pages(pages, config.pages_dest))

    logger.info(
        "Build finished in %.2fs, %d file(s) written",
        time.perf_counter() - started,
        len(result.written),
    )
    return result

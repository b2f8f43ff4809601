"""Write rendered resources to ``resource_path(resource.id, dest)``."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from patternkit.exceptions import OutputWriteError
from patternkit.model import Namespace
from patternkit.parse.pages import iter_pages
from patternkit.utils.paths import resource_path

logger = logging.getLogger(__name__)


def write_resources(resources: Iterable[Any], dest: Path, *, encoding: str = "utf-8") -> list[Path]:
    """Write every resource that has string ``contents``; return the written paths."""
    written: list[Path] = []
    for resource in resources:
        if not isinstance(resource.contents, str):
            continue
        output_file = Path(resource_path(resource.id, dest))
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(resource.contents, encoding=encoding)
        except OSError as e:
            raise OutputWriteError(output_file, str(e)) from e
        logger.debug("Wrote %s -> %s", resource.id, output_file)
        written.append(output_file)
    return written


def write_collections(tree: Namespace, dest: Path) -> list[Path]:
    """Write every rendered collection of the pattern tree."""
    return write_resources(tree.collections(), dest)


def write_pages(pages: Mapping[str, Any], dest: Path) -> list[Path]:
    """Write every rendered page of the page tree."""
    return write_resources(iter_pages(pages), dest)

"""Helpers for parsing YAML front matter from source files."""

from __future__ import annotations

import logging
from typing import Any

import frontmatter

logger = logging.getLogger(__name__)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter using python-frontmatter.

    Args:
        content: File contents that may start with a ``---`` delimited block.

    Returns:
        Tuple of (metadata dict, body string). Metadata that is not a mapping
        is discarded with a warning.

    Raises:
        yaml.YAMLError: If the front matter block is not valid YAML.

    """
    parsed = frontmatter.loads(content)

    raw_metadata = parsed.metadata or {}
    if not isinstance(raw_metadata, dict):
        logger.warning("Front matter is not a mapping: %s", type(raw_metadata).__name__)
        metadata: dict[str, Any] = {}
    else:
        metadata = dict(raw_metadata)

    body = parsed.content if isinstance(parsed.content, str) else str(parsed.content)
    return metadata, body

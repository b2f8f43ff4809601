"""Content parsers for source files.

A parser takes ``(raw_text, filepath)`` and returns either a mapping of
fields or a plain string (which the reader wraps as ``{"contents": ...}``).
Parsers are selected by an ordered list of :class:`ParserRule`; the first
rule whose pattern matches the file path wins.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import yaml

from patternkit.markdown.frontmatter import parse_frontmatter
from patternkit.markdown.rendering import render_markdown

logger = logging.getLogger(__name__)

ParseFn = Callable[[str, str], Mapping[str, Any] | str]


@dataclass(frozen=True, slots=True)
class ParserRule:
    """A named parser applied to files whose path matches ``pattern``.

    A rule without a pattern only applies as the fallback, and only when
    it is named ``default``.
    """

    name: str
    parse_fn: ParseFn
    pattern: str | None = None


def parse_content(text: str, filepath: str) -> dict[str, Any]:
    """Split front matter from the body; the body is kept verbatim."""
    metadata, body = parse_frontmatter(text)
    return {"contents": body, "data": metadata}


def parse_markdown(text: str, filepath: str) -> dict[str, Any]:
    """Split front matter from the body and render the body to HTML."""
    metadata, body = parse_frontmatter(text)
    return {"contents": render_markdown(body), "data": metadata}


def parse_yaml(text: str, filepath: str) -> dict[str, Any]:
    return {"contents": yaml.safe_load(text)}


def parse_json(text: str, filepath: str) -> dict[str, Any]:
    return {"contents": json.loads(text)}


DEFAULT_PARSERS: tuple[ParserRule, ...] = (
    ParserRule("content", parse_content, r"\.(html?|j2|jinja2?)$"),
    ParserRule("markdown", parse_markdown, r"\.(md|markdown)$"),
    ParserRule("yaml", parse_yaml, r"\.ya?ml$"),
    ParserRule("json", parse_json, r"\.json$"),
    ParserRule("default", parse_content),
)

# Parsers for individual front matter fields, keyed by the name used in config.
FIELD_PARSERS: dict[str, Callable[[str], str]] = {
    "markdown": render_markdown,
}


def apply_field_parsers(data: Mapping[str, Any], field_parsers: Mapping[str, str]) -> dict[str, Any]:
    """Return a copy of ``data`` with configured string fields run through their parser.

    Args:
        data: Front matter of a single source file.
        field_parsers: Field name to parser name (a key of ``FIELD_PARSERS``).

    """
    parsed = dict(data)
    for field_name, parser_name in field_parsers.items():
        value = parsed.get(field_name)
        if isinstance(value, str):
            parsed[field_name] = FIELD_PARSERS[parser_name](value)
    return parsed

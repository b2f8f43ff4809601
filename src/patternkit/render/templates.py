"""Jinja2 adapter for rendering resources.

The template tree read from the templates source directory is flattened
into a ``DictLoader`` keyed by dotted id (``layouts.collection``), so
templates can include or extend one another by that id.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from jinja2 import DictLoader, Environment, TemplateError

from patternkit.exceptions import TemplateRenderError
from patternkit.markdown.rendering import render_markdown
from patternkit.sources.reader import is_record
from patternkit.utils.objects import flatten_tree
from patternkit.utils.paths import resource_path, title_case

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders template bodies with a shared Jinja2 environment.

    Supports:
    - Includes/inheritance between templates of the template tree
    - Custom filters (markdown, title_case, resource_path)
    """

    def __init__(self, templates: Mapping[str, Any] | None = None) -> None:
        """Initialize TemplateRenderer.

        Args:
            templates: Template tree as produced by ``parse_templates``.
                Every record's ``contents`` is registered under its dotted key.

        """
        sources = {
            key: record["contents"]
            for key, record in flatten_tree(templates or {}, is_record).items()
            if isinstance(record["contents"], str)
        }
        self.env = Environment(
            loader=DictLoader(sources),
            autoescape=False,  # Pattern contents are trusted HTML
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._register_filters()

    def _register_filters(self) -> None:
        self.env.filters["markdown"] = render_markdown
        self.env.filters["title_case"] = title_case
        self.env.filters["resource_path"] = resource_path

    def apply_template(
        self,
        layout_body: str,
        context: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        *,
        template_id: str = "<string>",
    ) -> str:
        """Render ``layout_body`` with ``context``.

        Args:
            layout_body: Jinja2 template source.
            context: Template variables.
            options: Build options, exposed to the template as ``options``
                unless the context already defines it.
            template_id: Name used in error messages.

        Raises:
            TemplateRenderError: If Jinja2 fails to compile or render the body.

        """
        variables = dict(context)
        if options is not None:
            variables.setdefault("options", options)
        try:
            return self.env.from_string(layout_body).render(**variables)
        except TemplateError as e:
            raise TemplateRenderError(template_id, str(e)) from e

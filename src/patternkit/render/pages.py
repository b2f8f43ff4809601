"""Render standalone pages.

A page body is itself a template: it is rendered first, then placed in its
layout as ``content``. The layout is the page's ``layout`` front matter
field or the configured default.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from patternkit.model import Page
from patternkit.parse.pages import iter_pages
from patternkit.render.collections import resolve_layout
from patternkit.render.context import resource_context
from patternkit.render.templates import TemplateRenderer

logger = logging.getLogger(__name__)


def render_page(
    page: Page,
    templates: Mapping[str, Any],
    *,
    layout_key: str,
    renderer: TemplateRenderer,
    site: Mapping[str, Any] | None = None,
    options: Mapping[str, Any] | None = None,
) -> Page:
    layout = resolve_layout(page.layout or layout_key, templates, page.id)
    context = resource_context(page, site)
    context["content"] = renderer.apply_template(page.contents, context, options, template_id=page.id)
    page.contents = renderer.apply_template(
        layout["contents"], context, options, template_id=layout.get("id", layout_key)
    )
    return page


def render_pages(
    pages: Mapping[str, Any],
    templates: Mapping[str, Any],
    *,
    layout_key: str,
    renderer: TemplateRenderer | None = None,
    site: Mapping[str, Any] | None = None,
    options: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a copy of the page tree with every page rendered into its layout."""
    rendered = copy.deepcopy(dict(pages))
    renderer = renderer or TemplateRenderer(templates)
    site_context = {**(site or {}), "pages": rendered}
    for page in iter_pages(rendered):
        logger.debug("Rendering page %s", page.id)
        render_page(
            page,
            templates,
            layout_key=layout_key,
            renderer=renderer,
            site=site_context,
            options=options,
        )
    return rendered

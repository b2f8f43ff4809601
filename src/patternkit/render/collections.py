"""Render an index page for every collection in the pattern tree."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from patternkit.exceptions import UnresolvedLayoutError
from patternkit.model import Collection, Namespace
from patternkit.render.context import resource_context
from patternkit.render.templates import TemplateRenderer
from patternkit.sources.reader import is_record
from patternkit.utils.objects import deep_get

logger = logging.getLogger(__name__)


def resolve_layout(
    layout_key: str, templates: Mapping[str, Any], resource_id: str | None = None
) -> dict[str, Any]:
    """Return the template record at ``layout_key``.

    Raises:
        UnresolvedLayoutError: If the template tree has no template there.

    """
    layout = deep_get(layout_key, templates)
    if not is_record(layout) or not isinstance(layout["contents"], str):
        raise UnresolvedLayoutError(layout_key, resource_id)
    return layout


def render_collection(
    collection: Collection,
    templates: Mapping[str, Any],
    *,
    layout_key: str,
    renderer: TemplateRenderer,
    site: Mapping[str, Any] | None = None,
    options: Mapping[str, Any] | None = None,
) -> Collection:
    """Render ``collection``'s layout and store the result in its ``contents``."""
    layout = resolve_layout(layout_key, templates, collection.id)
    collection.contents = renderer.apply_template(
        layout["contents"],
        resource_context(collection, site),
        options,
        template_id=layout.get("id", layout_key),
    )
    return collection


def _walk(namespace: Namespace, current_key: str, render) -> None:
    if namespace.collection is not None:
        logger.debug("Rendering collection %s (%s)", namespace.collection.id, current_key)
        render(namespace.collection)
    for key, child in namespace.children.items():
        _walk(child, key, render)


def render_tree(
    tree: Namespace,
    templates: Mapping[str, Any],
    *,
    layout_key: str,
    renderer: TemplateRenderer | None = None,
    site: Mapping[str, Any] | None = None,
    options: Mapping[str, Any] | None = None,
) -> Namespace:
    """Return a copy of ``tree`` in which every collection has rendered ``contents``.

    The walk is depth first and pre-order: a namespace's collection is
    rendered before its child namespaces. Patterns are left as they are.
    ``tree`` itself is not modified.

    Raises:
        UnresolvedLayoutError: If ``layout_key`` is missing from ``templates``.
        TemplateRenderError: If the layout fails to render.

    """
    rendered = copy.deepcopy(tree)
    renderer = renderer or TemplateRenderer(templates)
    site_context = {**(site or {}), "patterns": rendered}

    def render(collection: Collection) -> None:
        render_collection(
            collection,
            templates,
            layout_key=layout_key,
            renderer=renderer,
            site=site_context,
            options=options,
        )

    _walk(rendered, rendered.key, render)
    return rendered

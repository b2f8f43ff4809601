"""Template context for rendered resources."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields
from typing import Any


def resource_context(resource: Any, site: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Build the variables a resource's layout is rendered with.

    The resource's own fields are exposed at the top level (``name``,
    ``patterns``, ``data``...), the resource itself as ``resource``, and
    build-wide data (pattern tree, pages, data files, options) as ``site``.
    """
    context = {field.name: getattr(resource, field.name) for field in fields(resource)}
    context["resource"] = resource
    context["site"] = dict(site or {})
    return context

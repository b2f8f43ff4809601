"""Helpers for nested dictionaries addressed by dotted keys."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any


def deep_obj(path_keys: Iterable[str], obj: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Return (creating if necessary) the nested mapping at ``path_keys``.

    Works like ``mkdir -p``: missing levels are added to ``obj`` as empty
    dicts, existing ones are never replaced.

    >>> tree = {"foo": {}}
    >>> deep_obj(["foo", "bar"], tree)["baz"] = 1
    >>> tree
    {'foo': {'bar': {'baz': 1}}}
    """
    current = obj
    for key in path_keys:
        current = current.setdefault(key, {})
    return current


def deep_get(dotted: str | Iterable[str], obj: Mapping[str, Any]) -> Any:
    """Return the value at a dotted path inside ``obj``, or None when absent."""
    keys = dotted.split(".") if isinstance(dotted, str) else list(dotted)
    current: Any = obj
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


def iter_leaves(
    tree: Mapping[str, Any],
    is_leaf,
    prefix: tuple[str, ...] = (),
) -> Iterator[tuple[tuple[str, ...], Any]]:
    """Yield ``(key_path, value)`` for every value in ``tree`` matching ``is_leaf``."""
    for key, value in tree.items():
        path = (*prefix, key)
        if is_leaf(value):
            yield path, value
        elif isinstance(value, Mapping):
            yield from iter_leaves(value, is_leaf, path)


def flatten_tree(tree: Mapping[str, Any], is_leaf) -> dict[str, Any]:
    """Flatten ``tree`` into a dict keyed by dotted paths to its leaves."""
    return {".".join(path): value for path, value in iter_leaves(tree, is_leaf)}

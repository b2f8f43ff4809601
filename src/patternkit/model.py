"""Nodes of the pattern library tree.

The tree is a tagged union of three node kinds:

- :class:`Namespace`: a directory. Holds child namespaces and, when the
  directory directly contains pattern files, one :class:`Collection`.
- :class:`Collection`: the patterns found directly inside one directory.
- :class:`Pattern`: a single source file.

Standalone pages are modelled by :class:`Page`.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})


class ResourceType(str, Enum):
    """Discriminator for tree nodes."""

    PATTERN = "pattern"
    COLLECTION = "collection"
    NAMESPACE = "namespace"
    PAGE = "page"


@dataclass
class Pattern:
    id: str
    name: str
    data: dict[str, Any]
    contents: Any
    path: str
    resource_type: ResourceType = field(default=ResourceType.PATTERN, init=False)

    @property
    def hidden(self) -> bool:
        """True for a real boolean flag or a quoted one such as ``"yes"``; ``"false"`` is not hidden."""
        value = self.data.get("hidden", False)
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "data": self.data,
            "contents": self.contents,
            "path": self.path,
            "resourceType": self.resource_type.value,
        }


@dataclass
class Collection:
    """Patterns directly inside one directory.

    ``items`` holds every discovered pattern. ``patterns`` is the ordered,
    visible view over ``items`` computed by the builder; callers never
    modify it directly. ``contents`` stays None until the collection is
    rendered.
    """

    id: str
    name: str
    items: dict[str, Pattern] = field(default_factory=dict)
    patterns: list[Pattern] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)
    contents: str | None = None
    resource_type: ResourceType = field(default=ResourceType.COLLECTION, init=False)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "items": {key: pattern.to_dict() for key, pattern in self.items.items()},
            "patterns": [pattern.to_dict() for pattern in self.patterns],
            "data": self.data,
            "resourceType": self.resource_type.value,
        }
        if self.contents is not None:
            result["contents"] = self.contents
        return result


@dataclass
class Namespace:
    """A directory node. The tree root is a namespace keyed by the root key."""

    key: str
    id: str
    children: dict[str, Namespace] = field(default_factory=dict)
    collection: Collection | None = None
    resource_type: ResourceType = field(default=ResourceType.NAMESPACE, init=False)

    def child(self, key: str) -> Namespace:
        """Return the child namespace for ``key``, creating it if needed."""
        if key not in self.children:
            self.children[key] = Namespace(key=key, id=f"{self.id}.{key}")
        return self.children[key]

    def walk(self) -> Iterator[Namespace]:
        """Yield this namespace and every descendant, depth first, pre-order."""
        yield self
        for child in self.children.values():
            yield from child.walk()

    def collections(self) -> Iterator[Collection]:
        for namespace in self.walk():
            if namespace.collection is not None:
                yield namespace.collection

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {key: child.to_dict() for key, child in self.children.items()}
        if self.collection is not None:
            result["collection"] = self.collection.to_dict()
        return result


@dataclass
class Page:
    id: str
    name: str
    data: dict[str, Any]
    contents: str
    path: str
    resource_type: ResourceType = field(default=ResourceType.PAGE, init=False)

    @property
    def layout(self) -> str | None:
        return self.data.get("layout")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "data": self.data,
            "contents": self.contents,
            "path": self.path,
            "resourceType": self.resource_type.value,
        }

"""Pattern tree builder.

Folds the flat list of file records read from the patterns source directory
into a tree of :class:`~patternkit.model.Namespace` nodes, one
:class:`~patternkit.model.Collection` per directory that holds patterns.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from patternkit.exceptions import ReservedPropertyError
from patternkit.markdown.parsers import apply_field_parsers
from patternkit.model import Collection, Namespace, Pattern
from patternkit.sources.reader import read_files
from patternkit.utils.paths import keyname, relative_path_array, title_case

if TYPE_CHECKING:
    from patternkit.config.settings import PatternkitConfig

logger = logging.getLogger(__name__)

RESERVED_PATTERN_KEYS = frozenset({"id"})
RESERVED_COLLECTION_KEYS = frozenset({"id", "items", "patterns"})
COLLECTION_FILE = "collection"
ORDER_KEY = "order"
NAME_KEY = "name"

_DIGITS_RE = re.compile(r"(\d+)")


def natural_key(text: str) -> list[Any]:
    """Sort key that orders embedded numbers numerically (``item2`` < ``item10``)."""
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS_RE.split(text)]


def _check_reserved(data: Mapping[str, Any], reserved: frozenset[str], source: str) -> None:
    for key in sorted(reserved):
        if key in data:
            raise ReservedPropertyError(key, source)


def _collection_metadata(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return the mapping a collection metadata file contributes.

    Text files contribute their front matter; YAML and JSON files their
    parsed contents.
    """
    if isinstance(record.get("data"), Mapping):
        return dict(record["data"])
    if isinstance(record.get("contents"), Mapping):
        return dict(record["contents"])
    return {}


def _apply_metadata(collection: Collection, metadata: dict[str, Any]) -> None:
    metadata = dict(metadata)
    if NAME_KEY in metadata:
        collection.name = metadata.pop(NAME_KEY)
    if ORDER_KEY in metadata:
        collection.order = [str(key) for key in metadata.pop(ORDER_KEY) or []]
    collection.data.update(metadata)


def order_patterns(collection: Collection) -> list[Pattern]:
    """Return the visible patterns of ``collection`` in display order.

    Keys named in ``collection.order`` come first, in that order; the rest
    follow in natural key order. Hidden patterns are left out.
    """
    declared = [key for key in dict.fromkeys(collection.order) if key in collection.items]
    unknown = [key for key in collection.order if key not in collection.items]
    if unknown:
        logger.debug("Collection %s orders unknown pattern(s): %s", collection.id, unknown)
    remaining = sorted((key for key in collection.items if key not in declared), key=natural_key)
    ordered = [collection.items[key] for key in [*declared, *remaining]]
    return [pattern for pattern in ordered if not pattern.hidden]


class PatternTreeBuilder:
    """Builds the pattern tree from file records.

    Owns the tree while it is being built. Records are placed in path
    order so the result never depends on the order files were read in.
    Collection metadata is held back until :meth:`finalize` and only
    applied to directories that hold at least one pattern.
    """

    def __init__(
        self,
        *,
        root_key: str = "patterns",
        basedir: str | Path,
        key_fn: Callable[[str], str] = keyname,
        collection_file: str = COLLECTION_FILE,
    ) -> None:
        self.root_key = root_key
        self.basedir = basedir
        self.key_fn = key_fn
        self.collection_file = collection_file
        self.root = Namespace(key=root_key, id=root_key)
        self._pending_metadata: list[tuple[list[str], str, dict[str, Any]]] = []

    def _directories(self, path: str) -> list[str]:
        return relative_path_array(path, self.basedir)[1:]

    def _namespace_for(self, path: str) -> tuple[Namespace, str]:
        """Return the namespace for the directory holding ``path`` and its display name."""
        directories = self._directories(path)
        namespace = self.root
        for directory in directories:
            namespace = namespace.child(directory)
        display = directories[-1] if directories else self.root_key
        return namespace, display

    def _collection_for(self, path: str) -> Collection:
        namespace, display = self._namespace_for(path)
        if namespace.collection is None:
            namespace.collection = Collection(id=namespace.id, name=title_case(display))
        return namespace.collection

    def add_pattern(self, record: Mapping[str, Any]) -> Pattern:
        path = record["path"]
        data = dict(record.get("data") or {})
        _check_reserved(data, RESERVED_PATTERN_KEYS, path)

        collection = self._collection_for(path)
        key = self.key_fn(path)
        if key in collection.items:
            logger.warning(
                "Pattern key '%s' in %s is defined by both %s and %s; keeping the latter",
                key,
                collection.id,
                collection.items[key].path,
                path,
            )
        pattern = Pattern(
            id=f"{collection.id}.{key}",
            name=data.get(NAME_KEY) or title_case(key),
            data=data,
            contents=record.get("contents"),
            path=path,
        )
        collection.items[key] = pattern
        return pattern

    def add_collection_metadata(self, record: Mapping[str, Any]) -> None:
        path = record["path"]
        metadata = _collection_metadata(record)
        _check_reserved(metadata, RESERVED_COLLECTION_KEYS, path)
        self._pending_metadata.append((self._directories(path), path, metadata))

    def _existing_collection(self, directories: list[str]) -> Collection | None:
        namespace = self.root
        for directory in directories:
            child = namespace.children.get(directory)
            if child is None:
                return None
            namespace = child
        return namespace.collection

    def add(self, record: Mapping[str, Any]) -> None:
        if keyname(record["path"], strip_numbers=False) == self.collection_file:
            self.add_collection_metadata(record)
        else:
            self.add_pattern(record)

    def finalize(self) -> Namespace:
        for directories, path, metadata in self._pending_metadata:
            collection = self._existing_collection(directories)
            if collection is None:
                logger.debug("Ignoring %s: its directory holds no patterns", path)
                continue
            _apply_metadata(collection, metadata)
        self._pending_metadata.clear()
        for collection in self.root.collections():
            collection.patterns = order_patterns(collection)
        return self.root


def build_tree(
    records: Iterable[Mapping[str, Any]],
    *,
    root_key: str = "patterns",
    basedir: str | Path,
    key_fn: Callable[[str], str] = keyname,
    collection_file: str = COLLECTION_FILE,
) -> Namespace:
    """Build the pattern tree from file records.

    Args:
        records: Parsed file records, each with at least a ``path``.
        root_key: First segment of every resource id.
        basedir: Source directory the records were read from.
        key_fn: Derives a pattern's key from its path.
        collection_file: Basename (no extension) of per-directory
            collection metadata files.

    Returns:
        The root namespace.

    Raises:
        ReservedPropertyError: On the first record defining a reserved
            property. No partial tree is returned.

    """
    builder = PatternTreeBuilder(
        root_key=root_key, basedir=basedir, key_fn=key_fn, collection_file=collection_file
    )
    for record in sorted(records, key=lambda r: str(r["path"])):
        builder.add(record)
    return builder.finalize()


def find_pattern(tree: Namespace, pattern_id: str) -> Pattern | None:
    """Return the pattern addressed by ``pattern_id``, or None."""
    segments = pattern_id.split(".")
    if len(segments) < 2 or segments[0] != tree.key:
        return None
    namespace = tree
    for directory in segments[1:-1]:
        namespace = namespace.children.get(directory)
        if namespace is None:
            return None
    if namespace.collection is None:
        return None
    return namespace.collection.items.get(segments[-1])


def iter_patterns(tree: Namespace):
    for collection in tree.collections():
        yield from collection.items.values()


async def read_pattern_records(
    config: PatternkitConfig, *, semaphore: asyncio.Semaphore | None = None
) -> list[dict[str, Any]]:
    """Read the configured pattern sources, applying field parsers to front matter."""
    records = await read_files(
        config.resolve_globs(config.src.patterns.glob),
        max_concurrency=config.max_concurrency,
        semaphore=semaphore,
    )
    if config.field_parsers:
        for record in records:
            if isinstance(record.get("data"), Mapping):
                record["data"] = apply_field_parsers(record["data"], config.field_parsers)
    return records


def build_pattern_tree(config: PatternkitConfig, records: Iterable[Mapping[str, Any]]) -> Namespace:
    tree = build_tree(
        records,
        root_key=config.keys.patterns,
        basedir=config.resolve_path(config.src.patterns.basedir),
    )
    logger.info(
        "Built pattern tree: %d pattern(s) in %d collection(s)",
        sum(1 for _ in iter_patterns(tree)),
        sum(1 for _ in tree.collections()),
    )
    return tree


async def parse_patterns(config: PatternkitConfig) -> Namespace:
    """Read the configured pattern sources and build the pattern tree."""
    return build_pattern_tree(config, await read_pattern_records(config))

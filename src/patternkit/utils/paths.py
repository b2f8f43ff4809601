"""Path and identity helpers.

Every resource in the pattern library is addressed by a dotted *resource id*
(``patterns.components.button``) derived from its location on disk. The
helpers here turn file paths into keys and ids, and ids back into output
paths.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path, PurePath
from typing import Any

_LEADING_NUMBERS_RE = re.compile(r"^[0-9.\-]+")
_WHITESPACE_RE = re.compile(r"\s")
_WORD_RE = re.compile(r"\w\S*")

RESOURCE_EXTENSION = ".html"


def basename(filepath: str | Path) -> str:
    """Return the extension-less basename of ``filepath``.

    >>> basename("foo/bar/baz.txt")
    'baz'
    """
    return PurePath(filepath).stem


def dirname(filepath: str | Path) -> str:
    """Return the normalized directory portion of ``filepath``."""
    return os.path.normpath(os.path.dirname(os.fspath(filepath)))


def local_dirname(filepath: str | Path) -> str:
    """Return the name of the directory that contains ``filepath``.

    >>> local_dirname("foo/bar/baz.txt")
    'bar'
    """
    return PurePath(dirname(filepath)).name


def parent_dirname(filepath: str | Path) -> str:
    """Return the name of the parent of the directory containing ``filepath``.

    >>> parent_dirname("foo/bar/baz.txt")
    'foo'
    """
    return PurePath(dirname(filepath)).parent.name


def remove_leading_numbers(text: str) -> str:
    """Strip an ordering prefix such as ``01-`` or ``2.3.`` from ``text``."""
    return _LEADING_NUMBERS_RE.sub("", text)


def keyname(filepath: str | Path, *, strip_numbers: bool = True) -> str:
    """Return a property-friendly key for a file.

    Only the basename (without extension) is used, whitespace becomes ``-``
    and, unless ``strip_numbers`` is False, leading ordering numbers are
    removed.

    Examples:
        >>> keyname("src/patterns/01-intro.html")
        'intro'
        >>> keyname("01-intro.html", strip_numbers=False)
        '01-intro'

    """
    name = _WHITESPACE_RE.sub("-", basename(filepath))
    return remove_leading_numbers(name) if strip_numbers else name


def title_case(text: str) -> str:
    """Convert ``text`` to title case, treating ``-`` and ``_`` as spaces.

    >>> title_case("hello-world")
    'Hello World'
    """
    spaced = re.sub(r"[-_]", " ", text.lower())
    return _WORD_RE.sub(lambda match: match.group(0)[0].upper() + match.group(0)[1:], spaced)


def resource_path(resource_id: str, dest: str | Path = "") -> str:
    """Return the output path for a dotted resource id.

    The first id segment names the resource type (``patterns``, ``pages``)
    and is dropped when there is more than one segment. The last segment
    becomes the ``.html`` filename and the rest become directories.

    Examples:
        >>> resource_path("components.button.base")
        'button/base.html'
        >>> resource_path("pink")
        'pink.html'

    """
    segments = resource_id.split(".")
    if len(segments) > 1:
        segments = segments[1:]
    filename = f"{segments[-1]}{RESOURCE_EXTENSION}"
    return os.path.normpath(os.path.join(os.fspath(dest), *segments[:-1], filename))


def _find_segments(haystack: tuple[str, ...], needle: tuple[str, ...]) -> int:
    for index in range(len(haystack) - len(needle) + 1):
        if haystack[index : index + len(needle)] == needle:
            return index
    return -1


def relative_path_array(file_path: str | Path, from_path: str | Path) -> list[str]:
    """Return the directory names from ``from_path`` down to ``file_path``'s directory.

    The result starts with the last segment of ``from_path``. An absolute
    ``from_path`` must be a prefix of the file's directory; a relative one
    may sit anywhere inside it. An empty list is returned when
    ``from_path`` is not found or when both paths are the same.

    Examples:
        >>> relative_path_array("/foo/bar/baz/ding/dong/tink.txt", "baz")
        ['baz', 'ding', 'dong']
        >>> relative_path_array("/a/b/f.txt", "zzz")
        []

    """
    file_str = os.path.normpath(os.fspath(file_path))
    from_str = os.path.normpath(os.fspath(from_path))
    if not from_str or from_str == "." or file_str == from_str:
        return []

    dir_parts = PurePath(dirname(file_str)).parts
    from_parts = PurePath(from_str).parts
    if PurePath(from_str).is_absolute():
        index = 0 if dir_parts[: len(from_parts)] == from_parts else -1
    else:
        index = _find_segments(dir_parts, from_parts)
    if index < 0:
        return []
    return list(dir_parts[index + len(from_parts) - 1 :])


def common_root(paths: Iterable[str | Path]) -> str:
    """Return the deepest directory shared by every path in ``paths``.

    >>> common_root(["foo/bar/baz/ding/dong.html", "foo/bar/baz/oleo.html"])
    'foo/bar/baz'
    """
    directories = [dirname(path) for path in paths]
    if not directories:
        return ""
    return os.path.commonpath(directories)


def is_glob(candidate: Any) -> bool:
    """Return True if ``candidate`` looks like a glob: a non-empty string or list of strings."""
    if isinstance(candidate, str):
        return len(candidate) > 0
    if isinstance(candidate, (list, tuple)) and candidate:
        return all(isinstance(item, str) for item in candidate)
    return False

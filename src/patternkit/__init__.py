"""patternkit: build pattern library pages from a directory of front-matter fragments."""

from patternkit.builder import BuildResult, build
from patternkit.model import Collection, Namespace, Page, Pattern
from patternkit.parse.patterns import build_tree, find_pattern
from patternkit.render.collections import render_tree

__all__ = [
    "BuildResult",
    "Collection",
    "Namespace",
    "Page",
    "Pattern",
    "build",
    "build_tree",
    "find_pattern",
    "render_tree",
]

__version__ = "0.1.0"

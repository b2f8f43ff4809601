"""Utility helpers shared across patternkit."""

from patternkit.utils.objects import deep_get, deep_obj, flatten_tree
from patternkit.utils.paths import (
    common_root,
    is_glob,
    keyname,
    relative_path_array,
    resource_path,
    title_case,
)

__all__ = [
    "common_root",
    "deep_get",
    "deep_obj",
    "flatten_tree",
    "is_glob",
    "keyname",
    "relative_path_array",
    "resource_path",
    "title_case",
]

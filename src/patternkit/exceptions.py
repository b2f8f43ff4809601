"""Centralized exceptions for patternkit."""

from __future__ import annotations

from pathlib import Path


class PatternkitError(Exception):
    """Base exception for all patternkit errors."""


class ReservedPropertyError(PatternkitError):
    """Raised when source data defines a property the builder assigns itself."""

    def __init__(self, property_name: str, source: str | Path) -> None:
        self.property_name = property_name
        self.source = str(source)
        super().__init__(
            f"patternkit reserved property `{property_name}` must not be defined "
            f"in source data: {self.source}"
        )


class ParseError(PatternkitError):
    """Raised when a source file cannot be read or parsed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to parse '{self.path}': {reason}")


class UnresolvedLayoutError(PatternkitError):
    """Raised when a configured layout is missing from the template tree."""

    def __init__(self, layout_key: str, resource_id: str | None = None) -> None:
        self.layout_key = layout_key
        self.resource_id = resource_id
        message = f"Layout '{layout_key}' not found in the template tree"
        if resource_id:
            message += f" (needed by '{resource_id}')"
        super().__init__(message)


class TemplateRenderError(PatternkitError):
    """Raised when the template engine fails to render a resource."""

    def __init__(self, template_id: str, reason: str) -> None:
        self.template_id = template_id
        self.reason = reason
        super().__init__(f"Failed to render '{template_id}': {reason}")


class ConfigError(PatternkitError):
    """Raised when a configuration file cannot be loaded or parsed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to load or parse config at '{self.path}': {reason}")


class OutputWriteError(PatternkitError):
    """Raised when a rendered resource cannot be written to disk."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to write '{self.path}': {reason}")


class ResourceCollisionError(PatternkitError):
    """Raised when a file and a directory map to the same resource id."""

    def __init__(self, resource_id: str, first: str | Path, second: str | Path) -> None:
        self.resource_id = resource_id
        self.first = str(first)
        self.second = str(second)
        super().__init__(
            f"Resource '{resource_id}' is defined by both {self.first} and {self.second}; "
            "a file cannot share its name with a directory"
        )

"""Configuration for patternkit builds.

Settings come from three layers (highest priority first):

1. Environment variables: ``PATTERNKIT_SECTION__KEY``
   (e.g. ``PATTERNKIT_LAYOUTS__COLLECTION``)
2. ``.patternkit.toml`` in the site root
3. Defaults below

Relative paths and globs are resolved against ``paths.site_root``.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from patternkit.exceptions import ConfigError
from patternkit.markdown.parsers import FIELD_PARSERS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".patternkit.toml"
DEFAULT_MAX_CONCURRENCY = 32


def _deep_merge(destination: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge source into destination, with source values overwriting."""
    for key, value in source.items():
        if isinstance(value, Mapping) and isinstance(destination.get(key), Mapping):
            destination[key] = _deep_merge(dict(destination[key]), value)
        else:
            destination[key] = value
    return destination


class SourceSettings(BaseModel):
    """Where one kind of source file lives."""

    glob: list[str] = Field(description="Glob(s) matching the source files")
    basedir: Path = Field(description="Directory the resource ids are derived from")

    @field_validator("glob", mode="before")
    @classmethod
    def coerce_glob(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v


def _source(basedir: str, *extensions: str) -> SourceSettings:
    return SourceSettings(
        glob=[f"{basedir}/**/*.{extension}" for extension in extensions],
        basedir=Path(basedir),
    )


class SourcesSettings(BaseModel):
    patterns: SourceSettings = Field(
        default_factory=lambda: SourceSettings(
            glob=[
                "src/patterns/**/*.html",
                "src/patterns/**/*.md",
                "src/patterns/**/collection.yaml",
                "src/patterns/**/collection.yml",
            ],
            basedir=Path("src/patterns"),
        )
    )
    pages: SourceSettings = Field(default_factory=lambda: _source("src/pages", "html", "md"))
    templates: SourceSettings = Field(
        default_factory=lambda: _source("src/templates", "html", "j2", "jinja2")
    )
    data: SourceSettings = Field(default_factory=lambda: _source("src/data", "yaml", "yml", "json"))


class KeySettings(BaseModel):
    """Root key of each resource tree; the first segment of every resource id."""

    patterns: str = "patterns"
    pages: str = "pages"
    templates: str = "templates"
    data: str = "data"


class LayoutSettings(BaseModel):
    """Dotted paths into the template tree."""

    collection: str = Field(default="layouts.collection", description="Layout for collection pages")
    page: str = Field(default="layouts.page", description="Default layout for pages")


class DestSettings(BaseModel):
    """Output directories, relative to ``root`` unless absolute."""

    root: Path = Path("dist")
    patterns: Path = Path("patterns")
    pages: Path = Path(".")


class PathsSettings(BaseModel):
    site_root: Path = Field(
        default_factory=Path.cwd,
        description="Root directory of the site (defaults to current working directory)",
    )


class PatternkitConfig(BaseSettings):
    """Root configuration for a patternkit build."""

    paths: PathsSettings = Field(default_factory=PathsSettings)
    src: SourcesSettings = Field(default_factory=SourcesSettings)
    keys: KeySettings = Field(default_factory=KeySettings)
    layouts: LayoutSettings = Field(default_factory=LayoutSettings)
    dest: DestSettings = Field(default_factory=DestSettings)
    field_parsers: dict[str, str] = Field(
        default_factory=dict,
        description="Front matter field name -> parser name (e.g. notes = 'markdown')",
    )
    max_concurrency: int = Field(default=DEFAULT_MAX_CONCURRENCY, ge=1)

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix="PATTERNKIT_",
        env_nested_delimiter="__",
    )

    @field_validator("field_parsers")
    @classmethod
    def validate_field_parsers(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = sorted(set(v.values()) - set(FIELD_PARSERS))
        if unknown:
            msg = f"Unknown field parser(s) {unknown}; available: {sorted(FIELD_PARSERS)}"
            raise ValueError(msg)
        return v

    def resolve_path(self, path: str | Path) -> Path:
        path = Path(path)
        if path.is_absolute():
            return path
        return self.paths.site_root / path

    def resolve_globs(self, globs: list[str]) -> list[str]:
        return [str(self.resolve_path(glob)) for glob in globs]

    @property
    def dest_root(self) -> Path:
        return self.resolve_path(self.dest.root)

    @property
    def patterns_dest(self) -> Path:
        return self.dest_root / self.dest.patterns

    @property
    def pages_dest(self) -> Path:
        return self.dest_root / self.dest.pages

    @classmethod
    def load(cls, site_root: Path | None = None) -> PatternkitConfig:
        """Load configuration from ``.patternkit.toml`` and the environment.

        Raises:
            ConfigError: If the file is not valid TOML or fails validation.

        """
        root_path = site_root if site_root is not None else Path.cwd()
        config_file = root_path / CONFIG_FILENAME

        file_settings: dict[str, Any] = {}
        if config_file.is_file():
            try:
                with config_file.open("rb") as f:
                    file_settings = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(config_file, str(e)) from e
            logger.debug("Loaded configuration from %s", config_file)

        try:
            env_settings = cls().model_dump(exclude_unset=True)
            merged = _deep_merge(file_settings, env_settings)
            merged.setdefault("paths", {})["site_root"] = root_path
            return cls.model_validate(merged)
        except ValidationError as e:
            raise ConfigError(config_file, str(e)) from e


def load_config(site_root: Path | None = None) -> PatternkitConfig:
    """Load the configuration for the site at ``site_root`` (default: cwd)."""
    return PatternkitConfig.load(site_root)

"""Configuration loading."""

from patternkit.config.settings import PatternkitConfig, load_config

__all__ = ["PatternkitConfig", "load_config"]

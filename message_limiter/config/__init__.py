"""Configuration for message limiting."""

from .settings import LimiterConfig, get_default_config

__all__ = ["LimiterConfig", "get_default_config"]

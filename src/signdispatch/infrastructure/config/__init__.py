"""Configuration package."""

from signdispatch.infrastructure.config.loader import ConfigLoader, ActionConfig

__all__ = ["ConfigLoader", "ActionConfig"]

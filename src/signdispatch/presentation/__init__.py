"""Presentation layer package."""

from signdispatch.presentation.cli import main, create_orchestrator_from_config

__all__ = ["main", "create_orchestrator_from_config"]

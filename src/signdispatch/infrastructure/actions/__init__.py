"""GitHub Actions host integration package."""

from signdispatch.infrastructure.actions.outputs import ActionOutputs

__all__ = ["ActionOutputs"]

"""Application layer package."""

from signdispatch.application.dispatcher import WorkflowDispatcher, resolve_ref_name
from signdispatch.application.poller import WorkflowPoller
from signdispatch.application.orchestrator import DispatchOrchestrator

__all__ = [
    "WorkflowDispatcher",
    "resolve_ref_name",
    "WorkflowPoller",
    "DispatchOrchestrator",
]

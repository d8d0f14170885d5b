"""Dispatch flow: start a signing workflow for a source ref."""

from datetime import datetime
from typing import Callable, Optional

from signdispatch.domain.exceptions import ProtocolError, RefResolutionError
from signdispatch.domain.models import DispatchRequest, WorkflowStatus
from signdispatch.domain.protocols import ILogger, IWorkflowApi
from signdispatch.shared.logging import LoggerAdapter, get_logger

REF_PREFIXES = ("refs/heads/", "refs/tags/")


def resolve_ref_name(ref: Optional[str]) -> str:
    """
    Turn a triggering ref into the branch or tag name.

    Exactly one known prefix is stripped; any other ref passes through
    unchanged.

    Raises:
        RefResolutionError: If the ref is missing or blank
    """
    if ref is None or not ref.strip():
        raise RefResolutionError("Error retrieving ref name")

    for prefix in REF_PREFIXES:
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


class WorkflowDispatcher:
    """Builds the dispatch request and starts the remote workflow."""

    def __init__(
        self,
        api: IWorkflowApi,
        logger: Optional[ILogger] = None,
        repository: Optional[str] = None,
        now: Callable[[], Optional[datetime]] = lambda: None
    ):
        self._api = api
        self._logger = logger or LoggerAdapter(get_logger(__name__))
        self._repository = repository
        self._now = now

    def build_request(self, ref_name: str) -> DispatchRequest:
        return DispatchRequest.for_ref(ref_name, self._now())

    def dispatch(self, username: str, ref_name: str) -> WorkflowStatus:
        """
        Start a workflow for the ref.

        Args:
            username: Account the workflow runs under
            ref_name: Resolved branch or tag name

        Returns:
            Snapshot of the new workflow, guaranteed to carry an id

        Raises:
            ProtocolError: If the service did not assign an id
        """
        target = f" in {self._repository}" if self._repository else ""
        self._logger.info(f"Triggering workflow dispatch for {ref_name}{target}...")

        request = self.build_request(ref_name)
        handle = self._api.dispatch(username, request)

        if not handle.id:
            raise ProtocolError("Dispatch response did not include a workflow id")

        self._logger.info(
            f"Workflow dispatch triggered successfully. "
            f"Workflow ID: {handle.id}, run ID: {handle.workflow_run_id}"
        )
        return handle

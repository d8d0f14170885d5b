"""Protocol definitions for dependency inversion."""

from typing import Protocol, Dict, Any

from .models import DispatchRequest, WorkflowStatus


class IWorkflowApi(Protocol):
    """Interface for the remote signing workflow service."""

    def dispatch(self, username: str, request: DispatchRequest) -> WorkflowStatus:
        """Start a new workflow for the account."""
        ...

    def check(self, username: str, workflow_id: str) -> WorkflowStatus:
        """Fetch the current status of a workflow."""
        ...


class IOutputSink(Protocol):
    """Interface for reporting results back to the host pipeline."""

    def set_output(self, name: str, value: str) -> None:
        """Publish one named output value."""
        ...

    def set_outputs(self, outputs: Dict[str, str]) -> None:
        """Publish several named output values."""
        ...

    def set_failed(self, message: str) -> None:
        """Mark the step as failed with a message."""
        ...


class ILogger(Protocol):
    """Interface for logging."""

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        ...


class IMetricsCollector(Protocol):
    """Interface for collecting run metrics."""

    def start_timer(self, name: str) -> None:
        """Start a named timer."""
        ...

    def stop_timer(self, name: str) -> float:
        """Stop a named timer and return elapsed seconds."""
        ...

    def increment_counter(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        ...

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        ...

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of collected metrics."""
        ...

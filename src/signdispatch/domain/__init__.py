"""Domain layer package."""

from .models import (
    ReleaseAsset,
    WorkflowStatus,
    DispatchRequest,
    ApiSuccess,
    ApiFailure,
    ApiResult,
    RunMode,
    PollState,
    RunResult,
)
from .exceptions import (
    DispatcherError,
    ConfigurationError,
    RefResolutionError,
    RemoteCallError,
    TransientError,
    ProtocolError,
    PollTimeoutError,
)
from .protocols import (
    IWorkflowApi,
    IOutputSink,
    ILogger,
    IMetricsCollector,
)

__all__ = [
    # Models
    "ReleaseAsset",
    "WorkflowStatus",
    "DispatchRequest",
    "ApiSuccess",
    "ApiFailure",
    "ApiResult",
    "RunMode",
    "PollState",
    "RunResult",
    # Exceptions
    "DispatcherError",
    "ConfigurationError",
    "RefResolutionError",
    "RemoteCallError",
    "TransientError",
    "ProtocolError",
    "PollTimeoutError",
    # Protocols
    "IWorkflowApi",
    "IOutputSink",
    "ILogger",
    "IMetricsCollector",
]

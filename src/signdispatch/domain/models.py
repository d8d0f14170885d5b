"""Domain models for the signing workflow dispatcher."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, List, Union

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator


class ReleaseAsset(BaseModel):
    """Downloadable artifact produced by a completed workflow."""

    model_config = ConfigDict(frozen=True, extra='ignore', coerce_numbers_to_str=True)

    id: str
    name: str
    url: str
    browser_download_url: str

    def __str__(self) -> str:
        return f"{self.name}: {self.browser_download_url}"


class WorkflowStatus(BaseModel):
    """
    Point-in-time view of one remote workflow.

    Returned by both dispatch and check calls. Instances are immutable;
    a poll iteration replaces the snapshot instead of updating it.
    """

    model_config = ConfigDict(frozen=True, extra='ignore', coerce_numbers_to_str=True)

    id: Optional[str] = None
    username: Optional[str] = None
    workflow_run_id: Optional[int] = None
    last_checked: Optional[datetime] = None
    last_status: Optional[str] = None
    completed: Optional[bool] = None
    release_assets: Optional[List[ReleaseAsset]] = None

    @field_validator('last_checked', mode='wrap')
    @classmethod
    def _lenient_last_checked(cls, value, handler):
        # Informational only; an unparseable timestamp is dropped
        try:
            return handler(value)
        except ValidationError:
            return None

    @field_validator('release_assets', mode='wrap')
    @classmethod
    def _assets_once_completed(cls, value, handler, info: ValidationInfo):
        # Assets of an in-progress workflow may be partial
        if not info.data.get('completed'):
            return None
        return handler(value)

    @property
    def is_completed(self) -> bool:
        """Terminal state flag; a missing value means still running."""
        return bool(self.completed)

    @property
    def assets(self) -> List[ReleaseAsset]:
        """Release assets, only trusted once the workflow has completed."""
        if not self.is_completed:
            return []
        return list(self.release_assets or [])

    def __str__(self) -> str:
        status = self.last_status or 'unknown'
        return f"Workflow {self.id} ({status})"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Format a UTC ISO-8601 timestamp with milliseconds and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec='milliseconds')
    return stamp.replace('+00:00', 'Z')


@dataclass(frozen=True)
class DispatchRequest:
    """Payload that asks the remote service to start a workflow."""

    source_branch: str
    release_name: str

    @classmethod
    def for_ref(cls, ref_name: str, now: Optional[datetime] = None) -> "DispatchRequest":
        """Build a request labelled with the ref name and dispatch time."""
        return cls(
            source_branch=ref_name,
            release_name=f"Ref: {ref_name} - {utc_timestamp(now)}",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API request dict."""
        return {
            'source_branch': self.source_branch,
            'release_name': self.release_name,
        }


@dataclass(frozen=True)
class ApiSuccess:
    """Response body that parsed into a workflow snapshot."""

    snapshot: WorkflowStatus
    kind: str = field(default='ok', init=False)


@dataclass(frozen=True)
class ApiFailure:
    """Response body that carried the service's error envelope."""

    message: str
    kind: str = field(default='error', init=False)


ApiResult = Union[ApiSuccess, ApiFailure]


class RunMode(str, Enum):
    """How a run drives the remote workflow."""

    SINGLE_CHECK = 'single_check'
    DISPATCH_ONLY = 'dispatch_only'
    FULL = 'full'


# Poll cadence in seconds
DEFAULT_POLL_INTERVAL = 15.0
DEFAULT_TIMEOUT = 60.0 * 60 * 24


class PollState(str, Enum):
    """Poll loop states."""

    WAITING = 'waiting'
    POLLING = 'polling'
    DONE = 'done'
    TIMED_OUT = 'timed_out'

    @property
    def is_terminal(self) -> bool:
        return self in (PollState.DONE, PollState.TIMED_OUT)


@dataclass
class RunResult:
    """Outcome of one run, rendered into the host pipeline outputs."""

    mode: RunMode
    finished: bool
    workflow_id: Optional[str] = None
    artifacts: List[ReleaseAsset] = field(default_factory=list)

    def artifacts_json(self) -> str:
        """Encode the artifacts with their wire field names."""
        return json.dumps([asset.model_dump(mode='json') for asset in self.artifacts])

    def to_outputs(self) -> Dict[str, str]:
        """Render output values for the host pipeline."""
        outputs = {
            'signed_artifacts': self.artifacts_json() if self.finished else '',
            'finished': 'true' if self.finished else 'false',
        }
        if self.workflow_id:
            outputs['workflow_id'] = self.workflow_id
        return outputs

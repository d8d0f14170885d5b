import sys
import os

import pytest

# Ensure src/ is on sys.path so 'signdispatch' is importable without installing
SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from signdispatch.domain.models import WorkflowStatus  # noqa: E402


class FakeClock:
    """Monotonic clock advanced only by FakeClock.sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeWorkflowApi:
    """In-memory IWorkflowApi returning scripted check results."""

    def __init__(self, dispatch_result=None, check_results=()):
        self.dispatch_result = dispatch_result
        self.check_results = list(check_results)
        self.dispatch_calls = []
        self.check_calls = []

    def dispatch(self, username, request):
        self.dispatch_calls.append((username, request))
        if isinstance(self.dispatch_result, Exception):
            raise self.dispatch_result
        return self.dispatch_result

    def check(self, username, workflow_id):
        self.check_calls.append((username, workflow_id))
        result = self.check_results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def running_status():
    return WorkflowStatus(id="wf-1", workflow_run_id=42, last_status="queued", completed=False)


@pytest.fixture
def completed_status():
    return WorkflowStatus.model_validate({
        "id": "wf-1",
        "username": "acme",
        "workflow_run_id": 42,
        "last_status": "completed",
        "completed": True,
        "release_assets": [
            {
                "id": "a1",
                "name": "pkg.exe",
                "url": "https://api.github.com/assets/a1",
                "browser_download_url": "https://github.com/acme/app/releases/download/v1/pkg.exe",
            }
        ],
    })


@pytest.fixture
def make_api():
    return FakeWorkflowApi

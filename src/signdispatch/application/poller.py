"""Poll loop: wait for a dispatched workflow to complete."""

import time
from typing import Optional

from signdispatch.domain.exceptions import TransientError
from signdispatch.domain.models import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
    PollState,
    WorkflowStatus,
)
from signdispatch.domain.protocols import ILogger, IMetricsCollector, IWorkflowApi
from signdispatch.shared.logging import LoggerAdapter, get_logger
from signdispatch.shared.metrics import MetricsCollector
from signdispatch.shared.retry import RetryStrategy
from signdispatch.shared.types import Clock, Sleeper


class WorkflowPoller:
    """
    Polls the workflow status until it completes or the deadline passes.

    Exactly one check call is in flight at a time. Transient failures of a
    check are retried within the same iteration by ``retry``, with backoff
    capped at the time left before the deadline; every other error
    propagates. A transient failure after the deadline is raised.
    """

    def __init__(
        self,
        api: IWorkflowApi,
        logger: Optional[ILogger] = None,
        metrics: Optional[IMetricsCollector] = None,
        retry: Optional[RetryStrategy] = None,
        sleep: Sleeper = time.sleep,
        clock: Clock = time.monotonic
    ):
        self._api = api
        self._logger = logger or LoggerAdapter(get_logger(__name__))
        self._metrics = metrics or MetricsCollector(clock=clock)
        self._retry = retry or RetryStrategy(retry_on=(TransientError,), sleep=sleep)
        self._sleep = sleep
        self._clock = clock
        self.state = PollState.WAITING

    def _check(self, username: str, workflow_id: str) -> WorkflowStatus:
        self._metrics.increment_counter('check_calls')
        return self._api.check(username, workflow_id)

    def poll_until_done(
        self,
        username: str,
        handle: WorkflowStatus,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT
    ) -> WorkflowStatus:
        """
        Poll until the workflow completes or ``timeout`` seconds elapse.

        Args:
            username: Account the workflow runs under
            handle: Snapshot returned by dispatch, must carry an id
            poll_interval: Seconds to wait before each check
            timeout: Overall deadline in seconds

        Returns:
            Last observed snapshot; ``is_completed`` tells DONE from TIMED_OUT
        """
        workflow_id = handle.id
        if not workflow_id:
            raise ValueError("Cannot poll a workflow without an id")

        self._logger.info("Waiting for workflow to complete...")
        self.state = PollState.WAITING

        start_time = self._clock()
        snapshot = handle
        last_status = handle.last_status or ""

        while True:
            elapsed = self._clock() - start_time
            if elapsed >= timeout:
                self.state = PollState.TIMED_OUT
                self._logger.warning(
                    f"Workflow {workflow_id} still running after {elapsed:.0f}s, giving up"
                )
                return snapshot

            self._sleep(poll_interval)
            self.state = PollState.POLLING

            remaining = max(timeout - (self._clock() - start_time), 0.0)
            snapshot = self._retry.execute_within(remaining, self._check, username, workflow_id)

            status = snapshot.last_status or ""
            if status != last_status:
                self._logger.info(f"Status is now: {status}")
            last_status = status

            if snapshot.is_completed:
                self.state = PollState.DONE
                return snapshot

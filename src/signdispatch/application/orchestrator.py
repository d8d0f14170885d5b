"""Main orchestrator for dispatch and polling runs."""

import time
from typing import Optional

from signdispatch.application.dispatcher import WorkflowDispatcher, resolve_ref_name
from signdispatch.application.poller import WorkflowPoller
from signdispatch.domain.exceptions import DispatcherError, PollTimeoutError, TransientError
from signdispatch.domain.models import RunMode, RunResult, WorkflowStatus
from signdispatch.domain.protocols import ILogger, IMetricsCollector, IWorkflowApi
from signdispatch.infrastructure.config.loader import ActionConfig
from signdispatch.shared.retry import RetryStrategy
from signdispatch.shared.types import Clock, Sleeper

DISPATCH_PHASE = "dispatch workflow"
CHECK_PHASE = "check workflow status"


class DispatchOrchestrator:
    """Main orchestrator - selects the run mode and drives dispatch and polling."""

    def __init__(
        self,
        api: IWorkflowApi,
        logger: ILogger,
        metrics: IMetricsCollector,
        sleep: Sleeper = time.sleep,
        clock: Clock = time.monotonic
    ):
        self._api = api
        self._logger = logger
        self._metrics = metrics
        self._sleep = sleep
        self._clock = clock

    def run(self, config: ActionConfig) -> RunResult:
        """
        Execute one run in the mode selected by ``config``.

        Raises:
            DispatcherError: On any fatal failure, tagged with its phase
        """
        mode = config.mode
        self._logger.info(f"Run mode: {mode.value}")

        try:
            if mode is RunMode.SINGLE_CHECK:
                return self._single_check(config)

            handle = self._dispatch(config)

            if mode is RunMode.DISPATCH_ONLY:
                self._logger.info("Dispatch only mode enabled, exiting after dispatch.")
                return RunResult(mode=mode, finished=False, workflow_id=handle.id)

            return self._wait(config, handle)
        finally:
            self._logger.debug(f"Run metrics: {self._metrics.get_summary()}")

    def _single_check(self, config: ActionConfig) -> RunResult:
        workflow_id = config.single_check
        self._logger.info(f"Single check mode enabled, checking status of workflow ID {workflow_id}...")

        self._metrics.increment_counter('check_calls')
        try:
            snapshot = self._api.check(config.username, workflow_id)
        except DispatcherError as e:
            raise e.in_phase(CHECK_PHASE)

        if not snapshot.is_completed:
            self._logger.info("Workflow not completed yet.")
            return RunResult(mode=RunMode.SINGLE_CHECK, finished=False, workflow_id=workflow_id)

        self._report_completed(snapshot)
        return RunResult(
            mode=RunMode.SINGLE_CHECK,
            finished=True,
            workflow_id=workflow_id,
            artifacts=snapshot.assets,
        )

    def _dispatch(self, config: ActionConfig) -> WorkflowStatus:
        self._logger.info("Dispatching new workflow...")
        dispatcher = WorkflowDispatcher(self._api, self._logger, repository=config.repository)

        self._metrics.start_timer('dispatch')
        try:
            ref_name = resolve_ref_name(config.ref)
            self._metrics.increment_counter('dispatch_calls')
            return dispatcher.dispatch(config.username, ref_name)
        except DispatcherError as e:
            raise e.in_phase(DISPATCH_PHASE)
        finally:
            self._metrics.stop_timer('dispatch')

    def _wait(self, config: ActionConfig, handle: WorkflowStatus) -> RunResult:
        retry = RetryStrategy(
            max_attempts=config.max_check_attempts,
            retry_on=(TransientError,),
            sleep=self._sleep,
        )
        poller = WorkflowPoller(
            self._api,
            logger=self._logger,
            metrics=self._metrics,
            retry=retry,
            sleep=self._sleep,
            clock=self._clock,
        )

        self._metrics.start_timer('poll')
        try:
            snapshot = poller.poll_until_done(
                config.username,
                handle,
                poll_interval=config.poll_interval,
                timeout=config.timeout,
            )
        except DispatcherError as e:
            raise e.in_phase(CHECK_PHASE)
        finally:
            self._metrics.stop_timer('poll')

        if not snapshot.is_completed:
            raise PollTimeoutError(
                f"Workflow did not complete within the timeout period ({config.timeout:.0f}s)."
            )

        self._report_completed(snapshot)
        return RunResult(
            mode=RunMode.FULL,
            finished=True,
            workflow_id=handle.id,
            artifacts=snapshot.assets,
        )

    def _report_completed(self, snapshot: WorkflowStatus) -> None:
        self._logger.info("Workflow completed successfully.")

        assets = snapshot.assets
        if not assets:
            self._logger.info("No signed artifacts found.")
            return

        self._logger.info("Signed artifacts:")
        for asset in assets:
            self._logger.info(f"- {asset}")

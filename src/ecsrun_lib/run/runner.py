# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import signal
import threading
from time import monotonic, sleep
from types import FrameType
from typing import Any

from ecsrun_lib.control.interface import JobControlInterface
from ecsrun_lib.core.config import CFG
from ecsrun_lib.core.error import ECSRunError
from ecsrun_lib.core.logger import get_logger
from ecsrun_lib.launch.launcher import Launcher
from ecsrun_lib.poll.poller import Poller
from ecsrun_lib.properties.launch_spec import LaunchSpec
from ecsrun_lib.properties.outcomes import RunOutcome, StopOutcome
from ecsrun_lib.properties.states import RunState
from ecsrun_lib.stop.stopper import Stopper

logger = get_logger(__name__, show_time=True)


class Runner:
    """
    Manages the lifecycle of a single ecsrun task.

    The Runner class is responsible for:
      - Launching the task (exactly once)
      - Checking its state at a fixed interval until it stops
      - Reporting the exit code of the container of interest
      - Stopping the task when the run is cancelled by SIGINT or SIGTERM

    The run has no overall timeout. It waits until the task stops
    or until the run is cancelled.
    """

    # exit code reported for a cancelled run
    CANCEL_EXIT_CODE = 127
    # signals that cancel the run while the task is being polled
    HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(
        self,
        client: JobControlInterface,
        spec: LaunchSpec,
        check_interval: float | None = None,
    ):
        """
        Initialize a new Runner instance.

        Args:
            client (JobControlInterface): Job-control service running the task.
            spec (LaunchSpec): Description of the task to launch.
            check_interval (float | None): Interval (in seconds) between checks
                of the task's state. Defaults to `CFG.poller.check_interval`.

        Raises:
            ECSRunError: If the check interval is negative.
        """
        self._spec = spec
        self._check_interval = (
            CFG.poller.check_interval if check_interval is None else check_interval
        )
        if self._check_interval < 0:
            raise ECSRunError(
                f"Check interval cannot be negative ({self._check_interval})."
            )

        self._launcher = Launcher(client)
        self._poller = Poller(client)
        self._stopper = Stopper(client)

        self._state = RunState.LAUNCHING
        self._task_arn: str | None = None
        self._stop_requested = False
        self._stop_reason = CFG.stopper.manual_reason
        self._stop_outcome: StopOutcome | None = None
        self._outcome: RunOutcome | None = None
        self._previous_handlers: dict[int, Any] = {}

    @property
    def state(self) -> RunState:
        """Current state of the run."""
        return self._state

    @property
    def task_arn(self) -> str | None:
        """Identifier of the launched task or None if no task has been launched."""
        return self._task_arn

    @property
    def stop_outcome(self) -> StopOutcome | None:
        """Result of stopping the task or None if the run was not cancelled."""
        return self._stop_outcome

    def run(self) -> RunOutcome:
        """
        Launch the task and wait for it to finish or for the run to be cancelled.

        Calling this method again after the run has finished returns
        the same outcome without contacting the service.

        Returns:
            RunOutcome: The result of the run.

        Raises:
            ECSRunError: If the task cannot be launched, a check of its state fails,
                or the run has already failed.
        """
        if self._outcome is not None:
            logger.debug("Run has already finished. Returning its outcome.")
            return self._outcome

        if self._state != RunState.LAUNCHING:
            raise ECSRunError(f"Run cannot be started: run is {str(self._state)}.")

        try:
            self._task_arn = self._launcher.launch(self._spec)

            self._state = RunState.POLLING
            self._installSignalHandlers()
            try:
                self._outcome = self._waitForCompletion()
            finally:
                self._restoreSignalHandlers()
        finally:
            self._state = RunState.TERMINATED

        return self._outcome

    def requestStop(self, reason: str | None = None) -> None:
        """
        Request the run to be cancelled.

        Takes effect only while the task is being polled; no further check is
        started once this method returns. Only the first request is acted upon.

        Args:
            reason (str | None): Reason recorded with the stop request.
                Defaults to `CFG.stopper.manual_reason`.
        """
        if self._state != RunState.POLLING:
            logger.debug(f"Ignoring stop request: run is {str(self._state)}.")
            return

        if self._stop_requested:
            logger.debug("Ignoring stop request: task is already being stopped.")
            return

        self._stop_requested = True
        self._stop_reason = reason or CFG.stopper.manual_reason

    def _waitForCompletion(self) -> RunOutcome:
        """
        Check the state of the task at a fixed interval until it stops
        or the run is cancelled.

        Checks are never issued concurrently and a stop request always wins
        over the next check, including the result of a check that was in flight
        when the request arrived.
        """
        assert self._task_arn is not None
        logger.info(
            f"Waiting for task '{self._task_arn}' to finish. Checking every {self._check_interval} seconds."
        )

        while True:
            self._sleepUntilNextCheck()
            if self._stop_requested:
                return self._stopTask()

            result = self._poller.checkOnce(
                self._task_arn, self._spec.cluster, self._spec.container
            )

            if self._stop_requested:
                logger.debug("Stop was requested during the check. Discarding its result.")
                return self._stopTask()

            if result.finished:
                assert result.exit_code is not None
                logger.info(f"Task exited with result {result.exit_code}.")
                return RunOutcome(
                    success=result.exit_code == 0,
                    exit_code=result.exit_code,
                    task_arn=self._task_arn,
                )

    def _sleepUntilNextCheck(self) -> None:
        """
        Sleep for the check interval, waking up early if a stop is requested.
        """
        deadline = monotonic() + self._check_interval
        while not self._stop_requested and (remaining := deadline - monotonic()) > 0:
            sleep(min(remaining, CFG.poller.wake_interval))

    def _stopTask(self) -> RunOutcome:
        """
        Stop the task and produce the outcome of a cancelled run.
        """
        assert self._task_arn is not None
        self._state = RunState.STOPPING

        self._stop_outcome = self._stopper.stop(
            self._task_arn, self._spec.cluster, self._stop_reason
        )
        logger.info(
            f"Stop requested for task '{self._stop_outcome.task_arn}'. "
            f"Last status: '{self._stop_outcome.last_status}'. "
            f"Stopped at: '{self._stop_outcome.stopped_at or 'unknown'}'."
        )

        return RunOutcome(
            success=False,
            exit_code=Runner.CANCEL_EXIT_CODE,
            task_arn=self._task_arn,
            was_stopped=True,
        )

    def _installSignalHandlers(self) -> None:
        """
        Install handlers for the cancelling signals, remembering the previous ones.

        Signal handlers can only be installed from the main thread.
        Elsewhere, the run can only be cancelled using `requestStop`.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not running in the main thread. Signal handlers not installed.")
            return

        for signum in Runner.HANDLED_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self._handleSignal)

    def _restoreSignalHandlers(self) -> None:
        """
        Restore the signal handlers that were active before the run started polling.
        """
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous_handlers.clear()

    def _handleSignal(self, signum: int, _frame: FrameType | None) -> None:
        """
        Signal handler for SIGINT and SIGTERM.

        Converts the first signal into a stop request. Later signals are ignored.
        """
        name = signal.Signals(signum).name
        if self._stop_requested:
            logger.warning(f"Received {name}, but the task is already being stopped.")
            return

        logger.warning(f"Received {name}, stopping the task.")
        self.requestStop(CFG.stopper.signal_reason % name)

# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ecsrun_lib.core.common import dump_yaml
from ecsrun_lib.core.config import CFG
from ecsrun_lib.poll.poller import Poller
from ecsrun_lib.properties.outcomes import PollOutcome
from ecsrun_lib.properties.records import ContainerRecord, TaskRecord

_SENTINEL_DESCRIPTIONS = {
    Poller.STATUS_INDETERMINATE: "status indeterminate",
    Poller.CONTAINER_NOT_FOUND: "container not found",
    Poller.EXIT_CODE_UNAVAILABLE: "exit code unavailable",
}


class StatusPresenter:
    """
    Presentation layer for a single reading of a task's state.
    """

    def __init__(
        self,
        task_arn: str,
        container: str,
        task: TaskRecord | None,
        outcome: PollOutcome,
    ):
        """
        Initialize the presenter.

        Args:
            task_arn (str): Identifier of the task.
            container (str): Name of the container of interest.
            task (TaskRecord | None): Task as described by the service, if any.
            outcome (PollOutcome): Evaluated outcome of the reading.
        """
        self._task_arn = task_arn
        self._container = container
        self._task = task
        self._outcome = outcome

    def createStatusPanel(self) -> Group:
        """
        Create a panel with the state of the task and its containers.

        Returns:
            Group: A Rich Group containing the status panel.
        """
        settings = CFG.status_presenter

        content: list = [self._createTaskTable()]
        if self._task and self._task.containers:
            content.extend([Text(""), self._createContainersTable()])

        panel = Panel(
            Group(*content),
            title=Text(
                f"TASK: {self._task_arn}",
                style=settings.title_style,
                justify="center",
            ),
            border_style=settings.border_style,
            padding=(1, 2),
            width=settings.width,
        )

        return Group(Text(""), panel, Text(""))

    def dumpYaml(self) -> None:
        """
        Print the YAML representation of the reading to stdout.
        """
        data: dict[str, object] = {"task_arn": self._task_arn}
        data.update(self._outcome.toDict())
        if self._task:
            data["containers"] = [
                {k: v for k, v in vars(c).items() if v is not None}
                for c in self._task.containers
            ]
        print(dump_yaml(data), end="")

    def _createTaskTable(self) -> Table:
        """
        Create a key-value table with the overall state of the task.
        """
        settings = CFG.status_presenter
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style=settings.key_style)
        table.add_column(style=settings.value_style)

        status = self._outcome.status or (self._task.last_status if self._task else None)
        table.add_row("Status:", status or "unknown")
        table.add_row("Container:", self._container)

        if self._outcome.finished:
            table.add_row("Exit code:", self._formatExitCode(self._outcome.exit_code))
        else:
            table.add_row("Exit code:", Text("running", style=settings.running_style))

        if self._task and self._task.stopped_reason:
            table.add_row("Stopped reason:", self._task.stopped_reason)

        return table

    def _createContainersTable(self) -> Table:
        """
        Create a table listing all containers of the task.
        """
        assert self._task is not None
        settings = CFG.status_presenter
        table = Table(box=None, padding=(0, 2), header_style=settings.headers_style)
        table.add_column("Container")
        table.add_column("Status")
        table.add_column("Exit code", justify="right")

        for record in self._task.containers:
            table.add_row(
                Text(
                    record.name or "?",
                    style="bold" if record.name == self._container else "",
                ),
                record.last_status or "unknown",
                self._formatContainerExitCode(record),
            )

        return table

    @staticmethod
    def _formatExitCode(exit_code: int | None) -> Text:
        settings = CFG.status_presenter
        if exit_code == 0:
            return Text("0", style=settings.success_style)

        if exit_code in _SENTINEL_DESCRIPTIONS:
            return Text(
                f"{exit_code} ({_SENTINEL_DESCRIPTIONS[exit_code]})",
                style=settings.failure_style,
            )

        return Text(str(exit_code), style=settings.failure_style)

    @staticmethod
    def _formatContainerExitCode(record: ContainerRecord) -> Text:
        # real exit codes; sentinels only apply to the evaluated outcome
        settings = CFG.status_presenter
        if record.exit_code is None:
            return Text("-")
        return Text(
            str(record.exit_code),
            style=settings.success_style
            if record.exit_code == 0
            else settings.failure_style,
        )

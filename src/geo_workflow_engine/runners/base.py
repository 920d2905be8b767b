"""Base runner types: outcomes, reports and progress callbacks."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from ..workflow import WorkflowStatus


class RunOutcome(Enum):
    """How a call to the runner ended."""

    RAN = "ran"
    WAITING_ON_DEPENDENCY = "waiting_on_dependency"
    NO_ELIGIBLE_TASK = "no_eligible_task"


@dataclass
class RunReport:
    """Result of driving a workflow's task chain."""

    outcome: RunOutcome
    workflow_id: str | None = None
    # Task ids that completed during this call, in execution order
    executed: list[str] = field(default_factory=list)
    # Set when the chain stopped at a task whose dependency isn't completed
    waiting_task_id: str | None = None
    workflow_status: WorkflowStatus | None = None

    @property
    def tasks_completed(self) -> int:
        return len(self.executed)


@dataclass
class RunnerCallbacks:
    """
    Callbacks for runner progress reporting.

    Allows the CLI to display progress without coupling the runner to Rich/UI.
    All callbacks are optional - if None, no callback is made.
    """

    # Task lifecycle
    on_task_start: Callable[[str, str], None] | None = None  # task_id, task_type
    on_task_complete: Callable[[str, str, bool], None] | None = None  # task_id, task_type, success
    on_task_waiting: Callable[[str, str], None] | None = None  # task_id, dependency_id

    # Workflow aggregate
    on_workflow_status: Callable[[str, WorkflowStatus], None] | None = None  # workflow_id, status

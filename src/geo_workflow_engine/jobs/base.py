"""Job protocol and the read-only context handed to jobs."""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..store import WorkflowStore
    from ..workflow import Task


class JobContext:
    """
    Read-only view of the store for a running job.

    Jobs may look at their workflow's tasks (e.g. to aggregate sibling
    outputs) but never write records; status changes belong to the runner.
    """

    def __init__(self, store: "WorkflowStore", task: "Task"):
        self._store = store
        self._task = task

    @property
    def workflow_id(self) -> str | None:
        return self._task.workflow_id

    def workflow_tasks(self) -> list["Task"]:
        """Copies of every task in the current task's workflow, ordered by step."""
        if self._task.workflow_id is None:
            return []
        return self._store.get_workflow_tasks(self._task.workflow_id)

    def sibling_tasks(self) -> list["Task"]:
        """Workflow tasks other than the current one."""
        return [t for t in self.workflow_tasks() if t.id != self._task.id]


class Job(Protocol):
    """Protocol for units of work bound to a task type."""

    def execute(self, task: "Task", context: JobContext) -> Any:
        """
        Run the job for a task.

        Args:
            task: The task being executed (read its input payload)
            context: Read-only access to the task's workflow

        Returns:
            JSON-serializable output recorded on the task and as a Result

        Raises:
            JobExecutionError: The job could not produce an output
        """
        ...

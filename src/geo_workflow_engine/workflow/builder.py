"""
Workflow builder - Turns step definitions into persisted workflows.

Each step becomes one Task in status QUEUED:
1. Save an empty workflow (status INITIAL)
2. Create tasks in listed order, linking `depends_on` to the task built
   for the referenced step number
3. Save all tasks as one batch
4. Re-fetch the workflow with its tasks
"""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import InvalidDefinition, StorageError, WorkflowNotFound
from .definition import WorkflowStep, load_definition, validate_steps
from .tasks import Task, TaskStatus, Workflow, WorkflowStatus

if TYPE_CHECKING:
    from ..store import WorkflowStore

logger = logging.getLogger(__name__)


class WorkflowBuilder:
    """Creates workflows and their task graphs in a store."""

    def __init__(self, store: "WorkflowStore"):
        self.store = store

    def build(
        self,
        steps: Sequence[WorkflowStep],
        client_id: str,
        input_payload: str,
        name: str = "",
    ) -> Workflow:
        """
        Create a workflow from an ordered list of steps.

        Args:
            steps: Step definitions, in the order they were declared
            client_id: Client identifier shared by the workflow and its tasks
            input_payload: Serialized input (GeoJSON) handed to every task
            name: Optional definition name recorded on the workflow

        Returns:
            The saved workflow with its tasks, ordered by step number

        Raises:
            InvalidDefinition: steps are inconsistent or could not be persisted
            WorkflowNotFound: the workflow vanished between save and re-fetch
        """
        validate_steps(list(steps))

        workflow = Workflow(client_id=client_id, name=name, status=WorkflowStatus.INITIAL)
        try:
            self.store.save_workflow(workflow)
        except StorageError as e:
            raise InvalidDefinition(f"Failed to save the workflow: {e}") from e

        tasks_by_step: dict[int, Task] = {}
        tasks: list[Task] = []
        for step in steps:
            task = Task(
                client_id=client_id,
                task_type=step.task_type,
                step_number=step.step_number,
                workflow_id=workflow.id,
                input_payload=input_payload,
                status=TaskStatus.QUEUED,
            )
            if step.depends_on is not None:
                task.depends_on = tasks_by_step[step.depends_on].id

            tasks.append(task)
            tasks_by_step[step.step_number] = task

        try:
            self.store.save_tasks(tasks)
        except StorageError as e:
            raise InvalidDefinition(f"Failed to save tasks for workflow {workflow.id}: {e}") from e

        saved = self.store.get_workflow(workflow.id, with_tasks=True)
        if saved is None:
            raise WorkflowNotFound(workflow.id)

        logger.info("Built workflow %s (%s) with %d tasks", saved.id, name or "unnamed", len(saved.tasks))
        return saved

    def build_from_file(self, path: Path, client_id: str, input_payload: str) -> Workflow:
        """Load a YAML definition and build a workflow from it."""
        definition = load_definition(path)
        return self.build(definition.steps, client_id, input_payload, name=definition.name)

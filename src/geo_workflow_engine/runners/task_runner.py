"""
Task runner - Executes a workflow's tasks one at a time.

For each task:
1. Dependency gate: stop if the task's dependency isn't COMPLETED
2. Mark IN_PROGRESS and save
3. Resolve the job for the task type
4. Execute; on success save a Result and mark COMPLETED
5. On job failure mark FAILED, save, and raise
6. Recompute the workflow status and aggregate result
7. Continue with the QUEUED task at the next step number

The chain is driven by a loop rather than recursion, so long workflows
don't grow the call stack.
"""

import json
import logging
from collections.abc import Iterable
from typing import Any

from ..errors import JobExecutionError, WorkflowNotFound
from ..jobs import JobContext, JobRegistry
from ..store import WorkflowStore
from ..workflow import Result, Task, TaskStatus, Workflow, WorkflowStatus
from .base import RunnerCallbacks, RunOutcome, RunReport

logger = logging.getLogger(__name__)

PROGRESS_STARTING = "starting job..."


def aggregate_status(statuses: Iterable[TaskStatus]) -> WorkflowStatus:
    """
    Derive a workflow status from its task statuses.

    Any FAILED -> FAILED, all COMPLETED -> COMPLETED, otherwise IN_PROGRESS.
    """
    statuses = list(statuses)
    if any(s == TaskStatus.FAILED for s in statuses):
        return WorkflowStatus.FAILED
    if all(s == TaskStatus.COMPLETED for s in statuses):
        return WorkflowStatus.COMPLETED
    return WorkflowStatus.IN_PROGRESS


def aggregate_result(tasks: Iterable[Task]) -> list[dict[str, Any]]:
    """Snapshot of every task's output and status."""
    return [
        {
            "task_id": t.id,
            "task_type": t.task_type,
            "output": t.output,
            "status": t.status.value,
        }
        for t in tasks
    ]


class TaskRunner:
    """
    Sequential task runner.

    Owns every task, result and workflow status write. Jobs only compute
    outputs; they are resolved from the registry per execution.
    """

    def __init__(
        self,
        store: WorkflowStore,
        registry: JobRegistry,
        callbacks: RunnerCallbacks | None = None,
    ):
        self.store = store
        self.registry = registry
        self.callbacks = callbacks or RunnerCallbacks()

    def start_workflow(self, workflow: Workflow) -> RunReport:
        """
        Run a workflow from its first step.

        The first step is the task at step 1 with no dependency. If there is
        none, nothing runs and the report says NO_ELIGIBLE_TASK.
        """
        if not workflow.tasks:
            workflow = self.store.get_workflow(workflow.id, with_tasks=True) or workflow
        first = workflow.get_step(1)
        if first is None or first.depends_on is not None:
            logger.error("No starting task found for workflow %s", workflow.id)
            return RunReport(
                outcome=RunOutcome.NO_ELIGIBLE_TASK,
                workflow_id=workflow.id,
                workflow_status=workflow.status,
            )
        return self.run(first)

    def resume(self, task_id: str) -> RunReport:
        """
        Re-trigger a task, e.g. once its dependency has completed.

        Only a QUEUED task runs; any other status gives NO_ELIGIBLE_TASK.
        """
        task = self.store.get_task(task_id)
        if task is None:
            raise WorkflowNotFound(task_id, kind="Task")
        return self.run(task)

    def run(self, task: Task) -> RunReport:
        """
        Run a task and then every following step until the chain stops.

        A task that isn't QUEUED is not dispatched (NO_ELIGIBLE_TASK).
        The chain stops when a dependency isn't completed, when no QUEUED
        task exists at the next step number, or when a job fails.

        Returns:
            RunReport describing what ran and why the chain stopped

        Raises:
            UnknownTaskType: no job for the task type (task stays IN_PROGRESS)
            JobExecutionError: a job failed (task is FAILED)
            WorkflowNotFound: the task's workflow is missing from the store
        """
        report = RunReport(outcome=RunOutcome.RAN, workflow_id=task.workflow_id)

        if task.status != TaskStatus.QUEUED:
            logger.warning("Task %s is %s, only queued tasks are run", task.id, task.status.value)
            report.outcome = RunOutcome.NO_ELIGIBLE_TASK
            return report

        current: Task | None = task
        while current is not None:
            dependency = self.store.get_dependency(current.id)
            if dependency is not None and dependency.status != TaskStatus.COMPLETED:
                logger.info(
                    "Task %s depends on task %s (%s). Waiting for it to complete",
                    current.id,
                    dependency.id,
                    dependency.status.value,
                )
                if self.callbacks.on_task_waiting:
                    self.callbacks.on_task_waiting(current.id, dependency.id)
                report.waiting_task_id = current.id
                if not report.executed:
                    report.outcome = RunOutcome.WAITING_ON_DEPENDENCY
                break

            self._execute(current)
            report.executed.append(current.id)

            workflow = self._update_workflow(current)
            report.workflow_status = workflow.status
            current = self._next_task(workflow, current)

        return report

    def _execute(self, task: Task) -> None:
        """Run the job for one task and record the outcome on it."""
        task.status = TaskStatus.IN_PROGRESS
        task.progress = PROGRESS_STARTING
        self.store.save_task(task)

        if self.callbacks.on_task_start:
            self.callbacks.on_task_start(task.id, task.task_type)

        job = self.registry.resolve(task.task_type)

        logger.info("Starting job %s for task %s", task.task_type, task.id)
        try:
            output = job.execute(task, JobContext(self.store, task))
            data = json.dumps(output if output is not None else {})
        except JobExecutionError:
            logger.exception("Error running job %s for task %s", task.task_type, task.id)
            self._mark_failed(task)
            raise
        except Exception as e:
            logger.exception("Error running job %s for task %s", task.task_type, task.id)
            self._mark_failed(task)
            raise JobExecutionError(task.task_type, task.id, str(e)) from e

        result = self.store.save_result(Result(task_id=task.id, data=data))

        task.output = output
        task.result_id = result.id
        task.status = TaskStatus.COMPLETED
        task.progress = None
        self.store.save_task(task)
        logger.info("Job %s for task %s completed successfully", task.task_type, task.id)

        if self.callbacks.on_task_complete:
            self.callbacks.on_task_complete(task.id, task.task_type, True)

    def _mark_failed(self, task: Task) -> None:
        task.status = TaskStatus.FAILED
        task.progress = None
        self.store.save_task(task)

        if self.callbacks.on_task_complete:
            self.callbacks.on_task_complete(task.id, task.task_type, False)

    def _update_workflow(self, task: Task) -> Workflow:
        """Recompute status and aggregate result for the task's workflow."""
        workflow = self.store.get_workflow(task.workflow_id, with_tasks=True) if task.workflow_id else None
        if workflow is None:
            raise WorkflowNotFound(str(task.workflow_id))

        previous = workflow.status
        workflow.status = aggregate_status(t.status for t in workflow.tasks)
        workflow.final_result = aggregate_result(workflow.tasks)
        self.store.save_workflow(workflow)

        if workflow.status != previous:
            logger.info("Workflow %s is now %s", workflow.id, workflow.status.value)
            if self.callbacks.on_workflow_status:
                self.callbacks.on_workflow_status(workflow.id, workflow.status)
        return workflow

    @staticmethod
    def _next_task(workflow: Workflow, current: Task) -> Task | None:
        return next((t for t in workflow.get_queued_tasks() if t.step_number == current.step_number + 1), None)

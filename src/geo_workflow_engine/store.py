"""
Record store for workflows, tasks and results.

Records live in an identity-indexed arena (one dict per record type).
When a path is given the arena is mirrored to a JSON file:
- Loaded once at construction
- Flushed after every save (temp file + replace, so each save is atomic)
- A save whose flush fails is rolled back in memory too

Lookups hand out copies. Changing a returned record has no effect until it
is saved again, the same contract an ORM repository gives.
"""

import copy
import json
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from .errors import StorageError
from .workflow.tasks import Result, Task, Workflow

logger = logging.getLogger(__name__)

STORE_VERSION = "1.0"


class WorkflowStore:
    """In-memory arena of Workflow, Task and Result records with optional JSON persistence."""

    def __init__(self, path: Path | None = None):
        """
        Initialize the store.

        Args:
            path: JSON file backing the store (None = memory only)
        """
        self.path = path
        self._workflows: dict[str, Workflow] = {}
        self._tasks: dict[str, Task] = {}
        self._results: dict[str, Result] = {}
        if path is not None:
            self.load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Load records from disk, or start empty if the file doesn't exist."""
        if self.path is None or not self.path.exists():
            return

        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read store {self.path}: {e}") from e

        self._workflows = {w["id"]: Workflow.from_dict(w) for w in data.get("workflows", [])}
        self._tasks = {t["id"]: Task.from_dict(t) for t in data.get("tasks", [])}
        self._results = {r["id"]: Result.from_dict(r) for r in data.get("results", [])}
        logger.debug(
            "Loaded store %s (%d workflows, %d tasks, %d results)",
            self.path,
            len(self._workflows),
            len(self._tasks),
            len(self._results),
        )

    def _flush(self) -> None:
        if self.path is None:
            return

        payload = {
            "version": STORE_VERSION,
            "updated_at": datetime.now().isoformat(),
            "workflows": [w.to_dict() for w in self._workflows.values()],
            "tasks": [t.to_dict() for t in self._tasks.values()],
            "results": [r.to_dict() for r in self._results.values()],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w") as f:
                json.dump(payload, f, indent=2)
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Cannot write store {self.path}: {e}") from e

    @staticmethod
    def _restore(records: dict, previous: dict) -> None:
        """Put back the entries a failed flush was about to persist."""
        for record_id, record in previous.items():
            if record is None:
                records.pop(record_id, None)
            else:
                records[record_id] = record

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_workflow(self, workflow: Workflow) -> Workflow:
        """Create or update a workflow record. Attached tasks are not saved."""
        record = copy.deepcopy(workflow)
        record.tasks = []
        record.updated_at = datetime.now().isoformat()
        previous = self._workflows.get(record.id)
        self._workflows[record.id] = record
        try:
            self._flush()
        except StorageError:
            self._restore(self._workflows, {record.id: previous})
            raise
        workflow.updated_at = record.updated_at
        return workflow

    def save_task(self, task: Task) -> Task:
        """Create or update a single task record."""
        return self.save_tasks([task])[0]

    def save_tasks(self, tasks: Iterable[Task]) -> list[Task]:
        """
        Create or update a batch of tasks.

        The whole batch is validated before anything is written, so a
        constraint violation leaves the store untouched.

        Raises:
            StorageError: owner workflow missing, dangling dependency,
                cross-workflow dependency or duplicate step number
        """
        batch = list(tasks)
        batch_by_id = {t.id: t for t in batch}

        for task in batch:
            self._check_task(task, batch_by_id)

        previous = {t.id: self._tasks.get(t.id) for t in batch}
        now = datetime.now().isoformat()
        for task in batch:
            record = copy.deepcopy(task)
            record.updated_at = now
            self._tasks[task.id] = record
        try:
            self._flush()
        except StorageError:
            self._restore(self._tasks, previous)
            raise

        for task in batch:
            task.updated_at = now
        return batch

    def _check_task(self, task: Task, batch_by_id: dict[str, Task]) -> None:
        if task.workflow_id is None or task.workflow_id not in self._workflows:
            raise StorageError(f"Task {task.id} references unknown workflow {task.workflow_id}")

        if task.depends_on is not None:
            dependency = batch_by_id.get(task.depends_on) or self._tasks.get(task.depends_on)
            if dependency is None:
                raise StorageError(f"Task {task.id} depends on unknown task {task.depends_on}")
            if dependency.workflow_id != task.workflow_id:
                raise StorageError(f"Task {task.id} depends on task {dependency.id} from another workflow")
            if dependency.id == task.id:
                raise StorageError(f"Task {task.id} depends on itself")

        # step numbers are unique per workflow
        candidates = {t.id: t for t in self._tasks.values() if t.workflow_id == task.workflow_id}
        candidates.update({t.id: t for t in batch_by_id.values() if t.workflow_id == task.workflow_id})
        for other in candidates.values():
            if other.id != task.id and other.step_number == task.step_number:
                raise StorageError(
                    f"Duplicate step number {task.step_number} in workflow {task.workflow_id}"
                )

    def save_result(self, result: Result) -> Result:
        """Create a result record. Results are immutable once written."""
        if result.id in self._results:
            raise StorageError(f"Result {result.id} already exists")
        if result.task_id not in self._tasks:
            raise StorageError(f"Result {result.id} references unknown task {result.task_id}")

        self._results[result.id] = copy.deepcopy(result)
        try:
            self._flush()
        except StorageError:
            self._restore(self._results, {result.id: None})
            raise
        return result

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_workflow(self, workflow_id: str, with_tasks: bool = False) -> Workflow | None:
        """Fetch a workflow, optionally with its tasks ordered by step number."""
        record = self._workflows.get(workflow_id)
        if record is None:
            return None

        workflow = copy.deepcopy(record)
        if with_tasks:
            workflow.tasks = self.get_workflow_tasks(workflow_id)
        return workflow

    def get_workflow_tasks(self, workflow_id: str) -> list[Task]:
        """Get copies of all tasks in a workflow, ordered by step number."""
        tasks = [t for t in self._tasks.values() if t.workflow_id == workflow_id]
        return [copy.deepcopy(t) for t in sorted(tasks, key=lambda t: t.step_number)]

    def get_task(self, task_id: str) -> Task | None:
        record = self._tasks.get(task_id)
        return copy.deepcopy(record) if record is not None else None

    def get_dependency(self, task_id: str) -> Task | None:
        """Get the task that `task_id` depends on, if any."""
        record = self._tasks.get(task_id)
        if record is None or record.depends_on is None:
            return None
        return self.get_task(record.depends_on)

    def get_results(self, task_id: str | None = None, workflow_id: str | None = None) -> list[Result]:
        """List results, filtered by task or by owning workflow."""
        results = list(self._results.values())
        if task_id is not None:
            results = [r for r in results if r.task_id == task_id]
        if workflow_id is not None:
            task_ids = {t.id for t in self._tasks.values() if t.workflow_id == workflow_id}
            results = [r for r in results if r.task_id in task_ids]
        return [copy.deepcopy(r) for r in results]

    def list_workflows(self) -> list[Workflow]:
        """List all workflows, oldest first."""
        return [copy.deepcopy(w) for w in sorted(self._workflows.values(), key=lambda w: w.created_at)]

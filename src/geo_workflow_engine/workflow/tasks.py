"""Task, workflow and result records."""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


def new_id() -> str:
    """Generate a record identifier."""
    return str(uuid.uuid4())


def _now() -> str:
    return datetime.now().isoformat()


class TaskStatus(Enum):
    """Status of a task in a workflow."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class WorkflowStatus(Enum):
    """Aggregate status of a workflow."""

    INITIAL = "initial"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Task:
    """
    A unit of execution state within a workflow.

    Tasks are data - they describe what to run and record what happened.
    The runner interprets tasks and dispatches them to jobs.
    """

    client_id: str
    task_type: str
    step_number: int
    workflow_id: str | None = None
    input_payload: str = ""
    # Id of the task that must complete first
    depends_on: str | None = None
    # Runtime state (set by runner)
    status: TaskStatus = TaskStatus.QUEUED
    progress: str | None = None
    output: Any = None
    result_id: str | None = None
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        return cls(**{**data, "status": TaskStatus(data["status"])})


@dataclass
class Workflow:
    """
    An ordered collection of tasks sharing a client and an aggregate status.

    `tasks` is only populated when the workflow is fetched with its tasks;
    it is never persisted as part of the workflow record.
    """

    client_id: str
    name: str = ""
    status: WorkflowStatus = WorkflowStatus.INITIAL
    final_result: list[dict[str, Any]] | None = None
    tasks: list[Task] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def get_step(self, step_number: int) -> Task | None:
        """Get the task at a step number."""
        for task in self.tasks:
            if task.step_number == step_number:
                return task
        return None

    def get_queued_tasks(self) -> list[Task]:
        """Get all queued tasks."""
        return [t for t in self.tasks if t.status == TaskStatus.QUEUED]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "name": self.name,
            "status": self.status.value,
            "final_result": self.final_result,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Workflow":
        return cls(
            id=data["id"],
            client_id=data["client_id"],
            name=data.get("name", ""),
            status=WorkflowStatus(data["status"]),
            final_result=data.get("final_result"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Result:
    """Serialized output of one successful task execution."""

    task_id: str
    data: str
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=_now)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Result":
        return cls(**data)

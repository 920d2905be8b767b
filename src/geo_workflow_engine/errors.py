"""Exception hierarchy for the workflow engine."""


class WorkflowEngineError(Exception):
    """Base class for all engine errors."""


class UnknownTaskType(WorkflowEngineError):
    """No job is registered for a task type."""

    def __init__(self, task_type: str):
        self.task_type = task_type
        super().__init__(f"No job found for task type: {task_type}")


class JobExecutionError(WorkflowEngineError):
    """A job failed while executing a task."""

    def __init__(self, task_type: str, task_id: str | None, message: str):
        self.task_type = task_type
        self.task_id = task_id
        super().__init__(f"Job {task_type} failed for task {task_id}: {message}")


class StorageError(WorkflowEngineError):
    """The record store rejected a write or could not be read."""


class InvalidDefinition(WorkflowEngineError):
    """A workflow definition is malformed or could not be persisted."""


class WorkflowNotFound(WorkflowEngineError):
    """An expected workflow or task record is missing."""

    def __init__(self, record_id: str, kind: str = "Workflow"):
        self.record_id = record_id
        self.kind = kind
        super().__init__(f"{kind} not found: {record_id}")

"""
Workflow layer - Records, definitions and the builder.

Workflows are DATA STRUCTURES that record what to do and what happened.
They do NOT execute anything - that's the runner's job.
"""

from .builder import WorkflowBuilder
from .definition import WorkflowDefinition, WorkflowStep, load_definition, parse_definition
from .tasks import Result, Task, TaskStatus, Workflow, WorkflowStatus

__all__ = [
    "Result",
    "Task",
    "TaskStatus",
    "Workflow",
    "WorkflowStatus",
    "WorkflowBuilder",
    "WorkflowDefinition",
    "WorkflowStep",
    "load_definition",
    "parse_definition",
]

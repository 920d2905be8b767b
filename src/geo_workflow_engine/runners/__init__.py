"""
Runners layer - Execution engines for workflows.

Runners drive a workflow's task chain, dispatching each task to its job
and keeping task and workflow status up to date.
"""

from .base import RunnerCallbacks, RunOutcome, RunReport
from .task_runner import TaskRunner, aggregate_result, aggregate_status

__all__ = [
    "RunnerCallbacks",
    "RunOutcome",
    "RunReport",
    "TaskRunner",
    "aggregate_result",
    "aggregate_status",
]

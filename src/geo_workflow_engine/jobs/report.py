"""Report generation job - Aggregates the outputs of sibling tasks."""

from typing import Any

from ..errors import JobExecutionError
from ..workflow import Task
from .base import JobContext


class ReportGenerationJob:
    """Collects every non-report task of the workflow into one report."""

    task_type = "report_generation"

    def execute(self, task: Task, context: JobContext) -> dict[str, Any]:
        if context.workflow_id is None:
            raise JobExecutionError(self.task_type, task.id, f"Workflow not found for task {task.id}")

        reportable = [t for t in context.workflow_tasks() if t.task_type != self.task_type]
        return {
            "workflow_id": context.workflow_id,
            "tasks": [
                {
                    "task_id": t.id,
                    "type": t.task_type,
                    "output": t.output,
                    "status": t.status.value,
                }
                for t in reportable
            ],
            "final_report": "Aggregated data and results",
        }

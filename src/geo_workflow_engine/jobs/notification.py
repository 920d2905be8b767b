"""Notification job - Composes the completion email for a workflow."""

import logging
from typing import Any

from ..errors import JobExecutionError
from ..workflow import Task, TaskStatus
from .base import JobContext

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "workflows@localhost"
DEFAULT_SUBJECT = "Workflow {workflow_id} update"


class EmailNotificationJob:
    """
    Builds a notification message and logs it.

    Delivery is left to whatever picks up the task output; the job only
    records who would be notified and with what.
    """

    task_type = "notification"

    def __init__(
        self,
        sender: str = DEFAULT_SENDER,
        recipients: list[str] | None = None,
        subject: str = DEFAULT_SUBJECT,
    ):
        self.sender = sender
        self.recipients = recipients or []
        self.subject = subject

    def execute(self, task: Task, context: JobContext) -> dict[str, Any]:
        recipients = self.recipients or [task.client_id]
        if not all(isinstance(r, str) and r.strip() for r in recipients):
            raise JobExecutionError(self.task_type, task.id, "Notification has an empty recipient")

        completed = [t.task_type for t in context.sibling_tasks() if t.status == TaskStatus.COMPLETED]
        subject = self.subject.format(workflow_id=context.workflow_id, client_id=task.client_id)
        body = f"Completed steps: {', '.join(completed) if completed else 'none'}"

        logger.info("Sending notification for workflow %s to %s", context.workflow_id, ", ".join(recipients))
        return {
            "sender": self.sender,
            "recipients": recipients,
            "subject": subject,
            "body": body,
        }

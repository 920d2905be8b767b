"""Job registry - Static table from task type to job factory."""

from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..errors import UnknownTaskType
from .analysis import DataAnalysisJob
from .base import Job
from .notification import EmailNotificationJob
from .polygon_area import PolygonAreaJob
from .report import ReportGenerationJob

if TYPE_CHECKING:
    from ..config import AppConfig

JobFactory = Callable[[], Job]


class JobRegistry:
    """
    Immutable mapping of task types to job factories.

    Built once at startup. Every resolve() creates a fresh job instance so
    no state is shared between executions.
    """

    def __init__(self, factories: Mapping[str, JobFactory]):
        self._factories = MappingProxyType(dict(factories))

    def resolve(self, task_type: str) -> Job:
        """
        Create the job that handles a task type.

        Raises:
            UnknownTaskType: No job is registered for the type
        """
        factory = self._factories.get(task_type)
        if factory is None:
            raise UnknownTaskType(task_type)
        return factory()

    def task_types(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, task_type: object) -> bool:
        return task_type in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self.task_types())

    def __len__(self) -> int:
        return len(self._factories)


def build_registry(config: "AppConfig | None" = None) -> JobRegistry:
    """
    Build the default registry.

    Args:
        config: Application config; notification settings come from here

    Returns:
        JobRegistry with the built-in jobs
    """
    notification = config.notification if config is not None else None

    def notification_job() -> Job:
        if notification is None:
            return EmailNotificationJob()
        return EmailNotificationJob(
            sender=notification.sender,
            recipients=list(notification.recipients),
            subject=notification.subject,
        )

    return JobRegistry(
        {
            "analysis": DataAnalysisJob,
            "notification": notification_job,
            "polygon_area": PolygonAreaJob,
            "report_generation": ReportGenerationJob,
        }
    )

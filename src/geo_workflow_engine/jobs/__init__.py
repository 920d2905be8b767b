"""
Jobs layer - Units of work bound to task types.

Jobs read a task (and, through a JobContext, its workflow) and return an
output. They never change task or workflow status; the runner does that.
"""

from .analysis import DataAnalysisJob
from .base import Job, JobContext
from .notification import EmailNotificationJob
from .polygon_area import PolygonAreaJob
from .registry import JobFactory, JobRegistry, build_registry
from .report import ReportGenerationJob

__all__ = [
    "Job",
    "JobContext",
    "JobFactory",
    "JobRegistry",
    "build_registry",
    "DataAnalysisJob",
    "EmailNotificationJob",
    "PolygonAreaJob",
    "ReportGenerationJob",
]

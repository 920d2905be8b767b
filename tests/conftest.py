"""Shared pytest fixtures for geo-workflow-engine tests."""

import json

import pytest
from typer.testing import CliRunner

from geo_workflow_engine.errors import JobExecutionError
from geo_workflow_engine.jobs import JobRegistry, build_registry
from geo_workflow_engine.runners import TaskRunner
from geo_workflow_engine.store import WorkflowStore
from geo_workflow_engine.workflow import WorkflowBuilder, WorkflowStep

# 1 x 1 degree square at the equator
SQUARE = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]


class RecordingJob:
    """Job that records the order it was executed in."""

    calls: list[str] = []

    def execute(self, task, context):
        RecordingJob.calls.append(task.task_type)
        return {"step": task.step_number}


class FailingJob:
    """Job that always fails with a domain error."""

    def execute(self, task, context):
        raise JobExecutionError(task.task_type, task.id, "boom")


class CrashingJob:
    """Job that fails with an unexpected exception."""

    def execute(self, task, context):
        raise RuntimeError("unexpected crash")


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def geojson_payload():
    """A feature collection with one polygon and one point."""
    return json.dumps(
        {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "properties": {"name": "square"},
                    "geometry": {"type": "Polygon", "coordinates": [SQUARE]},
                },
                {
                    "type": "Feature",
                    "properties": {},
                    "geometry": {"type": "Point", "coordinates": [0.5, 0.5]},
                },
            ],
        }
    )


@pytest.fixture
def store():
    """In-memory record store."""
    return WorkflowStore()


@pytest.fixture
def builder(store):
    return WorkflowBuilder(store)


@pytest.fixture
def registry():
    """Default job registry."""
    return build_registry()


@pytest.fixture
def recording_registry():
    """Registry of jobs that record execution order, plus failing jobs."""
    RecordingJob.calls = []
    return JobRegistry(
        {
            "a": RecordingJob,
            "b": RecordingJob,
            "c": RecordingJob,
            "d": RecordingJob,
            "fail": FailingJob,
            "crash": CrashingJob,
        }
    )


@pytest.fixture
def recording_runner(store, recording_registry):
    return TaskRunner(store, recording_registry)


@pytest.fixture
def linear_steps():
    """Three steps without dependencies."""
    return [
        WorkflowStep(task_type="analysis", step_number=1),
        WorkflowStep(task_type="notification", step_number=2),
        WorkflowStep(task_type="report_generation", step_number=3),
    ]


@pytest.fixture
def definition_file(tmp_path):
    """A valid workflow definition on disk."""
    path = tmp_path / "example_workflow.yml"
    path.write_text(
        """
name: example_workflow
steps:
  - taskType: analysis
    stepNumber: 1
  - taskType: polygon_area
    stepNumber: 2
    dependsOn: 1
  - taskType: report_generation
    stepNumber: 3
"""
    )
    return path


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path, monkeypatch):
    """Keep the user's config and environment out of tests."""
    for var in ("GWE_STORE_PATH", "GWE_DEFINITIONS_DIR", "GWE_LOG_LEVEL", "XDG_CONFIG_HOME", "XDG_DATA_HOME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("GWE_CONFIG_DIR", str(tmp_path / "config"))

"""
Workflow definitions - Declarative step lists loaded from YAML.

Example:

    name: example_workflow
    steps:
      - taskType: analysis
        stepNumber: 1
      - taskType: polygon_area
        stepNumber: 2
        dependsOn: 1

`dependsOn` always names the step number of an earlier step.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..errors import InvalidDefinition

DEFINITION_SUFFIXES = (".yml", ".yaml")

# YAML key -> accepted aliases
_STEP_KEYS = {
    "task_type": ("taskType", "task_type"),
    "step_number": ("stepNumber", "step_number"),
    "depends_on": ("dependsOn", "depends_on"),
}


@dataclass(frozen=True)
class WorkflowStep:
    """One step of a workflow definition."""

    task_type: str
    step_number: int
    depends_on: int | None = None


@dataclass
class WorkflowDefinition:
    """A named, ordered list of steps."""

    name: str
    steps: list[WorkflowStep] = field(default_factory=list)

    @property
    def task_types(self) -> list[str]:
        return [step.task_type for step in self.steps]


def _pick(raw: dict, key: str) -> Any:
    for alias in _STEP_KEYS[key]:
        if alias in raw:
            return raw[alias]
    return None


def _is_int(value: Any) -> bool:
    # bool is an int subclass; YAML `yes` must not pass as step 1
    return isinstance(value, int) and not isinstance(value, bool)


def parse_step(raw: Any, index: int) -> WorkflowStep:
    """Parse a single step mapping."""
    if not isinstance(raw, dict):
        raise InvalidDefinition(f"Step #{index + 1} must be a mapping, got {type(raw).__name__}")

    task_type = _pick(raw, "task_type")
    step_number = _pick(raw, "step_number")
    depends_on = _pick(raw, "depends_on")

    if not isinstance(task_type, str) or not task_type.strip():
        raise InvalidDefinition(f"Step #{index + 1} has no taskType")
    if not _is_int(step_number) or step_number < 1:
        raise InvalidDefinition(f"Step #{index + 1} ({task_type}) needs a positive integer stepNumber")
    if depends_on is not None and not _is_int(depends_on):
        raise InvalidDefinition(
            f"Step {step_number} ({task_type}): dependsOn must be the step number of an earlier step"
        )

    return WorkflowStep(task_type=task_type.strip(), step_number=step_number, depends_on=depends_on)


def validate_steps(steps: list[WorkflowStep]) -> None:
    """
    Check step numbers and dependency references.

    Raises:
        InvalidDefinition: step numbers that are not positive integers,
            duplicate step numbers, self-references, or dependencies on
            steps that are not listed earlier
    """
    seen: set[int] = set()
    for step in steps:
        if not _is_int(step.step_number) or step.step_number < 1:
            raise InvalidDefinition(
                f"Step {step.step_number!r} ({step.task_type}) needs a positive integer stepNumber"
            )
        if step.step_number in seen:
            raise InvalidDefinition(f"Duplicate stepNumber {step.step_number}")
        if step.depends_on is not None:
            if step.depends_on == step.step_number:
                raise InvalidDefinition(f"Step {step.step_number} depends on itself")
            if step.depends_on not in seen:
                raise InvalidDefinition(
                    f"Step {step.step_number} depends on step {step.depends_on}, which is not listed before it"
                )
        seen.add(step.step_number)


def parse_definition(data: Any) -> WorkflowDefinition:
    """Build a WorkflowDefinition from parsed YAML data."""
    if not isinstance(data, dict):
        raise InvalidDefinition("Workflow definition must be a mapping")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidDefinition("Workflow definition has no name")

    raw_steps = data.get("steps")
    if not isinstance(raw_steps, list) or not raw_steps:
        raise InvalidDefinition(f"Workflow {name!r} has no steps")

    steps = [parse_step(raw, idx) for idx, raw in enumerate(raw_steps)]
    validate_steps(steps)
    return WorkflowDefinition(name=name.strip(), steps=steps)


def load_definition(path: Path) -> WorkflowDefinition:
    """Load and validate a workflow definition file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise InvalidDefinition(f"Definition not found: {path}") from e
    except yaml.YAMLError as e:
        raise InvalidDefinition(f"Invalid YAML in {path}: {e}") from e

    return parse_definition(data)


def find_definition(name: str, directory: Path) -> Path | None:
    """Resolve a definition name to `<directory>/<name>.yml` or `.yaml`."""
    for suffix in DEFINITION_SUFFIXES:
        candidate = directory / f"{name}{suffix}"
        if candidate.exists():
            return candidate
    return None

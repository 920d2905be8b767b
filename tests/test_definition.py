"""Tests for workflow definition parsing."""

import pytest

from geo_workflow_engine.errors import InvalidDefinition
from geo_workflow_engine.workflow import WorkflowStep, load_definition, parse_definition
from geo_workflow_engine.workflow.definition import find_definition, parse_step, validate_steps


class TestParseStep:
    """Tests for single step parsing."""

    def test_camel_case_keys(self):
        step = parse_step({"taskType": "analysis", "stepNumber": 2, "dependsOn": 1}, 0)
        assert step == WorkflowStep(task_type="analysis", step_number=2, depends_on=1)

    def test_snake_case_keys(self):
        step = parse_step({"task_type": "analysis", "step_number": 1}, 0)
        assert step.depends_on is None

    def test_missing_task_type(self):
        with pytest.raises(InvalidDefinition, match="no taskType"):
            parse_step({"stepNumber": 1}, 0)

    def test_step_number_must_be_positive(self):
        with pytest.raises(InvalidDefinition, match="positive integer"):
            parse_step({"taskType": "analysis", "stepNumber": 0}, 0)

    def test_boolean_step_number_rejected(self):
        """YAML `yes` is not step 1."""
        with pytest.raises(InvalidDefinition):
            parse_step({"taskType": "analysis", "stepNumber": True}, 0)

    def test_depends_on_task_type_rejected(self):
        """dependsOn references a step number, never a task type."""
        with pytest.raises(InvalidDefinition, match="dependsOn"):
            parse_step({"taskType": "report_generation", "stepNumber": 2, "dependsOn": "analysis"}, 1)

    def test_step_must_be_mapping(self):
        with pytest.raises(InvalidDefinition, match="mapping"):
            parse_step("analysis", 0)


class TestValidateSteps:
    """Tests for step list validation."""

    def test_valid_chain(self):
        validate_steps(
            [
                WorkflowStep("analysis", 1),
                WorkflowStep("polygon_area", 2, depends_on=1),
                WorkflowStep("report_generation", 3, depends_on=1),
            ]
        )

    def test_duplicate_step_number(self):
        with pytest.raises(InvalidDefinition, match="Duplicate"):
            validate_steps([WorkflowStep("a", 1), WorkflowStep("b", 1)])

    def test_self_reference(self):
        with pytest.raises(InvalidDefinition, match="itself"):
            validate_steps([WorkflowStep("a", 1, depends_on=1)])

    def test_forward_reference(self):
        with pytest.raises(InvalidDefinition, match="not listed before"):
            validate_steps([WorkflowStep("a", 1, depends_on=2), WorkflowStep("b", 2)])

    @pytest.mark.parametrize("step_number", [0, -1, True])
    def test_step_number_must_be_positive_integer(self, step_number):
        with pytest.raises(InvalidDefinition, match="positive integer"):
            validate_steps([WorkflowStep("a", step_number)])

    def test_unknown_reference(self):
        with pytest.raises(InvalidDefinition):
            validate_steps([WorkflowStep("a", 1), WorkflowStep("b", 2, depends_on=7)])


class TestParseDefinition:
    """Tests for whole-document parsing."""

    def test_parse(self):
        definition = parse_definition(
            {
                "name": "example_workflow",
                "steps": [
                    {"taskType": "analysis", "stepNumber": 1},
                    {"taskType": "polygon_area", "stepNumber": 2, "dependsOn": 1},
                ],
            }
        )
        assert definition.name == "example_workflow"
        assert definition.task_types == ["analysis", "polygon_area"]
        assert definition.steps[1].depends_on == 1

    def test_requires_name(self):
        with pytest.raises(InvalidDefinition, match="no name"):
            parse_definition({"steps": [{"taskType": "a", "stepNumber": 1}]})

    def test_requires_steps(self):
        with pytest.raises(InvalidDefinition, match="no steps"):
            parse_definition({"name": "empty", "steps": []})

    def test_requires_mapping(self):
        with pytest.raises(InvalidDefinition):
            parse_definition(["not", "a", "mapping"])


class TestLoadDefinition:
    """Tests for loading definition files."""

    def test_load(self, definition_file):
        definition = load_definition(definition_file)
        assert definition.name == "example_workflow"
        assert [s.step_number for s in definition.steps] == [1, 2, 3]

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidDefinition, match="not found"):
            load_definition(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("name: [unclosed\n")
        with pytest.raises(InvalidDefinition, match="Invalid YAML"):
            load_definition(path)

    def test_find_definition(self, tmp_path, definition_file):
        (tmp_path / "other.yaml").write_text("name: other\n")

        assert find_definition("example_workflow", tmp_path) == definition_file
        assert find_definition("other", tmp_path) == tmp_path / "other.yaml"
        assert find_definition("missing", tmp_path) is None

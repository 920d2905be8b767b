"""
CLI module - Command line interface for Geo Workflow Engine

Entry point for the `gwe` command using Typer.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import AppConfig, load_config, validate_config
from .errors import WorkflowEngineError
from .jobs import build_registry
from .log import configure_logging
from .runners import RunnerCallbacks, RunOutcome, TaskRunner
from .store import WorkflowStore
from .workflow import TaskStatus, Workflow, WorkflowBuilder, WorkflowStatus, load_definition
from .workflow.definition import find_definition

console = Console()
app = typer.Typer(
    name="gwe",
    help="Geo Workflow Engine - run declarative task chains over GeoJSON inputs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

STATUS_STYLES = {
    "queued": "dim",
    "initial": "dim",
    "in_progress": "yellow",
    "completed": "green",
    "failed": "red",
}


def version_callback(value: bool):
    if value:
        console.print(f"gwe version {__version__}")
        raise typer.Exit()


# Type aliases for common options
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config file", exists=True, dir_okay=False),
]
StoreOption = Annotated[
    Path | None,
    typer.Option("--store", "-s", help="JSON store file (overrides config)", dir_okay=False),
]


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
):
    """Geo Workflow Engine - run declarative task chains over GeoJSON inputs."""
    pass


def get_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration and set up logging."""
    config = load_config(config_path)
    errors = validate_config(config)
    if errors:
        for error in errors:
            console.print(f"[red]Config error:[/red] {error}")
        raise typer.Exit(1)
    configure_logging(config.logging)
    return config


def open_store(config: AppConfig, store_path: Path | None) -> WorkflowStore:
    path = store_path or config.store.path
    try:
        return WorkflowStore(path)
    except WorkflowEngineError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


def format_status(status: TaskStatus | WorkflowStatus) -> str:
    style = STATUS_STYLES.get(status.value, "white")
    return f"[{style}]{status.value}[/{style}]"


def print_workflow(workflow: Workflow) -> None:
    """Print a workflow and its tasks as a table."""
    table = Table(title=f"Workflow {workflow.id}")
    table.add_column("Step", justify="right")
    table.add_column("Task Type", style="cyan")
    table.add_column("Depends On", justify="right")
    table.add_column("Status")
    table.add_column("Task ID", style="dim")

    steps_by_id = {t.id: t.step_number for t in workflow.tasks}
    for task in workflow.tasks:
        depends = str(steps_by_id.get(task.depends_on, "?")) if task.depends_on else "-"
        table.add_row(str(task.step_number), task.task_type, depends, format_status(task.status), task.id)

    console.print(table)
    console.print(f"[bold]Status:[/bold] {format_status(workflow.status)}")


def make_callbacks() -> RunnerCallbacks:
    def on_task_start(task_id: str, task_type: str):
        console.print(f"  [cyan]>[/cyan] {task_type} [dim]({task_id})[/dim]...")

    def on_task_complete(task_id: str, task_type: str, success: bool):
        if success:
            console.print(f"  [green]✓[/green] {task_type}")
        else:
            console.print(f"  [red]✗[/red] {task_type}")

    def on_task_waiting(task_id: str, dependency_id: str):
        console.print(f"  [yellow]…[/yellow] Task {task_id} waits for {dependency_id}")

    return RunnerCallbacks(
        on_task_start=on_task_start,
        on_task_complete=on_task_complete,
        on_task_waiting=on_task_waiting,
    )


def resolve_definition(definition: str, config: AppConfig) -> Path:
    """Accept either a file path or a name in the definitions directory."""
    path = Path(definition)
    if path.exists():
        return path
    if config.definitions.directory is not None:
        found = find_definition(definition, config.definitions.directory)
        if found is not None:
            return found
    console.print(f"[red]Error:[/red] Workflow definition not found: {definition}")
    raise typer.Exit(1)


@app.command()
def run(
    definition: Annotated[str, typer.Argument(help="Definition file, or name in the definitions directory")],
    client_id: Annotated[str, typer.Option("--client-id", "-u", help="Client identifier")],
    input_file: Annotated[
        Path, typer.Option("--input", "-i", help="GeoJSON input file", exists=True, dir_okay=False)
    ],
    store: StoreOption = None,
    config: ConfigOption = None,
):
    """
    Build a workflow from a definition and run it.

    [bold]Examples:[/bold]

        gwe run workflows/example_workflow.yml -u client-1 -i area.geojson

        gwe run example_workflow -u client-1 -i area.geojson --store /tmp/store.json
    """
    cfg = get_config(config)
    workflow_store = open_store(cfg, store)
    definition_path = resolve_definition(definition, cfg)

    runner = TaskRunner(workflow_store, build_registry(cfg), callbacks=make_callbacks())
    try:
        workflow = WorkflowBuilder(workflow_store).build_from_file(
            definition_path, client_id, input_file.read_text()
        )
        console.print(f"\n[bold]Running:[/bold] {workflow.name} [dim]({workflow.id})[/dim]")
        report = runner.start_workflow(workflow)
    except WorkflowEngineError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if report.outcome == RunOutcome.NO_ELIGIBLE_TASK:
        console.print("[red]Error:[/red] No starting task found for the workflow")
        raise typer.Exit(1)

    console.print()
    print_workflow(workflow_store.get_workflow(workflow.id, with_tasks=True))


@app.command()
def resume(
    task_id: Annotated[str, typer.Argument(help="Task to re-trigger")],
    store: StoreOption = None,
    config: ConfigOption = None,
):
    """Re-run a task that was waiting on its dependency, then continue the chain."""
    cfg = get_config(config)
    workflow_store = open_store(cfg, store)
    runner = TaskRunner(workflow_store, build_registry(cfg), callbacks=make_callbacks())

    try:
        report = runner.resume(task_id)
    except WorkflowEngineError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if report.outcome == RunOutcome.WAITING_ON_DEPENDENCY:
        console.print(f"[yellow]Task {task_id} is still waiting on its dependency[/yellow]")
    elif report.outcome == RunOutcome.NO_ELIGIBLE_TASK:
        console.print(f"[yellow]Task {task_id} is not queued, nothing to run[/yellow]")
    else:
        console.print(f"[green]Ran {report.tasks_completed} task(s)[/green]")


@app.command()
def status(
    workflow_id: Annotated[str, typer.Argument(help="Workflow ID")],
    store: StoreOption = None,
    config: ConfigOption = None,
):
    """Show a workflow's status and its tasks."""
    cfg = get_config(config)
    workflow = open_store(cfg, store).get_workflow(workflow_id, with_tasks=True)
    if workflow is None:
        console.print(f"[red]Error:[/red] Workflow not found: {workflow_id}")
        raise typer.Exit(1)

    print_workflow(workflow)


@app.command()
def results(
    workflow_id: Annotated[str, typer.Argument(help="Workflow ID")],
    store: StoreOption = None,
    config: ConfigOption = None,
):
    """Print the aggregated result of a completed workflow as JSON."""
    cfg = get_config(config)
    workflow = open_store(cfg, store).get_workflow(workflow_id)
    if workflow is None:
        console.print(f"[red]Error:[/red] Workflow not found: {workflow_id}")
        raise typer.Exit(1)

    if workflow.status != WorkflowStatus.COMPLETED:
        console.print(f"[red]Error:[/red] Workflow is not completed yet (status: {workflow.status.value})")
        raise typer.Exit(1)

    typer.echo(json.dumps({"workflow_id": workflow.id, "final_result": workflow.final_result}, indent=2))


@app.command()
def validate(
    definition: Annotated[Path, typer.Argument(help="Definition file", exists=True, dir_okay=False)],
    config: ConfigOption = None,
):
    """Check a workflow definition and list its steps."""
    cfg = get_config(config)
    try:
        parsed = load_definition(definition)
    except WorkflowEngineError as e:
        console.print(f"[red]Invalid:[/red] {e}")
        raise typer.Exit(1) from None

    registry = build_registry(cfg)
    table = Table(title=f"Definition: {parsed.name}")
    table.add_column("Step", justify="right")
    table.add_column("Task Type", style="cyan")
    table.add_column("Depends On", justify="right")
    table.add_column("Job")

    unknown = [t for t in parsed.task_types if t not in registry]
    for step in parsed.steps:
        known = step.task_type in registry
        table.add_row(
            str(step.step_number),
            step.task_type,
            str(step.depends_on) if step.depends_on is not None else "-",
            "[green]✓[/green]" if known else "[red]unregistered[/red]",
        )
    console.print(table)

    if unknown:
        console.print(f"[red]Unknown task types:[/red] {', '.join(unknown)}")
        raise typer.Exit(1)


@app.command("list-jobs")
def list_jobs(config: ConfigOption = None):
    """List registered task types."""
    cfg = get_config(config)
    registry = build_registry(cfg)

    table = Table(title="Registered Jobs")
    table.add_column("Task Type", style="cyan")
    table.add_column("Job")
    for task_type in registry.task_types():
        table.add_row(task_type, type(registry.resolve(task_type)).__name__)
    console.print(table)


@app.command("show-config")
def show_config(config: ConfigOption = None):
    """Print the effective configuration."""
    cfg = get_config(config)
    typer.echo(yaml.safe_dump(cfg._to_dict(), sort_keys=False))


if __name__ == "__main__":
    app()

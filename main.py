"""Main CLI entry point for the podcast asset pipeline."""
import asyncio
import json
import uuid
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from extraction.json_extractor import extract_json, NOT_FOUND
from extraction.models import JobStatus, Transcript
from generation.checkpoint import StepCheckpoint
from generation.clients import ConfigurationError, get_generator
from generation.steps import LocalStepRunner
from generation.use_cases import USE_CASES
from generation.workflow import ContentWorkflow
from utils.logger import setup_logger
import config

logger = setup_logger(__name__)
console = Console()


def load_transcript(path: Path) -> Transcript:
    """Load a transcript JSON file ({"text": ..., "chapters": [...]}).

    Args:
        path: Path to the transcript file

    Returns:
        Parsed Transcript
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return Transcript.model_validate(data)


def print_status(status: JobStatus) -> None:
    """Render the job status as a table."""
    table = Table(title=f"Job status ({status.progress}%)")
    table.add_column("Step", style="cyan")
    table.add_column("Status")
    table.add_column("Fallback")

    colours = {"pending": "dim", "running": "yellow", "completed": "green", "failed": "red"}
    for name, state in status.steps.items():
        table.add_row(
            name,
            f"[{colours[state]}]{state}[/{colours[state]}]",
            "[yellow]yes[/yellow]" if name in status.degraded else ""
        )

    console.print(table)


@click.group()
def cli():
    """Podcast Asset Pipeline - summaries, titles, hashtags, posts and chapters from a transcript"""
    pass


@cli.command()
@click.option('--transcript', 'transcript_path', required=True, type=click.Path(exists=True), help='Transcript JSON file')
@click.option('--output', type=click.Path(), default=None, help='Output JSON path')
@click.option('--only', multiple=True, type=click.Choice(list(USE_CASES)), help='Run only these assets (repeatable)')
@click.option('--job-id', default=None, help='Resume a job from its step checkpoint')
def generate(transcript_path, output, only, job_id):
    """Generate marketing assets for a transcript."""
    console.print("\n[bold cyan]Podcast Asset Generation[/bold cyan]\n")

    try:
        transcript = load_transcript(Path(transcript_path))
    except (OSError, ValueError, ValidationError) as e:
        console.print(f"[red]Could not read transcript: {e}[/red]")
        raise SystemExit(1)

    try:
        generator = get_generator()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise SystemExit(1)

    job_id = job_id or str(uuid.uuid4())
    checkpoint = StepCheckpoint(job_id)
    workflow = ContentWorkflow(generator, LocalStepRunner(checkpoint=checkpoint))

    console.print(f"Job ID: [cyan]{job_id}[/cyan]")
    content, status = asyncio.run(workflow.run(transcript, only=list(only) or None))

    output_path = Path(output) if output else config.OUTPUT_DIR / f"{job_id}.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(content.model_dump_json(by_alias=True, exclude_none=True, indent=2))

    # Clear checkpoint on success
    checkpoint.clear()

    print_status(status)
    console.print(f"\n[green]✓ Assets written to {output_path}[/green]")
    if status.degraded:
        console.print(f"[yellow]Fallback content used for: {', '.join(status.degraded)}[/yellow]")


@cli.command()
@click.option('--input', 'input_path', required=True, type=click.Path(exists=True), help='Saved raw model response')
def extract(input_path):
    """Recover the JSON object from a saved raw model response."""
    raw = Path(input_path).read_text(encoding='utf-8')
    parsed = extract_json(raw)

    if parsed is NOT_FOUND:
        console.print("[red]No JSON object could be recovered[/red]")
        raise SystemExit(1)

    console.print_json(json.dumps(parsed))


@cli.command()
def steps():
    """List the assets this pipeline generates."""
    table = Table(title="Assets")
    table.add_column("Name", style="cyan")
    table.add_column("Step")
    table.add_column("Schema")
    table.add_column("Description")

    for uc in USE_CASES.values():
        table.add_row(uc.name, uc.step_name, uc.schema.__name__, uc.description)

    console.print(table)


if __name__ == "__main__":
    cli()

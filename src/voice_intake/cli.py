"""
Command Line Interface

CLI for the voice intake pipeline. Visits persist to a JSON store so that
repeat invocations see earlier intakes.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from voice_intake import __version__
from voice_intake.errors import PatientNotFoundError, TranscriptionError
from voice_intake.intake.intake_types import CandidateRecord, PatientVisitRecord
from voice_intake.pipeline.config import IntakeConfig, load_config
from voice_intake.pipeline.pipeline import IntakePipeline

app = typer.Typer(
    name="voice-intake",
    help="Spoken patient intake to deduplicated visit records",
    add_completion=False,
)
console = Console()

ConfigOption = typer.Option(None, "--config", "-c", help="Config file")
StoreOption = typer.Option(None, "--store", "-s", help="JSON visit store file")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_pipeline(config: Optional[Path], store: Optional[Path]) -> IntakePipeline:
    """Build a pipeline whose visits live in a JSON file."""
    intake_config = load_config(config) if config else IntakeConfig.from_env()
    intake_config.store.backend = "json"
    if store:
        intake_config.store.path = str(store)
    return IntakePipeline(intake_config)


def _print_visit(visit: PatientVisitRecord) -> None:
    status = "[green]new patient[/green]" if visit.is_new_patient else "[cyan]returning patient[/cyan]"
    console.print_json(data=visit.to_dict())
    console.print(f"\n[dim]Visit {visit.id} recorded as[/dim] {status}")


@app.command()
def transcript(
    text: str = typer.Argument(..., help="Intake transcript text"),
    config: Optional[Path] = ConfigOption,
    store: Optional[Path] = StoreOption,
) -> None:
    """Record a visit from transcript text (skip transcription)."""
    pipeline = _load_pipeline(config, store)
    _print_visit(pipeline.submit_voice_transcript(text))


@app.command()
def process(
    input_file: Path = typer.Argument(..., help="Audio file to transcribe"),
    config: Optional[Path] = ConfigOption,
    store: Optional[Path] = StoreOption,
) -> None:
    """Transcribe an audio recording and record the visit."""
    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    pipeline = _load_pipeline(config, store)
    try:
        visit = pipeline.submit_voice_file(input_file)
    except (TranscriptionError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    _print_visit(visit)


@app.command()
def add(
    first_name: str = typer.Option(..., "--first", help="First name"),
    last_name: str = typer.Option(..., "--last", help="Last name"),
    phone: Optional[str] = typer.Option(None, "--phone", help="Phone number"),
    address: Optional[str] = typer.Option(None, "--address", help="Address"),
    config: Optional[Path] = ConfigOption,
    store: Optional[Path] = StoreOption,
) -> None:
    """Record a visit entered by hand."""
    pipeline = _load_pipeline(config, store)
    visit = pipeline.submit_manual_visit(
        CandidateRecord(
            first_name=first_name,
            last_name=last_name,
            phone_number=phone,
            address=address,
        )
    )
    _print_visit(visit)


@app.command()
def parse(
    text: str = typer.Argument(..., help="Intake transcript text"),
    config: Optional[Path] = ConfigOption,
) -> None:
    """Show the fields extracted from a transcript without storing them."""
    intake_config = load_config(config) if config else IntakeConfig()
    pipeline = IntakePipeline(intake_config)
    console.print_json(data=pipeline.parse(text).to_dict())


@app.command()
def patients(
    show_all: bool = typer.Option(False, "--all", "-a", help="List every visit"),
    config: Optional[Path] = ConfigOption,
    store: Optional[Path] = StoreOption,
) -> None:
    """List patients (latest visit per phone number)."""
    pipeline = _load_pipeline(config, store)
    visits = pipeline.list_all_visits() if show_all else pipeline.list_unique_patients()

    if not visits:
        console.print("[yellow]No visits recorded[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Visits" if show_all else "Patients")
    table.add_column("ID", justify="right")
    table.add_column("First name")
    table.add_column("Last name")
    table.add_column("Phone")
    table.add_column("Address")
    table.add_column("New", justify="center")

    for visit in visits:
        table.add_row(
            str(visit.id),
            visit.first_name,
            visit.last_name,
            visit.phone_number or "-",
            visit.address,
            "yes" if visit.is_new_patient else "no",
        )

    console.print(table)


@app.command()
def stats(
    patient_id: int = typer.Argument(..., help="Visit record id"),
    config: Optional[Path] = ConfigOption,
    store: Optional[Path] = StoreOption,
) -> None:
    """Show visit count for the patient behind a record."""
    pipeline = _load_pipeline(config, store)
    try:
        visit_stats = pipeline.get_stats(patient_id)
    except PatientNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print_json(data=visit_stats.to_dict())


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"voice-intake version {__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()

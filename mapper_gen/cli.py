"""mapper-gen command-line interface.

    mapper-gen generate --entity-path src/app/entity --dto-path src/app/dto \\
        --entity-namespace app.entity --dto-namespace app.dto \\
        --output-path src/generated/mapper --namespace generated.mapper
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from mapper_gen.core.config import GeneratorConfig, OverrideTable
from mapper_gen.core.discovery import MappingPair
from mapper_gen.core.enums import PairOutcome
from mapper_gen.core.exceptions import ConfigurationError
from mapper_gen.core.manager import GenerationManager, GenerationReport

app = typer.Typer(
    name="mapper-gen",
    help="Generate bidirectional entity <-> DTO mapper modules",
    add_completion=False,
)

console = Console()

_DEFAULTS = GeneratorConfig()
_OUTCOME_STYLE = {
    PairOutcome.GENERATED: "green",
    PairOutcome.SKIPPED: "yellow",
    PairOutcome.FAILED: "red",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main() -> None:
    """mapper-gen: static mapper generation."""


@app.command()
def generate(
    entity_path: Path = typer.Option(_DEFAULTS.entity_path, "--entity-path", help="Directory of entity modules"),
    dto_path: Path = typer.Option(_DEFAULTS.dto_path, "--dto-path", help="Directory of DTO modules"),
    entity_namespace: str = typer.Option(
        _DEFAULTS.entity_namespace, "--entity-namespace", help="Import path of the entity directory"
    ),
    dto_namespace: str = typer.Option(_DEFAULTS.dto_namespace, "--dto-namespace", help="Import path of the DTO directory"),
    output_path: Path = typer.Option(_DEFAULTS.output_path, "--output-path", help="Directory generated mappers go to"),
    namespace: str = typer.Option(_DEFAULTS.namespace, "--namespace", help="Import path of the output directory"),
    config: Path = typer.Option(Path("config/mappers.yaml"), "--config", "-c", help="Mapper override file (YAML)"),
    clear: bool = typer.Option(False, "--clear", help="Delete generated files before generating"),
    project_root: Path | None = typer.Option(
        None, "--project-root", help="Directory added to the import path (defaults to the working directory)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Generate mappers for every entity/DTO pair.

    Pairs come from the override file, from @maps_from on DTO classes, and
    from the naming convention Entity -> Entity*Dto. Existing mapper modules
    are left untouched.
    """
    _configure_logging(verbose)

    root = str((project_root or Path.cwd()).resolve())
    if root not in sys.path:
        sys.path.insert(0, root)

    console.print("\n[bold cyan]mapper-gen[/bold cyan]\n")

    try:
        overrides = OverrideTable.from_yaml_file(config)
        settings = GeneratorConfig(
            entity_path=entity_path,
            entity_namespace=entity_namespace,
            dto_path=dto_path,
            dto_namespace=dto_namespace,
            output_path=output_path,
            namespace=namespace,
            clear=clear,
        )
        manager = GenerationManager(settings, overrides)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("[cyan]Generating...", total=None)

            def on_progress(pair: MappingPair, name: str, outcome: PairOutcome) -> None:
                style = _OUTCOME_STYLE[outcome]
                progress.console.print(f"  [{style}]{outcome.value:<9}[/{style}] {name}")
                progress.update(task, advance=1, description=f"[cyan]{name}")

            report = manager.run(on_progress=on_progress)

    except ConfigurationError as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    _display_report(report)


def _display_report(report: GenerationReport) -> None:
    if report.total == 0:
        console.print("[yellow]No entity/DTO pairs found.[/yellow]")
        return

    table = Table(title="Generation summary")
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Generated", str(len(report.generated)))
    table.add_row("Skipped (exists)", str(len(report.skipped)))
    table.add_row("Failed", str(len(report.failed)))
    console.print(table)

    for name, error in report.failed.items():
        console.print(f"[red]{name}:[/red] {error}")

    console.print(f"\n[bold green]Generated {len(report.generated)} mapper(s) in {report.output_path}[/bold green]")


if __name__ == "__main__":
    app()

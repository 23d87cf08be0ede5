"""Command-line interface for unity-auditor."""

import asyncio
import sys
from pathlib import Path

from loguru import logger
from rich.markup import escape
from rich.table import Table
from typer import Argument, Exit, Option, Typer

from .analyzer import AuditorError, ProjectAnalyzer, console
from .config import settings
from .models import AnalysisReport

app = Typer(help="Static analysis of Unity projects: scene hierarchies and unused scripts.")


def configure_logging(verbose: bool, quiet: bool):
    level = "DEBUG" if verbose else "WARNING" if quiet else settings.log_level
    logger.remove()
    logger.add(sys.stderr, level=level)


@app.command()
def analyze(
    project_path: Path = Argument(..., help="Path to the Unity project root"),
    output_path: Path = Argument(..., help="Folder for .dump files and the unused-script report"),
    scenes: bool = Option(True, "--scenes/--no-scenes", help="Write a .dump file with the GameObject tree of every scene"),
    scripts: bool = Option(True, "--scripts/--no-scripts", help="Write the unused-script report"),
    max_workers: int = Option(settings.max_concurrent_files, min=1, help="Files processed concurrently"),
    verbose: bool = Option(False, "--verbose", "-v", help="Log debug details"),
    quiet: bool = Option(False, "--quiet", "-q", help="Only log warnings and skip summary tables"),
):
    """Dump every scene hierarchy and report unused scripts."""
    configure_logging(verbose, quiet)
    run_settings = settings.model_copy(update={"max_concurrent_files": max_workers})
    analyzer = ProjectAnalyzer(project_path, output_path, settings=run_settings)

    try:
        report = asyncio.run(analyzer.analyze(scenes=scenes, scripts=scripts, quiet=quiet))
    except AuditorError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise Exit(code=1)

    if not quiet:
        display_results(report)
    console.print("Analysis completed successfully.")


def display_results(report: AnalysisReport):
    """Display scene and script usage summaries."""
    if report.scenes:
        table = Table(title="Scene Hierarchies", show_header=True)
        table.add_column("Scene", style="cyan")
        table.add_column("Objects", style="magenta")
        table.add_column("Roots", style="green")
        table.add_column("Dump", style="yellow")
        for scene in report.scenes:
            table.add_row(scene.scene_name, str(scene.lines), str(scene.roots), Path(scene.dump_path).name)
        console.print(table)

    if report.report_path:
        usage_table = Table(title="Script Usage", show_header=True)
        usage_table.add_column("Metric", style="blue")
        usage_table.add_column("Value", style="green")
        usage_table.add_row("Scripts", str(report.scripts_found))
        usage_table.add_row("Scene References", str(report.references_found))
        usage_table.add_row("Used Scripts", str(report.used_scripts))
        usage_table.add_row("Stale Field References", str(report.stale_references))
        usage_table.add_row("Duplicate GUIDs", str(len(report.duplicate_guids)))
        usage_table.add_row("Unused Scripts", str(len(report.unused)))
        console.print(usage_table)

    for note in report.notes:
        console.print(f"[yellow]Warning:[/yellow] {note}")

    console.print(f"\nAnalysis Duration: {report.duration:.2f} seconds")


if __name__ == "__main__":
    app()

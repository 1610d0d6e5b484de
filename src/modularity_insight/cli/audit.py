"""Modularity audit command."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..exceptions import InvalidConfigError, ModularityInsightError
from ..extraction import DependencyExtractor, PythonImportExtractor, StaticExtractor
from ..graph.engine import ModularityAuditor
from ..graph.models import ModularityReport
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config
from ._display import print_report

REPORT_JSON = "ModularityReport.json"
REPORT_SVG = "ModularityReport.svg"

_FORMATS = ("rich", "json")


@app.command()
def audit(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the codebase directory",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    from_json: Optional[Path] = typer.Option(
        None,
        "--from-json",
        help="Audit a pre-computed {module: [deps]} JSON file (e.g. madge --json) instead of scanning",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help=f"Write {REPORT_JSON} (and {REPORT_SVG} when available) to this directory",
        file_okay=False,
        dir_okay=True,
    ),
    resolution: Optional[float] = typer.Option(
        None,
        "--resolution",
        "-r",
        help="Louvain resolution (higher splits into more communities)",
        min=0.01,
    ),
    no_layout: bool = typer.Option(
        False,
        "--no-layout",
        help="Skip the dependency diagram and node coordinates",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show every module and debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress logging",
    ),
):
    """
    Audit module coupling, communities, centrality and cycles.

    [bold cyan]Examples:[/bold cyan]

      modularity-insight audit src/

      modularity-insight audit --from-json deps.json --format json

      modularity-insight audit . --output-dir reports/ --resolution 1.2
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        if fmt not in _FORMATS:
            raise InvalidConfigError("format", fmt, f"expected one of: {', '.join(_FORMATS)}")

        settings = resolve_config(
            config=config,
            resolution=resolution,
            no_layout=no_layout,
            verbose=verbose,
            quiet=quiet,
        )

        extractor: DependencyExtractor
        if from_json is not None:
            extractor = StaticExtractor.from_json_file(from_json)
        else:
            extractor = PythonImportExtractor(path.resolve(), settings)

        if fmt == "rich" and not quiet:
            console.print()
            console.print("[bold cyan]MODULARITY INSIGHT — Dependency Audit[/bold cyan]")
            console.print()

        report = ModularityAuditor(extractor, config=settings).audit()

        if report is None:
            if fmt == "json":
                print(json.dumps({}))
            else:
                console.print("[yellow]No modules to audit; nothing to report.[/yellow]")
            raise typer.Exit(0)

        if output_dir is not None:
            written = write_report_files(report, output_dir)
            if fmt == "rich" and not quiet:
                for target in written:
                    console.print(f"  Wrote [green]{target}[/green]")
                console.print()

        if fmt == "json":
            print(json.dumps(report.to_dict(), indent=2))
        else:
            print_report(report, verbose=verbose)

    except typer.Exit:
        raise
    except ModularityInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


def write_report_files(report: ModularityReport, output_dir: Path) -> list[Path]:
    """Write the JSON report and, if one was rendered, the SVG diagram."""
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    json_path = output_dir / REPORT_JSON
    json_path.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
    written.append(json_path)

    if report.diagram:
        svg_path = output_dir / REPORT_SVG
        svg_path.write_bytes(report.diagram)
        written.append(svg_path)

    return written

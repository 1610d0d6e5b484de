"""Rich terminal rendering of a modularity report."""

from rich.markup import escape
from rich.table import Table

from ..classification import CentralityBand, classify_centrality, classify_instability
from ..graph.models import ModularityReport
from ._common import console

MAX_ROWS = 15


def _modularity_label(q: float) -> str:
    if q > 0.5:
        return "well-separated modules"
    elif q > 0.3:
        return "moderate separation"
    elif q > 0.1:
        return "some coupling between modules"
    else:
        return "highly interconnected"


def print_summary(report: ModularityReport) -> None:
    graph = report.graph
    console.print(
        f"  [bold]{graph.node_count()}[/bold] modules, "
        f"[bold]{graph.edge_count()}[/bold] dependency edges"
    )
    console.print(
        f"  [bold]{report.communities.community_count}[/bold] communities "
        f"(modularity: {report.modularity:.2f} — {_modularity_label(report.modularity)})"
    )
    console.print(f"  density: {report.density:.4f}")
    console.print()


def print_communities(report: ModularityReport, verbose: bool = False) -> None:
    communities = sorted(report.communities.communities, key=lambda c: -len(c.members))
    console.print("[bold]Communities[/bold]")
    table = Table(show_header=True)
    table.add_column("ID", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Members", style="cyan")

    shown = communities if verbose else communities[:MAX_ROWS]
    for community in shown:
        table.add_row(str(community.id), str(len(community.members)), ", ".join(community.members))
    console.print(table)
    if len(shown) < len(communities):
        console.print(f"  [dim]... and {len(communities) - len(shown)} more (use --verbose)[/dim]")
    console.print()


def print_coupling(report: ModularityReport, verbose: bool = False) -> None:
    """Coupling table, most unstable modules first."""
    rows = sorted(
        report.coupling.items(), key=lambda item: (-item[1].instability_index, item[0])
    )
    console.print("[bold]Coupling[/bold]")
    table = Table(show_header=True)
    table.add_column("Module", style="cyan")
    table.add_column("Ce", justify="right")
    table.add_column("Ca", justify="right")
    table.add_column("Instability", justify="right")
    table.add_column("Zone")

    shown = rows if verbose else rows[:MAX_ROWS]
    for module, record in shown:
        zone = classify_instability(record.instability_index)
        table.add_row(
            module,
            str(record.efferent_coupling),
            str(record.afferent_coupling),
            f"[{zone.style}]{record.formatted_instability}[/{zone.style}]",
            zone.value,
        )
    console.print(table)
    if len(shown) < len(rows):
        console.print(f"  [dim]... and {len(rows) - len(shown)} more (use --verbose)[/dim]")
    console.print()


def print_centrality(report: ModularityReport, verbose: bool = False) -> None:
    """Centrality table; without --verbose only hubs and isolated modules are listed."""
    centrality = report.centrality
    rows = []
    for module, value in centrality.degree.items():
        band = classify_centrality(value)
        if verbose or band.flagged:
            rows.append((module, value, band))
    rows.sort(key=lambda row: (-row[1], row[0]))

    if not rows:
        console.print("[green]All modules within the healthy centrality band.[/green]")
        console.print()
        return

    console.print("[bold]Degree Centrality[/bold]")
    table = Table(show_header=True)
    table.add_column("Module", style="cyan")
    table.add_column("Degree", justify="right")
    table.add_column("In", justify="right")
    table.add_column("Out", justify="right")
    table.add_column("Band")
    for module, value, band in rows[: None if verbose else MAX_ROWS]:
        style = "red" if band is CentralityBand.HUB else "yellow" if band.flagged else "green"
        table.add_row(
            module,
            f"{value:.3f}",
            f"{centrality.in_degree[module]:.3f}",
            f"{centrality.out_degree[module]:.3f}",
            f"[{style}]{band.value}[/{style}]",
        )
    console.print(table)
    console.print()


def print_cycles(report: ModularityReport) -> None:
    if not report.circular_groups:
        console.print("[green]No circular dependencies.[/green]")
        console.print()
        return
    console.print(f"[bold red]Circular Dependencies[/bold red] ({len(report.circular_groups)})")
    for group in report.circular_groups:
        console.print(f"  {escape(' -> '.join(group + group[:1]))}")
    console.print()


def print_warnings(report: ModularityReport) -> None:
    if not report.warnings:
        return
    console.print(f"[yellow]Warnings[/yellow] ({len(report.warnings)})")
    for warning in report.warnings:
        console.print(f"  [dim]{escape(warning)}[/dim]")
    console.print()


def print_report(report: ModularityReport, verbose: bool = False) -> None:
    print_summary(report)
    print_cycles(report)
    print_communities(report, verbose=verbose)
    print_coupling(report, verbose=verbose)
    print_centrality(report, verbose=verbose)
    print_warnings(report)

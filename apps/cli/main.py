"""CLI application for DepClash."""

import json
import logging

import typer
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from core.graph import DependencyGraph, GraphBuilder
from core.models import ConflictReport, DependencyNode, ModuleIdentity, ResolutionStatus
from core.provider import InstalledDistributionProvider
from core.report import ConflictReporter

console = Console()

SEPARATOR = "=" * 36
USAGE = "Usage: depclash ROOT\n\nGive name of root module, e.g. 'requests' or 'requests[socks]==2.31.0'"

STATUS_STYLES = {
    ResolutionStatus.RESOLVED: "green",
    ResolutionStatus.INCOMPATIBLE: "red",
    ResolutionStatus.MISSING: "yellow",
    ResolutionStatus.PENDING: "dim",
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def format_path(path: list[ModuleIdentity], indent: int = 4) -> str:
    """Format a root-to-node path, one step per line, each step indented further."""
    lines = []
    for depth, identity in enumerate(path):
        lines.append(f"{' ' * (depth * indent)}{identity.full_name} ->")
    return "\n".join(lines)


def format_json_output(report: ConflictReport) -> str:
    """Format JSON output."""
    return json.dumps(report.to_dict(), indent=2)


def render_report(report: ConflictReport) -> None:
    """Print mismatches, real conflicts in red, and missing references in yellow."""
    console.print()
    for mismatch in report.mismatches:
        console.print(SEPARATOR)
        if mismatch.conflicting:
            console.print(Text(f"Mismatch for {mismatch.name}", style="bold red"))
        else:
            header = Text(f"Mismatch for {mismatch.name}", style="bold yellow")
            header.append(f"  (specifiers differ, all satisfied by installed {', '.join(mismatch.installed_versions)})", style="dim")
            console.print(header)
        for occurrence in mismatch.occurrences:
            console.print(Text(format_path(occurrence.path[:-1])))
            leaf = Text(f"    {occurrence.identity.full_name}", style="red" if mismatch.conflicting else "yellow")
            if occurrence.installed_version:
                leaf.append(f"  (installed {occurrence.installed_version}, {occurrence.status.value})", style="dim")
            console.print(leaf)
            console.print()

    console.print(SEPARATOR)
    console.print(Text("Missing modules:", style="bold yellow"))
    for entry in report.missing:
        line = Text(entry.identity.full_name, style="yellow")
        line.append(" referenced by")
        console.print(line)
        console.print(Text(format_path(entry.referenced_by)))

    if not report.has_problems:
        console.print(Text(f"No conflicts found across {report.node_count} modules", style="green"))


def render_tree(graph: DependencyGraph) -> None:
    """Print every node of the graph as a tree."""

    def label(node: DependencyNode) -> Text:
        text = Text(node.identity.full_name, style=STATUS_STYLES[node.status])
        if node.installed_version:
            text.append(f" ({node.installed_version})", style="dim")
        return text

    tree = Tree(label(graph.root))
    stack = [(graph.root, tree)]
    while stack:
        node, branch = stack.pop()
        for child in node.children:
            stack.append((child, branch.add(label(child))))
    console.print(tree)


app = typer.Typer(
    name="depclash",
    help="DepClash - Report version conflicts and missing modules in a dependency graph",
    add_completion=False,
)


@app.command()
def inspect(
    root: str | None = typer.Argument(None, help="Root module identifier, e.g. 'requests' or 'requests[socks]'"),
    paths: list[str] | None = typer.Option(None, "--path", "-p", help="Search these directories for installed modules"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
    show_tree: bool = typer.Option(False, "--tree", help="Also print the whole dependency graph"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """DepClash - Inspect the dependency graph of a root module."""

    if root is None:
        console.print(USAGE, markup=False)
        raise typer.Exit(0)

    configure_logging(verbose)

    try:
        if format_type not in ("text", "json"):
            console.print(f"Error: Unsupported format: {format_type}", style="red", markup=False)
            raise typer.Exit(1)

        provider = InstalledDistributionProvider(paths=paths)
        graph = GraphBuilder(provider).build(root)
        report = ConflictReporter(graph).build_report()

        if format_type == "json":
            console.print(format_json_output(report), markup=False, highlight=False, soft_wrap=True)
            return

        if show_tree:
            render_tree(graph)
        render_report(report)

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"Error: {e}", style="red", markup=False)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

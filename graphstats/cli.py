import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from graphstats.analysis.algorithms import NetworkxAlgorithmsProvider
from graphstats.analysis.nlp import TextDocumentProvider
from graphstats.core.factory import LinkStatCalculatorFactory, NodeStatCalculatorFactory
from graphstats.core.orchestrator import RecomputeOrchestrator
from graphstats.core.snapshot import GraphSnapshotProvider
from graphstats.models import (
    EntityKind,
    StatPurpose,
    link_stat_function_labels,
    node_stat_function_labels,
)
from graphstats.utils.config import get_stats_settings, load_config_with_overrides

app_cli = typer.Typer(help="Compute and normalize statistics over knowledge graphs")


@app_cli.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


def _dump(stats: Dict[Any, Any]) -> Dict[str, Dict[str, float]]:
    out = {}
    for key, stat in stats.items():
        name = "->".join(map(str, key)) if isinstance(key, tuple) else str(key)
        out[name] = {"measure": stat.measure, "value": stat.value}
    return out


@app_cli.command()
def compute(
    graph: Path = typer.Argument(..., exists=True, help="Graph JSON with nodes and links"),
    config: Optional[Path] = typer.Option(None, help="YAML configuration file"),
    node_size: Optional[str] = typer.Option(None, help="Node size function"),
    node_color: Optional[str] = typer.Option(None, help="Node color function"),
    link_size: Optional[str] = typer.Option(None, help="Link size function"),
    link_color: Optional[str] = typer.Option(None, help="Link color function"),
    invert_nodes: bool = typer.Option(False, help="Evaluate node functions on the reversed graph"),
    invert_links: bool = typer.Option(False, help="Evaluate link functions from their target"),
    output: Optional[Path] = typer.Option(None, help="Write results to this file"),
):
    """Run one statistics pass over ``GRAPH`` and print the results as JSON."""
    stats_overrides: Dict[str, Any] = {
        "nodes_size_function": node_size,
        "nodes_color_function": node_color,
        "links_size_function": link_size,
        "links_color_function": link_color,
    }
    if invert_nodes:
        stats_overrides["invert_node_stats"] = True
    if invert_links:
        stats_overrides["invert_link_stats"] = True
    overrides = {"stats": {k: v for k, v in stats_overrides.items() if v is not None}}

    cfg = load_config_with_overrides(str(config) if config else None, overrides)
    try:
        settings = get_stats_settings(cfg)
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1)

    data = json.loads(graph.read_text())
    provider = GraphSnapshotProvider.from_dict(data)
    documents = TextDocumentProvider.from_nodes(data.get("nodes", []))
    algorithms = NetworkxAlgorithmsProvider(provider, documents)
    orchestrator = RecomputeOrchestrator(
        provider, settings, algorithms=algorithms, documents=documents
    )
    asyncio.run(orchestrator.recompute())

    result: Dict[str, Any] = {"generation": provider.generation}
    for kind in EntityKind:
        for purpose in StatPurpose:
            key = f"{kind.value}_{purpose.value}"
            result[key] = _dump(orchestrator.stats(kind, purpose))
            warning = orchestrator.get_warning(kind, purpose)
            if warning:
                result.setdefault("warnings", {})[key] = warning

    text = json.dumps(result, indent=2)
    if output:
        output.write_text(text)
        typer.echo(f"Statistics written to {output}")
    else:
        typer.echo(text)


@app_cli.command()
def functions():
    """List node and link statistic functions."""
    typer.echo("Node functions:")
    for function, label in node_stat_function_labels.items():
        warning = NodeStatCalculatorFactory.get_warning(function)
        suffix = f" ({warning})" if warning else ""
        typer.echo(f"  {function.value}: {label}{suffix}")
    typer.echo("Link functions:")
    for function, label in link_stat_function_labels.items():
        warning = LinkStatCalculatorFactory.get_warning(function)
        suffix = f" ({warning})" if warning else ""
        typer.echo(f"  {function.value}: {label}{suffix}")


if __name__ == "__main__":
    app_cli()

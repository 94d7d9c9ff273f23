from pathlib import Path
from typing import Optional

import click
import yaml
from fabricmap_cli.status import fail
from fabricmap_cli.topology.request import build_request, request_options
from fabricmap_core.data import load_yaml_raw
from fabricmap_core.errors import TopologyError
from fabricmap_core.stats import CounterSink
from fabricmap_providers.annotations import get_node_annotations, merge_node_annotations
from fabricmap_providers.base import InstanceLister
from fabricmap_providers.pipeline import generate_topology
from fabricmap_providers.registry import PROVIDERS
from rich.console import Console
from rich.table import Table


@click.group()
def topology() -> None:
    """Cluster topology discovery and scheduler config generation."""
    pass


def _print_stats(sink: CounterSink) -> None:
    console = Console(stderr=True)
    table = Table(title="Node extraction")
    table.add_column("Subsystem", style="cyan")
    table.add_column("Status")
    table.add_column("Nodes", justify="right")
    for (subsystem, status), count in sorted(sink.snapshot().items()):
        table.add_row(subsystem, status, str(count))
    console.print(table)


def _write(text: str, output: Optional[str]) -> None:
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        click.echo(f"Wrote {path}", err=True)
    else:
        # plain echo: rich would read "[1-4]" in node lists as markup
        click.echo(text, nl=False)


@topology.command("generate")
@request_options
@click.option("--engine", type=str, help="Output engine (default: slurm).")
@click.option(
    "--plugin",
    type=click.Choice(["topology/tree", "topology/block"]),
    help="SLURM topology plugin to emit.",
)
@click.option("--comments", is_flag=True, help="Precede renamed switches with '# name=id' lines.")
@click.option("--block-sizes", type=str, help="topology/block BlockSizes, comma-separated (e.g. 4,8).")
@click.option("--output", type=click.Path(path_type=str, dir_okay=False), help="Write to file instead of stdout.")
@click.option("--stats", "show_stats", is_flag=True, help="Print node extraction counters to stderr.")
def generate(
    request_path: Optional[str],
    provider: Optional[str],
    model_file: Optional[str],
    params: tuple[str, ...],
    page_size: Optional[int],
    instances: Optional[str],
    region: str,
    engine: Optional[str],
    plugin: Optional[str],
    comments: bool,
    block_sizes: Optional[str],
    output: Optional[str],
    show_stats: bool,
) -> None:
    """Discover the topology and print it in scheduler format."""
    engine_params = {}
    if plugin:
        engine_params["plugin"] = plugin
    if comments:
        engine_params["comments"] = True
    if block_sizes:
        engine_params["blockSizes"] = block_sizes

    sink = CounterSink()
    try:
        request = build_request(request_path, provider, model_file, params, page_size, instances, region, engine_params)
        if engine:
            request.engine.name = engine
        text = generate_topology(request, PROVIDERS, sink)
    except TopologyError as e:
        if show_stats:
            _print_stats(sink)
        fail(e)

    if show_stats:
        _print_stats(sink)
    _write(text, output)


@topology.command("instances")
@request_options
def instances_cmd(
    request_path: Optional[str],
    provider: Optional[str],
    model_file: Optional[str],
    params: tuple[str, ...],
    page_size: Optional[int],
    instances: Optional[str],
    region: str,
) -> None:
    """List the instances a provider knows about, grouped by region (YAML)."""
    try:
        request = build_request(request_path, provider, model_file, params, page_size, instances, region)
        loaded = PROVIDERS.load(request.provider)
        if not isinstance(loaded, InstanceLister):
            raise TopologyError.request(f"provider {request.provider.name!r} cannot list its instances")
        groups = loaded.get_compute_instances()
    except TopologyError as e:
        fail(e)

    doc = [{"region": g.region, "instances": sorted(g.instances)} for g in groups]
    click.echo(yaml.safe_dump(doc, sort_keys=False), nl=False)


@topology.command("providers")
def providers() -> None:
    """List registered providers."""
    console = Console()
    table = Table(title="Providers")
    table.add_column("Name", style="cyan")
    for name in PROVIDERS.names():
        table.add_row(name)
    console.print(table)


@topology.command("annotations")
@click.option("--provider", type=str, required=True, help="Provider name, e.g. crusoe.")
@click.option("--node", "node_name", type=str, envvar="NODE_NAME", help="Node name (defaults to $NODE_NAME).")
@click.option(
    "--node-file",
    type=click.Path(path_type=str, dir_okay=False, exists=True),
    help="Node manifest to merge the annotations into.",
)
@click.option("--output", type=click.Path(path_type=str, dir_okay=False), help="Write to file instead of stdout.")
def annotations(provider: str, node_name: Optional[str], node_file: Optional[str], output: Optional[str]) -> None:
    """Print the topology annotations for one node (YAML)."""
    try:
        values = get_node_annotations(provider, node_name or "")
        if node_file:
            try:
                node = load_yaml_raw(node_file)
            except (OSError, ValueError) as e:
                raise TopologyError.request(f"failed to read node manifest: {e}") from e
            if not isinstance(node, dict):
                raise TopologyError.request(f"node manifest {node_file} is not a mapping")
            doc = merge_node_annotations(node, values)
        else:
            doc = values
    except TopologyError as e:
        fail(e)

    _write(yaml.safe_dump(doc, sort_keys=False), output)

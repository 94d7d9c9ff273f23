from pathlib import Path
from typing import Optional

import click
from fabricmap_cli.status import fail
from fabricmap_cli.topology.request import build_request, request_options
from fabricmap_core.errors import TopologyError
from fabricmap_graph.render import render_switch_tree
from fabricmap_providers.pipeline import generate_tree


@click.group()
def graph():
    pass


@graph.command()
@request_options
@click.option(
    "--output",
    type=click.Path(path_type=str, dir_okay=False),
    default="fabricmap_switch_tree.dot",
    show_default=True,
    help="Graphviz source file to write.",
)
@click.option("--no-nodes", is_flag=True, help="Draw switches only, without the node lists under leaves.")
@click.option("--render", "do_render", is_flag=True, help="Also render the graph (requires the graphviz binaries).")
def tree(
    request_path: Optional[str],
    provider: Optional[str],
    model_file: Optional[str],
    params: tuple[str, ...],
    page_size: Optional[int],
    instances: Optional[str],
    region: str,
    output: str,
    no_nodes: bool,
    do_render: bool,
):
    """Draw the discovered switch tree."""
    try:
        request = build_request(request_path, provider, model_file, params, page_size, instances, region)
        root = generate_tree(request)
    except TopologyError as e:
        fail(e)

    dot = render_switch_tree(root, show_nodes=not no_nodes)
    if do_render:
        dot.render(output)
    else:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        dot.save(str(path))
    click.echo(f"Wrote {output}", err=True)

import logging

import click
from fabricmap_cli.graph.graph import graph
from fabricmap_cli.topology.topology import topology
from fabricmap_core.codebase import configure_logger


@click.group()
@click.option("-v", "--verbose", count=True, help="Log more (-v info, -vv debug). Default from FABRICMAP_LOG_LEVEL.")
def cli(verbose: int):
    if verbose >= 2:
        configure_logger(logging.DEBUG)
    elif verbose == 1:
        configure_logger(logging.INFO)
    else:
        configure_logger()


# add cli groups here

cli.add_command(topology)
cli.add_command(graph)

"""
Loaders for simulation models and topology request documents.

Simulation models describe a cluster statically: a switch hierarchy plus
capacity blocks of compute nodes. Node lists may use range expressions
(``n[1-4]``) which are expanded at load time.
"""

from pathlib import Path

from fabricmap_core.data.loader import load_yaml_typed
from fabricmap_core.models.request import TopologyRequest
from fabricmap_core.models.sim import SimModel
from fabricmap_core.topology.ranges import expand


def load_model(path: Path | str) -> SimModel:
    """
    Load and validate a simulation model.

    Args:
        path: Path to model YAML file

    Returns:
        Validated model with node range expressions expanded

    Raises:
        ValueError: If the YAML structure is invalid or a range expression is malformed
        FileNotFoundError: If file doesn't exist
    """
    model = load_yaml_typed(path, model=SimModel)
    for cb in model.capacity_blocks:
        nodes: list[str] = []
        for entry in cb.nodes:
            try:
                nodes.extend(expand(entry))
            except ValueError as e:
                raise ValueError(f"Invalid node expression in capacity block {cb.name!r} of {path}: {e}") from e
        cb.nodes = nodes
    return model


def load_request(path: Path | str) -> TopologyRequest:
    """Load a topology request document (YAML or JSON)."""
    return load_yaml_typed(path, model=TopologyRequest)

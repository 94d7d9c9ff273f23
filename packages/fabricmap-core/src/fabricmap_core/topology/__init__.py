from .builder import build_tree, node_name_map
from .cluster import (
    Candidate,
    ClusterTopology,
    extract_topology,
    requested_node_ids,
    resolve_empty_topology_error,
    should_skip,
)
from .paginate import paginate
from .ranges import expand, fold, fold_string

__all__ = [
    "Candidate",
    "ClusterTopology",
    "build_tree",
    "expand",
    "extract_topology",
    "fold",
    "fold_string",
    "node_name_map",
    "paginate",
    "requested_node_ids",
    "resolve_empty_topology_error",
    "should_skip",
]

from .nodes import (
    FileNodeSource,
    KubectlNodeSource,
    NodeRec,
    NodeSource,
    matches_selector,
    parse_node_list,
    selector_string,
)

__all__ = [
    "FileNodeSource",
    "KubectlNodeSource",
    "NodeRec",
    "NodeSource",
    "matches_selector",
    "parse_node_list",
    "selector_string",
]

"""
Node annotations for scheduler integrations.

A sidecar running on each node stamps the provider's view of that node
(instance ID, region) as annotations so schedulers can map nodes back to
topology instances without calling the provider themselves.
"""

from collections.abc import Callable
from typing import Any

from fabricmap_core.errors import TopologyError
from fabricmap_providers import crusoe

KEY_NODE_INSTANCE = "fabricmap.dev/instance"
KEY_NODE_REGION = "fabricmap.dev/region"

# provider name -> node name -> (instance ID, region)
IDENTITIES: dict[str, Callable[[str], tuple[str, str]]] = {
    crusoe.NAME: crusoe.node_identity,
}


def get_node_annotations(provider: str, node_name: str) -> dict[str, str]:
    if not provider:
        raise TopologyError.request("must set provider")
    identity = IDENTITIES.get(provider)
    if identity is None:
        raise TopologyError.request(f"unsupported provider {provider!r}")
    if not node_name:
        raise TopologyError.request("must set node name")

    instance_id, region = identity(node_name)
    return {
        KEY_NODE_INSTANCE: instance_id,
        KEY_NODE_REGION: region,
    }


def merge_node_annotations(node: dict[str, Any], annotations: dict[str, str]) -> dict[str, Any]:
    """Copy annotations into a Node manifest (in place), creating metadata.annotations if needed."""
    metadata = node.setdefault("metadata", {})
    if metadata.get("annotations") is None:
        metadata["annotations"] = {}
    metadata["annotations"].update(annotations)
    return node

from functools import partial

from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.models import ComputeInstances, InstanceTopology
from fabricmap_core.stats import StatsSink
from fabricmap_core.topology import ClusterTopology, extract_topology, requested_node_ids
from fabricmap_providers.crusoe.labels import extract_topology_labels
from fabricmap_providers.k8s import NodeRec, NodeSource

logger = get_logger("providers.crusoe")

DISPLAY_NAME = "Crusoe"
SUBSYSTEM = "crusoe"


def build_instance_topology(node: NodeRec) -> InstanceTopology:
    """Construct the placement record from node labels (2-tier: partition -> pod -> node)."""
    partition, pod_id = extract_topology_labels(node.labels)
    return InstanceTopology(
        instance_id=node.name,
        datacenter_id=partition,
        spine_id=pod_id,
        block_id="",
        datacenter_name=partition,
        spine_name=f"pod-{pod_id}",
        block_name="",
    )


def generate_instance_topology(
    source: NodeSource,
    selector: dict[str, str] | None,
    instances: list[ComputeInstances] | None,
    sink: StatsSink | None = None,
) -> ClusterTopology:
    """Build the ClusterTopology from Kubernetes node labels."""
    requested_ids = requested_node_ids(instances, DISPLAY_NAME)

    nodes = source.list_nodes(selector)
    logger.info("Processing %d nodes (filtering: %s)", len(nodes), requested_ids is not None)

    candidates = ((node.name, partial(build_instance_topology, node)) for node in nodes)
    return extract_topology(candidates, requested_ids, subsystem=SUBSYSTEM, sink=sink)

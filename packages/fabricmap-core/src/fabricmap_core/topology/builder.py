from collections.abc import Mapping

from fabricmap_core.codebase.logs import get_logger, trace
from fabricmap_core.codebase.sorting import natural_key
from fabricmap_core.models.topology import ComputeInstances, InstanceTopology
from fabricmap_core.models.vertex import Vertex
from fabricmap_core.stats import ExtractionStats
from fabricmap_core.topology.cluster import ClusterTopology, resolve_empty_topology_error, should_skip

logger = get_logger("topology.builder")


def node_name_map(instances: list[ComputeInstances] | None) -> dict[str, str]:
    """Merge request groups into one instance ID -> node name lookup."""
    names: dict[str, str] = {}
    for group in instances or []:
        names.update(group.instances)
    return names


def _shape_conflict(dc: Vertex | None, inst: InstanceTopology) -> bool:
    if dc is None:
        return False
    spine = dc.vertices.get(inst.spine_id)
    if spine is None:
        return False
    if inst.has_block_tier:
        return bool(spine.instances)
    return bool(spine.vertices)


@trace
def build_tree(
    topology: ClusterTopology,
    name: str,
    requested_ids: set[str] | None = None,
    node_names: Mapping[str, str] | None = None,
) -> Vertex:
    """Group placement records into a datacenter -> spine -> block -> instance tree.

    A record with no block, or whose block equals its spine, hangs its
    instance directly off the spine switch. The root vertex is named after
    the provider. Raises TopologyError if no record survives.
    """
    root = Vertex(name=name, id=name)
    stats = ExtractionStats()
    node_names = node_names or {}

    # natural instance order decides which shape a contested spine keeps
    for inst in sorted(topology, key=lambda i: natural_key(i.instance_id)):
        if should_skip(inst.instance_id, requested_ids):
            stats.skipped += 1
            continue

        if _shape_conflict(root.vertices.get(inst.datacenter_id), inst):
            logger.warning(
                "Instance %r skipped: spine %r mixes block switches and direct instances",
                inst.instance_id,
                inst.spine_id,
            )
            stats.bad_labels += 1
            continue

        dc = root.add_vertex(Vertex(name=inst.datacenter_name, id=inst.datacenter_id))
        spine = dc.add_vertex(Vertex(name=inst.spine_name, id=inst.spine_id))
        leaf = spine
        if inst.has_block_tier:
            leaf = spine.add_vertex(Vertex(name=inst.block_name, id=inst.block_id))

        leaf.add_instance(inst.instance_id, node_names.get(inst.instance_id))
        stats.success += 1

    logger.debug(
        "Built tree %r: %d instances, %d skipped, %d conflicting",
        name,
        stats.success,
        stats.skipped,
        stats.bad_labels,
    )

    if stats.success == 0:
        raise resolve_empty_topology_error(stats)

    return root

"""
Cluster topology collection and the shared extraction loop.

Every provider turns its source (node labels, simulation model, cloud API)
into candidates and hands them to extract_topology(), so filtering, label
validation, statistics and the empty-result policy behave the same for all
of them.
"""

from collections.abc import Callable, Iterable, Iterator

from pydantic import ValidationError

from fabricmap_core.codebase.logs import get_logger, trace
from fabricmap_core.errors import MissingLabelsError, TopologyError
from fabricmap_core.models.topology import ComputeInstances, InstanceTopology
from fabricmap_core.stats import ExtractionStats, StatsSink, report

logger = get_logger("topology.cluster")

# (instance_id, resolve) where resolve() returns the record or raises MissingLabelsError
Candidate = tuple[str, Callable[[], InstanceTopology]]


class ClusterTopology:
    """Ordered, deduplicated collection of placement records."""

    def __init__(self, instances: Iterable[InstanceTopology] = ()):
        self._instances: dict[str, InstanceTopology] = {}
        for inst in instances:
            self.append(inst)

    def append(self, instance: InstanceTopology) -> bool:
        """Add a record; returns False when the instance ID was already present (first record wins)."""
        existing = self._instances.get(instance.instance_id)
        if existing is not None:
            if existing != instance:
                logger.warning(
                    "Instance %r reported twice with different locations, keeping the first", instance.instance_id
                )
            return False
        self._instances[instance.instance_id] = instance
        return True

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[InstanceTopology]:
        return iter(self._instances.values())

    def __contains__(self, instance_id: object) -> bool:
        return instance_id in self._instances

    def instance_ids(self) -> list[str]:
        return list(self._instances)


def requested_node_ids(instances: list[ComputeInstances] | None, provider: str) -> set[str] | None:
    """Validate the request's node groups and return the filter set.

    None means "no filtering". More than one group is rejected because the
    provider's topology has no meaning across regions.
    """
    if instances and len(instances) > 1:
        raise TopologyError.request(f"{provider} does not support multi-region topology requests")

    if not instances or not instances[0].instances:
        return None

    ids = set(instances[0].instances)
    if any(not str(i).strip() for i in ids):
        raise TopologyError.request("requested instance IDs must be non-empty")
    return ids


def should_skip(instance_id: str, requested_ids: set[str] | None) -> bool:
    if requested_ids is None:
        return False
    return instance_id not in requested_ids


def resolve_empty_topology_error(stats: ExtractionStats) -> TopologyError:
    """Pick the error for a request that produced no usable records."""
    if stats.bad_labels > 0:
        return TopologyError.internal(
            f"found matching nodes but {stats.bad_labels} were missing topology labels"
        )
    return TopologyError.not_found("no requested nodes found in cluster")


@trace
def extract_topology(
    candidates: Iterable[Candidate],
    requested_ids: set[str] | None = None,
    *,
    subsystem: str = "topology",
    sink: StatsSink | None = None,
) -> ClusterTopology:
    """Run the candidates through filtering and label validation.

    Raises TopologyError when no candidate produced a record. Failures raised
    by the candidate iterable itself (the upstream source) propagate unchanged.
    """
    topo = ClusterTopology()
    stats = ExtractionStats()

    for instance_id, resolve in candidates:
        if should_skip(instance_id, requested_ids):
            stats.skipped += 1
            continue

        try:
            instance = resolve()
        except (MissingLabelsError, ValidationError) as e:
            logger.debug("Node %r skipped: %s", instance_id, e)
            stats.bad_labels += 1
            continue

        if topo.append(instance):
            stats.success += 1

    logger.info(
        "Topology extraction: %d added, %d skipped, %d missing labels",
        stats.success,
        stats.skipped,
        stats.bad_labels,
    )
    report(sink, subsystem, stats)

    if stats.success == 0:
        raise resolve_empty_topology_error(stats)

    return topo

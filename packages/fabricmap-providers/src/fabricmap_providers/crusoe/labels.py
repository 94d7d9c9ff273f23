from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.errors import MissingLabelsError

logger = get_logger("providers.crusoe")

# Label keys for Crusoe topology information
LABEL_PARTITION_ID = "crusoe.ai/ib.partition.id"
LABEL_SWITCH_ID = "crusoe.ai/pod.id"

# Simulation model switch metadata keys
METADATA_PARTITION_ID = "partition_id"
METADATA_SWITCH_ID = "switch_id"

DEFAULT_NODE_SELECTOR = {"slurm.crusoe.ai/compute-node-type": "true"}


def _required(values: dict[str, str] | None, key: str, what: str) -> str:
    value = (values or {}).get(key, "")
    if not value:
        raise MissingLabelsError(f'missing or empty {what} "{key}"')
    return value


def extract_topology_labels(labels: dict[str, str] | None) -> tuple[str, str]:
    """Return (partition_id, switch_id) from node labels."""
    partition_id = _required(labels, LABEL_PARTITION_ID, "label")
    switch_id = _required(labels, LABEL_SWITCH_ID, "label")
    logger.debug("Extracted topology labels: partition=%r switch=%r", partition_id, switch_id)
    return partition_id, switch_id


def extract_sim_topology_labels(metadata: dict[str, str] | None) -> tuple[str, str]:
    """Return (partition_id, switch_id) from simulation switch metadata."""
    partition_id = _required(metadata, METADATA_PARTITION_ID, "metadata key")
    switch_id = _required(metadata, METADATA_SWITCH_ID, "metadata key")
    return partition_id, switch_id

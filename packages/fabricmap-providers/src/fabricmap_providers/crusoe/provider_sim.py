from collections.abc import Iterator
from functools import partial

from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.models import ComputeInstances, InstanceTopology, ProviderSpec, SimModel, SimSwitch, Vertex
from fabricmap_core.stats import StatsSink
from fabricmap_core.topology import Candidate, build_tree, extract_topology, node_name_map, paginate, requested_node_ids
from fabricmap_providers.base import Loader
from fabricmap_providers.crusoe.instance_topology import DISPLAY_NAME
from fabricmap_providers.crusoe.labels import extract_sim_topology_labels
from fabricmap_providers.crusoe.provider import NAME, REGION
from fabricmap_providers.model import load_sim_model

logger = get_logger("providers.crusoe")

NAME_SIM = "crusoe-sim"
SUBSYSTEM_SIM = "crusoe_sim"


def _sim_instance(node_name: str, pod_switch: SimSwitch) -> InstanceTopology:
    partition_id, switch_id = extract_sim_topology_labels(pod_switch.metadata)
    return InstanceTopology(
        instance_id=node_name,
        datacenter_id=partition_id,
        spine_id=switch_id,
        block_id=switch_id,
        datacenter_name=partition_id,
        spine_name=f"switch-{switch_id}",
        block_name=f"switch-{switch_id}",
    )


class ProviderSim:
    """Crusoe topology built from a static model instead of live node labels."""

    def __init__(self, model: SimModel, sink: StatsSink | None = None):
        self.model = model
        self.sink = sink

    def _candidates(self) -> Iterator[Candidate]:
        for cb in self.model.capacity_blocks:
            pod_switch = self.model.switch_for_block(cb.name)
            if pod_switch is None:
                logger.debug("Capacity block %r has no parent pod switch, skipping", cb.name)
                continue
            for node_name in cb.nodes:
                yield node_name, partial(_sim_instance, node_name, pod_switch)

    def generate_topology_config(
        self, page_size: int | None, instances: list[ComputeInstances] | None
    ) -> Vertex:
        requested_ids = requested_node_ids(instances, DISPLAY_NAME)
        topo = extract_topology(self._candidates(), requested_ids, subsystem=SUBSYSTEM_SIM, sink=self.sink)
        logger.info("Built simulation topology with %d instances", len(topo))
        root = build_tree(topo, NAME, node_names=node_name_map(instances))
        return paginate(root, page_size)

    def get_compute_instances(self) -> list[ComputeInstances]:
        nodes = {node: node for cb in self.model.capacity_blocks for node in cb.nodes}
        return [ComputeInstances(region=REGION, instances=nodes)]


def loader_sim(config: ProviderSpec, sink: StatsSink | None = None) -> ProviderSim:
    return ProviderSim(load_sim_model(config), sink)


def named_loader_sim() -> tuple[str, Loader]:
    return NAME_SIM, loader_sim

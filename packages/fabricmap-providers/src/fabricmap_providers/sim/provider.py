"""
Generic simulation provider.

Tiers come from the switch hierarchy of the model itself: the switch that
lists a capacity block is the block switch, its parent the spine and its
grandparent the datacenter. A capacity block whose switch has a parent but
no grandparent yields a 2-tier record (spine -> datacenter). Switch metadata
``display_name`` overrides the name shown to the scheduler.
"""

from collections.abc import Iterator
from functools import partial

from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.errors import MissingLabelsError
from fabricmap_core.models import ComputeInstances, InstanceTopology, ProviderSpec, SimModel, SimSwitch, Vertex
from fabricmap_core.stats import StatsSink
from fabricmap_core.topology import Candidate, build_tree, extract_topology, node_name_map, paginate, requested_node_ids
from fabricmap_providers.base import Loader
from fabricmap_providers.model import load_sim_model

logger = get_logger("providers.sim")

NAME = "sim"
REGION = "local"
DISPLAY_NAME_KEY = "display_name"


def _display(switch: SimSwitch) -> str:
    return switch.metadata.get(DISPLAY_NAME_KEY) or switch.name


def _ancestry(model: SimModel, switch: SimSwitch, depth: int = 3) -> list[SimSwitch]:
    chain = [switch]
    seen = {switch.name}
    while len(chain) < depth:
        parent = model.parent_of(chain[-1].name)
        if parent is None or parent.name in seen:
            break
        chain.append(parent)
        seen.add(parent.name)
    return chain


def _instance(node_name: str, chain: list[SimSwitch]) -> InstanceTopology:
    if len(chain) >= 3:
        block, spine, dc = chain[:3]
        return InstanceTopology(
            instance_id=node_name,
            datacenter_id=dc.name,
            spine_id=spine.name,
            block_id=block.name,
            datacenter_name=_display(dc),
            spine_name=_display(spine),
            block_name=_display(block),
        )
    if len(chain) == 2:
        spine, dc = chain
        return InstanceTopology(
            instance_id=node_name,
            datacenter_id=dc.name,
            spine_id=spine.name,
            datacenter_name=_display(dc),
            spine_name=_display(spine),
        )
    raise MissingLabelsError(f"switch {chain[0].name!r} has no parent switch")


class ProviderSim:
    def __init__(self, model: SimModel, sink: StatsSink | None = None):
        self.model = model
        self.sink = sink

    def _candidates(self) -> Iterator[Candidate]:
        for cb in self.model.capacity_blocks:
            switch = self.model.switch_for_block(cb.name)
            if switch is None:
                logger.debug("Capacity block %r is not attached to a switch, skipping", cb.name)
                continue
            chain = _ancestry(self.model, switch)
            for node_name in cb.nodes:
                yield node_name, partial(_instance, node_name, chain)

    def generate_topology_config(
        self, page_size: int | None, instances: list[ComputeInstances] | None
    ) -> Vertex:
        requested_ids = requested_node_ids(instances, NAME)
        topo = extract_topology(self._candidates(), requested_ids, subsystem=NAME, sink=self.sink)
        root = build_tree(topo, NAME, node_names=node_name_map(instances))
        return paginate(root, page_size)

    def get_compute_instances(self) -> list[ComputeInstances]:
        nodes = {node: node for cb in self.model.capacity_blocks for node in cb.nodes}
        return [ComputeInstances(region=REGION, instances=nodes)]


def loader(config: ProviderSpec, sink: StatsSink | None = None) -> ProviderSim:
    return ProviderSim(load_sim_model(config), sink)


def named_loader() -> tuple[str, Loader]:
    return NAME, loader

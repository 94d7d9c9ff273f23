from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.errors import TopologyError
from fabricmap_core.models import ComputeInstances, ProviderSpec, Vertex
from fabricmap_core.stats import StatsSink
from fabricmap_core.topology import build_tree, node_name_map, paginate
from fabricmap_providers.base import Loader
from fabricmap_providers.crusoe.instance_topology import generate_instance_topology
from fabricmap_providers.crusoe.labels import DEFAULT_NODE_SELECTOR
from fabricmap_providers.k8s import FileNodeSource, KubectlNodeSource, NodeSource

logger = get_logger("providers.crusoe")

NAME = "crusoe"
REGION = "local"


class Params(BaseModel):
    """Optional configuration for selecting Kubernetes nodes."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # filters nodes by labels (e.g., {"crusoe.ai/gpu": "h100"})
    node_selector: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_NODE_SELECTOR), alias="nodeSelector")
    # read nodes from a saved kubectl dump instead of the live cluster
    nodes_file: str | None = Field(default=None, alias="nodesFile")
    kubectl: str = "kubectl"
    context: str | None = None
    kubeconfig: str | None = None


def get_parameters(params: dict | None) -> Params:
    p = Params.model_validate(params or {})
    if p.node_selector:
        logger.info("Using node selector: %s", p.node_selector)
    return p


def node_source(params: Params) -> NodeSource:
    if params.nodes_file:
        return FileNodeSource(params.nodes_file)
    return KubectlNodeSource(kubectl=params.kubectl, context=params.context, kubeconfig=params.kubeconfig)


class Provider:
    """Topology from Crusoe node labels: partition -> pod -> instances."""

    def __init__(self, source: NodeSource, params: Params, sink: StatsSink | None = None):
        self.source = source
        self.params = params
        self.sink = sink

    def generate_topology_config(
        self, page_size: int | None, instances: list[ComputeInstances] | None
    ) -> Vertex:
        topo = generate_instance_topology(self.source, self.params.node_selector, instances, self.sink)
        logger.info("Extracted topology for %d instances", len(topo))
        root = build_tree(topo, NAME, node_names=node_name_map(instances))
        return paginate(root, page_size)

    # instance ID = node name in Kubernetes
    def instances_to_node_map(self, nodes: list[str]) -> dict[str, str]:
        return {node: node for node in nodes}

    # single region per cluster
    def get_instances_regions(self, nodes: list[str]) -> dict[str, str]:
        return {node: REGION for node in nodes}


def node_identity(node_name: str) -> tuple[str, str]:
    """(instance ID, region) a node annotation sidecar stamps on this node."""
    return node_name, REGION


def loader(config: ProviderSpec, sink: StatsSink | None = None) -> Provider:
    try:
        params = get_parameters(config.params)
    except ValidationError as e:
        raise TopologyError.request(f"invalid {NAME} parameters: {e}") from e

    source = node_source(params)
    logger.info("Created Crusoe provider with %s", type(source).__name__)
    return Provider(source, params, sink)


def named_loader() -> tuple[str, Loader]:
    return NAME, loader

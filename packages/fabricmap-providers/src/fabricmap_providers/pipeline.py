from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.engines import get_engine
from fabricmap_core.models import TopologyRequest, Vertex
from fabricmap_core.stats import StatsSink
from fabricmap_providers.registry import PROVIDERS, Registry

logger = get_logger("providers.pipeline")


def generate_tree(
    request: TopologyRequest,
    registry: Registry = PROVIDERS,
    sink: StatsSink | None = None,
) -> Vertex:
    """Load the requested provider and build the (paginated) switch tree."""
    provider = registry.load(request.provider, sink)
    return provider.generate_topology_config(request.page_size, request.nodes)


def generate_topology(
    request: TopologyRequest,
    registry: Registry = PROVIDERS,
    sink: StatsSink | None = None,
) -> str:
    """Run a whole request: provider -> tree -> engine text."""
    engine = get_engine(request.engine.name)
    root = generate_tree(request, registry, sink)
    output = engine(root, request.engine.params)
    logger.info(
        "Generated %s topology from provider %s: %d instances",
        request.engine.name,
        request.provider.name,
        root.instance_count(),
    )
    return output

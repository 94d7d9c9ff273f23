from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.data import load_model
from fabricmap_core.errors import TopologyError
from fabricmap_core.models import ProviderSpec, SimModel

logger = get_logger("providers.model")


def model_path(config: ProviderSpec) -> str:
    path = config.model_file or config.params.get("modelFile") or config.params.get("model_file")
    if not path:
        raise TopologyError.request(f"provider {config.name!r} requires a model file")
    return str(path)


def load_sim_model(config: ProviderSpec) -> SimModel:
    """Load the simulation model named by the provider config; load failures are request errors."""
    path = model_path(config)
    try:
        model = load_model(path)
    except (OSError, ValueError) as e:
        raise TopologyError.request(f"failed to load model: {e}") from e
    logger.info("Loaded simulation model: %s", path)
    return model

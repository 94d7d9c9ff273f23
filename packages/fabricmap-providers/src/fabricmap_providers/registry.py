from fabricmap_core.errors import TopologyError
from fabricmap_core.models import ProviderSpec
from fabricmap_core.stats import StatsSink
from fabricmap_providers import crusoe, sim
from fabricmap_providers.base import Loader, NamedLoader, Provider


class Registry:
    """Provider name -> loader lookup."""

    def __init__(self, *named_loaders: NamedLoader):
        self._loaders: dict[str, Loader] = {}
        for named_loader in named_loaders:
            name, loader = named_loader()
            if name in self._loaders:
                raise ValueError(f"provider {name!r} registered twice")
            self._loaders[name] = loader

    def __contains__(self, name: object) -> bool:
        return name in self._loaders

    def names(self) -> list[str]:
        return sorted(self._loaders)

    def get(self, name: str) -> Loader:
        try:
            return self._loaders[name]
        except KeyError:
            raise TopologyError.request(f"unsupported provider {name!r}") from None

    def load(self, config: ProviderSpec, sink: StatsSink | None = None) -> Provider:
        return self.get(config.name)(config, sink)


PROVIDERS = Registry(
    crusoe.named_loader,
    crusoe.named_loader_sim,
    sim.named_loader,
)

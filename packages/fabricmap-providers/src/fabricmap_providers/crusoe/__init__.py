from .provider import NAME, REGION, Params, Provider, get_parameters, loader, named_loader, node_identity
from .provider_sim import NAME_SIM, ProviderSim, loader_sim, named_loader_sim

__all__ = [
    "NAME",
    "NAME_SIM",
    "REGION",
    "Params",
    "Provider",
    "ProviderSim",
    "get_parameters",
    "loader",
    "loader_sim",
    "named_loader",
    "named_loader_sim",
    "node_identity",
]

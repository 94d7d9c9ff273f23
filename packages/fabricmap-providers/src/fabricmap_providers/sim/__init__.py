from .provider import NAME, ProviderSim, loader, named_loader

__all__ = ["NAME", "ProviderSim", "loader", "named_loader"]

from .request import EngineSpec, ProviderSpec, TopologyRequest
from .sim import SimCapacityBlock, SimModel, SimSwitch
from .topology import ComputeInstances, InstanceTopology
from .vertex import Vertex

__all__ = [
    "ComputeInstances",
    "EngineSpec",
    "InstanceTopology",
    "ProviderSpec",
    "SimCapacityBlock",
    "SimModel",
    "SimSwitch",
    "TopologyRequest",
    "Vertex",
]

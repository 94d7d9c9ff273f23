"""
Provider interfaces.

A provider turns one location source into a switch tree. Variants are
independent implementations of the same protocol; the shared extraction,
grouping and folding logic lives in fabricmap_core.topology and is invoked
identically by all of them.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from fabricmap_core.models import ComputeInstances, ProviderSpec, Vertex
from fabricmap_core.stats import StatsSink


class Provider(Protocol):
    def generate_topology_config(
        self, page_size: int | None, instances: list[ComputeInstances] | None
    ) -> Vertex:
        """Build the switch tree for the requested instances (all instances when empty)."""


@runtime_checkable
class NodeMapper(Protocol):
    """Optional capability used by scheduler integrations that annotate nodes."""

    def instances_to_node_map(self, nodes: list[str]) -> dict[str, str]: ...

    def get_instances_regions(self, nodes: list[str]) -> dict[str, str]: ...


@runtime_checkable
class InstanceLister(Protocol):
    """Optional capability of providers that can enumerate their own instances."""

    def get_compute_instances(self) -> list[ComputeInstances]: ...


Loader = Callable[[ProviderSpec, StatsSink | None], Provider]
NamedLoader = Callable[[], tuple[str, Loader]]

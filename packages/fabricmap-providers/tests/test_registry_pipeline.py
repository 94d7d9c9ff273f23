"""
Unit tests for provider dispatch, node annotations and the request pipeline.
"""

from pathlib import Path

import pytest
from fabricmap_core.errors import ErrorKind, TopologyError
from fabricmap_core.models import ComputeInstances, EngineSpec, ProviderSpec, TopologyRequest, Vertex
from fabricmap_core.stats import CounterSink
from fabricmap_providers import crusoe, sim
from fabricmap_providers.annotations import (
    KEY_NODE_INSTANCE,
    KEY_NODE_REGION,
    get_node_annotations,
    merge_node_annotations,
)
from fabricmap_providers.base import NodeMapper
from fabricmap_providers.pipeline import generate_topology, generate_tree
from fabricmap_providers.registry import PROVIDERS, Registry

MODELS = Path(__file__).parent / "models"


class StaticProvider:
    """Provider returning a fixed one-switch tree."""

    def __init__(self, config, sink=None):
        self.config = config
        self.calls = []

    def generate_topology_config(self, page_size, instances):
        self.calls.append((page_size, instances))
        root = Vertex(name="static", id="static")
        leaf = root.add_vertex(Vertex(name="s1", id="s1"))
        leaf.add_instance("n1")
        return root


def static_named_loader():
    return "static", StaticProvider


class TestRegistry:
    """Test provider lookup."""

    def test_builtin_providers(self):
        assert PROVIDERS.names() == ["crusoe", "crusoe-sim", "sim"]
        assert "crusoe" in PROVIDERS
        assert "aws" not in PROVIDERS

    def test_unsupported_provider(self):
        with pytest.raises(TopologyError) as exc:
            PROVIDERS.get("aws")
        assert exc.value.kind == ErrorKind.REQUEST
        assert "unsupported provider" in exc.value.message

    def test_duplicate_registration(self):
        with pytest.raises(ValueError):
            Registry(static_named_loader, static_named_loader)

    def test_load(self):
        registry = Registry(static_named_loader)
        provider = registry.load(ProviderSpec(name="static"))
        assert isinstance(provider, StaticProvider)

    def test_live_provider_maps_nodes(self):
        provider = PROVIDERS.load(ProviderSpec(name=crusoe.NAME))
        assert isinstance(provider, NodeMapper)


class TestAnnotations:
    """Test node annotation helpers."""

    def test_crusoe(self):
        assert get_node_annotations("crusoe", "vm-11") == {
            KEY_NODE_INSTANCE: "vm-11",
            KEY_NODE_REGION: "local",
        }

    @pytest.mark.parametrize(
        "provider,node,message",
        [
            ("", "vm-11", "must set provider"),
            (sim.NAME, "vm-11", "unsupported provider"),
            ("crusoe", "", "must set node name"),
        ],
    )
    def test_request_errors(self, provider, node, message):
        with pytest.raises(TopologyError) as exc:
            get_node_annotations(provider, node)
        assert exc.value.kind == ErrorKind.REQUEST
        assert message in exc.value.message

    def test_merge_creates_annotations(self):
        node = {"kind": "Node", "metadata": {"name": "vm-11"}}
        merged = merge_node_annotations(node, {KEY_NODE_REGION: "local"})
        assert merged is node
        assert node["metadata"]["annotations"] == {KEY_NODE_REGION: "local"}

    def test_merge_keeps_existing(self):
        node = {"metadata": {"name": "vm-11", "annotations": {"a": "b", KEY_NODE_REGION: "old"}}}
        merge_node_annotations(node, {KEY_NODE_REGION: "local"})
        assert node["metadata"]["annotations"] == {"a": "b", KEY_NODE_REGION: "local"}


class TestPipeline:
    """Test request -> provider -> engine."""

    def test_generate_tree_passes_request(self):
        registry = Registry(static_named_loader)
        groups = [ComputeInstances(region="local", instances=["n1"])]
        request = TopologyRequest(provider=ProviderSpec(name="static"), nodes=groups, page_size=8)
        root = generate_tree(request, registry)
        assert root.instance_count() == 1

    def test_generate_topology(self):
        request = TopologyRequest(
            provider=ProviderSpec(name="sim", model_file=str(MODELS / "small-tree.yaml")),
            engine=EngineSpec(name="slurm", params={"plugin": "topology/block", "blockSizes": [2]}),
        )
        sink = CounterSink()
        text = generate_topology(request, PROVIDERS, sink)
        assert text.splitlines() == [
            "BlockName=leaf1 Nodes=n[01-02]",
            "BlockName=leaf2 Nodes=n[03-04]",
            "BlockName=leaf3 Nodes=n[05-06]",
            "BlockName=rail-4 Nodes=n[07-08]",
            "BlockSizes=2",
        ]
        assert sink.get("sim", "success") == 8

    def test_unsupported_engine_before_provider(self):
        registry = Registry(static_named_loader)
        request = TopologyRequest(provider=ProviderSpec(name="static"), engine=EngineSpec(name="pbs"))
        with pytest.raises(TopologyError) as exc:
            generate_topology(request, registry)
        assert exc.value.kind == ErrorKind.REQUEST
        assert "unsupported engine" in exc.value.message

    def test_unsupported_provider(self):
        request = TopologyRequest(provider=ProviderSpec(name="aws"))
        with pytest.raises(TopologyError) as exc:
            generate_topology(request)
        assert exc.value.kind == ErrorKind.REQUEST

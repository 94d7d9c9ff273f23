"""
Tests for the fabricmap command line.
"""

import logging
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner
from fabricmap_cli.cli import cli
from fabricmap_cli.status import EXIT_CODES, http_status
from fabricmap_cli.topology.request import build_request, parse_params
from fabricmap_core.errors import ErrorKind, TopologyError

MODELS = Path(__file__).resolve().parents[2] / "fabricmap-providers" / "tests" / "models"
CRUSOE_SMALL = str(MODELS / "crusoe-small.yaml")
SMALL_TREE = str(MODELS / "small-tree.yaml")

SMALL_TREE_OUTPUT = """\
SwitchName=sim Switches=dc1
SwitchName=dc1 Switches=spine[1-2]
SwitchName=spine1 Switches=leaf[1-2]
SwitchName=leaf1 Nodes=n[01-02]
SwitchName=leaf2 Nodes=n[03-04]
SwitchName=spine2 Switches=leaf3,rail-4
SwitchName=leaf3 Nodes=n[05-06]
SwitchName=rail-4 Nodes=n[07-08]
"""


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI attaches a handler bound to the runner's stderr; drop it after each test."""
    logger = logging.getLogger("fabricmap")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def runner():
    return CliRunner()


class TestGenerate:
    """Test `fabricmap topology generate`."""

    def test_sim(self, runner):
        result = runner.invoke(cli, ["topology", "generate", "--provider", "sim", "--model-file", SMALL_TREE])
        assert result.exit_code == 0, result.output
        assert result.output == SMALL_TREE_OUTPUT

    def test_crusoe_sim_filter_with_ranges(self, runner):
        result = runner.invoke(
            cli,
            [
                "topology",
                "generate",
                "--provider",
                "crusoe-sim",
                "--model-file",
                CRUSOE_SMALL,
                "--instances",
                "a1b2c3d4-1111-1111-1111-11111111111[1-2]",
            ],
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "SwitchName=crusoe Switches=76034b3f-a826-4fb5-8a76-9afd8bc9fa8b"
        assert result.output.splitlines()[-1].endswith("Nodes=a1b2c3d4-1111-1111-1111-[111111111111-111111111112]")

    def test_block_plugin_and_sizes(self, runner):
        result = runner.invoke(
            cli,
            [
                "topology",
                "generate",
                "--provider",
                "sim",
                "--model-file",
                SMALL_TREE,
                "--plugin",
                "topology/block",
                "--block-sizes",
                "2,4",
            ],
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[-1] == "BlockSizes=2,4"
        assert "BlockName=rail-4 Nodes=n[07-08]" in result.output

    def test_comments(self, runner):
        result = runner.invoke(
            cli, ["topology", "generate", "--provider", "sim", "--model-file", SMALL_TREE, "--comments"]
        )
        assert result.exit_code == 0, result.output
        assert "# rail-4=leaf4\nSwitchName=rail-4" in result.output

    def test_page_size(self, runner):
        result = runner.invoke(
            cli, ["topology", "generate", "--provider", "sim", "--model-file", SMALL_TREE, "--page-size", "1"]
        )
        assert result.exit_code == 0, result.output
        assert "SwitchName=leaf1 Switches=leaf1.[1-2]\n" in result.output
        assert "SwitchName=leaf1.2 Nodes=n02\n" in result.output

    def test_request_file(self, runner, tmp_path):
        request = tmp_path / "request.yaml"
        request.write_text(
            yaml.safe_dump(
                {
                    "provider": {"name": "sim", "modelFile": SMALL_TREE},
                    "engine": {"name": "slurm", "params": {"plugin": "topology/block"}},
                    "nodes": [{"region": "local", "instances": {"n01": "n01"}}],
                }
            )
        )
        result = runner.invoke(cli, ["topology", "generate", "--request", str(request)])
        assert result.exit_code == 0, result.output
        assert result.output == "BlockName=leaf1 Nodes=n01\n"

    def test_output_file(self, runner, tmp_path):
        out = tmp_path / "conf" / "topology.conf"
        result = runner.invoke(
            cli,
            ["topology", "generate", "--provider", "sim", "--model-file", SMALL_TREE, "--output", str(out)],
        )
        assert result.exit_code == 0, result.output
        assert out.read_text() == SMALL_TREE_OUTPUT

    def test_crusoe_nodes_file_param(self, runner, tmp_path):
        nodes = tmp_path / "nodes.yaml"
        nodes.write_text(
            yaml.safe_dump(
                {
                    "kind": "NodeList",
                    "items": [
                        {
                            "metadata": {
                                "name": f"vm-{i}",
                                "labels": {
                                    "slurm.crusoe.ai/compute-node-type": "true",
                                    "crusoe.ai/ib.partition.id": "pa8b",
                                    "crusoe.ai/pod.id": "1",
                                },
                            }
                        }
                        for i in range(11, 15)
                    ],
                }
            )
        )
        result = runner.invoke(
            cli, ["topology", "generate", "--provider", "crusoe", "--param", f"nodesFile={nodes}"]
        )
        assert result.exit_code == 0, result.output
        assert result.output == (
            "SwitchName=crusoe Switches=pa8b\n"
            "SwitchName=pa8b Switches=pod-1\n"
            "SwitchName=pod-1 Nodes=vm-[11-14]\n"
        )

    def test_stats(self, runner):
        result = runner.invoke(
            cli,
            ["topology", "generate", "--provider", "crusoe-sim", "--model-file", CRUSOE_SMALL, "--stats"],
        )
        assert result.exit_code == 0, result.output
        assert "crusoe_sim" in result.output
        assert "success" in result.output

    def test_unsupported_provider(self, runner):
        result = runner.invoke(cli, ["topology", "generate", "--provider", "aws"])
        assert result.exit_code == 1
        assert "unsupported provider" in result.output

    def test_missing_provider(self, runner):
        result = runner.invoke(cli, ["topology", "generate"])
        assert result.exit_code == 1
        assert "--request or --provider" in result.output

    def test_not_found(self, runner):
        result = runner.invoke(
            cli,
            ["topology", "generate", "--provider", "sim", "--model-file", SMALL_TREE, "--instances", "n99"],
        )
        assert result.exit_code == 2
        assert "404" in result.output

    def test_missing_labels_is_internal(self, runner):
        result = runner.invoke(cli, ["topology", "generate", "--provider", "sim", "--model-file", CRUSOE_SMALL])
        assert result.exit_code == 3
        assert "500" in result.output

    def test_upstream(self, runner, tmp_path):
        result = runner.invoke(
            cli,
            ["topology", "generate", "--provider", "crusoe", "--param", f"nodesFile={tmp_path / 'none.yaml'}"],
        )
        assert result.exit_code == 4
        assert "502" in result.output

    def test_multi_region_request(self, runner, tmp_path):
        request = tmp_path / "request.yaml"
        request.write_text(
            yaml.safe_dump(
                {
                    "provider": {"name": "crusoe-sim", "modelFile": CRUSOE_SMALL},
                    "nodes": [
                        {"region": "region1", "instances": ["a1b2c3d4-1111-1111-1111-111111111111"]},
                        {"region": "region2", "instances": ["a1b2c3d4-2222-2222-2222-222222222221"]},
                    ],
                }
            )
        )
        result = runner.invoke(cli, ["topology", "generate", "--request", str(request)])
        assert result.exit_code == 1
        assert "multi-region" in result.output

    def test_unsupported_engine(self, runner):
        result = runner.invoke(
            cli,
            ["topology", "generate", "--provider", "sim", "--model-file", SMALL_TREE, "--engine", "pbs"],
        )
        assert result.exit_code == 1
        assert "unsupported engine" in result.output


class TestOtherCommands:
    """Test the introspection and annotation commands."""

    def test_providers(self, runner):
        result = runner.invoke(cli, ["topology", "providers"])
        assert result.exit_code == 0, result.output
        for name in ("crusoe", "crusoe-sim", "sim"):
            assert name in result.output

    def test_instances(self, runner):
        result = runner.invoke(
            cli, ["topology", "instances", "--provider", "crusoe-sim", "--model-file", CRUSOE_SMALL]
        )
        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(result.output)
        assert doc[0]["region"] == "local"
        assert len(doc[0]["instances"]) == 16

    def test_instances_not_supported(self, runner):
        result = runner.invoke(cli, ["topology", "instances", "--provider", "crusoe"])
        assert result.exit_code == 1
        assert "cannot list" in result.output

    def test_annotations(self, runner):
        result = runner.invoke(cli, ["topology", "annotations", "--provider", "crusoe", "--node", "vm-11"])
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(result.output) == {
            "fabricmap.dev/instance": "vm-11",
            "fabricmap.dev/region": "local",
        }

    def test_annotations_node_from_env(self, runner, tmp_path):
        node_file = tmp_path / "node.yaml"
        node_file.write_text("kind: Node\nmetadata:\n  name: vm-12\n")
        result = runner.invoke(
            cli,
            ["topology", "annotations", "--provider", "crusoe", "--node-file", str(node_file)],
            env={"NODE_NAME": "vm-12"},
        )
        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(result.output)
        assert doc["metadata"]["annotations"]["fabricmap.dev/instance"] == "vm-12"
        assert doc["kind"] == "Node"

    def test_annotations_without_node(self, runner):
        result = runner.invoke(
            cli, ["topology", "annotations", "--provider", "crusoe"], env={"NODE_NAME": None}
        )
        assert result.exit_code == 1
        assert "must set node name" in result.output

    def test_graph_tree(self, runner, tmp_path):
        out = tmp_path / "tree.dot"
        result = runner.invoke(
            cli, ["graph", "tree", "--provider", "sim", "--model-file", SMALL_TREE, "--output", str(out)]
        )
        assert result.exit_code == 0, result.output
        src = out.read_text()
        assert src.startswith("digraph fabricmap_switch_tree")
        assert "rail-4" in src

    def test_graph_tree_error(self, runner, tmp_path):
        result = runner.invoke(cli, ["graph", "tree", "--output", str(tmp_path / "t.dot")])
        assert result.exit_code == 1


class TestHelpers:
    """Test request assembly and status mapping."""

    def test_parse_params(self):
        assert parse_params(("nodeSelector={gpu: h100}", "kubectl=/usr/bin/kubectl")) == {
            "nodeSelector": {"gpu": "h100"},
            "kubectl": "/usr/bin/kubectl",
        }

    def test_parse_params_invalid(self):
        with pytest.raises(TopologyError):
            parse_params(("novalue",))

    def test_build_request_overrides(self):
        request = build_request(None, "sim", "m.yaml", ("a=1",), 4, "n[1-2]", "local", {"comments": True})
        assert request.provider.name == "sim"
        assert request.provider.model_file == "m.yaml"
        assert request.provider.params == {"a": 1}
        assert request.page_size == 4
        assert request.nodes[0].instances == {"n1": "n1", "n2": "n2"}
        assert request.engine.params == {"comments": True}

    def test_build_request_bad_range(self):
        with pytest.raises(TopologyError) as exc:
            build_request(None, "sim", None, (), None, "n[2-1]", "local")
        assert exc.value.kind == ErrorKind.REQUEST

    def test_status_mapping(self):
        assert http_status(ErrorKind.REQUEST) == 400
        assert http_status(ErrorKind.NOT_FOUND) == 404
        assert http_status(ErrorKind.INTERNAL) == 500
        assert http_status(ErrorKind.UPSTREAM) == 502
        assert sorted(EXIT_CODES.values()) == [1, 2, 3, 4]

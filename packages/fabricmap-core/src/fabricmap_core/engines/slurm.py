"""
SLURM topology.conf serializer.

topology/tree plugin, one line per switch in depth-first pre-order:

    SwitchName=crusoe Switches=pa8[b,c]
    SwitchName=pa8b Switches=pod-[1-2]
    SwitchName=pod-1 Nodes=vm-[11-14]

topology/block plugin, one line per leaf switch:

    BlockName=pod-1 Nodes=vm-[11-14]
    BlockSizes=4,8

Switches without any instance below them are neither emitted nor listed by
their parent.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.errors import TopologyError
from fabricmap_core.models.vertex import Vertex
from fabricmap_core.topology.ranges import fold_string

logger = get_logger("engines.slurm")

NAME = "slurm"

PLUGIN_TREE = "topology/tree"
PLUGIN_BLOCK = "topology/block"


class SlurmParams(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    plugin: Literal["topology/tree", "topology/block"] = PLUGIN_TREE
    comments: bool = False
    block_sizes: list[int] | None = Field(default=None, alias="blockSizes")

    @field_validator("plugin", mode="before")
    @classmethod
    def _default_plugin(cls, v):
        return PLUGIN_TREE if v in (None, "") else v

    @field_validator("block_sizes", mode="before")
    @classmethod
    def _coerce_sizes(cls, v):
        # allow "4,8" as well as [4, 8]
        if isinstance(v, str):
            return [int(x) for x in v.split(",") if x.strip()]
        return v


def _comment(vertex: Vertex, comments: bool) -> list[str]:
    if comments and vertex.name != vertex.id:
        return [f"# {vertex.name}={vertex.id}"]
    return []


def _nodes(vertex: Vertex) -> str:
    names = [node_name for _, node_name in vertex.sorted_instances()]
    if len(set(names)) != len(names):
        logger.warning(
            "Switch %r maps %d instances onto %d node names; repeated names are listed once",
            vertex.id,
            len(names),
            len(set(names)),
        )
    return fold_string(names)


def _tree_lines(root: Vertex, comments: bool) -> list[str]:
    lines: list[str] = []
    for vertex in root.walk():
        if vertex.instance_count() == 0:
            continue
        lines.extend(_comment(vertex, comments))
        if vertex.is_leaf:
            lines.append(f"SwitchName={vertex.name} Nodes={_nodes(vertex)}")
        else:
            children = [c.name for c in vertex.sorted_vertices() if c.instance_count() > 0]
            lines.append(f"SwitchName={vertex.name} Switches={fold_string(children)}")
    return lines


def _block_lines(root: Vertex, comments: bool, block_sizes: list[int] | None) -> list[str]:
    lines: list[str] = []
    for leaf in root.leaves():
        if not leaf.instances:
            continue
        lines.extend(_comment(leaf, comments))
        lines.append(f"BlockName={leaf.name} Nodes={_nodes(leaf)}")
    if block_sizes:
        lines.append("BlockSizes=" + ",".join(str(s) for s in block_sizes))
    return lines


def generate_output(root: Vertex, params: dict[str, Any] | None = None) -> str:
    """Render the switch tree as topology.conf text."""
    try:
        p = SlurmParams.model_validate(params or {})
    except ValidationError as e:
        raise TopologyError.request(f"invalid {NAME} engine parameters: {e}") from e

    if p.plugin == PLUGIN_BLOCK:
        lines = _block_lines(root, p.comments, p.block_sizes)
    else:
        lines = _tree_lines(root, p.comments)

    return "".join(f"{line}\n" for line in lines)

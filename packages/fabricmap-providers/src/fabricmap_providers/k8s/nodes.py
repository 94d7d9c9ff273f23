"""
Kubernetes node sources.

Providers that read topology from node labels only need the node name,
labels and annotations. Two sources supply them:

    KubectlNodeSource  runs ``kubectl get nodes -o json`` against the live cluster
    FileNodeSource     reads a saved ``kubectl get nodes -o yaml|json`` dump

Both apply an equality label selector; failures surface as UPSTREAM errors.
"""

import json
import subprocess
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.data.loader import load_yaml_raw
from fabricmap_core.errors import TopologyError

logger = get_logger("providers.k8s")


class NodeRec(BaseModel):
    """The parts of a Kubernetes Node object the providers look at."""

    model_config = ConfigDict(extra="ignore")
    name: str = Field(min_length=1)
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)

    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def _coerce_str(cls, v):
        # hand written YAML dumps may carry unquoted true/123 values
        if v is None:
            return {}
        return {str(k): _label_value(val) for k, val in dict(v).items()}


def _label_value(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, bool):
        return "true" if val else "false"
    return str(val)


def selector_string(selector: dict[str, str] | None) -> str:
    """Render an equality selector the way kubectl expects it: k1=v1,k2=v2 (sorted)."""
    if not selector:
        return ""
    return ",".join(f"{k}={v}" for k, v in sorted(selector.items()))


def matches_selector(labels: dict[str, str], selector: dict[str, str] | None) -> bool:
    if not selector:
        return True
    return all(labels.get(k) == v for k, v in selector.items())


def parse_node_list(data: Any) -> list[NodeRec]:
    """Parse a NodeList document (or a bare list of Node objects)."""
    if isinstance(data, dict):
        items = data.get("items")
        if items is None and data.get("kind") == "Node":
            items = [data]
    else:
        items = data
    if not isinstance(items, list):
        raise ValueError("expected a NodeList with an 'items' list")

    nodes: list[NodeRec] = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError(f"expected a Node object, got {type(item).__name__}")
        meta = item.get("metadata") or {}
        try:
            nodes.append(
                NodeRec(
                    name=meta.get("name") or "",
                    labels=meta.get("labels") or {},
                    annotations=meta.get("annotations") or {},
                )
            )
        except ValidationError as e:
            raise ValueError(f"invalid Node object: {e}") from e
    return nodes


class NodeSource(Protocol):
    def list_nodes(self, selector: dict[str, str] | None = None) -> list[NodeRec]: ...


class KubectlNodeSource:
    """Lists nodes through the kubectl binary."""

    def __init__(
        self,
        kubectl: str = "kubectl",
        context: str | None = None,
        kubeconfig: str | None = None,
        timeout: float = 60.0,
    ):
        self.kubectl = kubectl
        self.context = context
        self.kubeconfig = kubeconfig
        self.timeout = timeout

    def command(self, selector: dict[str, str] | None = None) -> list[str]:
        cmd = [self.kubectl, "get", "nodes", "-o", "json"]
        if selector:
            cmd += ["-l", selector_string(selector)]
        if self.context:
            cmd += ["--context", self.context]
        if self.kubeconfig:
            cmd += ["--kubeconfig", self.kubeconfig]
        return cmd

    def list_nodes(self, selector: dict[str, str] | None = None) -> list[NodeRec]:
        cmd = self.command(selector)
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout, check=False)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise TopologyError.upstream(f"failed to list nodes: {e}") from e

        if proc.returncode != 0:
            raise TopologyError.upstream(f"failed to list nodes: {proc.stderr.strip() or proc.returncode}")

        try:
            return parse_node_list(json.loads(proc.stdout))
        except ValueError as e:
            raise TopologyError.upstream(f"failed to parse node list: {e}") from e


class FileNodeSource:
    """Reads nodes from a saved kubectl dump and filters them locally."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def list_nodes(self, selector: dict[str, str] | None = None) -> list[NodeRec]:
        try:
            nodes = parse_node_list(load_yaml_raw(self.path))
        except (OSError, ValueError) as e:
            raise TopologyError.upstream(f"failed to list nodes: {e}") from e
        return [n for n in nodes if matches_selector(n.labels, selector)]

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fabricmap_core.models.topology import ComputeInstances


class ProviderSpec(BaseModel):
    """Which provider answers the request, and its provider specific params."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    name: str
    params: dict[str, Any] = Field(default_factory=dict)
    model_file: str | None = Field(default=None, alias="modelFile")


class EngineSpec(BaseModel):
    """Which scheduler format to emit, and its params (plugin, comments, block_sizes)."""

    model_config = ConfigDict(extra="ignore")
    name: str = "slurm"
    params: dict[str, Any] = Field(default_factory=dict)


class TopologyRequest(BaseModel):
    """A complete topology generation request."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    provider: ProviderSpec
    engine: EngineSpec = Field(default_factory=EngineSpec)
    nodes: list[ComputeInstances] = Field(default_factory=list)
    page_size: int | None = Field(default=None, gt=0, alias="pageSize")

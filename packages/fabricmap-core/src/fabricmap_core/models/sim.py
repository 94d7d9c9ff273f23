from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SimCapacityBlock(BaseModel):
    """Group of compute nodes attached to one switch in a simulation model."""

    model_config = ConfigDict(extra="ignore")
    name: str
    type: str | None = None
    nvlink: str | None = None
    nodes: list[str] = Field(default_factory=list)

    @field_validator("nodes", mode="before")
    @classmethod
    def _coerce_nodes(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(n) for n in v]


class SimSwitch(BaseModel):
    """Switch record in a simulation model."""

    model_config = ConfigDict(extra="ignore")
    name: str
    metadata: dict[str, str] = Field(default_factory=dict)
    switches: list[str] = Field(default_factory=list)
    capacity_blocks: list[str] = Field(default_factory=list)

    @field_validator("metadata", mode="before")
    @classmethod
    def _coerce_metadata(cls, v):
        if v is None:
            return {}
        return {str(k): "" if val is None else str(val) for k, val in dict(v).items()}


class SimModel(BaseModel):
    """Static cluster description used by the simulation providers."""

    model_config = ConfigDict(extra="ignore")
    switches: list[SimSwitch] = Field(default_factory=list)
    capacity_blocks: list[SimCapacityBlock] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self):
        switch_names = {sw.name for sw in self.switches}
        block_names = {cb.name for cb in self.capacity_blocks}
        if len(switch_names) != len(self.switches):
            raise ValueError("duplicate switch names")
        if len(block_names) != len(self.capacity_blocks):
            raise ValueError("duplicate capacity block names")
        for sw in self.switches:
            for child in sw.switches:
                if child not in switch_names:
                    raise ValueError(f"switch {sw.name!r} references unknown switch {child!r}")
            for cb in sw.capacity_blocks:
                if cb not in block_names:
                    raise ValueError(f"switch {sw.name!r} references unknown capacity block {cb!r}")
        return self

    def switch_for_block(self, block_name: str) -> SimSwitch | None:
        """Return the switch that lists this capacity block, if any."""
        for sw in self.switches:
            if block_name in sw.capacity_blocks:
                return sw
        return None

    def parent_of(self, switch_name: str) -> SimSwitch | None:
        for sw in self.switches:
            if switch_name in sw.switches:
                return sw
        return None

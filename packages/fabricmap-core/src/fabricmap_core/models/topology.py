from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class InstanceTopology(BaseModel):
    """Placement record: where one compute instance sits in the network.

    Coordinates run from coarse to fine: datacenter, spine, block. The IDs
    drive grouping and ordering; the names are what the scheduler sees.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    instance_id: str = Field(min_length=1)
    datacenter_id: str = Field(min_length=1)
    spine_id: str = Field(min_length=1)
    block_id: str = ""
    datacenter_name: str = ""
    spine_name: str = ""
    block_name: str = ""

    @field_validator("instance_id", "datacenter_id", "spine_id", "block_id", mode="before")
    @classmethod
    def _strip(cls, v):
        return "" if v is None else str(v).strip()

    @model_validator(mode="before")
    @classmethod
    def _default_names(cls, data):
        # a blank name means "same as the ID"
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for tier in ("datacenter", "spine", "block"):
            tier_id = str(data.get(f"{tier}_id") or "").strip()
            if tier_id and not data.get(f"{tier}_name"):
                data[f"{tier}_name"] = tier_id
        return data

    @model_validator(mode="after")
    def _block_name_needs_block_id(self):
        if self.block_name and not self.block_id:
            raise ValueError("block_name set without block_id")
        return self

    @property
    def has_block_tier(self) -> bool:
        return bool(self.block_id) and self.block_id != self.spine_id


class ComputeInstances(BaseModel):
    """A named group of requested instances: instance ID -> scheduler node name."""

    model_config = ConfigDict(extra="ignore")

    region: str = ""
    instances: dict[str, str] = Field(default_factory=dict)

    @field_validator("instances", mode="before")
    @classmethod
    def _coerce_instances(cls, v):
        # allow a plain list of IDs, mapped to themselves
        if v is None:
            return {}
        if isinstance(v, list | tuple | set):
            return {str(i): str(i) for i in v}
        return v

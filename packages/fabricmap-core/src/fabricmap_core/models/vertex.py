from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field

from fabricmap_core.codebase.sorting import natural_key


class Vertex(BaseModel):
    """Node of the switch tree.

    A vertex is either a switch with child vertices (keyed by ID) or a leaf
    switch holding instances (instance ID -> scheduler node name). It is never
    both.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    id: str
    vertices: dict[str, "Vertex"] = Field(default_factory=dict)
    instances: dict[str, str] = Field(default_factory=dict)

    @property
    def is_leaf(self) -> bool:
        return not self.vertices

    def add_vertex(self, vertex: "Vertex") -> "Vertex":
        """Attach a child switch, returning the existing one if the ID is already present."""
        if self.instances:
            raise ValueError(f"switch {self.id!r} holds instances and cannot take child switches")
        return self.vertices.setdefault(vertex.id, vertex)

    def add_instance(self, instance_id: str, node_name: str | None = None) -> None:
        if self.vertices:
            raise ValueError(f"switch {self.id!r} has child switches and cannot hold instances")
        self.instances[instance_id] = node_name or instance_id

    def sorted_vertices(self) -> list["Vertex"]:
        return [self.vertices[k] for k in sorted(self.vertices, key=natural_key)]

    def sorted_instances(self) -> list[tuple[str, str]]:
        return [(k, self.instances[k]) for k in sorted(self.instances, key=natural_key)]

    def instance_count(self) -> int:
        if self.is_leaf:
            return len(self.instances)
        return sum(v.instance_count() for v in self.vertices.values())

    def walk(self) -> Iterator["Vertex"]:
        """Depth-first pre-order over this vertex and its descendants, children in sorted order."""
        yield self
        for child in self.sorted_vertices():
            yield from child.walk()

    def leaves(self) -> Iterator["Vertex"]:
        return (v for v in self.walk() if v.is_leaf)

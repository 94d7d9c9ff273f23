from collections.abc import Callable
from typing import Any

from fabricmap_core.errors import TopologyError
from fabricmap_core.models.vertex import Vertex

from . import slurm

Engine = Callable[[Vertex, dict[str, Any] | None], str]

ENGINES: dict[str, Engine] = {
    slurm.NAME: slurm.generate_output,
}


def get_engine(name: str) -> Engine:
    try:
        return ENGINES[name]
    except KeyError:
        raise TopologyError.request(f"unsupported engine {name!r}") from None


__all__ = ["ENGINES", "Engine", "get_engine"]

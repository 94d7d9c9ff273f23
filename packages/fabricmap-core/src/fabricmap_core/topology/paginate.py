from fabricmap_core.codebase.logs import get_logger
from fabricmap_core.errors import TopologyError
from fabricmap_core.models.vertex import Vertex

logger = get_logger("topology.paginate")


def page_id(parent: str, page: int) -> str:
    """Synthetic ID/name of the page-th (1-based) sub-switch of an oversized leaf.

    The result may coincide with a switch the provider already reported
    (a block really called "pod-1.1"); paginate() refuses such trees.
    """
    return f"{parent}.{page}"


def paginate(root: Vertex, page_size: int | None) -> Vertex:
    """Split every leaf holding more than page_size instances into synthetic sub-switches.

    Instances keep their sorted order: page 1 gets the first page_size of
    them, page 2 the next, and so on. The tree is rewritten in place and
    returned. None disables pagination.

    Raises TopologyError (internal) when a page ID or name collides with an
    existing switch, since the scheduler would see the same SwitchName twice.
    """
    if page_size is None:
        return root
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        raise TopologyError.request(f"page size must be a positive integer, got {page_size!r}")

    taken = {v.id for v in root.walk()} | {v.name for v in root.walk()}

    for leaf in list(root.leaves()):
        if len(leaf.instances) <= page_size:
            continue

        ordered = leaf.sorted_instances()
        leaf.instances = {}
        for start in range(0, len(ordered), page_size):
            page = start // page_size + 1
            sub_id, sub_name = page_id(leaf.id, page), page_id(leaf.name, page)
            clash = {sub_id, sub_name} & taken
            if clash:
                raise TopologyError.internal(
                    f"page {page} of switch {leaf.id!r} collides with existing switch {sorted(clash)[0]!r}"
                )
            taken.update((sub_id, sub_name))
            sub = leaf.add_vertex(Vertex(name=sub_name, id=sub_id))
            for instance_id, node_name in ordered[start : start + page_size]:
                sub.add_instance(instance_id, node_name)

        logger.debug("Paginated switch %r into %d pages of %d", leaf.id, len(leaf.vertices), page_size)

    return root

import graphviz
from fabricmap_core.models import Vertex
from fabricmap_core.topology import fold_string

# fill colour per depth: root, datacenter, spine, block, pages
_DEPTH_COLORS = ["lightgrey", "lightblue", "lightgreen", "khaki", "lightpink"]


def _node_id(path: tuple[str, ...]) -> str:
    # ":" would be read as a port separator in edge statements
    return "/".join(path).replace(":", "_")


def render_switch_tree(root: Vertex, show_nodes: bool = True) -> graphviz.Digraph:
    """
    Render the switch tree top-down:
    - One box per switch, coloured by depth.
    - One ellipse per leaf switch listing its folded node names.
    """
    dot = graphviz.Digraph("fabricmap_switch_tree", format="svg")
    dot.attr(rankdir="TB")

    def visit(vertex: Vertex, path: tuple[str, ...], depth: int) -> None:
        node_id = _node_id(path)
        label = vertex.name if vertex.name == vertex.id else f"{vertex.name}\\n({vertex.id})"
        color = _DEPTH_COLORS[min(depth, len(_DEPTH_COLORS) - 1)]
        dot.node(node_id, label=label, shape="box", style="rounded,filled", fillcolor=color)

        if vertex.is_leaf:
            if show_nodes and vertex.instances:
                nodes_id = f"{node_id}#nodes"
                names = fold_string((name for _, name in vertex.sorted_instances()), separator="\\n")
                dot.node(nodes_id, label=names, shape="ellipse")
                dot.edge(node_id, nodes_id, style="dashed")
            return

        for child in vertex.sorted_vertices():
            if child.instance_count() == 0:
                continue
            child_path = path + (child.id,)
            visit(child, child_path, depth + 1)
            dot.edge(node_id, _node_id(child_path))

    visit(root, (root.id,), 0)
    return dot

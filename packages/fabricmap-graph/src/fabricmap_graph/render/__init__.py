from .switch_tree import render_switch_tree

__all__ = [
    "render_switch_tree",
]

"""
Generic operations over trees of nodes with ordered children.

Nodes may be objects with a ``children`` attribute or dictionaries with a
``"children"`` key. A list of nodes is read as the children of an implicit
root.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

__all__ = ["get_node_children", "get_tree_leaves", "index_of_tree_node"]

ChildrenGetter = Callable[[Any], Sequence[Any] | None]
NodeMatcher = Callable[[Any, Any], Any]


def get_node_children(node: Any) -> Sequence[Any]:
    """Children of a node, empty for leaves."""
    if isinstance(node, dict):
        return node.get("children") or []
    return getattr(node, "children", None) or []


def get_tree_leaves(
    tree: Any, get_children: ChildrenGetter = get_node_children
) -> list[Any]:
    """
    Collect tree leaves in depth-first, left-to-right order.

    Args:
        tree: Root node, or a list of root nodes
        get_children: Function returning the children of a node

    Returns:
        List of nodes without children. A root without children is its own
        only leaf.
    """
    roots = list(tree) if isinstance(tree, list | tuple) else [tree]
    leaves = []
    stack = list(reversed(roots))

    while stack:
        node = stack.pop()
        children = get_children(node)
        if children:
            stack.extend(reversed(children))
        else:
            leaves.append(node)

    return leaves


def _is_same_node(candidate: Any, target: Any) -> bool:
    return candidate is target


def index_of_tree_node(
    node: Any,
    tree: Any,
    match_node: NodeMatcher | None = None,
    get_children: ChildrenGetter = get_node_children,
) -> list[int] | None:
    """
    Find the path of child indexes leading to a node.

    The search is depth-first, left-to-right and the first matching node
    wins; later matches of a non-unique `match_node` are ignored.

    Args:
        node: Node to look for
        tree: Root node, or a list of root nodes
        match_node: Predicate ``match_node(candidate, node)``, identity by
            default
        get_children: Function returning the children of a node

    Returns:
        List of child indexes from the root to the node, an empty list when
        the root itself matches, None when no node matches. For a list of
        roots the first index selects the root.
    """
    match_node = match_node or _is_same_node

    if isinstance(tree, list | tuple):
        return _index_in_nodes(node, tree, match_node, get_children)

    if match_node(tree, node):
        return []

    return _index_in_nodes(node, get_children(tree), match_node, get_children)


def _index_in_nodes(
    node: Any,
    nodes: Sequence[Any],
    match_node: NodeMatcher,
    get_children: ChildrenGetter,
) -> list[int] | None:
    for index, candidate in enumerate(nodes):
        if match_node(candidate, node):
            return [index]

        child_path = _index_in_nodes(node, get_children(candidate), match_node, get_children)
        if child_path is not None:
            return [index, *child_path]

    return None

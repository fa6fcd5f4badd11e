"""Navigation over the activity structure of a BPEL process.

Only elements whose names are BPEL activities count as activity children;
comments, processing instructions and other elements (``targets``,
``variables``, ``correlations`` ...) are passed over. Every operation
raises ``NotAnElementError`` when handed a non-element node.
"""

from __future__ import annotations

from src.bpel.activities import SINGLE_ACTIVITY_MAPPINGS, is_activity
from src.bpel.nodes import TreeNode, attribute, find_child, is_create_instance_set, require_element


def _activity_children(node: TreeNode) -> list[TreeNode]:
    require_element(node)
    return [child for child in node.children if child.is_element and is_activity(child.tag)]


def has_activity_child(node: TreeNode) -> bool:
    """Return True if any direct child of ``node`` is an activity."""
    return bool(_activity_children(node))


def activity_child(node: TreeNode) -> TreeNode | None:
    """Return the activity nested directly in ``node``.

    Containers like ``while`` or ``scope`` hold exactly one activity. If a
    document has more, the last one in document order is returned.
    """
    children = _activity_children(node)
    return children[-1] if children else None


def activity_children(node: TreeNode) -> set[TreeNode]:
    """Return the direct activity children of ``node``."""
    return set(_activity_children(node))


def activity_descendants(node: TreeNode) -> set[TreeNode]:
    """Return every activity nested in ``node`` through a chain of activities.

    Each direct activity child is included together with its own activity
    descendants, so a sequence inside a flow and the invoke inside that
    sequence are both returned. ``node`` itself is never part of the result.
    """
    return set(activity_descendants_ordered(node))


def activity_descendants_ordered(node: TreeNode) -> list[TreeNode]:
    """Return the same activities as ``activity_descendants`` in document order."""
    result: list[TreeNode] = []
    for child in _activity_children(node):
        result.append(child)
        result.extend(activity_descendants_ordered(child))
    return result


def has_create_instance_descendant(node: TreeNode) -> bool:
    """Return True if a nested activity starts a new process instance."""
    return any(is_create_instance_set(child) for child in activity_descendants_ordered(node))


def is_single_activity_mapping(node: TreeNode) -> bool:
    """Return True for activities that become one BPMN task (assign, validate)."""
    require_element(node)
    return node.tag.lower() in SINGLE_ACTIVITY_MAPPINGS


def is_synchronous_invoke(node: TreeNode) -> bool:
    """Return True for an invoke that waits for a reply.

    An invoke is synchronous when it declares where the reply goes, either
    through ``outputVariable`` or a ``toParts`` element.
    """
    require_element(node)
    if node.tag.lower() != "invoke":
        return False
    if attribute(node, "outputVariable") is not None:
        return True
    return find_child(node, "toParts") is not None

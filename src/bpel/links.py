"""Control link resolution for BPEL activities.

An activity takes part in control links through two optional children::

    <targets>
        <joinCondition>$L1 and $L2</joinCondition>
        <target linkName="L1"/>
        <target linkName="L2"/>
    </targets>
    <sources>
        <source linkName="L3"/>
    </sources>

Missing ``targets``, ``sources`` or ``joinCondition`` elements are not
errors; they mean there are no links or that the join condition is implicit.
A ``target`` or ``source`` without ``linkName`` is malformed. With
``strict_link_names`` enabled (the default) that raises
``MalformedLinkError``; otherwise the entry is skipped and logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.bpel.navigation import activity_descendants_ordered
from src.bpel.nodes import (
    BpelQueryError,
    TreeNode,
    attribute,
    effective_name,
    find_child,
    find_children,
    find_children_ordered,
)
from src.core.config import get_settings

logger = logging.getLogger(__name__)


class MalformedLinkError(BpelQueryError):
    """Raised when a ``target`` or ``source`` element has no ``linkName``.

    Attributes:
        element_name: ``target`` or ``source``.
        activity_name: Effective name of the activity holding the element.
    """

    def __init__(self, element_name: str, activity_name: str) -> None:
        self.element_name = element_name
        self.activity_name = activity_name
        super().__init__(f"<{element_name}> in activity {activity_name!r} has no linkName attribute")


@dataclass(frozen=True)
class ControlLinkSummary:
    """Link related facts about a single activity."""

    incoming: frozenset[str]
    outgoing: frozenset[str]
    join_condition: str
    suppress_join_failure: bool


@dataclass(frozen=True)
class ControlLink:
    """A control link between the activity that emits it and the one that waits for it."""

    name: str
    source: TreeNode
    target: TreeNode


def _link_names(node: TreeNode, container: str, entry: str) -> list[str]:
    """Return the linkName of each ``entry`` under ``container`` in document order."""
    names: list[str] = []
    for link in find_children_ordered(find_child(node, container), entry):
        name = attribute(link, "linkName")
        if name is None:
            if get_settings().strict_link_names:
                raise MalformedLinkError(entry, effective_name(node))
            logger.warning("Skipping <%s> without linkName in %s", entry, effective_name(node))
            continue
        names.append(name)
    return names


def has_incoming_links(node: TreeNode) -> bool:
    """Return True if ``node`` is the target of at least one control link."""
    return bool(find_children(find_child(node, "targets"), "target"))


def has_outgoing_links(node: TreeNode) -> bool:
    """Return True if ``node`` is the source of at least one control link."""
    return bool(find_children(find_child(node, "sources"), "source"))


def incoming_link_names(node: TreeNode) -> set[str]:
    return set(_link_names(node, "targets", "target"))


def outgoing_link_names(node: TreeNode) -> set[str]:
    return set(_link_names(node, "sources", "source"))


def join_condition(node: TreeNode) -> str:
    """Return the join condition guarding ``node``.

    An explicit ``joinCondition`` inside ``targets`` is returned verbatim.
    Without one, the implicit condition is built by joining the incoming
    link names in document order with the configured operator, e.g.
    ``"L1 OR L2"``. Activities without incoming links get ``""``.
    """
    targets = find_child(node, "targets")
    condition = find_child(targets, "joinCondition")
    if condition is not None:
        return condition.text_content

    implicit = get_settings().implicit_join_operator.join(_link_names(node, "targets", "target"))
    if implicit:
        logger.debug("Implicit join condition for %s: %s", effective_name(node), implicit)
    return implicit


def is_join_failure_suppressed(node: TreeNode) -> bool:
    """Return True if a join failure at ``node`` is suppressed.

    ``suppressJoinFailure`` is inherited: the closest ancestor-or-self that
    sets the attribute decides. If no element up to the root sets it, join
    failures are not suppressed.
    """
    true_value = get_settings().bpel_true_value
    current: TreeNode | None = node
    while current is not None:
        value = attribute(current, "suppressJoinFailure")
        if value is not None:
            if current is not node:
                logger.debug(
                    "%s inherits suppressJoinFailure=%s from %s", effective_name(node), value, effective_name(current)
                )
            return value.lower() == true_value.lower()
        current = current.parent
    return False


def link_summary(node: TreeNode) -> ControlLinkSummary:
    """Collect the control link facts of ``node`` in one object."""
    return ControlLinkSummary(
        incoming=frozenset(incoming_link_names(node)),
        outgoing=frozenset(outgoing_link_names(node)),
        join_condition=join_condition(node),
        suppress_join_failure=is_join_failure_suppressed(node),
    )


def control_links(node: TreeNode) -> list[ControlLink]:
    """Pair link sources with link targets among ``node`` and its nested activities.

    Typically called on a ``flow``. Links are returned sorted by name.
    Activities are visited in document order; when a link has several
    sources or targets the first one is kept and the rest are logged. A link
    that has a source but no target (or the reverse) is logged and left out.
    """
    sources: dict[str, TreeNode] = {}
    targets: dict[str, TreeNode] = {}
    for activity in [node, *activity_descendants_ordered(node)]:
        for name in _link_names(activity, "sources", "source"):
            if name in sources:
                logger.warning("Link %s has more than one source, ignoring %s", name, effective_name(activity))
                continue
            sources[name] = activity
        for name in _link_names(activity, "targets", "target"):
            if name in targets:
                logger.warning("Link %s has more than one target, ignoring %s", name, effective_name(activity))
                continue
            targets[name] = activity

    for name in sorted(sources.keys() ^ targets.keys()):
        logger.warning("Link %s is missing its %s", name, "target" if name in sources else "source")

    return [
        ControlLink(name=name, source=sources[name], target=targets[name])
        for name in sorted(sources.keys() & targets.keys())
    ]

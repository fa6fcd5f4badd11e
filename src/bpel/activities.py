"""Classification of BPEL element names.

The set below is the complete list of BPEL activity tags the BPMN
mapping knows about. Names are stored lower-cased and lookups ignore case,
so BPEL 2.0 spellings like ``repeatUntil`` and ``forEach`` match. This
differs from a case-sensitive exact match: ``is_activity("Invoke")`` is
True, and callers needing exact-case semantics must compare against
``BPEL_ACTIVITIES`` themselves.
"""

from __future__ import annotations

BPEL_ACTIVITIES: frozenset[str] = frozenset({
    "invoke",
    "receive",
    "reply",
    "wait",
    "exit",
    "empty",
    "throw",
    "rethrow",
    "validate",
    "assign",
    "compensate",
    "compensatescope",
    "pick",
    "onmessage",
    "onalarm",
    "sequence",
    "while",
    "repeatuntil",
    "foreach",
    "flow",
    "scope",
})

# Activities that map onto exactly one BPMN task with no inner structure
SINGLE_ACTIVITY_MAPPINGS: frozenset[str] = frozenset({"assign", "validate"})


def is_activity(element_name: str) -> bool:
    """Return True if ``element_name`` is a BPEL activity tag."""
    return element_name.lower() in BPEL_ACTIVITIES

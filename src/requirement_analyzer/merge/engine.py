"""Merge a freshly decoded document into a live one.

Reconciliation rules:
  Scalars      fill if the live value is empty; otherwise Replace or
               Append (``existing + "\\n\\n" + incoming``) per MergePolicy.
               An empty incoming value never clears a live one.
  Collections  always concatenated, incoming items copied with new ids.
               No de-duplication: two entries with the same text may be
               distinct on purpose.
  Edge cases   ``considered`` is OR-ed; notes follow EDGE_CASE_NOTES.

The live document is the only object mutated.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Optional, TypeVar

from ..document.models import AnalysisDocument, EdgeCaseStatus, is_filled, new_id, utc_now
from ..document.vocabulary import EDGE_CASE_IDS
from ..logging_config import get_logger
from .policy import SECTION_FIELDS, FieldKey, MergePolicy, ScalarPolicy

logger = get_logger(__name__)

APPEND_SEPARATOR = "\n\n"

T = TypeVar("T")


def merge_scalar(existing: str, incoming: str, policy: ScalarPolicy) -> str:
    """Reconcile one scalar value.

    Append joins with a blank line, so the result spans several lines;
    see ``encode`` for which fields keep such values through export.
    """
    if not is_filled(incoming):
        return existing
    if not is_filled(existing):
        return incoming
    if policy is ScalarPolicy.APPEND:
        return f"{existing}{APPEND_SEPARATOR}{incoming}"
    return incoming


def _container(doc: AnalysisDocument, key: FieldKey) -> object:
    """Record that holds ``key``'s attribute (the document itself for top-level keys)."""
    target: object = doc
    for part in key.path[:-1]:
        target = getattr(target, part)
    return target


def _fresh_copies(items: list[T]) -> list[T]:
    copies = []
    for item in list(items):
        clone = copy.deepcopy(item)
        clone.id = new_id()  # type: ignore[attr-defined]
        copies.append(clone)
    return copies


def merge(
    existing: AnalysisDocument,
    incoming: AnalysisDocument,
    policy: Optional[MergePolicy] = None,
    now: Optional[datetime] = None,
) -> AnalysisDocument:
    """Merge ``incoming`` into ``existing`` in place.

    Args:
        existing: Live document; mutated and returned
        incoming: Source document; left untouched
        policy: Scalar policy; defaults to Replace for every field
        now: Merge time for ``updated_at`` (defaults to the current time)

    Returns:
        ``existing``
    """
    policy = policy or MergePolicy()

    for key in SECTION_FIELDS:
        target = _container(existing, key)
        source = _container(incoming, key)
        current = getattr(target, key.attribute)
        merged = merge_scalar(current, getattr(source, key.attribute), policy.policy_for(key))
        if merged != current:
            setattr(target, key.attribute, merged)

    added = {
        "assumptions": len(incoming.assumptions),
        "questions": len(incoming.questions),
        "actions": len(incoming.actions),
        "scope_items": len(incoming.scope.items),
    }
    existing.assumptions.extend(_fresh_copies(incoming.assumptions))
    existing.questions.extend(_fresh_copies(incoming.questions))
    existing.actions.extend(_fresh_copies(incoming.actions))
    existing.scope.items.extend(_fresh_copies(incoming.scope.items))

    notes_policy = policy.policy_for(FieldKey.EDGE_CASE_NOTES)
    for edge_id in EDGE_CASE_IDS:
        source_status = incoming.edges.get(edge_id)
        if source_status is None:
            continue
        target_status = existing.edges.setdefault(edge_id, EdgeCaseStatus())
        target_status.considered = target_status.considered or source_status.considered
        target_status.notes = merge_scalar(target_status.notes, source_status.notes, notes_policy)

    existing.touch(now or utc_now())
    logger.debug("Merged into %s: %s", existing.id, added)
    return existing

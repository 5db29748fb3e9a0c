"""Merge partial records produced by upstream extraction services.

Transcription or field-extraction collaborators return flat records that
reuse the document's field names, for example::

    {
        "problem": "Users lose drafts",
        "who": "Mobile editors",
        "assumptions": ["Most drafts are under 1 MB"],
        "questions": ["Do we need offline support?"],
    }

Keys may be snake_case (``feature_name``) or camelCase (``featureName``).
Bare strings in list fields are wrapped into minimally-shaped collection
items; dicts may carry the item's other fields. Unknown keys are ignored.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

from ..document.models import (
    Action,
    AnalysisDocument,
    Assumption,
    EdgeCaseStatus,
    Question,
    ScopeItem,
    create_blank_document,
)
from ..document.vocabulary import (
    EDGE_CASE_BY_LABEL,
    EDGE_CASE_IDS,
    AssumptionStatus,
    Confidence,
    Origin,
    Phase,
    Priority,
    QuestionStatus,
    QuestionType,
    coerce_choice,
    coerce_scope_version,
)
from ..logging_config import get_logger
from .engine import merge
from .policy import SECTION_FIELDS, FieldKey, MergePolicy

logger = get_logger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Flat record key -> field. Leaf attribute names are unique across sections.
_SCALAR_KEYS: dict[str, FieldKey] = {key.attribute: key for key in SECTION_FIELDS}

_ENUM_DOMAINS = {
    FieldKey.PHASE: Phase,
    FieldKey.OVERVIEW_ORIGIN: Origin,
    FieldKey.SUMMARY_CONFIDENCE: Confidence,
}

_LIST_KEYS = {
    "assumptions": "assumptions",
    "questions": "questions",
    "actions": "actions",
    "action_items": "actions",
    "scope_items": "scope_items",
    "edge_cases": "edge_cases",
}


def snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key.strip()).lower()


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _entries(value: Any) -> Iterable[Any]:
    if isinstance(value, (list, tuple)):
        return value
    if isinstance(value, str) and value.strip():
        return [value]
    return []


def _assumption(entry: Any) -> Optional[Assumption]:
    if isinstance(entry, str):
        return Assumption(text=entry.strip()) if entry.strip() else None
    if isinstance(entry, Mapping):
        return Assumption(
            text=_text(entry.get("text")),
            status=coerce_choice(
                AssumptionStatus, entry.get("status"), AssumptionStatus.UNVALIDATED.value
            ),
            tags={str(t) for t in entry.get("tags") or []},
        )
    return None


def _question(entry: Any) -> Optional[Question]:
    if isinstance(entry, str):
        return Question(text=entry.strip()) if entry.strip() else None
    if isinstance(entry, Mapping):
        answer = _text(entry.get("answer"))
        default_status = QuestionStatus.ANSWERED.value if answer else QuestionStatus.OPEN.value
        return Question(
            text=_text(entry.get("text")),
            type=coerce_choice(QuestionType, entry.get("type"), QuestionType.STAKEHOLDER.value),
            status=coerce_choice(QuestionStatus, entry.get("status"), default_status),
            answer=answer,
            dependency=bool(entry.get("dependency", False)),
            tags={str(t) for t in entry.get("tags") or []},
        )
    return None


def _action(entry: Any) -> Optional[Action]:
    if isinstance(entry, str):
        return Action(text=entry.strip()) if entry.strip() else None
    if isinstance(entry, Mapping):
        return Action(
            text=_text(entry.get("text")),
            completed=bool(entry.get("completed", False)),
            note=_text(entry.get("note")),
        )
    return None


def _scope_item(entry: Any) -> Optional[ScopeItem]:
    if isinstance(entry, str):
        return ScopeItem(item=entry.strip()) if entry.strip() else None
    if isinstance(entry, Mapping):
        return ScopeItem(
            item=_text(entry.get("item")),
            description=_text(entry.get("description")),
            version=coerce_scope_version(entry.get("version")),
            priority=coerce_choice(Priority, entry.get("priority")),
        )
    return None


def _mark_edge_cases(doc: AnalysisDocument, value: Any) -> None:
    """Edge cases may be listed by id or label, or as ``{id: notes}``."""
    if isinstance(value, Mapping):
        pairs = [(str(k), _text(v)) for k, v in value.items()]
    else:
        pairs = [(str(v), "") for v in _entries(value)]
    for token, notes in pairs:
        edge_id = token if token in EDGE_CASE_IDS else None
        if edge_id is None and token in EDGE_CASE_BY_LABEL:
            edge_id = EDGE_CASE_BY_LABEL[token].id
        if edge_id is None:
            logger.debug("Ignoring unknown edge case %r", token)
            continue
        doc.edges[edge_id] = EdgeCaseStatus(considered=True, notes=notes)


def extraction_to_document(record: Mapping[str, Any]) -> AnalysisDocument:
    """Wrap a partial extraction record in a transient document."""
    doc = create_blank_document(name="")
    builders = {
        "assumptions": (_assumption, doc.assumptions),
        "questions": (_question, doc.questions),
        "actions": (_action, doc.actions),
        "scope_items": (_scope_item, doc.scope.items),
    }

    for raw_key, value in record.items():
        key = snake_case(str(raw_key))

        field_key = _SCALAR_KEYS.get(key)
        if field_key is not None:
            text = _text(value)
            if field_key in _ENUM_DOMAINS:
                text = coerce_choice(_ENUM_DOMAINS[field_key], text)
            target: object = doc
            for part in field_key.path[:-1]:
                target = getattr(target, part)
            setattr(target, field_key.attribute, text)
            continue

        list_key = _LIST_KEYS.get(key)
        if list_key == "edge_cases":
            _mark_edge_cases(doc, value)
        elif list_key is not None:
            build, items = builders[list_key]
            items.extend(item for item in map(build, _entries(value)) if item is not None)
        else:
            logger.debug("Ignoring extraction key %r", raw_key)

    return doc


def merge_extraction(
    existing: AnalysisDocument,
    record: Mapping[str, Any],
    policy: Optional[MergePolicy] = None,
) -> AnalysisDocument:
    """Merge an extraction record into ``existing`` with the usual merge rules."""
    return merge(existing, extraction_to_document(record), policy)

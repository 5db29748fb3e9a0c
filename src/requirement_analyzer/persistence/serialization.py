"""JSON-friendly dict form of analysis documents.

``document_to_dict`` emits snake_case keys, ISO-8601 timestamps and
sorted tag lists. ``document_from_dict`` is lenient: it also reads the
camelCase payloads written by earlier versions of the tool and migrates
partial payloads onto the current schema (blank defaults for missing
sections, the full edge-case key set, fresh ids for items without one,
foreign enum tokens coerced).
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from ..document.models import (
    Action,
    AnalysisDocument,
    Assumption,
    EdgeCaseStatus,
    Question,
    ScopeItem,
    blank_edges,
    create_blank_document,
    new_id,
    scalar_items,
)
from ..document.vocabulary import (
    AssumptionStatus,
    Confidence,
    Language,
    Origin,
    Phase,
    Priority,
    QuestionStatus,
    QuestionType,
    coerce_choice,
    coerce_scope_version,
)
from ..exceptions import CorruptDocumentError
from ..logging_config import get_logger
from ..merge.extraction import snake_case

logger = get_logger(__name__)

FORMAT_VERSION = 1


# ── Encoding ───────────────────────────────────────────────────────


def _timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def document_to_dict(doc: AnalysisDocument) -> dict[str, Any]:
    """Plain dict suitable for ``json.dumps``."""
    data = asdict(doc)
    data["format_version"] = FORMAT_VERSION
    data["created_at"] = _timestamp(doc.created_at)
    data["updated_at"] = _timestamp(doc.updated_at)
    for item in data["assumptions"]:
        item["tags"] = sorted(item["tags"])
    for item in data["questions"]:
        item["tags"] = sorted(item["tags"])
    return data


# ── Decoding ───────────────────────────────────────────────────────


def _normalize(record: Any) -> dict[str, Any]:
    """Shallow copy of ``record`` with snake_case keys; non-mappings become empty."""
    if not isinstance(record, Mapping):
        return {}
    return {snake_case(str(key)): value for key, value in record.items()}


def _str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _tags(value: Any) -> set[str]:
    return {_str(tag) for tag in _list(value) if _str(tag)}


def _item_id(record: Mapping[str, Any]) -> str:
    return _str(record.get("id")) or new_id()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (``Z`` suffix accepted) as an aware datetime."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _fill(record: object, raw: Any) -> None:
    """Copy the string fields of ``raw`` onto a section record."""
    data = _normalize(raw)
    for attribute, _ in scalar_items(record):
        if attribute in data:
            setattr(record, attribute, _str(data[attribute]))


def _assumption(raw: Any) -> Assumption:
    data = _normalize(raw)
    return Assumption(
        text=_str(data.get("text")),
        status=coerce_choice(
            AssumptionStatus, data.get("status"), AssumptionStatus.UNVALIDATED.value
        ),
        tags=_tags(data.get("tags")),
        id=_item_id(data),
    )


def _question(raw: Any) -> Question:
    data = _normalize(raw)
    return Question(
        text=_str(data.get("text")),
        type=coerce_choice(QuestionType, data.get("type"), QuestionType.STAKEHOLDER.value),
        status=coerce_choice(QuestionStatus, data.get("status"), QuestionStatus.OPEN.value),
        answer=_str(data.get("answer")),
        dependency=bool(data.get("dependency", False)),
        tags=_tags(data.get("tags")),
        id=_item_id(data),
    )


def _action(raw: Any) -> Action:
    data = _normalize(raw)
    return Action(
        text=_str(data.get("text")),
        completed=bool(data.get("completed", False)),
        note=_str(data.get("note")),
        id=_item_id(data),
    )


def _scope_item(raw: Any) -> ScopeItem:
    data = _normalize(raw)
    return ScopeItem(
        item=_str(data.get("item")),
        description=_str(data.get("description")),
        version=coerce_scope_version(data.get("version")),
        priority=coerce_choice(Priority, data.get("priority")),
        id=_item_id(data),
    )


def _edges(raw: Any) -> dict[str, EdgeCaseStatus]:
    edges = blank_edges()
    if not isinstance(raw, Mapping):
        return edges
    for edge_id, value in raw.items():
        if edge_id not in edges:
            logger.debug("Dropping unknown edge case %r", edge_id)
            continue
        data = _normalize(value)
        edges[edge_id] = EdgeCaseStatus(
            considered=bool(data.get("considered", False)),
            notes=_str(data.get("notes")),
        )
    return edges


def document_from_dict(payload: Any) -> AnalysisDocument:
    """Rebuild a document from ``document_to_dict`` output or an older payload.

    Raises:
        CorruptDocumentError: If ``payload`` is not a mapping
    """
    if not isinstance(payload, Mapping):
        raise CorruptDocumentError("?", f"expected an object, got {type(payload).__name__}")
    data = _normalize(payload)

    doc = create_blank_document(name=_str(data.get("name")))
    if data.get("id"):
        doc.id = _str(data["id"])
    doc.phase = coerce_choice(Phase, data.get("phase"))
    doc.jira_ticket = _str(data.get("jira_ticket"))
    doc.language = coerce_choice(Language, data.get("language"), Language.EN.value)
    doc.secure = bool(data.get("secure", False))
    doc.notes = _str(data.get("notes"))

    _fill(doc.overview, data.get("overview"))
    doc.overview.origin = coerce_choice(Origin, doc.overview.origin)
    _fill(doc.problem, data.get("problem"))
    _fill(doc.context, data.get("context"))
    _fill(doc.summary, data.get("summary"))
    doc.summary.confidence = coerce_choice(Confidence, doc.summary.confidence)
    _fill(doc.mapping, data.get("mapping"))

    scope = _normalize(data.get("scope"))
    _fill(doc.scope, scope)
    doc.scope.items = [_scope_item(item) for item in _list(scope.get("items"))]

    doc.assumptions = [_assumption(item) for item in _list(data.get("assumptions"))]
    doc.questions = [_question(item) for item in _list(data.get("questions"))]
    actions = data.get("actions", data.get("action_items"))
    doc.actions = [_action(item) for item in _list(actions)]
    doc.edges = _edges(data.get("edges"))

    created = parse_timestamp(data.get("created_at"))
    updated = parse_timestamp(data.get("updated_at"))
    if created is not None:
        doc.created_at = created
    doc.updated_at = max(updated or doc.created_at, doc.created_at)
    return doc

"""Render an AnalysisDocument to the canonical analysis text format.

The output is deterministic: the same document always yields the same
text, and absent fields are simply omitted. Section order is fixed:

    title/metadata, Overview, Problem & Purpose, User Context, Assumptions,
    Edge Cases, Scope & Versions, Open Questions, Action Items, Mapping,
    Notes, Summary
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from ..document.models import AnalysisDocument, ScopeItem
from ..document.vocabulary import (
    EDGE_CASES,
    SCOPE_VERSION_ORDER,
    UNASSIGNED,
    coerce_scope_version,
)
from . import grammar

DEFAULT_TITLE = "Untitled Analysis"

# Canonical section titles, in emission order.
OVERVIEW = "Overview"
PROBLEM = "Problem & Purpose"
CONTEXT = "User Context"
ASSUMPTIONS = "Assumptions"
EDGE_CASES_TITLE = "Edge Cases"
SCOPE = "Scope & Versions"
QUESTIONS = "Open Questions"
ACTIONS = "Action Items"
MAPPING = "Mapping"
NOTES = "Notes"
SUMMARY = "Summary"

SECTION_ORDER: tuple[str, ...] = (
    OVERVIEW,
    PROBLEM,
    CONTEXT,
    ASSUMPTIONS,
    EDGE_CASES_TITLE,
    SCOPE,
    QUESTIONS,
    ACTIONS,
    MAPPING,
    NOTES,
    SUMMARY,
)


class _Lines:
    """Accumulates output lines; ``field`` skips blank values."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def add(self, line: str) -> None:
        self.lines.append(line)

    def extend(self, lines: Iterable[str]) -> None:
        self.lines.extend(lines)

    def section(self, title: str) -> None:
        self.lines.append("")
        self.lines.append(grammar.format_section_header(title))

    def field(self, label: str, value: Optional[str]) -> None:
        line = grammar.format_scalar(label, value)
        if line is not None:
            self.lines.append(line)

    def fields(self, labels: dict[str, str], record: object) -> None:
        for label, attribute in labels.items():
            self.field(label, getattr(record, attribute))

    def text(self) -> str:
        return "\n".join(self.lines)


def encode(doc: AnalysisDocument, default_name: str = DEFAULT_TITLE) -> str:
    """Render ``doc`` as analysis text.

    Args:
        doc: Document to render (not modified)
        default_name: Title used when the document has no name

    Returns:
        The canonical text, without a trailing newline

    Multi-line values in Problem, Context and Summary fields decode back
    intact. Extra lines of an Overview or Scope field do not: they are
    read as the overview description or as scope content.
    """
    out = _Lines()

    out.add(grammar.format_title(doc.name or default_name))
    out.add(grammar.format_created(doc.created_at))
    if doc.phase:
        out.add(grammar.format_target_phase(doc.phase))
    if doc.jira_ticket.strip():
        out.add(grammar.format_jira_ticket(doc.jira_ticket))

    _encode_overview(out, doc)

    out.section(PROBLEM)
    out.fields(grammar.PROBLEM_LABELS, doc.problem)

    out.section(CONTEXT)
    out.fields(grammar.CONTEXT_LABELS, doc.context)

    _encode_assumptions(out, doc)
    _encode_edge_cases(out, doc)
    _encode_scope(out, doc)
    _encode_questions(out, doc)
    _encode_actions(out, doc)

    out.section(MAPPING)
    if doc.mapping.figma_url.strip():
        out.add(grammar.format_figma(doc.mapping.figma_url))

    out.section(NOTES)
    out.add(doc.notes if doc.notes.strip() else grammar.NO_NOTES)

    out.section(SUMMARY)
    out.fields(grammar.SUMMARY_LABELS, doc.summary)

    return out.text()


def _encode_overview(out: _Lines, doc: AnalysisDocument) -> None:
    overview = doc.overview
    out.section(OVERVIEW)
    out.field("Feature", overview.feature_name)
    out.field("Date", overview.date)
    out.field("Stakeholders", overview.requestor)
    out.field("Origin", grammar.format_origin(overview.origin, overview.origin_other))
    if overview.description.strip():
        out.add("")
        out.add(overview.description)


def _encode_assumptions(out: _Lines, doc: AnalysisDocument) -> None:
    out.section(ASSUMPTIONS)
    if not doc.assumptions:
        out.add(grammar.NO_ASSUMPTIONS)
    for i, item in enumerate(doc.assumptions, start=1):
        out.add(grammar.format_assumption(i, item.status, item.text))


def _encode_edge_cases(out: _Lines, doc: AnalysisDocument) -> None:
    out.section(EDGE_CASES_TITLE)
    for spec in EDGE_CASES:
        status = doc.edges.get(spec.id)
        if status is None:
            out.add(grammar.format_edge_case(spec.label, False, ""))
        else:
            out.add(grammar.format_edge_case(spec.label, status.considered, status.notes))


def group_scope_items(items: list[ScopeItem]) -> list[tuple[str, list[ScopeItem]]]:
    """Group scope items by version in phase order, ``Unassigned`` last.

    Items keep their collection order within a group; empty groups are
    left out.
    """
    grouped: dict[str, list[ScopeItem]] = defaultdict(list)
    for item in items:
        grouped[coerce_scope_version(item.version)].append(item)
    return [(version, grouped[version]) for version in SCOPE_VERSION_ORDER if grouped.get(version)]


def _encode_scope(out: _Lines, doc: AnalysisDocument) -> None:
    out.section(SCOPE)
    out.fields(grammar.SCOPE_LABELS, doc.scope)
    if not doc.scope.items:
        return
    out.add("")
    out.add(grammar.SCOPE_BY_VERSION_HEADING)
    for version, items in group_scope_items(doc.scope.items):
        out.add("")
        out.add(grammar.format_scope_group(version or UNASSIGNED))
        for item in items:
            out.add(grammar.format_scope_item(item.item, item.priority, item.description))


def _encode_questions(out: _Lines, doc: AnalysisDocument) -> None:
    out.section(QUESTIONS)
    if not doc.questions:
        out.add(grammar.NO_QUESTIONS)
    for i, question in enumerate(doc.questions, start=1):
        out.add(grammar.format_question(i, question.answered, question.type, question.text))
        if question.answer.strip():
            out.extend(grammar.format_continuation(question.answer))


def _encode_actions(out: _Lines, doc: AnalysisDocument) -> None:
    out.section(ACTIONS)
    if not doc.actions:
        out.add(grammar.NO_ACTIONS)
    for i, action in enumerate(doc.actions, start=1):
        out.add(grammar.format_action(i, action.completed, action.text))
        if action.note.strip():
            out.extend(grammar.format_continuation(action.note))

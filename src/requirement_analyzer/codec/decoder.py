"""Reconstruct an AnalysisDocument from analysis text.

Decoding is best effort and total: any input, however malformed, yields a
structurally valid document. Lines that match nothing are dropped, foreign
enum tokens fall back to their domain default.

The parser is a small line-oriented state machine::

    Idle ──"## X"──▶ InSection(X) ──"## Y"──▶ flush(X); InSection(Y)
                          │
                          └── other lines are buffered until the next
                              header or end of input, then handed to the
                              section's extractor in one piece.

Title and metadata lines are handled in any state and never buffered.
Section names resolve through ``SECTION_ALIASES`` so text exported by
older versions (different headings) still decodes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

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
    UNASSIGNED,
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
from . import encoder, grammar

logger = get_logger(__name__)


# ── States ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Idle:
    """Before the first section header."""


@dataclass(frozen=True)
class InSection:
    """Inside a ``## <heading>`` block.

    ``section`` is the canonical title, or None for a heading that maps to
    no known section (its lines are dropped on flush).
    """

    heading: str
    section: Optional[str]


SectionState = Union[Idle, InSection]


# Heading -> canonical section title. Canonical titles map to themselves;
# the rest are headings used by earlier exports.
SECTION_ALIASES: dict[str, str] = {
    **{title: title for title in encoder.SECTION_ORDER},
    "Problem": encoder.PROBLEM,
    "Context": encoder.CONTEXT,
    "Edge Cases & States": encoder.EDGE_CASES_TITLE,
    "Scope": encoder.SCOPE,
    "Scope & Dependencies": encoder.SCOPE,
    "Questions": encoder.QUESTIONS,
    "Actions": encoder.ACTIONS,
    "Next Actions": encoder.ACTIONS,
    "Next Steps & Actions": encoder.ACTIONS,
    "Figma Mapping": encoder.MAPPING,
    "Design Mapping": encoder.MAPPING,
}


def resolve_section(heading: str) -> Optional[str]:
    """Canonical section title for a heading, or None if unknown."""
    return SECTION_ALIASES.get(heading.strip())


# ── Extractors ─────────────────────────────────────────────────────
#
# Each extractor receives the buffered lines of one section (blank lines
# inside the block preserved, trailing whitespace stripped) and writes
# into the document being built.

Extractor = Callable[[AnalysisDocument, list[str]], None]


def _join(lines: list[str]) -> str:
    return "\n".join(lines).strip()


def _extract_scalars(
    lines: list[str], labels: dict[str, str], record: object, collect_rest: bool = False
) -> list[str]:
    """Apply a label table line by line.

    With ``collect_rest`` unmatched lines are returned to the caller.
    Otherwise they continue the most recent field, so multi-line values
    (an appended merge, for instance) survive a round trip; unmatched
    lines before the first field are dropped.
    """
    rest: list[str] = []
    current: Optional[str] = None
    parts: dict[str, list[str]] = {}
    for line in lines:
        matched = grammar.parse_scalar_line(line, labels)
        if matched is not None:
            current, value = matched
            parts[current] = [value]
        elif collect_rest:
            rest.append(line)
        elif current is not None:
            parts[current].append(line)
        elif line.strip():
            logger.debug("Dropping unrecognized line: %r", line)
    for attribute, value_lines in parts.items():
        setattr(record, attribute, "\n".join(value_lines).strip())
    return rest


def extract_overview(doc: AnalysisDocument, lines: list[str]) -> None:
    overview = doc.overview
    description = _extract_scalars(lines, grammar.OVERVIEW_LABELS, overview, collect_rest=True)
    origin, origin_other = grammar.split_origin(overview.origin)
    overview.origin = coerce_choice(Origin, origin)
    overview.origin_other = origin_other if overview.origin == Origin.OTHER.value else ""
    overview.description = _join(description)


def extract_problem(doc: AnalysisDocument, lines: list[str]) -> None:
    _extract_scalars(lines, grammar.PROBLEM_LABELS, doc.problem)


def extract_context(doc: AnalysisDocument, lines: list[str]) -> None:
    _extract_scalars(lines, grammar.CONTEXT_LABELS, doc.context)


def extract_summary(doc: AnalysisDocument, lines: list[str]) -> None:
    _extract_scalars(lines, grammar.SUMMARY_LABELS, doc.summary)
    doc.summary.confidence = coerce_choice(Confidence, doc.summary.confidence)


def extract_assumptions(doc: AnalysisDocument, lines: list[str]) -> None:
    for line in lines:
        entry = grammar.parse_assumption_line(line)
        if entry is None:
            continue
        status, text = entry
        doc.assumptions.append(
            Assumption(
                text=text,
                status=coerce_choice(
                    AssumptionStatus, status, default=AssumptionStatus.UNVALIDATED.value
                ),
            )
        )


def extract_questions(doc: AnalysisDocument, lines: list[str]) -> None:
    current: Optional[Question] = None
    answer: list[str] = []

    def close() -> None:
        if current is not None and answer:
            current.answer = _join(answer)

    for line in lines:
        entry = grammar.parse_question_line(line)
        if entry is not None:
            close()
            answered, question_type, text = entry
            current = Question(
                text=text,
                type=coerce_choice(QuestionType, question_type, QuestionType.STAKEHOLDER.value),
                status=QuestionStatus.ANSWERED.value if answered else QuestionStatus.OPEN.value,
            )
            answer = []
            doc.questions.append(current)
            continue
        continuation = grammar.parse_continuation(line)
        if continuation is not None and current is not None:
            answer.append(continuation)
        elif line.strip():
            # Anything else ends the entry's continuation block.
            close()
            current, answer = None, []
    close()


def extract_actions(doc: AnalysisDocument, lines: list[str]) -> None:
    current: Optional[Action] = None
    note: list[str] = []

    def close() -> None:
        if current is not None and note:
            current.note = _join(note)

    for line in lines:
        entry = grammar.parse_action_line(line)
        if entry is not None:
            close()
            completed, text = entry
            current = Action(text=text, completed=completed)
            note = []
            doc.actions.append(current)
            continue
        continuation = grammar.parse_continuation(line)
        if continuation is not None and current is not None:
            note.append(continuation)
        elif line.strip():
            close()
            current, note = None, []
    close()


def extract_edge_cases(doc: AnalysisDocument, lines: list[str]) -> None:
    for line in lines:
        entry = grammar.parse_edge_case_line(line)
        if entry is None:
            continue
        considered, label, notes = entry
        spec = EDGE_CASE_BY_LABEL.get(label)
        if spec is None:
            logger.debug("Unknown edge case label %r", label)
            continue
        doc.edges[spec.id] = EdgeCaseStatus(considered=considered, notes=notes if considered else "")


def extract_scope(doc: AnalysisDocument, lines: list[str]) -> None:
    scope = doc.scope
    version = UNASSIGNED
    for line in lines:
        matched = grammar.parse_scalar_line(line, grammar.SCOPE_LABELS)
        if matched is not None:
            attribute, value = matched
            setattr(scope, attribute, value)
            continue
        group = grammar.parse_scope_group(line)
        if group is not None:
            version = coerce_scope_version(group)
            continue
        entry = grammar.parse_scope_item_line(line)
        if entry is not None:
            item, priority, description = entry
            scope.items.append(
                ScopeItem(
                    item=item,
                    description=description,
                    version=version,
                    priority=coerce_choice(Priority, priority),
                )
            )


def extract_mapping(doc: AnalysisDocument, lines: list[str]) -> None:
    doc.mapping.figma_url = grammar.strip_figma_prefix(_join(lines))


def extract_notes(doc: AnalysisDocument, lines: list[str]) -> None:
    notes = _join(lines)
    doc.notes = "" if notes == grammar.NO_NOTES else notes


EXTRACTORS: dict[str, Extractor] = {
    encoder.OVERVIEW: extract_overview,
    encoder.PROBLEM: extract_problem,
    encoder.CONTEXT: extract_context,
    encoder.ASSUMPTIONS: extract_assumptions,
    encoder.EDGE_CASES_TITLE: extract_edge_cases,
    encoder.SCOPE: extract_scope,
    encoder.QUESTIONS: extract_questions,
    encoder.ACTIONS: extract_actions,
    encoder.MAPPING: extract_mapping,
    encoder.NOTES: extract_notes,
    encoder.SUMMARY: extract_summary,
}


# ── State machine ──────────────────────────────────────────────────


class DocumentDecoder:
    """Incremental decoder: ``feed`` lines, then ``finish``.

    A decoder instance builds exactly one document and is not reusable.
    """

    def __init__(self) -> None:
        self.doc = create_blank_document(name="")
        self.state: SectionState = Idle()
        self.buffer: list[str] = []
        self._seen_content = False

    def feed(self, line: str) -> None:
        line = line.rstrip()
        first = not self._seen_content and bool(line.strip())
        if line.strip():
            self._seen_content = True

        if first:
            title = grammar.parse_title(line)
            if title is not None:
                self.doc.name = title
                return

        header = grammar.parse_section_header(line)
        if header is not None:
            self._flush()
            section = resolve_section(header)
            if section is None:
                logger.debug("Unknown section heading %r, skipping its content", header)
            self.state = InSection(heading=header, section=section)
            return

        metadata = grammar.parse_metadata(line)
        if metadata is not None:
            self._apply_metadata(*metadata)
            return

        if isinstance(self.state, InSection):
            if not self.buffer and not line.strip():
                return
            self.buffer.append(line)

    def finish(self) -> AnalysisDocument:
        self._flush()
        self.state = Idle()
        return self.doc

    def _flush(self) -> None:
        if isinstance(self.state, InSection) and self.state.section is not None:
            EXTRACTORS[self.state.section](self.doc, self.buffer)
        self.buffer = []

    def _apply_metadata(self, key: str, value: str) -> None:
        if key == "phase":
            self.doc.phase = coerce_choice(Phase, value)
        elif key == "jira":
            self.doc.jira_ticket = value.strip()
        elif key == "created":
            created = grammar.parse_created_date(value)
            if created is None:
                logger.debug("Unparseable creation date %r", value)
                return
            self.doc.created_at = created
            self.doc.updated_at = max(self.doc.updated_at, created)


def decode(text: Union[str, bytes, None]) -> AnalysisDocument:
    """Build a document from analysis text.

    Args:
        text: Text as produced by ``encode`` or written by hand. Bytes are
            read as UTF-8 with replacement characters; anything that is not
            text decodes to a blank document.

    Returns:
        A new document. Collection items get fresh ids.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="replace")
    if not isinstance(text, str):
        logger.debug("Cannot decode %s, returning a blank document", type(text).__name__)
        text = ""

    decoder = DocumentDecoder()
    for line in text.splitlines():
        decoder.feed(line)
    return decoder.finish()

"""Data models for a requirement analysis document.

One ``AnalysisDocument`` is one analysis task. It owns every sub-record by
value; nothing in a document is shared with another document. Enum-valued
fields hold plain strings drawn from ``vocabulary`` (empty = not set).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from .vocabulary import (
    EDGE_CASE_IDS,
    UNASSIGNED,
    AssumptionStatus,
    Language,
    QuestionStatus,
    QuestionType,
)


def new_id() -> str:
    """Mint an opaque collection-item / document id."""
    return uuid.uuid4().hex[:8]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(stamp: datetime) -> datetime:
    """Treat a naive timestamp as UTC; aware ones are returned unchanged."""
    if stamp.tzinfo is None:
        return stamp.replace(tzinfo=timezone.utc)
    return stamp


# ── Flat scalar sections ──────────────────────────────────────────


@dataclass
class Overview:
    """Basic information about the feature requirement."""

    feature_name: str = ""
    date: str = ""
    requestor: str = ""
    description: str = ""
    origin: str = ""  # Origin value
    origin_other: str = ""


@dataclass
class Problem:
    problem: str = ""
    who: str = ""
    outcome: str = ""
    metrics: str = ""
    if_not_built: str = ""


@dataclass
class Context:
    segments: str = ""
    workflow: str = ""
    workarounds: str = ""
    triggers: str = ""
    before_after: str = ""


@dataclass
class Summary:
    confidence: str = ""  # Confidence value
    concerns: str = ""
    next_steps: str = ""


@dataclass
class Mapping:
    figma_url: str = ""


# ── Collection items ──────────────────────────────────────────────


@dataclass
class ScopeItem:
    """A slice of the feature assigned to a release version.

    ``version`` is a ``Phase`` value or ``"Unassigned"``.
    """

    item: str = ""
    description: str = ""
    version: str = UNASSIGNED
    priority: str = ""  # Priority value
    id: str = field(default_factory=new_id)


@dataclass
class Scope:
    affected: str = ""
    new_patterns: str = ""
    technical: str = ""
    items: List[ScopeItem] = field(default_factory=list)


@dataclass
class EdgeCaseStatus:
    considered: bool = False
    notes: str = ""


@dataclass
class Assumption:
    text: str = ""
    status: str = AssumptionStatus.UNVALIDATED.value
    tags: Set[str] = field(default_factory=set)
    id: str = field(default_factory=new_id)


@dataclass
class Question:
    text: str = ""
    type: str = QuestionType.STAKEHOLDER.value
    status: str = QuestionStatus.OPEN.value
    answer: str = ""
    dependency: bool = False
    tags: Set[str] = field(default_factory=set)
    id: str = field(default_factory=new_id)

    @property
    def answered(self) -> bool:
        return self.status == QuestionStatus.ANSWERED.value


@dataclass
class Action:
    text: str = ""
    completed: bool = False
    note: str = ""
    id: str = field(default_factory=new_id)


def blank_edges() -> Dict[str, EdgeCaseStatus]:
    """Edge-case map with every schema key present and unconsidered."""
    return {edge_id: EdgeCaseStatus() for edge_id in EDGE_CASE_IDS}


# ── Root ──────────────────────────────────────────────────────────


@dataclass
class AnalysisDocument:
    """Root of the document tree.

    ``updated_at`` is bumped by ``touch()``; callers mutating fields
    directly should call it afterwards. ``updated_at >= created_at`` holds
    for every document produced by this package.
    """

    name: str = ""
    phase: str = ""  # Phase value
    jira_ticket: str = ""
    language: str = Language.EN.value
    secure: bool = False
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    overview: Overview = field(default_factory=Overview)
    problem: Problem = field(default_factory=Problem)
    context: Context = field(default_factory=Context)
    assumptions: List[Assumption] = field(default_factory=list)
    edges: Dict[str, EdgeCaseStatus] = field(default_factory=blank_edges)
    scope: Scope = field(default_factory=Scope)
    questions: List[Question] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    mapping: Mapping = field(default_factory=Mapping)
    notes: str = ""
    summary: Summary = field(default_factory=Summary)

    def __post_init__(self) -> None:
        self.created_at = as_utc(self.created_at)
        self.updated_at = as_utc(self.updated_at)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def touch(self, now: Optional[datetime] = None) -> None:
        """Record a mutation."""
        self.created_at = as_utc(self.created_at)
        self.updated_at = max(as_utc(now or utc_now()), self.created_at)

    # Mutators below keep ``updated_at`` current.

    def add_assumption(self, text: str, status: str = AssumptionStatus.UNVALIDATED.value) -> Assumption:
        item = Assumption(text=text, status=status)
        self.assumptions.append(item)
        self.touch()
        return item

    def add_question(
        self,
        text: str,
        type: str = QuestionType.STAKEHOLDER.value,
        status: str = QuestionStatus.OPEN.value,
        answer: str = "",
    ) -> Question:
        item = Question(text=text, type=type, status=status, answer=answer)
        self.questions.append(item)
        self.touch()
        return item

    def add_action(self, text: str, completed: bool = False, note: str = "") -> Action:
        item = Action(text=text, completed=completed, note=note)
        self.actions.append(item)
        self.touch()
        return item

    def add_scope_item(
        self, item: str, version: str = "MVP", priority: str = "Must", description: str = ""
    ) -> ScopeItem:
        scope_item = ScopeItem(item=item, description=description, version=version, priority=priority)
        self.scope.items.append(scope_item)
        self.touch()
        return scope_item

    def mark_edge_case(self, edge_id: str, considered: bool = True, notes: str = "") -> None:
        """Set an edge case's status. Unknown ids are not part of the schema."""
        if edge_id not in self.edges:
            raise KeyError(edge_id)
        self.edges[edge_id] = EdgeCaseStatus(considered=considered, notes=notes)
        self.touch()


def create_blank_document(name: str = "Untitled Analysis", language: str = Language.EN.value) -> AnalysisDocument:
    """Create a blank analysis: empty scalars and collections, all edge cases unconsidered."""
    now = utc_now()
    return AnalysisDocument(name=name, language=language, created_at=now, updated_at=now)


def scalar_items(record: object) -> List[Tuple[str, str]]:
    """``(attribute, value)`` pairs of a record's string fields, in declaration order."""
    return [
        (f.name, getattr(record, f.name))
        for f in fields(record)  # type: ignore[arg-type]
        if isinstance(getattr(record, f.name), str) and f.name != "id"
    ]


def is_filled(value: Optional[str]) -> bool:
    """Presence rule for scalar fields: non-empty after trimming."""
    return bool(value and str(value).strip())

"""Document model: the typed record tree of one requirement analysis."""

from .models import (
    Action,
    AnalysisDocument,
    Assumption,
    Context,
    EdgeCaseStatus,
    Mapping,
    Overview,
    Problem,
    Question,
    Scope,
    ScopeItem,
    Summary,
    as_utc,
    blank_edges,
    create_blank_document,
    is_filled,
    new_id,
    scalar_items,
    utc_now,
)
from .vocabulary import (
    EDGE_CASES,
    UNASSIGNED,
    AssumptionStatus,
    Confidence,
    EdgeCaseSpec,
    Language,
    Origin,
    Phase,
    Priority,
    QuestionStatus,
    QuestionType,
    coerce_choice,
    coerce_scope_version,
)

__all__ = [
    "Action",
    "AnalysisDocument",
    "Assumption",
    "AssumptionStatus",
    "Confidence",
    "Context",
    "EDGE_CASES",
    "EdgeCaseSpec",
    "EdgeCaseStatus",
    "Language",
    "Mapping",
    "Origin",
    "Overview",
    "Phase",
    "Priority",
    "Problem",
    "Question",
    "QuestionStatus",
    "QuestionType",
    "Scope",
    "ScopeItem",
    "Summary",
    "UNASSIGNED",
    "as_utc",
    "blank_edges",
    "coerce_choice",
    "coerce_scope_version",
    "create_blank_document",
    "is_filled",
    "new_id",
    "scalar_items",
    "utc_now",
]

"""Completion scoring for analysis documents.

Pure functions over the document model: the score is recomputed from
scratch on every call and never stored.

Unit counting:
    every scalar in Overview, Problem, Context, Summary, the three Scope
    scalars and ``phase`` is one unit, filled when non-empty after trim;
    assumptions, questions, actions and scope items each add one unit,
    filled when the list is non-empty; edge cases add one unit, filled
    when at least one is considered.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .document.models import AnalysisDocument, is_filled, scalar_items

SECTIONS = (
    "overview",
    "problem",
    "context",
    "assumptions",
    "edges",
    "scope",
    "questions",
    "actions",
    "mapping",
    "notes",
    "summary",
)


class _Tally:
    def __init__(self) -> None:
        self.filled = 0
        self.total = 0

    def check(self, value: Optional[str]) -> None:
        self.total += 1
        if is_filled(value):
            self.filled += 1

    def check_all(self, values: Iterable[Optional[str]]) -> None:
        for value in values:
            self.check(value)

    def flag(self, present: bool) -> None:
        self.total += 1
        if present:
            self.filled += 1

    def percent(self) -> int:
        return percentage(self.filled, self.total)


def percentage(filled: int, total: int) -> int:
    """``round(100 * filled / total)`` with halves rounded up; 0 for an empty total."""
    if total <= 0:
        return 0
    return (200 * filled + total) // (2 * total)


def _values(record: object) -> list[str]:
    return [value for _, value in scalar_items(record)]


def _scope_scalars(doc: AnalysisDocument) -> list[str]:
    return [doc.scope.affected, doc.scope.new_patterns, doc.scope.technical]


def considered_count(doc: AnalysisDocument) -> int:
    return sum(1 for status in doc.edges.values() if status.considered)


def score(doc: AnalysisDocument) -> int:
    """Overall completion percentage in [0, 100]."""
    tally = _Tally()
    tally.check_all(_values(doc.overview))
    tally.check(doc.phase)
    tally.check_all(_values(doc.problem))
    tally.check_all(_values(doc.context))
    tally.flag(bool(doc.assumptions))
    tally.flag(considered_count(doc) > 0)
    tally.check_all(_scope_scalars(doc))
    tally.flag(bool(doc.scope.items))
    tally.flag(bool(doc.questions))
    tally.flag(bool(doc.actions))
    tally.check_all(_values(doc.summary))
    return tally.percent()


def section_score(doc: AnalysisDocument, section: str) -> int:
    """Completion percentage of one section.

    Raises:
        ValueError: If ``section`` is not one of ``SECTIONS``
    """
    if section == "edges":
        return percentage(considered_count(doc), len(doc.edges))

    tally = _Tally()
    if section == "overview":
        tally.check_all(_values(doc.overview))
        tally.check(doc.phase)
    elif section == "problem":
        tally.check_all(_values(doc.problem))
    elif section == "context":
        tally.check_all(_values(doc.context))
    elif section == "assumptions":
        tally.flag(bool(doc.assumptions))
    elif section == "scope":
        tally.check_all(_scope_scalars(doc))
        tally.flag(bool(doc.scope.items))
    elif section == "questions":
        tally.flag(bool(doc.questions))
    elif section == "actions":
        tally.flag(bool(doc.actions))
    elif section == "mapping":
        tally.check(doc.mapping.figma_url)
    elif section == "notes":
        tally.check(doc.notes)
    elif section == "summary":
        tally.check_all(_values(doc.summary))
    else:
        raise ValueError(f"Unknown section: {section!r}")
    return tally.percent()


def section_scores(doc: AnalysisDocument) -> dict[str, int]:
    """Every section's completion percentage, in section order."""
    return {section: section_score(doc, section) for section in SECTIONS}

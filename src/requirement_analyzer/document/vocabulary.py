"""Closed vocabularies of the analysis document.

Enum-valued document fields are stored as plain strings (the member's
``value``); an empty string means "not set". ``coerce_choice`` is the single
place where foreign tokens are mapped back into a domain.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type

from ..logging_config import get_logger

logger = get_logger(__name__)


class Phase(Enum):
    """Release phases, in planning order.

    Used both as the analysis target phase and as the version of a scope
    item. ``CUT`` is a valid scope version but is not offered as a target.
    """

    MVP = "MVP"
    V1 = "V1"
    V2 = "V2"
    V3 = "V3"
    FUTURE = "Future"
    CUT = "Cut"


# Bucket for scope items whose version is empty or unrecognized.
UNASSIGNED = "Unassigned"


class Language(Enum):
    EN = "en"
    DE = "de"


class Origin(Enum):
    """Where a requirement came from."""

    USER_RESEARCH = "User Research"
    BUSINESS_METRIC = "Business Metric"
    COMPETITOR_ANALYSIS = "Competitor Analysis"
    STAKEHOLDER_REQUEST = "Stakeholder Request"
    TECHNICAL_DEBT = "Technical Debt"
    OTHER = "Other"


class Priority(Enum):
    MUST = "Must"
    SHOULD = "Should"
    COULD = "Could"
    WONT = "Won't"


class AssumptionStatus(Enum):
    UNVALIDATED = "Unvalidated"
    NEEDS_RESEARCH = "Needs Research"
    VALIDATED = "Validated"
    DISPROVEN = "Disproven"


class QuestionType(Enum):
    """Who is expected to answer a question."""

    STAKEHOLDER = "Stakeholder"
    USER_RESEARCH = "User Research"
    DEVELOPER = "Developer"
    DESIGNER = "Designer"
    BUSINESS_ANALYST = "Business Analyst"


class QuestionStatus(Enum):
    OPEN = "Open"
    ANSWERED = "Answered"


class Confidence(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class EdgeCaseSpec:
    """One entry of the fixed edge-case checklist.

    Attributes:
        id: Stable key used in ``AnalysisDocument.edges``
        label: Exact label used in the text format
        hint: Prompt shown to the analyst
    """

    id: str
    label: str
    hint: str


# Versioned schema constant: the key set of AnalysisDocument.edges.
EDGE_CASES: tuple[EdgeCaseSpec, ...] = (
    EdgeCaseSpec("empty", "Empty state", "What does the user see when there's no data?"),
    EdgeCaseSpec("error", "Error state", "What happens when something fails?"),
    EdgeCaseSpec("loading", "Loading state", "What's shown during data fetch or processing?"),
    EdgeCaseSpec("firstTime", "First-time experience", "How does a new user encounter this?"),
    EdgeCaseSpec("returning", "Returning user", "Does behavior change for repeat use?"),
    EdgeCaseSpec(
        "permissions", "Permission / access variations", "Different roles, restricted access?"
    ),
    EdgeCaseSpec("offline", "Offline / connectivity", "What if the connection drops?"),
    EdgeCaseSpec(
        "dataLimits", "Data extremes", "Too much data? Too little? Unexpected formats?"
    ),
    EdgeCaseSpec("mobile", "Responsive / mobile", "Does this need to work across breakpoints?"),
    EdgeCaseSpec("accessibility", "Accessibility", "Keyboard nav, screen readers, contrast?"),
)

EDGE_CASE_IDS: tuple[str, ...] = tuple(ec.id for ec in EDGE_CASES)
EDGE_CASE_BY_LABEL: dict[str, EdgeCaseSpec] = {ec.label: ec for ec in EDGE_CASES}

SCOPE_VERSION_ORDER: tuple[str, ...] = tuple(p.value for p in Phase) + (UNASSIGNED,)


def choices(enum_cls: Type[Enum]) -> tuple[str, ...]:
    """Return the string values of an enum, in declaration order."""
    return tuple(member.value for member in enum_cls)


def coerce_choice(enum_cls: Type[Enum], token: Optional[str], default: str = "") -> str:
    """Map ``token`` onto ``enum_cls`` values, falling back to ``default``.

    Matching is exact after trimming; an empty token is returned as the
    default without logging.
    """
    if token is None:
        return default
    value = str(token).strip()
    if not value:
        return default
    if value in choices(enum_cls):
        return value
    logger.debug("Unknown %s token %r, using %r", enum_cls.__name__, value, default)
    return default


def coerce_scope_version(token: Optional[str]) -> str:
    """Map a scope version token onto a phase value or ``UNASSIGNED``."""
    return coerce_choice(Phase, token, default=UNASSIGNED)

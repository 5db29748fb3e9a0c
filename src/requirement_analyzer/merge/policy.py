"""Per-field reconciliation policy for merging scalar fields.

``FieldKey`` enumerates every scalar the merge engine reconciles, so a
policy can only name fields that exist in the document model. Fields not
mentioned in a ``MergePolicy`` use ``ScalarPolicy.REPLACE``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional, Union

from ..logging_config import get_logger

logger = get_logger(__name__)


class ScalarPolicy(Enum):
    """What to do when both sides of a merge hold a value."""

    REPLACE = "replace"
    APPEND = "append"


class FieldKey(Enum):
    """Mergeable scalar fields, valued by their dotted document path.

    ``EDGE_CASE_NOTES`` applies to the notes of every edge case.
    """

    PHASE = "phase"
    JIRA_TICKET = "jira_ticket"
    NOTES = "notes"

    OVERVIEW_FEATURE_NAME = "overview.feature_name"
    OVERVIEW_DATE = "overview.date"
    OVERVIEW_REQUESTOR = "overview.requestor"
    OVERVIEW_DESCRIPTION = "overview.description"
    OVERVIEW_ORIGIN = "overview.origin"
    OVERVIEW_ORIGIN_OTHER = "overview.origin_other"

    PROBLEM_PROBLEM = "problem.problem"
    PROBLEM_WHO = "problem.who"
    PROBLEM_OUTCOME = "problem.outcome"
    PROBLEM_METRICS = "problem.metrics"
    PROBLEM_IF_NOT_BUILT = "problem.if_not_built"

    CONTEXT_SEGMENTS = "context.segments"
    CONTEXT_WORKFLOW = "context.workflow"
    CONTEXT_WORKAROUNDS = "context.workarounds"
    CONTEXT_TRIGGERS = "context.triggers"
    CONTEXT_BEFORE_AFTER = "context.before_after"

    SCOPE_AFFECTED = "scope.affected"
    SCOPE_NEW_PATTERNS = "scope.new_patterns"
    SCOPE_TECHNICAL = "scope.technical"

    SUMMARY_CONFIDENCE = "summary.confidence"
    SUMMARY_CONCERNS = "summary.concerns"
    SUMMARY_NEXT_STEPS = "summary.next_steps"

    MAPPING_FIGMA_URL = "mapping.figma_url"

    EDGE_CASE_NOTES = "edges.notes"

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(self.value.split("."))

    @property
    def attribute(self) -> str:
        """Leaf attribute name (``feature_name`` for ``overview.feature_name``)."""
        return self.path[-1]


# Closed-domain fields: appending two members is never a member, so these
# are always replaced.
ENUM_FIELDS = frozenset({FieldKey.PHASE, FieldKey.OVERVIEW_ORIGIN, FieldKey.SUMMARY_CONFIDENCE})

# Fields whose value lives directly on an AnalysisDocument section record.
SECTION_FIELDS: tuple[FieldKey, ...] = tuple(k for k in FieldKey if k is not FieldKey.EDGE_CASE_NOTES)


def parse_field_key(name: Union[str, FieldKey]) -> Optional[FieldKey]:
    """Resolve a dotted path (``"problem.who"``) or member name (``"PROBLEM_WHO"``)."""
    if isinstance(name, FieldKey):
        return name
    token = str(name).strip()
    try:
        return FieldKey(token)
    except ValueError:
        pass
    try:
        return FieldKey[token.upper().replace(".", "_")]
    except KeyError:
        return None


@dataclass(frozen=True)
class MergePolicy:
    """Caller-selected scalar policy, keyed by ``FieldKey``."""

    overrides: Mapping[FieldKey, ScalarPolicy] = field(default_factory=dict)

    def policy_for(self, key: FieldKey) -> ScalarPolicy:
        if key in ENUM_FIELDS:
            return ScalarPolicy.REPLACE
        return self.overrides.get(key, ScalarPolicy.REPLACE)

    @classmethod
    def appending(cls, keys: Iterable[Union[str, FieldKey]]) -> "MergePolicy":
        """Policy that appends the given fields and replaces the rest.

        Unknown names are logged and ignored.
        """
        return cls.from_names({key: ScalarPolicy.APPEND for key in keys})

    @classmethod
    def from_names(
        cls, policies: Mapping[Union[str, FieldKey], Union[str, ScalarPolicy]]
    ) -> "MergePolicy":
        """Build a policy from loosely typed input (CLI flags, config files).

        Entries naming an unknown field or policy are dropped; those fields
        keep the default.
        """
        overrides: dict[FieldKey, ScalarPolicy] = {}
        for name, value in policies.items():
            key = parse_field_key(name)
            if key is None:
                logger.warning("Ignoring merge policy for unknown field %r", name)
                continue
            if isinstance(value, ScalarPolicy):
                overrides[key] = value
                continue
            try:
                overrides[key] = ScalarPolicy(str(value).strip().lower())
            except ValueError:
                logger.warning("Ignoring unknown merge policy %r for %s", value, key.value)
        return cls(overrides=overrides)

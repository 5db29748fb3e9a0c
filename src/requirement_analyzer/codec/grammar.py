"""Line grammar of the analysis text format.

Every line shape the encoder emits and the decoder recognizes lives here,
in both directions: ``format_*`` builds a line, ``parse_*`` recognizes one
and returns ``None`` for anything else. Labels are exact and case-sensitive.

Shapes:
    # <name>                                    title
    *Created: <M/D/YYYY>*                       metadata
    *Target Phase: <phase>*
    *JIRA Ticket: <ticket>*
    ## <section>                                section header
    **<Label>:** <value>                        scalar field
    <N>. [<status>] <text>                      assumption
    <N>. [<✓|?>] (<type>) <text>                question
    <N>. [<X| >] <text>                         action
       → <text>                                 continuation (answer / note)
    - [x] **<label>**: <notes>                  edge case, considered
    - [ ] <label>                               edge case, not considered
    **<version>**                               scope version group
    - <item> [<priority>] — <description>       scope item
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from ..document.vocabulary import Priority

# ── Section-level constants ────────────────────────────────────────

OVERVIEW_LABELS: dict[str, str] = {
    "Feature": "feature_name",
    "Date": "date",
    "Stakeholders": "requestor",
    "Origin": "origin",
}

PROBLEM_LABELS: dict[str, str] = {
    "Problem": "problem",
    "Who": "who",
    "Business Outcome": "outcome",
    "Success Metrics": "metrics",
    "If Not Built": "if_not_built",
}

CONTEXT_LABELS: dict[str, str] = {
    "Target Segments": "segments",
    "Current Workflow": "workflow",
    "Workarounds": "workarounds",
    "Triggers": "triggers",
    "Before/After": "before_after",
}

SCOPE_LABELS: dict[str, str] = {
    "Affected Features": "affected",
    "New Patterns Needed": "new_patterns",
    "Technical Constraints": "technical",
}

SUMMARY_LABELS: dict[str, str] = {
    "Confidence": "confidence",
    "Key Concerns": "concerns",
    "Next Steps": "next_steps",
}

ORIGIN_OTHER_PREFIX = "Other: "
SCOPE_BY_VERSION_HEADING = "### Scope Items by Version"
FIGMA_PREFIX = "Figma Embed:"

ANSWERED_MARKER = "✓"
OPEN_MARKER = "?"
COMPLETED_MARK = "X"
CONTINUATION_MARKER = "→"
SCOPE_DESCRIPTION_SEPARATOR = "—"

NO_ASSUMPTIONS = "*No assumptions logged yet.*"
NO_QUESTIONS = "*No questions logged yet.*"
NO_ACTIONS = "*No action items yet.*"
NO_NOTES = "*No notes.*"

# ── Patterns ───────────────────────────────────────────────────────

_TITLE = re.compile(r"^#(?!#)\s*(?P<name>.*?)\s*$")
_SECTION = re.compile(r"^##(?!#)\s*(?P<name>.+?)\s*$")
_CREATED = re.compile(r"^\*Created:\s*(?P<value>.*?)\s*\*$")
_TARGET_PHASE = re.compile(r"^\*Target Phase:\s*(?P<value>.*?)\s*\*$")
_JIRA = re.compile(r"^\*JIRA Ticket:\s*(?P<value>.*?)\s*\*$")

_SCALAR = re.compile(r"^\*\*(?P<label>[^*]+?):\*\*\s?(?P<value>.*)$")
_NUMBERED = re.compile(r"^\d+\.\s*\[(?P<tag>[^\]]*)\]\s*(?P<rest>.*)$")
_QUESTION_TYPE = re.compile(r"^\((?P<type>[^)]*)\)\s*(?P<text>.*)$")
_CONTINUATION = re.compile(r"^\s*(?:→|-)\s?(?P<text>.*)$")
_EDGE_CASE = re.compile(r"^-\s*\[(?P<mark>[ xX]?)\]\s*(?P<rest>.*)$")
_EDGE_CASE_BOLD = re.compile(r"^\*\*(?P<label>.+?)\*\*(?::\s*(?P<notes>.*))?$")
_SCOPE_GROUP = re.compile(r"^\*\*(?P<version>[^*]+?)\*\*$")
# Only a priority token in brackets ends the item name; other bracket text
# and separators before it belong to the item.
_PRIORITY_TOKENS = "|".join(re.escape(p.value) for p in Priority)
_SCOPE_ITEM_PRIORITY = re.compile(
    rf"^-\s+(?P<item>.*?)\s+\[(?P<priority>{_PRIORITY_TOKENS})\](?:\s+—\s+(?P<description>.*))?$"
)
_SCOPE_ITEM = re.compile(r"^-\s+(?P<item>.*?)(?:\s+—\s+(?P<description>.*))?$")

_CREATED_FORMATS = ("%m/%d/%Y", "%Y-%m-%d", "%d.%m.%Y")


# ── Title and metadata ─────────────────────────────────────────────


def format_title(name: str) -> str:
    return f"# {name}"


def parse_title(line: str) -> Optional[str]:
    match = _TITLE.match(line.strip())
    if match is None:
        return None
    return match.group("name")


def format_created(created_at: datetime) -> str:
    stamp = _as_utc(created_at)
    return f"*Created: {stamp.month}/{stamp.day}/{stamp.year}*"


def format_target_phase(phase: str) -> str:
    return f"*Target Phase: {phase}*"


def format_jira_ticket(ticket: str) -> str:
    return f"*JIRA Ticket: {ticket}*"


def parse_metadata(line: str) -> Optional[tuple[str, str]]:
    """Recognize a metadata line.

    Returns:
        ``("created" | "phase" | "jira", value)`` or None
    """
    stripped = line.strip()
    for key, pattern in (("created", _CREATED), ("phase", _TARGET_PHASE), ("jira", _JIRA)):
        match = pattern.match(stripped)
        if match is not None:
            return key, match.group("value")
    return None


def parse_created_date(value: str) -> Optional[datetime]:
    """Parse the date of a ``*Created: ...*`` line as midnight UTC."""
    for fmt in _CREATED_FORMATS:
        try:
            parsed = datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)
    return None


def _as_utc(stamp: datetime) -> datetime:
    if stamp.tzinfo is None:
        return stamp.replace(tzinfo=timezone.utc)
    return stamp.astimezone(timezone.utc)


# ── Section headers ────────────────────────────────────────────────


def format_section_header(title: str) -> str:
    return f"## {title}"


def parse_section_header(line: str) -> Optional[str]:
    match = _SECTION.match(line.strip())
    if match is None:
        return None
    return match.group("name")


# ── Scalar fields ──────────────────────────────────────────────────


def format_scalar(label: str, value: Optional[str]) -> Optional[str]:
    """``**Label:** value``, or None when the value is blank."""
    if not value or not value.strip():
        return None
    return f"**{label}:** {value}"


def parse_scalar_line(line: str, labels: dict[str, str]) -> Optional[tuple[str, str]]:
    """Match a scalar line against a section's label table.

    Returns:
        ``(attribute, trimmed value)`` or None if the line is not a scalar
        line or its label is not in ``labels``
    """
    match = _SCALAR.match(line.strip())
    if match is None:
        return None
    attribute = labels.get(match.group("label"))
    if attribute is None:
        return None
    return attribute, match.group("value").strip()


def format_origin(origin: str, origin_other: str) -> str:
    if origin == "Other" and origin_other.strip():
        return f"{ORIGIN_OTHER_PREFIX}{origin_other}"
    return origin


def split_origin(value: str) -> tuple[str, str]:
    """Split an Origin value into ``(origin, origin_other)``."""
    if value.startswith(ORIGIN_OTHER_PREFIX):
        return "Other", value[len(ORIGIN_OTHER_PREFIX) :].strip()
    return value, ""


# ── Numbered list entries ──────────────────────────────────────────


def format_assumption(index: int, status: str, text: str) -> str:
    return f"{index}. [{status}] {text}"


def parse_assumption_line(line: str) -> Optional[tuple[str, str]]:
    """Returns ``(status token, text)`` or None."""
    match = _NUMBERED.match(line.strip())
    if match is None:
        return None
    return match.group("tag").strip(), match.group("rest").strip()


def format_question(index: int, answered: bool, question_type: str, text: str) -> str:
    marker = ANSWERED_MARKER if answered else OPEN_MARKER
    return f"{index}. [{marker}] ({question_type}) {text}"


def parse_question_line(line: str) -> Optional[tuple[bool, str, str]]:
    """Returns ``(answered, type token, text)`` or None.

    The ``(type)`` group is optional in hand-written text.
    """
    match = _NUMBERED.match(line.strip())
    if match is None:
        return None
    answered = match.group("tag").strip() == ANSWERED_MARKER
    rest = match.group("rest")
    typed = _QUESTION_TYPE.match(rest)
    if typed is None:
        return answered, "", rest.strip()
    return answered, typed.group("type").strip(), typed.group("text").strip()


def format_action(index: int, completed: bool, text: str) -> str:
    mark = COMPLETED_MARK if completed else " "
    return f"{index}. [{mark}] {text}"


def parse_action_line(line: str) -> Optional[tuple[bool, str]]:
    """Returns ``(completed, text)`` or None."""
    match = _NUMBERED.match(line.strip())
    if match is None:
        return None
    completed = match.group("tag").strip().upper() == COMPLETED_MARK
    return completed, match.group("rest").strip()


def format_continuation(text: str) -> list[str]:
    """Continuation lines for a multi-line answer or note."""
    return [f"   {CONTINUATION_MARKER} {line}".rstrip() for line in text.split("\n")]


def parse_continuation(line: str) -> Optional[str]:
    match = _CONTINUATION.match(line)
    if match is None:
        return None
    return match.group("text").rstrip()


# ── Edge cases ─────────────────────────────────────────────────────


def format_edge_case(label: str, considered: bool, notes: str) -> str:
    if not considered:
        return f"- [ ] {label}"
    if notes.strip():
        return f"- [x] **{label}**: {notes}"
    return f"- [x] **{label}**"


def parse_edge_case_line(line: str) -> Optional[tuple[bool, str, str]]:
    """Returns ``(considered, label, notes)`` or None."""
    match = _EDGE_CASE.match(line.strip())
    if match is None:
        return None
    considered = match.group("mark").lower() == "x"
    rest = match.group("rest").strip()
    bold = _EDGE_CASE_BOLD.match(rest)
    if bold is not None:
        return considered, bold.group("label").strip(), (bold.group("notes") or "").strip()
    label, _, notes = rest.partition(":")
    return considered, label.strip(), notes.strip()


# ── Scope items ────────────────────────────────────────────────────


def format_scope_group(version: str) -> str:
    return f"**{version}**"


def parse_scope_group(line: str) -> Optional[str]:
    match = _SCOPE_GROUP.match(line.strip())
    if match is None:
        return None
    return match.group("version").strip()


def format_scope_item(item: str, priority: str, description: str) -> str:
    line = f"- {item}"
    if priority.strip():
        line += f" [{priority}]"
    if description.strip():
        line += f" {SCOPE_DESCRIPTION_SEPARATOR} {description}"
    return line


def parse_scope_item_line(line: str) -> Optional[tuple[str, str, str]]:
    """Returns ``(item, priority, description)`` or None.

    Bracketed text that is not a priority stays part of the item name.
    """
    stripped = line.strip()
    match = _SCOPE_ITEM_PRIORITY.match(stripped)
    if match is None:
        match = _SCOPE_ITEM.match(stripped)
    if match is None:
        return None
    groups = match.groupdict()
    return (
        match.group("item").strip(),
        (groups.get("priority") or "").strip(),
        (match.group("description") or "").strip(),
    )


# ── Mapping ────────────────────────────────────────────────────────


def format_figma(url: str) -> str:
    return f"{FIGMA_PREFIX} {url}"


def strip_figma_prefix(content: str) -> str:
    if content.startswith(FIGMA_PREFIX):
        return content[len(FIGMA_PREFIX) :].strip()
    return content

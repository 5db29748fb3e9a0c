"""Shared test fixtures for Requirement Analyzer tests."""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from requirement_analyzer.document import (  # noqa: E402
    EDGE_CASES,
    Action,
    AnalysisDocument,
    Assumption,
    EdgeCaseStatus,
    Question,
    ScopeItem,
    create_blank_document,
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/project config files and REQAN_* variables out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(tmp_path)
    for key in [k for k in os.environ if k.startswith("REQAN_")]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def created_at():
    return datetime(2024, 3, 5, tzinfo=timezone.utc)


@pytest.fixture
def blank_document():
    """Blank analysis with default name."""
    return create_blank_document()


@pytest.fixture
def dark_mode_document():
    """Only a feature name and one assumption filled."""
    doc = create_blank_document("Dark Mode")
    doc.overview.feature_name = "Dark Mode"
    doc.assumptions.append(Assumption(text="Users have modern browsers", status="Unvalidated"))
    return doc


@pytest.fixture
def full_document(created_at):
    """Every field populated, every edge case considered.

    Scope items are listed in version order so they survive a round trip
    unchanged.
    """
    doc = AnalysisDocument(
        name="Checkout Redesign",
        phase="V1",
        jira_ticket="SHOP-142",
        created_at=created_at,
        updated_at=created_at,
    )
    doc.overview.feature_name = "One-page checkout"
    doc.overview.date = "2024-03-05"
    doc.overview.requestor = "Payments team"
    doc.overview.description = "Collapse the checkout flow.\n\nShipping and payment share a page."
    doc.overview.origin = "Other"
    doc.overview.origin_other = "Support tickets"

    doc.problem.problem = "Checkout drop-off is high"
    doc.problem.who = "Returning mobile buyers"
    doc.problem.outcome = "Higher conversion"
    doc.problem.metrics = "Conversion +3%"
    doc.problem.if_not_built = "Revenue stays flat"

    doc.context.segments = "Mobile web"
    doc.context.workflow = "Four-step wizard"
    doc.context.workarounds = "Saved carts"
    doc.context.triggers = "Promotional emails"
    doc.context.before_after = "4 steps -> 1 step"

    doc.assumptions = [
        Assumption(text="Address autocomplete is available", status="Validated"),
        Assumption(text="Guests convert like members", status="Needs Research"),
    ]
    doc.edges = {
        spec.id: EdgeCaseStatus(considered=True, notes=f"Covered {spec.id}") for spec in EDGE_CASES
    }
    doc.scope.affected = "Cart, payment"
    doc.scope.new_patterns = "Inline validation"
    doc.scope.technical = "PCI scope unchanged"
    doc.scope.items = [
        ScopeItem(item="Single page layout", version="MVP", priority="Must", description="Core"),
        ScopeItem(item="Apple Pay", version="V1", priority="Should"),
        ScopeItem(item="Gift cards", version="Future", priority="Could", description="Later"),
        ScopeItem(item="Crypto", version="Unassigned"),
    ]
    doc.questions = [
        Question(text="Keep guest checkout?", type="Stakeholder", status="Answered", answer="Yes"),
        Question(text="Which PSP?", type="Developer"),
    ]
    doc.actions = [
        Action(text="Draft wireframes", completed=True, note="Shared in review\nApproved"),
        Action(text="Book usability test"),
    ]
    doc.mapping.figma_url = "https://figma.com/file/abc"
    doc.notes = "Align with mobile app release.\nCheck legal copy."
    doc.summary.confidence = "Medium"
    doc.summary.concerns = "PSP migration risk"
    doc.summary.next_steps = "Prototype"
    return doc

"""Tests for the analysis text encoder."""

from requirement_analyzer.codec import SECTION_ORDER, encode, group_scope_items
from requirement_analyzer.document import ScopeItem, create_blank_document


def _sections(text):
    return [line[3:] for line in text.splitlines() if line.startswith("## ")]


class TestLayout:
    def test_section_order(self, full_document):
        assert _sections(encode(full_document)) == list(SECTION_ORDER)

    def test_blank_line_before_each_section(self, full_document):
        lines = encode(full_document).splitlines()
        for i, line in enumerate(lines):
            if line.startswith("## "):
                assert lines[i - 1] == ""

    def test_header(self, full_document):
        lines = encode(full_document).splitlines()
        assert lines[:4] == [
            "# Checkout Redesign",
            "*Created: 3/5/2024*",
            "*Target Phase: V1*",
            "*JIRA Ticket: SHOP-142*",
        ]

    def test_no_trailing_newline(self, full_document):
        assert not encode(full_document).endswith("\n")

    def test_deterministic(self, full_document):
        assert encode(full_document) == encode(full_document)


class TestBlankDocument:
    def test_default_title(self):
        doc = create_blank_document(name="")
        assert encode(doc).splitlines()[0] == "# Untitled Analysis"
        assert encode(doc, default_name="Draft").splitlines()[0] == "# Draft"

    def test_optional_metadata_omitted(self, blank_document):
        text = encode(blank_document)
        assert "*Target Phase:" not in text
        assert "*JIRA Ticket:" not in text

    def test_placeholders(self, blank_document):
        lines = encode(blank_document).splitlines()
        assert "*No assumptions logged yet.*" in lines
        assert "*No questions logged yet.*" in lines
        assert "*No action items yet.*" in lines
        assert "*No notes.*" in lines

    def test_no_scalar_lines(self, blank_document):
        assert "**" not in encode(blank_document)

    def test_every_edge_case_unchecked(self, blank_document):
        lines = encode(blank_document).splitlines()
        assert "- [ ] Empty state" in lines
        assert "- [ ] Accessibility" in lines
        assert not any(line.startswith("- [x]") for line in lines)

    def test_no_scope_listing_without_items(self, blank_document):
        assert "### Scope Items by Version" not in encode(blank_document)


class TestDarkModeScenario:
    def test_lines(self, dark_mode_document):
        lines = encode(dark_mode_document).splitlines()
        assert "**Feature:** Dark Mode" in lines
        assert "1. [Unvalidated] Users have modern browsers" in lines
        assert "*No questions logged yet.*" in lines
        assert "*No assumptions logged yet.*" not in lines


class TestFields:
    def test_origin_other(self, full_document):
        assert "**Origin:** Other: Support tickets" in encode(full_document).splitlines()

    def test_description_after_scalars(self, full_document):
        lines = encode(full_document).splitlines()
        origin = lines.index("**Origin:** Other: Support tickets")
        assert lines[origin + 1] == ""
        assert lines[origin + 2] == "Collapse the checkout flow."

    def test_questions(self, full_document):
        lines = encode(full_document).splitlines()
        first = lines.index("1. [✓] (Stakeholder) Keep guest checkout?")
        assert lines[first + 1] == "   → Yes"
        assert lines[first + 2] == "2. [?] (Developer) Which PSP?"

    def test_action_note_lines(self, full_document):
        lines = encode(full_document).splitlines()
        first = lines.index("1. [X] Draft wireframes")
        assert lines[first + 1 : first + 4] == [
            "   → Shared in review",
            "   → Approved",
            "2. [ ] Book usability test",
        ]

    def test_edge_case_notes(self, full_document):
        assert "- [x] **Offline / connectivity**: Covered offline" in encode(full_document)

    def test_mapping(self, full_document):
        assert "Figma Embed: https://figma.com/file/abc" in encode(full_document).splitlines()

    def test_empty_mapping(self, blank_document):
        lines = encode(blank_document).splitlines()
        mapping = lines.index("## Mapping")
        assert lines[mapping + 1] == ""
        assert lines[mapping + 2] == "## Notes"

    def test_summary(self, full_document):
        lines = encode(full_document).splitlines()
        assert lines[-3:] == [
            "**Confidence:** Medium",
            "**Key Concerns:** PSP migration risk",
            "**Next Steps:** Prototype",
        ]


class TestScopeItems:
    def test_grouped_listing(self, full_document):
        lines = encode(full_document).splitlines()
        start = lines.index("### Scope Items by Version")
        end = lines.index("## Open Questions")
        assert lines[start:end] == [
            "### Scope Items by Version",
            "",
            "**MVP**",
            "- Single page layout [Must] — Core",
            "",
            "**V1**",
            "- Apple Pay [Should]",
            "",
            "**Future**",
            "- Gift cards [Could] — Later",
            "",
            "**Unassigned**",
            "- Crypto",
            "",
        ]

    def test_group_order(self):
        items = [
            ScopeItem(item="a", version="Cut"),
            ScopeItem(item="b", version="bogus"),
            ScopeItem(item="c", version="MVP"),
            ScopeItem(item="d", version="V2"),
            ScopeItem(item="e", version="MVP"),
        ]
        groups = group_scope_items(items)
        assert [version for version, _ in groups] == ["MVP", "V2", "Cut", "Unassigned"]
        assert [item.item for item in groups[0][1]] == ["c", "e"]

"""The document collection: every analysis plus the currently active one.

Documents are kept in display order (newest created first). A workspace
that has ever held a document never becomes empty: removing the last one
replaces it with a blank document.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Iterable, Iterator, Optional

from .codec import decode
from .document.models import AnalysisDocument, create_blank_document
from .document.vocabulary import Phase, coerce_choice
from .exceptions import DocumentNotFoundError, WorkspaceError
from .logging_config import get_logger
from .merge import MergePolicy, merge

logger = get_logger(__name__)

DEFAULT_NAME = "Untitled Analysis"
SAMPLE_NAME = "Sample: Dark Mode Toggle"

ALL_FILTER = "All"
UNTAGGED_FILTER = "Untagged"


class Workspace:
    """Ordered set of analyses with one active document.

    Attributes:
        documents: Analyses keyed by id, in display order
        active_id: Id of the document edits apply to, or None when empty
        default_name: Name given to documents created without one
    """

    def __init__(
        self,
        documents: Optional[Iterable[AnalysisDocument]] = None,
        active_id: Optional[str] = None,
        default_name: str = DEFAULT_NAME,
    ):
        self.documents: OrderedDict[str, AnalysisDocument] = OrderedDict()
        self.default_name = default_name
        for doc in documents or []:
            self.documents[doc.id] = doc
        if active_id is not None and active_id in self.documents:
            self.active_id: Optional[str] = active_id
        else:
            self.active_id = next(iter(self.documents), None)

    @classmethod
    def with_sample(cls, name: str = SAMPLE_NAME, default_name: str = DEFAULT_NAME) -> "Workspace":
        """First-run workspace: a single blank document named ``name``."""
        return cls([create_blank_document(name)], default_name=default_name)

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[AnalysisDocument]:
        return iter(self.documents.values())

    def __contains__(self, document_id: object) -> bool:
        return document_id in self.documents

    # ── Lookup ─────────────────────────────────────────────────────

    def get(self, document_id: str) -> AnalysisDocument:
        try:
            return self.documents[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id) from None

    @property
    def active(self) -> AnalysisDocument:
        """The active document.

        Raises:
            WorkspaceError: If the workspace holds no documents
        """
        if self.active_id is None:
            raise WorkspaceError("Workspace has no documents")
        return self.get(self.active_id)

    def resolve(self, document_id: Optional[str] = None) -> AnalysisDocument:
        """The document with ``document_id``, or the active one when omitted."""
        if document_id is None:
            return self.active
        return self.get(document_id)

    # ── Collection edits ───────────────────────────────────────────

    def create(self, name: Optional[str] = None, language: str = "en") -> AnalysisDocument:
        """Prepend a blank document and make it active."""
        doc = create_blank_document(name or self.default_name, language=language)
        self.documents[doc.id] = doc
        self.documents.move_to_end(doc.id, last=False)
        self.active_id = doc.id
        logger.debug("Created analysis %s (%r)", doc.id, doc.name)
        return doc

    def add(self, doc: AnalysisDocument, activate: bool = True) -> AnalysisDocument:
        """Append an existing document (an import) to the end of the list."""
        if doc.id in self.documents:
            raise WorkspaceError(
                "Analysis id already in workspace", details={"document_id": doc.id}
            )
        self.documents[doc.id] = doc
        if activate or self.active_id is None:
            self.active_id = doc.id
        return doc

    def activate(self, document_id: str) -> AnalysisDocument:
        doc = self.get(document_id)
        self.active_id = doc.id
        return doc

    def remove(self, document_id: str) -> AnalysisDocument:
        """Delete a document and return it.

        The first remaining document becomes active if the removed one was;
        removing the last document leaves a single fresh blank one.
        """
        doc = self.get(document_id)
        del self.documents[document_id]
        logger.debug("Removed analysis %s", document_id)
        if not self.documents:
            blank = create_blank_document(self.default_name)
            self.documents[blank.id] = blank
            self.active_id = blank.id
        elif self.active_id == document_id:
            self.active_id = next(iter(self.documents))
        return doc

    # ── Active-document edits ──────────────────────────────────────

    def rename(self, name: str) -> AnalysisDocument:
        doc = self.active
        doc.name = name
        doc.touch()
        return doc

    def set_phase(self, phase: Optional[str]) -> AnalysisDocument:
        """Set the active document's target phase; an empty value clears it.

        Raises:
            WorkspaceError: If ``phase`` is not a release phase
        """
        doc = self.active
        token = (phase or "").strip()
        value = coerce_choice(Phase, token)
        if token and not value:
            raise WorkspaceError(
                f"Unknown phase '{token}'",
                details={"allowed": ", ".join(p.value for p in Phase)},
            )
        doc.phase = value
        doc.touch()
        return doc

    def import_text(
        self,
        text: str,
        merge_into_active: bool = False,
        policy: Optional[MergePolicy] = None,
    ) -> AnalysisDocument:
        """Decode ``text`` and add it as a new document or merge it into the active one.

        Returns:
            The document that received the content
        """
        incoming = decode(text)
        if merge_into_active and self.active_id is not None:
            target = merge(self.active, incoming, policy)
            logger.info("Merged imported text into %s", target.id)
            return target
        if not incoming.name:
            incoming.name = self.default_name
        self.add(incoming)
        logger.info("Imported %r as %s", incoming.name, incoming.id)
        return incoming

    # ── Phase views ────────────────────────────────────────────────

    def filter_by_phase(self, phase_filter: str = ALL_FILTER) -> list[AnalysisDocument]:
        """Documents matching ``"All"``, ``"Untagged"`` or a phase value."""
        if phase_filter == ALL_FILTER:
            return list(self.documents.values())
        if phase_filter == UNTAGGED_FILTER:
            return [doc for doc in self.documents.values() if not doc.phase]
        return [doc for doc in self.documents.values() if doc.phase == phase_filter]

    def phase_counts(self) -> dict[str, int]:
        """Document counts for ``All``, every phase, and ``Untagged``."""
        counts = {ALL_FILTER: len(self.documents)}
        counts.update({phase.value: 0 for phase in Phase})
        counts[UNTAGGED_FILTER] = 0
        for doc in self.documents.values():
            if not doc.phase:
                counts[UNTAGGED_FILTER] += 1
            elif doc.phase in counts:
                counts[doc.phase] += 1
        return counts

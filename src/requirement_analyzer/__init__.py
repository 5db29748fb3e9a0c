"""
Requirement Analyzer - structured requirement analysis documents

Keeps a workspace of analysis documents, exports each one to a plain
markdown-like text format and reads that text back, merges partial
documents from other sources into a live one, and scores how complete
an analysis is.
"""

__version__ = "0.1.0"
__author__ = "Naman Agarwal"

from .codec import decode, encode
from .document import AnalysisDocument, create_blank_document
from .merge import MergePolicy, ScalarPolicy, merge
from .scoring import score, section_scores
from .workspace import Workspace

__all__ = [
    "AnalysisDocument",
    "create_blank_document",
    "encode",  # Document -> text
    "decode",  # Text -> document (never raises)
    "merge",
    "MergePolicy",
    "ScalarPolicy",
    "score",
    "section_scores",
    "Workspace",
]

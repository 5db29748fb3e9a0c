"""Merge engine: reconcile an incoming document into a live one."""

from .engine import APPEND_SEPARATOR, merge, merge_scalar
from .extraction import extraction_to_document, merge_extraction
from .policy import ENUM_FIELDS, FieldKey, MergePolicy, ScalarPolicy, parse_field_key

__all__ = [
    "APPEND_SEPARATOR",
    "ENUM_FIELDS",
    "FieldKey",
    "MergePolicy",
    "ScalarPolicy",
    "extraction_to_document",
    "merge",
    "merge_extraction",
    "merge_scalar",
    "parse_field_key",
]

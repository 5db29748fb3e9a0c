"""Bidirectional text serialization of analysis documents."""

from .decoder import SECTION_ALIASES, DocumentDecoder, decode
from .encoder import SECTION_ORDER, encode, group_scope_items

__all__ = [
    "DocumentDecoder",
    "SECTION_ALIASES",
    "SECTION_ORDER",
    "decode",
    "encode",
    "group_scope_items",
]

"""Loc-file grammar: parsing raw text into LocFile objects and back."""

from .loc_parser import (
    DEFAULT_GRAMMAR,
    GRAMMAR_V1,
    GRAMMAR_V2,
    GRAMMARS,
    GrammarRules,
    LocParser,
    get_grammar,
    serialize,
    serialize_entry,
    serialize_lines,
)

__all__ = [
    "DEFAULT_GRAMMAR",
    "GRAMMAR_V1",
    "GRAMMAR_V2",
    "GRAMMARS",
    "GrammarRules",
    "LocParser",
    "get_grammar",
    "serialize",
    "serialize_entry",
    "serialize_lines",
]

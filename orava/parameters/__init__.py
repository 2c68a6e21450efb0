"""Named placeholder scanning, compilation and argument resolution."""

from orava.parameters.compiler import CompiledQuery, NamedQueryCompiler, ScannedQuery, compile_named
from orava.parameters.lexer import DEFAULT_DELIMITER, PlaceholderLexer
from orava.parameters.resolver import DEFAULT_TAG_KEY, ArgumentResolver, FieldMap, RecordField
from orava.parameters.types import Literal, ParameterStyle, Placeholder, Segment

__all__ = (
    "DEFAULT_DELIMITER",
    "DEFAULT_TAG_KEY",
    "ArgumentResolver",
    "CompiledQuery",
    "FieldMap",
    "Literal",
    "NamedQueryCompiler",
    "ParameterStyle",
    "Placeholder",
    "PlaceholderLexer",
    "RecordField",
    "ScannedQuery",
    "Segment",
    "compile_named",
)

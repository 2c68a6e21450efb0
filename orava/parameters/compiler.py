"""Named-to-positional query compilation."""

import logging
from typing import NamedTuple, Union

from orava.parameters.lexer import DEFAULT_DELIMITER, PlaceholderLexer
from orava.parameters.types import Literal, ParameterStyle, Segment
from orava.utils.logging import get_logger, log_with_context

__all__ = ("CompiledQuery", "NamedQueryCompiler", "ScannedQuery", "compile_named")

logger = get_logger("parameters.compiler")


class CompiledQuery(NamedTuple):
    """Positional SQL and the placeholder names its markers stand for.

    ``parameter_names[i]`` supplies the value for the ``i + 1``-th marker.
    """

    sql: str
    parameter_names: "tuple[str, ...]"


class ScannedQuery:
    """The lexer output for one raw query, renderable in any parameter style."""

    __slots__ = ("parameter_names", "raw_sql", "segments")

    def __init__(self, raw_sql: str, segments: "tuple[Segment, ...]") -> None:
        self.raw_sql = raw_sql
        self.segments = segments
        self.parameter_names: tuple[str, ...] = tuple(
            segment.name for segment in segments if not isinstance(segment, Literal)
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(raw_sql={self.raw_sql!r}, parameter_names={self.parameter_names!r})"

    def render(self, parameter_style: ParameterStyle) -> CompiledQuery:
        """Rewrite every placeholder as the marker for its occurrence index."""
        parts: list[str] = []
        for segment in self.segments:
            if isinstance(segment, Literal):
                parts.append(segment.text)
            else:
                parts.append(parameter_style.render(segment.ordinal))
        return CompiledQuery("".join(parts), self.parameter_names)


class NamedQueryCompiler:
    """Compiles named-placeholder SQL for one delimiter and parameter style."""

    __slots__ = ("lexer", "parameter_style")

    def __init__(
        self, delimiter: str = DEFAULT_DELIMITER, parameter_style: ParameterStyle = ParameterStyle.NUMERIC
    ) -> None:
        self.lexer = PlaceholderLexer(delimiter)
        self.parameter_style = ParameterStyle(parameter_style)

    def scan(self, sql: str) -> ScannedQuery:
        return ScannedQuery(sql, self.lexer.scan(sql))

    def compile(self, sql: str) -> CompiledQuery:
        """Compile ``sql`` into positional form.

        Args:
            sql: Raw query with named placeholders.

        Raises:
            LexError: If the query has an unterminated literal or comment.

        Returns:
            The compiled SQL and one parameter name per marker, in order.
        """
        compiled = self.scan(sql).render(self.parameter_style)
        log_with_context(
            logger,
            logging.DEBUG,
            "compiled named query",
            parameter_style=str(self.parameter_style),
            parameter_count=len(compiled.parameter_names),
        )
        return compiled


def compile_named(
    sql: str,
    delimiter: str = DEFAULT_DELIMITER,
    parameter_style: "Union[ParameterStyle, str]" = ParameterStyle.NUMERIC,
) -> CompiledQuery:
    """Compile ``sql`` with a one-off compiler.

    Example:
        >>> compile_named("SELECT * FROM t WHERE x=:a AND y=:b", parameter_style="qmark")
        CompiledQuery(sql='SELECT * FROM t WHERE x=? AND y=?', parameter_names=('a', 'b'))
    """
    return NamedQueryCompiler(delimiter, ParameterStyle(parameter_style)).compile(sql)

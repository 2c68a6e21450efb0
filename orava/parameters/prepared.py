"""Reusable compiled query templates."""

import logging
from typing import Any, NamedTuple, Optional, Union

from orava.config import NamedQueryConfig
from orava.parameters.compiler import CompiledQuery, NamedQueryCompiler, ScannedQuery
from orava.parameters.resolver import ArgumentResolver
from orava.parameters.types import ParameterStyle
from orava.typing import SupportedArgumentSource
from orava.utils.logging import get_logger, log_with_context

__all__ = ("BoundQuery", "PreparedQuery")

logger = get_logger("parameters.prepared")


class BoundQuery(NamedTuple):
    """Compiled SQL plus the positional values to execute it with."""

    sql: str
    parameters: "list[Any]"


class PreparedQuery:
    """A query compiled once and bound to many argument sources.

    Instances are immutable; ``bind`` only reads cached state and builds a new
    value list per call, so one instance may be shared between threads.
    """

    __slots__ = ("_compiled", "_scanned", "config", "resolver")

    def __init__(
        self,
        scanned: ScannedQuery,
        config: NamedQueryConfig,
        resolver: ArgumentResolver,
        compiled: Optional[CompiledQuery] = None,
    ) -> None:
        self._scanned = scanned
        self.config = config
        self.resolver = resolver
        self._compiled = compiled or scanned.render(ParameterStyle(config.parameter_style))

    @classmethod
    def prepare(
        cls,
        sql: str,
        config: Optional[NamedQueryConfig] = None,
        *assertable: Any,
        resolver: Optional[ArgumentResolver] = None,
    ) -> "PreparedQuery":
        """Compile ``sql`` and check it against example argument sources.

        Args:
            sql: Raw query with named placeholders.
            config: Compilation settings. Defaults to :class:`NamedQueryConfig`.
            *assertable: Example argument sources or record types; every
                parameter name must resolve against each of them.
            resolver: Resolver to bind with. Defaults to one built from ``config``.

        Raises:
            LexError: If the query cannot be scanned.
            UnknownParameterError: If an assertable source lacks a parameter.

        Returns:
            The prepared query.
        """
        config = config or NamedQueryConfig()
        resolver = resolver or ArgumentResolver(config.tag_key, config.name_mapper)
        compiler = NamedQueryCompiler(config.delimiter, ParameterStyle(config.parameter_style))
        prepared = cls(compiler.scan(sql), config, resolver)
        for example in assertable:
            prepared.validate(example)
        log_with_context(
            logger,
            logging.DEBUG,
            "prepared named query",
            parameter_style=str(config.parameter_style),
            parameter_count=len(prepared.parameter_names),
            asserted_sources=len(assertable),
        )
        return prepared

    @property
    def raw_sql(self) -> str:
        return self._scanned.raw_sql

    @property
    def sql(self) -> str:
        """The compiled positional SQL."""
        return self._compiled.sql

    @property
    def parameter_names(self) -> "tuple[str, ...]":
        return self._compiled.parameter_names

    @property
    def parameter_style(self) -> ParameterStyle:
        return ParameterStyle(self.config.parameter_style)

    @property
    def compiled(self) -> CompiledQuery:
        return self._compiled

    def bind(self, source: SupportedArgumentSource = None) -> BoundQuery:
        """Resolve ``source`` against the cached parameter names.

        Raises:
            UnknownParameterError: If ``source`` lacks a parameter.
        """
        parameters = self.resolver.resolve(self._compiled.parameter_names, source, self.raw_sql)
        return BoundQuery(self._compiled.sql, parameters)

    def validate(self, source: Any) -> None:
        """Check that every parameter resolves against ``source`` without keeping the values."""
        self.resolver.validate(self._compiled.parameter_names, source, self.raw_sql)

    def with_style(self, parameter_style: "Union[ParameterStyle, str]") -> "PreparedQuery":
        """Return a copy rendered in another parameter style, reusing the scanned segments."""
        config = self.config.replace(parameter_style=parameter_style)
        return type(self)(self._scanned, config, self.resolver)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, parameter_names={self.parameter_names!r})"

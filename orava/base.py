"""The named query facade."""

from collections.abc import Mapping
from typing import Any, Optional

from orava.config import NamedQueryConfig
from orava.parameters.compiler import CompiledQuery, NamedQueryCompiler
from orava.parameters.prepared import BoundQuery, PreparedQuery
from orava.parameters.resolver import ArgumentResolver, FieldMap
from orava.parameters.types import ParameterStyle
from orava.typing import SupportedArgumentSource

__all__ = ("NamedQueryAPI",)


class NamedQueryAPI:
    """Entry point for compiling named queries and binding their arguments.

    The configuration is fixed at construction. Build one instance per target
    driver and pass it to whatever needs it; there is no global default.

    Args:
        config: Complete configuration. Mutually exclusive with keyword overrides.
        **overrides: Individual :class:`NamedQueryConfig` fields, e.g.
            ``NamedQueryAPI(parameter_style="qmark")``.

    Example:
        >>> api = NamedQueryAPI()
        >>> api.named_query_params("SELECT id FROM users WHERE id=:id", {"id": "bob"})
        BoundQuery(sql='SELECT id FROM users WHERE id=$1', parameters=['bob'])
    """

    __slots__ = ("_compiler", "_config", "_resolver")

    def __init__(self, config: Optional[NamedQueryConfig] = None, **overrides: Any) -> None:
        if config is not None and overrides:
            msg = "pass either a NamedQueryConfig or keyword overrides, not both"
            raise TypeError(msg)
        self._config = config or NamedQueryConfig(**overrides)
        self._compiler = NamedQueryCompiler(self._config.delimiter, ParameterStyle(self._config.parameter_style))
        self._resolver = ArgumentResolver(self._config.tag_key, self._config.name_mapper)

    @property
    def config(self) -> NamedQueryConfig:
        return self._config

    @property
    def parameter_style(self) -> ParameterStyle:
        return ParameterStyle(self._config.parameter_style)

    @property
    def resolver(self) -> ArgumentResolver:
        return self._resolver

    def compile(self, sql: str) -> CompiledQuery:
        """Compile ``sql`` without resolving any arguments."""
        return self._compiler.compile(sql)

    def named_query_params(self, sql: str, source: SupportedArgumentSource = None) -> BoundQuery:
        """Compile ``sql`` and resolve its arguments from ``source`` in one step.

        Nothing is cached; use :meth:`prepare_named` for queries run repeatedly.

        Args:
            sql: Raw query with named placeholders.
            source: Mapping, record or ``ArgumentSource`` supplying the values.

        Raises:
            LexError: If the query cannot be scanned.
            UnknownParameterError: If ``source`` lacks a parameter.

        Returns:
            The compiled SQL and ordered argument values.
        """
        compiled = self._compiler.compile(sql)
        return BoundQuery(compiled.sql, self._resolver.resolve(compiled.parameter_names, source, sql))

    def prepare_named(self, sql: str, *assertable: Any) -> PreparedQuery:
        """Compile ``sql`` once for repeated binding.

        Args:
            sql: Raw query with named placeholders.
            *assertable: Example sources or record types validated up front.

        Returns:
            A prepared query sharing this API's configuration and field registry.
        """
        return PreparedQuery.prepare(sql, self._config, *assertable, resolver=self._resolver)

    def register(self, record_type: type, attributes: "Optional[Mapping[str, str]]" = None) -> FieldMap:
        """Register how instances of ``record_type`` answer placeholder names.

        See :meth:`ArgumentResolver.register`.
        """
        return self._resolver.register(record_type, attributes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config={self._config!r})"

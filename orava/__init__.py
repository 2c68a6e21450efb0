"""orava: named placeholders for positional SQL drivers."""

from orava import adapters, core, driver, exceptions, parameters, typing, utils
from orava.__metadata__ import __version__
from orava.base import NamedQueryAPI
from orava.config import NamedQueryConfig
from orava.core.cache import CacheStats, PreparedQueryCache
from orava.driver import AsyncNamedDriver, SyncNamedDriver
from orava.exceptions import (
    ExecutionError,
    LexError,
    MultipleResultsFoundError,
    NotFoundError,
    OravaError,
    UnknownParameterError,
)
from orava.parameters import CompiledQuery, ParameterStyle, compile_named
from orava.parameters.prepared import BoundQuery, PreparedQuery
from orava.typing import ArgumentSource

__all__ = (
    "ArgumentSource",
    "AsyncNamedDriver",
    "BoundQuery",
    "CacheStats",
    "CompiledQuery",
    "ExecutionError",
    "LexError",
    "MultipleResultsFoundError",
    "NamedQueryAPI",
    "NamedQueryConfig",
    "NotFoundError",
    "OravaError",
    "ParameterStyle",
    "PreparedQuery",
    "PreparedQueryCache",
    "SyncNamedDriver",
    "UnknownParameterError",
    "__version__",
    "adapters",
    "compile_named",
    "core",
    "driver",
    "exceptions",
    "parameters",
    "typing",
    "utils",
)

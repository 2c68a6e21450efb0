"""Named-query drivers running compiled statements through external queriers."""

from orava.driver import mixins
from orava.driver._async import AsyncNamedDriver
from orava.driver._common import CommonDriverAttributesMixin, NamedStatement, RowScanner
from orava.driver._sync import SyncNamedDriver

__all__ = (
    "AsyncNamedDriver",
    "CommonDriverAttributesMixin",
    "NamedStatement",
    "RowScanner",
    "SyncNamedDriver",
    "mixins",
)

"""Driver mixins for row decoding."""

from orava.driver.mixins._result_tools import SchemaRowScanner, ToSchemaMixin, rows_to_dicts

__all__ = ("SchemaRowScanner", "ToSchemaMixin", "rows_to_dicts")

from orava.adapters.dbapi.driver import CursorRowSource, DBAPIDriver, DBAPIQuerier

__all__ = ("CursorRowSource", "DBAPIDriver", "DBAPIQuerier")

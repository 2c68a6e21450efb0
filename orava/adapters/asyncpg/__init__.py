from orava.adapters.asyncpg.driver import AsyncpgDriver, AsyncpgQuerier, RecordRowSource, parse_asyncpg_status

__all__ = ("AsyncpgDriver", "AsyncpgQuerier", "RecordRowSource", "parse_asyncpg_status")

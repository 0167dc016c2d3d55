"""Data source implementations.

SQLiteDataSource is the embedded key/value document store (descriptor kind
"sqlite").  Other stores implement IDataSource and register a kind.
"""

from ltm.providers.datasource.sqlite_datasource import SQLiteDataSource

__all__ = ["SQLiteDataSource"]

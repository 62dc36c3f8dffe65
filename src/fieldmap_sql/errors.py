"""Exception types raised by the query-generation pipeline."""

from __future__ import annotations


class FieldQueryError(Exception):
    """Base class for every error the pipeline reports to its callers."""


class CatalogLoadError(FieldQueryError):
    """The field-mapping source could not be opened or read."""


class NoMatchesError(FieldQueryError):
    """No catalog field scored above the match threshold."""

    def __init__(self, message: str = "no matching fields found for description"):
        super().__init__(message)


class TableNotFoundError(FieldQueryError):
    """A table required for a join is absent from the relationship graph."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"table {table} not found in relationship graph")


class NoJoinPathError(FieldQueryError):
    """Two tables exist in the relationship graph but are not connected."""

    def __init__(self, from_table: str, to_table: str):
        self.from_table = from_table
        self.to_table = to_table
        super().__init__(f"no join path found between {from_table} and {to_table}")

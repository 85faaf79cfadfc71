"""SQL text assembly for the persistence layer.

All statements are built here. Table and column names are only ever taken
from the static declarations of the tables; values always travel as bound
parameters.
"""

from typing import Any, Iterable, List, Sequence, Tuple

from .database import ARTIST_LINK_TABLES

Filter = Tuple[str, Any]


class QueryBuilder:
    """Builds parameterized statements for one declared table."""

    def __init__(self, table: str, columns: Sequence[str]):
        self.table = table
        self.columns = tuple(columns)

    def _check_column(self, column: str) -> str:
        if column not in self.columns:
            raise ValueError(f"Unknown column {column!r} for table {self.table}")
        return column

    def select(self, filters: Iterable[Filter] = (), extra: Iterable[str] = ()) -> Tuple[str, List[Any]]:
        """``SELECT <columns> FROM <table> [WHERE c = ? AND ...] <extra>``.

        ``extra`` is appended verbatim (``LIMIT``, ``ORDER BY``) and must not
        carry caller-supplied values.
        """
        sql = [f"SELECT {', '.join(self.columns)} FROM {self.table}"]
        params: List[Any] = []
        conditions = []
        for column, value in filters:
            conditions.append(f"{self._check_column(column)} = ?")
            params.append(value)
        if conditions:
            sql.append("WHERE " + " AND ".join(conditions))
        sql.extend(extra)
        return " ".join(sql), params

    def upsert(self) -> str:
        """``INSERT OR REPLACE`` of a full row keyed on the table's unique key."""
        placeholders = ", ".join("?" for _ in self.columns)
        return f"INSERT OR REPLACE INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})"

    def linked_select(self, link_table: str) -> str:
        """Rows of this table joined through ``link_table`` for one owner.

        Rows come back in link insertion order and carry the credit's join
        phrase and instruments as ``join_phrase`` and ``credit_instruments``.
        Takes one parameter: the owner's identifier.
        """
        link = check_link_table(link_table)
        columns = ", ".join(f"{self.table}.{c}" for c in self.columns)
        return (
            f"SELECT {columns}, {link}.join_phrase AS join_phrase, "
            f"{link}.instruments AS credit_instruments FROM {self.table} "
            f"JOIN {link} ON {link}.artist = {self.table}.mbid "
            f"WHERE {link}.ref = ? ORDER BY {link}.rowid"
        )


def check_link_table(link_table: str) -> str:
    if link_table not in ARTIST_LINK_TABLES:
        raise ValueError(f"Unknown link table {link_table!r}")
    return link_table


def link_upsert(link_table: str) -> str:
    """Upsert of an ``(owner, artist)`` pair; takes ref, artist, join phrase and instruments."""
    link = check_link_table(link_table)
    return f"INSERT OR REPLACE INTO {link} (ref, artist, join_phrase, instruments) VALUES (?, ?, ?, ?)"

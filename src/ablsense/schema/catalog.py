"""
Merged view of every loaded .df export.

Merging is a whole-record overwrite keyed by table name: when two exports
define the same table, the later definition replaces the earlier one
entirely. Fields and indexes are never unioned, so a table must not be
split across two exports.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from ablsense.schema.models import Table

logger = logging.getLogger(__name__)


class SchemaCatalog(Mapping[str, Table]):
    """
    Read-only mapping of table name (case-sensitive) to Table.

    Usage:
        catalog = SchemaCatalog.merge([parse_df(a), parse_df(b)])

        if "customer" in catalog:
            table = catalog["customer"]
    """

    def __init__(self, tables: Mapping[str, Table] | None = None) -> None:
        self._tables: dict[str, Table] = dict(tables or {})

    @classmethod
    def merge(cls, table_maps: Iterable[Mapping[str, Table]]) -> "SchemaCatalog":
        """
        Combine per-export table maps in order, later names replacing earlier.
        """
        merged: dict[str, Table] = {}
        for table_map in table_maps:
            for name, table in table_map.items():
                if name in merged:
                    logger.debug("Table %s redefined; earlier definition dropped", name)
                merged[name] = table
        return cls(merged)

    def __getitem__(self, name: str) -> Table:
        return self._tables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        return f"SchemaCatalog({list(self._tables)!r})"

    @property
    def tables(self) -> list[Table]:
        return list(self._tables.values())

    @property
    def index_count(self) -> int:
        return sum(len(t.indexes) for t in self._tables.values())

"""
Parser for OpenEdge Data Dictionary (.df) definition exports.

This module handles:
- ADD TABLE / ADD FIELD / ADD INDEX records
- PRIMARY and INDEX-FIELD lines belonging to the index being declared
- Loading .df text from files with a configurable encoding

Everything else in a .df (UPDATE/DROP records, AREA, DESCRIPTION, the
trailer) is ignored. The parser does not validate the schema.

The "index being declared" is parse state. It lives in an explicit
accumulator folded over the lines, so two parses never share it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from functools import reduce
from pathlib import Path

from ablsense.exceptions import SourceReadError
from ablsense.schema.models import FieldDef, IndexDef, Table

logger = logging.getLogger(__name__)

ADD_TABLE = re.compile(r'^ADD\s+TABLE\s+"([^"]+)"', re.IGNORECASE)
ADD_FIELD = re.compile(
    r'^ADD\s+FIELD\s+"([^"]+)"\s+OF\s+"([^"]+)"\s+AS\s+([A-Za-z0-9\-]+)',
    re.IGNORECASE,
)
ADD_INDEX = re.compile(r'^ADD\s+INDEX\s+"([^"]+)"\s+ON\s+"([^"]+)"', re.IGNORECASE)
PRIMARY = re.compile(r"^PRIMARY$", re.IGNORECASE)
INDEX_FIELD = re.compile(r'^INDEX-FIELD\s+"([^"]+)"', re.IGNORECASE)


@dataclass(frozen=True)
class _ParseState:
    """Accumulator threaded through the fold over .df lines."""
    tables: dict[str, Table] = field(default_factory=dict)
    current_table: str | None = None
    current_index: IndexDef | None = None

    def table(self, name: str) -> Table:
        """Get a table entry, creating an empty one if absent."""
        if name not in self.tables:
            self.tables[name] = Table(name=name)
        return self.tables[name]


def _step(state: _ParseState, line: str) -> _ParseState:
    """Apply one .df line to the parse state."""
    trimmed = line.strip()
    if not trimmed:
        return state

    m = ADD_TABLE.match(trimmed)
    if m:
        state.table(m.group(1))
        return replace(state, current_table=m.group(1), current_index=None)

    m = ADD_FIELD.match(trimmed)
    if m:
        # The OF clause names the table, not the last ADD TABLE
        state.table(m.group(2)).fields.append(
            FieldDef(name=m.group(1), data_type=m.group(3).lower())
        )
        return state

    m = ADD_INDEX.match(trimmed)
    if m:
        index = IndexDef(name=m.group(1))
        state.table(m.group(2)).indexes.append(index)
        return replace(state, current_index=index)

    if state.current_index is None:
        return state

    if PRIMARY.match(trimmed):
        state.current_index.is_primary = True
        return state

    m = INDEX_FIELD.match(trimmed)
    if m:
        state.current_index.fields.append(m.group(1))

    return state


def parse_df(text: str) -> dict[str, Table]:
    """
    Parse .df text into a table map.

    Args:
        text: Contents of a .df export

    Returns:
        Tables keyed by name, in first-seen order. Fields and indexes keep
        the order they were declared in.

    Example:
        >>> tables = parse_df('ADD INDEX "cust-num" ON "customer"\\n  INDEX-FIELD "cust-num" ASCENDING')
        >>> tables["customer"].indexes[0].fields
        ['cust-num']
    """
    lines = re.split(r"\r?\n", text)
    return reduce(_step, lines, _ParseState()).tables


def parse_df_file(path: str | Path, encoding: str = "utf-8") -> dict[str, Table]:
    """
    Read and parse a .df file.

    Raises:
        SourceReadError: If the file cannot be read or decoded
    """
    filepath = Path(path)
    try:
        text = filepath.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(
            f"Cannot read schema file: {filepath}",
            source=str(filepath),
            detail=str(e),
        ) from e

    tables = parse_df(text)
    logger.info("Parsed %s (%d table(s))", filepath, len(tables))
    return tables

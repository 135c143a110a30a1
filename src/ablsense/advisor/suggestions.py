"""
Index suggestion generator.

When no existing index serves a statement, builds a new composite index
from the statement's filter fields and writes it as a .df fragment that
can be loaded through the Data Dictionary (or fed back into parse_df).

Field order follows the usual composite-index rule:
1. Equality fields first, in filter order
2. Range fields (dates) next
3. Logical fields last, only as padding up to the field budget

Logical fields are low-cardinality, so an index that already has enough
equality/range keys leaves them out.
"""

from __future__ import annotations

import random
import re
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ablsense.config import Config
    from ablsense.schema.models import Table

DEFAULT_MAX_FIELDS = 7
DEFAULT_AREA = "Schema Area"
DEFAULT_INDEX_NUM = 99

# Naming convention used when the .df gives no type: lg-flag, dt-inicio
LOGICAL_NAME = re.compile(r"^lg[-_]", re.IGNORECASE)
DATE_NAME = re.compile(r"^dt[-_]", re.IGNORECASE)


class FieldClass(str, Enum):
    """How a filter field behaves as an index key."""
    EQUALITY = "equality"
    RANGE = "range"
    LOGICAL = "logical"


def classify_field(table: "Table", field: str) -> FieldClass:
    """
    Classify a filter field by its declared type, or by name if untyped.

    Args:
        table: Table the field belongs to
        field: Field name as used in the statement
    """
    data_type = table.field_type(field).lower()

    if data_type:
        if "logical" in data_type or data_type == "l":
            return FieldClass.LOGICAL
        if "date" in data_type or data_type == "d":
            return FieldClass.RANGE
        return FieldClass.EQUALITY

    if LOGICAL_NAME.match(field):
        return FieldClass.LOGICAL
    if DATE_NAME.match(field):
        return FieldClass.RANGE
    return FieldClass.EQUALITY


def filter_fields_for_index(
    table: "Table",
    fields: list[str] | tuple[str, ...],
    max_fields: int = DEFAULT_MAX_FIELDS,
) -> list[str]:
    """
    Choose and order the key fields of a suggested index.

    Equality and range fields are always kept. Logical fields are appended
    only while the total stays within ``max_fields``.
    """
    equality: list[str] = []
    ranges: list[str] = []
    logical: list[str] = []

    for field in fields:
        field_class = classify_field(table, field)
        if field_class is FieldClass.LOGICAL:
            logical.append(field)
        elif field_class is FieldClass.RANGE:
            ranges.append(field)
        else:
            equality.append(field)

    base = equality + ranges
    if len(base) >= max_fields:
        return base

    return base + logical[:max_fields - len(base)]


def generate_index_df(
    table: str,
    fields: list[str] | tuple[str, ...],
    index_name: str | None = None,
    index_num: int | None = None,
    area: str = DEFAULT_AREA,
    rng: random.Random | None = None,
) -> str:
    """
    Render an ADD INDEX record in .df syntax.

    Args:
        table: Table name
        fields: Key fields, in index order; each is written ASCENDING
        index_name: Name of the new index; defaults to ``<table>__ai<NNNN>``
        index_num: INDEX-NUM value; defaults to 99
        area: Storage area
        rng: Source of the random name suffix

    Returns:
        The fragment, without a trailing newline

    Example:
        >>> print(generate_index_df("customer", ["city"], index_name="ix-city"))
        ADD INDEX "ix-city" ON "customer"
          AREA "Schema Area"
          INDEX-NUM 99
          FOREIGN-NAME "customer##ix-city"
          INDEX-FIELD "city" ASCENDING
    """
    if not index_name:
        rng = rng or random.Random()
        index_name = f"{table}__ai{rng.randint(1000, 9999)}"
    num = index_num or DEFAULT_INDEX_NUM

    lines = [
        f'ADD INDEX "{index_name}" ON "{table}"',
        f'  AREA "{area}"',
        f"  INDEX-NUM {num}",
        f'  FOREIGN-NAME "{table}##{index_name}"',
    ]
    for field in fields:
        lines.append(f'  INDEX-FIELD "{field}" ASCENDING')

    return "\n".join(lines)


class SuggestionGenerator:
    """
    Builds .df index suggestions for tables without a usable index.

    The random source for index names is injectable so tests (and the
    CLI's --seed) get reproducible names.

    Usage:
        generator = SuggestionGenerator(rng=random.Random(42))
        df_text = generator.suggest(table, ["cust-num", "dt-order"])
    """

    def __init__(
        self,
        max_fields: int = DEFAULT_MAX_FIELDS,
        area: str = DEFAULT_AREA,
        index_num: int = DEFAULT_INDEX_NUM,
        rng: random.Random | None = None,
    ) -> None:
        self.max_fields = max_fields
        self.area = area
        self.index_num = index_num
        self.rng = rng or random.Random()

    @classmethod
    def from_config(
        cls,
        config: "Config",
        rng: random.Random | None = None,
    ) -> "SuggestionGenerator":
        return cls(
            max_fields=config.max_index_fields,
            area=config.index_area,
            index_num=config.index_num,
            rng=rng,
        )

    def select_fields(self, table: "Table", used_fields: list[str] | tuple[str, ...]) -> list[str]:
        """Key fields for a new index on ``table``, in index order."""
        return filter_fields_for_index(table, used_fields, self.max_fields)

    def render(
        self,
        table_name: str,
        fields: list[str] | tuple[str, ...],
        index_name: str | None = None,
    ) -> str:
        """Render already-selected key fields as an ADD INDEX fragment."""
        return generate_index_df(
            table_name,
            fields,
            index_name=index_name,
            index_num=self.index_num,
            area=self.area,
            rng=self.rng,
        )

    def suggest(
        self,
        table: "Table",
        used_fields: list[str] | tuple[str, ...],
        index_name: str | None = None,
    ) -> str:
        """Render a suggested index for ``table`` covering ``used_fields``."""
        return self.render(table.name, self.select_fields(table, used_fields), index_name)

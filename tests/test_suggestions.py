"""
Tests for index suggestion generation.

Test philosophy:
- Field classification prefers the declared type over naming conventions
- Logical fields only pad a suggestion up to the field budget
- The rendered fragment is loadable .df text, parseable by parse_df
"""

from __future__ import annotations

import random

import pytest

from ablsense.advisor import FieldClass, SuggestionGenerator, generate_index_df
from ablsense.advisor.suggestions import classify_field, filter_fields_for_index
from ablsense.config import Config
from ablsense.schema import FieldDef, Table, parse_df


@pytest.fixture
def customer() -> Table:
    return Table(name="customer", fields=[
        FieldDef(name="email", data_type="character"),
        FieldDef(name="city", data_type="character"),
        FieldDef(name="signup_date", data_type="date"),
        FieldDef(name="created", data_type="datetime-tz"),
        FieldDef(name="active", data_type="logical"),
        FieldDef(name="lg-typed-char", data_type="character"),
    ])


# =============================================================================
# Classification
# =============================================================================

class TestClassifyField:
    """Declared type first, then the lg-/dt- naming convention."""

    @pytest.mark.parametrize("field,expected", [
        ("email", FieldClass.EQUALITY),
        ("signup_date", FieldClass.RANGE),
        ("created", FieldClass.RANGE),
        ("active", FieldClass.LOGICAL),
        ("ACTIVE", FieldClass.LOGICAL),
    ])
    def test_declared_type(self, customer: Table, field: str, expected: FieldClass) -> None:
        assert classify_field(customer, field) is expected

    def test_declared_type_beats_name(self, customer: Table) -> None:
        """A character field named lg-... is still an equality field."""
        assert classify_field(customer, "lg-typed-char") is FieldClass.EQUALITY

    @pytest.mark.parametrize("field,expected", [
        ("lg-flag", FieldClass.LOGICAL),
        ("lg_flag", FieldClass.LOGICAL),
        ("dt-inicio", FieldClass.RANGE),
        ("dt_fim", FieldClass.RANGE),
        ("dtx", FieldClass.EQUALITY),
        ("region", FieldClass.EQUALITY),
    ])
    def test_name_convention_when_untyped(self, customer: Table, field: str, expected: FieldClass) -> None:
        assert classify_field(customer, field) is expected

    def test_abbreviated_types(self) -> None:
        table = Table(name="t", fields=[
            FieldDef(name="a", data_type="l"),
            FieldDef(name="b", data_type="d"),
        ])
        assert classify_field(table, "a") is FieldClass.LOGICAL
        assert classify_field(table, "b") is FieldClass.RANGE


# =============================================================================
# Field selection
# =============================================================================

class TestFilterFieldsForIndex:
    """Equality, then range, then logical padding."""

    def test_order(self, customer: Table) -> None:
        fields = ["active", "signup_date", "email", "city"]
        assert filter_fields_for_index(customer, fields) == [
            "email", "city", "signup_date", "active",
        ]

    def test_logical_dropped_when_budget_full(self, customer: Table) -> None:
        fields = ["active", "email", "city", "signup_date"]
        assert filter_fields_for_index(customer, fields, max_fields=3) == [
            "email", "city", "signup_date",
        ]

    def test_logical_pads_partially(self, customer: Table) -> None:
        fields = ["lg-a", "lg-b", "email"]
        assert filter_fields_for_index(customer, fields, max_fields=2) == ["email", "lg-a"]

    def test_budget_never_drops_equality_or_range(self, customer: Table) -> None:
        fields = ["e1", "e2", "e3", "dt-x"]
        assert filter_fields_for_index(customer, fields, max_fields=2) == fields

    def test_only_logical(self, customer: Table) -> None:
        assert filter_fields_for_index(customer, ["active"]) == ["active"]


# =============================================================================
# Rendering
# =============================================================================

class TestGenerateIndexDf:
    """ADD INDEX fragment text."""

    def test_exact_text(self) -> None:
        text = generate_index_df("customer", ["city", "state"], index_name="ix-cs")

        assert text == "\n".join([
            'ADD INDEX "ix-cs" ON "customer"',
            '  AREA "Schema Area"',
            "  INDEX-NUM 99",
            '  FOREIGN-NAME "customer##ix-cs"',
            '  INDEX-FIELD "city" ASCENDING',
            '  INDEX-FIELD "state" ASCENDING',
        ])

    def test_generated_name_is_seeded(self) -> None:
        first = generate_index_df("order", ["x"], rng=random.Random(42))
        second = generate_index_df("order", ["x"], rng=random.Random(42))

        assert first == second
        name = first.split('"')[1]
        assert name.startswith("order__ai")
        suffix = int(name[len("order__ai"):])
        assert 1000 <= suffix <= 9999

    def test_custom_area_and_number(self) -> None:
        text = generate_index_df("t", ["f"], index_name="n", index_num=120, area="Index Area")

        assert '  AREA "Index Area"' in text
        assert "  INDEX-NUM 120" in text

    def test_parses_back(self) -> None:
        """The fragment loads as a real index."""
        text = generate_index_df("customer", ["email", "signup_date"], index_name="ix")

        tables = parse_df(text)

        index = tables["customer"].indexes[0]
        assert index.name == "ix"
        assert index.fields == ["email", "signup_date"]
        assert not index.is_primary


class TestSuggestionGenerator:
    """Configured generator."""

    def test_suggest(self, customer: Table) -> None:
        generator = SuggestionGenerator(rng=random.Random(1))

        text = generator.suggest(customer, ["active", "email"], index_name="ix")

        assert text.splitlines()[-2:] == [
            '  INDEX-FIELD "email" ASCENDING',
            '  INDEX-FIELD "active" ASCENDING',
        ]

    def test_from_config(self, customer: Table) -> None:
        config = Config(max_index_fields=1, index_area="Index Area", index_num=7)
        generator = SuggestionGenerator.from_config(config, rng=random.Random(1))

        assert generator.select_fields(customer, ["active", "email"]) == ["email"]
        text = generator.render("customer", ["email"], index_name="ix")
        assert '  AREA "Index Area"' in text
        assert "  INDEX-NUM 7" in text

    def test_same_seed_same_names(self, customer: Table) -> None:
        a = SuggestionGenerator(rng=random.Random(3))
        b = SuggestionGenerator(rng=random.Random(3))

        assert [a.suggest(customer, ["email"]) for _ in range(3)] == [
            b.suggest(customer, ["email"]) for _ in range(3)
        ]

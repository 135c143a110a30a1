"""
Tests for the index advisor.

Test philosophy:
- One result per statement, in statement order
- Prefix scoring stops at the first key field that is not filtered on
- Ties go to the index declared first
- "Perfect" means every filter field is inside the matched prefix
"""

from __future__ import annotations

import random

import pytest

from ablsense.advisor import (
    AdvisorWarning,
    IndexAdvisor,
    IndexMatch,
    IndexSuggestion,
    ResultKind,
    SuggestionGenerator,
    WarningKind,
    analyze_index_usage,
)
from ablsense.advisor.advisor import (
    extract_where_fields,
    score_index,
    select_best_index,
    used_fields_for,
)
from ablsense.extractor import SourceAnalysis, Statement, StatementKind
from ablsense.schema import FieldDef, IndexDef, SchemaCatalog, Table


def make_statement(raw: str, table: str = "customer", explicit: tuple[str, ...] = ()) -> Statement:
    return Statement(
        kind=StatementKind.FOR_EACH,
        table=table,
        line=1,
        raw=raw,
        explicit_filter_fields=explicit,
    )


def make_catalog(*indexes: IndexDef, fields: list[FieldDef] | None = None) -> SchemaCatalog:
    table = Table(name="customer", fields=fields or [], indexes=list(indexes))
    return SchemaCatalog({"customer": table})


@pytest.fixture
def advisor() -> IndexAdvisor:
    return IndexAdvisor(SuggestionGenerator(rng=random.Random(7)))


CITY_STATUS = "FOR EACH customer WHERE customer.city = 'X' AND customer.status = 'A':"


# =============================================================================
# WHERE field extraction
# =============================================================================

class TestWhereFields:
    """Fields compared after the first WHERE."""

    def test_qualified_and_bare(self) -> None:
        raw = "FOR EACH customer WHERE customer.city = 'X' AND balance > 0:"
        assert extract_where_fields(raw) == ["city", "balance"]

    @pytest.mark.parametrize("operator", ["=", "<>", ">=", "<=", ">", "<"])
    def test_operators(self, operator: str) -> None:
        raw = f"FIND customer WHERE customer.cust-num {operator} 10 NO-ERROR."
        assert extract_where_fields(raw) == ["cust-num"]

    def test_no_where(self) -> None:
        assert extract_where_fields("FOR EACH customer NO-LOCK:") == []

    def test_where_must_be_a_word(self) -> None:
        """NOWHERE-flag is not a WHERE keyword."""
        assert extract_where_fields("FOR EACH t BY nowhere-flag = 1:") == []

    def test_text_before_where_ignored(self) -> None:
        raw = "FOR EACH customer OF x = 1 WHERE customer.city = 'X':"
        assert extract_where_fields(raw) == ["city"]

    def test_duplicates_keep_first_position(self) -> None:
        raw = "FOR EACH customer WHERE city = 'A' OR state = 'B' OR city = 'C':"
        assert extract_where_fields(raw) == ["city", "state"]

    def test_explicit_fields_win(self) -> None:
        statement = make_statement(CITY_STATUS, explicit=("state", "state", "zip"))
        assert used_fields_for(statement) == ["state", "zip"]


# =============================================================================
# Scoring
# =============================================================================

class TestScoring:
    """Prefix scoring and best-index selection."""

    def test_full_prefix(self) -> None:
        index = IndexDef(name="idx1", fields=["city", "status"])
        assert score_index(index, ["city", "status"]) == 2

    def test_stops_at_first_unused(self) -> None:
        index = IndexDef(name="idx2", fields=["city", "region", "status"])
        assert score_index(index, ["city", "status"]) == 1

    def test_leading_unused_scores_zero(self) -> None:
        index = IndexDef(name="ix", fields=["region", "city"])
        assert score_index(index, ["city"]) == 0

    def test_extra_used_fields_do_not_count(self) -> None:
        """Adding used fields never lowers a score."""
        index = IndexDef(name="ix", fields=["city", "state", "zip"])
        base = score_index(index, ["city"])
        more = score_index(index, ["city", "state", "balance"])
        assert more >= base

    def test_tie_goes_to_first_declared(self) -> None:
        first = IndexDef(name="first", fields=["city", "zip"])
        second = IndexDef(name="second", fields=["city", "state"])

        best = select_best_index([first, second], ["city"])
        assert best == (first, 1)

    def test_higher_score_later_wins(self) -> None:
        short = IndexDef(name="short", fields=["city"])
        longer = IndexDef(name="longer", fields=["city", "status"])

        best = select_best_index([short, longer], ["city", "status"])
        assert best == (longer, 2)

    def test_no_usable_index(self) -> None:
        indexes = [IndexDef(name="a", fields=["zip"]), IndexDef(name="b", fields=[])]
        assert select_best_index(indexes, ["city"]) is None


# =============================================================================
# Advisor results
# =============================================================================

class TestIndexAdvisor:
    """One result per statement."""

    def test_perfect_match(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(IndexDef(name="idx1", fields=["city", "status"]))

        result = advisor.assess(make_statement(CITY_STATUS), catalog)

        assert isinstance(result, IndexMatch)
        assert result.kind is ResultKind.MATCH
        assert result.index_name == "idx1"
        assert result.match_count == 2
        assert result.is_perfect
        assert result.used_fields == ("city", "status")
        assert result.index_fields == ("city", "status")

    def test_partial_match(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(IndexDef(name="idx2", fields=["city", "region", "status"]))

        result = advisor.assess(make_statement(CITY_STATUS), catalog)

        assert isinstance(result, IndexMatch)
        assert result.index_name == "idx2"
        assert result.match_count == 1
        assert not result.is_perfect

    def test_perfect_even_with_longer_index(self, advisor: IndexAdvisor) -> None:
        """Unused trailing key fields do not spoil a perfect match."""
        catalog = make_catalog(IndexDef(name="ix", fields=["city", "status", "zip"]))
        result = advisor.assess(make_statement(CITY_STATUS), catalog)

        assert result.is_perfect
        assert result.match_count == 2

    def test_perfect_iff_count_equals_used(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(
            IndexDef(name="a", fields=["city"]),
            IndexDef(name="b", fields=["status", "city"]),
        )
        for raw in (
            "FOR EACH customer WHERE customer.city = 'X':",
            CITY_STATUS,
            "FOR EACH customer WHERE customer.status = 'A' AND customer.zip = 1:",
        ):
            result = advisor.assess(make_statement(raw), catalog)
            assert result.is_perfect == (result.match_count == len(result.used_fields))

    def test_suggestion_when_nothing_matches(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(IndexDef(name="ix-zip", fields=["zip"]))

        result = advisor.assess(make_statement(CITY_STATUS), catalog, file_name="a.p")

        assert isinstance(result, IndexSuggestion)
        assert result.kind is ResultKind.SUGGESTION
        assert result.index_fields == ("city", "status")
        assert result.file_name == "a.p"
        assert result.suggestion.startswith('ADD INDEX "customer__ai')
        assert 'INDEX-FIELD "status" ASCENDING' in result.suggestion

    def test_suggestion_field_order(self, advisor: IndexAdvisor) -> None:
        """Equality, then range, then logical fields."""
        fields = [
            FieldDef(name="active", data_type="logical"),
            FieldDef(name="signup_date", data_type="date"),
            FieldDef(name="email", data_type="character"),
            FieldDef(name="city", data_type="character"),
        ]
        catalog = make_catalog(fields=fields)
        raw = (
            "FOR EACH customer WHERE customer.active = TRUE AND customer.signup_date > d "
            "AND customer.email = e AND customer.city = c:"
        )

        result = advisor.assess(make_statement(raw), catalog)

        assert isinstance(result, IndexSuggestion)
        assert result.index_fields == ("email", "city", "signup_date", "active")

    def test_table_not_found(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(IndexDef(name="ix", fields=["city"]))
        statement = make_statement("FOR EACH salesrep WHERE salesrep.x = 1:", table="salesrep")

        result = advisor.assess(statement, catalog)

        assert isinstance(result, AdvisorWarning)
        assert result.reason is WarningKind.TABLE_NOT_FOUND
        assert result.table == "salesrep"
        assert result.statement is statement

    def test_table_lookup_is_case_sensitive(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(IndexDef(name="ix", fields=["city"]))
        statement = make_statement("FOR EACH Customer WHERE Customer.city = 1:", table="Customer")

        result = advisor.assess(statement, catalog)
        assert result.reason is WarningKind.TABLE_NOT_FOUND

    def test_insufficient_filters(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(IndexDef(name="ix", fields=["city"]))

        result = advisor.assess(make_statement("FOR EACH customer NO-LOCK:"), catalog)

        assert isinstance(result, AdvisorWarning)
        assert result.reason is WarningKind.INSUFFICIENT_FILTERS
        assert result.message == "insufficient filters"

    def test_can_find_fields_used(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(IndexDef(name="ix", fields=["state"]))
        statement = make_statement(
            "CAN-FIND(customer WHERE customer.state = 'MA') [CAN-FIND]",
            explicit=("state",),
        )

        result = advisor.assess(statement, catalog)

        assert isinstance(result, IndexMatch)
        assert result.is_perfect


# =============================================================================
# Whole runs
# =============================================================================

class TestAnalyze:
    """Running the advisor over several sources."""

    def test_no_schema_gives_single_warning(self, advisor: IndexAdvisor) -> None:
        sources = [
            SourceAnalysis("a.p", (make_statement(CITY_STATUS),)),
            SourceAnalysis("b.p", (make_statement(CITY_STATUS),)),
        ]

        results = advisor.analyze(sources, SchemaCatalog())

        assert len(results) == 1
        assert results[0].reason is WarningKind.SCHEMA_MISSING
        assert results[0].table is None
        assert results[0].statement is None

    def test_one_result_per_statement_in_order(self, advisor: IndexAdvisor) -> None:
        catalog = make_catalog(IndexDef(name="idx1", fields=["city", "status"]))
        sources = [
            SourceAnalysis("a.p", (
                make_statement(CITY_STATUS),
                make_statement("FOR EACH customer:"),
            )),
            SourceAnalysis("empty.p", ()),
            SourceAnalysis("b.p", (make_statement("FOR EACH item:", table="item"),)),
        ]

        results = advisor.analyze(sources, catalog)

        assert [r.kind for r in results] == [
            ResultKind.MATCH, ResultKind.WARNING, ResultKind.WARNING,
        ]
        assert [r.file_name for r in results] == ["a.p", "a.p", "b.p"]

    def test_convenience_function(self) -> None:
        catalog = make_catalog(IndexDef(name="idx1", fields=["city"]))
        sources = [SourceAnalysis("a.p", (make_statement(CITY_STATUS),))]

        results = analyze_index_usage(sources, catalog)

        assert len(results) == 1
        assert results[0].index_name == "idx1"
        assert not results[0].is_perfect

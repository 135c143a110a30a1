"""
Index advisor module.

Matches extracted statements against schema indexes and suggests new
indexes where none applies.
"""

from ablsense.advisor.advisor import (
    IndexAdvisor,
    analyze_index_usage,
    extract_where_fields,
    score_index,
    select_best_index,
    used_fields_for,
)
from ablsense.advisor.models import (
    AdvisorWarning,
    IndexMatch,
    IndexSuggestion,
    MatchResult,
    ResultKind,
    WarningKind,
)
from ablsense.advisor.suggestions import (
    FieldClass,
    SuggestionGenerator,
    classify_field,
    filter_fields_for_index,
    generate_index_df,
)

__all__ = [
    # Matching
    "IndexAdvisor",
    "analyze_index_usage",
    "extract_where_fields",
    "score_index",
    "select_best_index",
    "used_fields_for",
    # Results
    "AdvisorWarning",
    "IndexMatch",
    "IndexSuggestion",
    "MatchResult",
    "ResultKind",
    "WarningKind",
    # Suggestions
    "FieldClass",
    "SuggestionGenerator",
    "classify_field",
    "filter_fields_for_index",
    "generate_index_df",
]

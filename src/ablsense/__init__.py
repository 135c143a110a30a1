"""ablsense - Index analyzer for Progress ABL programs and Data Dictionary schemas."""

__version__ = "0.1.0"
__license__ = "MIT"

# Exception hierarchy (import first so other modules can use it)
from ablsense.exceptions import (
    AblSenseError,
    ConfigurationError,
    SourceReadError,
)

# Public API exports
from ablsense.advisor import (
    AdvisorWarning,
    FieldClass,
    IndexAdvisor,
    IndexMatch,
    IndexSuggestion,
    MatchResult,
    ResultKind,
    SuggestionGenerator,
    WarningKind,
    analyze_index_usage,
    generate_index_df,
)
from ablsense.config import (
    Config,
    get_config,
)
from ablsense.engine import (
    AnalysisReport,
    AnalysisService,
)
from ablsense.extractor import (
    SourceAnalysis,
    Statement,
    StatementExtractor,
    StatementKind,
    extract_statements,
)
from ablsense.inputs import NamedText
from ablsense.schema import (
    FieldDef,
    IndexDef,
    SchemaCatalog,
    Table,
    parse_df,
)

__all__ = [
    # Exception hierarchy
    "AblSenseError",
    "ConfigurationError",
    "SourceReadError",
    # Core
    "AnalysisService",
    "AnalysisReport",
    "NamedText",
    # Extraction
    "StatementExtractor",
    "Statement",
    "StatementKind",
    "SourceAnalysis",
    "extract_statements",
    # Schema
    "FieldDef",
    "IndexDef",
    "Table",
    "SchemaCatalog",
    "parse_df",
    # Advice
    "IndexAdvisor",
    "IndexMatch",
    "IndexSuggestion",
    "AdvisorWarning",
    "MatchResult",
    "ResultKind",
    "WarningKind",
    "FieldClass",
    "SuggestionGenerator",
    "analyze_index_usage",
    "generate_index_df",
    # Configuration
    "Config",
    "get_config",
    # Metadata
    "__version__",
    "__license__",
]

"""
LexiDoc: Aggregate OCR output of Arabic/French legal documents.

This library turns the per-page text regions returned by an OCR engine
into one ordered, corrected document text, with page markers, language
statistics and a heuristic quality assessment.

Example:
    >>> import lexidoc
    >>> result = lexidoc.aggregate(pages)
    >>> print(result.aggregated_text)  # Ordered, corrected text
    >>> print(result.quality_metrics.overall_score)
    >>> for line in result.recommendations:
    ...     print(line)

    >>> # Correct a text fragment directly
    >>> lexidoc.correct_ocr_text(text).corrected_text
"""

from lexidoc.aggregate import (
    TextAggregator,
    aggregate,
    aggregate_batch,
    aggregate_raw,
    extract_by_entity_type,
    generate_summary,
    simple_aggregation,
)
from lexidoc.config import AggregationConfig, QualityThresholds
from lexidoc.exceptions import (
    AggregationCancelledError,
    AggregationError,
    ConfigurationError,
    LexiDocError,
    RuleTableError,
)
from lexidoc.layout import detect_language, order_regions
from lexidoc.models import (
    # Metadata & Quality
    AggregationMetadata,
    # Output
    AggregationResult,
    AutoCorrections,
    # Input
    BoundingBox,
    EnhancedAggregationResult,
    # Enums
    Language,
    LanguageDistribution,
    PageBreakdown,
    QualityMetrics,
    TextRegion,
)
from lexidoc.normalizers import (
    CorrectionEngine,
    CorrectionResult,
    correct_ocr_text,
    load_rule_table,
)
from lexidoc.quality import generate_recommendations, score_text

__version__ = "0.1.0"
__all__ = [
    # Main API
    "aggregate",
    "aggregate_raw",
    "aggregate_batch",
    "simple_aggregation",
    "extract_by_entity_type",
    "generate_summary",
    "TextAggregator",
    # Stages
    "order_regions",
    "detect_language",
    "correct_ocr_text",
    "score_text",
    "generate_recommendations",
    # Configuration
    "AggregationConfig",
    "QualityThresholds",
    # Corrections
    "CorrectionEngine",
    "CorrectionResult",
    "load_rule_table",
    # Enums
    "Language",
    # Input
    "BoundingBox",
    "TextRegion",
    # Output
    "AggregationResult",
    "EnhancedAggregationResult",
    "AggregationMetadata",
    "LanguageDistribution",
    "PageBreakdown",
    "QualityMetrics",
    "AutoCorrections",
    # Exceptions
    "LexiDocError",
    "AggregationError",
    "AggregationCancelledError",
    "RuleTableError",
    "ConfigurationError",
]

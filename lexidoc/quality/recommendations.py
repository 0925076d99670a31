"""
Human-readable recommendations derived from quality scores.
"""

from __future__ import annotations

from lexidoc.config import QualityThresholds
from lexidoc.models import AggregationResult, Language, QualityMetrics

CHECK_STRUCTURE = "Check the document structure and page order"
REPROCESS_NOISY = "Improve OCR quality - unrecognized characters are present"
CHECK_MISSING_PAGES = "Document may be incomplete - check that all pages are present"
REPROCESS_LOW_CONFIDENCE = "Low OCR confidence - consider reprocessing the document"
CHECK_LANGUAGE = "Document is mostly mixed-language - review language detection"
NO_ISSUES = "Aggregation quality is excellent - no improvement needed"


def generate_recommendations(
    metrics: QualityMetrics,
    result: AggregationResult,
    thresholds: QualityThresholds | None = None,
) -> list[str]:
    """
    Derive improvement suggestions for an aggregated document.

    Args:
        metrics: Quality scores of the aggregated text.
        result: Aggregation whose metadata and page breakdowns are checked.
        thresholds: Trigger levels (defaults if None).

    Returns:
        Non-empty list. A document without pages, or one where no check
        fires, gets exactly one positive statement.
    """
    thresholds = thresholds or QualityThresholds()

    if result.metadata.total_pages == 0:
        return [NO_ISSUES]

    recommendations: list[str] = []

    if metrics.coherence_score < thresholds.coherence:
        recommendations.append(CHECK_STRUCTURE)

    if metrics.readability_score < thresholds.readability:
        recommendations.append(REPROCESS_NOISY)

    if metrics.completeness_score < thresholds.completeness:
        recommendations.append(CHECK_MISSING_PAGES)

    if result.metadata.average_confidence < thresholds.min_confidence:
        recommendations.append(REPROCESS_LOW_CONFIDENCE)

    pages = result.page_breakdowns
    mixed_pages = sum(1 for page in pages if page.language is Language.MIXED)
    if pages and mixed_pages > len(pages) * thresholds.mixed_page_ratio:
        recommendations.append(CHECK_LANGUAGE)

    if not recommendations:
        recommendations.append(NO_ISSUES)

    return recommendations

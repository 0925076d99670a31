"""
Quality assessment of aggregated text.

- score_text: coherence, readability and completeness sub-scores
- generate_recommendations: suggestions derived from the scores
"""

from lexidoc.quality.recommendations import (
    NO_ISSUES,
    generate_recommendations,
)
from lexidoc.quality.scorer import (
    LEGAL_PATTERNS,
    average_sentence_length,
    matched_legal_patterns,
    score_coherence,
    score_completeness,
    score_readability,
    score_text,
)

__all__ = [
    # Scoring
    "score_text",
    "score_coherence",
    "score_readability",
    "score_completeness",
    "average_sentence_length",
    "matched_legal_patterns",
    "LEGAL_PATTERNS",
    # Recommendations
    "generate_recommendations",
    "NO_ISSUES",
]

"""
Quality scoring for aggregated legal-document text.

Three heuristic sub-scores, each in [0, 1], and their mean:

- Coherence: structure markers, page markers, plausible sentence length
- Readability: few unrecognized symbols, both scripts present
- Completeness: length, plus typical legal-document patterns
"""

from __future__ import annotations

import re

from lexidoc.models import QualityMetrics

# =============================================================================
# CONSTANTS
# =============================================================================

COHERENCE_BASE = 0.5
READABILITY_BASE = 0.5
COMPLETENESS_BASE = 0.3

STRUCTURE_MARKERS = ("Article", "Chapitre", "Chapter", "المادة", "الفصل", "الباب")
PAGE_MARKER = "=== PAGE"

SENTENCE_SPLIT = re.compile(r"[.!?]+")
MIN_SENTENCE_CHARS = 10
SENTENCE_LENGTH_RANGE = (20, 200)  # exclusive bounds

SPECIAL_CHARS = re.compile(r"[^\w\s\u0600-\u06FF.,;:!?()\-]")
MAX_SPECIAL_RATIO = 0.05
ARABIC_CHARS = re.compile(r"[\u0600-\u06FF]")
LATIN_CHARS = re.compile(r"[a-zA-ZÀ-ÿ]")

SHORT_TEXT = 100
LONG_TEXT = 1000
PATTERN_BONUS = 0.075

# One bonus per family, however many matches
LEGAL_PATTERNS: dict[str, re.Pattern[str]] = {
    "date": re.compile(r"\d{1,2}/\d{1,2}/\d{4}"),
    "numbering": re.compile(
        r"(?:Article|Chapitre|Section|المادة|الفصل|الباب)\s+\d+", re.IGNORECASE
    ),
    "institution": re.compile(
        r"République\s+Algérienne|Ministère|الجمهورية\s+الجزائرية|وزارة", re.IGNORECASE
    ),
    "connective": re.compile(
        r"\b(?:Vu|Considérant|Décide)\b|بمقتضى|بناء\s+على|يقرر|يرسم", re.IGNORECASE
    ),
}


def _clamp(score: float) -> float:
    return max(0.0, min(1.0, score))


# =============================================================================
# SUB-SCORES
# =============================================================================


def average_sentence_length(text: str) -> float | None:
    """
    Mean length of sentences longer than MIN_SENTENCE_CHARS.

    Returns None when no sentence qualifies.
    """
    sentences = [s for s in SENTENCE_SPLIT.split(text) if len(s.strip()) > MIN_SENTENCE_CHARS]
    if not sentences:
        return None
    return sum(len(s) for s in sentences) / len(sentences)


def score_coherence(text: str) -> float:
    """Structure and continuity of the text."""
    score = COHERENCE_BASE

    if any(marker in text for marker in STRUCTURE_MARKERS):
        score += 0.2
    if PAGE_MARKER in text:
        score += 0.1

    avg_length = average_sentence_length(text)
    low, high = SENTENCE_LENGTH_RANGE
    if avg_length is not None and low < avg_length < high:
        score += 0.2

    return _clamp(score)


def score_readability(text: str) -> float:
    """Absence of noise symbols and presence of both scripts."""
    score = READABILITY_BASE

    if text:
        special_ratio = len(SPECIAL_CHARS.findall(text)) / len(text)
        if special_ratio < MAX_SPECIAL_RATIO:
            score += 0.3

    if ARABIC_CHARS.search(text) and LATIN_CHARS.search(text):
        score += 0.2

    return _clamp(score)


def matched_legal_patterns(text: str) -> list[str]:
    """Names of the legal-pattern families found in the text."""
    return [name for name, pattern in LEGAL_PATTERNS.items() if pattern.search(text)]


def score_completeness(text: str) -> float:
    """Length and presence of typical legal-document elements."""
    score = COMPLETENESS_BASE

    if len(text) > SHORT_TEXT:
        score += 0.2
    if len(text) > LONG_TEXT:
        score += 0.2

    score += PATTERN_BONUS * len(matched_legal_patterns(text))

    return _clamp(score)


def score_text(text: str) -> QualityMetrics:
    """
    Score an aggregated text.

    Args:
        text: Aggregated (and corrected) document text.

    Returns:
        QualityMetrics with overall_score the mean of the three sub-scores.

    Example:
        >>> metrics = score_text("")
        >>> (metrics.coherence_score, metrics.readability_score, metrics.completeness_score)
        (0.5, 0.5, 0.3)
    """
    coherence = score_coherence(text)
    readability = score_readability(text)
    completeness = score_completeness(text)

    return QualityMetrics(
        coherence_score=coherence,
        readability_score=readability,
        completeness_score=completeness,
        overall_score=_clamp((coherence + readability + completeness) / 3),
    )

"""
Data models for LexiDoc.

Input regions come from an external OCR engine; everything else is the
output of aggregation. All models are plain value objects created fresh
for each call.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lexidoc.normalizers.correction import CorrectionResult


class Language(str, Enum):
    """Coarse script classification of a region or page."""

    ARABIC = "ar"
    FRENCH = "fr"
    MIXED = "mixed"

    @classmethod
    def parse(cls, value: Any) -> Language | None:
        """Return the matching language, or None for an unknown tag."""
        if isinstance(value, Language):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


def _as_coordinate(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number or number < 0:  # NaN or negative
        return 0.0
    return number


def clamp_confidence(value: Any) -> float:
    """Coerce an OCR confidence to a float in [0, 1]."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:
        return 0.0
    return max(0.0, min(1.0, number))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned page-relative box in pixels."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_value(cls, value: Any) -> BoundingBox:
        """
        Build a box from OCR engine output.

        Accepts a BoundingBox, a mapping with x/y/width/height keys, or a
        4-item sequence. Missing or malformed fields default to 0.
        """
        if isinstance(value, BoundingBox):
            return value
        if isinstance(value, Mapping):
            return cls(
                x=_as_coordinate(value.get("x")),
                y=_as_coordinate(value.get("y")),
                width=_as_coordinate(value.get("width")),
                height=_as_coordinate(value.get("height")),
            )
        if isinstance(value, Sequence) and not isinstance(value, str | bytes):
            coords = [_as_coordinate(v) for v in list(value)[:4]]
            coords.extend([0.0] * (4 - len(coords)))
            return cls(*coords)
        return cls()

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class TextRegion:
    """
    One OCR-recognized text fragment.

    Regions with blank text are kept as present but contribute nothing
    to aggregation or scoring.
    """

    text: str
    bbox: BoundingBox = field(default_factory=BoundingBox)
    confidence: float = 0.0
    language: Language = Language.FRENCH
    entity_type: str | None = None  # "title", "date", ... assigned upstream

    def __post_init__(self):
        object.__setattr__(self, "text", self.text if isinstance(self.text, str) else "")
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))

    @property
    def is_blank(self) -> bool:
        """Whether the region has no visible text."""
        return not self.text.strip()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TextRegion:
        """
        Build a region from raw OCR engine output.

        Unknown language tags are inferred from the text.
        """
        from lexidoc.layout.language import detect_language

        text = data.get("text")
        text = text if isinstance(text, str) else ""
        language = Language.parse(data.get("language"))
        if language is None:
            language = detect_language(text)

        entity_type = data.get("entityType", data.get("entity_type"))
        return cls(
            text=text,
            bbox=BoundingBox.from_value(data.get("bbox")),
            confidence=clamp_confidence(data.get("confidence")),
            language=language,
            entity_type=entity_type if isinstance(entity_type, str) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "bbox": self.bbox.to_dict(),
            "confidence": self.confidence,
            "language": self.language.value,
            "entityType": self.entity_type,
        }


@dataclass
class PageBreakdown:
    """Per-page summary produced by the orchestrator."""

    page_number: int  # 1-based
    region_count: int  # Raw count, blank regions included
    text_length: int
    confidence: float  # Mean over non-empty regions
    language: Language

    def to_dict(self) -> dict[str, Any]:
        return {
            "pageNumber": self.page_number,
            "regionCount": self.region_count,
            "textLength": self.text_length,
            "confidence": self.confidence,
            "language": self.language.value,
        }


@dataclass
class LanguageDistribution:
    """Counts of non-empty regions by their region-level language tag."""

    arabic: int = 0
    french: int = 0
    mixed: int = 0

    def add(self, language: Language) -> None:
        if language is Language.ARABIC:
            self.arabic += 1
        elif language is Language.MIXED:
            self.mixed += 1
        else:
            self.french += 1

    @property
    def total(self) -> int:
        return self.arabic + self.french + self.mixed

    def to_dict(self) -> dict[str, int]:
        return {"arabic": self.arabic, "french": self.french, "mixed": self.mixed}


@dataclass
class AggregationMetadata:
    """Document-level statistics."""

    total_pages: int = 0
    total_regions: int = 0  # Non-empty regions only
    average_confidence: float = 0.0
    language_distribution: LanguageDistribution = field(default_factory=LanguageDistribution)
    processing_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "totalRegions": self.total_regions,
            "averageConfidence": self.average_confidence,
            "languageDistribution": self.language_distribution.to_dict(),
            "processingTimeMs": self.processing_time_ms,
        }


@dataclass
class AggregationResult:
    """
    Raw aggregation output.

    Example:
        >>> result = lexidoc.aggregate_raw(pages)
        >>> print(result.aggregated_text)
        >>> print(result.metadata.average_confidence)
    """

    aggregated_text: str
    metadata: AggregationMetadata = field(default_factory=AggregationMetadata)
    page_breakdowns: list[PageBreakdown] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary in the camelCase shape consumed by the UI layer
        """
        return {
            "aggregatedText": self.aggregated_text,
            "metadata": self.metadata.to_dict(),
            "pageBreakdowns": [page.to_dict() for page in self.page_breakdowns],
        }


@dataclass
class QualityMetrics:
    """Quality sub-scores of an aggregated text, each in [0, 1]."""

    coherence_score: float
    readability_score: float
    completeness_score: float
    overall_score: float

    def to_dict(self) -> dict[str, float]:
        return {
            "coherenceScore": self.coherence_score,
            "readabilityScore": self.readability_score,
            "completenessScore": self.completeness_score,
            "overallScore": self.overall_score,
        }


@dataclass
class AutoCorrections:
    """Normalizations applied to the final text."""

    applied: int = 0
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"applied": self.applied, "suggestions": list(self.suggestions)}


@dataclass
class EnhancedAggregationResult(AggregationResult):
    """
    Aggregation output with corrections, quality scores and recommendations.

    Example:
        >>> result = lexidoc.aggregate(pages)
        >>> result.quality_metrics.overall_score
        0.87
        >>> result.recommendations
        ['Aggregation quality is excellent - no improvement needed']
    """

    quality_metrics: QualityMetrics = field(
        default_factory=lambda: QualityMetrics(0.0, 0.0, 0.0, 0.0)
    )
    recommendations: list[str] = field(default_factory=list)
    auto_corrections: AutoCorrections = field(default_factory=AutoCorrections)

    # Detailed rule-table report (None when corrections are disabled)
    text_corrections: CorrectionResult | None = None

    def to_base(self) -> AggregationResult:
        """Return the plain AggregationResult subset."""
        return AggregationResult(
            aggregated_text=self.aggregated_text,
            metadata=self.metadata,
            page_breakdowns=list(self.page_breakdowns),
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["qualityMetrics"] = self.quality_metrics.to_dict()
        data["recommendations"] = list(self.recommendations)
        data["autoCorrections"] = self.auto_corrections.to_dict()
        return data

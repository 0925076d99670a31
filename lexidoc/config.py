"""
Configuration for LexiDoc text aggregation.

All options have sensible defaults taken from the production pipeline.
"""

from dataclasses import dataclass, field
from pathlib import Path

from lexidoc.exceptions import ConfigurationError


def _check_ratio(name: str, value: float) -> None:
    if value < 0.0 or value > 1.0:
        raise ConfigurationError(f"{name} must be between 0.0 and 1.0, got {value}")


@dataclass
class QualityThresholds:
    """
    Thresholds below which a recommendation is emitted.

    Example:
        >>> config = AggregationConfig(
        ...     thresholds=QualityThresholds(min_confidence=0.9)
        ... )
    """

    coherence: float = 0.7
    readability: float = 0.7
    completeness: float = 0.7

    # Average OCR confidence over all non-empty regions
    min_confidence: float = 0.8

    # Share of pages tagged "mixed" above which language detection is suspect
    mixed_page_ratio: float = 0.5

    def __post_init__(self):
        """Validate thresholds."""
        for name in (
            "coherence",
            "readability",
            "completeness",
            "min_confidence",
            "mixed_page_ratio",
        ):
            _check_ratio(name, getattr(self, name))


@dataclass
class AggregationConfig:
    """
    Configuration for document aggregation.

    Create a config only if you need to customize behavior.

    Example:
        >>> config = AggregationConfig(
        ...     same_line_tolerance=15,
        ...     rules_path=Path("my_rules.yaml"),
        ... )
        >>> result = lexidoc.aggregate(pages, config)
    """

    # Layout options
    same_line_tolerance: float = 10.0  # Pixels of y drift still read as one line
    mixed_language_ratio: float = 0.3  # Share of mixed regions that makes a page mixed

    # Output options
    page_marker_template: str = "=== PAGE {number} ==="

    # Correction options
    apply_corrections: bool = True
    rules_path: Path | None = None  # None = bundled Arabic legal rule table
    max_correction_passes: int | None = None  # None = until the text settles

    # Quality options
    thresholds: QualityThresholds = field(default_factory=QualityThresholds)

    def __post_init__(self):
        """Validate configuration."""
        if self.same_line_tolerance < 0:
            raise ConfigurationError(
                f"same_line_tolerance must be >= 0, got {self.same_line_tolerance}"
            )
        _check_ratio("mixed_language_ratio", self.mixed_language_ratio)

        if "{number}" not in self.page_marker_template:
            raise ConfigurationError(
                f"page_marker_template must contain '{{number}}', "
                f"got {self.page_marker_template!r}"
            )

        if self.max_correction_passes is not None and self.max_correction_passes < 1:
            raise ConfigurationError(
                f"max_correction_passes must be >= 1, got {self.max_correction_passes}"
            )

        if self.rules_path is not None:
            self.rules_path = Path(self.rules_path)

    def page_marker(self, page_number: int) -> str:
        """Render the marker line that opens a page section."""
        return self.page_marker_template.format(number=page_number)

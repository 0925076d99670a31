"""
Document aggregation orchestrator.

This module provides the main `aggregate()` function that turns per-page
OCR regions into one ordered, corrected and scored document text by
wiring together:
- order_regions (reading order)
- LanguageTally (page language)
- join_texts (page text)
- CorrectionEngine (rule table)
- score_text / generate_recommendations (quality)

Every call builds its own context; nothing is shared between documents,
so independent documents can be aggregated in parallel.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable, Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from lexidoc.config import AggregationConfig
from lexidoc.exceptions import AggregationCancelledError, AggregationError, LexiDocError
from lexidoc.layout.joiner import join_texts
from lexidoc.layout.language import LanguageTally
from lexidoc.layout.ordering import order_regions
from lexidoc.models import (
    AggregationMetadata,
    AggregationResult,
    EnhancedAggregationResult,
    LanguageDistribution,
    PageBreakdown,
    TextRegion,
)
from lexidoc.normalizers.cleanup import diff_auto_corrections, normalize_aggregated_text
from lexidoc.normalizers.correction import CorrectionEngine
from lexidoc.normalizers.rules import load_rule_table
from lexidoc.quality.recommendations import generate_recommendations
from lexidoc.quality.scorer import score_text

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n\n"

# Pages as accepted from callers: one list of regions (or raw dicts) per page
PagesInput = Sequence[Sequence[TextRegion | Mapping[str, Any]]]


# ═══════════════════════════════════════════════════════════════════════════════
# Input validation
# ═══════════════════════════════════════════════════════════════════════════════


def _is_list(value: Any) -> bool:
    return isinstance(value, list | tuple)


def coerce_pages(pages: Any) -> list[list[TextRegion]]:
    """
    Validate caller input and convert raw regions to TextRegion.

    Malformed regions (blank text, broken bbox, odd confidence) are
    tolerated; structurally invalid pages are not.

    Raises:
        AggregationError: If ``pages`` is not a list, or a page is not a
            list of regions. The error carries the offending page index.
    """
    if not _is_list(pages):
        raise AggregationError(f"pages must be a list of pages, got {type(pages).__name__}")

    coerced: list[list[TextRegion]] = []
    for index, page in enumerate(pages):
        if not _is_list(page):
            raise AggregationError(
                f"Page {index + 1} is not a list of regions (got {type(page).__name__})",
                page_index=index,
            )

        regions: list[TextRegion] = []
        for region in page:
            if isinstance(region, TextRegion):
                regions.append(region)
            elif isinstance(region, Mapping):
                regions.append(TextRegion.from_dict(region))
            else:
                raise AggregationError(
                    f"Page {index + 1} contains a {type(region).__name__} "
                    f"where a region was expected",
                    page_index=index,
                )
        coerced.append(regions)

    return coerced


# ═══════════════════════════════════════════════════════════════════════════════
# Aggregator
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class AggregationContext:
    """Accumulated state for one aggregation call."""

    total_pages: int = 0
    sections: list[str] = field(default_factory=list)
    page_breakdowns: list[PageBreakdown] = field(default_factory=list)
    total_regions: int = 0
    confidence_sum: float = 0.0
    distribution: LanguageDistribution = field(default_factory=LanguageDistribution)

    @property
    def joined_text(self) -> str:
        return SECTION_SEPARATOR.join(self.sections)

    def build_metadata(self, processing_time_ms: float) -> AggregationMetadata:
        average = self.confidence_sum / self.total_regions if self.total_regions else 0.0
        return AggregationMetadata(
            total_pages=self.total_pages,
            total_regions=self.total_regions,
            average_confidence=max(0.0, min(1.0, average)),
            language_distribution=self.distribution,
            processing_time_ms=processing_time_ms,
        )


class TextAggregator:
    """
    Aggregates the OCR regions of one document at a time.

    The aggregator holds only its configuration and a correction engine
    with an immutable rule table.

    Example:
        >>> aggregator = TextAggregator()
        >>> result = aggregator.aggregate([[{"text": "Page one text."}]])
        >>> result.aggregated_text
        '=== PAGE 1 ===\\nPage one text.'
    """

    def __init__(self, config: AggregationConfig | None = None) -> None:
        """Initialize the aggregator."""
        self.config = config or AggregationConfig()

        rules = load_rule_table(self.config.rules_path) if self.config.rules_path else None
        self.engine = CorrectionEngine(rules, max_passes=self.config.max_correction_passes)

    def aggregate(
        self,
        pages: PagesInput,
        cancel_event: threading.Event | None = None,
    ) -> EnhancedAggregationResult:
        """
        Aggregate, correct and score a document.

        Args:
            pages: One list of regions per page, in page order.
            cancel_event: Checked before each page; if set, the call aborts.

        Returns:
            EnhancedAggregationResult for the whole document.

        Raises:
            AggregationError: If the page input is malformed.
            AggregationCancelledError: If cancel_event is set mid-document.
        """
        start_time = time.time()
        ctx = self._collect(pages, cancel_event)
        logger.info(
            "Aggregating %d pages (%d regions with text)",
            ctx.total_pages,
            ctx.total_regions,
        )

        joined = ctx.joined_text
        correction = None
        corrected = joined
        if self.config.apply_corrections:
            correction = self.engine.correct(joined)
            corrected = correction.corrected_text

        quality = score_text(corrected)
        final_text = normalize_aggregated_text(corrected)
        auto_corrections = diff_auto_corrections(corrected, final_text)

        result = EnhancedAggregationResult(
            aggregated_text=final_text,
            metadata=ctx.build_metadata(0.0),
            page_breakdowns=ctx.page_breakdowns,
            quality_metrics=quality,
            auto_corrections=auto_corrections,
            text_corrections=correction,
        )
        result.recommendations = generate_recommendations(
            quality, result, self.config.thresholds
        )
        result.metadata.processing_time_ms = (time.time() - start_time) * 1000

        logger.info(
            "Aggregation completed in %.0fms: %d pages, %d regions, quality %.2f",
            result.metadata.processing_time_ms,
            ctx.total_pages,
            ctx.total_regions,
            quality.overall_score,
        )
        return result

    def aggregate_raw(
        self,
        pages: PagesInput,
        cancel_event: threading.Event | None = None,
    ) -> AggregationResult:
        """
        Aggregate without the correction rule table or quality scoring.

        The page text is ordered, joined, page-marked and passed through the
        lightweight normalization only.
        """
        start_time = time.time()
        ctx = self._collect(pages, cancel_event)
        text = normalize_aggregated_text(ctx.joined_text)
        return AggregationResult(
            aggregated_text=text,
            metadata=ctx.build_metadata((time.time() - start_time) * 1000),
            page_breakdowns=ctx.page_breakdowns,
        )

    def _collect(
        self,
        pages: PagesInput,
        cancel_event: threading.Event | None,
    ) -> AggregationContext:
        """Validate input and process every page in order."""
        coerced = coerce_pages(pages)
        ctx = AggregationContext(total_pages=len(coerced))

        for index, regions in enumerate(coerced):
            if cancel_event is not None and cancel_event.is_set():
                raise AggregationCancelledError(
                    f"Aggregation cancelled before page {index + 1}",
                    page_index=index,
                )
            self._process_page(ctx, index, regions)

        return ctx

    def _process_page(
        self,
        ctx: AggregationContext,
        index: int,
        regions: list[TextRegion],
    ) -> None:
        """Order, classify and join one page; skip it if it has no text."""
        page_number = index + 1
        filled = [region for region in regions if not region.is_blank]
        if not filled:
            logger.debug("Page %d: no text, skipped", page_number)
            return

        ordered = order_regions(filled, self.config.same_line_tolerance)

        tally = LanguageTally()
        page_confidence = 0.0
        for region in ordered:
            tally.add(region.language)
            ctx.distribution.add(region.language)
            page_confidence += region.confidence

        page_text = join_texts(region.text for region in ordered)
        ctx.sections.append(f"{self.config.page_marker(page_number)}\n{page_text}")

        ctx.total_regions += len(ordered)
        ctx.confidence_sum += page_confidence

        language = tally.dominant(self.config.mixed_language_ratio)
        ctx.page_breakdowns.append(
            PageBreakdown(
                page_number=page_number,
                region_count=len(regions),
                text_length=len(page_text),
                confidence=page_confidence / len(ordered),
                language=language,
            )
        )
        logger.debug(
            "Page %d: %d/%d regions, %d chars, %s",
            page_number,
            len(ordered),
            len(regions),
            len(page_text),
            language.value,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════


def aggregate(
    pages: PagesInput,
    config: AggregationConfig | None = None,
    cancel_event: threading.Event | None = None,
) -> EnhancedAggregationResult:
    """
    Aggregate the OCR regions of a document into scored, corrected text.

    This is the main entry point for LexiDoc. It handles:
    - Input validation (malformed regions tolerated, malformed pages raise)
    - Reading order and page language per page
    - Page text joining with page markers
    - Arabic legal OCR corrections
    - Quality scoring and recommendations

    Args:
        pages: One list of regions per page, in page order
        config: Aggregation configuration (uses defaults if None)
        cancel_event: Optional event checked between pages

    Returns:
        EnhancedAggregationResult with text, metadata and quality

    Raises:
        AggregationError: If the page input is malformed
        AggregationCancelledError: If cancel_event is set mid-document

    Example:
        >>> result = aggregate([[{"text": "Page one text.", "confidence": 0.9}]])
        >>> result.metadata.total_pages
        1
    """
    return TextAggregator(config).aggregate(pages, cancel_event)


def aggregate_raw(
    pages: PagesInput,
    config: AggregationConfig | None = None,
    cancel_event: threading.Event | None = None,
) -> AggregationResult:
    """Aggregate without corrections or scoring (see TextAggregator.aggregate_raw)."""
    return TextAggregator(config).aggregate_raw(pages, cancel_event)


def _aggregate_document(
    pages: PagesInput,
    config: AggregationConfig,
    cancel_event: threading.Event | None,
) -> EnhancedAggregationResult | None:
    if cancel_event is not None and cancel_event.is_set():
        return None
    return TextAggregator(config).aggregate(pages, cancel_event)


def aggregate_batch(
    documents: Iterable[PagesInput],
    config: AggregationConfig | None = None,
    parallel: bool = False,
    max_workers: int = 4,
    cancel_event: threading.Event | None = None,
) -> Iterator[tuple[int, EnhancedAggregationResult | LexiDocError]]:
    """
    Aggregate multiple documents, yielding results as completed.

    Each document gets its own aggregator; nothing is shared between them.

    Args:
        documents: Page lists, one per document
        config: Aggregation configuration
        parallel: Whether to aggregate documents in a thread pool
        max_workers: Max parallel workers (if parallel=True)
        cancel_event: Once set, documents not yet finished are dropped

    Yields:
        (index, result) tuples where result is EnhancedAggregationResult or
        the LexiDocError raised for that document
    """
    config = config or AggregationConfig()
    documents = list(documents)

    if not parallel:
        for index, pages in enumerate(documents):
            try:
                result = _aggregate_document(pages, config, cancel_event)
            except AggregationCancelledError:
                result = None
            except LexiDocError as e:
                logger.warning("Aggregation failed for document %d: %s", index, e)
                yield (index, e)
                continue
            if result is None:
                logger.info("Batch cancelled at document %d of %d", index, len(documents))
                return
            yield (index, result)
        return

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_aggregate_document, pages, config, cancel_event): index
            for index, pages in enumerate(documents)
        }
        for future in as_completed(futures):
            index = futures[future]
            if cancel_event is not None and cancel_event.is_set():
                for pending in futures:
                    pending.cancel()
            if future.cancelled():
                continue
            try:
                result = future.result()
            except AggregationCancelledError:
                continue
            except LexiDocError as e:
                logger.warning("Aggregation failed for document %d: %s", index, e)
                yield (index, e)
                continue
            if result is not None:
                yield (index, result)


def extract_by_entity_type(pages: PagesInput, entity_type: str) -> list[str]:
    """
    Collect the text of every region tagged with ``entity_type``.

    Texts are trimmed and returned in page-then-region order, without
    ordering or correction. Blank regions are skipped.

    Raises:
        AggregationError: If the page input is malformed.
    """
    return [
        region.text.strip()
        for page in coerce_pages(pages)
        for region in page
        if region.entity_type == entity_type and not region.is_blank
    ]


def simple_aggregation(pages: PagesInput, config: AggregationConfig | None = None) -> str:
    """
    Concatenate region texts page by page, as the OCR engine returned them.

    No ordering, joining heuristics or corrections: each page is its marker
    followed by its non-empty region texts, one per line.
    """
    config = config or AggregationConfig()
    sections = []
    for index, page in enumerate(coerce_pages(pages)):
        texts = [region.text for region in page if not region.is_blank]
        if texts:
            sections.append(config.page_marker(index + 1) + "\n" + "\n".join(texts))
    return SECTION_SEPARATOR.join(sections)


def generate_summary(result: AggregationResult) -> str:
    """
    Render a human-readable report of an aggregation, for logs.

    Example:
        >>> print(generate_summary(result))
        Aggregation complete: 2 pages, 7 regions
        Average confidence: 91.3%
        ...
    """
    metadata = result.metadata
    distribution = metadata.language_distribution

    lines = [
        f"Aggregation complete: {metadata.total_pages} pages, {metadata.total_regions} regions",
        f"Average confidence: {metadata.average_confidence * 100:.1f}%",
        f"Language distribution: {distribution.arabic} AR, {distribution.french} FR, "
        f"{distribution.mixed} mixed",
        f"Processing time: {metadata.processing_time_ms:.0f}ms",
        "",
        "Per-page detail:",
    ]
    lines.extend(
        f"- Page {page.page_number}: {page.region_count} regions, "
        f"{page.text_length} characters ({page.language.value.upper()})"
        for page in result.page_breakdowns
    )
    return "\n".join(lines)

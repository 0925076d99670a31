#!/usr/bin/env python3
"""
Basic LexiDoc Usage Example

This example demonstrates the core workflow:
1. Aggregate OCR regions into one document text
2. Inspect metadata, quality scores and recommendations
3. Correct a text fragment directly
4. Aggregate a batch of documents in parallel
"""

import json
import logging
import threading

from lexidoc import (
    AggregationConfig,
    aggregate,
    aggregate_batch,
    correct_ocr_text,
    extract_by_entity_type,
    generate_summary,
)

# Regions as returned by the OCR engine, one list per page, in any order
PAGES = [
    [
        {
            "text": "مرسوم تنفيذيرقم 15-07 المؤرخفي12 مارس 2015",
            "bbox": {"x": 40, "y": 120, "width": 520, "height": 24},
            "confidence": 0.91,
            "language": "ar",
            "entityType": "title",
        },
        {
            "text": "الجمهوريةالجزائرية الديمقراطيةالشعبية",
            "bbox": {"x": 60, "y": 20, "width": 480, "height": 28},
            "confidence": 0.88,
            "language": "ar",
            "entityType": "header",
        },
        {
            "text": "Décret exécutif n° 15-07 du 12 mars 2015",
            "bbox": {"x": 40, "y": 160, "width": 500, "height": 22},
            "confidence": 0.95,
            "language": "fr",
            "entityType": "title",
        },
    ],
    [
        {
            "text": "المادة1 : ينشر هذا المرسوم في الجريدةالرسمية.",
            "bbox": {"x": 40, "y": 30, "width": 520, "height": 22},
            "confidence": 0.86,
            "language": "ar",
        },
    ],
]


def main():
    logging.basicConfig(level=logging.INFO)

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Aggregation
    # ─────────────────────────────────────────────────────────────────────────

    result = aggregate(PAGES)

    print(result.aggregated_text)
    print()
    print(generate_summary(result))

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Quality and corrections
    # ─────────────────────────────────────────────────────────────────────────

    print(f"\nOverall quality: {result.quality_metrics.overall_score:.2f}")
    for recommendation in result.recommendations:
        print(f"  - {recommendation}")

    for correction in result.text_corrections.corrections:
        print(f"  * {correction}")

    # camelCase JSON for the mapping stage
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2)[:400])

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Helpers
    # ─────────────────────────────────────────────────────────────────────────

    print(extract_by_entity_type(PAGES, "title"))
    print(correct_ocr_text("مرسومرقم 20-01").corrected_text)

    config = AggregationConfig(page_marker_template="--- Page {number} ---")
    print(aggregate(PAGES, config).aggregated_text.splitlines()[0])


def batch_example():
    """Aggregate several documents at once, stopping on demand."""
    cancel = threading.Event()
    documents = [PAGES, PAGES[:1], "not a document"]

    for index, outcome in aggregate_batch(documents, parallel=True, cancel_event=cancel):
        if isinstance(outcome, Exception):
            print(f"Document {index}: FAILED ({outcome})")
        else:
            print(f"Document {index}: {outcome.metadata.total_pages} pages")


if __name__ == "__main__":
    main()
    batch_example()

"""
Page layout stages: reading order, language classification, text joining.
"""

from lexidoc.layout.joiner import (
    PARAGRAPH_BREAK,
    choose_separator,
    clean_region_text,
    join_texts,
)
from lexidoc.layout.language import (
    LanguageTally,
    detect_language,
    dominant_language,
    has_arabic,
)
from lexidoc.layout.ordering import (
    SAME_LINE_TOLERANCE,
    group_lines,
    order_regions,
)

__all__ = [
    # Ordering
    "SAME_LINE_TOLERANCE",
    "group_lines",
    "order_regions",
    # Language
    "LanguageTally",
    "detect_language",
    "dominant_language",
    "has_arabic",
    # Joining
    "PARAGRAPH_BREAK",
    "choose_separator",
    "clean_region_text",
    "join_texts",
]

"""
Reading-order sort for OCR regions.

Regions are read top-to-bottom, then left-to-right within a line.
Right-to-left script order is a property of the text itself and is not
handled here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from lexidoc.models import TextRegion

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Vertical drift (pixels) under which two regions sit on the same line
SAME_LINE_TOLERANCE = 10.0


# =============================================================================
# ORDERING
# =============================================================================


def group_lines(
    regions: Iterable[TextRegion],
    tolerance: float = SAME_LINE_TOLERANCE,
) -> list[list[TextRegion]]:
    """
    Cluster regions into visual lines.

    Regions are stable-sorted by (y, x). A region joins the current line
    when its y is within ``tolerance`` of the line's first region;
    otherwise it opens a new line. Anchoring on the first region keeps the
    grouping transitive, so a slanted run of boxes cannot chain into one
    giant line.

    Args:
        regions: Regions of a single page.
        tolerance: Maximum y distance to the line anchor.

    Returns:
        Lines in top-to-bottom order, each in input (y, x) order.
    """
    by_position = sorted(regions, key=lambda r: (r.bbox.y, r.bbox.x))

    lines: list[list[TextRegion]] = []
    anchor_y = 0.0
    for region in by_position:
        if lines and abs(region.bbox.y - anchor_y) <= tolerance:
            lines[-1].append(region)
        else:
            lines.append([region])
            anchor_y = region.bbox.y
    return lines


def order_regions(
    regions: Iterable[TextRegion],
    tolerance: float = SAME_LINE_TOLERANCE,
) -> list[TextRegion]:
    """
    Sort regions of one page into natural reading order.

    Deterministic and stable: identical input yields identical output, and
    ordering an already ordered list leaves it unchanged.

    Example:
        >>> ordered = order_regions(page_regions)
        >>> [r.text for r in ordered]
        ['Titre', 'Article 1', 'Article 2']
    """
    lines = group_lines(regions, tolerance)

    ordered: list[TextRegion] = []
    for line in lines:
        ordered.extend(sorted(line, key=lambda r: r.bbox.x))

    logger.debug("Ordered %d regions into %d lines", len(ordered), len(lines))
    return ordered

"""
Page text assembly from ordered region texts.

Regions are line-granular, so joining them is mostly a matter of picking
the right separator: a paragraph break after a finished sentence or at a
script switch, a synthesized sentence boundary before a capitalized
fragment, and a plain space otherwise.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from lexidoc.layout.language import has_arabic

# =============================================================================
# CONSTANTS
# =============================================================================

PARAGRAPH_BREAK = "\n\n"
SENTENCE_BREAK = ". "
WORD_BREAK = " "

WHITESPACE_RUN = re.compile(r"\s+")
TRAILING_TERMINAL = re.compile(r"([.!?])\s*$")

ENDS_SENTENCE = re.compile(r"[.!?]$")
ENDS_WITH_PUNCTUATION = re.compile(r"[.!?:;,]$")
STARTS_UPPERCASE = re.compile(r"^[A-ZÀÂÄÇÉÈÊËÏÎÔÙÛÜŸÑÆŒ]")


# =============================================================================
# JOINING
# =============================================================================


def clean_region_text(text: str) -> str:
    """
    Normalize one region's text before joining.

    Trims, collapses whitespace runs (internal newlines included) to a
    single space, and drops whitespace after terminal punctuation.
    """
    cleaned = WHITESPACE_RUN.sub(" ", text.strip())
    return TRAILING_TERMINAL.sub(r"\1", cleaned)


def choose_separator(current: str, following: str) -> str:
    """
    Pick the separator between two consecutive cleaned texts.

    Rules, first match wins:
    1. ``current`` ends a sentence -> paragraph break
    2. ``following`` starts with an uppercase Latin letter and ``current``
       has no trailing punctuation -> synthesized ". "
    3. Arabic script presence differs between the two -> paragraph break
    4. otherwise a single space
    """
    if ENDS_SENTENCE.search(current):
        return PARAGRAPH_BREAK

    if STARTS_UPPERCASE.match(following) and not ENDS_WITH_PUNCTUATION.search(current):
        return SENTENCE_BREAK

    if has_arabic(current) != has_arabic(following):
        return PARAGRAPH_BREAK

    return WORD_BREAK


def join_texts(texts: Iterable[str]) -> str:
    """
    Join ordered region texts into one page-level block.

    Blank texts are skipped.

    Example:
        >>> join_texts(["Article 1", "Le présent décret", "est publié."])
        'Article 1. Le présent décret est publié.'
    """
    cleaned = [clean_region_text(text) for text in texts]
    cleaned = [text for text in cleaned if text]
    if not cleaned:
        return ""

    parts = [cleaned[0]]
    for current, following in zip(cleaned, cleaned[1:]):
        parts.append(choose_separator(current, following))
        parts.append(following)
    return "".join(parts)

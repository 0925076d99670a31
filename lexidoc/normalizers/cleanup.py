"""
Lightweight normalization of aggregated document text.

This is the last pass over the final text: it tidies spacing,
line breaks and stray symbols left by recognition. It is independent of
the correction rule table and does not touch words.
"""

from __future__ import annotations

import re

from lexidoc.models import AutoCorrections

# =============================================================================
# PATTERNS
# =============================================================================

SPACE_RUN = re.compile(r"[^\S\n]{3,}")
NEWLINE_RUN = re.compile(r"\n{4,}")
GLUED_SENTENCE = re.compile(r"([.!?])([A-ZÀÂÄÇÉÈÊËÏÎÔÙÛÜŸÑÆŒ])")
TRAILING_SPACES = re.compile(r"[ \t]+$", re.MULTILINE)

# Anything that is not a word character, whitespace, Arabic, or expected
# punctuation (page markers use "=", dates use "/")
NOISE_CHARS = re.compile(r"[^\w\s\u0600-\u06FF.,;:!?()\[\]{}«»\"'/%=\-]")

LENGTH_SUGGESTION = "Normalized spacing and removed unrecognized characters"
SPACES_SUGGESTION = "Collapsed runs of multiple spaces"
NEWLINES_SUGGESTION = "Normalized excessive line breaks"


# =============================================================================
# NORMALIZATION
# =============================================================================


def normalize_aggregated_text(text: str) -> str:
    """
    Tidy the final aggregated text.

    - Unrecognized symbols are removed
    - Horizontal whitespace runs of 3+ become two spaces
    - Sentence punctuation glued to a capital gets a space
    - Four or more newlines become three
    - Trailing spaces on each line are removed

    Example:
        >>> normalize_aggregated_text("Fin.Article 2     suite\\n\\n\\n\\n\\nX")
        'Fin. Article 2  suite\\n\\n\\nX'
    """
    # Symbols go first so the gaps they leave are collapsed too
    text = NOISE_CHARS.sub("", text)
    text = SPACE_RUN.sub("  ", text)
    text = GLUED_SENTENCE.sub(r"\1 \2", text)
    text = NEWLINE_RUN.sub("\n\n\n", text)
    text = TRAILING_SPACES.sub("", text)
    return text.strip()


def diff_auto_corrections(original: str, normalized: str) -> AutoCorrections:
    """
    Summarize what normalization changed.

    Counts one correction each for a length change, for runs of 3+
    spaces in the original, and for runs of 4+ newlines in the original.
    """
    corrections = AutoCorrections()

    if len(original) != len(normalized):
        corrections.applied += 1
        corrections.suggestions.append(LENGTH_SUGGESTION)

    if SPACE_RUN.search(original):
        corrections.applied += 1
        corrections.suggestions.append(SPACES_SUGGESTION)

    if NEWLINE_RUN.search(original):
        corrections.applied += 1
        corrections.suggestions.append(NEWLINES_SUGGESTION)

    return corrections

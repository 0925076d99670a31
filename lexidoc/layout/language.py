"""
Page-level language classification.

The OCR engine tags every region as ar, fr or mixed. A page is mixed
when a sizeable share of its regions is mixed; otherwise the majority
script wins, with French as the default.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from lexidoc.models import Language

ARABIC_CHAR = re.compile(r"[\u0600-\u06FF]")
LATIN_CHAR = re.compile(r"[a-zA-ZÀ-ÿ]")

# Share of mixed regions above which the whole page counts as mixed
MIXED_RATIO = 0.3


def has_arabic(text: str) -> bool:
    """Whether the text contains any Arabic-block code point."""
    return ARABIC_CHAR.search(text) is not None


def detect_language(text: str) -> Language:
    """
    Infer a coarse language tag from region text.

    Used when the OCR engine did not provide a usable tag.
    """
    arabic = has_arabic(text)
    latin = LATIN_CHAR.search(text) is not None
    if arabic and latin:
        return Language.MIXED
    if arabic:
        return Language.ARABIC
    return Language.FRENCH


@dataclass
class LanguageTally:
    """Running count of region languages on one page."""

    ar: int = 0
    fr: int = 0
    mixed: int = 0

    def add(self, language: Language) -> None:
        if language is Language.ARABIC:
            self.ar += 1
        elif language is Language.MIXED:
            self.mixed += 1
        else:
            self.fr += 1

    @property
    def total(self) -> int:
        return self.ar + self.fr + self.mixed

    def dominant(self, mixed_ratio: float = MIXED_RATIO) -> Language:
        """
        Dominant language of the tallied regions.

        Mixed if more than ``mixed_ratio`` of regions are mixed, else Arabic
        if Arabic outnumbers French, else French. An empty tally is French.
        """
        if self.total == 0:
            return Language.FRENCH
        if self.mixed / self.total > mixed_ratio:
            return Language.MIXED
        if self.ar > self.fr:
            return Language.ARABIC
        return Language.FRENCH


def dominant_language(
    languages: Iterable[Language],
    mixed_ratio: float = MIXED_RATIO,
) -> Language:
    """Classify a page from the language tags of its non-empty regions."""
    tally = LanguageTally()
    for language in languages:
        tally.add(language)
    return tally.dominant(mixed_ratio)

"""
Rule-based OCR correction for Arabic legal text.

The engine applies an ordered rule table in fixed stages:

1. Directional-marker stripping (LRM, RLM, embeddings, overrides, isolates)
2. Word re-splitting (literal phrase fixes, number-before-noun reordering,
   letter/digit boundaries)
3. Presentation-form ligature normalization
4. Legal vocabulary fixes for common misrecognitions
5. Whitespace normalization

Later stages rely on earlier ones: legal patterns assume markers are gone
and concatenated words are split. A pass is repeated until the text stops
changing, so correcting an already corrected text is a no-op.

Example:
    >>> from lexidoc.normalizers import correct_ocr_text
    >>> result = correct_ocr_text("مرسومرقم 20-01")
    >>> result.corrected_text
    'رقم مرسوم 20-01'
    >>> result.words_separated
    1
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from lexidoc.normalizers.rules import RuleTable, default_rule_table

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Passes allowed on top of one per input character before giving up
PASS_MARGIN = 4

# Horizontal whitespace runs collapsed by the last stage (newlines survive)
SPACE_RUN = re.compile(r"[ \t]{3,}")
SPACE_RUN_REPLACEMENT = "  "


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class CorrectionResult:
    """
    Result of running the correction rule table over a text.

    Attributes:
        original_text: Input text.
        corrected_text: Output text, a fixed point of the rule table
            whenever settled is True.
        corrections: Human-readable log of what fired, in stage order.
        words_separated: Word-separation rules that changed the text.
        ligatures_fixed: Ligature rules that changed the text.
        rtl_fixed: Whether directional markers were removed.
        legal_fixed: Legal vocabulary rules that changed the text.
        passes: Passes over the text, the last one changing nothing.
        settled: False only when the pass limit cut the loop short.
    """

    original_text: str
    corrected_text: str
    corrections: list[str] = field(default_factory=list)
    words_separated: int = 0
    ligatures_fixed: int = 0
    rtl_fixed: bool = False
    legal_fixed: int = 0
    passes: int = 0
    settled: bool = True

    @property
    def change_count(self) -> int:
        """Number of distinct rules that changed the text."""
        return (
            self.words_separated + self.ligatures_fixed + self.legal_fixed + int(self.rtl_fixed)
        )

    @property
    def was_modified(self) -> bool:
        """Whether any changes were made."""
        return self.original_text != self.corrected_text

    def to_dict(self) -> dict[str, Any]:
        return {
            "correctedText": self.corrected_text,
            "corrections": list(self.corrections),
            "wordsSeparated": self.words_separated,
            "ligaturesFixed": self.ligatures_fixed,
            "rtlFixed": self.rtl_fixed,
            "legalFixed": self.legal_fixed,
        }


@dataclass
class _PassStats:
    """Rules that fired during one correct() call, by table index."""

    markers_removed: int = 0
    separations: set[int] = field(default_factory=set)
    ligatures: set[int] = field(default_factory=set)
    legal: set[int] = field(default_factory=set)


# =============================================================================
# CORRECTION ENGINE
# =============================================================================


class CorrectionEngine:
    """
    Applies the ordered correction rule table to text.

    The engine holds only its compiled, immutable rule table, so one
    instance can serve any number of documents and threads.

    The pass is repeated until the text stops changing. With the bundled
    table this always happens: a pass that changes the text either deletes
    code points no rule produces (directional marks, ligatures), puts a
    space between two characters that touched, or replaces a misreading
    with a canonical form no legal rule rewrites. Each of these can happen
    at most once per character, so ``len(text) + PASS_MARGIN`` passes are
    enough. The limit only matters for custom tables whose rules undo each
    other; hitting it logs a warning and sets ``settled=False``.

    Attributes:
        rules: Compiled rule table.
        max_passes: Fixed pass limit, or None to derive it from the text.
    """

    def __init__(
        self,
        rules: RuleTable | None = None,
        max_passes: int | None = None,
    ):
        """
        Initialize the engine.

        Args:
            rules: Rule table to apply. None uses the bundled table.
            max_passes: Maximum passes over the text. None allows one per
                input character plus PASS_MARGIN.
        """
        self.rules = rules if rules is not None else default_rule_table()
        self.max_passes = None if max_passes is None else max(1, max_passes)

    def pass_limit(self, text: str) -> int:
        """Passes allowed for text before correction gives up."""
        if self.max_passes is not None:
            return self.max_passes
        return len(text) + PASS_MARGIN

    def correct(self, text: str) -> CorrectionResult:
        """
        Correct OCR text.

        Args:
            text: Text to correct.

        Returns:
            CorrectionResult whose corrected_text is left unchanged by a
            second call.
        """
        if not text:
            return CorrectionResult(original_text="", corrected_text="")

        stats = _PassStats()
        limit = self.pass_limit(text)
        current = text
        passes = 0
        settled = False

        while passes < limit:
            passes += 1
            rewritten = self._run_pass(current, stats)
            if rewritten == current:
                settled = True
                break
            current = rewritten

        if not settled:
            logger.warning(
                "Correction did not settle after %d passes (%d chars)",
                passes,
                len(text),
            )

        corrections: list[str] = []
        if stats.markers_removed:
            corrections.append(
                f"RTL/LTR marker cleanup: {stats.markers_removed} directional markers removed"
            )
        corrections.extend(
            f"Word separation: {rule.description}"
            for index, rule in enumerate(self.rules.word_separation)
            if index in stats.separations
        )
        if stats.ligatures:
            corrections.append(f"Ligatures fixed: {len(stats.ligatures)}")
        if stats.legal:
            corrections.append(f"Legal corrections: {len(stats.legal)}")

        return CorrectionResult(
            original_text=text,
            corrected_text=current,
            corrections=corrections,
            words_separated=len(stats.separations),
            ligatures_fixed=len(stats.ligatures),
            rtl_fixed=stats.markers_removed > 0,
            legal_fixed=len(stats.legal),
            passes=passes,
            settled=settled,
        )

    def _run_pass(self, text: str, stats: _PassStats) -> str:
        """Apply every stage once, in order."""
        # Stage 1: directional markers
        stripped = self.rules.bidi_markers.sub("", text)
        stats.markers_removed += len(text) - len(stripped)
        text = stripped

        # Stage 2: word separation. A rule is reapplied until it stops
        # matching so chains like "قانونرقمرقم" unwind in one pass; each
        # application splits a pair of touching characters.
        for index, rule in enumerate(self.rules.word_separation):
            for _ in range(len(text) + 1):
                text, changed = rule.apply(text)
                if not changed:
                    break
                if index not in stats.separations:
                    stats.separations.add(index)
                    logger.debug("Word separation fired: %s", rule.description)

        # Stage 3: ligatures
        for index, rule in enumerate(self.rules.ligatures):
            text, changed = rule.apply(text)
            if changed:
                stats.ligatures.add(index)

        # Stage 4: legal vocabulary
        for index, rule in enumerate(self.rules.legal_terms):
            text, changed = rule.apply(text)
            if changed and index not in stats.legal:
                stats.legal.add(index)
                logger.debug("Legal correction fired: %s", rule.description)

        # Stage 5: whitespace
        return SPACE_RUN.sub(SPACE_RUN_REPLACEMENT, text).strip()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def correct_ocr_text(text: str, rules: RuleTable | None = None) -> CorrectionResult:
    """
    Correct OCR text with a fresh engine.

    Args:
        text: Text to correct.
        rules: Optional rule table (bundled table if None).

    Returns:
        CorrectionResult with corrections.
    """
    return CorrectionEngine(rules).correct(text)

"""
Correction rule table loading.

The rewrite rules live in a YAML data file so they can be reviewed and
extended without touching control flow. The table is parsed and every
pattern compiled once; a table that fails to load is a defect and raises
RuleTableError immediately rather than surfacing while text is corrected.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from lexidoc.exceptions import RuleTableError

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_RULES_PATH = Path(__file__).parent / "rules" / "arabic_legal.yaml"

SECTIONS = ("bidi_markers", "word_separation", "ligatures", "legal_terms")
WORD_FAMILIES = frozenset({"literal", "reorder", "digits"})

GROUP_REFERENCE = re.compile(r"\\g<(\d+)>|\\(\d+)")


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class CorrectionRule:
    """A single pattern -> replacement rewrite."""

    pattern: re.Pattern[str]
    replacement: str
    description: str
    family: str = "literal"

    def apply(self, text: str) -> tuple[str, bool]:
        """
        Apply the rule to every match in ``text``.

        Returns:
            Tuple of (rewritten text, whether the text changed).
        """
        rewritten = self.pattern.sub(self.replacement, text)
        return rewritten, rewritten != text


@dataclass(frozen=True)
class RuleTable:
    """
    Ordered rule sections, in the order the correction stages run.

    Attributes:
        bidi_markers: Character class matching every directional control.
        marker_names: Human-readable names of the stripped controls.
        word_separation: Rules splitting concatenated tokens.
        ligatures: Presentation-form to base-letter rewrites.
        legal_terms: Fixes for misrecognized legal vocabulary.
        source: File the table was loaded from.
    """

    bidi_markers: re.Pattern[str]
    marker_names: tuple[str, ...]
    word_separation: tuple[CorrectionRule, ...]
    ligatures: tuple[CorrectionRule, ...]
    legal_terms: tuple[CorrectionRule, ...]
    source: Path | None = None

    @property
    def rule_count(self) -> int:
        return len(self.word_separation) + len(self.ligatures) + len(self.legal_terms)


# =============================================================================
# LOADING
# =============================================================================


def _compile_rule(entry: Any, section: str, index: int) -> CorrectionRule:
    where = f"{section}[{index}]"
    if not isinstance(entry, dict):
        raise RuleTableError(f"{where}: expected a mapping, got {type(entry).__name__}")

    pattern_text = entry.get("pattern")
    replacement = entry.get("replacement")
    if not isinstance(pattern_text, str) or not pattern_text:
        raise RuleTableError(f"{where}: missing pattern")
    if not isinstance(replacement, str):
        raise RuleTableError(f"{where}: missing replacement")

    try:
        pattern = re.compile(pattern_text)
    except re.error as e:
        raise RuleTableError(f"{where}: invalid pattern {pattern_text!r}: {e}") from e

    # re.sub only validates group references on the first match
    for match in GROUP_REFERENCE.finditer(replacement):
        group = int(match.group(1) or match.group(2))
        if group > pattern.groups:
            raise RuleTableError(
                f"{where}: replacement refers to group {group}, "
                f"pattern has {pattern.groups}"
            )

    family = entry.get("family", "literal")
    if section == "word_separation" and family not in WORD_FAMILIES:
        raise RuleTableError(f"{where}: unknown family {family!r}")

    return CorrectionRule(
        pattern=pattern,
        replacement=replacement,
        description=str(entry.get("description") or pattern_text),
        family=family,
    )


def _compile_markers(entries: list[Any]) -> tuple[re.Pattern[str], tuple[str, ...]]:
    chars: list[str] = []
    names: list[str] = []
    for index, entry in enumerate(entries):
        char = entry.get("char") if isinstance(entry, dict) else None
        if not isinstance(char, str) or len(char) != 1:
            raise RuleTableError(f"bidi_markers[{index}]: expected a single character")
        chars.append(char)
        names.append(str(entry.get("name") or f"U+{ord(char):04X}"))

    if not chars:
        raise RuleTableError("bidi_markers: section is empty")

    pattern = re.compile("[" + "".join(re.escape(c) for c in chars) + "]")
    return pattern, tuple(names)


def parse_rule_table(data: Any, source: Path | None = None) -> RuleTable:
    """
    Build a RuleTable from already-parsed YAML data.

    Raises:
        RuleTableError: If a section is missing or a rule is malformed.
    """
    if not isinstance(data, dict):
        raise RuleTableError(f"Rule table must be a mapping, got {type(data).__name__}")

    for section in SECTIONS:
        if not isinstance(data.get(section), list):
            raise RuleTableError(f"Rule table is missing section {section!r}")

    markers, marker_names = _compile_markers(data["bidi_markers"])

    def compile_section(section: str) -> tuple[CorrectionRule, ...]:
        return tuple(
            _compile_rule(entry, section, index) for index, entry in enumerate(data[section])
        )

    return RuleTable(
        bidi_markers=markers,
        marker_names=marker_names,
        word_separation=compile_section("word_separation"),
        ligatures=compile_section("ligatures"),
        legal_terms=compile_section("legal_terms"),
        source=source,
    )


def load_rule_table(path: str | Path | None = None) -> RuleTable:
    """
    Load and compile a rule table from YAML.

    Args:
        path: Rule file. None loads the bundled Arabic legal table.

    Returns:
        Compiled RuleTable.

    Raises:
        RuleTableError: If the file is unreadable, malformed, or contains
            an invalid rule.
    """
    path = Path(path) if path is not None else DEFAULT_RULES_PATH

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise RuleTableError(f"Cannot read rule table {path}: {e}") from e
    except yaml.YAMLError as e:
        raise RuleTableError(f"Malformed rule table {path}: {e}") from e

    table = parse_rule_table(data, source=path)
    logger.debug(
        "Loaded %d correction rules from %s",
        table.rule_count,
        path,
    )
    return table


@lru_cache(maxsize=1)
def default_rule_table() -> RuleTable:
    """Return the bundled rule table, compiled once per process."""
    return load_rule_table(DEFAULT_RULES_PATH)

"""
Normalizers for transforming aggregated OCR text.

- CorrectionEngine: ordered rule table for Arabic legal OCR text
  (directional markers, glued words, ligatures, legal vocabulary)
- normalize_aggregated_text: lightweight final tidy-up of the document
- load_rule_table: YAML rule table loader
"""

from lexidoc.normalizers.cleanup import (
    diff_auto_corrections,
    normalize_aggregated_text,
)
from lexidoc.normalizers.correction import (
    PASS_MARGIN,
    CorrectionEngine,
    CorrectionResult,
    correct_ocr_text,
)
from lexidoc.normalizers.rules import (
    DEFAULT_RULES_PATH,
    CorrectionRule,
    RuleTable,
    default_rule_table,
    load_rule_table,
    parse_rule_table,
)

__all__ = [
    # Correction
    "CorrectionEngine",
    "CorrectionResult",
    "PASS_MARGIN",
    "correct_ocr_text",
    # Rule tables
    "CorrectionRule",
    "RuleTable",
    "DEFAULT_RULES_PATH",
    "default_rule_table",
    "load_rule_table",
    "parse_rule_table",
    # Final cleanup
    "normalize_aggregated_text",
    "diff_auto_corrections",
]

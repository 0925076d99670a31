"""
Tests for the Arabic legal OCR correction engine and its rule table.
"""

import logging
import random

import pytest
import yaml

from lexidoc import RuleTableError
from lexidoc.normalizers import (
    DEFAULT_RULES_PATH,
    PASS_MARGIN,
    CorrectionEngine,
    correct_ocr_text,
    default_rule_table,
    load_rule_table,
    parse_rule_table,
)

# Texts as they come out of the recognizer, used for the fixed-point checks
OCR_CORPUS = [
    "",
    "   ",
    "Article 1. Le présent décret sera publié au Journal officiel.",
    "مرسومرقم 20-01",
    "مرسوم تنفيذيرقم 15-07 المؤرخفي12 مارس 2015",
    "القرارنقم 5 والمتضمنالقانون الأساسي",
    "الجمهوريةالجزائرية الديمقراطيةالشعبية",
    "AS élu 29 في E33a",
    "\u200fالمادة12\u200e من القانونرقم 90",
    "الموافقل 12 يناير",
    "ولايه الجزائر دايرة بئر مراد رايس بلديه حيدرة",
    "\ufefb\ufefcحكم \ufdf2",
    "في   شهر   جانفي   سنة2020",
    "رئبس الجماورية وزبر العدل",
    "Vu la loi n° 90-08 du 7 avril 1990 relative à la commune, بناءعلى الدستور",
    "=== PAGE 1 ===\nمرسومرقم\n\n=== PAGE 2 ===\nDécret     exécutif",
]

REGEX_SYNTAX = set("\\()[]{}|?*+.^$")


def _table_tokens():
    """Plain-text patterns and replacements of the bundled table, plus glue."""
    data = yaml.safe_load(DEFAULT_RULES_PATH.read_text(encoding="utf-8"))
    tokens = {marker["char"] for marker in data["bidi_markers"]}
    for section in ("word_separation", "ligatures", "legal_terms"):
        for rule in data[section]:
            for value in (rule["pattern"], rule["replacement"]):
                if value.strip() and not REGEX_SYNTAX & set(value):
                    tokens.add(value)
    tokens.update(["رقم", "مرسوم", "قرار", "قانون", "تنفيذي", "في", "شهر", "سنة", "12", "2020"])
    return sorted(tokens)


TABLE_TOKENS = _table_tokens()


class TestRuleTable:
    """Tests for loading the YAML rule table."""

    def test_bundled_table_loads(self):
        table = load_rule_table()

        assert table.source == DEFAULT_RULES_PATH
        assert len(table.marker_names) == 11
        assert table.word_separation
        assert len(table.ligatures) == 7
        assert table.legal_terms
        assert table.rule_count == (
            len(table.word_separation) + len(table.ligatures) + len(table.legal_terms)
        )

    def test_bundled_table_cached(self):
        assert default_rule_table() is default_rule_table()

    def test_word_rules_have_known_families(self):
        families = {rule.family for rule in default_rule_table().word_separation}
        assert families == {"literal", "reorder", "digits"}

    def test_custom_table(self, rule_table_file, minimal_rules):
        table = load_rule_table(rule_table_file(minimal_rules))
        result = CorrectionEngine(table).correct("\u200ffoobar Decret")

        assert result.corrected_text == "foo bar Décret"
        assert result.words_separated == 1
        assert result.legal_fixed == 1
        assert result.rtl_fixed

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleTableError, match="Cannot read"):
            load_rule_table(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("word_separation: [\n", encoding="utf-8")
        with pytest.raises(RuleTableError, match="Malformed"):
            load_rule_table(path)

    def test_not_a_mapping(self):
        with pytest.raises(RuleTableError, match="must be a mapping"):
            parse_rule_table(["a", "b"])

    @pytest.mark.parametrize(
        "section", ["bidi_markers", "word_separation", "ligatures", "legal_terms"]
    )
    def test_missing_section(self, minimal_rules, section):
        del minimal_rules[section]
        with pytest.raises(RuleTableError, match=section):
            parse_rule_table(minimal_rules)

    def test_empty_markers(self, minimal_rules):
        minimal_rules["bidi_markers"] = []
        with pytest.raises(RuleTableError, match="empty"):
            parse_rule_table(minimal_rules)

    def test_invalid_pattern(self, minimal_rules):
        minimal_rules["legal_terms"].append({"pattern": "(unclosed", "replacement": "x"})
        with pytest.raises(RuleTableError, match=r"legal_terms\[1\]"):
            parse_rule_table(minimal_rules)

    def test_missing_replacement(self, minimal_rules):
        minimal_rules["ligatures"].append({"pattern": "x"})
        with pytest.raises(RuleTableError, match="missing replacement"):
            parse_rule_table(minimal_rules)

    def test_bad_group_reference(self, minimal_rules):
        minimal_rules["word_separation"].append(
            {"family": "reorder", "pattern": "(a)(b)", "replacement": "\\g<3> \\g<1>"}
        )
        with pytest.raises(RuleTableError, match="group 3"):
            parse_rule_table(minimal_rules)

    def test_unknown_family(self, minimal_rules):
        minimal_rules["word_separation"][0]["family"] = "phonetic"
        with pytest.raises(RuleTableError, match="unknown family"):
            parse_rule_table(minimal_rules)

    def test_bad_marker(self, minimal_rules):
        minimal_rules["bidi_markers"].append({"char": "ab"})
        with pytest.raises(RuleTableError, match="single character"):
            parse_rule_table(minimal_rules)


class TestDirectionalMarkers:
    """Tests for bidi control stripping."""

    def test_markers_removed(self):
        result = correct_ocr_text("\u200fقرار\u200e وزاري\u202b")

        assert result.corrected_text == "قرار وزاري"
        assert result.rtl_fixed is True
        assert result.corrections[0] == (
            "RTL/LTR marker cleanup: 3 directional markers removed"
        )

    @pytest.mark.parametrize("marker", ["\u2066", "\u2067", "\u2068", "\u2069", "\u202e"])
    def test_isolates_and_overrides(self, marker):
        assert correct_ocr_text(f"Art{marker}icle").corrected_text == "Article"

    def test_no_markers(self):
        result = correct_ocr_text("Article 1")
        assert result.rtl_fixed is False
        assert result.corrections == []


class TestWordSeparation:
    """Tests for splitting concatenated tokens."""

    def test_number_before_decree(self):
        """Decree glued to number is reordered number-first."""
        result = correct_ocr_text("مرسومرقم")

        assert "رقم مرسوم" in result.corrected_text
        assert result.words_separated >= 1
        assert any(c.startswith("Word separation:") for c in result.corrections)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("قراررقم", "رقم قرار"),
            ("المرسومرقم", "رقم المرسوم"),
            ("القرارنقم", "رقم القرار"),
            ("تنفيذيرقم", "رقم تنفيذي"),
        ],
    )
    def test_reorder(self, text, expected):
        assert correct_ocr_text(text).corrected_text == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("وزيرالعدل", "وزير العدل"),
            ("الجريدةالرسمية", "الجريدة الرسمية"),
            ("بناءعلى", "بناء على"),
            ("المديرالعام", "المدير العام"),
        ],
    )
    def test_literal_phrases(self, text, expected):
        assert correct_ocr_text(text).corrected_text == expected

    def test_article_number(self):
        result = correct_ocr_text("المادة12")

        assert result.corrected_text == "المادة 12"
        assert result.words_separated == 1

    def test_digits_both_sides(self):
        assert correct_ocr_text("سنة2020جانفي").corrected_text == "سنة 2020 جانفي"

    def test_counted_per_rule_not_per_match(self):
        result = correct_ocr_text("وزيرالعدل و وزيرالعدل")

        assert result.corrected_text == "وزير العدل و وزير العدل"
        assert result.words_separated == 1

    def test_french_untouched(self):
        text = "Décret exécutif n° 15-07 du 12 mars 2015"
        result = correct_ocr_text(text)

        assert result.corrected_text == text
        assert not result.was_modified


class TestLigatures:
    """Tests for presentation-form normalization."""

    def test_lam_alif(self):
        result = correct_ocr_text("\ufefb")

        assert result.corrected_text == "لا"
        assert result.ligatures_fixed == 1
        assert "Ligatures fixed: 1" in result.corrections

    def test_several_forms(self):
        result = correct_ocr_text("\ufefb \ufefc \ufdf2")

        assert result.corrected_text == "لا لا الله"
        assert result.ligatures_fixed == 3


class TestLegalTerms:
    """Tests for legal vocabulary fixes."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("الجماورية", "الجمهورية"),
            ("الدبمقراطية", "الديمقراطية"),
            ("الجزايرية", "الجزائرية"),
            ("رئبس الجمهورية", "رئيس الجمهورية"),
            ("وذير المالية", "وزير المالية"),
            ("المؤرح في", "المؤرخ في"),
            ("الجزيدة الرسمية", "الجريدة الرسمية"),
            ("ولايه", "ولاية"),
            ("دايرة", "دائرة"),
            ("بلديه", "بلدية"),
        ],
    )
    def test_variants(self, text, expected):
        assert correct_ocr_text(text).corrected_text == expected

    def test_garbled_header(self):
        result = correct_ocr_text("AS élu 29 في E33a")
        assert result.corrected_text == "الجمهورية الجزائرية الديمقراطية الشعبية"

    def test_legal_entry_is_collective(self):
        result = correct_ocr_text("الجماورية ولايه")

        assert result.legal_fixed == 2
        assert result.corrections == ["Legal corrections: 2"]

    def test_words_with_suffix_untouched(self):
        """A variant that is the prefix of a longer word is left alone."""
        assert correct_ocr_text("ولايتها").corrected_text == "ولايتها"

    def test_corresponding_to(self):
        assert correct_ocr_text("الموافقل 12 يناير").corrected_text == "الموافق لـ 12 يناير"

    def test_month_year_phrase(self):
        assert correct_ocr_text("في  شهر  جانفي  سنة 2020").corrected_text == (
            "في شهر جانفي سنة 2020"
        )


class TestWhitespace:
    """Tests for the final whitespace stage."""

    def test_long_space_runs_collapsed(self):
        assert correct_ocr_text("Article     premier").corrected_text == "Article  premier"

    def test_two_spaces_kept(self):
        assert correct_ocr_text("Article  premier").corrected_text == "Article  premier"

    def test_newlines_preserved(self):
        text = "=== PAGE 1 ===\nTexte.\n\n=== PAGE 2 ===\nSuite."
        assert correct_ocr_text(text).corrected_text == text

    def test_trimmed(self):
        assert correct_ocr_text("  Article  \n").corrected_text == "Article"


class TestCorrectionResult:
    """Tests for the correction report."""

    def test_empty_text(self):
        result = correct_ocr_text("")

        assert result.corrected_text == ""
        assert result.corrections == []
        assert result.change_count == 0
        assert result.passes == 0

    def test_order_of_entries(self):
        result = correct_ocr_text("\u200fوزيرالعدل \ufefb الجماورية")

        assert result.corrections[0].startswith("RTL/LTR marker cleanup")
        assert result.corrections[1] == "Word separation: Minister of Justice"
        assert result.corrections[2] == "Ligatures fixed: 1"
        assert result.corrections[3] == "Legal corrections: 1"
        assert result.change_count == 4

    def test_to_dict(self):
        data = correct_ocr_text("المادة12").to_dict()

        assert data["correctedText"] == "المادة 12"
        assert data["wordsSeparated"] == 1
        assert data["ligaturesFixed"] == 0
        assert data["rtlFixed"] is False
        assert data["legalFixed"] == 0

    def test_pass_limit_warns(self, caplog):
        engine = CorrectionEngine(max_passes=1)
        with caplog.at_level(logging.WARNING, logger="lexidoc.normalizers.correction"):
            result = engine.correct("مرسومرقم")

        assert result.corrected_text == "رقم مرسوم"
        assert result.passes == 1
        assert result.settled is False
        assert "did not settle" in caplog.text

    def test_default_limit_follows_text_length(self):
        engine = CorrectionEngine()
        assert engine.pass_limit("abc") == 3 + PASS_MARGIN
        assert CorrectionEngine(max_passes=2).pass_limit("abc") == 2

    def test_rule_counted_once_across_passes(self, minimal_rules):
        """A rule firing in several passes is still one correction."""
        minimal_rules["legal_terms"].append(
            {"pattern": "fooXbar", "replacement": "foobar", "description": "stray X"}
        )
        engine = CorrectionEngine(parse_rule_table(minimal_rules))
        result = engine.correct("fooXbar foobar")

        assert result.corrected_text == "foo bar foo bar"
        assert result.passes == 3
        assert result.words_separated == 1
        assert result.legal_fixed == 1
        assert result.corrections == ["Word separation: foo and bar", "Legal corrections: 1"]


class TestIdempotence:
    """Correcting an already corrected text changes nothing."""

    @pytest.mark.parametrize("text", OCR_CORPUS)
    def test_fixed_point(self, text):
        engine = CorrectionEngine()
        first = engine.correct(text)
        second = engine.correct(first.corrected_text)

        assert second.corrected_text == first.corrected_text
        assert second.change_count == 0
        assert not second.was_modified
        assert first.settled

    @pytest.mark.parametrize("repeats", [1, 2, 3, 6, 12])
    def test_chained_number_words(self, repeats):
        """A run of glued "رقم" after a noun is unwound in a single pass."""
        result = correct_ocr_text("قانون" + "رقم" * repeats)

        assert result.corrected_text == " ".join(["رقم"] * repeats + ["قانون"])
        assert result.settled
        assert result.passes == 2
        assert result.words_separated == 1

    def test_chained_qualifier(self):
        result = correct_ocr_text("مرسوم تنفيذي" + "رقم" * 4)

        assert result.corrected_text == "مرسوم رقم رقم رقم رقم تنفيذي"
        assert correct_ocr_text(result.corrected_text).change_count == 0

    @pytest.mark.parametrize("seed", range(60))
    def test_random_table_fragments(self, seed):
        """Text glued together from rule-table fragments settles in one call."""
        rng = random.Random(seed)
        parts = []
        for _ in range(rng.randint(1, 12)):
            parts.append(rng.choice(TABLE_TOKENS))
            parts.append(rng.choice(["", "", "", " ", "\n"]))
        text = "".join(parts)

        engine = CorrectionEngine()
        first = engine.correct(text)
        second = engine.correct(first.corrected_text)

        assert first.settled, text
        assert second.corrected_text == first.corrected_text, text
        assert second.change_count == 0
        assert second.passes == 1

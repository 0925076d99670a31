"""
Pytest configuration and fixtures for LexiDoc tests.
"""

import pytest


@pytest.fixture(scope="session")
def default_config():
    """Return a default AggregationConfig for testing."""
    from lexidoc import AggregationConfig

    return AggregationConfig()


@pytest.fixture
def make_region():
    """Factory for raw OCR regions as the engine returns them."""

    def _make(text, x=0, y=0, confidence=0.9, language=None, entity_type=None):
        region = {
            "text": text,
            "bbox": {"x": x, "y": y, "width": 100, "height": 20},
            "confidence": confidence,
        }
        if language is not None:
            region["language"] = language
        if entity_type is not None:
            region["entityType"] = entity_type
        return region

    return _make


@pytest.fixture
def two_page_document(make_region):
    """Two pages with one sentence each."""
    return [
        [make_region("Page one text.")],
        [make_region("Page two text.")],
    ]


@pytest.fixture
def rule_table_file(tmp_path):
    """Write a rule table to a temporary YAML file and return its path."""
    import yaml

    def _write(data, name="rules.yaml"):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def minimal_rules():
    """Small valid rule table with an empty ligature section."""
    return {
        "version": 1,
        "bidi_markers": [{"char": "\u200f", "name": "RLM"}],
        "word_separation": [
            {
                "family": "literal",
                "pattern": "foobar",
                "replacement": "foo bar",
                "description": "foo and bar",
            }
        ],
        "ligatures": [],
        "legal_terms": [
            {"pattern": "Decret", "replacement": "Décret", "description": "accent"},
        ],
    }

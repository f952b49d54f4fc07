"""Tests for requirement encoding."""

import pytest

from av_boq.boq.encoder import ALL_SYSTEMS, CATCH_ALL_CATEGORY, SYSTEM_CATEGORIES, encode, requirements_text
from av_boq.core.errors import EmptyRequirementsError


def test_single_system_with_brand():
    """Test encoding one system with a brand preference."""
    text, categories = encode({"requiredSystems": ["display"], "displayBrands": ["Samsung"]})
    assert text == "requiredSystems: display; displayBrands: Samsung"
    assert set(categories) == {"Display", "Accessories & Services"}


def test_keys_appear_once_in_input_order():
    """Test that answer keys are emitted once in input order."""
    answers = {
        "roomType": "Boardroom",
        "capacity": 12,
        "emptyList": [],
        "notes": "",
        "audioBrands": ["Shure", "QSC"],
        "hasVc": True,
    }
    text = requirements_text(answers)
    assert text == "roomType: Boardroom; capacity: 12; audioBrands: Shure, QSC; hasVc: true"
    for key in ("roomType", "capacity", "audioBrands", "hasVc"):
        assert text.count(f"{key}:") == 1
    assert "emptyList" not in text
    assert "notes" not in text


def test_missing_required_systems_defaults_to_all():
    """Test that missing systems mean all categories."""
    _, categories = encode({"roomType": "Huddle"})
    expected = [c for system in ALL_SYSTEMS for c in SYSTEM_CATEGORIES[system]]
    assert categories == expected + [CATCH_ALL_CATEGORY]


def test_empty_required_systems_defaults_to_all():
    """Test that an empty systems list means all categories."""
    _, categories = encode({"roomType": "Huddle", "requiredSystems": []})
    assert "Acoustic Treatment" in categories
    assert "Display" in categories


def test_unknown_system_tags_are_ignored():
    """Test that unknown system tags add no category."""
    _, categories = encode({"requiredSystems": ["display", "lighting"]})
    assert categories == ["Display", CATCH_ALL_CATEGORY]


def test_single_string_system_tag():
    """Test a systems answer given as a single string."""
    _, categories = encode({"requiredSystems": "audio"})
    assert categories == [
        "Audio - Microphones",
        "Audio - DSP & Amplification",
        "Audio - Speakers",
        CATCH_ALL_CATEGORY,
    ]


@pytest.mark.parametrize("answers", [{}, {"a": "", "b": [], "c": 0, "d": None, "e": False}])
def test_empty_answers_raise(answers):
    """Test that answers with no content raise."""
    with pytest.raises(EmptyRequirementsError):
        encode(answers)

import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from contentful_migrator.engine.key_resolver import resolve_key_from_heading, slugify_heading

KEYS = ["agency", "food", "legal"]


def test_exact_match_is_case_insensitive():
    assert resolve_key_from_heading("  FOOD ", KEYS) == "food"


def test_word_match_on_hyphenated_slug():
    assert resolve_key_from_heading("area-agency-on-aging", KEYS) == "agency"


def test_prefix_match():
    assert resolve_key_from_heading("foodbank", KEYS) == "food"


def test_substring_match_is_last_resort():
    assert resolve_key_from_heading("paralegalaid", KEYS) == "legal"


def test_no_match_returns_none():
    assert resolve_key_from_heading("nonmatching-topic", KEYS) is None


def test_word_match_beats_prefix_match():
    # "legal" is a prefix, "food" is a whole word.
    keys = ["legal", "food"]
    assert resolve_key_from_heading("legalfood food", keys) == "food"


def test_ties_go_to_first_known_key():
    assert resolve_key_from_heading("food-and-legal-help", ["legal", "food"]) == "legal"
    assert resolve_key_from_heading("food-and-legal-help", ["food", "legal"]) == "food"


def test_known_keys_are_normalized():
    assert resolve_key_from_heading("utility-assistance", [" Utility ", "Food"]) == "utility"


def test_empty_known_keys_returns_normalized_hint():
    assert resolve_key_from_heading("  Veterans-Services ", []) == "veterans-services"


def test_blank_known_keys_never_match_everything():
    assert resolve_key_from_heading("anything", ["", "  "]) is None


def test_slugify_heading():
    assert slugify_heading("Area Agency on Aging") == "area-agency-on-aging"
    assert slugify_heading("  Food & Nutrition:  Programs! ") == "food-nutrition-programs"
    assert slugify_heading("") == ""

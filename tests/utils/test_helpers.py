"""
Tests for text and park path helpers used in push notifications.
"""
import pytest

from app.utils.helpers import build_park_path, generate_park_slug, truncate_text


class TestTruncateText:
    """Tests for truncate_text()."""

    def test_short_text_unchanged(self):
        assert truncate_text("Meet at 5?", 100) == "Meet at 5?"

    def test_exact_length_unchanged(self):
        text = "a" * 100
        assert truncate_text(text, 100, "...") == text

    def test_cut_without_suffix(self):
        assert truncate_text("b" * 150, 100) == "b" * 100

    def test_suffix_only_when_cut(self):
        assert truncate_text("c" * 101, 100, "...") == "c" * 100 + "..."


class TestParkSlug:
    """Tests for park slugs and deep-link paths."""

    @pytest.mark.parametrize("name,expected", [
        ("Sunnyside Dog Park", "sunnyside-dog-park"),
        ("  Barks & Recreation!  ", "barks-recreation"),
        ("Fido's -- Field", "fidos-field"),
        ("Park_Lane 2", "park_lane-2"),
    ])
    def test_generate_park_slug(self, name, expected):
        assert generate_park_slug(name) == expected

    def test_build_park_path(self):
        assert build_park_path("p1", "Sunnyside Dog Park", "New York") == "new-york/sunnyside-dog-park"

    @pytest.mark.parametrize("name,state", [(None, "Texas"), ("Zilker", None), ("", "")])
    def test_build_park_path_falls_back_to_id(self, name, state):
        assert build_park_path("p1", name, state) == "p1"

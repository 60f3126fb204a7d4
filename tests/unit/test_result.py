"""Tests for solr_facets.result module."""

import pytest

from solr_facets.result import Result


class TestResult:
    """Test cases for Result class."""

    def test_init_defaults(self):
        """Test display value defaults to the raw value."""
        result = Result("llama")
        assert result.raw_value == "llama"
        assert result.display_value == "llama"
        assert result.count == 0
        assert result.active is False
        assert result.url is None
        assert result.children == []

    def test_init_converts_types(self):
        """Test raw value and count are normalized."""
        result = Result(42, "Forty-two", "7")
        assert result.raw_value == "42"
        assert result.count == 7

    def test_setters(self):
        """Test mutators."""
        result = Result("llama", count=1)
        result.set_count(10)
        result.set_active_state(True)
        result.set_url("/search?f[0]=animal:llama")
        assert result.count == 10
        assert result.active is True
        assert result.url == "/search?f[0]=animal:llama"

    def test_to_dict_with_children(self):
        """Test nested results are converted."""
        parent = Result("mammal", "Mammal", 20)
        parent.set_children([Result("llama", count=10)])

        data = parent.to_dict()

        assert data["display_value"] == "Mammal"
        assert data["children"] == [{
            "raw_value": "llama",
            "display_value": "llama",
            "count": 10,
            "active": False,
            "url": None,
        }]

    def test_to_dict_without_children(self):
        """Test leaf results carry no children key."""
        assert "children" not in Result("llama").to_dict()

    def test_equality(self):
        """Test results compare by value."""
        assert Result("llama", count=10) == Result("llama", count=10)
        assert Result("llama", count=10) != Result("llama", count=9)
        assert Result("llama") != "llama"

    def test_unhashable(self):
        """Test results cannot be used in sets or as dict keys."""
        with pytest.raises(TypeError):
            hash(Result("llama"))

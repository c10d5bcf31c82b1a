"""Tests for query, file and attribute naming helpers."""

import pytest

from nodegql.naming import attribute_name_from_getter, decapitalize, is_getter_name, pluralize


class TestPluralize:
    """Test the simple suffix pluralization rule."""

    @pytest.mark.parametrize(
        ("word", "plural"),
        [
            ("Category", "Categories"),
            ("Address", "Addresses"),
            ("Person", "Persons"),
            ("Day", "Days"),
            ("Box", "Boxes"),
            ("Match", "Matches"),
            ("Wish", "Wishes"),
            ("Key", "Keys"),
        ],
    )
    def test_plural(self, word, plural):
        assert pluralize(word) == plural

    def test_deterministic(self):
        assert pluralize("Category") == pluralize("Category")


class TestDecapitalize:
    def test_first_letter_lowered(self):
        assert decapitalize("Widget") == "widget"

    def test_rest_untouched(self):
        assert decapitalize("LineItem") == "lineItem"

    def test_empty(self):
        assert decapitalize("") == ""


class TestGetterNames:
    @pytest.mark.parametrize("name", ["getName", "isActive", "getX"])
    def test_getters(self, name):
        assert is_getter_name(name)

    @pytest.mark.parametrize("name", ["get", "is", "name", "toString"])
    def test_non_getters(self, name):
        assert not is_getter_name(name)

    def test_attribute_name(self):
        assert attribute_name_from_getter("getFirstName") == "firstName"
        assert attribute_name_from_getter("isActive") == "active"

"""Tests for class-name and slot-name inflection helpers."""

import keyword

import pytest
from hypothesis import given, settings
from strategies import class_names, component_class_names, slot_names, variant_names

from tessera.utils import identifier, pluralize, remove_suffix, underscore


class TestUnderscore:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("CardComponent", "card_component"),
            ("HTMLButtonComponent", "html_button_component"),
            ("Card2Component", "card2_component"),
            ("Card", "card"),
        ],
    )
    def test_examples(self, name, expected) -> None:
        assert underscore(name) == expected

    @settings(max_examples=200)
    @given(class_names)
    def test_result_is_lowercase_identifier(self, name) -> None:
        result = underscore(name)
        assert result == result.lower()
        assert result.isidentifier()
        assert not result.startswith("_")

    @given(component_class_names)
    def test_component_suffix_survives(self, name) -> None:
        assert underscore(name).endswith("_component")

    @given(class_names)
    def test_idempotent(self, name) -> None:
        assert underscore(underscore(name)) == underscore(name)


class TestRemoveSuffix:
    def test_removes_suffix(self) -> None:
        assert remove_suffix("card_component", "_component") == "card"

    def test_keeps_other_names(self) -> None:
        assert remove_suffix("card", "_component") == "card"

    def test_never_empties_a_name(self) -> None:
        assert remove_suffix("Preview", "Preview") == "Preview"


class TestPluralize:
    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("tab", "tabs"),
            ("entry", "entries"),
            ("day", "days"),
            ("box", "boxes"),
            ("match", "matches"),
            ("dish", "dishes"),
            ("child", "children"),
            ("person", "people"),
            ("news", "news"),
            ("nav_item", "nav_items"),
            ("table_entry", "table_entries"),
        ],
    )
    def test_examples(self, word, expected) -> None:
        assert pluralize(word) == expected

    @given(slot_names)
    def test_prefix_is_kept(self, name) -> None:
        head, _, _ = name.rpartition("_")
        assert pluralize(name).startswith(head)

    @settings(max_examples=200)
    @given(slot_names)
    def test_plural_differs_or_is_uncountable(self, name) -> None:
        plural = pluralize(name)
        assert plural != name or name.rpartition("_")[2] in {
            "info",
            "information",
            "media",
            "metadata",
            "news",
            "series",
        }


class TestIdentifier:
    def test_replaces_dashes(self) -> None:
        assert identifier("mini-phone") == "mini_phone"

    @given(variant_names)
    def test_variant_method_names_are_identifiers(self, variant) -> None:
        name = f"call_{identifier(variant)}"
        assert name.isidentifier()
        assert not keyword.iskeyword(name)

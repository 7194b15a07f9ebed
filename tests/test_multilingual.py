"""
Multilingual content resolver tests
"""

import pytest

from src.domain.value_objects.multilingual_text import (
    MultilingualText,
    PlainText,
    get_available_languages,
    is_multilingual,
    resolve,
    string_to_translation_object,
    to_content,
    validate_translations,
)


class TestResolve:
    """Test resolving content for a language"""

    def test_requested_language(self):
        assert resolve({"en": "Hello", "ar": "مرحبا"}, "ar") == "مرحبا"

    def test_plain_string_is_returned_unchanged(self):
        assert resolve("Hello", "ar") == "Hello"

    def test_blank_translation_falls_back_to_english(self):
        assert resolve({"en": "Hello", "ar": ""}, "ar") == "Hello"
        assert resolve({"en": "Hello", "ar": "   "}, "ar") == "Hello"

    def test_falls_back_to_first_non_empty_value(self):
        assert resolve({"en": "", "ar": "", "he": "שלום"}, "ar") == "שלום"

    def test_custom_fallback_language(self):
        assert resolve({"en": "Hello", "he": "שלום"}, "ar", fallback_language="he") == "שלום"

    @pytest.mark.parametrize("content", [None, {}, {"en": "", "ar": ""}, 42, ["en"]])
    def test_nothing_to_show_gives_empty_string(self, content):
        assert resolve(content, "en") == ""

    def test_tagged_values(self):
        assert resolve(PlainText("Bit"), "he") == "Bit"
        assert resolve(MultilingualText({"en": "Bit", "he": "מתג"}), "he") == "מתג"


class TestToContent:
    """Test the conversion at the data-access boundary"""

    def test_string_becomes_plain_text(self):
        assert to_content("Halter") == PlainText("Halter")

    def test_mapping_drops_non_string_values(self):
        content = to_content({"en": "Halter", "ar": None, "he": 3})
        assert isinstance(content, MultilingualText)
        assert content.to_dict() == {"en": "Halter"}

    def test_unknown_shapes_are_none(self):
        assert to_content(None) is None
        assert to_content(12.5) is None

    def test_multilingual_text_is_immutable(self):
        content = MultilingualText({"en": "Halter"})
        with pytest.raises(TypeError):
            content.translations["en"] = "Other"


class TestIsMultilingual:
    """Test multilingual detection"""

    def test_mapping_with_language_key(self):
        assert is_multilingual({"en": ""}) is True
        assert is_multilingual({"he": "x", "other": "y"}) is True

    def test_other_values(self):
        assert is_multilingual("Hello") is False
        assert is_multilingual({"fr": "Bonjour"}) is False
        assert is_multilingual(["en"]) is False
        assert is_multilingual(None) is False

    def test_tagged_value(self):
        assert is_multilingual(MultilingualText({"ar": "x"})) is True


class TestTranslationHelpers:
    """Test legacy conversion and validation helpers"""

    def test_available_languages(self):
        assert get_available_languages({"en": "Hi", "ar": " ", "he": "היי"}) == ["en", "he"]
        assert get_available_languages("Hi") == []

    def test_string_to_translation_object(self):
        assert string_to_translation_object("Girth") == {"en": "Girth", "ar": "Girth", "he": "Girth"}
        assert string_to_translation_object("") == {"en": "", "ar": "", "he": ""}
        assert string_to_translation_object(None) == {"en": "", "ar": "", "he": ""}

    def test_validate_translations(self):
        assert validate_translations({"en": "a", "ar": "b", "he": "c"}) == {"valid": True, "missing": []}
        assert validate_translations({"en": "a"}) == {"valid": False, "missing": ["ar", "he"]}
        assert validate_translations({"en": "a"}, allow_partial=True)["valid"] is True
        assert validate_translations({}, allow_partial=True)["valid"] is False
        assert validate_translations("a")["valid"] is False

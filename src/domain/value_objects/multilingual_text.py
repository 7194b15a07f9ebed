"""
Multilingual text value objects

Catalog content is stored either as a legacy plain string or as a mapping
of language code to text ({"en": ..., "ar": ..., "he": ...}). Raw values
are converted once, at the data-access boundary, into one of two tagged
types and resolved for display with a deterministic fallback order:
requested language, then fallback language, then the first non-empty
translation.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

SUPPORTED_LANGUAGES = ("en", "ar", "he")
DEFAULT_LANGUAGE = "en"


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


@dataclass(frozen=True)
class PlainText:
    """Legacy single-language content"""

    value: str

    def resolve(self, language: str = DEFAULT_LANGUAGE, fallback_language: str = DEFAULT_LANGUAGE) -> str:
        """Plain text reads the same in every language"""
        return self.value


@dataclass(frozen=True)
class MultilingualText:
    """Parallel translations keyed by language code"""

    translations: Mapping[str, str]

    def __post_init__(self):
        object.__setattr__(self, "translations", MappingProxyType(dict(self.translations)))

    def resolve(self, language: str = DEFAULT_LANGUAGE, fallback_language: str = DEFAULT_LANGUAGE) -> str:
        """Best available translation for `language`"""
        for candidate in (language, fallback_language):
            value = self.translations.get(candidate)
            if _has_text(value):
                return value

        for value in self.translations.values():
            if _has_text(value):
                return value

        return ""

    def available_languages(self) -> List[str]:
        """Language codes that carry non-blank text"""
        return [lang for lang, value in self.translations.items() if _has_text(value)]

    def to_dict(self) -> Dict[str, str]:
        """Plain dict for persistence and JSON responses"""
        return dict(self.translations)


Content = Union[PlainText, MultilingualText]


def to_content(raw: Any) -> Optional[Content]:
    """
    Convert a stored field into its tagged representation.

    Strings become PlainText, mappings become MultilingualText (entries
    whose value is not a string are dropped), tagged values pass through
    and anything else yields None.
    """
    if isinstance(raw, (PlainText, MultilingualText)):
        return raw
    if isinstance(raw, str):
        return PlainText(raw)
    if isinstance(raw, Mapping):
        return MultilingualText(
            {str(lang): value for lang, value in raw.items() if isinstance(value, str)}
        )
    return None


def resolve(content: Any, language: str = DEFAULT_LANGUAGE, fallback_language: str = DEFAULT_LANGUAGE) -> str:
    """
    Resolve content to a display string.

    Examples:
        resolve({"en": "Hello", "ar": "مرحبا"}, "ar")  -> "مرحبا"
        resolve("Hello", "ar")                         -> "Hello"
        resolve({"en": "Hello", "ar": ""}, "ar")       -> "Hello"
        resolve(None, "he")                            -> ""
    """
    tagged = to_content(content)
    if tagged is None:
        return ""
    return tagged.resolve(language, fallback_language)


def is_multilingual(content: Any) -> bool:
    """True for a mapping that has at least one of the supported language keys"""
    if isinstance(content, MultilingualText):
        content = content.translations
    if not isinstance(content, Mapping):
        return False
    return any(lang in content for lang in SUPPORTED_LANGUAGES)


def get_available_languages(content: Any) -> List[str]:
    """Language codes of a multilingual value that carry non-blank text"""
    if not is_multilingual(content):
        return []
    return to_content(content).available_languages()


def string_to_translation_object(value: Any) -> Dict[str, str]:
    """Spread a legacy string across all supported languages"""
    if not _has_text(value):
        return {lang: "" for lang in SUPPORTED_LANGUAGES}
    return {lang: value for lang in SUPPORTED_LANGUAGES}


def validate_translations(translations: Any, allow_partial: bool = False) -> Dict[str, Any]:
    """
    Check that a translation mapping is complete.

    Returns {"valid": bool, "missing": [language codes]}. With
    allow_partial a single non-empty language is enough to be valid.
    """
    if not isinstance(translations, Mapping):
        return {"valid": False, "missing": list(SUPPORTED_LANGUAGES)}

    missing = [lang for lang in SUPPORTED_LANGUAGES if not _has_text(translations.get(lang))]

    if allow_partial:
        return {"valid": len(missing) < len(SUPPORTED_LANGUAGES), "missing": missing}
    return {"valid": not missing, "missing": missing}

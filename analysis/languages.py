"""Static language catalog.

The order of `LANGUAGES` is significant: every per-language mapping produced by
the analysis package follows it so table columns and rankings are stable.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Final, TypeVar

_T = TypeVar("_T")


class LanguageCode(StrEnum):
    """Short code for a spoken-language version of the game."""

    en = "EN"
    ja = "JA"
    de = "DE"
    la = "LA"
    es = "ES"
    it = "IT"
    ca = "CA"
    fr = "FR"
    ru = "RU"


@dataclass(frozen=True, slots=True)
class Language:
    """A language column shown in the comparison table.

    Attributes:
        code: Short code used in table headers and catalog text.
        display: Full language name.
    """

    code: LanguageCode
    display: str


LANGUAGES: Final[tuple[Language, ...]] = (
    Language(LanguageCode.en, "English"),
    Language(LanguageCode.ja, "Japanese"),
    Language(LanguageCode.de, "German"),
    Language(LanguageCode.la, "Spanish (Latin America)"),
    Language(LanguageCode.es, "Spanish (Spain)"),
    Language(LanguageCode.it, "Italian"),
    Language(LanguageCode.ca, "French (Canada)"),
    Language(LanguageCode.fr, "French (France)"),
    Language(LanguageCode.ru, "Russian"),
)

LANGUAGE_CODES: Final[tuple[LanguageCode, ...]] = tuple(lang.code for lang in LANGUAGES)

DISPLAY_NAMES: Final[Mapping[LanguageCode, str]] = MappingProxyType(
    {lang.code: lang.display for lang in LANGUAGES}
)


def language_map(fill: Callable[[LanguageCode], _T]) -> Mapping[LanguageCode, _T]:
    """Build a read-only mapping covering every language in catalog order.

    Args:
        fill: Callable returning the value for a language code.

    Returns:
        A MappingProxyType keyed by every LanguageCode.
    """

    return MappingProxyType({code: fill(code) for code in LANGUAGE_CODES})


def uniform_language_map(value: _T) -> Mapping[LanguageCode, _T]:
    """Return a read-only mapping where every language holds `value`."""

    return language_map(lambda _code: value)

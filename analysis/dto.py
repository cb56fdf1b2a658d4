"""DTO types returned by the comparison engine.

DTOs are plain, immutable data containers used to transport catalog and
ranking results to the UI. They intentionally avoid any Django dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .durations import ERROR, DurationValue
from .languages import LanguageCode, uniform_language_map

AggregateResult = Mapping[LanguageCode, DurationValue]


@dataclass(frozen=True)
class Entry:
    """One cutscene with a per-language timing delta.

    Attributes:
        name: Display name of the cutscene. Unique across the catalog.
        description: Secondary description (may be empty).
        deltas: How much slower each language is than the fastest language
            for this cutscene. `"0"` marks the fastest; `""` marks a language
            without voice data.
        tied_for_slowest: Languages whose authored delta is blank or `00.00`,
            i.e. no faster than the slowest language. Highlighted per row.
        entry_id: Short `<category>-<entry>` identifier used in query strings.
    """

    name: str
    description: str
    deltas: Mapping[LanguageCode, DurationValue]
    tied_for_slowest: tuple[LanguageCode, ...] = ()
    entry_id: str = ""

    @property
    def label(self) -> str:
        """Return `name - description`, or just the name without a description."""

        if not self.description:
            return self.name
        return f"{self.name} - {self.description}"


@dataclass(frozen=True)
class Category:
    """A named, purely organizational group of entries.

    Attributes:
        name: Display name of the category.
        entries: Entries in authored order.
    """

    name: str
    entries: tuple[Entry, ...] = ()


@dataclass(frozen=True)
class Catalog:
    """All categories, in display order.

    Attributes:
        categories: Parsed categories.
    """

    categories: tuple[Category, ...] = ()

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Return every entry across categories, in catalog order."""

        return tuple(entry for category in self.categories for entry in category.entries)

    def find(self, identifier: str) -> Entry | None:
        """Look up an entry by name or by `<category>-<entry>` id."""

        for entry in self.entries:
            if identifier in (entry.name, entry.entry_id):
                return entry
        return None


@dataclass(frozen=True)
class RankResult:
    """Ranking of per-language totals for one selection.

    Attributes:
        fastest: Languages whose normalized total is `"0"`.
        second_fastest: Languages tied for the smallest non-zero normalized total.
        slowest: Languages tied for the largest total.
        normalized: Totals minus the minimum total, per language.
        totals: Aggregate totals before normalization.
        selected: Names of the entries that contributed, in catalog order.
    """

    fastest: tuple[LanguageCode, ...]
    second_fastest: tuple[LanguageCode, ...]
    slowest: tuple[LanguageCode, ...]
    normalized: Mapping[LanguageCode, DurationValue]
    totals: AggregateResult
    selected: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Return True when no entries were selected."""

        return not self.selected


@dataclass(frozen=True)
class ArithmeticFailure:
    """Sentinel result for a recomputation that hit an engine error.

    Attributes:
        errors: Every message the engine reported.
        selected: Names of the entries that were selected, in catalog order.
    """

    errors: tuple[str, ...]
    selected: tuple[str, ...] = ()

    @property
    def normalized(self) -> Mapping[LanguageCode, str]:
        """Return a mapping where every language reads `"ERROR"`."""

        return uniform_language_map(ERROR)

"""Aggregation helpers for the comparison engine.

This module sums stored per-language deltas over a selection of entries. It
has no Django dependencies and keeps no state between calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

from .dto import AggregateResult, Catalog, Entry
from .durations import (
    DEFAULT_ENGINE,
    FRAME_RATE,
    ZERO,
    ArithmeticEngine,
    DurationValue,
    evaluate_single,
    sum_expression,
)
from .languages import LANGUAGE_CODES, LanguageCode, uniform_language_map


def resolve_selection(catalog: Catalog, selection: Iterable[str]) -> tuple[Entry, ...]:
    """Resolve selected identifiers into catalog entries.

    Args:
        catalog: Parsed cutscene catalog.
        selection: Entry names and/or `<category>-<entry>` ids. Order does not
            matter; duplicates and unknown identifiers are ignored. A single
            string is treated as one identifier.

    Returns:
        The selected entries, each at most once, in catalog order.
    """

    if isinstance(selection, str):
        selection = (selection,)
    wanted = {identifier.strip() for identifier in selection if identifier}
    if not wanted:
        return ()
    return tuple(
        entry for entry in catalog.entries if entry.name in wanted or entry.entry_id in wanted
    )


def sum_entry_deltas(
    entries: Iterable[Entry],
    *,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> AggregateResult:
    """Sum stored deltas per language.

    Args:
        entries: Entries to sum. Callers are expected to pass each entry once.
        engine: Arithmetic engine evaluating the sums.
        frame_rate: Frame rate passed to the engine.

    Returns:
        Read-only mapping of every language to its total, in catalog order.
        Languages without voice data for an entry contribute nothing for it.

    Raises:
        ArithmeticFailureError: When the engine fails for any language. No
            partial result is returned.
    """

    entries = tuple(entries)
    if not entries:
        return uniform_language_map(ZERO)

    totals: dict[LanguageCode, DurationValue] = {}
    for code in LANGUAGE_CODES:
        expression = sum_expression(entry.deltas[code] for entry in entries)
        totals[code] = evaluate_single(expression, engine=engine, frame_rate=frame_rate)
    return MappingProxyType(totals)


def aggregate_selection(
    catalog: Catalog,
    selection: Iterable[str],
    *,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> AggregateResult:
    """Resolve a selection and sum its deltas per language.

    Raises:
        ArithmeticFailureError: When the engine fails during accumulation.
    """

    entries = resolve_selection(catalog, selection)
    return sum_entry_deltas(entries, engine=engine, frame_rate=frame_rate)

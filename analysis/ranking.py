"""Ranking of aggregated per-language totals.

Tie handling is deliberately asymmetric:
- the slowest set keeps every language tied for the maximum;
- the minimum used for normalization is the first language reaching it;
- the second-fastest set keeps every language tied for the smallest non-zero
  normalized total.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from .dto import AggregateResult, RankResult
from .durations import (
    DEFAULT_ENGINE,
    FRAME_RATE,
    ZERO,
    ArithmeticEngine,
    DurationValue,
    compare_durations,
    subtract_durations,
)
from .languages import LANGUAGE_CODES, LanguageCode, uniform_language_map


def rank_totals(
    totals: AggregateResult,
    *,
    selected: Sequence[str] = (),
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> RankResult:
    """Rank aggregate totals and normalize them against the fastest.

    Args:
        totals: Per-language totals from the aggregator.
        selected: Names of the entries behind `totals`, carried into the result.
        engine: Arithmetic engine used for comparison and subtraction.
        frame_rate: Frame rate passed to the engine.

    Returns:
        RankResult with fastest, second-fastest and slowest languages in
        catalog order.

    Raises:
        ArithmeticFailureError: When a normalization subtraction fails.
    """

    values = [totals[code] for code in LANGUAGE_CODES]

    min_index = 0
    max_indices = [0]
    for index in range(1, len(values)):
        if compare_durations(values[index], values[min_index], engine=engine, frame_rate=frame_rate) < 0:
            min_index = index
        max_compare = compare_durations(
            values[index], values[max_indices[0]], engine=engine, frame_rate=frame_rate
        )
        if max_compare > 0:
            max_indices = [index]
        elif max_compare == 0:
            max_indices.append(index)

    minimum = values[min_index]
    normalized: dict[LanguageCode, DurationValue] = {}
    for index, code in enumerate(LANGUAGE_CODES):
        if index == min_index:
            normalized[code] = ZERO
            continue
        normalized[code] = subtract_durations(values[index], minimum, engine=engine, frame_rate=frame_rate)

    return RankResult(
        fastest=tuple(code for code in LANGUAGE_CODES if normalized[code] == ZERO),
        second_fastest=_smallest_non_zero(normalized, engine=engine, frame_rate=frame_rate),
        slowest=tuple(LANGUAGE_CODES[index] for index in max_indices),
        normalized=MappingProxyType(normalized),
        totals=totals,
        selected=tuple(selected),
    )


def empty_ranking() -> RankResult:
    """Return the ranking for an empty selection: everyone ties at zero."""

    zeros = uniform_language_map(ZERO)
    return RankResult(
        fastest=LANGUAGE_CODES,
        second_fastest=(),
        slowest=(),
        normalized=zeros,
        totals=zeros,
        selected=(),
    )


def _smallest_non_zero(
    normalized: Mapping[LanguageCode, DurationValue],
    *,
    engine: ArithmeticEngine,
    frame_rate: int,
) -> tuple[LanguageCode, ...]:
    """Return every language tied for the smallest non-zero normalized total."""

    smallest: DurationValue | None = None
    codes: list[LanguageCode] = []
    for code in LANGUAGE_CODES:
        value = normalized[code]
        if value == ZERO:
            continue
        if smallest is None:
            smallest = value
            codes = [code]
            continue
        compare = compare_durations(value, smallest, engine=engine, frame_rate=frame_rate)
        if compare < 0:
            smallest = value
            codes = [code]
        elif compare == 0:
            codes.append(code)
    return tuple(codes)

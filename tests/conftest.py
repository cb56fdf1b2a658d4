"""Pytest fixtures shared across unit and integration tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from analysis.dto import Catalog, Category, Entry
from analysis.durations import DEFAULT_ENGINE, NO_DATA, DurationValue, Evaluation
from analysis.languages import LANGUAGE_CODES, LanguageCode, language_map


class RecordingEngine:
    """Arithmetic engine that records expressions and can fail on demand.

    Args:
        fail_on: Evaluations fail when the expression contains this substring.
    """

    def __init__(self, *, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.expressions: list[str] = []
        self.frame_rates: list[int] = []

    def evaluate(self, expression: str, frame_rate: int) -> Evaluation:
        self.expressions.append(expression)
        self.frame_rates.append(frame_rate)
        if self.fail_on is not None and self.fail_on in expression:
            return Evaluation(errors=(f"forced failure for {expression!r}",))
        return DEFAULT_ENGINE.evaluate(expression, frame_rate)

    def frames_to_milliseconds(self, frames: int, frame_rate: int) -> DurationValue:
        return DEFAULT_ENGINE.frames_to_milliseconds(frames, frame_rate)


EntryFactory = Callable[..., Entry]


@pytest.fixture
def make_entry() -> EntryFactory:
    """Return a factory building entries from `{code: value}` overrides."""

    def factory(
        name: str,
        deltas: dict[LanguageCode, DurationValue],
        *,
        default: DurationValue = "",
        entry_id: str = "",
        tied: tuple[LanguageCode, ...] | None = None,
    ) -> Entry:
        mapping = language_map(lambda code: deltas.get(code, default))
        if tied is None:
            tied = tuple(code for code in LANGUAGE_CODES if mapping[code] == NO_DATA)
        return Entry(
            name=name,
            description="",
            deltas=mapping,
            tied_for_slowest=tied,
            entry_id=entry_id or name,
        )

    return factory


@pytest.fixture
def make_catalog() -> Callable[[Sequence[Entry]], Catalog]:
    """Return a factory wrapping entries into a single-category catalog."""

    def factory(entries: Sequence[Entry]) -> Catalog:
        return Catalog(categories=(Category(name="Test", entries=tuple(entries)),))

    return factory


@pytest.fixture
def recording_engine() -> RecordingEngine:
    """Return an engine that records every expression it evaluates."""

    return RecordingEngine()


@pytest.fixture
def failing_engine() -> Callable[[str], RecordingEngine]:
    """Return a factory for engines that fail on expressions containing a substring."""

    return lambda fail_on: RecordingEngine(fail_on=fail_on)


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests that never go through Django.
    - `integration`: tests touching Django views, commands, or app loading.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )

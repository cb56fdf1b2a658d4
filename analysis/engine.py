"""Orchestration entry points for the comparison engine.

The engine is a pure, non-Django module: it accepts a selection of cutscenes
and returns DTOs. Every call recomputes from scratch; nothing is cached apart
from the parsed catalog.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable

from .aggregations import resolve_selection, sum_entry_deltas
from .cutscenes import get_catalog
from .dto import ArithmeticFailure, Catalog, RankResult
from .durations import DEFAULT_ENGINE, FRAME_RATE, ArithmeticEngine, ArithmeticFailureError
from .ranking import empty_ranking, rank_totals

logger = logging.getLogger(__name__)

ComparisonOutcome = RankResult | ArithmeticFailure


def recompute(
    selection: Iterable[str],
    *,
    catalog: Catalog | None = None,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> ComparisonOutcome:
    """Aggregate and rank a selection of cutscenes.

    Args:
        selection: Entry names and/or ids. Duplicates and unknown identifiers
            are ignored.
        catalog: Catalog to read from. Defaults to the process-wide catalog.
        engine: Arithmetic engine used for every duration operation.
        frame_rate: Frame rate passed to the engine.

    Returns:
        RankResult on success, or ArithmeticFailure (every language reading
        `"ERROR"`) when any engine call fails.

    Notes:
        An empty selection short-circuits: all languages are fastest at
        `"0"`, and the slowest and second-fastest sets are empty.
    """

    if catalog is None:
        catalog = get_catalog()

    entries = resolve_selection(catalog, selection)
    if not entries:
        return empty_ranking()

    names = tuple(entry.name for entry in entries)
    try:
        totals = sum_entry_deltas(entries, engine=engine, frame_rate=frame_rate)
        return rank_totals(totals, selected=names, engine=engine, frame_rate=frame_rate)
    except ArithmeticFailureError as exc:
        errors = exc.errors or (str(exc),)
        for error in errors:
            logger.error("Comparison failed while evaluating %r: %s", exc.expression, error)
        return ArithmeticFailure(errors=errors, selected=names)


class ComparisonSession:
    """Holds the latest comparison for one caller.

    Each recomputation takes a token from a monotonically increasing counter.
    Only the most recently started token may publish, so a slow earlier
    computation can never overwrite a newer one.
    """

    def __init__(
        self,
        *,
        catalog: Catalog | None = None,
        engine: ArithmeticEngine = DEFAULT_ENGINE,
        frame_rate: int = FRAME_RATE,
    ) -> None:
        """Initialize an empty session.

        Args:
            catalog: Catalog to compute against. Defaults to the process-wide catalog.
            engine: Arithmetic engine used by every recomputation.
            frame_rate: Frame rate passed to the engine.
        """

        self._catalog = catalog
        self._engine = engine
        self._frame_rate = frame_rate
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._result: ComparisonOutcome | None = None

    @property
    def result(self) -> ComparisonOutcome | None:
        """Return the latest published outcome, or None before the first one."""

        return self._result

    def begin(self) -> int:
        """Start a recomputation and return its request token."""

        self._latest_token = next(self._tokens)
        return self._latest_token

    def publish(self, token: int, outcome: ComparisonOutcome) -> bool:
        """Publish an outcome if it belongs to the latest started request.

        Returns:
            True when the outcome became the session result, False when it was
            discarded as stale.
        """

        if token != self._latest_token:
            logger.debug("Discarding stale comparison %d (latest is %d)", token, self._latest_token)
            return False
        self._result = outcome
        return True

    def run(self, selection: Iterable[str]) -> ComparisonOutcome:
        """Recompute synchronously for `selection` and publish the outcome."""

        token = self.begin()
        outcome = recompute(
            selection,
            catalog=self._catalog,
            engine=self._engine,
            frame_rate=self._frame_rate,
        )
        self.publish(token, outcome)
        return outcome

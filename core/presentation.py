"""Display helpers for the comparison table.

These helpers turn engine DTOs into strings and row structures for templates,
the JSON API and the management command. They never do duration arithmetic.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass

from analysis.dto import ArithmeticFailure, Catalog, RankResult
from analysis.durations import ENGINE_ZERO, ERROR, NO_DATA, ZERO
from analysis.engine import ComparisonOutcome
from analysis.languages import DISPLAY_NAMES, LANGUAGE_CODES, LanguageCode

FASTEST_LABEL = "Fastest"
NO_DATA_LABEL = "n/a"


@dataclass(frozen=True, slots=True)
class TimeCell:
    """One rendered cell of the comparison table.

    Attributes:
        code: Language column.
        text: Display text (e.g. `Fastest`, `+00s500`, `ERROR`).
        css_class: Space-separated CSS classes for the cell.
    """

    code: LanguageCode
    text: str
    css_class: str

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {"code": str(self.code), "text": self.text}


@dataclass(frozen=True, slots=True)
class TableRow:
    """A labelled row of cells, optionally selectable."""

    entry_id: str
    label: str
    checked: bool
    cells: tuple[TimeCell, ...]


@dataclass(frozen=True, slots=True)
class CategoryTable:
    """A category header plus its (possibly filtered) rows."""

    index: int
    name: str
    checked: bool
    rows: tuple[TableRow, ...]


def format_time_label(value: str, *, disabled: bool = False) -> str:
    """Format a Duration Value for a table cell.

    Args:
        value: Stored or normalized Duration Value, `""`, or `"ERROR"`.
        disabled: Whether the row is unselected. Disabled zero rows show
            `+00s000` instead of `Fastest`.

    Returns:
        Display text such as `Fastest`, `+00s500`, `+7s100` or `ERROR`.
    """

    if value == ERROR:
        return ERROR
    if value == NO_DATA:
        return NO_DATA_LABEL
    if value in (ZERO, ENGINE_ZERO):
        if not disabled:
            return FASTEST_LABEL
        value = ENGINE_ZERO
    if "s" not in value:
        value = f"00s{value}"
    elif value.endswith("s"):
        value = f"{value}000"
    return f"+{value}"


def time_cells(
    values: Mapping[LanguageCode, str],
    *,
    highlighted: Collection[LanguageCode] = (),
    disabled: bool = False,
) -> tuple[TimeCell, ...]:
    """Render one cell per language in catalog order."""

    cells: list[TimeCell] = []
    for code in LANGUAGE_CODES:
        value = values[code]
        text = format_time_label(value, disabled=disabled)
        classes = ["time"]
        if disabled:
            classes.append("disabled")
        elif text == FASTEST_LABEL:
            classes.append("fastest")
        elif code in highlighted or value == ERROR:
            classes.append("slowest")
        cells.append(TimeCell(code=code, text=text, css_class=" ".join(classes)))
    return tuple(cells)


def build_category_tables(
    catalog: Catalog,
    *,
    selected: Collection[str],
    show_unselected: bool = True,
) -> list[CategoryTable]:
    """Build template rows for every category.

    Args:
        catalog: Parsed cutscene catalog.
        selected: Names of the selected entries.
        show_unselected: When False, unselected rows and categories that are
            not fully selected are omitted.

    Returns:
        Category tables in catalog order.
    """

    tables: list[CategoryTable] = []
    for index, category in enumerate(catalog.categories):
        checked = all(entry.name in selected for entry in category.entries)
        if not checked and not show_unselected:
            continue
        rows: list[TableRow] = []
        for entry in category.entries:
            entry_checked = entry.name in selected
            if not entry_checked and not show_unselected:
                continue
            rows.append(
                TableRow(
                    entry_id=entry.entry_id,
                    label=entry.label,
                    checked=entry_checked,
                    cells=time_cells(
                        entry.deltas,
                        highlighted=entry.tied_for_slowest,
                        disabled=not entry_checked,
                    ),
                )
            )
        tables.append(CategoryTable(index=index, name=category.name, checked=checked, rows=tuple(rows)))
    return tables


def total_row(outcome: ComparisonOutcome) -> TableRow:
    """Build the `Total` row for a comparison outcome."""

    highlighted = outcome.slowest if isinstance(outcome, RankResult) else ()
    return TableRow(
        entry_id="",
        label="Total",
        checked=True,
        cells=time_cells(outcome.normalized, highlighted=highlighted),
    )


def _language_list(codes: tuple[LanguageCode, ...]) -> str:
    return ", ".join(DISPLAY_NAMES[code] for code in codes)


def _subject(noun: str, codes: tuple[LanguageCode, ...]) -> str:
    if len(codes) > 1:
        return f"The {noun} languages are: {_language_list(codes)}."
    return f"The {noun} language is {_language_list(codes)}."


def describe_ranking(outcome: ComparisonOutcome) -> str:
    """Summarize an outcome as a sentence for the page footer.

    Args:
        outcome: RankResult or ArithmeticFailure from the engine.

    Returns:
        A human-readable summary naming the fastest, second fastest and
        slowest languages.
    """

    if isinstance(outcome, ArithmeticFailure):
        return "The comparison could not be computed. Check the server log for details."
    if outcome.is_empty:
        return "Please select at least one cutscene."

    parts = [_subject("fastest", outcome.fastest)]
    if outcome.second_fastest:
        gap = format_time_label(outcome.normalized[outcome.second_fastest[0]])
        verb = "are" if len(outcome.second_fastest) > 1 else "is"
        parts.append(
            _subject("second fastest", outcome.second_fastest)[:-1]
            + f", which {verb} {gap} slower than the fastest."
        )
    else:
        parts.append("Every language is tied for the selected cutscenes.")
    if outcome.slowest and outcome.second_fastest:
        parts.append(_subject("slowest", outcome.slowest))
    return " ".join(parts)


def outcome_as_json(outcome: ComparisonOutcome) -> dict[str, object]:
    """Return a JSON-serializable representation of an outcome."""

    payload: dict[str, object] = {
        "selected": list(outcome.selected),
        "normalized": {str(code): value for code, value in outcome.normalized.items()},
        "summary": describe_ranking(outcome),
    }
    if isinstance(outcome, ArithmeticFailure):
        payload.update({"error": True, "errors": list(outcome.errors)})
        return payload

    payload.update(
        {
            "error": False,
            "fastest": [str(code) for code in outcome.fastest],
            "second_fastest": [str(code) for code in outcome.second_fastest],
            "slowest": [str(code) for code in outcome.slowest],
            "totals": {str(code): value for code, value in outcome.totals.items()},
        }
    )
    return payload

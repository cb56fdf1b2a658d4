"""Unit tests for comparison display helpers."""

from __future__ import annotations

import pytest

from analysis.dto import ArithmeticFailure
from analysis.engine import recompute
from analysis.languages import LanguageCode
from core.presentation import (
    build_category_tables,
    describe_ranking,
    format_time_label,
    outcome_as_json,
    time_cells,
    total_row,
)

pytestmark = pytest.mark.unit

EN, JA, DE = LanguageCode.en, LanguageCode.ja, LanguageCode.de


@pytest.mark.parametrize(
    ("value", "disabled", "expected"),
    [
        ("0", False, "Fastest"),
        ("000", False, "Fastest"),
        ("0", True, "+00s000"),
        ("500", False, "+00s500"),
        ("7s100", False, "+7s100"),
        ("7s", False, "+7s000"),
        ("", False, "n/a"),
        ("ERROR", False, "ERROR"),
    ],
)
def test_format_time_label(value: str, disabled: bool, expected: str) -> None:
    """Cells show `Fastest`, a `+` prefixed gap, `n/a` or `ERROR`."""

    assert format_time_label(value, disabled=disabled) == expected


def test_time_cells_mark_fastest_and_highlighted_languages(make_entry) -> None:
    """Zero cells are fastest; highlighted codes get the slowest class."""

    entry = make_entry("Intro", {EN: "0", JA: "500", DE: "1s200"}, default="1s000")

    cells = time_cells(entry.deltas, highlighted=(DE,))

    assert [cell.text for cell in cells[:3]] == ["Fastest", "+00s500", "+1s200"]
    assert cells[0].css_class == "time fastest"
    assert cells[1].css_class == "time"
    assert cells[2].css_class == "time slowest"
    assert cells[0].as_json() == {"code": "EN", "text": "Fastest"}


def test_time_cells_for_disabled_rows_are_plain(make_entry) -> None:
    """Unselected rows are greyed out and never show `Fastest`."""

    entry = make_entry("Intro", {EN: "0"}, default="300")

    cells = time_cells(entry.deltas, highlighted=(EN,), disabled=True)

    assert cells[0].text == "+00s000"
    assert {cell.css_class for cell in cells} == {"time disabled"}


def test_build_category_tables_hides_unselected_rows(make_entry, make_catalog) -> None:
    """Hidden mode drops rows and categories that are not fully selected."""

    catalog = make_catalog(
        [
            make_entry("Intro", {EN: "0"}, default="100", entry_id="0-0"),
            make_entry("Outro", {JA: "0"}, default="200", entry_id="0-1"),
        ]
    )

    shown = build_category_tables(catalog, selected={"Intro"})
    hidden = build_category_tables(catalog, selected={"Intro"}, show_unselected=False)
    everything = build_category_tables(catalog, selected={"Intro", "Outro"}, show_unselected=False)

    assert [row.checked for row in shown[0].rows] == [True, False]
    assert not shown[0].checked
    assert hidden == []
    assert everything[0].checked
    assert [row.label for row in everything[0].rows] == ["Intro", "Outro"]


def test_describe_ranking_names_fastest_second_and_slowest(make_entry, make_catalog) -> None:
    """The summary sentence names each ranked group with the second-place gap."""

    catalog = make_catalog(
        [make_entry("Intro", {EN: "0", JA: "500", DE: "1s200"}, default="1s000")]
    )

    summary = describe_ranking(recompute(["Intro"], catalog=catalog))

    assert summary == (
        "The fastest language is English. "
        "The second fastest language is Japanese, which is +00s500 slower than the fastest. "
        "The slowest language is German."
    )


def test_describe_ranking_for_ties_and_empty_selections(make_entry, make_catalog) -> None:
    """All-tied and empty selections get their own messages."""

    catalog = make_catalog([make_entry("Flat", {}, default="0")])

    tied = describe_ranking(recompute(["Flat"], catalog=catalog))
    empty = describe_ranking(recompute([], catalog=catalog))

    assert tied.endswith("Every language is tied for the selected cutscenes.")
    assert tied.startswith("The fastest languages are: English, Japanese")
    assert empty == "Please select at least one cutscene."


def test_failure_renders_error_everywhere() -> None:
    """A failed comparison shows ERROR in every total cell and in the JSON."""

    failure = ArithmeticFailure(errors=("line 1: boom",), selected=("Intro",))

    row = total_row(failure)
    payload = outcome_as_json(failure)

    assert {cell.text for cell in row.cells} == {"ERROR"}
    assert {cell.css_class for cell in row.cells} == {"time slowest"}
    assert payload["error"] is True
    assert payload["errors"] == ["line 1: boom"]
    assert set(payload["normalized"].values()) == {"ERROR"}
    assert "could not be computed" in payload["summary"]


def test_outcome_as_json_lists_ranked_codes(make_entry, make_catalog) -> None:
    """Successful outcomes serialize codes as their short strings."""

    catalog = make_catalog(
        [make_entry("Intro", {EN: "0", JA: "500", DE: "1s200"}, default="1s000")]
    )

    payload = outcome_as_json(recompute(["Intro"], catalog=catalog))

    assert payload["error"] is False
    assert payload["fastest"] == ["EN"]
    assert payload["second_fastest"] == ["JA"]
    assert payload["slowest"] == ["DE"]
    assert payload["normalized"]["DE"] == "1s200"
    assert payload["selected"] == ["Intro"]


def test_entry_rows_highlight_languages_tied_for_slowest(make_entry, make_catalog) -> None:
    """Selected rows mark languages without voice data as slowest."""

    catalog = make_catalog([make_entry("Intro", {EN: "0", JA: ""}, default="300", entry_id="0-0")])

    (table,) = build_category_tables(catalog, selected={"Intro"})
    cells = table.rows[0].cells

    assert cells[0].css_class == "time fastest"
    assert cells[1].text == "n/a"
    assert cells[1].css_class == "time slowest"
    assert cells[2].css_class == "time"

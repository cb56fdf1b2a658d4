"""Unit tests for the pipe-delimited catalog parser."""

from __future__ import annotations

import pytest

from analysis.catalog import (
    CatalogErrorKind,
    MalformedCatalog,
    MalformedDelta,
    invert_deltas,
    parse_category,
    parse_delta,
)
from analysis.languages import LanguageCode

pytestmark = pytest.mark.unit

HEADER = "Shrines | EN | JA | DE | LA | ES | IT | CA | FR | RU"


def test_invert_deltas_makes_largest_raw_delta_the_zero() -> None:
    """`[7.03, 0.05, empty]` inverts to `[0, 7.03 - 0.05, empty]`."""

    raw = [parse_delta("7.03"), parse_delta("0.05"), parse_delta("")]
    assert raw == ["7s100", "167", ""]

    assert invert_deltas(raw) == ["0", "6s933", ""]


def test_invert_deltas_keeps_first_maximum_on_ties() -> None:
    """Equal maxima: the first is set directly, later ones subtract to zero."""

    assert invert_deltas(["500", "1s", "1s", "200"]) == ["500", "0", "0", "800"]


def test_invert_deltas_leaves_rows_without_data_untouched() -> None:
    """A row where every language lacks data stays all empty."""

    assert invert_deltas(["", "", ""]) == ["", "", ""]


@pytest.mark.parametrize(
    ("cell", "expected"),
    [("", ""), ("00.00", "0"), ("00.10", "333"), ("13.29", "13s967"), ("1.1", "1s033")],
)
def test_parse_delta_converts_seconds_and_frames(cell: str, expected: str) -> None:
    """Cells are `<seconds>.<frames>` at 30 fps."""

    assert parse_delta(cell) == expected


@pytest.mark.parametrize("cell", ["7", "7.03.01", "a.03", "7.x", "-1.03", "7.30", ".5"])
def test_parse_delta_rejects_malformed_cells(cell: str) -> None:
    """Anything but one `.` between two integers (frames < 30) is rejected."""

    with pytest.raises(MalformedDelta) as excinfo:
        parse_delta(cell)
    assert excinfo.value.kind is CatalogErrorKind.malformed_delta


def test_parse_category_builds_entries_in_catalog_language_order() -> None:
    """Header order may differ from catalog order; deltas follow the header."""

    text = """
    Shrines | RU | EN | JA | DE | LA | ES | IT | CA | FR
    Qaza Tokki, Hebra/North Lomei Labyrinth | 07.05 | 07.03 | 00.05 | | 00.04 | 00.04 | | 00.03 |

    Plain Entry | 00.01 | 00.02 | 00.02 | 00.02 | 00.02 | 00.02 | 00.02 | 00.02 | 00.02
    """

    category = parse_category(text, category_index=3)

    assert category.name == "Shrines"
    assert [entry.entry_id for entry in category.entries] == ["3-0", "3-1"]

    qaza = category.entries[0]
    assert qaza.name == "Qaza Tokki"
    assert qaza.description == "Hebra/North Lomei Labyrinth"
    assert qaza.label == "Qaza Tokki - Hebra/North Lomei Labyrinth"
    assert list(qaza.deltas) == list(LanguageCode)
    assert qaza.deltas[LanguageCode.ru] == "0"
    assert qaza.deltas[LanguageCode.en] == "067"
    assert qaza.deltas[LanguageCode.ja] == "7s000"
    assert qaza.deltas[LanguageCode.de] == ""
    assert qaza.deltas[LanguageCode.fr] == ""
    assert qaza.tied_for_slowest == (LanguageCode.de, LanguageCode.it, LanguageCode.fr)

    plain = category.entries[1]
    assert plain.label == "Plain Entry"
    assert plain.deltas[LanguageCode.en] == "0"
    assert plain.deltas[LanguageCode.ru] == "034"
    assert plain.tied_for_slowest == ()


@pytest.mark.parametrize(
    "text",
    [
        HEADER,
        "| EN | JA | DE | LA | ES | IT | CA | FR | RU\nRow | | | | | | | | | 00.01",
        "Shrines | EN | JA | DE\nRow | 00.01 | 00.02 | 00.03",
        "Shrines | EN | JA | DE | LA | ES | IT | CA | FR | XX\nRow | | | | | | | | | 00.01",
        "Shrines | EN | EN | DE | LA | ES | IT | CA | FR | RU\nRow | | | | | | | | | 00.01",
        f"{HEADER}\nRow | 00.01 | 00.02",
        f"{HEADER}\n | | | | | | | | | 00.01",
    ],
)
def test_parse_category_rejects_malformed_shapes(text: str) -> None:
    """Header and row shape defects raise MalformedCatalog."""

    with pytest.raises(MalformedCatalog) as excinfo:
        parse_category(text)
    assert excinfo.value.kind is CatalogErrorKind.malformed_catalog


def test_parse_category_rejects_bad_delta_cells() -> None:
    """A single malformed cell fails the whole category."""

    with pytest.raises(MalformedDelta, match="exactly one"):
        parse_category(f"{HEADER}\nRow | 00.01 | 7 | | | | | | | ")


def test_parse_category_reports_engine_failures_as_malformed_delta(failing_engine) -> None:
    """Engine errors during inversion abort the load."""

    engine = failing_engine(" - ")
    with pytest.raises(MalformedDelta, match="Could not invert"):
        parse_category(f"{HEADER}\nRow | 00.01 | 00.02 | | | | | | | ", engine=engine)


def test_parse_category_ties_blank_and_zero_cells_for_slowest() -> None:
    """Authored `00.00` and blank cells are no faster than the slowest language."""

    category = parse_category(f"{HEADER}\nRow | 00.00 | 00.05 | 00.00 | 00.01 | 00.01 | 00.01 | 00.01 | 00.01 | ")

    entry = category.entries[0]
    assert entry.tied_for_slowest == (LanguageCode.en, LanguageCode.de, LanguageCode.ru)
    assert entry.deltas[LanguageCode.ja] == "0"
    assert entry.deltas[LanguageCode.en] == "167"
    assert entry.deltas[LanguageCode.ru] == ""

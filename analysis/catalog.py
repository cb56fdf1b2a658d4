"""Catalog parser for pipe-delimited cutscene timing tables.

Each category is authored as a small text table:

    Shrines                 | EN    | JA    | DE    | ...
    Qaza Tokki, Hebra       | 07.03 | 00.05 |       | ...

The header names the category and lists every language code exactly once.
Each row names an entry (optionally followed by `, description`) and gives one
`<seconds>.<frames>` delta per language, or an empty cell when that language
has no voice data. Authored deltas say how much *faster* a language is than
the slowest one; the parser inverts them into "slower than the fastest".

The parser is strict: the catalog is static content, so any defect raises and
must stop the application from starting.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from enum import Enum

from .dto import Category, Entry
from .durations import (
    DEFAULT_ENGINE,
    FRAME_RATE,
    NO_DATA,
    ZERO,
    ArithmeticEngine,
    ArithmeticFailureError,
    DurationValue,
    compare_durations,
    evaluate_single,
    has_data,
    subtract_durations,
)
from .languages import LANGUAGE_CODES, LanguageCode, language_map

_FIELD_SEPARATOR = "|"
_UNSIGNED_INT_RE = re.compile(r"^[0-9]+$")


class CatalogErrorKind(Enum):
    """Kinds of structural defects detected while loading the catalog."""

    malformed_catalog = "malformed_catalog"
    malformed_delta = "malformed_delta"


class CatalogError(ValueError):
    """Base class for catalog defects. Always fatal at load time."""

    kind: CatalogErrorKind = CatalogErrorKind.malformed_catalog

    def __init__(self, message: str, *, line: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Description of the defect.
            line: Offending catalog line, when known.
        """

        super().__init__(message if line is None else f"{message} (line: {line!r})")
        self.line = line


class MalformedCatalog(CatalogError):
    """Raised when a header or row has the wrong shape."""

    kind = CatalogErrorKind.malformed_catalog


class MalformedDelta(CatalogError):
    """Raised when a delta cell cannot be converted into a Duration Value."""

    kind = CatalogErrorKind.malformed_delta


def parse_category(
    text: str,
    *,
    category_index: int = 0,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> Category:
    """Parse one category table into an immutable Category.

    Args:
        text: Category table text (header line followed by entry rows).
        category_index: Position of the category in the catalog, used to
            build `Entry.entry_id`.
        engine: Arithmetic engine used for all duration math.
        frame_rate: Frames per second of the authored deltas.

    Returns:
        Category with entries in authored order.

    Raises:
        MalformedCatalog: When the header or a row has the wrong shape.
        MalformedDelta: When a delta cell is invalid.
    """

    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if len(lines) < 2:
        raise MalformedCatalog("Category needs a header and at least one entry row")

    header, *rows = lines
    name, header_codes = _parse_header(header)
    entries = tuple(
        parse_entry_row(
            row,
            header_codes=header_codes,
            entry_id=f"{category_index}-{index}",
            engine=engine,
            frame_rate=frame_rate,
        )
        for index, row in enumerate(rows)
    )
    return Category(name=name, entries=entries)


def parse_entry_row(
    line: str,
    *,
    header_codes: Sequence[LanguageCode],
    entry_id: str = "",
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> Entry:
    """Parse one `name[, description] | delta | ...` row.

    Args:
        line: Trimmed row text.
        header_codes: Language codes in the order the header lists them.
        entry_id: Identifier assigned to the entry.
        engine: Arithmetic engine used for all duration math.
        frame_rate: Frames per second of the authored deltas.

    Returns:
        Entry with inverted deltas in catalog language order. Languages whose
        authored cell is blank or zero are recorded as tied for slowest.
    """

    name_part, *cells = _split_fields(line)
    if not name_part:
        raise MalformedCatalog("Entry row is missing a name", line=line)
    if len(cells) != len(header_codes):
        raise MalformedCatalog(
            f"Entry row has {len(cells)} deltas, expected {len(header_codes)}",
            line=line,
        )

    name, _, description = name_part.partition(",")
    raw = [parse_delta(cell, engine=engine, frame_rate=frame_rate) for cell in cells]
    try:
        stored = invert_deltas(raw, engine=engine, frame_rate=frame_rate)
    except ArithmeticFailureError as exc:
        raise MalformedDelta(f"Could not invert deltas: {exc}", line=line) from exc

    by_code = dict(zip(header_codes, stored))
    deltas = language_map(lambda code: by_code[code])
    raw_by_code = dict(zip(header_codes, raw))
    tied = tuple(code for code in LANGUAGE_CODES if raw_by_code[code] in (NO_DATA, ZERO))
    return Entry(
        name=name.strip(),
        description=description.strip(),
        deltas=deltas,
        tied_for_slowest=tied,
        entry_id=entry_id,
    )


def parse_delta(
    cell: str,
    *,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> DurationValue:
    """Convert a `<seconds>.<frames>` cell into a Duration Value.

    Args:
        cell: Trimmed cell text. Empty means "no voice data".
        engine: Arithmetic engine used for the conversion.
        frame_rate: Frames per second; frames must be below it.

    Returns:
        The Duration Value, `"0"` for a zero delta, or `""` for an empty cell.

    Raises:
        MalformedDelta: When the cell is not a valid `<seconds>.<frames>` pair.
    """

    cell = cell.strip()
    if not cell:
        return NO_DATA

    parts = cell.split(".")
    if len(parts) != 2:
        raise MalformedDelta("Delta must contain exactly one '.' separator", line=cell)
    seconds_text, frames_text = parts
    if not _UNSIGNED_INT_RE.match(seconds_text) or not _UNSIGNED_INT_RE.match(frames_text):
        raise MalformedDelta("Delta seconds and frames must be integers", line=cell)

    seconds = int(seconds_text)
    frames = int(frames_text)
    if frames >= frame_rate:
        raise MalformedDelta(f"Frame count must be below {frame_rate}", line=cell)

    try:
        frames_value = engine.frames_to_milliseconds(frames, frame_rate)
        return evaluate_single(f"{seconds}s+{frames_value}", engine=engine, frame_rate=frame_rate)
    except (ArithmeticFailureError, ValueError) as exc:
        raise MalformedDelta(f"Could not convert delta: {exc}", line=cell) from exc


def invert_deltas(
    raw: Sequence[DurationValue],
    *,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> list[DurationValue]:
    """Turn "faster than the slowest" deltas into "slower than the fastest".

    Args:
        raw: Parsed deltas in header order; `""` entries are left untouched.
        engine: Arithmetic engine used for the subtraction.
        frame_rate: Frame rate passed to the engine.

    Returns:
        Stored deltas in the same order. The largest raw delta (first one on
        ties) becomes `"0"`; every other value becomes `max - raw`.

    Raises:
        ArithmeticFailureError: When the engine cannot subtract.
    """

    present = [index for index, value in enumerate(raw) if has_data(value)]
    if not present:
        return list(raw)

    max_index = present[0]
    for index in present[1:]:
        if compare_durations(raw[index], raw[max_index], engine=engine, frame_rate=frame_rate) > 0:
            max_index = index

    maximum = raw[max_index]
    stored: list[DurationValue] = []
    for index, value in enumerate(raw):
        if not has_data(value):
            stored.append(NO_DATA)
        elif index == max_index:
            stored.append(ZERO)
        else:
            stored.append(subtract_durations(maximum, value, engine=engine, frame_rate=frame_rate))
    return stored


def _parse_header(header: str) -> tuple[str, tuple[LanguageCode, ...]]:
    """Validate the header row and return the category name and code order."""

    name, *code_texts = _split_fields(header)
    if not name:
        raise MalformedCatalog("Category header is missing a name", line=header)
    if len(code_texts) != len(LANGUAGE_CODES):
        raise MalformedCatalog(
            f"Category header lists {len(code_texts)} languages, expected {len(LANGUAGE_CODES)}",
            line=header,
        )

    codes: list[LanguageCode] = []
    for text in code_texts:
        try:
            code = LanguageCode(text)
        except ValueError as exc:
            raise MalformedCatalog(f"Unknown language {text!r}", line=header) from exc
        if code in codes:
            raise MalformedCatalog(f"Duplicate language {text!r}", line=header)
        codes.append(code)
    return name, tuple(codes)


def _split_fields(line: str) -> list[str]:
    """Split a row on `|` and trim every field."""

    return [field.strip() for field in line.split(_FIELD_SEPARATOR)]

"""Duration Values and the time-expression arithmetic engine.

A Duration Value is an opaque string such as `"7s100"` (7.1 seconds),
`"033"` (33 milliseconds) or `"-1s500"`. The analysis package never does
numeric work on these strings directly; it builds `+`/`-` expressions and asks
an `ArithmeticEngine` to evaluate them at a fixed frame rate.

Two zero spellings exist:
- `"0"` is the canonical zero used by the catalog, aggregates and rankings.
- `"000"` is how the engine renders a zero result. `canonical()` maps it back.

The empty string is a separate sentinel meaning "no data" and is never a
valid engine term.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final, Protocol

logger = logging.getLogger(__name__)

DurationValue = str

FRAME_RATE: Final[int] = 30
ZERO: Final[DurationValue] = "0"
ENGINE_ZERO: Final[DurationValue] = "000"
NO_DATA: Final[DurationValue] = ""
ERROR: Final[str] = "ERROR"

_OPERATOR_RE = re.compile(r"([+-])")
_DURATION_RE = re.compile(
    r"^(?:(?P<minutes>\d+)m)?(?:(?P<seconds>\d+)s)?(?P<millis>\d+)?$",
    re.IGNORECASE,
)
_FRAMES_RE = re.compile(r"^(?P<frames>\d+)f$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Result of evaluating one or more time expressions.

    Attributes:
        values: One Duration Value per evaluated expression line.
        errors: Human-readable error messages. Values are empty when any
            error is reported.
    """

    values: tuple[DurationValue, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True when the evaluation reported no errors."""

        return not self.errors


class ArithmeticEngine(Protocol):
    """Contract consumed by the catalog parser, aggregator and ranker."""

    def evaluate(self, expression: str, frame_rate: int) -> Evaluation:
        """Evaluate newline-separated `+`/`-` expressions of Duration Values."""

    def frames_to_milliseconds(self, frames: int, frame_rate: int) -> DurationValue:
        """Convert a frame count into a Duration Value."""


class ArithmeticFailureError(ArithmeticError):
    """Raised when the engine reports errors for an expression."""

    def __init__(self, *, expression: str, errors: Sequence[str]) -> None:
        """Initialize the error.

        Args:
            expression: Expression that failed to evaluate.
            errors: Messages reported by the engine.
        """

        joined = "; ".join(errors) or "no value produced"
        super().__init__(f"Could not evaluate {expression!r}: {joined}")
        self.expression = expression
        self.errors = tuple(errors)


class TimeExpressionEngine:
    """Exact integer-millisecond implementation of `ArithmeticEngine`.

    Terms may be written as `1m02s500`, `7s100`, `7s`, `500` (milliseconds),
    `0`, or `12f` (frames at the requested frame rate). Each line of the
    expression produces one value.
    """

    def evaluate(self, expression: str, frame_rate: int) -> Evaluation:
        """Evaluate an expression.

        Args:
            expression: One expression per non-blank line.
            frame_rate: Frames per second used for `f` terms.

        Returns:
            Evaluation holding either all values or all errors.
        """

        if frame_rate <= 0:
            return Evaluation(errors=(f"frame rate must be positive, got {frame_rate}",))

        lines = [line.strip() for line in expression.splitlines()]
        lines = [line for line in lines if line]
        if not lines:
            return Evaluation(errors=("empty expression",))

        values: list[DurationValue] = []
        errors: list[str] = []
        for number, line in enumerate(lines, start=1):
            total, error = _evaluate_line(line, frame_rate)
            if error is not None:
                errors.append(f"line {number}: {error}")
                continue
            values.append(format_milliseconds(total))

        if errors:
            return Evaluation(errors=tuple(errors))
        return Evaluation(values=tuple(values))

    def frames_to_milliseconds(self, frames: int, frame_rate: int) -> DurationValue:
        """Convert frames to a Duration Value, rounding half up to whole ms.

        Raises:
            ValueError: When `frames` is negative or `frame_rate` is not positive.
        """

        return format_milliseconds(_frames_to_ms(frames, frame_rate))


DEFAULT_ENGINE: Final[TimeExpressionEngine] = TimeExpressionEngine()


def format_milliseconds(milliseconds: int) -> DurationValue:
    """Render integer milliseconds in engine form (`"033"`, `"7s100"`, `"-1s500"`)."""

    sign = "-" if milliseconds < 0 else ""
    magnitude = abs(milliseconds)
    if magnitude < 1000:
        return f"{sign}{magnitude:03d}"
    seconds, millis = divmod(magnitude, 1000)
    return f"{sign}{seconds}s{millis:03d}"


def canonical(value: DurationValue) -> DurationValue:
    """Map the engine's zero rendering to the canonical `"0"`."""

    if value in (ZERO, ENGINE_ZERO, f"-{ENGINE_ZERO}"):
        return ZERO
    return value


def has_data(value: DurationValue) -> bool:
    """Return True unless `value` is the "no data" sentinel."""

    return value != NO_DATA


def evaluate_single(
    expression: str,
    *,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> DurationValue:
    """Evaluate a single expression and return its canonical value.

    Raises:
        ArithmeticFailureError: When the engine reports errors or does not
            produce exactly one value.
    """

    evaluation = engine.evaluate(expression, frame_rate)
    if evaluation.errors or len(evaluation.values) != 1:
        raise ArithmeticFailureError(expression=expression, errors=evaluation.errors)
    return canonical(evaluation.values[0])


def sum_expression(values: Iterable[DurationValue]) -> str:
    """Build a left-to-right `0+a+b` chain, skipping zero and empty terms."""

    expression = ZERO
    for value in values:
        if not has_data(value) or canonical(value) == ZERO:
            continue
        expression = f"{expression}+{value}"
    return expression


def subtract_durations(
    minuend: DurationValue,
    subtrahend: DurationValue,
    *,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> DurationValue:
    """Return `minuend - subtrahend` via the engine.

    Raises:
        ArithmeticFailureError: When the engine reports errors.
    """

    return evaluate_single(f"{minuend} - {subtrahend}", engine=engine, frame_rate=frame_rate)


def compare_durations(
    a: DurationValue,
    b: DurationValue,
    *,
    engine: ArithmeticEngine = DEFAULT_ENGINE,
    frame_rate: int = FRAME_RATE,
) -> int:
    """Compare two Duration Values by evaluating `a - b`.

    Args:
        a: Left value. The "no data" sentinel counts as zero.
        b: Right value. The "no data" sentinel counts as zero.
        engine: Arithmetic engine to evaluate with.
        frame_rate: Frame rate passed to the engine.

    Returns:
        0 when equal, -1 when `a < b`, 1 when `a > b`. Evaluation errors are
        logged and reported as equal.
    """

    expression = f"{a or ZERO}-{b or ZERO}"
    evaluation = engine.evaluate(expression, frame_rate)
    if evaluation.errors or not evaluation.values:
        for error in evaluation.errors or ("no value produced",):
            logger.error("Comparison %r failed: %s", expression, error)
        return 0

    answer = evaluation.values[0]
    if canonical(answer) == ZERO:
        return 0
    if answer.startswith("-"):
        return -1
    return 1


def _evaluate_line(line: str, frame_rate: int) -> tuple[int, str | None]:
    """Evaluate one expression line into integer milliseconds."""

    total = 0
    sign = 1
    expect_term = True
    for part in (p.strip() for p in _OPERATOR_RE.split(line)):
        if part in ("+", "-"):
            operator_sign = -1 if part == "-" else 1
            if expect_term:
                sign *= operator_sign
            else:
                sign = operator_sign
                expect_term = True
            continue
        if not part:
            continue

        milliseconds = _term_milliseconds(part, frame_rate)
        if milliseconds is None:
            return 0, f"invalid duration {part!r}"
        total += sign * milliseconds
        sign = 1
        expect_term = False

    if expect_term:
        return 0, f"expression {line!r} ends without a value"
    return total, None


def _term_milliseconds(term: str, frame_rate: int) -> int | None:
    """Parse a single term into integer milliseconds, or None when invalid."""

    frames_match = _FRAMES_RE.match(term)
    if frames_match is not None:
        return _frames_to_ms(int(frames_match.group("frames")), frame_rate)

    match = _DURATION_RE.match(term)
    if match is None or not any(match.groupdict().values()):
        return None

    minutes = int(match.group("minutes") or 0)
    seconds = int(match.group("seconds") or 0)
    millis = int(match.group("millis") or 0)
    has_larger_unit = match.group("minutes") is not None or match.group("seconds") is not None
    if has_larger_unit and millis >= 1000:
        return None
    return (minutes * 60 + seconds) * 1000 + millis


def _frames_to_ms(frames: int, frame_rate: int) -> int:
    """Convert frames to whole milliseconds (half-up)."""

    if frame_rate <= 0:
        raise ValueError(f"frame rate must be positive, got {frame_rate}")
    if frames < 0:
        raise ValueError(f"frame count must be non-negative, got {frames}")
    return (frames * 2000 + frame_rate) // (2 * frame_rate)

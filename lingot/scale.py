"""Musical scales: note shifts and Scala (.scl) file loading."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import List, TextIO

MID_A_FREQUENCY = 440.0
MID_C_FREQUENCY = 261.625565

_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT = re.compile(r"\s*([+-]?\d+)")

_FORMAT_ERROR = "incorrect format"
_NOTE_NUMBER_ERROR = "note number mismatch"
_ORDER_ERROR = "the notes must be well ordered"


class ScaleError(ValueError):
    """Raised when a shift or a scale file cannot be read."""


@dataclass(frozen=True)
class Shift:
    """Offset of a note from the scale root, in cents, optionally as a ratio.

    A shift given directly in cents has numerator and denominator -1.
    """

    cents: float
    numerator: int = -1
    denominator: int = -1

    @property
    def is_ratio(self) -> bool:
        return self.numerator >= 0

    def __str__(self) -> str:
        return format_shift(self.cents, self.numerator, self.denominator)


def _scan_float(text: str) -> float:
    match = _FLOAT.match(text)
    if not match:
        raise ScaleError(f"invalid shift {text!r}")
    return float(match.group(1))


def _scan_int(text: str) -> int:
    match = _INT.match(text)
    if not match:
        raise ScaleError(f"invalid ratio term {text!r}")
    return int(match.group(1))


def parse_shift(text: str) -> Shift:
    """Parse a shift written either as cents ("100.0") or as a ratio ("3/2")."""
    tokens = [token for token in text.split("/") if token]
    if not tokens:
        raise ScaleError(f"invalid shift {text!r}")
    if len(tokens) == 1:
        return Shift(_scan_float(tokens[0]))
    numerator = _scan_int(tokens[0])
    denominator = _scan_int(tokens[1])
    if numerator <= 0 or denominator <= 0:
        raise ScaleError(f"ratio must be positive: {text!r}")
    return Shift(1200.0 * math.log2(numerator / denominator), numerator, denominator)


def format_shift(cents: float, numerator: int = -1, denominator: int = -1) -> str:
    """Render a shift the way it is written in configuration files."""
    if numerator < 0:
        return f"{cents:.4f}"
    return f"{numerator}/{denominator}"


@dataclass
class Scale:
    """A named scale: one name and one shift per note, within one octave."""

    name: str = ""
    base_frequency: float = MID_C_FREQUENCY
    note_names: List[str] = field(default_factory=list)
    shifts: List[Shift] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.note_names) != len(self.shifts):
            raise ValueError("every note needs exactly one shift")

    @property
    def notes(self) -> int:
        """Number of notes in the scale."""
        return len(self.note_names)

    @property
    def offset_cents(self) -> List[float]:
        return [shift.cents for shift in self.shifts]


class _SclReader:
    def __init__(self, fp: TextIO) -> None:
        self._fp = fp
        self.line = 0

    def fail(self, reason: str) -> ScaleError:
        return ScaleError(f"Error opening scale file, line {self.line}: {reason}")

    def read(self, reason: str) -> str:
        self.line += 1
        text = self._fp.readline()
        if not text:
            raise self.fail(reason)
        return text


def _read_scl(fp: TextIO) -> Scale:
    reader = _SclReader(fp)

    if not reader.read(_FORMAT_ERROR).startswith("!"):
        raise reader.fail(_FORMAT_ERROR)
    reader.read(_FORMAT_ERROR)

    name = reader.read(_FORMAT_ERROR).rstrip("\n").rstrip("\r")

    count_match = _INT.match(reader.read(_FORMAT_ERROR))
    if not count_match or int(count_match.group(1)) <= 0:
        raise reader.fail(_FORMAT_ERROR)
    count = int(count_match.group(1))

    reader.read(_FORMAT_ERROR)

    names = ["1"]
    shifts = [Shift(0.0, 1, 1)]
    for index in range(1, count):
        tokens = reader.read(_NOTE_NUMBER_ERROR).split()
        if not tokens:
            raise reader.fail(_NOTE_NUMBER_ERROR)
        try:
            shift = parse_shift(tokens[0])
        except ScaleError:
            raise reader.fail(_FORMAT_ERROR) from None
        if shift.cents <= shifts[-1].cents:
            raise reader.fail(_ORDER_ERROR)
        shifts.append(shift)
        names.append(str(index + 1))

    return Scale(name, MID_C_FREQUENCY, names, shifts)


def load_scl(path) -> Scale:
    """Load a scale from a Scala .scl file, raising ScaleError on failure."""
    try:
        fp = open(path, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ScaleError(f"Error opening scale file\n{exc.strerror or exc}") from exc
    with fp:
        return _read_scl(fp)
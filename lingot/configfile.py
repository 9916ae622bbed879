"""Reading and writing tuner configuration files."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .messages import MessageQueue
from .params import ParameterId, ParameterType, find_parameter, parameter_specs
from .scale import MID_C_FREQUENCY, Scale, ScaleError, Shift, parse_shift

_DELIMS = re.compile(r"[ \t=\n]+")
_NOTE_DELIMS = re.compile(r"[ \t\n]+")
_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT = re.compile(r"\s*([+-]?\d+)")

_ALLOWED_FFT_SIZES = (256, 512, 1024, 2048, 4096)
_DEVICE_MAX_LEN = 511

_LEGACY_DEVICE_OPTIONS = {
    "AUDIO_DEV": "AUDIO_DEV.OSS",
    "AUDIO_DEV_ALSA": "AUDIO_DEV.ALSA",
    "AUDIO_DEV_JACK": "AUDIO_DEV.JACK",
    "AUDIO_DEV_PULSEAUDIO": "AUDIO_DEV.PulseAudio",
}
_DEVICE_PREFIX = "AUDIO_DEV."

_FILE_ERRORS_WARNING = (
    "The configuration file contains errors, and hence some default values have "
    "been chosen. The problem will be fixed once you have accepted the settings "
    "in the configuration dialog."
)

# configuration attribute behind each option that is still in use
_FIELDS: Dict[ParameterId, str] = {
    ParameterId.AUDIO_SYSTEM: "audio_system",
    ParameterId.ROOT_FREQUENCY_ERROR: "root_frequency_error",
    ParameterId.FFT_SIZE: "fft_size",
    ParameterId.TEMPORAL_WINDOW: "temporal_window",
    ParameterId.MIN_SNR: "min_overall_snr",
    ParameterId.CALCULATION_RATE: "calculation_rate",
    ParameterId.VISUALIZATION_RATE: "visualization_rate",
    ParameterId.MINIMUM_FREQUENCY: "min_frequency",
    ParameterId.MAXIMUM_FREQUENCY: "max_frequency",
}


@dataclass
class Config:
    """Tuner settings as stored in a configuration file."""

    audio_system: str = ""
    audio_devices: Dict[str, str] = field(default_factory=dict)
    root_frequency_error: float = 0.0
    fft_size: int = 512
    temporal_window: float = 0.3
    min_overall_snr: float = 20.0
    calculation_rate: float = 15.0
    visualization_rate: float = 24.0
    min_frequency: float = 82.41
    max_frequency: float = 329.63
    sample_rate: int = 44100
    optimize_internal_parameters: bool = False
    scale: Scale = field(default_factory=Scale)

    @property
    def audio_device(self) -> str:
        """Device configured for the selected audio system."""
        return self.audio_devices.get(self.audio_system, "")


@dataclass
class LoadReport:
    """Problems found while reading a configuration."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    parse_errors: bool = False
    scale_errors: bool = False
    scale_loaded: bool = False

    @property
    def ok(self) -> bool:
        return not (self.parse_errors or self.scale_errors)

    def error(self, text: str, *, scale: bool = False) -> None:
        self.errors.append(text)
        print(text, file=sys.stderr)
        if scale:
            self.scale_errors = True
        else:
            self.parse_errors = True

    def warning(self, text: str) -> None:
        self.warnings.append(text)
        print(text)


class _ScaleStep(Enum):
    NOT_YET = auto()
    READING = auto()
    DONE = auto()


class _LineReader:
    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self.line = 0

    def read(self) -> Optional[str]:
        self.line += 1
        text = next(self._lines, None)
        if text is not None and not text.endswith("\n"):
            text += "\n"
        return text


def _split(text: str, pattern: "re.Pattern[str]") -> List[str]:
    return [token for token in pattern.split(text) if token]


def _scan_float(text: str) -> Optional[float]:
    match = _FLOAT.match(text)
    return float(match.group(1)) if match else None


def _scan_int(text: str) -> Optional[int]:
    match = _INT.match(text)
    return int(match.group(1)) if match else None


def _rest_after(text: str, keyword: str) -> str:
    start = text.index(keyword) + len(keyword)
    rest = text[start:].lstrip(" \t=\n")
    for terminator in ("\r", "\n"):
        cut = rest.rfind(terminator)
        if cut >= 0:
            rest = rest[:cut]
    return rest


def format_config(config: Config, audio_systems: Sequence[str] = (), version: str = "") -> str:
    """Render a configuration in the file format."""
    out = [f"# Config file automatically created by lingot {version}", ""]

    for spec in parameter_specs():
        if spec.deprecated:
            continue
        value = getattr(config, _FIELDS[spec.id])
        if spec.type is ParameterType.INTEGER:
            text = str(int(value))
        elif spec.type is ParameterType.FLOAT:
            text = f"{float(value):.3f}"
        else:
            text = str(value)
        line = f"{spec.name} = {text}"
        if spec.units is not None:
            line += f" # {spec.units}"
        out.append(line)

    for name in audio_systems:
        out.append(f"{_DEVICE_PREFIX}{name} = {config.audio_devices.get(name, '')}")

    scale = config.scale
    out += [
        "",
        "SCALE = {",
        f"NAME = {scale.name}",
        f"BASE_FREQUENCY = {scale.base_frequency:.6f}",
        f"NOTE_COUNT = {scale.notes}",
        "NOTES = {",
    ]
    out += [f"{name}\t{shift}" for name, shift in zip(scale.note_names, scale.shifts)]
    out += ["}", "}"]
    return "\n".join(out) + "\n"


def save_config(config: Config, path, audio_systems: Sequence[str] = (), version: str = "") -> None:
    """Write a configuration file; OSError if it cannot be written."""
    text = format_config(config, audio_systems, version)
    with open(path, "w", encoding="utf-8") as fp:
        fp.write(text)


def _read_notes(
    reader: _LineReader, count: int, report: LoadReport
) -> Tuple[List[str], List[Shift]]:
    names: List[str] = []
    shifts: List[Shift] = []
    for index in range(count):
        text = reader.read()
        tokens = _split(text, _NOTE_DELIMS) if text is not None else []
        if len(tokens) < 2:
            report.error(f"error at line {reader.line}: error reading the scale", scale=True)
            break
        names.append(tokens[0])
        try:
            shift = parse_shift(tokens[1])
        except ScaleError:
            report.error(
                f"error at line {reader.line}: invalid shift '{tokens[1]}'", scale=True
            )
            shifts.append(Shift(0.0, 1, 1))
            continue
        shifts.append(shift)
        if shift.cents < 0 or shift.cents >= 1200:
            report.error(
                f"error at line {reader.line}: the notes in the scale must be equal or "
                "higher than 1/1 (0 cents) and lower than 2/1 (1200 cents)",
                scale=True,
            )
        if index == 0:
            if shift.cents != 0.0:
                report.error(
                    f"error at line {reader.line}: the first note in the scale must be "
                    "1/1 (0 cents shift)",
                    scale=True,
                )
        elif shift.cents <= shifts[index - 1].cents:
            report.error(
                f"error at line {reader.line}: the notes in the scale must be well ordered",
                scale=True,
            )
    return names, shifts


def _assign(
    config: Config,
    spec,
    value_text: str,
    line: int,
    systems: Sequence[str],
    report: LoadReport,
    messages: Optional[MessageQueue],
) -> None:
    attribute = _FIELDS[spec.id]
    current = getattr(config, attribute)

    if spec.type is ParameterType.STRING:
        if len(value_text) < spec.str_max_len:
            setattr(config, attribute, value_text)
        else:
            report.error(
                f"error: parse error at line {line}, '{spec.name} = {value_text}': "
                f"identifier too long (maximum length {spec.str_max_len} characters), "
                f"assuming default value '{current}'"
            )
    elif spec.type is ParameterType.INTEGER:
        value = _scan_int(value_text)
        if spec.id is ParameterId.FFT_SIZE:
            if value not in _ALLOWED_FFT_SIZES:
                report.error(
                    f"error: parse error at line {line}, '{spec.name} = {value_text}': "
                    "invalid value (allowed values are 256, 512, 1024, 2048 and 4096), "
                    f"assuming default value {current}"
                )
            else:
                setattr(config, attribute, value)
        elif value is not None and spec.int_min <= value <= spec.int_max:
            setattr(config, attribute, value)
        else:
            report.error(
                f"error: parse error at line {line}, '{spec.name} = {value_text}': "
                f"out of bounds (minimum {spec.int_min}, maximum {spec.int_max}), "
                f"assuming default value {current}"
            )
    elif spec.type is ParameterType.FLOAT:
        value = _scan_float(value_text)
        if value is not None and spec.float_min <= value <= spec.float_max:
            setattr(config, attribute, value)
        else:
            report.error(
                f"error: parse error at line {line}, '{spec.name} = {value_text}': "
                f"out of bounds (minimum {spec.float_min:.3f}, maximum "
                f"{spec.float_max:.3f}), assuming default value {current:.3f}"
            )
    else:
        if value_text in systems:
            setattr(config, attribute, value_text)
        else:
            text = (
                f"Error parsing the configuration file, line {line}: unrecognized "
                "audio system, assuming default value.\n"
            )
            report.error(text.rstrip("\n"))
            if messages is not None:
                messages.add_warning(text)


def parse_config(
    config: Config,
    lines: Iterable[str],
    audio_systems: Sequence[str] = (),
    messages: Optional[MessageQueue] = None,
) -> LoadReport:
    """Apply configuration lines to ``config``; options not given keep their values."""
    systems = list(audio_systems)
    report = LoadReport()
    reader = _LineReader(lines)
    config.optimize_internal_parameters = False

    step = _ScaleStep.NOT_YET
    scale_name = ""
    base_frequency = MID_C_FREQUENCY
    note_count = 0
    names: List[str] = []
    shifts: List[Shift] = []

    while True:
        text = reader.read()
        if text is None:
            break
        tokens = _split(text, _DELIMS)
        if not tokens or tokens[0].startswith("#"):
            continue
        keyword = tokens[0]

        if step is _ScaleStep.NOT_YET and keyword == "SCALE":
            step = _ScaleStep.READING
            continue

        if step is _ScaleStep.READING:
            if keyword == "NAME":
                scale_name = _rest_after(text, keyword)
                continue
            if keyword == "BASE_FREQUENCY":
                value = _scan_float(tokens[1]) if len(tokens) > 1 else None
                if value is not None:
                    base_frequency = value
                continue
            if keyword == "NOTE_COUNT":
                value = _scan_int(tokens[1]) if len(tokens) > 1 else None
                if value is not None and value >= 0:
                    note_count = value
                continue
            if keyword == "NOTES":
                names, shifts = _read_notes(reader, note_count, report)
                if reader.read() is None:
                    break
                continue
            if keyword == "}":
                step = _ScaleStep.DONE
                continue

        option = _LEGACY_DEVICE_OPTIONS.get(keyword, keyword)
        if option.startswith(_DEVICE_PREFIX):
            system = option[len(_DEVICE_PREFIX):]
            device = tokens[1] if len(tokens) > 1 else ""
            if system in systems:
                config.audio_devices[system] = device[:_DEVICE_MAX_LEN]
            else:
                report.warning(
                    f"warning: line {reader.line}, audio system '{system}' not found"
                )
            continue

        try:
            spec = find_parameter(keyword)
        except KeyError:
            report.error(
                f"error: parse error at line {reader.line}: unknown keyword '{keyword}'"
            )
            continue

        if spec.deprecated:
            report.warning(f"warning: line {reader.line}, deprecated option '{keyword}'")

        if spec.id not in _FIELDS:
            continue

        if len(tokens) < 2:
            report.error(f"error: parse error at line {reader.line}: value expected")
            continue

        _assign(config, spec, tokens[1], reader.line, systems, report, messages)

    if step is not _ScaleStep.NOT_YET and not report.scale_errors:
        if len(names) == len(shifts):
            config.scale = Scale(scale_name, base_frequency, names, shifts)
            report.scale_loaded = True

    if not report.ok and messages is not None:
        messages.add_warning(_FILE_ERRORS_WARNING)

    return report


def load_config(
    config: Config,
    path,
    audio_systems: Sequence[str] = (),
    messages: Optional[MessageQueue] = None,
) -> LoadReport:
    """Read a configuration file into ``config``; OSError if it cannot be opened."""
    with open(path, encoding="utf-8", errors="replace") as fp:
        return parse_config(config, fp, audio_systems, messages)
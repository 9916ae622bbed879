"""Specifications of the options understood in configuration files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple


class ParameterId(IntEnum):
    """Identifier of a configuration option; the order is the file order."""

    AUDIO_SYSTEM = 0
    ROOT_FREQUENCY_ERROR = 1
    FFT_SIZE = 2
    TEMPORAL_WINDOW = 3
    MIN_SNR = 4
    CALCULATION_RATE = 5
    VISUALIZATION_RATE = 6
    MINIMUM_FREQUENCY = 7
    MAXIMUM_FREQUENCY = 8
    # obsolete options, still recognised when reading older files
    MIN_FREQUENCY = 9
    GAIN = 10
    NOISE_THRESHOLD = 11
    SAMPLE_RATE = 12
    OVERSAMPLING = 13
    DFT_NUMBER = 14
    DFT_SIZE = 15
    PEAK_ORDER = 16
    PEAK_NUMBER = 17
    PEAK_HALF_WIDTH = 18
    PEAK_REJECTION_RELATION = 19
    AUDIO_DEV = 20
    AUDIO_DEV_ALSA = 21
    AUDIO_DEV_JACK = 22
    AUDIO_DEV_PULSEAUDIO = 23


class ParameterType(Enum):
    """Kind of value an option holds."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    AUDIO_SYSTEM = "audio_system"


@dataclass(frozen=True)
class ParameterSpec:
    """Name, type, units and allowed range of one configuration option."""

    id: ParameterId
    type: ParameterType
    name: str
    units: Optional[str] = None
    deprecated: bool = False
    str_max_len: Optional[int] = None
    int_min: Optional[int] = None
    int_max: Optional[int] = None
    float_min: Optional[float] = None
    float_max: Optional[float] = None


def _string(pid: ParameterId, name: str, max_len: int, deprecated: bool) -> ParameterSpec:
    return ParameterSpec(pid, ParameterType.STRING, name, None, deprecated, str_max_len=max_len)


def _integer(
    pid: ParameterId, name: str, units: Optional[str], low: int, high: int, deprecated: bool
) -> ParameterSpec:
    return ParameterSpec(
        pid, ParameterType.INTEGER, name, units, deprecated, int_min=low, int_max=high
    )


def _float(
    pid: ParameterId,
    name: str,
    units: Optional[str],
    low: float,
    high: float,
    deprecated: bool,
) -> ParameterSpec:
    return ParameterSpec(
        pid, ParameterType.FLOAT, name, units, deprecated, float_min=low, float_max=high
    )


def _build_specs() -> Tuple[ParameterSpec, ...]:
    P = ParameterId
    specs = [
        ParameterSpec(P.AUDIO_SYSTEM, ParameterType.AUDIO_SYSTEM, "AUDIO_SYSTEM"),
        _float(P.MIN_SNR, "MIN_SNR", "dB", 0.0, 40.0, False),
        _float(P.ROOT_FREQUENCY_ERROR, "ROOT_FREQUENCY_ERROR", "cents", -500.0, 500.0, False),
        _integer(P.FFT_SIZE, "FFT_SIZE", "samples", 256, 4096, False),
        _float(P.TEMPORAL_WINDOW, "TEMPORAL_WINDOW", "seconds", 0.0, 15.0, False),
        _float(P.CALCULATION_RATE, "CALCULATION_RATE", "Hz", 1.0, 30.0, False),
        _float(P.VISUALIZATION_RATE, "VISUALIZATION_RATE", "Hz", 1.0, 40.0, False),
        _float(P.MINIMUM_FREQUENCY, "MINIMUM_FREQUENCY", "Hz", 0.0, 22050.0, False),
        _float(P.MAXIMUM_FREQUENCY, "MAXIMUM_FREQUENCY", "Hz", 0.0, 22050.0, False),
        _float(P.GAIN, "GAIN", "dB", -90.0, 90.0, True),
        _integer(P.PEAK_ORDER, "PEAK_ORDER", None, 0, 10, True),
        _float(P.MIN_FREQUENCY, "MIN_FREQUENCY", "Hz", 0.0, 22050.0, True),
        _integer(P.SAMPLE_RATE, "SAMPLE_RATE", "Hz", 100, 200000, True),
        _integer(P.OVERSAMPLING, "OVERSAMPLING", None, 1, 120, True),
        _integer(P.PEAK_NUMBER, "PEAK_NUMBER", "samples", 1, 10, True),
        _integer(P.PEAK_HALF_WIDTH, "PEAK_HALF_WIDTH", "samples", 1, 5, True),
        _float(P.PEAK_REJECTION_RELATION, "PEAK_REJECTION_RELATION", "dB", 0.0, 100.0, True),
        _integer(P.DFT_NUMBER, "DFT_NUMBER", "DFTs", 0, 10, True),
        _integer(P.DFT_SIZE, "DFT_SIZE", "samples", 4, 100, True),
        _float(P.NOISE_THRESHOLD, "NOISE_THRESHOLD", "dB", 0.0, 40.0, True),
        _string(P.AUDIO_DEV, "AUDIO_DEV", 512, True),
        _string(P.AUDIO_DEV_ALSA, "AUDIO_DEV_ALSA", 512, True),
        _string(P.AUDIO_DEV_JACK, "AUDIO_DEV_JACK", 512, True),
        _string(P.AUDIO_DEV_PULSEAUDIO, "AUDIO_DEV_PULSEAUDIO", 512, True),
    ]
    return tuple(sorted(specs, key=lambda spec: spec.id))


_SPECS: Tuple[ParameterSpec, ...] = _build_specs()
_BY_NAME: Dict[str, ParameterSpec] = {spec.name: spec for spec in _SPECS}


def parameter_specs() -> Tuple[ParameterSpec, ...]:
    """All option specifications, ordered by identifier."""
    return _SPECS


def get_parameter_spec(parameter_id) -> ParameterSpec:
    """Specification of the option with the given identifier.

    Raises ValueError for an identifier that does not exist.
    """
    return _SPECS[ParameterId(parameter_id)]


def find_parameter(name: str) -> ParameterSpec:
    """Specification of the option with the given keyword; KeyError if unknown."""
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"unknown keyword {name!r}") from None
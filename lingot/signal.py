"""Spectrum analysis: windows, noise level and fundamental frequency estimation."""

from __future__ import annotations

import math
from enum import Enum
from itertools import islice
from typing import List, Sequence, Tuple

# smoothing factor of the low-pass filter that follows the noise floor
_NOISE_FILTER_C = 0.1

# a bin whose frequency is this close to a multiple of the previous estimate
# is favoured by _HARMONIC_BONUS
_HARMONIC_TOLERANCE = 0.07
_HARMONIC_BONUS = 1.5

# peaks this many dB below the strongest one are discarded
_PEAK_DROP_DB = 20.0

# maximum relative error for two peaks to count as harmonically related
_RATIO_TOLERANCE = 0.02
_MAX_DIVISOR = 4


class WindowType(Enum):
    """Shape of the analysis window."""

    HANNING = "hanning"
    HAMMING = "hamming"


def window(n: int, window_type: WindowType) -> List[float]:
    """Return an ``n``-sample window of the given shape."""
    if n < 2:
        raise ValueError("a window needs at least two samples")
    window_type = WindowType(window_type)
    span = n - 1
    if window_type is WindowType.HANNING:
        return [0.5 * (1.0 - math.cos(2.0 * math.pi * i / span)) for i in range(n)]
    return [0.53836 - 0.46164 * math.cos(2.0 * math.pi * i / span) for i in range(n)]


def compute_noise_level(spd: Sequence[float], n: int, cbuffer_size: int) -> List[float]:
    """Estimate the noise floor of the first ``n`` bins of a power spectrum.

    A one-pole low-pass filter is first run over the first ``cbuffer_size``
    bins to settle, then over the first ``n`` bins to produce the estimate.
    """
    if n < 0 or cbuffer_size < 0:
        raise ValueError("sizes must not be negative")
    if n > len(spd) or cbuffer_size > len(spd):
        raise ValueError("sizes exceed the length of the spectrum")

    level = 0.0
    for sample in islice(spd, cbuffer_size):
        level = _NOISE_FILTER_C * sample + (1.0 - _NOISE_FILTER_C) * level

    result = []
    for sample in islice(spd, n):
        level = _NOISE_FILTER_C * sample + (1.0 - _NOISE_FILTER_C) * level
        result.append(level)
    return result


def frequency_penalty(freq: float) -> float:
    """Weight that slightly favours candidate fundamentals at higher frequencies."""
    f0, f1 = 100.0, 1000.0
    alpha0, alpha1 = 0.99, 1.0
    slope = (alpha0 - alpha1) / (f0 - f1)
    offset = -(alpha0 * f1 - f0 * alpha1) / (f0 - f1)
    return freq * slope + offset


def _round(x: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _is_peak(signal: Sequence[float], index: int, half_width: int) -> bool:
    for j in range(half_width):
        if signal[index + j] < signal[index + j + 1] or signal[index - j] < signal[index - j - 1]:
            return False
    return True


def _quinn2_tau(x: float) -> float:
    return 0.25 * math.log(3 * x * x + 6 * x + 1.0) - 0.102062072615966 * math.log(
        (x + 1.0 - 0.816496580927726) / (x + 1.0 + 0.816496580927726)
    )


def _quinn2(y1: complex, y2: complex, y3: complex) -> float:
    """Fractional bin offset of a spectral peak from its three FFT bins."""
    power = abs(y2) ** 2
    ap = (y3 * y2.conjugate()).real / power
    dp = -ap / (1.0 - ap)
    am = (y1 * y2.conjugate()).real / power
    dm = am / (1.0 - am)
    return 0.5 * (dp + dm) + _quinn2_tau(dp * dp) - _quinn2_tau(dm * dm)


def _select_peaks(
    snr: Sequence[float],
    freq: float,
    n_peaks: int,
    lowest_index: int,
    highest_index: int,
    peak_half_width: int,
    delta_f_fft: float,
    min_snr: float,
) -> List[Tuple[int, float]]:
    """Keep the strongest ``n_peaks`` peaks above ``min_snr`` as (bin, weight)."""
    slots: List[Tuple[int, float]] = []
    for i in range(lowest_index, highest_index):
        factor = 1.0
        if freq != 0.0:
            ratio = i * delta_f_fft / freq
            if abs(ratio - _round(ratio)) < _HARMONIC_TOLERANCE:
                factor = _HARMONIC_BONUS
        weight = snr[i] * factor

        if weight <= min_snr or not _is_peak(snr, i, peak_half_width):
            continue

        if len(slots) < n_peaks:
            slots.append((i, weight))
            continue

        weakest = 0
        for j, (_, magnitude) in enumerate(slots):
            if magnitude < slots[weakest][1]:
                weakest = j
        if snr[i] > snr[slots[weakest][0]]:
            slots[weakest] = (i, weight)
    return slots


def estimate_fundamental_frequency(
    snr: Sequence[float],
    freq: float,
    fft: Sequence[complex],
    n: int,
    n_peaks: int,
    lowest_index: int,
    highest_index: int,
    peak_half_width: int,
    delta_f_fft: float,
    min_snr: float,
    min_q: float,
    min_freq: float,
) -> Tuple[float, int]:
    """Find the fundamental among the peaks of a spectrum.

    Returns ``(frequency, divisor)``: the frequency of the strongest harmonic
    of the best harmonic set, and its harmonic number, so that the fundamental
    is ``frequency / divisor``. A frequency of 0.0 means nothing was found.
    ``freq`` is the previous estimate (0.0 if none); bins near its multiples
    are favoured.
    """
    lowest_index = max(lowest_index, peak_half_width)
    if peak_half_width + highest_index > n:
        highest_index = n - peak_half_width

    slots = _select_peaks(
        snr, freq, n_peaks, lowest_index, highest_index,
        peak_half_width, delta_f_fft, min_snr,
    )
    if not slots:
        return 0.0, 1

    maximum = max(0.0, max(magnitude for _, magnitude in slots))
    bins = sorted(index for index, magnitude in slots if magnitude >= maximum - _PEAK_DROP_DB)

    interpolated = [
        delta_f_fft * (p + _quinn2(fft[p - 1], fft[p], fft[p + 1])) for p in bins
    ]

    best_q = 0.0
    best_f = 0.0
    best_divisor = 1

    for tone in interpolated:
        for div in range(1, _MAX_DIVISOR + 1):
            ground = tone / div
            if ground <= min_freq:
                break
            related = [
                k for k, f in enumerate(interpolated)
                if abs(f / ground - _round(f / ground)) < _RATIO_TOLERANCE
            ]
            if not related:
                continue

            penalty = frequency_penalty(ground)
            q = 0.0
            strongest = related[0]
            strongest_magnitude = 0.0
            for k in related:
                magnitude = snr[bins[k]]
                q += magnitude * penalty
                if magnitude > strongest_magnitude:
                    strongest = k
                    strongest_magnitude = magnitude

            if q > best_q:
                best_q = q
                best_f = interpolated[strongest]
                best_divisor = _round(best_f / ground)

    if best_f != 0.0 and best_q < min_q:
        best_f = 0.0

    return best_f, best_divisor
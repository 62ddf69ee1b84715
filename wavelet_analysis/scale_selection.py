# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Adaptive Scale Selection Module

Selectors that choose CWT scales from a signal, a wavelet and a sampling
rate (or a full ScaleSelectionConfig):

- DyadicScaleSelector: powers of two, optionally split into sub-octaves
- SignalAdaptiveScaleSelector: extra scales around spectral peaks
- OptimalScaleSelector: linear, logarithmic, dyadic, mel or golden-ratio
  spacing over the range the wavelet can resolve

Every selector returns a strictly ascending array of positive scales no
longer than the configured maximum.
"""

import logging
import math
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import List, Tuple, Union

import numpy as np
from scipy import signal as sp_signal

from .config import ScaleSelectionConfig, ScaleSpacing
from .exceptions import InvalidArgumentError
from .spectral import next_power_of_two

logger = logging.getLogger(__name__)

SamplingRateOrConfig = Union[float, ScaleSelectionConfig]


def _unique_ascending(scales, rtol: float = 1e-9) -> np.ndarray:
    """Sort and drop scales within ``rtol`` of their predecessor."""
    ordered = np.sort(np.asarray(scales, dtype=float))
    ordered = ordered[np.isfinite(ordered) & (ordered > 0)]
    kept: List[float] = []
    for value in ordered:
        if not kept or value > kept[-1] * (1.0 + rtol):
            kept.append(value)
    return np.array(kept, dtype=float)


def _range_from_frequencies(wavelet, config: ScaleSelectionConfig,
                            min_scale: float, max_scale: float) -> Tuple[float, float]:
    """Override derived scale bounds with configured frequency bounds."""
    center = wavelet.center_frequency() * config.sampling_rate
    if config.max_frequency > 0:
        min_scale = center / config.max_frequency
    if config.min_frequency > 0:
        max_scale = center / config.min_frequency
    if max_scale <= min_scale:
        logger.warning("Degenerate scale range [%g, %g]; widening to three octaves",
                       min_scale, max_scale)
        max_scale = min_scale * 8.0
    return min_scale, max_scale


class AdaptiveScaleSelector(ABC):
    """Base class for scale selectors."""

    def select_scales(self, signal, wavelet, sampling_rate_or_config: SamplingRateOrConfig) -> np.ndarray:
        """Choose scales for analysing ``signal`` with ``wavelet``

        Parameters
        ----------
        signal : array_like
            Real signal, only its length and spectrum are used
        wavelet : ContinuousWavelet
            Analyzing wavelet
        sampling_rate_or_config : float or ScaleSelectionConfig
            Sampling rate in Hz, or a full configuration

        Returns
        -------
        np.ndarray
            Strictly ascending positive scales
        """
        if signal is None:
            raise InvalidArgumentError("Signal must not be None")
        signal = np.asarray(signal, dtype=float)
        if signal.ndim != 1 or signal.size == 0:
            raise InvalidArgumentError("Signal must be a non-empty one-dimensional sequence")
        if not np.all(np.isfinite(signal)):
            raise InvalidArgumentError("Signal contains NaN or infinite values")
        if wavelet is None:
            raise InvalidArgumentError("Wavelet must not be None")
        config = self._config_for(sampling_rate_or_config)

        scales = _unique_ascending(self._select(signal, wavelet, config))
        if scales.size > config.max_scales:
            keep = np.unique(np.linspace(0, scales.size - 1, config.max_scales).round().astype(int))
            scales = scales[keep]
        logger.debug("%s selected %d scales in [%g, %g]", type(self).__name__,
                     scales.size, scales[0], scales[-1])
        return scales

    def _config_for(self, value: SamplingRateOrConfig) -> ScaleSelectionConfig:
        if isinstance(value, ScaleSelectionConfig):
            return value
        if value is None:
            raise InvalidArgumentError("Sampling rate or configuration must not be None")
        return self.default_config(float(value))

    def default_config(self, sampling_rate: float) -> ScaleSelectionConfig:
        return ScaleSelectionConfig(sampling_rate=sampling_rate)

    @abstractmethod
    def _select(self, signal: np.ndarray, wavelet, config: ScaleSelectionConfig) -> np.ndarray:
        """Return candidate scales; the caller sorts, deduplicates and caps them."""

    @staticmethod
    def get_frequency_range(scales, wavelet, sampling_rate: float) -> Tuple[float, float]:
        """(lowest, highest) pseudo-frequency in Hz covered by ``scales``"""
        scales = np.asarray(scales, dtype=float)
        if scales.size == 0 or np.any(scales <= 0):
            raise InvalidArgumentError("Scales must be a non-empty sequence of positive values")
        if sampling_rate <= 0:
            raise InvalidArgumentError(f"Sampling rate must be positive, got {sampling_rate}")
        center = wavelet.center_frequency() * sampling_rate
        return center / scales.max(), center / scales.min()

    @staticmethod
    def estimate_scale_count(min_freq: float, max_freq: float, scales_per_octave: int) -> int:
        """Scales needed to cover [min_freq, max_freq] at ``scales_per_octave``"""
        if min_freq <= 0 or max_freq <= min_freq:
            raise InvalidArgumentError(f"Invalid frequency range [{min_freq}, {max_freq}]")
        if scales_per_octave < 1:
            raise InvalidArgumentError(
                f"Scales per octave must be at least 1, got {scales_per_octave}")
        return max(1, math.ceil(math.log2(max_freq / min_freq) * scales_per_octave))


class DyadicScaleSelector(AdaptiveScaleSelector):
    """Scales 2^(j / sub_octaves) between frequency-derived bounds.

    Neighbouring scales differ by exactly 2^(1 / sub_octaves). When the grid
    is longer than ``max_scales`` a contiguous window is kept, centered on
    the strongest spectral peak if signal adaptation is enabled.

    Parameters
    ----------
    sub_octaves : int, optional
        Scales per octave, 1 to 14, by default 1
    """

    MAX_SUB_OCTAVES = 14
    PEAK_THRESHOLD = 0.1
    MAX_PEAKS = 5

    def __init__(self, sub_octaves: int = 1):
        if not 1 <= sub_octaves <= self.MAX_SUB_OCTAVES:
            raise InvalidArgumentError(
                f"Sub-octaves must be between 1 and {self.MAX_SUB_OCTAVES}, got {sub_octaves}")
        self.sub_octaves = int(sub_octaves)

    @staticmethod
    def generate_dyadic_scales(min_scale: float, max_scale: float, sub_octaves: int = 1) -> np.ndarray:
        """All scales 2^(j / sub_octaves) inside [min_scale, max_scale]"""
        if min_scale <= 0 or max_scale < min_scale:
            raise InvalidArgumentError(f"Invalid scale range [{min_scale}, {max_scale}]")
        if sub_octaves < 1:
            raise InvalidArgumentError(f"Sub-octaves must be positive, got {sub_octaves}")
        low = math.ceil(math.log2(min_scale) * sub_octaves - 1e-9)
        high = math.floor(math.log2(max_scale) * sub_octaves + 1e-9)
        if high < low:
            return np.array([2.0 ** (round(math.log2(math.sqrt(min_scale * max_scale)) * sub_octaves)
                                     / sub_octaves)])
        return 2.0 ** (np.arange(low, high + 1) / sub_octaves)

    def _scale_range(self, signal_length, wavelet, config):
        """Bounds clamped to 1 <= scale <= N / 4."""
        min_scale = max(1.0, 2.0 * wavelet.center_frequency())
        max_scale = max(min_scale, signal_length / 4.0)
        min_scale, max_scale = _range_from_frequencies(wavelet, config, min_scale, max_scale)
        min_scale = max(1.0, min_scale)
        max_scale = max(min_scale, min(max_scale, signal_length / 4.0))
        return min_scale, max_scale

    def dominant_scales(self, signal, wavelet, sampling_rate) -> np.ndarray:
        """Scales of the strongest FFT peaks, strongest first."""
        magnitude = np.abs(np.fft.rfft(signal - signal.mean()))
        freqs = np.fft.rfftfreq(signal.size, d=1.0 / sampling_rate)
        if magnitude.size < 3 or magnitude.max() <= 0:
            return np.array([])
        peaks, _ = sp_signal.find_peaks(magnitude, height=self.PEAK_THRESHOLD * magnitude.max())
        peaks = peaks[freqs[peaks] > 0]
        strongest = peaks[np.argsort(magnitude[peaks])[::-1][:self.MAX_PEAKS]]
        return wavelet.center_frequency() * sampling_rate / freqs[strongest]

    def _select(self, signal, wavelet, config):
        min_scale, max_scale = self._scale_range(signal.size, wavelet, config)
        scales = self.generate_dyadic_scales(min_scale, max_scale, self.sub_octaves)
        if scales.size <= config.max_scales:
            return scales

        start = 0
        if config.use_signal_adaptation:
            dominant = self.dominant_scales(signal, wavelet, config.sampling_rate)
            dominant = dominant[(dominant >= scales[0]) & (dominant <= scales[-1])]
            if dominant.size:
                center = int(np.argmin(np.abs(np.log2(scales / dominant[0]))))
                start = center - config.max_scales // 2
        start = int(np.clip(start, 0, scales.size - config.max_scales))
        return scales[start:start + config.max_scales]


class SignalAdaptiveScaleSelector(AdaptiveScaleSelector):
    """Logarithmic scales with extra density around the signal's spectral peaks.

    The spectrum is a Hann-windowed periodogram of (at most) the central
    1024 samples. Peaks are local maxima over +-2 bins holding more than 1%
    of the total energy.
    """

    MAX_ANALYSIS_SAMPLES = 1024
    ENERGY_THRESHOLD = 0.01
    PEAK_ENERGY_COVERAGE = 0.9
    MAX_PEAKS = 10
    DENSITY_FACTOR = 1.5

    def spectrum(self, signal, sampling_rate):
        """(frequencies, power) of the central analysis segment"""
        if signal.size > self.MAX_ANALYSIS_SAMPLES:
            start = (signal.size - self.MAX_ANALYSIS_SAMPLES) // 2
            signal = signal[start:start + self.MAX_ANALYSIS_SAMPLES]
        return sp_signal.periodogram(signal, fs=sampling_rate, window='hann',
                                     nfft=next_power_of_two(signal.size), scaling='spectrum')

    def dominant_frequencies(self, freqs, power) -> List[Tuple[float, float]]:
        """[(frequency, relative strength)] of the dominant peaks, strongest first"""
        total = power[1:].sum()
        if power.size < 5 or total <= 0:
            return []
        candidates = sp_signal.argrelmax(power, order=2)[0]
        candidates = [i for i in candidates if i > 0 and power[i] > self.ENERGY_THRESHOLD * total]
        candidates.sort(key=lambda i: power[i], reverse=True)
        if not candidates:
            return []

        peak_energy = sum(power[i] for i in candidates)
        strongest = power[candidates[0]]
        dominant, covered = [], 0.0
        for i in candidates[:self.MAX_PEAKS]:
            dominant.append((float(freqs[i]), float(power[i] / strongest)))
            covered += power[i]
            if covered >= self.PEAK_ENERGY_COVERAGE * peak_energy:
                break
        return dominant

    def _frequency_range(self, signal_length, freqs, power, config):
        lowest = config.sampling_rate / signal_length
        nyquist = config.nyquist
        min_freq, max_freq = lowest, nyquist

        energy = np.cumsum(power[1:])
        if energy.size and energy[-1] > 0:
            energy /= energy[-1]
            band = freqs[1:]
            # one octave of margin on both sides of the 5%-95% energy band
            min_freq = max(lowest, band[np.searchsorted(energy, 0.05)] / 2.0)
            max_freq = min(nyquist, band[min(np.searchsorted(energy, 0.95), band.size - 1)] * 2.0)

        if config.min_frequency > 0:
            min_freq = config.min_frequency
        if config.max_frequency > 0:
            max_freq = config.max_frequency
        if max_freq <= min_freq:
            logger.warning("Degenerate frequency range [%g, %g] Hz; using [%g, %g] Hz",
                           min_freq, max_freq, lowest, nyquist)
            min_freq, max_freq = lowest, nyquist
            if max_freq <= min_freq:
                max_freq = min_freq * 8.0
        return min_freq, max_freq

    def _select(self, signal, wavelet, config):
        freqs, power = self.spectrum(signal, config.sampling_rate)
        min_freq, max_freq = self._frequency_range(signal.size, freqs, power, config)
        center = wavelet.center_frequency() * config.sampling_rate
        min_scale, max_scale = center / max_freq, center / min_freq

        count = self.estimate_scale_count(min_freq, max_freq, config.scales_per_octave)
        count = max(2, min(config.max_scales, count))
        scales = list(np.geomspace(min_scale, max_scale, count))

        peak_scales = []
        if config.use_signal_adaptation:
            dense_ratio = 2.0 ** (1.0 / (config.scales_per_octave * self.DENSITY_FACTOR))
            for frequency, strength in self.dominant_frequencies(freqs, power):
                peak_scale = center / frequency
                if not min_scale <= peak_scale <= max_scale:
                    continue
                peak_scales.append(peak_scale)
                extra = max(2, math.ceil(strength * self.DENSITY_FACTOR * config.scales_per_octave))
                for step in range(-(extra // 2), extra // 2 + 1):
                    candidate = peak_scale * dense_ratio ** step
                    if min_scale <= candidate <= max_scale:
                        scales.append(candidate)

        scales = _unique_ascending(scales)
        if scales.size > config.max_scales:
            scales = self._prioritize(scales, peak_scales, config.max_scales)
        return scales

    @staticmethod
    def _prioritize(scales, peak_scales, max_scales):
        """Keep the scales closest to a peak, plus both range ends."""
        if peak_scales:
            distance = np.min(np.abs(np.log2(scales[:, None] / np.asarray(peak_scales)[None, :])), axis=1)
        else:
            distance = np.zeros(scales.size)
        distance[0] = distance[-1] = -1.0
        keep = np.sort(np.argsort(distance, kind='stable')[:max_scales])
        return scales[keep]


@lru_cache(maxsize=64)
def _critical_ratio_cap(center_frequency: float, bandwidth: float) -> float:
    # high-Q wavelets have narrow passbands and need denser sampling
    quality = center_frequency / bandwidth
    return float(np.clip(1.0 + 1.0 / (2.0 * quality), 1.1, 2.0))


class OptimalScaleSelector(AdaptiveScaleSelector):
    """Scales spaced by a chosen law over the range the wavelet resolves.

    Without configured frequencies the range runs from just above the
    Nyquist scale, 2 * (cf + bw), to the largest scale whose kernel still
    fits the signal, min(N / (4 * bw), cf * N / 2).
    """

    GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0
    MEL_FACTOR = 1127.01048
    MEL_BREAK = 700.0

    def _scale_range(self, signal_length, wavelet, config):
        center = wavelet.center_frequency()
        bandwidth = wavelet.bandwidth()
        min_scale = 2.0 * (center + bandwidth)
        max_scale = min(signal_length / (4.0 * bandwidth), center * signal_length / 2.0)
        return _range_from_frequencies(wavelet, config, min_scale, max_scale)

    def _scale_count(self, min_freq, max_freq, config):
        if config.frequency_resolution > 0:
            count = math.ceil((max_freq - min_freq) / config.frequency_resolution) + 1
        else:
            count = self.estimate_scale_count(min_freq, max_freq, config.scales_per_octave)
        return max(1, min(config.max_scales, count))

    def _select(self, signal, wavelet, config):
        min_scale, max_scale = self._scale_range(signal.size, wavelet, config)
        center = wavelet.center_frequency() * config.sampling_rate
        min_freq, max_freq = center / max_scale, center / min_scale
        count = self._scale_count(min_freq, max_freq, config)
        spacing = config.spacing

        if count == 1:
            return np.array([min_scale])
        if spacing == ScaleSpacing.LINEAR:
            return np.linspace(min_scale, max_scale, count)
        if spacing == ScaleSpacing.LOGARITHMIC:
            return np.geomspace(min_scale, max_scale, count)
        if spacing == ScaleSpacing.DYADIC:
            scales = DyadicScaleSelector.generate_dyadic_scales(
                min_scale, max_scale, config.scales_per_octave)
            return scales[:config.max_scales]
        if spacing == ScaleSpacing.MEL_SCALE:
            mels = np.linspace(self.to_mel(min_freq), self.to_mel(max_freq), count)
            return np.sort(center / self.from_mel(mels))
        return self._golden_ratio_scales(wavelet, signal.size, config, min_scale, max_scale)

    def _golden_ratio_scales(self, wavelet, signal_length, config, min_scale, max_scale):
        scales = []
        scale = min_scale
        while scale <= max_scale * (1.0 + 1e-9) and len(scales) < config.max_scales:
            scales.append(scale)
            scale *= self.GOLDEN_RATIO
        critical = self.generate_critical_sampling_scales(
            wavelet, signal_length, config.sampling_rate, config.max_scales)
        scales.extend(s for s in critical if min_scale <= s <= max_scale)
        scales = _unique_ascending(scales)
        if scales.size > config.max_scales:
            keep = np.unique(np.linspace(0, scales.size - 1, config.max_scales).round().astype(int))
            scales = scales[keep]
        return scales

    @classmethod
    def to_mel(cls, frequency):
        return cls.MEL_FACTOR * np.log1p(np.asarray(frequency, dtype=float) / cls.MEL_BREAK)

    @classmethod
    def from_mel(cls, mel):
        return cls.MEL_BREAK * np.expm1(np.asarray(mel, dtype=float) / cls.MEL_FACTOR)

    @staticmethod
    def generate_scales_for_frequency_resolution(min_freq: float, max_freq: float, wavelet,
                                                 sampling_rate: float, resolution: float) -> np.ndarray:
        """Scales whose pseudo-frequencies are ``resolution`` Hz apart

        Returns
        -------
        np.ndarray
            Ascending scales for min_freq, min_freq + resolution, ... <= max_freq
        """
        if min_freq <= 0 or max_freq <= min_freq:
            raise InvalidArgumentError(f"Invalid frequency range [{min_freq}, {max_freq}]")
        if resolution <= 0:
            raise InvalidArgumentError(f"Frequency resolution must be positive, got {resolution}")
        if sampling_rate <= 0:
            raise InvalidArgumentError(f"Sampling rate must be positive, got {sampling_rate}")
        freqs = np.arange(min_freq, max_freq + resolution * 1e-9, resolution)
        return np.sort(wavelet.center_frequency() * sampling_rate / freqs)

    @staticmethod
    def generate_critical_sampling_scales(wavelet, signal_length: int, sampling_rate: float,
                                          max_scales: int = 200) -> np.ndarray:
        """Scales spaced just densely enough for the wavelet's passbands to overlap

        The ratio between neighbours is min(exp(pi * bw / cf), cap) where the
        cap shrinks as the wavelet's quality factor cf / bw grows.
        """
        if signal_length < 1:
            raise InvalidArgumentError(f"Signal length must be positive, got {signal_length}")
        if sampling_rate <= 0:
            raise InvalidArgumentError(f"Sampling rate must be positive, got {sampling_rate}")
        if max_scales < 1:
            raise InvalidArgumentError(f"Max scales must be at least 1, got {max_scales}")
        center = wavelet.center_frequency()
        bandwidth = wavelet.bandwidth()
        ratio = min(math.exp(math.pi * bandwidth / center), _critical_ratio_cap(center, bandwidth))

        min_scale = max(1.0, 2.0 * center)
        max_scale = min(signal_length / (4.0 * bandwidth), center * signal_length / 2.0)
        scales = [min_scale]
        while scales[-1] * ratio <= max_scale and len(scales) < max_scales:
            scales.append(scales[-1] * ratio)
        return np.array(scales)

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Configuration objects for the wavelet analysis package.

Both configuration classes are immutable value objects that validate their
fields at construction time, so a single instance can be shared freely
between concurrent analyses.
"""

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .exceptions import InvalidArgumentError
from .spectral import is_power_of_two


class PaddingStrategy(Enum):
    """How the signal is extended past its boundaries before convolution."""
    ZERO = 0       # out-of-range samples are zero
    REFLECT = 1    # mirror without repeating the edge sample
    SYMMETRIC = 2  # mirror repeating the edge sample
    PERIODIC = 3   # wrap around

    @property
    def numpy_mode(self) -> str:
        return _NUMPY_PAD_MODES[self]


_NUMPY_PAD_MODES = {
    PaddingStrategy.ZERO: 'constant',
    PaddingStrategy.REFLECT: 'reflect',
    PaddingStrategy.SYMMETRIC: 'symmetric',
    PaddingStrategy.PERIODIC: 'wrap',
}


class ScaleSpacing(Enum):
    """Spacing laws understood by the scale selectors"""
    LINEAR = 0
    LOGARITHMIC = 1
    DYADIC = 2
    MEL_SCALE = 3
    ADAPTIVE = 4


@dataclass(frozen=True)
class CWTConfig:
    """Options for a continuous wavelet transform.

    Parameters
    ----------
    fft_enabled : bool, optional
        Allow FFT-accelerated convolution, by default True
    fft_size : int, optional
        Minimum FFT length; 0 selects it automatically, otherwise it must be
        a power of two, by default 0
    fft_threshold : int, optional
        Signals at least this long use the FFT path, by default 64
    normalize_scales : bool, optional
        Multiply each scale row by 1/sqrt(scale), by default True
    padding : PaddingStrategy, optional
        Boundary extension applied before convolving, by default ZERO
    parallel : bool, optional
        Compute scales on a thread pool, by default False
    max_workers : int, optional
        Thread pool size, by default the number of CPUs
    """
    fft_enabled: bool = True
    fft_size: int = 0
    fft_threshold: int = 64
    normalize_scales: bool = True
    padding: PaddingStrategy = PaddingStrategy.ZERO
    parallel: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.fft_size < 0:
            raise InvalidArgumentError(f"FFT size must be non-negative, got {self.fft_size}")
        if self.fft_size > 0 and (self.fft_size < 2 or not is_power_of_two(self.fft_size)):
            raise InvalidArgumentError(
                f"FFT size must be 0 (auto) or a power of two >= 2, got {self.fft_size}")
        if self.fft_threshold < 1:
            raise InvalidArgumentError(f"FFT threshold must be positive, got {self.fft_threshold}")
        if not isinstance(self.padding, PaddingStrategy):
            raise InvalidArgumentError(f"Unknown padding strategy: {self.padding!r}")
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidArgumentError(f"max_workers must be positive, got {self.max_workers}")

    @classmethod
    def default(cls) -> 'CWTConfig':
        return cls()

    @classmethod
    def for_real_time_processing(cls) -> 'CWTConfig':
        """Direct summation on the calling thread: lowest latency for short signals."""
        return cls(fft_enabled=False, parallel=False)

    @classmethod
    def for_batch_processing(cls) -> 'CWTConfig':
        """FFT convolution fanned out across all CPUs."""
        return cls(fft_enabled=True, parallel=True)

    def with_options(self, **changes) -> 'CWTConfig':
        return replace(self, **changes)

    def should_use_fft(self, signal_length: int) -> bool:
        """Decide between FFT and direct convolution for a signal length."""
        if not self.fft_enabled:
            return False
        if self.fft_size > 0:
            return signal_length >= self.fft_size // 2
        return signal_length >= self.fft_threshold

    @property
    def worker_count(self) -> int:
        return self.max_workers or os.cpu_count() or 1


@dataclass(frozen=True)
class ScaleSelectionConfig:
    """Options shared by the adaptive scale selectors.

    Parameters
    ----------
    sampling_rate : float
        Sampling rate of the analysed signal in Hz
    min_frequency, max_frequency : float, optional
        Frequency band of interest; 0 derives the bound from the signal
    spacing : ScaleSpacing, optional
        Spacing law, by default LOGARITHMIC
    scales_per_octave : int, optional
        Scale density, by default 10
    max_scales : int, optional
        Upper bound on the number of scales returned, by default 200
    use_signal_adaptation : bool, optional
        Let the signal's spectrum influence the selection, by default True
    frequency_resolution : float, optional
        Target spacing in Hz between adjacent scales; 0 disables it
    """
    sampling_rate: float
    min_frequency: float = 0.0
    max_frequency: float = 0.0
    spacing: ScaleSpacing = ScaleSpacing.LOGARITHMIC
    scales_per_octave: int = 10
    max_scales: int = 200
    use_signal_adaptation: bool = True
    frequency_resolution: float = 0.0

    def __post_init__(self):
        if not self.sampling_rate > 0:
            raise InvalidArgumentError(f"Sampling rate must be positive, got {self.sampling_rate}")
        if self.min_frequency < 0 or self.max_frequency < 0:
            raise InvalidArgumentError(
                f"Frequencies must be non-negative, got [{self.min_frequency}, {self.max_frequency}]")
        if self.min_frequency > 0 and self.max_frequency > 0 and self.max_frequency <= self.min_frequency:
            raise InvalidArgumentError(
                f"Max frequency ({self.max_frequency}) must exceed min frequency ({self.min_frequency})")
        if self.scales_per_octave < 1:
            raise InvalidArgumentError(
                f"Scales per octave must be at least 1, got {self.scales_per_octave}")
        if self.max_scales < 1:
            raise InvalidArgumentError(f"Max scales must be at least 1, got {self.max_scales}")
        if self.frequency_resolution < 0:
            raise InvalidArgumentError(
                f"Frequency resolution must be non-negative, got {self.frequency_resolution}")
        if not isinstance(self.spacing, ScaleSpacing):
            raise InvalidArgumentError(f"Unknown scale spacing: {self.spacing!r}")

    @property
    def nyquist(self) -> float:
        return self.sampling_rate / 2.0

    def with_options(self, **changes) -> 'ScaleSelectionConfig':
        return replace(self, **changes)

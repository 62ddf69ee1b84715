# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Scale Space Module

Immutable, strictly ascending sets of positive CWT scales and the
scale <-> frequency conversions that go with them.
"""

from enum import Enum
from typing import Iterator, Sequence

import numpy as np

from .exceptions import InvalidArgumentError


class ScaleType(Enum):
    """How a scale space was generated"""
    LINEAR = 0
    LOGARITHMIC = 1
    DYADIC = 2
    CUSTOM = 3


def scale_to_frequency(scale: float, wavelet, sampling_rate: float) -> float:
    """Pseudo-frequency in Hz of ``wavelet`` dilated by ``scale``."""
    return wavelet.center_frequency() * sampling_rate / scale


def _check_range(min_value: float, max_value: float, what: str):
    if not (np.isfinite(min_value) and np.isfinite(max_value)):
        raise InvalidArgumentError(f"{what} range must be finite, got [{min_value}, {max_value}]")
    if min_value <= 0:
        raise InvalidArgumentError(f"Minimum {what} must be positive, got {min_value}")
    if max_value <= min_value:
        raise InvalidArgumentError(
            f"Maximum {what} ({max_value}) must be greater than minimum {what} ({min_value})")


class ScaleSpace:
    """An ordered set of CWT scales.

    Use the class-method constructors; the plain constructor expects an
    already validated, strictly ascending array.

    Parameters
    ----------
    scales : np.ndarray
        Strictly ascending positive scales
    scale_type : ScaleType
        Generation method
    """

    def __init__(self, scales: np.ndarray, scale_type: ScaleType):
        scales = np.array(scales, dtype=float)
        if scales.ndim != 1 or scales.size == 0:
            raise InvalidArgumentError("Scales must be a non-empty one-dimensional sequence")
        if not np.all(np.isfinite(scales)):
            raise InvalidArgumentError("Scales must be finite")
        if np.any(scales <= 0):
            raise InvalidArgumentError(f"Scales must be positive, got minimum {scales.min()}")
        if np.any(np.diff(scales) <= 0):
            raise InvalidArgumentError("Scales must be strictly ascending")
        scales.setflags(write=False)
        self._scales = scales
        self._type = scale_type

    @classmethod
    def linear(cls, min_scale: float, max_scale: float, num_scales: int) -> 'ScaleSpace':
        """Evenly spaced scales from ``min_scale`` to ``max_scale`` inclusive"""
        _check_range(min_scale, max_scale, "scale")
        if num_scales < 1:
            raise InvalidArgumentError(f"Number of scales must be positive, got {num_scales}")
        if num_scales == 1:
            return cls([min_scale], ScaleType.LINEAR)
        return cls(np.linspace(min_scale, max_scale, num_scales), ScaleType.LINEAR)

    @classmethod
    def logarithmic(cls, min_scale: float, max_scale: float, num_scales: int) -> 'ScaleSpace':
        """Scales with a constant ratio between neighbours"""
        _check_range(min_scale, max_scale, "scale")
        if num_scales < 1:
            raise InvalidArgumentError(f"Number of scales must be positive, got {num_scales}")
        if num_scales == 1:
            return cls([min_scale], ScaleType.LOGARITHMIC)
        return cls(np.geomspace(min_scale, max_scale, num_scales), ScaleType.LOGARITHMIC)

    @classmethod
    def dyadic(cls, min_level: int, max_level: int) -> 'ScaleSpace':
        """Powers of two, 2**min_level .. 2**max_level inclusive"""
        if min_level < 0:
            raise InvalidArgumentError(f"Minimum level must be non-negative, got {min_level}")
        if max_level < min_level:
            raise InvalidArgumentError(
                f"Maximum level ({max_level}) must not be below minimum level ({min_level})")
        levels = np.arange(min_level, max_level + 1, dtype=float)
        return cls(2.0 ** levels, ScaleType.DYADIC)

    @classmethod
    def for_frequency_range(cls, min_freq: float, max_freq: float, sampling_rate: float,
                            wavelet, num_scales: int) -> 'ScaleSpace':
        """Logarithmic scales covering a frequency band in Hz

        Parameters
        ----------
        min_freq, max_freq : float
            Band edges in Hz
        sampling_rate : float
            Sampling rate in Hz
        wavelet : ContinuousWavelet
            Wavelet whose center frequency maps scales to frequencies
        num_scales : int
            Number of scales

        Returns
        -------
        ScaleSpace
            Scales from cf * fs / max_freq to cf * fs / min_freq
        """
        _check_range(min_freq, max_freq, "frequency")
        if sampling_rate <= 0:
            raise InvalidArgumentError(f"Sampling rate must be positive, got {sampling_rate}")
        if wavelet is None:
            raise InvalidArgumentError("Wavelet must not be None")
        center = wavelet.center_frequency()
        return cls.logarithmic(center * sampling_rate / max_freq,
                               center * sampling_rate / min_freq, num_scales)

    @classmethod
    def custom(cls, scales: Sequence[float]) -> 'ScaleSpace':
        """Arbitrary scales; sorted on construction, duplicates rejected."""
        values = np.asarray(scales, dtype=float)
        if values.ndim != 1 or values.size == 0:
            raise InvalidArgumentError("Scales must be a non-empty one-dimensional sequence")
        return cls(np.sort(values), ScaleType.CUSTOM)

    @classmethod
    def custom_sorted(cls, scales: Sequence[float]) -> 'ScaleSpace':
        """Arbitrary scales that are already strictly ascending."""
        return cls(scales, ScaleType.CUSTOM)

    @property
    def scales(self) -> np.ndarray:
        return self._scales.copy()

    @property
    def scale_type(self) -> ScaleType:
        return self._type

    @property
    def num_scales(self) -> int:
        return self._scales.size

    @property
    def min_scale(self) -> float:
        return float(self._scales[0])

    @property
    def max_scale(self) -> float:
        return float(self._scales[-1])

    def __len__(self) -> int:
        return self._scales.size

    def __iter__(self) -> Iterator[float]:
        return iter(self._scales.tolist())

    def __getitem__(self, index):
        return self._scales[index]

    def __array__(self, dtype=None, copy=None):
        return np.array(self._scales, dtype=dtype)

    def to_frequencies(self, wavelet, sampling_rate: float) -> np.ndarray:
        """Pseudo-frequency of every scale, ``cf * fs / scale``"""
        if sampling_rate <= 0:
            raise InvalidArgumentError(f"Sampling rate must be positive, got {sampling_rate}")
        return wavelet.center_frequency() * sampling_rate / self._scales

    def scale_to_frequency(self, scale: float, wavelet, sampling_rate: float) -> float:
        return scale_to_frequency(scale, wavelet, sampling_rate)

    def find_scale_index_for_frequency(self, frequency: float, wavelet, sampling_rate: float) -> int:
        """Index of the scale whose pseudo-frequency is closest to ``frequency``"""
        if frequency <= 0:
            raise InvalidArgumentError(f"Frequency must be positive, got {frequency}")
        target = wavelet.center_frequency() * sampling_rate / frequency
        return int(np.argmin(np.abs(self._scales - target)))

    def __eq__(self, other):
        if not isinstance(other, ScaleSpace):
            return NotImplemented
        return self._type == other._type and np.array_equal(self._scales, other._scales)

    def __hash__(self):
        return hash((self._type, self._scales.tobytes()))

    def __repr__(self):
        return (f"ScaleSpace(type={self._type.name}, n={self.num_scales}, "
                f"range=[{self.min_scale:.4g}, {self.max_scale:.4g}])")

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Immutable containers for CWT coefficients and their derived views.

A result deep-copies the coefficient matrix it is given and hands out
copies from every accessor, so neither the caller's arrays nor the
returned arrays can change it.
"""

from typing import NamedTuple, Optional, Sequence, Union

import numpy as np

from .complex_analysis import instantaneous_frequency
from .exceptions import InvalidArgumentError
from .scale_space import ScaleSpace


class MaxCoefficient(NamedTuple):
    """Location of the largest-magnitude coefficient"""
    value: Union[float, complex]
    magnitude: float
    scale_index: int
    time_index: int
    scale: float


class Ridge(NamedTuple):
    """Scale of maximum magnitude at every time sample"""
    scale_indices: np.ndarray
    scales: np.ndarray
    magnitudes: np.ndarray

    def frequencies(self, wavelet, sampling_rate: float) -> np.ndarray:
        if sampling_rate <= 0:
            raise InvalidArgumentError(f"Sampling rate must be positive, got {sampling_rate}")
        return wavelet.center_frequency() * sampling_rate / self.scales


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class CWTResult:
    """Coefficients of a continuous wavelet transform.

    Parameters
    ----------
    coefficients : array_like
        Matrix of shape (num_scales, num_samples), real or complex
    scales : ScaleSpace or sequence of float
        Strictly ascending scales, one per row
    wavelet : ContinuousWavelet
        Wavelet used for the analysis
    normalized : bool, optional
        Whether rows carry the 1/sqrt(scale) factor, by default True
    """

    def __init__(self, coefficients, scales: Union[ScaleSpace, Sequence[float]], wavelet,
                 normalized: bool = True):
        if wavelet is None:
            raise InvalidArgumentError("Wavelet must not be None")
        if coefficients is None or scales is None:
            raise InvalidArgumentError("Coefficients and scales must not be None")
        if not isinstance(scales, ScaleSpace):
            scales = ScaleSpace.custom_sorted(scales)

        coefficients = np.array(coefficients, copy=True)
        if coefficients.ndim != 2 or coefficients.size == 0:
            raise InvalidArgumentError(
                f"Coefficients must be a non-empty 2D matrix, got shape {coefficients.shape}")
        if coefficients.shape[0] != len(scales):
            raise InvalidArgumentError(
                f"Coefficient rows ({coefficients.shape[0]}) must match number of scales ({len(scales)})")
        if not np.iscomplexobj(coefficients):
            coefficients = coefficients.astype(float)

        self._coefficients = _read_only(coefficients)
        self._scale_space = scales
        self._wavelet = wavelet
        self._normalized = bool(normalized)
        self._magnitude = None

    @property
    def scale_space(self) -> ScaleSpace:
        return self._scale_space

    @property
    def scales(self) -> np.ndarray:
        return self._scale_space.scales

    @property
    def wavelet(self):
        return self._wavelet

    @property
    def normalized(self) -> bool:
        return self._normalized

    @property
    def num_scales(self) -> int:
        return self._coefficients.shape[0]

    @property
    def num_samples(self) -> int:
        return self._coefficients.shape[1]

    @property
    def shape(self):
        return self._coefficients.shape

    @property
    def is_complex(self) -> bool:
        return np.iscomplexobj(self._coefficients)

    def coefficients(self) -> np.ndarray:
        return self._coefficients.copy()

    def _magnitude_view(self) -> np.ndarray:
        if self._magnitude is None:
            self._magnitude = _read_only(np.abs(self._coefficients))
        return self._magnitude

    def magnitude(self) -> np.ndarray:
        return self._magnitude_view().copy()

    def power(self) -> np.ndarray:
        return np.square(self._magnitude_view())

    def phase(self) -> Optional[np.ndarray]:
        """Phase in radians; None because real coefficients carry no phase."""
        return None

    def instantaneous_frequency(self, sampling_rate: float = 1.0) -> Optional[np.ndarray]:
        return None

    def frequencies(self, sampling_rate: float) -> np.ndarray:
        return self._scale_space.to_frequencies(self._wavelet, sampling_rate)

    def time_averaged_spectrum(self) -> np.ndarray:
        """Mean magnitude of every scale row"""
        return self._magnitude_view().mean(axis=1)

    def _check_time_index(self, time_index: int):
        if not 0 <= time_index < self.num_samples:
            raise InvalidArgumentError(
                f"Time index {time_index} out of range [0, {self.num_samples})")

    def _check_scale_index(self, scale_index: int):
        if not 0 <= scale_index < self.num_scales:
            raise InvalidArgumentError(
                f"Scale index {scale_index} out of range [0, {self.num_scales})")

    def scalogram(self, time_index: int) -> np.ndarray:
        """Magnitude across all scales at one time sample"""
        self._check_time_index(time_index)
        return self._magnitude_view()[:, time_index].copy()

    def time_slice(self, scale_index: int) -> np.ndarray:
        """Coefficients of one scale over time (real part for complex results)"""
        self._check_scale_index(scale_index)
        return np.real(self._coefficients[scale_index]).copy()

    def find_max_coefficient(self) -> MaxCoefficient:
        magnitude = self._magnitude_view()
        scale_index, time_index = np.unravel_index(np.argmax(magnitude), magnitude.shape)
        value = self._coefficients[scale_index, time_index]
        value = complex(value) if self.is_complex else float(value)
        return MaxCoefficient(value, float(magnitude[scale_index, time_index]),
                              int(scale_index), int(time_index),
                              float(self._scale_space[scale_index]))

    def extract_ridge(self) -> Ridge:
        """Follow the maximum-magnitude scale through time."""
        magnitude = self._magnitude_view()
        indices = np.argmax(magnitude, axis=0)
        columns = np.arange(self.num_samples)
        return Ridge(indices, self._scale_space.scales[indices], magnitude[indices, columns])

    def __repr__(self):
        kind = "complex" if self.is_complex else "real"
        return (f"{type(self).__name__}({kind}, scales={self.num_scales}, "
                f"samples={self.num_samples}, wavelet={self._wavelet.name!r})")


class ComplexCWTResult(CWTResult):
    """CWT result with complex coefficients: adds phase and instantaneous frequency."""

    def __init__(self, coefficients, scales, wavelet, normalized: bool = True):
        if coefficients is not None:
            coefficients = np.asarray(coefficients, dtype=complex)
        super().__init__(coefficients, scales, wavelet, normalized)
        self._phase = None

    @classmethod
    def from_parts(cls, real, imaginary, scales, wavelet, normalized: bool = True) -> 'ComplexCWTResult':
        """Build from parallel real and imaginary grids"""
        real = np.asarray(real, dtype=float)
        imaginary = np.asarray(imaginary, dtype=float)
        if real.shape != imaginary.shape:
            raise InvalidArgumentError(
                f"Real and imaginary parts must have the same shape, got {real.shape} and {imaginary.shape}")
        return cls(real + 1j * imaginary, scales, wavelet, normalized)

    def _phase_view(self) -> np.ndarray:
        if self._phase is None:
            self._phase = _read_only(np.angle(self._coefficients))
        return self._phase

    def real(self) -> np.ndarray:
        return self._coefficients.real.copy()

    def imaginary(self) -> np.ndarray:
        return self._coefficients.imag.copy()

    def phase(self) -> np.ndarray:
        """Phase in [-pi, pi] radians"""
        return self._phase_view().copy()

    def instantaneous_frequency(self, sampling_rate: float = 1.0) -> np.ndarray:
        """
        Derivative of the unwrapped phase, one column shorter than the signal.

        Args:
            sampling_rate (float): Samples per unit time

        Returns:
            numpy.ndarray: Frequencies in cycles per unit time
        """
        return instantaneous_frequency(self._phase_view(), sampling_rate)

    def time_coefficients(self, time_index: int) -> np.ndarray:
        """Complex coefficients across all scales at one time sample"""
        self._check_time_index(time_index)
        return self._coefficients[:, time_index].copy()

    def to_real_result(self) -> CWTResult:
        """Drop the imaginary part."""
        return CWTResult(self._coefficients.real, self._scale_space, self._wavelet, self._normalized)

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Complex Analysis Module

Phase handling for complex CWT coefficients and cross-signal quantities
(cross spectrum, wavelet coherence, phase difference) computed from two
transforms over the same scale/time grid.

The cross-signal functions accept either result objects or plain arrays.
"""

import numpy as np
from scipy.ndimage import uniform_filter1d

from .exceptions import InvalidArgumentError

COHERENCE_WINDOW = 5
COHERENCE_EPSILON = 1e-10


def wrap_phase(phase: np.ndarray) -> np.ndarray:
    """Map angles into [-pi, pi)"""
    return np.mod(np.asarray(phase, dtype=float) + np.pi, 2.0 * np.pi) - np.pi


def unwrap_phase(phase: np.ndarray) -> np.ndarray:
    """Remove 2*pi jumps between consecutive samples along the last axis"""
    return np.unwrap(np.asarray(phase, dtype=float), axis=-1)


def instantaneous_frequency(phase: np.ndarray, sampling_rate: float = 1.0) -> np.ndarray:
    """Time derivative of the unwrapped phase.

    Parameters
    ----------
    phase : np.ndarray
        Phase in radians, time along the last axis
    sampling_rate : float, optional
        Samples per unit time, by default 1.0

    Returns
    -------
    np.ndarray
        Frequency in cycles per unit time (cycles per sample for a sampling
        rate of 1), one sample shorter than ``phase`` along the last axis
    """
    if sampling_rate <= 0:
        raise InvalidArgumentError(f"Sampling rate must be positive, got {sampling_rate}")
    return np.diff(unwrap_phase(phase), axis=-1) * sampling_rate / (2.0 * np.pi)


def _coefficients(result) -> np.ndarray:
    if result is None:
        raise InvalidArgumentError("Result must not be None")
    if hasattr(result, 'coefficients'):
        return result.coefficients()
    return np.asarray(result)


def _matching_pair(result_a, result_b):
    a = _coefficients(result_a)
    b = _coefficients(result_b)
    if a.shape != b.shape:
        raise InvalidArgumentError(
            f"Transforms must share the same scale/time grid, got {a.shape} and {b.shape}")
    return a, b


def cross_spectrum(result_a, result_b) -> np.ndarray:
    """A * conj(B), element by element"""
    a, b = _matching_pair(result_a, result_b)
    return a * np.conj(b)


def _smooth(values: np.ndarray, window: int) -> np.ndarray:
    return uniform_filter1d(values, size=2 * window + 1, axis=-1, mode='nearest')


def wavelet_coherence(result_a, result_b, window: int = COHERENCE_WINDOW,
                      epsilon: float = COHERENCE_EPSILON) -> np.ndarray:
    """Smoothed, normalized cross power of two transforms

    Parameters
    ----------
    result_a, result_b : CWTResult or np.ndarray
        Transforms over the same grid
    window : int, optional
        Half-width in samples of the moving average over time, by default 5
    epsilon : float, optional
        Added to the denominator, by default 1e-10

    Returns
    -------
    np.ndarray
        Coherence in [0, 1] for every scale and time
    """
    if window < 0:
        raise InvalidArgumentError(f"Smoothing window must be non-negative, got {window}")
    a, b = _matching_pair(result_a, result_b)
    cross = a * np.conj(b)
    smoothed_cross = _smooth(cross.real, window) + 1j * _smooth(cross.imag, window)
    power_a = _smooth(np.abs(a) ** 2, window)
    power_b = _smooth(np.abs(b) ** 2, window)
    coherence = np.abs(smoothed_cross) / (np.sqrt(power_a) * np.sqrt(power_b) + epsilon)
    return np.clip(coherence, 0.0, 1.0)


def phase_difference(result_a, result_b) -> np.ndarray:
    """phase(A) - phase(B) wrapped to [-pi, pi)"""
    a, b = _matching_pair(result_a, result_b)
    return wrap_phase(np.angle(a) - np.angle(b))


def complex_divide(numerator, denominator) -> np.ndarray:
    """Element-wise complex division that refuses zero denominators.

    Raises
    ------
    ZeroDivisionError
        If any denominator element is exactly zero
    """
    numerator = np.asarray(numerator, dtype=complex)
    denominator = np.asarray(denominator, dtype=complex)
    if np.any(denominator == 0):
        raise ZeroDivisionError("Division by zero complex value")
    return numerator / denominator


def transfer_function(result_a, result_b) -> np.ndarray:
    """Ratio A / B of two transforms; B must have no zero coefficients"""
    a, b = _matching_pair(result_a, result_b)
    return complex_divide(a, b)

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Maximal Overlap Discrete Wavelet Transform (MODWT).

The MODWT is a non-decimated, shift-invariant wavelet transform. It backs
the fast approximate inverse CWT.
"""

from functools import lru_cache

import numpy as np
import pywt

from .exceptions import InvalidArgumentError

# Distinct (wavelet, signal length, levels) filter banks kept in memory
RESPONSE_CACHE_SIZE = 32


def _modwt_filters(wavelet):
    # Scale filters by 1/sqrt(2) for MODWT
    scaling_filter = np.asarray(wavelet.rec_lo, dtype=float) / np.sqrt(2)
    wavelet_filter = np.asarray(wavelet.rec_hi, dtype=float) / np.sqrt(2)
    return scaling_filter, wavelet_filter


def _dilated_responses(filter_coef, levels, signal_length):
    """rfft of the filter dilated by 2^(j-1) and wrapped onto the circle, one row per level."""
    dilations = 2 ** np.arange(levels)
    positions = np.outer(dilations, np.arange(len(filter_coef))) % signal_length
    rows = np.repeat(np.arange(levels), len(filter_coef))
    taps = np.zeros((levels, signal_length))
    np.add.at(taps, (rows, positions.ravel()), np.tile(filter_coef, levels))
    return np.fft.rfft(taps, axis=-1)


@lru_cache(maxsize=RESPONSE_CACHE_SIZE)
def level_filter_responses(wavelet_name, signal_length, levels):
    """
    Frequency responses of the equivalent MODWT level filters.

    Results are shared between transforms and returned read-only.

    Args:
        wavelet_name (str): Orthogonal PyWavelets wavelet
        signal_length (int): Signal length N
        levels (int): Number of levels J

    Returns:
        tuple: (wavelet responses, scaling responses), both of shape (J, N//2+1);
        row j - 1 is the cascade up to level j
    """
    scaling_filter, wavelet_filter = _modwt_filters(pywt.Wavelet(wavelet_name))
    high = _dilated_responses(wavelet_filter, levels, signal_length)
    low = _dilated_responses(scaling_filter, levels, signal_length)

    scaling_responses = np.cumprod(low, axis=0)
    wavelet_responses = high
    wavelet_responses[1:] *= scaling_responses[:-1]
    wavelet_responses.flags.writeable = False
    scaling_responses.flags.writeable = False
    return wavelet_responses, scaling_responses


class MaximalOverlapDWT:
    """
    Maximal Overlap Discrete Wavelet Transform (MODWT) implementation.

    Filtering is circular and evaluated in the frequency domain: the level j
    filters are the DWT filters scaled by 1/sqrt(2), dilated by 2^(j-1) and
    cascaded with the coarser scaling filters. The transform is exactly
    invertible and preserves energy.

    Args:
        wavelet (str): Name of an orthogonal PyWavelets wavelet, e.g. 'db4'
    """

    def __init__(self, wavelet='db4'):
        try:
            self.wavelet = pywt.Wavelet(wavelet)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown discrete wavelet: {wavelet!r}") from exc
        if not self.wavelet.orthogonal:
            raise InvalidArgumentError(f"MODWT needs an orthogonal wavelet, got {wavelet!r}")
        self.scaling_filter, self.wavelet_filter = _modwt_filters(self.wavelet)

    @staticmethod
    def max_level(signal_length):
        """Deepest level whose dilated filter still fits the signal."""
        if signal_length < 2:
            return 1
        return int(np.floor(np.log2(signal_length)))

    def level_responses(self, signal_length, levels):
        """Level filter responses for this wavelet; see ``level_filter_responses``."""
        return level_filter_responses(self.wavelet.name, signal_length, levels)

    def forward(self, signal, levels=1):
        """
        Perform forward MODWT.

        Args:
            signal (numpy.ndarray): Input signal
            levels (int): Number of decomposition levels

        Returns:
            dict: Dictionary containing wavelet and scaling coefficients
        """
        signal = np.asarray(signal, dtype=float)
        if signal.ndim != 1 or signal.size == 0:
            raise InvalidArgumentError("Signal must be a non-empty one-dimensional array")
        if levels < 1:
            raise InvalidArgumentError(f"Levels must be at least 1, got {levels}")

        N = signal.size
        wavelet_responses, scaling_responses = self.level_responses(N, levels)
        spectrum = np.fft.rfft(signal)

        wavelet_coeffs = list(np.fft.irfft(wavelet_responses * spectrum, N, axis=-1))
        scaling_coeffs = [signal.copy()] + list(np.fft.irfft(scaling_responses * spectrum, N, axis=-1))

        return {
            'wavelet': wavelet_coeffs,  # W_1, W_2, ..., W_J
            'scaling': scaling_coeffs   # V_0, V_1, ..., V_J
        }

    def inverse(self, coeffs):
        """
        Perform inverse MODWT.

        Only the coarsest scaling coefficients ``coeffs['scaling'][-1]`` are
        used, so callers may pass a one-element scaling list.

        Args:
            coeffs (dict): Dictionary with wavelet and scaling coefficients

        Returns:
            numpy.ndarray: Reconstructed signal
        """
        wavelet_coeffs = np.asarray(coeffs['wavelet'], dtype=float)
        approximation = np.asarray(coeffs['scaling'][-1], dtype=float)
        if wavelet_coeffs.ndim != 2 or wavelet_coeffs.shape[0] == 0:
            raise InvalidArgumentError("Wavelet coefficients must be a non-empty list of rows")
        levels, N = wavelet_coeffs.shape
        if approximation.shape != (N,):
            raise InvalidArgumentError(
                f"Scaling coefficients must have length {N}, got {approximation.shape}")

        wavelet_responses, scaling_responses = self.level_responses(N, levels)
        spectrum = np.sum(np.conj(wavelet_responses) * np.fft.rfft(wavelet_coeffs, axis=-1), axis=0)
        spectrum += np.conj(scaling_responses[-1]) * np.fft.rfft(approximation)
        return np.fft.irfft(spectrum, N)

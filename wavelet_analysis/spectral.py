# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Spectral Helpers Module

FFT routines used by the convolution engine, the scale selectors and the
Hilbert-transform based complex analysis.
"""

import numpy as np
from scipy import signal as sp_signal

from .exceptions import InvalidArgumentError

# Inputs at least this long take the real-input (half spectrum) path
REAL_FFT_THRESHOLD = 256


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two greater than or equal to ``n`` (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def hilbert_imaginary(rows: np.ndarray) -> np.ndarray:
    """Imaginary part of the analytic signal of each row

    Parameters
    ----------
    rows : np.ndarray
        Real array, transformed along its last axis

    Returns
    -------
    np.ndarray
        Hilbert transform of ``rows``
    """
    return np.imag(sp_signal.hilbert(np.asarray(rows, dtype=float), axis=-1))


class FFT:
    """Radix-2 sized FFTs with a real-input fast path.

    Parameters
    ----------
    real_threshold : int, optional
        Minimum input length for the real-input path, by default 256
    """

    def __init__(self, real_threshold: int = REAL_FFT_THRESHOLD):
        self.real_threshold = real_threshold

    @staticmethod
    def _check_size(n: int) -> int:
        if n < 1 or not is_power_of_two(n):
            raise InvalidArgumentError(f"FFT size must be a positive power of two, got {n}")
        return int(n)

    def forward_1d_real(self, input_signal: np.ndarray, n: int) -> np.ndarray:
        """Half spectrum (``n // 2 + 1`` bins) of a real signal zero-padded to ``n``"""
        n = self._check_size(n)
        return np.fft.rfft(np.asarray(input_signal, dtype=float), n)

    def forward_1d_complex(self, input_signal: np.ndarray, n: int) -> np.ndarray:
        """Full spectrum of a (possibly complex) signal zero-padded to ``n``"""
        n = self._check_size(n)
        return np.fft.fft(np.asarray(input_signal, dtype=complex), n)

    def uses_real_path(self, input_signal: np.ndarray, n: int) -> bool:
        length = len(input_signal)
        return (not np.iscomplexobj(input_signal) and n % 2 == 0
                and length % 2 == 0 and length >= self.real_threshold)

    def forward_real_full(self, input_signal: np.ndarray, n: int) -> np.ndarray:
        """Full spectrum of a real signal.

        For even, long enough inputs the half spectrum is computed with
        ``rfft`` and the negative frequencies are filled in from conjugate
        symmetry. Other inputs go through the complex transform.

        Parameters
        ----------
        input_signal : np.ndarray
            Real-valued input signal
        n : int
            FFT length (power of two)

        Returns
        -------
        np.ndarray
            Complex spectrum of length ``n``
        """
        n = self._check_size(n)
        if not self.uses_real_path(input_signal, n):
            return self.forward_1d_complex(input_signal, n)
        half = self.forward_1d_real(input_signal, n)
        spectrum = np.empty(n, dtype=complex)
        spectrum[:half.size] = half
        spectrum[half.size:] = np.conj(half[1:n - half.size + 1][::-1])
        return spectrum

    def inverse_1d_real(self, input_spectrum: np.ndarray, n: int) -> np.ndarray:
        n = self._check_size(n)
        return np.fft.irfft(input_spectrum, n)

    def inverse_1d_complex(self, input_spectrum: np.ndarray) -> np.ndarray:
        return np.fft.ifft(input_spectrum)

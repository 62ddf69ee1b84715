# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Convolution engine for the continuous wavelet transform.

For one scale s the transform is the cross-correlation

    W(s, tau) = sum_k x[tau + k] * conj(psi(k / s)),   |k| <= H(s)

evaluated either by direct summation or by FFT-based *linear* convolution.
The FFT length always covers the full linear convolution, so nothing wraps
around; samples outside the signal come from the padding strategy (zeros by
default).
"""

import logging
from typing import NamedTuple, Sequence

import numpy as np

from .config import PaddingStrategy
from .spectral import FFT, next_power_of_two

logger = logging.getLogger(__name__)


class FFTPlan(NamedTuple):
    """Signal spectrum shared read-only by every scale of one analysis."""
    spectrum: np.ndarray
    size: int
    extension: int
    length: int
    real: bool


class ConvolutionEngine:
    """
    Evaluates one scale row of the CWT.

    Args:
        wavelet (ContinuousWavelet): Analyzing wavelet
        padding (PaddingStrategy): How the signal is extended past its ends
        fft (FFT): FFT helper, a new one by default
    """

    def __init__(self, wavelet, padding=PaddingStrategy.ZERO, fft=None):
        self.wavelet = wavelet
        self.padding = padding
        self.fft = fft or FFT()

    def extend(self, signal, width):
        """Extend ``signal`` by ``width`` samples on both sides."""
        if width == 0:
            return signal
        return np.pad(signal, width, mode=self.padding.numpy_mode)

    def matched_filter(self, scale):
        """Time-reversed conjugate kernel; convolving with it correlates with the kernel."""
        return np.conj(self.wavelet.kernel(scale))[::-1]

    def direct(self, signal, scale):
        """
        Direct summation, O(N * support).

        Args:
            signal (numpy.ndarray): Real input signal
            scale (float): Scale

        Returns:
            numpy.ndarray: N coefficients, complex for complex wavelets
        """
        half = self.wavelet.half_support(scale)
        padded = self.extend(signal, half)
        return np.convolve(padded, self.matched_filter(scale), mode='valid')

    def prepare(self, signal, scales: Sequence[float], fft_size: int = 0) -> FFTPlan:
        """
        Transform the signal once for all scales.

        The FFT length is the next power of two that holds the linear
        convolution of the padded signal with the widest kernel, or
        ``fft_size`` when that is larger.
        """
        half = max(self.wavelet.half_support(s) for s in scales)
        extension = 0 if self.padding == PaddingStrategy.ZERO else half
        padded = self.extend(signal, extension)
        size = max(next_power_of_two(len(padded) + 2 * half), fft_size)

        real = not self.wavelet.is_complex and self.fft.uses_real_path(padded, size)
        if real:
            spectrum = self.fft.forward_1d_real(padded, size)
        else:
            spectrum = self.fft.forward_real_full(padded, size)
        spectrum.setflags(write=False)

        logger.debug("FFT plan: size=%d, extension=%d, real path=%s", size, extension, real)
        return FFTPlan(spectrum, size, extension, len(signal), real)

    def fft_convolve(self, plan: FFTPlan, scale: float) -> np.ndarray:
        """FFT-accelerated linear convolution for one scale."""
        half = self.wavelet.half_support(scale)
        matched = self.matched_filter(scale)

        if plan.real:
            product = plan.spectrum * self.fft.forward_1d_real(matched, plan.size)
            full = self.fft.inverse_1d_real(product, plan.size)
        else:
            product = plan.spectrum * self.fft.forward_1d_complex(matched, plan.size)
            full = self.fft.inverse_1d_complex(product)
            if not self.wavelet.is_complex:
                full = full.real

        start = half + plan.extension
        return full[start:start + plan.length]

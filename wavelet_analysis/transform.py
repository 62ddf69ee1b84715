# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Continuous wavelet transform.

The transform runs the convolution engine once per scale, optionally on a
thread pool, applies the 1/sqrt(scale) normalization and wraps the rows in
an immutable result object.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence, Union

import numpy as np

from .config import CWTConfig
from .convolution import ConvolutionEngine
from .exceptions import InvalidArgumentError
from .result import CWTResult, ComplexCWTResult
from .scale_space import ScaleSpace
from .spectral import hilbert_imaginary
from .wavelets import MorletWavelet

logger = logging.getLogger(__name__)

# Fewer scales than this are not worth a thread pool
MIN_PARALLEL_SCALES = 4

ScalesLike = Union[ScaleSpace, Sequence[float], np.ndarray]


def _validate_signal(signal) -> np.ndarray:
    if signal is None:
        raise InvalidArgumentError("Signal must not be None")
    signal = np.array(signal, dtype=float)
    if signal.ndim != 1:
        raise InvalidArgumentError(f"Signal must be one-dimensional, got shape {signal.shape}")
    if signal.size == 0:
        raise InvalidArgumentError("Signal must not be empty")
    if not np.all(np.isfinite(signal)):
        raise InvalidArgumentError("Signal contains NaN or infinite values")
    return signal


def _validate_scales(scales: ScalesLike) -> ScaleSpace:
    if scales is None:
        raise InvalidArgumentError("Scales must not be None")
    if isinstance(scales, ScaleSpace):
        return scales
    return ScaleSpace.custom(scales)


class ContinuousWaveletTransform:
    """
    Continuous Wavelet Transform (CWT).

    The CWT correlates the signal with scaled copies of a mother wavelet,
    giving a time-scale map of the signal's content. Convolution is linear:
    out-of-range samples come from the padding strategy, never from the
    other end of the signal.

    Args:
        wavelet (ContinuousWavelet): Analyzing wavelet, Morlet by default
        config (CWTConfig): Transform options, defaults by default
    """

    def __init__(self, wavelet=None, config=None):
        self.wavelet = wavelet if wavelet is not None else MorletWavelet()
        self.config = config if config is not None else CWTConfig()
        self.engine = ConvolutionEngine(self.wavelet, self.config.padding)

    def analyze(self, signal, scales: ScalesLike) -> CWTResult:
        """
        Perform the forward CWT.

        Args:
            signal (array_like): Real input signal
            scales (ScaleSpace or sequence of float): Positive scales; plain
                sequences are sorted ascending

        Returns:
            CWTResult: ComplexCWTResult for complex wavelets, CWTResult otherwise
        """
        signal = _validate_signal(signal)
        scale_space = _validate_scales(scales)
        coefficients = self._compute(signal, scale_space.scales)

        if self.wavelet.is_complex:
            return ComplexCWTResult(coefficients, scale_space, self.wavelet,
                                    self.config.normalize_scales)
        return CWTResult(coefficients, scale_space, self.wavelet, self.config.normalize_scales)

    def analyze_complex(self, signal, scales: ScalesLike) -> ComplexCWTResult:
        """
        Forward CWT that always returns complex coefficients.

        Rows of a real wavelet get the Hilbert transform of the row as their
        imaginary part, making each row an analytic signal.
        """
        signal = _validate_signal(signal)
        scale_space = _validate_scales(scales)
        coefficients = self._compute(signal, scale_space.scales)

        if not self.wavelet.is_complex:
            coefficients = coefficients + 1j * hilbert_imaginary(coefficients)
        return ComplexCWTResult(coefficients, scale_space, self.wavelet,
                                self.config.normalize_scales)

    def _compute(self, signal: np.ndarray, scales: np.ndarray) -> np.ndarray:
        use_fft = self.config.should_use_fft(signal.size)
        plan = self.engine.prepare(signal, scales, self.config.fft_size) if use_fft else None
        dtype = complex if self.wavelet.is_complex else float
        coefficients = np.empty((scales.size, signal.size), dtype=dtype)

        def compute_row(index):
            scale = scales[index]
            if plan is not None:
                row = self.engine.fft_convolve(plan, scale)
            else:
                row = self.engine.direct(signal, scale)
            if self.config.normalize_scales:
                row = row / np.sqrt(scale)
            coefficients[index] = row

        if self.config.parallel and scales.size >= MIN_PARALLEL_SCALES:
            workers = min(self.config.worker_count, scales.size)
            logger.debug("Computing %d scales (%s) on %d threads",
                         scales.size, "FFT" if use_fft else "direct", workers)
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # list() re-raises the first worker exception
                list(executor.map(compute_row, range(scales.size)))
        else:
            logger.debug("Computing %d scales (%s) sequentially",
                         scales.size, "FFT" if use_fft else "direct")
            for index in range(scales.size):
                compute_row(index)

        if not np.all(np.isfinite(coefficients)):
            raise FloatingPointError("CWT produced NaN or infinite coefficients")
        return coefficients


def analyze(signal, scales: ScalesLike, wavelet=None, config=None) -> CWTResult:
    """CWT of ``signal`` at ``scales`` with a throwaway transform object"""
    return ContinuousWaveletTransform(wavelet, config).analyze(signal, scales)


def analyze_complex(signal, scales: ScalesLike, wavelet=None, config=None) -> ComplexCWTResult:
    """Complex CWT of ``signal`` at ``scales`` with a throwaway transform object"""
    return ContinuousWaveletTransform(wavelet, config).analyze_complex(signal, scales)

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Inverse continuous wavelet transforms.

Two reconstructions with different accuracy/speed trade-offs:

* ``InverseCWT`` numerically integrates over scale and translation: every
  row is convolved with the reconstruction kernel psi((t - b) / s) / sqrt(s)
  and the rows are summed with admissibility-normalized scale weights.
  Each scale costs one FFT convolution, O(S * N log N) in total.
* ``FastInverseCWT`` treats rows at (near) dyadic scales as MODWT detail
  coefficients and runs the inverse MODWT, O(J * N log N) with J <= log2 N.

The CWT is redundant and a finite scale set only covers part of the
spectrum, so both reconstructions are approximate. Sparse or non-dyadic
scale sets can leave relative errors of tens of percent.
"""

import logging

import numpy as np
from scipy import integrate
from scipy.signal import fftconvolve

from .exceptions import InvalidArgumentError
from .modwt import MaximalOverlapDWT

logger = logging.getLogger(__name__)

# |Psi_r(0)| / max |Psi_r| above which a wavelet counts as having a non-zero mean
ZERO_MEAN_TOLERANCE = 1e-3


def admissibility_constant(wavelet, num_frequencies=1024):
    """
    Admissibility constant of ``wavelet`` for the double-integral inverse.

    C_psi = integral over w > 0 of |Psi_r(w)|^2 / w, where Psi_r is the
    Fourier transform of the real part of psi, evaluated numerically on the
    wavelet's support. The integral diverges for wavelets whose mean does
    not vanish; those get ``inf``.

    Args:
        wavelet (ContinuousWavelet): Analyzing wavelet
        num_frequencies (int): Points of the log-spaced frequency grid

    Returns:
        float: The constant
    """
    radius = 2.0 * max(wavelet.support_radius(), 1.0)
    step = min(0.02, 0.05 / max(wavelet.center_frequency(), 1e-3))
    t = np.arange(-radius, radius + step, step)
    psi = np.real(wavelet.psi_complex(t))

    omega = np.geomspace(1e-4, np.pi / step, num_frequencies)
    spectrum = np.abs(np.exp(-1j * np.outer(omega, t)) @ psi) * step
    if spectrum[0] > ZERO_MEAN_TOLERANCE * spectrum.max():
        return float('inf')
    return float(integrate.trapezoid(spectrum ** 2, np.log(omega)))


def integration_weights(scales):
    """Trapezoid weights (delta scale) for integrating over ``scales``."""
    scales = np.asarray(scales, dtype=float)
    if scales.size == 1:
        return scales.copy()
    weights = np.empty_like(scales)
    weights[0] = (scales[1] - scales[0]) / 2.0
    weights[-1] = (scales[-1] - scales[-2]) / 2.0
    weights[1:-1] = (scales[2:] - scales[:-2]) / 2.0
    return weights


class InverseCWT:
    """
    Standard inverse CWT.

    x(t) ~ (1 / C_psi) * sum_s delta_s / s^2 * sum_b Re W(s, b) * psi_r((t - b) / s) / sqrt(s)

    with psi_r the real part of the wavelet. Antisymmetric wavelets such as
    the first Gaussian derivative are invertible this way; wavelets with a
    non-zero mean are not.

    Args:
        wavelet (ContinuousWavelet): Wavelet the coefficients were computed with
    """

    def __init__(self, wavelet):
        if wavelet is None:
            raise InvalidArgumentError("Wavelet must not be None")
        self.wavelet = wavelet
        constant = admissibility_constant(wavelet)
        if not np.isfinite(constant) or constant <= 1e-12:
            raise InvalidArgumentError(
                f"Wavelet {wavelet!r} is not admissible (constant {constant:.3g}); "
                f"its mean must vanish")
        self._constant = constant
        logger.debug("Admissibility constant for %s: %.6f", wavelet.name, constant)

    @property
    def admissibility_constant(self):
        return self._constant

    def _check(self, result):
        if result is None:
            raise InvalidArgumentError("Result must not be None")
        if result.wavelet != self.wavelet:
            raise InvalidArgumentError(
                f"Result was computed with {result.wavelet!r}, inverse expects {self.wavelet!r}")

    def _scale_term(self, row, scale):
        kernel = np.real(self.wavelet.kernel(scale)) / np.sqrt(scale)
        return fftconvolve(row, kernel, mode='same')

    def _weighted_sum(self, result, mask=None):
        scales = result.scales
        weights = integration_weights(scales) / scales ** 2
        if mask is not None:
            weights = np.where(mask, weights, 0.0)

        signal = np.zeros(result.num_samples)
        for index in np.flatnonzero(weights):
            row = result.time_slice(index)
            if not result.normalized:
                row = row / np.sqrt(scales[index])
            signal += weights[index] * self._scale_term(row, scales[index])
        return signal / self._constant

    def reconstruct(self, result):
        """
        Reconstruct the signal from all scales.

        Args:
            result (CWTResult): Forward transform

        Returns:
            numpy.ndarray: Approximate signal, same length as the analyzed one
        """
        self._check(result)
        return self._weighted_sum(result)

    def reconstruct_band(self, result, min_scale, max_scale):
        """Reconstruct from the scales in [min_scale, max_scale] only."""
        self._check(result)
        if min_scale <= 0 or max_scale < min_scale:
            raise InvalidArgumentError(f"Invalid scale band [{min_scale}, {max_scale}]")
        scales = result.scales
        mask = (scales >= min_scale) & (scales <= max_scale)
        if not mask.any():
            logger.warning("No scales inside [%g, %g]; band reconstruction is zero",
                           min_scale, max_scale)
        return self._weighted_sum(result, mask)

    def reconstruct_frequency_band(self, result, sampling_rate, min_freq, max_freq):
        """Reconstruct from the scales whose pseudo-frequency lies in [min_freq, max_freq] Hz."""
        if sampling_rate <= 0:
            raise InvalidArgumentError(f"Sampling rate must be positive, got {sampling_rate}")
        if min_freq <= 0 or max_freq < min_freq:
            raise InvalidArgumentError(f"Invalid frequency band [{min_freq}, {max_freq}]")
        center = self.wavelet.center_frequency()
        return self.reconstruct_band(result, center * sampling_rate / max_freq,
                                     center * sampling_rate / min_freq)


class FastInverseCWT:
    """
    Fast approximate inverse CWT through the inverse MODWT.

    Each row is assigned to the MODWT level j nearest to log2(scale), one row
    per level. Its real part, times 2^(-j/2), becomes the level j detail;
    the coarsest row also serves as the approximation. Only these rows are
    read, so the cost is O(J * N log N) regardless of the number of scales.

    Args:
        wavelet (str): Orthogonal PyWavelets wavelet used for the MODWT
    """

    DYADIC_TOLERANCE = 0.1
    REFINEMENT_WEIGHT = 0.1

    def __init__(self, wavelet='db4'):
        self.modwt = MaximalOverlapDWT(wavelet)

    @classmethod
    def is_dyadic(cls, scale):
        level = np.rint(np.log2(scale))
        return abs(scale - 2.0 ** level) <= cls.DYADIC_TOLERANCE * 2.0 ** level

    def level_map(self, scales, signal_length):
        """
        Pick one row per MODWT level.

        Returns:
            dict: level -> scale index
        """
        max_level = MaximalOverlapDWT.max_level(signal_length)
        log_scales = np.log2(np.asarray(scales, dtype=float))
        levels = np.clip(np.rint(log_scales), 1, max_level).astype(int)
        distance = np.abs(log_scales - levels)

        mapping = {}
        for index in np.argsort(distance, kind='stable'):
            mapping.setdefault(int(levels[index]), int(index))
        return mapping

    def reconstruct(self, result, refine=False):
        """
        Reconstruct the signal.

        Args:
            result (CWTResult): Forward transform
            refine (bool): Add the contribution of non-dyadic scales

        Returns:
            numpy.ndarray: Approximate signal, same length as the analyzed one
        """
        if result is None:
            raise InvalidArgumentError("Result must not be None")
        scales = result.scales
        N = result.num_samples
        mapping = self.level_map(scales, N)
        if not any(self.is_dyadic(scales[index]) for index in mapping.values()):
            logger.warning("No near-dyadic scales in [%g, %g]; fast inverse will be coarse",
                           scales[0], scales[-1])

        levels = max(mapping)
        details = np.zeros((levels, N))
        for level, index in mapping.items():
            row = result.time_slice(index)
            if not result.normalized:
                row = row / np.sqrt(scales[index])
            details[level - 1] = row * 2.0 ** (-level / 2.0)
        approximation = details[levels - 1].copy()

        signal = self.modwt.inverse({'wavelet': details, 'scaling': [approximation]})
        if refine:
            signal = signal + self._refinement(result, set(mapping.values()))
        return signal

    def _refinement(self, result, mapped):
        scales = result.scales
        dyadic = np.array([s for s in scales if self.is_dyadic(s)])
        correction = np.zeros(result.num_samples)
        for index, scale in enumerate(scales):
            if index in mapped and self.is_dyadic(scale):
                continue
            if dyadic.size:
                nearest = dyadic[np.argmin(np.abs(dyadic - scale))]
            else:
                nearest = 2.0 ** np.rint(np.log2(scale))
            weight = self.REFINEMENT_WEIGHT * np.exp(-abs(scale - nearest) / scale)
            row = result.time_slice(index)
            if not result.normalized:
                row = row / np.sqrt(scale)
            kernel = np.real(result.wavelet.kernel(scale))
            correction += weight * fftconvolve(row, kernel, mode='same') / np.sqrt(scale)
        return correction

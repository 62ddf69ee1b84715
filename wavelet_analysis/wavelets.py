# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Analyzing wavelets for the continuous wavelet transform.

Every wavelet exposes the same small interface: the real and imaginary
parts of the mother function psi(t), a center frequency (cycles per sample
at scale 1), a bandwidth that fixes the kernel support, and helpers that
sample the function. The transform engine only talks to this interface.
"""

from abc import ABC, abstractmethod

import numpy as np
import pywt
from numpy.polynomial import hermite_e
from scipy.special import factorial2

from .exceptions import InvalidArgumentError

# Kernel support in samples is about WAVELET_SUPPORT_FACTOR * scale * bandwidth
WAVELET_SUPPORT_FACTOR = 8


class ContinuousWavelet(ABC):
    """Base class for mother wavelets used by the CWT."""

    name = 'wavelet'
    is_complex = False

    @abstractmethod
    def psi(self, t):
        """Real part of the mother wavelet evaluated at ``t``."""

    def psi_imaginary(self, t):
        """Imaginary part of the mother wavelet; zero for real wavelets."""
        return np.zeros_like(np.asarray(t, dtype=float))

    def psi_complex(self, t):
        if not self.is_complex:
            return self.psi(t)
        return self.psi(t) + 1j * self.psi_imaginary(t)

    @abstractmethod
    def center_frequency(self):
        """Dominant frequency of the wavelet at scale 1, in cycles per unit time."""

    @abstractmethod
    def bandwidth(self):
        """Width parameter controlling the effective time support."""

    def support_radius(self):
        return WAVELET_SUPPORT_FACTOR / 2.0 * self.bandwidth()

    def half_support(self, scale):
        """Number of kernel taps on each side of the center at ``scale``."""
        return int(WAVELET_SUPPORT_FACTOR / 2.0 * scale * self.bandwidth())

    def kernel(self, scale):
        """Sample psi(k / scale) for k in [-H, H] where H is the half support."""
        half = self.half_support(scale)
        taps = np.arange(-half, half + 1, dtype=float) / scale
        return self.psi_complex(taps)

    def discretize(self, length):
        """
        Sample the wavelet over its effective support.

        Args:
            length (int): Number of samples

        Returns:
            numpy.ndarray: Samples centered at index ``length // 2``
        """
        if length <= 0:
            raise InvalidArgumentError(f"Length must be positive, got {length}")
        radius = self.support_radius()
        t = (np.arange(length) - length // 2) * 2.0 * radius / length
        return self.psi_complex(t)

    def parameters(self):
        """Values that, with the class, identify the wavelet."""
        return ()

    def __eq__(self, other):
        if not isinstance(other, ContinuousWavelet):
            return NotImplemented
        return type(self) is type(other) and self.parameters() == other.parameters()

    def __hash__(self):
        return hash((type(self), self.parameters()))

    def __repr__(self):
        parameters = ", ".join(repr(value) for value in self.parameters())
        return f"{type(self).__name__}({parameters})"


class MorletWavelet(ContinuousWavelet):
    """
    Analytic Morlet wavelet, psi(t) = pi^(-1/4) exp(-t^2 / 2 sigma^2) exp(i omega0 t).

    The correction term is omitted; for omega0 >= 5 it is below 1e-5.
    """

    is_complex = True

    def __init__(self, omega0=6.0, sigma=1.0):
        if omega0 <= 0:
            raise InvalidArgumentError(f"omega0 must be positive, got {omega0}")
        if sigma <= 0:
            raise InvalidArgumentError(f"sigma must be positive, got {sigma}")
        self.omega0 = float(omega0)
        self.sigma = float(sigma)
        self.name = 'morl'

    def parameters(self):
        return (self.omega0, self.sigma)

    def _envelope(self, t):
        x = np.asarray(t, dtype=float) / self.sigma
        return np.pi ** -0.25 * np.exp(-0.5 * x ** 2)

    def psi(self, t):
        t = np.asarray(t, dtype=float)
        return self._envelope(t) * np.cos(self.omega0 * t)

    def psi_imaginary(self, t):
        t = np.asarray(t, dtype=float)
        return self._envelope(t) * np.sin(self.omega0 * t)

    def center_frequency(self):
        return self.omega0 / (2.0 * np.pi)

    def bandwidth(self):
        return self.sigma


class MexicanHatWavelet(ContinuousWavelet):
    """Mexican hat (Ricker) wavelet: the normalized negative second derivative of a Gaussian."""

    def __init__(self):
        self.name = 'mexh'

    def psi(self, t):
        t_squared = np.asarray(t, dtype=float) ** 2
        norm = 2.0 / (np.sqrt(3.0) * np.pi ** 0.25)
        return norm * (1.0 - t_squared) * np.exp(-0.5 * t_squared)

    def center_frequency(self):
        # Fourier transform peaks at omega = sqrt(2)
        return np.sqrt(2.0) / (2.0 * np.pi)

    def bandwidth(self):
        return 1.0


class GaussianDerivativeWavelet(ContinuousWavelet):
    """
    n-th derivative of a Gaussian, n in 1..8.

    psi(t) = (-1)^n He_n(t / sigma) exp(-t^2 / 2 sigma^2) * norm / sigma^n, with
    He_n the probabilists' Hermite polynomial. Odd orders are antisymmetric
    edge detectors, even orders symmetric ridge detectors.
    """

    MAX_ORDER = 8

    def __init__(self, order=1, sigma=1.0):
        if not 1 <= order <= self.MAX_ORDER:
            raise InvalidArgumentError(
                f"Derivative order must be between 1 and {self.MAX_ORDER}, got {order}")
        if sigma <= 0:
            raise InvalidArgumentError(f"sigma must be positive, got {sigma}")
        self.order = int(order)
        self.sigma = float(sigma)
        self.name = f'gaus{self.order}'
        self._hermite = np.zeros(self.order + 1)
        self._hermite[-1] = 1.0
        gauss_norm = 1.0 / np.sqrt(2.0 * np.pi * self.sigma ** 2)
        self._norm = gauss_norm * np.sqrt(2.0 / factorial2(2 * self.order - 1, exact=True))

    def parameters(self):
        return (self.order, self.sigma)

    def psi(self, t):
        x = np.asarray(t, dtype=float) / self.sigma
        sign = -1.0 if self.order % 2 else 1.0
        polynomial = hermite_e.hermeval(x, self._hermite)
        return sign * polynomial / self.sigma ** self.order * np.exp(-0.5 * x ** 2) * self._norm

    def center_frequency(self):
        return np.sqrt(self.order) / (2.0 * np.pi * self.sigma)

    def bandwidth(self):
        return np.sqrt(self.order) / (self.sigma * np.sqrt(2.0))

    def support_radius(self):
        return 4.0 * self.sigma * np.sqrt(self.order)


class PyWaveletsWavelet(ContinuousWavelet):
    """Any continuous wavelet known to PyWavelets ('morl', 'mexh', 'gaus3', 'cmor1.5-1.0', ...).

    The mother function is tabulated once with ``wavefun`` and linearly
    interpolated; outside PyWavelets' support bounds it is zero.
    """

    def __init__(self, name, precision=12):
        try:
            self._wavelet = pywt.ContinuousWavelet(name)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown continuous wavelet: {name!r}") from exc
        psi, x = self._wavelet.wavefun(level=precision)
        self.name = name
        self.precision = precision
        self.is_complex = bool(np.iscomplexobj(psi))
        self._x = np.asarray(x, dtype=float)
        self._psi = np.asarray(psi)
        self._center_frequency = float(pywt.central_frequency(self._wavelet, precision=precision))
        bound = max(abs(self._wavelet.lower_bound), abs(self._wavelet.upper_bound))
        self._bandwidth = bound / (WAVELET_SUPPORT_FACTOR / 2.0)

    def parameters(self):
        return (self.name, self.precision)

    def psi(self, t):
        return np.interp(np.asarray(t, dtype=float), self._x, self._psi.real, left=0.0, right=0.0)

    def psi_imaginary(self, t):
        if not self.is_complex:
            return super().psi_imaginary(t)
        return np.interp(np.asarray(t, dtype=float), self._x, self._psi.imag, left=0.0, right=0.0)

    def center_frequency(self):
        return self._center_frequency

    def bandwidth(self):
        return self._bandwidth

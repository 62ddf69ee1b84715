# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Wavelet Analysis Module

Continuous Wavelet Transform (CWT) engine for one-dimensional real signals.

Key components:
- Direct and FFT-accelerated linear convolution over a set of scales
- Complex analysis: magnitude, phase, instantaneous frequency, coherence
- Adaptive scale selection (dyadic, signal-adaptive, optimal spacing)
- Standard and fast (MODWT-based) inverse transforms
"""

from .exceptions import InvalidArgumentError

from .config import (
    CWTConfig,
    PaddingStrategy,
    ScaleSelectionConfig,
    ScaleSpacing
)

from .wavelets import (
    ContinuousWavelet,
    MorletWavelet,
    MexicanHatWavelet,
    GaussianDerivativeWavelet,
    PyWaveletsWavelet
)

from .scale_space import (
    ScaleSpace,
    ScaleType,
    scale_to_frequency
)

from .spectral import (
    FFT,
    next_power_of_two,
    is_power_of_two
)

from .convolution import ConvolutionEngine

from .result import (
    CWTResult,
    ComplexCWTResult,
    MaxCoefficient,
    Ridge
)

from .transform import (
    ContinuousWaveletTransform,
    analyze,
    analyze_complex
)

from .complex_analysis import (
    cross_spectrum,
    wavelet_coherence,
    phase_difference,
    complex_divide,
    transfer_function,
    wrap_phase,
    unwrap_phase,
    instantaneous_frequency
)

from .scale_selection import (
    AdaptiveScaleSelector,
    DyadicScaleSelector,
    SignalAdaptiveScaleSelector,
    OptimalScaleSelector
)

from .inverse import (
    InverseCWT,
    FastInverseCWT,
    admissibility_constant
)

from .modwt import MaximalOverlapDWT

from .signals import (
    generate_test_signal,
    generate_chirp_signal,
    generate_impulse,
    generate_step
)

# Version information
__version__ = '0.1.0'

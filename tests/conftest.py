# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Global pytest configuration.
"""

import os
import sys

import numpy as np
import pytest

# Add the project root to the Python path so tests can import modules properly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from wavelet_analysis import MexicanHatWavelet, MorletWavelet  # noqa: E402


@pytest.fixture
def morlet():
    return MorletWavelet()


@pytest.fixture
def mexican_hat():
    return MexicanHatWavelet()


@pytest.fixture
def rng():
    """Seeded random generator so noisy tests are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def sine_signal():
    """5 Hz sine sampled at 100 Hz: (signal, sample_rate, frequency)."""
    sample_rate = 100.0
    t = np.arange(1024) / sample_rate
    return np.sin(2 * np.pi * 5.0 * t), sample_rate, 5.0

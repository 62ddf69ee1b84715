# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Synthetic test signals.
"""

import numpy as np

from .exceptions import InvalidArgumentError


def generate_test_signal(length=1024, freq=5.0, sample_rate=100.0):
    """
    Generate a test sinusoidal signal.

    Args:
        length (int): Signal length
        freq (float): Frequency in Hz
        sample_rate (float): Sampling rate in Hz

    Returns:
        numpy.ndarray: Test signal
    """
    t = np.arange(length) / sample_rate
    return np.sin(2 * np.pi * freq * t)


def generate_chirp_signal(length=1024, f0=1.0, f1=20.0, sample_rate=100.0):
    """
    Generate a linear chirp from ``f0`` to ``f1`` Hz.

    Args:
        length (int): Signal length
        f0 (float): Start frequency in Hz
        f1 (float): End frequency in Hz
        sample_rate (float): Sampling rate in Hz

    Returns:
        numpy.ndarray: Chirp signal
    """
    t = np.arange(length) / sample_rate
    duration = length / sample_rate
    k = (f1 - f0) / duration
    return np.sin(2 * np.pi * (f0 * t + 0.5 * k * t * t))


def generate_impulse(length=256, position=None, amplitude=1.0):
    """Unit impulse at ``position`` (the middle by default)."""
    position = length // 2 if position is None else position
    if not 0 <= position < length:
        raise InvalidArgumentError(f"Impulse position {position} outside [0, {length})")
    impulse = np.zeros(length)
    impulse[position] = amplitude
    return impulse


def generate_step(length=256, position=None, amplitude=1.0):
    """Zeros up to ``position``, ``amplitude`` from there on."""
    position = length // 2 if position is None else position
    if not 0 <= position < length:
        raise InvalidArgumentError(f"Step position {position} outside [0, {length})")
    step = np.zeros(length)
    step[position:] = amplitude
    return step

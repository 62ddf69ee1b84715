# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Tests for the analyzing wavelets.
"""

import numpy as np
import pytest
import pywt

from wavelet_analysis import (
    ContinuousWaveletTransform,
    GaussianDerivativeWavelet,
    InvalidArgumentError,
    MexicanHatWavelet,
    MorletWavelet,
    PyWaveletsWavelet,
    generate_impulse
)


class TestMorletWavelet:
    def test_properties(self, morlet):
        assert morlet.is_complex
        assert morlet.name == 'morl'
        assert morlet.center_frequency() == pytest.approx(6.0 / (2 * np.pi))
        assert morlet.bandwidth() == 1.0

    def test_values(self, morlet):
        assert float(morlet.psi(0.0)) == pytest.approx(np.pi ** -0.25)
        assert float(morlet.psi_imaginary(0.0)) == 0.0
        t = np.linspace(-3, 3, 61)
        # real part even, imaginary part odd
        np.testing.assert_allclose(morlet.psi(t), morlet.psi(-t))
        np.testing.assert_allclose(morlet.psi_imaginary(t), -morlet.psi_imaginary(-t))
        np.testing.assert_allclose(np.abs(morlet.psi_complex(t)),
                                   np.pi ** -0.25 * np.exp(-0.5 * t ** 2))

    def test_kernel_length(self, morlet):
        for scale in [0.1, 1.0, 2.5, 8.0]:
            kernel = morlet.kernel(scale)
            assert kernel.shape == (2 * int(4 * scale) + 1,)
            assert np.iscomplexobj(kernel)

    def test_invalid_parameters(self):
        with pytest.raises(InvalidArgumentError):
            MorletWavelet(omega0=0)
        with pytest.raises(InvalidArgumentError):
            MorletWavelet(sigma=-1)


class TestMexicanHatWavelet:
    def test_shape(self, mexican_hat):
        assert not mexican_hat.is_complex
        t = np.linspace(-5, 5, 101)
        np.testing.assert_allclose(mexican_hat.psi(t), mexican_hat.psi(-t))
        assert float(mexican_hat.psi(1.0)) == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_array_equal(mexican_hat.psi_imaginary(t), np.zeros_like(t))

    def test_zero_mean(self, mexican_hat):
        t = np.linspace(-10, 10, 20001)
        assert abs(np.sum(mexican_hat.psi(t)) * (t[1] - t[0])) < 1e-6

    def test_discretize(self, mexican_hat):
        samples = mexican_hat.discretize(128)
        assert samples.shape == (128,)
        assert np.argmax(samples) == 64
        with pytest.raises(InvalidArgumentError):
            mexican_hat.discretize(0)


class TestGaussianDerivativeWavelet:
    @pytest.mark.parametrize("order", [1, 2, 3, 4, 5, 6, 7, 8])
    def test_symmetry(self, order):
        wavelet = GaussianDerivativeWavelet(order)
        assert wavelet.name == f"gaus{order}"
        t = np.linspace(0.1, 4, 40)
        if order % 2:
            np.testing.assert_allclose(wavelet.psi(-t), -wavelet.psi(t), atol=1e-14)
            assert float(wavelet.psi(0.0)) == pytest.approx(0.0, abs=1e-14)
        else:
            np.testing.assert_allclose(wavelet.psi(-t), wavelet.psi(t), atol=1e-14)
        assert abs(float(wavelet.psi(10.0))) < 1e-8

    def test_first_and_second_derivative(self):
        first = GaussianDerivativeWavelet(1)
        assert float(first.psi(1.0)) < 0 < float(first.psi(-1.0))

        second = GaussianDerivativeWavelet(2)
        assert float(second.psi(0.0)) < 0
        assert float(second.psi(1.0)) == pytest.approx(0.0, abs=1e-12)
        assert float(second.psi(2.0)) > 0

    def test_frequency_and_bandwidth(self):
        frequencies = [GaussianDerivativeWavelet(n).center_frequency() for n in (1, 2, 3)]
        assert frequencies[0] < frequencies[1] < frequencies[2]
        assert GaussianDerivativeWavelet(1, 2.0).center_frequency() < frequencies[0]
        assert GaussianDerivativeWavelet(1).bandwidth() != GaussianDerivativeWavelet(2).bandwidth()

    @pytest.mark.parametrize("order,sigma", [(0, 1.0), (-1, 1.0), (9, 1.0), (1, 0.0), (1, -1.0)])
    def test_invalid_parameters(self, order, sigma):
        with pytest.raises(InvalidArgumentError):
            GaussianDerivativeWavelet(order, sigma)


class TestPyWaveletsWavelet:
    def test_real_wavelet(self):
        wavelet = PyWaveletsWavelet('mexh')
        assert not wavelet.is_complex
        assert wavelet.center_frequency() == pytest.approx(pywt.central_frequency('mexh'), abs=0.01)
        assert wavelet.bandwidth() > 0
        assert float(wavelet.psi(100.0)) == 0.0

    def test_matches_tabulated_values(self):
        wavelet = PyWaveletsWavelet('gaus2', precision=10)
        psi, x = pywt.ContinuousWavelet('gaus2').wavefun(level=10)
        np.testing.assert_allclose(wavelet.psi(x), np.real(psi), atol=1e-12)

    def test_complex_wavelet(self):
        wavelet = PyWaveletsWavelet('cmor1.5-1.0')
        assert wavelet.is_complex
        assert np.iscomplexobj(wavelet.kernel(2.0))

    def test_unknown_name(self):
        with pytest.raises(InvalidArgumentError):
            PyWaveletsWavelet('not-a-wavelet')

    def test_agrees_with_builtin_mexican_hat(self):
        signal = generate_impulse(256, 128) + generate_impulse(256, 40)
        scales = [2.0, 4.0, 8.0]
        builtin = ContinuousWaveletTransform(MexicanHatWavelet()).analyze(signal, scales)
        tabulated = ContinuousWaveletTransform(PyWaveletsWavelet('mexh')).analyze(signal, scales)
        difference = np.abs(builtin.coefficients() - tabulated.coefficients())
        assert difference.max() < 0.02 * np.abs(builtin.coefficients()).max()


class TestWaveletEquality:
    def test_same_parameters_equal(self):
        assert MorletWavelet() == MorletWavelet(omega0=6.0, sigma=1.0)
        assert MexicanHatWavelet() == MexicanHatWavelet()
        assert GaussianDerivativeWavelet(3) == GaussianDerivativeWavelet(3)
        assert PyWaveletsWavelet('mexh', precision=8) == PyWaveletsWavelet('mexh', precision=8)
        assert len({MorletWavelet(), MorletWavelet(), MexicanHatWavelet()}) == 2

    def test_parameters_distinguish(self):
        assert MorletWavelet() != MorletWavelet(omega0=12.0)
        assert MorletWavelet() != MorletWavelet(sigma=2.0)
        assert GaussianDerivativeWavelet(2) != GaussianDerivativeWavelet(2, sigma=0.5)
        assert PyWaveletsWavelet('mexh', precision=8) != PyWaveletsWavelet('mexh', precision=10)

    def test_type_distinguishes(self):
        """Same name from another implementation is a different wavelet."""
        assert MorletWavelet() != PyWaveletsWavelet('morl')
        assert MexicanHatWavelet() != PyWaveletsWavelet('mexh')
        assert MorletWavelet() != 'morl'

    def test_repr_shows_parameters(self):
        assert repr(MorletWavelet(omega0=12.0)) == "MorletWavelet(12.0, 1.0)"
        assert repr(MexicanHatWavelet()) == "MexicanHatWavelet()"

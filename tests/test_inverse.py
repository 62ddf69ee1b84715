# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Tests for the standard and fast inverse transforms.
"""

import logging
import time

import numpy as np
import pytest

from wavelet_analysis import (
    ContinuousWavelet,
    CWTConfig,
    FastInverseCWT,
    GaussianDerivativeWavelet,
    InvalidArgumentError,
    InverseCWT,
    MorletWavelet,
    PyWaveletsWavelet,
    ScaleSpace,
    admissibility_constant,
    analyze
)
from wavelet_analysis.inverse import integration_weights
from wavelet_analysis.modwt import level_filter_responses


def _relative_error(estimate, reference):
    return np.linalg.norm(estimate - reference) / np.linalg.norm(reference)


def _correlation(a, b):
    return np.corrcoef(a, b)[0, 1]


class _GaussianBump(ContinuousWavelet):
    """Plain Gaussian: positive mean, so not a wavelet the inverse accepts."""

    def psi(self, t):
        return np.exp(-0.5 * np.asarray(t, dtype=float) ** 2)

    def center_frequency(self):
        return 0.1

    def bandwidth(self):
        return 1.0


def _best_time(function, result, repeats=5):
    function(result)
    timings = []
    for _ in range(repeats):
        start = time.perf_counter()
        function(result)
        timings.append(time.perf_counter() - start)
    return min(timings)


class TestAdmissibility:
    def test_constants(self, morlet, mexican_hat):
        for wavelet in (morlet, mexican_hat, GaussianDerivativeWavelet(1), GaussianDerivativeWavelet(2)):
            constant = admissibility_constant(wavelet)
            assert 0.0 < constant < 10.0

    def test_mexican_hat_closed_form(self, mexican_hat):
        # integral of |Psi(w)|^2 / w over w > 0 is 4 sqrt(pi) / 3
        assert admissibility_constant(mexican_hat) == pytest.approx(4.0 * np.sqrt(np.pi) / 3.0, rel=1e-3)

    def test_non_zero_mean_rejected(self):
        assert admissibility_constant(_GaussianBump()) == np.inf
        with pytest.raises(InvalidArgumentError):
            InverseCWT(_GaussianBump())
        with pytest.raises(InvalidArgumentError):
            InverseCWT(None)

    def test_integration_weights(self):
        np.testing.assert_allclose(integration_weights([1.0, 2.0, 4.0]), [0.5, 1.5, 1.0])
        np.testing.assert_allclose(integration_weights([3.0]), [3.0])


class TestInverseCWT:
    def test_morlet_reconstruction(self, morlet):
        """Test reconstruction of a tone away from the edges."""
        t = np.arange(4096)
        signal = np.cos(2 * np.pi * 0.05 * t)
        result = analyze(signal, ScaleSpace.logarithmic(4.0, 128.0, 64), morlet)
        inverse = InverseCWT(morlet)
        assert inverse.admissibility_constant > 0

        reconstructed = inverse.reconstruct(result)
        assert reconstructed.shape == signal.shape
        interior = slice(1024, 3072)
        assert _relative_error(reconstructed[interior], signal[interior]) < 0.2
        assert _correlation(reconstructed[interior], signal[interior]) > 0.95

    def test_mexican_hat_reconstruction(self, mexican_hat):
        t = np.arange(2048)
        signal = np.cos(2 * np.pi * 0.02 * t)
        result = analyze(signal, ScaleSpace.logarithmic(2.0, 64.0, 48), mexican_hat)
        reconstructed = InverseCWT(mexican_hat).reconstruct(result)
        interior = slice(512, 1536)
        assert _relative_error(reconstructed[interior], signal[interior]) < 0.35
        assert _correlation(reconstructed[interior], signal[interior]) > 0.9

    def test_first_derivative_reconstruction(self):
        """Antisymmetric wavelets reconstruct through the translation integral."""
        wavelet = GaussianDerivativeWavelet(1)
        t = np.arange(2048)
        signal = np.cos(2 * np.pi * 0.05 * t)
        result = analyze(signal, ScaleSpace.logarithmic(1.0, 128.0, 64), wavelet)
        reconstructed = InverseCWT(wavelet).reconstruct(result)
        interior = slice(768, 1280)
        assert _correlation(reconstructed[interior], signal[interior]) > 0.95
        amplitude = np.linalg.norm(reconstructed[interior]) / np.linalg.norm(signal[interior])
        assert 0.5 < amplitude < 1.2

    def test_normalization_independent(self, rng, morlet):
        signal = rng.standard_normal(512)
        scales = ScaleSpace.logarithmic(2.0, 64.0, 32)
        inverse = InverseCWT(morlet)
        normalized = inverse.reconstruct(analyze(signal, scales, morlet))
        raw = inverse.reconstruct(analyze(signal, scales, morlet, CWTConfig(normalize_scales=False)))
        np.testing.assert_allclose(raw, normalized, rtol=1e-9, atol=1e-12)

    def test_frequency_band(self, morlet):
        t = np.arange(2048)
        fast_tone = np.cos(2 * np.pi * 0.1 * t)
        slow_tone = np.cos(2 * np.pi * 0.02 * t)
        result = analyze(fast_tone + slow_tone, ScaleSpace.logarithmic(4.0, 256.0, 96), morlet)
        band = InverseCWT(morlet).reconstruct_frequency_band(result, 1.0, 0.06, 0.2)
        interior = slice(256, 1792)
        assert _relative_error(band[interior], fast_tone[interior]) < 0.1

    def test_full_band_matches_reconstruct(self, rng, morlet):
        scales = ScaleSpace.logarithmic(2.0, 32.0, 16)
        result = analyze(rng.standard_normal(256), scales, morlet)
        inverse = InverseCWT(morlet)
        np.testing.assert_allclose(inverse.reconstruct_band(result, scales.min_scale, scales.max_scale),
                                   inverse.reconstruct(result))

    def test_empty_band(self, rng, morlet, caplog):
        result = analyze(rng.standard_normal(128), [2.0, 4.0], morlet)
        with caplog.at_level(logging.WARNING, logger="wavelet_analysis.inverse"):
            band = InverseCWT(morlet).reconstruct_band(result, 10.0, 20.0)
        np.testing.assert_array_equal(band, np.zeros(128))
        assert "No scales inside" in caplog.text

    def test_invalid_arguments(self, rng, morlet, mexican_hat):
        result = analyze(rng.standard_normal(128), [2.0, 4.0], morlet)
        inverse = InverseCWT(morlet)
        with pytest.raises(InvalidArgumentError):
            inverse.reconstruct(None)
        with pytest.raises(InvalidArgumentError):
            InverseCWT(mexican_hat).reconstruct(result)
        with pytest.raises(InvalidArgumentError):
            inverse.reconstruct_band(result, 0.0, 4.0)
        with pytest.raises(InvalidArgumentError):
            inverse.reconstruct_band(result, 4.0, 2.0)
        with pytest.raises(InvalidArgumentError):
            inverse.reconstruct_frequency_band(result, 0.0, 1.0, 2.0)
        with pytest.raises(InvalidArgumentError):
            inverse.reconstruct_frequency_band(result, 1.0, 0.3, 0.1)

    @pytest.mark.parametrize("analyzing", [MorletWavelet(omega0=12.0), PyWaveletsWavelet('morl')],
                             ids=["other-omega0", "tabulated-morl"])
    def test_rejects_other_wavelet_with_same_name(self, rng, analyzing):
        result = analyze(rng.standard_normal(128), [2.0, 4.0], analyzing)
        assert result.wavelet.name == 'morl'
        with pytest.raises(InvalidArgumentError):
            InverseCWT(MorletWavelet()).reconstruct(result)
        with pytest.raises(InvalidArgumentError):
            InverseCWT(MorletWavelet()).reconstruct_band(result, 2.0, 4.0)

    def test_accepts_equal_wavelet_instance(self, rng):
        result = analyze(rng.standard_normal(128), [2.0, 4.0], MorletWavelet(omega0=12.0))
        reconstructed = InverseCWT(MorletWavelet(omega0=12.0)).reconstruct(result)
        assert reconstructed.shape == (128,)


class TestFastInverseCWT:
    def test_is_dyadic(self):
        assert FastInverseCWT.is_dyadic(8.0)
        assert FastInverseCWT.is_dyadic(2.1)
        assert not FastInverseCWT.is_dyadic(2.5)
        assert not FastInverseCWT.is_dyadic(6.0)

    def test_level_map(self):
        mapping = FastInverseCWT().level_map([2.0, 3.0, 4.0, 8.0, 8.5], 1024)
        assert mapping == {1: 0, 2: 2, 3: 3}

    def test_level_map_clips_to_signal(self):
        mapping = FastInverseCWT().level_map([1.0, 512.0], 64)
        assert set(mapping) == {1, 6}

    @pytest.mark.parametrize("refine", [False, True])
    def test_reconstruct_shape(self, rng, morlet, refine):
        signal = rng.standard_normal(512)
        result = analyze(signal, ScaleSpace.logarithmic(2.0, 64.0, 24), morlet)
        reconstructed = FastInverseCWT().reconstruct(result, refine=refine)
        assert reconstructed.shape == signal.shape
        assert np.all(np.isfinite(reconstructed))

    def test_refinement_changes_output(self, rng, mexican_hat):
        result = analyze(rng.standard_normal(256), ScaleSpace.logarithmic(2.0, 32.0, 12), mexican_hat)
        inverse = FastInverseCWT('sym4')
        assert not np.allclose(inverse.reconstruct(result, refine=True), inverse.reconstruct(result))

    def test_warns_without_dyadic_scales(self, rng, morlet, caplog):
        result = analyze(rng.standard_normal(256), [3.0, 6.0], morlet)
        with caplog.at_level(logging.WARNING, logger="wavelet_analysis.inverse"):
            FastInverseCWT().reconstruct(result)
        assert "No near-dyadic scales" in caplog.text

    def test_invalid(self):
        with pytest.raises(InvalidArgumentError):
            FastInverseCWT('bior2.2')
        with pytest.raises(InvalidArgumentError):
            FastInverseCWT().reconstruct(None)

    @pytest.mark.parametrize("length, scales", [
        (256, ScaleSpace.dyadic(1, 7)),
        (1024, ScaleSpace.logarithmic(2.0, 256.0, 16)),
        (4096, ScaleSpace.logarithmic(2.0, 512.0, 32)),
        (8192, ScaleSpace.logarithmic(2.0, 1024.0, 64)),
    ])
    def test_faster_than_standard(self, rng, length, scales):
        """Faster on both a fresh instance with empty filter caches and a warm one."""
        wavelet = MorletWavelet()
        result = analyze(rng.standard_normal(length), scales, wavelet)
        standard_time = _best_time(InverseCWT(wavelet).reconstruct, result)

        def cold_reconstruct(result):
            level_filter_responses.cache_clear()
            return FastInverseCWT().reconstruct(result)

        assert _best_time(cold_reconstruct, result) < standard_time
        assert _best_time(FastInverseCWT().reconstruct, result) < standard_time

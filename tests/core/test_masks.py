import pytest
import numpy as np

import repet
from repet.core.audio_signal import AudioSignalException
from repet.core.masks import BinaryMask, SoftMask, MaskBase, harden_mask

stft_tol = 1e-8
thresholds = [0.0, .1, .3, .5, .9, 1.0]
hardnesses = [0.0, .1, .5, .9, 1.0]


def test_apply_mask(random_signal):
    signal = random_signal
    signal.stft()
    half_shape = signal.magnitude_spectrogram_data.shape

    mask_data = np.random.rand(*half_shape)
    soft_mask = SoftMask(mask_data)
    inverse_mask = soft_mask.invert_mask()
    full_mask = SoftMask(np.random.rand(*signal.stft_data.shape))

    signal.stft_data = None
    pytest.raises(AudioSignalException, signal.apply_mask, soft_mask)
    signal.stft()
    pytest.raises(AudioSignalException, signal.apply_mask, [0])
    pytest.raises(AudioSignalException, signal.apply_mask, full_mask)

    s1 = signal.apply_mask(soft_mask)
    s1.istft()
    s2 = signal.apply_mask(inverse_mask)
    s2.istft()

    recon = s1 + s2

    assert np.allclose(recon.audio_data, signal.audio_data, atol=stft_tol)

    binary_mask = BinaryMask(mask_data > .5)
    s1 = signal.apply_mask(binary_mask)
    s1.istft()
    s2 = signal.apply_mask(binary_mask.invert_mask())
    s2.istft()

    recon = s1 + s2

    assert np.allclose(recon.audio_data, signal.audio_data, atol=stft_tol)

    signal.apply_mask(binary_mask, overwrite=True)

    assert np.allclose(signal.stft_data, s1.stft_data)


def test_create_mask():
    mask_data = np.random.rand(513, 100, 1)
    pytest.raises(NotImplementedError, MaskBase, mask_data)
    pytest.raises(ValueError, MaskBase, [0])
    pytest.raises(NotImplementedError, MaskBase._validate_mask, mask_data)

    pytest.raises(ValueError, SoftMask, np.random.rand(513, 100, 1, 1))
    pytest.raises(ValueError, SoftMask, np.random.rand(513))
    pytest.raises(ValueError, SoftMask, [0])
    pytest.raises(ValueError, SoftMask, mask_data > .5)

    # values outside [0, 1] are rejected, not rescaled
    pytest.raises(ValueError, SoftMask, mask_data + 1)
    pytest.raises(ValueError, SoftMask, mask_data - 1)

    two_d = SoftMask(mask_data[..., 0])
    assert two_d.shape == (513, 100, 1)
    assert two_d.num_channels == 1
    assert np.array_equal(two_d.get_channel(0), mask_data[..., 0])
    pytest.raises(ValueError, two_d.get_channel, 1)
    pytest.raises(ValueError, two_d.get_channel, -1)

    s1 = SoftMask(mask_data)
    for t in thresholds:
        binary_mask = s1.mask_to_binary(t)
        assert isinstance(binary_mask, BinaryMask)
        assert np.array_equal(binary_mask.mask, mask_data > t)

    zeros = SoftMask(np.zeros(mask_data.shape))
    ones = SoftMask(np.ones(mask_data.shape))
    assert zeros.invert_mask() == ones
    assert zeros != ones


def test_binary_mask():
    mask_data = np.random.rand(257, 50, 2) > .5

    b1 = BinaryMask(mask_data)
    assert b1.mask.dtype == bool
    assert np.array_equal(b1.mask_as_ints(), mask_data.astype(int))
    assert np.array_equal(b1.mask_as_ints(channel=1), mask_data[..., 1].astype(int))
    assert np.array_equal(b1.invert_mask().mask, ~mask_data)

    b2 = BinaryMask(mask_data.astype(int))
    assert b1 == b2
    b3 = BinaryMask(mask_data.astype(float) + 1e-3)
    assert b1 == b3

    pytest.raises(ValueError, BinaryMask, mask_data.astype(int) * 2)
    pytest.raises(ValueError, BinaryMask, np.random.rand(257, 50, 2) * .5 + .25)


def test_harden_endpoints():
    mask_data = np.random.rand(257, 50, 2)
    mask_data[0, 0, 0] = 0.0
    mask_data[1, 1, 1] = 1.0

    for t in thresholds:
        # hardness 0 is the original mask
        assert np.array_equal(harden_mask(mask_data, 0.0, t), mask_data)

        # hardness 1 is binary, split at the threshold
        hard = harden_mask(mask_data, 1.0, t)
        assert np.all(np.isin(hard, [0.0, 1.0]))
        # 1 stays 1, also at threshold 1
        assert np.array_equal(hard, ((mask_data > t) | (mask_data == 1)).astype(float))


def test_harden_monotonic():
    mask_data = np.linspace(0, 1, 101)[:, None]

    for t in thresholds:
        previous = mask_data
        for h in hardnesses:
            hard = harden_mask(mask_data, h, t)

            assert np.all(hard >= 0) and np.all(hard <= 1)
            # a hardened mask keeps the order of the values
            assert np.all(np.diff(hard[:, 0]) >= 0)

            # values move away from the pivot as hardness grows
            below = mask_data <= t
            assert np.all(hard[below] <= previous[below] + 1e-12)
            assert np.all(hard[~below] >= previous[~below] - 1e-12)
            previous = hard


def test_harden_continuity():
    mask_data = np.random.rand(100, 20)
    t = .4

    nearly_soft = harden_mask(mask_data, 1e-6, t)
    assert np.allclose(nearly_soft, mask_data, atol=1e-4)

    # away from the pivot, nearly hard is close to binary
    nearly_hard = harden_mask(mask_data, 1 - 1e-6, t)
    far = np.abs(mask_data - t) > .05
    assert np.allclose(nearly_hard[far], (mask_data > t)[far], atol=1e-4)


@pytest.mark.parametrize("t", [0.0, 1.0])
def test_harden_continuity_at_extreme_thresholds(t):
    points = np.array([[0.0, .2, t, .7, 1.0]])

    nearly_hard = harden_mask(points, 1 - 1e-6, t)
    hard = harden_mask(points, 1.0, t)
    assert np.allclose(nearly_hard, hard, atol=1e-4)
    assert hard[0, 0] == 0
    assert hard[0, -1] == 1

    binary = SoftMask(points).mask_to_binary(t)
    assert np.array_equal(binary.mask[..., 0], hard.astype(bool))


def test_harden_pivot_and_bounds_are_fixed():
    t = .3
    points = np.array([[0.0, t, 1.0]])
    for h in hardnesses[:-1]:
        assert np.allclose(harden_mask(points, h, t), points)


def test_harden_bad_parameters():
    mask_data = np.random.rand(10, 10)
    for bad in [-.1, 1.1, np.inf, 'soft', None, True]:
        pytest.raises(ValueError, harden_mask, mask_data, bad, .5)
        pytest.raises(ValueError, harden_mask, mask_data, .5, bad)

    # the separation layer raises its own ValueError subclass
    signal = repet.AudioSignal(audio_data_array=np.random.rand(16000), sample_rate=16000)
    pytest.raises(repet.InvalidParameter, repet.Repet, signal, hardness=1.5)
    pytest.raises(ValueError, repet.Repet, signal, mask_threshold=-1)


def test_soft_mask_harden():
    mask_data = np.random.rand(257, 50, 1)
    s1 = SoftMask(mask_data)

    hard = s1.harden(.5, threshold=.2)
    assert isinstance(hard, SoftMask)
    assert np.allclose(hard.mask, harden_mask(mask_data, .5, .2))
    assert s1.harden(0.0) == s1
    assert s1.harden(1.0).mask_to_binary(.5) == s1.mask_to_binary(.5)

import itertools

import pytest
import numpy as np
from scipy.signal import check_COLA

import repet
from repet.core import stft_utils
from repet.core.constants import ALL_WINDOWS

sr = 16000
stft_tol = 1e-8

win_lengths = [256, 512, 1024]
window_types = ALL_WINDOWS
signal_lengths = [1, 100, 511, 512, 513, 8000]

combos = itertools.product(win_lengths, window_types)


def test_default_window_length():
    assert stft_utils.default_window_length(16000) == 1024
    assert stft_utils.default_window_length(44100) == 2048
    assert stft_utils.default_window_length(8000) == 512
    # exactly a power of two stays put
    assert stft_utils.default_window_length(25600) == 1024


def test_default_window_is_cola():
    for sample_rate in [8000, 16000, 22050, 44100, 48000]:
        win_length = stft_utils.default_window_length(sample_rate)
        window = stft_utils.get_window('hamming', win_length)
        assert win_length % 2 == 0
        assert check_COLA(window, win_length, win_length // 2)


def test_num_frames():
    assert stft_utils.num_frames(0, 1024, 512) == 0
    for n in signal_lengths:
        expected = int(np.ceil((1024 - 512 + n) / 512))
        assert stft_utils.num_frames(n, 1024, 512) == expected


def test_frame_empty():
    window = stft_utils.get_window('hamming', 64)
    frames = stft_utils.frame(np.array([]), window, 32)
    assert frames.shape == (64, 0)


def test_frame_layout():
    win_length, hop = 8, 4
    window = np.ones(win_length)
    signal = np.arange(1, 11, dtype=float)

    frames = stft_utils.frame(signal, window, hop)
    assert frames.shape == (win_length, stft_utils.num_frames(10, win_length, hop))

    # padded with win_length - hop zeros at the start
    assert np.array_equal(frames[:, 0], [0, 0, 0, 0, 1, 2, 3, 4])
    assert np.array_equal(frames[:, 1], [1, 2, 3, 4, 5, 6, 7, 8])
    # and with zeros at the end so every frame is complete
    assert np.array_equal(frames[:, -1], [9, 10, 0, 0, 0, 0, 0, 0])

    # adjacent frames overlap by win_length - hop samples
    for i in range(frames.shape[1] - 1):
        assert np.array_equal(frames[hop:, i], frames[:hop, i + 1])


def test_frame_applies_window():
    window = stft_utils.get_window('hamming', 16)
    frames = stft_utils.frame(np.ones(64), window, 8)
    assert np.allclose(frames[:, 2], window)


def test_magnitude_keeps_non_negative_frequencies():
    rng = np.random.RandomState(0)
    signal = rng.randn(4000)
    stft_data = stft_utils.stft(signal, 512, 256)

    assert stft_data.shape[0] == 512
    assert np.iscomplexobj(stft_data)

    magnitude = stft_utils.magnitude(stft_data)
    assert magnitude.shape == (257, stft_data.shape[1])
    assert np.all(magnitude >= 0)

    frames = stft_utils.frame(signal, stft_utils.get_window('hamming', 512), 256)
    assert np.allclose(magnitude, np.abs(np.fft.rfft(frames, axis=0)))

    # the dropped bins are the mirror images of the kept ones
    assert np.allclose(np.abs(stft_data[1:256]), np.abs(stft_data[-1:-256:-1]))


@pytest.mark.parametrize("combo", combos)
def test_stft_istft_identity(combo):
    win_length, win_type = combo
    hop_length = win_length // 2
    rng = np.random.RandomState(2)

    for n in signal_lengths:
        signal = rng.rand(n) * 2 - 1
        stft_data = stft_utils.stft(signal, win_length, hop_length, win_type)
        assert stft_data.shape == (
            win_length, stft_utils.num_frames(n, win_length, hop_length))

        recon = stft_utils.istft(stft_data, win_length, hop_length, n, win_type)
        assert recon.shape == signal.shape
        assert np.allclose(recon, signal, atol=stft_tol)


def test_mirror_spectrum():
    win_length = 16
    half = np.arange(9, dtype=float)[:, None]
    full = stft_utils.mirror_spectrum(half, win_length)

    assert full.shape == (16, 1)
    for k in range(1, win_length // 2):
        assert full[k] == full[win_length - k]
    assert np.array_equal(full[:9], half)

    pytest.raises(ValueError, stft_utils.mirror_spectrum, half[:8], win_length)


def test_mirrored_mask_keeps_signal_real():
    rng = np.random.RandomState(3)
    win_length, hop_length = 512, 256
    signal = rng.randn(5000)

    stft_data = stft_utils.stft(signal, win_length, hop_length)
    mask = rng.rand(win_length // 2 + 1, stft_data.shape[1])
    masked = stft_data * stft_utils.mirror_spectrum(mask, win_length)

    # conjugate symmetry survives masking, so the inverse is real
    frames = np.fft.ifft(masked, axis=0)
    assert np.allclose(frames.imag, 0, atol=1e-10)

    ones = stft_data * stft_utils.mirror_spectrum(np.ones_like(mask), win_length)
    recon = stft_utils.istft(ones, win_length, hop_length, len(signal))
    assert np.allclose(recon, signal, atol=stft_tol)


def test_audio_signal_stft_shape(random_signal):
    stft_data = random_signal.stft()
    win_length, hop_length, _ = random_signal.stft_params

    assert win_length == 1024
    assert hop_length == 512
    assert stft_data.shape == (
        win_length,
        stft_utils.num_frames(random_signal.signal_length, win_length, hop_length),
        random_signal.num_channels
    )
    assert random_signal.magnitude_spectrogram_data.shape == (
        win_length // 2 + 1, stft_data.shape[1], random_signal.num_channels)


def test_audio_signal_stft_istft(random_signal):
    original = random_signal.audio_data.copy()
    random_signal.stft()
    random_signal.istft()

    assert random_signal.audio_data.shape == original.shape
    assert np.allclose(random_signal.audio_data, original, atol=stft_tol)


def test_stft_params():
    signal = repet.AudioSignal(audio_data_array=np.zeros(sr), sample_rate=sr)
    assert signal.stft_params == repet.STFTParams(1024, 512, 'hamming')

    signal.stft_params = repet.STFTParams(window_length=256)
    assert signal.stft_params == repet.STFTParams(256, 128, 'hamming')

    with pytest.raises(ValueError):
        signal.stft_params = repet.STFTParams(window_length=255)
    with pytest.raises(ValueError):
        # hamming at a 90% hop does not overlap-add to a constant
        signal.stft_params = repet.STFTParams(window_length=256, hop_length=230)
    with pytest.raises(ValueError):
        signal.stft_params = (1024, 512, 'hamming')

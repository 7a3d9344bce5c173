import matplotlib
matplotlib.use('Agg')

import pytest
import numpy as np

import repet

SYNTH_SR = 16000
PERIOD_SECONDS = .5


def gated_tone(duration=5.0, sr=SYNTH_SR, period=PERIOD_SECONDS, freq=440.0):
    """
    A tone switched on for the first half of every ``period``, getting louder over
    the signal so that the first repetition of the pattern stands out in the beat
    spectrum.
    """
    t = np.arange(int(duration * sr)) / sr
    gate = (t % period) < (period / 2)
    envelope = .1 + .9 * t / duration
    return .5 * envelope * gate * np.sin(2 * np.pi * freq * t)


@pytest.fixture
def repeating_tone():
    """5 s, 16 kHz, mono: a 440 Hz tone repeating every half second."""
    return repet.AudioSignal(audio_data_array=gated_tone(), sample_rate=SYNTH_SR)


@pytest.fixture
def music_like_mix():
    """
    6 s, 16 kHz, stereo: a repeating pattern of short noise bursts and tones
    (the background) plus a slow non-repeating glide (the foreground).
    """
    rng = np.random.RandomState(0)
    duration = 6.0
    n = int(duration * SYNTH_SR)
    t = np.arange(n) / SYNTH_SR

    pattern_len = int(.75 * SYNTH_SR)
    pattern = np.zeros(pattern_len)
    burst = rng.randn(800) * np.exp(-np.arange(800) / 150)
    for onset in [0, 3000, 6000, 9000]:
        pattern[onset:onset + 800] += burst
    pattern += .3 * np.sin(2 * np.pi * 220 * np.arange(pattern_len) / SYNTH_SR) * (
        np.arange(pattern_len) < pattern_len // 3)
    background = np.tile(pattern, int(np.ceil(n / pattern_len)))[:n]

    glide = .2 * np.sin(2 * np.pi * (600 * t + 40 * t ** 2))

    left = .5 * background + glide
    right = .4 * background + .8 * glide
    return repet.AudioSignal(
        audio_data_array=np.vstack([left, right]), sample_rate=SYNTH_SR)


@pytest.fixture
def random_signal():
    rng = np.random.RandomState(1)
    return repet.AudioSignal(
        audio_data_array=rng.rand(2, 3 * SYNTH_SR) * 2 - 1, sample_rate=SYNTH_SR)

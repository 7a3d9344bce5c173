"""
Provides utilities for running repet algorithms that do not belong to
any specific algorithm or that are shared between algorithms, including
the plotting helpers used to display spectrograms and beat spectra.
"""

import numpy as np

from . import constants


def _get_axis(array, axis_num, i):
    """
    Will get index 'i' along axis 'axis_num' using np.take.

    Args:
        array (:obj:`np.ndarray`): Array to fetch axis of.
        axis_num (int): Axes to retrieve.
        i (int): Index to retrieve.

    Returns:
        The value at index :param:`i` along axis :param:`axis_num`
    """

    return np.take(array, i, axis_num)


def seconds_to_frames(seconds, hop_length, sample_rate):
    """
    Converts a duration in seconds to a (rounded) number of STFT frames.

    Args:
        seconds (float): Duration in seconds.
        hop_length (int): Hop between frames, in samples.
        sample_rate (int): Sample rate in Hz.

    Returns:
        (int) number of frames.
    """
    return int(np.round(seconds * sample_rate / hop_length))


def frames_to_seconds(frames, hop_length, sample_rate):
    """
    Inverse of :func:`seconds_to_frames`.
    """
    return frames * hop_length / sample_rate


def spectrogram_db(audio_signal, ch=None):
    """
    Magnitude spectrogram of ``audio_signal`` in decibels, relative to its maximum.
    Takes the STFT if it is not there yet.

    Args:
        audio_signal (AudioSignal): signal to look at.
        ch (int, optional): Channel to use. If ``None`` (default), the magnitudes are
          averaged over channels.

    Returns:
        (:obj:`np.ndarray`) 2D array, ``(n_frequency_bins, n_frames)``.
    """
    import librosa

    if audio_signal.stft_data is None:
        audio_signal.stft()

    data = audio_signal.magnitude_spectrogram_data
    if ch is None:
        data = np.mean(data, axis=constants.STFT_CHAN_INDEX)
    else:
        data = data[..., ch]

    return librosa.amplitude_to_db(data, ref=np.max)


def visualize_spectrogram(audio_signal, ch=None, x_axis='time', y_axis='linear', **kwargs):
    """
    Wrapper around `librosa.display.specshow` for usage with AudioSignals.

    Args:
        audio_signal (AudioSignal): AudioSignal to plot
        ch (int, optional): Which channel to plot. Defaults to None, the average over channels.
        x_axis (str, optional): x_axis argument to librosa.display.specshow. Defaults to 'time'.
        y_axis (str, optional): y_axis argument to librosa.display.specshow. Defaults to 'linear'.
        kwargs: Additional keyword arguments to librosa.display.specshow.

    Returns:
        The ``QuadMesh`` drawn by specshow.
    """
    import librosa.display

    data = spectrogram_db(audio_signal, ch=ch)
    return librosa.display.specshow(
        data, x_axis=x_axis, y_axis=y_axis,
        sr=audio_signal.sample_rate,
        n_fft=audio_signal.stft_params.window_length,
        hop_length=audio_signal.stft_params.hop_length,
        **kwargs)


def visualize_beat_spectrum(beat_spectrum, hop_length, sample_rate, period=None, **kwargs):
    """
    Plots a beat spectrum against lag (in seconds), optionally marking the repeating period
    with a vertical line.

    Args:
        beat_spectrum (:obj:`np.ndarray`): 1D beat spectrum, index 0 is lag 0.
        hop_length (int): Hop between frames, in samples.
        sample_rate (int): Sample rate in Hz.
        period (int, optional): Repeating period in frames to mark.
        kwargs: Additional keyword arguments to ``plt.plot``.

    Returns:
        The ``Line2D`` of the beat spectrum.
    """
    import matplotlib.pyplot as plt

    lags = frames_to_seconds(np.arange(len(beat_spectrum)), hop_length, sample_rate)
    line, = plt.plot(lags, beat_spectrum, **kwargs)

    if period is not None:
        plt.axvline(frames_to_seconds(period, hop_length, sample_rate),
                    color='r', linestyle='--')

    plt.xlabel('Lag (s)')
    plt.title('Beat Spectrum')
    return line

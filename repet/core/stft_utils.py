"""
Short-time Fourier transform utilities. These are the leaves of the REPET pipeline:
a signal is cut into overlapping, windowed frames (:func:`frame`), each frame is
transformed (:func:`transform`), and the magnitude spectrogram is kept up to the
Nyquist bin (:func:`magnitude`). Going back, frames are inverse-transformed and
overlap-added (:func:`overlap_add`) and the padding added by the framing is removed.

All functions here operate on a single channel. See
:class:`repet.core.audio_signal.AudioSignal` for multichannel audio.
"""

import logging

import numpy as np
import scipy.fftpack as scifft
import scipy.signal

from . import constants

__all__ = ['default_window_length', 'get_window', 'num_frames', 'frame', 'transform',
           'magnitude', 'mirror_spectrum', 'overlap_add', 'stft', 'istft']


def default_window_length(sample_rate, window_length_param=constants.DEFAULT_WIN_LEN_PARAM):
    """
    Window length in samples: the next power of two above ``window_length_param``
    seconds (40ms by default, around where audio is stationary). A power of two
    keeps the FFT fast and, being even, gives an integer half-window hop for
    constant overlap-add.

    Args:
        sample_rate (int): Sample rate in Hz.
        window_length_param (float): Approximate window duration in seconds.

    Returns:
        (int) window length in samples.
    """
    return int(2 ** np.ceil(np.log2(window_length_param * sample_rate)))


def get_window(window_type, window_length):
    """
    Wrapper around ``scipy.signal.get_window``. Windows are periodic (``fftbins=True``),
    which is what gives constant overlap-add for the Hamming window at half-window hops.

    Args:
        window_type (str): Type of window to get (see constants.ALL_WINDOWS).
        window_length (int): Length of the window

    Returns:
        np.ndarray: Window returned by scipy.signal.get_window
    """
    return scipy.signal.get_window(window_type, window_length, fftbins=True)


def num_frames(signal_length, window_length, hop_length):
    """
    Number of frames needed to cover ``signal_length`` samples once the signal is
    padded with ``window_length - hop_length`` zeros at the start. A zero-length
    signal has zero frames.
    """
    if signal_length == 0:
        return 0
    overlap = window_length - hop_length
    return int(np.ceil((overlap + signal_length) / hop_length))


def frame(signal, window, hop_length):
    """
    Splits a 1D signal into overlapping windowed frames.

    The signal is zero padded with ``window_length - hop_length`` samples at the start and
    with enough samples at the end so that every frame is exactly ``window_length`` long.
    Consecutive frames overlap by ``window_length - hop_length`` samples.

    Args:
        signal (:obj:`np.ndarray`): 1D real-valued signal.
        window (:obj:`np.ndarray`): Window function, its length is the window length.
        hop_length (int): Number of samples between the starts of adjacent frames.

    Returns:
        (:obj:`np.ndarray`) windowed frames with shape ``(window_length, n_frames)``.
    """
    signal = np.asarray(signal, dtype=float)
    window_length = len(window)
    n_frames = num_frames(len(signal), window_length, hop_length)

    if n_frames == 0:
        return np.zeros((window_length, 0))

    before = window_length - hop_length
    after = n_frames * hop_length - len(signal)
    signal = np.pad(signal, (before, after), 'constant', constant_values=(0, 0))

    indices = (np.arange(window_length)[:, None] +
               hop_length * np.arange(n_frames)[None, :])
    return signal[indices] * window[:, None]


def transform(frames):
    """
    Fourier transform of each frame (column) of ``frames``. Keeps every bin, including
    the mirrored negative frequencies, so the result can be inverted directly.
    """
    return scifft.fft(frames, axis=0)


def magnitude(stft_data):
    """
    Magnitude spectrogram of a full complex STFT, keeping bins ``[0, window_length / 2]``
    (DC and Nyquist included, mirrored frequencies dropped).

    Args:
        stft_data (:obj:`np.ndarray`): complex STFT with all ``window_length`` bins along
          the first axis. Any trailing axes (e.g. channels) are kept.

    Returns:
        (:obj:`np.ndarray`) non-negative magnitudes with ``window_length // 2 + 1`` bins.
    """
    window_length = stft_data.shape[constants.STFT_VERT_INDEX]
    return np.abs(stft_data[:window_length // 2 + 1])


def mirror_spectrum(half_spectrum, window_length):
    """
    Builds a full ``window_length``-bin array from its non-negative frequency half
    (``window_length // 2 + 1`` bins), so that bin ``k`` and bin ``window_length - k`` hold
    the same value. Applied to a real mask, this keeps a masked STFT conjugate symmetric.
    """
    n_half = window_length // 2 + 1
    if half_spectrum.shape[0] != n_half:
        raise ValueError(
            f'Expected {n_half} frequency bins for window length {window_length}, '
            f'got {half_spectrum.shape[0]}!')
    mirrored = half_spectrum[1:window_length - n_half + 1][::-1]
    return np.concatenate([half_spectrum, mirrored], axis=0)


def overlap_add(stft_data, window, hop_length, signal_length):
    """
    Inverse of :func:`frame` + :func:`transform`: inverse-transforms every frame,
    overlap-adds them at ``hop_length`` spacing, normalizes by the overlap-added
    window and removes the padding introduced by :func:`frame`.

    Args:
        stft_data (:obj:`np.ndarray`): complex STFT of a single channel, shape
          ``(window_length, n_frames)``.
        window (:obj:`np.ndarray`): the window used for analysis.
        hop_length (int): hop used for analysis.
        signal_length (int): length of the original signal, in samples.

    Returns:
        (:obj:`np.ndarray`) real-valued signal with ``signal_length`` samples.
    """
    window_length, n_hops = stft_data.shape
    overlap = window_length - hop_length
    padded_length = n_hops * hop_length + overlap

    signal = np.zeros(padded_length)
    norm_window = np.zeros(padded_length)

    frames = np.real(scifft.ifft(stft_data, axis=0))

    for n in range(n_hops):
        start = n * hop_length
        end = start + window_length
        signal[start:end] += frames[:, n]
        norm_window[start:end] += window

    norm_window[norm_window == 0.0] = constants.EPSILON  # Prevent dividing by zero
    signal = signal / norm_window

    return signal[overlap:overlap + signal_length]


def stft(signal, window_length, hop_length, window_type=constants.WINDOW_DEFAULT):
    """
    Complex STFT of a 1D signal, with all ``window_length`` bins kept.

    Example:

    .. code-block:: python
        :linenos:

        sr = 16000
        x = np.sin(np.linspace(0, 300 * 2 * np.pi, 3 * sr))

        stft_data = repet.core.stft_utils.stft(x, 1024, 512)
        # stft_data has shape (1024, ceil((512 + 3 * sr) / 512))
        spectrogram = repet.core.stft_utils.magnitude(stft_data)
        # spectrogram has shape (513, ceil((512 + 3 * sr) / 512))

    Returns:
        (:obj:`np.ndarray`) complex array of shape ``(window_length, n_frames)``.
    """
    window = get_window(window_type, window_length)
    frames = frame(signal, window, hop_length)
    logging.debug(
        f'STFT: {len(signal)} samples -> {frames.shape[1]} frames '
        f'(window {window_length}, hop {hop_length})')
    return transform(frames)


def istft(stft_data, window_length, hop_length, signal_length,
          window_type=constants.WINDOW_DEFAULT):
    """
    Inverse of :func:`stft`. ``stft_data`` must have all ``window_length`` bins, the output
    is trimmed to ``signal_length`` samples.
    """
    window = get_window(window_type, window_length)
    return overlap_add(stft_data, window, hop_length, signal_length)

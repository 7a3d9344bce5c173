import logging
import numbers

import numpy as np
import scipy.fftpack as scifft

from .. import MaskSeparationBase, SeparationException
from ..base import InvalidPeriodRange, InvalidParameter
from ...core import constants, utils, stft_utils


class Repet(MaskSeparationBase):
    """Implements the original REpeating Pattern Extraction Technique algorithm
    using the beat spectrum.

    REPET is a simple method for separating a repeating background from a
    non-repeating foreground in an audio mixture. It assumes a single repeating
    period over the whole signal duration, and finds that period based on finding
    a peak in the beat spectrum. The period can also be provided exactly, or you
    can give ``Repet`` a guess of the min and max period. Once it has a period,
    it "overlays" spectrogram sections of length ``period`` to create a median
    model (the background).

    Only the active region of ``input_audio_signal`` is separated, so both estimates
    have the length of the selection.

    References:

    [1] Rafii, Zafar, and Bryan Pardo.
        "Repeating pattern extraction technique (REPET): A simple method for
        music/voice separation." IEEE transactions on audio, speech,
        and language processing 21.1 (2012): 73-84.

    Args:
        input_audio_signal (AudioSignal): Signal to separate.

        min_period (float, optional): minimum time to look for repeating period in
          terms of seconds. Defaults to 1 second.

        max_period (float, optional): maximum time to look for repeating period in
          terms of seconds. Defaults to 10 seconds. The period is also never longer
          than a third of the selection.

        period (float, optional): exact time that the repeating period is
          (in seconds). Cannot be combined with ``min_period`` or ``max_period``.

        high_pass_cutoff (float, optional): value (in Hz) at or below which every
          frequency bin goes to the background. Defaults to None (no cutoff).

        mask_type (str, optional): Mask type. Defaults to 'soft'.

        mask_threshold (float, optional): Masking threshold. Defaults to 0.5.

        hardness (float, optional): How close the soft mask is pushed to a binary
          mask. Defaults to 0 (soft mask untouched).

    Example:

    .. code-block:: python
        :linenos:

        import repet

        mixture = repet.AudioSignal('mix.wav')
        mixture.set_active_region(0, 10 * mixture.sample_rate)

        separator = repet.Repet(mixture, min_period=.5, max_period=4, hardness=.3)
        background, foreground = separator()

        print(separator.repeating_period_seconds)

    """

    def __init__(self, input_audio_signal, min_period=None, max_period=None,
                 period=None, high_pass_cutoff=None, mask_type=constants.SOFT_MASK,
                 mask_threshold=constants.DEFAULT_MASK_THRESHOLD,
                 hardness=constants.DEFAULT_HARDNESS):

        super().__init__(
            input_audio_signal=input_audio_signal,
            mask_type=mask_type,
            mask_threshold=mask_threshold,
            hardness=hardness)

        # Check input parameters
        if (min_period is not None or max_period is not None) and period is not None:
            raise SeparationException(
                'Cannot set both period and (min_period or max_period)!')

        self.min_period = constants.DEFAULT_MIN_PERIOD if min_period is None else min_period
        self.max_period = constants.DEFAULT_MAX_PERIOD if max_period is None else max_period
        self._check_positive(self.min_period, 'min_period')
        self._check_positive(self.max_period, 'max_period')
        if self.min_period >= self.max_period:
            raise InvalidParameter(
                f'min_period ({self.min_period}) must be smaller than '
                f'max_period ({self.max_period})!')

        self.period = period
        if period is not None:
            self._check_positive(period, 'period')
            if self._update_period(period) < 1:
                raise InvalidParameter(
                    f'period ({period} s) is shorter than one hop '
                    f'({self.stft_params.hop_length / self.sample_rate} s)!')

        if high_pass_cutoff is not None:
            self._check_positive(high_pass_cutoff, 'high_pass_cutoff')
        self.high_pass_cutoff = high_pass_cutoff

        self.magnitude_spectrogram = None
        self.repeating_period = None
        self.repeating_model = None
        self.beat_spectrum = None

        self.metadata.update({
            'min_period': self.min_period,
            'max_period': self.max_period,
            'period': period,
            'high_pass_cutoff': high_pass_cutoff,
        })

    def _preprocess_audio_signal(self):
        super()._preprocess_audio_signal()
        # everything below was computed from the previous signal
        self.magnitude_spectrogram = None
        self.beat_spectrum = None
        self.repeating_period = None
        self.repeating_model = None

    @staticmethod
    def _check_positive(value, name):
        if not isinstance(value, numbers.Real) or isinstance(value, bool) or not value > 0:
            raise InvalidParameter(f'{name} must be a positive number, got {value!r}!')

    def run(self):
        """
        Estimates the repeating period (unless one was given), builds the repeating
        model and makes the background and foreground masks, in that order, in
        :attr:`result_masks`.

        Returns:
            list: ``[background_mask, foreground_mask]``, of type :attr:`mask_type`.

        Raises:
            :class:`InvalidPeriodRange`: if the selection is too short for the period
              range (no period given).
        """
        if self.stft is None or self.stft.size == 0:
            raise SeparationException('There is no audio to separate!')

        self.magnitude_spectrogram = stft_utils.magnitude(self.stft)
        time_bins = self.magnitude_spectrogram.shape[constants.STFT_LEN_INDEX]

        self.repeating_period = self._calculate_repeating_period()

        self.repeating_model = self.compute_repeating_model(
            self.magnitude_spectrogram, self.repeating_period)
        tiled_model = self.tile_repeating_model(self.repeating_model, time_bins)

        background_mask = self.compute_soft_mask(self.magnitude_spectrogram, tiled_model)

        if self.high_pass_cutoff is not None:
            background_mask = self._apply_high_pass(background_mask)

        background_mask = self.shape_mask(background_mask)
        foreground_mask = background_mask.invert_mask()

        self.result_masks = [background_mask, foreground_mask]
        return self.result_masks

    def get_beat_spectrum(self):
        """
        Calculates and returns the beat spectrum for the audio signal associated
        with this object. The squared magnitudes are averaged over channels, so
        there is one beat spectrum for all the channels.

        Returns:
            beat_spectrum (np.array): beat spectrum for the audio file

        Example:

        .. code-block:: python
            :linenos:

            # Set up audio signal
            signal = repet.AudioSignal('path_to_file.wav')

            # Set up a Repet object
            separator = repet.Repet(signal)

            # I don't have to run repet to get a beat spectrum for signal
            beat_spec = separator.get_beat_spectrum()

        """
        if self.magnitude_spectrogram is None:
            self.magnitude_spectrogram = stft_utils.magnitude(self.stft)

        self.beat_spectrum = self.compute_beat_spectrum(
            np.mean(np.square(self.magnitude_spectrogram),
                    axis=constants.STFT_CHAN_INDEX)
        )
        return self.beat_spectrum

    def period_range_in_frames(self):
        """
        The period search range ``(min_period, max_period)`` converted from seconds to
        STFT frames.
        """
        return self._update_period(self.min_period), self._update_period(self.max_period)

    @property
    def repeating_period_seconds(self):
        """
        (float) :attr:`repeating_period` in seconds. ``None`` before :func:`run`.
        """
        if self.repeating_period is None:
            return None
        return utils.frames_to_seconds(
            self.repeating_period, self.stft_params.hop_length, self.sample_rate)

    def _calculate_repeating_period(self):
        self.beat_spectrum = self.get_beat_spectrum()
        time_bins = len(self.beat_spectrum)

        # user provided a period, so no calculations to do
        if self.period is not None:
            period = self._update_period(self.period)
            if period > time_bins // constants.MIN_REPETITIONS:
                logging.warning(
                    f'Period of {period} frames is longer than a third of the selection '
                    f'({time_bins} frames). The repeating model will be rough.')
            return period

        min_period, max_period = self.period_range_in_frames()
        period = self.find_repeating_period_simple(
            self.beat_spectrum, min_period, max_period)

        logging.info(
            f'Repeating period: {period} frames '
            f'({utils.frames_to_seconds(period, self.stft_params.hop_length, self.sample_rate):.3f} s)')

        return period

    @staticmethod
    def autocorrelation(data, axis=-1):
        """
        Unbiased autocorrelation of ``data`` along ``axis``, by the Wiener-Khinchin theorem:
        zero pad to twice the length, take the squared magnitude of the Fourier transform,
        transform back, keep the first half and divide lag ``i`` by the number of terms
        that went into it, ``n - i``.

        Args:
            data (:obj:`np.ndarray`): real valued array.
            axis (int): axis along which to compute the autocorrelation.

        Returns:
            (:obj:`np.ndarray`) autocorrelation, same shape as ``data``. Lag 0 is first.
        """
        data = np.asarray(data, dtype=float)
        n = data.shape[axis]

        if n == 0:
            return np.zeros_like(data)

        spectrum = scifft.fft(data, n=2 * n, axis=axis)
        autocorrelation = np.real(scifft.ifft(np.abs(spectrum) ** 2, axis=axis))
        autocorrelation = np.take(autocorrelation, np.arange(n), axis=axis)

        norm_shape = [1] * data.ndim
        norm_shape[axis] = n
        norm_factor = np.arange(n, 0, -1).reshape(norm_shape)

        return autocorrelation / norm_factor

    @staticmethod
    def compute_beat_spectrum(power_spectrogram):
        """ Computes the beat spectrum: the autocorrelation of every frequency row of a
        one-sided power spectrogram, averaged over frequencies and normalized so that
        lag 0 is 1.

        Args:
            power_spectrogram (:obj:`np.array`): 2D matrix ``(n_frequency_bins, n_frames)``
              containing the one-sided power spectrogram of an audio signal

        Returns:
            (:obj:`np.array`): array of length ``n_frames`` containing the beat spectrum.
              A silent spectrogram gives all zeros.

        See Also:
            J Foote's original derivation of the Beat Spectrum:
            Foote, Jonathan, and Shingo Uchihashi. "The beat spectrum: A new approach to rhythm analysis."
            Multimedia and Expo, 2001. ICME 2001. IEEE International Conference on. IEEE, 2001.
            (`See PDF here <http://rotorbrain.com/foote/papers/icme2001.pdf>`_)

        """
        autocorrelation_rows = Repet.autocorrelation(power_spectrogram, axis=1)

        # average over frequencies
        beat_spectrum = np.mean(autocorrelation_rows, axis=0)

        if beat_spectrum.size == 0 or beat_spectrum[0] <= 0:
            logging.warning('Beat spectrum of a silent spectrogram, leaving it unnormalized.')
            return beat_spectrum

        return beat_spectrum / beat_spectrum[0]

    @staticmethod
    def find_repeating_period_simple(beat_spectrum, min_period, max_period):
        """
        Computes the repeating period of the sound signal using the beat spectrum.
        This algorithm just looks for the max value for lags in
        ``[min_period + 1, min(max_period, len(beat_spectrum) // 3)]``, inclusive.
        Lag 0 is never a candidate, and there must be room for three periods in the
        beat spectrum. Ties go to the shortest lag.

        Args:
            beat_spectrum (:obj:`np.array`): input beat spectrum array
            min_period (int): minimum possible period value
            max_period (int): maximum possible period value

        Returns:
             period (int): The period of the sound signal in stft time bins

        Raises:
            :class:`InvalidPeriodRange`: if no lag is left to search.

        """
        min_period, max_period = int(min_period), int(max_period)
        max_period = min(max_period, len(beat_spectrum) // constants.MIN_REPETITIONS)

        # discard the first element of beat_spectrum (lag 0)
        candidates = beat_spectrum[1:][min_period:max_period]

        if len(candidates) == 0:
            raise InvalidPeriodRange(
                f'No repeating period to search for between {min_period + 1} and '
                f'{max_period} frames! The selection ({len(beat_spectrum)} frames) is too '
                f'short, select more audio or set the period by hand.')

        period = int(np.argmax(candidates)) + min_period + 1

        return period

    @staticmethod
    def compute_repeating_model(magnitude_spectrogram, period):
        """
        Builds the repeating model: the spectrogram is cut in segments of ``period``
        frames and the median is taken, per frequency bin and per offset in the
        period, across the segments. The last segment may be shorter. Offsets it does
        not reach are the median over the complete segments only.

        If ``period`` is as long as the spectrogram, the model is the spectrogram.

        Args:
            magnitude_spectrogram (:obj:`np.array`): ``(n_frequency_bins, n_frames)``
              or ``(n_frequency_bins, n_frames, n_channels)``.
            period (int): repeating period in frames.

        Returns:
            (:obj:`np.array`): ``(n_frequency_bins, period, ...)`` repeating model.
        """
        period = int(period)
        freq_bins, time_bins = magnitude_spectrogram.shape[:2]
        other_dims = magnitude_spectrogram.shape[2:]

        if period >= time_bins:
            return magnitude_spectrogram.copy()

        n_repetitions = int(np.ceil(time_bins / period))

        # Pad to make an integer number of repetitions. Pad with 'nan's to not affect the median.
        padded = np.full((freq_bins, n_repetitions * period) + other_dims, np.nan)
        padded[:, :time_bins] = magnitude_spectrogram

        segments = np.reshape(padded, (freq_bins, n_repetitions, period) + other_dims)

        return np.nanmedian(segments, axis=1)

    @staticmethod
    def tile_repeating_model(repeating_model, time_bins):
        """
        Repeats the repeating model along time and truncates it to ``time_bins`` frames.
        """
        period = repeating_model.shape[constants.STFT_LEN_INDEX]
        n_repetitions = int(np.ceil(time_bins / period))
        reps = (1, n_repetitions) + (1,) * (repeating_model.ndim - 2)
        return np.tile(repeating_model, reps)[:, :time_bins]

    @staticmethod
    def compute_soft_mask(magnitude_spectrogram, tiled_model):
        """
        Soft mask of the repeating part. The repeating energy in a bin can not be more
        than the energy observed there, so the mask is
        ``min(model, spectrogram) / spectrogram``, and 0 where the spectrogram is 0.

        Returns:
            (:obj:`np.array`): values in ``[0, 1]``, same shape as ``magnitude_spectrogram``.
        """
        repeating = np.minimum(tiled_model, magnitude_spectrogram)
        mask = np.zeros(magnitude_spectrogram.shape)
        np.divide(repeating, magnitude_spectrogram, out=mask,
                  where=magnitude_spectrogram > 0)
        return mask

    def _apply_high_pass(self, background_mask):
        window_length = self.stft_params.window_length
        n_bins = int(np.floor(self.high_pass_cutoff * window_length / self.sample_rate)) + 1
        background_mask = background_mask.copy()
        background_mask[:n_bins] = 1.0
        return background_mask

    def _update_period(self, period):
        return utils.seconds_to_frames(
            float(period), self.stft_params.hop_length, self.sample_rate)

import copy
import os.path
import warnings
import logging
from collections import namedtuple

import numpy as np
import scipy.io.wavfile as wav
from scipy.signal import check_COLA
import soundfile as sf
import librosa

from . import constants
from . import utils
from . import masks
from . import stft_utils

__all__ = ['AudioSignal', 'STFTParams', 'AudioSignalException', 'InvalidSelection']

STFTParams = namedtuple('STFTParams',
                        ['window_length', 'hop_length', 'window_type']
                        )
STFTParams.__new__.__defaults__ = (None,) * len(STFTParams._fields)
"""
STFTParams object is a container that holds STFT parameters - window_length,
hop_length, and window_type. Not all parameters need to be specified. Ones that
are not specified will be inferred by the AudioSignal parameters and the settings
in `repet.core.constants`: a periodic Hamming window whose length is the next
power of two above 40ms, and a hop of half a window.
"""


class AudioSignal(object):
    """

    **Overview**

    :class:`AudioSignal` is the entry and exit point of the REPET separation. It is a
    container for a waveform (stored as a 2D ``numpy`` array in :attr:`audio_data`, with shape
    ``(n_channels, n_samples)``), its sample rate, the sample range currently selected for
    analysis (the *active region*), and the complex STFT of that selection
    (:attr:`stft_data`, with shape ``(window_length, n_frames, n_channels)``).

    **Initialization**

    An :class:`AudioSignal` object can be loaded with exactly one of the following:

        1. A path to an input audio file (see :func:`load_audio_from_file` for details).
        2. A `numpy` array of 1D or 2D real-valued time-series audio data.
        3. A `numpy` array of 2D or 3D complex-valued time-frequency STFT data.

     .. code-block:: python
        :linenos:

        import numpy as np
        import repet

        sig_path = repet.AudioSignal('my/awesome/mixture.wav')

        aud_1d = np.sin(np.linspace(0.0, 1.0, 16000))
        sig_1d = repet.AudioSignal(audio_data_array=aud_1d, sample_rate=16000)

        # only look at the second half
        sig_1d.set_active_region(8000, 16000)
        stft = sig_1d.stft()

    The waveform itself is never modified by the analysis: selecting a range only changes what
    :attr:`audio_data` returns.

    Arguments:
        path_to_input_file (``str``): Path to an input file to load upon initialization. Audio
            gets loaded into :attr:`audio_data`.
        audio_data_array (:obj:`np.ndarray`): 1D or 2D numpy array containing a real-valued,
            time-series representation of the audio.
        stft (:obj:`np.ndarray`): 2D or 3D numpy array containing pre-computed complex-valued STFT
            data, with all ``window_length`` frequency bins.
        label (``str``): A label for this :class:`AudioSignal` object.
        sample_rate (``int``): Sampling rate of this :class:`AudioSignal` object.
        stft_params (:obj:`STFTParams`): STFT parameters. Missing values use the defaults.
        offset (``float``): Starting point of the section to be read (in seconds) if
            initializing from a file.
        duration (``float``): Length of the signal to read from the file (in seconds).

    """

    def __init__(self, path_to_input_file=None, audio_data_array=None, stft=None, label=None,
                 sample_rate=None, stft_params=None, offset=0, duration=None):

        self.path_to_input_file = path_to_input_file
        self._audio_data = None
        self.original_signal_length = None
        self._stft_data = None
        self._stft_signal_length = None
        self._sample_rate = None
        self._active_start = None
        self._active_end = None
        self.label = label

        # Assert that this object was only initialized in one way
        got_path = path_to_input_file is not None
        got_audio_array = audio_data_array is not None
        got_stft = stft is not None

        if sum([got_path, got_audio_array, got_stft]) > 1:
            raise AudioSignalException('Can only initialize AudioSignal object with one and only '
                                       'one of {path, audio, stft}!')

        if path_to_input_file is not None:
            self.load_audio_from_file(self.path_to_input_file, offset, duration)
        elif audio_data_array is not None:
            self.load_audio_from_array(audio_data_array, sample_rate)

        if self._sample_rate is None:
            self._sample_rate = constants.DEFAULT_SAMPLE_RATE \
                if sample_rate is None else sample_rate

        self.stft_data = stft  # complex spectrogram data
        self.stft_params = stft_params

    def __str__(self):
        dur = f'{self.signal_duration:0.3f}' if self.signal_duration else '[unknown]'
        return (
            f"{self.__class__.__name__} "
            f"({self.label if self.label else 'unlabeled'}): "
            f"{dur} sec @ "
            f"{self.path_to_input_file if self.path_to_input_file else 'path unknown'}, "
            f"{self.sample_rate if self.sample_rate else '[unknown]'} Hz, "
            f"{self.num_channels if self.num_channels else '[unknown]'} ch."
        )

    ##################################################
    #                 Properties
    ##################################################

    @property
    def signal_length(self):
        """
        ``int``
            Number of samples in the active region of :attr:`audio_data`.
        """
        if self.audio_data is None:
            return self.original_signal_length
        return self.audio_data.shape[constants.LEN_INDEX]

    @property
    def signal_duration(self):
        """
        ``float``
            Duration of the active region of :attr:`audio_data` in seconds.
        """
        if self.signal_length is None:
            return None
        return self.signal_length / self.sample_rate

    @property
    def num_channels(self):
        """
        ``int``
            Number of channels this :class:`AudioSignal` has.
            Defaults to returning number of channels in :attr:`audio_data`. If that is ``None``,
            returns number of channels in :attr:`stft_data`. If both are ``None`` then returns
            ``None``.
        """
        if self.audio_data is not None:
            return self.audio_data.shape[constants.CHAN_INDEX]
        if self.stft_data is not None:
            return self.stft_data.shape[constants.STFT_CHAN_INDEX]
        return None

    @property
    def is_mono(self):
        """
        ``bool``
            Whether or not this signal is mono (i.e., has exactly **one** channel).
        """
        return self.num_channels == 1

    @property
    def audio_data(self):
        """
        ``np.ndarray``
            Time-domain audio data with shape ``(n_channels, n_samples)``, restricted to the
            active region. ``None`` by default.

        Raises:
            :class:`AudioSignalException`
                If set incorrectly, will raise an error. Expects a real, finite-valued 1D or 2D
                ``numpy`` :obj:`np.ndarray`-typed array.

        Notes:
            * Setting this attribute resets the active region to the whole signal.

            * If :attr:`audio_data` is set with an improperly transposed array, it will
                automatically transpose it so that it is set the expected way.
        """
        if self._audio_data is None:
            return None

        start = 0
        end = self._audio_data.shape[constants.LEN_INDEX]

        if self._active_end is not None and self._active_end < end:
            end = self._active_end

        if self._active_start is not None and self._active_start > 0:
            start = self._active_start

        return self._audio_data[:, start:end]

    @audio_data.setter
    def audio_data(self, value):

        if value is None:
            self._audio_data = None
            return

        elif not isinstance(value, np.ndarray):
            raise AudioSignalException('Type of self.audio_data must be of type np.ndarray!')

        if not np.isfinite(value).all():
            raise AudioSignalException('Not all values of audio_data are finite!')

        if value.ndim > 1 and value.shape[constants.CHAN_INDEX] > value.shape[constants.LEN_INDEX]:
            value = value.T

        if value.ndim > 2:
            raise AudioSignalException('self.audio_data cannot have more than 2 dimensions!')

        if value.ndim < 2:
            value = np.expand_dims(value, axis=constants.CHAN_INDEX)

        self._audio_data = value

        self.set_active_region_to_default()

    @property
    def stft_data(self):
        """
        ``np.ndarray``
            Complex-valued STFT of the active region, with shape
            ``(window_length, n_frames, n_channels)``. All ``window_length`` frequency bins
            are kept so the STFT can be inverted directly; use
            :attr:`magnitude_spectrogram_data` for the non-negative frequencies.

        Raises:
            :class:`AudioSignalException`
                if set with an :obj:`np.ndarray` with one dimension or more than three dimensions.
        """

        return self._stft_data

    @stft_data.setter
    def stft_data(self, value):
        if value is None:
            self._stft_data = None
            return

        elif not isinstance(value, np.ndarray):
            raise AudioSignalException('Type of self.stft_data must be of type np.ndarray!')

        if value.ndim == 1:
            raise AudioSignalException('Cannot support arrays with less than 2 dimensions!')

        if value.ndim == 2:
            value = np.expand_dims(value, axis=constants.STFT_CHAN_INDEX)

        if value.ndim > 3:
            raise AudioSignalException('Cannot support arrays with more than 3 dimensions!')

        if not np.iscomplexobj(value):
            warnings.warn('Initializing STFT with data that is non-complex. '
                          'This might lead to weird results!')

        self._stft_data = value

    @property
    def stft_params(self):
        """
        ``STFTParams``
            STFT parameters are kept in this property. STFT parameters are a ``namedtuple``
            called ``STFTParams`` with the following signature:

            .. code-block:: python

                STFTParams(
                    window_length=2048,
                    hop_length=1024,
                    window_type='hamming'
                )

            The defaults are a periodic Hamming window of the next power of two above 40ms
            and a hop of half a window (constant overlap-add).

        Raises:
            ValueError: if not an ``STFTParams``, if the window length is odd, or if the window
              and hop do not satisfy constant overlap-add.
        """
        return self._stft_params

    @stft_params.setter
    def stft_params(self, value):
        if value and not isinstance(value, STFTParams):
            raise ValueError("stft_params must be of type STFTParams or None!")

        default_win_len = stft_utils.default_window_length(self.sample_rate)
        value = value._asdict() if value else STFTParams()._asdict()

        if value['window_length'] is None:
            value['window_length'] = default_win_len
        if value['hop_length'] is None:
            value['hop_length'] = value['window_length'] // 2
        if value['window_type'] is None:
            value['window_type'] = constants.WINDOW_DEFAULT

        params = STFTParams(**value)

        if params.window_length % 2:
            raise ValueError(f'Window length must be even, got {params.window_length}!')

        window = stft_utils.get_window(params.window_type, params.window_length)
        if not check_COLA(window, params.window_length,
                          params.window_length - params.hop_length):
            raise ValueError(f'{params} does not satisfy constant overlap-add!')

        self._stft_params = params

    @property
    def has_data(self):
        """
        ``bool``
            Returns ``False`` if :attr:`audio_data` and :attr:`stft_data` are empty. Else,
            returns ``True``.
        """
        has_audio_data = self.audio_data is not None and self.audio_data.size != 0
        has_stft_data = self.stft_data is not None and self.stft_data.size != 0
        return has_audio_data or has_stft_data

    @property
    def file_name(self):
        """
        ``str``
            The name of the file associated with this object. ``None`` if this
            :class:`AudioSignal` was not loaded from a file.
        """
        if self.path_to_input_file is not None:
            return os.path.basename(self.path_to_input_file)
        return None

    @property
    def sample_rate(self):
        """
        ``int``
            Sample rate associated with this object. Read-only.
        """
        return self._sample_rate

    @property
    def stft_length(self):
        """
        ``int``
            The length of :attr:`stft_data` along the time axis. In units of hops.

        Raises:
            :class:`AudioSignalException`: If ``self.stft_data`` is ``None``.
        """
        if self.stft_data is None:
            raise AudioSignalException('Cannot calculate stft_length until self.stft() is run')
        return self.stft_data.shape[constants.STFT_LEN_INDEX]

    @property
    def active_region(self):
        """
        ``tuple``
            ``(start, end)`` of the active region, 0-based and end-exclusive.
        """
        return self._active_start, self._active_end

    @property
    def active_region_is_default(self):
        """
        ``bool``
            ``True`` if active region is the full length of :attr:`audio_data`. ``False`` otherwise.
        """
        return self._active_start == 0 and self._active_end == self._signal_length

    @property
    def _signal_length(self):
        """
        ``int``
            This is the length of the full signal, not just the active region.

        """
        if self._audio_data is None:
            return None
        return self._audio_data.shape[constants.LEN_INDEX]

    @property
    def magnitude_spectrogram_data(self):
        """
        ``np.ndarray``
            Magnitude spectrogram of :attr:`stft_data`, keeping the bins from DC up to and
            including Nyquist: shape ``(window_length // 2 + 1, n_frames, n_channels)``.

        Raises:
            AudioSignalException: if :attr:`stft_data` is ``None``. Run :func:`stft` before
                accessing this.
        """
        if self.stft_data is None:
            raise AudioSignalException('Cannot calculate magnitude_spectrogram_data '
                                       'because self.stft_data is None')
        return stft_utils.magnitude(self.stft_data)

    @property
    def power_spectrogram_data(self):
        """
        ``np.ndarray``
            Element-wise square of :attr:`magnitude_spectrogram_data`.
        """
        return self.magnitude_spectrogram_data ** 2

    @property
    def log_magnitude_spectrogram_data(self):
        """
        ``np.ndarray``
            ``20 * log10(abs(stft))`` of :attr:`magnitude_spectrogram_data`, for display.
        """
        return 20 * np.log10(self.magnitude_spectrogram_data + 1e-8)

    ##################################################
    #                     I/O
    ##################################################

    def load_audio_from_file(self, input_file_path, offset=0, duration=None):
        """
        Loads an audio signal into memory from a file on disc, at its native sample rate and
        keeping all of its channels. Decoding is done by ``librosa``, so anything ``soundfile``
        or ``audioread`` understand (WAVE, MP3, ...) can be read.

        Args:
            input_file_path (str): Path to input file.
            offset (float,): The starting point of the section to be read (seconds).
            duration (float): Length of signal to load in seconds. Defaults to the full
                length of the signal.

        """
        if offset < 0:
            raise AudioSignalException('Parameter `offset` must be >= 0!')
        if duration is not None and duration < 0:
            raise AudioSignalException('Parameter `duration` must be >= 0!')

        try:
            # try reading headers with soundfile for speed
            file_length = sf.info(input_file_path).duration
        except RuntimeError:
            file_length = librosa.get_duration(path=input_file_path)

        if offset > file_length:
            raise AudioSignalException('offset is longer than signal!')

        if duration is not None and offset + duration >= file_length:
            warnings.warn('offset + duration are longer than the signal.'
                          ' Reading until end of signal...',
                          UserWarning)

        audio_input, self._sample_rate = librosa.load(input_file_path,
                                                      sr=None,
                                                      offset=offset,
                                                      duration=duration,
                                                      mono=False)

        self.audio_data = audio_input
        self.original_signal_length = self.signal_length
        self.path_to_input_file = input_file_path
        self.set_active_region_to_default()

        logging.info(f'Loaded {self}')

    def load_audio_from_array(self, signal, sample_rate=constants.DEFAULT_SAMPLE_RATE):
        """
        Loads an audio signal from a :obj:`np.ndarray`. :param:`sample_rate` is the sample
        of the signal.

        Notes:
            Only accepts float arrays and int arrays of depth 16-bits.

        Parameters:
            signal (:obj:`np.ndarray`): Array containing the audio signal sampled at
                :param:`sample_rate`.
            sample_rate (int): The sample rate of signal.
                Default is :ref:`constants.DEFAULT_SAMPLE_RATE` (44.1kHz)

        """
        if not isinstance(signal, np.ndarray):
            raise AudioSignalException('signal must be a np.ndarray!')

        self.path_to_input_file = None

        # Change from fixed point to floating point
        if not np.issubdtype(signal.dtype, np.floating):
            signal = signal.astype('float') / (np.iinfo(np.dtype('int16')).max + 1.0)

        self.audio_data = signal
        self.original_signal_length = self.signal_length
        self._sample_rate = sample_rate if sample_rate is not None \
            else constants.DEFAULT_SAMPLE_RATE

        if self._sample_rate <= 0:
            raise AudioSignalException(f'Sample rate must be positive, got {self._sample_rate}!')

        self.set_active_region_to_default()

    def write_audio_to_file(self, output_file_path, sample_rate=None):
        """
        Outputs the audio signal data in :attr:`audio_data` to a 16-bit WAVE file at
        :param:`output_file_path` with sample rate of :param:`sample_rate`.

        Parameters:
            output_file_path (str): Filename where output file will be saved.
            sample_rate (int): The sample rate to write the file at. Default is
                :attr:`sample_rate`.
        """
        if self.audio_data is None:
            raise AudioSignalException("Cannot write audio file because there is no audio data.")

        if sample_rate is None:
            sample_rate = self.sample_rate

        audio_output = np.copy(self.audio_data)

        # convert to fixed point again
        if not np.issubdtype(audio_output.dtype, np.integer):
            audio_output = np.clip(audio_output, -1.0, 1.0 - 2 ** -(constants.DEFAULT_BIT_DEPTH - 1))
            audio_output = np.multiply(
                audio_output,
                2 ** (constants.DEFAULT_BIT_DEPTH - 1)).astype('int16')
        wav.write(output_file_path, sample_rate, audio_output.T)

    ##################################################
    #                Active Region
    ##################################################

    def set_active_region(self, start, end):
        """
        Selects the samples ``[start, end)`` (0-based, end-exclusive) as the part of the signal
        that gets returned when you access :attr:`audio_data` and that :func:`stft` analyses.
        None of the data is discarded, it merely becomes inaccessible until the active region is
        set back to default.

        Setting the active region drops any STFT data, which belonged to the previous selection.

        Examples:
            >>> import repet
            >>> import numpy as np
            >>> n = 16000
            >>> sig = repet.AudioSignal(audio_data_array=np.random.rand(n), sample_rate=n)
            >>> sig.set_active_region(0, n // 2)
            >>> sig.signal_duration
            0.5

        Args:
            start (int): Beginning of active region (in samples). Cannot be less than 0.
            end (int): End of active region (in samples). Cannot be larger than the length of
              the whole signal, and must be larger than ``start``.

        Raises:
            :class:`InvalidSelection`: if there is no audio data, or if the region is empty or
              out of bounds. The region is never clamped.
        """
        if self._audio_data is None:
            raise InvalidSelection('Cannot select a region without audio data!')

        start, end = int(start), int(end)

        if start < 0 or end > self._signal_length:
            raise InvalidSelection(
                f'Selection [{start}, {end}) is out of bounds for a signal of '
                f'{self._signal_length} samples!')

        if start >= end:
            raise InvalidSelection(f'Selection [{start}, {end}) is empty!')

        self._active_start = start
        self._active_end = end
        self.stft_data = None

    def set_active_region_to_default(self):
        """
        Resets the active region of this :class:`AudioSignal` object to its default value of the
        entire :attr:`audio_data` array.
        """
        self._active_start = 0
        self._active_end = self._signal_length

    ##################################################
    #               STFT Utilities
    ##################################################

    def stft(self, overwrite=True):
        """
        Computes the Short Time Fourier Transform (STFT) of the active region of
        :attr:`audio_data`, channel by channel, with :attr:`stft_params`.

        Args:
            overwrite (bool): Overwrite :attr:`stft_data` with current calculation

        Returns:
            (:obj:`np.ndarray`) Calculated, complex-valued STFT from :attr:`audio_data`, 3D numpy
            array with shape `(window_length, n_frames, n_channels)`.

        """
        if self.audio_data is None or self.audio_data.size == 0:
            raise AudioSignalException(
                "No time domain signal (self.audio_data) to make STFT from!")

        window_length, hop_length, window_type = self.stft_params

        stft_data = np.stack([
            stft_utils.stft(chan, window_length, hop_length, window_type)
            for chan in self.get_channels()
        ], axis=constants.STFT_CHAN_INDEX)

        if overwrite:
            self.stft_data = stft_data
            self._stft_signal_length = self.signal_length

        return stft_data

    def istft(self, overwrite=True, truncate_to_length=None):
        """ Computes and returns the inverse Short Time Fourier Transform (iSTFT) of
        :attr:`stft_data`, channel by channel, by overlap-add.

        Args:
            overwrite (bool): Overwrite :attr:`audio_data` with current calculation
            truncate_to_length (int): truncate resultant signal to specified length. Defaults
              to the length of the selection the STFT was computed from.

        Returns:
            (:obj:`np.ndarray`) Calculated, real-valued iSTFT from :attr:`stft_data`, 2D numpy array
            with shape `(n_channels, n_samples)`.

        """
        if self.stft_data is None or self.stft_data.size == 0:
            raise AudioSignalException('Cannot do inverse STFT without self.stft_data!')

        window_length, hop_length, window_type = self.stft_params

        if self.stft_data.shape[constants.STFT_VERT_INDEX] != window_length:
            raise AudioSignalException(
                f'stft_data has {self.stft_data.shape[constants.STFT_VERT_INDEX]} frequency '
                f'bins, expected window_length = {window_length}!')

        if truncate_to_length is None:
            truncate_to_length = self._stft_signal_length
        if truncate_to_length is None:
            # as long as the frames can hold, minus the padding
            truncate_to_length = self.stft_length * hop_length - (window_length - hop_length)

        calculated_signal = np.array([
            stft_utils.istft(stft, window_length, hop_length, truncate_to_length, window_type)
            for stft in self.get_stft_channels()
        ])

        if overwrite or self.audio_data is None:
            self.audio_data = calculated_signal

        return calculated_signal

    def apply_mask(self, mask, overwrite=False):
        """
        Applies the input mask to the STFT in this :class:`AudioSignal` object. The mask covers
        the non-negative frequencies (``window_length // 2 + 1`` bins); it is mirrored onto the
        negative frequencies so the masked STFT stays conjugate symmetric and inverts to a real
        signal.

        Args:
            mask (:obj:`MaskBase`-derived object): A ``MaskBase``-derived object
                containing a mask.
            overwrite (bool): If ``True``, this will alter ``stft_data`` in self.
                If ``False``, this function will create a new ``AudioSignal`` object
                with the mask applied.

        Returns:
            A new :class:`AudioSignal`` object with the input mask applied to the STFT,
            iff ``overwrite`` is False.

        """
        if not isinstance(mask, masks.MaskBase):
            raise AudioSignalException(f'Expected MaskBase-derived object, given {type(mask)}')

        if self.stft_data is None:
            raise AudioSignalException('There is no STFT data to apply a mask to!')

        window_length = self.stft_data.shape[constants.STFT_VERT_INDEX]
        expected_shape = (window_length // 2 + 1,) + self.stft_data.shape[1:]

        if mask.shape != expected_shape:
            raise AudioSignalException(
                'Input mask and self.stft_data do not match! mask:'
                f' {mask.shape}, expected: {expected_shape}'
            )

        full_mask = stft_utils.mirror_spectrum(mask.mask.astype(float), window_length)
        masked_stft = self.stft_data * full_mask

        if overwrite:
            self.stft_data = masked_stft
        else:
            return self.make_copy_with_stft_data(masked_stft)

    ##################################################
    #                   Utilities
    ##################################################

    def make_copy_with_audio_data(self, audio_data):
        """ Makes a copy of this :class:`AudioSignal` object with :attr:`audio_data` initialized to
        the input :param:`audio_data` numpy array. The :attr:`stft_data` of the new
        :class:`AudioSignal` object is ``None``.
        """
        new_signal = copy.deepcopy(self)
        new_signal.audio_data = audio_data
        new_signal.original_signal_length = new_signal.signal_length
        new_signal.stft_data = None
        new_signal._stft_signal_length = None
        return new_signal

    def make_copy_with_stft_data(self, stft_data):
        """ Makes a copy of this :class:`AudioSignal` object with :attr:`stft_data` initialized to
        the input :param:`stft_data` numpy array. The :attr:`audio_data` of the new
        :class:`AudioSignal` object is ``None``, call :func:`istft` to fill it.
        """
        new_signal = copy.deepcopy(self)
        new_signal.stft_data = stft_data
        new_signal.original_signal_length = self.signal_length
        new_signal.audio_data = None
        return new_signal

    def _verify_get_channel(self, n):
        if n >= self.num_channels:
            raise AudioSignalException(
                f'Cannot get channel {n} when this object only has {self.num_channels}'
                ' channels! (0-based)'
            )

        if n < 0:
            raise AudioSignalException(
                f'Cannot get channel {n}. This will cause unexpected results.'
            )

    def get_channel(self, n):
        """Gets audio data of n-th channel from :attr:`audio_data` as a 1D :obj:`np.ndarray`
        of shape ``(n_samples,)``.

        Raises:
            :class:`AudioSignalException`: If not ``0 <= n < self.num_channels``.
        """
        self._verify_get_channel(n)

        return utils._get_axis(self.audio_data, constants.CHAN_INDEX, n)

    def get_channels(self):
        """Generator that will loop through channels of :attr:`audio_data`."""
        for i in range(self.num_channels):
            yield self.get_channel(i)

    def get_stft_channel(self, n):
        """Returns STFT data of n-th channel from :attr:`stft_data` as a 2D ``np.ndarray``.

        Raises:
            :class:`AudioSignalException`: If not ``0 <= n < self.num_channels``.
        """
        if self.stft_data is None:
            raise AudioSignalException('Cannot get STFT data before STFT is calculated!')

        self._verify_get_channel(n)

        return utils._get_axis(self.stft_data, constants.STFT_CHAN_INDEX, n)

    def get_stft_channels(self):
        """Generator that will loop through channels of :attr:`stft_data`."""
        for i in range(self.num_channels):
            yield self.get_stft_channel(i)

    def add(self, other):
        """Adds two audio signal objects.

        This does element-wise addition on the :attr:`audio_data` array.

        Raises:
            AudioSignalException: If ``self.sample_rate != other.sample_rate``,
                ``self.num_channels != other.num_channels``, or the lengths differ.

        Returns:
            (:class:`AudioSignal`): New :class:`AudioSignal` object with the sum of
            ``self`` and ``other``.
        """
        if isinstance(other, int):
            # this is so that sum(list of audio_signals) works.
            return self

        self._verify_audio_arithmetic(other)
        return self.make_copy_with_audio_data(self.audio_data + other.audio_data)

    def subtract(self, other):
        """Subtracts two audio signal objects, element-wise on :attr:`audio_data`."""
        self._verify_audio_arithmetic(other)
        return self.make_copy_with_audio_data(self.audio_data - other.audio_data)

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def _verify_audio_arithmetic(self, other):
        if self.num_channels != other.num_channels:
            raise AudioSignalException('Cannot do operation with two signals that have '
                                       'a different number of channels!')

        if self.sample_rate != other.sample_rate:
            raise AudioSignalException('Cannot do operation with two signals that have '
                                       'different sample rates!')

        if self.signal_length != other.signal_length:
            raise AudioSignalException('Cannot do arithmetic with signals of different length!')

    def __len__(self):
        return self.signal_length

    def __eq__(self, other):
        for k, v in list(self.__dict__.items()):
            if isinstance(v, np.ndarray):
                if not np.array_equal(v, other.__dict__[k]):
                    return False
            elif v != other.__dict__[k]:
                return False
        return True

    def __ne__(self, other):
        return not self == other


class AudioSignalException(Exception):
    """
    Exception class for :class:`AudioSignal`.
    """
    pass


class InvalidSelection(AudioSignalException):
    """
    Raised when a selected sample range is empty or out of the bounds of the signal.
    """
    pass

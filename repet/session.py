"""
Interactive layer on top of :class:`repet.Repet`.

:class:`RepetSession` owns a loaded signal and the state of one analysis: the
selection, the period, hardness and threshold, and caches for every stage of the
pipeline. Changing a parameter only recomputes what depends on it: hardness and
threshold redo the masks and the resynthesis, the period also redoes the repeating
model, and a new selection redoes everything.

:class:`SelectionStateMachine` models the mouse interaction of a waveform display
(selecting, dragging the edges of a selection, playing) as explicit states. It
talks to a session only through :func:`RepetSession.select` and
:func:`RepetSession.clear_selection`, and to the display through listeners.

.. code-block:: python
    :linenos:

    import repet

    session = repet.RepetSession(repet.AudioSignal('mix.wav'))
    session.select(0, 441000)
    session.analyze()

    session.set_hardness(.5)
    background, foreground = session.separate()
"""

import copy
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Tuple

from .core import AudioSignal, InvalidSelection, constants, utils, stft_utils
from .separation import Repet, InvalidParameter


class RepetSession(object):
    """
    Caching front end to REPET for interactive use.

    Args:
        audio_signal (AudioSignal): Signal to work on. It is copied, the session never
          alters the caller's signal.
        min_period (float): shortest repeating period searched for, in seconds.
        max_period (float): longest repeating period searched for, in seconds.

    Raises:
        ValueError: if ``audio_signal`` is not an :class:`AudioSignal` with audio data.
        :class:`InvalidParameter`: if the period range is invalid.
    """

    def __init__(self, audio_signal, min_period=constants.DEFAULT_MIN_PERIOD,
                 max_period=constants.DEFAULT_MAX_PERIOD):
        if not isinstance(audio_signal, AudioSignal) or audio_signal.audio_data is None:
            raise ValueError('audio_signal must be an AudioSignal with audio data!')

        self._audio_signal = copy.deepcopy(audio_signal)
        self._audio_signal.set_active_region_to_default()
        self._audio_signal.stft_data = None

        self.min_period = min_period
        self.max_period = max_period

        self._selection = None
        self._period = None
        self._hardness = constants.DEFAULT_HARDNESS
        self._threshold = constants.DEFAULT_MASK_THRESHOLD

        self._invalidate_selection()

    ##################################################
    #                 Properties
    ##################################################

    @property
    def audio_signal(self):
        """
        (AudioSignal) The session's copy of the signal, active region set to the selection.
        """
        return self._audio_signal

    @property
    def selection(self):
        """
        (tuple) ``(start, end)`` of the current selection in samples, 0-based and
        end-exclusive. ``None`` if the whole signal is used.
        """
        return self._selection

    @property
    def hardness(self):
        """(float) Current masking hardness."""
        return self._hardness

    @property
    def threshold(self):
        """(float) Current masking threshold."""
        return self._threshold

    @property
    def period(self):
        """
        (float) Period set by hand with :func:`set_period`, in seconds. ``None`` if the
        period is estimated.
        """
        return self._period

    @property
    def hop_length(self):
        return self._audio_signal.stft_params.hop_length

    @property
    def sample_rate(self):
        return self._audio_signal.sample_rate

    @property
    def estimated_period(self):
        """
        (int) Period estimated by :func:`analyze`, in frames, ``None`` before that.
        """
        return self._estimated_period

    @property
    def period_frames(self):
        """
        (int) The period used for separation, in frames: the one set by hand if there
        is one, otherwise the estimated one (``None`` if :func:`analyze` was not run).
        """
        if self._period is not None:
            return utils.seconds_to_frames(self._period, self.hop_length, self.sample_rate)
        return self._estimated_period

    ##################################################
    #                 Selection
    ##################################################

    def select(self, start, end):
        """
        Selects the samples ``[start, end)`` for analysis. Selecting the current
        selection again keeps every cache.

        Raises:
            :class:`InvalidSelection`: if the range is empty or out of bounds. The
              previous selection is kept.
        """
        if self._selection == (int(start), int(end)):
            logging.debug(f'Selection {self._selection} unchanged, keeping caches.')
            return

        self._audio_signal.set_active_region(start, end)
        self._selection = (int(start), int(end))
        self._invalidate_selection()

        logging.info(f'Selected samples [{start}, {end}) '
                     f'({self._audio_signal.signal_duration:0.3f} s)')

    def clear_selection(self):
        """
        Goes back to working on the whole signal.
        """
        if self._selection is None:
            return

        self._audio_signal.set_active_region_to_default()
        self._selection = None
        self._invalidate_selection()

    ##################################################
    #                 Parameters
    ##################################################

    def set_period(self, seconds):
        """
        Sets the repeating period by hand, in seconds. ``None`` goes back to the
        estimated period.

        Raises:
            :class:`InvalidParameter`: if ``seconds`` is not positive or is shorter
              than one hop.
        """
        if seconds is not None:
            Repet._check_positive(seconds, 'period')
            if utils.seconds_to_frames(seconds, self.hop_length, self.sample_rate) < 1:
                raise InvalidParameter(f'period ({seconds} s) is shorter than one hop!')

        old_period = self.period_frames
        self._period = seconds

        if self.period_frames != old_period:
            self._invalidate_masks()

    def set_hardness(self, hardness):
        """
        Sets the masking hardness, in ``[0, 1]``.

        Raises:
            :class:`InvalidParameter`: if outside ``[0, 1]``.
        """
        hardness = Repet._validate_unit_interval(hardness, 'hardness')
        if hardness != self._hardness:
            self._hardness = hardness
            self._estimates = None

    def set_threshold(self, threshold):
        """
        Sets the masking threshold, in ``[0, 1]``.

        Raises:
            :class:`InvalidParameter`: if outside ``[0, 1]``.
        """
        threshold = Repet._validate_unit_interval(threshold, 'threshold')
        if threshold != self._threshold:
            self._threshold = threshold
            self._estimates = None

    ##################################################
    #                 Pipeline
    ##################################################

    def analyze(self):
        """
        Computes (or fetches from the cache) the spectrogram and the beat spectrum of
        the selection and estimates the repeating period.

        Returns:
            (int) the estimated period, in frames.

        Raises:
            :class:`InvalidPeriodRange`: if the selection is too short for the period
              range. :func:`set_period` can still be used to separate it.
        """
        if self._estimated_period is not None:
            logging.debug('Using cached period estimate.')
            return self._estimated_period

        beat_spectrum = self._get_beat_spectrum()
        min_period, max_period = self._separator.period_range_in_frames()

        self._estimated_period = Repet.find_repeating_period_simple(
            beat_spectrum, min_period, max_period)

        logging.info(
            f'Estimated period: {self._estimated_period} frames '
            f'({utils.frames_to_seconds(self._estimated_period, self.hop_length, self.sample_rate):0.3f} s)')

        return self._estimated_period

    def separate(self):
        """
        Separates the selection into background and foreground with the current
        period, hardness and threshold. Estimates the period first if needed.

        Returns:
            (tuple) ``(background, foreground)`` :class:`AudioSignal` objects, with the
            length of the selection.
        """
        if self._estimates is not None:
            logging.debug('Using cached separation.')
            return self._estimates

        if self._period is None:
            self.analyze()

        separator = self._separator
        soft_mask = self._get_soft_mask()

        separator.hardness = self._hardness
        separator.mask_threshold = self._threshold

        background_mask = separator.shape_mask(soft_mask)
        separator.result_masks = [background_mask, background_mask.invert_mask()]

        background, foreground = separator.make_audio_signals()
        background.label = 'background'
        foreground.label = 'foreground'

        self._estimates = (background, foreground)
        return self._estimates

    def display_data(self):
        """
        What a display needs to draw the current state. Nothing here feeds back into
        the separation.

        Returns:
            dict: ``spectrogram_db`` (channel averaged dB spectrogram of the selection),
            ``beat_spectrum``, ``period`` (frames, or ``None`` when unknown),
            ``hop_length``, ``sample_rate`` and ``selection``.
        """
        return {
            'spectrogram_db': utils.spectrogram_db(self._separator.audio_signal),
            'beat_spectrum': self._get_beat_spectrum(),
            'period': self.period_frames,
            'hop_length': self.hop_length,
            'sample_rate': self.sample_rate,
            'selection': self._selection,
        }

    ##################################################
    #                 Caches
    ##################################################

    def _make_separator(self):
        return Repet(self._audio_signal, min_period=self.min_period,
                     max_period=self.max_period, hardness=self._hardness,
                     mask_threshold=self._threshold)

    def _invalidate_selection(self):
        self._separator = self._make_separator()
        self._beat_spectrum = None
        self._estimated_period = None
        self._models = {}
        self._invalidate_masks()

    def _invalidate_masks(self):
        self._soft_mask = None
        self._estimates = None

    def _get_beat_spectrum(self):
        if self._beat_spectrum is None:
            self._beat_spectrum = self._separator.get_beat_spectrum()
        return self._beat_spectrum

    def _get_repeating_model(self, period):
        if period not in self._models:
            self._models[period] = Repet.compute_repeating_model(
                self._separator.magnitude_spectrogram, period)
        else:
            logging.debug(f'Using cached repeating model for period {period}.')
        return self._models[period]

    def _get_soft_mask(self):
        if self._soft_mask is None:
            separator = self._separator
            period = self.period_frames
            if separator.magnitude_spectrogram is None:
                separator.magnitude_spectrogram = stft_utils.magnitude(separator.stft)
            spectrogram = separator.magnitude_spectrogram
            time_bins = spectrogram.shape[constants.STFT_LEN_INDEX]

            model = self._get_repeating_model(period)
            separator.repeating_period = period
            separator.repeating_model = model

            self._soft_mask = Repet.compute_soft_mask(
                spectrogram, Repet.tile_repeating_model(model, time_bins))
        return self._soft_mask


class InteractionState(Enum):
    """States of the mouse interaction on a waveform display."""
    IDLE = auto()
    SELECTING = auto()
    DRAGGING = auto()
    PLAYING = auto()


@dataclass
class StateEvent:
    """Sent to listeners of a :class:`SelectionStateMachine` on every change."""
    state: InteractionState
    selection: Optional[Tuple[int, int]] = None


StateListener = Callable[[StateEvent], None]


class SelectionStateMachine(object):
    """
    Explicit state machine for selecting audio with the mouse.

    * ``press(sample)`` starts a new selection at ``sample`` (``IDLE -> SELECTING``),
      or, with ``edge='start'`` or ``edge='end'``, grabs that edge of the current
      selection (``IDLE -> DRAGGING``).
    * ``drag(sample)`` moves the free end of the selection.
    * ``release(sample=None)`` ends it (``-> IDLE``). A selection that ends where it
      started is a click, and clears the selection.
    * ``play()`` / ``stop()`` go from ``IDLE`` to ``PLAYING`` and back.

    Any other transition raises :class:`InvalidTransition`. When bound to a
    :class:`RepetSession`, finished selections are handed to
    :func:`RepetSession.select`.

    Args:
        session (RepetSession, optional): session to forward selections to.
    """

    EDGES = ('start', 'end')

    def __init__(self, session=None):
        self.session = session
        self._state = InteractionState.IDLE
        self._anchor = None
        self._selection = None
        self._listeners = {}
        self._next_token = 0

    @property
    def state(self):
        """(InteractionState) current state."""
        return self._state

    @property
    def selection(self):
        """(tuple) ``(start, end)`` in samples, end exclusive, or ``None``."""
        return self._selection

    def add_listener(self, callback):
        """
        Registers ``callback``, called with a :class:`StateEvent` on every change.

        Returns:
            (int) token for :func:`remove_listener`.
        """
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = callback
        return token

    def remove_listener(self, token):
        """Unregisters a listener by token."""
        self._listeners.pop(token, None)

    def _emit(self):
        event = StateEvent(state=self._state, selection=self._selection)
        for listener in list(self._listeners.values()):
            listener(event)

    def _require(self, action, *states):
        if self._state not in states:
            raise InvalidTransition(
                f'Cannot {action} while {self._state.name}! '
                f"Expected one of: {', '.join(s.name for s in states)}.")

    def press(self, sample, edge=None):
        self._require('press', InteractionState.IDLE)
        sample = int(sample)

        if edge is None:
            self._anchor = sample
            self._selection = (sample, sample)
            self._state = InteractionState.SELECTING
        elif edge in self.EDGES:
            if self._selection is None:
                raise InvalidTransition('There is no selection to drag!')
            start, end = self._selection
            # the edge that is not grabbed stays put
            self._anchor = end if edge == 'start' else start
            self._state = InteractionState.DRAGGING
        else:
            raise ValueError(f'edge must be one of {self.EDGES} or None, got {edge!r}!')

        self._emit()

    def drag(self, sample):
        self._require('drag', InteractionState.SELECTING, InteractionState.DRAGGING)
        sample = int(sample)
        self._selection = (min(self._anchor, sample), max(self._anchor, sample))
        self._emit()

    def release(self, sample=None):
        self._require('release', InteractionState.SELECTING, InteractionState.DRAGGING)
        previous = self._selection
        if sample is not None:
            sample = int(sample)
            self._selection = (min(self._anchor, sample), max(self._anchor, sample))

        start, end = self._selection
        if start == end:
            self._selection = None
            if self.session is not None:
                self.session.clear_selection()
        elif self.session is not None:
            try:
                self.session.select(start, end)
            except InvalidSelection:
                # the gesture goes on from where it was before the refused release
                self._selection = previous
                self._emit()
                raise

        self._anchor = None
        self._state = InteractionState.IDLE
        self._emit()

    def play(self):
        self._require('play', InteractionState.IDLE)
        self._state = InteractionState.PLAYING
        self._emit()

    def stop(self):
        self._require('stop', InteractionState.PLAYING)
        self._state = InteractionState.IDLE
        self._emit()


class InvalidTransition(Exception):
    """
    Raised by :class:`SelectionStateMachine` for an action that is not allowed in the
    current state.
    """
    pass

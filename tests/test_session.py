import logging

import pytest
import numpy as np

import repet
from repet import (
    RepetSession,
    SelectionStateMachine,
    InteractionState,
    InvalidTransition,
    InvalidSelection,
    InvalidPeriodRange,
    InvalidParameter,
)
from repet.session import StateEvent

sr = 16000
stft_tol = 1e-8


@pytest.fixture
def session(music_like_mix):
    return RepetSession(music_like_mix, min_period=.5, max_period=1.5)


def test_session_matches_repet(session, music_like_mix):
    session.select(sr // 2, 5 * sr)
    session.set_hardness(.4)
    session.set_threshold(.3)
    background, foreground = session.separate()

    music_like_mix.set_active_region(sr // 2, 5 * sr)
    separator = repet.Repet(music_like_mix, min_period=.5, max_period=1.5,
                            hardness=.4, mask_threshold=.3)
    expected = separator()

    assert session.estimated_period == separator.repeating_period
    assert np.array_equal(background.audio_data, expected[0].audio_data)
    assert np.array_equal(foreground.audio_data, expected[1].audio_data)
    assert background.label == 'background'
    assert foreground.label == 'foreground'

    selected = music_like_mix.audio_data
    assert np.allclose((background + foreground).audio_data, selected, atol=stft_tol)


def test_session_does_not_touch_caller(music_like_mix):
    music_like_mix.set_active_region(0, sr)
    session = RepetSession(music_like_mix)

    assert session.selection is None
    assert session.audio_signal.signal_length == music_like_mix._signal_length
    assert music_like_mix.active_region == (0, sr)

    pytest.raises(ValueError, RepetSession, np.zeros(100))
    pytest.raises(ValueError, RepetSession, repet.AudioSignal())
    pytest.raises(InvalidParameter, RepetSession, music_like_mix, min_period=2, max_period=1)


def test_session_analyze(session):
    assert session.estimated_period is None
    assert session.period_frames is None

    period = session.analyze()
    assert 16 < period <= 47
    assert session.estimated_period == period
    assert session.period_frames == period

    # cached
    assert session.analyze() == period


def test_session_caching(session, caplog):
    first = session.separate()
    separator = session._separator

    with caplog.at_level(logging.DEBUG):
        assert session.separate() is first
    assert 'cached separation' in caplog.text

    # hardness only redoes the masks
    session.set_hardness(.5)
    second = session.separate()
    assert second is not first
    assert session._separator is separator
    assert not np.array_equal(first[0].audio_data, second[0].audio_data)

    # setting the same value again keeps the cache
    session.set_hardness(.5)
    assert session.separate() is second

    # the period also redoes the repeating model, but keeps the spectrogram
    beat_spectrum = session._beat_spectrum
    session.set_period(1.0)
    third = session.separate()
    assert session._beat_spectrum is beat_spectrum
    assert session._separator is separator
    assert session.period_frames == 31
    assert set(session._models) == {session.estimated_period, 31}

    # going back to the estimated period reuses its model
    session.set_period(None)
    with caplog.at_level(logging.DEBUG):
        fourth = session.separate()
    assert 'cached repeating model' in caplog.text
    assert np.array_equal(fourth[0].audio_data, second[0].audio_data)
    assert not np.array_equal(third[0].audio_data, fourth[0].audio_data)

    # a new selection redoes everything
    session.select(0, 4 * sr)
    assert session._separator is not separator
    assert session.estimated_period is None
    assert session._models == {}
    background, _ = session.separate()
    assert background.signal_length == 4 * sr

    # so does clearing it
    session.clear_selection()
    assert session.selection is None
    background, _ = session.separate()
    assert background.signal_length == session.audio_signal.signal_length


def test_session_same_selection_keeps_cache(session):
    session.select(0, 5 * sr)
    estimates = session.separate()
    session.select(0, 5 * sr)
    assert session.separate() is estimates


def test_session_bad_input(session):
    session.select(0, 5 * sr)

    for region in [(0, 0), (-5, 100), (100, 50), (0, 100 * sr)]:
        pytest.raises(InvalidSelection, session.select, *region)
    assert session.selection == (0, 5 * sr)

    for bad in [-.1, 1.1, 'soft', None]:
        pytest.raises(InvalidParameter, session.set_hardness, bad)
        pytest.raises(InvalidParameter, session.set_threshold, bad)
    assert session.hardness == repet.constants.DEFAULT_HARDNESS
    assert session.threshold == repet.constants.DEFAULT_MASK_THRESHOLD

    pytest.raises(InvalidParameter, session.set_period, 0)
    pytest.raises(InvalidParameter, session.set_period, -1)
    pytest.raises(InvalidParameter, session.set_period, .001)
    assert session.period is None


def test_session_short_selection(session):
    session.select(0, sr)
    pytest.raises(InvalidPeriodRange, session.analyze)
    pytest.raises(InvalidPeriodRange, session.separate)

    # a period set by hand does not need the estimate
    session.set_period(.25)
    background, foreground = session.separate()
    assert background.signal_length == sr


def test_session_display_data(session):
    session.select(0, 3 * sr)
    data = session.display_data()

    assert data['period'] is None
    assert data['selection'] == (0, 3 * sr)
    assert data['hop_length'] == 512
    assert data['sample_rate'] == sr

    n_bins, n_frames = data['spectrogram_db'].shape
    assert n_bins == 513
    assert data['beat_spectrum'].shape == (n_frames,)
    assert data['beat_spectrum'][0] == 1

    period = session.analyze()
    assert session.display_data()['period'] == period


def test_state_machine_selecting(session):
    machine = SelectionStateMachine(session)
    events = []
    token = machine.add_listener(events.append)

    assert machine.state == InteractionState.IDLE
    machine.press(4 * sr)
    assert machine.state == InteractionState.SELECTING
    machine.drag(2 * sr)
    assert machine.selection == (2 * sr, 4 * sr)
    machine.drag(sr)
    machine.release()

    assert machine.state == InteractionState.IDLE
    assert machine.selection == (sr, 4 * sr)
    assert session.selection == (sr, 4 * sr)

    assert [e.state for e in events] == [
        InteractionState.SELECTING,
        InteractionState.SELECTING,
        InteractionState.SELECTING,
        InteractionState.IDLE,
    ]
    assert events[-1] == StateEvent(InteractionState.IDLE, (sr, 4 * sr))

    machine.remove_listener(token)
    machine.play()
    assert len(events) == 4


def test_state_machine_dragging(session):
    machine = SelectionStateMachine(session)
    machine.press(sr)
    machine.release(3 * sr)
    assert session.selection == (sr, 3 * sr)

    # grab the end and move it
    machine.press(3 * sr, edge='end')
    assert machine.state == InteractionState.DRAGGING
    machine.drag(5 * sr)
    machine.release()
    assert session.selection == (sr, 5 * sr)

    # grab the start and move it past the end
    machine.press(sr, edge='start')
    machine.release(5 * sr + 100)
    assert session.selection == (5 * sr, 5 * sr + 100)

    pytest.raises(ValueError, machine.press, 0, edge='middle')


def test_state_machine_click_clears(session):
    machine = SelectionStateMachine(session)
    machine.press(sr)
    machine.release(2 * sr)
    assert session.selection == (sr, 2 * sr)

    machine.press(sr // 2)
    machine.release()
    assert machine.selection is None
    assert session.selection is None

    # can not drag a selection that is not there
    pytest.raises(InvalidTransition, machine.press, 0, edge='start')


def test_state_machine_invalid_transitions():
    machine = SelectionStateMachine()

    pytest.raises(InvalidTransition, machine.drag, 10)
    pytest.raises(InvalidTransition, machine.release)
    pytest.raises(InvalidTransition, machine.stop)

    machine.play()
    assert machine.state == InteractionState.PLAYING
    pytest.raises(InvalidTransition, machine.press, 10)
    pytest.raises(InvalidTransition, machine.play)
    machine.stop()

    machine.press(10)
    pytest.raises(InvalidTransition, machine.play)
    pytest.raises(InvalidTransition, machine.press, 20)
    machine.release(20)
    assert machine.selection == (10, 20)


def test_state_machine_bad_selection(session):
    machine = SelectionStateMachine(session)
    events = []
    machine.add_listener(events.append)
    machine.press(sr)
    machine.drag(3 * sr)

    # out of bounds selections are refused by the session
    with pytest.raises(InvalidSelection):
        machine.release(1000 * sr)
    assert machine.state == InteractionState.SELECTING
    assert machine.selection == (sr, 3 * sr)
    assert session.selection is None

    # listeners hear about the selection going back
    assert events[-1] == StateEvent(InteractionState.SELECTING, (sr, 3 * sr))
    assert len(events) == 3

    machine.release(2 * sr)
    assert session.selection == (sr, 2 * sr)

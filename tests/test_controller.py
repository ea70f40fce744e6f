from sentloop.align import align
from sentloop.models import Segment, WordTimestamp
from sentloop.playback import (
    Ended,
    JumpTo,
    Pause,
    Play,
    PlaybackController,
    PlaybackState,
    PositionSample,
    RepeatMode,
    Seek,
    SetRepeatMode,
    SetRepeatTarget,
    StartPlayback,
    StopPlayback,
    Transition,
)


def _feed(
    controller: PlaybackController, state: PlaybackState, *times: float
) -> tuple[PlaybackState, list[Transition]]:
    transitions: list[Transition] = []
    for time in times:
        transition = controller.reduce(state, PositionSample(time))
        transitions.append(transition)
        state = transition.state
    return state, transitions


def test_repeat_count_is_exact(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)
    state, _ = _feed(controller, state, 0.5)

    observed_completed: list[int] = []
    crossings: list[Transition] = []
    for _ in range(4):
        state, transitions = _feed(controller, state, 1.95)
        crossings.append(transitions[-1])
        observed_completed.append(state.repeats_completed)
        if state.is_cycling:
            state, _ = _feed(controller, state, 0.5)
            observed_completed.append(state.repeats_completed)

    assert [t.commands for t in crossings[:3]] == [(Seek(0.0),)] * 3
    assert [t.state.repeats_completed for t in crossings[:3]] == [1, 2, 3]
    assert crossings[3].commands == (Seek(2.0),)
    assert crossings[3].state.is_cycling is False
    assert crossings[3].state.repeats_completed == 0
    assert max(observed_completed) == 3

    state, _ = _feed(controller, state, 2.5)
    assert state.active_index == 1
    assert state.is_cycling is False


def test_repeat_target_one_advances_on_first_end(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 1)

    state, transitions = _feed(controller, state, 0.5, 1.95)

    assert transitions[-1].commands == (Seek(2.0),)
    assert state.is_cycling is False
    assert state.repeats_completed == 0


def test_last_sentence_stops_playback(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 2)

    state, transitions = _feed(controller, state, 4.5, 5.95, 4.5, 5.95, 4.5, 5.95)

    assert [t.commands for t in transitions] == [
        (),
        (Seek(4.0),),
        (),
        (Seek(4.0),),
        (),
        (StopPlayback(),),
    ]
    assert state.active_index == 2
    assert state.is_cycling is False


def test_jump_cancels_repeat(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)
    state, _ = _feed(controller, state, 0.5, 1.95)
    assert state.is_cycling is True
    assert state.repeats_completed == 1

    transition = controller.reduce(state, JumpTo(2))

    assert transition.state.active_index == 2
    assert transition.state.is_cycling is False
    assert transition.state.repeats_completed == 0
    assert transition.commands == (Seek(4.0),)
    assert transition.cancel_pending is True


def test_out_of_range_jump_is_rejected(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state, _ = _feed(controller, controller.initial_state(), 0.5)

    for index in (3, -1, 99):
        transition = controller.reduce(state, JumpTo(index))
        assert transition.state == state
        assert transition.commands == ()
        assert transition.cancel_pending is False


def test_boundary_tie_break_prefers_earlier_segment() -> None:
    segments = [
        Segment(text="A.", start_time=0.0, end_time=5.0),
        Segment(text="B.", start_time=5.0, end_time=9.0),
    ]
    controller = PlaybackController(segments)

    state, _ = _feed(controller, controller.initial_state(), 5.0)

    assert state.active_index == 0


def test_end_to_end_hi_bye(hi_bye_words: list[WordTimestamp]) -> None:
    controller = PlaybackController(align(hi_bye_words))
    state = controller.initial_state(RepeatMode.OFF)

    state, _ = _feed(controller, state, 0.5)
    assert state.active_index == 0
    state, _ = _feed(controller, state, 1.5)
    assert state.active_index == 1
    state, _ = _feed(controller, state, 1.0)
    assert state.active_index == 0


def test_off_mode_never_seeks(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)

    state, transitions = _feed(controller, controller.initial_state(), 0.5, 1.95, 2.1, 5.99)

    assert all(t.commands == () for t in transitions)
    assert state.active_index == 2
    assert state.repeats_completed == 0


def test_gap_clears_active_index() -> None:
    segments = [
        Segment(text="A.", start_time=0.0, end_time=2.0),
        Segment(text="B.", start_time=3.0, end_time=5.0),
    ]
    controller = PlaybackController(segments)

    state, _ = _feed(controller, controller.initial_state(), 1.0, 2.5)

    assert state.active_index is None
    assert state.position == 2.5


def test_replay_landing_on_shared_boundary_keeps_cycle(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)

    state, transitions = _feed(controller, state, 2.5, 3.95, 2.0)

    assert transitions[1].commands == (Seek(2.0),)
    assert state.active_index == 1
    assert state.is_cycling is True
    assert state.repeats_completed == 1


def test_sample_past_end_within_overshoot_still_counts(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 2)

    state, transitions = _feed(controller, state, 1.5, 2.2)

    assert transitions[-1].commands == (Seek(0.0),)
    assert state.active_index == 0
    assert state.is_cycling is True


def test_external_scrub_abandons_cycle(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)
    state, _ = _feed(controller, state, 0.5, 1.95)
    assert state.is_cycling is True

    state, transitions = _feed(controller, state, 4.5)

    assert transitions[-1].commands == ()
    assert state.active_index == 2
    assert state.is_cycling is False
    assert state.repeats_completed == 0


def test_advance_seek_does_not_retrigger_previous_sentence(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 1)

    state, transitions = _feed(controller, state, 0.5, 1.95, 2.0, 2.1, 2.5)

    assert [t.commands for t in transitions] == [(), (Seek(2.0),), (), (), ()]
    assert state.active_index == 1
    assert state.is_cycling is False


def test_mode_change_resets_cycle_and_cancels(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)
    state, _ = _feed(controller, state, 0.5, 1.95)

    transition = controller.reduce(state, SetRepeatMode(RepeatMode.OFF))

    assert transition.cancel_pending is True
    assert transition.commands == ()
    assert transition.state.repeat_mode is RepeatMode.OFF
    assert transition.state.is_cycling is False
    assert transition.state.repeats_completed == 0


def test_repeat_target_is_clamped(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)

    assert controller.reduce(state, SetRepeatTarget(0)).state.repeat_target == 1
    assert controller.reduce(state, SetRepeatTarget(-4)).state.repeat_target == 1
    assert controller.initial_state(RepeatMode.SENTENCE, 0).repeat_target == 1


def test_lowering_target_keeps_completed_in_range(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 5)
    state, _ = _feed(controller, state, 0.5, 1.95, 0.5, 1.95, 0.5, 1.95)
    assert state.repeats_completed == 3

    state = controller.reduce(state, SetRepeatTarget(2)).state
    assert state.repeats_completed == 2

    state, transitions = _feed(controller, state, 0.5, 1.95)
    assert transitions[-1].commands == (Seek(2.0),)


def test_ended_repeats_whole_recording(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.ALL)
    state = controller.reduce(state, Play()).state
    state, _ = _feed(controller, state, 5.9)

    transition = controller.reduce(state, Ended())

    assert transition.commands == (Seek(0.0), StartPlayback())
    assert transition.state.active_index is None
    assert transition.state.is_playing is False


def test_ended_in_off_mode_just_stops(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state, _ = _feed(controller, controller.initial_state(RepeatMode.OFF), 0.5, 5.9)

    transition = controller.reduce(state, Ended())

    assert transition.commands == ()
    assert transition.cancel_pending is True
    assert transition.state.active_index is None
    assert transition.state.is_cycling is False


def test_ended_reissues_unapplied_replay_seek(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)
    state, transitions = _feed(controller, state, 4.5, 5.95)
    assert transitions[-1].commands == (Seek(4.0),)

    transition = controller.reduce(state, Ended())

    assert transition.commands == (Seek(4.0), StartPlayback())
    assert transition.cancel_pending is True
    assert transition.state.active_index == 2
    assert transition.state.is_cycling is True
    assert transition.state.repeats_completed == 1
    assert transition.state.is_playing is False


def test_ended_counts_unsampled_end_of_last_sentence(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 2)
    state, transitions = _feed(controller, state, 4.5, 5.85)
    assert transitions[-1].commands == ()

    transition = controller.reduce(state, Ended())

    assert transition.commands == (Seek(4.0), StartPlayback())
    assert transition.state.is_cycling is True
    assert transition.state.repeats_completed == 1


def test_ended_after_final_repeat_clears_state(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 1)
    state, transitions = _feed(controller, state, 4.5, 5.95)
    assert transitions[-1].commands == (StopPlayback(),)

    transition = controller.reduce(state, Ended())

    assert transition.commands == ()
    assert transition.state.active_index is None
    assert transition.state.is_cycling is False


def test_late_sample_still_ends_sentence(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)

    state, transitions = _feed(controller, state, 1.0, 2.7)

    assert transitions[-1].commands == (Seek(0.0),)
    assert state.active_index == 0
    assert state.is_cycling is True
    assert state.repeats_completed == 1


def test_sample_past_following_sentence_is_treated_as_scrub(
    three_segments: list[Segment],
) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 3)

    state, transitions = _feed(controller, state, 1.0, 4.5)

    assert transitions[-1].commands == ()
    assert state.active_index == 2
    assert state.is_cycling is False


def test_play_and_pause_mirror_transport(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state()

    state = controller.reduce(state, Play()).state
    assert state.is_playing is True
    state = controller.reduce(state, Pause()).state
    assert state.is_playing is False


def test_empty_segments_pass_through() -> None:
    controller = PlaybackController([])
    state = controller.initial_state(RepeatMode.SENTENCE, 3)

    state, transitions = _feed(controller, state, 0.5, 1.0)

    assert state.position == 1.0
    assert state.active_index is None
    assert all(t.commands == () for t in transitions)
    assert controller.reduce(state, JumpTo(0)).commands == ()


def test_reduce_is_pure(three_segments: list[Segment]) -> None:
    controller = PlaybackController(three_segments)
    state = controller.initial_state(RepeatMode.SENTENCE, 2)
    state, _ = _feed(controller, state, 0.5)

    first = controller.reduce(state, PositionSample(1.95))
    second = controller.reduce(state, PositionSample(1.95))

    assert first == second
    assert state.is_cycling is False

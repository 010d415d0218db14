import pytest

from handspell.backend.ml.fingerspell import (
    MutationKind,
    StabilizerConfig,
    Stabilizer,
    Symbol,
)
from handspell.backend.ml.fingerspell.stabilizer import NO_CHANGE, majority

D, A, B = Symbol.D, Symbol.A, Symbol.B
NEUTRAL, NO_HAND, WAVE = Symbol.FIST_AMBIGUOUS, Symbol.NO_HAND, Symbol.WAVE

HAND_SIZE = 100.0


def feed(stab, symbols):
    return [stab.advance(s) for s in symbols]


def appended(mutations):
    return [m.text for m in mutations if m.kind is MutationKind.APPEND]


@pytest.fixture
def stab():
    return Stabilizer(StabilizerConfig(window=5, stable_threshold=15))


# -------------------------
# Majority window
# -------------------------

def test_majority_first_to_reach_max_wins_ties():
    assert majority([A, B]) is A
    assert majority([A, B, B, A]) is B
    assert majority([D, D, NEUTRAL, NEUTRAL, NEUTRAL]) is NEUTRAL
    assert majority([]) is None


def test_smoothed_sequence_is_deterministic():
    stream = [A, B, A, B, B, D, A, D, D, B, NEUTRAL, A, A, B] * 3

    def run():
        s = Stabilizer()
        out = []
        for sym in stream:
            s.advance(sym)
            out.append(s.smoothed)
        return out

    assert run() == run()


def test_window_is_bounded(stab):
    feed(stab, [A] * 40)
    assert len(stab.state.recent_symbols) == 5


# -------------------------
# Stability gating and commit
# -------------------------

def test_commit_after_threshold(stab):
    out = feed(stab, [D] * 14)
    assert stab.text == ""
    assert all(m is NO_CHANGE for m in out)

    m = stab.advance(D)
    assert m.kind is MutationKind.APPEND
    assert m.text == "D"
    assert stab.text == "D"


def test_holding_a_letter_commits_once(stab):
    out = feed(stab, [D] * 30)
    assert appended(out) == ["D"]
    assert stab.text == "D"


def test_scenario_single_letter(stab):
    feed(stab, [D] * 15)
    assert stab.text == "D"


def test_scenario_neutral_interval_releases_lock(stab):
    feed(stab, [D] * 15 + [NEUTRAL] * 5 + [D] * 15)
    assert stab.text == "DD"


def test_scenario_hand_loss_reenables_letter(stab):
    stab.state.output_text = "X"
    feed(stab, [A] * 15 + [NO_HAND] * 3 + [A] * 15)
    assert stab.text == "XA A"


def test_changing_letters_restarts_streak(stab):
    feed(stab, [A] * 10 + [B] * 10)
    assert stab.text == ""
    feed(stab, [B] * 10)
    assert stab.text == "B"


def test_neutral_is_never_committed(stab):
    out = feed(stab, [NEUTRAL] * 50)
    assert appended(out) == []
    assert stab.smoothed is NEUTRAL


def test_two_letters_in_a_row(stab):
    feed(stab, [A] * 15 + [B] * 20)
    assert stab.text == "AB"


# -------------------------
# Hand loss
# -------------------------

def test_auto_space_once_per_loss(stab):
    feed(stab, [D] * 15)
    out = feed(stab, [NO_HAND] * 6)
    assert [m.kind for m in out].count(MutationKind.APPEND_SPACE) == 1
    assert stab.text == "D "

    feed(stab, [NEUTRAL] * 3)
    feed(stab, [NO_HAND] * 3)
    assert stab.text == "D "


def test_no_space_without_text(stab):
    feed(stab, [NEUTRAL] * 5 + [NO_HAND] * 5)
    assert stab.text == ""


def test_no_space_before_any_hand(stab):
    stab.state.output_text = "HI"
    assert stab.advance(NO_HAND) is NO_CHANGE
    assert stab.text == "HI"


def test_hand_loss_resets_streak(stab):
    feed(stab, [D] * 10 + [NO_HAND] + [D] * 10)
    assert stab.text == ""
    assert stab.smoothed is D
    feed(stab, [D] * 5)
    assert stab.text == "D"


def test_no_hand_does_not_enter_window(stab):
    feed(stab, [A] * 5 + [NO_HAND] * 3)
    assert list(stab.state.recent_symbols) == [A] * 5
    assert stab.smoothed is NO_HAND


# -------------------------
# Clear / backspace
# -------------------------

def test_clear_releases_lock_but_keeps_window(stab):
    feed(stab, [D] * 15)
    stab.state.wave_cycles = 2
    assert stab.clear() == ""
    assert stab.state.last_committed is None
    assert list(stab.state.recent_symbols) == [D] * 5
    assert stab.state.wave_cycles == 2

    # the held streak is already past the threshold
    m = stab.advance(D)
    assert m.text == "D"
    assert stab.text == "D"


def test_backspace(stab):
    feed(stab, [A] * 15 + [B] * 20)
    assert stab.text == "AB"
    assert stab.backspace() == "A"
    assert stab.state.last_committed is None
    stab.advance(B)
    assert stab.text == "AB"


def test_backspace_on_empty_text(stab):
    assert stab.backspace() == ""


def test_reset(stab):
    feed(stab, [A] * 15)
    stab.reset()
    assert stab.text == ""
    assert len(stab.state.recent_symbols) == 0
    assert stab.state.hand_present is False


# -------------------------
# Wave
# -------------------------

def wave(stab, xs, raw=NEUTRAL):
    return [stab.advance(raw, wrist_x=x, hand_size=HAND_SIZE, open_hand=True) for x in xs]


def test_wave_commits_hello_once(stab):
    out = wave(stab, [100, 120, 100, 120, 100, 120, 100])
    assert appended(out) == [" HELLO "]

    out = wave(stab, [100] * 20)
    assert appended(out) == []
    assert stab.text == " HELLO "


def test_wave_needs_four_reversals(stab):
    wave(stab, [100, 120, 100, 120])
    assert stab.wave_cycles == 3
    out = wave(stab, [120] * 3)
    assert appended(out) == []


def test_wave_overrides_raw_letter(stab):
    out = wave(stab, [100, 120, 100, 120, 100, 120, 100], raw=B)
    assert appended(out) == [" HELLO "]
    assert stab.smoothed is WAVE


def test_small_motion_does_not_count(stab):
    wave(stab, [100, 103, 100, 103, 100, 103, 100, 103])
    assert stab.wave_cycles == 0


def test_stationary_frames_reset_cycles(stab):
    wave(stab, [100, 120, 100, 120])
    assert stab.wave_cycles == 3

    wave(stab, [120] * 10)
    assert stab.wave_cycles == 3
    wave(stab, [120])
    assert stab.wave_cycles == 0

    # a fresh set of reversals is needed
    out = wave(stab, [100, 120, 100])
    assert stab.wave_cycles == 3
    assert appended(out) == []

    out = wave(stab, [120, 100, 120])
    assert appended(out) == [" HELLO "]


def test_closing_the_hand_resets_wave(stab):
    wave(stab, [100, 120, 100, 120])
    stab.advance(D, wrist_x=100, hand_size=HAND_SIZE, open_hand=False)
    st = stab.state
    assert (st.wave_cycles, st.wave_direction, st.wave_stationary_frames, st.prev_wrist_x) == (0, 0, 0, None)


def test_wave_after_text_has_no_double_space(stab):
    feed(stab, [D] * 15)
    wave(stab, [100, 120, 100, 120, 100, 120, 100])
    assert stab.text == "D HELLO "
    feed(stab, [NO_HAND] * 2)
    assert stab.text == "D HELLO "


def test_wave_threshold_scales_with_hand_size():
    s = Stabilizer()
    for x in [10, 12, 10, 12]:
        s.advance(NEUTRAL, wrist_x=x, hand_size=10.0, open_hand=True)
    assert s.wave_cycles == 3


def test_wave_after_auto_space_has_single_space(stab):
    feed(stab, [D] * 15 + [NO_HAND])
    assert stab.text == "D "
    out = wave(stab, [100, 120, 100, 120, 100, 120, 100])
    assert appended(out) == ["HELLO "]
    assert stab.text == "D HELLO "

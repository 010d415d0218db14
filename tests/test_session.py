import pytest

from handspell.backend.ml.fingerspell import FingerspellSession, InvalidFrame

from hands import A_HAND, D_HAND, OPEN_HAND, shift_x


class FakeTracker:
    def __init__(self, hands):
        self.hands = hands
        self.closed = False
        self.calls = []

    def detect(self, frame_bgr, ts_ms=None):
        self.calls.append(ts_ms)
        return self.hands

    def close(self):
        self.closed = True


def test_letter_is_typed():
    s = FingerspellSession()
    results = [s.process_hand(D_HAND) for _ in range(15)]

    assert results[0]["raw"] == "D"
    assert results[0]["stable"] == "D"
    assert [r["mutation"] for r in results].count("append") == 1
    assert results[-1]["appended"] == "D"
    assert s.text == "D"


def test_hand_loss_adds_space():
    s = FingerspellSession()
    for _ in range(15):
        s.process_hand(D_HAND)
    out = s.process_hand(None)

    assert out["raw"] == "NO_HAND"
    assert out["mutation"] == "append_space"
    assert out["display"] == "👀 Show Hand"
    assert s.text == "D "


def test_only_first_hand_counts():
    s = FingerspellSession()
    for _ in range(15):
        out = s.process_hands([A_HAND, D_HAND])
    assert out["raw"] == "A"
    assert s.text == "A"

    assert s.process_hands([])["raw"] == "NO_HAND"


@pytest.mark.parametrize("hands", [5, {"a": 1}, "abc"])
def test_hands_must_be_a_list(hands):
    s = FingerspellSession()
    with pytest.raises(InvalidFrame):
        s.process_hands(hands)
    assert s.stabilizer.state.hand_present is False


def test_invalid_frame_leaves_session_untouched():
    s = FingerspellSession()
    for _ in range(10):
        s.process_hand(D_HAND)
    before = s.stabilizer.state.streak_count

    with pytest.raises(InvalidFrame):
        s.process_hand(D_HAND[:10])
    assert s.stabilizer.state.streak_count == before


def test_waving_open_hand_says_hello():
    s = FingerspellSession()
    out = [s.process_hand(shift_x(OPEN_HAND, dx)) for dx in (0, 20, 0, 20, 0, 20, 0)]

    assert out[0]["display"] == "🖐️"
    assert out[-1]["stable"] == "WAVE"
    assert out[-1]["appended"] == " HELLO "
    assert s.text == " HELLO "


def test_clear_and_backspace():
    s = FingerspellSession()
    for _ in range(15):
        s.process_hand(D_HAND)
    assert s.backspace() == ""
    s.stabilizer.state.output_text = "AB"
    assert s.clear() == ""


def test_frames_go_through_tracker():
    tracker = FakeTracker([D_HAND])
    s = FingerspellSession(tracker=tracker)
    out = s.process_frame_bgr(object(), ts_ms=42)

    assert out["raw"] == "D"
    assert tracker.calls == [42]

    tracker.hands = []
    assert s.process_frame_bgr(object())["raw"] == "NO_HAND"

    s.close()
    assert tracker.closed
    assert s.tracker is None


def test_frames_without_tracker_fail():
    with pytest.raises(RuntimeError):
        FingerspellSession().process_frame_bgr(object())

"""
Rule-based fingerspelling classifier.

One frame of 21 keypoints in, one Symbol out. Every distance is divided by
the hand size (wrist -> middle MCP) so the result does not depend on how far
the hand is from the camera or where it sits in the frame.

Shape families are tried in a fixed order and the first one that recognises
the hand wins. Several families can match the same hand (an index finger
touching the thumb with the other three up is both "thumb-index loop" and
"all four extended"), so the order below is part of the behaviour:

    1. index only           G, L, X, D
    2. fist                 O, E, A, M / N / T, S
    3. thumb-index loop     F
    4. index + middle       H, R, K / P, V, U
    5. pinky only           Y, I
    6. all four extended    B, C, open-hand neutral
    7. three, pinky closed  F, W

Anything else is FIST_AMBIGUOUS.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .config import ClassifierThresholds
from .geometry import (
    FINGERS,
    INDEX_MCP,
    INDEX_PIP,
    INDEX_TIP,
    MIDDLE_MCP,
    MIDDLE_PIP,
    MIDDLE_TIP,
    PINKY_MCP,
    PINKY_TIP,
    RING_MCP,
    THUMB_TIP,
    WRIST,
    HandFrame,
    as_frame,
)
from .symbols import Symbol

DEFAULT_THRESHOLDS = ClassifierThresholds()


@dataclass(frozen=True)
class FingerStates:
    index: bool
    middle: bool
    ring: bool
    pinky: bool

    @property
    def bits(self) -> Tuple[bool, bool, bool, bool]:
        return self.index, self.middle, self.ring, self.pinky

    @property
    def count(self) -> int:
        return sum(self.bits)


@dataclass(frozen=True)
class HandReading:
    """Everything the stabilizer needs to know about one classified frame."""

    symbol: Symbol
    hand_size: float
    wrist_x: float
    fingers: Optional[FingerStates]

    @property
    def open_hand(self) -> bool:
        return self.fingers is not None and self.fingers.count == 4


class _Hand:
    """Per-call view of a frame: hand size plus normalised helpers."""

    __slots__ = ("frame", "size", "thr", "fingers")

    def __init__(self, frame: HandFrame, size: float, thr: ClassifierThresholds):
        self.frame = frame
        self.size = size
        self.thr = thr
        self.fingers = FingerStates(
            *(self.extended(mcp, tip) for mcp, tip in FINGERS.values())
        )

    def T(self, factor: float) -> float:
        return self.size * factor

    def d(self, i: int, j: int) -> float:
        return self.frame.dist(i, j)

    def x(self, i: int) -> float:
        return self.frame[i].x

    def y(self, i: int) -> float:
        return self.frame[i].y

    def extended(self, mcp: int, tip: int) -> bool:
        return self.d(tip, mcp) > self.T(self.thr.extended)

    def pointing_down(self) -> bool:
        """Image y grows downwards: index tip lower than the wrist (K -> P)."""
        return self.y(INDEX_TIP) > self.y(WRIST)

    def horizontal(self, margin: float = 0.0) -> bool:
        dx = abs(self.x(INDEX_TIP) - self.x(INDEX_MCP))
        dy = abs(self.y(INDEX_TIP) - self.y(INDEX_MCP))
        return dx > dy + self.T(margin)


# -------------------------
# Shape families
# -------------------------

def _index_only(h: _Hand) -> Optional[Symbol]:
    if h.fingers.bits != (True, False, False, False):
        return None
    thr = h.thr

    if h.horizontal(thr.g_margin):
        return Symbol.G

    if h.d(THUMB_TIP, INDEX_MCP) > h.T(thr.l_thumb_spread):
        return Symbol.L

    # hooked: the tip does not rise clearly above its own PIP joint
    if h.y(INDEX_TIP) > h.y(INDEX_PIP) - h.T(thr.x_hook):
        return Symbol.X

    return Symbol.D


def _nearest_knuckle(h: _Hand) -> Tuple[int, float]:
    knuckles = (INDEX_MCP, MIDDLE_MCP, RING_MCP, PINKY_MCP)
    best = min(knuckles, key=lambda k: h.d(THUMB_TIP, k))
    return best, h.d(THUMB_TIP, best)


def _thumb_outside_index(h: _Hand) -> bool:
    """Thumb tip on the far side of the index MCP from the other knuckles."""
    offset = h.x(THUMB_TIP) - h.x(INDEX_MCP)
    inward = h.x(MIDDLE_MCP) - h.x(INDEX_MCP)
    return offset * inward < 0 and abs(offset) > h.T(h.thr.a_offset)


def _fist(h: _Hand) -> Optional[Symbol]:
    if h.fingers.count != 0:
        return None
    thr = h.thr

    index_curve = h.d(INDEX_TIP, INDEX_MCP)
    if index_curve > h.T(thr.o_curve) and h.d(THUMB_TIP, INDEX_TIP) < h.T(thr.o_touch):
        return Symbol.O

    if h.y(THUMB_TIP) > h.y(INDEX_MCP):
        return Symbol.E

    if _thumb_outside_index(h):
        return Symbol.A

    if thr.rich_fist:
        knuckle, dist = _nearest_knuckle(h)
        if dist < h.T(thr.knuckle_reach):
            if knuckle in (RING_MCP, PINKY_MCP):
                return Symbol.M
            if knuckle == MIDDLE_MCP:
                return Symbol.N
            return Symbol.T

    return Symbol.S


def _thumb_index_loop(h: _Hand) -> Optional[Symbol]:
    f = h.fingers
    if not (f.middle and f.ring and f.pinky):
        return None
    if h.d(THUMB_TIP, INDEX_TIP) < h.T(h.thr.f_touch):
        return Symbol.F
    return None


def _index_middle(h: _Hand) -> Optional[Symbol]:
    if h.fingers.bits != (True, True, False, False):
        return None
    thr = h.thr

    if h.horizontal():
        return Symbol.H

    crossed = h.x(INDEX_TIP) - h.x(MIDDLE_TIP)
    if 0 < crossed < h.T(thr.r_cross):
        return Symbol.R

    if h.d(THUMB_TIP, MIDDLE_PIP) < h.T(thr.kp_thumb_reach):
        return Symbol.P if h.pointing_down() else Symbol.K

    if h.d(INDEX_TIP, MIDDLE_TIP) > h.T(thr.v_spread):
        return Symbol.V

    return Symbol.U


def _pinky_only(h: _Hand) -> Optional[Symbol]:
    if h.fingers.bits != (False, False, False, True):
        return None
    if h.d(THUMB_TIP, PINKY_TIP) > h.T(h.thr.y_spread):
        return Symbol.Y
    return Symbol.I


def _open_hand(h: _Hand) -> Optional[Symbol]:
    if h.fingers.count != 4:
        return None
    thr = h.thr

    if abs(h.x(THUMB_TIP) - h.x(INDEX_MCP)) < h.T(thr.b_tuck):
        return Symbol.B

    if (h.d(THUMB_TIP, INDEX_TIP) < h.T(thr.c_thumb)
            and h.d(INDEX_TIP, INDEX_MCP) < h.T(thr.c_curve)):
        return Symbol.C

    return Symbol.FIST_AMBIGUOUS


def _three_fingers(h: _Hand) -> Optional[Symbol]:
    if h.fingers.bits != (True, True, True, False):
        return None
    if h.d(THUMB_TIP, INDEX_TIP) < h.T(h.thr.f_touch):
        return Symbol.F
    return Symbol.W


FAMILIES: Tuple[Tuple[str, Callable[[_Hand], Optional[Symbol]]], ...] = (
    ("index_only", _index_only),
    ("fist", _fist),
    ("thumb_index_loop", _thumb_index_loop),
    ("index_middle", _index_middle),
    ("pinky_only", _pinky_only),
    ("open_hand", _open_hand),
    ("three_fingers", _three_fingers),
)


# -------------------------
# Public API
# -------------------------

def analyze(frame, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS) -> HandReading:
    """
    Classify one hand and return the symbol with the measurements behind it.
    Raises InvalidFrame for malformed keypoints.
    """
    frame = as_frame(frame)
    size = frame.hand_size
    if size <= thresholds.min_hand_size:
        return HandReading(Symbol.FIST_AMBIGUOUS, size, frame.wrist_x, None)

    hand = _Hand(frame, size, thresholds)
    symbol = Symbol.FIST_AMBIGUOUS
    for _name, family in FAMILIES:
        found = family(hand)
        if found is not None:
            symbol = found
            break

    return HandReading(symbol, size, frame.wrist_x, hand.fingers)


def classify(frame, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS) -> Symbol:
    return analyze(frame, thresholds).symbol


def finger_states(frame, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS) -> FingerStates:
    frame = as_frame(frame)
    return _Hand(frame, frame.hand_size, thresholds).fingers


class GestureClassifier:
    """Binds a threshold set so callers don't have to pass it every frame."""

    def __init__(self, thresholds: Optional[ClassifierThresholds] = None):
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def classify(self, frame) -> Symbol:
        return classify(frame, self.thresholds)

    def analyze(self, frame) -> HandReading:
        return analyze(frame, self.thresholds)

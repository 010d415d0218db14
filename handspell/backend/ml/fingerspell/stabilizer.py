from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Optional

from .config import StabilizerConfig
from .symbols import Symbol

logger = logging.getLogger(__name__)


class MutationKind(str, Enum):
    APPEND = "append"
    APPEND_SPACE = "append_space"
    NONE = "none"


@dataclass(frozen=True)
class TextMutation:
    kind: MutationKind
    text: str = ""

    def __bool__(self) -> bool:
        return self.kind is not MutationKind.NONE


NO_CHANGE = TextMutation(MutationKind.NONE)
SPACE = TextMutation(MutationKind.APPEND_SPACE, " ")


def majority(symbols) -> Optional[Symbol]:
    """
    Most frequent symbol, scanning front to back.
    On ties the symbol that reached the top count first wins.
    """
    counts = {}
    best, best_count = None, 0
    for s in symbols:
        counts[s] = counts.get(s, 0) + 1
        if counts[s] > best_count:
            best, best_count = s, counts[s]
    return best


@dataclass
class StabilizationState:
    window: int = 5
    recent_symbols: Deque[Symbol] = field(init=False)

    streak_symbol: Optional[Symbol] = None
    streak_count: int = 0
    last_committed: Optional[Symbol] = None
    hand_present: bool = False
    smoothed: Symbol = Symbol.NO_HAND

    wave_cycles: int = 0
    wave_direction: int = 0
    wave_stationary_frames: int = 0
    prev_wrist_x: Optional[float] = None

    output_text: str = ""

    def __post_init__(self):
        self.recent_symbols = deque(maxlen=self.window)

    def reset_streak(self) -> None:
        self.streak_symbol = None
        self.streak_count = 0

    def reset_wave(self) -> None:
        self.wave_cycles = 0
        self.wave_direction = 0
        self.wave_stationary_frames = 0
        self.prev_wrist_x = None


class Stabilizer:
    """
    Turns the per-frame symbol stream into committed text.

    Single writer: one instance per session, advanced once per frame in
    frame order.
    """

    def __init__(self, config: Optional[StabilizerConfig] = None):
        self.config = config or StabilizerConfig()
        self.state = StabilizationState(window=self.config.window)

    # --- read-only views ---

    @property
    def text(self) -> str:
        return self.state.output_text

    @property
    def smoothed(self) -> Symbol:
        return self.state.smoothed

    @property
    def wave_cycles(self) -> int:
        return self.state.wave_cycles

    # --- per-frame entry point ---

    def advance(
        self,
        raw: Symbol,
        wrist_x: Optional[float] = None,
        hand_size: Optional[float] = None,
        open_hand: bool = False,
    ) -> TextMutation:
        st = self.state

        if raw is Symbol.NO_HAND:
            return self._hand_lost()

        st.hand_present = True
        raw = self._track_wave(raw, wrist_x, hand_size, open_hand)

        st.recent_symbols.append(raw)
        smoothed = majority(st.recent_symbols)
        st.smoothed = smoothed

        if smoothed is Symbol.WAVE:
            if st.last_committed is Symbol.WAVE:
                return NO_CHANGE
            st.last_committed = Symbol.WAVE
            st.wave_cycles = 0
            logger.debug("wave detected")
            text = self.config.wave_text
            if st.output_text.endswith(" "):
                text = text.lstrip(" ")
            return self._append(text)

        if smoothed is Symbol.FIST_AMBIGUOUS:
            # neutral hand only releases the repeat lock
            st.last_committed = None
            return NO_CHANGE

        if smoothed == st.streak_symbol:
            st.streak_count += 1
        else:
            st.streak_symbol = smoothed
            st.streak_count = 1

        if st.streak_count < self.config.stable_threshold:
            return NO_CHANGE
        if smoothed == st.last_committed:
            return NO_CHANGE

        st.last_committed = smoothed
        logger.debug("commit %s after %d frames", smoothed.value, st.streak_count)
        return self._append(smoothed.value)

    # --- UI-side edits ---

    def clear(self) -> str:
        self.state.output_text = ""
        self.state.last_committed = None
        return self.state.output_text

    def backspace(self) -> str:
        self.state.output_text = self.state.output_text[:-1]
        self.state.last_committed = None
        return self.state.output_text

    def reset(self) -> None:
        self.state = StabilizationState(window=self.config.window)

    # --- internals ---

    def _append(self, text: str) -> TextMutation:
        self.state.output_text += text
        return TextMutation(MutationKind.APPEND, text)

    def _hand_lost(self) -> TextMutation:
        st = self.state
        was_present = st.hand_present

        st.hand_present = False
        st.smoothed = Symbol.NO_HAND
        st.reset_streak()
        st.last_committed = None
        st.reset_wave()

        if was_present and st.output_text and not st.output_text.endswith(" "):
            st.output_text += " "
            logger.debug("hand lost, auto-space")
            return SPACE
        return NO_CHANGE

    def _track_wave(self, raw, wrist_x, hand_size, open_hand) -> Symbol:
        st = self.state
        cfg = self.config

        if not open_hand or wrist_x is None or not hand_size:
            st.reset_wave()
            return raw

        if st.prev_wrist_x is not None:
            diff = wrist_x - st.prev_wrist_x
            if abs(diff) > hand_size * cfg.wave_displacement:
                st.wave_stationary_frames = 0
                direction = 1 if diff > 0 else -1
                if direction != st.wave_direction:
                    st.wave_cycles += 1
                    st.wave_direction = direction
            else:
                st.wave_stationary_frames += 1
                if st.wave_stationary_frames > cfg.wave_stationary_frames:
                    st.wave_cycles = 0
        st.prev_wrist_x = wrist_x

        if st.wave_cycles >= cfg.wave_cycles:
            return Symbol.WAVE
        return raw

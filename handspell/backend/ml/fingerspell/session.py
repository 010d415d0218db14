from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from .classifier import GestureClassifier
from .config import FingerspellConfig
from .geometry import InvalidFrame, as_frame
from .stabilizer import Stabilizer, TextMutation
from .symbols import Symbol, display

logger = logging.getLogger(__name__)


class FingerspellSession:
    """
    One user's recognition session (stateful):
    - classifier thresholds
    - stabilizer (window, streak, wave counters, output text)
    - optional tracker for raw camera frames
    """

    def __init__(self, config: Optional[FingerspellConfig] = None, tracker=None):
        self.config = config or FingerspellConfig()
        self.classifier = GestureClassifier(self.config.classifier)
        self.stabilizer = Stabilizer(self.config.stabilizer)
        self.tracker = tracker

    @property
    def text(self) -> str:
        return self.stabilizer.text

    def process_hand(self, hand: Any) -> dict:
        """
        hand: 21 keypoints (HandFrame, sequence of (x, y) or landmark objects),
        or None when no hand was detected.
        Raises InvalidFrame for malformed keypoints; the session is left untouched.
        Returns dict:
          {
            "raw": str,
            "stable": str,
            "display": str,
            "mutation": str,
            "appended": str,
            "text": str
          }
        """
        if hand is None:
            mutation = self.stabilizer.advance(Symbol.NO_HAND)
            return self._result(Symbol.NO_HAND, mutation)

        frame = as_frame(hand)
        reading = self.classifier.analyze(frame)
        mutation = self.stabilizer.advance(
            reading.symbol,
            wrist_x=reading.wrist_x,
            hand_size=reading.hand_size,
            open_hand=reading.open_hand,
        )
        return self._result(reading.symbol, mutation)

    def process_hands(self, hands: Optional[Sequence[Any]]) -> dict:
        """Only the first detected hand takes part."""
        if hands is not None and not isinstance(hands, (list, tuple)):
            raise InvalidFrame(f"hands must be a list, got {type(hands).__name__}")
        if not hands:
            return self.process_hand(None)
        return self.process_hand(hands[0])

    def process_frame_bgr(self, frame_bgr, ts_ms: Optional[int] = None) -> dict:
        if self.tracker is None:
            raise RuntimeError("FingerspellSession has no tracker for raw frames")
        hands = self.tracker.detect(frame_bgr, ts_ms)
        return self.process_hands(hands)

    def clear(self) -> str:
        return self.stabilizer.clear()

    def backspace(self) -> str:
        return self.stabilizer.backspace()

    def close(self) -> None:
        if self.tracker is not None:
            self.tracker.close()
            self.tracker = None

    def _result(self, raw: Symbol, mutation: TextMutation) -> dict:
        stable = self.stabilizer.smoothed
        if mutation:
            logger.debug("mutation %s %r", mutation.kind.value, mutation.text)
        return {
            "raw": raw.value,
            "stable": stable.value,
            "display": display(stable),
            "mutation": mutation.kind.value,
            "appended": mutation.text,
            "text": self.stabilizer.text,
        }

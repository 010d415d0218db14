from __future__ import annotations

import base64
import os
import time
from pathlib import Path
from typing import List, Optional

import cv2
import mediapipe as mp
import numpy as np

from .geometry import HandFrame

DEFAULT_TASK_FILE = "hand_landmarker.task"


def decode_frame_bgr(data_url: str) -> np.ndarray:
    """data:image/...;base64,<payload> -> BGR image."""
    _, encoded = data_url.split(",", 1)
    img_bytes = base64.b64decode(encoded)
    img = cv2.imdecode(np.frombuffer(img_bytes, np.uint8), cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError("cv2.imdecode returned None")
    return img


class HandTracker:
    """
    MediaPipe Tasks hand landmarker, one hand at a time.
    Returns pixel-space HandFrames so the classifier sees the same geometry
    as the image.
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        num_hands: int = 1,
        min_hand_detection_confidence: float = 0.5,
        min_hand_presence_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ):
        self.model_path = self._resolve_model_path(model_path)

        BaseOptions = mp.tasks.BaseOptions
        HandLandmarker = mp.tasks.vision.HandLandmarker
        HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
        RunningMode = mp.tasks.vision.RunningMode

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self.model_path)),
            running_mode=RunningMode.VIDEO,
            num_hands=num_hands,
            min_hand_detection_confidence=min_hand_detection_confidence,
            min_hand_presence_confidence=min_hand_presence_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

        self._landmarker = HandLandmarker.create_from_options(options)
        self._last_ts_ms = -1

    def close(self) -> None:
        self._landmarker.close()

    @staticmethod
    def _resolve_model_path(model_path: Optional[str]) -> Path:
        """Argument, then HANDSPELL_HAND_TASK_PATH, then ./hand_landmarker.task."""
        raw = model_path or os.getenv("HANDSPELL_HAND_TASK_PATH", "").strip() or DEFAULT_TASK_FILE
        path = Path(raw).expanduser().resolve()
        if not path.is_file():
            raise FileNotFoundError(
                f"hand landmarker model not found at {path}; "
                "download hand_landmarker.task or set HANDSPELL_HAND_TASK_PATH"
            )
        return path

    def _next_ts(self, ts_ms: int) -> int:
        # VIDEO mode rejects timestamps that do not increase
        self._last_ts_ms = max(int(ts_ms), self._last_ts_ms + 1)
        return self._last_ts_ms

    def detect(self, frame_bgr: np.ndarray, ts_ms: Optional[int] = None) -> List[HandFrame]:
        if frame_bgr is None or frame_bgr.ndim != 3 or frame_bgr.shape[2] != 3:
            return []
        if ts_ms is None:
            ts_ms = int(time.monotonic() * 1000)
        ts_ms = self._next_ts(ts_ms)

        h, w = frame_bgr.shape[:2]
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        result = self._landmarker.detect_for_video(mp_image, ts_ms)

        hands = []
        for hand_lms in result.hand_landmarks or []:
            hands.append(HandFrame([(lm.x * w, lm.y * h) for lm in hand_lms]))
        return hands

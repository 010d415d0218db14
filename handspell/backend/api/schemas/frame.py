from pydantic import BaseModel
from typing import List, Optional


class HandFrameIn(BaseModel):
    keypoints: List[List[float]]


class FingersOut(BaseModel):
    index: bool
    middle: bool
    ring: bool
    pinky: bool


class ClassificationOut(BaseModel):
    symbol: str
    display: str
    hand_size: float
    fingers: Optional[FingersOut] = None

from pydantic import BaseModel
from typing import List, Optional


class SessionOut(BaseModel):
    session_id: str
    text: str


class FrameIn(BaseModel):
    # None or empty -> no hand in this frame
    keypoints: Optional[List[List[float]]] = None


class StepOut(BaseModel):
    raw: str
    stable: str
    display: str
    mutation: str
    appended: str
    text: str

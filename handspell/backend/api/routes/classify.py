from fastapi import APIRouter, Depends, HTTPException

from handspell.backend.api.deps import get_registry
from handspell.backend.api.registry import SessionRegistry
from handspell.backend.api.schemas.frame import ClassificationOut, FingersOut, HandFrameIn
from handspell.backend.ml.fingerspell import InvalidFrame, analyze
from handspell.backend.ml.fingerspell.symbols import display

router = APIRouter(prefix="/api/v1", tags=["classify"])


@router.post("/classify", response_model=ClassificationOut)
def classify_frame(payload: HandFrameIn, registry: SessionRegistry = Depends(get_registry)):
    try:
        reading = analyze(payload.keypoints, registry.config.classifier)
    except InvalidFrame as e:
        raise HTTPException(status_code=422, detail=str(e))

    fingers = None
    if reading.fingers is not None:
        f = reading.fingers
        fingers = FingersOut(index=f.index, middle=f.middle, ring=f.ring, pinky=f.pinky)

    return ClassificationOut(
        symbol=reading.symbol.value,
        display=display(reading.symbol),
        hand_size=reading.hand_size,
        fingers=fingers,
    )

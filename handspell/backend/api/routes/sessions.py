from fastapi import APIRouter, Depends, HTTPException

from handspell.backend.api.deps import get_registry, get_session_entry
from handspell.backend.api.registry import SessionRegistry
from handspell.backend.api.schemas.session import FrameIn, SessionOut, StepOut
from handspell.backend.ml.fingerspell import InvalidFrame

router = APIRouter(prefix="/api/v1", tags=["sessions"])


@router.post("/sessions", response_model=SessionOut, status_code=201)
def start_session(registry: SessionRegistry = Depends(get_registry)):
    session_id = registry.create()
    return {"session_id": session_id, "text": ""}


@router.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(session_id: str, entry=Depends(get_session_entry)):
    s, _ = entry
    return {"session_id": session_id, "text": s.text}


@router.post("/sessions/{session_id}/frames", response_model=StepOut)
def post_frame(payload: FrameIn, entry=Depends(get_session_entry)):
    s, lock = entry
    with lock:
        try:
            return s.process_hand(payload.keypoints or None)
        except InvalidFrame as e:
            raise HTTPException(status_code=422, detail=str(e))


@router.post("/sessions/{session_id}/clear", response_model=SessionOut)
def clear_text(session_id: str, entry=Depends(get_session_entry)):
    s, lock = entry
    with lock:
        text = s.clear()
    return {"session_id": session_id, "text": text}


@router.post("/sessions/{session_id}/backspace", response_model=SessionOut)
def backspace(session_id: str, entry=Depends(get_session_entry)):
    s, lock = entry
    with lock:
        text = s.backspace()
    return {"session_id": session_id, "text": text}


@router.delete("/sessions/{session_id}")
def finish_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    if not registry.remove(session_id):
        raise HTTPException(404, "Session not found")
    return {"ok": True}

from fastapi import Depends, HTTPException, Request

from .registry import SessionRegistry


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_session_entry(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    entry = registry.get(session_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return entry

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .registry import SessionRegistry
from .routes import classify, sessions, symbols
from handspell.backend.api.ws import router as ws_router
from handspell.backend.ml.fingerspell import FingerspellConfig, load_config


def create_app(config: Optional[FingerspellConfig] = None) -> FastAPI:
    app = FastAPI(title="Handspell API")
    app.state.registry = SessionRegistry(config or load_config())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(symbols.router)
    app.include_router(classify.router)
    app.include_router(sessions.router)
    app.include_router(ws_router)
    return app

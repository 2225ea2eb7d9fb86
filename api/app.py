from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import get_session
from api.routes.progress import router as progress_router
from api.routes.sections import router as sections_router
from api.routes.session import router as session_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail at startup rather than on the first request if the document is missing.
    session = get_session()
    if session.deck.is_empty:
        logger.warning("Question document has no sections; session endpoints will return 409")
    else:
        logger.info(
            "Loaded %s sections with %s questions, cursor at %s",
            len(session.deck.sections),
            session.deck.total_questions,
            session.cursor,
        )
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Flashdeck Study API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sections_router)
    app.include_router(progress_router)
    app.include_router(session_router)

    @app.get("/healthz")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()

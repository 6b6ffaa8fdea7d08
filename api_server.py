from __future__ import annotations  # FastAPI server exposing visa interview practice sessions

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from question_bank import init_question_bank

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # Load the question bank once; failure aborts startup
    bank = init_question_bank()
    logger.info("Question bank ready: %d questions from %s", len(bank), bank.source)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Visa Interview Practice API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()

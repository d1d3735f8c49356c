"""Word Quest practice engine – FastAPI application entry point."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from wordquest.config import settings

# --- Configure logging so wordquest.* loggers are visible alongside uvicorn ---
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:    %(name)s - %(message)s",
    stream=sys.stdout,
    force=True,  # override uvicorn's config
)

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    log.info(
        "Practice engine ready – mix %d/%d/%d%%, mastery at >= %.0f%% best accuracy",
        settings.needs_practice_pct,
        settings.maintenance_pct,
        100 - settings.needs_practice_pct - settings.maintenance_pct,
        settings.mastered_best_accuracy,
    )
    yield
    log.info("Practice engine shut down")


app = FastAPI(title="Word Quest Practice Engine", version="0.1.0", lifespan=lifespan)

# --- Register routers ---
from wordquest.routes.practice import router as practice_router  # noqa: E402

app.include_router(practice_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

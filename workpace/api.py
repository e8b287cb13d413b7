from __future__ import annotations

from typing import Any, Dict
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workpace.settings import Settings, configure_logging
from workpace.work_calendar.api import router as calendar_router
from workpace.work_progress.api import router as progress_router
from workpace.pace_planning.api import router as pace_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Workpace – deadline pacing")
app.include_router(calendar_router)
app.include_router(progress_router)
app.include_router(pace_router)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=Settings.get_config().cors_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------
# Endpoints
# -------------------------------

@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/settings")
def get_settings() -> Dict[str, Any]:
    return Settings.to_dict()

"""
Workpace - Pace API
===================

Endpoints:
- POST /pace/calculate     - Pace of one deadline
- POST /pace/most-urgent   - Most urgent of several works
- POST /pace/overview      - Deadline overview of several works

``today`` defaults to the server's local date when omitted.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..work_calendar.api import AvailabilityModel, CustomDateModel, HolidayModel
from ..work_progress.work_model import Work
from .deadline_overview import deadline_overview
from .pace_engine import calculate_pace
from .urgency_ranking import build_urgency_candidates, pick_most_urgent, rank_works_by_urgency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pace", tags=["Pace"])


# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST MODELS
# ═══════════════════════════════════════════════════════════════════════════════

class CalendarContext(BaseModel):
    availability: AvailabilityModel
    holidays: List[HolidayModel] = Field(default_factory=list)
    custom_dates: List[CustomDateModel] = Field(default_factory=list)
    today: Optional[dt.date] = Field(default=None, description="Reference day (default: server date)")

    def reference_day(self) -> dt.date:
        return self.today or dt.date.today()


class PaceRequest(CalendarContext):
    deadline: dt.date
    remaining_hours: float = Field(..., ge=0)
    progress_ratio: float = Field(default=0.0, ge=0, description="Current progress 0..1 (informational)")


class WorksRequest(CalendarContext):
    works: List[Dict[str, Any]] = Field(default_factory=list)
    scale_by_granularity: bool = False


def _parse_works(items: List[Dict[str, Any]]) -> List[Work]:
    try:
        return [Work.from_dict(item) for item in items]
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid work: {e}")


# ═══════════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("/calculate")
async def post_calculate_pace(request: PaceRequest):
    """Required daily hours and pace status for one deadline."""
    pace = calculate_pace(
        request.deadline,
        request.remaining_hours,
        request.progress_ratio,
        request.availability.to_profile(),
        [h.to_holiday() for h in request.holidays],
        [c.to_override() for c in request.custom_dates],
        today=request.reference_day(),
    )
    return pace.to_dict()


@router.post("/most-urgent")
async def post_most_urgent(request: WorksRequest):
    """The most urgent open work, plus the full ranking."""
    candidates = build_urgency_candidates(
        _parse_works(request.works),
        request.availability.to_profile(),
        [h.to_holiday() for h in request.holidays],
        [c.to_override() for c in request.custom_dates],
        today=request.reference_day(),
        scale_by_granularity=request.scale_by_granularity,
    )

    def describe(candidate) -> Dict[str, Any]:
        return {
            "work_id": candidate.work.id,
            "title": candidate.work.title,
            "remaining_hours": round(candidate.remaining_hours, 2),
            "pace": candidate.pace.to_dict(),
        }

    best = pick_most_urgent(candidates)
    return {
        "most_urgent": describe(best) if best is not None else None,
        "ranking": [describe(c) for c in rank_works_by_urgency(candidates)],
    }


@router.post("/overview")
async def post_overview(request: WorksRequest):
    """Deadline overview sorted by deadline."""
    rows = deadline_overview(
        _parse_works(request.works),
        request.availability.to_profile(),
        [h.to_holiday() for h in request.holidays],
        [c.to_override() for c in request.custom_dates],
        today=request.reference_day(),
    )
    return {"count": len(rows), "works": [row.to_dict() for row in rows]}

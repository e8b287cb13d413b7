"""
Workpace - Calendar API
=======================

Endpoints:
- GET  /calendar/holidays/{year}   - National holidays (official list when available)
- POST /calendar/workable-hours    - Available hours over an inclusive date range
"""

from __future__ import annotations

import logging
import datetime as dt
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field, field_validator

from .availability import AvailabilityProfile, CustomDateKind, CustomDateOverride
from .holiday_calendar import Holiday, holidays_for_year
from .official_holidays import OfficialHolidayProvider
from .workable_hours import daily_hours_frame, workable_hours_breakdown

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["Calendar"])

# One provider (and HTTP session) per process, created on first use
_official_provider: Optional[OfficialHolidayProvider] = None


def get_official_provider() -> OfficialHolidayProvider:
    global _official_provider
    if _official_provider is None:
        _official_provider = OfficialHolidayProvider()
    return _official_provider


# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST/RESPONSE MODELS
# ═══════════════════════════════════════════════════════════════════════════════

class HolidayModel(BaseModel):
    name: str
    date: dt.date

    def to_holiday(self) -> Holiday:
        return Holiday(date=self.date, name=self.name)


class CustomDateModel(BaseModel):
    date: dt.date
    kind: CustomDateKind = CustomDateKind.CUSTOM_HOURS
    hours: Optional[float] = None

    def to_override(self) -> CustomDateOverride:
        return CustomDateOverride(date=self.date, hours=self.hours, kind=self.kind)


class AvailabilityModel(BaseModel):
    """Hours per weekday plus the holiday value."""
    monday: float = Field(default=0.0, ge=0)
    tuesday: float = Field(default=0.0, ge=0)
    wednesday: float = Field(default=0.0, ge=0)
    thursday: float = Field(default=0.0, ge=0)
    friday: float = Field(default=0.0, ge=0)
    saturday: float = Field(default=0.0, ge=0)
    sunday: float = Field(default=0.0, ge=0)
    holiday: float = Field(default=0.0, ge=0)

    def to_profile(self) -> AvailabilityProfile:
        return AvailabilityProfile.from_dict(self.model_dump())


class WorkableHoursRequest(BaseModel):
    start: dt.date
    end: dt.date
    availability: AvailabilityModel
    holidays: List[HolidayModel] = Field(default_factory=list)
    custom_dates: List[CustomDateModel] = Field(default_factory=list)
    include_days: bool = Field(default=False, description="Include the per-day breakdown")

    @field_validator("end")
    @classmethod
    def end_not_before_start(cls, v: dt.date, info):
        start = info.data.get("start")
        if start is not None and v < start:
            raise ValueError("end must not be before start")
        return v


# ═══════════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("/holidays/{year}")
def get_holidays(
    year: int,
    official: bool = Query(default=False, description="Prefer the official Cabinet Office list"),
):
    """
    National holidays of ``year`` including substitute holidays.

    With ``official=true`` the cached/fetched government list is used when it
    covers the year; otherwise the calculated calendar answers. Declared
    synchronous so the blocking fetch runs in the threadpool.
    """
    if year < 1900 or year > 2999:
        raise HTTPException(status_code=400, detail=f"Unsupported year: {year}")

    if official:
        holidays = get_official_provider().holidays_for_year(year)
        source = "official_or_calculated"
    else:
        holidays = holidays_for_year(year)
        source = "calculated"

    return {
        "year": year,
        "source": source,
        "count": len(holidays),
        "holidays": [h.to_dict() for h in holidays],
    }


@router.post("/workable-hours")
async def post_workable_hours(request: WorkableHoursRequest) -> Dict[str, Any]:
    """Total available hours and workable days over [start, end]."""
    profile = request.availability.to_profile()
    holidays = [h.to_holiday() for h in request.holidays]
    overrides = [c.to_override() for c in request.custom_dates]

    result = workable_hours_breakdown(request.start, request.end, profile, holidays, overrides)
    response: Dict[str, Any] = {
        "start": request.start.isoformat(),
        "end": request.end.isoformat(),
        **result.to_dict(),
    }

    if request.include_days:
        df = daily_hours_frame(request.start, request.end, profile, holidays, overrides)
        df["date"] = df["date"].dt.strftime("%Y-%m-%d")
        response["days"] = df.to_dict(orient="records")

    return response

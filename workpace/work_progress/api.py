"""
Workpace - Progress API
=======================

Endpoints:
- POST /progress/summary     - Progress %, completed / remaining hours, stage breakdown
- POST /progress/structure   - Parse (and optionally apply) a structure string
- POST /progress/history     - Continuous daily series from progress snapshots
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .progress_engine import summarize_progress
from .progress_history import ProgressSnapshot, progress_series
from .structure_parser import StructureParseError, format_structure, parse_structure
from .unit_tree import tree_depth
from .work_model import Work, units_to_list

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["Progress"])


# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST MODELS
# ═══════════════════════════════════════════════════════════════════════════════

class ProgressSummaryRequest(BaseModel):
    work: Dict[str, Any] = Field(..., description="Work document (units, stage_workloads, ...)")
    scale_by_granularity: bool = Field(default=False, description="Scale remaining hours to the primary granularity")


class StructureRequest(BaseModel):
    structure: str = Field(..., description='e.g. "[1/2/3],[[1/2][3/4]]"')
    expected_depth: Optional[int] = Field(default=None, ge=1)
    work: Optional[Dict[str, Any]] = Field(default=None, description="Work to apply the structure to")


class ProgressHistoryRequest(BaseModel):
    work: Dict[str, Any]
    history: List[Dict[str, Any]] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("/summary")
async def post_progress_summary(request: ProgressSummaryRequest):
    """Progress summary of one work."""
    try:
        work = Work.from_dict(request.work)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid work: {e}")
    return summarize_progress(work, scale_by_granularity=request.scale_by_granularity).to_dict()


@router.post("/structure")
async def post_structure(request: StructureRequest):
    """
    Parse a structure string.

    Returns the unit tree and its normalized notation; with ``work`` also the
    updated work and its progress summary.
    """
    try:
        units = parse_structure(request.structure, request.expected_depth)
    except StructureParseError as e:
        raise HTTPException(status_code=400, detail=str(e))

    response: Dict[str, Any] = {
        "structure": format_structure(units),
        "depth": tree_depth(units),
        "top_level_units": len(units),
        "units": units_to_list(units),
    }

    if request.work is not None:
        try:
            work = Work.from_dict(request.work).with_units(units)
        except (TypeError, ValueError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid work: {e}")
        response["work"] = work.to_dict()
        response["summary"] = summarize_progress(work).to_dict()

    return response


@router.post("/history")
async def post_progress_history(request: ProgressHistoryRequest):
    """Daily completed-hours series (gaps forward-filled)."""
    try:
        work = Work.from_dict(request.work)
        history = [ProgressSnapshot.from_dict(item) for item in request.history]
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    summary = summarize_progress(work)
    df = progress_series(history, work.stage_workloads, total_hours=summary.total_hours)
    if not df.empty:
        df["date"] = df["date"].dt.strftime("%Y-%m-%d")

    return {
        "work_id": work.id,
        "total_hours": round(summary.total_hours, 2),
        "points": df.to_dict(orient="records"),
    }

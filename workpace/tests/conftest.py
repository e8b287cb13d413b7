"""
Common fixtures for the workpace tests.
"""
import pytest
from datetime import date
from typing import Callable, Optional, Sequence

from fastapi.testclient import TestClient

from workpace.settings import Settings
from workpace.work_calendar.availability import AvailabilityProfile, DayKey, default_profile
from workpace.work_progress.work_model import (
    DEFAULT_GRANULARITIES,
    DEFAULT_STAGE_WORKLOADS,
    BranchUnit,
    LeafUnit,
    StageWorkload,
    Work,
    WorkStatus,
)

SETTINGS_ENV_VARS = (
    "WORKPACE_HOLIDAY_SOURCE_URL",
    "WORKPACE_HOLIDAY_CACHE_PATH",
    "WORKPACE_PREFER_OFFICIAL_HOLIDAYS",
    "WORKPACE_HTTP_TIMEOUT",
    "WORKPACE_LOG_LEVEL",
    "WORKPACE_CORS_ORIGIN_REGEX",
)


@pytest.fixture
def monday():
    """A Monday without holidays in its week (2026-10-19)."""
    return date(2026, 10, 19)


@pytest.fixture
def profile():
    """8h Monday to Friday, nothing on weekends and holidays."""
    return default_profile()


@pytest.fixture
def weekend_profile():
    """4h every day, 2h on holidays."""
    hours = {key: 4.0 for key in DayKey}
    hours[DayKey.HOLIDAY] = 2.0
    return AvailabilityProfile(hours=hours)


@pytest.fixture
def stage_workloads():
    """Default stages: cumulative hours 0 / 0.5 / 1.5 / 2.0."""
    return DEFAULT_STAGE_WORKLOADS


@pytest.fixture
def work_factory() -> Callable[..., Work]:
    """
    Build a work whose top-level units are branches of leaves.

    ``leaf_stages`` is one list of stage indices per top-level unit.
    """

    def make(
        work_id: str,
        leaf_stages: Sequence[Sequence[int]],
        deadline: Optional[date] = None,
        status: WorkStatus = WorkStatus.IN_PROGRESS,
        stage_workloads: Sequence[StageWorkload] = DEFAULT_STAGE_WORKLOADS,
    ) -> Work:
        units = tuple(
            BranchUnit(
                id=f"{work_id}-{i + 1}",
                index=i + 1,
                children=tuple(
                    LeafUnit(id=f"{work_id}-{i + 1}-{j + 1}", index=j + 1, stage_index=stage)
                    for j, stage in enumerate(stages)
                ),
            )
            for i, stages in enumerate(leaf_stages)
        )
        return Work(
            id=work_id,
            title=f"Work {work_id}",
            status=status,
            deadline=deadline,
            units=units,
            stage_workloads=tuple(stage_workloads),
            granularities=DEFAULT_GRANULARITIES,
            primary_granularity_id="page",
            default_counts=(len(leaf_stages[0]) if leaf_stages else 1,),
            total_units=len(units),
        )

    return make


@pytest.fixture
def clean_settings(monkeypatch):
    """Settings loaded from an environment without WORKPACE_* variables."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    Settings.reset()
    yield monkeypatch
    Settings.reset()


@pytest.fixture(scope="function")
def test_client():
    """FastAPI test client."""
    from workpace.api import app
    return TestClient(app)

from datetime import date

from fastapi import APIRouter, Depends, Query

from pomoplus.clock import Clock
from pomoplus.dependencies import get_clock, get_session_store, get_timer
from pomoplus.schemas.stats import HeatmapView, SeriesView, SummaryView
from pomoplus.services import stats_service
from pomoplus.services.session_service import SessionStore
from pomoplus.services.timer_controller import SessionTimer

router = APIRouter(prefix="/stats", tags=["stats"])


def _reference_date(day: date | None, clock: Clock) -> date:
    if day is not None:
        return day
    return stats_service.today(clock.now(), stats_service.resolve_timezone())


@router.get("/weekly", response_model=SeriesView)
async def get_weekly(
    tag: str | None = Query(default=None, min_length=1),
    day: date | None = Query(default=None, alias="date"),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
):
    records = await store.list_all()
    return stats_service.weekly_view(
        records, _reference_date(day, clock), tag=tag, tz=stats_service.resolve_timezone()
    )


@router.get("/monthly", response_model=SeriesView)
async def get_monthly(
    tag: str | None = Query(default=None, min_length=1),
    day: date | None = Query(default=None, alias="date"),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
):
    records = await store.list_all()
    return stats_service.monthly_view(
        records, _reference_date(day, clock), tag=tag, tz=stats_service.resolve_timezone()
    )


@router.get("/heatmap", response_model=HeatmapView)
async def get_heatmap(
    day: date | None = Query(default=None, alias="date"),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
):
    records = await store.list_all()
    return stats_service.heatmap_view(
        records, _reference_date(day, clock), tz=stats_service.resolve_timezone()
    )


@router.get("/summary", response_model=SummaryView)
async def get_summary(
    day: date | None = Query(default=None, alias="date"),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
):
    records = await store.list_all()
    return stats_service.summary_view(
        records, _reference_date(day, clock), tz=stats_service.resolve_timezone()
    )


@router.get("/filters", response_model=list[str | None])
async def get_tag_filters(timer: SessionTimer = Depends(get_timer)):
    return stats_service.tag_filters(timer.registry.list())

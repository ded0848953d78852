from datetime import date

from pydantic import BaseModel


class Bucket(BaseModel):
    period_start: date
    label: str  # "2026-10-17" for days, "2026-10" for months
    tag: str | None  # None means all tags
    seconds: int


class SeriesView(BaseModel):
    period: str  # weekly, monthly
    reference_date: date
    tag: str | None
    buckets: list[Bucket]
    total_seconds: int


class HeatmapDay(BaseModel):
    date: date
    seconds: int
    tier: int  # 0 = no activity, 1-4 = increasing intensity


class HeatmapView(BaseModel):
    reference_date: date
    start_date: date
    end_date: date
    days: list[HeatmapDay]
    # Lower bound in seconds of tiers 1-4, recomputed from the data on every call
    tier_bounds: list[float]
    max_seconds: int


class SummaryView(BaseModel):
    reference_date: date
    today_seconds: int
    week_seconds: int
    current_streak: int

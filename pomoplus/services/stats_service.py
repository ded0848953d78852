"""Weekly, monthly and heatmap views over completed sessions.

All views are pure functions of the records and a reference date. A record
counts entirely towards the local calendar day (and month) of its start time,
even when the interval runs past midnight.
"""
import calendar
from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from pomoplus.config import settings
from pomoplus.schemas.session import SessionRecord
from pomoplus.schemas.stats import Bucket, HeatmapDay, HeatmapView, SeriesView, SummaryView
from pomoplus.schemas.timer import Phase

TIER_COUNT = 4


def resolve_timezone(name: str | None = None) -> tzinfo | None:
    """Configured reporting timezone; None means the process's local time."""
    name = settings.TIMEZONE if name is None else name
    return ZoneInfo(name) if name else None


def local_day(moment: datetime, tz: tzinfo | None = None) -> date:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def today(now: datetime, tz: tzinfo | None = None) -> date:
    return local_day(now, tz)


def shift_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def month_start(day: date) -> date:
    return day.replace(day=1)


def _work_totals(
    records: Iterable[SessionRecord],
    key: Callable[[date], date],
    tag: str | None,
    tz: tzinfo | None,
) -> dict[date, int]:
    totals: dict[date, int] = defaultdict(int)
    for record in records:
        if record.phase is not Phase.WORK:
            continue
        if tag is not None and record.tag != tag:
            continue
        totals[key(local_day(record.start_time, tz))] += record.duration_seconds
    return totals


def _daily_keys(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def weekly_view(
    records: Iterable[SessionRecord],
    reference_date: date,
    tag: str | None = None,
    tz: tzinfo | None = None,
    days: int | None = None,
) -> SeriesView:
    days = settings.WEEKLY_DAYS if days is None else days
    start = reference_date - timedelta(days=days - 1)
    keys = _daily_keys(start, reference_date)
    totals = _work_totals(records, lambda d: d, tag, tz)
    buckets = [
        Bucket(period_start=d, label=d.isoformat(), tag=tag, seconds=totals.get(d, 0))
        for d in keys
    ]
    return SeriesView(
        period="weekly",
        reference_date=reference_date,
        tag=tag,
        buckets=buckets,
        total_seconds=sum(b.seconds for b in buckets),
    )


def monthly_view(
    records: Iterable[SessionRecord],
    reference_date: date,
    tag: str | None = None,
    tz: tzinfo | None = None,
    months: int | None = None,
) -> SeriesView:
    """One bucket per calendar month, from ``months`` before the reference month through it."""
    months = settings.MONTHLY_MONTHS if months is None else months
    current = month_start(reference_date)
    keys = [shift_months(current, -offset) for offset in range(months, -1, -1)]
    totals = _work_totals(records, month_start, tag, tz)
    buckets = [
        Bucket(period_start=m, label=m.strftime("%Y-%m"), tag=tag, seconds=totals.get(m, 0))
        for m in keys
    ]
    return SeriesView(
        period="monthly",
        reference_date=reference_date,
        tag=tag,
        buckets=buckets,
        total_seconds=sum(b.seconds for b in buckets),
    )


def intensity_tiers(values: Iterable[int]) -> tuple[list[float], Callable[[int], int]]:
    """Split the observed non-zero range into four equal-width bands.

    Returns the lower bound of each band and a function mapping a value to
    its tier, 0 for no activity. Bounds come from the data passed in, so
    tiers from two different data sets are not comparable.
    """
    nonzero = [v for v in values if v > 0]
    if not nonzero:
        return [], lambda value: 0
    low, high = min(nonzero), max(nonzero)
    span = high - low
    bounds = [low + span * i / TIER_COUNT for i in range(TIER_COUNT)]

    def tier(value: int) -> int:
        if value <= 0:
            return 0
        if span == 0:
            return TIER_COUNT
        return min(TIER_COUNT, 1 + (value - low) * TIER_COUNT // span)

    return bounds, tier


def heatmap_view(
    records: Iterable[SessionRecord],
    reference_date: date,
    tz: tzinfo | None = None,
    months: int | None = None,
) -> HeatmapView:
    months = settings.HEATMAP_MONTHS if months is None else months
    start = shift_months(reference_date, -months)
    keys = _daily_keys(start, reference_date)
    totals = _work_totals(records, lambda d: d, None, tz)
    values = [totals.get(d, 0) for d in keys]
    bounds, tier = intensity_tiers(values)
    return HeatmapView(
        reference_date=reference_date,
        start_date=start,
        end_date=reference_date,
        days=[HeatmapDay(date=d, seconds=v, tier=tier(v)) for d, v in zip(keys, values)],
        tier_bounds=bounds,
        max_seconds=max(values, default=0),
    )


def current_streak(totals: dict[date, int], reference_date: date) -> int:
    """Consecutive days with work activity, ending at the reference date."""
    streak = 0
    expected = reference_date
    while totals.get(expected, 0) > 0:
        streak += 1
        expected -= timedelta(days=1)
    return streak


def summary_view(
    records: Iterable[SessionRecord],
    reference_date: date,
    tz: tzinfo | None = None,
) -> SummaryView:
    records = list(records)
    totals = _work_totals(records, lambda d: d, None, tz)
    week = weekly_view(records, reference_date, tz=tz)
    return SummaryView(
        reference_date=reference_date,
        today_seconds=totals.get(reference_date, 0),
        week_seconds=week.total_seconds,
        current_streak=current_streak(totals, reference_date),
    )


def tag_filters(tags: Iterable[str]) -> list[str | None]:
    """Filters the statistics screen cycles through: None for all tags, then each tag."""
    return [None, *tags]

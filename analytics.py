from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Union
import pandas as pd

from logging_setup import get_logger
from model import (
    DashboardBundle,
    Granularity,
    ItemTally,
    SalesSummary,
    TimeBucket,
    TransactionRecord,
)

log = get_logger("seller_dashboard.analytics")

AUTO = "auto"
GRANULARITIES = ("day", "week", "month", "year")
# (max span in days, granularity), checked in order, anything longer is "year"
GRANULARITY_THRESHOLDS = ((7, "day"), (90, "week"), (365, "month"))

# open-ended range bounds, wide enough for any real sales log
RANGE_FLOOR = date(2000, 1, 1)
RANGE_CEILING = date(2100, 1, 1)

DEFAULT_TOP_N = 10

DateLike = Union[date, datetime, None]


def _as_date(value: DateLike) -> Optional[date]:
    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        return value.date()
    return value


"""
    inclusive [start, end] filter on the record date
    start/end are whole local days; a missing bound falls back to
    RANGE_FLOOR / RANGE_CEILING. no bounds at all returns a copy as is
"""
def filter_records(
    records: Sequence[TransactionRecord],
    start: DateLike = None,
    end: DateLike = None,
) -> List[TransactionRecord]:
    start, end = _as_date(start), _as_date(end)
    if start is None and end is None:
        return list(records)

    lo = start if start is not None else RANGE_FLOOR
    hi = end if end is not None else RANGE_CEILING
    return [r for r in records if lo <= r.date <= hi]


def span_days(records: Sequence[TransactionRecord]) -> int:
    """Days between the earliest and latest record, by min/max so input order doesn't matter."""
    if not records:
        return 0
    dates = [r.date for r in records]
    return (max(dates) - min(dates)).days


def select_granularity(
    records: Sequence[TransactionRecord],
    explicit: Optional[str] = None,
) -> Granularity:
    """
    Bucket size for the trend series.

    An explicit choice other than "auto" always wins. Otherwise the span of the
    records picks it: <= 7 days -> day, <= 90 -> week, <= 365 -> month, else year.
    An empty record set has nothing to bucket and gets "day".
    """
    if explicit is not None and explicit != AUTO:
        if explicit not in GRANULARITIES:
            raise ValueError(
                f"unknown granularity {explicit!r}, expected one of {GRANULARITIES + (AUTO,)}"
            )
        return explicit  # type: ignore[return-value]

    span = span_days(records)
    for limit, granularity in GRANULARITY_THRESHOLDS:
        if span <= limit:
            return granularity  # type: ignore[return-value]
    return "year"


def bucket_start(d: date, granularity: str) -> date:
    # weeks start on monday
    if granularity == "day":
        return d
    if granularity == "week":
        return d - timedelta(days=d.weekday())
    if granularity == "month":
        return d.replace(day=1)
    if granularity == "year":
        return d.replace(month=1, day=1)
    raise ValueError(f"unknown granularity {granularity!r}")


"""
    time bucketed profit / net revenue (payment - gst) series

    Returns buckets sorted by start, only for periods that have records
    (no zero filled gaps)
"""
def aggregate(records: Sequence[TransactionRecord], granularity: str) -> List[TimeBucket]:
    if not records:
        return []

    df = pd.DataFrame(
        {
            "bucket": [bucket_start(r.date, granularity) for r in records],
            "profit": [r.profit for r in records],
            "net_revenue": [r.net_revenue for r in records],
        }
    )

    ts = (
        df.groupby("bucket", sort=True)
        .agg(total_profit=("profit", "sum"), net_revenue=("net_revenue", "sum"))
        .reset_index()
    )

    return [
        TimeBucket(
            start=row.bucket,
            total_profit=float(row.total_profit),
            net_revenue=float(row.net_revenue),
        )
        for row in ts.itertuples(index=False)
    ]


"""
    top items by summed quantity
    missing labels are their own group; equal totals keep first-seen order
"""
def rank_items(records: Sequence[TransactionRecord], top_n: int = DEFAULT_TOP_N) -> List[ItemTally]:
    totals: Dict[Optional[str], int] = {}
    for r in records:
        totals[r.item] = totals.get(r.item, 0) + r.quantity

    # sorted() is stable, ties stay in insertion (first-seen) order
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [ItemTally(name=name, value=value) for name, value in ranked[: max(top_n, 0)]]


def summarize(records: Sequence[TransactionRecord]) -> SalesSummary:
    # returns and cancellations are counted and summed like any other order
    return SalesSummary(
        order_count=len(records),
        returns_count=sum(1 for r in records if r.is_return),
        gross_profit=sum((r.profit for r in records), 0.0),
        gross_revenue=sum((r.net_revenue for r in records), 0.0),
    )


# ---- chart helpers ----

def series_span_days(series: Sequence[TimeBucket]) -> int:
    if not series:
        return 0
    return (series[-1].start - series[0].start).days


def format_bucket_label(start: date, span: int) -> str:
    """Axis label for a bucket, coarser as the plotted span grows."""
    if span <= 7:
        return start.strftime("%b %d")
    if span <= 90:
        return start.strftime("%b %y")
    if span <= 365:
        return start.strftime("%b %Y")
    return start.strftime("%Y")


def series_frame(series: Sequence[TimeBucket]) -> pd.DataFrame:
    cols = ["date", "label", "total_profit", "net_revenue"]
    if not series:
        return pd.DataFrame(columns=cols)

    span = series_span_days(series)
    return pd.DataFrame(
        [
            {
                "date": b.start,
                "label": format_bucket_label(b.start, span),
                "total_profit": b.total_profit,
                "net_revenue": b.net_revenue,
            }
            for b in series
        ],
        columns=cols,
    )


def items_frame(items: Sequence[ItemTally]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"name": i.name, "value": i.value} for i in items],
        columns=["name", "value"],
    )


def build_dashboard(
    records: Sequence[TransactionRecord],
    start: DateLike = None,
    end: DateLike = None,
    interval: Optional[str] = AUTO,
    top_n: int = DEFAULT_TOP_N,
) -> DashboardBundle:
    """
    Run filter -> granularity -> aggregate / rank / summarize for one set of
    user choices. Every call starts from scratch, nothing is cached here.
    """
    filtered = filter_records(records, start, end)
    log.info("filtered %d of %d records (start=%s, end=%s)", len(filtered), len(records), start, end)

    if not filtered:
        return DashboardBundle(
            records=[],
            granularity=None,
            series=[],
            top_items=[],
            summary=summarize([]),
        )

    granularity = select_granularity(filtered, interval)
    log.debug("granularity=%s (requested %s, span %d days)", granularity, interval, span_days(filtered))

    return DashboardBundle(
        records=filtered,
        granularity=granularity,
        series=aggregate(filtered, granularity),
        top_items=rank_items(filtered, top_n),
        summary=summarize(filtered),
    )

"""
Read-only aggregate views over entries.

Each view body is written once as a SQLAlchemy select; ``db.migrations``
compiles it into CREATE VIEW DDL for the connected dialect, and the store
reads the views back through the lightweight ``table()`` handles below.
"""

from sqlalchemy import Integer, column, func, select, table

from .entry import Entry

_day = func.date(Entry.created_at)
_total = func.sum(Entry.quantity)

DAILY_STATS_QUERY = (
    select(
        _day.label("date"),
        func.count().label("entry_count"),
        _total.label("total_quantity"),
        func.avg(Entry.quantity).label("avg_quantity"),
    )
    .group_by(_day)
    .order_by(_day.desc())
)

LOCATION_STATS_QUERY = (
    select(
        Entry.location.label("location"),
        func.count().label("entry_count"),
        _total.label("total_quantity"),
    )
    .group_by(Entry.location)
    .order_by(_total.desc(), Entry.location)
)

# date and avg come back as driver-native values (str/date, float/Decimal);
# the store normalises them.
daily_stats = table(
    "daily_stats",
    column("date"),
    column("entry_count", Integer),
    column("total_quantity", Integer),
    column("avg_quantity"),
)

location_stats = table(
    "location_stats",
    column("location"),
    column("entry_count", Integer),
    column("total_quantity", Integer),
)

VIEWS = {
    "daily_stats": DAILY_STATS_QUERY,
    "location_stats": LOCATION_STATS_QUERY,
}

"""Entry domain — the immutable diary records and the store over them."""

from meridian.entries.dates import (
    format_date,
    format_date_short,
    group_by_month,
    month_year,
)
from meridian.entries.models import Entry
from meridian.entries.store import EntryStore

__all__ = [
    "Entry",
    "EntryStore",
    "format_date",
    "format_date_short",
    "group_by_month",
    "month_year",
]

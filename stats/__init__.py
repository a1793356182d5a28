"""Statistical helper utilities for the crime insight dashboard."""

from .crime_stats import (
    BY_DAY_WINDOW,
    compute_stats,
    empty_stats,
    incidents_frame,
    peak_hour,
    type_breakdown,
    hourly_frame,
    daily_frame,
)

__all__ = [
    'BY_DAY_WINDOW',
    'compute_stats',
    'empty_stats',
    'incidents_frame',
    'peak_hour',
    'type_breakdown',
    'hourly_frame',
    'daily_frame',
]

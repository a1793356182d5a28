"""Aggregations over the live incident set for the statistics and insight views."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from models import CaseStatus, CrimeStats, CrimeType, Incident
from utils.crime_taxonomy import display_label


HOURS_PER_DAY = 24
BY_DAY_WINDOW = 30

INCIDENT_COLUMNS = ['id', 'type', 'latitude', 'longitude', 'date_time', 'status', 'description', 'location']


def incidents_frame(incidents: Sequence[Incident]) -> pd.DataFrame:
    """Flatten incidents into a frame with plain string enum values."""
    frame = pd.DataFrame(
        [
            (inc.id, inc.type.value, inc.latitude, inc.longitude, inc.date_time,
             inc.status.value, inc.description, inc.location)
            for inc in incidents
        ],
        columns=INCIDENT_COLUMNS,
    )
    frame['date_time'] = pd.to_datetime(frame['date_time'])
    return frame


def empty_stats() -> CrimeStats:
    return CrimeStats(
        total_incidents=0,
        open_cases=0,
        closed_cases=0,
        by_type={crime_type: 0 for crime_type in CrimeType},
        by_hour=(0,) * HOURS_PER_DAY,
        by_day=(),
    )


def compute_stats(incidents: Sequence[Incident]) -> CrimeStats:
    """
    Reduce an incident set to counts by type, hour of day, calendar day and status

    Args:
    incidents (Sequence[Incident]): Current incident set

    Returns:
    CrimeStats: Snapshot where by_type carries every CrimeType and by_day keeps
    only the BY_DAY_WINDOW most recent dates present in the data
    """
    if not incidents:
        return empty_stats()

    frame = incidents_frame(incidents)

    type_counts = frame['type'].value_counts()
    by_type = {crime_type: int(type_counts.get(crime_type.value, 0)) for crime_type in CrimeType}

    by_hour = (
        frame['date_time'].dt.hour
        .value_counts()
        .reindex(range(HOURS_PER_DAY), fill_value=0)
    )

    # ISO date strings sort chronologically
    by_day = (
        frame['date_time'].dt.strftime('%Y-%m-%d')
        .value_counts()
        .sort_index()
        .tail(BY_DAY_WINDOW)
    )

    status_counts = frame['status'].value_counts()
    return CrimeStats(
        total_incidents=len(frame),
        open_cases=int(status_counts.get(CaseStatus.OPEN.value, 0)),
        closed_cases=int(status_counts.get(CaseStatus.CLOSED.value, 0)),
        by_type=by_type,
        by_hour=tuple(int(n) for n in by_hour.tolist()),
        by_day=tuple((str(day), int(n)) for day, n in by_day.items()),
    )


def peak_hour(by_hour: Sequence[int]) -> int:
    """Hour with the most incidents; the earliest hour wins a tie."""
    return max(range(len(by_hour)), key=by_hour.__getitem__)


def type_breakdown(stats: CrimeStats) -> pd.DataFrame:
    rows = [
        {'crime_type': crime_type.value, 'label': display_label(crime_type), 'count': count}
        for crime_type, count in stats.by_type.items()
        if count > 0
    ]
    frame = pd.DataFrame(rows, columns=['crime_type', 'label', 'count'])
    return frame.sort_values('count', ascending=False, kind='stable').reset_index(drop=True)


def hourly_frame(stats: CrimeStats) -> pd.DataFrame:
    return pd.DataFrame({
        'hour': [f'{hour:02d}:00' for hour in range(len(stats.by_hour))],
        'incidents': list(stats.by_hour),
    })


def daily_frame(stats: CrimeStats) -> pd.DataFrame:
    frame = pd.DataFrame(list(stats.by_day), columns=['date', 'incidents'])
    frame['date'] = pd.to_datetime(frame['date'])
    return frame

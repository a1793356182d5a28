"""Synthetic London incidents and patrol units used until a CSV is uploaded."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

import numpy as np

from models import CaseStatus, CrimeType, Incident, MapBounds, PatrolStatus, PatrolUnit
from utils.crime_taxonomy import display_label


DEMO_CITY = {
    'name': 'London, UK',
    'center': (51.5074, -0.1278),
    'zoom': 13,
}

DEMO_FILE_NAME = 'demo_london.csv'

SCATTER_TYPES = [t for t in CrimeType if t is not CrimeType.OTHER]
PROPERTY_TYPES = [CrimeType.THEFT, CrimeType.BURGLARY, CrimeType.VEHICLE_THEFT]
HOTSPOT_TYPES = [CrimeType.THEFT, CrimeType.ROBBERY, CrimeType.ASSAULT]
STATUSES = list(CaseStatus)

HOTSPOTS = [
    {'lat': 51.5155, 'lng': -0.0922, 'name': 'East London'},  # Shoreditch
    {'lat': 51.4975, 'lng': -0.1357, 'name': 'Central Westminster'},
    {'lat': 51.5074, 'lng': -0.0877, 'name': 'City of London'},
]
HOTSPOT_SIZE = 20
ZONE_COUNT = 12


def _random_date(rng: np.random.Generator, now: datetime, days_back: int) -> datetime:
    return now - timedelta(days=float(rng.random()) * days_back)


def generate_demo_incidents(
    count: int = 150,
    *,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Incident]:
    """
    Builds a scattered city-wide sample plus three dense hotspot clusters

    Args:
    count (int): Number of scattered incidents. Hotspot incidents come on top
    seed (int): Seed for reproducible output
    now (datetime): Reference time for the generated dates

    Returns:
    List[Incident]: count + 3 * HOTSPOT_SIZE incidents
    """
    rng = np.random.default_rng(seed)
    now = now or datetime.now()
    center_lat, center_lng = DEMO_CITY['center']
    incidents: List[Incident] = []

    for i in range(count):
        crime_type = SCATTER_TYPES[rng.integers(len(SCATTER_TYPES))]
        # skew the mix towards property crime
        if rng.random() > 0.7:
            crime_type = PROPERTY_TYPES[rng.integers(len(PROPERTY_TYPES))]

        incidents.append(Incident(
            id=f'INC-{1000 + i:05d}',
            type=crime_type,
            latitude=center_lat + float(rng.uniform(-0.08, 0.08)),
            longitude=center_lng + float(rng.uniform(-0.15, 0.15)),
            date_time=_random_date(rng, now, 30),
            status=STATUSES[rng.integers(len(STATUSES))],
            description=f'{display_label(crime_type)} incident reported',
            location=f'Zone {int(rng.integers(1, ZONE_COUNT + 1))}',
        ))

    for idx, hotspot in enumerate(HOTSPOTS):
        for i in range(HOTSPOT_SIZE):
            incidents.append(Incident(
                id=f'INC-HOTSPOT-{idx}-{i}',
                type=HOTSPOT_TYPES[rng.integers(len(HOTSPOT_TYPES))],
                latitude=hotspot['lat'] + float(rng.uniform(-0.01, 0.01)),
                longitude=hotspot['lng'] + float(rng.uniform(-0.01, 0.01)),
                date_time=_random_date(rng, now, 7),
                status=CaseStatus.OPEN,
                description=f"Hotspot incident in {hotspot['name']}",
                location=hotspot['name'],
            ))

    return incidents


def generate_patrol_units() -> List[PatrolUnit]:
    return [
        PatrolUnit('UNIT-01', 'Alpha-1', 51.5080, -0.1200, PatrolStatus.ON_PATROL),
        PatrolUnit('UNIT-02', 'Bravo-2', 51.5150, -0.0950, PatrolStatus.AVAILABLE),
        PatrolUnit('UNIT-03', 'Charlie-3', 51.5000, -0.1400, PatrolStatus.RESPONDING),
        PatrolUnit('UNIT-04', 'Delta-4', 51.5200, -0.1100, PatrolStatus.ON_PATROL),
        PatrolUnit('UNIT-05', 'Echo-5', 51.4950, -0.1000, PatrolStatus.OFF_DUTY),
    ]


def demo_bounds() -> MapBounds:
    return MapBounds(center=DEMO_CITY['center'], zoom=DEMO_CITY['zoom'])

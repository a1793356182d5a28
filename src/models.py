"""Canonical record shapes shared by ingestion, analytics and the dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple


class CrimeType(str, Enum):
    MURDER = 'MURDER'
    ASSAULT = 'ASSAULT'
    ROBBERY = 'ROBBERY'
    BURGLARY = 'BURGLARY'
    THEFT = 'THEFT'
    VEHICLE_THEFT = 'VEHICLE_THEFT'
    CYBER = 'CYBER'
    FRAUD = 'FRAUD'
    VANDALISM = 'VANDALISM'
    DRUG_OFFENSE = 'DRUG_OFFENSE'
    OTHER = 'OTHER'


class CaseStatus(str, Enum):
    OPEN = 'OPEN'
    CLOSED = 'CLOSED'
    UNDER_INVESTIGATION = 'UNDER_INVESTIGATION'


class PatrolStatus(str, Enum):
    AVAILABLE = 'AVAILABLE'
    ON_PATROL = 'ON_PATROL'
    RESPONDING = 'RESPONDING'
    OFF_DUTY = 'OFF_DUTY'


class InsightType(str, Enum):
    HOTSPOT = 'HOTSPOT'
    RESOURCE_GAP = 'RESOURCE_GAP'
    TREND = 'TREND'
    ALERT = 'ALERT'


class Severity(str, Enum):
    LOW = 'LOW'
    MEDIUM = 'MEDIUM'
    HIGH = 'HIGH'
    CRITICAL = 'CRITICAL'


@dataclass(frozen=True)
class Incident:
    id: str
    type: CrimeType
    latitude: float
    longitude: float
    date_time: datetime
    status: CaseStatus = CaseStatus.OPEN
    description: str = ''
    location: str = ''


@dataclass(frozen=True)
class PatrolUnit:
    id: str
    name: str
    latitude: float
    longitude: float
    status: PatrolStatus


@dataclass(frozen=True)
class MapBounds:
    center: Tuple[float, float]
    zoom: int


@dataclass(frozen=True)
class CrimeStats:
    """Aggregated snapshot of one incident set.

    ``by_type`` always carries every CrimeType, ``by_hour`` always has 24
    slots and ``by_day`` holds (ISO date, count) pairs in ascending order.
    """
    total_incidents: int
    open_cases: int
    closed_cases: int
    by_type: Dict[CrimeType, int] = field(default_factory=dict)
    by_hour: Tuple[int, ...] = (0,) * 24
    by_day: Tuple[Tuple[str, int], ...] = ()

    def to_dict(self) -> dict:
        return {
            'total_incidents': self.total_incidents,
            'open_cases': self.open_cases,
            'closed_cases': self.closed_cases,
            'by_type': {crime_type.value: count for crime_type, count in self.by_type.items()},
            'by_hour': list(self.by_hour),
            'by_day': [{'date': day, 'count': count} for day, count in self.by_day],
        }


@dataclass(frozen=True)
class AIInsight:
    id: str
    type: InsightType
    severity: Severity
    title: str
    description: str
    recommendation: str
    affected_area: Optional[str] = None
    crime_type: Optional[CrimeType] = None

    def to_dict(self) -> dict:
        payload = {
            'id': self.id,
            'type': self.type.value,
            'severity': self.severity.value,
            'title': self.title,
            'description': self.description,
            'recommendation': self.recommendation,
        }
        if self.affected_area is not None:
            payload['affected_area'] = self.affected_area
        if self.crime_type is not None:
            payload['crime_type'] = self.crime_type.value
        return payload

"""Utility helpers for folding free-text crime labels into the canonical CrimeType set."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Optional

from models import CaseStatus, CrimeType


_SEPARATORS = re.compile(r'[\s\-]+')

# Exact-match table keyed on canonical labels. No partial matching: anything
# missing here becomes OTHER.
CRIME_TYPE_SYNONYMS: Dict[str, CrimeType] = {
    # Violent crime
    'MURDER': CrimeType.MURDER,
    'HOMICIDE': CrimeType.MURDER,
    'ASSAULT': CrimeType.ASSAULT,
    'BATTERY': CrimeType.ASSAULT,
    'ROBBERY': CrimeType.ROBBERY,

    # Property crime
    'BURGLARY': CrimeType.BURGLARY,
    'BREAKING_AND_ENTERING': CrimeType.BURGLARY,
    'THEFT': CrimeType.THEFT,
    'LARCENY': CrimeType.THEFT,
    'VEHICLE_THEFT': CrimeType.VEHICLE_THEFT,
    'CAR_THEFT': CrimeType.VEHICLE_THEFT,
    'AUTO_THEFT': CrimeType.VEHICLE_THEFT,
    'MOTOR_VEHICLE_THEFT': CrimeType.VEHICLE_THEFT,  # CPD primary_type label
    'VANDALISM': CrimeType.VANDALISM,
    'CRIMINAL_DAMAGE': CrimeType.VANDALISM,

    # Financial / digital
    'CYBER': CrimeType.CYBER,
    'CYBERCRIME': CrimeType.CYBER,
    'FRAUD': CrimeType.FRAUD,

    # Narcotics
    'DRUG_OFFENSE': CrimeType.DRUG_OFFENSE,
    'DRUGS': CrimeType.DRUG_OFFENSE,
    'NARCOTICS': CrimeType.DRUG_OFFENSE,

    'OTHER': CrimeType.OTHER,
}

VIOLENT_TYPES = (CrimeType.MURDER, CrimeType.ASSAULT, CrimeType.ROBBERY)


def canonical_label(raw: Optional[str]) -> str:
    """Upper-case a raw label and collapse whitespace/hyphen runs into underscores."""
    if not raw:
        return ''
    return _SEPARATORS.sub('_', str(raw).strip().upper())


def normalize_crime_type(raw: Optional[str]) -> CrimeType:
    """Map a raw crime label to one CrimeType, OTHER when unrecognised."""
    return CRIME_TYPE_SYNONYMS.get(canonical_label(raw), CrimeType.OTHER)


def normalize_status(raw: Optional[str]) -> CaseStatus:
    """Map a raw case status to CaseStatus. Unrecognised values count as OPEN."""
    label = canonical_label(raw)
    if label in CaseStatus.__members__:
        return CaseStatus[label]
    return CaseStatus.OPEN


def is_violent(crime_type: CrimeType) -> bool:
    return crime_type in VIOLENT_TYPES


def display_label(crime_type: CrimeType) -> str:
    return crime_type.value.replace('_', ' ')


def expand_categories(labels: Iterable[str]) -> Dict[CrimeType, tuple]:
    """Group raw labels by the CrimeType they normalise to."""
    grouped: Dict[CrimeType, set] = {}
    for label in labels:
        grouped.setdefault(normalize_crime_type(label), set()).add(label)
    # Convert sets to sorted tuples for deterministic presentation
    return {crime_type: tuple(sorted(values)) for crime_type, values in grouped.items()}


__all__ = [
    'CRIME_TYPE_SYNONYMS',
    'VIOLENT_TYPES',
    'canonical_label',
    'normalize_crime_type',
    'normalize_status',
    'is_violent',
    'display_label',
    'expand_categories',
]

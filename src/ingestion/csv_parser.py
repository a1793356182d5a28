"""
CSV Ingestion - turn an uploaded crime CSV into canonical incidents.

Operations:
  - Decode the upload and read every cell as text
  - Resolve the header once against an ordered alias table per field
  - Drop rows without finite LATITUDE/LONGITUDE
  - Normalise crime type, status and date, filling defaults for the rest
"""

from __future__ import annotations

import io
import math
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from models import CrimeType, Incident
from utils.crime_taxonomy import expand_categories, normalize_crime_type, normalize_status
from utils.exceptions import EmptyDatasetError, MalformedFileError
from utils.logger_config import setup_logger

logger = setup_logger(__name__)

# Ordered aliases per logical field, compared case-insensitively with the
# stripped header names. Earlier aliases take precedence.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    'latitude': ('latitude', 'lat'),
    'longitude': ('longitude', 'lon', 'lng'),
    'crime_type': ('crime_type', 'crimetype', 'type'),
    'date_time': ('date_time', 'datetime', 'date'),
    'status': ('status',),
    'id': ('id',),
    'description': ('description',),
    'location': ('location',),
}

DEFAULT_ID_PREFIX = 'UPLOADED'

EXPECTED_FORMAT_SAMPLE = (
    'LATITUDE, LONGITUDE, CRIME_TYPE, DATE_TIME, STATUS\n'
    '51.5074, -0.1278, THEFT, 2024-01-15 14:30, OPEN\n'
    '51.5155, -0.0922, ASSAULT, 2024-01-15 23:45, CLOSED\n'
    '51.4975, -0.1357, BURGLARY, 2024-01-16 02:15, UNDER_INVESTIGATION\n'
)

ColumnMap = Dict[str, Tuple[int, ...]]


def read_table(content: Union[bytes, str]) -> pd.DataFrame:
    """
    Reads uploaded CSV content into a DataFrame of raw text cells

    Args:
    content (bytes | str): Raw upload. Bytes are decoded as UTF-8 (a BOM is tolerated)

    Returns:
    pd.DataFrame: One column per header entry, every cell a string ('' when empty)

    Raises:
    MalformedFileError: The content is not decodable as comma separated data
    """
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise MalformedFileError(f'Upload is not UTF-8 text: {e}') from e

    try:
        df = pd.read_csv(
            io.StringIO(content),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=True,
            index_col=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        logger.error(f'Could not decode upload as CSV : {str(e)}')
        raise MalformedFileError(f'Could not decode upload as CSV : {str(e)}') from e

    logger.debug(f'Read {len(df)} rows with columns {list(df.columns)}')
    return df


def resolve_columns(header: Sequence[str]) -> ColumnMap:
    """Map each logical field to the header positions that can supply it, in precedence order."""
    cleaned = [str(name).strip().lower() for name in header]
    columns: ColumnMap = {}
    for field, aliases in FIELD_ALIASES.items():
        positions: List[int] = []
        for alias in aliases:
            positions.extend(i for i, name in enumerate(cleaned) if name == alias and i not in positions)
        columns[field] = tuple(positions)
    missing = [field for field, positions in columns.items() if not positions]
    if missing:
        logger.debug(f'No header column found for {missing}')
    return columns


def _first_value(row: Sequence[str], positions: Tuple[int, ...]) -> str:
    # short rows are padded by pandas with NaN, not ''
    for i in positions:
        value = row[i]
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ''


def _parse_coordinate(raw: str) -> Optional[float]:
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_datetime(raw: str, now: datetime) -> datetime:
    if not raw:
        return now
    ts = pd.to_datetime(raw, errors='coerce')
    if pd.isna(ts):
        return now
    if ts.tzinfo is not None:
        # aware values are shown in the viewer's local wall-clock
        return ts.to_pydatetime().astimezone().replace(tzinfo=None)
    return ts.to_pydatetime()


def _crime_label(raw: str) -> str:
    return (raw or CrimeType.OTHER.value).upper().replace(' ', '_')


def parse_incidents(
    content: Union[bytes, str],
    *,
    now: Optional[datetime] = None,
    id_prefix: str = DEFAULT_ID_PREFIX,
) -> List[Incident]:
    """
    Parses an uploaded CSV into canonical incidents

    Args:
    content (bytes | str): Raw upload with a header row
    now (datetime): Fallback for missing or unparsable dates. Defaults to the time of the call
    id_prefix (str): Namespace for ids synthesised from the row position

    Returns:
    List[Incident]: Incidents for every row with usable coordinates, in file order

    Raises:
    MalformedFileError: The content is not tabular
    EmptyDatasetError: No row has a finite latitude and longitude
    """
    now = now or datetime.now()
    df = read_table(content)
    columns = resolve_columns(df.columns)

    incidents: List[Incident] = []
    dropped = 0
    for index, row in enumerate(df.itertuples(index=False, name=None)):
        latitude = _parse_coordinate(_first_value(row, columns['latitude']))
        longitude = _parse_coordinate(_first_value(row, columns['longitude']))
        if latitude is None or longitude is None:
            dropped += 1
            continue

        incidents.append(Incident(
            id=_first_value(row, columns['id']) or f'{id_prefix}-{index}',
            type=normalize_crime_type(_crime_label(_first_value(row, columns['crime_type']))),
            latitude=latitude,
            longitude=longitude,
            date_time=_parse_datetime(_first_value(row, columns['date_time']), now),
            status=normalize_status(_first_value(row, columns['status'])),
            description=_first_value(row, columns['description']),
            location=_first_value(row, columns['location']),
        ))

    if dropped:
        logger.debug(f'Dropped {dropped} rows without finite coordinates')

    if not incidents:
        logger.warning(f'No valid data found in CSV ({len(df)} rows read)')
        raise EmptyDatasetError(f'No valid data found in CSV: none of {len(df)} rows had usable coordinates')

    unmatched = expand_categories(
        _first_value(row, columns['crime_type']) for row in df.itertuples(index=False, name=None)
    ).get(CrimeType.OTHER, ())
    unmatched = [label for label in unmatched if label and label.upper() != CrimeType.OTHER.value]
    if unmatched:
        logger.info(f'Crime labels folded into OTHER: {unmatched}')

    logger.info(f'Parsed {len(incidents)} incidents from {len(df)} rows')
    return incidents

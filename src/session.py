"""
Session State Holder - owns the live incident set for one dashboard session.

The dataset (incidents, bounds, label, file name) lives in one frozen
DatasetSnapshot that is swapped with a single assignment on upload or
reset, so readers never observe a half-applied change. Statistics and
insights are derived from the current snapshot on every read.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple, Union

from geo_bounds import bounds_for_incidents
from ingestion.csv_parser import parse_incidents
from ingestion.demo_data import DEMO_CITY, demo_bounds, generate_demo_incidents, generate_patrol_units
from insights import generate_insights
from models import AIInsight, CrimeStats, Incident, MapBounds, PatrolUnit
from stats import compute_stats
from utils.config import Settings
from utils.exceptions import CrimeDashboardException, UploadInProgressError
from utils.logger_config import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class DatasetSnapshot:
    incidents: Tuple[Incident, ...]
    bounds: MapBounds
    label: str
    file_name: Optional[str] = None


class CrimeDataSession:
    """
    Live state behind the dashboard views

    Attributes:
    settings (Settings): Demo size/seed and display options
    patrol_units (tuple): Static patrol units for the session
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self._patrol_units: Tuple[PatrolUnit, ...] = tuple(generate_patrol_units())
        self._loading = False
        self._snapshot = self._demo_snapshot()

    def _demo_snapshot(self) -> DatasetSnapshot:
        incidents = generate_demo_incidents(
            self.settings.demo_incident_count,
            seed=self.settings.demo_seed,
        )
        return DatasetSnapshot(
            incidents=tuple(incidents),
            bounds=demo_bounds(),
            label=DEMO_CITY['name'],
            file_name=None,
        )

    @property
    def snapshot(self) -> DatasetSnapshot:
        return self._snapshot

    @property
    def incidents(self) -> Tuple[Incident, ...]:
        return self._snapshot.incidents

    @property
    def patrol_units(self) -> Tuple[PatrolUnit, ...]:
        return self._patrol_units

    @property
    def bounds(self) -> MapBounds:
        return self._snapshot.bounds

    @property
    def dataset_label(self) -> str:
        return self._snapshot.label

    @property
    def uploaded_file_name(self) -> Optional[str]:
        return self._snapshot.file_name

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_demo(self) -> bool:
        return self._snapshot.file_name is None

    @property
    def stats(self) -> CrimeStats:
        return compute_stats(self._snapshot.incidents)

    @property
    def insights(self) -> List[AIInsight]:
        incidents = self._snapshot.incidents
        return generate_insights(incidents, compute_stats(incidents))

    def upload(self, content: Union[bytes, str], file_name: str, *, now: Optional[datetime] = None) -> DatasetSnapshot:
        """
        Replaces the live dataset with the incidents of an uploaded CSV

        Args:
        content (bytes | str): Raw file content
        file_name (str): Name shown in the upload view
        now (datetime): Fallback timestamp for rows without a usable date

        Returns:
        DatasetSnapshot: The snapshot now in effect

        Raises:
        UploadInProgressError: Another upload has not finished
        ParseError: The file could not be used. The previous dataset stays in place
        """
        if self._loading:
            raise UploadInProgressError(f'Upload of {file_name} rejected: another upload is still loading')

        self._loading = True
        try:
            logger.info(f'Uploading {file_name}')
            incidents = parse_incidents(content, now=now)
            snapshot = DatasetSnapshot(
                incidents=tuple(incidents),
                bounds=bounds_for_incidents(incidents),
                label=f'Custom Dataset ({len(incidents)} incidents)',
                file_name=file_name,
            )
            self._snapshot = snapshot
            logger.info(f'Loaded {len(incidents)} incidents from {file_name}, map centred on {snapshot.bounds.center} at zoom {snapshot.bounds.zoom}')
            return snapshot
        except CrimeDashboardException as e:
            logger.error(f'Upload of {file_name} failed : {str(e)}')
            raise
        finally:
            self._loading = False

    def reset(self) -> DatasetSnapshot:
        """Swap back to freshly generated demo data."""
        self._snapshot = self._demo_snapshot()
        logger.info(f'Reset to demo data ({len(self._snapshot.incidents)} incidents)')
        return self._snapshot

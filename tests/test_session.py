import pytest
from datetime import datetime
from pathlib import Path
import sys

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))
sys.path.insert(0, str(Path(__file__).parent.parent))

import session as session_module
from ingestion.csv_parser import parse_incidents
from ingestion.demo_data import (
    DEMO_CITY,
    HOTSPOT_SIZE,
    HOTSPOTS,
    demo_bounds,
    generate_demo_incidents,
    generate_patrol_units,
)
from models import CaseStatus, CrimeType, PatrolStatus
from session import CrimeDataSession
from utils.config import Settings, load_settings
from utils.exceptions import ConfigError, EmptyDatasetError, MalformedFileError, UploadInProgressError
from view_state import View, ViewState

NOW = datetime(2024, 3, 1, 9, 0)

SCENARIO_CSV = (
    b'LATITUDE,LONGITUDE,CRIME_TYPE,DATE_TIME,STATUS\n'
    b'51.5074,-0.1278,THEFT,2024-01-15 14:30,OPEN\n'
    b'51.5155,-0.0922,ASSAULT,2024-01-15 23:45,CLOSED\n'
    b'51.4975,-0.1357,BURGLARY,2024-01-16 02:15,UNDER_INVESTIGATION\n'
)


@pytest.fixture
def crime_session():
    return CrimeDataSession(Settings(demo_incident_count=20, demo_seed=7))


class TestSession:
    def test_starts_in_demo_mode(self, crime_session):
        assert crime_session.is_demo
        assert crime_session.uploaded_file_name is None
        assert crime_session.dataset_label == 'London, UK'
        assert crime_session.bounds == demo_bounds()
        assert len(crime_session.incidents) == 20 + len(HOTSPOTS) * HOTSPOT_SIZE
        assert len(crime_session.patrol_units) == 5
        assert not crime_session.is_loading

    def test_upload_end_to_end(self, crime_session):
        snapshot = crime_session.upload(SCENARIO_CSV, 'incidents.csv', now=NOW)
        assert crime_session.snapshot is snapshot
        assert len(crime_session.incidents) == 3
        assert crime_session.uploaded_file_name == 'incidents.csv'
        assert crime_session.dataset_label == 'Custom Dataset (3 incidents)'
        assert not crime_session.is_demo
        assert crime_session.bounds.center == pytest.approx((51.5065, -0.11395))
        assert crime_session.bounds.zoom == 14

        stats = crime_session.stats
        assert stats.total_incidents == 3
        assert stats.open_cases == 1
        assert stats.closed_cases == 1
        assert [i.id for i in crime_session.insights] == ['temporal-1', 'violent-1']

    def test_failed_upload_keeps_previous_state(self, crime_session):
        crime_session.upload(SCENARIO_CSV, 'incidents.csv', now=NOW)
        before = crime_session.snapshot

        with pytest.raises(EmptyDatasetError):
            crime_session.upload(b'LATITUDE,LONGITUDE\nnorth,west\n', 'bad.csv')
        with pytest.raises(MalformedFileError):
            crime_session.upload(b'LATITUDE,LONGITUDE\n51.5,"-0.1\n', 'broken.csv')

        assert crime_session.snapshot is before
        assert crime_session.uploaded_file_name == 'incidents.csv'
        assert not crime_session.is_loading

    def test_failed_upload_in_demo_mode_stays_demo(self, crime_session):
        demo_incidents = crime_session.incidents
        with pytest.raises(EmptyDatasetError):
            crime_session.upload('LATITUDE,LONGITUDE\n', 'empty.csv')
        assert crime_session.incidents is demo_incidents
        assert crime_session.is_demo

    def test_reentrant_upload_is_rejected(self, crime_session, monkeypatch):
        nested_errors = []

        def reentrant_parse(content, now=None):
            assert crime_session.is_loading
            try:
                crime_session.upload(SCENARIO_CSV, 'second.csv')
            except UploadInProgressError as exc:
                nested_errors.append(exc)
            return parse_incidents(content, now=now)

        monkeypatch.setattr(session_module, 'parse_incidents', reentrant_parse)
        crime_session.upload(SCENARIO_CSV, 'first.csv', now=NOW)

        assert len(nested_errors) == 1
        assert crime_session.uploaded_file_name == 'first.csv'
        assert not crime_session.is_loading

    def test_reset_restores_demo(self, crime_session):
        crime_session.upload(SCENARIO_CSV, 'incidents.csv', now=NOW)
        crime_session.reset()
        assert crime_session.is_demo
        assert crime_session.dataset_label == DEMO_CITY['name']
        assert crime_session.bounds.zoom == DEMO_CITY['zoom']
        assert crime_session.stats.total_incidents == 20 + len(HOTSPOTS) * HOTSPOT_SIZE

    def test_stats_follow_the_live_incidents(self, crime_session):
        assert crime_session.stats.total_incidents == len(crime_session.incidents)
        crime_session.upload(SCENARIO_CSV, 'incidents.csv', now=NOW)
        assert crime_session.stats.total_incidents == 3

    def test_demo_data_raises_hotspot_insights(self, crime_session):
        ids = [i.id for i in crime_session.insights]
        assert ids[0] == 'hotspot-1'
        assert 'temporal-1' in ids
        assert 'gap-1' in ids


class TestDemoData:
    def test_counts_and_ids(self):
        incidents = generate_demo_incidents(10, seed=1, now=NOW)
        assert len(incidents) == 10 + len(HOTSPOTS) * HOTSPOT_SIZE
        assert incidents[0].id == 'INC-01000'
        assert incidents[10].id == 'INC-HOTSPOT-0-0'
        assert len({inc.id for inc in incidents}) == len(incidents)

    def test_seed_is_reproducible(self):
        assert generate_demo_incidents(25, seed=3, now=NOW) == generate_demo_incidents(25, seed=3, now=NOW)

    def test_shape_of_generated_incidents(self):
        incidents = generate_demo_incidents(200, seed=11, now=NOW)
        scattered, clusters = incidents[:200], incidents[200:]
        assert all(inc.type is not CrimeType.OTHER for inc in incidents)
        assert all(abs(inc.latitude - 51.5074) <= 0.08 for inc in scattered)
        assert all(0 <= (NOW - inc.date_time).days <= 30 for inc in scattered)
        assert all(inc.location.startswith('Zone ') for inc in scattered)
        assert all(inc.status is CaseStatus.OPEN for inc in clusters)
        assert {inc.location for inc in clusters} == {h['name'] for h in HOTSPOTS}
        assert all(inc.type in (CrimeType.THEFT, CrimeType.ROBBERY, CrimeType.ASSAULT) for inc in clusters)

    def test_patrol_units(self):
        units = generate_patrol_units()
        assert [u.name for u in units] == ['Alpha-1', 'Bravo-2', 'Charlie-3', 'Delta-4', 'Echo-5']
        assert units[4].status is PatrolStatus.OFF_DUTY


class TestConfig:
    def test_defaults(self):
        settings = load_settings({})
        assert settings == Settings()
        assert settings.demo_seed is None
        assert settings.map_style == 'carto-darkmatter'

    def test_reads_prefixed_variables(self):
        settings = load_settings({
            'CRIME_DASHBOARD_LOG_DIR': '/tmp/crime-logs',
            'CRIME_DASHBOARD_DEMO_COUNT': '40',
            'CRIME_DASHBOARD_DEMO_SEED': '42',
            'CRIME_DASHBOARD_MAP_STYLE': 'open-street-map',
            'CRIME_DASHBOARD_HEX_RES': '9',
        })
        assert settings.log_dir == '/tmp/crime-logs'
        assert settings.demo_incident_count == 40
        assert settings.demo_seed == 42
        assert settings.map_style == 'open-street-map'
        assert settings.hex_resolution == 9

    @pytest.mark.parametrize('env', [
        {'CRIME_DASHBOARD_DEMO_COUNT': 'many'},
        {'CRIME_DASHBOARD_DEMO_COUNT': '-1'},
        {'CRIME_DASHBOARD_HEX_RES': '16'},
        {'CRIME_DASHBOARD_DEMO_SEED': '1.5'},
    ])
    def test_invalid_values(self, env):
        with pytest.raises(ConfigError):
            load_settings(env)


class TestViewState:
    def test_defaults(self):
        state = ViewState()
        assert state.active_view is View.MAP
        assert state.sidebar_open
        assert state.title == 'Spatial Analysis'

    def test_navigation(self):
        state = ViewState()
        state.set_active_view('insights')
        assert state.active_view is View.INSIGHTS
        assert state.title == 'AI Insights'
        with pytest.raises(ValueError):
            state.set_active_view('dashboard')

    def test_sidebar(self):
        state = ViewState()
        state.toggle_sidebar()
        assert not state.sidebar_open
        state.set_sidebar_open(True)
        assert state.sidebar_open

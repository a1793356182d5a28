import warnings

import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
from dotenv import load_dotenv
from pathlib import Path
import sys
from typing import Dict, Sequence

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / 'src'
for path in (ROOT, SRC_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# === Configs ===
try:
    load_dotenv()
    from utils.config import load_settings
    from utils.logger_config import setup_logger
    from utils.exceptions import CrimeDashboardException, EmptyDatasetError, MalformedFileError

    SETTINGS = load_settings()
    logger = setup_logger('crime_dashboard', SETTINGS.log_dir)
except Exception as e:
    print(f'CRITICAL ERROR: app : Config issue : {str(e)}')
    sys.exit(1)
# === END Configs ===

from geo_bounds import build_geojson, hex_density
from ingestion import DEMO_FILE_NAME, EXPECTED_FORMAT_SAMPLE
from models import AIInsight, CaseStatus, CrimeType, Incident, MapBounds, PatrolUnit, Severity
from session import CrimeDataSession
from stats import daily_frame, hourly_frame, incidents_frame, peak_hour, type_breakdown
from utils.crime_taxonomy import display_label
from view_state import View, ViewState, VIEW_TITLES


warnings.filterwarnings('ignore', message='.*mapbox.*', category=DeprecationWarning)

CRIME_COLORS: Dict[str, str] = {
    CrimeType.MURDER.value: '#ef4444',
    CrimeType.ASSAULT.value: '#f97316',
    CrimeType.ROBBERY.value: '#eab308',
    CrimeType.BURGLARY.value: '#f59e0b',
    CrimeType.THEFT.value: '#84cc16',
    CrimeType.VEHICLE_THEFT.value: '#22c55e',
    CrimeType.CYBER.value: '#3b82f6',
    CrimeType.FRAUD.value: '#6366f1',
    CrimeType.VANDALISM.value: '#a855f7',
    CrimeType.DRUG_OFFENSE.value: '#ec4899',
    CrimeType.OTHER.value: '#64748b',
}

HEAT_SCALE = [[0.0, '#10b981'], [0.3, '#f59e0b'], [0.6, '#f97316'], [1.0, '#ef4444']]
HEX_SCALE = ['#9bd174', '#f5e663', '#f9a64c', '#ef6248', '#b0202f']
PATROL_COLOR = '#3b82f6'

SEVERITY_BOX = {
    Severity.LOW: st.success,
    Severity.MEDIUM: st.info,
    Severity.HIGH: st.warning,
    Severity.CRITICAL: st.error,
}

INSIGHT_ICONS = {
    'HOTSPOT': '📍',
    'RESOURCE_GAP': '🚓',
    'TREND': '📈',
    'ALERT': '🚨',
}

PLOTLY_CONFIG = {
    'scrollZoom': True,
    'displaylogo': False,
    'modeBarButtonsToRemove': ['lasso2d', 'select2d']
}

VIEW_ORDER = [View.UPLOAD, View.MAP, View.STATS, View.INSIGHTS, View.SETTINGS]


def get_session() -> CrimeDataSession:
    if 'crime_session' not in st.session_state:
        st.session_state['crime_session'] = CrimeDataSession(SETTINGS)
    return st.session_state['crime_session']


def get_view_state() -> ViewState:
    if 'view_state' not in st.session_state:
        st.session_state['view_state'] = ViewState()
    return st.session_state['view_state']


def plot_incident_map(
    incidents: Sequence[Incident],
    patrol_units: Sequence[PatrolUnit],
    bounds: MapBounds,
    *,
    show_pins: bool,
    show_heatmap: bool,
    show_hexes: bool,
    show_patrol: bool,
):
    frame = incidents_frame(incidents)
    fig = go.Figure()

    if show_hexes and not frame.empty:
        summary = hex_density(incidents, SETTINGS.hex_resolution)
        fig = px.choropleth_mapbox(
            summary,
            geojson=build_geojson(summary),
            locations='h3_id',
            color='n_incidents',
            color_continuous_scale=HEX_SCALE,
            featureidkey='properties.h3_id',
            opacity=0.45,
            hover_data={'common_crime': True, 'n_incidents': True},
        )
        fig.update_traces(marker_line_width=0.6, marker_line_color='rgba(255,255,255,0.45)')

    if show_heatmap and not frame.empty:
        fig.add_trace(go.Densitymapbox(
            lat=frame['latitude'],
            lon=frame['longitude'],
            z=[0.5] * len(frame),
            radius=25,
            colorscale=HEAT_SCALE,
            showscale=False,
            name='Density',
        ))

    if show_pins and not frame.empty:
        for crime_type, group in frame.groupby('type', sort=False):
            fig.add_trace(go.Scattermapbox(
                lat=group['latitude'],
                lon=group['longitude'],
                mode='markers',
                marker={'size': 9, 'color': CRIME_COLORS.get(crime_type, CRIME_COLORS['OTHER'])},
                name=display_label(CrimeType(crime_type)),
                customdata=group[['id', 'date_time', 'status']].astype(str).to_numpy(),
                hovertemplate=(
                    '<b>%{customdata[0]}</b><br>'
                    f'Type: {display_label(CrimeType(crime_type))}<br>'
                    'Date: %{customdata[1]}<br>'
                    'Status: %{customdata[2]}<extra></extra>'
                ),
            ))

    if show_patrol and patrol_units:
        fig.add_trace(go.Scattermapbox(
            lat=[unit.latitude for unit in patrol_units],
            lon=[unit.longitude for unit in patrol_units],
            mode='markers+text',
            marker={'size': 16, 'color': PATROL_COLOR},
            text=[unit.name for unit in patrol_units],
            textposition='top right',
            name='Patrol units',
            customdata=[[unit.id, unit.status.value.replace('_', ' ')] for unit in patrol_units],
            hovertemplate='<b>%{text}</b><br>%{customdata[0]}<br>Status: %{customdata[1]}<extra></extra>',
        ))

    lat, lon = bounds.center
    fig.update_layout(
        mapbox={'style': SETTINGS.map_style, 'center': {'lat': lat, 'lon': lon}, 'zoom': bounds.zoom},
        margin={'r': 0, 't': 0, 'l': 0, 'b': 0},
        height=640,
        legend={'bgcolor': 'rgba(15,23,42,0.6)', 'font': {'color': '#e2e8f0'}},
    )
    return fig


def render_upload(session: CrimeDataSession) -> None:
    st.markdown('### Data Upload')
    st.caption('Upload your crime dataset to begin analysis')

    uploaded = st.file_uploader(
        'Drop CSV file here or click to upload',
        type=['csv'],
        disabled=session.is_loading,
        help='Supports standard crime data formats',
    )
    if uploaded is not None and st.session_state.get('last_upload_id') != uploaded.file_id:
        # remember the attempt so a rerun does not parse the same file again
        st.session_state['last_upload_id'] = uploaded.file_id
        with st.spinner('Processing...'):
            try:
                session.upload(uploaded.getvalue(), uploaded.name)
                st.toast(f'Data uploaded successfully. Loaded {uploaded.name}', icon='✅')
            except (MalformedFileError, EmptyDatasetError) as exc:
                st.toast('Upload failed. Could not parse CSV file. Check the format.', icon='⚠️')
                st.error(str(exc))
            except CrimeDashboardException as exc:
                st.error(f'Upload failed: {exc}')

    status_col, action_col = st.columns([3, 1])
    with status_col:
        mode = 'Demo Mode' if session.is_demo else 'Custom Data'
        st.markdown(f'**{mode}** · `{session.uploaded_file_name or DEMO_FILE_NAME}` · {len(session.incidents):,} incidents')
    with action_col:
        if not session.is_demo and st.button('Reset to Demo Data', use_container_width=True):
            session.reset()
            st.session_state.pop('last_upload_id', None)
            st.rerun()

    st.markdown('#### Expected format')
    st.code(EXPECTED_FORMAT_SAMPLE, language='text')


def render_map(session: CrimeDataSession) -> None:
    toggles = st.columns(4)
    show_pins = toggles[0].toggle('Incident pins', value=True)
    show_heatmap = toggles[1].toggle('Heatmap', value=False)
    show_hexes = toggles[2].toggle('Hex density', value=False)
    show_patrol = toggles[3].toggle('Patrol units', value=True)

    fig = plot_incident_map(
        session.incidents,
        session.patrol_units,
        session.bounds,
        show_pins=show_pins,
        show_heatmap=show_heatmap,
        show_hexes=show_hexes,
        show_patrol=show_patrol,
    )
    st.plotly_chart(fig, use_container_width=True, config=PLOTLY_CONFIG)
    st.caption(f'{len(session.incidents):,} incidents · {len(session.patrol_units)} patrol units')


def render_stats(session: CrimeDataSession) -> None:
    stats = session.stats
    peak = peak_hour(stats.by_hour)
    violent = sum(stats.by_type[t] for t in (CrimeType.MURDER, CrimeType.ASSAULT, CrimeType.ROBBERY))

    kpis = st.columns(4)
    kpis[0].metric('Total incidents', f'{stats.total_incidents:,}')
    kpis[1].metric('Open cases', f'{stats.open_cases:,}')
    kpis[2].metric('Closed cases', f'{stats.closed_cases:,}')
    kpis[3].metric('Peak hour', f'{peak:02d}:00', delta=f'{violent:,} violent', delta_color='off')

    charts_row = st.columns(2)
    with charts_row[0]:
        breakdown = type_breakdown(stats)
        if breakdown.empty:
            st.info('No incidents to break down by type.')
        else:
            donut = px.pie(
                breakdown,
                names='label',
                values='count',
                hole=0.55,
                color='crime_type',
                color_discrete_map=CRIME_COLORS,
                title='Crime Type Distribution',
            )
            donut.update_layout(template='plotly_dark', legend_title='Type')
            st.plotly_chart(donut, use_container_width=True, config=PLOTLY_CONFIG)

    with charts_row[1]:
        hourly_fig = px.bar(hourly_frame(stats), x='hour', y='incidents', title='Incidents by Hour of Day')
        hourly_fig.update_traces(marker_color='#3b82f6')
        hourly_fig.update_layout(template='plotly_dark', xaxis_title='Hour', yaxis_title='Incidents')
        st.plotly_chart(hourly_fig, use_container_width=True, config=PLOTLY_CONFIG)

    daily = daily_frame(stats)
    if daily.empty:
        st.info('No dated incidents for the trend line.')
    else:
        trend_fig = px.line(daily, x='date', y='incidents', markers=True, title='30-Day Incident Trend')
        trend_fig.update_layout(template='plotly_dark', xaxis_title='Date', yaxis_title='Incidents')
        st.plotly_chart(trend_fig, use_container_width=True, config=PLOTLY_CONFIG)


def render_insight(insight: AIInsight) -> None:
    box = SEVERITY_BOX.get(insight.severity, st.info)
    lines = [
        f"{INSIGHT_ICONS.get(insight.type.value, '')} **{insight.title}** · `{insight.severity.value}`",
        insight.description,
        f'**Recommendation:** {insight.recommendation}',
    ]
    if insight.affected_area:
        lines.append(f'Area: {insight.affected_area}')
    box('\n\n'.join(lines))


def render_insights(session: CrimeDataSession) -> None:
    insights = session.insights
    st.caption(f'{len(insights)} active recommendations from {len(session.incidents):,} incidents')
    for insight in insights:
        render_insight(insight)


def render_settings(session: CrimeDataSession) -> None:
    st.markdown('#### Current Configuration')
    st.write(f'Dataset: **{session.dataset_label}**')
    center_lat, center_lon = session.bounds.center
    st.write(f'Map centre: {center_lat:.4f}, {center_lon:.4f} · zoom {session.bounds.zoom}')
    st.json(SETTINGS.to_dict())
    open_share = session.stats.open_cases / len(session.incidents) if session.incidents else 0.0
    st.caption(f'{CaseStatus.OPEN.value} share: {open_share:.0%}')


RENDERERS = {
    View.UPLOAD: render_upload,
    View.MAP: render_map,
    View.STATS: render_stats,
    View.INSIGHTS: render_insights,
    View.SETTINGS: render_settings,
}


def main():
    view_state = get_view_state()
    st.set_page_config(
        page_title='Crime Insight Dashboard',
        layout='wide',
        initial_sidebar_state='expanded' if view_state.sidebar_open else 'collapsed',
    )
    session = get_session()

    st.sidebar.header('Crime Insight Console')
    choice = st.sidebar.radio(
        'Navigate',
        VIEW_ORDER,
        index=VIEW_ORDER.index(view_state.active_view),
        format_func=lambda view: VIEW_TITLES[view],
    )
    if choice != view_state.active_view:
        view_state.set_active_view(choice)
    st.sidebar.markdown('---')
    st.sidebar.caption(session.dataset_label)
    if st.sidebar.button('Collapse sidebar', use_container_width=True):
        view_state.toggle_sidebar()
        st.rerun()

    title_col, label_col = st.columns([3, 1])
    title_col.markdown(f'## {view_state.title}')
    label_col.caption(session.dataset_label)
    if not view_state.sidebar_open and label_col.button('Show sidebar'):
        view_state.set_sidebar_open(True)
        st.rerun()

    RENDERERS.get(view_state.active_view, render_map)(session)


if __name__ == '__main__':
    main()

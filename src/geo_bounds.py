"""Map framing and hex binning for incident point sets."""

from __future__ import annotations

from typing import Dict, Iterable, Sequence, Tuple

import h3
import pandas as pd

from models import Incident, MapBounds


# (span threshold in degrees, zoom), checked in order with a strict ">"
ZOOM_LADDER: Tuple[Tuple[float, int], ...] = (
    (1.0, 8),
    (0.5, 10),
    (0.1, 12),
)
CLOSE_ZOOM = 14


def zoom_for_span(span: float) -> int:
    for threshold, zoom in ZOOM_LADDER:
        if span > threshold:
            return zoom
    return CLOSE_ZOOM


def compute_bounds(points: Iterable[Tuple[float, float]]) -> MapBounds:
    """
    Frame a set of (lat, lng) points

    The center is the middle of the bounding box on each axis, not the
    centroid, and the zoom is a coarse step from the larger axis span.

    Raises:
    ValueError: points is empty
    """
    points = list(points)
    if not points:
        raise ValueError('Cannot compute bounds for an empty point set')
    lats = [lat for lat, _ in points]
    lngs = [lng for _, lng in points]
    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)
    center = ((min_lat + max_lat) / 2, (min_lng + max_lng) / 2)
    span = max(max_lat - min_lat, max_lng - min_lng)
    return MapBounds(center=center, zoom=zoom_for_span(span))


def bounds_for_incidents(incidents: Sequence[Incident]) -> MapBounds:
    return compute_bounds((inc.latitude, inc.longitude) for inc in incidents)


def hex_density(incidents: Sequence[Incident], resolution: int) -> pd.DataFrame:
    """Count incidents per H3 cell with the cell's most common crime type."""
    columns = ['h3_id', 'n_incidents', 'common_crime', 'lat', 'lon']
    if not incidents:
        return pd.DataFrame(columns=columns)

    cells = pd.DataFrame({
        'h3_id': [h3.latlng_to_cell(inc.latitude, inc.longitude, resolution) for inc in incidents],
        'crime_type': [inc.type.value for inc in incidents],
    })
    counts = cells.groupby('h3_id', sort=False).size().reset_index(name='n_incidents')
    # groupby keeps first-seen order, so idxmax settles ties on the earliest type
    common = (
        cells.groupby(['h3_id', 'crime_type'], sort=False)
             .size()
             .reset_index(name='count')
    )
    common = common.loc[common.groupby('h3_id', sort=False)['count'].idxmax(), ['h3_id', 'crime_type']]
    summary = counts.merge(common.rename(columns={'crime_type': 'common_crime'}), on='h3_id', how='left')
    summary['lat'] = summary['h3_id'].apply(lambda h: h3.cell_to_latlng(h)[0])
    summary['lon'] = summary['h3_id'].apply(lambda h: h3.cell_to_latlng(h)[1])
    return summary[columns]


def build_geojson(summary: pd.DataFrame) -> Dict:
    features = []
    for h3_id in summary.get('h3_id', []):
        boundary = h3.cell_to_boundary(h3_id)
        coords = [[lon, lat] for lat, lon in boundary]
        if coords and coords[0] != coords[-1]:
            coords.append(coords[0])
        features.append({
            'type': 'Feature',
            'id': h3_id,
            'properties': {'h3_id': h3_id},
            'geometry': {'type': 'Polygon', 'coordinates': [coords]},
        })
    return {'type': 'FeatureCollection', 'features': features}

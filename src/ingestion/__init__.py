from .csv_parser import (
    EXPECTED_FORMAT_SAMPLE,
    FIELD_ALIASES,
    parse_incidents,
    read_table,
    resolve_columns,
)
from .demo_data import (
    DEMO_CITY,
    DEMO_FILE_NAME,
    demo_bounds,
    generate_demo_incidents,
    generate_patrol_units,
)

__all__ = [
    "EXPECTED_FORMAT_SAMPLE",
    "FIELD_ALIASES",
    "parse_incidents",
    "read_table",
    "resolve_columns",
    "DEMO_CITY",
    "DEMO_FILE_NAME",
    "demo_bounds",
    "generate_demo_incidents",
    "generate_patrol_units",
]

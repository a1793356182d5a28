"""Environment driven settings for the crime insight dashboard.

Values come from the process environment. ``app.py`` calls ``load_dotenv()``
first so a local ``.env`` file can provide them during development.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigError


ENV_PREFIX = 'CRIME_DASHBOARD_'

DEFAULT_LOG_DIR = 'logs'
DEFAULT_DEMO_COUNT = 150
DEFAULT_MAP_STYLE = 'carto-darkmatter'
DEFAULT_HEX_RESOLUTION = 8
MAX_HEX_RESOLUTION = 15


@dataclass(frozen=True)
class Settings:
    log_dir: str = DEFAULT_LOG_DIR
    demo_incident_count: int = DEFAULT_DEMO_COUNT
    demo_seed: Optional[int] = None
    map_style: str = DEFAULT_MAP_STYLE
    hex_resolution: int = DEFAULT_HEX_RESOLUTION

    def to_dict(self) -> dict:
        return {
            'log_dir': self.log_dir,
            'demo_incident_count': self.demo_incident_count,
            'demo_seed': self.demo_seed,
            'map_style': self.map_style,
            'hex_resolution': self.hex_resolution,
        }


def _read_int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(ENV_PREFIX + key, '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f'{ENV_PREFIX}{key} must be an integer, got {raw!r}') from e


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build the dashboard settings from environment variables

    Args:
    env (Mapping): Variables to read from. Defaults to os.environ

    Returns:
    Settings: Validated settings

    Raises:
    ConfigError: A variable is present but not usable
    """
    env = os.environ if env is None else env

    demo_count = _read_int(env, 'DEMO_COUNT', DEFAULT_DEMO_COUNT)
    if demo_count < 0:
        raise ConfigError(f'{ENV_PREFIX}DEMO_COUNT cannot be negative, got {demo_count}')

    hex_res = _read_int(env, 'HEX_RES', DEFAULT_HEX_RESOLUTION)
    if not 0 <= hex_res <= MAX_HEX_RESOLUTION:
        raise ConfigError(f'{ENV_PREFIX}HEX_RES must be between 0 and {MAX_HEX_RESOLUTION}, got {hex_res}')

    return Settings(
        log_dir=env.get(ENV_PREFIX + 'LOG_DIR', '').strip() or DEFAULT_LOG_DIR,
        demo_incident_count=demo_count,
        demo_seed=_read_int(env, 'DEMO_SEED', None),
        map_style=env.get(ENV_PREFIX + 'MAP_STYLE', '').strip() or DEFAULT_MAP_STYLE,
        hex_resolution=hex_res,
    )

"""Navigation state for the dashboard: active view and sidebar visibility."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class View(str, Enum):
    UPLOAD = 'upload'
    MAP = 'map'
    STATS = 'stats'
    INSIGHTS = 'insights'
    SETTINGS = 'settings'


VIEW_TITLES: Dict[View, str] = {
    View.MAP: 'Spatial Analysis',
    View.STATS: 'Statistical Overview',
    View.INSIGHTS: 'AI Insights',
    View.UPLOAD: 'Data Upload',
    View.SETTINGS: 'Settings',
}


@dataclass
class ViewState:
    active_view: View = View.MAP
    sidebar_open: bool = True

    @property
    def title(self) -> str:
        return VIEW_TITLES[self.active_view]

    def set_active_view(self, view: Union[View, str]) -> None:
        # View('bogus') raises ValueError
        self.active_view = View(view)

    def set_sidebar_open(self, is_open: bool) -> None:
        self.sidebar_open = bool(is_open)

    def toggle_sidebar(self) -> None:
        self.sidebar_open = not self.sidebar_open

"""
HUD state published by the session and rendered by the window.
"""

from enum import Enum
from typing import Optional, Set


class Panel(Enum):
    START = "start"
    GAME_OVER = "game_over"
    LEVEL_BANNER = "level_banner"


class Hud:
    """UI collaborator: plain setters plus overlay panel visibility"""

    def __init__(self):
        self.score = 0
        self.level = 1
        self.enemies_left = 0
        self.health_percent = 100.0
        self.final_score: Optional[int] = None
        self.banner_title = ""
        self.panels: Set[Panel] = {Panel.START}

    def set_score(self, score: int):
        self.score = score

    def set_level(self, level: int):
        self.level = level

    def set_enemies_left(self, count: int):
        self.enemies_left = count

    def set_health(self, percent: float):
        self.health_percent = percent

    def show(self, panel: Panel, title: Optional[str] = None):
        if title is not None:
            self.banner_title = title
        self.panels.add(panel)

    def hide(self, panel: Panel):
        self.panels.discard(panel)

    def is_visible(self, panel: Panel) -> bool:
        return panel in self.panels

"""
Level progression: the predefined level table, procedural levels beyond it,
and the controller that tracks progress through them.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .utils import Color, hex_to_rgb, hsl_to_rgb

MIN_SPAWN_RATE = 200.0  # ms


@dataclass(frozen=True)
class LevelConfig:
    """Parameters for one level"""
    goal: int
    spawn_rate: float  # ms between spawns
    enemy_speed: float
    enemy_hp: float
    color: Color = (255, 0, 102)


DEFAULT_LEVELS: List[LevelConfig] = [
    LevelConfig(goal=10, spawn_rate=2000, enemy_speed=2, enemy_hp=30, color=hex_to_rgb("#ff0066")),
    LevelConfig(goal=15, spawn_rate=1500, enemy_speed=3, enemy_hp=40, color=hex_to_rgb("#ff6600")),
    LevelConfig(goal=20, spawn_rate=1200, enemy_speed=4, enemy_hp=50, color=hex_to_rgb("#ffcc00")),
    LevelConfig(goal=25, spawn_rate=1000, enemy_speed=5, enemy_hp=60, color=hex_to_rgb("#ccff00")),
    LevelConfig(goal=30, spawn_rate=800, enemy_speed=6, enemy_hp=80, color=hex_to_rgb("#00ff66")),
]


def levels_from_dicts(rows: Sequence[dict]) -> List[LevelConfig]:
    """Build a level table from config dicts (colour as '#rrggbb' or RGB)"""
    table = []
    for row in rows:
        color = row.get("color", "#ff0066")
        if isinstance(color, str):
            color = hex_to_rgb(color)
        table.append(LevelConfig(
            goal=int(row["goal"]),
            spawn_rate=float(row["spawn_rate"]),
            enemy_speed=float(row["enemy_speed"]),
            enemy_hp=float(row["enemy_hp"]),
            color=tuple(color),
        ))
    if not table:
        raise ValueError("Level table must contain at least one level")
    return table


def procedural_color(rng: random.Random) -> Color:
    """Random fully saturated hue for levels past the table"""
    return hsl_to_rgb(rng.random() * 360)


def level_config(index: int, table: Sequence[LevelConfig] = DEFAULT_LEVELS,
                 rng: Optional[random.Random] = None) -> LevelConfig:
    """
    Config for a zero-based level index.

    Past the table, the numbers grow from the last entry; only the colour is
    random, and it is drawn from `rng` so the numeric fields stay deterministic.
    """
    if index < 0:
        raise ValueError(f"Level index must be >= 0, got {index}")
    if index < len(table):
        return table[index]

    last = table[-1]
    extra = index - len(table) + 1
    numeric = LevelConfig(
        goal=last.goal + extra * 5,
        spawn_rate=max(MIN_SPAWN_RATE, last.spawn_rate - extra * 50),
        enemy_speed=last.enemy_speed + extra * 0.5,
        enemy_hp=last.enemy_hp + extra * 10,
        color=last.color,
    )
    if rng is None:
        return numeric
    return replace(numeric, color=procedural_color(rng))


def spawn_interval(index: int, table: Sequence[LevelConfig] = DEFAULT_LEVELS) -> float:
    """
    Spawner period for a level index. Past the table the spawner speeds up
    from the last entry by 100 ms per level, floored at MIN_SPAWN_RATE.
    """
    last_index = min(index, len(table) - 1)
    rate = table[last_index].spawn_rate
    if index >= len(table):
        rate = max(MIN_SPAWN_RATE, rate - (index - len(table) + 1) * 100)
    return rate


class LevelController:
    """Tracks level index, kill progress and whether a transition is pending"""

    def __init__(self, table: Sequence[LevelConfig] = DEFAULT_LEVELS, rng: Optional[random.Random] = None):
        if not table:
            raise ValueError("Level table must contain at least one level")
        self.table = list(table)
        self.rng = rng or random.Random()
        self.reset()

    def reset(self):
        self.current_index = 0
        self.enemies_defeated = 0
        self.transitioning = False
        self.config = level_config(0, self.table, self.rng)
        self.level_goal = self.config.goal

    @property
    def level_number(self) -> int:
        return self.current_index + 1

    @property
    def enemies_remaining(self) -> int:
        return max(0, self.level_goal - self.enemies_defeated)

    @property
    def spawn_interval(self) -> float:
        return spawn_interval(self.current_index, self.table)

    def begin_level(self):
        """(Re)enter the current level with a fresh kill count"""
        self.config = level_config(self.current_index, self.table, self.rng)
        self.level_goal = self.config.goal
        self.enemies_defeated = 0

    def record_kill(self):
        self.enemies_defeated += 1

    def goal_reached(self) -> bool:
        return self.enemies_defeated >= self.level_goal

    def should_transition(self) -> bool:
        return self.goal_reached() and not self.transitioning

    def begin_transition(self):
        self.transitioning = True

    def complete_transition(self):
        """Advance to the next level and clear the transition flag"""
        self.current_index += 1
        self.begin_level()
        self.transitioning = False

"""
ArenaEnv - the arena session behind the Gymnasium API
------------------------------------------------------
- Same Session, entities and level progression as the interactive game
- Virtual clock: every step advances the scheduler and the session by a
  fixed frame_ms, so runs are reproducible for a given seed
- Discrete MultiDiscrete action space: [move(5), shoot(2), aim(8)]
- Vector observation: player state + top-K nearest enemies
- Optional Arcade window for watching a run (render_mode="human")

Quick test:
    python -m neon_arena.arena_env
"""

from __future__ import annotations

import math
import random
from typing import Any, Dict, Optional, Sequence

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .controls import InputState
from .hud import Hud
from .levels import DEFAULT_LEVELS, LevelConfig
from .scheduler import Scheduler
from .utils import Viewport, clamp, seed_everything
from .world import Session

# move: 0 stay, 1 up, 2 down, 3 left, 4 right
MOVE_KEYS = {1: "w", 2: "s", 3: "a", 4: "d"}
AIM_DISTANCE = 100.0


class ArenaEnv(gym.Env):
    """Headless arena session with a Gymnasium interface"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = 800,
        height: int = 600,
        frame_ms: float = 1000 / 60,
        max_steps: int = 3600,
        k_enemies: int = 5,
        levels: Sequence[LevelConfig] = DEFAULT_LEVELS,
        player_config: Optional[Dict[str, Any]] = None,
        session_config: Optional[Dict[str, Any]] = None,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode

        # Arena
        self.width = width
        self.height = height
        self.frame_ms = frame_ms
        self.max_steps = max_steps
        self.k_enemies = k_enemies

        self.levels = list(levels)
        self.player_config = dict(player_config or {})
        self.session_config = dict(session_config or {})
        self.reward_config = {"R_KILL": 1.0, "R_DAMAGE": 0.1, "R_DEATH": 5.0, "R_TIME": 0.001}
        self.reward_config.update(reward_config or {})

        self.action_space = spaces.MultiDiscrete([5, 2, 8])

        # Player: pos(2) vel(2) health(1) cooldown(1)
        # Each enemy: rel pos(2) velocity(2)
        obs_dim = 2 + 2 + 1 + 1 + self.k_enemies * 4
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        # Precompute aim directions (8-way)
        self._aim_dirs = []
        for i in range(8):
            ang = (math.pi * 2) * (i / 8.0)
            self._aim_dirs.append((math.cos(ang), math.sin(ang)))

        self._window = None
        self.session: Session = None  # type: ignore
        self._step_count = 0

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        self._step_count = 0
        self.session = Session(
            viewport=Viewport(self.width, self.height),
            controls=InputState(),
            hud=Hud(),
            scheduler=Scheduler(),
            rng=random.Random(seed),
            levels=self.levels,
            player_config=self.player_config,
            **self.session_config,
        )
        self.session.start()

        if self._window is not None:
            self._window.session = self.session
            self._window.surface.viewport = self.session.viewport

        return self._get_obs(), self._get_info()

    def step(self, action):
        move, shoot, aim = int(action[0]), int(action[1]), int(action[2])
        self._apply_action(move, shoot, aim)

        score_before = self.session.score
        hp_before = self.session.player.hp

        self.session.scheduler.advance(self.frame_ms)
        self.session.update(self.frame_ms)

        kills = (self.session.score - score_before) / max(1, self.session.kill_score)
        damage = max(0.0, hp_before - self.session.player.hp)

        terminated = self.session.game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        reward = self._compute_reward(kills, damage, terminated)

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def _apply_action(self, move: int, shoot: int, aim: int):
        controls = self.session.controls
        controls.keys.clear()
        key = MOVE_KEYS.get(move)
        if key is not None:
            controls.press(key)

        # Aim by parking the pointer a fixed distance from the player's centre
        dx, dy = self._aim_dirs[aim % 8]
        cx, cy = self.session.player.center
        controls.pointer.x = cx + dx * AIM_DISTANCE
        controls.pointer.y = cy + dy * AIM_DISTANCE
        controls.pointer.down = bool(shoot)

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        player = self.session.player
        vw = max(1.0, self.session.viewport.width)
        vh = max(1.0, self.session.viewport.height)

        # Terminal velocity under constant impulse
        top_speed = player.speed / max(1e-6, 1.0 - player.friction)

        px, py = player.center
        obs_parts = [
            (px / vw) * 2 - 1, (py / vh) * 2 - 1,
            clamp(player.vx / top_speed, -1, 1), clamp(player.vy / top_speed, -1, 1),
            player.health_fraction * 2 - 1,
            clamp(player.shoot_timer / max(1e-6, player.shoot_interval), 0, 1) * 2 - 1,
        ]

        enemies_sorted = sorted(
            self.session.enemies,
            key=lambda e: (e.x - player.x) ** 2 + (e.y - player.y) ** 2
        )
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                evx = math.cos(e.angle) * e.speed / top_speed
                evy = math.sin(e.angle) * e.speed / top_speed
                obs_parts += [
                    clamp((e.x - player.x) / vw, -1, 1),
                    clamp((e.y - player.y) / vh, -1, 1),
                    clamp(evx, -1, 1),
                    clamp(evy, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, kills: float, damage: float, died: bool) -> float:
        rc = self.reward_config
        reward = rc["R_KILL"] * kills
        reward -= rc["R_DAMAGE"] * damage
        reward -= rc["R_TIME"]
        if died:
            reward -= rc["R_DEATH"]
        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        s = self.session
        return {
            "score": s.score,
            "level": s.level_number,
            "enemies_defeated": s.enemies_defeated,
            "level_goal": s.level_goal,
            "transitioning": s.level_transitioning,
            "health": s.player.hp,
            "num_enemies": len(s.enemies),
            "num_projectiles": len(s.projectiles),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            # Imported here so headless use never touches a display
            from .window import ArenaWindow
            self._window = ArenaWindow(self.session, title="Neon Arena - ArenaEnv", interactive=False)

        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42) -> Dict[str, Any]:
    """Play one episode with random actions and return the final info"""
    env = ArenaEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)
    env.action_space.seed(seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

    print(f"Random episode return: {total:.2f}  score: {info['score']}  level: {info['level']}")
    env.close()
    info["return"] = total
    return info


if __name__ == "__main__":
    run_random_episode(render=True)

"""
Session - owns every entity collection and runs the per-frame passes.

Frame order (see `update`): shake, player, projectiles, enemies + collisions,
particles, game-over check, level progress, HUD. Collections are rebuilt after
each pass instead of being mutated while iterated.

Two timers hang off the session's scheduler: the enemy spawner (repeating) and
the level transition (one-shot). Both are cancelled on stop and restart so
nothing scheduled for an old run can fire into a new one.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Sequence

from .audio import NullAudio
from .controls import InputState
from .effects import ScreenShake, explosion
from .entities import Enemy, Particle, Player, Projectile
from .hud import Hud, Panel
from .levels import DEFAULT_LEVELS, LevelConfig, LevelController
from .scheduler import ScheduledTask, Scheduler
from .utils import Viewport, rects_overlap

logger = logging.getLogger("neon_arena.world")

TRAIL_COLOR = (13, 13, 21)
TRAIL_ALPHA = 0.2


class Session:
    """One play-through: start() -> frames -> stop(), or restart()"""

    def __init__(
        self,
        viewport: Viewport,
        controls: Optional[InputState] = None,
        hud: Optional[Hud] = None,
        audio=None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        levels: Sequence[LevelConfig] = DEFAULT_LEVELS,
        player_config: Optional[Dict] = None,
        contact_damage: float = 10.0,
        kill_score: int = 100,
        level_heal: float = 20.0,
        transition_delay: float = 2000.0,  # ms
        spawn_margin: float = 50.0,
        shake_intensity: float = 10.0,
        shake_duration: float = 200.0,  # ms
    ):
        self.viewport = viewport
        self.controls = controls or InputState()
        self.hud = hud or Hud()
        self.audio = audio or NullAudio()
        self.scheduler = scheduler or Scheduler()
        self.rng = rng or random.Random()

        self.player_config = dict(player_config or {})
        self.contact_damage = contact_damage
        self.kill_score = kill_score
        self.level_heal = level_heal
        self.transition_delay = transition_delay
        self.spawn_margin = spawn_margin
        self.shake_intensity = shake_intensity
        self.shake_duration = shake_duration

        self.level = LevelController(levels, rng=self.rng)
        self.shake = ScreenShake(self.rng)

        self.player = Player.spawn(self.viewport, **self.player_config)
        self.enemies: List[Enemy] = []
        self.projectiles: List[Projectile] = []
        self.particles: List[Particle] = []

        self.score = 0
        self.is_running = False
        self.game_over = False

        self._spawner: Optional[ScheduledTask] = None
        self._transition: Optional[ScheduledTask] = None

    # ----------------------------
    # Session state
    # ----------------------------

    @property
    def current_level_index(self) -> int:
        return self.level.current_index

    @property
    def level_number(self) -> int:
        return self.level.level_number

    @property
    def enemies_defeated(self) -> int:
        return self.level.enemies_defeated

    @property
    def level_goal(self) -> int:
        return self.level.level_goal

    @property
    def level_transitioning(self) -> bool:
        return self.level.transitioning

    @property
    def spawner_active(self) -> bool:
        return self._spawner is not None and self._spawner.active

    @property
    def spawner_interval(self) -> Optional[float]:
        return self._spawner.interval if self.spawner_active else None

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def start(self):
        if self.is_running:
            return
        self.hud.hide(Panel.START)
        self.is_running = True
        self.game_over = False
        self.level.begin_level()
        self.start_spawner()
        self.update_ui()
        logger.info(f"Session started at level {self.level_number} (goal {self.level_goal})")

    def restart(self):
        self._cancel_timers()
        self.player = Player.spawn(self.viewport, **self.player_config)
        self.enemies = []
        self.projectiles = []
        self.particles = []
        self.score = 0
        self.level.reset()
        self.shake.reset()
        self.is_running = False
        self.game_over = False
        self.hud.hide(Panel.GAME_OVER)
        self.hud.hide(Panel.LEVEL_BANNER)
        self.hud.final_score = None
        logger.info("Session restarted")
        self.start()

    def stop(self):
        """Terminal: freeze the simulation and show the game-over panel"""
        self.is_running = False
        self._cancel_timers()
        self.game_over = True
        self.hud.final_score = self.score
        self.hud.show(Panel.GAME_OVER)
        logger.info(f"Game over at level {self.level_number} with score {self.score}")

    def start_spawner(self):
        self.stop_spawner()
        interval = self.level.spawn_interval
        self._spawner = self.scheduler.call_every(interval, self.spawn_enemy, name="spawner")
        logger.debug(f"Spawner armed every {interval:.0f} ms")

    def stop_spawner(self):
        if self._spawner is not None:
            self._spawner.cancel()
            self._spawner = None

    def _cancel_timers(self):
        self.stop_spawner()
        if self._transition is not None:
            self._transition.cancel()
            self._transition = None

    # ----------------------------
    # Per-frame update
    # ----------------------------

    def update(self, dt: float):
        """Advance the simulation by dt milliseconds"""
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        if not self.is_running:
            return

        self.shake.update(dt)

        shot = self.player.update(dt, self.controls, self.viewport)
        if shot is not None:
            self.projectiles.append(shot)
            self.audio.play("shoot")

        for projectile in self.projectiles:
            projectile.update(dt, self.viewport)
        self.projectiles = [p for p in self.projectiles if not p.marked_for_deletion]

        self._update_enemies(dt)

        for particle in self.particles:
            particle.update(dt)
        self.particles = [p for p in self.particles if not p.marked_for_deletion]

        if self.player.hp <= 0:
            self.stop()

        if self.is_running:
            self.check_level_progress()
        self.update_ui()

    def _update_enemies(self, dt: float):
        player = self.player
        for enemy in self.enemies:
            if enemy.marked_for_deletion:
                continue
            enemy.update(dt, player.x, player.y)

            # Contact: enemy is destroyed, no score
            if rects_overlap(player, enemy):
                player.take_damage(self.contact_damage)
                self.add_explosion(player.x, player.y, small=True)
                enemy.marked_for_deletion = True
                self.add_explosion(enemy.x, enemy.y)
                self.shake.trigger(self.shake_intensity, self.shake_duration)
                continue

            for projectile in self.projectiles:
                if projectile.marked_for_deletion:
                    continue
                if not rects_overlap(projectile, enemy):
                    continue
                killed = enemy.take_damage(projectile.damage)
                projectile.marked_for_deletion = True
                self.add_explosion(projectile.x, projectile.y, small=True)
                self.audio.play("hit")
                if killed:
                    self._on_enemy_killed(enemy)
                    break

        self.enemies = [e for e in self.enemies if not e.marked_for_deletion]
        self.projectiles = [p for p in self.projectiles if not p.marked_for_deletion]

    def _on_enemy_killed(self, enemy: Enemy):
        self.score += self.kill_score
        self.level.record_kill()
        logger.debug(
            f"Enemy down ({self.enemies_defeated}/{self.level_goal}), score {self.score}"
        )

    # ----------------------------
    # Spawning / levels
    # ----------------------------

    def spawn_enemy(self) -> Optional[Enemy]:
        """Spawner callback: one enemy just outside a random viewport edge"""
        if not self.is_running or self.level.transitioning:
            return None

        w, h, m = self.viewport.width, self.viewport.height, self.spawn_margin
        edge = self.rng.randrange(4)  # 0 top, 1 right, 2 bottom, 3 left
        if edge == 0:
            x, y = self.rng.random() * w, -m
        elif edge == 1:
            x, y = w + m, self.rng.random() * h
        elif edge == 2:
            x, y = self.rng.random() * w, h + m
        else:
            x, y = -m, self.rng.random() * h

        enemy = Enemy.from_level(x, y, self.level.config, self.rng)
        self.enemies.append(enemy)
        return enemy

    def check_level_progress(self):
        if self.level.should_transition():
            self.begin_transition()

    def begin_transition(self):
        self.level.begin_transition()
        self.stop_spawner()
        self.hud.show(Panel.LEVEL_BANNER, f"LEVEL {self.level_number + 1}")
        self._transition = self.scheduler.call_later(
            self.transition_delay, self._complete_transition, name="level-transition"
        )
        logger.info(f"Level {self.level_number} cleared")

    def _complete_transition(self):
        self._transition = None
        if not self.is_running:
            return
        self.hud.hide(Panel.LEVEL_BANNER)
        self.level.complete_transition()
        self.player.heal(self.level_heal)
        self.start_spawner()
        self.audio.play("levelup")
        self.update_ui()
        logger.info(
            f"Level {self.level_number} begins: goal {self.level_goal}, "
            f"spawn every {self.level.spawn_interval:.0f} ms"
        )

    # ----------------------------
    # Effects / UI
    # ----------------------------

    def add_explosion(self, x: float, y: float, small: bool = False):
        self.particles.extend(explosion(x, y, self.rng, small=small))
        self.audio.play("explosion")

    def update_ui(self):
        self.hud.set_score(self.score)
        self.hud.set_level(self.level_number)
        self.hud.set_enemies_left(self.level.enemies_remaining)
        self.hud.set_health(self.player.health_fraction * 100)

    # ----------------------------
    # Drawing
    # ----------------------------

    def draw(self, surface):
        # Translucent wash instead of a clear leaves motion trails
        surface.overlay(TRAIL_COLOR, TRAIL_ALPHA)

        surface.save()
        surface.translate(self.shake.x, self.shake.y)

        self.player.draw(surface)
        for projectile in self.projectiles:
            projectile.draw(surface)
        for enemy in self.enemies:
            enemy.draw(surface)
        for particle in self.particles:
            particle.draw(surface)

        surface.restore()

"""
Game entity dataclasses

Every entity exposes x, y, width, height, marked_for_deletion, update() and
draw(surface). Entities never hold references to the session or to each
other; whatever they need per frame is passed in.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .utils import Color, Viewport, clamp, hsl_to_rgb

if TYPE_CHECKING:
    from .controls import InputState
    from .levels import LevelConfig

WHITE: Color = (255, 255, 255)


@dataclass
class Projectile:
    """Player shot; dies when it leaves the playfield or hits something"""
    x: float
    y: float
    vx: float
    vy: float
    width: float = 10.0
    height: float = 10.0
    radius: float = 5.0
    damage: float = 10.0
    color: Color = (255, 255, 0)
    marked_for_deletion: bool = False

    def update(self, dt: float, viewport: Viewport):
        self.x += self.vx
        self.y += self.vy

        if self.x < 0 or self.x > viewport.width or self.y < 0 or self.y > viewport.height:
            self.marked_for_deletion = True

    def draw(self, surface):
        surface.save()
        surface.set_glow(self.color, 5)
        surface.fill_circle(self.x, self.y, self.radius, self.color)
        surface.restore()


@dataclass
class Player:
    """Player avatar with momentum movement and a held-trigger gun"""
    x: float
    y: float
    width: float = 40.0
    height: float = 40.0
    vx: float = 0.0
    vy: float = 0.0
    speed: float = 0.5  # impulse per frame while a direction is held
    friction: float = 0.9
    angle: float = 0.0
    max_hp: float = 100.0
    hp: float = 100.0
    shoot_interval: float = 150.0  # ms
    shoot_timer: float = 0.0
    bullet_speed: float = 10.0
    color: Color = (0, 255, 204)

    @classmethod
    def spawn(cls, viewport: Viewport, **kwargs) -> "Player":
        """Create a player centred in the viewport"""
        width = kwargs.pop("width", cls.width)
        height = kwargs.pop("height", cls.height)
        kwargs.setdefault("hp", kwargs.get("max_hp", cls.max_hp))
        # Trigger starts armed so the very first press fires
        kwargs.setdefault("shoot_timer", kwargs.get("shoot_interval", cls.shoot_interval))
        player = cls(
            x=viewport.width / 2 - width / 2,
            y=viewport.height / 2 - height / 2,
            width=width,
            height=height,
            **kwargs,
        )
        return player

    @property
    def center(self):
        return self.x + self.width / 2, self.y + self.height / 2

    def update(self, dt: float, controls: "InputState", viewport: Viewport) -> Optional[Projectile]:
        """Advance one frame. Returns the projectile fired this frame, if any."""
        if controls.direction_held("up"):
            self.vy -= self.speed
        if controls.direction_held("down"):
            self.vy += self.speed
        if controls.direction_held("left"):
            self.vx -= self.speed
        if controls.direction_held("right"):
            self.vx += self.speed

        self.x += self.vx
        self.y += self.vy

        self.vx *= self.friction
        self.vy *= self.friction

        # Keep in bounds (viewport may have been resized since last frame)
        self.x = clamp(self.x, 0.0, max(0.0, viewport.width - self.width))
        self.y = clamp(self.y, 0.0, max(0.0, viewport.height - self.height))

        cx, cy = self.center
        self.angle = math.atan2(controls.pointer.y - cy, controls.pointer.x - cx)

        if not controls.pointer.down:
            # Pre-arm so the first press fires immediately
            self.shoot_timer = self.shoot_interval
            return None

        if self.shoot_timer >= self.shoot_interval:
            self.shoot_timer = 0.0
            return self.shoot()

        self.shoot_timer += dt
        return None

    def shoot(self) -> Projectile:
        cx, cy = self.center
        return Projectile(
            x=cx,
            y=cy,
            vx=math.cos(self.angle) * self.bullet_speed,
            vy=math.sin(self.angle) * self.bullet_speed,
        )

    def take_damage(self, amount: float):
        self.hp = max(0.0, self.hp - amount)

    def heal(self, amount: float):
        self.hp = min(self.max_hp, self.hp + amount)

    @property
    def health_fraction(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return clamp(self.hp / self.max_hp, 0.0, 1.0)

    def draw(self, surface):
        cx, cy = self.center
        surface.save()
        surface.translate(cx, cy)
        surface.rotate(self.angle)

        # Body
        surface.set_glow(self.color, 10)
        surface.fill_rect(-self.width / 2, -self.height / 2, self.width, self.height, self.color)

        # Cannon
        surface.fill_rect(0, -5, 30, 10, WHITE)

        surface.restore()


@dataclass
class Enemy:
    """Enemy that flies straight at the player"""
    x: float
    y: float
    speed: float = 2.0
    hp: float = 30.0
    color: Color = (255, 0, 102)
    width: float = 30.0
    height: float = 30.0
    angle: float = 0.0
    marked_for_deletion: bool = False

    @classmethod
    def from_level(cls, x: float, y: float, config: "LevelConfig", rng: random.Random) -> "Enemy":
        return cls(
            x=x,
            y=y,
            speed=config.enemy_speed + rng.random(),
            hp=config.enemy_hp,
            color=config.color,
        )

    def update(self, dt: float, target_x: float, target_y: float):
        self.angle = math.atan2(target_y - self.y, target_x - self.x)
        self.x += math.cos(self.angle) * self.speed
        self.y += math.sin(self.angle) * self.speed

    def take_damage(self, amount: float) -> bool:
        """
        Apply damage. Returns True only for the hit that kills this enemy,
        so a kill can never be counted twice.
        """
        if self.marked_for_deletion:
            return False
        was_alive = self.hp > 0
        self.hp -= amount
        if was_alive and self.hp <= 0:
            self.marked_for_deletion = True
            return True
        return False

    def draw(self, surface):
        surface.save()
        surface.translate(self.x + self.width / 2, self.y + self.height / 2)
        surface.rotate(self.angle)

        surface.set_glow(self.color, 10)
        surface.fill_rect(-self.width / 2, -self.height / 2, self.width, self.height, self.color)
        # Eye
        surface.fill_rect(5, -5, 10, 10, WHITE)

        surface.restore()


@dataclass
class Particle:
    """Explosion spark that fades out"""
    x: float
    y: float
    vx: float
    vy: float
    decay: float
    size: float
    color: Color
    life: float = 1.0
    marked_for_deletion: bool = False

    @property
    def width(self) -> float:
        return self.size * 2

    @property
    def height(self) -> float:
        return self.size * 2

    @classmethod
    def random(cls, x: float, y: float, rng: random.Random) -> "Particle":
        return cls(
            x=x,
            y=y,
            vx=(rng.random() - 0.5) * 10,
            vy=(rng.random() - 0.5) * 10,
            decay=rng.random() * 0.05 + 0.02,
            size=rng.random() * 5 + 2,
            color=hsl_to_rgb(rng.random() * 60 + 10),  # fire colours
        )

    def update(self, dt: float):
        self.x += self.vx
        self.y += self.vy
        self.life -= self.decay
        if self.life <= 0:
            self.marked_for_deletion = True

    def draw(self, surface):
        surface.set_alpha(max(0.0, self.life))
        surface.fill_circle(self.x, self.y, self.size, self.color)
        surface.set_alpha(1.0)

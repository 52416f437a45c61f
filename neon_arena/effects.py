"""
Cosmetic feedback: screen shake and explosion bursts
"""

import random
from typing import List

from .entities import Particle

SMALL_BURST = 5
NORMAL_BURST = 20


class ScreenShake:
    """Random render offset that lasts for a fixed number of milliseconds"""

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()
        self.intensity = 0.0
        self.duration = 0.0
        self.x = 0.0
        self.y = 0.0

    def trigger(self, intensity: float, duration: float):
        self.intensity = intensity
        self.duration = duration

    def update(self, dt: float):
        if self.duration > 0:
            self.duration -= dt
        if self.duration > 0:
            self.x = (self.rng.random() - 0.5) * self.intensity
            self.y = (self.rng.random() - 0.5) * self.intensity
        else:
            self.x = 0.0
            self.y = 0.0

    @property
    def offset(self):
        return self.x, self.y

    def reset(self):
        self.intensity = 0.0
        self.duration = 0.0
        self.x = 0.0
        self.y = 0.0


def explosion(x: float, y: float, rng: random.Random, small: bool = False) -> List[Particle]:
    """Particle burst centred on (x, y)"""
    count = SMALL_BURST if small else NORMAL_BURST
    return [Particle.random(x, y, rng) for _ in range(count)]

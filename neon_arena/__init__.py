"""Neon Arena - top-down arena shooter"""

from .world import Session
from .arena_env import ArenaEnv, run_random_episode

__all__ = ['Session', 'ArenaEnv', 'run_random_episode']

"""Shared fixtures: recording surface, fake audio, a seeded session"""

import random

import pytest

from neon_arena.controls import InputState
from neon_arena.hud import Hud
from neon_arena.scheduler import Scheduler
from neon_arena.utils import Viewport
from neon_arena.world import Session


class RecordingSurface:
    """Surface that just remembers every call"""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name, args))
        return record

    def ops(self):
        return [c[0] for c in self.calls]


class FakeAudio:
    def __init__(self):
        self.played = []

    def play(self, name):
        self.played.append(name)


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def viewport():
    return Viewport(800, 600)


@pytest.fixture
def session(viewport, audio):
    return Session(
        viewport=viewport,
        controls=InputState(),
        hud=Hud(),
        audio=audio,
        scheduler=Scheduler(),
        rng=random.Random(1234),
    )


@pytest.fixture
def running(session):
    session.start()
    return session

"""
Launch the interactive game in an Arcade window
"""

import argparse
import logging
import random

import arcade

from neon_arena.audio import NullAudio, SoundBoard
from neon_arena.configs.arena_config import (
    AUDIO_CONFIG,
    KEY_BINDINGS,
    LEVEL_TABLE,
    PLAYER_CONFIG,
    SESSION_CONFIG,
    WINDOW_CONFIG,
)
from neon_arena.controls import InputState
from neon_arena.hud import Hud
from neon_arena.levels import levels_from_dicts
from neon_arena.scheduler import Scheduler
from neon_arena.utils import Viewport, seed_everything
from neon_arena.window import ArenaWindow
from neon_arena.world import Session


def build_session(width: int, height: int, seed=None, mute: bool = False) -> Session:
    """Wire a Session to real collaborators"""
    audio = NullAudio() if mute else SoundBoard(**AUDIO_CONFIG).open()
    return Session(
        viewport=Viewport(width, height),
        controls=InputState(bindings=dict(KEY_BINDINGS)),
        hud=Hud(),
        audio=audio,
        scheduler=Scheduler(),
        rng=random.Random(seed),
        levels=levels_from_dicts(LEVEL_TABLE),
        player_config=PLAYER_CONFIG,
        **SESSION_CONFIG,
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play Neon Arena")
    parser.add_argument(
        "--width",
        type=int,
        default=WINDOW_CONFIG["width"],
        help=f"Window width (default: {WINDOW_CONFIG['width']})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=WINDOW_CONFIG["height"],
        help=f"Window height (default: {WINDOW_CONFIG['height']})",
    )
    parser.add_argument("--fullscreen", action="store_true", help="Start fullscreen")
    parser.add_argument("--mute", action="store_true", help="Disable sound")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    seed_everything(args.seed)

    session = build_session(args.width, args.height, seed=args.seed, mute=args.mute)
    ArenaWindow(
        session,
        title=WINDOW_CONFIG["title"],
        resizable=WINDOW_CONFIG["resizable"],
        fullscreen=args.fullscreen or WINDOW_CONFIG["fullscreen"],
    )
    arcade.run()


if __name__ == "__main__":
    main()

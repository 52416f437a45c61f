"""
Sound cues for game events.

The four cues are synthesised with numpy (oscillator sweep + gain envelope),
written to WAV once, then handed to arcade for playback. Audio is never
allowed to interrupt the game: any failure is logged and the cue is skipped.
"""

from __future__ import annotations

import logging
import os
import tempfile
import wave
from typing import Dict, List, Optional, Tuple

import numpy as np

logger = logging.getLogger("neon_arena.audio")

CUE_NAMES = ("shoot", "hit", "explosion", "levelup")

# name -> waveform, frequency ramp, gain ramp. Ramps are (time_s, value) points.
CUES: Dict[str, dict] = {
    "shoot": {
        "wave": "square",
        "freq": [(0.0, 440.0), (0.1, 110.0)],
        "gain": [(0.0, 0.1), (0.1, 0.01)],
        "ramp": "exponential",
        "duration": 0.1,
    },
    "hit": {
        "wave": "triangle",
        "freq": [(0.0, 200.0), (0.1, 50.0)],
        "gain": [(0.0, 0.1), (0.1, 0.01)],
        "ramp": "exponential",
        "duration": 0.1,
    },
    "explosion": {
        "wave": "sawtooth",
        "freq": [(0.0, 100.0), (0.3, 10.0)],
        "gain": [(0.0, 0.2), (0.3, 0.01)],
        "ramp": "exponential",
        "duration": 0.3,
    },
    "levelup": {
        "wave": "sine",
        "freq": [(0.0, 400.0), (0.2, 800.0), (0.4, 1200.0)],
        "gain": [(0.0, 0.3), (0.6, 0.0)],
        "ramp": "linear",
        "duration": 0.6,
    },
}


def _envelope(points: List[Tuple[float, float]], t: np.ndarray, ramp: str) -> np.ndarray:
    """Piecewise ramp through `points`, held flat after the last one"""
    times = np.array([p[0] for p in points])
    values = np.array([p[1] for p in points])
    if ramp == "exponential":
        # Interpolate in log space; values must stay positive
        return np.exp(np.interp(t, times, np.log(np.maximum(values, 1e-6))))
    return np.interp(t, times, values)


def _oscillator(kind: str, phase: np.ndarray) -> np.ndarray:
    if kind == "sine":
        return np.sin(phase)
    if kind == "square":
        return np.where(np.sin(phase) >= 0, 1.0, -1.0)
    saw = 2.0 * ((phase / (2 * np.pi)) % 1.0) - 1.0
    if kind == "sawtooth":
        return saw
    if kind == "triangle":
        return 2.0 * np.abs(saw) - 1.0
    raise ValueError(f"Unknown waveform: {kind}")


def synthesize_cue(name: str, sample_rate: int = 22050) -> np.ndarray:
    """Render a cue to float samples in [-1, 1]"""
    if name not in CUES:
        raise ValueError(f"Unknown sound cue: {name!r} (expected one of {CUE_NAMES})")
    cue = CUES[name]
    n = int(cue["duration"] * sample_rate)
    t = np.arange(n) / sample_rate

    freq = _envelope(cue["freq"], t, cue["ramp"])
    gain = _envelope(cue["gain"], t, cue["ramp"])
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate

    samples = _oscillator(cue["wave"], phase) * gain
    return np.clip(samples, -1.0, 1.0).astype(np.float32)


def write_wav(path: str, samples: np.ndarray, sample_rate: int = 22050):
    """Write mono 16-bit PCM"""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    with wave.open(path, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm.tobytes())


class NullAudio:
    """Silent audio collaborator (headless runs, --mute)"""

    def play(self, name: str):
        pass


class SoundBoard:
    """
    Fire-and-forget playback of the named cues.

    `backend` needs load_sound(path) and play_sound(sound, volume=...); arcade
    is used when none is given.
    """

    def __init__(self, backend=None, cache_dir: Optional[str] = None,
                 volume: float = 1.0, sample_rate: int = 22050):
        self.backend = backend
        self.cache_dir = cache_dir
        self.volume = volume
        self.sample_rate = sample_rate
        self.sounds: Dict[str, object] = {}
        self.enabled = False

    def open(self) -> "SoundBoard":
        """Synthesise and load every cue. Leaves the board silent on failure."""
        try:
            if self.backend is None:
                import arcade
                self.backend = arcade
            if self.cache_dir is None:
                self.cache_dir = tempfile.mkdtemp(prefix="neon_arena_audio_")
            os.makedirs(self.cache_dir, exist_ok=True)

            for name in CUE_NAMES:
                path = os.path.join(self.cache_dir, f"{name}.wav")
                write_wav(path, synthesize_cue(name, self.sample_rate), self.sample_rate)
                self.sounds[name] = self.backend.load_sound(path)
            self.enabled = True
        except Exception as e:
            logger.debug(f"Audio unavailable, continuing without sound: {e}")
            self.sounds = {}
            self.enabled = False
        return self

    def play(self, name: str):
        if not self.enabled:
            return
        sound = self.sounds.get(name)
        if sound is None:
            logger.debug(f"No sound loaded for cue {name!r}")
            return
        try:
            self.backend.play_sound(sound, volume=self.volume)
        except Exception as e:
            logger.debug(f"Playback of {name!r} failed: {e}")

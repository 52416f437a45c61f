"""Tests for cue synthesis and the fault-tolerant sound board"""

import wave

import numpy as np
import pytest

from neon_arena.audio import CUE_NAMES, CUES, NullAudio, SoundBoard, synthesize_cue, write_wav


class FakeBackend:
    def __init__(self, fail_load=False, fail_play=False):
        self.fail_load = fail_load
        self.fail_play = fail_play
        self.loaded = []
        self.played = []

    def load_sound(self, path):
        if self.fail_load:
            raise RuntimeError("no audio device")
        self.loaded.append(path)
        return path

    def play_sound(self, sound, volume=1.0):
        if self.fail_play:
            raise RuntimeError("device suspended")
        self.played.append((sound, volume))


class TestSynthesis:
    @pytest.mark.parametrize("name", CUE_NAMES)
    def test_cue_shape(self, name):
        samples = synthesize_cue(name, sample_rate=8000)
        assert samples.dtype == np.float32
        assert len(samples) == int(CUES[name]["duration"] * 8000)
        assert np.all(np.abs(samples) <= 1.0)
        assert np.any(samples != 0)

    def test_unknown_cue(self):
        with pytest.raises(ValueError):
            synthesize_cue("jump")

    def test_write_wav(self, tmp_path):
        path = str(tmp_path / "shoot.wav")
        samples = synthesize_cue("shoot", sample_rate=8000)
        write_wav(path, samples, sample_rate=8000)
        with wave.open(path, "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getframerate() == 8000
            assert wf.getnframes() == len(samples)


class TestSoundBoard:
    def test_loads_and_plays(self, tmp_path):
        backend = FakeBackend()
        board = SoundBoard(backend=backend, cache_dir=str(tmp_path), volume=0.5).open()
        assert board.enabled
        assert len(backend.loaded) == len(CUE_NAMES)

        board.play("hit")
        assert backend.played == [(str(tmp_path / "hit.wav"), 0.5)]

    def test_playback_failure_is_ignored(self, tmp_path):
        board = SoundBoard(backend=FakeBackend(fail_play=True), cache_dir=str(tmp_path)).open()
        board.play("explosion")

    def test_load_failure_leaves_board_silent(self, tmp_path):
        backend = FakeBackend(fail_load=True)
        board = SoundBoard(backend=backend, cache_dir=str(tmp_path)).open()
        assert not board.enabled
        board.play("shoot")
        assert backend.played == []

    def test_unknown_cue_is_skipped(self, tmp_path):
        backend = FakeBackend()
        board = SoundBoard(backend=backend, cache_dir=str(tmp_path)).open()
        board.play("fanfare")
        assert backend.played == []

    def test_null_audio(self):
        NullAudio().play("shoot")

"""Tests for the per-frame rendering signals."""

import pytest

from crt_snake.codec import CellFlag
from crt_snake.config import GameConfig
from crt_snake.engine import GameEngine
from crt_snake.signals import FrameSignals, noise_level


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestNoiseLevel:
    def test_ramp(self):
        assert noise_level(0.0, 2.0) == 0.0
        assert noise_level(1.0, 2.0) == pytest.approx(0.5)
        assert noise_level(2.0, 2.0) == 1.0
        assert noise_level(30.0, 2.0) == 1.0

    def test_negative_elapsed_clamped(self):
        assert noise_level(-1.0, 2.0) == 0.0

    def test_invalid_ramp(self):
        with pytest.raises(ValueError, match="positive"):
            noise_level(1.0, 0.0)


class TestFrameSignals:
    def _engine(self, clock):
        config = GameConfig(grid_size=16, start_coil=0, time_to_full_noise=2.0)
        return GameEngine(config, seed=0, clock=clock)

    def test_capture_running(self):
        clock = FakeClock(5.0)
        engine = self._engine(clock)
        clock.now = 6.0
        frame = FrameSignals.capture(engine)
        assert not frame.game_over
        assert frame.time_since_score == pytest.approx(1.0)
        assert frame.noise_level == pytest.approx(0.5)
        assert frame.score == engine.current_score()
        assert frame.grid.shape == (16, 16)

    def test_no_noise_on_game_over(self):
        clock = FakeClock(5.0)
        engine = self._engine(clock)
        for pos in engine.grid.find_flag(CellFlag.APPLE):
            engine.grid.set(*pos, CellFlag.EMPTY)
        engine.grid.set(6, 8, CellFlag.SEGMENT)
        engine.tick()
        clock.now = 100.0
        frame = FrameSignals.capture(engine)
        assert frame.game_over
        assert frame.noise_level == 0.0

    def test_grid_is_detached(self):
        engine = self._engine(FakeClock())
        frame = FrameSignals.capture(engine)
        frame.grid[0, 0] = CellFlag.EMPTY
        assert engine.grid.get(0, 0) & CellFlag.SEGMENT

    def test_to_dict(self):
        engine = self._engine(FakeClock())
        payload = FrameSignals.capture(engine).to_dict(tick=3)
        assert payload["tick"] == 3
        assert len(payload["grid"]) == 16
        assert set(payload) == {
            "tick", "score", "game_over", "time_since_score",
            "noise_level", "grid",
        }
        assert "tick" not in FrameSignals.capture(engine).to_dict()

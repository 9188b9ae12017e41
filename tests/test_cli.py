"""Tests for the command line tools."""

import json

from crt_snake.cli import _build_parser, main
from crt_snake.config import GameConfig


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_simulate_defaults(self):
        args = _build_parser().parse_args(["simulate"])
        assert args.command == "simulate"
        assert args.config is None
        assert args.grid_size is None
        assert args.max_ticks == 10_000
        assert not args.json

    def test_simulate_with_flags(self):
        args = _build_parser().parse_args([
            "--log-level", "DEBUG",
            "simulate",
            "--grid-size", "12",
            "--start-coil", "1",
            "--growth-ratio", "1.5",
            "--seed", "3",
        ])
        assert args.log_level == "DEBUG"
        assert args.grid_size == 12
        assert args.start_coil == 1
        assert args.growth_ratio == 1.5
        assert args.seed == 3


class TestCLISimulate:
    def test_json_output(self, capsys):
        code = main([
            "simulate",
            "--grid-size", "12",
            "--start-coil", "0",
            "--seed", "1",
            "--max-ticks", "20",
            "--json",
        ])
        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["ticks"] <= 20
        assert "score" in result

    def test_text_output(self, capsys):
        code = main(["simulate", "--grid-size", "12", "--start-coil", "0",
                     "--max-ticks", "5"])
        assert code == 0
        assert "Simulation" in capsys.readouterr().out

    def test_invalid_override(self):
        assert main(["simulate", "--grid-size", "10", "--start-coil", "9"]) == 2

    def test_config_file(self, tmp_path, capsys):
        path = tmp_path / "cfg.json"
        GameConfig(grid_size=10, start_coil=0).save(path)
        code = main(["simulate", "--config", str(path), "--max-ticks", "3",
                     "--json"])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["ticks"] <= 3


class TestCLIConfig:
    def test_prints_defaults(self, capsys):
        assert main(["config"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["grid_size"] == 32

    def test_writes_file(self, tmp_path):
        path = tmp_path / "out" / "config.json"
        assert main(["config", str(path)]) == 0
        assert GameConfig.load(path) == GameConfig()

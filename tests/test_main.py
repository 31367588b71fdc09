"""Test the command-line entrypoint."""
from pathlib import Path

import pytest

from calculator_history import main as entrypoint
from calculator_history.main import CliArgs, build_config, parse_args


def test_parse_args_defaults() -> None:
    """Without arguments nothing is overridden."""
    assert parse_args([]) == CliArgs()


def test_parse_args_values(tmp_path: Path) -> None:
    """Arguments are validated into CliArgs."""
    args = parse_args(["--env-file", str(tmp_path / ".env"), "--host", "0.0.0.0", "--port", "8080"])
    assert args.env_file == tmp_path / ".env"
    assert str(args.host) == "0.0.0.0"
    assert args.port == 8080


@pytest.mark.parametrize("argv", [["--port", "0"], ["--port", "70000"], ["--host", "not-an-ip"]])
def test_parse_args_invalid(argv) -> None:
    """Invalid arguments exit with an argparse error."""
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_build_config_applies_overrides(tmp_path: Path, monkeypatch) -> None:
    """Env file values are loaded and CLI values take precedence."""
    for var in ("PORT", "HOST", "DATABASE_URL", "PROCEED_SUCCESS"):
        # Register each variable so that values loaded from the file are removed afterwards
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    env_file = tmp_path / ".env"
    env_file.write_text("DATABASE_URL=sqlite://\nPORT=4000\nPROCEED_SUCCESS=1\n")

    config = build_config(CliArgs(env_file=env_file, port=5000))
    assert config.database_url == "sqlite://"
    assert config.proceed_success is True
    assert config.port == 5000


def test_main_runs_uvicorn(monkeypatch) -> None:
    """main serves the application on the configured address."""
    calls = {}

    def fake_run(app, host, port):
        calls.update(app=app, host=host, port=port)

    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setattr(entrypoint.uvicorn, "run", fake_run)
    entrypoint.main(["--env-file", "/nonexistent/.env", "--host", "127.0.0.1", "--port", "8123"])

    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 8123
    assert calls["app"].title == "Calculator History"

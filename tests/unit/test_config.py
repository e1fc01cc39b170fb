"""Unit tests for config loading and the feedterm entry point."""

import logging
from unittest.mock import patch

import pytest

from feedterm.cli import main as cli_main
from feedterm.config import ConfigError, DashboardConfig, load_config


@pytest.fixture(autouse=True)
def _no_env_url(monkeypatch):
    monkeypatch.delenv("FEEDTERM_API_URL", raising=False)


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "nope.yaml"))
    assert config == DashboardConfig()


def test_values_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "api_url: http://blog.test:9000\n"
        "clamp_content_scroll: true\n"
        "mask_secrets: false\n"
        "request_timeout: 3\n"
    )
    config = load_config(str(path))
    assert config.api_url == "http://blog.test:9000"
    assert config.clamp_content_scroll is True
    assert config.mask_secrets is False
    assert config.request_timeout == 3


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "config.yaml"
    path.write_text("colour: blue\ndraft_file: draft.md\n")
    with caplog.at_level(logging.WARNING):
        config = load_config(str(path))
    assert config.draft_file == "draft.md"
    assert "colour" in caplog.text


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(str(path)) == DashboardConfig()


def test_malformed_yaml_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("api_url: [unclosed\n")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(str(path))


def test_non_mapping_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError, match="expected mapping, got list"):
        load_config(str(path))


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("api_url: http://file.test\n")
    monkeypatch.setenv("FEEDTERM_API_URL", "http://env.test")
    assert load_config(str(path)).api_url == "http://env.test"


def test_main_applies_cli_overrides(tmp_path):
    log_file = tmp_path / "logs" / "feedterm.log"
    with patch.object(cli_main, "run_dashboard", return_value=0) as run, \
            patch.object(cli_main, "setup_logging") as setup:
        rc = cli_main.main([
            "--config", str(tmp_path / "none.yaml"),
            "--api-url", "http://cli.test",
            "--log-file", str(log_file),
            "--debug",
        ])

    assert rc == 0
    config = run.call_args.args[0]
    assert config.api_url == "http://cli.test"
    assert config.log_file == str(log_file)
    setup.assert_called_once_with(config, debug=True)


def test_main_reports_bad_config(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("just a string\n")
    with patch.object(cli_main, "run_dashboard") as run:
        rc = cli_main.main(["--config", str(path)])
    assert rc == 2
    run.assert_not_called()
    assert "expected mapping" in capsys.readouterr().err


def test_setup_logging_writes_to_file(tmp_path):
    config = DashboardConfig(log_file=str(tmp_path / "logs" / "feedterm.log"))
    with patch.object(cli_main.logging, "basicConfig") as basic:
        cli_main.setup_logging(config)
    kwargs = basic.call_args.kwargs
    assert kwargs["filename"] == str(tmp_path / "logs" / "feedterm.log")
    assert kwargs["level"] == logging.INFO
    assert (tmp_path / "logs").is_dir()

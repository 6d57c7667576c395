import pytest
from click.testing import CliRunner

import retagpush.cli as cli_module


@pytest.fixture
def captured(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VERSION", raising=False)
    monkeypatch.delenv("REPOSITORY_PREFIX", raising=False)

    captured = {}

    class FakeOrchestrator:
        def __init__(self, config, services, log):
            captured["config"] = config
            captured["services"] = services
            captured["log"] = log

        def run(self):
            return captured.get("exit_code", 0)

    monkeypatch.setattr(cli_module, "ImageTransferOrchestrator", FakeOrchestrator)
    return captured


def test_cli_uses_builtin_defaults(captured):
    result = CliRunner().invoke(cli_module.main, [])

    config = captured["config"]
    assert result.exit_code == 0
    assert config.version == "3.2.7"
    assert config.registry_prefix == "localhost:5001"
    assert config.log_path == "podman-retag-push.log"
    assert config.retry.max_attempts == 3
    assert config.retry.delay_seconds == 5.0
    assert config.cleanup is True
    assert config.cleanup_source is True
    assert len(captured["services"]) == 8


def test_cli_uses_config_and_allows_cli_override(tmp_path, captured):
    config_file = tmp_path / "transfer.yml"
    config_file.write_text(
        "version: '4.0.0'\n"
        "repository_prefix: registry.internal:5000\n"
        "services: [api, web]\n"
        "max_attempts: 5\n"
        "cleanup_source: false\n",
        encoding="utf-8",
    )

    result = CliRunner().invoke(
        cli_module.main,
        ["--config", str(config_file), "--version", "4.1.0", "--service", "worker", "--dry-run"],
    )

    config = captured["config"]
    assert result.exit_code == 0
    assert config.version == "4.1.0"
    assert config.registry_prefix == "registry.internal:5000"
    assert config.retry.max_attempts == 5
    assert config.cleanup_source is False
    assert config.dry_run is True
    assert captured["services"] == ["worker"]


def test_cli_environment_overrides_config_file(tmp_path, captured, monkeypatch):
    (tmp_path / ".retagpush.yml").write_text(
        "version: '1.0.0'\nrepository_prefix: from-config:5000\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("VERSION", "2.0.0")

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert captured["config"].version == "2.0.0"
    assert captured["config"].registry_prefix == "from-config:5000"


def test_cli_keeps_explicitly_empty_repository_prefix(captured, monkeypatch):
    monkeypatch.setenv("REPOSITORY_PREFIX", "")

    CliRunner().invoke(cli_module.main, [])

    assert captured["config"].registry_prefix == ""


def test_cli_exit_code_follows_orchestrator(captured):
    captured["exit_code"] = 1

    result = CliRunner().invoke(cli_module.main, ["--keep-source", "--no-cleanup"])

    assert result.exit_code == 1
    assert captured["config"].cleanup is False
    assert captured["config"].cleanup_source is False


def test_cli_reports_invalid_config(tmp_path, captured):
    config_file = tmp_path / "bad.yml"
    config_file.write_text("registry: nope\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, ["--config", str(config_file)])

    assert result.exit_code != 0
    assert "Unknown configuration keys: registry" in result.output
    assert "config" not in captured


def test_cli_rejects_quoted_boolean_in_config(tmp_path, captured):
    config_file = tmp_path / "transfer.yml"
    config_file.write_text("tls_verify: 'false'\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, ["--config", str(config_file)])

    assert result.exit_code != 0
    assert "'tls_verify' must be true or false" in result.output
    assert "config" not in captured

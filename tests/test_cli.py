from click.testing import CliRunner

import domainbuild.cli as cli_module
import domainbuild.services.command_runner as command_runner_module

DEMO_INPUT = (
    "test01\n"
    "itadmin@corp.local\n"
    "corp.local\n"
    "jdoe@corp.local\n"
    "\n"
    "asmith@corp.local\n"
    "y\n"
    "n\n"
    "\n"
)


def install_fake_builder(monkeypatch, exit_code=0):
    captured = {}

    class FakeBuilder:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        def run(self):
            return exit_code

    monkeypatch.setattr(cli_module, "DomainBuilder", FakeBuilder)
    return captured


def captured_log_files(directory):
    return sorted(path.name for path in directory.glob("build_log_*.log"))


def test_help_shows_banner_and_sections_without_creating_log(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--help", "--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 0
    assert "=== Debian Domain Build ===" in result.output
    assert "Usage:" in result.output
    assert "Examples:" in result.output
    assert "Features:" in result.output
    assert "Requirements:" in result.output
    assert "--demo" in result.output
    assert not (tmp_path / "logs").exists()


def test_unknown_option_exits_with_usage_hint(tmp_path, monkeypatch):
    captured = install_fake_builder(monkeypatch)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--bogus", "--log-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Unknown option: --bogus" in result.output
    assert "Use --help for usage information" in result.output
    assert captured == {}


def test_standard_run_requires_root(tmp_path, monkeypatch):
    captured = install_fake_builder(monkeypatch)
    monkeypatch.setattr(cli_module, "_is_root", lambda: False)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--log-dir", str(tmp_path / "logs")])

    assert result.exit_code == 1
    assert "must be run as root" in result.output
    assert "Usage: sudo domainbuild [OPTIONS]" in result.output
    assert captured == {}
    assert not (tmp_path / "logs").exists()


def test_demo_mode_does_not_require_root(tmp_path, monkeypatch):
    captured = install_fake_builder(monkeypatch)
    monkeypatch.setattr(cli_module, "_is_root", lambda: False)
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--demo", "--log-dir", str(tmp_path)])

    assert result.exit_code == 0
    assert captured["demo_mode"] is True
    assert captured["log_path"].startswith(str(tmp_path))
    assert "Log file initialized:" in result.output


def test_demo_without_root_logs_to_temp_directory_by_default(tmp_path, monkeypatch):
    captured = install_fake_builder(monkeypatch)
    monkeypatch.setattr(cli_module, "_is_root", lambda: False)
    monkeypatch.setattr(cli_module.tempfile, "gettempdir", lambda: str(tmp_path / "tmp"))
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--demo"])

    assert result.exit_code == 0, result.output
    log_dir = tmp_path / "tmp"
    assert captured["settings"].log_dir == str(log_dir)
    (log_name,) = captured_log_files(log_dir)
    assert "Root privileges verified" not in (log_dir / log_name).read_text(encoding="utf-8")


def test_builder_exit_code_is_propagated(tmp_path, monkeypatch):
    install_fake_builder(monkeypatch, exit_code=4)
    monkeypatch.setattr(cli_module, "_is_root", lambda: True)
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--log-dir", str(tmp_path)])

    assert result.exit_code == 4
    (log_name,) = captured_log_files(tmp_path)
    assert "[INFO] Root privileges verified" in (tmp_path / log_name).read_text(encoding="utf-8")


def test_cli_uses_config_and_allows_log_dir_override(tmp_path, monkeypatch):
    config_file = tmp_path / "site.yml"
    config_file.write_text(
        "emergency_account: RESCUE\n"
        "log_dir: /nonexistent/should-be-overridden\n"
        "extra_packages: [curl, tmux]\n",
        encoding="utf-8",
    )
    captured = install_fake_builder(monkeypatch)
    log_dir = tmp_path / "logs"

    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        ["--demo", "--config", str(config_file), "--log-dir", str(log_dir)],
    )

    assert result.exit_code == 0
    settings = captured["settings"]
    assert settings.emergency_account == "RESCUE"
    assert settings.extra_packages == ("curl", "tmux")
    assert settings.log_dir == str(log_dir)
    assert captured_log_files(log_dir)


def test_cli_uses_default_config_file_when_present(tmp_path, monkeypatch):
    (tmp_path / ".domainbuild.yml").write_text(
        f"log_dir: {tmp_path / 'from-config'}\n" "reboot_delay_seconds: 30\n",
        encoding="utf-8",
    )
    captured = install_fake_builder(monkeypatch)
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--demo"])

    assert result.exit_code == 0
    assert captured["settings"].reboot_delay_seconds == 30
    assert captured_log_files(tmp_path / "from-config")


def test_invalid_config_is_reported(tmp_path, monkeypatch):
    config_file = tmp_path / "site.yml"
    config_file.write_text("unknown_key: 1\n", encoding="utf-8")
    captured = install_fake_builder(monkeypatch)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--demo", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Unknown configuration keys: unknown_key" in result.output
    assert captured == {}


def test_demo_run_end_to_end_changes_nothing(tmp_path, monkeypatch):
    def refuse(*args, **kwargs):
        raise AssertionError("demo mode must not execute commands")

    monkeypatch.setattr(command_runner_module.subprocess, "run", refuse)
    monkeypatch.setattr(cli_module, "_is_root", lambda: False)
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--demo", "--log-dir", str(tmp_path)], input=DEMO_INPUT)

    assert result.exit_code == 0, result.output
    assert "[DEMO] Would execute: Join domain using realm" in result.output
    assert "Demo complete: this machine would be configured and joined to corp.local." in result.output
    assert "Demo Mode: Would reboot in 10 seconds..." in result.output

    (log_name,) = captured_log_files(tmp_path)
    log_text = (tmp_path / log_name).read_text(encoding="utf-8")
    assert "=== Debian Domain Build Log ===" in log_text
    assert "Demo Mode: Command would be executed" in log_text
    assert "[INFO] Hostname: test01" in log_text
    assert "[INFO] Script execution completed successfully" in log_text

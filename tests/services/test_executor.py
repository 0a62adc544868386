import pytest

from domainbuild.errors import CommandFailedError, FatalStepError
from domainbuild.models import command
from domainbuild.services.executor import StepExecutor


def test_demo_mode_logs_and_narrates_without_running(commands, recording_logger, console):
    executor = StepExecutor(commands, recording_logger, console, demo_mode=True)

    result = executor.run(command("apt-get", "install", "-y", "sudo"), "Install sudo package")

    assert commands.calls == []
    assert result.executed is False
    assert result.exit_code is None
    assert result.output is None
    assert result.succeeded
    assert recording_logger.messages("INFO") == [
        "Executing: Install sudo package",
        "Command: apt-get install -y sudo",
        "Demo Mode: Command would be executed",
    ]
    assert "  [DEMO] Would execute: Install sudo package" in console.file.getvalue()


def test_real_mode_logs_output_and_exit_code(commands, recording_logger, console):
    commands.outputs[("getent",)] = "sudo:x:27:jdoe"
    executor = StepExecutor(commands, recording_logger, console, demo_mode=False)

    result = executor.run(command("getent", "group", "sudo"), "Display current sudoers")

    assert [spec.argv for spec in commands.calls] == [("getent", "group", "sudo")]
    assert result.executed is True
    assert result.exit_code == 0
    assert recording_logger.messages("INFO") == [
        "Executing: Display current sudoers",
        "Command: getent group sudo",
        "Output: sudo:x:27:jdoe",
        "Exit code: 0",
    ]
    assert "[DEMO]" not in console.file.getvalue()


def test_empty_output_is_not_logged(commands, recording_logger, console):
    executor = StepExecutor(commands, recording_logger, console, demo_mode=False)

    executor.run(command("systemctl", "daemon-reload"), "Reload systemd daemon")

    assert not any(message.startswith("Output:") for message in recording_logger.messages())


def test_unchecked_failure_is_returned_to_the_caller(commands, recording_logger, console):
    commands.failures[("adduser",)] = 1
    executor = StepExecutor(commands, recording_logger, console, demo_mode=False)

    result = executor.run(command("adduser", "jdoe", "sudo"), "Add IT admin to sudo group")

    assert result.succeeded is False
    assert result.exit_code == 1


def test_checked_failure_with_catalog_code_is_fatal(commands, recording_logger, console):
    commands.failures[("realm", "join")] = 1
    executor = StepExecutor(commands, recording_logger, console, demo_mode=False)

    with pytest.raises(FatalStepError) as excinfo:
        executor.run(
            command("realm", "join", "corp.local"),
            "Join domain using realm",
            check=True,
            error_code="domain_join_failed",
            domain="corp.local",
        )

    assert excinfo.value.message == "Failed to join domain"
    assert "domain admin credentials" in excinfo.value.hint
    assert "Executing: Join domain using realm" in recording_logger.messages()


def test_checked_failure_without_catalog_code_is_unanticipated(commands, recording_logger, console):
    commands.failures[("hostnamectl",)] = 3
    executor = StepExecutor(commands, recording_logger, console, demo_mode=False)

    with pytest.raises(CommandFailedError) as excinfo:
        executor.run(command("hostnamectl", "set-hostname", "pc01"), "Set system hostname", check=True)

    assert excinfo.value.exit_code == 3
    assert excinfo.value.command == "hostnamectl set-hostname pc01"


def test_checked_command_never_fails_in_demo_mode(commands, recording_logger, console):
    commands.failures[("realm",)] = 1
    executor = StepExecutor(commands, recording_logger, console, demo_mode=True)

    result = executor.run(
        command("realm", "join", "corp.local"),
        "Join domain using realm",
        check=True,
        error_code="domain_join_failed",
        domain="corp.local",
    )

    assert result.succeeded
    assert commands.calls == []


def test_secret_stdin_is_never_rendered(commands, recording_logger, console):
    executor = StepExecutor(commands, recording_logger, console, demo_mode=False)

    executor.run(
        command("chpasswd", stdin="OZBACKUP:hunter2\n", secret_stdin=True),
        "Set OZBACKUP password",
    )

    assert "Command: chpasswd < [redacted]" in recording_logger.messages()
    assert all("hunter2" not in message for message in recording_logger.messages())
    assert commands.calls[0].stdin == "OZBACKUP:hunter2\n"


def test_plain_stdin_is_summarised():
    spec = command("tee", "/etc/file", stdin="one\ntwo\n")

    assert spec.render() == "tee /etc/file < [stdin: 2 line(s)]"

import io
import logging

import pytest
from rich.console import Console

from domainbuild.models import CommandOutcome
from domainbuild.services.prompts import Prompter

PASSWORD = "Emerg3ncy!pw"


class RecordingCommands:
    """Stands in for the system: records every command and never touches the host."""

    def __init__(self):
        self.calls = []
        self.failures = {}
        self.outputs = {}

    @staticmethod
    def _match(table, argv):
        for prefix, value in table.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return value
        return None

    def execute(self, spec):
        self.calls.append(spec)
        return CommandOutcome(
            exit_code=self._match(self.failures, spec.argv) or 0,
            output=self._match(self.outputs, spec.argv) or "",
        )

    def argvs(self):
        return [spec.argv for spec in self.calls]


class ScriptedInput:
    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, text, **kwargs):
        self.prompts.append((text, bool(kwargs.get("hide_input"))))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {text}")
        return self.answers.pop(0)


class RecordingLogger:
    def __init__(self):
        self.records = []

    def log(self, level, msg, *args):
        self.records.append((logging.getLevelName(level), msg % args if args else msg))

    def debug(self, msg, *args):
        self.log(logging.DEBUG, msg, *args)

    def info(self, msg, *args):
        self.log(logging.INFO, msg, *args)

    def warning(self, msg, *args):
        self.log(logging.WARNING, msg, *args)

    def error(self, msg, *args):
        self.log(logging.ERROR, msg, *args)

    def messages(self, level=None):
        return [message for name, message in self.records if level is None or name == level]


class RecordingViewer:
    def __init__(self, name="gedit"):
        self.name = name
        self.opened = []

    def open(self, path):
        self.opened.append(path)
        return self.name


@pytest.fixture
def commands():
    return RecordingCommands()


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


@pytest.fixture
def make_prompter():
    def factory(answers, demo_mode=False):
        scripted = ScriptedInput(answers)
        return Prompter(demo_mode=demo_mode, prompt_func=scripted), scripted

    return factory


@pytest.fixture
def viewer():
    return RecordingViewer()

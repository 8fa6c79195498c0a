import pytest

import colossus
from colossus import SeatLedger


class ScriptedConsole:
    """Feeds canned answers to ``read`` and records everything written."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []
        self.lines = []

    def read(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def write(self, text: str) -> None:
        self.lines.append(text)

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


@pytest.fixture
def outbound():
    return SeatLedger("Outbound")


@pytest.fixture
def inbound():
    return SeatLedger("Inbound")


@pytest.fixture
def console():
    def _make(*answers):
        return ScriptedConsole(answers)
    return _make


@pytest.fixture
def log_file(tmp_path):
    """Route loguru to a file at DEBUG for the test, then restore stderr."""
    path = tmp_path / "colossus.log"
    colossus.configure_logging("DEBUG", str(path))
    yield path
    colossus.logger.remove()
    colossus.logger.add(colossus.sys.stderr)

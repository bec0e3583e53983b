import pytest

from history.logging_history import HistoryLogger
from history.session import MemorySessionStore


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def logger(tmp_path):
    return HistoryLogger(str(tmp_path / "logs" / "history.log"), console=False)


@pytest.fixture
def session():
    return MemorySessionStore()

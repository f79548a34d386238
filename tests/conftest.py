"""
Pytest configuration and shared fixtures for the workmon test suite.

This module provides common fixtures, including an in-memory process table
that stands in for psutil.Process so that resolution, discovery, sampling and
termination can be tested without touching real processes.
"""

import logging
import sys
from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional

import psutil
import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from workmon.config import clear_config_cache, get_config_path, set_config_path  # noqa: E402
from workmon.models import ProcessHistory, ProcessSample  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Synthetic process table
# ============================================================================


@dataclass
class FakeEntry:
    """State of one synthetic process."""

    pid: int
    name: str
    children: List[int] = field(default_factory=list)
    rss: int = 1024 * 1024
    vms: int = 4 * 1024 * 1024
    swap: int = 0
    cpu_percent: float = 0.0
    alive: bool = True
    zombie: bool = False
    deny_children: bool = False
    deny_signal: bool = False
    deny_swap: bool = False


class FakeProcess:
    """
    Minimal psutil.Process look-alike bound to one FakeEntry.

    A handle stays bound to the entry it was created for, so replacing the
    entry of a PID (see FakeProcessTable.recycle) makes old handles report
    not running, like psutil's create-time check does.
    """

    def __init__(self, table: "FakeProcessTable", entry: FakeEntry):
        self._table = table
        self._entry = entry
        self.pid = entry.pid
        self.cpu_reads = 0

    def _check(self) -> FakeEntry:
        if not self.is_running():
            raise psutil.NoSuchProcess(self.pid)
        return self._entry

    def is_running(self) -> bool:
        return self._entry.alive and self._table.entries.get(self.pid) is self._entry

    def status(self) -> str:
        entry = self._check()
        return psutil.STATUS_ZOMBIE if entry.zombie else psutil.STATUS_RUNNING

    def children(self) -> List["FakeProcess"]:
        entry = self._check()
        if entry.deny_children:
            raise psutil.AccessDenied(self.pid)
        return [
            FakeProcess(self._table, self._table.entries[pid])
            for pid in entry.children
            if pid in self._table.entries and self._table.entries[pid].alive
        ]

    def oneshot(self):
        return nullcontext()

    def name(self) -> str:
        return self._check().name

    def cpu_percent(self, interval: Optional[float] = None) -> float:
        entry = self._check()
        self.cpu_reads += 1
        return entry.cpu_percent

    def memory_info(self):
        entry = self._check()
        return SimpleNamespace(rss=entry.rss, vms=entry.vms)

    def memory_full_info(self):
        entry = self._check()
        if entry.deny_swap:
            raise psutil.AccessDenied(self.pid)
        return SimpleNamespace(rss=entry.rss, vms=entry.vms, swap=entry.swap)

    def send_signal(self, sig) -> None:
        entry = self._check()
        if entry.deny_signal:
            raise psutil.AccessDenied(self.pid)
        self._table.signals.append((self.pid, sig))
        entry.alive = False

    def __repr__(self) -> str:
        return f"FakeProcess(pid={self.pid}, name={self._entry.name!r})"


class FakeProcessTable:
    """In-memory process table; `process` replaces the psutil.Process constructor."""

    def __init__(self):
        self.entries: Dict[int, FakeEntry] = {}
        self.signals: List[tuple] = []

    def add(self, pid: int, name: str, children=(), **kwargs) -> FakeEntry:
        entry = FakeEntry(pid=pid, name=name, children=list(children), **kwargs)
        self.entries[pid] = entry
        return entry

    def spawn_child(self, parent: int, pid: int, name: str, **kwargs) -> FakeEntry:
        entry = self.add(pid, name, **kwargs)
        self.entries[parent].children.append(pid)
        return entry

    def exit(self, pid: int) -> None:
        self.entries[pid].alive = False

    def recycle(self, pid: int, name: str, **kwargs) -> FakeEntry:
        """Reuse `pid` for an unrelated process."""
        return self.add(pid, name, **kwargs)

    def signaled_pids(self) -> List[int]:
        return [pid for pid, _ in self.signals]

    def process(self, pid: int) -> FakeProcess:
        entry = self.entries.get(pid)
        if entry is None or not entry.alive:
            raise psutil.NoSuchProcess(pid)
        return FakeProcess(self, entry)


@pytest.fixture
def process_table(monkeypatch):
    """
    Synthetic tree root(100) -> {A(101), B(102)}, A -> {C(103)}.

    psutil.Process is replaced by the table's constructor for the duration
    of the test.
    """
    table = FakeProcessTable()
    table.add(100, "root", children=[101, 102], rss=300, cpu_percent=10.0)
    table.add(101, "A", children=[103], rss=200, cpu_percent=20.0)
    table.add(102, "B", rss=100, cpu_percent=30.0)
    table.add(103, "C", rss=50, cpu_percent=40.0)
    monkeypatch.setattr(psutil, "Process", table.process)
    return table


class FakeTicker:
    """
    Ticker driven by a fake clock: every wait() advances the clock by one interval.

    `on_wait` callbacks run on each wait, letting tests change the process
    table between ticks.
    """

    def __init__(self, interval: float = 1.0, on_wait=None):
        self.interval = interval
        self.now = 0.0
        self.ticks = 0
        self.waits = 0
        self.on_wait = on_wait

    def deadline_after(self, seconds: float) -> float:
        return self.now + seconds

    def expired(self, deadline: float) -> bool:
        return self.now >= deadline

    def start_tick(self) -> None:
        self.ticks += 1

    def wait(self) -> None:
        self.waits += 1
        if self.on_wait is not None:
            self.on_wait(self.waits)
        self.now += self.interval


@pytest.fixture
def fake_ticker_factory():
    """Return a factory building FakeTickers, keeping the last one built."""
    built = []

    def factory(interval: float = 1.0, on_wait=None) -> FakeTicker:
        ticker = FakeTicker(interval, on_wait=on_wait)
        built.append(ticker)
        return ticker

    factory.built = built
    return factory


# ============================================================================
# Sample helpers
# ============================================================================


def make_sample(pid: int, rss: int, cpu: float = 0.0, name: str = "proc") -> ProcessSample:
    return ProcessSample(pid=pid, name=name, cpu_percent=cpu, vms=rss * 2, rss=rss, swap=0)


def make_history(pid: int, rss_values, cpu_values=None, name: str = "proc") -> ProcessHistory:
    cpu_values = cpu_values or [0.0] * len(rss_values)
    history = ProcessHistory(pid=pid)
    for rss, cpu in zip(rss_values, cpu_values):
        history.append(make_sample(pid, rss, cpu, name))
    return history


@pytest.fixture
def history_factory():
    """Build ProcessHistory objects from RSS (and optional CPU) values."""
    return make_history


@pytest.fixture
def sample_factory():
    return make_sample


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Make every test load configuration afresh from the default path."""
    original_path = get_config_path()
    clear_config_cache()
    yield
    set_config_path(original_path)


@pytest.fixture
def sample_config_data():
    """Sample [monitor] configuration data for testing."""
    return {
        "general": {
            "log_level": "DEBUG",
            "output_dir": "/tmp",
        },
        "collection": {
            "interval_seconds": 2.0,
            "default_duration": "3s",
            "default_repetitions": 2,
            "reap_timeout": 1.5,
        },
        "launch": {
            "require_root": False,
            "show_output": True,
        },
        "termination": {
            "signal": "SIGTERM",
        },
        "storage": {
            "format": "parquet",
        },
    }


@pytest.fixture
def config_file(tmp_path, sample_config_data):
    """Write a temporary config.toml and point the configuration singleton at it."""
    import toml

    config_path = tmp_path / "config.toml"
    with open(config_path, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)

    set_config_path(config_path)
    return config_path


@pytest.fixture(autouse=True)
def restore_root_log_level():
    """The CLI sets the root logger level; keep that from leaking between tests."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)

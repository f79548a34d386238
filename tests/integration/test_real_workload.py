"""
Integration tests that monitor real short-lived shell workloads.

These spawn actual processes and take a few seconds each.
"""

import io
import shutil

import psutil
import pytest

from workmon.cli.main import main_cli
from workmon.models import SessionConfig
from workmon.orchestration import SessionController
from workmon.reporting import ConsoleReporter

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("sh") is None, reason="needs a POSIX shell"),
]


def _stopped(pid):
    # Orphaned sleeps may linger as zombies until init reaps them.
    try:
        return psutil.Process(pid).status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True


def _session(arguments, duration=2.0, **kwargs):
    return SessionConfig(
        executable=shutil.which("sh"),
        arguments=arguments,
        duration_seconds=duration,
        reap_timeout=5.0,
        **kwargs,
    )


def test_tree_is_sampled_and_stopped():
    stream = io.StringIO()
    controller = SessionController(
        _session(["-c", "sleep 30 & sleep 30 & wait"], verbose=True),
        reporter=ConsoleReporter(stream),
    )

    result = controller.run()[0]

    assert not result.exited_early
    assert result.tick_count >= 1
    names = {s.name for s in result.per_process_summary.values()}
    assert "sleep" in names
    assert all(_stopped(pid) for pid in result.per_process_summary)
    output = stream.getvalue()
    assert "container start time:" in output
    assert "Mem:" in output


def test_immediately_exiting_workload(caplog):
    controller = SessionController(_session(["-c", "exit 0"], duration=5.0), reporter=None)

    result = controller.run()[0]

    assert result.exited_early
    assert result.tick_count <= 2
    assert "workload exited prematurely" in caplog.text


def test_cli_writes_result_tables(tmp_path, capsys):
    main_cli(["-d", "1s", "-f", "-w", str(tmp_path), "sh", "-c", "sleep 10"])

    files = sorted(p.name for p in tmp_path.iterdir())
    assert len(files) == 2
    assert files[0].endswith("_sh_workload_benchmark_interval.csv")
    assert files[1].endswith("_sh_workload_benchmark_summary.csv")
    summary_lines = (tmp_path / files[1]).read_text().splitlines()
    assert summary_lines[0] == "Load1,Load5,Load15,StartTime,StopTime"
    assert len(summary_lines) == 2
    assert "container stop time:" in capsys.readouterr().out

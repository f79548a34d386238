"""
Unit tests for workload launching, reaping and the load-average reader.
"""

import subprocess
from unittest.mock import Mock, patch

import pytest

from workmon.models import LoadAverage
from workmon.system.errors import LaunchError
from workmon.system.launcher import build_workload_command, launch_workload, reap_workload
from workmon.system.load import read_load_average


@pytest.mark.unit
class TestLaunchWorkload:
    """Test cases for launch_workload."""

    def test_build_command(self):
        assert build_workload_command("/bin/echo", ["a", "b"]) == ["/bin/echo", "a", "b"]

    @patch("workmon.system.launcher.subprocess.Popen")
    def test_output_discarded_by_default(self, mock_popen):
        mock_popen.return_value = Mock(pid=4242)

        process = launch_workload("/bin/true", ["x"])

        assert process.pid == 4242
        args, kwargs = mock_popen.call_args
        assert args[0] == ["/bin/true", "x"]
        assert kwargs["stdout"] is subprocess.DEVNULL
        assert kwargs["stderr"] is subprocess.DEVNULL

    @patch("workmon.system.launcher.subprocess.Popen")
    def test_show_output_inherits_streams(self, mock_popen):
        mock_popen.return_value = Mock(pid=1)

        launch_workload("/bin/true", show_output=True)

        kwargs = mock_popen.call_args.kwargs
        assert kwargs["stdout"] is None
        assert kwargs["stderr"] is None

    @patch("workmon.system.launcher.subprocess.Popen")
    def test_start_failure_raises_launch_error(self, mock_popen):
        mock_popen.side_effect = PermissionError("denied")

        with pytest.raises(LaunchError) as exc_info:
            launch_workload("/not/executable")

        assert exc_info.value.executable == "/not/executable"
        assert isinstance(exc_info.value.cause, PermissionError)


@pytest.mark.unit
class TestReapWorkload:
    """Test cases for reap_workload."""

    def test_returns_exit_status(self):
        process = Mock(pid=10)
        process.wait.return_value = -9
        assert reap_workload(process, timeout=1.0) == -9
        process.wait.assert_called_once_with(timeout=1.0)

    def test_timeout_returns_none(self):
        process = Mock(pid=10)
        process.wait.side_effect = subprocess.TimeoutExpired(cmd="x", timeout=0.5)
        assert reap_workload(process, timeout=0.5) is None


@pytest.mark.unit
class TestReadLoadAverage:
    """Test cases for read_load_average."""

    @patch("workmon.system.load.psutil.getloadavg")
    def test_reads_three_values(self, mock_getloadavg):
        mock_getloadavg.return_value = (0.5, 1.25, 2.0)
        assert read_load_average() == LoadAverage(0.5, 1.25, 2.0)

    @patch("workmon.system.load.psutil.getloadavg")
    def test_failure_propagates(self, mock_getloadavg):
        mock_getloadavg.side_effect = OSError("unsupported")
        with pytest.raises(OSError):
            read_load_average()

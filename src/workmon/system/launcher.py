"""
Workload launching.

Starts the workload executable as a child process. Only its handle and exit
status matter to the monitor; its output is either passed through or
discarded.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import LaunchError

logger = logging.getLogger(__name__)


def build_workload_command(executable: str, arguments: Sequence[str]) -> List[str]:
    """Build the argv list used to start the workload."""
    return [executable, *arguments]


def launch_workload(
    executable: str,
    arguments: Sequence[str] = (),
    show_output: bool = False,
    cwd: Optional[Path] = None,
) -> subprocess.Popen:
    """
    Start the workload process.

    Args:
        executable: Path or name of the program to run.
        arguments: Arguments passed to the program.
        show_output: Inherit the monitor's stdout/stderr when True, otherwise
            discard the workload's output.
        cwd: Optional working directory.

    Returns:
        The started subprocess.Popen object.

    Raises:
        LaunchError: If the program cannot be started.
    """
    command = build_workload_command(executable, arguments)
    output = None if show_output else subprocess.DEVNULL

    logger.debug(f"Starting workload: {command}")
    try:
        process = subprocess.Popen(
            command,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=output,
            stderr=output,
        )
    except (OSError, ValueError) as e:
        raise LaunchError(executable, e) from e

    logger.info(f"Workload started with PID: {process.pid}")
    return process


def reap_workload(process: subprocess.Popen, timeout: float) -> Optional[int]:
    """
    Wait for a terminated workload so it does not linger as a zombie.

    Returns:
        The exit status, or None if the process did not exit within `timeout`.
    """
    try:
        return_code = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning(f"Workload PID {process.pid} still running {timeout}s after termination")
        return None
    logger.debug(f"Workload PID {process.pid} exited with status {return_code}")
    return return_code

"""
Command-line interface for the workmon workload monitor.

This module parses the command line, validates every argument before the
workload is started, and runs the monitoring session. Validation failures,
missing privileges and launch failures end the program with status 1;
argparse usage errors end it with status 2.
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..config.validators import VALID_LOG_LEVELS, VALID_TERMINATION_SIGNALS
from ..models.config import MonitorConfig, SessionConfig
from ..orchestration import SessionController
from ..reporting import ConsoleReporter
from ..storage import BenchmarkRecorder, create_storage
from ..system.errors import LaunchError
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_directory,
    validate_duration,
    validate_executable,
    validate_positive_integer,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging on stderr, keeping stdout for the report."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workmon",
        description="Run a workload and monitor the CPU and memory usage of its process tree.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print current usage of every tracked process each tick.",
    )
    parser.add_argument(
        "-r",
        "--repetitions",
        type=str,
        default=None,
        help="Number of benchmark repetitions. Defaults to the config value.",
    )
    parser.add_argument(
        "-d",
        "--duration",
        type=str,
        default=None,
        help="How long to observe the workload, e.g. '10s', '1m30s', '500ms'. "
        "Defaults to the config value.",
    )
    parser.add_argument(
        "-o",
        "--show-output",
        action="store_true",
        default=None,
        help="Show the workload's stdout and stderr instead of discarding them.",
    )
    parser.add_argument(
        "-f",
        "--to-file",
        action="store_true",
        help="Save interval and summary tables to the output directory.",
    )
    parser.add_argument(
        "-w",
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the result tables. Defaults to the config value.",
    )
    parser.add_argument(
        "--require-root",
        action="store_true",
        default=None,
        help="Refuse to run unless the effective user is root.",
    )
    parser.add_argument(
        "--signal",
        choices=VALID_TERMINATION_SIGNALS,
        default=None,
        help="Signal used to stop the workload's process tree.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to an alternate config.toml.",
    )
    parser.add_argument(
        "--log-level",
        choices=VALID_LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Logging level. Defaults to the config value.",
    )
    parser.add_argument("workload", help="Executable to run and monitor.")
    parser.add_argument(
        "workload_args",
        nargs=argparse.REMAINDER,
        help="Arguments passed to the workload.",
    )
    return parser


def check_privileges(require_root: bool) -> None:
    """
    Raises:
        ValidationError: If root is required and the effective user is not root.
    """
    if require_root and os.geteuid() != 0:
        raise ValidationError(
            "need to be root to run the workload",
            field_name="--require-root",
            value=os.geteuid(),
        )


def build_session_config(args: argparse.Namespace, monitor: MonitorConfig) -> SessionConfig:
    """
    Validate the parsed arguments against the loaded defaults.

    Checks run in a fixed order (duration, repetitions, privileges, workload,
    output directory) and nothing is started while they run.

    Raises:
        ValidationError: On the first invalid argument.
    """
    duration_text = args.duration if args.duration is not None else monitor.default_duration
    duration_seconds = validate_duration(duration_text, field_name="--duration")

    repetitions = validate_positive_integer(
        args.repetitions if args.repetitions is not None else monitor.default_repetitions,
        min_value=1,
        field_name="--repetitions",
    )

    require_root = args.require_root if args.require_root is not None else monitor.require_root
    check_privileges(require_root)

    executable = validate_executable(args.workload, field_name="workload")

    output_dir = Path(args.output_dir) if args.output_dir is not None else monitor.output_dir
    if args.to_file:
        output_dir = validate_directory(output_dir, field_name="--output-dir")

    return SessionConfig(
        executable=executable,
        arguments=list(args.workload_args),
        duration_seconds=duration_seconds,
        repetitions=repetitions,
        interval_seconds=monitor.interval_seconds,
        verbose=args.verbose,
        show_output=args.show_output if args.show_output is not None else monitor.show_output,
        to_file=args.to_file,
        output_dir=output_dir,
        termination_signal=args.signal or monitor.termination_signal,
        reap_timeout=monitor.reap_timeout,
        storage=monitor.storage,
    )


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: On invalid arguments, configuration errors, missing
            privileges, launch failure or interruption.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or "INFO")

    if args.config:
        set_config_path(Path(args.config))

    try:
        app_config = get_config()
    except Exception as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )

    monitor_config = app_config.monitor
    if args.log_level is None:
        logging.getLogger().setLevel(monitor_config.log_level)

    try:
        session_config = build_session_config(args, monitor_config)
    except ValidationError as e:
        handle_cli_error(
            error=e,
            context="argument validation",
            exit_code=1,
            logger=logger,
        )

    recorder = None
    if session_config.to_file:
        recorder = BenchmarkRecorder(
            storage=create_storage(session_config.storage),
            workload_label=Path(args.workload).name,
            started_at=datetime.now(),
        )

    controller = SessionController(
        session_config,
        reporter=ConsoleReporter(),
        recorder=recorder,
    )

    try:
        controller.run()
    except LaunchError as e:
        handle_cli_error(
            error=e,
            context="workload launch",
            exit_code=1,
            logger=logger,
        )


if __name__ == "__main__":
    main_cli()

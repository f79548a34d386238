"""
Session controller: runs the repetitions of one monitoring invocation.

Each repetition moves through Spawning, Sampling, Stopping and Reporting.
The workload is launched, its tree is sampled until the window elapses or
the workload exits, the load average is read, the tree is terminated, and
the collected histories are summarized and reported. Repetitions run one
after the other; each gets a fresh handle cache.
"""

import logging
import subprocess
import time
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from ..aggregation import summarize_all
from ..collectors import ProcessSampler, Ticker, WindowOutcome
from ..models.config import SessionConfig
from ..models.process import ProcessSample
from ..models.results import LoadAverage, SessionResult
from ..reporting import ConsoleReporter
from ..storage import BenchmarkRecorder
from ..system.errors import TerminationError
from ..system.launcher import launch_workload, reap_workload
from ..system.load import read_load_average
from ..system.termination import ProcessTreeTerminator, TerminationReport
from ..validation import ErrorSeverity, handle_error
from .shared_state import RepetitionState, SessionState
from .signal_handler import InterruptGuard

logger = logging.getLogger(__name__)

Launcher = Callable[..., subprocess.Popen]


class SessionController:
    """
    Orchestrates spawn, sampling, termination and reporting per repetition.

    All collaborators can be replaced, which is how the tests drive the
    controller without real processes.

    Args:
        config: Settings of this invocation.
        reporter: Console output; None disables it.
        recorder: Collects result table rows; None disables persistence.
        launcher: Starts the workload and returns its Popen object.
        load_reader: Returns the system load average.
        terminator: Stops the workload's tree at the end of each repetition.
        ticker_factory: Builds the tick source of a sampling window.
        interrupt_guard: SIGINT/SIGTERM handling for the session.
    """

    def __init__(
        self,
        config: SessionConfig,
        reporter: Optional[ConsoleReporter] = None,
        recorder: Optional[BenchmarkRecorder] = None,
        launcher: Launcher = launch_workload,
        load_reader: Callable[[], LoadAverage] = read_load_average,
        terminator: Optional[ProcessTreeTerminator] = None,
        ticker_factory: Callable[[float], Ticker] = Ticker,
        interrupt_guard: Optional[InterruptGuard] = None,
    ):
        self.config = config
        self.reporter = reporter
        self.recorder = recorder
        self.launcher = launcher
        self.load_reader = load_reader
        self.terminator = terminator or ProcessTreeTerminator(config.termination_signal)
        self.ticker_factory = ticker_factory
        self.interrupt_guard = interrupt_guard or InterruptGuard(
            lambda: ProcessTreeTerminator(config.termination_signal)
        )
        self.current: Optional[RepetitionState] = None

    def run(self) -> List[SessionResult]:
        """
        Run every configured repetition and persist the tables when requested.

        Raises:
            LaunchError: If the workload cannot be started.
            SystemExit: If the session is interrupted by SIGINT or SIGTERM.
        """
        results: List[SessionResult] = []
        with self.interrupt_guard:
            for repetition in range(self.config.repetitions):
                logger.info(
                    f"Starting repetition {repetition + 1}/{self.config.repetitions} "
                    f"of {self.config.workload_label}"
                )
                results.append(self.run_repetition(repetition))

        if self.config.to_file and self.recorder is not None:
            self.recorder.save(self.config.output_dir)
        return results

    def run_repetition(self, repetition: int) -> SessionResult:
        """Run one Spawning -> Sampling -> Stopping -> Reporting cycle."""
        state = RepetitionState(repetition=repetition)
        self.current = state

        state.transition(SessionState.SPAWNING)
        try:
            # An interrupt during spawning is delivered once the PID is watched.
            with self.interrupt_guard.deferred():
                spawn_requested = time.perf_counter_ns()
                state.process = self.launcher(
                    self.config.executable,
                    self.config.arguments,
                    show_output=self.config.show_output,
                )
                start_latency_ns = time.perf_counter_ns() - spawn_requested
                root_pid = state.process.pid
                self.interrupt_guard.watch(root_pid)
        except BaseException:
            state.transition(SessionState.ABORTED)
            raise

        outcome: Optional[WindowOutcome] = None
        load_average: Optional[LoadAverage] = None
        try:
            state.transition(SessionState.SAMPLING)
            sampler = ProcessSampler(state.cache)
            outcome = sampler.run_window(
                root_pid,
                self.config.duration_seconds,
                self.ticker_factory(self.config.interval_seconds),
                on_tick=self._on_tick,
            )
        finally:
            # Runs on every path out of Sampling, including interrupts.
            completed = outcome is not None
            if completed:
                state.transition(SessionState.STOPPING)
            else:
                state.transition(SessionState.ABORTED)
            try:
                if completed:
                    load_average = self._read_load_average()
            finally:
                stop_latency_ns = self._stop(state)

        state.transition(SessionState.REPORTING)
        result = SessionResult(
            repetition=repetition,
            start_latency_ns=start_latency_ns,
            stop_latency_ns=stop_latency_ns,
            load_average=load_average,
            per_process_summary=summarize_all(outcome.histories),
            exited_early=outcome.exited_early,
            tick_count=outcome.ticks,
        )
        if self.reporter is not None:
            self.reporter.print_summary(result)
        if self.recorder is not None:
            self.recorder.record_repetition(result)
        self.current = None
        return result

    def _on_tick(self, samples: Sequence[ProcessSample], timestamp: datetime) -> None:
        if self.config.verbose and self.reporter is not None:
            self.reporter.print_usage(samples)
        if self.recorder is not None:
            self.recorder.record_tick(samples, timestamp)

    def _read_load_average(self) -> Optional[LoadAverage]:
        try:
            return self.load_reader()
        except Exception as e:
            handle_error(
                error=e,
                context="measuring load average",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            return None

    def _stop(self, state: RepetitionState) -> int:
        """
        Terminate the repetition's tree and reap the workload.

        Returns:
            Nanoseconds spent in the termination call.
        """
        root_pid = state.root_pid
        stop_requested = time.perf_counter_ns()
        report = self._terminate(root_pid, state)
        stop_latency_ns = time.perf_counter_ns() - stop_requested

        self.interrupt_guard.release()
        if report is not None and not report.success:
            handle_error(
                error=TerminationError(report),
                context=f"cleanup of PID {root_pid}",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
        reap_workload(state.process, self.config.reap_timeout)
        state.cache.clear()
        return stop_latency_ns

    def _terminate(
        self, root_pid: int, state: RepetitionState
    ) -> Optional[TerminationReport]:
        try:
            return self.terminator.terminate_tree(root_pid, known_handles=state.cache.handles())
        except Exception as e:
            handle_error(
                error=e,
                context=f"terminating tree of PID {root_pid}",
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
            return None

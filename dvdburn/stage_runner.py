"""
Stage Runner Module

Runs one external tool, forwarding its stdout and stderr line by line while
it works, and reports how it exited.
"""

import logging
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, IO, Optional

from .errors import LaunchError, StageFailedError, StageTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageInvocation:
    """One external process call."""
    stage: str
    command: str
    args: list[str] = field(default_factory=list)
    timeout: Optional[float] = None

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]


@dataclass(frozen=True)
class StageOutcome:
    """How an external process exited."""
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class StageRunner:
    """
    Executes stage invocations one at a time.

    Both output streams are drained on their own threads while the process
    runs, and every line reaches the log as soon as it is written.
    """

    def __init__(self, log_callback: Optional[Callable[[str], None]] = None):
        """
        Args:
            log_callback: Optional callback receiving every output line
        """
        self.log_callback = log_callback

    def _drain(self, stage: str, stream_name: str, stream: IO[str]) -> None:
        tool_logger = logging.getLogger(f"{__name__}.{stage}")
        for line in iter(stream.readline, ""):
            line = line.rstrip("\r\n")
            if not line:
                continue
            tool_logger.info(f"[{stream_name}] {line}")
            if self.log_callback:
                try:
                    self.log_callback(line)
                except Exception:
                    logger.exception(f"{stage}: log callback failed, still draining {stream_name}")
        stream.close()

    def run(self, invocation: StageInvocation) -> StageOutcome:
        """
        Run an external tool to completion.

        Args:
            invocation: The command to run

        Returns:
            StageOutcome with the process exit code

        Raises:
            LaunchError: If the process cannot be spawned
            StageTimeoutError: If the invocation's timeout elapses
        """
        logger.info(f"Running command: {' '.join(invocation.argv)}")

        try:
            process = subprocess.Popen(
                invocation.argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                bufsize=1
            )
        except OSError as e:
            raise LaunchError(invocation.stage, invocation.command, e) from e

        readers = [
            threading.Thread(
                target=self._drain,
                args=(invocation.stage, name, stream),
                daemon=True
            )
            for name, stream in (("stdout", process.stdout), ("stderr", process.stderr))
        ]
        for reader in readers:
            reader.start()

        try:
            exit_code = process.wait(timeout=invocation.timeout)
        except subprocess.TimeoutExpired:
            logger.warning(
                f"{invocation.stage}: {Path(invocation.command).name} timed out, killing it"
            )
            process.kill()
            process.wait()
            for reader in readers:
                reader.join()
            raise StageTimeoutError(invocation.stage, invocation.command, invocation.timeout)

        for reader in readers:
            reader.join()

        outcome = StageOutcome(exit_code)
        if outcome.succeeded:
            logger.info(f"{invocation.stage} finished")
        else:
            logger.error(f"{invocation.stage} exited with code {exit_code}")
        return outcome

    def run_checked(self, invocation: StageInvocation) -> StageOutcome:
        """
        Run an external tool and treat a nonzero exit as an error.

        Raises:
            LaunchError: If the process cannot be spawned
            StageFailedError: If the process exits with a nonzero code
            StageTimeoutError: If the invocation's timeout elapses
        """
        outcome = self.run(invocation)
        if not outcome.succeeded:
            raise StageFailedError(invocation.stage, invocation.command, outcome.exit_code)
        return outcome

"""External site build step."""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Optional

from src.logger import log_function
from src.sync.models import BuildOutput


class BuildInvoker(ABC):
    """Runs the downstream site build once the artifacts are in place."""

    @abstractmethod
    def run(self) -> BuildOutput:
        """Run the build and return its verbatim output."""


class ShellBuildInvoker(BuildInvoker):
    """Runs a configured shell command, capturing stdout, stderr and exit code."""

    def __init__(self, command: str, timeout: Optional[float] = None):
        if not command or not command.strip():
            raise ValueError("Build command cannot be empty")
        self.command = command
        self.timeout = timeout

    @log_function(logger_name="content_sync", log_execution_time=True)
    def run(self) -> BuildOutput:
        logger = logging.getLogger("content_sync")
        logger.info(f"Running build command: {self.command}")
        try:
            completed = subprocess.run(
                self.command,
                shell=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.error(f"Build command timed out after {self.timeout}s")
            return BuildOutput(
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr) + f"\nTimed out after {self.timeout}s",
                exit_code=None,
            )
        except OSError as e:
            logger.error(f"Build command could not be started: {e}")
            return BuildOutput(stderr=str(e), exit_code=None)

        if completed.returncode != 0:
            logger.warning(f"Build command exited with code {completed.returncode}")
        return BuildOutput(
            stdout=completed.stdout,
            stderr=completed.stderr,
            exit_code=completed.returncode,
        )


def _as_text(output) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output

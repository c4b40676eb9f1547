"""Runs generated suites through the first available JavaScript test runner."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..config import DEFAULT_RUNNER_COMMANDS, TEST_FILE_PLACEHOLDER
from ..logging import get_logger
from ..models import VerificationResult

NO_RUNNER_MESSAGE = (
    "No suitable runner found. Please ensure Jest, Vitest, or npm test is available."
)
_UNAVAILABLE_MARKERS = ("command not found", "is not recognized")


@dataclass(frozen=True)
class CompletedRun:
    """Exit status and captured streams of a finished runner process."""

    returncode: int
    stdout: str
    stderr: str


CommandRunner = Callable[[Sequence[str], Path], CompletedRun]


class Verifier:
    """Tries each candidate command until one starts, then reports its result.

    Candidates run one at a time and are awaited to completion with no
    timeout. An executable that is missing or cannot be spawned moves on to the
    next candidate, as does a shell reporting that the command does not exist.
    """

    def __init__(
        self,
        commands: Optional[Iterable[Sequence[str]]] = None,
        *,
        runner: CommandRunner | None = None,
    ) -> None:
        source = DEFAULT_RUNNER_COMMANDS if commands is None else commands
        self.commands: List[Tuple[str, ...]] = [tuple(command) for command in source]
        self._runner = runner or self._default_runner
        self.logger = get_logger("verifier")

    def run(self, test_file_path: Path | str, project_root: Path | str) -> VerificationResult:
        root = Path(project_root)
        for template in self.commands:
            args = self._expand(template, str(test_file_path))
            self.logger.info("Running: %s", " ".join(args))
            try:
                completed = self._runner(args, root)
            except OSError as exc:
                self.logger.debug("Runner %s failed to start: %s", args[0], exc)
                continue
            output = completed.stdout + completed.stderr
            if completed.returncode != 0 and self._reports_unavailable(output):
                self.logger.debug("Runner %s is not available in this shell", args[0])
                continue
            return VerificationResult(
                success=completed.returncode == 0,
                diagnostic_text=output,
                command=args,
            )
        self.logger.warning("No test runner candidate could be started")
        return VerificationResult(success=False, diagnostic_text=NO_RUNNER_MESSAGE)

    @staticmethod
    def _expand(template: Sequence[str], test_file: str) -> Tuple[str, ...]:
        if TEST_FILE_PLACEHOLDER not in template:
            return (*template, test_file)
        return tuple(test_file if part == TEST_FILE_PLACEHOLDER else part for part in template)

    @staticmethod
    def _reports_unavailable(output: str) -> bool:
        return any(marker in output for marker in _UNAVAILABLE_MARKERS)

    @staticmethod
    def _default_runner(args: Sequence[str], cwd: Path) -> CompletedRun:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=False,
            text=True,
            errors="replace",
            capture_output=True,
        )
        return CompletedRun(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


__all__ = ["CommandRunner", "CompletedRun", "NO_RUNNER_MESSAGE", "Verifier"]

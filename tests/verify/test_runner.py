"""Tests for the external test runner adapter."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from testgen.verify import NO_RUNNER_MESSAGE, CompletedRun, Verifier


class ScriptedRunner:
    """Returns canned results keyed by executable name and records calls."""

    def __init__(self, results: Dict[str, CompletedRun | OSError]) -> None:
        self.results = results
        self.calls: List[Tuple[Tuple[str, ...], Path]] = []

    def __call__(self, args: Sequence[str], cwd: Path) -> CompletedRun:
        self.calls.append((tuple(args), cwd))
        result = self.results.get(args[0], FileNotFoundError(args[0]))
        if isinstance(result, OSError):
            raise result
        return result


def test_first_available_candidate_decides(tmp_path: Path) -> None:
    runner = ScriptedRunner({"npx": CompletedRun(0, "PASS", "")})
    verifier = Verifier(runner=runner)

    result = verifier.run("src/__tests__/Button.test.tsx", tmp_path)

    assert result.success is True
    assert result.diagnostic_text == "PASS"
    assert result.command == (
        "npx",
        "jest",
        "src/__tests__/Button.test.tsx",
        "--no-coverage",
        "--verbose",
    )
    assert runner.calls[0][1] == tmp_path
    assert len(runner.calls) == 1


def test_spawn_failures_fall_through_to_next_candidate(tmp_path: Path) -> None:
    runner = ScriptedRunner(
        {
            "npx": FileNotFoundError("npx"),
            "npm": CompletedRun(1, "FAIL Button.test.tsx\n", "Expected 1 call\n"),
        }
    )
    verifier = Verifier(runner=runner)

    result = verifier.run("Button.test.tsx", tmp_path)

    assert result.success is False
    assert result.diagnostic_text == "FAIL Button.test.tsx\nExpected 1 call\n"
    assert result.command == ("npm", "test", "--", "Button.test.tsx")


def test_shell_reported_missing_command_is_skipped(tmp_path: Path) -> None:
    runner = ScriptedRunner(
        {
            "npx": CompletedRun(127, "", "sh: npx: command not found\n"),
            "npm": CompletedRun(0, "ok", ""),
        }
    )

    result = Verifier(runner=runner).run("Button.test.tsx", tmp_path)

    assert result.success is True
    assert [call[0][0] for call in runner.calls] == ["npx", "npm"]


def test_no_available_runner_reports_failure(tmp_path: Path) -> None:
    runner = ScriptedRunner({})

    result = Verifier(runner=runner).run("Button.test.tsx", tmp_path)

    assert result.success is False
    assert result.diagnostic_text == NO_RUNNER_MESSAGE
    assert len(runner.calls) == 4


def test_commands_without_placeholder_get_file_appended(tmp_path: Path) -> None:
    runner = ScriptedRunner({"pnpm": CompletedRun(0, "", "")})
    verifier = Verifier([("pnpm", "exec", "jest")], runner=runner)

    result = verifier.run("a.test.tsx", tmp_path)

    assert result.command == ("pnpm", "exec", "jest", "a.test.tsx")

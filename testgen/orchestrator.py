"""Pipeline orchestration for the generate/verify/repair loop."""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, List, Optional

from .analyzers import SourceAnalyzer
from .config import TestGenConfig, load_config
from .logging import get_logger
from .models import ComponentModel, LoopState, TerminalState, VerificationResult
from .repair import Repairer
from .synthesis import TestSynthesizer
from .verify import Verifier

MAX_ITERATIONS = 5


class ComponentNotFoundError(FileNotFoundError):
    """Raised when the requested component file does not exist."""


@dataclass
class RepairOutcome:
    """Result of a generate-tests request."""

    test_path: Path
    test_source: str
    terminal: Optional[TerminalState]
    iterations: int
    max_iterations: int = MAX_ITERATIONS
    diagnostics: str = ""
    history: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.terminal is TerminalState.PASSED

    def report(self) -> str:
        """Human-readable summary returned to tool callers."""
        if self.terminal is None:
            status = "Verification skipped; the generated suite was written without running it."
        elif self.terminal is TerminalState.PASSED:
            status = f"All tests passed on iteration {self.iterations}."
        elif self.terminal is TerminalState.STALLED:
            status = (
                f"Could not automatically fix test errors after {self.iterations} iterations.\n\n"
                f"Last errors:\n{self.diagnostics.strip()}"
            )
        else:
            status = (
                f"Maximum iterations ({self.max_iterations}) reached. Some tests may still have issues.\n\n"
                f"Last errors:\n{self.diagnostics.strip()}"
            )
        return f"Test file generated at: {self.test_path}\n\n{status}\n\n{self.test_source}"


class Orchestrator:
    """Coordinates analysis, synthesis and the bounded verify-and-repair loop.

    The orchestrator holds only collaborators. Everything that changes during a
    request lives in a :class:`LoopState` that each step receives and returns,
    so a single instance can serve any number of requests.
    """

    def __init__(
        self,
        analyzer: SourceAnalyzer | None = None,
        synthesizer: TestSynthesizer | None = None,
        verifier: Verifier | None = None,
        repairer: Repairer | None = None,
        *,
        config_loader: Callable[[Path], TestGenConfig] = load_config,
        max_iterations: int = MAX_ITERATIONS,
    ) -> None:
        self.analyzer = analyzer or SourceAnalyzer()
        self.synthesizer = synthesizer or TestSynthesizer()
        self.repairer = repairer or Repairer()
        self._verifier = verifier
        self._config_loader = config_loader
        self.max_iterations = max_iterations
        self.logger = get_logger("orchestrator")

    # ------------------------------------------------------------------
    # Operations

    def read_component(self, file_path: str, project_root: str) -> str:
        return self._resolve_component(file_path, project_root).read_text(encoding="utf-8")

    def analyze(self, file_path: str, project_root: str) -> ComponentModel:
        content = self.read_component(file_path, project_root)
        return self.analyzer.analyze(content, file_path)

    def generate_tests(
        self,
        file_path: str,
        project_root: str,
        output_path: str | None = None,
        *,
        verify: bool = True,
    ) -> RepairOutcome:
        root = Path(project_root).expanduser().resolve()
        component_path = self._resolve_component(file_path, project_root)
        config = self._config_loader(root)
        self.logger.info("Generating tests for %s", component_path)

        model = self.analyzer.analyze(component_path.read_text(encoding="utf-8"), file_path)
        test_path = self.resolve_output_path(component_path, root, output_path, config)
        state = LoopState(iteration=1, test_source=self.synthesizer.generate(model))

        if not verify:
            self._persist(test_path, state.test_source)
            return RepairOutcome(
                test_path=test_path,
                test_source=state.test_source,
                terminal=None,
                iterations=0,
                max_iterations=self.max_iterations,
            )

        verifier = self._verifier or Verifier(config.runner.commands)
        while state.terminal is None:
            if state.iteration > self.max_iterations:
                state = replace(state, terminal=TerminalState.EXHAUSTED)
                break
            self.logger.info("Test iteration %d/%d", state.iteration, self.max_iterations)
            self._persist(test_path, state.test_source)
            result = verifier.run(test_path, root)
            state = self._advance(state, result, model, file_path)

        self._persist(test_path, state.test_source)
        self.logger.info("Repair loop finished: %s", state.terminal.value)
        return RepairOutcome(
            test_path=test_path,
            test_source=state.test_source,
            terminal=state.terminal,
            iterations=min(state.iteration, self.max_iterations),
            max_iterations=self.max_iterations,
            diagnostics=state.diagnostics,
            history=list(state.history),
        )

    def resolve_output_path(
        self,
        component_path: Path,
        project_root: Path,
        output_path: str | None = None,
        config: TestGenConfig | None = None,
    ) -> Path:
        """Return where the suite is written; ``<dir>/__tests__/<stem>.test.tsx`` by default."""
        if output_path:
            return (project_root / output_path).resolve()
        config = config or TestGenConfig(root=project_root)
        try:
            relative_dir = component_path.parent.relative_to(project_root)
        except ValueError:
            relative_dir = component_path.parent
        test_dir = project_root / relative_dir / config.output.test_dir
        return test_dir / f"{component_path.stem}{config.output.suffix}"

    # ------------------------------------------------------------------
    # Loop steps

    def _advance(
        self,
        state: LoopState,
        result: VerificationResult,
        model: ComponentModel,
        file_path: str,
    ) -> LoopState:
        if result.success:
            return replace(state, terminal=TerminalState.PASSED, diagnostics=result.diagnostic_text)

        self.logger.info("Test iteration %d failed. Attempting to fix errors...", state.iteration)
        revised = self.repairer.repair(state.test_source, result.diagnostic_text, model, file_path)
        if revised == state.test_source:
            self.logger.warning("No repair rule changed the suite; stopping")
            return replace(state, terminal=TerminalState.STALLED, diagnostics=result.diagnostic_text)

        diff = "".join(
            difflib.unified_diff(
                state.test_source.splitlines(keepends=True),
                revised.splitlines(keepends=True),
                fromfile=f"iteration-{state.iteration}",
                tofile=f"iteration-{state.iteration + 1}",
            )
        )
        self.logger.debug("Repair diff:\n%s", diff)
        return LoopState(
            iteration=state.iteration + 1,
            test_source=revised,
            diagnostics=result.diagnostic_text,
            history=(*state.history, diff),
        )

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _resolve_component(file_path: str, project_root: str) -> Path:
        full_path = (Path(project_root).expanduser() / file_path).resolve()
        if not full_path.is_file():
            raise ComponentNotFoundError(f"Component file not found: {full_path}")
        return full_path

    @staticmethod
    def _persist(test_path: Path, test_source: str) -> None:
        test_path.parent.mkdir(parents=True, exist_ok=True)
        test_path.write_text(test_source, encoding="utf-8")


__all__ = ["ComponentNotFoundError", "MAX_ITERATIONS", "Orchestrator", "RepairOutcome"]

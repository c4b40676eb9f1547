"""Configuration loading for testgen (.testgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

CONFIG_FILENAME = ".testgen.yml"
TEST_FILE_PLACEHOLDER = "{test_file}"

DEFAULT_RUNNER_COMMANDS: Tuple[Tuple[str, ...], ...] = (
    ("npx", "jest", TEST_FILE_PLACEHOLDER, "--no-coverage", "--verbose"),
    ("npm", "test", "--", TEST_FILE_PLACEHOLDER),
    ("npx", "vitest", "run", TEST_FILE_PLACEHOLDER),
    ("yarn", "test", TEST_FILE_PLACEHOLDER),
)
DEFAULT_TEST_DIR = "__tests__"
DEFAULT_TEST_SUFFIX = ".test.tsx"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RunnerConfig:
    """Ordered test runner candidates."""

    commands: List[Tuple[str, ...]] = field(
        default_factory=lambda: list(DEFAULT_RUNNER_COMMANDS)
    )


@dataclass
class OutputConfig:
    """Where generated test files are written."""

    test_dir: str = DEFAULT_TEST_DIR
    suffix: str = DEFAULT_TEST_SUFFIX


@dataclass
class TestGenConfig:
    """Represents the settings defined in .testgen.yml."""

    __test__ = False

    root: Path
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(config_path: Path) -> TestGenConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return TestGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    runner = RunnerConfig()
    runner_data = _as_dict(data.get("runner"))
    commands = _as_command_list(runner_data.get("commands"))
    if commands:
        runner.commands = commands

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    test_dir = _as_str(output_data.get("test_dir"))
    if test_dir:
        output.test_dir = test_dir
    suffix = _as_str(output_data.get("suffix"))
    if suffix:
        output.suffix = suffix if suffix.startswith(".") else f".{suffix}"

    return TestGenConfig(root=root, runner=runner, output=output)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_command_list(value: Any) -> List[Tuple[str, ...]]:
    """Accept either argv lists or whitespace separated command strings."""
    if not isinstance(value, Sequence) or isinstance(value, str):
        return []
    commands: List[Tuple[str, ...]] = []
    for item in value:
        if isinstance(item, str):
            argv = tuple(item.split())
        elif isinstance(item, Sequence):
            argv = tuple(str(part) for part in item if isinstance(part, (str, int, float)))
        else:
            continue
        if argv:
            commands.append(argv)
    return commands


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_RUNNER_COMMANDS",
    "OutputConfig",
    "RunnerConfig",
    "TEST_FILE_PLACEHOLDER",
    "TestGenConfig",
    "load_config",
]

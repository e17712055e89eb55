"""Configuration management for pcomp.

Handles loading and merging configuration from:
1. Global config file (~/.pcomp/config.toml)
2. Local project config file (./pcomp.toml)
3. Environment variables
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import ConfigError


class CompletionConfig(BaseModel):
    """Options that steer candidate generation and the completion session."""
    ignore_case: bool = False
    auto_list: bool = False
    cycle_cutoff: Optional[int] = 5  # None: always cycle
    use_paring: bool = True
    show_symbolic_completions: bool = False
    show_symbolic_alternatives: bool = True
    file_ignore: Optional[str] = r"~$"
    dir_ignore: Optional[str] = r"^(\.\.?|CVS)$"
    force_execution: bool = False
    search_path: Optional[List[str]] = None  # None: use $PATH
    explicit_marker: str = "*"
    strip_executable_suffix: bool = os.name == "nt"
    executable_suffixes: List[str] = Field(
        default_factory=lambda: [".exe", ".com", ".bat", ".cmd"]
    )
    directory_suffix: str = "/"
    termination: str = " "
    trigger: str = "\t"

    @field_validator("file_ignore", "dir_ignore")
    @classmethod
    def _check_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid regular expression {value!r}: {exc}") from exc
        return value

    @field_validator("cycle_cutoff")
    @classmethod
    def _check_cutoff(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError("cycle_cutoff must not be negative")
        return value

    def search_dirs(self) -> List[str]:
        """Directories searched for executables, in order."""
        if self.search_path is not None:
            return list(self.search_path)
        return [entry for entry in os.environ.get("PATH", "").split(os.pathsep) if entry]

    def fold(self, text: str) -> str:
        return text.lower() if self.ignore_case else text

    def matches(self, name: str, stub: str) -> bool:
        """Prefix match honouring ``ignore_case``."""
        return self.fold(name).startswith(self.fold(stub))


class ReplConfig(BaseModel):
    """Interactive shell front end configuration."""
    prompt: str = "$ "
    history_file: str = "~/.pcomp/history"
    list_columns: Optional[int] = None


class PcompConfig(BaseModel):
    """Main pcomp configuration."""
    completion: CompletionConfig = Field(default_factory=CompletionConfig)
    repl: ReplConfig = Field(default_factory=ReplConfig)

    # Extra argument rules, searched before the bundled table
    rules_file: Optional[str] = None
    verbose: bool = False


def get_config_path(local: bool = False) -> Path:
    """Get the path to the configuration file."""
    if local:
        return Path("./pcomp.toml")
    else:
        return Path.home() / ".pcomp" / "config.toml"


def _merge(target: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = value


def _read(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            return toml.load(f)
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc


def load_config(path: Optional[Path] = None) -> PcompConfig:
    """Load configuration from files and environment variables."""
    config_data: Dict[str, Any] = {}

    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        _merge(config_data, _read(path))
    else:
        # Load global config
        global_config_path = get_config_path(local=False)
        if global_config_path.exists():
            _merge(config_data, _read(global_config_path))

        # Load local config (overrides global)
        local_config_path = get_config_path(local=True)
        if local_config_path.exists():
            _merge(config_data, _read(local_config_path))

    # Override with environment variables
    completion = config_data.setdefault("completion", {})
    if "PCOMP_IGNORE_CASE" in os.environ:
        completion["ignore_case"] = os.environ["PCOMP_IGNORE_CASE"].lower() in ("1", "true", "yes", "on")
    if "PCOMP_CYCLE_CUTOFF" in os.environ:
        raw = os.environ["PCOMP_CYCLE_CUTOFF"].strip()
        completion["cycle_cutoff"] = None if raw.lower() in ("", "none") else raw
    if "PCOMP_VERBOSE" in os.environ:
        config_data["verbose"] = os.environ["PCOMP_VERBOSE"].lower() in ("1", "true", "yes", "on")

    try:
        return PcompConfig(**config_data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def ensure_config_dir() -> None:
    """Ensure the pcomp configuration directory exists."""
    config_dir = Path.home() / ".pcomp"
    config_dir.mkdir(exist_ok=True)


def create_default_config() -> None:
    """Create a default configuration file."""
    config_path = get_config_path(local=False)
    ensure_config_dir()

    if not config_path.exists():
        default_config = {
            "completion": {
                "ignore_case": False,
                "auto_list": False,
                "cycle_cutoff": 5,
                "use_paring": True,
                "show_symbolic_completions": False,
                "show_symbolic_alternatives": True,
                "file_ignore": "~$",
                "dir_ignore": r"^(\.\.?|CVS)$",
                "force_execution": False,
            },
            "repl": {
                "prompt": "$ ",
                "history_file": "~/.pcomp/history",
            },
            "verbose": False
        }

        with open(config_path, "w") as f:
            toml.dump(default_config, f)

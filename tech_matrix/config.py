"""Configuration for an analysis run."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

ENV_PREFIX = "TECHMATRIX_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class AnalysisConfig:
    """Settings of the analyzer and the history walker."""

    include_history: bool = True
    max_workers: int = 4
    git_binary: str = "git"
    git_timeout: float = 60.0
    case_sensitive: bool = False
    ignore_patterns: List[str] = field(default_factory=list)
    mappings_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.git_timeout <= 0:
            raise ValueError("git_timeout must be positive")
        if not self.git_binary:
            raise ValueError("git_binary cannot be empty")
        if self.mappings_dir is not None:
            self.mappings_dir = Path(self.mappings_dir)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalysisConfig":
        """Build a config from ``TECHMATRIX_*`` environment variables.

        Recognised: ``TECHMATRIX_INCLUDE_HISTORY``, ``TECHMATRIX_MAX_WORKERS``,
        ``TECHMATRIX_GIT_BINARY``, ``TECHMATRIX_GIT_TIMEOUT``,
        ``TECHMATRIX_CASE_SENSITIVE``, ``TECHMATRIX_IGNORE`` (comma separated)
        and ``TECHMATRIX_MAPPINGS_DIR``. Unset variables keep the defaults.

        Args:
            environ: Environment to read, ``os.environ`` if None

        Returns:
            Validated configuration

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value.strip() if value and value.strip() else None

        kwargs = {}
        if get("INCLUDE_HISTORY") is not None:
            kwargs["include_history"] = get("INCLUDE_HISTORY").lower() in _TRUE_VALUES
        if get("CASE_SENSITIVE") is not None:
            kwargs["case_sensitive"] = get("CASE_SENSITIVE").lower() in _TRUE_VALUES
        if get("MAX_WORKERS") is not None:
            kwargs["max_workers"] = int(get("MAX_WORKERS"))
        if get("GIT_TIMEOUT") is not None:
            kwargs["git_timeout"] = float(get("GIT_TIMEOUT"))
        if get("GIT_BINARY") is not None:
            kwargs["git_binary"] = get("GIT_BINARY")
        if get("IGNORE") is not None:
            kwargs["ignore_patterns"] = [p.strip() for p in get("IGNORE").split(",") if p.strip()]
        if get("MAPPINGS_DIR") is not None:
            kwargs["mappings_dir"] = Path(get("MAPPINGS_DIR"))

        return cls(**kwargs)

"""
Configuration module for LPRefine.

This module provides configuration management for the LPRefine library:
the numerical tolerance shared by pricing, separation and integrality
checks, loop budgets, solver settings and the logging level.

Configuration can be set via:
1. Environment variables (LPREFINE_*)
2. Config file (./lprefine.toml or ~/.lprefine/config.toml)
3. Programmatic API

Example:
    >>> from lprefine.config import config
    >>> print(config.tolerance)
    1e-06
    >>> config.max_columns = 25
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    return int(value) if value else default


@dataclass
class LPRefineConfig:
    """
    Configuration for the LPRefine library.

    Attributes:
        tolerance: Numerical tolerance used for "improving column",
            "violated cut" and "integral value" decisions
        max_columns: Default bound on the number of patterns the
            column-generation loop may add
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        verbosity: Solver output level (0 = silent)
        time_limit: Solver time limit per solve in seconds (None = no limit)
        mip_rel_gap: Relative gap for integer solves of the outer model
    """

    tolerance: float = field(
        default_factory=lambda: _env_float('LPREFINE_TOLERANCE', 1e-6)
    )
    max_columns: int = field(
        default_factory=lambda: _env_int('LPREFINE_MAX_COLUMNS', 10)
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get('LPREFINE_LOG_LEVEL', 'INFO')
    )
    verbosity: int = 0
    time_limit: Optional[float] = None
    mip_rel_gap: float = 1e-4

    def __post_init__(self):
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.max_columns < 0:
            raise ValueError("max_columns must be non-negative")
        self.log_level = str(self.log_level).upper()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "tolerance": self.tolerance,
            "max_columns": self.max_columns,
            "log_level": self.log_level,
            "verbosity": self.verbosity,
            "time_limit": self.time_limit,
            "mip_rel_gap": self.mip_rel_gap,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> 'LPRefineConfig':
        """Create config from dictionary."""
        defaults = cls()
        time_limit = d.get("time_limit", defaults.time_limit)
        return cls(
            tolerance=float(d.get("tolerance", defaults.tolerance)),
            max_columns=int(d.get("max_columns", defaults.max_columns)),
            log_level=d.get("log_level", defaults.log_level),
            verbosity=int(d.get("verbosity", defaults.verbosity)),
            time_limit=float(time_limit) if time_limit is not None else None,
            mip_rel_gap=float(d.get("mip_rel_gap", defaults.mip_rel_gap)),
        )

    def save(self, path: Optional[Path] = None) -> None:
        """
        Save configuration to a TOML file.

        Args:
            path: Path to save to (default: ./lprefine.toml)
        """
        if path is None:
            path = Path("lprefine.toml")

        lines = [
            "# LPRefine Configuration",
            "",
            "[numerics]",
            f"tolerance = {self.tolerance}",
            f"mip_rel_gap = {self.mip_rel_gap}",
            "",
            "[loops]",
            f"max_columns = {self.max_columns}",
            "",
            "[general]",
            f'log_level = "{self.log_level}"',
            f"verbosity = {self.verbosity}",
        ]
        if self.time_limit is not None:
            lines.append(f"time_limit = {self.time_limit}")

        path.write_text("\n".join(lines) + "\n")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'LPRefineConfig':
        """
        Load configuration from a TOML file.

        Args:
            path: Path to load from (default: ./lprefine.toml or
                ~/.lprefine/config.toml)

        Returns:
            Loaded configuration (or default if file not found)
        """
        if path is None:
            local_config = Path("lprefine.toml")
            user_config = Path.home() / ".lprefine" / "config.toml"

            if local_config.exists():
                path = local_config
            elif user_config.exists():
                path = user_config
            else:
                return cls()

        if not path.exists():
            return cls()

        # Flat key = value pairs; section headers only group the file
        config_dict: dict[str, Any] = {}
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("[") and line.endswith("]"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                config_dict[key.strip()] = value.strip().strip('"')

        return cls.from_dict(config_dict)


# Global configuration instance
config = LPRefineConfig()


def configure_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure logging to the console and optionally a file.

    Args:
        level: Logging level name (default: config.log_level)
        log_file: Optional file receiving a copy of the log

    Returns:
        The ``lprefine`` package logger
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode='w'))

    logging.basicConfig(
        level=getattr(logging, (level or config.log_level).upper(), logging.INFO),
        format='%(asctime)s %(levelname)-7s %(name)s: %(message)s',
        handlers=handlers,
        force=True,
    )
    return logging.getLogger('lprefine')

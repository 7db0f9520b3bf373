"""
Runtime configuration for txproof.

Defaults live on the dataclass. Overrides come from an optional JSON file,
then from TXPROOF_* environment variables (a .env file is loaded first).
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv


ENV_PREFIX = "TXPROOF_"


@dataclass
class ProofConfig:
    """Operational parameters"""

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False

    # Input limits
    max_leaves: int = 1 << 20  # Largest leaf list accepted from files

    def __post_init__(self):
        self.log_dir = Path(self.log_dir)
        self.log_level = str(self.log_level).upper()
        if logging.getLevelName(self.log_level) == f"Level {self.log_level}":
            raise ValueError(f"Unknown log level: {self.log_level}")
        if self.max_leaves < 1:
            raise ValueError(f"max_leaves must be positive, got {self.max_leaves}")

    @property
    def level(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _from_env() -> dict:
    """Collect TXPROOF_* overrides from the environment."""
    overrides = {}
    for f in fields(ProofConfig):
        raw = os.environ.get(ENV_PREFIX + f.name.upper())
        if raw is None:
            continue
        if f.type is bool:
            overrides[f.name] = _parse_bool(raw)
        elif f.type is int:
            overrides[f.name] = int(raw)
        else:
            overrides[f.name] = raw
    return overrides


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
) -> ProofConfig:
    """
    Load configuration from file and environment.

    Args:
        config_path: Optional path to a JSON config file
        env_file: Optional .env file (default: search from cwd)

    Returns:
        ProofConfig instance
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    values = {}
    if config_path:
        data = json.loads(Path(config_path).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a JSON object")
        known = {f.name for f in fields(ProofConfig)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config key(s): {', '.join(sorted(unknown))}")
        values.update(data)

    values.update(_from_env())
    return ProofConfig(**values)

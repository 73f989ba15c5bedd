"""Repository configuration helpers."""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import yaml

from .constants import CONFIG_FILE, MINIGIT_DIR

logger = logging.getLogger(__name__)


@dataclass
class RepoConfig:
    """Settings stored in .minigit/config.yaml."""

    encoding: str = "utf-8"  # Used to read working files and write restored ones
    json_indent: Optional[int] = None  # None keeps store records compact
    lock_timeout: float = 10.0  # Seconds the CLI waits for the store lock


def load_repo_config(root: Path) -> RepoConfig:
    """Load repository configuration from .minigit/config.yaml if present."""

    cfg_path = root / MINIGIT_DIR / CONFIG_FILE
    if not cfg_path.exists():
        return RepoConfig()

    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except yaml.YAMLError as e:
        logger.warning("Ignoring unreadable %s: %s", cfg_path, e)
        return RepoConfig()

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping", cfg_path)
        return RepoConfig()

    defaults = RepoConfig()
    return RepoConfig(
        encoding=data.get("encoding", defaults.encoding),
        json_indent=data.get("json_indent", defaults.json_indent),
        lock_timeout=float(data.get("lock_timeout", defaults.lock_timeout)),
    )


def save_repo_config(config: RepoConfig, root: Path) -> Path:
    """Write configuration to .minigit/config.yaml and return its path."""
    cfg_path = root / MINIGIT_DIR / CONFIG_FILE
    cfg_path.write_text(yaml.safe_dump(asdict(config), default_flow_style=False, sort_keys=False))
    return cfg_path

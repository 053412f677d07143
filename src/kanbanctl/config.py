# src/kanbanctl/config.py

"""
Runtime configuration.

Settings come from an optional YAML file, then the environment, then
command-line overrides (applied by the CLI). The resulting value is
passed explicitly to the board store and board model; nothing else
reads the environment.

Example config.yml:

    base_dir: ~/kanban
    log_file: ~/.local/state/kanbanctl/kanbanctl.log
    log_level: INFO
    default_board: Kanban Board
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Optional

import yaml

from kanbanctl.engine.errors import ConfigurationError

logger = logging.getLogger(__name__)


ENV_BASE_DIR: Final[str] = "KANBAN_DIR"
ENV_CONFIG_HOME: Final[str] = "XDG_CONFIG_HOME"
CONFIG_FILE_NAME: Final[str] = "config.yml"
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_BOARD_NAME: Final[str] = "Kanban Board"


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    root = env.get(ENV_CONFIG_HOME) or str(Path.home() / ".config")
    return Path(root) / "kanbanctl" / CONFIG_FILE_NAME


@dataclass(slots=True)
class Settings:
    """
    Resolved configuration for one process.

    `base_dir` is None when no board directory is configured; the editor
    then runs without persistence.
    """

    base_dir: Optional[Path] = None
    log_file: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL
    default_board: str = DEFAULT_BOARD_NAME

    @property
    def persistence_enabled(self) -> bool:
        return self.base_dir is not None

    @classmethod
    def load(
        cls,
        path: Optional[str | Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """
        Load settings from YAML (if present) and the environment.

        A missing file is fine. An unreadable or malformed one raises
        ConfigurationError. KANBAN_DIR overrides the file's base_dir.
        """
        env = os.environ if environ is None else environ
        cfg_path = Path(path) if path is not None else default_config_path(env)

        if cfg_path.is_file():
            data = _read_yaml(cfg_path)
        elif path is not None:
            raise ConfigurationError(f"Config file not found: {cfg_path}")
        else:
            data = {}

        settings = cls(
            base_dir=_optional_path(data.get("base_dir")),
            log_file=_optional_path(data.get("log_file")),
            log_level=str(data.get("log_level") or DEFAULT_LOG_LEVEL).upper(),
            default_board=str(data.get("default_board") or DEFAULT_BOARD_NAME),
        )

        env_dir = env.get(ENV_BASE_DIR)
        if env_dir:
            settings.base_dir = _optional_path(env_dir)

        logger.debug("Settings resolved: %s", settings)
        return settings


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"{path}: Cannot read config file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path}: Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: YAML root must be a mapping/dictionary")

    return data


def _optional_path(value: Any) -> Optional[Path]:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(s).expanduser().absolute()

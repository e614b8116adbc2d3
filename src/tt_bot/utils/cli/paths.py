"""
Process-wide application paths for TT Bot.

The configuration file and log folder are chosen once from the command line
at startup; logging setup and configuration loading read them from here.
"""

from pathlib import Path

from ...config.manager import DEPLOY_CONFIG_FILE

DEFAULT_LOG_FOLDER = Path("logs")


class PathConfig:
    """Singleton holding the paths selected at startup."""

    _instance: "PathConfig | None" = None
    _config_file: Path
    _log_folder: Path

    def __new__(cls) -> "PathConfig":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config_file = DEPLOY_CONFIG_FILE
            instance._log_folder = DEFAULT_LOG_FOLDER
            cls._instance = instance
        return cls._instance

    def set_paths(self, config_file: Path, log_folder: Path) -> None:
        """Record the paths parsed from the command line."""
        self._config_file = config_file
        self._log_folder = log_folder

    @property
    def config_file(self) -> Path:
        return self._config_file

    @property
    def log_folder(self) -> Path:
        return self._log_folder


def get_path_config() -> PathConfig:
    """Return the process-wide PathConfig."""
    return PathConfig()

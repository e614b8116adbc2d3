"""Configuration manager for TT Bot.

This module provides functionality for loading and validating YAML
configuration files with Pydantic model validation, selecting the
configuration file for debug or deploy mode, and applying environment
variable overrides for secrets.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from ..utils.core.exceptions import ConfigurationError
from .schema import TTBotConfig

logger = logging.getLogger(__name__)

DEBUG_ENV_VAR = "TT_DEBUG"
TOKEN_ENV_VAR = "DISCORD_TOKEN"
GUILD_ID_ENV_VAR = "GUILD_ID"

DEV_CONFIG_FILE = Path("dev.yml")
DEPLOY_CONFIG_FILE = Path("deploy.yml")

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def is_debug_enabled(environ: Mapping[str, str] | None = None) -> bool:
    """Check the TT_DEBUG environment variable."""
    env = os.environ if environ is None else environ
    return env.get(DEBUG_ENV_VAR, "").strip().lower() in _TRUTHY


def default_config_file(debug: bool) -> Path:
    """The configuration file used when none is given explicitly."""
    return DEV_CONFIG_FILE if debug else DEPLOY_CONFIG_FILE


class ConfigManager:
    """
    Configuration manager for handling YAML config files with Pydantic validation.

    The configuration is loaded once at startup and never mutated afterwards;
    reloading requires a restart.
    """

    @staticmethod
    def load_config(
        config_path: Path, environ: Mapping[str, str] | None = None
    ) -> TTBotConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file
            environ: Environment used for overrides (defaults to os.environ)

        Returns:
            TTBotConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the file does not contain a YAML mapping
            ConfigurationError: If an environment override is malformed
            pydantic.ValidationError: If the configuration fails validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        parsed_data = ConfigManager._apply_env_overrides(
            config_data, os.environ if environ is None else environ
        )
        return TTBotConfig.model_validate(parsed_data)

    @staticmethod
    def _apply_env_overrides(
        config_data: dict[str, object], environ: Mapping[str, str]
    ) -> dict[str, object]:
        """
        Overlay DISCORD_TOKEN and GUILD_ID from the environment.

        Args:
            config_data: Raw configuration data from YAML
            environ: Environment variables

        Returns:
            dict[str, object]: Configuration data with overrides applied
        """
        parsed_data = config_data.copy()

        token = environ.get(TOKEN_ENV_VAR)
        guild_id = environ.get(GUILD_ID_ENV_VAR)
        if token is None and guild_id is None:
            return parsed_data

        services = parsed_data.get("services")
        services = dict(services) if isinstance(services, dict) else {}  # pyright: ignore[reportUnknownArgumentType]
        discord_section = services.get("discord")
        discord_section = dict(discord_section) if isinstance(discord_section, dict) else {}  # pyright: ignore[reportUnknownArgumentType]

        if token is not None:
            discord_section["token"] = token
            logger.debug(f"Discord token taken from {TOKEN_ENV_VAR}")

        if guild_id is not None:
            match guild_id.strip():
                case "":
                    discord_section["guild_id"] = None
                case value if value.isdigit():
                    discord_section["guild_id"] = int(value)
                case value:
                    raise ConfigurationError(
                        f"{GUILD_ID_ENV_VAR} must be an integer, got {value!r}"
                    )

        services["discord"] = discord_section
        parsed_data["services"] = services
        return parsed_data


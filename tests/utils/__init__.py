"""
Test utilities package for TT Bot tests.

## Available Modules

### test_helpers.py
Core test utilities for configuration and Discord mocking:
- `create_test_config()`: Build a validated TTBotConfig with overridable fields
- `create_temp_config_file()`: Context manager for temporary YAML config files
- `create_mock_user()`: Create mock Discord user objects
- `create_mock_guild()`: Create mock Discord guild objects
- `create_mock_interaction()`: Create mock Discord interaction objects carrying
  a raw application command payload
- `command_option()`: Build one raw option entry as Discord delivers it
"""

from .test_helpers import (
    command_option,
    create_mock_guild,
    create_mock_interaction,
    create_mock_user,
    create_temp_config_file,
    create_test_config,
)

__all__ = [
    "command_option",
    "create_mock_guild",
    "create_mock_interaction",
    "create_mock_user",
    "create_temp_config_file",
    "create_test_config",
]

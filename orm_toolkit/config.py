"""
Configuration module for the ORM Learning Toolkit.

Provides centralized configuration for the database connection, the soft
delete subsystem and logging.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator


class ToolkitConfig(BaseModel):
    """Central configuration for the toolkit.

    Configuration Sources (in order of precedence):
        1. Programmatic settings (highest priority)
        2. Environment variables (ORM_ prefix)
        3. Configuration files (JSON or YAML)
        4. Default values (lowest priority)

    Example:
        >>> config = ToolkitConfig(database_url="sqlite:///persons.db")

        Loading from environment:

        >>> import os
        >>> os.environ['ORM_DATABASE_URL'] = 'sqlite:///persons.db'
        >>> os.environ['ORM_ECHO_SQL'] = 'true'
        >>> config = ToolkitConfig.from_env()

        Loading from file:

        >>> config = ToolkitConfig.from_file('toolkit.yaml')
    """

    # General settings
    application_name: str = Field(
        "ORM Learning Toolkit", description="Name of the application"
    )
    environment: str = Field(
        "development", description="Environment (development, staging, production)"
    )

    # Database settings
    database_url: str = Field(
        "sqlite:///:memory:", description="SQLAlchemy database URL"
    )
    echo_sql: bool = Field(False, description="Log emitted SQL statements")

    # Soft delete settings
    soft_delete_enabled: bool = Field(
        True, description="Install the change interceptor and visibility filter"
    )
    include_deleted_option: str = Field(
        "include_deleted",
        description="Execution option that bypasses the visibility filter",
        min_length=1,
    )

    # Logging settings
    log_level: str = Field("WARNING", description="Root log level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is valid."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Environment must be one of: {', '.join(sorted(valid_environments))}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the log level is one the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    @classmethod
    def from_env(cls, prefix: str = "ORM_") -> "ToolkitConfig":
        """
        Load configuration from environment variables.

        Args:
            prefix: Prefix for environment variables

        Returns:
            Configuration instance
        """
        import os

        config_dict: Dict[str, Any] = {}

        for field_name, field_info in cls.model_fields.items():
            env_var = f"{prefix}{field_name.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]

                if field_info.annotation == bool:
                    config_dict[field_name] = value.lower() in (
                        "true",
                        "1",
                        "yes",
                        "on",
                    )
                else:
                    config_dict[field_name] = value

        return cls.model_validate(config_dict)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ToolkitConfig":
        """
        Load configuration from a JSON or YAML file.

        Args:
            path: File path; ``.yaml``/``.yml`` files are read as YAML

        Returns:
            Configuration instance
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")

        if path.suffix.lower() in (".yaml", ".yml"):
            import yaml

            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)

        return cls.model_validate(data)

    def get_engine_options(self) -> Dict[str, Any]:
        """Get keyword arguments for ``create_engine``."""
        return {"echo": self.echo_sql}


# Global configuration instance
_config: Optional[ToolkitConfig] = None


def get_config() -> ToolkitConfig:
    """
    Get the global configuration instance.

    Returns:
        Global configuration
    """
    global _config

    if _config is None:
        _config = ToolkitConfig.from_env()

    return _config


def set_config(config: Optional[ToolkitConfig]) -> None:
    """
    Set the global configuration instance.

    Args:
        config: Configuration to set, or None to reload from the environment
    """
    global _config
    _config = config


def configure(**kwargs: Any) -> ToolkitConfig:
    """
    Configure the toolkit with keyword arguments.

    Args:
        **kwargs: Configuration parameters

    Returns:
        Updated configuration
    """
    global _config

    if _config is None:
        _config = ToolkitConfig(**kwargs)
    else:
        config_dict = _config.to_dict()
        config_dict.update(kwargs)
        _config = ToolkitConfig(**config_dict)

    return _config

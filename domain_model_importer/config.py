"""
Importer settings: pydantic schema, YAML loading and CLI overrides.
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import DEFAULT_PACKAGE_NAME
from .domain.models import ImportOptions
from .domain.naming import is_valid_java_class, package_name_from_email, to_java_package_name
from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class ImporterSettings(BaseModel):
    """Pydantic schema defining the importer configuration."""

    model_config = ConfigDict(extra="ignore")

    console_url: str = Field(
        "http://127.0.0.1:3000",
        min_length=1,
        description="Base URL of the console backend.",
    )
    request_timeout: float = Field(
        30.0, gt=0, description="Timeout in seconds for every console request."
    )
    user_email: Optional[str] = Field(
        None, description="Email used to derive the default package name."
    )
    package_name: Optional[str] = Field(
        None, description="Java package of imported types; derived from user_email when missing."
    )
    builtin_keys: bool = Field(
        True, description="Use a Java built-in key type for single-column primary keys."
    )
    use_primitives: bool = Field(
        True, description="Use primitive Java types for non-nullable columns."
    )
    generate_caches: bool = Field(
        True, description="Ask the console to generate a cache per imported domain model."
    )
    generated_caches_clusters: Optional[List[str]] = Field(
        None, description="Clusters of generated caches; all known clusters when missing."
    )
    presets_file: str = Field(
        "~/.domain-model-importer/presets.json",
        min_length=1,
        description="File remembering JDBC URL and user per driver class.",
    )
    verbose: bool = Field(False, description="Enable DEBUG logging.")
    no_color: bool = Field(False, description="Disable colored output.")

    @field_validator("console_url")
    @classmethod
    def check_console_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Console URL must start with http:// or https://, got '{v}'")
        return v.rstrip("/")

    @field_validator("package_name")
    @classmethod
    def check_package_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_java_class(v):
            raise ValueError(f"'{v}' is not a valid Java package name")
        return v

    @property
    def effective_package_name(self) -> str:
        if self.package_name:
            return self.package_name
        if self.user_email:
            return package_name_from_email(self.user_email)
        return DEFAULT_PACKAGE_NAME

    def import_options(self, clusters: Optional[List[str]] = None, space: Optional[str] = None) -> ImportOptions:
        """Default import options; ``clusters`` are used when none are configured."""
        chosen = self.generated_caches_clusters if self.generated_caches_clusters is not None else clusters
        return ImportOptions(
            package_name=to_java_package_name(self.effective_package_name),
            use_primitives=self.use_primitives,
            builtin_keys=self.builtin_keys,
            generate_caches=self.generate_caches,
            generated_caches_clusters=tuple(chosen or ()),
            space=space,
        )


def _read_yaml(config_path: str) -> Dict[str, Any]:
    config_file = Path(config_path)
    if not config_file.is_file():
        logger.warning(f"Config file not found at {config_path}. Using defaults and CLI arguments.")
        return {}
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file {config_path}: {e}")
        logger.warning("Proceeding with defaults and CLI arguments only.")
        return {}
    except OSError as e:
        logger.error(f"Error reading config file {config_path}: {e}")
        logger.warning("Proceeding with defaults and CLI arguments only.")
        return {}

    if yaml_config and not isinstance(yaml_config, dict):
        logger.warning(f"Content in config file {config_path} is not a dictionary. Ignoring file content.")
        return {}
    logger.debug(f"Loaded configuration from {config_path}")
    return yaml_config or {}


def load_settings(
    config_path: Optional[str] = None, cli_args: Optional[argparse.Namespace] = None
) -> ImporterSettings:
    """
    Load settings from a YAML file, override them with explicitly given CLI
    arguments and validate the result.

    Raises:
        ConfigurationError: If the merged settings fail validation
    """
    raw_config: Dict[str, Any] = _read_yaml(config_path) if config_path else {}

    if cli_args is not None:
        overridden = set()
        for key, value in vars(cli_args).items():
            if value is not None and key in ImporterSettings.model_fields:
                raw_config[key] = value
                overridden.add(key)
        if overridden:
            logger.debug(f"Overridden config keys from CLI arguments: {sorted(overridden)}")

    try:
        settings = ImporterSettings.model_validate(raw_config)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error.get("loc", ())) or "Top Level"
            problems.append(f"{loc}: {error.get('msg', 'Unknown error')}")
            logger.error(f"Configuration error at '{loc}': {error.get('msg')}")
        raise ConfigurationError(
            "Configuration validation failed",
            config_file=config_path,
            context={"errors": problems},
        ) from e

    logger.debug(f"Effective configuration: {settings.model_dump()}")
    return settings

"""
Configuration using Pydantic for type-safe settings management.

This module provides the plugin configuration (where the Maven settings files
live) and the YAML build description consumed by the command-line interface.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from maven_settings.exceptions import ConfigurationError

M2_HOME_ENV = "M2_HOME"


def default_user_settings_file() -> Path:
    """Per-user settings file, ``~/.m2/settings.xml``."""
    return Path.home() / ".m2" / "settings.xml"


def default_global_settings_file() -> Path | None:
    """Installation-wide settings file, ``$M2_HOME/conf/settings.xml``.

    Returns None when M2_HOME is not set.
    """
    m2_home = os.getenv(M2_HOME_ENV)
    if not m2_home:
        return None
    return Path(m2_home) / "conf" / "settings.xml"


class MavenSettingsConfig(BaseSettings):
    """Locations of the Maven settings files.

    Registered on a project as the ``mavenSettings`` extension. Both paths can
    be overridden by the build before evaluation, or through the
    ``MAVEN_SETTINGS_USER_SETTINGS_FILE`` and
    ``MAVEN_SETTINGS_GLOBAL_SETTINGS_FILE`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="MAVEN_SETTINGS_",
        case_sensitive=False,
        validate_assignment=True,
    )

    user_settings_file: Path = Field(
        default_factory=default_user_settings_file,
        description="User settings file; relative paths resolve against the project directory",
    )
    global_settings_file: Path | None = Field(
        default_factory=default_global_settings_file,
        description="Global settings file, defaults to $M2_HOME/conf/settings.xml",
    )

    def resolve_user_settings_file(self, base_dir: Path | None = None) -> Path:
        """Get the user settings file, resolving relative paths against ``base_dir``."""
        path = self.user_settings_file.expanduser()
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        return path


class CredentialsDeclaration(BaseModel):
    """Credentials written directly in the build description."""

    username: str | None = None
    password: str | None = None


class RepositoryDeclaration(BaseModel):
    """One repository in the build description."""

    type: Literal["maven", "flat_dir"] = Field(default="maven", description="Repository kind")
    name: str = Field(..., min_length=1, description="Repository name, matched against server ids")
    url: str | None = Field(default=None, description="Repository URL (maven only)")
    dirs: list[str] = Field(default_factory=list, description="Artifact directories (flat_dir only)")
    credentials: CredentialsDeclaration | None = Field(
        default=None, description="Pre-configured credentials (maven only)"
    )

    @model_validator(mode="after")
    def validate_kind_fields(self) -> RepositoryDeclaration:
        """Flat directory repositories carry no url or credentials."""
        if self.type == "flat_dir":
            if self.credentials is not None:
                raise ValueError(f"flat_dir repository '{self.name}' cannot declare credentials")
            if self.url is not None:
                raise ValueError(f"flat_dir repository '{self.name}' cannot declare a url")
        return self


class PublishingDeclaration(BaseModel):
    """Publishing section of the build description."""

    repositories: list[RepositoryDeclaration] = Field(default_factory=list)


class MavenSettingsDeclaration(BaseModel):
    """``mavenSettings`` section of the build description."""

    model_config = ConfigDict(populate_by_name=True)

    user_settings_file: str | None = Field(default=None, alias="userSettingsFile")


class BuildDescription(BaseModel):
    """A project's repository declarations, as loaded from YAML.

    Example:
        repositories:
          - name: nexus-releases
            url: https://nexus.example.com/repository/releases
        publishing:
          repositories:
            - name: nexus-releases
              url: https://nexus.example.com/repository/releases
        mavenSettings:
          userSettingsFile: ${HOME}/.m2/settings.xml
    """

    model_config = ConfigDict(populate_by_name=True)

    repositories: list[RepositoryDeclaration] = Field(default_factory=list)
    publishing: PublishingDeclaration | None = None
    maven_settings: MavenSettingsDeclaration = Field(
        default_factory=MavenSettingsDeclaration, alias="mavenSettings"
    )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> BuildDescription:
        """Load a build description from YAML with environment variable interpolation.

        Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.

        Args:
            config_path: Path to YAML build description

        Returns:
            BuildDescription instance

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Build description not found: {config_path}")

        try:
            with open(config_file, encoding="utf-8") as f:
                yaml_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read build description: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in build description: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Build description must be a YAML object, not a list or scalar")

        try:
            return cls.model_validate(config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate build description: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))

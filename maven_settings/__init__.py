"""maven-settings: inject credentials from Maven settings.xml into build repositories.

Key Components:
    - CredentialResolver: applies server credentials to repositories by name
    - LocalSettingsLoader: reads and merges the user and global settings files
    - MavenSettingsPlugin: wires loading and resolution into a project's evaluation
    - Project: the build model repositories are declared on

Example:
    >>> from maven_settings import MavenSettingsPlugin, Project
    >>> project = Project()
    >>> project.repositories.maven("nexus", "https://nexus.example.com/repository/releases")
    >>> MavenSettingsPlugin().apply(project)
    >>> project.evaluate()
"""

from maven_settings.config import MavenSettingsConfig
from maven_settings.exceptions import (
    BuildConfigurationError,
    ConfigurationError,
    MavenSettingsError,
    SettingsUnreadableError,
)
from maven_settings.loader import LocalSettingsLoader
from maven_settings.models import (
    CredentialedRepository,
    FlatDirRepository,
    MavenRepository,
    PasswordCredentials,
    ServerRecord,
    SettingsView,
)
from maven_settings.plugin import MavenSettingsPlugin
from maven_settings.project import Project, PublishingExtension, RepositoryHandler
from maven_settings.resolver import CredentialResolver, credentialed_repositories

__version__ = "0.1.0"

__all__ = [
    "BuildConfigurationError",
    "ConfigurationError",
    "CredentialResolver",
    "CredentialedRepository",
    "FlatDirRepository",
    "LocalSettingsLoader",
    "MavenRepository",
    "MavenSettingsConfig",
    "MavenSettingsError",
    "MavenSettingsPlugin",
    "PasswordCredentials",
    "Project",
    "PublishingExtension",
    "RepositoryHandler",
    "ServerRecord",
    "SettingsUnreadableError",
    "SettingsView",
    "credentialed_repositories",
]

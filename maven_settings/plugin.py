"""Plugin that injects Maven settings credentials into a project's repositories."""

import structlog

from .config import MavenSettingsConfig
from .exceptions import BuildConfigurationError, SettingsUnreadableError
from .loader import LocalSettingsLoader
from .models import SettingsView
from .project import Project, RepositoryHandler
from .resolver import CredentialResolver, credentialed_repositories

log = structlog.get_logger(__name__)

MAVEN_SETTINGS_EXTENSION_NAME = "mavenSettings"


class MavenSettingsPlugin:
    """Apply credentials from the local Maven settings once the project is evaluated.

    ``apply`` registers the ``mavenSettings`` extension (a
    ``MavenSettingsConfig`` the build may modify) and an after-evaluate hook.
    The hook loads the effective settings and resolves credentials for the
    dependency repositories and, when publishing is enabled, for the
    publishing repositories. Only repository kinds with a credentials
    capability are considered.
    """

    def __init__(self, resolver: CredentialResolver | None = None) -> None:
        self.resolver = resolver or CredentialResolver()

    def apply(self, project: Project) -> MavenSettingsConfig:
        """Register the extension and after-evaluate hook on ``project``.

        Applying the plugin a second time returns the existing extension.

        Raises:
            ConfigurationError: If the project is already evaluated. The
                project is left without the extension in that case.
        """
        if MavenSettingsPlugin in project.plugins:
            return project.extensions[MAVEN_SETTINGS_EXTENSION_NAME]

        project.after_evaluate(self._configure_credentials)
        extension = MavenSettingsConfig()
        project.extensions[MAVEN_SETTINGS_EXTENSION_NAME] = extension
        project.plugins.add(MavenSettingsPlugin)
        return extension

    def _configure_credentials(self, project: Project) -> None:
        settings = self.load_settings(project)

        self.apply_repo_credentials(project.repositories, settings)
        if project.publishing is not None:
            self.apply_repo_credentials(project.publishing.repositories, settings)

    def load_settings(self, project: Project) -> SettingsView:
        """Load the effective settings for ``project``.

        Raises:
            BuildConfigurationError: If a settings document cannot be read
        """
        extension: MavenSettingsConfig = project.extensions[MAVEN_SETTINGS_EXTENSION_NAME]
        loader = LocalSettingsLoader(extension, base_dir=project.project_dir)
        try:
            return loader.load_settings()
        except SettingsUnreadableError as e:
            log.error("settings_unreadable", path=str(e.path) if e.path else None, error=e.message)
            raise BuildConfigurationError("Unable to read local Maven settings.") from e

    def apply_repo_credentials(self, repositories: RepositoryHandler, settings: SettingsView) -> None:
        """Resolve credentials for every credentialed repository in ``repositories``."""
        self.resolver.resolve(credentialed_repositories(repositories), settings)

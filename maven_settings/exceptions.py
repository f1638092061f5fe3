"""Exception hierarchy for maven-settings.

Exception Hierarchy:
    MavenSettingsError (base)
    ├── ConfigurationError
    │   └── BuildConfigurationError
    └── SettingsUnreadableError

Resolution itself never raises: a repository with no matching server, or a
server record missing its username or password, is simply left alone.
Failures only happen while loading settings or configuring the build.

Example Usage:
    >>> from maven_settings.exceptions import BuildConfigurationError
    >>> try:
    ...     settings = loader.load_settings()
    ... except SettingsUnreadableError as e:
    ...     raise BuildConfigurationError("Unable to read local Maven settings.") from e
"""

from pathlib import Path


class MavenSettingsError(Exception):
    """Base exception for all maven-settings errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(MavenSettingsError):
    """Configuration-related errors.

    Examples:
        - Build description file not found or invalid YAML
        - Registering an after-evaluate hook on an evaluated project
        - Evaluating a project twice
    """

    pass


class BuildConfigurationError(ConfigurationError):
    """The build could not be configured because settings failed to load.

    Always raised with the underlying SettingsUnreadableError as its cause.
    """

    pass


class SettingsUnreadableError(MavenSettingsError):
    """A settings.xml document could not be read or parsed.

    Attributes:
        message: Human-readable error description
        path: The settings file that failed
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            path: The settings file that failed
            suggestion: Optional suggestion for resolution
        """
        self.path = Path(path) if path is not None else None
        self.suggestion = suggestion

        full_message = message
        if path is not None:
            full_message = f"{message} (file: {path})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message

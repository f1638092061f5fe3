"""In-process build model: projects, repository handlers and publishing.

A project goes through two phases. During configuration, repositories are
declared, plugins applied and after-evaluate hooks registered. ``evaluate()``
ends configuration and runs the hooks once, in registration order, at a point
where every repository declaration is final.

Example:
    >>> project = Project(Path("."))
    >>> project.repositories.maven("nexus", "https://nexus.example.com/repository/releases")
    >>> MavenSettingsPlugin().apply(project)
    >>> project.evaluate()
"""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import structlog

from .exceptions import ConfigurationError
from .models import FlatDirRepository, MavenRepository, PasswordCredentials

log = structlog.get_logger(__name__)

AfterEvaluateHook = Callable[["Project"], None]


class RepositoryHandler:
    """Ordered collection of repository declarations."""

    def __init__(self) -> None:
        self._repositories: list[Any] = []

    def __iter__(self) -> Iterator[Any]:
        return iter(self._repositories)

    def __len__(self) -> int:
        return len(self._repositories)

    def __getitem__(self, index: int) -> Any:
        return self._repositories[index]

    def add(self, repository: Any) -> Any:
        """Append a repository declaration and return it."""
        self._repositories.append(repository)
        return repository

    def maven(
        self,
        name: str,
        url: str | None = None,
        username: str | None = None,
        password: str | None = None,
    ) -> MavenRepository:
        """Declare a Maven repository, optionally with credentials."""
        return self.add(
            MavenRepository(
                name=name,
                url=url,
                credentials=PasswordCredentials(username=username, password=password),
            )
        )

    def flat_dir(self, name: str, dirs: list[Path] | None = None) -> FlatDirRepository:
        """Declare a flat-directory repository."""
        return self.add(FlatDirRepository(name=name, dirs=list(dirs or [])))

    def find(self, name: str) -> Any | None:
        """First repository with the given name, or None."""
        for repository in self._repositories:
            if repository.name == name:
                return repository
        return None


class PublishingExtension:
    """Destinations artifacts are published to."""

    def __init__(self) -> None:
        self.repositories = RepositoryHandler()


class Project:
    """A build project with a two-phase configure/evaluate lifecycle.

    Attributes:
        project_dir: Directory relative paths resolve against
        repositories: Dependency resolution repositories
        publishing: Publishing extension, None until enabled
        extensions: Named extension objects registered by plugins
    """

    def __init__(self, project_dir: Path | None = None) -> None:
        self.project_dir = Path(project_dir) if project_dir is not None else Path.cwd()
        self.repositories = RepositoryHandler()
        self.publishing: PublishingExtension | None = None
        self.extensions: dict[str, Any] = {}
        self.plugins: set[type] = set()
        self._after_evaluate: list[AfterEvaluateHook] = []
        self._evaluated = False

    @property
    def evaluated(self) -> bool:
        return self._evaluated

    def file(self, path: str | Path) -> Path:
        """Resolve ``path`` against the project directory."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.project_dir / candidate

    def enable_publishing(self) -> PublishingExtension:
        """Create the publishing extension if it does not exist yet."""
        if self.publishing is None:
            self.publishing = PublishingExtension()
        return self.publishing

    def after_evaluate(self, hook: AfterEvaluateHook) -> None:
        """Register a hook to run once configuration is finished.

        Raises:
            ConfigurationError: If the project is already evaluated
        """
        if self._evaluated:
            raise ConfigurationError("Cannot register an after-evaluate hook: project is already evaluated")
        self._after_evaluate.append(hook)

    def evaluate(self) -> None:
        """Finish configuration and run after-evaluate hooks in registration order.

        Raises:
            ConfigurationError: If the project was already evaluated
        """
        if self._evaluated:
            raise ConfigurationError("Project has already been evaluated")
        self._evaluated = True

        log.debug("project_evaluating", project_dir=str(self.project_dir), hooks=len(self._after_evaluate))
        for hook in self._after_evaluate:
            hook(self)

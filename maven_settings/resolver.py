"""Apply server credentials from settings to matching repositories."""

from collections.abc import Iterable, Sequence
from typing import Any

import structlog

from .models import CredentialedRepository, SettingsView

log = structlog.get_logger(__name__)


def credentialed_repositories(repositories: Iterable[Any]) -> list[CredentialedRepository]:
    """Keep only declarations that can receive credentials, in order.

    Repository kinds without a credentials capability (flat directories,
    for instance) are dropped before resolution ever sees them.
    """
    return [repo for repo in repositories if isinstance(repo, CredentialedRepository)]


class CredentialResolver:
    """Fill in repository credentials from matching server records.

    Matching rules:
    1. A repository matches the first server, in document order, whose id
       equals the repository name exactly (case-sensitive).
    2. The server is applied only if it has both a username and a password.
    3. Applying always overwrites both fields of the repository credentials,
       whatever was configured before. Callers that want to protect already
       configured repositories leave them out of ``targets``.

    Repositories sharing a name all receive the same credentials. A missing
    match or an incomplete server record is not an error.

    Example:
        >>> resolver = CredentialResolver()
        >>> resolver.resolve(project.repositories, settings)
    """

    def resolve(self, targets: Sequence[CredentialedRepository], settings: SettingsView) -> None:
        """Apply credentials to ``targets`` in place.

        Args:
            targets: Repository declarations to credential
            settings: Effective server records
        """
        servers = settings.first_by_id()
        applied = 0

        for target in targets:
            server = servers.get(target.name)
            if server is None:
                log.debug("repository_no_matching_server", repository=target.name)
                continue

            if not server.has_credentials:
                log.debug("server_credentials_incomplete", repository=target.name, server_id=server.id)
                continue

            target.credentials.username = server.username
            target.credentials.password = server.password
            applied += 1
            log.debug("repository_credentials_applied", repository=target.name, server_id=server.id)

        log.debug("resolution_pass_complete", targets=len(targets), applied=applied)

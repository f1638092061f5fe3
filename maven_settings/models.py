"""Data models for servers, settings and repository declarations.

A ``SettingsView`` is the effective list of ``<server>`` entries from the
Maven settings files. Repository declarations carry a name that is matched
against server ids, and (for repository kinds that support it) a mutable
``PasswordCredentials`` pair that resolution fills in.

Example:
    >>> view = SettingsView([ServerRecord("nexus", "deployer", "s3cret")])
    >>> view.find("nexus").username
    'deployer'
    >>> repo = MavenRepository("nexus", "https://nexus.example.com/repository/releases")
    >>> repo.credentials.username is None
    True
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ServerRecord:
    """One ``<server>`` entry of a settings document.

    Attributes:
        id: Server identifier, matched against repository names. Not unique.
        username: Optional username
        password: Optional password
    """

    id: str
    username: str | None = None
    password: str | None = None

    @property
    def has_credentials(self) -> bool:
        """True when both username and password are present and non-empty."""
        return bool(self.username) and bool(self.password)

    def __repr__(self) -> str:
        masked = "***" if self.password else self.password
        return f"ServerRecord(id={self.id!r}, username={self.username!r}, password={masked!r})"


class SettingsView:
    """Immutable, ordered collection of server records.

    Order is document order (user settings before global settings once merged
    by the loader), which is what makes "first match wins" well defined.
    Safe to share between resolution passes since it is never mutated.
    """

    __slots__ = ("_servers",)

    def __init__(self, servers: Iterable[ServerRecord] = ()) -> None:
        self._servers: tuple[ServerRecord, ...] = tuple(servers)

    @property
    def servers(self) -> tuple[ServerRecord, ...]:
        return self._servers

    def __iter__(self) -> Iterator[ServerRecord]:
        return iter(self._servers)

    def __len__(self) -> int:
        return len(self._servers)

    def __bool__(self) -> bool:
        return bool(self._servers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SettingsView):
            return NotImplemented
        return self._servers == other._servers

    def __hash__(self) -> int:
        return hash(self._servers)

    def __repr__(self) -> str:
        return f"SettingsView({list(self._servers)!r})"

    def ids(self) -> list[str]:
        """Server ids in document order, duplicates included."""
        return [server.id for server in self._servers]

    def find(self, server_id: str) -> ServerRecord | None:
        """Return the first record whose id equals ``server_id``, or None.

        Comparison is exact and case-sensitive.
        """
        for server in self._servers:
            if server.id == server_id:
                return server
        return None

    def first_by_id(self) -> Mapping[str, ServerRecord]:
        """Build a mapping from id to the first record with that id."""
        index: dict[str, ServerRecord] = {}
        for server in self._servers:
            index.setdefault(server.id, server)
        return index


@dataclass
class PasswordCredentials:
    """Mutable username/password pair of a repository declaration."""

    username: str | None = None
    password: str | None = None

    @property
    def is_configured(self) -> bool:
        return self.username is not None or self.password is not None


@runtime_checkable
class CredentialedRepository(Protocol):
    """Repository declarations that expose a credentials-mutation capability.

    Only declarations satisfying this protocol take part in credential
    resolution; other kinds are filtered out by the caller.
    """

    name: str
    credentials: PasswordCredentials


@dataclass
class MavenRepository:
    """A Maven-style remote repository declaration.

    Attributes:
        name: Repository name, compared against server ids
        url: Repository URL
        credentials: Credentials applied when talking to the repository
    """

    name: str
    url: str | None = None
    credentials: PasswordCredentials = field(default_factory=PasswordCredentials)


@dataclass
class FlatDirRepository:
    """A local flat-directory repository. Has no credentials.

    Attributes:
        name: Repository name
        dirs: Directories searched for artifacts
    """

    name: str
    dirs: list[Path] = field(default_factory=list)

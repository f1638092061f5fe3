"""Load the effective server list from the local Maven settings files.

Two documents are read: the installation-wide settings
(``$M2_HOME/conf/settings.xml``) and the per-user settings
(``~/.m2/settings.xml`` unless overridden). User settings are dominant: the
effective list holds every user server in document order, followed by the
global servers whose id the user file does not declare.

Only the ``<servers>`` section is read. Values may reference ``${env.NAME}``
and ``${user.home}``; unknown expressions are kept verbatim.
"""

import os
import re
import xml.etree.ElementTree as ET
from pathlib import Path

import structlog

from .config import MavenSettingsConfig
from .exceptions import SettingsUnreadableError
from .models import ServerRecord, SettingsView

log = structlog.get_logger(__name__)

SETTINGS_ROOT = "settings"

_EXPRESSION = re.compile(r"\$\{([^}]+)\}")


def _local_name(tag: str) -> str:
    """Strip an XML namespace, ``{http://maven.apache.org/SETTINGS/1.0.0}id`` -> ``id``."""
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def interpolate(value: str) -> str:
    """Expand ``${env.NAME}`` and ``${user.home}`` in a settings value."""

    def replace(match: re.Match[str]) -> str:
        expression = match.group(1)
        if expression.startswith("env."):
            resolved = os.getenv(expression[len("env.") :])
            return resolved if resolved is not None else match.group(0)
        if expression == "user.home":
            return str(Path.home())
        return match.group(0)

    return _EXPRESSION.sub(replace, value)


def _text(element: ET.Element, name: str) -> str | None:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    return interpolate(child.text.strip())


def parse_servers(path: Path) -> list[ServerRecord]:
    """Parse the ``<servers>`` section of one settings document.

    A missing file yields no servers.

    Raises:
        SettingsUnreadableError: If the file cannot be read, is not
            well-formed XML, is not a settings document, or declares a
            server without an id
    """
    if not path.exists():
        log.debug("settings_file_missing", path=str(path))
        return []
    if not path.is_file():
        raise SettingsUnreadableError("Settings path is not a file", path=path)

    try:
        with open(path, "rb") as f:
            root = ET.parse(f).getroot()
    except ET.ParseError as e:
        raise SettingsUnreadableError(
            f"Malformed settings document: {e}",
            path=path,
            suggestion="Check the file against the Maven settings schema",
        ) from e
    except OSError as e:
        raise SettingsUnreadableError(f"Cannot read settings document: {e}", path=path) from e

    if _local_name(root.tag) != SETTINGS_ROOT:
        raise SettingsUnreadableError(
            f"Expected <{SETTINGS_ROOT}> root element, found <{_local_name(root.tag)}>",
            path=path,
        )

    servers_element = _child(root, "servers")
    if servers_element is None:
        return []

    servers: list[ServerRecord] = []
    seen: set[str] = set()
    for position, element in enumerate(_children(servers_element, "server")):
        server_id = _text(element, "id")
        if not server_id:
            raise SettingsUnreadableError(
                f"servers.server[{position}].id must not be empty",
                path=path,
            )
        if server_id in seen:
            log.warning("duplicate_server_id", server_id=server_id, path=str(path))
        seen.add(server_id)
        servers.append(
            ServerRecord(
                id=server_id,
                username=_text(element, "username"),
                password=_text(element, "password"),
            )
        )

    return servers


def merge_servers(dominant: list[ServerRecord], recessive: list[ServerRecord]) -> list[ServerRecord]:
    """Dominant servers first, then recessive servers with an id not already declared."""
    dominant_ids = {server.id for server in dominant}
    return dominant + [server for server in recessive if server.id not in dominant_ids]


class LocalSettingsLoader:
    """Build the effective ``SettingsView`` from the user and global settings files.

    Example:
        >>> loader = LocalSettingsLoader(MavenSettingsConfig())
        >>> settings = loader.load_settings()
        >>> settings.ids()
        ['nexus-releases', 'nexus-snapshots']
    """

    def __init__(self, config: MavenSettingsConfig, base_dir: Path | None = None) -> None:
        """Initialize loader.

        Args:
            config: Settings file locations
            base_dir: Directory relative user settings paths resolve against
        """
        self.config = config
        self.base_dir = base_dir

    @property
    def user_settings_file(self) -> Path:
        return self.config.resolve_user_settings_file(self.base_dir)

    @property
    def global_settings_file(self) -> Path | None:
        return self.config.global_settings_file

    def load_settings(self) -> SettingsView:
        """Read and merge both settings documents.

        Raises:
            SettingsUnreadableError: If either document cannot be parsed
        """
        global_servers: list[ServerRecord] = []
        if self.global_settings_file is not None:
            global_servers = parse_servers(self.global_settings_file)

        user_servers = parse_servers(self.user_settings_file)

        view = SettingsView(merge_servers(user_servers, global_servers))
        log.info(
            "settings_loaded",
            user_settings=str(self.user_settings_file),
            global_settings=str(self.global_settings_file) if self.global_settings_file else None,
            servers=len(view),
        )
        return view

"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from maven_settings.models import ServerRecord, SettingsView

SETTINGS_NAMESPACE = "http://maven.apache.org/SETTINGS/1.0.0"


def settings_xml(servers: list[dict[str, str]], namespaced: bool = True) -> str:
    """Render a settings.xml document with the given server entries."""
    entries = []
    for server in servers:
        fields = "".join(f"<{key}>{value}</{key}>" for key, value in server.items())
        entries.append(f"    <server>{fields}</server>")
    xmlns = f' xmlns="{SETTINGS_NAMESPACE}"' if namespaced else ""
    body = "\n".join(entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<settings{xmlns}>\n"
        "  <servers>\n"
        f"{body}\n"
        "  </servers>\n"
        "</settings>\n"
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration made by a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep the real home directory and M2_HOME out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("M2_HOME", raising=False)
    monkeypatch.delenv("MAVEN_SETTINGS_USER_SETTINGS_FILE", raising=False)
    monkeypatch.delenv("MAVEN_SETTINGS_GLOBAL_SETTINGS_FILE", raising=False)
    return home


@pytest.fixture
def write_settings(tmp_path: Path) -> Callable[..., Path]:
    """Write a settings.xml file under tmp_path and return its path."""

    def _write(servers: list[dict[str, str]], name: str = "settings.xml", namespaced: bool = True) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(settings_xml(servers, namespaced=namespaced), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def nexus_server() -> ServerRecord:
    """Complete server record."""
    return ServerRecord(id="afterverse-nexus", username="afterverse-nexus-user", password="afterverse-nexus-pass")


@pytest.fixture
def nexus_settings(nexus_server: ServerRecord) -> SettingsView:
    """Settings holding a single complete server."""
    return SettingsView([nexus_server])

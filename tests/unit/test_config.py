"""Tests for maven_settings/config.py Pydantic models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from maven_settings.config import BuildDescription, MavenSettingsConfig, RepositoryDeclaration
from maven_settings.exceptions import ConfigurationError


class TestMavenSettingsConfig:
    def test_default_user_settings_file(self, isolated_environment):
        config = MavenSettingsConfig()

        assert config.user_settings_file == isolated_environment / ".m2" / "settings.xml"

    def test_global_settings_none_without_m2_home(self):
        assert MavenSettingsConfig().global_settings_file is None

    def test_global_settings_from_m2_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("M2_HOME", str(tmp_path / "maven"))

        config = MavenSettingsConfig()

        assert config.global_settings_file == tmp_path / "maven" / "conf" / "settings.xml"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MAVEN_SETTINGS_USER_SETTINGS_FILE", str(tmp_path / "custom.xml"))

        assert MavenSettingsConfig().user_settings_file == tmp_path / "custom.xml"

    def test_assignment_is_validated(self, tmp_path):
        config = MavenSettingsConfig()
        config.user_settings_file = str(tmp_path / "other.xml")

        assert config.user_settings_file == tmp_path / "other.xml"

    def test_resolve_relative_path(self, tmp_path):
        config = MavenSettingsConfig(user_settings_file=Path("build/settings.xml"))

        assert config.resolve_user_settings_file(tmp_path) == tmp_path / "build" / "settings.xml"

    def test_resolve_absolute_path_ignores_base_dir(self, tmp_path):
        config = MavenSettingsConfig(user_settings_file=tmp_path / "settings.xml")

        assert config.resolve_user_settings_file(Path("/elsewhere")) == tmp_path / "settings.xml"


class TestRepositoryDeclaration:
    def test_defaults_to_maven(self):
        declaration = RepositoryDeclaration(name="nexus", url="https://nexus.example.com")

        assert declaration.type == "maven"
        assert declaration.credentials is None

    def test_name_required(self):
        with pytest.raises(ValidationError):
            RepositoryDeclaration(name="")

    def test_flat_dir_cannot_have_credentials(self):
        with pytest.raises(ValidationError, match="cannot declare credentials"):
            RepositoryDeclaration(type="flat_dir", name="libs", credentials={"username": "u"})

    def test_flat_dir_cannot_have_url(self):
        with pytest.raises(ValidationError, match="cannot declare a url"):
            RepositoryDeclaration(type="flat_dir", name="libs", url="https://example.com")


class TestBuildDescription:
    def test_from_yaml(self, tmp_path):
        build_file = tmp_path / "build.yaml"
        build_file.write_text(
            """
repositories:
  - name: nexus
    url: https://nexus.example.com/repository/releases
  - name: libs
    type: flat_dir
    dirs: [lib]
publishing:
  repositories:
    - name: nexus
      url: https://nexus.example.com/repository/releases
      credentials:
        username: pre-set
mavenSettings:
  userSettingsFile: conf/settings.xml
"""
        )

        description = BuildDescription.from_yaml(build_file)

        assert [r.name for r in description.repositories] == ["nexus", "libs"]
        assert description.repositories[1].dirs == ["lib"]
        assert description.publishing.repositories[0].credentials.username == "pre-set"
        assert description.maven_settings.user_settings_file == "conf/settings.xml"

    def test_empty_file(self, tmp_path):
        build_file = tmp_path / "build.yaml"
        build_file.write_text("")

        description = BuildDescription.from_yaml(build_file)

        assert description.repositories == []
        assert description.publishing is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            BuildDescription.from_yaml(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        build_file = tmp_path / "build.yaml"
        build_file.write_text("repositories: [unclosed")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            BuildDescription.from_yaml(build_file)

    def test_non_mapping(self, tmp_path):
        build_file = tmp_path / "build.yaml"
        build_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="YAML object"):
            BuildDescription.from_yaml(build_file)

    def test_invalid_fields(self, tmp_path):
        build_file = tmp_path / "build.yaml"
        build_file.write_text("repositories:\n  - url: https://example.com\n")

        with pytest.raises(ConfigurationError, match="Failed to validate"):
            BuildDescription.from_yaml(build_file)

    def test_env_interpolation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REPO_NAME", "from-env")
        build_file = tmp_path / "build.yaml"
        build_file.write_text(
            "# ${UNSET_IN_COMMENT}\n"
            "repositories:\n"
            "  - name: ${REPO_NAME}\n"
            "  - name: ${OTHER_REPO:-fallback}\n"
        )

        description = BuildDescription.from_yaml(build_file)

        assert [r.name for r in description.repositories] == ["from-env", "fallback"]

    def test_missing_env_var(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MISSING_REPO_VAR", raising=False)
        build_file = tmp_path / "build.yaml"
        build_file.write_text("repositories:\n  - name: ${MISSING_REPO_VAR}\n")

        with pytest.raises(ConfigurationError, match="MISSING_REPO_VAR"):
            BuildDescription.from_yaml(build_file)

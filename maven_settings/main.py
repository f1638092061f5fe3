"""CLI entry point for maven-settings."""

import sys
from pathlib import Path

import click

from maven_settings.config import BuildDescription, MavenSettingsConfig, RepositoryDeclaration
from maven_settings.exceptions import MavenSettingsError
from maven_settings.loader import LocalSettingsLoader
from maven_settings.models import CredentialedRepository
from maven_settings.plugin import MavenSettingsPlugin
from maven_settings.project import Project, RepositoryHandler
from maven_settings.utils.logging_config import configure_logging, get_logger

log = get_logger(__name__)


MASKED_VALUE = "********"


def _mask(value: str | None) -> str:
    """Mask a secret entirely; the length of the value is not revealed either."""
    if value is None:
        return "-"
    return MASKED_VALUE


def _declare(handler: RepositoryHandler, declaration: RepositoryDeclaration, project: Project) -> None:
    if declaration.type == "flat_dir":
        handler.flat_dir(declaration.name, [project.file(d) for d in declaration.dirs])
        return

    credentials = declaration.credentials
    handler.maven(
        declaration.name,
        declaration.url,
        username=credentials.username if credentials else None,
        password=credentials.password if credentials else None,
    )


def build_project(description: BuildDescription, project_dir: Path) -> Project:
    """Create a configured, not yet evaluated, project from a build description."""
    project = Project(project_dir)
    for declaration in description.repositories:
        _declare(project.repositories, declaration, project)

    if description.publishing is not None:
        publishing = project.enable_publishing()
        for declaration in description.publishing.repositories:
            _declare(publishing.repositories, declaration, project)

    return project


def _echo_repositories(title: str, repositories: RepositoryHandler, show_values: bool) -> None:
    click.echo(title)
    if not len(repositories):
        click.echo("  (none)")
        return

    for repository in repositories:
        if not isinstance(repository, CredentialedRepository):
            click.echo(f"  {repository.name}: no credentials support")
            continue

        credentials = repository.credentials
        if not credentials.is_configured:
            click.echo(f"  {repository.name}: no credentials")
            continue

        password = (credentials.password or "-") if show_values else _mask(credentials.password)
        click.echo(f"  {repository.name}: username={credentials.username or '-'} password={password}")


def _fail(error: MavenSettingsError) -> None:
    click.echo(click.style(f"Error: {error.message}", fg="red"), err=True)
    cause = error.__cause__
    if isinstance(cause, MavenSettingsError):
        click.echo(click.style(f"Caused by: {cause}", fg="yellow"), err=True)
    log.debug("command_failed", exc_info=True)
    sys.exit(1)


@click.group()
@click.option("--log-level", default="WARNING", help="Logging level")
@click.option(
    "--settings",
    "user_settings",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
    help="User settings file (default: ~/.m2/settings.xml)",
)
@click.option(
    "--global-settings",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
    help="Global settings file (default: $M2_HOME/conf/settings.xml)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, user_settings: Path | None, global_settings: Path | None) -> None:
    """maven-settings: inject Maven settings.xml credentials into repositories."""
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e

    ctx.obj = {"user_settings": user_settings, "global_settings": global_settings}


def _settings_config(ctx: click.Context) -> MavenSettingsConfig:
    config = MavenSettingsConfig()
    if ctx.obj["user_settings"] is not None:
        config.user_settings_file = ctx.obj["user_settings"]
    if ctx.obj["global_settings"] is not None:
        config.global_settings_file = ctx.obj["global_settings"]
    return config


@cli.command()
@click.pass_context
def servers(ctx: click.Context) -> None:
    """List server ids from the effective settings, in resolution order."""
    try:
        settings = LocalSettingsLoader(_settings_config(ctx), base_dir=Path.cwd()).load_settings()
    except MavenSettingsError as e:
        _fail(e)
        return

    if not settings:
        click.echo("No servers configured")
        return

    first = settings.first_by_id()
    for server in settings:
        if first[server.id] is not server:
            status = "shadowed by earlier entry"
        elif server.has_credentials:
            status = "username and password"
        else:
            status = "incomplete credentials"
        click.echo(f"{server.id}: {status}")


@cli.command()
@click.argument("build_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--show-values", is_flag=True, help="Show full passwords (default: masked)")
@click.pass_context
def apply(ctx: click.Context, build_file: Path, show_values: bool) -> None:
    """Apply settings credentials to the repositories declared in BUILD_FILE."""
    try:
        description = BuildDescription.from_yaml(build_file)
        project = build_project(description, build_file.resolve().parent)

        extension = MavenSettingsPlugin().apply(project)
        if ctx.obj["global_settings"] is not None:
            extension.global_settings_file = ctx.obj["global_settings"]
        if ctx.obj["user_settings"] is not None:
            extension.user_settings_file = ctx.obj["user_settings"]
        elif description.maven_settings.user_settings_file is not None:
            extension.user_settings_file = Path(description.maven_settings.user_settings_file)

        project.evaluate()
    except MavenSettingsError as e:
        _fail(e)
        return

    _echo_repositories("Repositories:", project.repositories, show_values)
    if project.publishing is not None:
        _echo_repositories("Publishing repositories:", project.publishing.repositories, show_values)


if __name__ == "__main__":
    cli()

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click
from loguru import logger

from tws.workspace.backend.base import BackendError, NoServerError, ToolMissingError
from tws.workspace.context import WorkspaceApp
from tws.workspace.diff import diff_workspace
from tws.workspace.models.workspace import WorkspaceConfig
from tws.workspace.parser import ConfigNotFoundError, ConfigUnreadableError, MalformedLineError, parse
from tws.workspace.render import render_diff, render_live
from tws.workspace.snapshot import write_snapshot

EXIT_ERROR = 1
EXIT_TOOL_MISSING = 127


def _fail(message: str, code: int = EXIT_ERROR) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    raise click.exceptions.Exit(code)


@click.group(invoke_without_command=True)
@click.option("-L", "--socket", "socket_name", default=None, help="tmux socket name (isolated server).")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Workspace file (default: from TWS_CONFIG_PATH or ~/.config/tmux/workspace.yaml).",
)
@click.option("--strict", is_flag=True, default=False, help="Fail on malformed lines instead of skipping them.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging on stderr.")
@click.pass_context
def main(ctx: click.Context, socket_name: str | None, config_path: Path | None, strict: bool, verbose: bool) -> None:
    """tws - Manage a tmux workspace from a simple YAML file.

    Without a command: attach if a server is running, otherwise create the
    sessions and windows from the workspace file and attach.
    """
    overrides: dict[str, object] = {}
    if socket_name is not None:
        overrides["socket_name"] = socket_name
    if config_path is not None:
        overrides["config_path"] = config_path.expanduser()
    if strict:
        overrides["strict"] = True

    if isinstance(ctx.obj, WorkspaceApp):
        app = ctx.obj
        app.settings = app.settings.model_copy(update=overrides)
    else:
        from tws.workspace.backend.tmux import TmuxBackend
        from tws.workspace.log import setup_logging
        from tws.workspace.settings import get_settings

        settings = get_settings().model_copy(update=overrides)
        setup_logging("DEBUG" if verbose else settings.log_level)

        backend = TmuxBackend(settings.socket_name, tmux_bin=settings.tmux_bin)
        try:
            backend.ensure_available()
        except ToolMissingError as exc:
            _fail(str(exc), EXIT_TOOL_MISSING)
        app = WorkspaceApp(settings, backend)

    ctx.obj = app
    if ctx.invoked_subcommand is None:
        ctx.invoke(up)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config(app: WorkspaceApp) -> WorkspaceConfig:
    try:
        return app.load_config()
    except (ConfigNotFoundError, ConfigUnreadableError, MalformedLineError) as exc:
        _fail(str(exc))


def _create_and_attach(app: WorkspaceApp, config: WorkspaceConfig) -> None:
    try:
        result = app.create(config)
    except BackendError as exc:
        _fail(str(exc))
    for failed in result.failed_items:
        click.echo(f"Warning: could not create {failed.group}:{failed.name}: {failed.error}", err=True)

    first = app.read_live_or_empty().first_group
    if app.backend.attach(first.name if first else None) != 0:
        raise click.exceptions.Exit(EXIT_ERROR)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@main.command()
@click.pass_obj
def up(app: WorkspaceApp) -> None:
    """Attach to the running server, or create the workspace and attach."""
    if app.backend.server_reachable():
        if app.backend.attach() != 0:
            raise click.exceptions.Exit(EXIT_ERROR)
        return
    config = _load_config(app)
    _create_and_attach(app, config)


@main.command()
@click.pass_obj
def restart(app: WorkspaceApp) -> None:
    """Kill the server, recreate the workspace from the file and attach."""
    try:
        app.backend.kill_server()
    except BackendError as exc:
        logger.debug("kill-server before restart: {}", exc)
    config = _load_config(app)
    _create_and_attach(app, config)


@main.command()
@click.argument("groups", nargs=-1)
@click.pass_obj
def kill(app: WorkspaceApp, groups: tuple[str, ...]) -> None:
    """Kill the given sessions, or the whole server when none are given."""
    try:
        if groups:
            for name in groups:
                app.backend.kill_group(name)
        else:
            app.backend.kill_server()
    except NoServerError:
        click.echo("No tmux server running.")
    except BackendError as exc:
        _fail(str(exc))


@main.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def snapshot(app: WorkspaceApp, path: Path | None) -> None:
    """Write the current tmux layout to the workspace file (or PATH).

    An existing file is first copied to workspace.backup.yaml next to it.
    """
    target = path.expanduser() if path is not None else app.config_path
    try:
        live = app.read_live()
    except NoServerError:
        _fail("no tmux server running to snapshot")

    try:
        backup = write_snapshot(live, target, home=app.home)
    except OSError as exc:
        _fail(f"cannot write {target}: {exc}")
    if backup is not None:
        click.echo(f"Backed up previous file to {backup}")
    click.echo(f"Snapshot written to {target}")


@main.command(name="ls")
@click.pass_obj
def list_current(app: WorkspaceApp) -> None:
    """List current sessions and windows with their directories."""
    try:
        live = app.read_live()
    except NoServerError:
        click.echo("No tmux server running.")
        return
    click.echo(render_live(live, home=app.home), nl=False)


@main.command()
@click.pass_obj
def diff(app: WorkspaceApp) -> None:
    """Show the difference between the workspace file and the server.

    Red: only in the file.  Green: only on the server.  Yellow: directory
    changed.  A window whose order changed shows as a red/green pair.
    """
    config = _load_config(app)
    live = app.read_live_or_empty()
    report = diff_workspace(config, live, home=app.home)
    click.echo(render_diff(report), nl=False)


@main.command()
@click.pass_obj
def edit(app: WorkspaceApp) -> None:
    """Open the workspace file in $EDITOR and check it afterwards."""
    path = app.config_path
    path.parent.mkdir(parents=True, exist_ok=True)
    click.edit(filename=str(path))

    if not path.is_file():
        return
    try:
        parse(path.read_text(encoding="utf-8"), strict=True)
    except MalformedLineError as exc:
        click.echo(f"Warning: {exc}", err=True)


main.add_command(up, name="attach")
main.add_command(kill, name="x")
main.add_command(kill, name="exit")
main.add_command(snapshot, name="snap")

"""Request commands -- query the active director.

``directorctl info`` prints the unauthenticated discovery document and
``directorctl get PATH`` performs an authenticated GET, negotiating basic
or UAA auth as the director requires.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import typer

from directorctl.output import debug, error, format_response, suggest

if TYPE_CHECKING:
    from directorctl.models import Profile


def _active_profile(ctx: typer.Context) -> Profile:
    """Resolve the profile selected by flags, environment or config, or exit 2."""
    from directorctl.config import resolve_config
    from directorctl.exceptions import DirectorError, InvalidUsageError

    obj = ctx.obj or {}
    try:
        _, profile = resolve_config(cli_profile=obj.get("profile"), cli_url=obj.get("url"))
    except DirectorError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if profile is None:
        exc = InvalidUsageError("No director profile selected.")
        error(str(exc))
        suggest("Create one: directorctl profile add NAME --url HOST --default")
        raise typer.Exit(code=exc.exit_code)
    debug(f"Using profile: {profile.name} ({profile.url})")
    return profile


def info_command(ctx: typer.Context) -> None:
    """Show the director's /info document (no credentials needed).

    Example::

        directorctl info
        directorctl --profile lab --json info
    """
    from directorctl.config import client_from_profile
    from directorctl.exceptions import DirectorError

    profile = _active_profile(ctx)
    try:
        with client_from_profile(profile) as director:
            document = director.info()
    except DirectorError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(document.model_dump(mode="json"))


def get_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Request path, e.g. /deployments."),
) -> None:
    """Authenticated GET of PATH on the director; prints the JSON body.

    Example::

        directorctl get /deployments
        directorctl get /deployments/cf/vms --json
    """
    from directorctl.config import client_from_profile
    from directorctl.exceptions import DirectorError

    if not path.startswith("/"):
        path = "/" + path

    profile = _active_profile(ctx)
    try:
        with client_from_profile(profile) as director:
            data = director.get(path, Any)
    except DirectorError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(data)

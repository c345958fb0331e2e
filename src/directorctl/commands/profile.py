"""Profile commands -- manage director connection profiles.

Provides the ``directorctl profile`` sub-command group. A profile records
where a director lives and where its credentials come from; the secrets
themselves stay in environment variables, files or interactive prompts.

Typical workflow::

    directorctl profile add lab --url 10.0.0.6 --username admin \\
        --password-source env:BOSH_CLIENT_SECRET --default
    directorctl profile list
    directorctl get /deployments
"""

from __future__ import annotations

from typing import Optional

import typer

from directorctl.output import error, format_response, info, print_table, success, suggest


profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    url: str = typer.Option(..., "--url", help="Director address (host, host:port or URL)."),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Director username."),
    password_source: Optional[str] = typer.Option(
        None, "--password-source", help="Password source: env:VAR, file:/path or prompt."
    ),
    refresh_token_source: Optional[str] = typer.Option(
        None, "--refresh-token-source", help="UAA refresh token source."
    ),
    access_token_source: Optional[str] = typer.Option(
        None, "--access-token-source", help="Pre-issued access token source."
    ),
    skip_ssl_validation: bool = typer.Option(
        False, "--skip-ssl-validation", help="Do not verify TLS certificates."
    ),
    timeout: Optional[float] = typer.Option(
        30.0, "--timeout", help="Request timeout in seconds."
    ),
    make_default: bool = typer.Option(
        False, "--default", help="Make this the default profile."
    ),
) -> None:
    """Create or overwrite a director profile.

    Example::

        directorctl profile add lab --url 10.0.0.6 -u admin --password-source prompt
    """
    from directorctl.config import (
        load_global_config,
        profile_exists,
        save_global_config,
        save_profile,
    )
    from directorctl.models import Profile, RequestConfig

    if profile_exists(name):
        info(f'Profile "{name}" already exists and will be overwritten.')

    profile = Profile(
        name=name,
        url=url,
        username=username,
        password_source=password_source,
        refresh_token_source=refresh_token_source,
        access_token_source=access_token_source,
        skip_ssl_validation=skip_ssl_validation,
        request=RequestConfig(timeout=timeout),
    )
    save_profile(profile)

    if make_default:
        config = load_global_config()
        config.default_profile = name
        save_global_config(config)

    success(f'Profile "{name}" saved.')
    if not (username or password_source or refresh_token_source or access_token_source):
        suggest("No credentials configured; only 'directorctl info' will work.")
    suggest(f"Check it: directorctl --profile {name} info")


@profile_app.command("list")
def profile_list() -> None:
    """List configured profiles, marking the default one."""
    from directorctl.config import list_profiles, load_global_config, load_profile

    names = list_profiles()
    if not names:
        info("No profiles configured.")
        suggest("Create one: directorctl profile add NAME --url HOST")
        return

    default = load_global_config().default_profile
    rows = []
    for name in names:
        profile = load_profile(name)
        rows.append([
            name,
            profile.url,
            profile.username or "",
            "*" if name == default else "",
        ])
    print_table(["name", "url", "username", "default"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show a profile's settings (credential sources, never the secrets)."""
    from directorctl.config import load_profile
    from directorctl.exceptions import ConfigError

    try:
        profile = load_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(profile.model_dump(mode="json"))


@profile_app.command("remove")
def profile_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Delete a profile. Asks for confirmation unless ``--force`` is given."""
    from directorctl.config import delete_profile, load_global_config, save_global_config
    from directorctl.exceptions import ConfigError

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm(f'Remove profile "{name}"?'):
        info("Cancelled.")
        raise typer.Exit()

    try:
        delete_profile(name)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    config = load_global_config()
    if config.default_profile == name:
        config.default_profile = None
        save_global_config(config)
    success(f'Profile "{name}" removed.')


@profile_app.command("use")
def profile_use(name: str = typer.Argument(help="Profile name.")) -> None:
    """Make NAME the default profile."""
    from directorctl.config import load_global_config, profile_exists, save_global_config
    from directorctl.exceptions import InvalidUsageError

    if not profile_exists(name):
        exc = InvalidUsageError(f"Profile '{name}' does not exist.")
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    config = load_global_config()
    config.default_profile = name
    save_global_config(config)
    success(f'Default profile set to "{name}".')

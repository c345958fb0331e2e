"""Built-in CLI sub-commands for directorctl.

Each module defines a Typer sub-app or standalone command function that is
registered on the root application in :mod:`directorctl.app`.

Modules:
    profile: Create, inspect, select and remove director profiles.
    request: Query a director (``info`` and ``get``).
"""

"""paperforge CLI — Typer-based command-line interface.

Provides the ``paperforge`` command with the ``build`` and ``version``
subcommands. Status output uses Rich on stderr.
"""

"""Built-in CLI sub-commands for pcli.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~pcli.commands.browse` -- ``ls``, ``show``, and ``info`` over the
  active collection.
* :mod:`~pcli.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``config``) or plain callback functions
registered directly on the root app (for single commands like ``ls``).
"""

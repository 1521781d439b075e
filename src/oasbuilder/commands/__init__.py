"""Built-in CLI sub-commands for oasbuilder.

This package groups the Typer command modules that form the CLI's command
tree:

* :mod:`~oasbuilder.commands.document` -- create, import, export and show
  the workspace document.
* :mod:`~oasbuilder.commands.validate` -- validate the workspace document
  or any OpenAPI file.
* :mod:`~oasbuilder.commands.paths` -- add, rename and remove paths and
  their operations.
* :mod:`~oasbuilder.commands.schemas` -- manage component schemas and the
  template library.
* :mod:`~oasbuilder.commands.config` -- view and modify global settings.
* :mod:`~oasbuilder.commands.workspace` -- helpers shared by the commands
  above for loading and saving the workspace document.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``path`` and ``schema``) or plain callback
functions registered directly on the root app (for single commands like
``new``).
"""

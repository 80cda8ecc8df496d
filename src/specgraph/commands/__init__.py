"""Built-in CLI sub-commands for specgraph.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~specgraph.commands.preprocess` -- run the preprocessing pass and
  print the resulting operations or the full model.
* :mod:`~specgraph.commands.inspect` -- examine the deduplicated data
  definitions and normalized security schemes of a spec.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect``) or a plain callback function
registered directly on the root app (for single commands like
``preprocess``).
"""

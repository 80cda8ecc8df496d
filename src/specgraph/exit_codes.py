"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specgraph.exceptions.SpecgraphError` subclass.
CI scripts can inspect the exit code to tell a broken spec apart from an
unsupported one without parsing stderr.

Example::

    $ specgraph preprocess openapi.yaml --strict
    $ echo $?
    8   # EXIT_UNSUPPORTED_FEATURE -- the spec uses an unsupported auth scheme
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments, or an internal contract was violated."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI specification could not be loaded, parsed, or resolved."""

EXIT_UNSUPPORTED_FEATURE = 8
"""Strict mode rejected a feature of the spec that cannot be translated."""

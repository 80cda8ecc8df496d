"""specgraph -- Preprocess OpenAPI 3.x specs for GraphQL type generation.

This package walks an OpenAPI description and produces a
:class:`~specgraph.models.PreprocessedModel`: every operation with its
request and response payloads mapped onto shared, collision-free named
data definitions, normalized security schemes, and derived sub-operation
links. A separate generation stage turns that model into GraphQL types.

Typical workflow::

    from specgraph.parser import load_spec, validate_openapi_version
    from specgraph.preprocessor import preprocess_oas

    raw = load_spec("openapi.yaml")
    validate_openapi_version(raw)
    model = preprocess_oas(raw)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and option precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

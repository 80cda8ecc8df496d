"""Preprocess command -- run the preprocessing pass over a spec.

Loads the spec, resolves the effective options via
:func:`~specgraph.config.resolve_options`, runs
:func:`~specgraph.preprocessor.preprocess_oas`, and prints one row per
operation. With the global ``--json`` flag the whole model summary from
:meth:`~specgraph.models.PreprocessedModel.to_dict` is printed instead.
"""

from __future__ import annotations

from typing import Optional

import typer

from specgraph.exceptions import SpecgraphError
from specgraph.models import PreprocessedModel
from specgraph.output import OutputFormat, error, get_output, success


def build_model(
    spec: str,
    strict: Optional[bool] = None,
    viewer: Optional[bool] = None,
    add_sub_operations: Optional[bool] = None,
) -> PreprocessedModel:
    """Load *spec* and preprocess it with the resolved options.

    Args:
        spec: URL, file path, or ``-`` for stdin.
        strict: CLI override for the ``strict`` option.
        viewer: CLI override for the ``viewer`` option.
        add_sub_operations: CLI override for ``add_sub_operations``.

    Returns:
        The preprocessed model.

    Raises:
        typer.Exit: With the error's exit code when loading, configuration,
            or preprocessing fails.
    """
    from specgraph.config import resolve_options
    from specgraph.parser import load_spec, validate_openapi_version
    from specgraph.preprocessor import preprocess_oas

    try:
        options = resolve_options(
            cli_strict=strict,
            cli_viewer=viewer,
            cli_add_sub_operations=add_sub_operations,
        )
        raw = load_spec(spec)
        validate_openapi_version(raw)
        return preprocess_oas(raw, options)
    except SpecgraphError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def preprocess_command(
    spec: str = typer.Argument(..., help="OpenAPI spec: file path, URL, or '-' for stdin."),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Fail on untranslatable security schemes."
    ),
    viewer: Optional[bool] = typer.Option(
        None, "--viewer/--no-viewer", help="Collect per-operation security protocols."
    ),
    sub_operations: Optional[bool] = typer.Option(
        None,
        "--sub-operations/--no-sub-operations",
        help="Link GET operations to GET operations on nested paths.",
    ),
) -> None:
    """Preprocess an OpenAPI spec and list its operations.

    Example::

        specgraph preprocess openapi.yaml --sub-operations
        specgraph --json preprocess openapi.yaml > model.json
    """
    model = build_model(spec, strict, viewer, sub_operations)
    output = get_output()

    if output.format == OutputFormat.JSON:
        output.print_json(model.to_dict())
        return

    headers = ["Operation", "Method", "Path", "Request", "Response", "Sub-operations"]
    rows: list[list[str]] = []
    for op in model.operations.values():
        rows.append([
            op.operation_id,
            op.method.value.upper(),
            op.path,
            op.request_definition.object_type_name if op.request_definition else "-",
            op.response_definition.object_type_name,
            ", ".join(op.sub_operations) if op.sub_operations else "-",
        ])
    output.print_table(headers, rows, title=f"Operations ({len(rows)})")
    success(
        f"{len(model.operations)} operations, "
        f"{len(model.definitions)} data definitions, "
        f"{len(model.security)} security schemes"
    )

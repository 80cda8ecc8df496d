"""Inspect commands -- examine what preprocessing makes of a spec.

Provides the ``specgraph inspect`` sub-command group with read-only
commands for viewing the deduplicated data definitions (the future GraphQL
types) and the normalized security schemes of a spec.
"""

from __future__ import annotations

from typing import Optional

import typer

from specgraph.commands.preprocess import build_model
from specgraph.output import get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


@inspect_app.command("definitions")
def inspect_definitions(
    spec: str = typer.Argument(..., help="OpenAPI spec: file path, URL, or '-' for stdin."),
) -> None:
    """List the data definitions shared by the spec's operations.

    Shows each generated type name, its input type name, the original
    string the name was derived from, and how many operations use it.

    Example::

        specgraph inspect definitions openapi.yaml
    """
    model = build_model(spec)

    usage: dict[str, int] = {}
    for op in model.operations.values():
        for definition in (op.request_definition, op.response_definition):
            if definition is not None:
                name = definition.object_type_name
                usage[name] = usage.get(name, 0) + 1

    headers = ["Type", "Input Type", "Derived From", "Used By"]
    rows = [
        [
            d.object_type_name,
            d.input_type_name,
            model.names.sane_map.get(d.object_type_name, "-"),
            str(usage.get(d.object_type_name, 0)),
        ]
        for d in model.definitions
    ]
    get_output().print_table(headers, rows, title=f"Data Definitions ({len(rows)})")


@inspect_app.command("security")
def inspect_security(
    spec: str = typer.Argument(..., help="OpenAPI spec: file path, URL, or '-' for stdin."),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Fail on untranslatable security schemes."
    ),
) -> None:
    """Show the security schemes available to generated viewers.

    OAuth 2.0 schemes never appear; unsupported schemes are skipped unless
    ``--strict`` is given.

    Example::

        specgraph inspect security openapi.yaml --strict
    """
    model = build_model(spec, strict=strict)

    if not model.security:
        info("No translatable security schemes.")
        return

    headers = ["Name", "Scheme", "Kind", "Parameters"]
    rows = [
        [
            name,
            scheme.raw_name,
            scheme.kind.value,
            ", ".join(f"{slot}={param}" for slot, param in scheme.parameters.items()),
        ]
        for name, scheme in model.security.items()
    ]
    get_output().print_table(headers, rows, title="Security Schemes")

"""Canonical Pydantic models shared across all specgraph modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- options steering the preprocessing pass and the
user-wide configuration file:
    :class:`PreprocessOptions`, :class:`OutputConfig`, :class:`GlobalConfig`.

**Extraction models** -- produced by :mod:`specgraph.parser.extractor` for a
single operation:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`EndpointLink`, :class:`NameHints`, :class:`SchemaAndNames`.

**Preprocessing output models** -- the intermediate model consumed by the
GraphQL generation stage:
    :class:`DataDefinition`, :class:`NameRegistry`, :class:`Operation`,
    :class:`SecuritySchemeKind`, :class:`NormalizedSecurityScheme`, and the
    aggregate root :class:`PreprocessedModel`.

All models use Pydantic v2. Fields holding raw JSON-schema dicts are named
``schema_`` with a ``schema`` alias so they do not shadow ``BaseModel``
attributes.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, SkipValidation
from pydantic.alias_generators import to_camel

from specgraph.parser.sanitize import beautify_and_store


# --- Configuration ---


class PreprocessOptions(BaseModel):
    """Options controlling the preprocessing pass.

    Only ``add_sub_operations``, ``viewer``, and ``strict`` are interpreted by
    the preprocessor. Any other key is accepted, preserved in
    ``model_extra``, and echoed on the resulting
    :class:`PreprocessedModel` for the generation stage.

    Keys may be given in snake_case or camelCase (``addSubOperations``), so
    option blocks written for JavaScript tooling load unchanged.
    """

    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    add_sub_operations: bool = Field(
        default=False,
        description="Link GET operations to GET operations on nested paths",
    )
    viewer: bool = Field(
        default=True,
        description="Collect per-operation security protocols for viewer generation",
    )
    strict: bool = Field(
        default=False,
        description="Fail instead of skipping features that cannot be translated",
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specgraph/config.json``.

    Loaded by :func:`~specgraph.config.load_global_config`. Fields here have
    the lowest precedence and can be overridden by project config,
    environment variables, or CLI flags. See
    :func:`~specgraph.config.resolve_options` for the full precedence chain.
    """

    options: PreprocessOptions = Field(default_factory=PreprocessOptions)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Extraction ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    PUT = "put"
    POST = "post"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """A single parameter of an operation, with ``$ref`` already resolved.

    Each parameter becomes an argument on the generated GraphQL field.
    """

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    deprecated: bool = False
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class EndpointLink(BaseModel):
    """An OpenAPI *Link Object* declared on an operation's success response."""

    name: str
    operation_id: Optional[str] = None
    operation_ref: Optional[str] = None
    description: Optional[str] = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    request_body: Any = None


class NameHints(BaseModel):
    """Candidate base names for a generated type, in priority order.

    ``from_ref`` is the last segment of a schema ``$ref``, ``from_schema``
    the schema's ``title``, ``from_path`` a name inferred from the URL path.
    """

    from_ref: Optional[str] = None
    from_schema: Optional[str] = None
    from_path: Optional[str] = None

    def candidates(self) -> list[str]:
        """Return the hints that are present, highest priority first."""
        return [
            hint
            for hint in (self.from_ref, self.from_schema, self.from_path)
            if isinstance(hint, str)
        ]


class SchemaAndNames(BaseModel):
    """A request or response payload schema together with its name hints.

    ``schema_`` is ``None`` when the operation has no such payload.
    ``required`` is only meaningful for request bodies.
    """

    schema_: Any = Field(default=None, alias="schema")
    names: NameHints = Field(default_factory=NameHints)
    required: bool = False

    model_config = ConfigDict(populate_by_name=True)


# --- Preprocessing output ---


class DataDefinition(BaseModel):
    """A named wrapper around one payload schema.

    Every request or response body whose schema is structurally equal to
    ``schema_`` shares this one instance. The generation stage builds a
    GraphQL object type named ``object_type_name`` and an input object type
    named ``input_type_name`` from it, and may attach the generated types as
    extra attributes (``definition.ot = ...``). The preprocessor itself never
    modifies a definition once created.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    schema_: SkipValidation[dict[str, Any]] = Field(alias="schema")
    object_type_name: str
    input_type_name: str


class NameRegistry(BaseModel):
    """Generated type names handed out during one preprocessing run.

    ``used_names`` prevents collisions between generated types;
    ``sane_map`` relates each sanitized name back to the spec string it was
    derived from. Both only ever grow.
    """

    used_names: set[str] = Field(default_factory=set)
    sane_map: dict[str, str] = Field(default_factory=dict)

    def is_used(self, name: str) -> bool:
        """Return ``True`` if the sanitized *name* has already been assigned."""
        return name in self.used_names

    def register(self, raw_name: str) -> str:
        """Sanitize *raw_name*, record it, and mark the result as used.

        Returns:
            The sanitized name.
        """
        name = beautify_and_store(raw_name, self.sane_map)
        self.used_names.add(name)
        return name


class Operation(BaseModel):
    """One path + HTTP method pair of the spec, ready for type generation.

    ``request_definition`` is ``None`` when the operation takes no JSON
    request body. Operations without a usable response schema never become
    an ``Operation``. ``sub_operations`` holds identifiers of nested GET
    operations and stays ``None`` unless the ``add_sub_operations`` option is
    enabled.
    """

    operation_id: str
    description: Optional[str] = None
    path: str
    method: HTTPMethod
    request_definition: Optional[DataDefinition] = None
    request_required: bool = False
    response_definition: DataDefinition
    parameters: list[Parameter] = Field(default_factory=list)
    links: list[EndpointLink] = Field(default_factory=list)
    security_protocols: list[str] = Field(default_factory=list)
    sub_operations: Optional[list[str]] = None


class SecuritySchemeKind(str, enum.Enum):
    """Closed set of security scheme kinds the preprocessor distinguishes."""

    OAUTH2 = "oauth2"
    API_KEY = "api_key"
    BASIC_AUTH = "basic_auth"
    UNSUPPORTED = "unsupported"


class NormalizedSecurityScheme(BaseModel):
    """A translatable security scheme with its credential parameters.

    ``parameters`` maps each credential slot (``apiKey``, or ``username`` and
    ``password``) to the sanitized argument name used by the generated
    viewer; ``schema_`` describes the credential object. ``definition`` is
    the scheme object from the source document itself, not a copy.

    Example::

        NormalizedSecurityScheme(
            raw_name="My_api_key",
            definition={"type": "apiKey", "in": "header", "name": "X-Key"},
            kind=SecuritySchemeKind.API_KEY,
            parameters={"apiKey": "MyApiKeyApiKey"},
            schema={"type": "object", "properties": {"apiKey": {"type": "string"}}},
        )
    """

    raw_name: str
    definition: SkipValidation[dict[str, Any]]
    kind: SecuritySchemeKind
    parameters: dict[str, str] = Field(default_factory=dict)
    schema_: dict[str, Any] = Field(alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class PreprocessedModel(BaseModel):
    """Aggregate result of one preprocessing run.

    Produced by :func:`~specgraph.preprocessor.preprocess_oas` and handed to
    the generation stage. ``operations`` is keyed by operation identifier in
    document order; ``definitions`` is the append-only master list every
    :class:`Operation` points into.

    See Also:
        :class:`Operation`: Individual operation within the model.
        :class:`DataDefinition`: Shared payload definitions.
    """

    operations: dict[str, Operation] = Field(default_factory=dict)
    definitions: list[DataDefinition] = Field(default_factory=list)
    names: NameRegistry = Field(default_factory=NameRegistry)
    security: dict[str, NormalizedSecurityScheme] = Field(default_factory=dict)
    options: PreprocessOptions = Field(default_factory=PreprocessOptions)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable summary of the model.

        Definitions are listed once; operations refer to them by object
        type name instead of repeating their schemas.
        """
        return {
            "definitions": [
                {
                    "objectTypeName": d.object_type_name,
                    "inputTypeName": d.input_type_name,
                    "schema": d.schema_,
                }
                for d in self.definitions
            ],
            "operations": {
                op_id: {
                    "path": op.path,
                    "method": op.method.value,
                    "description": op.description,
                    "request": (
                        op.request_definition.object_type_name
                        if op.request_definition is not None
                        else None
                    ),
                    "requestRequired": op.request_required,
                    "response": op.response_definition.object_type_name,
                    "parameters": [
                        p.model_dump(mode="json", by_alias=True) for p in op.parameters
                    ],
                    "links": [link.model_dump(mode="json") for link in op.links],
                    "securityProtocols": op.security_protocols,
                    "subOperations": op.sub_operations,
                }
                for op_id, op in self.operations.items()
            },
            "security": {
                key: {
                    "rawName": scheme.raw_name,
                    "kind": scheme.kind.value,
                    "parameters": scheme.parameters,
                }
                for key, scheme in self.security.items()
            },
            "saneMap": dict(self.names.sane_map),
            "options": self.options.model_dump(mode="json", by_alias=True),
        }

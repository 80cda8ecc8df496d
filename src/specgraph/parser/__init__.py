"""OpenAPI spec access -- load documents, resolve ``$ref`` pointers, extract operation data.

This sub-package holds everything the preprocessor needs to *read* a spec.
It never builds the intermediate model itself.

Typical usage::

    from specgraph.parser import load_spec, validate_openapi_version

    raw = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    version = validate_openapi_version(raw)

Sub-modules:

* :mod:`~specgraph.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~specgraph.parser.resolver` -- On-demand internal ``$ref`` resolution.
* :mod:`~specgraph.parser.sanitize` -- Identifier sanitization
  (:func:`~specgraph.parser.sanitize.beautify`).
* :mod:`~specgraph.parser.extractor` -- Per-operation payload schemas, name
  hints, parameters, links, and security protocols.
"""

from specgraph.parser.loader import load_spec, validate_openapi_version

__all__ = ["load_spec", "validate_openapi_version"]

"""Tests for specgraph.preprocessor.orchestrator."""

from __future__ import annotations

import copy
import logging
from typing import Any

import pytest

from specgraph.exceptions import UnsupportedSecuritySchemeError
from specgraph.models import HTTPMethod, PreprocessOptions, SecuritySchemeKind
from specgraph.preprocessor import preprocess_oas


# ---------------------------------------------------------------------------
# Petstore
# ---------------------------------------------------------------------------


class TestPreprocessPetstore:
    """Run the full pass over the petstore fixture."""

    def test_operations_in_document_order(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw)
        assert list(model.operations) == [
            "listPets",
            "createPet",
            "showPetById",
            "getPetsPetIdOwner",
            "listToys",
            "replaceToys",
        ]

    def test_operation_without_response_schema_dropped(
        self, petstore_raw: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            model = preprocess_oas(petstore_raw)
        assert "deletePet" not in model.operations
        assert '"DELETE /pets/{petId}" has no valid response schema' in caplog.text

    def test_definitions_deduplicated(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw)
        assert [d.object_type_name for d in model.definitions] == [
            "Pets",
            "NewPet",
            "Owner",
            "PetsToys",
        ]

        create = model.operations["createPet"]
        show = model.operations["showPetById"]
        assert create.request_definition is create.response_definition
        assert show.response_definition is create.request_definition

        replace = model.operations["replaceToys"]
        assert replace.request_required is True
        assert replace.request_definition is model.operations["listToys"].response_definition
        assert replace.response_definition is replace.request_definition

    def test_every_definition_is_listed(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw)
        for op in model.operations.values():
            for definition in (op.request_definition, op.response_definition):
                if definition is not None:
                    assert any(definition is d for d in model.definitions)

    def test_names_recorded(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw)
        assert model.names.used_names == {"Pets", "NewPet", "Owner", "PetsToys"}
        assert model.names.sane_map == {
            "Pets": "Pets",
            "NewPet": "NewPet",
            "Owner": "Owner",
            "PetsToys": "PetsToys",
        }

    def test_operation_fields(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw)

        list_pets = model.operations["listPets"]
        assert list_pets.method == HTTPMethod.GET
        assert list_pets.path == "/pets"
        assert list_pets.description == "List all pets"
        assert list_pets.request_definition is None
        assert list_pets.request_required is False
        assert [p.name for p in list_pets.parameters] == ["X-Request-Id", "limit"]
        assert list_pets.sub_operations is None

        show = model.operations["showPetById"]
        assert show.description == "Info for a specific pet"
        assert show.parameters[0].required is True

        create = model.operations["createPet"]
        assert create.description == "Create a pet"
        assert create.links[0].operation_id == "showPetById"

    def test_security_protocols_with_viewer(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw)
        assert model.operations["listPets"].security_protocols == ["api_key"]
        assert model.operations["createPet"].security_protocols == ["basic_auth"]

    def test_viewer_disabled(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw, PreprocessOptions(viewer=False))
        assert all(op.security_protocols == [] for op in model.operations.values())

    def test_security_schemes(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw)
        assert list(model.security) == ["apiKey", "basicAuth"]
        assert model.security["apiKey"].kind == SecuritySchemeKind.API_KEY
        assert model.security["apiKey"].raw_name == "api_key"
        assert model.security["basicAuth"].parameters == {
            "username": "basicAuthUsername",
            "password": "basicAuthPassword",
        }

    def test_strict_mode_rejects_bearer(self, petstore_raw: dict[str, Any]) -> None:
        with pytest.raises(UnsupportedSecuritySchemeError) as exc_info:
            preprocess_oas(petstore_raw, PreprocessOptions(strict=True))
        assert exc_info.value.scheme_name == "bearer"

    def test_sub_operations(self, petstore_raw: dict[str, Any]) -> None:
        model = preprocess_oas(petstore_raw, PreprocessOptions(add_sub_operations=True))
        assert model.operations["showPetById"].sub_operations == [
            "getPetsPetIdOwner",
            "listToys",
        ]
        assert model.operations["listPets"].sub_operations == []
        assert model.operations["createPet"].sub_operations == []
        assert model.operations["listToys"].sub_operations == []

    def test_input_not_mutated(self, petstore_raw: dict[str, Any]) -> None:
        original = copy.deepcopy(petstore_raw)
        preprocess_oas(petstore_raw, PreprocessOptions(add_sub_operations=True))
        assert petstore_raw == original

    def test_options_echoed(self, petstore_raw: dict[str, Any]) -> None:
        options = PreprocessOptions.model_validate({"addSubOperations": True, "tokenJSONpath": "$.jwt"})
        model = preprocess_oas(petstore_raw, options)
        assert model.options.add_sub_operations is True
        assert model.options.model_extra == {"tokenJSONpath": "$.jwt"}

    def test_runs_are_independent(self, petstore_raw: dict[str, Any]) -> None:
        first = preprocess_oas(petstore_raw)
        second = preprocess_oas(petstore_raw)
        assert [d.object_type_name for d in second.definitions] == [
            d.object_type_name for d in first.definitions
        ]
        assert second.definitions[0] is not first.definitions[0]


# ---------------------------------------------------------------------------
# Generated identifiers and shared schemas
# ---------------------------------------------------------------------------


class TestPreprocessWidgets:
    """Two operations without operationIds returning the same schema."""

    def test_generated_ids_and_shared_definition(self, widgets_raw: dict[str, Any]) -> None:
        model = preprocess_oas(widgets_raw)
        assert list(model.operations) == ["getWidgets", "getWidgetsId"]
        assert len(model.definitions) == 1
        assert model.definitions[0].object_type_name == "Widgets"
        assert model.definitions[0].input_type_name == "WidgetsInput"
        assert (
            model.operations["getWidgets"].response_definition
            is model.operations["getWidgetsId"].response_definition
        )

    def test_operation_ids_not_written_back(self, widgets_raw: dict[str, Any]) -> None:
        preprocess_oas(widgets_raw)
        assert "operationId" not in widgets_raw["paths"]["/widgets"]["get"]

    def test_sub_operations_need_path_parameter(self, widgets_raw: dict[str, Any]) -> None:
        model = preprocess_oas(widgets_raw, PreprocessOptions(add_sub_operations=True))
        assert model.operations["getWidgets"].sub_operations == []
        assert model.operations["getWidgetsId"].sub_operations == []

    def test_no_security(self, widgets_raw: dict[str, Any]) -> None:
        model = preprocess_oas(widgets_raw)
        assert model.security == {}
        assert model.operations["getWidgets"].security_protocols == []


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------


def _spec(paths: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {"openapi": "3.0.3", "info": {"title": "T", "version": "1"}, "paths": paths, **extra}


def _json(schema: Any) -> dict[str, Any]:
    return {"content": {"application/json": {"schema": schema}}}


class TestPreprocessEdgeCases:
    def test_empty_paths(self) -> None:
        model = preprocess_oas(_spec({}))
        assert model.operations == {}
        assert model.definitions == []

    def test_empty_yaml_blocks(self) -> None:
        spec = {"openapi": "3.0.3", "info": {"title": "T", "version": "1"}, "paths": None, "components": None}
        model = preprocess_oas(spec)
        assert model.operations == {}
        assert model.security == {}

    def test_empty_security_schemes_block(self) -> None:
        spec = _spec(
            {"/a": {"get": {"responses": {"200": _json({"type": "string"})}}}},
            components={"securitySchemes": None},
            security=[{"key": []}],
        )
        model = preprocess_oas(spec)
        assert model.operations["getA"].security_protocols == []
        assert model.security == {}

    def test_non_operation_keys_ignored(self) -> None:
        spec = _spec({
            "/a": {
                "summary": "A",
                "parameters": [],
                "get": {"responses": {"200": _json({"type": "string"})}},
            }
        })
        assert list(preprocess_oas(spec).operations) == ["getA"]

    def test_request_definition_kept_when_operation_dropped(self) -> None:
        spec = _spec({
            "/a": {"post": {"requestBody": _json({"title": "Draft", "type": "object"}),
                            "responses": {"204": {"description": "none"}}}}
        })
        model = preprocess_oas(spec)
        assert model.operations == {}
        assert [d.object_type_name for d in model.definitions] == ["Draft"]

    def test_duplicate_operation_id_replaces(self, caplog: pytest.LogCaptureFixture) -> None:
        spec = _spec({
            "/a": {"get": {"operationId": "dup", "responses": {"200": _json({"type": "string"})}}},
            "/b": {"get": {"operationId": "dup", "responses": {"200": _json({"type": "integer"})}}},
        })
        with caplog.at_level(logging.WARNING):
            model = preprocess_oas(spec)
        assert model.operations["dup"].path == "/b"
        assert "already in use" in caplog.text

    def test_non_object_request_schema_ignored(self) -> None:
        spec = _spec({
            "/a": {"post": {"requestBody": _json(True), "responses": {"200": _json({"type": "string"})}}}
        })
        model = preprocess_oas(spec)
        assert model.operations["postA"].request_definition is None

    def test_name_collision_suffix_across_operations(self) -> None:
        spec = _spec({
            "/things": {"get": {"responses": {"200": _json({"type": "string"})}}},
            "/things/{id}": {"get": {"responses": {"200": _json({"type": "integer"})}}},
        })
        model = preprocess_oas(spec)
        assert [d.object_type_name for d in model.definitions] == ["Things", "Things2"]

    def test_ref_path_item(self) -> None:
        spec = _spec(
            {"/a": {"$ref": "#/components/pathItems/A"}},
            components={"pathItems": {"A": {"get": {"responses": {"200": _json({"type": "string"})}}}}},
        )
        assert list(preprocess_oas(spec).operations) == ["getA"]

    def test_ref_security_scheme(self) -> None:
        spec = _spec(
            {},
            components={
                "securitySchemes": {"key": {"$ref": "#/components/x-shared/key"}},
                "x-shared": {"key": {"type": "apiKey", "in": "header", "name": "K"}},
            },
        )
        assert preprocess_oas(spec).security["key"].kind == SecuritySchemeKind.API_KEY


class TestToDict:
    def test_summary_shape(self, petstore_raw: dict[str, Any]) -> None:
        data = preprocess_oas(petstore_raw, PreprocessOptions(add_sub_operations=True)).to_dict()

        assert [d["objectTypeName"] for d in data["definitions"]] == [
            "Pets",
            "NewPet",
            "Owner",
            "PetsToys",
        ]
        create = data["operations"]["createPet"]
        assert create["method"] == "post"
        assert create["request"] == "NewPet"
        assert create["response"] == "NewPet"
        assert create["requestRequired"] is True
        assert data["operations"]["showPetById"]["subOperations"] == [
            "getPetsPetIdOwner",
            "listToys",
        ]
        assert data["operations"]["listPets"]["parameters"][1]["location"] == "query"
        assert data["security"]["apiKey"] == {
            "rawName": "api_key",
            "kind": "api_key",
            "parameters": {"apiKey": "apiKeyApiKey"},
        }
        assert data["options"]["addSubOperations"] is True

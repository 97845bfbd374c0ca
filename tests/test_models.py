from api_feature_gen.parser.base import Document, Operation, Parameter, PropertyDef, Response, SchemaDef, reference_name


class TestParameter:
    def test_swagger2_inline_type(self):
        p = Parameter.model_validate({"name": "id", "in": "path", "required": True, "type": "integer"})
        assert p.location == "path"
        assert p.required is True
        assert p.type == "integer"
        assert p.content_schema is None

    def test_openapi3_type_from_schema(self):
        p = Parameter.model_validate({"name": "since", "in": "query", "schema": {"type": "string", "format": "date-time"}})
        assert p.type == "string"
        assert p.format == "date-time"
        assert p.required is False

    def test_defaults(self):
        p = Parameter()
        assert p.location == "query"
        assert p.description == ""


class TestSchemaDef:
    def test_ref_alias(self):
        s = SchemaDef.model_validate({"$ref": "#/definitions/Pet"})
        assert s.reference == "#/definitions/Pet"
        assert s.properties == {}

    def test_nested_properties(self):
        s = SchemaDef.model_validate({
            "required": ["id"],
            "properties": {
                "id": {"type": "integer"},
                "tags": {"type": "array", "items": {"$ref": "#/definitions/Tag"}},
            },
        })
        assert isinstance(s.properties["tags"], PropertyDef)
        assert s.properties["tags"].items.reference == "#/definitions/Tag"
        assert s.required == ["id"]

    def test_nullable_type_list(self):
        p = PropertyDef.model_validate({"type": ["string", "null"]})
        assert p.type == "string"

    def test_null_description(self):
        p = PropertyDef.model_validate({"type": "string", "description": None})
        assert p.description == ""


class TestResponse:
    def test_swagger2_schema(self):
        r = Response.model_validate({"description": "ok", "schema": {"$ref": "#/definitions/Pet"}})
        assert r.content_schema.reference == "#/definitions/Pet"

    def test_openapi3_content_schema(self):
        r = Response.model_validate({
            "description": "ok",
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
        })
        assert r.content_schema.reference == "#/components/schemas/Pet"

    def test_no_schema(self):
        assert Response.model_validate({"description": "gone"}).content_schema is None


class TestOperation:
    def test_request_body_becomes_body_parameter(self):
        op = Operation.model_validate({
            "operationId": "addPet",
            "requestBody": {
                "required": True,
                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
            },
        })
        assert len(op.parameters) == 1
        body = op.parameters[0]
        assert body.name == "body"
        assert body.location == "body"
        assert body.required is True
        assert body.content_schema.reference == "#/components/schemas/Pet"

    def test_integer_status_codes(self):
        op = Operation.model_validate({"responses": {200: {"description": "ok"}}})
        assert "200" in op.responses

    def test_defaults(self):
        op = Operation()
        assert op.tags == []
        assert op.operation_id == ""


class TestDocument:
    def test_empty_document_defaults(self):
        doc = Document.model_validate({})
        assert doc.info.title == ""
        assert doc.tags == []
        assert doc.paths == {}
        assert doc.schemas == {}

    def test_path_item_keeps_only_verbs(self):
        doc = Document.model_validate({
            "paths": {
                "/pets": {
                    "summary": "pets",
                    "x-internal": True,
                    "get": {"operationId": "listPets"},
                },
            },
        })
        assert list(doc.paths["/pets"]) == ["get"]

    def test_shared_path_parameters(self):
        doc = Document.model_validate({
            "paths": {
                "/pets/{id}": {
                    "parameters": [{"name": "id", "in": "path", "required": True, "type": "integer"}],
                    "get": {},
                    "delete": {"parameters": [{"name": "id", "in": "path", "required": True, "type": "string"}]},
                },
            },
        })
        get_params = doc.paths["/pets/{id}"]["get"].parameters
        delete_params = doc.paths["/pets/{id}"]["delete"].parameters
        assert [p.name for p in get_params] == ["id"]
        # operation-level parameter wins
        assert len(delete_params) == 1
        assert delete_params[0].type == "string"

    def test_schemas_merged_from_both_containers(self):
        doc = Document.model_validate({
            "definitions": {"Pet": {"description": "legacy"}, "Tag": {}},
            "components": {"schemas": {"Pet": {"description": "modern"}, "User": {}}},
        })
        assert set(doc.schemas) == {"Pet", "Tag", "User"}
        assert doc.schemas["Pet"].description == "modern"

    def test_modern_schema_replaces_legacy_without_merging_fields(self):
        doc = Document.model_validate({
            "definitions": {"Pet": {"properties": {"legacy": {"type": "string"}}}},
            "components": {"schemas": {"Pet": {"properties": {"modern": {"type": "string"}}}}},
        })
        assert list(doc.schemas["Pet"].properties) == ["modern"]

    def test_operations_iterates_all_triples(self):
        doc = Document.model_validate({
            "paths": {"/a": {"get": {}, "post": {}}, "/b": {"delete": {}}},
        })
        triples = [(path, method) for path, method, _ in doc.operations()]
        assert triples == [("/a", "get"), ("/a", "post"), ("/b", "delete")]


class TestReferenceName:
    def test_definitions_pointer(self):
        assert reference_name("#/definitions/Pet") == "Pet"

    def test_components_pointer(self):
        assert reference_name("#/components/schemas/UserModel") == "UserModel"

    def test_bare_name(self):
        assert reference_name("Pet") == "Pet"

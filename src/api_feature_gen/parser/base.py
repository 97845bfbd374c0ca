"""Document model for parsed Swagger 2.0 / OpenAPI 3.x documents.

Both document generations are read into these models so that domain
extraction and schema resolution never branch on the document version.
"""

from functools import cached_property
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HTTP_METHODS = ("get", "put", "post", "delete", "patch", "head", "options")

# Media types tried first when an OpenAPI 3 response carries `content`.
JSON_MEDIA_TYPES = ("application/json", "text/json", "*/*")


class DocumentNode(BaseModel):
    """Base for all document models: aliases accepted, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("description", "summary", mode="before", check_fields=False)
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


def _coerce_type(value: Any) -> Any:
    """OpenAPI 3.1 allows `type: [string, "null"]`; keep the first real type."""
    if value is None:
        return ""
    if isinstance(value, list):
        return next((t for t in value if t != "null"), "")
    return value


def reference_name(ref: str) -> str:
    """Return the schema name a pointer like `#/definitions/Pet` targets."""
    return ref.rstrip("/").split("/")[-1]


class Info(DocumentNode):
    title: str = ""
    version: str = ""


class Tag(DocumentNode):
    name: str
    description: str = ""


class SchemaDef(DocumentNode):
    """A named or inline schema."""

    type: str = ""
    format: str | None = None
    reference: str | None = Field(default=None, alias="$ref")
    properties: dict[str, "PropertyDef"] = {}
    required: list[str] = []
    items: "SchemaDef | None" = None
    description: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        return _coerce_type(value)

    @field_validator("required", mode="before")
    @classmethod
    def _required_list(cls, value: Any) -> Any:
        # `required: true` on a nested property is a common authoring mistake
        return value if isinstance(value, list) else []


class PropertyDef(DocumentNode):
    """A single property of a SchemaDef."""

    type: str = ""
    format: str | None = None
    reference: str | None = Field(default=None, alias="$ref")
    items: SchemaDef | None = None
    description: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        return _coerce_type(value)


SchemaDef.model_rebuild()


class Parameter(DocumentNode):
    """A single operation parameter (path, query, header, or body)."""

    name: str = ""
    location: str = Field(default="query", alias="in")
    required: bool = False
    type: str = ""
    format: str | None = None
    content_schema: SchemaDef | None = Field(default=None, alias="schema")
    description: str = ""

    @model_validator(mode="after")
    def _type_from_schema(self) -> "Parameter":
        # Swagger 2.0 puts `type` on the parameter, OpenAPI 3 under `schema`
        if not self.type and self.content_schema is not None:
            self.type = self.content_schema.type
            self.format = self.format or self.content_schema.format
        return self


class Response(DocumentNode):
    description: str = ""
    content_schema: SchemaDef | None = Field(default=None, alias="schema")

    @model_validator(mode="before")
    @classmethod
    def _schema_from_content(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "schema" in data:
            return data
        content = data.get("content")
        if not isinstance(content, dict) or not content:
            return data
        media = next((content[m] for m in JSON_MEDIA_TYPES if m in content), None)
        if media is None:
            media = next(iter(content.values()))
        if isinstance(media, dict) and "schema" in media:
            data = {**data, "schema": media["schema"]}
        return data


class Operation(DocumentNode):
    """A single HTTP operation under a path."""

    tags: list[str] = []
    summary: str = ""
    description: str = ""
    operation_id: str = Field(default="", alias="operationId")
    parameters: list[Parameter] = []
    responses: dict[str, Response] = {}

    @model_validator(mode="before")
    @classmethod
    def _fold_request_body(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("operationId") is None:
            data.pop("operationId", None)
        # Anything but a mapping is left for field validation to reject
        responses = data.get("responses") or {}
        if isinstance(responses, dict):
            data["responses"] = {str(code): resp for code, resp in responses.items()}

        body = data.pop("requestBody", None)
        params = data.get("parameters") or []
        if isinstance(body, dict) and isinstance(params, list):
            media = Response.model_validate({"content": body.get("content", {})})
            params = list(params)
            params.append({
                "name": "body",
                "in": "body",
                "required": body.get("required", False),
                "schema": media.content_schema,
            })
            data["parameters"] = params
        return data


class Components(DocumentNode):
    schemas: dict[str, SchemaDef] = {}


def _read_definitions(document: "Document") -> dict[str, SchemaDef]:
    """Swagger 2.0 container."""
    return document.definitions


def _read_component_schemas(document: "Document") -> dict[str, SchemaDef]:
    """OpenAPI 3.x container."""
    if document.components is None:
        return {}
    return document.components.schemas


# Applied in order; a later reader wins on a name clash.
SCHEMA_READERS = (_read_definitions, _read_component_schemas)


class Document(DocumentNode):
    """Root of a parsed specification."""

    info: Info = Info()
    tags: list[Tag] = []
    paths: dict[str, dict[str, Operation]] = {}
    definitions: dict[str, SchemaDef] = {}
    components: Components | None = None

    @model_validator(mode="before")
    @classmethod
    def _select_operations(cls, data: Any) -> Any:
        """Keep only HTTP verbs from each path item and apply shared parameters."""
        if not isinstance(data, dict) or not isinstance(data.get("paths"), dict):
            return data
        paths = {}
        for path, item in data["paths"].items():
            if not isinstance(item, dict):
                continue
            shared = item.get("parameters") or []
            if not isinstance(shared, list):
                raise ValueError(f"parameters of path {path} must be a list")
            operations = {}
            for method in HTTP_METHODS:
                operation = item.get(method)
                if not isinstance(operation, dict):
                    continue
                own = operation.get("parameters") or []
                if shared and isinstance(own, list):
                    seen = {(p.get("name"), p.get("in")) for p in own if isinstance(p, dict)}
                    inherited = [
                        p for p in shared
                        if isinstance(p, dict) and (p.get("name"), p.get("in")) not in seen
                    ]
                    operation = {**operation, "parameters": inherited + list(own)}
                operations[method] = operation
            paths[str(path)] = operations
        return {**data, "paths": paths}

    @cached_property
    def schemas(self) -> dict[str, SchemaDef]:
        """Schema namespace merged from both containers."""
        merged: dict[str, SchemaDef] = {}
        for reader in SCHEMA_READERS:
            merged.update(reader(self))
        return merged

    def operations(self):
        """Yield every (path, method, operation) triple."""
        for path, methods in self.paths.items():
            for method, operation in methods.items():
                yield path, method, operation



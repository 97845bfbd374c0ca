"""Resolve document schemas into a flat table of typed property descriptions.

Handles:
- Swagger -> Dart primitive mapping
- $ref properties (recorded by name, never inlined)
- arrays of primitives, of references, and untyped arrays
- nullability from the schema's `required` list
- walking references outward from a domain's response types
"""

from collections import deque

from pydantic import BaseModel

from api_feature_gen.errors import ResolutionGap
from api_feature_gen.parser.base import Document, PropertyDef, SchemaDef, reference_name
from api_feature_gen.resolver.domains import Domain

_PRIMITIVES: dict[str, str] = {
    "integer": "int",
    "number": "double",
    "boolean": "bool",
    "string": "String",
    "object": "Map<String, dynamic>",
}

_DATE_FORMATS = {"date-time", "date"}


class ResolvedProperty(BaseModel):
    name: str
    type_name: str  # "int", "Pet", "List<Pet>", "List<int>", ...
    is_list: bool = False
    is_nullable: bool = True
    reference: str | None = None  # target schema of a $ref or of array items
    description: str = ""


class ResolvedSchema(BaseModel):
    name: str
    properties: dict[str, ResolvedProperty] = {}
    required: list[str] = []
    description: str = ""

    def references(self) -> list[str]:
        """Schema names this schema points to, in property order."""
        refs: list[str] = []
        for prop in self.properties.values():
            if prop.reference and prop.reference not in refs:
                refs.append(prop.reference)
        return refs


def map_type(swagger_type: str, fmt: str | None = None) -> str:
    """Map a Swagger primitive type to its Dart type; unknown types are `dynamic`."""
    if swagger_type == "string" and fmt in _DATE_FORMATS:
        return "DateTime"
    return _PRIMITIVES.get(swagger_type, "dynamic")


def _item_type(items: SchemaDef | None) -> tuple[str, str | None]:
    if items is None:
        return "dynamic", None
    if items.reference:
        name = reference_name(items.reference)
        return name, name
    return map_type(items.type, items.format), None


def resolve_property(name: str, prop: PropertyDef, required: list[str]) -> ResolvedProperty:
    is_nullable = name not in required

    if prop.reference:
        target = reference_name(prop.reference)
        return ResolvedProperty(
            name=name,
            type_name=target,
            is_nullable=is_nullable,
            reference=target,
            description=prop.description,
        )

    if prop.type == "array":
        item_type, target = _item_type(prop.items)
        return ResolvedProperty(
            name=name,
            type_name=f"List<{item_type}>",
            is_list=True,
            is_nullable=is_nullable,
            reference=target,
            description=prop.description,
        )

    return ResolvedProperty(
        name=name,
        type_name=map_type(prop.type, prop.format),
        is_nullable=is_nullable,
        description=prop.description,
    )


def resolve_schema(name: str, schema: SchemaDef) -> ResolvedSchema:
    properties = {
        prop_name: resolve_property(prop_name, schema.properties[prop_name], schema.required)
        for prop_name in sorted(schema.properties)
    }
    return ResolvedSchema(
        name=name,
        properties=properties,
        required=schema.required,
        description=schema.description,
    )


def resolve_schemas(document: Document) -> dict[str, ResolvedSchema]:
    """Resolve every schema of the merged namespace, keyed by name."""
    return {name: resolve_schema(name, schema) for name, schema in sorted(document.schemas.items())}


def reachable_schemas(
    domain: Domain, table: dict[str, ResolvedSchema]
) -> tuple[list[str], list[ResolutionGap]]:
    """Schemas a domain needs: its response types plus everything they reference.

    Breadth-first with a visited set, so self- and mutually-referencing
    schemas terminate. Names missing from the table become gaps.
    """
    found: list[str] = []
    gaps: list[ResolutionGap] = []
    visited: set[str] = set()
    queue: deque[tuple[str, str]] = deque()

    for ep in domain.endpoints:
        if ep.response_type:
            queue.append((ep.response_type, ep.method_name))

    while queue:
        name, referenced_by = queue.popleft()
        if name in visited:
            continue
        visited.add(name)
        schema = table.get(name)
        if schema is None:
            gaps.append(ResolutionGap(domain=domain.name, name=name, referenced_by=referenced_by))
            continue
        found.append(name)
        for prop in schema.properties.values():
            if prop.reference:
                queue.append((prop.reference, f"{name}.{prop.name}"))

    return found, gaps

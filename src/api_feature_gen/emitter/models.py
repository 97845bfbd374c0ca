"""Data-model and domain-entity emission for resolved schemas."""

from api_feature_gen.emitter.dart import DartClass, DartField, DartFile, DartMethod, DartParam, dart_string
from api_feature_gen.naming import dart_identifier, to_snake, unique_name
from api_feature_gen.resolver.schemas import ResolvedProperty, ResolvedSchema

MODEL_SUFFIX = "Model"

JSON_ANNOTATION_IMPORT = "package:json_annotation/json_annotation.dart"


def model_class_name(schema_name: str) -> str:
    if schema_name.endswith(MODEL_SUFFIX):
        return schema_name
    return f"{schema_name}{MODEL_SUFFIX}"


def entity_class_name(schema_name: str) -> str:
    if schema_name.endswith(MODEL_SUFFIX) and schema_name != MODEL_SUFFIX:
        return schema_name[: -len(MODEL_SUFFIX)]
    return schema_name


def model_file_name(schema_name: str) -> str:
    return f"{to_snake(model_class_name(schema_name))}.dart"


def entity_file_name(schema_name: str) -> str:
    return f"{to_snake(entity_class_name(schema_name))}.dart"


def entity_import(package_name: str, feature: str, schema_name: str) -> str:
    """Import of an entity from a models or repository file.

    Without a package name the import is relative; both importing
    directories sit four levels below the source root.
    """
    target = f"core/entities/{feature}/{entity_file_name(schema_name)}"
    if not package_name:
        return f"../../../../{target}"
    return f"package:{package_name}/{target}"


class SchemaTypes:
    """Renders property types for the model or the entity side of a schema."""

    def __init__(self, table: dict[str, ResolvedSchema]):
        self.table = table

    def is_linked(self, prop: ResolvedProperty) -> bool:
        """True when the property points at a schema that gets emitted."""
        return prop.reference is not None and prop.reference in self.table

    def base_type(self, prop: ResolvedProperty, entity: bool) -> str:
        if prop.reference is None:
            return prop.type_name
        if not self.is_linked(prop):
            # unresolved reference: carried through untyped
            return "List<dynamic>" if prop.is_list else "dynamic"
        target = entity_class_name(prop.reference) if entity else model_class_name(prop.reference)
        return f"List<{target}>" if prop.is_list else target

    def field_type(self, prop: ResolvedProperty, entity: bool) -> str:
        base = self.base_type(prop, entity)
        if prop.is_nullable and base != "dynamic":
            return f"{base}?"
        return base

    def override_type(self, prop: ResolvedProperty) -> str:
        """Type of a copyWith parameter: always optional."""
        base = self.base_type(prop, entity=True)
        return base if base == "dynamic" else f"{base}?"


def field_names(schema: ResolvedSchema) -> dict[str, str]:
    """Map each wire property name to a Dart field name unique within the schema.

    `user_id` and `userId` both camel-case to `userId`; the later one in
    property order becomes `userId2` and keeps its wire name via @JsonKey.
    """
    taken: set[str] = set()
    return {prop: unique_name(dart_identifier(prop), taken) for prop in schema.properties}


def _fields(schema: ResolvedSchema, types: SchemaTypes, entity: bool) -> list[DartField]:
    names = field_names(schema)
    fields = []
    for prop in schema.properties.values():
        name = names[prop.name]
        annotations = []
        if not entity and name != prop.name:
            annotations.append(f"@JsonKey(name: {dart_string(prop.name)})")
        fields.append(DartField(
            type=types.field_type(prop, entity),
            name=name,
            annotations=annotations,
            doc=prop.description,
        ))
    return fields


def _field_params(schema: ResolvedSchema) -> list[DartParam]:
    names = field_names(schema)
    return [
        DartParam(name=names[prop.name], required=not prop.is_nullable, field_init=True)
        for prop in schema.properties.values()
    ]


def _to_entity_value(prop: ResolvedProperty, name: str, types: SchemaTypes) -> str:
    if not types.is_linked(prop):
        return name
    access = "?." if prop.is_nullable else "."
    if prop.is_list:
        return f"{name}{access}map((e) => e.toEntity()).toList()"
    return f"{name}{access}toEntity()"


def _from_entity_value(prop: ResolvedProperty, name: str, types: SchemaTypes) -> str:
    value = f"entity.{name}"
    if not types.is_linked(prop):
        return value
    model = model_class_name(prop.reference)
    if prop.is_list:
        access = "?." if prop.is_nullable else "."
        return f"{value}{access}map({model}.fromEntity).toList()"
    if prop.is_nullable:
        return f"{value} == null ? null : {model}.fromEntity({value}!)"
    return f"{model}.fromEntity({value})"


def _call_lines(class_name: str, assignments: list[tuple[str, str]]) -> list[str]:
    lines = [f"return {class_name}("]
    lines.extend(f"  {name}: {value}," for name, value in assignments)
    lines.append(");")
    return lines


def build_model(schema: ResolvedSchema, types: SchemaTypes, feature: str, package_name: str) -> DartFile:
    """Serializable model with JSON hooks and entity conversion."""
    class_name = model_class_name(schema.name)
    entity = entity_class_name(schema.name)
    stem = to_snake(class_name)

    imports = [JSON_ANNOTATION_IMPORT, entity_import(package_name, feature, schema.name)]
    for ref in schema.references():
        if ref in types.table and ref != schema.name:
            imports.append(model_file_name(ref))

    props = list(schema.properties.values())
    names = field_names(schema)
    members = [
        DartMethod(name=class_name, params=_field_params(schema)),
        DartMethod(
            name=f"{class_name}.fromJson",
            prefix="factory",
            params=[DartParam(name="json", type="Map<String, dynamic>")],
            named=False,
            arrow=f"_${class_name}FromJson(json)",
        ),
        DartMethod(
            name=f"{class_name}.fromEntity",
            prefix="factory",
            params=[DartParam(name="entity", type=entity)],
            named=False,
            body=_call_lines(class_name, [
                (names[p.name], _from_entity_value(p, names[p.name], types)) for p in props
            ]),
        ),
        DartMethod(name="toJson", return_type="Map<String, dynamic>", arrow=f"_${class_name}ToJson(this)"),
        DartMethod(
            name="toEntity",
            return_type=entity,
            body=_call_lines(entity, [
                (names[p.name], _to_entity_value(p, names[p.name], types)) for p in props
            ]),
        ),
    ]

    return DartFile(
        imports=imports,
        parts=[f"{stem}.g.dart"],
        classes=[DartClass(
            name=class_name,
            fields=_fields(schema, types, entity=False),
            members=members,
            annotations=["@JsonSerializable(explicitToJson: true)"],
            doc=schema.description,
        )],
    )


def build_entity(schema: ResolvedSchema, types: SchemaTypes) -> DartFile:
    """Immutable entity with a copyWith."""
    name = entity_class_name(schema.name)
    imports = [
        entity_file_name(ref)
        for ref in schema.references()
        if ref in types.table and entity_class_name(ref) != name
    ]
    props = list(schema.properties.values())
    names = field_names(schema)
    copy_with = DartMethod(
        name="copyWith",
        return_type=name,
        params=[DartParam(name=names[p.name], type=types.override_type(p)) for p in props],
        body=_call_lines(name, [
            (names[p.name], f"{names[p.name]} ?? this.{names[p.name]}") for p in props
        ]),
    )
    return DartFile(
        imports=imports,
        classes=[DartClass(
            name=name,
            fields=_fields(schema, types, entity=True),
            members=[
                DartMethod(name=name, prefix="const", params=_field_params(schema)),
                copy_with,
            ],
            doc=schema.description,
        )],
    )

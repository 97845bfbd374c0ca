from pathlib import Path

import pytest

from api_feature_gen.emitter.dart import render_file
from api_feature_gen.emitter.models import (
    SchemaTypes,
    build_entity,
    build_model,
    entity_class_name,
    entity_file_name,
    entity_import,
    model_class_name,
    model_file_name,
)
from api_feature_gen.parser.base import Document
from api_feature_gen.parser.loader import load_document
from api_feature_gen.resolver.schemas import resolve_schemas

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def pet_table():
    return resolve_schemas(load_document(FIXTURES / "petstore.json"))


@pytest.fixture
def user_table():
    return resolve_schemas(load_document(FIXTURES / "users.yaml"))


class TestNames:
    def test_model_suffix_appended_once(self):
        assert model_class_name("Pet") == "PetModel"
        assert model_class_name("UserModel") == "UserModel"

    def test_entity_strips_suffix(self):
        assert entity_class_name("UserModel") == "User"
        assert entity_class_name("Pet") == "Pet"
        assert entity_class_name("Model") == "Model"

    def test_file_names(self):
        assert model_file_name("OrderItem") == "order_item_model.dart"
        assert entity_file_name("OrderItem") == "order_item.dart"
        assert entity_file_name("UserModel") == "user.dart"

    def test_entity_import(self):
        assert entity_import("shop", "pet_store", "Pet") == "package:shop/core/entities/pet_store/pet.dart"

    def test_entity_import_relative_without_package(self):
        assert entity_import("", "pets", "Pet") == "../../../../core/entities/pets/pet.dart"


class TestBuildModel:
    def test_pet_model(self, pet_table):
        source = render_file(build_model(pet_table["Pet"], SchemaTypes(pet_table), "pets", "petstore_app"))

        assert "import 'package:json_annotation/json_annotation.dart';" in source
        assert "import 'package:petstore_app/core/entities/pets/pet.dart';" in source
        assert "import 'category_model.dart';" in source
        assert "import 'tag_model.dart';" in source
        assert "part 'pet_model.g.dart';" in source
        assert "@JsonSerializable(explicitToJson: true)\nclass PetModel {" in source

        assert "  final CategoryModel? category;" in source
        assert "  final int id;" in source
        assert "  final String name;" in source
        assert "  @JsonKey(name: 'photo_urls')\n  final List<String>? photoUrls;" in source
        assert "  /// pet status in the store\n  final String? status;" in source
        assert "  final List<TagModel>? tags;" in source

    def test_constructor_requires_required_fields(self, pet_table):
        source = render_file(build_model(pet_table["Pet"], SchemaTypes(pet_table), "pets", "app"))
        assert "    required this.id,\n" in source
        assert "    required this.name,\n" in source
        assert "    this.category,\n" in source

    def test_json_hooks(self, pet_table):
        source = render_file(build_model(pet_table["Pet"], SchemaTypes(pet_table), "pets", "app"))
        assert "factory PetModel.fromJson(Map<String, dynamic> json) => _$PetModelFromJson(json);" in source
        assert "Map<String, dynamic> toJson() => _$PetModelToJson(this);" in source

    def test_entity_conversions(self, pet_table):
        source = render_file(build_model(pet_table["Pet"], SchemaTypes(pet_table), "pets", "app"))
        assert "factory PetModel.fromEntity(Pet entity) {" in source
        assert "category: entity.category == null ? null : CategoryModel.fromEntity(entity.category!)," in source
        assert "tags: entity.tags?.map(TagModel.fromEntity).toList()," in source
        assert "photoUrls: entity.photoUrls," in source

        assert "Pet toEntity() {" in source
        assert "category: category?.toEntity()," in source
        assert "tags: tags?.map((e) => e.toEntity()).toList()," in source
        assert "id: id," in source

    def test_date_time_field(self, pet_table):
        source = render_file(build_model(pet_table["Order"], SchemaTypes(pet_table), "orders", "app"))
        assert "  final DateTime? shipDate;" in source

    def test_self_reference_not_imported(self, user_table):
        source = render_file(build_model(user_table["UserModel"], SchemaTypes(user_table), "user_accounts", "app"))
        assert "class UserModel {" in source
        assert "  final List<UserModel>? friends;" in source
        assert "import 'user_model.dart';" not in source
        assert "import 'address_model.dart';" in source
        assert "factory UserModel.fromEntity(User entity) {" in source

    def test_unresolved_reference_is_dynamic(self):
        doc = Document.model_validate({"definitions": {"Widget": {
            "properties": {
                "gear": {"$ref": "#/definitions/Gear"},
                "spares": {"type": "array", "items": {"$ref": "#/definitions/Gear"}},
            },
        }}})
        table = resolve_schemas(doc)
        source = render_file(build_model(table["Widget"], SchemaTypes(table), "widgets", "app"))
        assert "  final dynamic gear;" in source
        assert "  final List<dynamic>? spares;" in source
        assert "gear_model.dart" not in source
        assert "gear: gear," in source

    def test_colliding_property_names_get_distinct_fields(self):
        doc = Document.model_validate({"definitions": {"Account": {"properties": {
            "userId": {"type": "integer"},
            "user_id": {"type": "string"},
        }}}})
        table = resolve_schemas(doc)
        source = render_file(build_model(table["Account"], SchemaTypes(table), "accounts", "app"))
        assert "  final int? userId;" in source
        assert "  @JsonKey(name: 'user_id')\n  final String? userId2;" in source
        assert source.count("userId: userId,") == 1
        assert "userId2: userId2," in source
        assert "userId2: entity.userId2," in source


class TestBuildEntity:
    def test_pet_entity(self, pet_table):
        source = render_file(build_entity(pet_table["Pet"], SchemaTypes(pet_table)))
        assert "import 'category.dart';" in source
        assert "import 'tag.dart';" in source
        assert "json_annotation" not in source
        assert "class Pet {" in source
        assert "  final Category? category;" in source
        assert "  final List<Tag>? tags;" in source
        assert "  const Pet({\n" in source

    def test_copy_with(self, pet_table):
        source = render_file(build_entity(pet_table["Pet"], SchemaTypes(pet_table)))
        assert "  Pet copyWith({\n" in source
        assert "    int? id,\n" in source
        assert "    Category? category,\n" in source
        assert "id: id ?? this.id," in source
        assert "tags: tags ?? this.tags," in source

    def test_self_referencing_entity(self, user_table):
        source = render_file(build_entity(user_table["UserModel"], SchemaTypes(user_table)))
        assert "class User {" in source
        assert "  final List<User>? friends;" in source
        assert "import 'address.dart';" in source
        assert "import 'user.dart';" not in source

    def test_copy_with_colliding_property_names(self):
        doc = Document.model_validate({"definitions": {"Account": {"properties": {
            "userId": {"type": "integer"},
            "user_id": {"type": "string"},
        }}}})
        table = resolve_schemas(doc)
        source = render_file(build_entity(table["Account"], SchemaTypes(table)))
        assert "  final int? userId;\n  final String? userId2;" in source
        assert "JsonKey" not in source
        assert "userId: userId ?? this.userId," in source
        assert "userId2: userId2 ?? this.userId2," in source

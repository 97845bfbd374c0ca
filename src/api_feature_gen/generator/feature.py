"""Feature generator: turns a parsed document into per-domain data-layer files."""

from pydantic import BaseModel

from api_feature_gen.config import GeneratorConfig
from api_feature_gen.emitter.dart import render_file
from api_feature_gen.emitter.datasources import build_local_datasource, build_remote_datasource
from api_feature_gen.emitter.models import (
    SchemaTypes,
    build_entity,
    build_model,
    entity_class_name,
    entity_file_name,
    model_class_name,
    model_file_name,
)
from api_feature_gen.emitter.repository import build_repository
from api_feature_gen.errors import ResolutionGap
from api_feature_gen.parser.base import Document
from api_feature_gen.resolver.domains import Domain, extract_domains, filter_domains
from api_feature_gen.resolver.schemas import ResolvedSchema, reachable_schemas, resolve_schemas


class DomainReport(BaseModel):
    """What was emitted (and skipped) for one domain."""

    domain: str
    feature: str
    endpoints: int = 0
    models: list[str] = []
    entities: list[str] = []
    files: list[str] = []
    gaps: list[ResolutionGap] = []


class GenerationResult(BaseModel):
    files: dict[str, str] = {}  # project-relative path -> content
    reports: list[DomainReport] = []
    schema_count: int = 0

    @property
    def gaps(self) -> list[ResolutionGap]:
        return [gap for report in self.reports for gap in report.gaps]


class FeatureGenerator:
    """Generates models, entities, datasources and a repository per domain."""

    def __init__(self, config: GeneratorConfig):
        self.config = config

    def _entities_dir(self, feature: str) -> str:
        return f"{self.config.lib_dir}/core/entities/{feature}"

    def _data_dir(self, feature: str) -> str:
        return f"{self.config.lib_dir}/features/{feature}/data"

    def select_domains(self, document: Document) -> dict[str, Domain]:
        return filter_domains(extract_domains(document), self.config.domains)

    def generate(self, document: Document) -> GenerationResult:
        """Generate files for every selected domain.

        Returns a GenerationResult whose `files` map paths like
        'lib/features/pets/data/models/pet_model.dart' to their content.
        """
        domains = self.select_domains(document)
        table = resolve_schemas(document)

        result = GenerationResult(schema_count=len(table))
        for domain in domains.values():
            files, report = self.generate_domain(domain, table)
            result.files.update(files)
            result.reports.append(report)
        return result

    def generate_domain(
        self, domain: Domain, table: dict[str, ResolvedSchema]
    ) -> tuple[dict[str, str], DomainReport]:
        """Generate one domain's artifacts; independent of every other domain."""
        feature = domain.feature_name
        package = self.config.import_package
        types = SchemaTypes(table)
        names, gaps = reachable_schemas(domain, table)

        files: dict[str, str] = {}
        report = DomainReport(
            domain=domain.name, feature=feature, endpoints=len(domain.endpoints), gaps=gaps,
        )

        owners: dict[str, str] = {}
        for name in names:
            schema = table[name]
            model_path = f"{self._data_dir(feature)}/models/{model_file_name(name)}"
            entity_path = f"{self._entities_dir(feature)}/{entity_file_name(name)}"
            # Pet and PetModel both become PetModel / Pet
            owner = owners.get(model_path) or owners.get(entity_path)
            if owner is not None:
                report.gaps.append(ResolutionGap(
                    domain=domain.name, name=name, reason=f"maps to the same files as '{owner}'",
                ))
                continue
            owners[model_path] = owners[entity_path] = name

            files[model_path] = render_file(build_model(schema, types, feature, package))
            report.models.append(model_class_name(name))

            files[entity_path] = render_file(build_entity(schema, types))
            report.entities.append(entity_class_name(name))

        datasources = f"{self._data_dir(feature)}/datasources"
        files[f"{datasources}/{feature}_remote_datasource.dart"] = render_file(
            build_remote_datasource(domain, names)
        )
        files[f"{datasources}/{feature}_local_datasource.dart"] = render_file(
            build_local_datasource(domain)
        )
        files[f"{self._data_dir(feature)}/repository/{feature}_repository.dart"] = render_file(
            build_repository(domain, names, package)
        )

        report.files = list(files)
        return files, report

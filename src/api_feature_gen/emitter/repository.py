"""Repository contract and implementation emission for a domain."""

from api_feature_gen.emitter.dart import DartClass, DartField, DartFile, DartMethod, DartParam, dart_string
from api_feature_gen.emitter.datasources import (
    INJECTABLE_IMPORT,
    argument_names,
    endpoint_params,
    local_datasource_name,
    remote_datasource_name,
)
from api_feature_gen.emitter.models import entity_class_name, entity_import
from api_feature_gen.naming import to_pascal
from api_feature_gen.resolver.domains import Domain, Endpoint

FAILURE_IMPORT = "../../../../core/failures/failure.dart"


def repository_name(domain: Domain) -> str:
    return f"{to_pascal(domain.feature_name)}Repository"


def repository_return_type(ep: Endpoint) -> str:
    value = entity_class_name(ep.response_type) if ep.response_type else "void"
    return f"Future<Either<Failure, {value}>>"


def _repository_body(ep: Endpoint) -> list[str]:
    call_args = ", ".join(f"{name}: {name}" for _, name in argument_names(ep))
    call = f"await _remoteDatasource.{ep.method_name}({call_args});"

    lines = ["try {"]
    if ep.response_type is None:
        lines.append(f"  {call}")
        lines.append("  return const Right(null);")
    else:
        lines.append(f"  final model = {call}")
        if ep.is_read:
            lines.append(f"  await _localDatasource.cacheData({dart_string(ep.method_name)}, model.toJson());")
        lines.append("  return Right(model.toEntity());")
    lines.extend([
        "} on DioException catch (e) {",
        "  return Left(NetworkFailure(message: e.message ?? 'Network error'));",
        "} catch (e) {",
        "  return Left(UnexpectedFailure(message: e.toString()));",
        "}",
    ])
    return lines


def build_repository(domain: Domain, emitted: list[str], package_name: str) -> DartFile:
    """Either-returning contract over the datasources plus its implementation.

    `emitted` lists the schema names whose entity files exist for this domain.
    """
    contract = repository_name(domain)
    impl = f"{contract}Impl"
    remote = remote_datasource_name(domain)
    local = local_datasource_name(domain)
    feature = domain.feature_name

    imports = [
        "package:dartz/dartz.dart",
        "package:dio/dio.dart",
        INJECTABLE_IMPORT,
        FAILURE_IMPORT,
        f"../datasources/{feature}_remote_datasource.dart",
        f"../datasources/{feature}_local_datasource.dart",
    ]
    imports.extend(
        entity_import(package_name, feature, name) for name in domain.response_types if name in emitted
    )

    abstract_methods = []
    impl_methods = []
    for ep in domain.endpoints:
        abstract_methods.append(DartMethod(
            name=ep.method_name,
            return_type=repository_return_type(ep),
            params=endpoint_params(ep),
            doc=ep.summary or f"{ep.method} {ep.path}",
        ))
        impl_methods.append(DartMethod(
            name=ep.method_name,
            return_type=repository_return_type(ep),
            params=endpoint_params(ep),
            is_async=True,
            annotations=["@override"],
            body=_repository_body(ep),
        ))

    return DartFile(
        imports=imports,
        classes=[
            DartClass(name=contract, abstract=True, members=abstract_methods, doc=domain.description),
            DartClass(
                name=impl,
                implements=[contract],
                annotations=[f"@Injectable(as: {contract})"],
                fields=[
                    DartField(type=remote, name="_remoteDatasource"),
                    DartField(type=local, name="_localDatasource"),
                ],
                members=[
                    DartMethod(
                        name=impl,
                        params=[
                            DartParam(name="_remoteDatasource", field_init=True),
                            DartParam(name="_localDatasource", field_init=True),
                        ],
                        named=False,
                    ),
                    *impl_methods,
                ],
            ),
        ],
    )

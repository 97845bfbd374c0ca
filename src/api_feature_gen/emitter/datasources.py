"""Remote and local datasource emission for a domain."""

import re

from api_feature_gen.emitter.dart import DartClass, DartField, DartFile, DartMethod, DartParam, dart_string
from api_feature_gen.emitter.models import model_class_name, model_file_name
from api_feature_gen.naming import dart_identifier, to_pascal
from api_feature_gen.parser.base import Parameter
from api_feature_gen.resolver.domains import Domain, Endpoint
from api_feature_gen.resolver.schemas import map_type

INJECTABLE_IMPORT = "package:injectable/injectable.dart"
API_CLIENT_IMPORT = "../../../../core/api/api_client.dart"

_PATH_PARAM_RE = re.compile(r"\{([^{}]+)\}")
_STORAGE_KEY = "'$cacheKeyPrefix.$key'"


def argument_names(ep: Endpoint) -> list[tuple[Parameter, str]]:
    """Pair each method argument with a unique Dart identifier."""
    seen: set[str] = set()
    pairs = []
    for p in ep.arguments:
        name = dart_identifier(p.name)
        if name in seen:
            name = f"{name}{to_pascal(p.location)}"
        seen.add(name)
        pairs.append((p, name))
    return pairs


def argument_type(p: Parameter) -> str:
    if p.location == "body":
        base = "Map<String, dynamic>"
    else:
        base = map_type(p.type, p.format)
    if not p.required and base != "dynamic":
        return f"{base}?"
    return base


def endpoint_params(ep: Endpoint) -> list[DartParam]:
    return [
        DartParam(name=name, type=argument_type(p), required=p.required)
        for p, name in argument_names(ep)
    ]


def remote_return_type(ep: Endpoint) -> str:
    if ep.response_type is None:
        return "Future<void>"
    return f"Future<{model_class_name(ep.response_type)}>"


def interpolated_path(ep: Endpoint) -> str:
    """The endpoint path as a Dart string with path parameters interpolated."""
    names = {p.name: name for p, name in argument_names(ep) if p.location == "path"}
    literal = dart_string(ep.path)
    return _PATH_PARAM_RE.sub(
        lambda m: f"${{{names[m.group(1)]}}}" if m.group(1) in names else m.group(0),
        literal,
    )


def _remote_call(ep: Endpoint) -> list[str]:
    args = [interpolated_path(ep)]
    pairs = argument_names(ep)
    query = [f"{dart_string(p.name)}: {name}" for p, name in pairs if p.location == "query"]
    if query:
        args.append("queryParameters: {" + ", ".join(query) + "}")
    body = next((name for p, name in pairs if p.location == "body"), None)
    if body is not None:
        args.append(f"data: {body}")

    call = f"await _apiClient.{ep.method.lower()}("
    lines = []
    if ep.response_type is None:
        lines.append(call)
    else:
        lines.append(f"final response = {call}")
    lines.extend(f"  {arg}," for arg in args)
    lines.append(");")
    if ep.response_type is not None:
        model = model_class_name(ep.response_type)
        lines.append(f"return {model}.fromJson(response.data as Map<String, dynamic>);")
    return lines


def remote_datasource_name(domain: Domain) -> str:
    return f"{to_pascal(domain.feature_name)}RemoteDatasource"


def local_datasource_name(domain: Domain) -> str:
    return f"{to_pascal(domain.feature_name)}LocalDatasource"


def build_remote_datasource(domain: Domain, emitted: list[str]) -> DartFile:
    """Contract with one method per endpoint plus its ApiClient-backed implementation.

    `emitted` lists the schema names whose model files exist for this domain.
    """
    contract = remote_datasource_name(domain)
    impl = f"{contract}Impl"

    abstract_methods = []
    impl_methods = []
    for ep in domain.endpoints:
        abstract_methods.append(DartMethod(
            name=ep.method_name,
            return_type=remote_return_type(ep),
            params=endpoint_params(ep),
            doc=ep.summary or f"{ep.method} {ep.path}",
        ))
        impl_methods.append(DartMethod(
            name=ep.method_name,
            return_type=remote_return_type(ep),
            params=endpoint_params(ep),
            is_async=True,
            annotations=["@override"],
            body=_remote_call(ep),
        ))

    imports = [INJECTABLE_IMPORT, API_CLIENT_IMPORT]
    imports.extend(
        f"../models/{model_file_name(name)}" for name in domain.response_types if name in emitted
    )

    return DartFile(
        imports=imports,
        classes=[
            DartClass(name=contract, abstract=True, members=abstract_methods, doc=domain.description),
            DartClass(
                name=impl,
                implements=[contract],
                annotations=[f"@Injectable(as: {contract})"],
                fields=[DartField(type="ApiClient", name="_apiClient")],
                members=[
                    DartMethod(
                        name=impl,
                        params=[DartParam(name="_apiClient", field_init=True)],
                        named=False,
                    ),
                    *impl_methods,
                ],
            ),
        ],
    )


def cache_key_prefix(domain: Domain) -> str:
    return f"{domain.feature_name}_data"


def build_local_datasource(domain: Domain) -> DartFile:
    """Key/value cache over SharedPreferences; payloads are stored as JSON."""
    contract = local_datasource_name(domain)
    impl = f"{contract}Impl"
    key_params = [DartParam(name="key", type="String")]

    return DartFile(
        imports=["dart:convert", INJECTABLE_IMPORT, "package:shared_preferences/shared_preferences.dart"],
        classes=[
            DartClass(
                name=contract,
                abstract=True,
                members=[
                    DartMethod(
                        name="cacheData",
                        return_type="Future<void>",
                        params=key_params + [DartParam(name="data", type="dynamic")],
                        named=False,
                    ),
                    DartMethod(
                        name="getCachedData",
                        return_type="Future<dynamic>",
                        params=key_params,
                        named=False,
                    ),
                ],
            ),
            DartClass(
                name=impl,
                implements=[contract],
                annotations=[f"@Injectable(as: {contract})"],
                fields=[
                    DartField(
                        type="String",
                        name="cacheKeyPrefix",
                        modifiers="static const",
                        initializer=dart_string(cache_key_prefix(domain)),
                    ),
                    DartField(type="SharedPreferences", name="_preferences"),
                ],
                members=[
                    DartMethod(
                        name=impl,
                        params=[DartParam(name="_preferences", field_init=True)],
                        named=False,
                    ),
                    DartMethod(
                        name="cacheData",
                        return_type="Future<void>",
                        params=key_params + [DartParam(name="data", type="dynamic")],
                        named=False,
                        is_async=True,
                        annotations=["@override"],
                        body=[f"await _preferences.setString({_STORAGE_KEY}, jsonEncode(data));"],
                    ),
                    DartMethod(
                        name="getCachedData",
                        return_type="Future<dynamic>",
                        params=key_params,
                        named=False,
                        is_async=True,
                        annotations=["@override"],
                        body=[
                            f"final raw = _preferences.getString({_STORAGE_KEY});",
                            "return raw == null ? null : jsonDecode(raw);",
                        ],
                    ),
                ],
            ),
        ],
    )

"""Group document operations into domains by tag.

A domain is one tag of the document; every tagged operation becomes an
endpoint in each of its tags' domains. Untagged operations are dropped.
"""

from pydantic import BaseModel

from api_feature_gen.naming import dart_identifier, method_name_from_path, to_snake, unique_name
from api_feature_gen.parser.base import Document, Operation, Parameter, Response, reference_name

# Status codes scanned, in order, for the endpoint's response model.
SUCCESS_STATUSES = ("200", "201")

# Parameter locations that become Dart method arguments.
ARGUMENT_LOCATIONS = ("path", "query", "body")


class Endpoint(BaseModel):
    """One HTTP operation within a domain."""

    path: str
    method: str  # upper-cased verb
    operation_id: str
    method_name: str  # Dart method name, unique across the document
    summary: str = ""
    parameters: list[Parameter] = []
    response_type: str | None = None  # schema name, None for void operations

    @property
    def arguments(self) -> list[Parameter]:
        """Parameters passed to the generated method (headers are omitted)."""
        return [p for p in self.parameters if p.location in ARGUMENT_LOCATIONS]

    @property
    def is_read(self) -> bool:
        return self.method == "GET"


class Domain(BaseModel):
    """A tag of the document and the endpoints that carry it."""

    name: str
    description: str = ""
    endpoints: list[Endpoint] = []
    feature: str = ""  # set by extract_domains; unique across the document

    @property
    def feature_name(self) -> str:
        return self.feature or to_snake(self.name) or "api"

    @property
    def response_types(self) -> list[str]:
        """Distinct response model names, in first-use order."""
        names: list[str] = []
        for ep in self.endpoints:
            if ep.response_type and ep.response_type not in names:
                names.append(ep.response_type)
        return names


def extract_response_type(responses: dict[str, Response]) -> str | None:
    """Name of the first 200/201 response schema that is a `$ref`."""
    for status in SUCCESS_STATUSES:
        response = responses.get(status)
        if response is None or response.content_schema is None:
            continue
        if response.content_schema.reference:
            return reference_name(response.content_schema.reference)
    return None


def _method_names(document: Document) -> dict[tuple[str, str], str]:
    """Assign every operation a Dart method name, suffixing duplicates."""
    names: dict[tuple[str, str], str] = {}
    taken: set[str] = set()
    for path, method, operation in document.operations():
        if operation.operation_id:
            base = dart_identifier(operation.operation_id)
        else:
            base = method_name_from_path(method, path)
        names[(path, method)] = unique_name(base, taken)
    return names


def build_endpoint(path: str, method: str, operation: Operation, method_name: str) -> Endpoint:
    return Endpoint(
        path=path,
        method=method.upper(),
        operation_id=operation.operation_id,
        method_name=method_name,
        summary=operation.summary,
        parameters=operation.parameters,
        response_type=extract_response_type(operation.responses),
    )


def extract_domains(document: Document) -> dict[str, Domain]:
    """Build one Domain per tag, keyed and ordered by tag name."""
    domains: dict[str, Domain] = {
        tag.name: Domain(name=tag.name, description=tag.description) for tag in document.tags
    }
    method_names = _method_names(document)

    for path, method, operation in document.operations():
        if not operation.tags:
            continue
        endpoint = build_endpoint(path, method, operation, method_names[(path, method)])
        for tag in operation.tags:
            # Tags used by operations but never declared still get a domain
            domain = domains.setdefault(tag, Domain(name=tag))
            domain.endpoints.append(endpoint.model_copy(deep=True))

    ordered = dict(sorted(domains.items()))
    # "Pet Store" and "pet-store" must not share a feature directory
    features: set[str] = set()
    for domain in ordered.values():
        domain.feature = unique_name(to_snake(domain.name) or "api", features)
    return ordered


def filter_domains(domains: dict[str, Domain], names: list[str] | None) -> dict[str, Domain]:
    """Keep only the named domains; matches tag names or feature names, case-insensitively."""
    if not names:
        return domains
    wanted = {n.strip().lower() for n in names if n.strip()}
    return {
        key: domain
        for key, domain in domains.items()
        if domain.name.lower() in wanted or domain.feature_name in wanted
    }

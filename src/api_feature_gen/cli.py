"""CLI entry point for api-feature-gen."""

from pathlib import Path

import click

from api_feature_gen.config import GeneratorConfig
from api_feature_gen.errors import EmissionError, GeneratorError
from api_feature_gen.generator.feature import DomainReport, FeatureGenerator, GenerationResult
from api_feature_gen.parser.base import Document
from api_feature_gen.parser.loader import DEFAULT_TIMEOUT, load_document
from api_feature_gen.resolver.domains import extract_domains
from api_feature_gen.resolver.schemas import resolve_schemas
from api_feature_gen.writer import write_files


def _load(source: str, timeout: float) -> Document:
    """Load a document, turning load failures into CLI errors."""
    try:
        document = load_document(source, timeout=timeout)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e
    title = document.info.title or "untitled"
    version = f" (v{document.info.version})" if document.info.version else ""
    click.echo(f"Loaded API: {click.style(title, bold=True)}{version}")
    return document


def _split_domains(domains: str | None) -> list[str]:
    if not domains:
        return []
    return [d.strip() for d in domains.split(",") if d.strip()]


def _echo_report(report: DomainReport, written: int) -> None:
    click.echo(
        f"  {click.style(report.domain, bold=True)} -> features/{report.feature}: "
        f"{report.endpoints} endpoints, {len(report.models)} models, {written} files written"
    )
    for gap in report.gaps:
        click.echo(click.style(f"    warning: skipped {gap.describe()}", fg="yellow"), err=True)


def _echo_summary(result: GenerationResult, written: int) -> None:
    models = sum(len(r.models) for r in result.reports)
    click.echo(
        f"Done! {len(result.reports)} domains, {models} models, "
        f"{len(result.gaps)} skipped references, {written} files written."
    )


@click.group()
def main():
    """api-feature-gen: generate Flutter data layers from Swagger/OpenAPI documents."""
    pass


@main.command("from-api")
@click.option("-u", "--url", default=None, help="URL of a Swagger/OpenAPI JSON document.")
@click.option("-f", "--file", "file_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Local Swagger/OpenAPI JSON or YAML file.")
@click.option("-p", "--project", default=Path("."), type=click.Path(file_okay=False, path_type=Path), envvar="API_FEATURE_GEN_PROJECT", show_default=True, help="Flutter project directory.")
@click.option("-d", "--domains", default=None, help="Only generate these domains/tags (comma-separated).")
@click.option("--package-name", default="", envvar="API_FEATURE_GEN_PACKAGE", help="Dart package name (defaults to pubspec.yaml name).")
@click.option("--lib-dir", default="lib", show_default=True, help="Source directory inside the project.")
@click.option("--timeout", default=DEFAULT_TIMEOUT, type=float, envvar="API_FEATURE_GEN_TIMEOUT", show_default=True, help="HTTP timeout in seconds.")
@click.option("--append", is_flag=True, default=False, help="Keep existing files instead of overwriting them.")
@click.option("--dry-run", is_flag=True, default=False, help="List the files that would be generated without writing.")
def from_api(url: str | None, file_path: Path | None, project: Path, domains: str | None,
             package_name: str, lib_dir: str, timeout: float, append: bool, dry_run: bool):
    """Generate models, entities, datasources and repositories per API tag."""
    if (url is None) == (file_path is None):
        raise click.UsageError("Provide exactly one of --url or --file.")

    source = url if url is not None else str(file_path)
    click.echo(f"Reading API document from {source}...")

    config = GeneratorConfig(
        project_dir=project,
        lib_dir=lib_dir,
        package_name=package_name,
        domains=_split_domains(domains),
        timeout=timeout,
    )
    document = _load(source, config.timeout)

    result = FeatureGenerator(config).generate(document)
    click.echo(f"Found {len(result.reports)} domains and {result.schema_count} schemas.")
    if not result.reports:
        click.echo("Nothing to generate.")
        return

    if dry_run:
        for report in result.reports:
            _echo_report(report, 0)
            for path in report.files:
                click.echo(f"    {path}")
        return

    written = 0
    for report in result.reports:
        files = {path: result.files[path] for path in report.files}
        try:
            paths = write_files(project, files, overwrite=not append)
        except EmissionError as e:
            click.echo(f"Stopped at domain {report.domain} after writing {written} files.", err=True)
            raise click.ClickException(str(e)) from e
        written += len(paths)
        _echo_report(report, len(paths))

    _echo_summary(result, written)


@main.command()
@click.argument("source")
@click.option("--timeout", default=DEFAULT_TIMEOUT, type=float, envvar="API_FEATURE_GEN_TIMEOUT", show_default=True, help="HTTP timeout in seconds.")
def inspect(source: str, timeout: float):
    """List the domains and schemas of an API document without generating anything."""
    document = _load(source, timeout)
    domains = extract_domains(document)
    table = resolve_schemas(document)

    click.echo(f"{len(domains)} domains, {len(table)} schemas")
    for domain in domains.values():
        click.echo(f"  {domain.name} ({domain.feature_name}): {len(domain.endpoints)} endpoints")
        for ep in domain.endpoints:
            returns = ep.response_type or "void"
            click.echo(f"    {ep.method} {ep.path} -> {ep.method_name}(): {returns}")

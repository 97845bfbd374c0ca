"""Generation settings shared by the CLI and the feature generator."""

from pathlib import Path

import yaml
from pydantic import BaseModel, model_validator

from api_feature_gen.naming import to_snake
from api_feature_gen.parser.loader import DEFAULT_TIMEOUT

PUBSPEC = "pubspec.yaml"


def read_package_name(project_dir: Path) -> str:
    """Dart package name from the project's pubspec.yaml, else the directory name."""
    pubspec = project_dir / PUBSPEC
    if pubspec.is_file():
        try:
            data = yaml.safe_load(pubspec.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError):
            data = None
        if isinstance(data, dict) and isinstance(data.get("name"), str) and data["name"].strip():
            return data["name"].strip()
    return to_snake(project_dir.resolve().name) or "app"


class GeneratorConfig(BaseModel):
    """Where and how feature artifacts are generated."""

    project_dir: Path = Path(".")
    lib_dir: str = "lib"
    package_name: str = ""
    domains: list[str] = []
    timeout: float = DEFAULT_TIMEOUT

    @property
    def import_package(self) -> str:
        """Package name for `package:` imports, or "" when they cannot reach lib_dir.

        `package:<name>/` always resolves to the package's `lib/` directory.
        """
        if Path(self.lib_dir).name != "lib":
            return ""
        return self.package_name

    @model_validator(mode="after")
    def _default_package_name(self) -> "GeneratorConfig":
        if not self.package_name:
            self.package_name = read_package_name(self.project_dir)
        return self

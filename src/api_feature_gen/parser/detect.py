"""Auto-detect where an API document comes from and how it is encoded."""

from pathlib import Path
from urllib.parse import urlparse

YAML_SUFFIXES = (".yaml", ".yml")


def detect_source(source: str | Path) -> str:
    """Classify a document source.

    Returns: 'url' or 'file'.
    """
    if isinstance(source, Path):
        return "file"
    scheme = urlparse(source).scheme.lower()
    if scheme in ("http", "https"):
        return "url"
    return "file"


def detect_syntax(file_path: Path) -> str:
    """Detect the serialization of a local document file.

    Returns: 'yaml' or 'json'.
    """
    if file_path.suffix.lower() in YAML_SUFFIXES:
        return "yaml"
    return "json"

"""Swagger / OpenAPI document loader.

Fetches a document from a URL or reads it from disk, then validates it
into the Document model. Both sources share `parse_document`.
"""

import json
from pathlib import Path
from typing import Any

import requests
import yaml
from pydantic import ValidationError

from api_feature_gen.errors import HttpStatusError, LoadError
from api_feature_gen.parser.base import Document
from api_feature_gen.parser.detect import detect_source, detect_syntax

DEFAULT_TIMEOUT = 30.0


def load_document(source: str | Path, timeout: float = DEFAULT_TIMEOUT) -> Document:
    """Load a Swagger/OpenAPI document from a URL or a local file."""
    if detect_source(source) == "url":
        payload = fetch_payload(str(source), timeout=timeout)
    else:
        payload = read_payload(Path(source))
    return parse_document(payload)


def fetch_payload(url: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """GET a document and decode its JSON body."""
    try:
        response = requests.get(url, timeout=timeout, headers={"Accept": "application/json"})
    except requests.RequestException as e:
        raise LoadError(f"Failed to fetch {url}: {e}") from e

    if not response.ok:
        raise HttpStatusError(response.status_code, url)

    try:
        return response.json()
    except ValueError as e:
        raise LoadError(f"Response from {url} is not valid JSON: {e}") from e


def read_payload(file_path: Path) -> Any:
    """Read a document file and decode it as JSON or YAML."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoadError(f"Failed to read {file_path}: {e}") from e

    if detect_syntax(file_path) == "yaml":
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise LoadError(f"Failed to parse YAML in {file_path}: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(f"Failed to parse JSON in {file_path}: {e}") from e


def parse_document(payload: Any) -> Document:
    """Validate a decoded payload into a Document.

    Missing top-level sections default to empty; anything that is not a
    mapping, or whose sections have the wrong shape, is rejected.
    """
    if not isinstance(payload, dict):
        raise LoadError(f"API document must be a JSON object, got {type(payload).__name__}")
    try:
        return Document.model_validate(payload)
    except ValidationError as e:
        raise LoadError(f"API document has an unexpected shape: {e}") from e

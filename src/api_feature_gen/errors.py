"""Error types raised while loading documents and writing artifacts."""

from pathlib import Path

from pydantic import BaseModel


class GeneratorError(Exception):
    """Base class for errors that abort a generation run."""


class LoadError(GeneratorError):
    """The API document could not be fetched, read, or decoded."""


class HttpStatusError(LoadError):
    """The document URL answered with a non-success status."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"Failed to fetch {url}: HTTP {status_code}")


class EmissionError(GeneratorError):
    """An artifact could not be written to disk."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


class ResolutionGap(BaseModel):
    """A schema name that could not be emitted.

    Usually a referenced name with no definition in the schema table; with
    a `reason`, a defined schema whose generated names clash with another.
    Gaps are recorded, never raised: the emission for that name is skipped
    and the rest of the domain is still generated.
    """

    domain: str
    name: str
    referenced_by: str = ""  # endpoint method name or "Schema.property"
    reason: str = ""

    def describe(self) -> str:
        if self.reason:
            return f"{self.domain}: schema '{self.name}' {self.reason}"
        origin = f" (referenced by {self.referenced_by})" if self.referenced_by else ""
        return f"{self.domain}: no schema named '{self.name}'{origin}"

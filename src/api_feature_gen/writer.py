"""Filesystem writer for generated artifacts."""

from pathlib import Path

from api_feature_gen.errors import EmissionError


def write_files(project_dir: Path, files: dict[str, str], overwrite: bool = True) -> list[Path]:
    """Write generated files under project_dir, creating parent directories.

    With overwrite=False, files that already exist are left untouched.
    Returns the paths actually written.
    """
    written = []
    for relative, content in files.items():
        path = project_dir / relative
        if not overwrite and path.exists():
            continue
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise EmissionError(path, str(e)) from e
        written.append(path)
    return written

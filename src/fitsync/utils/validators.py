"""Validation utilities for input sanitization and security."""

from pathlib import Path

from fitsync.exceptions import ValidationError


def validate_safe_path(
    file_path: str,
    allowed_bases: list[Path] | None = None,
) -> Path:
    """Validate that a file path is safe and within an allowed directory.

    Args:
        file_path: User-provided file path
        allowed_bases: Base directories the path may live under
            (default: current working directory)

    Returns:
        Resolved absolute Path

    Raises:
        ValidationError: If the path uses traversal or leaves every allowed base
    """
    if not file_path:
        raise ValidationError("file path must not be empty")

    if ".." in Path(file_path).parts:
        raise ValidationError(f"Path traversal detected in {file_path}")

    # Resolve symlinks (e.g. /var -> /private/var on macOS) on both sides
    path_resolved = Path(file_path).resolve()
    bases = [Path.cwd().resolve()]
    bases.extend(base.resolve() for base in allowed_bases or [])

    for base in bases:
        try:
            path_resolved.relative_to(base)
            return path_resolved
        except ValueError:
            continue

    raise ValidationError(f"Path {file_path} is outside allowed directory")

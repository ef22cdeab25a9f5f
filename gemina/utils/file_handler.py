"""Source file validation and encoding utilities."""

from __future__ import annotations

import base64
from pathlib import Path
from urllib.parse import urlparse

from loguru import logger

from gemina.core.errors import SourceError

ALLOWED_EXTENSIONS = {".pdf", ".png", ".jpg", ".jpeg", ".tiff", ".tif", ".bmp", ".webp", ".gif"}
REMOTE_SCHEMES = {"http", "https"}


def is_remote_source(source: str) -> bool:
    """Return True if ``source`` is an http(s) URL rather than a local path."""
    parsed = urlparse(source)
    return parsed.scheme.lower() in REMOTE_SCHEMES and bool(parsed.netloc)


def validate_local_source(path: Path, max_file_size_mb: int) -> Path:
    """
    Check that ``path`` is an existing, supported and reasonably sized file.

    Returns the Path unchanged.
    Raises SourceError otherwise.
    """
    if not path.is_file():
        raise SourceError(f"Source file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        raise SourceError(
            f"Unsupported file type '{suffix}'. "
            f"Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    size = path.stat().st_size
    if size > max_file_size_mb * 1024 * 1024:
        raise SourceError(f"File exceeds maximum size of {max_file_size_mb} MB")
    return path


def encode_file(path: Path) -> str:
    """Read ``path`` and return its bytes as a base64 string."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SourceError(f"Cannot read {path}: {exc}") from exc

    logger.debug(f"Encoded {path.name} ({len(data) / 1024:.1f} KB)")
    return encode_bytes(data)


def encode_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def get_file_type(path: Path) -> str:
    """Return 'pdf' or 'image' based on file extension."""
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return "pdf"
    return "image"

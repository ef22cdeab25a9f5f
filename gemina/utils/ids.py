"""Correlation id helpers."""

from __future__ import annotations

import uuid


def generate_external_id() -> str:
    """Return a fresh random (version 4) UUID string used as the document's external_id."""
    return str(uuid.uuid4())

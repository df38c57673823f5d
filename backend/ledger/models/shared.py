"""Shared model utilities used across all models."""

import uuid
from datetime import UTC, datetime


def generate_id() -> str:
    """Generate a new record id (UUID4 as text)."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)

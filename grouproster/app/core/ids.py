"""Identifier and capability-token generation."""

from uuid import uuid4


def new_uuid() -> str:
    """Random 128-bit identifier, used both for primary keys and capability tokens."""
    return str(uuid4())

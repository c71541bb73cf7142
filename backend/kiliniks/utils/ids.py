"""Identifier generation shared by the repositories."""

import uuid
from typing import Callable

IdFactory = Callable[[], str]


def generate_id() -> str:
    """Return a fresh UUID4 string."""
    return str(uuid.uuid4())

"""Command implementations for the modulemd CLI."""

from .dump import handle_dump
from .merge import handle_merge
from .validate import handle_validate

__all__ = [
    "handle_dump",
    "handle_merge",
    "handle_validate",
]

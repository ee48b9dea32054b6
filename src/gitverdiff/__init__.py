"""gitverdiff: version hashes from Git state and modified file contents."""

from __future__ import annotations

from . import errors
from .formatter import TOKENS
from .generate import Options, generate_version_hash

__all__ = [
    "Options",
    "TOKENS",
    "errors",
    "generate_version_hash",
]

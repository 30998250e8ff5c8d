"""Parsers for Liberty files and values"""

from .base import BaseParser
from .liberty import LibertyParser
from .values import DEFAULT_MAX_DEPTH, ValueParser

__all__ = [
    "BaseParser",
    "LibertyParser",
    "ValueParser",
    "DEFAULT_MAX_DEPTH",
]

"""liberty-parse: Liberty cell library parser and writer"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("liberty-parse")
except (ImportError, PackageNotFoundError):
    __version__ = "0.0.0"

from .exceptions import LibertyError, ParseError, ValueKindError
from .models.ast import LibertyAst
from .models.liberty import Group, Liberty
from .models.values import Value
from .parsers.liberty import LibertyParser
from .parsers.values import ValueParser
from .writer import format_liberty


def parse_ast(text: str) -> LibertyAst:
    """Parses a Liberty buffer into the raw document tree."""
    return LibertyParser().parse_string(text)


def parse_lib(text: str) -> Liberty:
    """Parses a Liberty buffer into the structured model."""
    return Liberty.from_ast(parse_ast(text))


def parse_value(text: str) -> Value:
    """Parses a single field value, e.g. ``"80"`` or ``"A + B"``."""
    return ValueParser().parse_string(text)


def to_structured(ast: LibertyAst) -> Liberty:
    """Converts a raw tree into the structured model (comments are dropped)."""
    return Liberty.from_ast(ast)


def to_document(lib: Liberty) -> LibertyAst:
    """Converts the structured model back into a raw tree."""
    return lib.to_ast()


__all__ = [
    "__version__",
    "parse_ast",
    "parse_lib",
    "parse_value",
    "to_structured",
    "to_document",
    "format_liberty",
    "LibertyParser",
    "ValueParser",
    "LibertyAst",
    "Liberty",
    "Group",
    "Value",
    "LibertyError",
    "ParseError",
    "ValueKindError",
]

"""Liberty writer.

Renders raw trees and structured models back to Liberty syntax. Output is
deterministic: two spaces of indentation per nesting level, numbers with six
decimal places, no trailing newline. Formatting a parsed document and parsing
the result again yields the same text.
"""

from typing import Union

from .models.ast import Block, Comment, ComplexAttribute, LibertyAst, Node, SimpleAttribute
from .models.liberty import Group, Liberty
from .models.values import Bool, Expression, Number, NumberList, Text, Value

INDENT = "  "


def _format_float(number: float) -> str:
    return f"{number:.6f}"


def format_value(value: Value) -> str:
    """Renders a single field value."""
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Number):
        return _format_float(value.value)
    if isinstance(value, NumberList):
        return '"' + ", ".join(_format_float(v) for v in value.value) + '"'
    if isinstance(value, Text):
        return f'"{value.value}"'
    if isinstance(value, Expression):
        return value.value
    raise TypeError(f"Cannot format {type(value).__name__}")


def format_node(node: Node, depth: int = 0) -> str:
    """Renders one raw tree node at the given nesting depth."""
    indent = INDENT * depth
    if isinstance(node, SimpleAttribute):
        return f"{indent}{node.name} : {format_value(node.value)};"
    if isinstance(node, ComplexAttribute):
        values = ", ".join(format_value(v) for v in node.values)
        return f"{indent}{node.name} ({values})"
    if isinstance(node, Comment):
        # Text lines are written as-is so re-parsing recovers the same text
        return f"{indent}/*\n{node.text}\n{indent}*/"
    if isinstance(node, Block):
        body = "\n".join(format_node(child, depth + 1) for child in node.children)
        return f"{indent}{node.kind} ( {node.name} ) {{\n{body}\n{indent}}}"
    raise TypeError(f"Cannot format {type(node).__name__}")


def format_ast(ast: LibertyAst) -> str:
    """Renders a raw tree, comments included."""
    return "\n".join(format_node(block) for block in ast.libraries)


def format_group(group: Group, depth: int = 0) -> str:
    """Renders a structured group (attributes first, then subgroups)."""
    return format_node(group.to_block(), depth)


def format_liberty(doc: Union[LibertyAst, Liberty, Group, Block]) -> str:
    """Renders any Liberty tree to text.

    Args:
        doc: A raw tree, a structured model, or a single group/block.

    Returns:
        The Liberty source text.
    """
    if isinstance(doc, Liberty):
        return format_ast(doc.to_ast())
    if isinstance(doc, LibertyAst):
        return format_ast(doc)
    if isinstance(doc, Group):
        return format_group(doc)
    if isinstance(doc, Block):
        return format_node(doc)
    raise TypeError(f"Cannot format {type(doc).__name__}")

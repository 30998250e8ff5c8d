"""Data models for Liberty documents"""

from .ast import Block, Comment, ComplexAttribute, LibertyAst, Node, SimpleAttribute
from .liberty import Attribute, ComplexAttr, Group, Liberty, SimpleAttr
from .values import AnyValue, Bool, Expression, Number, NumberList, Text, Value

__all__ = [
    "Value",
    "AnyValue",
    "Bool",
    "Number",
    "NumberList",
    "Text",
    "Expression",
    "LibertyAst",
    "Node",
    "Block",
    "SimpleAttribute",
    "ComplexAttribute",
    "Comment",
    "Liberty",
    "Group",
    "Attribute",
    "SimpleAttr",
    "ComplexAttr",
]

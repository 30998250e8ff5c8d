"""Structured Liberty models.

This module defines the query-oriented view of a Liberty file. Compared with
the raw tree in ``ast.py``:

- attributes of a group live in one ordered mapping keyed by name, so a
  repeated name keeps only its latest value (at the position of the first
  occurrence);
- nested groups are kept in a list, in source order;
- comments are dropped.

Converting back with ``to_block``/``to_ast`` writes all attributes first and
then all subgroups.
"""

import logging
from typing import Annotated, Iterator, Literal, Optional, Union

from pydantic import BaseModel, Field

from .ast import Block, ComplexAttribute, LibertyAst, SimpleAttribute
from .values import AnyValue, Value

logger = logging.getLogger(__name__)


class SimpleAttr(BaseModel):
    """A ``name : value ;`` attribute stored in a Group."""

    attribute: Literal["simple"] = "simple"
    value: AnyValue


class ComplexAttr(BaseModel):
    """A ``name ( values ) ;`` attribute stored in a Group."""

    attribute: Literal["complex"] = "complex"
    values: list[AnyValue] = Field(default_factory=list)


Attribute = Annotated[Union[SimpleAttr, ComplexAttr], Field(discriminator="attribute")]


class Group(BaseModel):
    """A Liberty group (library, cell, pin, timing, ...).

    Attributes:
        kind: The group type.
        name: The group name (parameters joined with ", ").
        attributes: Ordered mapping from attribute name to SimpleAttr/ComplexAttr.
        subgroups: Nested groups in document order. Names need not be unique.
    """

    kind: str
    name: str = ""
    attributes: dict[str, Attribute] = Field(default_factory=dict)
    subgroups: list["Group"] = Field(default_factory=list)

    # === Conversion ===

    @classmethod
    def from_block(cls, block: Block) -> "Group":
        """Builds a Group from a raw Block, recursively."""
        group = cls(kind=block.kind, name=block.name)
        for child in block.children:
            if isinstance(child, SimpleAttribute):
                group._store(child.name, SimpleAttr(value=child.value))
            elif isinstance(child, ComplexAttribute):
                group._store(child.name, ComplexAttr(values=list(child.values)))
            elif isinstance(child, Block):
                group.subgroups.append(cls.from_block(child))
        return group

    def _store(self, name: str, attr: Union[SimpleAttr, ComplexAttr]) -> None:
        if name in self.attributes:
            logger.debug(f"Attribute '{name}' repeated in {self.kind}({self.name}), keeping latest")
        self.attributes[name] = attr

    def to_block(self) -> Block:
        """Builds a raw Block: attributes in mapping order, then subgroups."""
        children = []
        for name, attr in self.attributes.items():
            if isinstance(attr, SimpleAttr):
                children.append(SimpleAttribute(name=name, value=attr.value))
            else:
                children.append(ComplexAttribute(name=name, values=list(attr.values)))
        children.extend(group.to_block() for group in self.subgroups)
        return Block(kind=self.kind, name=self.name, children=children)

    # === Attributes ===

    def simple_attribute(self, name: str) -> Optional[Value]:
        """Returns the value of a simple attribute, or None.

        None is also returned when ``name`` is a complex attribute.
        """
        attr = self.attributes.get(name)
        if isinstance(attr, SimpleAttr):
            return attr.value
        return None

    def complex_attribute(self, name: str) -> Optional[list[Value]]:
        """Returns the value list of a complex attribute, or None.

        The returned list is the stored one; mutating it mutates the group.
        """
        attr = self.attributes.get(name)
        if isinstance(attr, ComplexAttr):
            return attr.values
        return None

    def iter_simple_attributes(self) -> Iterator[tuple[str, Value]]:
        for name, attr in self.attributes.items():
            if isinstance(attr, SimpleAttr):
                yield name, attr.value

    def iter_complex_attributes(self) -> Iterator[tuple[str, list[Value]]]:
        for name, attr in self.attributes.items():
            if isinstance(attr, ComplexAttr):
                yield name, attr.values

    def set_simple_attribute(self, name: str, value: Value) -> None:
        """Sets a simple attribute, keeping its position if the name exists."""
        self.attributes[name] = SimpleAttr(value=value)

    def set_complex_attribute(self, name: str, values: list[Value]) -> None:
        """Sets a complex attribute, keeping its position if the name exists."""
        self.attributes[name] = ComplexAttr(values=list(values))

    def remove_attribute(self, name: str) -> Optional[Attribute]:
        """Removes an attribute of either kind and returns it (None if absent)."""
        return self.attributes.pop(name, None)

    # === Subgroups ===

    def iter_subgroups(self) -> Iterator["Group"]:
        return iter(self.subgroups)

    def iter_subgroups_of_kind(self, kind: str) -> Iterator["Group"]:
        return (group for group in self.subgroups if group.kind == kind)

    def get_subgroup(self, kind: str, name: str) -> Optional["Group"]:
        """Returns the first subgroup of ``kind`` named ``name``, in document order."""
        return next(
            (group for group in self.iter_subgroups_of_kind(kind) if group.name == name),
            None,
        )

    def get_cell(self, name: str) -> Optional["Group"]:
        """Returns the first ``cell`` subgroup named ``name``."""
        return self.get_subgroup("cell", name)

    def get_pin(self, name: str) -> Optional["Group"]:
        """Returns the first ``pin`` subgroup named ``name``."""
        return self.get_subgroup("pin", name)

    def to_string(self) -> str:
        from ..writer import format_group

        return format_group(self)


class Liberty(BaseModel):
    """Top-level structured document: one Group per library."""

    libraries: list[Group] = Field(default_factory=list)

    @classmethod
    def from_ast(cls, ast: LibertyAst) -> "Liberty":
        """Converts a raw tree into the structured model."""
        return cls(libraries=[Group.from_block(block) for block in ast.libraries])

    def to_ast(self) -> LibertyAst:
        """Converts the structured model back into a raw tree (without comments)."""
        return LibertyAst(libraries=[group.to_block() for group in self.libraries])

    def get_library(self, name: str) -> Optional[Group]:
        """Returns the first library named ``name``."""
        return next((lib for lib in self.libraries if lib.name == name), None)

    def to_string(self) -> str:
        """Renders the model back to Liberty syntax."""
        from ..writer import format_liberty

        return format_liberty(self)

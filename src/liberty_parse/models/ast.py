"""Raw Liberty document tree.

The parser produces this tree directly. It keeps everything the grammar
recognizes inside a library, in source order: nested blocks, simple and
complex attributes (including repeated names) and comments.
"""

from typing import TYPE_CHECKING, Annotated, Literal, Union

from pydantic import BaseModel, Field

from .values import AnyValue

if TYPE_CHECKING:
    from .liberty import Liberty


class SimpleAttribute(BaseModel):
    """``name : value ;``"""

    node: Literal["simple_attribute"] = "simple_attribute"
    name: str
    value: AnyValue


class ComplexAttribute(BaseModel):
    """``name ( value, value, ... ) ;``"""

    node: Literal["complex_attribute"] = "complex_attribute"
    name: str
    values: list[AnyValue] = Field(default_factory=list)


class Comment(BaseModel):
    """``/* text */`` inside a block.

    The text is stored without the delimiters and without surrounding whitespace.
    """

    node: Literal["comment"] = "comment"
    text: str


class Block(BaseModel):
    """A named group: ``kind ( name ) { children }``.

    Attributes:
        kind: The group type, e.g. "library", "cell", "pin", "timing".
        name: The group parameters joined with ", " (may be empty).
        children: Attributes, nested blocks and comments in source order.
    """

    node: Literal["block"] = "block"
    kind: str
    name: str = ""
    children: list["Node"] = Field(default_factory=list)

    def blocks(self) -> list["Block"]:
        """Returns the nested blocks, in source order."""
        return [child for child in self.children if isinstance(child, Block)]


Node = Annotated[
    Union[Block, SimpleAttribute, ComplexAttribute, Comment],
    Field(discriminator="node"),
]

Block.model_rebuild()


class LibertyAst(BaseModel):
    """A parsed Liberty file: one Block per library, in source order."""

    libraries: list[Block] = Field(default_factory=list)

    def to_string(self) -> str:
        """Renders the tree back to Liberty syntax (comments included)."""
        from ..writer import format_ast

        return format_ast(self)

    def into_liberty(self) -> "Liberty":
        """Converts the tree into the structured model (drops comments)."""
        from .liberty import Liberty

        return Liberty.from_ast(self)

    @classmethod
    def from_liberty(cls, lib: "Liberty") -> "LibertyAst":
        """Builds a raw tree from the structured model."""
        return lib.to_ast()

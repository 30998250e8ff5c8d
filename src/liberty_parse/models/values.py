"""Liberty field values.

A field in a Liberty file holds one of five kinds of literal. Because the
syntax alone cannot tell enumerated keywords from formulas, both are kept as
an un-interpreted `Expression`.

All values are immutable pydantic models discriminated by their ``kind``, so
trees containing them dump to and load from JSON without losing the kind.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ValueKindError


class Value(BaseModel):
    """Base class for the five Liberty value kinds.

    The ``as_*`` accessors return the payload when the value holds the
    requested kind and raise ValueKindError otherwise; values are never
    coerced from one kind to another.
    """

    model_config = ConfigDict(frozen=True)

    kind: str

    def __init__(self, **data):
        if type(self) is Value:
            raise TypeError("Value is abstract; use Bool, Number, NumberList, Text or Expression")
        super().__init__(**data)

    def _expect(self, kind: str):
        if self.kind != kind:
            raise ValueKindError(kind, self.kind)
        return self.value

    def as_bool(self) -> bool:
        """Returns the payload of a Bool value."""
        return self._expect("bool")

    def as_number(self) -> float:
        """Returns the payload of a Number value."""
        return self._expect("number")

    def as_number_list(self) -> list[float]:
        """Returns a copy of the payload of a NumberList value."""
        return list(self._expect("number_list"))

    def as_text(self) -> str:
        """Returns the payload of a Text value."""
        return self._expect("text")

    def as_expression(self) -> str:
        """Returns the payload of an Expression value."""
        return self._expect("expression")


class Bool(Value):
    """Boolean value, parsed from the keywords ``true`` and ``false``."""

    kind: Literal["bool"] = "bool"
    value: bool

    def __init__(self, value: bool, **data):
        super().__init__(value=value, **data)


class Number(Value):
    """Floating point value.

    Liberty distinguishes integers and floats per field; the grammar does not,
    so every number is a float.
    """

    kind: Literal["number"] = "number"
    value: float

    def __init__(self, value: float, **data):
        super().__init__(value=value, **data)


class NumberList(Value):
    """Group of floats written as one quoted, comma-separated string.

    For example each row of ``values ("1.0, 2.0", "3.0, 4.0");``.
    """

    kind: Literal["number_list"] = "number_list"
    value: tuple[float, ...]

    def __init__(self, value, **data):
        super().__init__(value=tuple(value), **data)


class Text(Value):
    """String enclosed in double quotes (stored without the quotes)."""

    kind: Literal["text"] = "text"
    value: str

    def __init__(self, value: str, **data):
        super().__init__(value=value, **data)


class Expression(Value):
    """Identifier, keyword or arithmetic formula, kept verbatim."""

    kind: Literal["expression"] = "expression"
    value: str

    def __init__(self, value: str, **data):
        super().__init__(value=value, **data)


AnyValue = Annotated[
    Union[Bool, Number, NumberList, Text, Expression],
    Field(discriminator="kind"),
]

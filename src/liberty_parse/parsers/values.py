"""Liberty value grammar.

A field value is one of five literal kinds. They overlap syntactically (a
quoted string may hold a number list, a negative number is also a valid
expression operand), so they are tried in a fixed order:

1. quoted number list  ``"0.1, 0.2, 0.3"``   -> NumberList
2. quoted string       ``"1ns"``             -> Text
3. number followed by whitespace, ``,``, ``;``, ``)`` or the end -> Number
4. ``true`` / ``false``                      -> Bool
5. expression          ``A + 1.2``, ``nand2`` -> Expression (source text)

The terminator check in step 3 is what lets ``-345;`` be a number while
``-A`` falls through to the expression rule.
"""

import logging
import re
from contextlib import contextmanager
from typing import Iterator, TypeVar

from ..exceptions import GrammarError, Severity
from ..models.values import Bool, Expression, Number, NumberList, Text, Value
from . import diagnostics
from .base import BaseParser

logger = logging.getLogger(__name__)

T = TypeVar("T")

IDENTIFIER = re.compile(r"[A-Za-z]\w*")
FLOAT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
NUMBER_TERMINATORS = frozenset(",; \t\r\n)")

DEFAULT_MAX_DEPTH = 100

_QUOTED_CONTENT = re.compile(r'[^"]+')
_OPERATORS = re.compile(r"[-+*/&|^]+")
_UNARY = re.compile(r"[-!]+")
_BOOLEANS = {"true": True, "false": False}


class ValueGrammar(BaseParser[T]):
    """Grammar rules for identifiers and field values.

    Shared by ValueParser (a single value) and LibertyParser (whole files).

    Args:
        max_depth: Maximum nesting of groups and parenthesized expressions
            together. Deeper input is rejected with a ParseError instead of
            exhausting the interpreter stack.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        super().__init__()
        self.max_depth = max_depth
        self._depth = 0

    def _init_text(self, text: str) -> None:
        super()._init_text(text)
        self._depth = 0

    @contextmanager
    def _nested(self, what: str) -> Iterator[None]:
        """Counts one nesting level for the duration of the block."""
        self._depth += 1
        try:
            if self._depth > self.max_depth:
                raise self._error(
                    f"{what} nesting deeper than {self.max_depth} levels",
                    severity=Severity.FAILURE,
                )
            yield
        finally:
            self._depth -= 1

    def _identifier(self) -> str:
        return self._match(IDENTIFIER, "identifier")

    def _quoted_floats(self) -> list[float]:
        """``"`` float (``,`` float)* ``"``"""
        with self._context("quoted floats"):
            self._expect('"')
            numbers = self._separated_list(self._list_float, self._list_comma)
            self._expect('"')
            return numbers

    def _list_float(self) -> float:
        self._skip_whitespace()
        return float(self._match(FLOAT, "number"))

    def _list_comma(self) -> None:
        self._skip_whitespace()
        self._expect(",")

    def _quoted_string(self) -> str:
        """``"`` any characters except ``"`` ``"``; commits after the opening quote."""
        with self._context("quoted string"):
            self._expect('"')
            with self._commit():
                content = self._match(_QUOTED_CONTENT, "string content")
                self._expect('"')
            return content

    def _number(self) -> float:
        """A number that is directly followed by a value terminator."""
        with self._context("number"):
            number = float(self._match(FLOAT, "number"))
            nxt = self._peek()
            if nxt is not None and nxt not in NUMBER_TERMINATORS:
                raise self._error("expected number terminator")
            return number

    def _boolean(self) -> bool:
        with self._context("boolean"):
            start = self._pos
            word = self._identifier()
            if word not in _BOOLEANS:
                raise self._error("expected 'true' or 'false'", offset=start)
            return _BOOLEANS[word]

    def _expression(self) -> str:
        """operand (operator operand)*, returned as source text."""
        with self._context("expression"):
            start = self._pos
            self._operand()
            while True:
                before = self._pos
                try:
                    self._skip_whitespace()
                    self._match(_OPERATORS, "operator")
                    self._operand()
                except GrammarError as err:
                    if err.fatal:
                        raise
                    self._pos = before
                    break
            return self._text[start : self._pos]

    def _operand(self) -> None:
        """[unary] ( '(' expression ')' | identifier | number )"""
        self._skip_whitespace()
        self._opt(lambda: self._match(_UNARY, "unary operator"))
        if self._peek() == "(":
            self._consume()
            with self._commit(), self._nested("parenthesis"):
                self._expression()
                self._skip_whitespace()
                self._expect(")")
            return
        m = IDENTIFIER.match(self._text, self._pos) or FLOAT.match(self._text, self._pos)
        if m is None:
            raise self._error("expected identifier, number or '('")
        self._pos = m.end()

    def _value(self) -> Value:
        """Any field value, disambiguated in the documented order."""
        with self._context("simple attr value"):
            self._skip_whitespace()
            return self._alt(
                lambda: NumberList(self._quoted_floats()),
                lambda: Text(self._quoted_string()),
                lambda: Number(self._number()),
                lambda: Bool(self._boolean()),
                lambda: Expression(self._expression()),
            )


class ValueParser(ValueGrammar[Value]):
    """Parses a single Liberty field value such as ``80``, ``"1ns"`` or ``A + B``."""

    def parse_string(self, content: str) -> Value:
        """Parses one value; surrounding whitespace is allowed, anything else is an error.

        Raises:
            ParseError: If the content is not exactly one value.
        """
        self._init_text(content)
        try:
            value = self._value()
            self._skip_whitespace()
            if not self._at_end():
                raise self._error("expected end of value")
        except GrammarError as err:
            raise diagnostics.render(content, err) from None
        logger.debug(f"Parsed value {value!r}")
        return value

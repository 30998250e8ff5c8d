"""Liberty (.lib) file parser.

Liberty is a hierarchical attribute/group format used for timing and power
characterization of standard cells::

    library(sample) {
      /* units */
      time_unit : "1ns";
      capacitive_load_unit (1, pf);
      cell(AND2) {
        area : 1;
        pin(o) {
          timing() {
            cell_rise(delay_temp_3x3) {
              values ("0.1, 0.2, 0.3", \\
                      "0.11, 0.21, 0.31");
            }
          }
        }
      }
    }

The parser is a hand-written recursive descent over the raw text. It builds
the raw tree (``LibertyAst``) and keeps comments, repeated attributes and
source order. Rules that have seen their distinguishing token (``:`` of a
simple attribute, ``{`` of a group) commit: errors after that point are
reported where they happen instead of being retried as another rule.

Reference: Liberty User Guide (Synopsys)
"""

import logging
import re
from collections import Counter
from pathlib import Path

from ..exceptions import GrammarError, Severity
from ..models.ast import Block, Comment, ComplexAttribute, LibertyAst, Node, SimpleAttribute
from ..models.values import Value
from . import diagnostics
from .values import DEFAULT_MAX_DEPTH, ValueGrammar

logger = logging.getLogger(__name__)

# Backslash-newline line continuation, optionally preceded by whitespace
_CONTINUATION = re.compile(r"[ \t\r\n]*\\\r?\n")

# Separator between complex attribute values
_VALUE_SEPARATOR = re.compile(
    r"""
    [ \t\r\n]*
    (?:,[ \t\r\n]*\\\r?\n           # comma, then continuation
      |,                            # plain comma
      |\\\r?\n[ \t\r\n]*,           # continuation, then comma
    )
    """,
    re.VERBOSE,
)

# Quoted group parameter, kept with its quotes
_QUOTED_PARAM = re.compile(r'"[^"]*"')


class LibertyParser(ValueGrammar[LibertyAst]):
    """Liberty parser producing the raw document tree.

    Args:
        max_depth: Maximum nesting of groups and parenthesized expressions.
            Deeper input is rejected with a ParseError instead of exhausting
            the interpreter stack.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        super().__init__(max_depth)

    def parse(self, path: Path, encoding: str = "utf-8", errors: str = "strict") -> LibertyAst:
        """Parses a Liberty file from a given path.

        Args:
            path: Path to the Liberty file (``.lib`` or ``.lib.gz``).
            encoding: Text encoding of the file.
            errors: Error handling scheme for encoding errors.

        Returns:
            The raw document tree.
        """
        logger.info(f"Parsing Liberty file: {path}")
        return super().parse(path, encoding=encoding, errors=errors)

    def parse_string(self, content: str) -> LibertyAst:
        """Parses Liberty content from a string.

        Args:
            content: The complete Liberty file content.

        Returns:
            The raw document tree, one Block per library.

        Raises:
            ParseError: If the content is not valid Liberty syntax.
        """
        logger.debug(f"Parsing content string, length: {len(content)}")
        self._init_text(content)
        try:
            libraries = self._libraries()
        except GrammarError as err:
            error = diagnostics.render(content, err)
            logger.debug(f"Parse failed: {error.message} at line {error.line}")
            raise error from None
        logger.debug(f"Parsed {len(libraries)} library group(s)")
        return LibertyAst(libraries=libraries)

    # === Top level ===

    def _libraries(self) -> list[Block]:
        """(comment | group)* followed only by whitespace; top-level comments are dropped."""
        with self._context("parse_libs"):
            items, stop = self._many0(lambda: self._alt(self._outer_comment, self._library))
            self._skip_whitespace()
            if not self._at_end():
                err = self._error("expected library group or comment")
                raise stop if stop is not None and stop.offset > err.offset else err
            return [item for item in items if isinstance(item, Block)]

    def _outer_comment(self) -> Comment:
        with self._context("outer comment"):
            self._skip_whitespace()
            comment = self._comment()
            self._skip_whitespace()
            return comment

    def _library(self) -> Block:
        with self._context("parse_lib"):
            self._skip_whitespace()
            return self._group()

    # === Groups ===

    def _group(self) -> Block:
        """kind ( param, ... ) { body }"""
        with self._context("parsing group"):
            kind = self._identifier()
            self._skip_whitespace()
            self._expect("(")
            params = self._separated_list(self._group_param, self._list_comma)
            self._skip_whitespace()
            self._expect(")")
            self._skip_whitespace()
            self._expect("{")
            with self._commit(), self._nested("group"):
                children = self._group_body()
            return Block(kind=kind, name=", ".join(params), children=children)

    def _group_param(self) -> str:
        self._skip_whitespace()
        if self._peek() == '"':
            return self._match(_QUOTED_PARAM, "quoted string")
        return self._identifier()

    def _group_body(self) -> list[Node]:
        """Body items up to and including the closing brace."""
        with self._context("group body"):
            children, stop = self._many0(self._body_item)
            self._skip_whitespace()
            if self._peek() != "}":
                err = self._error("expected '}'")
                # report the item that stopped the body if it got further
                raise stop if stop is not None and stop.offset > err.offset else err
            self._consume()
            return children

    def _body_item(self) -> Node:
        self._skip_whitespace()
        return self._alt(
            self._comment,
            self._group,
            self._simple_attribute,
            self._complex_attribute,
        )

    def _comment(self) -> Comment:
        """/* ... */ (the text is stored stripped, without delimiters)."""
        with self._context("comment"):
            self._expect("/*")
            end = self._text.find("*/", self._pos)
            if end == -1:
                raise self._error("expected '*/'", offset=self._length, severity=Severity.FAILURE)
            text = self._text[self._pos : end].strip()
            self._pos = end + 2
            return Comment(text=text)

    # === Attributes ===

    def _simple_attribute(self) -> SimpleAttribute:
        """name : value ;"""
        with self._context("simple attr"):
            name = self._identifier()
            self._skip_whitespace()
            self._expect(":")
            with self._commit():
                value = self._value()
                self._skip_whitespace()
                self._expect(";")
            return SimpleAttribute(name=name, value=value)

    def _complex_attribute(self) -> ComplexAttribute:
        """name ( value, ... ) [;]"""
        with self._context("complex attr"):
            name = self._identifier()
            values = self._complex_values()
            self._skip_whitespace()
            self._skip_semicolon()
            return ComplexAttribute(name=name, values=values)

    def _complex_values(self) -> list[Value]:
        """( [\\] value (separator value)* [\\] )"""
        with self._context("complex values"):
            self._skip_whitespace()
            self._expect("(")
            self._opt(self._continuation)
            values = self._separated_list(self._value, self._value_separator)
            self._opt(self._continuation)
            self._skip_whitespace()
            self._expect(")")
            return values

    def _continuation(self) -> str:
        return self._match(_CONTINUATION, "line continuation")

    def _value_separator(self) -> str:
        return self._match(_VALUE_SEPARATOR, "','")

    # === Validation ===

    def validate(self, data: LibertyAst) -> list[str]:
        """Reports repeated names that the structured model would hide.

        Checks every block for attribute names given more than once and for
        ``cell``/``pin`` subgroups sharing a name. The tree is not modified.

        Args:
            data: A parsed document.

        Returns:
            A list of warning messages.
        """
        warnings = []
        stack = list(reversed(data.libraries))
        while stack:
            block = stack.pop()
            where = f"{block.kind}({block.name})"

            attr_names = Counter(
                child.name
                for child in block.children
                if isinstance(child, (SimpleAttribute, ComplexAttribute))
            )
            for name, count in attr_names.items():
                if count > 1:
                    warnings.append(f"Attribute '{name}' appears {count} times in {where}")

            nested = block.blocks()
            for kind in ("cell", "pin"):
                names = Counter(b.name for b in nested if b.kind == kind)
                for name, count in names.items():
                    if count > 1:
                        warnings.append(f"{count} {kind} groups named '{name}' in {where}")

            stack.extend(reversed(nested))

        if warnings:
            logger.warning(f"Validation warnings: {warnings}")
        return warnings

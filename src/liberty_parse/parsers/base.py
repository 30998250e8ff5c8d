"""Base parser module with shared cursor and combinator infrastructure.

Provides the abstract base class for the Liberty grammars: a character cursor
over an in-memory buffer, the labeled context stack used for diagnostics,
and the small set of combinators (alternatives, optional, repetition,
separated lists, commit) the recursive descent rules are built from.
"""

import gzip
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generic, Iterator, Optional, TypeVar

from ..exceptions import GrammarError, Severity

T = TypeVar("T")
R = TypeVar("R")

_WHITESPACE = re.compile(r"[ \t\r\n]*")


class BaseParser(ABC, Generic[T]):
    """Abstract base class for the Liberty grammars.

    Grammar rules are methods that read from ``self._pos`` and either return
    a result (having advanced the cursor) or raise GrammarError. A rule that
    fails with Severity.ERROR may leave the cursor anywhere; the combinator
    that called it restores the position before trying something else. A
    rule that fails with Severity.FAILURE has committed and is never retried.

    Attributes:
        Generic[T]: The type returned by ``parse_string``.
    """

    def __init__(self):
        """Initializes the parser with an empty buffer."""
        self._text: str = ""
        self._pos: int = 0
        self._length: int = 0
        self._contexts: list[tuple[str, int]] = []

    def _read_file(self, path: Path, encoding: str = "utf-8", errors: str = "strict") -> str:
        """Reads file content, automatically handling .gz compression.

        Args:
            path: Path to the file.
            encoding: Text encoding (default: utf-8).
            errors: Error handling scheme for encoding errors (default: strict).

        Returns:
            The content of the file as a string.
        """
        if path.suffix == ".gz":
            with gzip.open(path, mode="rt", encoding=encoding, errors=errors) as f:
                return f.read()
        return path.read_text(encoding=encoding, errors=errors)

    def _init_text(self, text: str) -> None:
        """Resets the cursor to the start of a new buffer."""
        self._text = text
        self._pos = 0
        self._length = len(text)
        self._contexts = []

    # === Cursor ===

    def _peek(self, offset: int = 0) -> Optional[str]:
        """Returns the character at the given offset from the cursor, or None past the end."""
        idx = self._pos + offset
        return self._text[idx] if idx < self._length else None

    def _consume(self) -> Optional[str]:
        """Consumes and returns the current character (None at the end)."""
        if self._pos >= self._length:
            return None
        char = self._text[self._pos]
        self._pos += 1
        return char

    def _at_end(self) -> bool:
        return self._pos >= self._length

    def _skip_whitespace(self) -> None:
        self._pos = _WHITESPACE.match(self._text, self._pos).end()

    def _skip_semicolon(self) -> None:
        """Consumes a semicolon if present at the current position."""
        if self._peek() == ";":
            self._consume()

    def _expect(self, expected: str) -> str:
        """Consumes ``expected`` at the cursor.

        Raises:
            GrammarError: If the input does not continue with ``expected``.
        """
        if not self._text.startswith(expected, self._pos):
            raise self._error(f"expected '{expected}'")
        self._pos += len(expected)
        return expected

    def _match(self, pattern: re.Pattern, what: str) -> str:
        """Consumes a regex match at the cursor and returns the matched text.

        Raises:
            GrammarError: If the pattern does not match here.
        """
        m = pattern.match(self._text, self._pos)
        if m is None:
            raise self._error(f"expected {what}")
        self._pos = m.end()
        return m.group(0)

    # === Diagnostics ===

    def _error(
        self, message: str, offset: Optional[int] = None, severity: Severity = Severity.ERROR
    ) -> GrammarError:
        """Builds a GrammarError at the cursor (or ``offset``) with the current context stack."""
        return GrammarError(
            self._pos if offset is None else offset,
            message,
            tuple(self._contexts),
            severity,
        )

    @contextmanager
    def _context(self, label: str) -> Iterator[None]:
        """Pushes a context label for the duration of a rule."""
        self._contexts.append((label, self._pos))
        try:
            yield
        finally:
            self._contexts.pop()

    @contextmanager
    def _commit(self) -> Iterator[None]:
        """Promotes any error raised inside the block to a fatal failure."""
        try:
            yield
        except GrammarError as err:
            raise err.into_failure() from None

    # === Combinators ===

    def _alt(self, *rules: Callable[[], R]) -> R:
        """Tries each rule at the same position; the first success wins.

        A fatal failure is re-raised at once. If every rule fails recoverably,
        the error that got furthest into the input is raised.
        """
        start = self._pos
        best: Optional[GrammarError] = None
        for rule in rules:
            self._pos = start
            try:
                return rule()
            except GrammarError as err:
                if err.fatal:
                    raise
                if best is None or err.offset >= best.offset:
                    best = err
        self._pos = start
        raise best

    def _opt(self, rule: Callable[[], R]) -> Optional[R]:
        """Applies a rule if it matches; otherwise leaves the cursor alone and returns None."""
        start = self._pos
        try:
            return rule()
        except GrammarError as err:
            if err.fatal:
                raise
            self._pos = start
            return None

    def _many0(self, rule: Callable[[], R]) -> tuple[list[R], Optional[GrammarError]]:
        """Applies a rule until it fails recoverably or stops consuming input.

        Returns:
            The results and the recoverable error that ended the repetition
            (None if it ended because nothing was consumed).
        """
        items: list[R] = []
        while True:
            start = self._pos
            try:
                item = rule()
            except GrammarError as err:
                if err.fatal:
                    raise
                self._pos = start
                return items, err
            if self._pos == start:
                return items, None
            items.append(item)

    def _separated_list(
        self, item: Callable[[], R], separator: Callable[[], object]
    ) -> list[R]:
        """Parses zero or more items separated by ``separator``.

        A separator that is not followed by an item is left unconsumed.
        """
        start = self._pos
        try:
            items = [item()]
        except GrammarError as err:
            if err.fatal:
                raise
            self._pos = start
            return []
        while True:
            before = self._pos
            try:
                separator()
                items.append(item())
            except GrammarError as err:
                if err.fatal:
                    raise
                self._pos = before
                return items

    # === Entry points ===

    def parse(self, path: Path, encoding: str = "utf-8", errors: str = "strict") -> T:
        """Parses a file from a given path.

        Args:
            path: Path to the file (``.gz`` files are decompressed).
            encoding: Text encoding of the file.
            errors: Error handling scheme for encoding errors.

        Returns:
            The parse result for the whole file.
        """
        return self.parse_string(self._read_file(Path(path), encoding=encoding, errors=errors))

    @abstractmethod
    def parse_string(self, content: str) -> T:
        """Parses a complete in-memory buffer.

        Args:
            content: The text to parse.

        Returns:
            The parse result.

        Raises:
            ParseError: If the buffer is not valid.
        """
        ...

    def validate(self, data: T) -> list[str]:
        """Checks a parse result for suspicious content.

        Subclasses override this to provide format-specific checks.

        Args:
            data: The parse result.

        Returns:
            A list of warning messages (empty list if nothing was found).
        """
        return []

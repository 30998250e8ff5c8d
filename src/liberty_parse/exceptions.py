"""liberty-parse Exceptions.

This module defines the exceptions raised by the Liberty grammar, the public
parse error returned to callers, and the error raised by value accessors.
"""

from enum import Enum
from typing import Optional


class LibertyError(Exception):
    """Base class for every error raised by liberty-parse."""


class Severity(str, Enum):
    """Severity of a grammar error.

    - ERROR: the rule did not match; an enclosing alternative may try another rule.
    - FAILURE: the rule had committed; no alternative may recover from it.
    """

    ERROR = "error"
    FAILURE = "failure"


class GrammarError(LibertyError):
    """Raised by a grammar rule that could not match at the current offset.

    Attributes:
        offset: Position in the input where the rule failed.
        message: What the rule expected to find.
        contexts: Snapshot of the (label, offset) context stack at the failure.
        severity: Whether enclosing alternatives may backtrack past this error.
    """

    def __init__(
        self,
        offset: int,
        message: str,
        contexts: tuple[tuple[str, int], ...] = (),
        severity: Severity = Severity.ERROR,
    ):
        self.offset = offset
        self.message = message
        self.contexts = contexts
        self.severity = severity
        super().__init__(f"{message} at offset {offset}")

    @property
    def fatal(self) -> bool:
        """True if the error must not be swallowed by an alternative."""
        return self.severity is Severity.FAILURE

    def into_failure(self) -> "GrammarError":
        """Returns this error promoted to a fatal failure."""
        if self.fatal:
            return self
        return GrammarError(self.offset, self.message, self.contexts, Severity.FAILURE)


class ParseError(LibertyError, ValueError):
    """Raised when a Liberty buffer cannot be parsed.

    Built from the innermost GrammarError by the diagnostics module. The
    input buffer itself is not retained, only the excerpt around the failure.

    Attributes:
        message: What the failing rule expected.
        offset: Character offset of the failure.
        line: 1-based line of the failure.
        column: 1-based column of the failure.
        excerpt: The source line containing the failure.
        contexts: List of (label, line, column) for every rule that was active,
            innermost first.
        rendered: The full human-readable report.
    """

    def __init__(
        self,
        message: str,
        offset: int,
        line: int,
        column: int,
        excerpt: str = "",
        contexts: Optional[list[tuple[str, int, int]]] = None,
        rendered: Optional[str] = None,
    ):
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column
        self.excerpt = excerpt
        self.contexts = contexts or []
        self.rendered = rendered or f"{message} at line {line}, column {column}"
        super().__init__(self.rendered)

    def context_labels(self) -> list[str]:
        """Returns the context labels, innermost first."""
        return [label for label, _, _ in self.contexts]


class ValueKindError(LibertyError, TypeError):
    """Raised when a Value is asked for a kind it does not hold.

    Attributes:
        expected: The kind that was requested.
        actual: The kind the value holds.
    """

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected a {expected} value, got {actual}")

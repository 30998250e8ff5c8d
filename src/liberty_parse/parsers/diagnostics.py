"""Error diagnostics for the Liberty grammar.

Turns the innermost GrammarError of a failed parse into a ParseError whose
message points at the failing line and column and lists the grammar rules
that were active at that point, for example::

    expected ';' at line 3, column 15
        3 | attr_name : a b ;
          |               ^
    while parsing:
        simple attr (line 3, column 1)
        parsing group (line 1, column 1)
"""

from ..exceptions import GrammarError, ParseError


def line_col(text: str, offset: int) -> tuple[int, int]:
    """Returns the 1-based (line, column) of an offset in the text."""
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def source_line(text: str, offset: int) -> str:
    """Returns the line containing ``offset``, without its line ending."""
    offset = max(0, min(offset, len(text)))
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    if end == -1:
        end = len(text)
    return text[start:end].rstrip("\r")


def render(text: str, error: GrammarError) -> ParseError:
    """Builds the public ParseError for a grammar error.

    Args:
        text: The buffer that was being parsed.
        error: The error that stopped the parse.

    Returns:
        A ParseError carrying position, excerpt and context stack.
    """
    line, column = line_col(text, error.offset)
    excerpt = source_line(text, error.offset)

    message = error.message
    if error.offset >= len(text):
        message = f"{message} (unexpected end of input)"

    contexts = []
    for label, offset in reversed(error.contexts):
        ctx_line, ctx_column = line_col(text, offset)
        contexts.append((label, ctx_line, ctx_column))

    gutter = str(line)
    # keep tabs so the caret lines up under the excerpt
    pad = "".join(c if c == "\t" else " " for c in excerpt[: column - 1])
    lines = [
        f"{message} at line {line}, column {column}",
        f"    {gutter} | {excerpt}",
        f"    {' ' * len(gutter)} | {pad}^",
    ]
    if contexts:
        lines.append("while parsing:")
        lines.extend(f"    {label} (line {ln}, column {col})" for label, ln, col in contexts)

    return ParseError(
        message=message,
        offset=error.offset,
        line=line,
        column=column,
        excerpt=excerpt,
        contexts=contexts,
        rendered="\n".join(lines),
    )

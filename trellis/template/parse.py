"""
Markup Parser

Turns indentation-based markup into ComponentTemplate trees.

Grammar:

    document   := { blank | comment | component }
    component  := indent identifier [ "." identifier ] [ attributes ] newline
    attributes := "{" [ entry { "," entry } [ "," ] ] "}"      (may span lines)
    entry      := identifier ":" value [ conditional ]
    value      := string | number | percentage | tuple | "_"
                | "#{" script "}" | "${" script "}"
    tuple      := "(" [ value { "," value } ] ")"
    conditional:= "?{" script "}" | "?" script "?"

Indentation is counted in spaces, a tab counts as 4, and every level is
4 spaces. Comments are lines whose first non-blank character is `#`.
"""

from __future__ import annotations
from typing import List, Optional, Tuple

from trellis.errors import ParseError
from trellis.template.component import ComponentTemplate, TemplateAttribute, _PendingComponent
from trellis.template.value import TemplateValue

INDENT_WIDTH = 4
TAB_WIDTH = 4

_IDENTIFIER_START = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
_IDENTIFIER_CHARS = _IDENTIFIER_START + "0123456789-"
_DIGITS = "0123456789"


# =============================================================================
# Document
# =============================================================================

def parse_document(text: str) -> List[ComponentTemplate]:
    """
    Parse markup into its top-level components.

    Nesting follows indentation: a component one level deeper than the
    previous one is its child, one at the same level is its sibling.
    """
    scanner = _Scanner(text)

    components: List[_PendingComponent] = []
    parent_stack: List[_PendingComponent] = []
    last_indentation = 0

    while True:
        entry = _parse_component(scanner)
        if entry is None:
            break
        component, indentation = entry

        # The very first component has to start at the root
        if not components and not parent_stack and indentation != 0:
            raise ParseError("First component starts at wrong indentation", component.line)

        if indentation == last_indentation:
            # Same level, the previous component is our sibling
            _finish_sibling(parent_stack, components)
        elif indentation < last_indentation:
            # Unwind back to the level we're at, closing that level's sibling too
            for _ in range(last_indentation - indentation + 1):
                _finish_sibling(parent_stack, components)
        elif indentation - last_indentation > 1:
            raise ParseError("Excessive increase in indentation", component.line)

        parent_stack.append(component)
        last_indentation = indentation

    # Whatever is left open is one nested chain
    last_component: Optional[_PendingComponent] = None
    for component in reversed(parent_stack):
        if last_component is not None:
            component.children.append(last_component)
        last_component = component
    if last_component is not None:
        components.append(last_component)

    return [component.build() for component in components]


def _finish_sibling(parent_stack: List[_PendingComponent], components: List[_PendingComponent]):
    if not parent_stack:
        return
    sibling = parent_stack.pop()
    if parent_stack:
        parent_stack[-1].children.append(sibling)
    else:
        components.append(sibling)


# =============================================================================
# Scanner
# =============================================================================

class _Scanner:
    """Character cursor over the document, tracking line and column."""

    def __init__(self, text: str):
        self.text = text.replace("\r\n", "\n").replace("\r", "\n")
        self.pos = 0
        self.line = 1
        self._line_start = 0

    @property
    def column(self) -> int:
        return self.pos - self._line_start + 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.text[i] if i < len(self.text) else ""

    def advance(self) -> str:
        c = self.text[self.pos]
        self.pos += 1
        if c == "\n":
            self.line += 1
            self._line_start = self.pos
        return c

    def skip_inline_space(self):
        while self.peek() in (" ", "\t") and not self.at_end():
            self.advance()

    def skip_space(self):
        while self.peek() in (" ", "\t", "\n") and not self.at_end():
            self.advance()

    def skip_line(self):
        while not self.at_end() and self.peek() != "\n":
            self.advance()
        if not self.at_end():
            self.advance()

    def expect(self, char: str):
        if self.peek() != char:
            raise self.error(f"Expected '{char}' but found {self.describe()}")
        self.advance()

    def describe(self) -> str:
        c = self.peek()
        if c == "":
            return "end of input"
        if c == "\n":
            return "end of line"
        return f"'{c}'"

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.line, self.column)


# =============================================================================
# Components
# =============================================================================

def _parse_component(scanner: _Scanner) -> Optional[Tuple[_PendingComponent, int]]:
    """Read the next component line, or None at end of input."""
    while not scanner.at_end():
        spacing = _read_indentation(scanner)
        c = scanner.peek()
        if c in ("\n", ""):
            scanner.skip_line()
            continue
        if c == "#":
            scanner.skip_line()
            continue
        break
    else:
        return None

    if spacing % INDENT_WIDTH != 0:
        raise ParseError(
            f"Bad amount of indentation spacing, must be divisible by {INDENT_WIDTH}",
            scanner.line,
        )

    line = scanner.line
    class_name = _parse_identifier(scanner, "component class")

    style_class = None
    if scanner.peek() == ".":
        scanner.advance()
        style_class = _parse_identifier(scanner, "style class")

    scanner.skip_inline_space()
    attributes: List[TemplateAttribute] = []
    if scanner.peek() == "{":
        attributes = _parse_attributes(scanner)
        scanner.skip_inline_space()

    if scanner.peek() not in ("\n", ""):
        raise scanner.error(f"Unexpected {scanner.describe()} after component")
    scanner.skip_line()

    return _PendingComponent(class_name, style_class, attributes, line), spacing // INDENT_WIDTH


def _read_indentation(scanner: _Scanner) -> int:
    spacing = 0
    while True:
        c = scanner.peek()
        if c == " ":
            spacing += 1
        elif c == "\t":
            spacing += TAB_WIDTH
        else:
            return spacing
        scanner.advance()


def _parse_identifier(scanner: _Scanner, what: str) -> str:
    if scanner.peek() == "" or scanner.peek() not in _IDENTIFIER_START:
        raise scanner.error(f"Expected {what} name but found {scanner.describe()}")
    start = scanner.pos
    while scanner.peek() != "" and scanner.peek() in _IDENTIFIER_CHARS:
        scanner.advance()
    return scanner.text[start:scanner.pos]


# =============================================================================
# Attributes
# =============================================================================

def _parse_attributes(scanner: _Scanner) -> List[TemplateAttribute]:
    scanner.expect("{")
    attributes: List[TemplateAttribute] = []

    scanner.skip_space()
    while scanner.peek() != "}":
        if scanner.at_end():
            raise scanner.error("Unterminated attribute list")

        key = _parse_identifier(scanner, "attribute")
        scanner.skip_space()
        scanner.expect(":")
        scanner.skip_space()
        value = _parse_value(scanner)
        scanner.skip_space()

        conditional = None
        if scanner.peek() == "?":
            conditional = _parse_conditional(scanner)
            scanner.skip_space()

        # Duplicate keys are kept, resolution picks the last one
        attributes.append(TemplateAttribute(key, value, conditional))

        if scanner.peek() == ",":
            scanner.advance()
            scanner.skip_space()
        elif scanner.peek() != "}":
            raise scanner.error(f"Expected ',' or '}}' but found {scanner.describe()}")

    scanner.advance()
    return attributes


def _parse_conditional(scanner: _Scanner) -> str:
    scanner.expect("?")
    if scanner.peek() == "{":
        scanner.advance()
        return _read_script(scanner)

    start = scanner.pos
    while scanner.peek() != "?":
        if scanner.peek() in ("\n", ""):
            raise scanner.error("Unterminated conditional")
        scanner.advance()
    source = scanner.text[start:scanner.pos]
    scanner.advance()
    return source.strip()


# =============================================================================
# Values
# =============================================================================

def _parse_value(scanner: _Scanner) -> TemplateValue:
    c = scanner.peek()

    if c == "\"":
        return TemplateValue.of_string(_parse_string(scanner))

    if c == "(":
        return _parse_tuple(scanner)

    if c == "_" and scanner.peek(1) not in _IDENTIFIER_CHARS:
        scanner.advance()
        return TemplateValue.default()

    if c in ("#", "$") and scanner.peek(1) == "{":
        scanner.advance()
        scanner.advance()
        source = _read_script(scanner)
        if c == "#":
            return TemplateValue.of_script(source)
        return TemplateValue.of_statement(source)

    if c == "-" or (c != "" and c in _DIGITS):
        return _parse_number(scanner)

    raise scanner.error(f"Expected a value but found {scanner.describe()}")


def _parse_string(scanner: _Scanner) -> str:
    scanner.expect("\"")
    chars: List[str] = []
    escapes = {"n": "\n", "t": "\t", "\"": "\"", "\\": "\\"}

    while scanner.peek() != "\"":
        c = scanner.peek()
        if c in ("", "\n"):
            raise scanner.error("Unterminated string")
        scanner.advance()
        if c == "\\":
            escaped = scanner.peek()
            if escaped not in escapes or escaped == "":
                raise scanner.error(f"Unknown escape sequence \\{escaped}")
            scanner.advance()
            chars.append(escapes[escaped])
        else:
            chars.append(c)

    scanner.advance()
    return "".join(chars)


def _parse_tuple(scanner: _Scanner) -> TemplateValue:
    scanner.expect("(")
    values: List[TemplateValue] = []

    scanner.skip_space()
    while scanner.peek() != ")":
        if scanner.at_end():
            raise scanner.error("Unterminated tuple")
        values.append(_parse_value(scanner))
        scanner.skip_space()
        if scanner.peek() == ",":
            scanner.advance()
            scanner.skip_space()
        elif scanner.peek() != ")":
            raise scanner.error(f"Expected ',' or ')' but found {scanner.describe()}")

    scanner.advance()
    return TemplateValue.of_tuple(*values)


def _parse_number(scanner: _Scanner) -> TemplateValue:
    start = scanner.pos
    if scanner.peek() == "-":
        scanner.advance()

    if scanner.peek() == "" or scanner.peek() not in _DIGITS:
        raise scanner.error(f"Expected a digit but found {scanner.describe()}")
    while scanner.peek() != "" and scanner.peek() in _DIGITS:
        scanner.advance()

    is_float = False
    if scanner.peek() == ".":
        is_float = True
        scanner.advance()
        if scanner.peek() == "" or scanner.peek() not in _DIGITS:
            raise scanner.error("Expected a digit after decimal point")
        while scanner.peek() != "" and scanner.peek() in _DIGITS:
            scanner.advance()

    text = scanner.text[start:scanner.pos]
    number = float(text) if is_float else int(text)

    if scanner.peek() == "%":
        scanner.advance()
        return TemplateValue.of_percentage(number)
    if is_float:
        return TemplateValue.of_float(number)
    return TemplateValue.of_integer(number)


def _read_script(scanner: _Scanner) -> str:
    """Read script source up to the brace closing an already consumed `{`."""
    start = scanner.pos
    depth = 1
    quote = None

    while True:
        c = scanner.peek()
        if c == "":
            raise scanner.error("Unterminated script")
        if quote is not None:
            if c == "\\":
                scanner.advance()
            elif c == quote:
                quote = None
        elif c in ("\"", "'"):
            quote = c
        elif c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                break
        scanner.advance()

    source = scanner.text[start:scanner.pos]
    scanner.advance()
    return source.strip()

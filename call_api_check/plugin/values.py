"""
Plugin Parameter Values.

Typed representation of one plugin parameter value, and the lexical
parser that infers the type from a single command-line token.

The grammar follows what a PowerShell command line would accept for an
argument, which is what the daemon's plugin dispatcher expects:

    argument : element (',' element)* [',']
    element  : scalar | array
    array    : '[' [argument] ']' | '@(' [argument] ')'
    scalar   : quoted text | '(...)' group | bare word

Bare words become Switch ($True/$False), Number, or Text. Quoted text
and parenthesized groups are always Text. A backtick escapes the next
character.
"""

import re
from dataclasses import dataclass
from typing import Any

_INTEGER = re.compile(r"[+-]?\d+")
_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_BOOLEANS = {"$true": True, "$false": False}


class ValueSyntaxError(ValueError):
    """Raised when a token cannot be parsed as a parameter value."""


@dataclass(frozen=True)
class Switch:
    """Boolean switch. A flag without a value is Switch(True)."""

    value: bool = True

    def to_json(self) -> bool:
        return self.value


@dataclass(frozen=True)
class Text:
    value: str

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True)
class Number:
    value: int | float

    @classmethod
    def parse(cls, token: str) -> "Number | None":
        """Return a Number when the whole token is a decimal literal."""
        if _INTEGER.fullmatch(token):
            return cls(int(token))
        if _DECIMAL.fullmatch(token):
            return cls(float(token))
        return None

    def to_json(self) -> int | float:
        return self.value


@dataclass(frozen=True)
class Array:
    items: tuple["ParameterValue", ...] = ()

    def to_json(self) -> list[Any]:
        return [item.to_json() for item in self.items]


ParameterValue = Switch | Text | Number | Array


def from_json(data: Any) -> ParameterValue:
    """Map a decoded JSON value back to its ParameterValue."""
    if isinstance(data, bool):
        return Switch(data)
    if isinstance(data, (int, float)):
        return Number(data)
    if isinstance(data, str):
        return Text(data)
    if isinstance(data, list):
        return Array(tuple(from_json(item) for item in data))
    raise TypeError(f"Unsupported parameter value: {data!r}")


# =============================================================================
# Lexer
# =============================================================================

_COMMA = ","
_ARRAY_OPEN = "["
_ARRAY_CLOSE = "]"
_ARRAY_OP_OPEN = "@("
_ARRAY_OP_CLOSE = ")"


@dataclass(frozen=True)
class _Scalar:
    text: str
    literal: bool


class _Lexer:
    """Split one token into scalars and array punctuation."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._buffer: list[str] = []
        self._literal = False
        self._literal_end = 0
        self._depth = 0
        self.tokens: list[_Scalar | str] = []

    def lex(self) -> list[_Scalar | str]:
        while self._pos < len(self._source):
            char = self._take()
            if char == "`":
                self._buffer.append(self._take_or_fail("dangling escape character"))
            elif char in "'\"":
                self._scan_quoted(char)
            elif char == ",":
                self._store()
                self.tokens.append(_COMMA)
            elif self._at_element_start() and char == "[":
                self._open(_ARRAY_OPEN)
            elif self._at_element_start() and char == "@" and self._peek() == "(":
                self._pos += 1
                self._open(_ARRAY_OP_OPEN)
            elif self._at_element_start() and char == "(":
                self._scan_group()
            elif self._depth and char in "])":
                self._store()
                self.tokens.append(_ARRAY_CLOSE if char == "]" else _ARRAY_OP_CLOSE)
                self._depth -= 1
            elif char.isspace() and self._at_element_start():
                continue
            else:
                self._buffer.append(char)
        self._store()
        return self.tokens

    def _take(self) -> str:
        char = self._source[self._pos]
        self._pos += 1
        return char

    def _take_or_fail(self, reason: str) -> str:
        if self._pos >= len(self._source):
            raise ValueSyntaxError(reason)
        return self._take()

    def _peek(self) -> str | None:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return None

    def _at_element_start(self) -> bool:
        return not self._buffer and not self._literal

    def _open(self, token: str) -> None:
        self.tokens.append(token)
        self._depth += 1

    def _mark_literal(self) -> None:
        self._literal = True
        self._literal_end = len(self._buffer)

    def _scan_quoted(self, quote: str) -> None:
        while True:
            char = self._take_or_fail(f"unterminated {quote} quote")
            if char == quote:
                break
            if char == "`" and quote == '"':
                char = self._take_or_fail("dangling escape character")
            self._buffer.append(char)
        self._mark_literal()

    def _scan_group(self) -> None:
        nesting = 1
        self._buffer.append("(")
        while nesting:
            char = self._take_or_fail("unterminated ( group")
            if char == "(":
                nesting += 1
            elif char == ")":
                nesting -= 1
            self._buffer.append(char)
        self._mark_literal()

    def _store(self) -> None:
        if not self._buffer and not self._literal:
            return
        text = "".join(self._buffer)
        if self._literal:
            text = text[:self._literal_end] + text[self._literal_end:].rstrip()
        else:
            text = text.rstrip()
        self.tokens.append(_Scalar(text, self._literal))
        self._buffer = []
        self._literal = False
        self._literal_end = 0


# =============================================================================
# Parser
# =============================================================================


class _Parser:
    def __init__(self, tokens: list[_Scalar | str]) -> None:
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> ParameterValue:
        value = self._argument(closing=None)
        if self._pos < len(self._tokens):
            raise ValueSyntaxError(f"unexpected {self._describe(self._tokens[self._pos])}")
        return value

    def _peek(self) -> _Scalar | str | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _argument(self, closing: str | None) -> ParameterValue:
        items: list[ParameterValue] = []
        saw_comma = False
        if self._peek() == _COMMA:
            # Unary comma: ",x" is a one-element array.
            self._pos += 1
            saw_comma = True
        items.append(self._element())
        while self._peek() == _COMMA:
            self._pos += 1
            saw_comma = True
            if self._peek() in (None, closing):
                break
            items.append(self._element())
        if saw_comma:
            return Array(tuple(items))
        return items[0]

    def _element(self) -> ParameterValue:
        token = self._peek()
        if isinstance(token, _Scalar):
            self._pos += 1
            return _classify(token)
        if token == _ARRAY_OPEN:
            return self._array(_ARRAY_CLOSE)
        if token == _ARRAY_OP_OPEN:
            return self._array(_ARRAY_OP_CLOSE)
        if token is None:
            raise ValueSyntaxError("missing array element")
        raise ValueSyntaxError(f"unexpected {self._describe(token)}")

    def _array(self, closing: str) -> ParameterValue:
        self._pos += 1
        if self._peek() == closing:
            self._pos += 1
            return Array()
        value = self._argument(closing)
        if self._peek() != closing:
            raise ValueSyntaxError(f"expected '{closing}'")
        self._pos += 1
        return value if isinstance(value, Array) else Array((value,))

    @staticmethod
    def _describe(token: _Scalar | str) -> str:
        if isinstance(token, _Scalar):
            return f"value '{token.text}'"
        return f"'{token}'"


def _classify(scalar: _Scalar) -> ParameterValue:
    if scalar.literal:
        return Text(scalar.text)
    boolean = _BOOLEANS.get(scalar.text.lower())
    if boolean is not None:
        return Switch(boolean)
    return Number.parse(scalar.text) or Text(scalar.text)


def parse_value(token: str) -> ParameterValue:
    """
    Infer the typed value of a single command-line token.

    Args:
        token: The raw argument as received from the process argument list

    Returns:
        The ParameterValue for the token. An empty or blank token is Text.

    Raises:
        ValueSyntaxError: On unterminated quotes, groups or arrays
    """
    tokens = _Lexer(token).lex()
    if not tokens:
        return Text(token)
    return _Parser(tokens).parse()

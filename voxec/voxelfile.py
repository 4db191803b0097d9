"""Parser for voxelfile scripts.

A script is a sequence of statements ``[name =] call(args)`` and function
definitions::

    function name(a, b)
    x = op(a, b)
    return x

Argument values are floats (written with a dot), 32-bit integers, quoted
strings, identifiers, or ``{...}`` sequences of quoted strings. Quoted
strings keep their surrounding quotes so they can be told apart from
identifiers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

ArgValue = Union[float, int, str, Tuple[str, ...]]

_BLANKS = " \t"
_IDENT = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_DOUBLE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT = re.compile(r"[+-]?\d+")
_EOL = re.compile(r"\r\n|\r|\n")
_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1


class VoxelfileSyntaxError(ValueError):
    """Raised when a script cannot be parsed to its end."""

    def __init__(self, offset: int) -> None:
        super().__init__(f"parse errors in voxelfile at {offset}")
        self.offset = offset


@dataclass(frozen=True)
class FunctionArg:
    keyword: Optional[str]
    value: ArgValue


@dataclass(frozen=True)
class FunctionCall:
    name: str
    args: Tuple[FunctionArg, ...]


@dataclass(frozen=True)
class Statement:
    assignee: Optional[str]
    call: FunctionCall


@dataclass(frozen=True)
class FunctionDef:
    name: str
    args: Tuple[str, ...]
    statements: Tuple[Statement, ...]
    result_identifier: Optional[str]


class _Parser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _skip(self) -> None:
        text, n = self._text, len(self._text)
        while self._pos < n and text[self._pos] in _BLANKS:
            self._pos += 1

    def _regex(self, pattern: "re.Pattern[str]") -> Optional[str]:
        saved = self._pos
        self._skip()
        match = pattern.match(self._text, self._pos)
        if match is None:
            self._pos = saved
            return None
        self._pos = match.end()
        return match.group()

    def _literal(self, token: str) -> bool:
        saved = self._pos
        self._skip()
        if self._text.startswith(token, self._pos):
            self._pos += len(token)
            return True
        self._pos = saved
        return False

    def _ident(self) -> Optional[str]:
        return self._regex(_IDENT)

    def _eol(self) -> bool:
        return self._regex(_EOL) is not None

    def _eols(self) -> None:
        while self._eol():
            pass

    def _optional_assignment(self) -> Optional[str]:
        saved = self._pos
        name = self._ident()
        if name is not None and self._literal("="):
            return name
        self._pos = saved
        return None

    def _double(self) -> Optional[float]:
        token = self._regex(_DOUBLE)
        return None if token is None else float(token)

    def _int(self) -> Optional[int]:
        saved = self._pos
        token = self._regex(_INT)
        if token is None:
            return None
        value = int(token)
        if not _INT_MIN <= value <= _INT_MAX:
            self._pos = saved
            return None
        return value

    def _quoted(self) -> Optional[str]:
        start = self._pos
        if not self._literal('"'):
            return None
        chars: List[str] = []
        while True:
            # Blanks are skipped inside quoted strings as well.
            self._skip()
            if self._pos >= len(self._text):
                self._pos = start
                return None
            char = self._text[self._pos]
            self._pos += 1
            if char == '"':
                break
            chars.append(char)
        return '"' + "".join(chars) + '"'

    def _sequence(self) -> Optional[Tuple[str, ...]]:
        start = self._pos
        if not self._literal("{"):
            return None
        items = self._separated(self._quoted)
        if items is None or not self._literal("}"):
            self._pos = start
            return None
        return tuple(items)

    def _separated(self, rule):
        first = rule()
        if first is None:
            return None
        items = [first]
        while True:
            saved = self._pos
            if not self._literal(","):
                break
            item = rule()
            if item is None:
                self._pos = saved
                break
            items.append(item)
        return items

    def _value(self) -> Optional[ArgValue]:
        for rule in (self._double, self._int, self._quoted, self._ident, self._sequence):
            value = rule()
            if value is not None:
                return value
        return None

    def _function_arg(self) -> Optional[FunctionArg]:
        start = self._pos
        keyword = self._optional_assignment()
        value = self._value()
        if value is None:
            self._pos = start
            return None
        return FunctionArg(keyword, value)

    def _function_call(self) -> Optional[FunctionCall]:
        start = self._pos
        name = self._ident()
        if name is not None and self._literal("("):
            args = self._separated(self._function_arg)
            if args is not None and self._literal(")"):
                return FunctionCall(name, tuple(args))
        self._pos = start
        return None

    def _statement(self) -> Optional[Statement]:
        start = self._pos
        assignee = self._optional_assignment()
        call = self._function_call()
        if call is None or not self._eol():
            self._pos = start
            return None
        self._eols()
        return Statement(assignee, call)

    def _function_def(self) -> Optional[FunctionDef]:
        start = self._pos
        if not self._literal("function"):
            return None
        name = self._ident()
        if name is None or not self._literal("("):
            self._pos = start
            return None
        args = self._separated(self._ident)
        if args is None or not self._literal(")") or not self._eol():
            self._pos = start
            return None
        self._eols()
        statements = []
        while (statement := self._statement()) is not None:
            statements.append(statement)
        if not self._literal("return"):
            self._pos = start
            return None
        result = self._ident()
        if not self._eol():
            self._pos = start
            return None
        self._eols()
        return FunctionDef(name, tuple(args), tuple(statements), result)

    def parse(self) -> List[Union[Statement, FunctionDef]]:
        tree: List[Union[Statement, FunctionDef]] = []
        while True:
            node = self._statement() or self._function_def()
            if node is None:
                break
            tree.append(node)
        self._skip()
        if self._pos != len(self._text):
            raise VoxelfileSyntaxError(self._pos)
        return tree


def parse_voxelfile(text: str) -> List[Union[Statement, FunctionDef]]:
    """Parse a whole script; raise VoxelfileSyntaxError unless all of it parses."""
    return _Parser(text).parse()
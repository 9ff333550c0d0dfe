from __future__ import annotations

import re
from typing import NamedTuple

from cubesolver.moves import MoveNotation, invert_moves

_TOKEN_RE = re.compile(
    r"(?P<MOVE>[A-Za-z](?:2'?|')?)"
    r"|(?P<INT>\d+)"
    r"|(?P<LPAREN>\()|(?P<RPAREN>\))|(?P<CARET>\^)"
)
_SPACE_RE = re.compile(r"\s*")


class FormulaSyntaxError(ValueError):
    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at index {position}")
        self.position = position


class _Token(NamedTuple):
    kind: str
    text: str
    position: int


def _scan(formula: str) -> list[_Token]:
    tokens: list[_Token] = []
    position = _SPACE_RE.match(formula).end()
    while position < len(formula):
        match = _TOKEN_RE.match(formula, position)
        if match is None:
            raise FormulaSyntaxError(f"Unsupported character '{formula[position]}'", position)
        tokens.append(_Token(match.lastgroup, match.group(), position))
        position = _SPACE_RE.match(formula, match.end()).end()
    return tokens


def _face_move(token: _Token) -> MoveNotation:
    face, suffix = token.text[0], token.text[1:]
    if face not in FormulaConverter.FACES:
        raise FormulaSyntaxError(f"Unknown move token '{token.text}'", token.position)
    # R2' is the same half turn as R2.
    return MoveNotation(face + ("2" if suffix.startswith("2") else suffix))


class FormulaConverter:
    """Parses outer-face notation with groups and repeats into MoveNotation lists.

    Supported forms: ``R``, ``R'``, ``R2`` (``R2'`` is read as ``R2``),
    ``(R U R' U')3`` and ``R^3``. Only the six outer faces are accepted
    since the cube model has no slices, wide turns or whole-cube rotations.
    """

    FACES = frozenset("URFDLB")

    @classmethod
    def convert(cls, formula: str, repeat: int = 1) -> list[MoveNotation]:
        if repeat < 1:
            raise ValueError("repeat must be >= 1")
        reader = _FormulaReader(formula, _scan(formula))
        return reader.read_all() * repeat

    @classmethod
    def convert_inverse(cls, formula: str, repeat: int = 1) -> list[MoveNotation]:
        return invert_moves(cls.convert(formula, repeat=repeat))


class _FormulaReader:
    """Recursive descent over ``sequence := (atom multiplier?)*``."""

    def __init__(self, formula: str, tokens: list[_Token]) -> None:
        self.formula = formula
        self.tokens = tokens
        self.cursor = 0

    def _next_kind(self) -> str | None:
        return self.tokens[self.cursor].kind if self.cursor < len(self.tokens) else None

    def _take(self) -> _Token:
        token = self.tokens[self.cursor]
        self.cursor += 1
        return token

    def read_all(self) -> list[MoveNotation]:
        return self._sequence(in_group=False)

    def _sequence(self, in_group: bool) -> list[MoveNotation]:
        moves: list[MoveNotation] = []
        while self._next_kind() not in (None, "RPAREN"):
            block, grouped = self._atom()
            moves += block * self._multiplier(grouped)

        if self._next_kind() == "RPAREN":
            if not in_group:
                raise FormulaSyntaxError("Unexpected ')'", self.tokens[self.cursor].position)
            self._take()
        elif in_group:
            raise FormulaSyntaxError("Missing closing ')'", len(self.formula))
        return moves

    def _atom(self) -> tuple[list[MoveNotation], bool]:
        token = self._take()
        if token.kind == "MOVE":
            return [_face_move(token)], False
        if token.kind == "LPAREN":
            return self._sequence(in_group=True), True
        raise FormulaSyntaxError(f"Expected move or '(' but got '{token.text}'", token.position)

    def _multiplier(self, grouped: bool) -> int:
        kind = self._next_kind()
        if kind == "CARET":
            caret = self._take()
            if self._next_kind() != "INT":
                raise FormulaSyntaxError("Expected integer after '^'", caret.position)
            return self._count(self._take())
        if grouped and kind == "INT":
            return self._count(self._take())
        return 1

    @staticmethod
    def _count(token: _Token) -> int:
        value = int(token.text)
        if value < 1:
            raise FormulaSyntaxError("Repeat must be >= 1", token.position)
        return value

"""Turns program text into a stream of lexemes."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import IO, Iterator

from .source import SourceReader
from .tokens import Token, longest_match


@dataclass(frozen=True)
class Lexeme:
    """A token kind, the text it was read from and the line it started on."""

    token: Token
    text: str
    line: int


class Lexer:
    """Reads lexemes one at a time from a program text.

    Blanks and ``(* ... *)`` comments are skipped.  Characters that no
    rule accepts are written unchanged to :attr:`output` (standard output
    when it is None) and otherwise ignored.  Once the text is exhausted,
    every further call to :meth:`next` yields an ``FEOF`` lexeme.
    """

    def __init__(self, source: str) -> None:
        self.reader = SourceReader(source)
        self.output: IO[str] | None = None
        self.current = Lexeme(Token.FEOF, "", 1)

    @property
    def line(self) -> int:
        """The line the reader has reached."""
        return self.reader.line

    @property
    def text(self) -> str:
        """The text of the lexeme last returned."""
        return self.current.text

    @property
    def token(self) -> Token:
        """The kind of the lexeme last returned."""
        return self.current.token

    def _echo(self, text: str) -> None:
        stream = self.output if self.output is not None else sys.stdout
        stream.write(text)

    def next(self) -> Lexeme:
        """Read and return the next lexeme."""
        reader = self.reader
        while True:
            start_line = reader.line
            found = longest_match(reader.text, reader.position)
            if found is None:
                self.current = Lexeme(Token.FEOF, "", start_line)
                return self.current
            rule, text = found
            reader.take(len(text))
            if rule.token is not None:
                self.current = Lexeme(rule.token, text, start_line)
                return self.current
            if rule.opens_comment:
                reader.skip_comment()
            elif rule.echoes:
                self._echo(text)

    def __iter__(self) -> Iterator[Lexeme]:
        """Yield lexemes up to, but not including, the end of input."""
        while True:
            lexeme = self.next()
            if lexeme.token is Token.FEOF:
                return
            yield lexeme


def tokenize(source: str) -> list[Lexeme]:
    """Return every lexeme of ``source``, without the final ``FEOF``."""
    return list(Lexer(source))
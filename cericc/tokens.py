"""Token kinds and the lexical rules of the language.

The rules are listed in priority order.  At any position the rule giving
the longest match wins; when several rules match the same length, the one
listed first wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum


class Token(IntEnum):
    """Kinds of token handed from the lexer to the parser."""

    FEOF = 0
    UNKNOWN = 1
    KEYWORD = 2
    NUMBER = 3
    ID = 4
    CHARCONST = 5
    RBRACKET = 6
    LBRACKET = 7
    RPARENT = 8
    LPARENT = 9
    COMMA = 10
    SEMICOLON = 11
    COLON = 12
    DOT = 13
    ADDOP = 14
    MULOP = 15
    RELOP = 16
    NOT = 17
    ASSIGN = 18
    VAR = 19
    BEGIN_TOKEN = 20
    END_TOKEN = 21
    IF = 22
    THEN = 23
    ELSE = 24
    WHILE = 25
    DO = 26
    FOR = 27
    TO = 28
    DISPLAY = 29
    TRUE_CONST = 30
    FALSE_CONST = 31
    DOUBLECONST = 32


KEYWORDS = frozenset(
    {
        "BEGIN",
        "BOOLEAN",
        "CHAR",
        "DISPLAY",
        "DO",
        "DOUBLE",
        "DOWNTO",
        "ELSE",
        "END",
        "FOR",
        "IF",
        "INTEGER",
        "THEN",
        "TO",
        "VAR",
        "WHILE",
    }
)


@dataclass(frozen=True)
class TokenRule:
    """A lexical rule and what a match of it produces.

    A rule with a ``token`` yields that token.  A rule without one is
    skipped, unless it opens a comment (the rest of the comment must then
    be consumed) or it is the fallback rule, whose text is echoed.
    """

    name: str
    pattern: re.Pattern
    token: Token | None = None
    opens_comment: bool = False
    echoes: bool = False


def _rule(name: str, regex: str, token: Token | None = None, *,
          opens_comment: bool = False, echoes: bool = False,
          flags: int = 0) -> TokenRule:
    return TokenRule(name, re.compile(regex, flags), token, opens_comment, echoes)


_KEYWORD_REGEX = "|".join(
    re.escape(word) for word in sorted(KEYWORDS, key=len, reverse=True)
)

RULES: tuple[TokenRule, ...] = (
    _rule("addop", r"\+|-|\|\|", Token.ADDOP),
    _rule("mulop", r"\*|/|%|&&", Token.MULOP),
    _rule("relop", r"==|!=|<=|>=|<|>", Token.RELOP),
    _rule("number", r"[0-9]+(?:\.[0-9]+)?", Token.NUMBER),
    _rule("keyword", f"(?:{_KEYWORD_REGEX})", Token.KEYWORD),
    _rule("identifier", r"[A-Za-z][A-Za-z0-9]*", Token.ID),
    _rule("charconst", r"'\\?.'", Token.CHARCONST),
    _rule("open bracket", r"\[", Token.RBRACKET),
    _rule("close bracket", r"\]", Token.LBRACKET),
    _rule("comma", r",", Token.COMMA),
    _rule("semicolon", r";", Token.SEMICOLON),
    _rule("dot", r"\.", Token.DOT),
    _rule("colon", r":", Token.COLON),
    _rule("assign", r":=", Token.ASSIGN),
    _rule("open parenthesis", r"\(", Token.RPARENT),
    _rule("close parenthesis", r"\)", Token.LPARENT),
    _rule("not", r"!", Token.NOT),
    _rule("blanks", r"[ \t\r\n]+"),
    _rule("comment", r"\(\*", opens_comment=True),
    _rule("unknown", r'[^"A-Za-z0-9 \n\r\t()<>=!%&|}\-;.]+', Token.UNKNOWN),
    _rule("default", r".", echoes=True, flags=re.DOTALL),
)


def longest_match(text: str, pos: int) -> tuple[TokenRule, str] | None:
    """Return the winning rule and its lexeme at ``pos``, or None at the end."""
    if pos < 0:
        raise ValueError(f"negative position: {pos}")
    if pos >= len(text):
        return None
    best_rule = RULES[-1]
    best_end = pos
    for rule in RULES:
        found = rule.pattern.match(text, pos)
        if found is not None and found.end() > best_end:
            best_rule, best_end = rule, found.end()
    return best_rule, text[pos:best_end]
import io

import pytest

from cericc.lexer import Lexeme, Lexer, tokenize
from cericc.tokens import Token


def kinds(source):
    return [lexeme.token for lexeme in tokenize(source)]


def texts(source):
    return [lexeme.text for lexeme in tokenize(source)]


def test_declaration_line():
    assert kinds("VAR a : INTEGER") == [
        Token.KEYWORD, Token.ID, Token.COLON, Token.KEYWORD,
    ]
    assert texts("VAR a : INTEGER") == ["VAR", "a", ":", "INTEGER"]


def test_assignment_is_one_token():
    assert kinds("a := 12") == [Token.ID, Token.ASSIGN, Token.NUMBER]
    assert texts("a := 12") == ["a", ":=", "12"]


def test_keyword_prefix_makes_identifier():
    assert kinds("BEGIN BEGINX") == [Token.KEYWORD, Token.ID]


@pytest.mark.parametrize("op", ["==", "!=", "<=", ">=", "<", ">"])
def test_relational_operators(op):
    result = tokenize(f"a{op}b")
    assert [lexeme.token for lexeme in result] == [Token.ID, Token.RELOP, Token.ID]
    assert result[1].text == op


@pytest.mark.parametrize("op,kind", [
    ("+", Token.ADDOP), ("-", Token.ADDOP), ("||", Token.ADDOP),
    ("*", Token.MULOP), ("/", Token.MULOP), ("%", Token.MULOP), ("&&", Token.MULOP),
])
def test_arithmetic_operators(op, kind):
    result = tokenize(f"x {op} y")
    assert result[1] == Lexeme(kind, op, 1)


def test_char_constant():
    assert tokenize("'z'") == [Lexeme(Token.CHARCONST, "'z'", 1)]


def test_decimal_number_single_token():
    assert texts("3.14") == ["3.14"]


def test_comment_is_skipped():
    assert texts("a (* note * ) here *) b") == ["a", "b"]


def test_unterminated_comment_ends_input():
    lexer = Lexer("a (* never closed")
    assert lexer.next().text == "a"
    assert lexer.next().token is Token.FEOF


def test_end_of_input_repeats():
    lexer = Lexer("x")
    assert lexer.next().token is Token.ID
    assert lexer.next().token is Token.FEOF
    assert lexer.next().token is Token.FEOF


def test_iteration_stops_before_feof():
    result = tokenize("a ; b .")
    assert all(lexeme.token is not Token.FEOF for lexeme in result)
    assert [lexeme.token for lexeme in result] == [
        Token.ID, Token.SEMICOLON, Token.ID, Token.DOT,
    ]


def test_blanks_are_dropped_only():
    source = "IF a  THEN\n\tb := 1\nELSE c := 2"
    assert "".join(texts(source)) == "".join(source.split())


def test_lines_follow_newlines():
    result = tokenize("a\n\nb")
    assert result[0].line == 1
    assert result[1].line == 3


def test_current_and_properties_track_last_lexeme():
    lexer = Lexer("count 7")
    lexer.next()
    assert lexer.text == "count"
    assert lexer.token is Token.ID
    lexer.next()
    assert lexer.current == Lexeme(Token.NUMBER, "7", 1)


def test_unmatched_character_is_echoed():
    lexer = Lexer("a } b")
    lexer.output = io.StringIO()
    assert [lexeme.text for lexeme in lexer] == ["a", "b"]
    assert lexer.output.getvalue() == "}"


def test_unknown_character_is_reported():
    assert tokenize("@") == [Lexeme(Token.UNKNOWN, "@", 1)]


def test_empty_source():
    assert tokenize("") == []
    assert tokenize("   \n  ") == []
import pytest

from cericc.tokens import KEYWORDS, RULES, Token, longest_match


def lex(text, pos=0):
    rule, lexeme = longest_match(text, pos)
    return rule.token, lexeme


def split_all(text):
    pieces = []
    pos = 0
    while (result := longest_match(text, pos)) is not None:
        rule, lexeme = result
        pieces.append((rule, lexeme))
        pos += len(lexeme)
    return pieces


@pytest.mark.parametrize(
    "text, token, lexeme",
    [
        ("+", Token.ADDOP, "+"),
        ("-1", Token.ADDOP, "-"),
        ("||a", Token.ADDOP, "||"),
        ("*", Token.MULOP, "*"),
        ("/ 2", Token.MULOP, "/"),
        ("%", Token.MULOP, "%"),
        ("&&b", Token.MULOP, "&&"),
        ("==", Token.RELOP, "=="),
        ("!=", Token.RELOP, "!="),
        ("<=", Token.RELOP, "<="),
        (">=", Token.RELOP, ">="),
        ("<a", Token.RELOP, "<"),
        (">a", Token.RELOP, ">"),
        ("!a", Token.NOT, "!"),
        (":=", Token.ASSIGN, ":="),
        (": INTEGER", Token.COLON, ":"),
        (",", Token.COMMA, ","),
        (";", Token.SEMICOLON, ";"),
        (".", Token.DOT, "."),
    ],
)
def test_operators_and_punctuation(text, token, lexeme):
    assert lex(text) == (token, lexeme)


def test_parentheses_and_brackets_keep_the_rule_tokens():
    assert lex("(a")[0] is Token.RPARENT
    assert lex(")")[0] is Token.LPARENT
    assert lex("[")[0] is Token.RBRACKET
    assert lex("]")[0] is Token.LBRACKET


@pytest.mark.parametrize("word", sorted(KEYWORDS))
def test_every_keyword_is_a_keyword(word):
    assert lex(word + " x") == (Token.KEYWORD, word)


@pytest.mark.parametrize(
    "text, lexeme",
    [("DOX", "DOX"), ("begin", "begin"), ("TRUE", "TRUE"), ("a12b", "a12b"), ("BEGIN2", "BEGIN2")],
)
def test_identifiers(text, lexeme):
    assert lex(text) == (Token.ID, lexeme)


def test_keyword_prefix_followed_by_space():
    assert lex("DO WHILE") == (Token.KEYWORD, "DO")
    assert lex("DOUBLE;") == (Token.KEYWORD, "DOUBLE")


@pytest.mark.parametrize(
    "text, lexeme",
    [("42", "42"), ("12.5;", "12.5"), ("12.", "12"), ("3.14.1", "3.14")],
)
def test_numbers(text, lexeme):
    assert lex(text) == (Token.NUMBER, lexeme)


@pytest.mark.parametrize("text", ["'a'", "' '", "'\\n'", "'\\''", "'''"])
def test_character_constants(text):
    assert lex(text) == (Token.CHARCONST, text)


def test_unknown_run_is_longest():
    assert lex("?+*") == (Token.UNKNOWN, "?+*")
    assert lex("*/ x") == (Token.UNKNOWN, "*/")
    assert lex("''''") == (Token.UNKNOWN, "''''")


def test_unknown_stops_at_excluded_characters():
    assert lex("#$a") == (Token.UNKNOWN, "#$")
    assert lex("_x") == (Token.UNKNOWN, "_")


def test_blanks_are_skipped():
    rule, lexeme = longest_match(" \t\r\n x", 0)
    assert rule.token is None
    assert not rule.opens_comment
    assert not rule.echoes
    assert lexeme == " \t\r\n "


def test_comment_opener():
    rule, lexeme = longest_match("(* note *)", 0)
    assert rule.opens_comment
    assert rule.token is None
    assert lexeme == "(*"


@pytest.mark.parametrize("text", ['"', "}", "=", "|", "&"])
def test_fallback_rule_echoes_one_character(text):
    rule, lexeme = longest_match(text + "x", 0)
    assert rule.echoes
    assert rule is RULES[-1]
    assert lexeme == text


def test_position_offset():
    assert lex("a+b", 1) == (Token.ADDOP, "+")
    assert lex("a+b", 2) == (Token.ID, "b")


def test_end_of_text_gives_none():
    assert longest_match("abc", 3) is None
    assert longest_match("", 0) is None


def test_negative_position_is_rejected():
    with pytest.raises(ValueError):
        longest_match("abc", -1)


@pytest.mark.parametrize(
    "text",
    [
        "VAR a, b : INTEGER;\nBEGIN a := 3 + 4 * b END.",
        "x:=?+'c'(* c *)\"}==|&&",
        "  DISPLAY 1.5 / 2 ; IF a<=b THEN c:='\\'' ELSE d",
        "\u00e9t\u00e9 #_ 12..3",
    ],
)
def test_lexemes_rebuild_the_text(text):
    pieces = split_all(text)
    assert "".join(lexeme for _, lexeme in pieces) == text
    assert all(lexeme for _, lexeme in pieces)


def test_statement_token_sequence():
    pieces = split_all("a := b + 1;")
    tokens = [rule.token for rule, _ in pieces if rule.token is not None]
    assert tokens == [
        Token.ID,
        Token.ASSIGN,
        Token.ID,
        Token.ADDOP,
        Token.NUMBER,
        Token.SEMICOLON,
    ]


def test_tie_goes_to_earlier_rule():
    # "*" is matched by both the multiplicative rule and the unknown rule.
    assert lex("* a") == (Token.MULOP, "*")
    assert lex(":") == (Token.COLON, ":")
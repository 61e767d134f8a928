# mips_asm/tests/test_lexer.py
import pytest
from mips_asm.mips_consts import Kind
from mips_asm.mips_errors import (
    LexicalError, ImmediateOutOfRange, RegisterOutOfRange, MalformedOperands
)
from mips_asm.mips_lexer import Lexer
from mips_asm.mips_tokens import Token


@pytest.fixture
def lexer():
    """Provides a new Lexer instance for each test."""
    return Lexer()


def kinds(tokens):
    return [t.kind for t in tokens]


def lexemes(tokens):
    return [t.lexeme for t in tokens]


# --- Token Classification ---

def test_scan_simple_r(lexer):
    tokens = lexer.scan("add $1, $2, $3")
    assert kinds(tokens) == [Kind.ID, Kind.REGISTER, Kind.COMMA, Kind.REGISTER, Kind.COMMA, Kind.REGISTER]
    assert lexemes(tokens) == ["add", "$1", ",", "$2", ",", "$3"]


def test_scan_load_with_negative_offset(lexer):
    tokens = lexer.scan("lw $4, -4($3)")
    assert kinds(tokens) == [Kind.ID, Kind.REGISTER, Kind.COMMA, Kind.INT,
                             Kind.LPAREN, Kind.REGISTER, Kind.RPAREN]
    assert tokens[3].lexeme == "-4"


def test_scan_label_and_directive(lexer):
    tokens = lexer.scan("L1: .word 0x1F")
    assert tokens == [Token(Kind.LABEL, "L1:"), Token(Kind.DOTWORD, ".word"), Token(Kind.HEXINT, "0x1F")]
    assert tokens[0].label_name() == "L1"


def test_scan_several_labels(lexer):
    tokens = lexer.scan("a:b: c:")
    assert kinds(tokens) == [Kind.LABEL, Kind.LABEL, Kind.LABEL]


def test_maximal_munch_identifier(lexer):
    # "r1" must be one identifier, never "r" followed by "1"
    assert lexer.scan("r1") == [Token(Kind.ID, "r1")]


def test_zero_and_leading_zero_integers(lexer):
    assert lexer.scan("0") == [Token(Kind.INT, "0")]
    assert lexer.scan("007") == [Token(Kind.INT, "007")]


def test_integer_followed_by_letters_splits(lexer):
    # INT has no transition on letters, so the scanner restarts at 'x'
    assert lexer.scan("10x5") == [Token(Kind.INT, "10"), Token(Kind.ID, "x5")]


def test_register_followed_by_letters_splits(lexer):
    assert lexer.scan("$3x") == [Token(Kind.REGISTER, "$3"), Token(Kind.ID, "x")]


# --- Whitespace and Comments ---

def test_comment_elision(lexer):
    assert lexer.scan("add $1, $2, $3 ; comment") == lexer.scan("add $1, $2, $3")


def test_comment_swallows_everything(lexer):
    assert lexer.scan("; add $1, $2, $3 #@! .word") == []


def test_empty_and_blank_lines(lexer):
    assert lexer.scan("") == []
    assert lexer.scan(" \t \r") == []


def test_scan_is_deterministic(lexer):
    line = "loop: beq $1, $2, loop ; spin"
    assert lexer.scan(line) == lexer.scan(line)
    assert lexer.scan(line) == Lexer().scan(line)


# --- Lexical Errors ---

@pytest.mark.parametrize("line, prefix", [
    ("$", "$"),            # Register needs digits
    ("-", "-"),            # Minus needs digits
    ("- 5", "-"),
    ("0x", "0x"),          # Hex needs at least one digit
    (".wrd 5", ".w"),
    (".Word 5", "."),      # Directive is lower case only
    ("add #", "add "),
    (":", ""),
])
def test_lexical_errors(lexer, line, prefix):
    with pytest.raises(LexicalError) as excinfo:
        lexer.scan(line)
    assert excinfo.value.prefix == prefix


# --- Token Values ---

@pytest.mark.parametrize("token, expected", [
    (Token(Kind.INT, "32767"), 32767),
    (Token(Kind.INT, "-1"), -1),
    (Token(Kind.INT, "-2147483648"), -2147483648),
    (Token(Kind.INT, "4294967295"), 4294967295),
    (Token(Kind.INT, "007"), 7),
    (Token(Kind.HEXINT, "0xffffffff"), 0xFFFFFFFF),
    (Token(Kind.HEXINT, "0xAb"), 0xAB),
    (Token(Kind.REGISTER, "$0"), 0),
    (Token(Kind.REGISTER, "$31"), 31),
])
def test_to_int(token, expected):
    assert token.to_int() == expected


@pytest.mark.parametrize("token, error", [
    (Token(Kind.INT, "4294967296"), ImmediateOutOfRange),
    (Token(Kind.INT, "-2147483649"), ImmediateOutOfRange),
    (Token(Kind.HEXINT, "0x100000000"), ImmediateOutOfRange),
    (Token(Kind.REGISTER, "$32"), RegisterOutOfRange),
    (Token(Kind.COMMA, ","), MalformedOperands),
    (Token(Kind.ID, "loop"), MalformedOperands),
])
def test_to_int_errors(token, error):
    with pytest.raises(error):
        token.to_int()


def test_token_is_immutable():
    tok = Token(Kind.ID, "add")
    with pytest.raises(AttributeError):
        tok.lexeme = "sub"

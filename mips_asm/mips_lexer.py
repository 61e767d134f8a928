# mips_asm/mips_lexer.py
import string
from collections import namedtuple
from enum import Enum

from mips_asm.mips_consts import Kind
from mips_asm.mips_errors import LexicalError
from mips_asm.mips_tokens import Token


class State(Enum):
    """DFA states. The value is the token kind a state accepts, None if not final."""
    START = ("START", None)
    DOLLAR = ("DOLLAR", None)
    MINUS = ("MINUS", None)
    REGISTER = ("REGISTER", Kind.REGISTER)
    INT = ("INT", Kind.INT)
    ID = ("ID", Kind.ID)
    LABEL = ("LABEL", Kind.LABEL)
    COMMA = ("COMMA", Kind.COMMA)
    LPAREN = ("LPAREN", Kind.LPAREN)
    RPAREN = ("RPAREN", Kind.RPAREN)
    ZERO = ("ZERO", Kind.INT)
    ZEROX = ("ZEROX", None)
    HEXINT = ("HEXINT", Kind.HEXINT)
    COMMENT = ("COMMENT", Kind.WHITESPACE)
    DOT = ("DOT", None)
    DOTW = ("DOTW", None)
    DOTWO = ("DOTWO", None)
    DOTWOR = ("DOTWOR", None)
    DOTWORD = ("DOTWORD", Kind.DOTWORD)
    WHITESPACE = ("WHITESPACE", Kind.WHITESPACE)

    @property
    def kind(self):
        return self.value[1]

    def is_final(self):
        return self.kind is not None


class AllChars:
    """Character class matching every character (comment bodies)."""

    def __contains__(self, char):
        return True


Transition = namedtuple("Transition", ["from_state", "chars", "to_state"])

WHITESPACE_CHARS = frozenset("\t\n\r ")
LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
LETTERS_DIGITS = LETTERS | DIGITS
HEX_DIGITS = frozenset(string.hexdigits)
ONE_TO_NINE = frozenset("123456789")

TRANSITIONS = (
    Transition(State.START, WHITESPACE_CHARS, State.WHITESPACE),
    Transition(State.START, LETTERS, State.ID),
    Transition(State.ID, LETTERS_DIGITS, State.ID),
    Transition(State.START, ONE_TO_NINE, State.INT),
    Transition(State.INT, DIGITS, State.INT),
    Transition(State.START, frozenset("-"), State.MINUS),
    Transition(State.MINUS, DIGITS, State.INT),
    Transition(State.START, frozenset(","), State.COMMA),
    Transition(State.START, frozenset("("), State.LPAREN),
    Transition(State.START, frozenset(")"), State.RPAREN),
    Transition(State.START, frozenset("$"), State.DOLLAR),
    Transition(State.DOLLAR, DIGITS, State.REGISTER),
    Transition(State.REGISTER, DIGITS, State.REGISTER),
    Transition(State.START, frozenset("0"), State.ZERO),
    Transition(State.ZERO, frozenset("x"), State.ZEROX),
    Transition(State.ZERO, DIGITS, State.INT),
    Transition(State.ZEROX, HEX_DIGITS, State.HEXINT),
    Transition(State.HEXINT, HEX_DIGITS, State.HEXINT),
    Transition(State.ID, frozenset(":"), State.LABEL),
    Transition(State.START, frozenset(";"), State.COMMENT),
    Transition(State.START, frozenset("."), State.DOT),
    Transition(State.DOT, frozenset("w"), State.DOTW),
    Transition(State.DOTW, frozenset("o"), State.DOTWO),
    Transition(State.DOTWO, frozenset("r"), State.DOTWOR),
    Transition(State.DOTWOR, frozenset("d"), State.DOTWORD),
    Transition(State.COMMENT, AllChars(), State.COMMENT),
)


class Lexer:
    """Maximal-munch DFA scanner turning one source line into tokens."""

    def __init__(self, transitions=TRANSITIONS):
        # Rows grouped by source state; first matching row wins
        self.table = {}
        for trans in transitions:
            self.table.setdefault(trans.from_state, []).append(trans)

    def _find_transition(self, state, char):
        for trans in self.table.get(state, ()):
            if char in trans.chars:
                return trans
        return None

    def scan(self, line):
        """Returns the non-whitespace tokens of `line`, raises LexicalError on bad input."""
        tokens = []
        if not line:
            return tokens

        i = 0
        start_index = 0
        state = State.START
        while True:
            trans = self._find_transition(state, line[i]) if i < len(line) else None
            if trans is None:
                if not state.is_final():
                    raise LexicalError(line[:i])
                if state.kind is not Kind.WHITESPACE:
                    tokens.append(Token(state.kind, line[start_index:i]))
                start_index = i
                state = State.START
                if i >= len(line):
                    break
            else:
                state = trans.to_state
                i += 1
        return tokens

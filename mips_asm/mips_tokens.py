# mips_asm/mips_tokens.py
from dataclasses import dataclass

from mips_asm.mips_consts import Kind, WORD_BITS, REGISTER_BITS
from mips_asm.mips_errors import (
    ImmediateOutOfRange, MalformedOperands, RegisterOutOfRange
)


def _fits(value, bits):
    """Two's complement width check: positives by bit length, negatives down to -(2**(bits-1))."""
    if value >= 0:
        return value.bit_length() <= bits
    return value >= -(1 << (bits - 1))


@dataclass(frozen=True)
class Token:
    kind: Kind
    lexeme: str

    def __str__(self):
        return f"{self.kind.value} {{{self.lexeme}}}"

    def to_int(self):
        """Integer value of an INT, HEXINT or REGISTER token, range checked."""
        if self.kind is Kind.INT:
            digits, base, bits, error = self.lexeme, 10, WORD_BITS, ImmediateOutOfRange
        elif self.kind is Kind.HEXINT:
            digits, base, bits, error = self.lexeme[2:], 16, WORD_BITS, ImmediateOutOfRange
        elif self.kind is Kind.REGISTER:
            digits, base, bits, error = self.lexeme[1:], 10, REGISTER_BITS, RegisterOutOfRange
        else:
            raise MalformedOperands(f"Token '{self.lexeme}' ({self.kind.value}) has no integer value", lexeme=self.lexeme)

        value = int(digits, base)
        if not _fits(value, bits):
            raise error(f"Constant '{self.lexeme}' out of range for {bits} bits", lexeme=self.lexeme)
        return value

    def label_name(self):
        """Name declared by a LABEL token, without the colon."""
        return self.lexeme[:-1] if self.kind is Kind.LABEL else self.lexeme

    def to_dict(self):
        return {"kind": self.kind.value, "lexeme": self.lexeme}

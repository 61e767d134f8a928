# mips_asm/mips_validators.py
"""Operand checks, one per instruction shape.

Every validator receives the full token list of a line and the index of the
opcode (or .word) token, and raises on the first problem it finds. Operand
offsets below are counted from the opcode token, so offset 1 is the first
operand.
"""
from mips_asm.mips_consts import (
    Kind, SHAPE_GRAMMAR, INSTRUCTION_SHAPES, IMM16_MIN, IMM16_MAX, HEX16_MAX,
    SHAPE_JUMP_REGISTER, SHAPE_MOVE, SHAPE_SIMPLE_R, SHAPE_MUL_DIV,
    SHAPE_LOAD_STORE, SHAPE_BRANCH, SHAPE_DIRECTIVE,
)
from mips_asm.mips_errors import ImmediateOutOfRange, MalformedOperands


def _malformed(shape, mnemonic, detail):
    return MalformedOperands(f"{detail}. Expected '{mnemonic} {SHAPE_GRAMMAR[shape]}' ({shape})", lexeme=mnemonic)


def _operands(tokens, index, count, shape):
    """Operand tokens after the opcode, after checking how many there are."""
    ops = tokens[index + 1:]
    if len(ops) != count:
        raise _malformed(shape, tokens[index].lexeme, f"Incorrect operand count, expected {count} tokens, got {len(ops)}")
    return ops


def _expect_kinds(tokens, index, shape, expected):
    """`expected` maps operand offset -> required Kind."""
    for offset, kind in expected.items():
        tok = tokens[index + offset]
        if tok.kind is not kind:
            raise _malformed(shape, tokens[index].lexeme, f"Operand {offset} '{tok.lexeme}' should be {kind.value}, got {tok.kind.value}")


def check_register(token):
    """Register number of a REGISTER token, must be 0..31."""
    if token.kind is not Kind.REGISTER:
        raise MalformedOperands(f"Expected a register, got '{token.lexeme}'", lexeme=token.lexeme)
    return token.to_int()


def check_immediate16(token):
    """16-bit immediate: decimal is signed, hex is unsigned."""
    value = token.to_int()
    if token.kind is Kind.INT:
        if not (IMM16_MIN <= value <= IMM16_MAX):
            raise ImmediateOutOfRange(f"Immediate '{token.lexeme}' out of range for 16-bit signed value ({IMM16_MIN} to {IMM16_MAX})", lexeme=token.lexeme)
    elif token.kind is Kind.HEXINT:
        if value > HEX16_MAX:
            raise ImmediateOutOfRange(f"Hex immediate '{token.lexeme}' out of range (0x0 to 0x{HEX16_MAX:x})", lexeme=token.lexeme)
    else:
        raise MalformedOperands(f"Expected an immediate, got '{token.lexeme}'", lexeme=token.lexeme)
    return value


def _check_registers(tokens, index, offsets):
    for offset in offsets:
        check_register(tokens[index + offset])


def validate_single_register(tokens, index, shape):
    _operands(tokens, index, 1, shape)
    _expect_kinds(tokens, index, shape, {1: Kind.REGISTER})
    _check_registers(tokens, index, (1,))


def validate_jump_register(tokens, index):
    validate_single_register(tokens, index, SHAPE_JUMP_REGISTER)


def validate_move(tokens, index):
    validate_single_register(tokens, index, SHAPE_MOVE)


def validate_simple_r(tokens, index):
    _operands(tokens, index, 5, SHAPE_SIMPLE_R)
    _expect_kinds(tokens, index, SHAPE_SIMPLE_R, {
        2: Kind.COMMA, 4: Kind.COMMA,
        1: Kind.REGISTER, 3: Kind.REGISTER, 5: Kind.REGISTER,
    })
    _check_registers(tokens, index, (1, 3, 5))


def validate_mul_div(tokens, index):
    _operands(tokens, index, 3, SHAPE_MUL_DIV)
    _expect_kinds(tokens, index, SHAPE_MUL_DIV, {2: Kind.COMMA, 1: Kind.REGISTER, 3: Kind.REGISTER})
    _check_registers(tokens, index, (1, 3))


def validate_load_store(tokens, index):
    _operands(tokens, index, 6, SHAPE_LOAD_STORE)
    _expect_kinds(tokens, index, SHAPE_LOAD_STORE, {
        2: Kind.COMMA, 4: Kind.LPAREN, 6: Kind.RPAREN,
        1: Kind.REGISTER, 5: Kind.REGISTER,
    })
    _check_registers(tokens, index, (1, 5))
    offset_tok = tokens[index + 3]
    if offset_tok.kind not in (Kind.INT, Kind.HEXINT):
        raise _malformed(SHAPE_LOAD_STORE, tokens[index].lexeme, f"Invalid offset '{offset_tok.lexeme}'")
    check_immediate16(offset_tok)


def validate_branch(tokens, index):
    _operands(tokens, index, 5, SHAPE_BRANCH)
    _expect_kinds(tokens, index, SHAPE_BRANCH, {
        2: Kind.COMMA, 4: Kind.COMMA,
        1: Kind.REGISTER, 3: Kind.REGISTER,
    })
    _check_registers(tokens, index, (1, 3))
    target = tokens[index + 5]
    if target.kind is Kind.ID:
        return  # Resolved in pass 2
    if target.kind not in (Kind.INT, Kind.HEXINT):
        raise _malformed(SHAPE_BRANCH, tokens[index].lexeme, f"Invalid branch target '{target.lexeme}'")
    check_immediate16(target)


def validate_word(tokens, index):
    """.word takes exactly one literal or label."""
    _operands(tokens, index, 1, SHAPE_DIRECTIVE)
    value = tokens[index + 1]
    if value.kind in (Kind.INT, Kind.HEXINT):
        value.to_int()  # 32-bit range check
    elif value.kind is not Kind.ID:
        raise _malformed(SHAPE_DIRECTIVE, tokens[index].lexeme, f"Invalid .word value '{value.lexeme}'")


SHAPE_VALIDATORS = {
    SHAPE_JUMP_REGISTER: validate_jump_register,
    SHAPE_MOVE: validate_move,
    SHAPE_SIMPLE_R: validate_simple_r,
    SHAPE_MUL_DIV: validate_mul_div,
    SHAPE_LOAD_STORE: validate_load_store,
    SHAPE_BRANCH: validate_branch,
    SHAPE_DIRECTIVE: validate_word,
}


def validate_instruction(opcode, tokens, index):
    SHAPE_VALIDATORS[INSTRUCTION_SHAPES[opcode]](tokens, index)

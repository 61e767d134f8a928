# mips_asm/mips_encoder.py
import logging
import struct

from mips_asm.mips_consts import (
    Kind, Opcode, INSTRUCTION_SHAPES, R_TYPE_FUNCT, I_TYPE_OPCODE,
    IMM16_MIN, IMM16_MAX, WORD_SIZE,
    SHAPE_JUMP_REGISTER, SHAPE_MOVE, SHAPE_SIMPLE_R, SHAPE_MUL_DIV,
    SHAPE_LOAD_STORE, SHAPE_BRANCH,
)
from mips_asm.mips_errors import ImmediateOutOfRange

logger = logging.getLogger(__name__)

WORD_MASK = 0xFFFFFFFF


def _reg(tokens, index, offset):
    return tokens[index + offset].to_int()


def encode_jump_register(opcode, tokens, index, address, symbols):
    # Format: opcode(6)=0 rs(5) 0(15) funct(6)
    s = _reg(tokens, index, 1)
    return (s << 21) | R_TYPE_FUNCT[opcode]


def encode_move(opcode, tokens, index, address, symbols):
    d = _reg(tokens, index, 1)
    return (d << 11) | R_TYPE_FUNCT[opcode]


def encode_simple_r(opcode, tokens, index, address, symbols):
    # Format: opcode(6)=0 rs(5) rt(5) rd(5) shamt(5)=0 funct(6); source order is $d, $s, $t
    d = _reg(tokens, index, 1)
    s = _reg(tokens, index, 3)
    t = _reg(tokens, index, 5)
    return (s << 21) | (t << 16) | (d << 11) | R_TYPE_FUNCT[opcode]


def encode_mul_div(opcode, tokens, index, address, symbols):
    s = _reg(tokens, index, 1)
    t = _reg(tokens, index, 3)
    return (s << 21) | (t << 16) | R_TYPE_FUNCT[opcode]


def encode_load_store(opcode, tokens, index, address, symbols):
    # Format: opcode(6) rs(5) rt(5) immediate(16); source order is $t, i($s)
    t = _reg(tokens, index, 1)
    imm = tokens[index + 3].to_int()
    s = _reg(tokens, index, 5)
    return (I_TYPE_OPCODE[opcode] << 26) | (s << 21) | (t << 16) | (imm & 0xFFFF)


def branch_displacement(target_addr, address):
    """Signed word distance from the delay slot (address + 4) to target_addr."""
    byte_offset = target_addr - (address + WORD_SIZE)
    word_offset = byte_offset // WORD_SIZE
    if not (IMM16_MIN <= word_offset <= IMM16_MAX):
        raise ImmediateOutOfRange(f"Branch target (offset {word_offset}) too far for 16-bit signed relative offset")
    return word_offset


def encode_branch(opcode, tokens, index, address, symbols):
    s = _reg(tokens, index, 1)
    t = _reg(tokens, index, 3)
    target = tokens[index + 5]
    if target.kind is Kind.ID:
        target_addr = symbols.resolve(target.lexeme)
        imm = branch_displacement(target_addr, address)
        logger.debug(f"Branch '{opcode.value}' to '{target.lexeme}' (0x{target_addr:08x}) from 0x{address:08x}. Offset = {imm}")
    else:
        imm = target.to_int()
    return (I_TYPE_OPCODE[opcode] << 26) | (s << 21) | (t << 16) | (imm & 0xFFFF)


def encode_word(tokens, index, symbols):
    """.word: literal value or a label's address."""
    value = tokens[index + 1]
    if value.kind is Kind.ID:
        return symbols.resolve(value.lexeme) & WORD_MASK
    return value.to_int() & WORD_MASK


SHAPE_ENCODERS = {
    SHAPE_JUMP_REGISTER: encode_jump_register,
    SHAPE_MOVE: encode_move,
    SHAPE_SIMPLE_R: encode_simple_r,
    SHAPE_MUL_DIV: encode_mul_div,
    SHAPE_LOAD_STORE: encode_load_store,
    SHAPE_BRANCH: encode_branch,
}

# An opcode the validators accept must never reach encode_instruction without an encoder
_unencodable = sorted(op.name for op in Opcode
                      if op is not Opcode.BLANK and INSTRUCTION_SHAPES[op] not in SHAPE_ENCODERS)
if _unencodable:
    raise RuntimeError(f"No encoder for opcodes: {', '.join(_unencodable)}")


def encode_instruction(opcode, tokens, index, address, symbols):
    """Encodes one validated instruction located at `address`."""
    encoder = SHAPE_ENCODERS[INSTRUCTION_SHAPES[opcode]]
    return encoder(opcode, tokens, index, address, symbols)


def words_to_bytes(words):
    """Concatenated big-endian 32-bit words."""
    return struct.pack(f">{len(words)}I", *(w & WORD_MASK for w in words))

# mips_asm/mips_consts.py
from enum import Enum


class Kind(Enum):
    """Token kinds produced by the lexer."""
    ID = "ID"                 # Opcode or use of a label
    INT = "INT"               # Decimal integer
    HEXINT = "HEXINT"         # Hexadecimal integer (0x...)
    REGISTER = "REGISTER"     # $n
    COMMA = "COMMA"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LABEL = "LABEL"           # Label declaration, lexeme keeps the trailing colon
    DOTWORD = "DOTWORD"       # .word directive
    WHITESPACE = "WHITESPACE" # Blanks and comments, never leaves the lexer


class Opcode(Enum):
    """Supported mnemonics. BLANK is the 'not an opcode' result of lookup."""
    BLANK = "blank"
    ADD = "add"
    SUB = "sub"
    SLT = "slt"
    SLTU = "sltu"
    MULT = "mult"
    MULTU = "multu"
    DIV = "div"
    DIVU = "divu"
    MFHI = "mfhi"
    MFLO = "mflo"
    LIS = "lis"
    LW = "lw"
    SW = "sw"
    BEQ = "beq"
    BNE = "bne"
    JR = "jr"
    JALR = "jalr"

    @classmethod
    def lookup(cls, mnemonic):
        """Case-insensitive mnemonic lookup, BLANK when unknown."""
        try:
            op = cls(mnemonic.lower())
        except ValueError:
            return cls.BLANK
        return op


# --- Instruction shapes (operand grammar after the opcode token) ---
SHAPE_JUMP_REGISTER = "jump-register"  # $s
SHAPE_MOVE = "move"                    # $d
SHAPE_SIMPLE_R = "simple-R"            # $d, $s, $t
SHAPE_MUL_DIV = "mul-div"              # $s, $t
SHAPE_LOAD_STORE = "load-store"        # $t, i($s)
SHAPE_BRANCH = "branch"                # $s, $t, i|label
SHAPE_DIRECTIVE = "directive"          # .word i|label

SHAPE_GRAMMAR = {
    SHAPE_JUMP_REGISTER: "$s",
    SHAPE_MOVE: "$d",
    SHAPE_SIMPLE_R: "$d, $s, $t",
    SHAPE_MUL_DIV: "$s, $t",
    SHAPE_LOAD_STORE: "$t, i($s)",
    SHAPE_BRANCH: "$s, $t, i|label",
    SHAPE_DIRECTIVE: "i|label",
}

INSTRUCTION_SHAPES = {
    Opcode.JR: SHAPE_JUMP_REGISTER, Opcode.JALR: SHAPE_JUMP_REGISTER,
    Opcode.MFHI: SHAPE_MOVE, Opcode.MFLO: SHAPE_MOVE, Opcode.LIS: SHAPE_MOVE,
    Opcode.ADD: SHAPE_SIMPLE_R, Opcode.SUB: SHAPE_SIMPLE_R,
    Opcode.SLT: SHAPE_SIMPLE_R, Opcode.SLTU: SHAPE_SIMPLE_R,
    Opcode.MULT: SHAPE_MUL_DIV, Opcode.MULTU: SHAPE_MUL_DIV,
    Opcode.DIV: SHAPE_MUL_DIV, Opcode.DIVU: SHAPE_MUL_DIV,
    Opcode.LW: SHAPE_LOAD_STORE, Opcode.SW: SHAPE_LOAD_STORE,
    Opcode.BEQ: SHAPE_BRANCH, Opcode.BNE: SHAPE_BRANCH,
}

# --- Opcode/Funct Maps ---
# R-type words have primary opcode 0 and are told apart by funct
R_TYPE_FUNCT = {
    Opcode.ADD: 0x20, Opcode.SUB: 0x22, Opcode.SLT: 0x2a, Opcode.SLTU: 0x2b,
    Opcode.MULT: 0x18, Opcode.MULTU: 0x19, Opcode.DIV: 0x1a, Opcode.DIVU: 0x1b,
    Opcode.MFHI: 0x10, Opcode.MFLO: 0x12, Opcode.LIS: 0x14,
    Opcode.JR: 0x08, Opcode.JALR: 0x09,
}

I_TYPE_OPCODE = {
    Opcode.LW: 35, Opcode.SW: 43,
    Opcode.BEQ: 4, Opcode.BNE: 5,
}

# --- Field widths and ranges ---
WORD_SIZE = 4
WORD_BITS = 32
REGISTER_BITS = 5

IMM16_MIN, IMM16_MAX = -(1 << 15), (1 << 15) - 1  # decimal immediates
HEX16_MAX = 0xFFFF                                 # hex immediates are unsigned


def _check_tables():
    """Every real opcode needs a shape and exactly one code."""
    for op in Opcode:
        if op is Opcode.BLANK:
            continue
        if op not in INSTRUCTION_SHAPES:
            raise RuntimeError(f"Opcode {op.name} has no instruction shape")
        if (op in R_TYPE_FUNCT) == (op in I_TYPE_OPCODE):
            raise RuntimeError(f"Opcode {op.name} needs exactly one of a funct or an opcode value")


_check_tables()

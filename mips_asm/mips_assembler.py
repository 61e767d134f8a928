# mips_asm/mips_assembler.py
import re
import logging

from mips_asm.mips_consts import Kind, Opcode, WORD_SIZE
from mips_asm.mips_encoder import encode_instruction, encode_word, words_to_bytes
from mips_asm.mips_errors import AssemblerError, InvalidStatement, UnknownOpcode
from mips_asm.mips_lexer import Lexer
from mips_asm.mips_symbols import SymbolTable
from mips_asm.mips_validators import validate_instruction, validate_word

logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(source):
    """Splits on \\n, \\r or \\r\\n; a trailing line break does not start a new line."""
    lines = LINE_BREAK.split(source)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class MipsAssembler:
    def __init__(self, base_address=0):
        self.base_address = base_address
        self.lexer = Lexer()
        self._reset()

    def _reset(self):
        self.symbol_table = SymbolTable()
        self.source_lines = []
        self.program = []           # One token list per source line, kept for both passes
        self.pass1_addresses = []   # Location counter at the start of each line
        self.pass2_addresses = []
        self.machine_code = []      # Generated integer words
        self.errors = []

    def _annotate(self, err, line_num):
        """Attaches the failing line to an error raised by a lower layer."""
        if err.line_num is None:
            err.line_num = line_num
            err.text = self.source_lines[line_num - 1]
        return err

    def _read_program(self, source):
        """Lexes every line up front; both passes walk the same token lists."""
        self.source_lines = split_lines(source)
        for line_num, line in enumerate(self.source_lines, start=1):
            try:
                tokens = self.lexer.scan(line)
            except AssemblerError as e:
                raise self._annotate(e, line_num)
            logger.debug(f"{line_num}: {line}")
            for tok in tokens:
                logger.debug(f"  Token: {tok}")
            self.program.append(tokens)

    def _skip_labels(self, tokens, address=None):
        """Index of the first non-label token; binds each label when an address is given."""
        current = 0
        while current < len(tokens) and tokens[current].kind is Kind.LABEL:
            if address is not None:
                self.symbol_table.define(tokens[current].label_name(), address)
            current += 1
        return current

    def _lookup_opcode(self, token):
        opcode = Opcode.lookup(token.lexeme)
        if opcode is Opcode.BLANK:
            raise UnknownOpcode(f"Unknown instruction: '{token.lexeme}'", lexeme=token.lexeme)
        return opcode

    def first_pass(self):
        """Pass 1: bind labels, validate every statement, count addresses."""
        logger.debug("--- Starting First Pass ---")
        address = self.base_address
        for line_num, tokens in enumerate(self.program, start=1):
            self.pass1_addresses.append(address)
            try:
                current = self._skip_labels(tokens, address)
                if current == len(tokens):
                    continue  # Empty or label-only line takes no space

                tok = tokens[current]
                if tok.kind is Kind.DOTWORD:
                    validate_word(tokens, current)
                elif tok.kind is Kind.ID:
                    validate_instruction(self._lookup_opcode(tok), tokens, current)
                else:
                    raise InvalidStatement(f"Statement cannot start with '{tok.lexeme}' ({tok.kind.value})", lexeme=tok.lexeme)
            except AssemblerError as e:
                raise self._annotate(e, line_num)

            logger.debug(f"Pass 1: '{tok.lexeme}' at 0x{address:08x}")
            address += WORD_SIZE

        for name, label_addr in self.symbol_table:
            logger.debug(f"Symbol {name} 0x{label_addr:08x}")
        logger.debug("--- First Pass Complete ---")

    def second_pass(self):
        """Pass 2: encode every statement with the finished symbol table."""
        logger.debug("--- Starting Second Pass ---")
        address = self.base_address
        words = []
        for line_num, tokens in enumerate(self.program, start=1):
            if address != self.pass1_addresses[line_num - 1]:
                raise RuntimeError(f"Internal Error: line {line_num} at 0x{address:08x} in pass 2 but 0x{self.pass1_addresses[line_num - 1]:08x} in pass 1")
            self.pass2_addresses.append(address)

            current = self._skip_labels(tokens)
            if current == len(tokens):
                continue

            tok = tokens[current]
            try:
                if tok.kind is Kind.DOTWORD:
                    word = encode_word(tokens, current, self.symbol_table)
                else:
                    word = encode_instruction(Opcode.lookup(tok.lexeme), tokens, current, address, self.symbol_table)
            except AssemblerError as e:
                raise self._annotate(e, line_num)

            logger.debug(f"Pass 2: Assembled 0x{word:08x} for line {line_num} at 0x{address:08x}")
            words.append(word)
            address += WORD_SIZE
        logger.debug("--- Second Pass Complete ---")
        return words

    def run(self, source):
        """Assembles `source` into a list of 32-bit words, raising AssemblerError on the first error."""
        self._reset()
        self._read_program(source)
        self.first_pass()
        # Only publish output once both passes succeeded
        self.machine_code = self.second_pass()
        return self.machine_code

    def assemble_binary(self, source):
        return words_to_bytes(self.run(source))

    def tokenize(self, source):
        """Per-line token listing for diagnostics."""
        self._reset()
        self._read_program(source)
        return [
            {"line": line_num, "text": text, "tokens": [tok.to_dict() for tok in tokens]}
            for line_num, (text, tokens) in enumerate(zip(self.source_lines, self.program), start=1)
        ]

    def assemble(self, source):
        """ Main method to assemble MIPS code. Errors are reported in the result, never raised. """
        logger.info("Starting assembly process...")
        try:
            self.run(source)
        except AssemblerError as e:
            self.machine_code = []
            self.errors.append(e.to_dict())
        except Exception as e:
            logger.error(f"Unexpected exception during assembly: {e}", exc_info=True)
            self.machine_code = []
            self.errors.append({"line": 0, "kind": "InternalError",
                                "message": f"An unexpected internal error occurred during assembly: {e}", "text": ""})

        formatted_output = []
        for code in self.machine_code:
            formatted_output.append({
                "hex": f"0x{code:08x}",
                "bin": f"{code:032b}",
                "dec": str(code)  # Unsigned decimal representation
            })

        if self.errors:
            logger.warning(f"Assembly failed: {self.errors[0]['message']}")
        else:
            logger.info("Assembly successful.")

        return {
            "machine_code": formatted_output,
            "binary": words_to_bytes(self.machine_code).hex(),
            "symbol_table": self.symbol_table.as_dict(),
            "errors": self.errors,
        }

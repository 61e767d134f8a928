# mips_asm/mips_errors.py


class AssemblerError(Exception):
    """Base class for every fatal assembly error.

    The driver fills in line_num/text when the error escapes a line, so the
    lower layers only need to describe what went wrong.
    """
    kind = "AssemblerError"

    def __init__(self, message, lexeme=None, line_num=None, text=None):
        super().__init__(message)
        self.message = message
        self.lexeme = lexeme
        self.line_num = line_num
        self.text = text

    def to_dict(self):
        """Error record in the same layout as the assembler's error list."""
        return {
            "line": self.line_num or 0,
            "kind": self.kind,
            "message": self.message,
            "text": self.text or "",
        }

    def __str__(self):
        if self.line_num:
            return f"{self.kind} on line {self.line_num}: {self.message}"
        return f"{self.kind}: {self.message}"


class LexicalError(AssemblerError):
    kind = "LexicalError"

    def __init__(self, prefix, **kwargs):
        super().__init__(f"Lexing failed after reading '{prefix}'", lexeme=prefix, **kwargs)
        self.prefix = prefix


class UnknownOpcode(AssemblerError):
    kind = "UnknownOpcode"


class MalformedOperands(AssemblerError):
    kind = "MalformedOperands"


class InvalidStatement(MalformedOperands):
    """A line whose first non-label token is neither an opcode nor .word."""
    kind = "InvalidStatement"


class RegisterOutOfRange(AssemblerError):
    kind = "RegisterOutOfRange"


class ImmediateOutOfRange(AssemblerError):
    kind = "ImmediateOutOfRange"


class DuplicateLabel(AssemblerError):
    kind = "DuplicateLabel"


class UndefinedLabel(AssemblerError):
    kind = "UndefinedLabel"

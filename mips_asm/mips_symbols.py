# mips_asm/mips_symbols.py
import logging

from mips_asm.mips_errors import DuplicateLabel, UndefinedLabel

logger = logging.getLogger(__name__)


class SymbolTable:
    """Write-once mapping of label name -> byte address."""

    def __init__(self):
        self._symbols = {}

    def define(self, name, address):
        if name in self._symbols:
            raise DuplicateLabel(f"Duplicate label definition: {name}", lexeme=name)
        self._symbols[name] = address
        logger.debug(f"Label '{name}' defined at address 0x{address:08x}")

    def get(self, name):
        return self._symbols.get(name)

    def resolve(self, name):
        """Address of `name`; raises UndefinedLabel if it was never defined."""
        if name not in self._symbols:
            raise UndefinedLabel(f"Undefined label: '{name}'", lexeme=name)
        return self._symbols[name]

    def as_dict(self):
        return dict(self._symbols)

    def __contains__(self, name):
        return name in self._symbols

    def __len__(self):
        return len(self._symbols)

    def __iter__(self):
        return iter(self._symbols.items())

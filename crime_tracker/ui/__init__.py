from .line_reader import InvalidInput, LineReader, MaskedLineReader
from .shell import Action, Shell

__all__ = ["Action", "InvalidInput", "LineReader", "MaskedLineReader", "Shell"]

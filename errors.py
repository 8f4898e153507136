class HuffmanError(Exception):
    """Base class for every error raised by the Huffman coder."""


class EmptyInputError(HuffmanError, ValueError):
    """Raised when a frequency table or tree is requested for empty input."""


class UnknownSymbolError(HuffmanError, KeyError):
    """Raised by the encoder for a symbol that has no code.

    :ivar symbol: The symbol that was looked up.
    """

    def __init__(self, symbol):
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self):
        return f"Symbol {self.symbol!r} is not in the code table"


class MalformedBitstreamError(HuffmanError, ValueError):
    """Raised when a bitstream cannot be decoded against a tree.

    :ivar position: Index of the bit at which decoding failed.
    :type position: int
    """

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} (at bit {position})")
        self.position = position


class InconsistentTreeError(HuffmanError, RuntimeError):
    """Raised when a tree node has exactly one child.

    Trees built by :func:`huffman.build_tree` never trigger this; seeing it
    means the tree was corrupted after construction.
    """

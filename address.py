from dataclasses import dataclass
from constants import (
    WORD_SIZE_BITS,
    DEFAULT_TAG_BITS,
    DEFAULT_INDEX_BITS,
    DEFAULT_OFFSET_BITS,
)
from errors import InvalidConstructionParams

WORD_MASK = (1 << WORD_SIZE_BITS) - 1
HEX_DIGITS = "0123456789abcdef"


def hex_to_int(text: str) -> int:
    """
    Converts a hexadecimal address such as "0x0040f2a8" to an unsigned 32 bit
    integer. No validation is performed: characters that are not hex digits
    are skipped and the result wraps around at 32 bits.
    """
    if text.startswith("0x"):
        text = text[2:]
    result = 0
    for char in text.lower():
        digit = HEX_DIGITS.find(char)
        if digit < 0:
            continue
        result = ((result << 4) | digit) & WORD_MASK
    return result


def to_binary(value: int, width: int = WORD_SIZE_BITS) -> str:
    if width == 0:
        return ""
    return format(value & ((1 << width) - 1), f"0{width}b")


def field_to_int(bits: str) -> int:
    """Converts a bit string back to an integer. Returns 0 on any non binary character."""
    result = 0
    for char in bits:
        if char not in "01":
            return 0
        result = (result << 1) | (char == "1")
    return result


@dataclass(frozen=True)
class MemAddressInfo:
    value: int
    tag: int
    index: int
    offset: int
    tag_bits_width: int
    index_bits_width: int
    offset_bits_width: int

    @property
    def tag_bits(self) -> str:
        return to_binary(self.tag, self.tag_bits_width)

    @property
    def index_bits(self) -> str:
        return to_binary(self.index, self.index_bits_width)

    @property
    def offset_bits(self) -> str:
        return to_binary(self.offset, self.offset_bits_width)


@dataclass(frozen=True)
class AddressCodec:
    """
    Splits 32 bit addresses into tag, index and byte select fields.

     -----------------------------------------------------
    | Tag: 18 bits | Index: 12 bits | Byte Select: 2 bits |
     -----------------------------------------------------
    """
    tag_bits: int = DEFAULT_TAG_BITS
    index_bits: int = DEFAULT_INDEX_BITS
    offset_bits: int = DEFAULT_OFFSET_BITS

    def __post_init__(self):
        widths = (self.tag_bits, self.index_bits, self.offset_bits)
        if any(width < 0 for width in widths) or sum(widths) != WORD_SIZE_BITS:
            raise InvalidConstructionParams(
                f"Field widths must be non-negative and sum to {WORD_SIZE_BITS}, got {widths}"
            )

    def get_info_from_value(self, value: int) -> MemAddressInfo:
        value &= WORD_MASK
        offset = value & ((1 << self.offset_bits) - 1)
        index = (value >> self.offset_bits) & ((1 << self.index_bits) - 1)
        tag = value >> (self.offset_bits + self.index_bits)
        return MemAddressInfo(
            value, tag, index, offset,
            self.tag_bits, self.index_bits, self.offset_bits,
        )

    def decode(self, address: str) -> MemAddressInfo:
        return self.get_info_from_value(hex_to_int(address))

    def format_binary(self, value: int) -> str:
        """
        Binary string with the fields separated by spaces, e.g.
        000000000010001110 101111011111 00
        """
        info = self.get_info_from_value(value)
        return " ".join([info.tag_bits, info.index_bits, info.offset_bits])

    def describe(self, address: str) -> list[str]:
        info = self.decode(address)
        return [
            f"Hex: {address}",
            f"Decimal: {info.value}",
            f"Binary: {to_binary(info.value)}",
            f"Formatted: {self.format_binary(info.value)}",
            f"Tag: {info.tag_bits} ({field_to_int(info.tag_bits)})",
            f"Index: {info.index_bits} ({field_to_int(info.index_bits)})",
            f"Offset: {info.offset_bits} ({field_to_int(info.offset_bits)})",
        ]

"""
Default cache geometry.
Addresses are 32 bit words split into an 18 bit tag, a 12 bit index and a
2 bit byte select, so the default cache holds 4096 lines of 4 bytes each.
"""
WORD_SIZE_BITS = 32

DEFAULT_TAG_BITS = 18
DEFAULT_INDEX_BITS = 12
DEFAULT_OFFSET_BITS = 2

DEFAULT_BLOCK_SIZE_BYTES = 4
DEFAULT_CACHE_SIZE_BYTES = 16384

COMMENT_PREFIX = "#"

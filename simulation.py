from dataclasses import dataclass, field
from typing import Iterable, Optional
from access import Access, AccessType
from address import AddressCodec
from cache import Cache, CacheAccessResult, WritePolicy
from constants import (
    COMMENT_PREFIX,
    DEFAULT_CACHE_SIZE_BYTES,
    DEFAULT_BLOCK_SIZE_BYTES,
    DEFAULT_TAG_BITS,
    DEFAULT_INDEX_BITS,
    DEFAULT_OFFSET_BITS,
)
from errors import MalformedTraceRecord
from eviction import make_eviction_policy
import logging

LOGGER = logging.getLogger("cachesim")

@dataclass
class Simulation:
    write_policy: WritePolicy
    input_file: str = None
    cache_size: int = DEFAULT_CACHE_SIZE_BYTES
    block_size: int = DEFAULT_BLOCK_SIZE_BYTES
    tag_bits: int = DEFAULT_TAG_BITS
    index_bits: int = DEFAULT_INDEX_BITS
    offset_bits: int = DEFAULT_OFFSET_BITS
    eviction: str = "none"
    debug: bool = False
    cache: Cache = field(init=False)
    accesses: int = field(init=False, default=0)
    dropped: int = field(init=False, default=0)

    def __post_init__(self):
        codec = AddressCodec(self.tag_bits, self.index_bits, self.offset_bits)
        self.cache = Cache(
            self.cache_size,
            self.block_size,
            self.write_policy,
            codec=codec,
            eviction_policy=make_eviction_policy(self.eviction),
        )
        self.write_policy = self.cache.write_policy
        LOGGER.debug(f"Write Policy: {self.write_policy.name.replace('_', ' ').title()}")

    def _parse_line(self, line: str, line_number: int) -> Optional[Access]:
        """
        Trace lines look like "0x0040f2a8: W 0x1fffff50". Comment lines and
        blank lines yield None. A mode other than R or W is fatal.
        """
        if line.startswith(COMMENT_PREFIX) or not line.strip():
            return None
        line_list = line.split()
        if len(line_list) < 3:
            raise MalformedTraceRecord(line_number, line.rstrip("\n"))
        try:
            access_type = AccessType(line_list[1])
        except ValueError:
            raise MalformedTraceRecord(line_number, line.rstrip("\n")) from None
        return Access(access_type, line_list[2])

    def run(self, lines: Iterable[str]) -> Cache:
        counter = 0
        for line in lines:
            access = self._parse_line(line, counter)
            if access is None:
                continue
            LOGGER.debug(f"{counter}: {access.type.value} {access.address}")
            if self.debug:
                for detail in self.cache.codec.describe(access.address):
                    LOGGER.debug(detail)

            res: CacheAccessResult = self.cache.access(access.type, access.address)
            if not res.processed:
                self.dropped += 1
            counter += 1

        self.accesses = counter
        LOGGER.debug(f"Num Lines: {counter}")
        return self.cache

    def simulate(self) -> Cache:
        # bytes outside ASCII decode one to one and are skipped by the hex parser
        with open(self.input_file, encoding="latin-1") as f:
            return self.run(f)

    def print_final_outputs(self):
        self.cache.print_final_outputs()

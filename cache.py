from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union
from access import AccessType
from address import AddressCodec, to_binary
from errors import InvalidAccessInput, InvalidConstructionParams
from eviction import EvictionPolicy, NoEvictionPolicy
import logging

LOGGER = logging.getLogger("cachesim")


class WritePolicy(Enum):
    WRITE_THROUGH = "wt"
    WRITE_BACK = "wb"

    @classmethod
    def parse(cls, value: Union["WritePolicy", str]) -> "WritePolicy":
        if isinstance(value, cls):
            return value
        aliases = {
            "wt": cls.WRITE_THROUGH,
            "write-through": cls.WRITE_THROUGH,
            "wb": cls.WRITE_BACK,
            "write-back": cls.WRITE_BACK,
        }
        if isinstance(value, str) and value.lower() in aliases:
            return aliases[value.lower()]
        raise InvalidConstructionParams(f"Invalid write policy: {value!r}")


class CacheAccessResult(Enum):
    CACHE_HIT = 1
    CACHE_MISS = 2
    CACHE_FULL = 3 # missed and could not be installed

    @property
    def processed(self) -> bool:
        return self is not CacheAccessResult.CACHE_FULL


@dataclass
class Block:
    tag: int
    valid: bool = True
    dirty: bool = False


class BlockStore:
    """
    Fixed number of cache line slots, each either empty (None) or holding a Block.
    Every lookup scans the whole store; there is no set indexing.
    """

    def __init__(self, num_lines: int):
        self.slots: list[Optional[Block]] = [None] * num_lines

    def __len__(self):
        return len(self.slots)

    def __iter__(self) -> Iterator[Optional[Block]]:
        return iter(self.slots)

    def __getitem__(self, index: int) -> Optional[Block]:
        return self.slots[index]

    def find(self, tag: int) -> Optional[int]:
        for i, block in enumerate(self.slots):
            if block is not None and block.valid and block.tag == tag:
                return i
        return None

    def first_empty(self) -> Optional[int]:
        for i, block in enumerate(self.slots):
            if block is None:
                return i
        return None

    def insert(self, index: int, block: Block):
        if self.slots[index] is not None:
            raise ValueError(f"Error, slot {index} is already occupied by {self.slots[index]}")
        self.slots[index] = block

    def replace(self, index: int, block: Block) -> Block:
        evicted = self.slots[index]
        self.slots[index] = block
        return evicted

    def occupied(self) -> int:
        return sum(1 for block in self.slots if block is not None and block.valid)


class Cache:
    """
    Fully mapped cache. Any tag may live in any slot and the index field is ignored.

    hits and misses count cache accesses; reads and writes count main memory
    transactions. A miss fills a line from memory (one read). Under write
    through every write hit is also a memory write; under write back the line
    is marked dirty instead and nothing is flushed unless a line is evicted.
    """

    def __init__(
        self,
        cache_size: int,
        block_size: int,
        write_policy: Union[WritePolicy, str],
        codec: Optional[AddressCodec] = None,
        eviction_policy: Optional[EvictionPolicy] = None,
    ):
        if not isinstance(cache_size, int) or not isinstance(block_size, int) \
                or cache_size <= 0 or block_size <= 0:
            raise InvalidConstructionParams(
                f"Invalid cache parameters: cache size {cache_size}, block size {block_size}"
            )
        self.write_policy = WritePolicy.parse(write_policy)
        self.cache_size = cache_size
        self.block_size = block_size
        self.num_lines = cache_size // block_size
        if cache_size % block_size:
            LOGGER.warning(
                f"Block size {block_size} does not divide cache size {cache_size}, using {self.num_lines} lines"
            )
        self.codec = codec if codec is not None else AddressCodec()
        self.eviction_policy = eviction_policy if eviction_policy is not None else NoEvictionPolicy()
        self.blocks = BlockStore(self.num_lines)
        self.hits = 0
        self.misses = 0
        self.reads = 0
        self.writes = 0

    def read(self, address: str) -> CacheAccessResult:
        return self.access(AccessType.READ, address)

    def write(self, address: str) -> CacheAccessResult:
        return self.access(AccessType.WRITE, address)

    def access(self, access_type: AccessType, address: str) -> CacheAccessResult:
        if not isinstance(access_type, AccessType):
            raise InvalidAccessInput(f"Error: Invalid access type {access_type!r}")
        if not isinstance(address, str) or not address:
            raise InvalidAccessInput("Error: Invalid cache or memory address.")

        tag = self.codec.decode(address).tag
        slot = self.blocks.find(tag)
        if slot is not None:
            return self.on_cache_hit(access_type, slot)
        return self.on_cache_miss(access_type, tag)

    def on_cache_hit(self, access_type: AccessType, slot: int) -> CacheAccessResult:
        self.hits += 1
        if access_type == AccessType.WRITE:
            match self.write_policy:
                case WritePolicy.WRITE_THROUGH:
                    self.writes += 1
                case WritePolicy.WRITE_BACK:
                    self.blocks[slot].dirty = True
        self.eviction_policy.use(slot)
        return CacheAccessResult.CACHE_HIT

    def on_cache_miss(self, access_type: AccessType, tag: int) -> CacheAccessResult:
        self.misses += 1
        new_block = Block(tag, valid=True, dirty=access_type == AccessType.WRITE)

        slot = self.blocks.first_empty()
        if slot is not None:
            self.blocks.insert(slot, new_block)
        else:
            slot = self.eviction_policy.select_victim(self.blocks.slots)
            if slot is None:
                self.log(f"Cache full, dropping tag {to_binary(tag, self.codec.tag_bits)}")
                return CacheAccessResult.CACHE_FULL
            self.evict_block(slot, new_block)

        self.reads += 1
        self.eviction_policy.use(slot)
        return CacheAccessResult.CACHE_MISS

    def evict_block(self, slot: int, new_block: Block):
        evicted = self.blocks.replace(slot, new_block)
        self.log(f"Evicting slot {slot}: {evicted}")
        if evicted.dirty and self.write_policy == WritePolicy.WRITE_BACK:
            # write back
            self.writes += 1

    def print_final_outputs(self):
        print(f"CACHE HITS: {self.hits}")
        print(f"CACHE MISSES: {self.misses}")
        print(f"MEMORY READS: {self.reads}")
        print(f"MEMORY WRITES: {self.writes}")

    def print_cache(self):
        for i, block in enumerate(self.blocks):
            tag = to_binary(block.tag, self.codec.tag_bits) if block is not None else "NULL"
            valid = int(block.valid) if block is not None else 0
            print(f"[{i}]: {{ valid: {valid}, tag: {tag} }}")
        print(f"Cache:\n\tCACHE HITS: {self.hits}\n\tCACHE MISSES: {self.misses}"
              f"\n\tREADS: {self.reads}\n\tWRITES: {self.writes}\n")

    def log(self, message: str):
        LOGGER.debug("Cache: " + message)

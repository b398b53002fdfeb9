"""
Simulates a fully mapped cache using a trace file and either a write through
or write back policy.

Usage: sim [-h] <write policy> <trace file>

<write policy> is one of:
    wt - simulate a write through cache.
    wb - simulate a write back cache

<trace file> is the name of a file that contains a memory access trace, one
access per line in the form "<pc>: <R|W> <hex address>". Lines starting with
'#' are ignored.
"""
import argparse
import logging
import sys
from cache import WritePolicy
from constants import (
    DEFAULT_CACHE_SIZE_BYTES,
    DEFAULT_BLOCK_SIZE_BYTES,
    DEFAULT_TAG_BITS,
    DEFAULT_INDEX_BITS,
    DEFAULT_OFFSET_BITS,
)
from errors import CacheSimError, MalformedTraceRecord
from eviction import EVICTION_POLICIES
from simulation import Simulation

LOGGER = logging.getLogger("cachesim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sim",
        description="Simulate a cache using a memory access trace.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="<write policy> is one of:\n\twt - simulate a write through cache.\n\twb - simulate a write back cache",
    )
    parser.add_argument("write_policy", metavar="<write policy>")
    parser.add_argument("trace_file", metavar="<trace file>")
    parser.add_argument("--cache-size", type=int, default=DEFAULT_CACHE_SIZE_BYTES,
                        help="total cache size in bytes (default: %(default)s)")
    parser.add_argument("--block-size", type=int, default=DEFAULT_BLOCK_SIZE_BYTES,
                        help="block size in bytes (default: %(default)s)")
    parser.add_argument("--tag-bits", type=int, default=DEFAULT_TAG_BITS)
    parser.add_argument("--index-bits", type=int, default=DEFAULT_INDEX_BITS)
    parser.add_argument("--offset-bits", type=int, default=DEFAULT_OFFSET_BITS)
    parser.add_argument("--eviction", choices=sorted(EVICTION_POLICIES), default="none",
                        help="replacement policy once the cache is full (default: %(default)s)")
    parser.add_argument("--debug", action="store_true", help="log every access and its address fields")
    parser.add_argument("--dump", action="store_true", help="print the cache lines after the report")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        write_policy = WritePolicy.parse(args.write_policy)
    except CacheSimError:
        print("Invalid Write Policy.", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2

    LOGGER.info(f"Command arguments: write policy - {write_policy.value}, trace file - {args.trace_file}, "
                f"cache size - {args.cache_size}, block size - {args.block_size}")
    try:
        simulation = Simulation(
            write_policy,
            args.trace_file,
            cache_size=args.cache_size,
            block_size=args.block_size,
            tag_bits=args.tag_bits,
            index_bits=args.index_bits,
            offset_bits=args.offset_bits,
            eviction=args.eviction,
            debug=args.debug,
        )
    except CacheSimError as e:
        print(f"Invalid cache parameters. {e}", file=sys.stderr)
        return 2

    try:
        simulation.simulate()
    except OSError:
        print("Error: Could not open file.", file=sys.stderr)
        return 1
    except MalformedTraceRecord as e:
        LOGGER.debug(str(e))
        print(f"{e.line_number}: ERROR!!!!")
        return 1

    simulation.print_final_outputs()
    if args.dump:
        simulation.cache.print_cache()
    return 0


if __name__ == "__main__":
    sys.exit(main())

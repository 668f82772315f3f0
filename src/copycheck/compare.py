import asyncio
import logging
from asyncio import TaskGroup

from .output import Output
from .records import Collection, DigestedFile, Match
from .utils.throttler import Throttler

logger = logging.getLogger(__name__)


def scan(source_file: DigestedFile, destination: Collection, output: Output) -> int:
    """Compare one source file against every destination file, in destination order.

    Pairs that resolve to the same underlying file are skipped silently. Every other pair is
    reported as a diagnostic, and reported as a match when the digests are equal.

    :return: number of matches reported."""
    matches = 0
    for destination_file in destination:
        if source_file.identity == destination_file.identity:
            continue

        output.describe_comparison(source_file, destination_file)

        if source_file.digest == destination_file.digest:
            output.describe_match(Match(source_file, destination_file))
            matches += 1

    return matches


async def compare_collections(source: Collection, destination: Collection, output: Output,
                              concurrency: int) -> int:
    """Report all matches between source and destination.

    Each source file becomes one task scanning the whole destination collection on a worker
    thread; at most `concurrency` scans run at once. Lines of different source files
    interleave in no particular order.

    :return: total number of matches reported."""
    logger.info(f"Comparing {len(source)} source files against {len(destination)} destination files")

    async with TaskGroup() as tg:
        throttler = Throttler(tg, concurrency)
        tasks = [
            await throttler.schedule(asyncio.to_thread(scan, source_file, destination, output))
            for source_file in source
        ]

    matches = sum(task.result() for task in tasks)
    logger.info(f"Comparison finished with {matches} matches")
    return matches

import asyncio
import logging
from typing import IO, Iterable

from .records import Collection, DigestedFile, FileRecord
from .settings import READ_ERROR_ABORT, READ_ERROR_SKIP
from .utils.processor import Processor, UnreadableFileError

logger = logging.getLogger(__name__)


def read_path_list(stream: IO) -> list[str]:
    """Split a newline-delimited list into paths.

    Only the line terminator is removed. Blank lines are kept; they name no file and are
    dropped later, like any other path that cannot be opened. Lines of a binary stream that
    are not valid UTF-8 are dropped here.
    """
    paths = []
    for line in stream:
        if isinstance(line, bytes):
            try:
                line = line.decode('utf-8')
            except UnicodeDecodeError:
                logger.debug(f"Skipping undecodable list line: {line!r}")
                continue
        paths.append(line.rstrip('\r\n'))
    return paths


async def load_collection(processor: Processor, paths: Iterable[str],
                          read_error_policy: str = READ_ERROR_ABORT) -> Collection:
    """Digest every listed file and return the ones that could be opened, in input order.

    All paths are handed to the processor up front; its pool bounds the actual parallelism.

    Raises:
        UnreadableFileError: A file opened but could not be read and the policy is 'abort'
    """
    if read_error_policy not in (READ_ERROR_ABORT, READ_ERROR_SKIP):
        raise ValueError(f"Unknown read error policy: {read_error_policy!r}")

    async def digest(path: str):
        try:
            return await processor.sha512(path)
        except UnreadableFileError as e:
            if read_error_policy == READ_ERROR_ABORT:
                raise
            logger.warning(f"Dropping {path!r}: {e}")
            return None

    paths = list(paths)
    results = await asyncio.gather(*(digest(path) for path in paths))

    collection: Collection = []
    for path, result in zip(paths, results):
        if result is None:
            continue
        digest_value, identity = result
        collection.append(DigestedFile(FileRecord(path, identity), digest_value))

    logger.info(f"Loaded {len(collection)} of {len(paths)} listed files")
    return collection


async def load_collections(processor: Processor, source_paths: Iterable[str], destination_paths: Iterable[str],
                           read_error_policy: str = READ_ERROR_ABORT) -> tuple[Collection, Collection]:
    """Load the source and destination collections concurrently."""
    source, destination = await asyncio.gather(
        load_collection(processor, source_paths, read_error_policy),
        load_collection(processor, destination_paths, read_error_policy),
    )
    return source, destination

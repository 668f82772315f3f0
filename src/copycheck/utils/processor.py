import asyncio
import hashlib
import logging
import multiprocessing
import os
import stat
from multiprocessing.pool import Pool
from typing import Awaitable

from ..records import FileIdentity
from .profiling import profile_worker

logger = logging.getLogger(__name__)


class UnreadableFileError(Exception):
    """A listed file was opened but its content could not be read to the end."""

    def __init__(self, path: str, reason: str):
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self):
        return f"failed to read {self.path}: {self.reason}"


@profile_worker
def digest_file(path: str) -> tuple[bytes, FileIdentity] | None:
    """Compute the SHA-512 digest and the identity of the file at path.

    :return: None if the path cannot be opened or is not a regular file.
    :raise UnreadableFileError: the file was opened but reading it failed."""
    try:
        if not stat.S_ISREG(os.stat(path).st_mode):
            return None
        f = open(path, 'rb')
    except (OSError, ValueError) as e:
        # ValueError: the path holds a NUL character and names no file.
        logger.debug(f"Skipping {path!r}: {e}")
        return None

    with f:
        try:
            identity = FileIdentity.from_stat(os.fstat(f.fileno()))
            # noinspection PyTypeChecker
            digest = hashlib.file_digest(f, hashlib.sha512).digest()
        except OSError as e:
            raise UnreadableFileError(path, e.strerror or str(e)) from e

    return digest, identity


class Processor:
    def __init__(self, concurrency: int | None = None):
        if concurrency is None:
            concurrency = multiprocessing.cpu_count()

        self._concurrency = concurrency
        self._pool: Pool = Pool(self._concurrency)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.close()
        else:
            self.terminate()

    def close(self):
        """Let queued jobs finish, then wait for the workers to exit."""
        self._pool.close()
        self._pool.join()

    def terminate(self):
        """Stop the workers at once, dropping jobs still queued or running."""
        self._pool.terminate()
        self._pool.join()

    @property
    def concurrency(self):
        return self._concurrency

    def sha512(self, path: str) -> Awaitable[tuple[bytes, FileIdentity] | None]:
        logger.info(f"Starting hash computation for: {path}")

        async def log_and_compute():
            result = await self._evaluate(digest_file, path)
            if result is None:
                logger.info(f"Skipped hash computation for: {path}")
            else:
                logger.info(f"Completed hash computation for: {path}")
            return result

        return log_and_compute()

    def _evaluate(self, func, *args):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def settle(method, value):
            # The run may have been aborted by another file before this result arrives.
            if loop.is_closed():
                return
            loop.call_soon_threadsafe(lambda: future.done() or method(value))

        self._pool.apply_async(func, args=args,
                               callback=lambda v: settle(future.set_result, v),
                               error_callback=lambda e: settle(future.set_exception, e))

        return future

import asyncio
import logging
from typing import Iterable

from .compare import compare_collections
from .loader import load_collections
from .output import Output, StandardOutput
from .records import Collection
from .settings import Settings, SETTING_LOGGING_LEVEL, SETTING_LOGGING_PATH
from .utils.processor import Processor


class Checker:
    """Workflow layer that finds copied files between a source list and a destination list.

    A check runs in two phases:
    - load(): digest both lists concurrently, dropping paths that cannot be opened
    - compare(): compare every source file with every destination file and report matches

    check() runs both phases back to back. Checker owns no resources itself; the Processor
    passed in must outlive it.
    """

    def __init__(self, processor: Processor, settings: Settings | None = None, output: Output | None = None):
        """
        Args:
            processor: Process pool computing digests
            settings: Configuration; an empty Settings when None
            output: Report sink; StandardOutput when None

        Raises:
            ValueError: digest.on_read_error holds an unknown policy
        """
        if settings is None:
            settings = Settings()

        if output is None:
            output = StandardOutput()

        self._processor = processor
        self._settings = settings
        self._read_error_policy = settings.read_error_policy
        self._output = output

    @property
    def output(self) -> Output:
        return self._output

    def configure_logging_from_settings(self) -> bool:
        """Send logging to the file named by logging.path, if any.

        Returns:
            True if logging was configured, False otherwise
        """
        log_path = self._settings.get(SETTING_LOGGING_PATH)
        if not log_path:
            return False

        level_name = str(self._settings.get(SETTING_LOGGING_LEVEL, 'INFO')).upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"Invalid {SETTING_LOGGING_LEVEL}: {level_name!r}")

        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)

        logging.basicConfig(
            filename=str(log_path),
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        return True

    def load(self, source_paths: Iterable[str], destination_paths: Iterable[str]) -> tuple[Collection, Collection]:
        """Digest both path lists.

        Raises:
            UnreadableFileError: A file could not be read after opening and
                                 digest.on_read_error is 'abort'
        """
        return asyncio.run(load_collections(
            self._processor,
            source_paths,
            destination_paths,
            self._read_error_policy
        ))

    def compare(self, source: Collection, destination: Collection) -> int:
        """Report every cross pair with equal digests and different identities.

        Returns:
            Number of matches reported
        """
        return asyncio.run(compare_collections(source, destination, self._output, self._processor.concurrency))

    def check(self, source_paths: Iterable[str], destination_paths: Iterable[str]) -> int:
        source, destination = self.load(source_paths, destination_paths)
        return self.compare(source, destination)

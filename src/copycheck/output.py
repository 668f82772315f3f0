import abc
import sys
import threading

from .records import DigestedFile, Match


class Output(metaclass=abc.ABCMeta):
    """Sink for the two report channels.

    Diagnostics name every pair that is actually compared; results name every match. Both
    channels may be written from several worker threads at once, so every line is offered
    while holding that channel's lock. No ordering is kept between the two channels.
    """

    def __init__(self):
        self.quiet = False
        self._diagnostic_lock = threading.Lock()
        self._result_lock = threading.Lock()

    @abc.abstractmethod
    def _offer_diagnostic(self, line: str):
        raise NotImplementedError()

    @abc.abstractmethod
    def _offer_result(self, line: str):
        raise NotImplementedError()

    def describe_comparison(self, source: DigestedFile, destination: DigestedFile):
        if self.quiet:
            return

        line = f"check between '{source.path}', '{destination.path}'"
        with self._diagnostic_lock:
            self._offer_diagnostic(line)

    def describe_match(self, match: Match):
        line = f"These are same: {match.source.path}, {match.destination.path}"
        with self._result_lock:
            self._offer_result(line)


class StandardOutput(Output):
    """Diagnostics go to standard error, results to standard output."""

    def _offer_diagnostic(self, line):
        # Resolved per call so redirected streams are honoured.
        print(line, file=sys.stderr, flush=True)

    def _offer_result(self, line):
        print(line, file=sys.stdout, flush=True)

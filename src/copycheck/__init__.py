from .checker import Checker
from .output import Output, StandardOutput
from .records import Collection, DigestedFile, FileIdentity, FileRecord, Match
from .settings import Settings
from .utils.processor import Processor, UnreadableFileError

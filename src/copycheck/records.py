import os
from typing import NamedTuple


class FileIdentity(NamedTuple):
    """Identity of the underlying file, unique across mounted filesystems.

    Two paths with equal identities name the same file (a hard link or the same path spelled
    differently). The device number keeps inode numbers from different filesystems apart.
    """
    device: int
    inode: int

    @classmethod
    def from_stat(cls, st: os.stat_result) -> 'FileIdentity':
        return cls(st.st_dev, st.st_ino)


class FileRecord(NamedTuple):
    path: str
    identity: FileIdentity


class DigestedFile(NamedTuple):
    """A listed file together with the SHA-512 digest of its content."""
    meta: FileRecord
    digest: bytes

    @property
    def path(self) -> str:
        return self.meta.path

    @property
    def identity(self) -> FileIdentity:
        return self.meta.identity


# Ordered as the input list, minus the entries that could not be opened.
Collection = list[DigestedFile]


class Match(NamedTuple):
    source: DigestedFile
    destination: DigestedFile

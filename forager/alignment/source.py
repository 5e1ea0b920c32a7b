# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Abstract interface for region queries against an alignment file."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AlignmentSegment:
    name: str                     # read name
    mate: int                     # 0 = first in pair or unpaired, 1 = second
    sequence: str


@dataclass(frozen=True)
class AlignmentRecord:
    """One alignment: an unpaired read or a linked mate pair."""
    name: str
    segments: tuple               # 1 or 2 AlignmentSegment, mate order

    @classmethod
    def from_sequences(cls, name, *sequences):
        """Build a record whose mate indices follow segment order."""
        return cls(name, tuple(AlignmentSegment(name, i, s) for i, s in enumerate(sequences)))


class AlignmentSource(ABC):
    """Region queries over an indexed alignment file.

    Coordinates are 1-based and inclusive. Implementations must be
    picklable: they are shipped to worker processes.
    """

    @abstractmethod
    def open(self, path):
        """Return a handle for ``path``. Raises OSError if it cannot be read."""

    @abstractmethod
    def fetch_alignments(self, handle, contig, start, end):
        """AlignmentRecords whose footprint overlaps ``contig:start-end``.

        Raises ValueError if ``contig`` is not in the alignment file.
        """

    @abstractmethod
    def fetch_coverage(self, handle, contig, start, end):
        """Per-base read depth, ``end - start + 1`` values.

        Fewer values are returned where the window runs past the contig end.
        """

    def close(self, handle):
        """Release a handle returned by :meth:`open`."""

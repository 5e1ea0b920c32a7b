# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Result records shared by the extractor, the worker pool and the merge."""

import pickle
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ClusterSummary:
    """Reads and coverage of one cluster's region in one genome."""
    cluster_id: int
    genome_id: str
    count: int                    # alignment records overlapping the region
    length: int                   # nominal gene length, |end - start|
    coverage_mean: float = 0.0
    coverage_stdev: float = 0.0


@dataclass
class PartialResult:
    """Output of one worker for one alignment file.

    ``reads`` is ``{cluster: {read_name: {mate: {(genome, contig): seq}}}}``
    and ``summary`` is ``{cluster: {genome: ClusterSummary}}``.
    """
    source_path: str
    genome_id: str
    reads: dict = field(default_factory=dict)
    summary: dict = field(default_factory=dict)

    def add_read(self, cluster_id, read_name, mate, source_tag, sequence):
        """Record a read segment; an existing sequence for the tag is kept.

        Empty sequences are ignored.
        """
        if not sequence:
            return
        tags = self.reads.setdefault(cluster_id, {}).setdefault(read_name, {}).setdefault(mate, {})
        tags.setdefault(source_tag, sequence)

    def add_summary(self, summary):
        self.summary.setdefault(summary.cluster_id, {})[summary.genome_id] = summary

    def save(self, filename):
        with open(filename, 'wb') as outh:
            pickle.dump(
                {
                    'source_path': self.source_path,
                    'genome_id': self.genome_id,
                    'reads': self.reads,
                    'summary': self.summary,
                },
                outh,
            )

    @classmethod
    def load(cls, filename):
        with open(filename, 'rb') as fh:
            loader = pickle.load(fh)
        return cls(loader['source_path'], loader['genome_id'], loader['reads'], loader['summary'])

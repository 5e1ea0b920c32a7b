# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Merge of staged partial results into one read map and one summary map.

Both maps use first-writer-wins: once a (cluster, read, mate) or a
(cluster, genome) key is set, later partials never replace it.
"""

import logging as lg

from .records import PartialResult


def _copy_reads(reads):
    return {mate: dict(tags) for mate, tags in reads.items()}


class MergeEngine:
    """Accumulates partial results for one query group."""

    def __init__(self):
        self.reads = {}               # {cluster: {read_name: {mate: {tag: seq}}}}
        self.summary = {}             # {cluster: {genome: ClusterSummary}}

    def add(self, partial):
        self._merge_reads(partial.reads)
        self._merge_summary(partial.summary)

    def _merge_reads(self, reads):
        for cluster_id, cluster_reads in reads.items():
            if cluster_id not in self.reads:
                self.reads[cluster_id] = {name: _copy_reads(r) for name, r in cluster_reads.items()}
                continue
            merged = self.reads[cluster_id]
            for name, mates in cluster_reads.items():
                merged_mates = merged.setdefault(name, {})
                for mate, tags in mates.items():
                    if mate not in merged_mates:
                        merged_mates[mate] = dict(tags)

    def _merge_summary(self, summary):
        for cluster_id, genomes in summary.items():
            merged = self.summary.setdefault(cluster_id, {})
            for genome_id, entry in genomes.items():
                merged.setdefault(genome_id, entry)

    def merge_files(self, paths):
        """Load and merge staged partial results, in the given order."""
        lg.info(f'Merging {len(paths)} partial results')
        for path in paths:
            self.add(PartialResult.load(path))
        return self

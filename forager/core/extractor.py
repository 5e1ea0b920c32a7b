# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Extraction of reads and coverage for the gene regions of one genome."""

import logging as lg

import numpy as np

from .records import ClusterSummary, PartialResult


def coverage_stats(depths):
    """Mean and sample standard deviation of per-base depths.

    Args:
        depths: Sequence of per-base read depths.

    Returns:
        (mean, stdev) as floats. stdev is 0 for fewer than two bases, and
        both are 0 for an empty sequence.
    """
    arr = np.asarray(depths, dtype=np.float64)
    if arr.size == 0:
        return 0.0, 0.0
    mean = float(arr.mean())
    if arr.size == 1:
        return mean, 0.0
    return mean, float(arr.std(ddof=1))


class RegionExtractor:
    """Pulls reads mapped to gene regions (plus flanks) from alignment files.

    Args:
        source: AlignmentSource used to open and query alignment files.
        region_index: RegionIndex with the regions of interest.
        extend: bp added on both sides of each region before querying.
        warnings: log record-level problems as warnings (else as debug).
    """

    def __init__(self, source, region_index, extend=100, warnings=True):
        self.source = source
        self.region_index = region_index
        self.extend = extend
        self._warnlev = lg.WARNING if warnings else lg.DEBUG

    def extract(self, path, genome_id):
        """Reads and summaries of every region of ``genome_id`` in ``path``.

        Returns:
            PartialResult, or None if the genome has no regions of interest
            or the file cannot be opened.
        """
        if genome_id not in self.region_index:
            lg.log(self._warnlev, f'None of the genes of interest are in genome {genome_id}, skipping {path}')
            return None

        try:
            handle = self.source.open(path)
        except (OSError, ValueError) as exc:
            lg.log(self._warnlev, f'Cannot open {path}, skipping: {exc}')
            return None

        lg.info(f'Finding reads mapped to genes of interest in genome {genome_id}')
        partial = PartialResult(path, genome_id)
        try:
            for contigs in self.region_index.genome_regions(genome_id).values():
                for region in contigs.values():
                    self._extract_region(handle, region, partial)
        finally:
            self.source.close(handle)
        return partial

    def _extract_region(self, handle, region, partial):
        start, end = region.query_interval(self.extend)
        try:
            alignments = self.source.fetch_alignments(handle, region.contig, start, end)
        except ValueError as exc:
            lg.debug(f'Fetch failed for {region.contig}:{start}-{end}: {exc}')
            alignments = []

        if not alignments:
            lg.log(
                self._warnlev,
                f'No reads mapped to genome:{region.genome_id} -> contig:{region.contig} '
                f'-> cluster:{region.cluster_id}',
            )
            partial.add_summary(ClusterSummary(region.cluster_id, region.genome_id, 0, region.length))
            return

        mean, stdev = coverage_stats(self.source.fetch_coverage(handle, region.contig, start, end))
        partial.add_summary(
            ClusterSummary(region.cluster_id, region.genome_id, len(alignments), region.length, mean, stdev)
        )

        source_tag = (region.genome_id, region.contig)
        for aln in alignments:
            for seg in aln.segments:
                partial.add_read(region.cluster_id, seg.name, seg.mate, source_tag, seg.sequence)

# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

import logging as lg
from collections import OrderedDict

import numpy as np
import pysam

from .source import AlignmentRecord, AlignmentSegment, AlignmentSource


def _is_primary(aln):
    return not (aln.is_secondary or aln.is_supplementary)


def _pair_key(aln, serial):
    """Key shared by both mates of a pair mapped to the same reference."""
    if aln.is_paired and not aln.mate_is_unmapped and aln.next_reference_id == aln.reference_id:
        a, b = aln.reference_start, aln.next_reference_start
        return (aln.query_name, min(a, b), max(a, b))
    return (aln.query_name, serial)


def pair_bundle(alns):
    """Group alignments into records, linking mates found in the same window.

    Args:
        alns: Iterable of ``pysam.AlignedSegment``.

    Returns:
        List of AlignmentRecord, those with a primary alignment first, each
        in order of first appearance. Segments without a stored sequence
        are left out.
    """
    bundles = OrderedDict()
    for serial, aln in enumerate(alns):
        if aln.is_unmapped:
            continue
        bundles.setdefault(_pair_key(aln, serial), []).append(aln)

    records = []
    for (qname, *_), group in bundles.items():
        group.sort(key=lambda a: (a.is_read2, not _is_primary(a)))
        segments = tuple(
            AlignmentSegment(qname, 1 if a.is_read2 else 0, a.get_forward_sequence())
            for a in group
            if a.query_sequence
        )
        records.append((not any(_is_primary(a) for a in group), AlignmentRecord(qname, segments)))
    # Primary alignments first: secondary copies may lack SEQ and
    # supplementary ones may be hard-clipped
    records.sort(key=lambda r: r[0])
    return [r for _, r in records]


class PysamAlignmentSource(AlignmentSource):
    """AlignmentSource over coordinate-sorted, indexed BAM/CRAM files."""

    def __init__(self, threads=1):
        self.threads = threads

    def open(self, path):
        sf = pysam.AlignmentFile(path, check_sq=False, threads=self.threads)
        if sf.has_index():
            return sf

        _is_coordinate_sorted = sf.header.get('HD', {}).get('SO') == 'coordinate'
        sf.close()
        if not _is_coordinate_sorted:
            raise ValueError(f'{path} is not coordinate-sorted and has no index')
        # Region queries need an index; samtools index in the pipeline avoids this step
        lg.info(f'Coordinate-sorted alignment without index, creating one for {path}')
        pysam.index(path)
        return pysam.AlignmentFile(path, check_sq=False, threads=self.threads)

    def fetch_alignments(self, handle, contig, start, end):
        return pair_bundle(handle.fetch(contig, start - 1, end))

    def fetch_coverage(self, handle, contig, start, end):
        acgt = handle.count_coverage(contig, start - 1, end, quality_threshold=0)
        return np.sum(np.asarray(acgt, dtype=np.int64), axis=0)

    def close(self, handle):
        handle.close()

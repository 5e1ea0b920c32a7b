# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Gene region index built from a cluster gene-information table.

The table is tab-delimited with one gene per row. Two layouts are
supported:

``minimal``
    genome, contig, start, end, strand, cluster

``itep``
    Output of ITEP ``db_getClusterGeneInformation.py``. The genome id is
    taken from the gene id (``fig|<genome>.peg.<n>``), the contig from the
    contig column with the ``<organism>.`` prefix removed, and the cluster id
    from the last column.
"""

import logging as lg
import re
import sys
from collections import OrderedDict, defaultdict
from dataclasses import dataclass

from ..utils.helpers import str2int

_FIG_PATTERN = re.compile(r'fig\||\.peg.+')
_STRANDS = {'+': '+', '-': '-', '1': '+', '-1': '-'}
_CLUSTER_ID = re.compile(r'\d+', re.ASCII)


@dataclass(frozen=True)
class GeneRegion:
    """Footprint of one cluster member on a reference contig."""
    genome_id: str
    cluster_id: int
    contig: str
    start: int                    # 1-based, inclusive, start <= end
    end: int
    strand: str                   # '+' or '-'

    @property
    def length(self):
        """Nominal gene length, without flanking."""
        return abs(self.end - self.start)

    def oriented(self):
        """(start, end) in the direction of transcription."""
        if self.strand == '-':
            return self.end, self.start
        return self.start, self.end

    def query_interval(self, extend=0):
        """Bounds to query, widened by ``extend`` and clamped at base 1."""
        lo, hi = sorted(self.oriented())
        return max(1, lo - extend), hi + extend


def _parse_minimal(fields):
    return fields[0], fields[1], fields[2], fields[3], fields[4]


def _parse_itep(fields):
    if len(fields) < 8:
        raise ValueError('ITEP rows need at least 8 columns')
    genome_id = _FIG_PATTERN.sub('', fields[0])
    prefix = fields[2] + '.'
    contig = fields[4][len(prefix):] if fields[4].startswith(prefix) else fields[4]
    return genome_id, contig, fields[5], fields[6], fields[7]


_PARSERS = {
    'minimal': _parse_minimal,
    'itep': _parse_itep,
}


class RegionIndex:
    """In-memory table genome -> cluster -> contig -> GeneRegion."""

    def __init__(self, warnings=True):
        self.regions = defaultdict(OrderedDict)
        self.nuc_seqs = defaultdict(OrderedDict)   # {cluster: {gene_id: seq}}
        self.aa_seqs = defaultdict(OrderedDict)
        self._warnlev = lg.WARNING if warnings else lg.DEBUG

    def __len__(self):
        return sum(len(clusters) for clusters in self.regions.values())

    def __contains__(self, genome_id):
        return genome_id in self.regions

    @property
    def genomes(self):
        return list(self.regions)

    def genome_regions(self, genome_id):
        """{cluster: {contig: GeneRegion}} for one genome (empty if unknown)."""
        return self.regions.get(genome_id, {})

    def add(self, region):
        """Add a region. Returns False if the (genome, cluster) pair is taken.

        A cluster is represented by at most one contig per genome so that its
        summary is never split across contigs.
        """
        clusters = self.regions[region.genome_id]
        if region.cluster_id in clusters:
            return False
        clusters[region.cluster_id] = OrderedDict([(region.contig, region)])
        return True

    def clusters_in(self, genome_ids):
        """Distinct clusters with a region in any of ``genome_ids``."""
        ret = set()
        for genome_id in genome_ids:
            ret.update(self.genome_regions(genome_id).keys())
        return ret

    @classmethod
    def load(cls, annotation, annotation_format='itep', warnings=True):
        """Build the index from a path, ``-`` for stdin, or an open handle.

        Raises:
            ValueError: no usable region was found.
        """
        if annotation_format not in _PARSERS:
            raise ValueError(f'Unknown annotation format "{annotation_format}"')
        parse = _PARSERS[annotation_format]
        obj = cls(warnings=warnings)

        if annotation == '-':
            fh, _opened = sys.stdin, False
        elif isinstance(annotation, str):
            fh, _opened = open(annotation), True  # noqa: SIM115
        else:
            fh, _opened = annotation, False
        try:
            for rownum, line in enumerate(fh, start=1):
                line = line.rstrip('\r\n')
                if not line.strip():
                    continue
                obj._add_row(rownum, line.split('\t'), parse, annotation_format)
        finally:
            if _opened:
                fh.close()

        if len(obj) == 0:
            raise ValueError('No gene information found for gene clusters')
        lg.info(f'Loaded {len(obj)} gene regions from {len(obj.regions)} genomes')
        return obj

    def _add_row(self, rownum, fields, parse, annotation_format):
        if len(fields) < 6:
            lg.log(self._warnlev, f'Skipping annotation row {rownum}: fewer than 6 columns')
            return
        if not _CLUSTER_ID.fullmatch(fields[-1].strip()):
            lg.log(self._warnlev, f'Skipping annotation row {rownum}: cluster id "{fields[-1]}" is not an integer')
            return
        cluster_id = int(fields[-1])
        try:
            genome_id, contig, start, end, strand = parse(fields)
        except ValueError as exc:
            lg.log(self._warnlev, f'Skipping annotation row {rownum}: {exc}')
            return

        start, end = str2int(start), str2int(end)
        if start is None or end is None:
            lg.log(self._warnlev, f'Skipping annotation row {rownum}: start/end are not integers')
            return
        if strand not in _STRANDS:
            lg.log(self._warnlev, f'Skipping annotation row {rownum}: unknown strand "{strand}"')
            return

        # Every member gene goes to the cluster FASTA, paralogs included
        if annotation_format == 'itep' and len(fields) >= 12:
            self.nuc_seqs[cluster_id][fields[0]] = fields[10]
            self.aa_seqs[cluster_id][fields[0]] = fields[11]

        region = GeneRegion(genome_id, cluster_id, contig, min(start, end), max(start, end), _STRANDS[strand])
        if not self.add(region):
            lg.log(
                self._warnlev,
                f'Annotation row {rownum} adds no region: cluster {cluster_id} already has one in genome {genome_id}',
            )

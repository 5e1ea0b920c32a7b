# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

import logging as lg

from .regions import GeneRegion, RegionIndex
from .sources import SINGLE_QUERY, SourceEntry, SourceIndex


def report_cluster_overlap(region_index, source_index, warnings=True):
    """Count clusters with a gene in any genome referenced by the index file.

    Diagnostic only: genomes missing from the annotation are reported, not
    rejected.

    Returns:
        Number of distinct clusters.
    """
    _warnlev = lg.WARNING if warnings else lg.DEBUG
    genomes = source_index.genomes()
    for genome_id in genomes:
        if genome_id not in region_index:
            lg.log(_warnlev, f'Genome {genome_id} not found in provided gene cluster info')
    nclusters = len(region_index.clusters_in(genomes))
    lg.info(f'Number of clusters containing genes from provided genomes: {nclusters}')
    return nclusters


__all__ = [
    'GeneRegion',
    'RegionIndex',
    'SINGLE_QUERY',
    'SourceEntry',
    'SourceIndex',
    'report_cluster_overlap',
]

# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Output writers: per-group summary table and per-cluster read files.

Functions accept the merged maps rather than pipeline objects so they can
be used on any merged result.
"""

import logging as lg
import os
import shutil

import pandas as pd

from ..annotation import SINGLE_QUERY

SUMMARY_COLUMNS = ['Cluster', 'FIG', 'N_reads', 'Gene_length_nuc', 'Mean_coverage', 'Stdev_coverage']
SUMMARY_FILENAME = 'mapped_summary.txt'


def make_outdir(outdir, query_group=SINGLE_QUERY):
    """Create an empty output directory for a query group.

    Named groups get ``_<group>`` appended. An existing directory is
    replaced. Raises OSError if it cannot be created.
    """
    if query_group != SINGLE_QUERY:
        outdir = f'{outdir}_{query_group}'
    outdir = os.path.abspath(outdir)
    if os.path.isdir(outdir):
        shutil.rmtree(outdir)
    os.makedirs(outdir)
    return outdir


def summary_frame(summary):
    """Merged summary map as a DataFrame, sorted by cluster then genome."""
    rows = []
    for cluster_id in sorted(summary):
        for genome_id in sorted(summary[cluster_id]):
            s = summary[cluster_id][genome_id]
            rows.append((cluster_id, genome_id, s.count, s.length, s.coverage_mean, s.coverage_stdev))
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_summary_table(summary, outdir):
    filename = os.path.join(outdir, SUMMARY_FILENAME)
    summary_frame(summary).to_csv(filename, sep='\t', index=False)
    lg.info(f'Summary file written: {filename}')
    return filename


def _fasta_record(read_name, mate, tags):
    # One sequence per (read, mate): the first source tag recorded
    sequence = next(iter(tags.values()))
    return f'>{read_name} {mate}:\n{sequence}\n'


def write_reads_mapped(reads, outdir):
    """Write ``clust<N>_FR.fna`` (both mates present) and ``clust<N>_A.fna``.

    Returns:
        List of files written.
    """
    lg.info(f'Writing read files to {outdir}')
    written = []
    for cluster_id in sorted(reads):
        fr_file = os.path.join(outdir, f'clust{cluster_id}_FR.fna')
        all_file = os.path.join(outdir, f'clust{cluster_id}_A.fna')
        with open(fr_file, 'w') as outp, open(all_file, 'w') as outa:
            for read_name, mates in reads[cluster_id].items():
                records = [_fasta_record(read_name, mate, mates[mate]) for mate in sorted(mates) if mates[mate]]
                if 0 in mates and 1 in mates:
                    outp.writelines(records)
                outa.writelines(records)
        written.extend([fr_file, all_file])
    return written


def write_cluster_fasta(seqs, outdir, kind):
    """Write one FASTA per cluster with the member genes' sequences.

    Args:
        seqs: {cluster: {gene_id: sequence}}
        outdir: Parent directory.
        kind: "nuc" or "aa"; files go to ``cluster_<kind>/``.

    Returns:
        The directory written.
    """
    if kind not in ('nuc', 'aa'):
        raise ValueError(f'Unknown sequence kind "{kind}"')
    fasta_dir = os.path.abspath(os.path.join(outdir, f'cluster_{kind}'))
    if os.path.isdir(fasta_dir):
        shutil.rmtree(fasta_dir)
    os.makedirs(fasta_dir)
    for cluster_id, genes in seqs.items():
        with open(os.path.join(fasta_dir, f'clust{cluster_id}.fasta'), 'w') as outh:
            for gene_id, sequence in genes.items():
                outh.write(f'>{gene_id}\n{sequence}\n')
    lg.info(f'Fasta for each cluster written to {fasta_dir}')
    return fasta_dir

# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Tests for forager.core.reporter output files."""

import os

import pandas as pd

from forager.annotation import SINGLE_QUERY
from forager.core.records import ClusterSummary
from forager.core.reporter import (
    SUMMARY_COLUMNS,
    make_outdir,
    write_cluster_fasta,
    write_reads_mapped,
    write_summary_table,
)


def _read_fasta(path):
    with open(path) as fh:
        lines = fh.read().splitlines()
    return list(zip(lines[0::2], lines[1::2]))


class TestOutdir:
    def test_single_query_name(self, tmp_path):
        outdir = make_outdir(str(tmp_path / 'Mapped2Cluster'), SINGLE_QUERY)
        assert outdir == str(tmp_path / 'Mapped2Cluster')
        assert os.path.isdir(outdir)

    def test_group_name_appended(self, tmp_path):
        outdir = make_outdir(str(tmp_path / 'Mapped2Cluster'), 'draftA')
        assert os.path.basename(outdir) == 'Mapped2Cluster_draftA'

    def test_existing_directory_replaced(self, tmp_path):
        stale = tmp_path / 'out' / 'clust1_A.fna'
        stale.parent.mkdir()
        stale.write_text('>old\nA\n')
        outdir = make_outdir(str(tmp_path / 'out'))
        assert os.listdir(outdir) == []


def test_summary_table(tmp_path):
    summary = {
        12: {'g2': ClusterSummary(12, 'g2', 0, 450)},
        3: {
            'g9': ClusterSummary(3, 'g9', 4, 300, 2.5, 1.25),
            'g1': ClusterSummary(3, 'g1', 1, 300, 0.5, 0.1),
        },
    }
    filename = write_summary_table(summary, str(tmp_path))
    assert os.path.basename(filename) == 'mapped_summary.txt'
    with open(filename) as fh:
        assert fh.readline().rstrip('\n').split('\t') == SUMMARY_COLUMNS

    df = pd.read_csv(filename, sep='\t')
    assert list(zip(df.Cluster, df.FIG)) == [(3, 'g1'), (3, 'g9'), (12, 'g2')]
    assert list(df.N_reads) == [1, 4, 0]
    assert list(df.Gene_length_nuc) == [300, 300, 450]
    assert df.Mean_coverage.iloc[1] == 2.5
    assert df.Stdev_coverage.iloc[2] == 0


def test_reads_mapped_paired_and_all(tmp_path):
    reads = {
        7: {
            'R1': {1: {('g1', 'c1'): 'CCCC'}, 0: {('g1', 'c1'): 'AAAA', ('g2', 'c5'): 'TTTT'}},
            'R2': {0: {('g1', 'c1'): 'GGGG'}},
            'R3': {1: {('g1', 'c1'): 'ACAC'}},
        },
    }
    written = write_reads_mapped(reads, str(tmp_path))
    assert [os.path.basename(f) for f in written] == ['clust7_FR.fna', 'clust7_A.fna']

    assert _read_fasta(str(tmp_path / 'clust7_FR.fna')) == [('>R1 0:', 'AAAA'), ('>R1 1:', 'CCCC')]
    assert _read_fasta(str(tmp_path / 'clust7_A.fna')) == [
        ('>R1 0:', 'AAAA'),
        ('>R1 1:', 'CCCC'),
        ('>R2 0:', 'GGGG'),
        ('>R3 1:', 'ACAC'),
    ]


def test_cluster_fasta(tmp_path):
    fasta_dir = write_cluster_fasta({5: {'fig|1.1.peg.3': 'ATG', 'fig|1.2.peg.8': 'ATGC'}}, str(tmp_path), 'nuc')
    assert fasta_dir == str(tmp_path / 'cluster_nuc')
    assert _read_fasta(os.path.join(fasta_dir, 'clust5.fasta')) == [('>fig|1.1.peg.3', 'ATG'), ('>fig|1.2.peg.8', 'ATGC')]

# -*- coding: utf-8 -*-

# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

""" FORAGer extract

"""
import logging as lg
import sys
from time import time

from . import SubcommandOptions, collect_output_files, configure_logging
from .console import Stopwatch
from ..utils.helpers import format_minutes as fmtmins
from ..core.model import Forager


class ExtractOptions(SubcommandOptions):

    OPTS = """
    - Input Options:
        - index:
            positional: True
            help: Tab-delimited index of alignment files. Columns are the
                  alignment file (sorted BAM), the reference FASTA, the
                  genome (FIG) id of the reference and, optionally, a query
                  group name when reads from several genomes were mapped.
        - annotation:
            positional: True
            nargs: "?"
            default: "-"
            help: Cluster gene information table. Reads from standard input
                  if omitted or "-".
        - annotation_format:
            default: itep
            choices:
                - itep
                - minimal
            help: Layout of the gene information table. "itep" is the output
                  of ITEP db_getClusterGeneInformation.py; "minimal" has the
                  columns genome, contig, start, end, strand, cluster.
    - Extraction Options:
        - extend:
            type: nonneg_int
            default: 100
            help: Number of bp to extend around each gene (5' and 3').
        - ncpu:
            type: nonneg_int
            default: 1
            help: Number of alignment files to process in parallel.
        - tempdir:
            help: Directory for staging partial results. Default uses python
                  tempfile package to create the temporary directory.
    - Output Options:
        - outdir:
            default: Mapped2Cluster
            help: Output directory. For named query groups the group name is
                  appended to the directory name.
        - skip_cluster_fasta:
            action: store_true
            help: Do not write nucleotide and amino acid FASTA files for each
                  gene cluster.
    - Reporting Options:
        - quiet:
            action: store_true
            help: Silence (most) output.
        - verbose:
            action: store_true
            help: Show detailed progress.
        - debug:
            action: store_true
            help: Print debug messages.
        - no_warnings:
            action: store_true
            help: Do not report skipped rows, files and regions.
        - logfile:
            type: argparse.FileType('w')
            help: Log output to this file.
    """

    def __init__(self, args):
        super().__init__(args)
        if self.logfile is None:
            self.logfile = sys.stderr


def run(args, source=None):
    """Load indexes, extract every query group and write the results.

    Args:
        args: Parsed argparse namespace.
        source: AlignmentSource to use instead of the pysam one.
    """
    opts = ExtractOptions(args)
    console = configure_logging(opts)
    lg.info('\n{}\n'.format(opts))
    total_time = time()
    stopwatch = Stopwatch()

    console.banner(opts.version)
    console.inputs(opts)

    fr = Forager(opts, source=source)
    try:
        with stopwatch.stage('Load indexes'):
            fr.load_indexes()
        console.loaded(fr.run_info)
        if not opts.skip_cluster_fasta:
            with stopwatch.stage('Cluster FASTA'):
                for fasta_dir in fr.write_cluster_fasta():
                    console.message(f'Cluster FASTA written to {fasta_dir}')
        outdirs = fr.run(console=console, stopwatch=stopwatch)
    except (OSError, ValueError) as exc:
        lg.error(str(exc))
        sys.exit(1)

    fr.print_summary(lg.INFO)
    console.outputs(outdirs.values(), listing=collect_output_files)
    console.timing_table(stopwatch)
    lg.info("forager extract complete (%s)" % fmtmins(time() - total_time))

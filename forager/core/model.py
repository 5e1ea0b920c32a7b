# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""FORAGer pipeline: index loading, per-group extraction, merge and output.

Query groups are processed one after another. Within a group, alignment
files are extracted by a WorkerPool; the merge starts only after every
worker of the group has finished.
"""

import logging as lg
import os
import shutil
import tempfile
from collections import OrderedDict
from contextlib import nullcontext

from ..alignment import get_alignment_source
from ..annotation import RegionIndex, SourceIndex, report_cluster_overlap
from .extractor import RegionExtractor
from .merge import MergeEngine
from .pool import WorkerPool
from .reporter import make_outdir, write_cluster_fasta, write_reads_mapped, write_summary_table


class Forager:
    """Loads the indexes and runs extraction for every query group."""

    def __init__(self, opts, source=None):
        self.opts = opts
        self.warnings = not getattr(opts, 'no_warnings', False)
        self.source = source if source is not None else get_alignment_source('pysam')
        self.run_info = OrderedDict()
        self.source_index = None
        self.region_index = None

    def load_indexes(self):
        """Load the alignment index and the gene regions.

        Raises:
            OSError: an input cannot be read.
            ValueError: an input yields no usable records.
        """
        self.source_index = SourceIndex.load(self.opts.index, warnings=self.warnings)
        self.region_index = RegionIndex.load(
            self.opts.annotation, self.opts.annotation_format, warnings=self.warnings
        )
        self.run_info['query_groups'] = len(self.source_index.groups)
        self.run_info['alignment_files'] = len(self.source_index)
        self.run_info['regions'] = len(self.region_index)
        self.run_info['clusters_in_genomes'] = report_cluster_overlap(
            self.region_index, self.source_index, warnings=self.warnings
        )

    def write_cluster_fasta(self):
        """Write member-gene FASTA per cluster next to the output directories."""
        basedir = os.path.dirname(os.path.abspath(self.opts.outdir))
        written = []
        for kind, seqs in (('nuc', self.region_index.nuc_seqs), ('aa', self.region_index.aa_seqs)):
            if seqs:
                written.append(write_cluster_fasta(seqs, basedir, kind))
        return written

    def extract_group(self, query_group):
        """Run the workers of one query group and merge their results."""
        jobs = [(e.alignment_path, e.genome_id) for e in self.source_index.entries(query_group)]
        extractor = RegionExtractor(self.source, self.region_index, self.opts.extend, warnings=self.warnings)
        stage_dir = tempfile.mkdtemp(prefix='forager_', dir=getattr(self.opts, 'tempdir', None))
        try:
            staged = WorkerPool(extractor, self.opts.ncpu).run(jobs, stage_dir)
            merged = MergeEngine().merge_files(staged)
        finally:
            shutil.rmtree(stage_dir, ignore_errors=True)
        self.run_info[f'{query_group}:files_extracted'] = len(staged)
        return merged

    def write_group(self, query_group, merged):
        """Write the read files and summary table of one query group.

        Returns:
            The group's output directory.
        """
        outdir = make_outdir(self.opts.outdir, query_group)
        write_reads_mapped(merged.reads, outdir)
        write_summary_table(merged.summary, outdir)
        return outdir

    def run(self, console=None, stopwatch=None):
        """Process every query group in index order.

        Returns:
            OrderedDict {query_group: output directory}.
        """
        outdirs = OrderedDict()
        for query_group in self.source_index:
            _label = query_group if SourceIndex.is_named(query_group) else 'reads'
            lg.info(f'Processing indexed alignment files with reads from: {_label}')
            _reference = self.source_index.reference_fasta[query_group]
            self.run_info[f'{query_group}:reference'] = _reference
            lg.info(f'Reads of {_label} were mapped to {_reference}')
            with stopwatch.stage(f'Extract {_label}'[:22]) if stopwatch else nullcontext():
                merged = self.extract_group(query_group)
                outdirs[query_group] = self.write_group(query_group, merged)
            if console is not None:
                console.group_done(
                    _label,
                    self.run_info[f'{query_group}:files_extracted'],
                    len(merged.summary),
                    self.count_reads(merged),
                )
        return outdirs

    @staticmethod
    def count_reads(merged):
        return sum(len(r) for r in merged.reads.values())

    def print_summary(self, loglev=lg.WARNING):
        lg.log(loglev, 'Run Summary:')
        for k, v in self.run_info.items():
            lg.log(loglev, f'    {k}: {v}')

    def __str__(self):
        return f'<Forager index={getattr(self.opts, "index", "?")}, annotation={getattr(self.opts, "annotation", "?")}>'

# -*- coding: utf-8 -*-

# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Progress report on stdout for ``forager extract``.

Skipped rows, files and regions are reported through ``logging`` (stderr or
``--logfile``). The Console only prints what a user follows during a run:
inputs, one line per query group, output directories and stage timings.
"""

import os
import sys
from contextlib import contextmanager
from time import perf_counter


class Stopwatch:
    """Elapsed time of each pipeline stage."""

    def __init__(self):
        self.timings = []         # [(stage, seconds)]
        self._t0 = perf_counter()

    @contextmanager
    def stage(self, name):
        t = perf_counter()
        try:
            yield
        finally:
            self.timings.append((name, perf_counter() - t))

    @property
    def total(self):
        return perf_counter() - self._t0


class Console:
    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3

    def __init__(self, level=NORMAL, stream=None):
        self.level = level
        self.stream = stream or sys.stdout
        self._bold = hasattr(self.stream, 'isatty') and self.stream.isatty()

    def _write(self, text='', level=NORMAL):
        if self.level >= level:
            print(text, file=self.stream)

    def banner(self, version):
        title = f'FORAGer v{version}'
        if self._bold:
            title = f'\033[1m{title}\033[0m'
        self._write()
        self._write(f'{title} -- Finding Orthologous Reads and Genes')
        self._write()

    def inputs(self, opts):
        """Input files and the extraction settings."""
        annotation = 'stdin' if opts.annotation == '-' else os.path.basename(opts.annotation)
        self._write('  Input')
        for label, value in [
            ('Index', os.path.basename(opts.index)),
            ('Annotation', f'{annotation} ({opts.annotation_format})'),
            ('Flank', f'{opts.extend} bp'),
            ('Workers', opts.ncpu),
        ]:
            self._write(f'    {label + ":":<14}{value}')
        self._write()

    def loaded(self, run_info):
        self._write('  Loaded {:,} gene regions, {:,} alignment files in {:,} query group(s)'.format(
            run_info['regions'], run_info['alignment_files'], run_info['query_groups']))
        self._write('    {:,} clusters with genes in indexed genomes'.format(run_info['clusters_in_genomes']))

    def group_done(self, label, nfiles, nclusters, nreads):
        self._write(f'  {label}: {nfiles} file(s) -> {nclusters:,} clusters, {nreads:,} reads')

    def message(self, text):
        """Shown with --verbose or --debug only."""
        self._write(f'    {text}', level=self.VERBOSE)

    def outputs(self, outdirs, listing=None):
        """Output directory of each group; with --verbose, the files in it."""
        self._write()
        self._write('  Output')
        for outdir in outdirs:
            self._write(f'    {outdir}')
            for relpath in (listing(outdir) if listing else []):
                self._write(f'      {relpath}', level=self.VERBOSE)

    def timing_table(self, stopwatch):
        if not stopwatch.timings:
            return
        total = stopwatch.total
        self._write()
        self._write('  Timing')
        for name, elapsed in stopwatch.timings:
            self._write(f'    {name:<22}{elapsed:>7.1f}s{elapsed / total:>7.0%}')
        self._write('    ' + '-' * 36)
        self._write(f'    {"Total":<22}{total:>7.1f}s')
        self._write()

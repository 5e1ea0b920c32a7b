# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Bounded pool running one RegionExtractor job per alignment file.

Workers share no memory. Each pickles its PartialResult to its own file in
a staging directory; the pool returns once every worker has finished.
"""

import functools
import logging as lg
import os
from multiprocessing import Pool

from ..utils.helpers import sanitize_stem


def stage_path(stage_dir, jobnum, alignment_path):
    """Private staging file for one job, ordered by job number."""
    return os.path.join(stage_dir, f'{jobnum:04d}_{sanitize_stem(alignment_path)}.pkl')


def run_job(extractor, stage_dir, job):
    """Extract one alignment file and stage the result.

    Args:
        extractor: RegionExtractor.
        stage_dir: Directory for staged partial results.
        job: (jobnum, alignment_path, genome_id) tuple.

    Returns:
        Path of the staged partial result, or None if the file was skipped.
    """
    jobnum, path, genome_id = job
    try:
        partial = extractor.extract(path, genome_id)
        if partial is None:
            return None
        outfile = stage_path(stage_dir, jobnum, path)
        partial.save(outfile)
    except Exception as exc:
        lg.warning(f'Worker for {path} failed, no reads taken from it: {exc}', exc_info=True)
        return None
    return outfile


class WorkerPool:
    """Runs extraction jobs with at most ``ncpu`` processes at once.

    ``ncpu`` of 0 or 1 runs the jobs one at a time in this process.
    """

    def __init__(self, extractor, ncpu=1):
        self.extractor = extractor
        self.ncpu = ncpu or 1

    def run(self, jobs, stage_dir):
        """Run all (alignment_path, genome_id) jobs and wait for them.

        Returns:
            Staged partial-result paths, in job order, without skipped jobs.
        """
        _jobs = [(i, path, genome_id) for i, (path, genome_id) in enumerate(jobs)]
        _func = functools.partial(run_job, self.extractor, stage_dir)
        if self.ncpu > 1 and len(_jobs) > 1:
            lg.info(f'Processing {len(_jobs)} alignment files with {self.ncpu} workers')
            with Pool(processes=min(self.ncpu, len(_jobs))) as pool:
                result = pool.map_async(_func, _jobs)
                staged = result.get()
        else:
            staged = [_func(job) for job in _jobs]

        staged = [s for s in staged if s is not None]
        lg.info(f'{len(staged)} of {len(_jobs)} alignment files produced results')
        return staged

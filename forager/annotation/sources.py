# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Index of alignment files, grouped by the reads they were built from.

Each row of the index file is::

    alignment_path <TAB> reference_fasta <TAB> genome_id [<TAB> query_group]

Text after ``#`` is ignored. Rows without a query group belong to the
single unnamed group.
"""

import logging as lg
import os
from collections import OrderedDict
from dataclasses import dataclass

SINGLE_QUERY = '__SINGLE_QUERY__'


@dataclass(frozen=True)
class SourceEntry:
    query_group: str
    alignment_path: str
    genome_id: str


class SourceIndex:
    """query group -> alignment path -> genome id, plus a reference per group."""

    def __init__(self, warnings=True):
        self.groups = OrderedDict()
        self.reference_fasta = {}
        self._warnlev = lg.WARNING if warnings else lg.DEBUG

    def __len__(self):
        return sum(len(files) for files in self.groups.values())

    def __iter__(self):
        return iter(self.groups)

    def entries(self, query_group):
        return [SourceEntry(query_group, path, genome_id) for path, genome_id in self.groups[query_group].items()]

    def genomes(self):
        """Referenced genome ids, in index order, without duplicates."""
        ret = OrderedDict()
        for files in self.groups.values():
            for genome_id in files.values():
                ret[genome_id] = None
        return list(ret)

    @staticmethod
    def is_named(query_group):
        return query_group != SINGLE_QUERY

    @classmethod
    def load(cls, index_file, warnings=True):
        """Parse the index file.

        Raises:
            OSError: the index file cannot be read.
            ValueError: no row references an existing alignment file.
        """
        obj = cls(warnings=warnings)
        with open(index_file) as fh:
            for rownum, line in enumerate(fh, start=1):
                line = line.split('#', 1)[0].rstrip('\r\n')
                if not line.strip():
                    continue
                obj._add_row(rownum, line.split('\t'))

        if len(obj) == 0:
            raise ValueError(f'No usable alignment files listed in {index_file}')
        lg.info(f'Loaded {len(obj)} alignment files in {len(obj.groups)} query groups')
        return obj

    def _add_row(self, rownum, fields):
        fields = [f.strip() for f in fields]
        if len(fields) < 3 or not all(fields[:3]):
            lg.log(self._warnlev, f'Skipping index row {rownum}: expected at least 3 columns')
            return
        path = os.path.abspath(fields[0])
        if not os.path.exists(path):
            lg.log(self._warnlev, f'Skipping index row {rownum}: {path} does not exist')
            return

        query_group = fields[3] if len(fields) > 3 and fields[3] else SINGLE_QUERY
        files = self.groups.setdefault(query_group, OrderedDict())
        if path in files:
            lg.log(self._warnlev, f'Skipping index row {rownum}: {path} already listed for this query')
            return
        files[path] = fields[2]

        fasta = self.reference_fasta.setdefault(query_group, fields[1])
        if fasta != fields[1]:
            lg.debug(f'Index row {rownum}: keeping reference {fasta} for query group {query_group}')

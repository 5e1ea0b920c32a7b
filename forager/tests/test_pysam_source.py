# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Tests for the pysam-backed AlignmentSource on a small generated BAM."""

import io
import os

import numpy as np
import pysam
import pytest

from forager.alignment import get_alignment_source
from forager.alignment.pysam_source import PysamAlignmentSource, pair_bundle
from forager.annotation import RegionIndex
from forager.core.extractor import RegionExtractor

SEQ1 = 'ACGTACGTACGTACGTACGT'
SEQ2 = 'AACCGGTTAACCGGTTAACC'
SEQ3 = 'GATTACAGATTACAGATTAC'


def _revcomp(s):
    return s[::-1].translate(str.maketrans('ACGT', 'TGCA'))


def _write_bam(path, sort_order='coordinate', rows=None):
    header = pysam.AlignmentHeader.from_dict({
        'HD': {'VN': '1.6', 'SO': sort_order},
        'SQ': [{'SN': 'contig1', 'LN': 1000}],
    })
    # (name, flag, start, mate_start, tlen, sequence[, cigar]); positions 0-based
    rows = rows or [
        ('P1', 99, 100, 150, 70, SEQ1),
        ('P1', 147, 150, 100, -70, SEQ2),
        ('S1', 0, 300, -1, 0, SEQ3),
    ]
    with pysam.AlignmentFile(path, 'wb', header=header) as outf:
        for name, flag, start, mate_start, tlen, seq, *cigar in rows:
            a = pysam.AlignedSegment(header)
            a.query_name = name
            if seq:
                a.query_sequence = seq
            a.flag = flag
            a.reference_id = 0
            a.reference_start = start
            a.mapping_quality = 60
            a.cigartuples = cigar[0] if cigar else ((0, len(seq)),)
            a.next_reference_id = 0 if mate_start >= 0 else -1
            a.next_reference_start = mate_start
            a.template_length = tlen
            if seq:
                a.query_qualities = pysam.qualitystring_to_array('I' * len(seq))
            outf.write(a)
    return path


@pytest.fixture
def bamfile(tmp_path):
    path = _write_bam(str(tmp_path / 'g1.bam'))
    pysam.index(path)
    return path


@pytest.fixture
def source():
    return PysamAlignmentSource()


class TestFetchAlignments:
    def test_mates_linked(self, source, bamfile):
        handle = source.open(bamfile)
        try:
            records = source.fetch_alignments(handle, 'contig1', 1, 400)
        finally:
            source.close(handle)
        assert [r.name for r in records] == ['P1', 'S1']
        pair, unpaired = records
        assert [s.mate for s in pair.segments] == [0, 1]
        assert pair.segments[0].sequence == SEQ1
        # Reverse-strand mate is reported in read orientation
        assert pair.segments[1].sequence == _revcomp(SEQ2)
        assert [(s.mate, s.sequence) for s in unpaired.segments] == [(0, SEQ3)]

    def test_mate_outside_window(self, source, bamfile):
        handle = source.open(bamfile)
        try:
            records = source.fetch_alignments(handle, 'contig1', 101, 120)
        finally:
            source.close(handle)
        assert len(records) == 1
        assert [s.mate for s in records[0].segments] == [0]

    def test_unknown_contig(self, source, bamfile):
        handle = source.open(bamfile)
        try:
            with pytest.raises(ValueError):
                source.fetch_alignments(handle, 'contig9', 1, 100)
        finally:
            source.close(handle)

    def test_pair_bundle_skips_unmapped(self, bamfile):
        with pysam.AlignmentFile(bamfile) as sf:
            alns = list(sf.fetch('contig1'))
        alns[2].is_unmapped = True
        assert [r.name for r in pair_bundle(alns)] == ['P1']


def test_fetch_coverage(source, bamfile):
    handle = source.open(bamfile)
    try:
        depths = source.fetch_coverage(handle, 'contig1', 101, 170)
    finally:
        source.close(handle)
    assert len(depths) == 70
    assert list(depths[:20]) == [1] * 20
    assert not np.any(depths[20:50])
    assert list(depths[50:]) == [1] * 20


class TestOpen:
    def test_index_created_for_sorted_file(self, source, tmp_path):
        path = _write_bam(str(tmp_path / 'noindex.bam'))
        handle = source.open(path)
        source.close(handle)
        assert os.path.exists(path + '.bai')

    def test_unsorted_without_index(self, source, tmp_path):
        path = _write_bam(str(tmp_path / 'unsorted.bam'), sort_order='unsorted')
        with pytest.raises(ValueError):
            source.open(path)

    def test_missing_file(self, source, tmp_path):
        with pytest.raises(OSError):
            source.open(str(tmp_path / 'missing.bam'))


def test_get_alignment_source():
    assert isinstance(get_alignment_source('pysam'), PysamAlignmentSource)
    with pytest.raises(NotImplementedError):
        get_alignment_source('htseq')


class TestMultiMappedReads:
    # Secondary copy without SEQ and hard-clipped supplementary copy of R1,
    # both sorting before the primary pair
    ROWS = [
        ('R1', 353, 50, 150, 0, None, ((0, 20),)),
        ('R1', 2113, 60, 150, 0, 'ACGTACGT', ((5, 12), (0, 8))),
        ('R1', 99, 100, 150, 70, SEQ1),
        ('R1', 147, 150, 100, -70, SEQ2),
    ]

    @pytest.fixture
    def multibam(self, tmp_path):
        path = _write_bam(str(tmp_path / 'multi.bam'), rows=self.ROWS)
        pysam.index(path)
        return path

    def test_primary_pair_first(self, source, multibam):
        handle = source.open(multibam)
        try:
            records = source.fetch_alignments(handle, 'contig1', 60, 200)
        finally:
            source.close(handle)
        assert len(records) == 3
        assert [(s.mate, s.sequence) for s in records[0].segments] == [(0, SEQ1), (1, _revcomp(SEQ2))]
        assert all(s.sequence for r in records for s in r.segments)

    def test_full_sequence_stored(self, multibam):
        regions = RegionIndex.load(io.StringIO('g1\tcontig1\t60\t200\t+\t7\n'), 'minimal')
        partial = RegionExtractor(PysamAlignmentSource(), regions, extend=0).extract(multibam, 'g1')
        assert partial.reads[7]['R1'][0] == {('g1', 'contig1'): SEQ1}
        assert partial.reads[7]['R1'][1] == {('g1', 'contig1'): _revcomp(SEQ2)}
        assert partial.summary[7]['g1'].count == 3


def test_coverage_window_past_contig_end(source, bamfile):
    handle = source.open(bamfile)
    try:
        depths = source.fetch_coverage(handle, 'contig1', 951, 1100)
    finally:
        source.close(handle)
    assert len(depths) == 50

# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

"""Tests for the CLI helpers: YAML options, console output and timings."""

import argparse
import io

import pytest

from forager.cli import collect_output_files, nonneg_int, parse_opts_yaml
from forager.cli.console import Console, Stopwatch
from forager.cli.extract import ExtractOptions


def test_parse_opts_yaml_groups():
    groups = parse_opts_yaml(ExtractOptions.OPTS)
    assert list(groups) == ['Input Options', 'Extraction Options', 'Output Options', 'Reporting Options']
    assert list(groups['Extraction Options']) == ['extend', 'ncpu', 'tempdir']
    assert groups['Input Options']['index']['positional'] is True


def test_nonneg_int():
    assert nonneg_int('0') == 0
    assert nonneg_int('150') == 150
    with pytest.raises(argparse.ArgumentTypeError):
        nonneg_int('-1')


def test_collect_output_files(tmp_path):
    (tmp_path / 'sub').mkdir()
    for name in ('sub/x.fasta', 'clust2_A.fna', 'mapped_summary.txt'):
        (tmp_path / name).write_text('')
    assert collect_output_files(str(tmp_path)) == ['clust2_A.fna', 'mapped_summary.txt', 'sub/x.fasta']


class TestConsole:
    def test_quiet_prints_nothing(self):
        out = io.StringIO()
        console = Console(level=Console.QUIET, stream=out)
        console.banner('1.0')
        console.group_done('reads', 2, 10, 300)
        console.outputs(['/tmp/out'])
        assert out.getvalue() == ''

    def test_verbose_only_messages(self):
        out = io.StringIO()
        Console(level=Console.NORMAL, stream=out).message('hidden')
        assert out.getvalue() == ''
        Console(level=Console.VERBOSE, stream=out).message('shown')
        assert 'shown' in out.getvalue()

    def test_group_line(self):
        out = io.StringIO()
        Console(stream=out).group_done('draftA', 3, 1200, 45000)
        assert out.getvalue().strip() == 'draftA: 3 file(s) -> 1,200 clusters, 45,000 reads'

    def test_outputs_listing_at_verbose(self):
        out = io.StringIO()
        Console(level=Console.VERBOSE, stream=out).outputs(['/o'], listing=lambda d: ['mapped_summary.txt'])
        assert '/o' in out.getvalue()
        assert 'mapped_summary.txt' in out.getvalue()


def test_stopwatch_stages():
    sw = Stopwatch()
    with sw.stage('Load indexes'):
        pass
    with pytest.raises(RuntimeError):
        with sw.stage('Extract reads'):
            raise RuntimeError('boom')
    assert [name for name, _ in sw.timings] == ['Load indexes', 'Extract reads']
    assert sw.total >= sum(t for _, t in sw.timings)

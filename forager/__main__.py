#! /usr/bin/env python
# -*- coding: utf-8 -*-

# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

""" Main functionality of FORAGer

"""
import sys
import argparse

from forager import __version__
from .cli import extract as cli_extract


USAGE = ''' %(prog)s <command> [<args>]

The most commonly used commands are:
   extract        Pull out reads mapped to each gene cluster region

'''


def build_parser():
    parser = argparse.ArgumentParser(
        prog='forager',
        description='Finding Orthologous Reads and Genes',
    )
    parser.add_argument('--version',
        action='version',
        version=__version__,
        default=__version__,
    )
    subparser = parser.add_subparsers(help='Sub-command help', dest='subcommand')

    ''' Parser for extract '''
    extract_parser = subparser.add_parser('extract',
        description='''Pull out all reads mapping to each gene (and the region
                       around it) in each gene cluster, with a coverage
                       summary per cluster and genome''',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    cli_extract.ExtractOptions.add_arguments(extract_parser)
    extract_parser.set_defaults(func=cli_extract.run)
    return parser


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        empty_parser = argparse.ArgumentParser(
            prog='forager',
            description='Finding Orthologous Reads and Genes',
            usage=USAGE,
        )
        empty_parser.print_help(sys.stderr)
        sys.exit(1)

    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, 'func'):
        parser.print_help(sys.stderr)
        sys.exit(1)
    args.func(args)


if __name__ == '__main__':
    main()

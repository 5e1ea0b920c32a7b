# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

import argparse
import logging
import os
from collections import OrderedDict

import yaml

from .console import Console


def nonneg_int(value):
    ivalue = int(value)
    if ivalue < 0:
        raise argparse.ArgumentTypeError(f'{value} is not a non-negative integer')
    return ivalue


# Type names allowed in YAML-defined CLI options
_SAFE_TYPES = {
    'int': int,
    'nonneg_int': nonneg_int,
    'str': str,
    "argparse.FileType('w')": argparse.FileType('w'),
}


def parse_opts_yaml(opts_yaml):
    """Option groups declared in YAML.

    Returns:
        OrderedDict {group title: OrderedDict {option name: add_argument kwargs}}
    """
    groups = OrderedDict()
    for grp in yaml.load(opts_yaml, Loader=yaml.SafeLoader):
        (title, args), = grp.items()
        groups[title] = OrderedDict(next(iter(a.items())) for a in args)
    return groups


def _argument(name, spec):
    kwargs = dict(spec or {})
    if kwargs.pop('positional', False):
        flags = [name]
    else:
        flags = ['-' + name if len(name) == 1 else '--' + name]
    if 'type' in kwargs:
        if kwargs['type'] not in _SAFE_TYPES:
            raise ValueError(f'Unsupported type "{kwargs["type"]}" for option "{name}"')
        kwargs['type'] = _SAFE_TYPES[kwargs['type']]
    return flags, kwargs


class SubcommandOptions:
    """Options for a subcommand, declared as YAML in ``OPTS``.

    Each top-level item is an argument group; each argument maps to the
    keyword arguments of ``ArgumentParser.add_argument``.
    """

    OPTS = "[]"

    def __init__(self, args):
        self.opt_groups = parse_opts_yaml(self.OPTS)
        for k, v in vars(args).items():
            setattr(self, k, v)

    @classmethod
    def add_arguments(cls, parser):
        for title, args in parse_opts_yaml(cls.OPTS).items():
            grp = parser.add_argument_group(title, '')
            for name, spec in args.items():
                flags, kwargs = _argument(name, spec)
                grp.add_argument(*flags, **kwargs)

    def __str__(self):
        ret = []
        if hasattr(self, 'version'):
            ret.append('{:34}{}'.format('Version:', self.version))
        for title, args in self.opt_groups.items():
            ret.append(title)
            for name in args:
                v = getattr(self, name, 'Not set')
                ret.append('    {:30}{}'.format(name + ':', getattr(v, 'name', v)))
        return '\n'.join(ret)


_LOG_FORMATS = {
    logging.DEBUG: '%(asctime)s %(levelname)-8s %(message)-60s (%(funcName)s in %(filename)s:%(lineno)d)',
    logging.INFO: '%(asctime)s %(levelname)-8s %(message)s',
    logging.WARNING: '%(asctime)s %(levelname)-8s %(message)s',
}


def configure_logging(opts):
    """Configure logging and create a Console for stdout progress.

    Args:
        opts: SubcommandOptions object. Attributes used are "quiet",
              "verbose", "debug", and "logfile".
    Returns:
        Console instance.
    """
    if getattr(opts, 'debug', False):
        loglev, console_level = logging.DEBUG, Console.DEBUG
    elif getattr(opts, 'verbose', False):
        loglev, console_level = logging.INFO, Console.VERBOSE
    else:
        loglev, console_level = logging.WARNING, Console.NORMAL
    if getattr(opts, 'quiet', False):
        console_level = Console.QUIET

    logging.basicConfig(
        level=loglev,
        format=_LOG_FORMATS[loglev],
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=getattr(opts, 'logfile', None),
    )
    return Console(level=console_level)


def collect_output_files(outdir):
    """Files under outdir, relative to it, top-level files first."""
    found = [
        os.path.relpath(os.path.join(root, f), outdir)
        for root, _dirs, files in os.walk(outdir)
        for f in files
    ]
    return sorted(found, key=lambda p: (os.sep in p, p))

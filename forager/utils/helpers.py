# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

import os
import re

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]')


def format_minutes(seconds):
    mins = seconds // 60
    secs = seconds - (mins * 60)
    return '%d minutes and %d secs' % (mins, secs)


def sanitize_stem(path):
    """File name of ``path`` without its last extension, safe for staging.

    >>> sanitize_stem('/data/run 1/sample.A.bam')
    'sample.A'
    """
    stem = os.path.splitext(os.path.basename(path))[0]
    stem = _UNSAFE_CHARS.sub('_', stem)
    return stem or 'alignment'


def str2int(v):
    try:
        return int(v)
    except ValueError:
        return None

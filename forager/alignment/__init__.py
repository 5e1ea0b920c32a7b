# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.


def get_alignment_source(name='pysam', **kwargs):
    """Get an AlignmentSource instance by name.

    Only "pysam" (indexed BAM/CRAM) is currently available.
    """
    if name == 'pysam':
        from .pysam_source import PysamAlignmentSource

        return PysamAlignmentSource(**kwargs)
    raise NotImplementedError(f'Unknown alignment source "{name}". Only "pysam" is supported.')

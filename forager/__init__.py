# -*- coding: utf-8 -*-

# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

__version__ = '0.3.0'

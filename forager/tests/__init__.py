# This file is part of FORAGer (Finding Orthologous Reads and Genes).
#
# Licensed under MIT License.

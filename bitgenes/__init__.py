"""bitgenes - genetic optimization over packed bit-string genomes."""

__version__ = "0.1.0"
